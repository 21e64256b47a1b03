"""REST API route handlers for session lifecycle and commands."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request, Response

from snake_core.server.models import (
    CommandRequest,
    CommandResponse,
    CreateSessionRequest,
    SessionSummary,
)
from snake_core.server.session_manager import RateLimitError, SessionManager

router = APIRouter(prefix="/sessions", tags=["sessions"])


def _get_manager(request: Request) -> SessionManager:
    return request.app.state.session_manager


@router.post("", status_code=201)
async def create_session(
    body: CreateSessionRequest, request: Request,
) -> SessionSummary:
    """Create a new play session."""
    manager = _get_manager(request)
    client_ip = request.client.host if request.client else "unknown"
    try:
        session = manager.create_session(
            body.to_config(),
            seed=body.seed,
            frame_rate=body.frame_rate,
            client_ip=client_ip,
        )
    except RateLimitError as exc:
        raise HTTPException(status_code=429, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return session.summary()


@router.get("")
async def list_sessions(request: Request) -> list[SessionSummary]:
    """List hosted sessions."""
    return _get_manager(request).list_sessions()


@router.get("/{session_id}")
async def get_session(session_id: str, request: Request) -> dict:
    """Get the full state of a session."""
    session = _get_manager(request).get_session(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found.")
    async with session.lock:
        state = session.engine.get_state()
    return {"session_id": session_id, "state": state}


@router.post("/{session_id}/commands")
async def send_command(
    session_id: str, body: CommandRequest, request: Request,
) -> CommandResponse:
    """Submit a command. Commands illegal in the current state are ignored."""
    manager = _get_manager(request)
    try:
        accepted = await manager.apply_command(
            session_id, body.command, body.direction, body.config,
        )
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Session not found.") from exc
    session = manager.get_session(session_id)
    state = session.engine.state.value if session is not None else "closed"
    return CommandResponse(accepted=accepted, state=state)


@router.delete("/{session_id}", status_code=204)
async def delete_session(session_id: str, request: Request) -> Response:
    """Stop and forget a session."""
    try:
        await _get_manager(request).close_session(session_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Session not found.") from exc
    return Response(status_code=204)

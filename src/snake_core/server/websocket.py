"""WebSocket handler for real-time play."""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from snake_core.server.models import CommandRequest
from snake_core.server.session_manager import SessionManager

logger = logging.getLogger(__name__)

ws_router = APIRouter()


def _get_manager(ws: WebSocket) -> SessionManager:
    return ws.app.state.session_manager


def _parse_message(raw: str) -> CommandRequest | None:
    """Decode a client message; a bare ``{"direction": ...}`` is a turn."""
    try:
        msg = json.loads(raw)
    except json.JSONDecodeError:
        return None
    if not isinstance(msg, dict):
        return None
    if "command" not in msg and isinstance(msg.get("direction"), str):
        msg = {"command": "direction", "direction": msg["direction"].lower()}
    try:
        return CommandRequest.model_validate(msg)
    except ValidationError:
        return None


@ws_router.websocket("/sessions/{session_id}/play")
async def play(websocket: WebSocket, session_id: str) -> None:
    """Player WebSocket: send commands, receive a frame whenever it changes."""
    manager = _get_manager(websocket)
    session = manager.get_session(session_id)
    if session is None:
        await websocket.close(code=4004, reason="Session not found.")
        return

    await websocket.accept()
    session.sockets.append(websocket)
    logger.info("Client connected to session %s.", session_id)

    # Send an initial frame so the client can draw immediately.
    async with session.lock:
        payload = manager.initial_payload(session)
    await websocket.send_text(payload)

    try:
        while True:
            request = _parse_message(await websocket.receive_text())
            if request is None:
                continue
            try:
                await manager.apply_command(
                    session_id, request.command, request.direction, request.config,
                )
            except KeyError:
                break
    except WebSocketDisconnect:
        logger.info("Client disconnected from session %s.", session_id)
    finally:
        if websocket in session.sockets:
            session.sockets.remove(websocket)

"""In-memory session registry, command dispatch and async frame loops."""

from __future__ import annotations

import asyncio
import json
import logging
import time
import uuid
from dataclasses import dataclass, field

from starlette.websockets import WebSocket, WebSocketState

from snake_core.config import GameConfig
from snake_core.engine import GameEngine
from snake_core.events import InMemoryHighScoreStore, RecordingListener
from snake_core.loop import GameLoop
from snake_core.server.models import Command, ConfigRequest, SessionSummary
from snake_core.session import SessionState
from snake_core.snake import Direction

logger = logging.getLogger(__name__)

# Simple rate limit: max sessions created per IP within the window.
_RATE_LIMIT_WINDOW = 60.0  # seconds
_RATE_LIMIT_MAX = 10
_RATE_COMPACT_INTERVAL = 60.0  # seconds between stale-key sweeps
_MAX_FINISHED_SESSIONS = 100


class RateLimitError(Exception):
    """Raised when a client creates sessions too quickly."""


def _monotonic_ms() -> float:
    return time.monotonic() * 1000.0


@dataclass
class GameSession:
    """All state for a single hosted play session."""

    session_id: str
    engine: GameEngine
    loop: GameLoop
    recorder: RecordingListener
    frame_rate: int = 60
    sockets: list[WebSocket] = field(default_factory=list)
    created_at: float = field(default_factory=time.monotonic)
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    _last_key: tuple | None = field(default=None, repr=False)
    _task: asyncio.Task | None = field(default=None, repr=False)

    def summary(self) -> SessionSummary:
        snap = self.engine.snapshot()
        return SessionSummary(
            session_id=self.session_id,
            state=snap.state.value,
            score=snap.score,
            high_score=snap.high_score,
            level=snap.level,
            grid_size=snap.grid_size,
        )


def dispatch_command(
    engine: GameEngine,
    command: Command,
    direction: str | None = None,
    config: GameConfig | None = None,
) -> bool:
    """Apply one abstract command to *engine*; illegal ones return False."""
    if command == Command.DIRECTION:
        if direction is None:
            return False
        try:
            return engine.request_direction(Direction.from_name(direction))
        except ValueError:
            return False
    if command == Command.START:
        return engine.start()
    if command == Command.PAUSE:
        return engine.toggle_pause()
    if command == Command.MENU:
        return engine.open_overlay()
    if command == Command.CONFIRM:
        return engine.confirm_overlay(config)
    if command == Command.REQUEST_RESTART:
        return engine.request_restart()
    if command == Command.RESTART:
        return engine.restart()
    return False


def _encode_frame(session: GameSession, events: list[dict]) -> str:
    return json.dumps(
        {"type": "frame", "state": session.engine.get_state(), "events": events},
        separators=(",", ":"),
    )


class SessionManager:
    """Central registry managing all hosted sessions.

    High scores are shared by every session of the manager.
    """

    def __init__(
        self, max_finished_sessions: int = _MAX_FINISHED_SESSIONS,
    ) -> None:
        if max_finished_sessions < 0:
            raise ValueError("max_finished_sessions must be >= 0.")
        self._sessions: dict[str, GameSession] = {}
        self._rate_limits: dict[str, list[float]] = {}
        self._last_rate_compact: float = 0.0
        self._max_finished_sessions = max_finished_sessions
        self.high_scores = InMemoryHighScoreStore()

    def _check_rate_limit(self, client_ip: str) -> bool:
        """Return True if the client is within rate limits."""
        now = time.monotonic()
        timestamps = self._rate_limits.get(client_ip, [])
        timestamps = [t for t in timestamps if now - t < _RATE_LIMIT_WINDOW]
        if timestamps:
            self._rate_limits[client_ip] = timestamps
        else:
            self._rate_limits.pop(client_ip, None)
        self._compact_rate_limits(now)
        return len(timestamps) < _RATE_LIMIT_MAX

    def _compact_rate_limits(self, now: float) -> None:
        """Remove rate-limit entries whose timestamps have all expired."""
        if now - self._last_rate_compact < _RATE_COMPACT_INTERVAL:
            return
        self._last_rate_compact = now
        stale_ips = [
            ip for ip, ts in self._rate_limits.items()
            if all(now - t >= _RATE_LIMIT_WINDOW for t in ts)
        ]
        for ip in stale_ips:
            del self._rate_limits[ip]
        if stale_ips:
            logger.info(
                "Compacted %d stale rate-limit entries.", len(stale_ips),
            )

    def _record_creation(self, client_ip: str) -> None:
        self._rate_limits.setdefault(client_ip, []).append(time.monotonic())

    def create_session(
        self,
        config: GameConfig,
        *,
        seed: int | None = None,
        frame_rate: int = 60,
        client_ip: str = "unknown",
    ) -> GameSession:
        """Create a session and start its frame loop.

        Must be called from a running event loop.
        """
        if not self._check_rate_limit(client_ip):
            raise RateLimitError("Rate limit exceeded. Try again later.")
        if frame_rate < 1:
            raise ValueError("frame_rate must be at least 1.")

        recorder = RecordingListener()
        engine = GameEngine(
            config,
            high_scores=self.high_scores,
            seed=seed,
            clock=_monotonic_ms,
            listeners=[recorder],
        )
        session = GameSession(
            session_id=uuid.uuid4().hex[:12],
            engine=engine,
            loop=GameLoop(engine),
            recorder=recorder,
            frame_rate=frame_rate,
        )
        self._sessions[session.session_id] = session
        self._record_creation(client_ip)
        session._task = asyncio.create_task(self._frame_loop(session))
        logger.info(
            "Session %s created (grid=%d, speed=%s).",
            session.session_id,
            config.grid_size,
            config.initial_speed_preset.value,
        )
        self._prune_finished_sessions()
        return session

    def get_session(self, session_id: str) -> GameSession | None:
        return self._sessions.get(session_id)

    def list_sessions(self) -> list[SessionSummary]:
        return [s.summary() for s in self._sessions.values()]

    async def apply_command(
        self,
        session_id: str,
        command: Command,
        direction: str | None = None,
        preferences: ConfigRequest | None = None,
    ) -> bool:
        """Run a command against a session under its lock."""
        session = self._sessions.get(session_id)
        if session is None:
            raise KeyError(f"Session {session_id} not found.")
        async with session.lock:
            config = None
            if preferences is not None:
                # Preferences only cover the overlay; keep the session's tuning.
                config = preferences.to_config(session.engine.config)
            return dispatch_command(session.engine, command, direction, config)

    async def close_session(self, session_id: str) -> None:
        """Stop a session's frame loop, close its sockets and forget it."""
        session = self._sessions.pop(session_id, None)
        if session is None:
            raise KeyError(f"Session {session_id} not found.")
        await self._stop(session)
        logger.info("Session %s closed.", session_id)

    async def _stop(self, session: GameSession) -> None:
        task = session._task
        if task is not None and not task.done():
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)
        await self._close_connections(session)

    async def _frame_loop(self, session: GameSession) -> None:
        """Drive the game loop at the frame rate, streaming changes."""
        frame_interval = 1.0 / session.frame_rate
        try:
            while True:
                await asyncio.sleep(frame_interval)
                async with session.lock:
                    session.loop.frame(_monotonic_ms())
                    payload = self.frame_payload(session)
                if payload is not None:
                    await self._broadcast(session, payload)
        except asyncio.CancelledError:
            logger.info("Frame loop cancelled for session %s.", session.session_id)
        except Exception:
            logger.exception("Frame loop error in session %s.", session.session_id)

    def frame_payload(self, session: GameSession) -> str | None:
        """Serialized frame message for all sockets, or None when nothing changed.

        Drains the session's queued events.
        """
        events = session.recorder.drain()
        snap = session.engine.snapshot()
        key = (snap.tick, snap.state, snap.score, snap.food, snap.level)
        if not events and key == session._last_key:
            return None
        session._last_key = key
        return _encode_frame(session, events)

    def initial_payload(self, session: GameSession) -> str:
        """Current frame for a newly connected socket.

        Queued events stay in place for the next broadcast.
        """
        return _encode_frame(session, [])

    async def _broadcast(self, session: GameSession, payload: str) -> None:
        """Send a frame to all connected clients, dropping dead sockets."""
        dead: list[WebSocket] = []
        for ws in list(session.sockets):
            try:
                if ws.client_state == WebSocketState.CONNECTED:
                    await ws.send_text(payload)
            except Exception:
                dead.append(ws)
        for ws in dead:
            if ws in session.sockets:
                session.sockets.remove(ws)

    async def _close_connections(self, session: GameSession) -> None:
        for ws in list(session.sockets):
            try:
                if ws.client_state == WebSocketState.CONNECTED:
                    await ws.close(code=1000, reason="Session closed.")
            except Exception:
                logger.warning(
                    "Failed closing socket in session %s.", session.session_id,
                )
        session.sockets.clear()

    def _prune_finished_sessions(self) -> None:
        """Bound retained game-over sessions to avoid unbounded growth."""
        finished = [
            s for s in self._sessions.values()
            if s.engine.state == SessionState.GAME_OVER and not s.sockets
        ]
        overflow = len(finished) - self._max_finished_sessions
        if overflow <= 0:
            return
        finished.sort(key=lambda s: s.created_at)
        for stale in finished[:overflow]:
            self._sessions.pop(stale.session_id, None)
            if stale._task is not None and not stale._task.done():
                stale._task.cancel()
        logger.info(
            "Pruned %d finished sessions (retaining up to %d).",
            overflow,
            self._max_finished_sessions,
        )

    async def cleanup(self) -> None:
        """Cancel all running frame loops and release rate-limit state."""
        for session in list(self._sessions.values()):
            await self._stop(session)
        self._sessions.clear()
        self._rate_limits.clear()
        logger.info("SessionManager cleanup complete.")

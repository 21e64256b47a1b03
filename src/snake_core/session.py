"""Session state machine governing start, pause, overlay and game over."""

from __future__ import annotations

import enum
import logging

logger = logging.getLogger(__name__)


class SessionState(str, enum.Enum):
    """Lifecycle states of a play session."""

    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    GAME_OVER = "game_over"
    OVERLAY = "overlay"


class SessionStateMachine:
    """Pure control logic for session transitions.

    Every command returns ``True`` when the transition was taken and
    ``False`` when it is illegal in the current state; illegal commands
    leave the machine untouched. Resetting the world is the caller's job,
    signalled by :attr:`needs_reset` after ``start``/``confirm_overlay``.
    """

    def __init__(self, initial: SessionState = SessionState.OVERLAY) -> None:
        if initial not in (SessionState.OVERLAY, SessionState.IDLE):
            raise ValueError("A session starts in the overlay or idle.")
        self.state = initial
        self.resume_after_overlay = False
        self._pre_overlay: SessionState | None = None
        self.needs_reset = False

    @property
    def can_steer(self) -> bool:
        return self.state == SessionState.RUNNING

    @property
    def is_ticking(self) -> bool:
        return self.state == SessionState.RUNNING

    @property
    def overlay_open(self) -> bool:
        return self.state == SessionState.OVERLAY

    def start(self) -> bool:
        if self.state not in (SessionState.IDLE, SessionState.GAME_OVER):
            return self._ignore("start")
        self.needs_reset = self.state == SessionState.GAME_OVER
        self.state = SessionState.RUNNING
        return True

    def toggle_pause(self) -> bool:
        if self.state == SessionState.RUNNING:
            self.state = SessionState.PAUSED
        elif self.state == SessionState.PAUSED:
            self.state = SessionState.RUNNING
        else:
            return self._ignore("toggle_pause")
        return True

    def open_overlay(self) -> bool:
        if self.state == SessionState.OVERLAY:
            return self._ignore("open_overlay")
        # Paused is only reachable from Running, so it is a live session too.
        self.resume_after_overlay = self.state in (
            SessionState.RUNNING, SessionState.PAUSED,
        )
        self._pre_overlay = self.state
        self.state = SessionState.OVERLAY
        return True

    def confirm_overlay(self) -> bool:
        """Close the overlay, resuming or starting fresh.

        After a fresh start :attr:`needs_reset` is ``True``.
        """
        if self.state != SessionState.OVERLAY:
            return self._ignore("confirm_overlay")
        if self.resume_after_overlay and self._pre_overlay is not None:
            self.state = self._pre_overlay
            self.needs_reset = False
        else:
            self.state = SessionState.RUNNING
            self.needs_reset = True
        self.resume_after_overlay = False
        self._pre_overlay = None
        return True

    def restart(self) -> bool:
        self.state = SessionState.RUNNING
        self.resume_after_overlay = False
        self._pre_overlay = None
        self.needs_reset = True
        return True

    def game_over(self) -> bool:
        if self.state != SessionState.RUNNING:
            return self._ignore("game_over")
        self.state = SessionState.GAME_OVER
        return True

    def _ignore(self, command: str) -> bool:
        logger.debug("Ignoring %s in state %s.", command, self.state.value)
        return False

    def to_dict(self) -> dict:
        return {
            "state": self.state.value,
            "resume_after_overlay": self.resume_after_overlay,
        }

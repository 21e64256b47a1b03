"""Pydantic models for API request/response schemas."""

from __future__ import annotations

import enum

from pydantic import BaseModel, Field

from snake_core.config import GameConfig


class Command(str, enum.Enum):
    """Abstract input commands a client may submit."""

    START = "start"
    PAUSE = "pause"
    MENU = "menu"
    CONFIRM = "confirm"
    REQUEST_RESTART = "request_restart"
    RESTART = "restart"
    DIRECTION = "direction"


class ConfigRequest(BaseModel):
    """Preferences chosen on the configuration overlay."""

    initial_speed_preset: str = Field(default="normal", pattern="^(slow|normal|fast)$")
    grid_size: int = Field(default=20, ge=4, le=60)
    show_grid: bool = True
    sound_on: bool = True
    show_particles: bool = True

    def to_config(self, base: GameConfig | None = None) -> GameConfig:
        """Merge the preferences the client sent over *base* (or the defaults)."""
        merged = (base or GameConfig()).to_dict()
        merged.update(self.model_dump(exclude_unset=True))
        return GameConfig.from_preferences(merged)


class CreateSessionRequest(ConfigRequest):
    """Request body for POST /sessions."""

    open_overlay_on_start: bool = True
    seed: int | None = None
    frame_rate: int = Field(default=60, ge=1, le=240)


class CommandRequest(BaseModel):
    """Request body for POST /sessions/{session_id}/commands."""

    command: Command
    direction: str | None = Field(default=None, pattern="^(up|down|left|right)$")
    config: ConfigRequest | None = None


class CommandResponse(BaseModel):
    """Outcome of a command and the resulting session state."""

    accepted: bool
    state: str


class SessionSummary(BaseModel):
    """Compact session info for list endpoints."""

    session_id: str
    state: str
    score: int
    high_score: int
    level: int
    grid_size: int

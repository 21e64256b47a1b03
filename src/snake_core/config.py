"""Game configuration and lenient loading of player preferences."""

from __future__ import annotations

import enum
import json
import logging
from collections.abc import Mapping
from dataclasses import asdict, dataclass, field, fields, replace
from pathlib import Path
from typing import Any

from snake_core.speed import SpeedCurve

logger = logging.getLogger(__name__)


class SpeedPreset(str, enum.Enum):
    """Starting speed chosen on the configuration overlay."""

    SLOW = "slow"
    NORMAL = "normal"
    FAST = "fast"


# Base tick interval (ms) per preset.
SPEED_PRESET_INTERVALS: dict[SpeedPreset, float] = {
    SpeedPreset.SLOW: 600.0,
    SpeedPreset.NORMAL: 500.0,
    SpeedPreset.FAST: 350.0,
}

GRID_SIZE_PRESETS: dict[str, int] = {
    "small": 8,
    "medium": 20,
    "large": 30,
}

_DISPLAY_FIELDS = ("show_grid", "sound_on", "show_particles")


@dataclass(frozen=True)
class GameConfig:
    """Everything a session needs to (re)initialize.

    ``show_grid``, ``sound_on`` and ``show_particles`` are carried for the
    presentation layer; the simulation never reads them.
    """

    initial_speed_preset: SpeedPreset = SpeedPreset.NORMAL
    grid_size: int = 20
    show_grid: bool = True
    sound_on: bool = True
    show_particles: bool = True

    start_length: int = 3
    food_reward: int = 10
    direction_cooldown_ms: float = 50.0
    open_overlay_on_start: bool = True
    curve: SpeedCurve = field(default_factory=SpeedCurve)

    def __post_init__(self) -> None:
        if not isinstance(self.initial_speed_preset, SpeedPreset):
            object.__setattr__(
                self, "initial_speed_preset",
                SpeedPreset(self.initial_speed_preset),
            )
        if self.grid_size < 4:
            raise ValueError("grid_size must be at least 4.")
        if self.start_length < 2:
            raise ValueError("start_length must be at least 2.")
        if self.start_length > self.grid_size // 2 + 1:
            raise ValueError(
                "start_length does not fit the grid; increase grid_size or "
                "reduce start_length."
            )
        if self.food_reward < 0:
            raise ValueError("food_reward must be >= 0.")
        if self.direction_cooldown_ms < 0:
            raise ValueError("direction_cooldown_ms must be >= 0.")

    @property
    def base_interval(self) -> float:
        """Starting tick interval in ms for the selected preset."""
        return SPEED_PRESET_INTERVALS[self.initial_speed_preset]

    @property
    def profile(self) -> str:
        """High-score profile key: the grid preset name, if it has one."""
        for name, size in GRID_SIZE_PRESETS.items():
            if size == self.grid_size:
                return name
        return f"{self.grid_size}x{self.grid_size}"

    def with_display(self, other: GameConfig) -> GameConfig:
        """Copy of this config taking only *other*'s display preferences."""
        return replace(
            self, **{name: getattr(other, name) for name in _DISPLAY_FIELDS},
        )

    def to_dict(self) -> dict:
        """Serialize to a plain dict (enums become their values)."""
        d = asdict(self)
        d["initial_speed_preset"] = self.initial_speed_preset.value
        return d

    def save(self, path: str | Path) -> None:
        """Write config to a JSON file."""
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(json.dumps(self.to_dict(), indent=2))
        logger.info("Config saved to %s", p)

    @classmethod
    def load(cls, path: str | Path) -> GameConfig:
        """Load config from a JSON file, tolerating bad values."""
        raw = json.loads(Path(path).read_text())
        if not isinstance(raw, dict):
            logger.warning("Config file %s is not an object; using defaults.", path)
            return cls()
        return cls.from_preferences(raw)

    @classmethod
    def from_preferences(cls, raw: Mapping[str, Any]) -> GameConfig:
        """Build a config from untrusted preference values.

        Unknown keys are ignored. Each recognized key whose value is
        missing or malformed falls back to its default, with a warning.
        """
        defaults = cls()
        values: dict[str, Any] = {}

        preset = raw.get("initial_speed_preset")
        if preset is not None:
            try:
                values["initial_speed_preset"] = SpeedPreset(str(preset).lower())
            except ValueError:
                _fallback("initial_speed_preset", preset)

        if "grid_size" in raw:
            size = _parse_grid_size(raw["grid_size"])
            if size is None:
                _fallback("grid_size", raw["grid_size"])
            else:
                values["grid_size"] = size

        for name in _DISPLAY_FIELDS + ("open_overlay_on_start",):
            if name in raw:
                if isinstance(raw[name], bool):
                    values[name] = raw[name]
                else:
                    _fallback(name, raw[name])

        for name, kind in (
            ("start_length", int),
            ("food_reward", int),
            ("direction_cooldown_ms", float),
        ):
            if name in raw:
                parsed = _parse_number(raw[name], kind)
                if parsed is None:
                    _fallback(name, raw[name])
                else:
                    values[name] = parsed

        if "curve" in raw:
            curve = _parse_curve(raw["curve"])
            if curve is None:
                _fallback("curve", raw["curve"])
            else:
                values["curve"] = curve

        try:
            return replace(defaults, **values)
        except ValueError as exc:
            # Individually valid values can still be inconsistent together.
            logger.warning("Inconsistent preferences (%s); using defaults.", exc)
            return defaults


def _fallback(name: str, value: Any) -> None:
    logger.warning("Ignoring malformed preference %s=%r.", name, value)


def _parse_grid_size(value: Any) -> int | None:
    if isinstance(value, str) and value.lower() in GRID_SIZE_PRESETS:
        return GRID_SIZE_PRESETS[value.lower()]
    size = _parse_number(value, int)
    if size is None or size < 4:
        return None
    return size


def _parse_number(value: Any, kind: type) -> Any:
    if isinstance(value, bool):
        return None
    try:
        parsed = kind(value)
    except (TypeError, ValueError):
        return None
    if parsed < 0:
        return None
    return parsed


def _parse_curve(value: Any) -> SpeedCurve | None:
    if not isinstance(value, Mapping):
        return None
    known = {f.name for f in fields(SpeedCurve)}
    try:
        return SpeedCurve(**{k: v for k, v in value.items() if k in known})
    except (TypeError, ValueError):
        return None

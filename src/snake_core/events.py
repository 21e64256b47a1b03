"""Outbound game events and the high-score collaborator interface."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from snake_core.grid import Cell
    from snake_core.session import SessionState
    from snake_core.snapshot import GameSnapshot

logger = logging.getLogger(__name__)


class GameListener:
    """Receiver for engine events. Every hook is a no-op by default.

    Presentation collaborators subclass this and override the hooks they
    care about (draw particles on ``on_eaten``, play a tone on
    ``on_game_over``...).
    """

    def on_eaten(self, score: int) -> None:
        pass

    def on_new_record(self, score: int) -> None:
        pass

    def on_level_changed(self, level: int) -> None:
        pass

    def on_game_over(
        self, final_score: int, is_record: bool, previous_high: int,
    ) -> None:
        pass

    def on_food_placed(self, cell: Cell) -> None:
        pass

    def on_tick(self, snapshot: GameSnapshot) -> None:
        pass

    def on_state_changed(
        self, previous: SessionState, current: SessionState,
    ) -> None:
        pass

    def on_restart_requested(self) -> None:
        pass


class EventDispatcher(GameListener):
    """Fans every event out to the registered listeners, in order."""

    def __init__(self, listeners: Iterable[GameListener] = ()) -> None:
        self._listeners: list[GameListener] = list(listeners)

    def subscribe(self, listener: GameListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: GameListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def on_eaten(self, score: int) -> None:
        for listener in self._listeners:
            listener.on_eaten(score)

    def on_new_record(self, score: int) -> None:
        for listener in self._listeners:
            listener.on_new_record(score)

    def on_level_changed(self, level: int) -> None:
        for listener in self._listeners:
            listener.on_level_changed(level)

    def on_game_over(
        self, final_score: int, is_record: bool, previous_high: int,
    ) -> None:
        for listener in self._listeners:
            listener.on_game_over(final_score, is_record, previous_high)

    def on_food_placed(self, cell: Cell) -> None:
        for listener in self._listeners:
            listener.on_food_placed(cell)

    def on_tick(self, snapshot: GameSnapshot) -> None:
        for listener in self._listeners:
            listener.on_tick(snapshot)

    def on_state_changed(
        self, previous: SessionState, current: SessionState,
    ) -> None:
        for listener in self._listeners:
            listener.on_state_changed(previous, current)

    def on_restart_requested(self) -> None:
        for listener in self._listeners:
            listener.on_restart_requested()


class RecordingListener(GameListener):
    """Collects events as JSON-friendly dicts.

    ``on_tick`` is not recorded unless *record_ticks* is set; snapshots are
    streamed separately by adapters.
    """

    def __init__(self, record_ticks: bool = False) -> None:
        self.events: list[dict] = []
        self._record_ticks = record_ticks

    def drain(self) -> list[dict]:
        """Return the recorded events and forget them."""
        events, self.events = self.events, []
        return events

    def names(self) -> list[str]:
        return [e["event"] for e in self.events]

    def on_eaten(self, score: int) -> None:
        self.events.append({"event": "eaten", "score": score})

    def on_new_record(self, score: int) -> None:
        self.events.append({"event": "new_record", "score": score})

    def on_level_changed(self, level: int) -> None:
        self.events.append({"event": "level_changed", "level": level})

    def on_game_over(
        self, final_score: int, is_record: bool, previous_high: int,
    ) -> None:
        self.events.append({
            "event": "game_over",
            "final_score": final_score,
            "is_record": is_record,
            "previous_high": previous_high,
        })

    def on_food_placed(self, cell: Cell) -> None:
        self.events.append({"event": "food_placed", "cell": list(cell)})

    def on_tick(self, snapshot: GameSnapshot) -> None:
        if self._record_ticks:
            self.events.append({"event": "tick", "tick": snapshot.tick})

    def on_state_changed(
        self, previous: SessionState, current: SessionState,
    ) -> None:
        self.events.append({
            "event": "state_changed",
            "previous": previous.value,
            "current": current.value,
        })

    def on_restart_requested(self) -> None:
        self.events.append({"event": "restart_requested"})


class HighScoreStore(Protocol):
    """Persistence collaborator answering high-score queries per profile."""

    def get_high_score(self, profile: str) -> int: ...

    def set_high_score(self, profile: str, value: int) -> None: ...


class InMemoryHighScoreStore:
    """Process-local high-score table."""

    def __init__(self, initial: dict[str, int] | None = None) -> None:
        self._scores: dict[str, int] = dict(initial or {})

    def get_high_score(self, profile: str) -> int:
        return self._scores.get(profile, 0)

    def set_high_score(self, profile: str, value: int) -> None:
        if value < 0:
            raise ValueError("High score must be non-negative.")
        self._scores[profile] = value
        logger.info("High score for %s set to %d.", profile, value)

    def to_dict(self) -> dict[str, int]:
        return dict(self._scores)

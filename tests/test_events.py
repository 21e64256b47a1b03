"""Tests for event dispatch and the high-score store."""

import pytest

from snake_core.events import (
    EventDispatcher,
    GameListener,
    InMemoryHighScoreStore,
    RecordingListener,
)
from snake_core.session import SessionState


class TestEventDispatcher:
    def test_fans_out_in_order(self):
        a, b = RecordingListener(), RecordingListener()
        dispatcher = EventDispatcher([a, b])
        dispatcher.on_eaten(10)
        dispatcher.on_level_changed(2)
        assert a.events == b.events == [
            {"event": "eaten", "score": 10},
            {"event": "level_changed", "level": 2},
        ]

    def test_subscribe_is_idempotent(self):
        rec = RecordingListener()
        dispatcher = EventDispatcher()
        dispatcher.subscribe(rec)
        dispatcher.subscribe(rec)
        dispatcher.on_new_record(30)
        assert len(rec.events) == 1

    def test_unsubscribe(self):
        rec = RecordingListener()
        dispatcher = EventDispatcher([rec])
        dispatcher.unsubscribe(rec)
        dispatcher.on_restart_requested()
        assert rec.events == []

    def test_base_listener_ignores_everything(self):
        dispatcher = EventDispatcher([GameListener()])
        dispatcher.on_game_over(10, False, 20)
        dispatcher.on_food_placed((1, 2))
        dispatcher.on_state_changed(SessionState.RUNNING, SessionState.PAUSED)


class TestRecordingListener:
    def test_drain(self):
        rec = RecordingListener()
        rec.on_food_placed((3, 4))
        assert rec.drain() == [{"event": "food_placed", "cell": [3, 4]}]
        assert rec.events == []

    def test_game_over_payload(self):
        rec = RecordingListener()
        rec.on_game_over(40, True, 30)
        assert rec.events[0] == {
            "event": "game_over",
            "final_score": 40,
            "is_record": True,
            "previous_high": 30,
        }

    def test_ticks_skipped_by_default(self, engine):
        rec = RecordingListener()
        rec.on_tick(engine.snapshot())
        assert rec.events == []
        rec = RecordingListener(record_ticks=True)
        rec.on_tick(engine.snapshot())
        assert rec.names() == ["tick"]


class TestInMemoryHighScoreStore:
    def test_defaults_to_zero(self):
        assert InMemoryHighScoreStore().get_high_score("small") == 0

    def test_profiles_are_independent(self):
        store = InMemoryHighScoreStore()
        store.set_high_score("small", 50)
        assert store.get_high_score("small") == 50
        assert store.get_high_score("large") == 0
        assert store.to_dict() == {"small": 50}

    def test_negative_rejected(self):
        with pytest.raises(ValueError, match="non-negative"):
            InMemoryHighScoreStore().set_high_score("small", -1)

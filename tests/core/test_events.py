"""Tests for the event emitter and round states."""

from core.game.events import EventEmitter, EventType
from core.game.engine import BlackjackEngine
from core.game.state import RoundState, is_between_rounds


class TestEventEmitter:
    """Tests for EventEmitter."""

    def test_typed_and_catch_all_handlers(self):
        """Test typed handlers and catch-all handlers both receive events."""
        emitter = EventEmitter()
        typed, everything = [], []
        emitter.subscribe(typed.append, EventType.SHOE_SHUFFLED)
        emitter.subscribe(everything.append)

        emitter.emit_new(EventType.SHOE_SHUFFLED, reason="hands_played")
        emitter.emit_new(EventType.PLAYER_HIT)

        assert [e.event_type for e in typed] == [EventType.SHOE_SHUFFLED]
        assert [e.event_type for e in everything] == [EventType.SHOE_SHUFFLED, EventType.PLAYER_HIT]
        assert typed[0].data == {"reason": "hands_played"}

    def test_unsubscribe(self):
        """Test an unsubscribed handler stops receiving events."""
        emitter = EventEmitter()
        seen = []
        emitter.subscribe(seen.append, EventType.PUSH)

        assert emitter.unsubscribe(seen.append, EventType.PUSH)
        assert not emitter.unsubscribe(seen.append, EventType.PUSH)

        emitter.emit_new(EventType.PUSH)
        assert seen == []

    def test_history(self):
        """Test history and type filtering."""
        emitter = EventEmitter()
        emitter.emit_new(EventType.PLAYER_HIT)
        emitter.emit_new(EventType.PLAYER_STAND)
        emitter.emit_new(EventType.PLAYER_HIT)

        assert len(emitter.history) == 3
        assert len(emitter.of_type(EventType.PLAYER_HIT)) == 2

        emitter.clear_history()
        assert emitter.history == []

    def test_event_str(self):
        """Test events print their type and data."""
        emitter = EventEmitter()
        event = emitter.emit_new(EventType.CONFIG_CHANGED, reshuffle_after=4)
        assert str(event) == "CONFIG_CHANGED: {'reshuffle_after': 4}"


class TestRoundState:
    """Tests for round states."""

    def test_machine_states_match_enum(self):
        """Test every round state has a machine state and vice versa."""
        assert BlackjackEngine.STATES == [s.name.lower() for s in RoundState]
        for transition in BlackjackEngine.TRANSITIONS:
            sources = transition["source"]
            for name in [sources] if isinstance(sources, str) else sources:
                assert RoundState[name.upper()]
            assert RoundState[transition["dest"].upper()]

    def test_between_rounds(self):
        """Test bets may change only outside a live round."""
        assert is_between_rounds(RoundState.NO_ROUND)
        assert is_between_rounds(RoundState.ROUND_OVER)
        assert not is_between_rounds(RoundState.PLAYER_ACTING)

    def test_str(self):
        """Test readable state names."""
        assert str(RoundState.PLAYER_ACTING) == "Player Acting"

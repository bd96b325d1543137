"""Round engine, dealer policy and state management."""

from core.game.dealer import DealerAction, DealerStep, dealer_should_hit, play_dealer
from core.game.engine import BlackjackEngine
from core.game.events import EventEmitter, EventType, GameEvent
from core.game.round import Round
from core.game.snapshot import TableSnapshot
from core.game.state import RoundState

__all__ = [
    "BlackjackEngine",
    "DealerAction",
    "DealerStep",
    "EventEmitter",
    "EventType",
    "GameEvent",
    "Round",
    "RoundState",
    "TableSnapshot",
    "dealer_should_hit",
    "play_dealer",
]

"""Single-deck blackjack rules engine - 100% UI-agnostic."""

from core.bankroll import Bankroll
from core.cards import Card, Rank, Shoe, Suit
from core.errors import BlackjackError, IllegalAction, InsufficientFunds, InvalidBet, ShoeEmpty
from core.hand import Hand, HandStatus, Outcome, evaluate, is_blackjack

__all__ = [
    "Bankroll",
    "BlackjackError",
    "Card",
    "Hand",
    "HandStatus",
    "IllegalAction",
    "InsufficientFunds",
    "InvalidBet",
    "Outcome",
    "Rank",
    "Shoe",
    "ShoeEmpty",
    "Suit",
    "evaluate",
    "is_blackjack",
]

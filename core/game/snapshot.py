"""Pydantic snapshots of engine state for the presentation layer."""

from decimal import Decimal
from typing import Callable

from pydantic import BaseModel, ConfigDict, Field

from core.cards import Card
from core.hand import Hand, evaluate


class CardView(BaseModel):
    """Card representation; rank and suit are None while face down."""

    model_config = ConfigDict(frozen=True)

    rank: str | None
    suit: str | None
    face_up: bool


class HandView(BaseModel):
    """Hand representation with totals computed from face-up cards only."""

    cards: list[CardView]
    total: int
    is_soft: bool
    bet: Decimal
    status: str
    doubled: bool
    split_count: int
    is_split_child: bool


class OddsView(BaseModel):
    """One odds-table row."""

    label: str
    remaining: int
    probability: float = Field(ge=0.0, le=1.0)


class TableSnapshot(BaseModel):
    """Read-only view of the whole table."""

    state: str
    dealer_hand: HandView
    hole_card_visible: bool
    player_hands: list[HandView]
    active_hand_index: int
    round_over: bool
    dealer_has_blackjack: bool
    bankroll: Decimal
    pending_bet: Decimal
    running_count: int
    true_count: float
    odds: list[OddsView]
    cards_out: list[CardView]
    cards_remaining: int
    cards_dealt: int
    visible_cards_dealt: int
    hidden_cards: int
    hands_played: int
    reshuffle_after: int
    message: str = ""


def card_view(card: Card, face_up: bool) -> CardView:
    """Build a card view, hiding a face-down card's identity."""
    if not face_up:
        return CardView(rank=None, suit=None, face_up=False)
    return CardView(rank=str(card.rank), suit=str(card.suit), face_up=True)


def hand_view(hand: Hand, is_face_up: Callable[[Card], bool]) -> HandView:
    """Build a hand view; face-down cards do not contribute to the total."""
    shown = [card for card in hand.cards if is_face_up(card)]
    total, soft = evaluate(shown)
    return HandView(
        cards=[card_view(card, is_face_up(card)) for card in hand.cards],
        total=total,
        is_soft=soft,
        bet=hand.bet,
        status=hand.status.name.lower(),
        doubled=hand.doubled,
        split_count=hand.split_count,
        is_split_child=hand.is_split_child,
    )

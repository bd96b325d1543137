"""Dealer drawing policy: hit below 17, stand on all 17s."""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Iterator

from core.cards import Card
from core.hand import Hand, evaluate

DEALER_STANDS_AT = 17


class DealerAction(Enum):
    """One step of the dealer's turn."""

    REVEAL = auto()
    HIT = auto()
    STAND = auto()
    BUST = auto()


@dataclass(frozen=True)
class DealerStep:
    """Dealer hand state after one step, for paced replay."""

    action: DealerAction
    card: Card | None
    total: int
    is_soft: bool


def dealer_should_hit(cards: list[Card]) -> bool:
    """Dealer hits any total under 17 and stands on soft 17."""
    return evaluate(cards).total < DEALER_STANDS_AT


def play_dealer(
    hand: Hand,
    reveal: Callable[[Card], object],
    draw: Callable[[], Card],
) -> Iterator[DealerStep]:
    """
    Play out the dealer hand lazily.

    Reveals the hole card first, then draws face-up cards until the total
    reaches 17. Each yielded step reflects the hand after that step; the
    final step is STAND or BUST.

    Args:
        hand: Dealer hand holding the up card and hole card
        reveal: Turns the hole card face up (and counts it)
        draw: Draws one face-up card from the shoe
    """
    if len(hand.cards) >= 2:
        hole = hand.cards[1]
        reveal(hole)
        total, soft = evaluate(hand.cards)
        yield DealerStep(DealerAction.REVEAL, hole, total, soft)

    while dealer_should_hit(hand.cards):
        card = draw()
        hand.add_card(card)
        total, soft = evaluate(hand.cards)
        yield DealerStep(DealerAction.HIT, card, total, soft)

    total, soft = evaluate(hand.cards)
    action = DealerAction.BUST if total > 21 else DealerAction.STAND
    yield DealerStep(action, None, total, soft)

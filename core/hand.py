"""Hand evaluation, hand lifecycle, and per-hand settlement."""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum, auto
from typing import Iterable, Iterator, NamedTuple

from core.cards import Card
from core.errors import IllegalAction

DOUBLE_TOTALS = (9, 10, 11)


class HandTotal(NamedTuple):
    """Best total of a set of cards."""

    total: int
    is_soft: bool


def evaluate(cards: Iterable[Card]) -> HandTotal:
    """
    Calculate the best total for a set of cards.

    Aces start at 11 and are reduced to 1, one at a time, while the total
    is over 21. The result is soft if an ace is still counted as 11.
    """
    total = 0
    soft_aces = 0

    for card in cards:
        if card.is_ace:
            soft_aces += 1
        total += card.value

    # Reduce aces from 11 to 1 as needed
    while total > 21 and soft_aces > 0:
        total -= 10
        soft_aces -= 1

    return HandTotal(total, soft_aces > 0)


def is_blackjack(cards: list[Card]) -> bool:
    """Check for a two-card 21."""
    return len(cards) == 2 and evaluate(cards).total == 21


class HandStatus(Enum):
    """Lifecycle of a player hand."""

    ACTIVE = auto()
    STOOD = auto()
    BUSTED = auto()
    DOUBLED = auto()  # Took exactly one card, then stood


@dataclass
class Hand:
    """A blackjack hand with its escrowed bet."""

    cards: list[Card] = field(default_factory=list)
    bet: Decimal = Decimal("0")
    status: HandStatus = HandStatus.ACTIVE
    split_count: int = 0
    is_split_child: bool = False

    def add_card(self, card: Card) -> None:
        """Add a card to the hand."""
        self.cards.append(card)

    def stand(self) -> None:
        """Finish the hand by standing."""
        self._finish(HandStatus.STOOD)

    def bust(self) -> None:
        """Finish the hand as busted."""
        self._finish(HandStatus.BUSTED)

    def double_down(self, card: Card) -> None:
        """Double the bet, take one card, and finish the hand."""
        if not self.can_double:
            raise IllegalAction("Can only double a two-card 9, 10 or 11 before splitting")
        self.bet *= 2
        self.add_card(card)
        self._finish(HandStatus.DOUBLED)

    def split_off(self) -> tuple["Hand", "Hand"]:
        """Return two single-card split children carrying this hand's bet."""
        if not self.is_pair:
            raise IllegalAction("Can only split two cards of equal rank or value 10")
        first, second = self.cards
        return (
            Hand(
                cards=[first],
                bet=self.bet,
                split_count=self.split_count + 1,
                is_split_child=True,
            ),
            Hand(
                cards=[second],
                bet=self.bet,
                split_count=self.split_count + 1,
                is_split_child=True,
            ),
        )

    def _finish(self, status: HandStatus) -> None:
        if self.status is not HandStatus.ACTIVE:
            raise IllegalAction(f"Hand already finished ({self.status.name.lower()})")
        self.status = status

    @property
    def value(self) -> int:
        """Return the best hand total."""
        return evaluate(self.cards).total

    @property
    def is_soft(self) -> bool:
        """Check if an ace is still counted as 11."""
        return evaluate(self.cards).is_soft

    @property
    def is_blackjack(self) -> bool:
        """Check if the hand is a two-card 21."""
        return is_blackjack(self.cards)

    @property
    def is_busted(self) -> bool:
        """Check if the hand has busted (value > 21)."""
        return self.value > 21

    @property
    def stood(self) -> bool:
        """Check if the hand takes no more cards."""
        return self.status is not HandStatus.ACTIVE

    @property
    def doubled(self) -> bool:
        """Check if the hand was doubled."""
        return self.status is HandStatus.DOUBLED

    @property
    def is_pair(self) -> bool:
        """Check for two cards of the same rank, or two ten-value cards."""
        if len(self.cards) != 2:
            return False
        first, second = self.cards
        return first.rank == second.rank or (first.is_ten_value and second.is_ten_value)

    @property
    def can_double(self) -> bool:
        """Check if the hand itself allows doubling (ignores bankroll)."""
        return (
            self.status is HandStatus.ACTIVE
            and len(self.cards) == 2
            and not self.is_split_child
            and self.value in DOUBLE_TOTALS
        )

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __str__(self) -> str:
        cards_str = " ".join(str(card) for card in self.cards)
        value_str = f"({self.value})"
        if self.is_soft:
            value_str = f"(soft {self.value})"
        if self.is_busted:
            value_str = "(BUST)"
        return f"{cards_str} {value_str}"

    def __repr__(self) -> str:
        return f"Hand({self.cards!r}, value={self.value}, status={self.status.name})"


class Outcome(Enum):
    """Result of one player hand against the dealer."""

    WIN = "Win"
    LOSE = "Lose"
    PUSH = "Push"

    def __str__(self) -> str:
        return self.value


def outcome_for_hand(cards: list[Card], dealer_cards: list[Card]) -> Outcome:
    """
    Compare a player hand against the dealer's final cards.

    A busted player loses even if the dealer also busts. Otherwise the
    higher total wins and equal totals push, so a player two-card 21
    pushes against a dealer blackjack.
    """
    player_total = evaluate(cards).total
    dealer_total = evaluate(dealer_cards).total

    if player_total > 21:
        return Outcome.LOSE
    if dealer_total > 21:
        return Outcome.WIN
    if player_total > dealer_total:
        return Outcome.WIN
    if player_total < dealer_total:
        return Outcome.LOSE
    return Outcome.PUSH


def payout(outcome: Outcome, bet: Decimal) -> Decimal:
    """
    Amount credited back for a settled hand.

    The stake was escrowed at bet time, so a win returns stake plus even
    money, a push returns the stake, and a loss returns nothing.
    """
    if outcome is Outcome.WIN:
        return bet * 2
    if outcome is Outcome.PUSH:
        return bet
    return Decimal("0")

"""State of a single dealt round."""

from collections import Counter
from dataclasses import dataclass, field
from decimal import Decimal

from core.game.dealer import DealerStep
from core.hand import Hand, Outcome


@dataclass
class Round:
    """Dealer hand, player hands, and the active-hand pointer for one round."""

    dealer_hand: Hand = field(default_factory=Hand)
    hands: list[Hand] = field(default_factory=list)
    active_index: int = 0
    dealer_has_blackjack: bool = False
    dealer_steps: list[DealerStep] = field(default_factory=list)
    outcomes: list[Outcome] = field(default_factory=list)

    @property
    def active_hand(self) -> Hand | None:
        """Get the current active hand."""
        if 0 <= self.active_index < len(self.hands):
            return self.hands[self.active_index]
        return None

    def next_actionable(self) -> int | None:
        """Index of the first later hand still taking cards, if any."""
        for i in range(self.active_index + 1, len(self.hands)):
            hand = self.hands[i]
            if not hand.stood and hand.value <= 21:
                return i
        return None

    @property
    def any_alive(self) -> bool:
        """Check if some player hand is 21 or under."""
        return any(hand.value <= 21 for hand in self.hands)

    @property
    def total_staked(self) -> Decimal:
        """Sum of all escrowed bets, including split and double add-ons."""
        return sum((hand.bet for hand in self.hands), Decimal("0"))

    def summary(self) -> str:
        """Human-readable tally such as 'Round results: 1 win, 2 losses'."""
        counts = Counter(self.outcomes)
        parts = []
        wins = counts[Outcome.WIN]
        losses = counts[Outcome.LOSE]
        pushes = counts[Outcome.PUSH]
        if wins:
            parts.append(f"{wins} win{'s' if wins > 1 else ''}")
        if losses:
            parts.append(f"{losses} loss{'es' if losses > 1 else ''}")
        if pushes:
            parts.append(f"{pushes} push{'es' if pushes > 1 else ''}")
        return f"Round results: {', '.join(parts)}" if parts else ""

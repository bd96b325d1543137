"""Remaining-card odds from the player's point of view."""

from collections import Counter
from dataclasses import dataclass
from typing import Iterable

from core.cards import DECK_SIZE, Card, Rank, build_single_deck

TEN_BUCKET = "10+"

# Display categories: ace, 2-9, and every ten-value rank merged
CATEGORIES: tuple[str, ...] = ("A", "2", "3", "4", "5", "6", "7", "8", "9", TEN_BUCKET)


def category_for(rank: Rank) -> str:
    """Return the odds category for a rank."""
    if rank.is_ten_value:
        return TEN_BUCKET
    return rank.value


# Single-deck composition per category
INITIAL_COUNTS: dict[str, int] = dict(
    Counter(category_for(card.rank) for card in build_single_deck())
)


@dataclass(frozen=True)
class RankOdds:
    """Remaining count and draw probability for one category."""

    label: str
    remaining: int
    probability: float


def project_odds(visible_cards: Iterable[Card]) -> list[RankOdds]:
    """
    Project draw odds from the cards the player has seen.

    Only face-up cards are removed from the starting composition. Face-down
    cards stay counted as possibly undealt, so a hidden card's rank cannot be
    worked out by elimination.

    Args:
        visible_cards: Face-up cards dealt since the last shuffle

    Returns:
        One RankOdds per category, in CATEGORIES order
    """
    seen = Counter(category_for(card.rank) for card in visible_cards)
    unseen_total = DECK_SIZE - sum(seen.values())

    odds = []
    for label in CATEGORIES:
        remaining = INITIAL_COUNTS[label] - seen[label]
        probability = remaining / unseen_total if unseen_total > 0 else 0.0
        odds.append(RankOdds(label, remaining, probability))
    return odds

"""Abstract base class for card counting systems."""

from abc import ABC, abstractmethod
from typing import Mapping

from core.cards import Card, Rank


class CountingSystem(ABC):
    """
    Abstract base class for card counting systems.

    Tracks a running count over the cards it is shown and derives a true
    count from the decks remaining.
    """

    def __init__(self) -> None:
        """Initialize the counting system."""
        self._running_count: int = 0
        self._cards_seen: int = 0

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the name of the counting system."""
        ...

    @property
    @abstractmethod
    def tag_values(self) -> Mapping[Rank, int]:
        """Return the tag value for each Rank."""
        ...

    @property
    @abstractmethod
    def is_balanced(self) -> bool:
        """Return whether the tags sum to 0 over a complete deck."""
        ...

    @property
    def full_deck_sum(self) -> int:
        """Sum of tag values over a full 52-card deck."""
        return sum(self.tag_values[rank] * 4 for rank in Rank)

    def count_card(self, card: Card) -> int:
        """
        Count a single card and update the running count.

        Returns:
            The tag value of the card
        """
        tag_value = self.tag_values[card.rank]
        self._running_count += tag_value
        self._cards_seen += 1
        return tag_value

    def count_cards(self, cards: list[Card]) -> int:
        """Count multiple cards and return their total tag value."""
        return sum(self.count_card(card) for card in cards)

    @property
    def running_count(self) -> int:
        """Return the current running count."""
        return self._running_count

    def true_count(self, decks_remaining: float) -> float:
        """
        Calculate the true count.

        Args:
            decks_remaining: Decks (or fraction of a deck) left undealt

        Returns:
            Running count per remaining deck, 0.0 for an empty shoe
        """
        if decks_remaining <= 0:
            return 0.0
        return self._running_count / decks_remaining

    @property
    def cards_seen(self) -> int:
        """Return the number of cards seen."""
        return self._cards_seen

    def reset(self) -> None:
        """Reset the count to zero."""
        self._running_count = 0
        self._cards_seen = 0

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(running_count={self._running_count})"

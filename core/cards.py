"""Card and Shoe classes - immutable cards, single-deck shoe."""

import logging
from dataclasses import dataclass
from enum import Enum, auto
from random import Random
from typing import TYPE_CHECKING, Iterable, Iterator

from core.errors import ShoeEmpty

if TYPE_CHECKING:
    from core.counting.base import CountingSystem

logger = logging.getLogger(__name__)

DECK_SIZE = 52


class Suit(Enum):
    """Card suits."""

    SPADES = auto()
    HEARTS = auto()
    DIAMONDS = auto()
    CLUBS = auto()

    def __str__(self) -> str:
        symbols = {
            Suit.SPADES: "♠",
            Suit.HEARTS: "♥",
            Suit.DIAMONDS: "♦",
            Suit.CLUBS: "♣",
        }
        return symbols[self]


class Rank(Enum):
    """Card ranks in deck order (ace first)."""

    ACE = "A"
    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    TEN = "10"
    JACK = "J"
    QUEEN = "Q"
    KING = "K"

    def __str__(self) -> str:
        return self.value

    @property
    def blackjack_value(self) -> int:
        """Return the blackjack point value (Ace = 11, face cards = 10)."""
        if self == Rank.ACE:
            return 11
        if self in (Rank.JACK, Rank.QUEEN, Rank.KING):
            return 10
        return int(self.value)

    @property
    def count_value(self) -> int:
        """Return the Hi-Lo tag for this rank."""
        value = self.blackjack_value
        if value >= 10:
            return -1
        if value <= 6:
            return 1
        return 0

    @property
    def is_ace(self) -> bool:
        """Check if this rank is an Ace."""
        return self == Rank.ACE

    @property
    def is_ten_value(self) -> bool:
        """Check if this rank has a value of 10."""
        return self.blackjack_value == 10


@dataclass(frozen=True, slots=True)
class Card:
    """Immutable playing card."""

    rank: Rank
    suit: Suit

    def __str__(self) -> str:
        return f"{self.rank}{self.suit}"

    def __repr__(self) -> str:
        return f"Card({self.rank.name}, {self.suit.name})"

    @property
    def value(self) -> int:
        """Return the blackjack point value."""
        return self.rank.blackjack_value

    @property
    def is_ace(self) -> bool:
        """Check if this card is an Ace."""
        return self.rank.is_ace

    @property
    def is_ten_value(self) -> bool:
        """Check if this card has a value of 10."""
        return self.rank.is_ten_value

    @classmethod
    def from_string(cls, s: str) -> "Card":
        """Create a card from a string like '2♣', 'AS', 'Kh', 'TD'."""
        s = s.strip().upper()
        if len(s) < 2:
            raise ValueError(f"Invalid card string: {s}")

        rank_str = "10" if s[:-1] == "T" else s[:-1]
        suit_str = s[-1]

        suit_map = {
            "C": Suit.CLUBS,
            "♣": Suit.CLUBS,
            "D": Suit.DIAMONDS,
            "♦": Suit.DIAMONDS,
            "H": Suit.HEARTS,
            "♥": Suit.HEARTS,
            "S": Suit.SPADES,
            "♠": Suit.SPADES,
        }

        try:
            rank = Rank(rank_str)
        except ValueError:
            raise ValueError(f"Invalid rank: {rank_str}") from None
        if suit_str not in suit_map:
            raise ValueError(f"Invalid suit: {suit_str}")

        return cls(rank, suit_map[suit_str])


def build_single_deck() -> list[Card]:
    """Return the 52 cards of one deck in fixed order."""
    return [Card(rank, suit) for suit in Suit for rank in Rank]


class Shoe:
    """
    A single-deck shoe.

    Tracks undealt cards, every card dealt since the last shuffle, which of
    those are still face down, and how many hands were played from it.
    Undealt plus dealt is always exactly one 52-card deck.
    """

    def __init__(
        self,
        rng: Random | None = None,
        counter: "CountingSystem | None" = None,
    ) -> None:
        """
        Initialize and shuffle a fresh shoe.

        Args:
            rng: Random number generator for shuffling
            counter: Counting system fed with every face-up card
        """
        self._rng = rng or Random()
        self._counter = counter
        self._cards: list[Card] = []
        self._discard: list[Card] = []
        self._face_down: set[Card] = set()
        self._hands_played = 0
        self.reset()

    def reset(self) -> None:
        """Rebuild all 52 cards, shuffle them, and clear the discard and count."""
        self._cards = build_single_deck()
        self._rng.shuffle(self._cards)
        self._discard = []
        self._face_down = set()
        self._hands_played = 0
        if self._counter is not None:
            self._counter.reset()
        logger.info("Shoe reshuffled")

    def refill(self, in_play: Iterable[Card]) -> int:
        """
        Shuffle dealt cards that are no longer in play back into the shoe.

        Cards still on the table stay dealt, keep their visibility, and are
        counted again against the fresh running count.

        Args:
            in_play: Cards held by the dealer and player hands

        Returns:
            The number of cards returned to the shoe
        """
        keep = set(in_play)
        returned = [c for c in self._discard if c not in keep]
        self._discard = [c for c in self._discard if c in keep]
        self._face_down &= keep
        self._cards.extend(returned)
        self._rng.shuffle(self._cards)
        self._hands_played = 0
        if self._counter is not None:
            self._counter.reset()
            self._counter.count_cards(self.visible_dealt)
        logger.info("Shoe refilled with %d discarded cards", len(returned))
        return len(returned)

    def draw(self, visible: bool = True) -> Card:
        """
        Draw the top card of the shoe.

        Args:
            visible: Deal face up (counted now) or face down (counted on reveal)

        Raises:
            ShoeEmpty: If no undealt cards remain
        """
        if not self._cards:
            raise ShoeEmpty("Cannot draw from empty shoe")
        card = self._cards.pop()
        self._discard.append(card)
        if visible:
            self._count(card)
        else:
            self._face_down.add(card)
        logger.debug("Drew %s (%s)", card, "up" if visible else "down")
        return card

    def reveal(self, card: Card) -> bool:
        """
        Turn a face-down card face up.

        Returns:
            True if the card was face down and is now counted
        """
        if card not in self._face_down:
            return False
        self._face_down.discard(card)
        self._count(card)
        return True

    def _count(self, card: Card) -> None:
        if self._counter is not None:
            self._counter.count_card(card)

    def arrange(self, cards: Iterable[Card]) -> None:
        """
        Reorder undealt cards so the given cards are drawn next, in order.

        Raises:
            ValueError: If a card is not in the undealt portion
        """
        stacked = list(cards)
        for card in stacked:
            if card not in self._cards:
                raise ValueError(f"Card not in shoe: {card}")
            self._cards.remove(card)
        self._cards.extend(reversed(stacked))

    def record_hand(self) -> int:
        """Count one completed round against this shoe."""
        self._hands_played += 1
        return self._hands_played

    def is_face_up(self, card: Card) -> bool:
        """Check if a dealt card is face up."""
        return card not in self._face_down

    @property
    def counter(self) -> "CountingSystem | None":
        """Return the attached counting system."""
        return self._counter

    @property
    def hands_played(self) -> int:
        """Return rounds completed since the last shuffle."""
        return self._hands_played

    @property
    def discard(self) -> list[Card]:
        """Return every card dealt since the last shuffle."""
        return list(self._discard)

    @property
    def visible_dealt(self) -> list[Card]:
        """Return dealt cards that are face up, in deal order."""
        return [c for c in self._discard if c not in self._face_down]

    @property
    def hidden_count(self) -> int:
        """Return how many dealt cards are still face down."""
        return len(self._face_down)

    @property
    def cards_remaining(self) -> int:
        """Return the number of undealt cards."""
        return len(self._cards)

    @property
    def cards_dealt(self) -> int:
        """Return the number of cards dealt."""
        return len(self._discard)

    @property
    def total_cards(self) -> int:
        """Return the size of a full shoe."""
        return DECK_SIZE

    @property
    def decks_remaining(self) -> float:
        """Return the fraction of a deck left undealt."""
        return len(self._cards) / DECK_SIZE

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self._cards)

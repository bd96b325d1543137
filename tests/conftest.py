"""Pytest fixtures for blackjack engine tests."""

import pytest
from decimal import Decimal
from random import Random

from config import TableConfig
from core.cards import Card, Shoe, build_single_deck
from core.counting import HiLoSystem
from core.game import BlackjackEngine
from core.hand import Hand


def _cards(*specs: str) -> list[Card]:
    """Build cards from strings like 'AS', '10H', 'KC'."""
    return [Card.from_string(s) for s in specs]


def _make_hand(*specs: str, **kwargs) -> Hand:
    """Build a hand from card strings."""
    return Hand(cards=_cards(*specs), **kwargs)


def _stack_and_deal(engine: BlackjackEngine, *specs: str, bet: int = 10) -> bool:
    """
    Stack the shoe and deal.

    Cards are dealt in the order given: player, dealer up, player, dealer
    hole, then any later draws.
    """
    engine.shoe.arrange(_cards(*specs))
    return engine.deal_initial(bet)


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return Random(42)


@pytest.fixture
def deck():
    """An ordered single deck."""
    return build_single_deck()


@pytest.fixture
def hilo():
    """Hi-Lo counting system."""
    return HiLoSystem()


@pytest.fixture
def shoe(rng, hilo):
    """A shuffled single-deck shoe feeding a Hi-Lo count."""
    return Shoe(rng=rng, counter=hilo)


@pytest.fixture
def table():
    """Default table: reshuffle after 5 rounds, 500 starting bankroll, standard chips."""
    return TableConfig(
        reshuffle_after=5,
        starting_bankroll=Decimal("500"),
        chip_values=(Decimal("1"), Decimal("5"), Decimal("25"), Decimal("100")),
    )


@pytest.fixture
def engine(table, rng):
    """A new engine instance."""
    return BlackjackEngine(table=table, rng=rng)


@pytest.fixture
def empty_hand():
    """An empty player hand."""
    return Hand()


@pytest.fixture
def blackjack_hand():
    """A natural blackjack hand."""
    return _make_hand("AS", "KH")


@pytest.fixture
def soft_17_hand():
    """A soft 17 hand (A-6)."""
    return _make_hand("AS", "6H")


@pytest.fixture
def hard_16_hand():
    """A hard 16 hand (10-6)."""
    return _make_hand("10S", "6H")


@pytest.fixture
def pair_8s_hand():
    """A pair of 8s hand."""
    return _make_hand("8S", "8H", bet=Decimal("10"))


@pytest.fixture
def bust_hand():
    """A busted hand."""
    return _make_hand("10S", "6H", "KC")


@pytest.fixture
def make_cards():
    """Factory: card strings to cards."""
    return _cards


@pytest.fixture
def make_hand():
    """Factory: card strings (plus Hand fields) to a hand."""
    return _make_hand


@pytest.fixture
def deal(engine):
    """Factory: stack the engine's shoe and deal a round."""

    def _deal(*specs: str, bet: int = 10) -> bool:
        return _stack_and_deal(engine, *specs, bet=bet)

    return _deal

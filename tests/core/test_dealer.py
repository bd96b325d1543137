"""Tests for the dealer drawing policy."""

import pytest

from hypothesis import given, strategies as st

from core.cards import build_single_deck
from core.game.dealer import DealerAction, dealer_should_hit, play_dealer
from core.hand import evaluate


def _run(hand, draws):
    """Play the dealer with a fixed draw order, recording reveals."""
    revealed = []
    pile = list(draws)
    steps = list(play_dealer(hand, reveal=revealed.append, draw=lambda: pile.pop(0)))
    return steps, revealed, pile


class TestDealerShouldHit:
    """Tests for the hit/stand decision."""

    @pytest.mark.parametrize(
        "specs, expected",
        [
            (("10S", "6H"), True),
            (("10S", "7H"), False),
            (("AS", "6H"), False),  # Soft 17 stands
            (("AS", "5H"), True),  # Soft 16 hits
            (("AS", "AH", "4C"), True),  # Soft 16
            (("10S", "6H", "AC"), False),  # Hard 17
            (("10S", "8H"), False),
            (("2S", "3H"), True),
        ],
    )
    def test_decision(self, make_cards, specs, expected):
        """Test hitting below 17 and standing on every 17."""
        assert dealer_should_hit(make_cards(*specs)) is expected

    @given(st.lists(st.sampled_from(build_single_deck()), min_size=2, max_size=8, unique=True))
    def test_hits_exactly_below_17(self, cards):
        """Test the decision matches the total alone, soft or hard."""
        assert dealer_should_hit(cards) is (evaluate(cards).total < 17)


class TestPlayDealer:
    """Tests for the lazy dealer play-out."""

    def test_reveal_then_stand(self, make_hand, make_cards):
        """Test a made hand reveals and stands without drawing."""
        hand = make_hand("10S", "8H")
        steps, revealed, pile = _run(hand, make_cards("5C"))

        assert revealed == [hand.cards[1]]
        assert [s.action for s in steps] == [DealerAction.REVEAL, DealerAction.STAND]
        assert steps[-1].total == 18
        assert len(pile) == 1

    def test_stands_on_soft_17(self, make_hand, make_cards):
        """Test soft 17 is never hit."""
        hand = make_hand("AS", "6H")
        steps, _, pile = _run(hand, make_cards("5C"))

        assert steps[-1].action is DealerAction.STAND
        assert steps[-1].total == 17
        assert steps[-1].is_soft
        assert len(hand) == 2

    def test_hits_until_17(self, make_hand, make_cards):
        """Test drawing continues while under 17."""
        hand = make_hand("10S", "2H")
        steps, _, pile = _run(hand, make_cards("3C", "AD", "5S", "9H"))

        assert [s.action for s in steps] == [
            DealerAction.REVEAL,
            DealerAction.HIT,
            DealerAction.HIT,
            DealerAction.HIT,
            DealerAction.STAND,
        ]
        assert [s.total for s in steps] == [12, 15, 16, 21, 21]
        assert pile == make_cards("9H")

    def test_soft_hand_hardens_and_hits(self, make_hand, make_cards):
        """Test a soft 16 that hardens keeps drawing."""
        hand = make_hand("AS", "5H")
        steps, _, _ = _run(hand, make_cards("KC", "4D"))

        assert [s.total for s in steps] == [16, 16, 20, 20]
        assert not steps[1].is_soft

    def test_bust(self, make_hand, make_cards):
        """Test the last step reports a bust."""
        hand = make_hand("10S", "6H")
        steps, _, _ = _run(hand, make_cards("QC"))

        assert steps[-1].action is DealerAction.BUST
        assert steps[-1].total == 26
        assert steps[-2].card == make_cards("QC")[0]

    def test_is_lazy(self, make_hand, make_cards):
        """Test nothing happens until the sequence is consumed."""
        hand = make_hand("10S", "2H")
        revealed = []
        steps = play_dealer(hand, reveal=revealed.append, draw=lambda: make_cards("9C")[0])

        assert revealed == []
        first = next(steps)
        assert first.action is DealerAction.REVEAL
        assert len(hand) == 2

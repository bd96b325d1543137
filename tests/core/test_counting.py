"""Tests for card counting systems."""

from core.cards import Card, Rank, Suit


class TestHiLo:
    """Tests for Hi-Lo counting system."""

    def test_name(self, hilo):
        """Test system name."""
        assert hilo.name == "Hi-Lo"

    def test_full_deck_sums_to_zero(self, hilo):
        """Verify Hi-Lo is balanced (full deck = 0)."""
        assert hilo.full_deck_sum == 0

    def test_is_balanced(self, hilo):
        """Test system reports as balanced."""
        assert hilo.is_balanced

    def test_count_full_deck(self, hilo, deck):
        """Test counting a full deck sums to zero."""
        for card in deck:
            hilo.count_card(card)
        assert hilo.running_count == 0
        assert hilo.cards_seen == 52

    def test_low_cards_positive(self, hilo):
        """Test low cards (2-6) are +1."""
        for rank in [Rank.TWO, Rank.THREE, Rank.FOUR, Rank.FIVE, Rank.SIX]:
            assert hilo.count_card(Card(rank, Suit.SPADES)) == 1

    def test_neutral_cards_zero(self, hilo):
        """Test neutral cards (7-9) are 0."""
        for rank in [Rank.SEVEN, Rank.EIGHT, Rank.NINE]:
            assert hilo.count_card(Card(rank, Suit.SPADES)) == 0

    def test_high_cards_negative(self, hilo):
        """Test high cards (10-A) are -1."""
        for rank in [Rank.TEN, Rank.JACK, Rank.QUEEN, Rank.KING, Rank.ACE]:
            assert hilo.count_card(Card(rank, Suit.SPADES)) == -1

    def test_five_then_king_nets_zero(self, hilo, make_cards):
        """Test a 5 then a King leaves the count at 0."""
        assert hilo.count_cards(make_cards("5S", "KH")) == 0
        assert hilo.running_count == 0

    def test_true_count(self, hilo, make_cards):
        """Test true count with half a deck left."""
        hilo.count_cards(make_cards("2S", "3S", "4S", "5S", "6S", "2H"))
        assert hilo.running_count == 6

        # 26 cards remaining = half a deck
        assert hilo.true_count(26 / 52) == 12.0

    def test_true_count_empty_shoe(self, hilo, make_cards):
        """Test an empty shoe reports a true count of 0."""
        hilo.count_cards(make_cards("2S", "3S"))
        assert hilo.true_count(0) == 0.0

    def test_reset(self, hilo, make_cards):
        """Test reset zeroes the count."""
        hilo.count_cards(make_cards("2S", "3S"))
        hilo.reset()
        assert hilo.running_count == 0
        assert hilo.cards_seen == 0

    def test_repr(self, hilo):
        """Test repr shows the running count."""
        assert repr(hilo) == "HiLoSystem(running_count=0)"

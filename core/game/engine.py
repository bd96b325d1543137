"""Single-deck blackjack engine with state machine."""

import logging
from decimal import Decimal, InvalidOperation
from random import Random
from typing import Callable

from transitions import Machine

from config import RESHUFFLE_CHOICES, TableConfig, config
from core.bankroll import Bankroll
from core.cards import Card, Shoe
from core.counting import CountingSystem, HiLoSystem
from core.errors import BlackjackError, IllegalAction, InsufficientFunds, InvalidBet, ShoeEmpty
from core.game.dealer import DealerAction, play_dealer
from core.game.events import EventEmitter, EventType, GameEvent
from core.game.round import Round
from core.game.snapshot import OddsView, TableSnapshot, card_view, hand_view
from core.game.state import RoundState, is_between_rounds
from core.hand import Hand, Outcome, is_blackjack, outcome_for_hand, payout
from core.statistics import RankOdds, project_odds

logger = logging.getLogger(__name__)

_OUTCOME_EVENTS = {
    Outcome.WIN: EventType.PLAYER_WINS,
    Outcome.LOSE: EventType.PLAYER_LOSES,
    Outcome.PUSH: EventType.PUSH,
}


def _to_decimal(amount: Decimal | int | float | str) -> Decimal:
    try:
        value = Decimal(str(amount))
    except InvalidOperation:
        raise InvalidBet(f"Invalid bet amount: {amount!r}") from None
    if not value.is_finite():
        raise InvalidBet(f"Invalid bet amount: {amount!r}")
    return value


class BlackjackEngine:
    """
    Single-deck blackjack engine using a state machine.

    Owns the shoe, the live round, the bankroll and the count. Operations
    return True when applied; refused operations change nothing, emit an
    INVALID_ACTION or INSUFFICIENT_FUNDS event and return False.
    """

    # State machine states
    STATES = [s.name.lower() for s in RoundState]

    # State machine transitions
    TRANSITIONS = [
        {"trigger": "start_deal", "source": ["no_round", "round_over"], "dest": "dealing"},
        {"trigger": "begin_play", "source": "dealing", "dest": "player_acting"},
        {"trigger": "dealer_natural", "source": "dealing", "dest": "round_over"},
        {"trigger": "player_done", "source": "player_acting", "dest": "dealer_acting"},
        {"trigger": "player_busts_all", "source": "player_acting", "dest": "round_over"},
        {"trigger": "dealer_done", "source": "dealer_acting", "dest": "round_over"},
        {"trigger": "new_round", "source": "round_over", "dest": "no_round"},
    ]

    def __init__(
        self,
        table: TableConfig | None = None,
        rng: Random | None = None,
        counter: CountingSystem | None = None,
    ) -> None:
        """
        Initialize a new engine session.

        Args:
            table: Table settings (uses the global config if not provided)
            rng: Random number generator for reproducible shuffles
            counter: Counting system (Hi-Lo if not provided)
        """
        self.table = table or config.table
        self._reshuffle_after = self.table.reshuffle_after
        self.counter = counter or HiLoSystem()
        self.shoe = Shoe(rng=rng, counter=self.counter)
        self._bankroll = Bankroll(self.table.starting_bankroll)
        self.round = Round()
        self.events = EventEmitter()

        self.machine = Machine(
            model=self,
            states=self.STATES,
            transitions=self.TRANSITIONS,
            initial="no_round",
            auto_transitions=False,
            model_attribute="_machine_state",
        )

    @property
    def state(self) -> RoundState:
        """Get current round state as enum."""
        return RoundState[self._machine_state.upper()]  # type: ignore

    def subscribe(
        self,
        handler: Callable[[GameEvent], None],
        event_type: EventType | None = None,
    ) -> None:
        """Subscribe to engine events."""
        self.events.subscribe(handler, event_type)

    # ------------------------------------------------------------------
    # Session and betting

    def configure(self, reshuffle_after: int) -> None:
        """
        Set how many rounds are played before the shoe is reshuffled.

        Raises:
            ValueError: If reshuffle_after is not 4 or 5
        """
        if reshuffle_after not in RESHUFFLE_CHOICES:
            raise ValueError("reshuffle_after must be 4 or 5")
        self._reshuffle_after = reshuffle_after
        self.events.emit_new(EventType.CONFIG_CHANGED, reshuffle_after=reshuffle_after)

    def reset(self) -> None:
        """Start a fresh session: new shoe, starting bankroll, no round."""
        self.shoe.reset()
        self._bankroll = Bankroll(self.table.starting_bankroll)
        self.round = Round()
        self.machine.set_state("no_round")
        self.events.emit_new(EventType.SHOE_SHUFFLED, reason="session_reset")

    def place_bet(self, amount: Decimal | int | str) -> bool:
        """
        Add a chip to the pending bet.

        Args:
            amount: Chip value to stage

        Returns:
            True if the chip was staged
        """
        try:
            self._require_between_rounds()
            chip = _to_decimal(amount)
            if chip not in self.table.chip_values:
                raise InvalidBet(f"Not a chip value: {amount}")
            pending = self._bankroll.stage(chip)
        except BlackjackError as exc:
            return self._refuse(exc)

        self.events.emit_new(EventType.BET_PLACED, amount=str(amount), pending_bet=pending)
        return True

    def clear_bet(self) -> bool:
        """Drop the pending bet."""
        try:
            self._require_between_rounds()
        except BlackjackError as exc:
            return self._refuse(exc)

        self._bankroll.clear()
        self.events.emit_new(EventType.BET_CLEARED)
        return True

    def _require_between_rounds(self) -> None:
        if not is_between_rounds(self.state):
            raise InvalidBet("Cannot change bet during a round")

    # ------------------------------------------------------------------
    # Dealing

    def deal_initial(self, bet: Decimal | int | str | None = None) -> bool:
        """
        Escrow the bet and deal player, dealer, player, dealer (face down).

        Args:
            bet: Stake for this round; replaces the pending bet if given

        Returns:
            True if the round was dealt
        """
        try:
            if not is_between_rounds(self.state):
                raise IllegalAction("Round already in progress")
            if bet is not None:
                self._bankroll.set_pending(_to_decimal(bet))
            stake = self._bankroll.pending_bet
            if stake <= 0:
                raise InvalidBet("Place a bet before dealing")
            if not self._bankroll.can_cover(stake):
                raise InsufficientFunds(f"Insufficient funds: {self._bankroll.balance} available")
        except BlackjackError as exc:
            return self._refuse(exc)

        if self.shoe.cards_remaining < self.table.min_shoe_cards:
            self._reshuffle("low_shoe")

        self._bankroll.debit(stake)
        self.round = Round(hands=[Hand(bet=stake)])
        self.start_deal()

        player_hand = self.round.hands[0]
        dealer_hand = self.round.dealer_hand
        self._deal_to(player_hand)
        self._deal_to(dealer_hand)
        self._deal_to(player_hand)
        self._deal_to(dealer_hand, face_up=False)

        self.events.emit_new(EventType.ROUND_STARTED, bet=stake)

        if is_blackjack(dealer_hand.cards):
            self.round.dealer_has_blackjack = True
            self._reveal(dealer_hand.cards[1])
            self.events.emit_new(EventType.DEALER_BLACKJACK)
            self.dealer_natural()
            self._settle()
            return True

        self.begin_play()
        return True

    def _draw(self, owner: str, face_up: bool = True, hand_index: int | None = None) -> Card:
        """Draw a card and announce it."""
        self._ensure_cards(1)
        card = self.shoe.draw(visible=face_up)
        self.events.emit_new(
            EventType.CARD_DEALT,
            card=str(card) if face_up else "??",
            hand=owner,
            hand_index=hand_index,
        )
        return card

    def _deal_to(self, hand: Hand, face_up: bool = True) -> Card:
        """Deal a card to a hand."""
        if hand is self.round.dealer_hand:
            card = self._draw("dealer", face_up)
        else:
            index = next(i for i, h in enumerate(self.round.hands) if h is hand)
            card = self._draw("player", face_up, index)
        hand.add_card(card)
        return card

    def _reveal(self, card: Card) -> None:
        """Turn a face-down card up, counting it now."""
        if self.shoe.reveal(card):
            self.events.emit_new(
                EventType.HOLE_CARD_REVEALED,
                card=str(card),
                hand_value=self.round.dealer_hand.value,
            )

    def _reshuffle(self, reason: str) -> None:
        self.shoe.reset()
        self.events.emit_new(EventType.SHOE_SHUFFLED, reason=reason)

    def _ensure_cards(self, needed: int) -> None:
        """
        Make sure the shoe can deal the cards an action needs.

        An empty shoe mid-round is refilled from discards that are no longer
        on the table.

        Raises:
            ShoeEmpty: If too few cards are left even after refilling
        """
        if self.shoe.cards_remaining >= needed:
            return
        if self.shoe.refill(self._cards_in_play()):
            self.events.emit_new(EventType.SHOE_SHUFFLED, reason="mid_round")
        if self.shoe.cards_remaining < needed:
            raise ShoeEmpty(f"Need {needed} cards, {self.shoe.cards_remaining} left")

    def _cards_in_play(self) -> list[Card]:
        cards = list(self.round.dealer_hand.cards)
        for hand in self.round.hands:
            cards.extend(hand.cards)
        return cards

    # ------------------------------------------------------------------
    # Player actions

    def hit(self) -> bool:
        """Player hits (takes another card)."""
        try:
            hand = self._require_active_hand()
            self._ensure_cards(1)
        except BlackjackError as exc:
            return self._refuse(exc)

        self._deal_to(hand)
        self.events.emit_new(EventType.PLAYER_HIT, hand_index=self.round.active_index, hand_value=hand.value)

        if hand.is_busted:
            hand.bust()
            self.events.emit_new(EventType.PLAYER_BUSTS, hand_index=self.round.active_index)
            self._advance()
        return True

    def stand(self) -> bool:
        """Player stands (keeps current hand)."""
        try:
            hand = self._require_active_hand()
        except BlackjackError as exc:
            return self._refuse(exc)

        hand.stand()
        self.events.emit_new(EventType.PLAYER_STAND, hand_index=self.round.active_index, hand_value=hand.value)
        self._advance()
        return True

    def double(self) -> bool:
        """Player doubles down: one more stake, exactly one card, then stand."""
        try:
            hand = self._require_active_hand()
            if not hand.can_double:
                raise IllegalAction("Can only double a two-card 9, 10 or 11 before splitting")
            if not self._bankroll.can_cover(hand.bet):
                raise InsufficientFunds(f"Insufficient funds: {self._bankroll.balance} available")
            self._ensure_cards(1)
        except BlackjackError as exc:
            return self._refuse(exc)

        card = self._draw("player", hand_index=self.round.active_index)
        self._bankroll.debit(hand.bet)
        hand.double_down(card)
        self.events.emit_new(
            EventType.PLAYER_DOUBLE,
            hand_index=self.round.active_index,
            hand_value=hand.value,
            new_bet=hand.bet,
        )
        self._advance()
        return True

    def split(self) -> bool:
        """Player splits a pair into two single-card hands."""
        try:
            hand = self._require_active_hand()
            if not hand.is_pair:
                raise IllegalAction("Can only split two cards of equal rank or value 10")
            if len(self.round.hands) >= self.table.max_hands:
                raise IllegalAction("Max hands reached")
            if not self._bankroll.can_cover(hand.bet):
                raise InsufficientFunds(f"Insufficient funds: {self._bankroll.balance} available")
            self._ensure_cards(2)
        except BlackjackError as exc:
            return self._refuse(exc)

        first, second = hand.split_off()
        index = self.round.active_index
        self.round.hands[index:index + 1] = [first, second]
        self._bankroll.debit(hand.bet)

        self._deal_to(first)
        self._deal_to(second)

        self.events.emit_new(
            EventType.PLAYER_SPLIT,
            hand_index=index,
            hand1_value=first.value,
            hand2_value=second.value,
            hands=len(self.round.hands),
        )
        return True

    def _require_active_hand(self) -> Hand:
        if self.state != RoundState.PLAYER_ACTING or self.round.dealer_has_blackjack:
            raise IllegalAction(f"No player action allowed ({self.state})")
        hand = self.round.active_hand
        if hand is None or hand.stood:
            raise IllegalAction("No active hand")
        return hand

    def _advance(self) -> None:
        """Move to the next hand still taking cards, or finish the round."""
        next_index = self.round.next_actionable()
        if next_index is not None:
            self.round.active_index = next_index
            return

        if not self.round.any_alive:
            # All hands busted: dealer does not draw
            self.player_busts_all()
            self._settle()
            return

        self.player_done()
        self._play_dealer()
        self.dealer_done()
        self._settle()

    # ------------------------------------------------------------------
    # Dealer and settlement

    def _play_dealer(self) -> None:
        """Run the dealer policy, recording each step for replay."""
        steps = play_dealer(
            self.round.dealer_hand,
            reveal=self._reveal,
            draw=lambda: self._draw("dealer"),
        )
        for step in steps:
            self.round.dealer_steps.append(step)
            if step.action is DealerAction.HIT:
                self.events.emit_new(EventType.DEALER_HITS, card=str(step.card), hand_value=step.total)
            elif step.action is DealerAction.BUST:
                self.events.emit_new(EventType.DEALER_BUSTS, hand_value=step.total)
            elif step.action is DealerAction.STAND:
                self.events.emit_new(EventType.DEALER_STANDS, hand_value=step.total)

    def _settle(self) -> None:
        """Settle every hand against the dealer and credit the bankroll."""
        dealer_cards = self.round.dealer_hand.cards
        total_credit = Decimal("0")

        for i, hand in enumerate(self.round.hands):
            outcome = outcome_for_hand(hand.cards, dealer_cards)
            credit = payout(outcome, hand.bet)
            self._bankroll.credit(credit)
            total_credit += credit
            self.round.outcomes.append(outcome)
            self.events.emit_new(_OUTCOME_EVENTS[outcome], hand_index=i, bet=hand.bet, credit=credit)

        hands_played = self.shoe.record_hand()
        summary = self.round.summary()
        logger.info("%s (bankroll %s)", summary, self._bankroll.balance)
        self.events.emit_new(
            EventType.ROUND_ENDED,
            message=summary,
            result=total_credit - self.round.total_staked,
            bankroll=self._bankroll.balance,
            hands_played=hands_played,
        )

        if hands_played >= self._reshuffle_after:
            self._reshuffle("hands_played")

    def start_new_round(self) -> bool:
        """Clear the finished round and return to betting."""
        if self.state != RoundState.ROUND_OVER:
            return self._refuse(IllegalAction("Round not over"))
        self.new_round()
        self.round = Round()
        return True

    def _refuse(self, exc: BlackjackError) -> bool:
        """Report a refused operation without changing state."""
        event_type = (
            EventType.INSUFFICIENT_FUNDS
            if isinstance(exc, InsufficientFunds)
            else EventType.INVALID_ACTION
        )
        logger.debug("Refused: %s", exc)
        self.events.emit_new(event_type, message=str(exc), error=type(exc).__name__)
        return False

    # ------------------------------------------------------------------
    # Read-only accessors

    @property
    def dealer_hand(self) -> Hand:
        """Return the dealer hand."""
        return self.round.dealer_hand

    @property
    def hole_card_visible(self) -> bool:
        """Check if the dealer's second card is face up (or not dealt)."""
        cards = self.round.dealer_hand.cards
        return len(cards) < 2 or self.shoe.is_face_up(cards[1])

    @property
    def player_hands(self) -> list[Hand]:
        """Return the player hands in table order."""
        return list(self.round.hands)

    @property
    def active_hand_index(self) -> int:
        """Return the index of the hand taking actions."""
        return self.round.active_index

    @property
    def round_over(self) -> bool:
        """Check if the current round is settled."""
        return self.state == RoundState.ROUND_OVER

    @property
    def dealer_has_blackjack(self) -> bool:
        """Check if the dealer was dealt a natural this round."""
        return self.round.dealer_has_blackjack

    @property
    def bankroll(self) -> Decimal:
        """Return the bankroll balance."""
        return self._bankroll.balance

    @property
    def pending_bet(self) -> Decimal:
        """Return the staged bet."""
        return self._bankroll.pending_bet

    @property
    def reshuffle_after(self) -> int:
        """Return the configured reshuffle threshold."""
        return self._reshuffle_after

    @property
    def running_count(self) -> int:
        """Return the running count of face-up cards."""
        return self.counter.running_count

    @property
    def true_count(self) -> float:
        """Return running count per remaining deck."""
        return self.counter.true_count(self.shoe.decks_remaining)

    @property
    def cards_remaining(self) -> int:
        """Return the number of undealt cards."""
        return self.shoe.cards_remaining

    @property
    def cards_dealt(self) -> int:
        """Return the number of face-up cards dealt since the shuffle."""
        return len(self.shoe.visible_dealt)

    @property
    def hands_played(self) -> int:
        """Return rounds played from this shoe."""
        return self.shoe.hands_played

    def odds(self) -> list[RankOdds]:
        """Project draw odds from face-up cards only."""
        return project_odds(self.shoe.visible_dealt)

    @property
    def can_bet(self) -> bool:
        """Check if bets may be staged."""
        return is_between_rounds(self.state)

    @property
    def can_deal(self) -> bool:
        """Check if a round can be dealt with the pending bet."""
        stake = self._bankroll.pending_bet
        return self.can_bet and stake > 0 and self._bankroll.can_cover(stake)

    @property
    def can_hit(self) -> bool:
        """Check if hitting is allowed."""
        return self._active_hand_or_none() is not None

    @property
    def can_stand(self) -> bool:
        """Check if standing is allowed."""
        return self._active_hand_or_none() is not None

    @property
    def can_double(self) -> bool:
        """Check if doubling is allowed."""
        hand = self._active_hand_or_none()
        return hand is not None and hand.can_double and self._bankroll.can_cover(hand.bet)

    @property
    def can_split(self) -> bool:
        """Check if splitting is allowed."""
        hand = self._active_hand_or_none()
        return (
            hand is not None
            and hand.is_pair
            and len(self.round.hands) < self.table.max_hands
            and self._bankroll.can_cover(hand.bet)
        )

    def _active_hand_or_none(self) -> Hand | None:
        try:
            return self._require_active_hand()
        except IllegalAction:
            return None

    def snapshot(self) -> TableSnapshot:
        """Build a read-only snapshot of the table."""
        # A settled round shows the dealer hand in full
        dealer_face_up = (lambda _card: True) if self.round_over else self.shoe.is_face_up
        return TableSnapshot(
            state=self.state.name.lower(),
            dealer_hand=hand_view(self.round.dealer_hand, dealer_face_up),
            hole_card_visible=self.hole_card_visible,
            player_hands=[hand_view(h, self.shoe.is_face_up) for h in self.round.hands],
            active_hand_index=self.round.active_index,
            round_over=self.round_over,
            dealer_has_blackjack=self.dealer_has_blackjack,
            bankroll=self.bankroll,
            pending_bet=self.pending_bet,
            running_count=self.running_count,
            true_count=self.true_count,
            odds=[OddsView(label=o.label, remaining=o.remaining, probability=o.probability) for o in self.odds()],
            cards_out=[card_view(card, True) for card in self.shoe.visible_dealt],
            cards_remaining=self.cards_remaining,
            cards_dealt=self.shoe.cards_dealt,
            visible_cards_dealt=self.cards_dealt,
            hidden_cards=self.shoe.hidden_count,
            hands_played=self.hands_played,
            reshuffle_after=self._reshuffle_after,
            message=self.round.summary(),
        )

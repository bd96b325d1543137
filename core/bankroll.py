"""Player bankroll and staged bet."""

from decimal import Decimal

from core.errors import InsufficientFunds, InvalidBet


class Bankroll:
    """
    Bankroll balance with a pending (staged) bet.

    Stakes are debited when a round is dealt and credited back at
    settlement; the pending bet is only staged here and never debited
    on its own.
    """

    def __init__(self, balance: Decimal = Decimal("500")) -> None:
        if balance < 0:
            raise ValueError("Bankroll cannot start negative")
        self._balance = Decimal(balance)
        self._pending_bet = Decimal("0")

    @property
    def balance(self) -> Decimal:
        """Return the current balance."""
        return self._balance

    @property
    def pending_bet(self) -> Decimal:
        """Return the staged bet for the next deal."""
        return self._pending_bet

    @property
    def available(self) -> Decimal:
        """Return the balance not already staged as a bet."""
        return self._balance - self._pending_bet

    def stage(self, amount: Decimal) -> Decimal:
        """
        Add a chip to the pending bet.

        Raises:
            InvalidBet: If the amount is not positive or not covered
        """
        amount = Decimal(amount)
        if not amount.is_finite() or amount <= 0:
            raise InvalidBet("Bet amount must be positive")
        if amount > self.available:
            raise InsufficientFunds(f"Insufficient funds: {self.available} available")
        self._pending_bet += amount
        return self._pending_bet

    def set_pending(self, amount: Decimal) -> None:
        """
        Replace the pending bet outright.

        Raises:
            InvalidBet: If the amount is not positive or exceeds the balance
        """
        amount = Decimal(amount)
        if not amount.is_finite() or amount <= 0:
            raise InvalidBet("Bet amount must be positive")
        if amount > self._balance:
            raise InsufficientFunds(f"Insufficient funds: {self._balance} available")
        self._pending_bet = amount

    def clear(self) -> None:
        """Drop the pending bet."""
        self._pending_bet = Decimal("0")

    def can_cover(self, amount: Decimal) -> bool:
        """Check if the balance covers an additional stake."""
        return Decimal(amount) <= self._balance

    def debit(self, amount: Decimal) -> None:
        """Take a stake into escrow."""
        amount = Decimal(amount)
        if amount > self._balance:
            raise InsufficientFunds(f"Insufficient funds: {self._balance} available")
        self._balance -= amount

    def credit(self, amount: Decimal) -> None:
        """Return winnings or a refunded stake."""
        self._balance += Decimal(amount)

    def __repr__(self) -> str:
        return f"Bankroll(balance={self._balance}, pending_bet={self._pending_bet})"

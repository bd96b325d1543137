"""Engine error types."""


class BlackjackError(Exception):
    """Base class for engine errors."""


class InvalidBet(BlackjackError):
    """Bet is non-positive, unaffordable, or changed mid-round."""


class IllegalAction(BlackjackError):
    """Player action is not legal in the current state."""


class ShoeEmpty(BlackjackError, IndexError):
    """Draw attempted on an empty shoe."""


class InsufficientFunds(InvalidBet):
    """Bankroll cannot cover the requested stake."""

"""Round state enumeration."""

from enum import Enum, auto


class RoundState(Enum):
    """
    Round state machine states.

    Flow: NO_ROUND → DEALING → PLAYER_ACTING → DEALER_ACTING → ROUND_OVER → NO_ROUND
    """

    # Between rounds, bets may change
    NO_ROUND = auto()

    # Initial four cards being dealt
    DEALING = auto()

    # Player acts on the active hand
    PLAYER_ACTING = auto()

    # Dealer reveals and draws
    DEALER_ACTING = auto()

    # Settled; next deal or new round allowed
    ROUND_OVER = auto()

    def __str__(self) -> str:
        return self.name.replace("_", " ").title()


def is_between_rounds(state: RoundState) -> bool:
    """Check if bets may be staged or cleared."""
    return state in (RoundState.NO_ROUND, RoundState.ROUND_OVER)

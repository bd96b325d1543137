"""Configuration management with environment variable support."""

import logging
import os
from dataclasses import dataclass, field
from decimal import Decimal

RESHUFFLE_CHOICES = (4, 5)


def _parse_chip_values() -> tuple[Decimal, ...]:
    """Parse BLACKJACK_CHIPS environment variable."""
    chips = os.getenv("BLACKJACK_CHIPS", "1,5,25,100")
    return tuple(Decimal(c.strip()) for c in chips.split(",") if c.strip())


@dataclass(frozen=True)
class TableConfig:
    """Single-deck table configuration."""

    reshuffle_after: int = field(
        default_factory=lambda: int(os.getenv("BLACKJACK_RESHUFFLE_AFTER", "5"))
    )
    starting_bankroll: Decimal = field(
        default_factory=lambda: Decimal(os.getenv("BLACKJACK_STARTING_BANKROLL", "500"))
    )
    min_shoe_cards: int = 4  # Reshuffle before a deal below this
    max_hands: int = 4  # Up to 3 splits
    chip_values: tuple[Decimal, ...] = field(default_factory=_parse_chip_values)

    def __post_init__(self) -> None:
        """Validate table settings."""
        if self.reshuffle_after not in RESHUFFLE_CHOICES:
            raise ValueError("reshuffle_after must be 4 or 5")
        if self.starting_bankroll < 0:
            raise ValueError("starting_bankroll cannot be negative")
        if self.min_shoe_cards < 4:
            raise ValueError("min_shoe_cards must be at least 4")
        if self.max_hands < 1:
            raise ValueError("max_hands must be at least 1")
        if any(chip <= 0 for chip in self.chip_values):
            raise ValueError("chip values must be positive")


@dataclass(frozen=True)
class AppConfig:
    """Application configuration."""

    debug: bool = field(default_factory=lambda: os.getenv("DEBUG", "false").lower() == "true")
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "WARNING").upper())

    table: TableConfig = field(default_factory=TableConfig)


def setup_logging(app_config: AppConfig | None = None) -> None:
    """Configure root logging from the application config."""
    app_config = app_config or config
    level = logging.DEBUG if app_config.debug else app_config.log_level
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# Global configuration instance
config = AppConfig()

"""Tests for environment-driven configuration."""

import logging
import os
import pytest
from decimal import Decimal
from unittest.mock import patch

from config import AppConfig, TableConfig, setup_logging


class TestTableConfig:
    """Tests for TableConfig."""

    def test_defaults(self):
        """Test defaults without environment overrides."""
        with patch.dict(os.environ, {}, clear=True):
            table = TableConfig()
        assert table.reshuffle_after == 5
        assert table.starting_bankroll == Decimal("500")
        assert table.min_shoe_cards == 4
        assert table.max_hands == 4
        assert table.chip_values == (Decimal("1"), Decimal("5"), Decimal("25"), Decimal("100"))

    def test_env_overrides(self):
        """Test environment variables set table values."""
        env = {
            "BLACKJACK_RESHUFFLE_AFTER": "4",
            "BLACKJACK_STARTING_BANKROLL": "250.50",
            "BLACKJACK_CHIPS": "5, 10,50",
        }
        with patch.dict(os.environ, env, clear=True):
            table = TableConfig()
        assert table.reshuffle_after == 4
        assert table.starting_bankroll == Decimal("250.50")
        assert table.chip_values == (Decimal("5"), Decimal("10"), Decimal("50"))

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"reshuffle_after": 3},
            {"reshuffle_after": 6},
            {"starting_bankroll": Decimal("-1")},
            {"min_shoe_cards": 2},
            {"max_hands": 0},
            {"chip_values": (Decimal("0"),)},
        ],
    )
    def test_invalid_values(self, kwargs):
        """Test out-of-range settings are rejected."""
        with pytest.raises(ValueError):
            TableConfig(**kwargs)

    def test_frozen(self):
        """Test config cannot be mutated."""
        table = TableConfig()
        with pytest.raises(AttributeError):
            table.reshuffle_after = 4


class TestAppConfig:
    """Tests for AppConfig and logging setup."""

    def test_debug_flag(self):
        """Test DEBUG and LOG_LEVEL parsing."""
        with patch.dict(os.environ, {"DEBUG": "True", "LOG_LEVEL": "info"}, clear=True):
            app = AppConfig()
        assert app.debug
        assert app.log_level == "INFO"

    def test_setup_logging(self):
        """Test logging is configured at the requested level."""
        with patch("config.logging.basicConfig") as basic_config:
            setup_logging(AppConfig(debug=False, log_level="INFO"))
        assert basic_config.call_args.kwargs["level"] == "INFO"

        with patch("config.logging.basicConfig") as basic_config:
            setup_logging(AppConfig(debug=True, log_level="INFO"))
        assert basic_config.call_args.kwargs["level"] == logging.DEBUG

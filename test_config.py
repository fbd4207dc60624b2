"""
Tests for configuration defaults and weight tables.
"""

import logging
import sys
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / "src"))

from utils.config import Config


def test_weight_tables_sum_to_one():
    Config.validate_weights()


def test_unbalanced_table_is_reported(monkeypatch):
    monkeypatch.setattr(Config, "DECISION_WEIGHTS", {"biz_score": 0.5, "forecast": 0.2})
    with pytest.raises(ValueError, match="DECISION_WEIGHTS"):
        Config.validate_weights()


def test_threshold_bands_are_descending():
    for bands in (Config.RISK_LEVEL_BREAKPOINTS, Config.FAILURE_BREAKPOINTS, Config.RECOMMENDATION_BREAKPOINTS):
        assert list(bands) == sorted(bands, reverse=True)


def test_margin_bounds():
    assert Config.PROFIT_MARGIN_FLOOR < Config.PROFIT_MARGIN_CEILING
    assert Config.BREAK_EVEN_HORIZON_MONTHS == 36


def test_configure_logging(monkeypatch):
    calls = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))

    Config.configure_logging("debug")
    Config.configure_logging("nonsense")

    assert calls[0]["level"] == logging.DEBUG
    assert calls[1]["level"] == logging.INFO

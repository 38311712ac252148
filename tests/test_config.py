import logging
from decimal import Decimal

from proforma.config import Settings, configure_logging


class TestSettings:
    def test_defaults(self):
        s = Settings(_env_file=None)
        assert s.irr_initial_guess == 0.10
        assert s.irr_max_iterations == 100
        assert s.breakeven_rate_step == Decimal("0.25")
        assert s.min_dscr == Decimal("1.25")
        assert s.years_to_positive_ceiling == 30
        assert s.discount_rate_pct == Decimal("10")

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("PROFORMA_MIN_DSCR", "1.4")
        monkeypatch.setenv("PROFORMA_IRR_MAX_ITERATIONS", "50")
        s = Settings(_env_file=None)
        assert s.min_dscr == Decimal("1.4")
        assert s.irr_max_iterations == 50


class TestConfigureLogging:
    def test_applies_level(self, monkeypatch):
        calls = {}
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.update(kwargs))
        configure_logging("debug")
        assert calls["level"] == "DEBUG"

import logging
from decimal import Decimal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "env_prefix": "PROFORMA_"}

    # App
    log_level: str = "INFO"

    # IRR solver (Newton-Raphson)
    irr_initial_guess: float = 0.10
    irr_max_iterations: int = 100
    irr_npv_tolerance: float = 0.01
    irr_min_rate: float = -0.99
    irr_max_rate: float = 10.0

    # NPV discount rate, percent
    discount_rate_pct: Decimal = Decimal("10")

    # Breakeven rate scan, in percentage points
    breakeven_rate_start: Decimal = Decimal("1")
    breakeven_rate_stop: Decimal = Decimal("15")
    breakeven_rate_step: Decimal = Decimal("0.25")

    # Lender coverage threshold
    min_dscr: Decimal = Decimal("1.25")

    # Insight thresholds (percent unless noted)
    thin_spread_pct: Decimal = Decimal("0.5")
    positive_spread_pct: Decimal = Decimal("1.5")
    rate_cushion_pct: Decimal = Decimal("1.0")
    occupancy_warning_pct: Decimal = Decimal("95")
    rent_cushion_warning_pct: Decimal = Decimal("10")
    high_tax_rate_pct: Decimal = Decimal("2.5")
    high_expense_ratio_pct: Decimal = Decimal("50")
    price_per_sqft_low: Decimal = Decimal("180")
    price_per_sqft_high: Decimal = Decimal("350")
    years_to_positive_ceiling: int = 30


settings = Settings()


def configure_logging(level: str | None = None) -> None:
    """Apply the configured log level for host applications.

    The engine itself only creates module loggers; it never configures
    handlers on import.
    """
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

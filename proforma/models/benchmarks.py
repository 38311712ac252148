"""Industry benchmark bands and scoring breakpoints.

Configuration data, not engine logic: pass a custom ``BenchmarkTable`` or
``ScoringRules`` to recalibrate for a region or asset class.
"""

from dataclasses import dataclass, field
from decimal import Decimal

from proforma.models.assumptions import (
    ELECTRIC,
    GAS,
    INSURANCE,
    LANDSCAPING,
    PEST_CONTROL,
    REAL_ESTATE_TAXES,
    REPAIRS_MAINTENANCE,
    SEWER,
    SNOW_REMOVAL,
    TRASH,
    WATER,
)


@dataclass(frozen=True)
class BenchmarkBand:
    """Normal range of an annual per-unit expense."""
    expense_keys: tuple[str, ...]
    low: Decimal
    high: Decimal
    outlier_multiplier: Decimal = Decimal("1.5")


@dataclass(frozen=True)
class BenchmarkTable:
    bands: dict[str, BenchmarkBand] = field(default_factory=dict, hash=False)


# Garden-style multifamily, annual $ per unit
DEFAULT_BENCHMARKS = BenchmarkTable(
    bands={
        "taxes": BenchmarkBand((REAL_ESTATE_TAXES,), Decimal("800"), Decimal("2500")),
        "insurance": BenchmarkBand((INSURANCE,), Decimal("300"), Decimal("900")),
        "utilities": BenchmarkBand(
            (WATER, SEWER, GAS, ELECTRIC, TRASH), Decimal("600"), Decimal("1800")
        ),
        "repairs": BenchmarkBand(
            (REPAIRS_MAINTENANCE, PEST_CONTROL), Decimal("400"), Decimal("1200")
        ),
        "grounds": BenchmarkBand((LANDSCAPING, SNOW_REMOVAL), Decimal("100"), Decimal("400")),
    }
)


@dataclass(frozen=True)
class Bracket:
    """Add ``points`` when the metric is at or above ``threshold``."""
    threshold: Decimal
    points: int


@dataclass(frozen=True)
class ScoringRules:
    base_score: int = 50

    # Brackets are checked top-down; the first match wins, else the fallback.
    cash_on_cash: tuple[Bracket, ...] = (
        Bracket(Decimal("10"), 20),
        Bracket(Decimal("6"), 12),
        Bracket(Decimal("0"), 4),
    )
    cash_on_cash_fallback: int = -15

    dscr: tuple[Bracket, ...] = (
        Bracket(Decimal("1.3"), 12),
        Bracket(Decimal("1.15"), 6),
        Bracket(Decimal("1.0"), 0),
    )
    dscr_fallback: int = -15
    cash_deal_bonus: int = 8

    cap_rate: tuple[Bracket, ...] = (
        Bracket(Decimal("7"), 10),
        Bracket(Decimal("5.5"), 5),
        Bracket(Decimal("4.5"), 0),
    )
    cap_rate_fallback: int = -5

    # Expense ratio: lower is better
    expense_ratio_good: Decimal = Decimal("42")
    expense_ratio_good_points: int = 6
    expense_ratio_bad: Decimal = Decimal("52")
    expense_ratio_bad_points: int = -6

    outlier_penalty: int = 3

    grades: tuple[tuple[int, str], ...] = (
        (80, "A"),
        (70, "B+"),
        (60, "B"),
        (50, "C+"),
        (40, "C"),
        (30, "D"),
    )
    floor_grade: str = "F"


DEFAULT_SCORING = ScoringRules()

"""Operating expense benchmarking against per-unit industry bands.

Pure functions. No I/O. Bands come from a ``BenchmarkTable`` so they can be
recalibrated without touching the engine.
"""

from decimal import Decimal, ROUND_HALF_UP

from proforma.models.benchmarks import BenchmarkBand, BenchmarkTable, DEFAULT_BENCHMARKS
from proforma.models.results import BenchmarkClass, BenchmarkEntry, YearProjection
from proforma.engine.cashflow import per_unit

FOUR_PLACES = Decimal("0.0001")


def classify(amount_per_unit: Decimal, band: BenchmarkBand) -> BenchmarkClass:
    if amount_per_unit < band.low:
        return BenchmarkClass.LOW
    if amount_per_unit <= band.high:
        return BenchmarkClass.NORMAL
    if amount_per_unit > band.high * band.outlier_multiplier:
        return BenchmarkClass.OUTLIER
    return BenchmarkClass.HIGH


def benchmark_expenses(
    year1: YearProjection,
    unit_count: int,
    table: BenchmarkTable = DEFAULT_BENCHMARKS,
) -> list[BenchmarkEntry]:
    """One entry per benchmark category, in table order.

    Amounts are the year-1 itemized expenses summed over the category's keys.
    """
    egi = year1.effective_gross_income
    entries: list[BenchmarkEntry] = []
    for category, band in table.bands.items():
        annual = sum(
            (year1.expenses.get(key, Decimal("0")) for key in band.expense_keys),
            Decimal("0"),
        )
        unit_amount = per_unit(annual, unit_count)
        pct_of_egi = (
            (annual / egi * 100).quantize(FOUR_PLACES, ROUND_HALF_UP) if egi > 0 else Decimal("0")
        )
        entries.append(BenchmarkEntry(
            category=category,
            annual_amount=annual,
            per_unit=unit_amount,
            pct_of_egi=pct_of_egi,
            low=band.low,
            high=band.high,
            classification=classify(unit_amount, band),
        ))
    return entries


def outliers(entries: list[BenchmarkEntry]) -> list[BenchmarkEntry]:
    return [e for e in entries if e.is_outlier]

"""Single-variable sensitivity grids: interest rate, vacancy, purchase price.

Each point replaces one input on the snapshot and re-evaluates year 1 with
the same functions the projection uses, so the point at the base value
reproduces the base case exactly.

Pure functions. No I/O.
"""

from dataclasses import replace
from decimal import Decimal

from proforma.models.assumptions import AssumptionSnapshot, HUNDRED
from proforma.models.results import SensitivityDimension, SensitivityGrid, SensitivityPoint
from proforma.engine.cashflow import cap_rate, cash_on_cash, dscr
from proforma.engine.projection import project_year

RATE_SPAN = Decimal("2")
RATE_STEP = Decimal("0.5")
RATE_FLOOR = Decimal("4")

VACANCY_MIN = Decimal("0")
VACANCY_MAX = Decimal("15")
VACANCY_STEP = Decimal("2.5")

PRICE_SPAN_PCT = Decimal("15")
PRICE_STEP_PCT = Decimal("5")


def stepped_range(start: Decimal, stop: Decimal, step: Decimal, base: Decimal) -> list[Decimal]:
    """Inclusive range from start to stop, with the base value always present."""
    values = []
    value = start
    while value <= stop:
        values.append(value)
        value += step
    if base not in values:
        values.append(base)
    return sorted(values)


def _point(
    snapshot: AssumptionSnapshot,
    value: Decimal,
    is_base: bool,
) -> SensitivityPoint:
    year1 = project_year(snapshot, 1)
    return SensitivityPoint(
        value=value,
        noi=year1.noi,
        debt_service=year1.debt_service,
        cash_flow=year1.cash_flow_before_tax,
        dscr=dscr(year1.noi, year1.debt_service),
        cap_rate=cap_rate(year1.noi, snapshot.purchase_price),
        cash_on_cash=cash_on_cash(year1.cash_flow_before_tax, snapshot.total_cash_required),
        is_base=is_base,
    )


def rate_grid(snapshot: AssumptionSnapshot) -> SensitivityGrid:
    """Interest rate from max(4, base - 2) to base + 2 in 0.5 steps. Debt service only."""
    base = snapshot.interest_rate_pct
    start = max(RATE_FLOOR, base - RATE_SPAN)
    points = tuple(
        _point(replace(snapshot, interest_rate_pct=rate), rate, rate == base)
        for rate in stepped_range(start, base + RATE_SPAN, RATE_STEP, base)
    )
    return SensitivityGrid(SensitivityDimension.RATE, base, points)


def vacancy_grid(snapshot: AssumptionSnapshot) -> SensitivityGrid:
    """Vacancy from 0% to 15% in 2.5 steps. EGI, management, NOI and cash flow move."""
    base = snapshot.vacancy_pct
    points = tuple(
        _point(replace(snapshot, vacancy_pct=vacancy), vacancy, vacancy == base)
        for vacancy in stepped_range(VACANCY_MIN, VACANCY_MAX, VACANCY_STEP, base)
    )
    return SensitivityGrid(SensitivityDimension.VACANCY, base, points)


def price_grid(snapshot: AssumptionSnapshot) -> SensitivityGrid:
    """Purchase price -15% to +15% in 5% steps.

    NOI is fixed; cap rate, loan, debt service and required equity follow the
    perturbed price.
    """
    points = []
    for change in stepped_range(-PRICE_SPAN_PCT, PRICE_SPAN_PCT, PRICE_STEP_PCT, Decimal("0")):
        price = snapshot.purchase_price * (1 + change / HUNDRED)
        points.append(_point(replace(snapshot, purchase_price=price), change, change == 0))
    return SensitivityGrid(SensitivityDimension.PRICE, Decimal("0"), tuple(points))


def sensitivity_grids(snapshot: AssumptionSnapshot) -> tuple[SensitivityGrid, ...]:
    return (rate_grid(snapshot), vacancy_grid(snapshot), price_grid(snapshot))

"""Breakeven analysis: occupancy, rent, interest rate, and time to positive cash flow.

Pure functions. No I/O.
"""

import math
from decimal import Decimal, ROUND_HALF_UP

from proforma.config import Settings, settings as default_settings
from proforma.models.assumptions import AssumptionSnapshot, HUNDRED
from proforma.models.results import Breakeven, YearProjection
from proforma.engine.debt import find_rate_breakeven

TWO_PLACES = Decimal("0.01")


def occupancy_breakeven(year1: YearProjection, management_pct: Decimal) -> Decimal:
    """Occupancy % at which collected income covers fixed expenses, management and debt.

    Capped at 100; an uncoverable deal reports 100.
    """
    collected_share = 1 - management_pct / HUNDRED
    if year1.gross_potential_income <= 0 or collected_share <= 0:
        return HUNDRED
    obligations = year1.fixed_expenses + year1.debt_service
    needed = obligations / (year1.gross_potential_income * collected_share) * HUNDRED
    return min(HUNDRED, max(Decimal("0"), needed)).quantize(TWO_PLACES, ROUND_HALF_UP)


def rent_breakeven(snapshot: AssumptionSnapshot, year1: YearProjection) -> Decimal | None:
    """Average monthly rent per unit that brings year-1 cash flow to zero.

    Solves GPI * (1 - vacancy) * (1 - management) = fixed expenses + debt
    service, then backs out other income. None without units or when
    vacancy and management consume all income.
    """
    if snapshot.unit_count <= 0:
        return None
    retained = (1 - snapshot.vacancy_pct / HUNDRED) * (1 - snapshot.management_pct / HUNDRED)
    if retained <= 0:
        return None
    required_gpi = (year1.fixed_expenses + year1.debt_service) / retained
    required_rent = max(Decimal("0"), required_gpi - year1.other_income)
    return (required_rent / snapshot.unit_count / 12).quantize(TWO_PLACES, ROUND_HALF_UP)


def years_to_positive_cash_flow(
    noi: Decimal,
    debt_service: Decimal,
    rent_growth_pct: Decimal,
    expense_growth_pct: Decimal,
    ceiling: int = 30,
) -> int | None:
    """Years until NOI_1 * (1+g)^n covers debt service.

    g is the net growth of rent over expenses. 0 when cash flow is already
    non-negative; None when NOI never catches up (g <= 0, non-positive NOI)
    or takes longer than ``ceiling`` years.
    """
    if noi >= debt_service:
        return 0
    if noi <= 0:
        return None
    expense_base = 1 + float(expense_growth_pct) / 100
    if expense_base <= 0:
        return None
    g = (1 + float(rent_growth_pct) / 100) / expense_base - 1
    if g <= 0:
        return None
    n = math.ceil(math.log(float(debt_service) / float(noi)) / math.log(1 + g))
    if n > ceiling:
        return None
    return n


def compute_breakeven(
    snapshot: AssumptionSnapshot,
    year1: YearProjection,
    settings: Settings = default_settings,
) -> Breakeven:
    rate = None
    if not snapshot.is_cash_deal:
        rate = find_rate_breakeven(
            snapshot.loan_amount, snapshot.loan_term_years, year1.noi, settings
        )

    return Breakeven(
        occupancy_pct=occupancy_breakeven(year1, snapshot.management_pct),
        rent_per_unit=rent_breakeven(snapshot, year1),
        rate_pct=rate,
        years_to_positive_cash_flow=years_to_positive_cash_flow(
            year1.noi,
            year1.debt_service,
            snapshot.rent_growth_pct,
            snapshot.expense_growth_pct,
            settings.years_to_positive_ceiling,
        ),
    )

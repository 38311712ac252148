"""Point-in-time ratios: cap rate, cash-on-cash, DSCR, GRM, expense ratio.

Pure functions: Decimal in, Decimal out. No I/O. Ratios are in percent
except DSCR and GRM, which are multiples.
"""

from decimal import Decimal, ROUND_HALF_UP

HUNDRED = Decimal("100")
TWO_PLACES = Decimal("0.01")
FOUR_PLACES = Decimal("0.0001")


def _ratio(numerator: Decimal, denominator: Decimal, scale: Decimal = Decimal("1")) -> Decimal:
    if denominator == 0:
        return Decimal("0")
    return (numerator / denominator * scale).quantize(FOUR_PLACES, ROUND_HALF_UP)


def cap_rate(noi: Decimal, value: Decimal) -> Decimal:
    """Cap rate = NOI / property value, in percent."""
    return _ratio(noi, value, HUNDRED)


def cash_on_cash(cash_flow: Decimal, total_cash_invested: Decimal) -> Decimal:
    """Cash-on-cash return = annual cash flow / equity invested, in percent."""
    return _ratio(cash_flow, total_cash_invested, HUNDRED)


def dscr(noi: Decimal, annual_debt_service: Decimal) -> Decimal | None:
    """Debt Service Coverage Ratio = NOI / annual debt service.

    None when there is no debt service: coverage is not applicable, and a
    numeric sentinel would leak into comparisons.
    """
    if annual_debt_service <= 0:
        return None
    return (noi / annual_debt_service).quantize(FOUR_PLACES, ROUND_HALF_UP)


def gross_rent_multiplier(price: Decimal, annual_rent: Decimal) -> Decimal:
    return _ratio(price, annual_rent)


def expense_ratio(total_expenses: Decimal, egi: Decimal) -> Decimal:
    """Operating expenses as a percent of EGI."""
    return _ratio(total_expenses, egi, HUNDRED)


def per_unit(amount: Decimal, units: int | Decimal) -> Decimal:
    if units <= 0:
        return Decimal("0")
    return (amount / units).quantize(TWO_PLACES, ROUND_HALF_UP)


def yield_on_cost(noi: Decimal, total_project_cost: Decimal) -> Decimal:
    """NOI / all-in cost (price + closing + repairs), in percent."""
    return _ratio(noi, total_project_cost, HUNDRED)

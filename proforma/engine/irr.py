"""NPV, IRR, equity multiple and payback.

IRR is solved with Newton-Raphson (scipy) over NPV(r) = sum(CF_t / (1+r)^t)
using the analytic derivative. Solver failure is reported as its own state,
never as a zero rate.

Pure functions. No I/O.
"""

import logging
import warnings
from decimal import Decimal, ROUND_HALF_UP

from scipy.optimize import newton

from proforma.config import Settings, settings as default_settings
from proforma.models.results import IRRResult, IRRStatus

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal("0.01")
FOUR_PLACES = Decimal("0.0001")


def npv(rate: float, cash_flows: list[float]) -> float:
    return sum(cf / (1 + rate) ** t for t, cf in enumerate(cash_flows))


def npv_derivative(rate: float, cash_flows: list[float]) -> float:
    """dNPV/dr = -sum(t * CF_t / (1+r)^(t+1))."""
    return -sum(t * cf / (1 + rate) ** (t + 1) for t, cf in enumerate(cash_flows))


def net_present_value(cash_flows: list[Decimal], discount_rate_pct: Decimal) -> Decimal:
    """NPV in dollars at an annual discount rate given in percent; t=0 is undiscounted."""
    base = 1 + discount_rate_pct / 100
    if base <= 0:
        raise ValueError(f"discount rate must be above -100%, got {discount_rate_pct}")
    total = sum((cf / base ** t for t, cf in enumerate(cash_flows)), Decimal("0"))
    return total.quantize(TWO_PLACES, ROUND_HALF_UP)


def has_sign_change(cash_flows: list[Decimal]) -> bool:
    return any(cf < 0 for cf in cash_flows) and any(cf > 0 for cf in cash_flows)


def compute_irr(
    cash_flows: list[Decimal],
    settings: Settings = default_settings,
) -> IRRResult:
    """Solve for the rate making NPV zero.

    cash_flows[0] is the (negative) initial equity; the last flow includes
    sale proceeds. One-signed or too-short series short-circuit to
    NO_SIGN_CHANGE. A solve that does not reach |NPV| < tolerance inside
    (-0.99, 10) within the iteration cap is NON_CONVERGENT.
    """
    if len(cash_flows) < 2 or not has_sign_change(cash_flows):
        return IRRResult(IRRStatus.NO_SIGN_CHANGE)

    cf_float = [float(cf) for cf in cash_flows]

    try:
        with warnings.catch_warnings():
            # scipy warns on a flat derivative; the result is checked below
            warnings.simplefilter("ignore", RuntimeWarning)
            rate, info = newton(
                npv,
                settings.irr_initial_guess,
                fprime=npv_derivative,
                args=(cf_float,),
                tol=1e-10,
                maxiter=settings.irr_max_iterations,
                full_output=True,
                disp=False,
            )
            rate = float(rate)
            residual = npv(rate, cf_float)
    except (ArithmeticError, ValueError) as e:
        logger.debug("IRR solve failed: %s", e)
        return IRRResult(IRRStatus.NON_CONVERGENT)

    in_range = settings.irr_min_rate < rate < settings.irr_max_rate
    if not (info.converged and in_range and abs(residual) < settings.irr_npv_tolerance):
        logger.debug(
            "IRR did not converge: rate=%s converged=%s residual=%s",
            rate, info.converged, residual,
        )
        return IRRResult(IRRStatus.NON_CONVERGENT, iterations=info.iterations)

    return IRRResult(
        IRRStatus.CONVERGED,
        rate=Decimal(str(rate)),
        iterations=info.iterations,
    )


def compute_equity_multiple(
    distributions: list[Decimal], initial_equity: Decimal
) -> Decimal:
    """Equity multiple = sum of positive distributions / initial equity."""
    if initial_equity <= 0:
        return Decimal("0")
    returned = sum((d for d in distributions if d > 0), Decimal("0"))
    return (returned / initial_equity).quantize(FOUR_PLACES, ROUND_HALF_UP)


def average_cash_on_cash(
    annual_cash_flows: list[Decimal], initial_equity: Decimal
) -> Decimal:
    """Mean annual post-debt cash flow / initial equity, in percent."""
    if not annual_cash_flows or initial_equity <= 0:
        return Decimal("0")
    mean = sum(annual_cash_flows, Decimal("0")) / len(annual_cash_flows)
    return (mean / initial_equity * 100).quantize(FOUR_PLACES, ROUND_HALF_UP)


def payback_years(cash_flows: list[Decimal]) -> int | None:
    """First year whose cumulative cash flow (initial outlay included) is non-negative.

    None when the investment is not recovered within the series.
    """
    cumulative = Decimal("0")
    for year, cf in enumerate(cash_flows):
        cumulative += cf
        if year > 0 and cumulative >= 0:
            return year
    return None


def peak_equity(cash_flows: list[Decimal]) -> Decimal:
    """Largest cumulative amount the investor has out of pocket at any point."""
    cumulative = Decimal("0")
    lowest = Decimal("0")
    for cf in cash_flows:
        cumulative += cf
        lowest = min(lowest, cumulative)
    return abs(lowest)

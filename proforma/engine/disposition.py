"""Property disposition (sale) at the end of the hold period.

Exit value capitalizes the last operating year's NOI at the exit cap rate.
No tax on sale is modeled.

Pure functions. No I/O.
"""

from decimal import Decimal, ROUND_HALF_UP

from proforma.models.assumptions import AssumptionSnapshot, HUNDRED
from proforma.models.results import DispositionResult, YearProjection
from proforma.engine.debt import loan_balance

TWO_PLACES = Decimal("0.01")


def exit_value(terminal_noi: Decimal, exit_cap_rate_pct: Decimal) -> Decimal:
    """Exit value = terminal NOI / exit cap rate. Zero when the cap rate is not positive."""
    if exit_cap_rate_pct <= 0:
        return Decimal("0")
    return (terminal_noi / (exit_cap_rate_pct / HUNDRED)).quantize(TWO_PLACES, ROUND_HALF_UP)


def compute_disposition(
    snapshot: AssumptionSnapshot,
    projections: list[YearProjection],
) -> DispositionResult:
    """Sale at the last projected year: exit value less selling costs and loan payoff."""
    terminal = projections[-1]
    value = exit_value(terminal.noi, snapshot.exit_cap_rate_pct)
    selling_costs = (value * snapshot.selling_costs_pct / HUNDRED).quantize(
        TWO_PLACES, ROUND_HALF_UP
    )
    payoff = loan_balance(
        snapshot.loan_amount,
        snapshot.interest_rate_pct,
        snapshot.loan_term_years,
        terminal.year,
    )

    return DispositionResult(
        exit_year=terminal.year,
        terminal_noi=terminal.noi,
        exit_value=value,
        selling_costs=selling_costs,
        loan_payoff=payoff,
        net_sale_proceeds=value - selling_costs - payoff,
    )

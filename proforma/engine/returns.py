"""Returns calculator: year-1 ratios plus hold-period IRR and multiples.

Pure computation. No I/O. Snapshot + projection in, ReturnsSummary out.
"""

from decimal import Decimal

from proforma.config import Settings, settings as default_settings
from proforma.models.assumptions import AssumptionSnapshot
from proforma.models.results import DispositionResult, ReturnsSummary, YearProjection
from proforma.engine.cashflow import (
    cap_rate,
    cash_on_cash,
    dscr,
    expense_ratio,
    gross_rent_multiplier,
    per_unit,
    yield_on_cost,
)
from proforma.engine.debt import compute_payment
from proforma.engine.irr import (
    average_cash_on_cash,
    compute_equity_multiple,
    compute_irr,
    net_present_value,
    payback_years,
    peak_equity,
)


def equity_cash_flows(
    snapshot: AssumptionSnapshot,
    projections: list[YearProjection],
    disposition: DispositionResult,
) -> list[Decimal]:
    """[-initial equity, CF_1, ..., CF_H + net sale proceeds]."""
    flows = [-snapshot.total_cash_required]
    flows.extend(p.cash_flow_before_tax for p in projections[1:])
    flows[-1] += disposition.net_sale_proceeds
    return flows


def unlevered_cash_flows(
    snapshot: AssumptionSnapshot,
    projections: list[YearProjection],
    disposition: DispositionResult,
) -> list[Decimal]:
    """[-total project cost, NOI_1, ..., NOI_H + exit value - selling costs]."""
    flows = [-snapshot.total_project_cost]
    flows.extend(p.noi for p in projections[1:])
    flows[-1] += disposition.exit_value - disposition.selling_costs
    return flows


def compute_returns(
    snapshot: AssumptionSnapshot,
    projections: list[YearProjection],
    disposition: DispositionResult,
    settings: Settings = default_settings,
) -> ReturnsSummary:
    year1 = projections[1]
    equity = snapshot.total_cash_required
    annual_rent = snapshot.income.monthly_rent * 12

    flows = equity_cash_flows(snapshot, projections, disposition)
    operating_flows = [p.cash_flow_before_tax for p in projections[1:]]
    unlevered = unlevered_cash_flows(snapshot, projections, disposition)

    return ReturnsSummary(
        cap_rate=cap_rate(year1.noi, snapshot.purchase_price),
        cash_on_cash=cash_on_cash(year1.cash_flow_before_tax, equity),
        dscr=dscr(year1.noi, year1.debt_service),
        grm=gross_rent_multiplier(snapshot.purchase_price, annual_rent),
        expense_ratio=expense_ratio(year1.total_expenses, year1.effective_gross_income),
        exit_value=disposition.exit_value,
        irr=compute_irr(flows, settings),
        equity_multiple=compute_equity_multiple(flows[1:], equity),
        average_cash_on_cash=average_cash_on_cash(operating_flows, equity),
        cash_flow_series=tuple(flows),
        npv=net_present_value(flows, settings.discount_rate_pct),
        payback_years=payback_years(flows),
        peak_equity=peak_equity(flows),
        unlevered_irr=compute_irr(unlevered, settings),
        unlevered_equity_multiple=compute_equity_multiple(
            unlevered[1:], snapshot.total_project_cost
        ),
        unlevered_cash_flow_series=tuple(unlevered),
        yield_on_cost=yield_on_cost(year1.noi, snapshot.total_project_cost),
        loan_amount=snapshot.loan_amount,
        total_cash_required=equity,
        monthly_payment=compute_payment(
            snapshot.loan_amount, snapshot.interest_rate_pct, snapshot.loan_term_years
        ),
        annual_debt_service=year1.debt_service,
        price_per_unit=per_unit(snapshot.purchase_price, snapshot.unit_count),
        price_per_sqft=per_unit(snapshot.purchase_price, snapshot.total_sqft),
        year1_noi=year1.noi,
        year1_cash_flow=year1.cash_flow_before_tax,
        year1_total_expenses=year1.total_expenses,
        year1_egi=year1.effective_gross_income,
        year1_gpi=year1.gross_potential_income,
    )

"""Multi-year operating projection.

Year-index convention: index 0 is acquisition close with all flows zero;
indices 1..hold_years are operating years whose growth exponent is
``index - 1`` (year 1 is the base year). Growth is geometric from the base
year, computed by direct exponentiation each year.

Pure functions. No I/O.
"""

from dataclasses import replace
from decimal import Decimal, ROUND_HALF_UP
from types import MappingProxyType

from proforma.models.assumptions import AssumptionSnapshot, HUNDRED, growth_factor
from proforma.models.results import YearProjection
from proforma.engine.debt import amortization_schedule, annual_debt_service, yearly_debt_summary

TWO_PLACES = Decimal("0.01")


def _cents(amount: Decimal) -> Decimal:
    return amount.quantize(TWO_PLACES, ROUND_HALF_UP)


def snapshot_debt_service(snapshot: AssumptionSnapshot) -> Decimal:
    """Constant annual debt service; no refinancing is modeled."""
    return annual_debt_service(
        snapshot.loan_amount, snapshot.interest_rate_pct, snapshot.loan_term_years
    )


def project_year(
    snapshot: AssumptionSnapshot,
    index: int,
    debt_service: Decimal | None = None,
) -> YearProjection:
    """Single projection row. Index 0 is the all-zero acquisition row."""
    if index <= 0:
        return YearProjection(year=0)

    if index > snapshot.loan_term_years:
        debt_service = Decimal("0")
    elif debt_service is None:
        debt_service = snapshot_debt_service(snapshot)

    exponent = index - 1
    income_factor = growth_factor(snapshot.rent_growth_pct, exponent)
    expense_factor = growth_factor(snapshot.expense_growth_pct, exponent)

    # Income
    scheduled_rent = _cents(snapshot.income.scheduled_rent(exponent, snapshot.rent_growth_pct))
    other_income = _cents(snapshot.annual_other_income * income_factor)
    gpi = scheduled_rent + other_income
    vacancy = _cents(gpi * snapshot.vacancy_pct / HUNDRED)
    egi = gpi - vacancy

    # Expenses
    expenses = {
        category: _cents(amount * expense_factor)
        for category, amount in snapshot.expenses.items()
    }
    fixed = sum(expenses.values(), Decimal("0"))
    management = _cents(egi * snapshot.management_pct / HUNDRED)
    total_expenses = fixed + management

    noi = egi - total_expenses

    return YearProjection(
        year=index,
        scheduled_rent=scheduled_rent,
        other_income=other_income,
        gross_potential_income=gpi,
        vacancy_loss=vacancy,
        effective_gross_income=egi,
        expenses=MappingProxyType(expenses),
        fixed_expenses=fixed,
        management=management,
        total_expenses=total_expenses,
        noi=noi,
        debt_service=debt_service,
        cash_flow_before_tax=noi - debt_service,
    )


def project(snapshot: AssumptionSnapshot) -> list[YearProjection]:
    """Project every year 0..hold_years. Returns ``hold_years + 1`` rows.

    Debt service is constant through the loan term and stops once the loan
    is paid off. Each row carries that year's principal, interest and
    year-end balance from the amortization schedule.
    """
    debt_service = snapshot_debt_service(snapshot)
    schedule = amortization_schedule(
        snapshot.loan_amount,
        snapshot.interest_rate_pct,
        snapshot.loan_term_years,
        hold_years=snapshot.hold_years,
    )
    debt_years = {d.year: d for d in yearly_debt_summary(schedule)}

    rows = [YearProjection(year=0, loan_balance=_cents(max(snapshot.loan_amount, Decimal("0"))))]
    for index in range(1, snapshot.hold_years + 1):
        row = project_year(snapshot, index, debt_service)
        debt = debt_years.get(index)
        if debt is not None:
            row = replace(
                row,
                principal_paid=debt.principal,
                interest_paid=debt.interest,
                loan_balance=debt.ending_balance,
            )
        rows.append(row)
    return rows

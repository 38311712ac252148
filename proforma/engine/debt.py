"""Amortization and debt service computation.

Pure functions: Decimal in, Decimal/dataclass out. No I/O.
Rates are annual percentages (7 means 7%).
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP

from proforma.config import Settings, settings as default_settings

TWO_PLACES = Decimal("0.01")
HUNDRED = Decimal("100")


@dataclass(frozen=True)
class AmortizationPayment:
    period: int
    payment: Decimal
    principal: Decimal
    interest: Decimal
    balance: Decimal


@dataclass(frozen=True)
class AmortizationSchedule:
    payments: list[AmortizationPayment]
    monthly_payment: Decimal
    total_interest: Decimal
    total_principal: Decimal


@dataclass(frozen=True)
class DebtYear:
    year: int
    principal: Decimal
    interest: Decimal
    debt_service: Decimal
    ending_balance: Decimal


def compute_payment(principal: Decimal, annual_rate_pct: Decimal, term_years: int) -> Decimal:
    """Fixed monthly payment: P * r(1+r)^n / ((1+r)^n - 1).

    Zero principal (cash deal) pays nothing; a zero rate amortizes
    straight-line over the term.
    """
    n = term_years * 12
    if principal <= 0 or n <= 0:
        return Decimal("0")
    if annual_rate_pct <= 0:
        return (principal / n).quantize(TWO_PLACES, ROUND_HALF_UP)

    r = annual_rate_pct / HUNDRED / 12
    factor = (1 + r) ** n
    payment = principal * (r * factor) / (factor - 1)
    return payment.quantize(TWO_PLACES, ROUND_HALF_UP)


def annual_debt_service(principal: Decimal, annual_rate_pct: Decimal, term_years: int) -> Decimal:
    return compute_payment(principal, annual_rate_pct, term_years) * 12


def find_rate_breakeven(
    loan_amount: Decimal,
    term_years: int,
    target_noi: Decimal,
    settings: Settings = default_settings,
) -> Decimal | None:
    """Lowest scanned rate whose annual debt service meets or exceeds target NOI.

    Linear scan from 1% to 15% in 0.25-point steps. Returns None when no rate
    in range gets there, or when the deal has no debt or no positive NOI.
    """
    if loan_amount <= 0 or target_noi <= 0:
        return None

    rate = settings.breakeven_rate_start
    while rate <= settings.breakeven_rate_stop:
        if annual_debt_service(loan_amount, rate, term_years) >= target_noi:
            return rate
        rate += settings.breakeven_rate_step
    return None


def max_loan_for_dscr(
    noi: Decimal,
    target_dscr: Decimal,
    annual_rate_pct: Decimal,
    term_years: int,
) -> Decimal:
    """Largest loan whose debt service keeps coverage at target DSCR."""
    n = term_years * 12
    if noi <= 0 or target_dscr <= 0 or n <= 0:
        return Decimal("0")

    max_monthly = noi / target_dscr / 12
    if annual_rate_pct <= 0:
        return (max_monthly * n).quantize(TWO_PLACES, ROUND_HALF_UP)

    r = annual_rate_pct / HUNDRED / 12
    loan = max_monthly * (1 - (1 + r) ** -n) / r
    return loan.quantize(TWO_PLACES, ROUND_HALF_UP)


def amortization_schedule(
    principal: Decimal,
    annual_rate_pct: Decimal,
    term_years: int,
    hold_years: int | None = None,
) -> AmortizationSchedule:
    """Generate full or partial amortization schedule.

    Args:
        principal: Loan amount
        annual_rate_pct: Annual interest rate in percent
        term_years: Loan term in years
        hold_years: If provided, only generate schedule for this many years
    """
    pmt = compute_payment(principal, annual_rate_pct, term_years)
    r = max(annual_rate_pct, Decimal("0")) / HUNDRED / 12
    n_periods = min(hold_years or term_years, term_years) * 12 if principal > 0 else 0

    payments: list[AmortizationPayment] = []
    balance = principal
    total_interest = Decimal("0")
    total_principal = Decimal("0")

    for period in range(1, n_periods + 1):
        interest = (balance * r).quantize(TWO_PLACES, ROUND_HALF_UP)
        principal_paid = pmt - interest

        # Final payment adjustment
        if principal_paid > balance or period == term_years * 12:
            principal_paid = balance
            actual_payment = interest + principal_paid
        else:
            actual_payment = pmt

        balance -= principal_paid
        total_interest += interest
        total_principal += principal_paid

        payments.append(AmortizationPayment(
            period=period,
            payment=actual_payment,
            principal=principal_paid,
            interest=interest,
            balance=balance.quantize(TWO_PLACES, ROUND_HALF_UP),
        ))

    return AmortizationSchedule(
        payments=payments,
        monthly_payment=pmt,
        total_interest=total_interest,
        total_principal=total_principal,
    )


def yearly_debt_summary(schedule: AmortizationSchedule) -> list[DebtYear]:
    """Roll monthly payments up into loan years (periods 1-12 are year 1)."""
    yearly: list[DebtYear] = []
    for start in range(0, len(schedule.payments), 12):
        months = schedule.payments[start:start + 12]
        yearly.append(DebtYear(
            year=start // 12 + 1,
            principal=sum((p.principal for p in months), Decimal("0")),
            interest=sum((p.interest for p in months), Decimal("0")),
            debt_service=sum((p.payment for p in months), Decimal("0")),
            ending_balance=months[-1].balance,
        ))
    return yearly


def loan_balance(
    principal: Decimal,
    annual_rate_pct: Decimal,
    term_years: int,
    years_elapsed: int,
) -> Decimal:
    """Remaining balance after ``years_elapsed`` years of scheduled payments."""
    if principal <= 0 or years_elapsed <= 0:
        return max(principal, Decimal("0"))
    if years_elapsed >= term_years:
        return Decimal("0")
    schedule = amortization_schedule(principal, annual_rate_pct, term_years, years_elapsed)
    return schedule.payments[-1].balance

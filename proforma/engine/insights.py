"""Rule-based investment insights.

Each rule is an independent pure (applies, render) pair over one
``InsightContext``. Rules are evaluated in a single pass in declaration
order; a rule that fails is logged and skipped without affecting the
others. Output is stably sorted by category priority. Truncating to a
display count is left to the caller.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Callable

from proforma.config import Settings, settings as default_settings
from proforma.models.assumptions import AssumptionSnapshot, REAL_ESTATE_TAXES
from proforma.models.results import (
    BenchmarkEntry,
    Breakeven,
    Insight,
    InsightCategory,
    ReturnsSummary,
)

logger = logging.getLogger(__name__)


def fmt_money(value: Decimal | float | None) -> str:
    """Whole dollars with thousands separators. Non-numeric values format as 0."""
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        amount = Decimal("0")
    if not amount.is_finite():
        amount = Decimal("0")
    return f"${amount:,.0f}"


def fmt_num(value: Decimal | float | None, places: int = 2) -> str:
    try:
        number = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        number = Decimal("0")
    if not number.is_finite():
        number = Decimal("0")
    return f"{number:,.{places}f}"


@dataclass(frozen=True)
class InsightContext:
    snapshot: AssumptionSnapshot
    returns: ReturnsSummary
    breakeven: Breakeven
    benchmarks: tuple[BenchmarkEntry, ...]
    settings: Settings

    @property
    def spread(self) -> Decimal:
        """Cap rate minus debt cost, in percentage points."""
        return self.returns.cap_rate - self.snapshot.interest_rate_pct

    @property
    def leveraged(self) -> bool:
        return not self.snapshot.is_cash_deal


@dataclass(frozen=True)
class InsightRule:
    name: str
    applies: Callable[[InsightContext], bool]
    render: Callable[[InsightContext], list[Insight]]


# ---- Leverage ----

def _all_cash(ctx: InsightContext) -> list[Insight]:
    return [Insight(
        InsightCategory.OPPORTUNITY,
        "All-Cash Deal",
        f"Unleveraged return: {fmt_num(ctx.returns.cap_rate)}% cap rate with no debt service.",
        "No Debt",
    )]


def _negative_leverage(ctx: InsightContext) -> list[Insight]:
    rate_be = ctx.breakeven.rate_pct
    rate_be_text = f"{fmt_num(rate_be)}%" if rate_be is not None else "N/A"
    return [Insight(
        InsightCategory.CRITICAL,
        "Negative Leverage",
        f"Cap rate ({fmt_num(ctx.returns.cap_rate)}%) is below the cost of debt "
        f"({fmt_num(ctx.snapshot.interest_rate_pct)}%). Rate breakeven: {rate_be_text}.",
        f"{fmt_num(ctx.spread * 100, 0)} bps",
    )]


def _thin_spread(ctx: InsightContext) -> list[Insight]:
    return [Insight(
        InsightCategory.SENSITIVITY,
        "Thin Leverage Spread",
        f"Cap rate exceeds debt cost by only {fmt_num(ctx.spread * 100, 0)} bps. "
        "A small rate or NOI move turns leverage negative.",
        f"+{fmt_num(ctx.spread * 100, 0)} bps",
    )]


def _positive_leverage(ctx: InsightContext) -> list[Insight]:
    return [Insight(
        InsightCategory.OPPORTUNITY,
        "Positive Leverage",
        f"Cap rate exceeds debt cost by {fmt_num(ctx.spread * 100, 0)} bps. "
        "Leverage enhances returns.",
        f"+{fmt_num(ctx.spread * 100, 0)} bps",
    )]


def _rate_cushion(ctx: InsightContext) -> list[Insight]:
    cushion = ctx.breakeven.rate_pct - ctx.snapshot.interest_rate_pct
    if cushion <= 0:
        detail = (
            f"Debt service already exceeds NOI at the current {fmt_num(ctx.snapshot.interest_rate_pct)}% "
            f"rate; breakeven is {fmt_num(ctx.breakeven.rate_pct)}%."
        )
        category = InsightCategory.CRITICAL
    else:
        detail = (
            f"Rates can rise {fmt_num(cushion)} points to {fmt_num(ctx.breakeven.rate_pct)}% "
            "before debt service consumes all NOI."
        )
        category = InsightCategory.SENSITIVITY
    return [Insight(category, "Rate Cushion", detail, f"{fmt_num(cushion)} pts")]


# ---- Breakeven ----

def _occupancy_breakeven(ctx: InsightContext) -> list[Insight]:
    occupancy = ctx.breakeven.occupancy_pct
    current = 100 - ctx.snapshot.vacancy_pct
    category = (
        InsightCategory.SENSITIVITY
        if occupancy > ctx.settings.occupancy_warning_pct
        else InsightCategory.BENCHMARK
    )
    return [Insight(
        category,
        "Occupancy Breakeven",
        f"Need {fmt_num(occupancy, 1)}% occupancy to cover obligations. "
        f"Current: {fmt_num(current, 1)}%.",
        f"{fmt_num(occupancy, 1)}%",
    )]


def _rent_breakeven(ctx: InsightContext) -> list[Insight]:
    rent_be = ctx.breakeven.rent_per_unit
    current = ctx.snapshot.income.monthly_rent / ctx.snapshot.unit_count
    cushion = (current - rent_be) / current * 100
    if cushion < 0:
        category, margin = InsightCategory.CRITICAL, "Below breakeven."
    elif cushion < ctx.settings.rent_cushion_warning_pct:
        category, margin = InsightCategory.SENSITIVITY, f"{fmt_num(cushion, 0)}% margin."
    else:
        category, margin = InsightCategory.BENCHMARK, f"{fmt_num(cushion, 0)}% margin."
    return [Insight(
        category,
        "Rent Breakeven",
        f"Minimum: {fmt_money(rent_be)}/unit/mo. Current: {fmt_money(current)}. {margin}",
        fmt_money(rent_be),
    )]


def _years_to_positive(ctx: InsightContext) -> list[Insight]:
    years = ctx.breakeven.years_to_positive_cash_flow
    if years is None:
        return [Insight(
            InsightCategory.CRITICAL,
            "Persistent Negative Cash Flow",
            "At the assumed rent and expense growth, NOI does not cover debt service "
            f"within {ctx.settings.years_to_positive_ceiling} years.",
            "Never",
        )]
    return [Insight(
        InsightCategory.SENSITIVITY,
        "Negative Cash Flow Period",
        f"Year-1 cash flow is {fmt_money(ctx.returns.year1_cash_flow)}; NOI growth covers "
        f"debt service in about {years} year{'s' if years != 1 else ''}.",
        f"{years} yrs",
    )]


# ---- Expenses ----

def _benchmark_outliers(ctx: InsightContext) -> list[Insight]:
    return [
        Insight(
            InsightCategory.OUTLIER,
            f"{entry.category.title()} Outlier",
            f"{fmt_money(entry.per_unit)}/unit/yr is well above the "
            f"{fmt_money(entry.low)}-{fmt_money(entry.high)} benchmark "
            f"({fmt_num(entry.pct_of_egi, 1)}% of EGI).",
            f"{fmt_money(entry.per_unit)}/unit",
        )
        for entry in ctx.benchmarks
        if entry.is_outlier
    ]


def _effective_tax_rate(ctx: InsightContext) -> Decimal:
    taxes = ctx.snapshot.expenses.get(REAL_ESTATE_TAXES, Decimal("0"))
    return taxes / ctx.snapshot.purchase_price * 100


def _high_tax_rate(ctx: InsightContext) -> list[Insight]:
    rate = _effective_tax_rate(ctx)
    return [Insight(
        InsightCategory.BENCHMARK,
        "High Effective Tax Rate",
        f"Real estate taxes are {fmt_num(rate)}% of the purchase price. "
        "Check for a reassessment on sale.",
        f"{fmt_num(rate)}%",
    )]


def _high_expense_ratio(ctx: InsightContext) -> list[Insight]:
    ratio = ctx.returns.expense_ratio
    return [Insight(
        InsightCategory.BENCHMARK,
        "High Expense Ratio",
        f"{fmt_num(ratio, 0)}% of EGI goes to operating expenses.",
        f"{fmt_num(ratio, 0)}%",
    )]


# ---- Growth & exit ----

def _margin_compression(ctx: InsightContext) -> list[Insight]:
    gap = ctx.snapshot.expense_growth_pct - ctx.snapshot.rent_growth_pct
    return [Insight(
        InsightCategory.SENSITIVITY,
        "Margin Compression",
        f"Expenses ({fmt_num(ctx.snapshot.expense_growth_pct, 1)}%) are growing faster "
        f"than rent ({fmt_num(ctx.snapshot.rent_growth_pct, 1)}%).",
        f"{fmt_num(gap, 1)}%/yr",
    )]


def _margin_expansion(ctx: InsightContext) -> list[Insight]:
    gap = ctx.snapshot.rent_growth_pct - ctx.snapshot.expense_growth_pct
    return [Insight(
        InsightCategory.OPPORTUNITY,
        "Margin Expansion",
        f"Rent ({fmt_num(ctx.snapshot.rent_growth_pct, 1)}%) is growing faster than "
        f"expenses ({fmt_num(ctx.snapshot.expense_growth_pct, 1)}%), widening NOI each year.",
        f"+{fmt_num(gap, 1)}%/yr",
    )]


def _exit_cap(ctx: InsightContext) -> list[Insight]:
    exit_cap = ctx.snapshot.exit_cap_rate_pct
    going_in = ctx.returns.cap_rate
    if exit_cap < going_in:
        detail = (
            f"Exit cap rate ({fmt_num(exit_cap)}%) is below the going-in cap rate "
            f"({fmt_num(going_in)}%): the exit value assumes cap rate compression."
        )
        category = InsightCategory.SENSITIVITY
    else:
        detail = (
            f"Exit cap rate ({fmt_num(exit_cap)}%) is at or above the going-in cap rate "
            f"({fmt_num(going_in)}%): a conservative exit assumption."
        )
        category = InsightCategory.BENCHMARK
    return [Insight(category, "Exit Cap Rate", detail, fmt_money(ctx.returns.exit_value))]


# ---- Pricing & coverage ----

def _price_per_sqft(ctx: InsightContext) -> list[Insight]:
    price = ctx.returns.price_per_sqft
    if price > ctx.settings.price_per_sqft_high:
        return [Insight(
            InsightCategory.BENCHMARK,
            "High Price per SF",
            f"{fmt_money(price)}/SF is above the typical {fmt_money(ctx.settings.price_per_sqft_high)}/SF ceiling.",
            f"{fmt_money(price)}/SF",
        )]
    return [Insight(
        InsightCategory.OPPORTUNITY,
        "Low Price per SF",
        f"{fmt_money(price)}/SF is below the typical {fmt_money(ctx.settings.price_per_sqft_low)}/SF floor.",
        f"{fmt_money(price)}/SF",
    )]


def _low_dscr(ctx: InsightContext) -> list[Insight]:
    coverage = ctx.returns.dscr
    return [Insight(
        InsightCategory.CRITICAL,
        "DSCR Below Lender Minimum",
        f"Debt service coverage of {fmt_num(coverage)}x is below the "
        f"{fmt_num(ctx.settings.min_dscr)}x most lenders require.",
        f"{fmt_num(coverage)}x",
    )]


RULES: tuple[InsightRule, ...] = (
    InsightRule("all_cash", lambda c: not c.leveraged, _all_cash),
    InsightRule("negative_leverage", lambda c: c.leveraged and c.spread < 0, _negative_leverage),
    InsightRule(
        "thin_spread",
        lambda c: c.leveraged and 0 <= c.spread < c.settings.thin_spread_pct,
        _thin_spread,
    ),
    InsightRule(
        "positive_leverage",
        lambda c: c.leveraged and c.spread > c.settings.positive_spread_pct,
        _positive_leverage,
    ),
    InsightRule(
        "rate_cushion",
        lambda c: c.breakeven.rate_pct is not None
        and c.breakeven.rate_pct - c.snapshot.interest_rate_pct < c.settings.rate_cushion_pct,
        _rate_cushion,
    ),
    InsightRule("occupancy_breakeven", lambda c: c.returns.year1_gpi > 0, _occupancy_breakeven),
    InsightRule(
        "rent_breakeven",
        lambda c: c.breakeven.rent_per_unit is not None and c.snapshot.income.monthly_rent > 0,
        _rent_breakeven,
    ),
    InsightRule("benchmark_outliers", lambda c: any(e.is_outlier for e in c.benchmarks), _benchmark_outliers),
    InsightRule(
        "high_tax_rate",
        lambda c: c.snapshot.purchase_price > 0
        and _effective_tax_rate(c) > c.settings.high_tax_rate_pct,
        _high_tax_rate,
    ),
    InsightRule(
        "high_expense_ratio",
        lambda c: c.returns.expense_ratio > c.settings.high_expense_ratio_pct,
        _high_expense_ratio,
    ),
    InsightRule(
        "margin_compression",
        lambda c: c.snapshot.expense_growth_pct > c.snapshot.rent_growth_pct,
        _margin_compression,
    ),
    InsightRule(
        "margin_expansion",
        lambda c: c.snapshot.rent_growth_pct > c.snapshot.expense_growth_pct,
        _margin_expansion,
    ),
    InsightRule(
        "years_to_positive_cash_flow",
        lambda c: c.leveraged and c.returns.year1_cash_flow < 0,
        _years_to_positive,
    ),
    InsightRule("exit_cap_rate", lambda c: c.snapshot.exit_cap_rate_pct > 0, _exit_cap),
    InsightRule(
        "price_per_sqft",
        lambda c: c.returns.price_per_sqft > 0
        and not (c.settings.price_per_sqft_low <= c.returns.price_per_sqft <= c.settings.price_per_sqft_high),
        _price_per_sqft,
    ),
    InsightRule(
        "low_dscr",
        lambda c: c.returns.dscr is not None and c.returns.dscr < c.settings.min_dscr,
        _low_dscr,
    ),
)


def evaluate_rule(rule: InsightRule, ctx: InsightContext) -> list[Insight]:
    """Run one rule in isolation. Failures are logged and yield no insights."""
    try:
        if not rule.applies(ctx):
            return []
        return [
            Insight(i.category, i.title, i.detail, i.value, rule=rule.name)
            for i in rule.render(ctx)
        ]
    except (ArithmeticError, ValueError, TypeError, KeyError, AttributeError) as e:
        logger.warning("Insight rule %s failed: %s", rule.name, e)
        return []


def generate_insights(
    snapshot: AssumptionSnapshot,
    returns: ReturnsSummary,
    breakeven: Breakeven,
    benchmarks: list[BenchmarkEntry],
    settings: Settings = default_settings,
    rules: tuple[InsightRule, ...] = RULES,
) -> list[Insight]:
    ctx = InsightContext(
        snapshot=snapshot,
        returns=returns,
        breakeven=breakeven,
        benchmarks=tuple(benchmarks),
        settings=settings,
    )
    insights: list[Insight] = []
    for rule in rules:
        insights.extend(evaluate_rule(rule, ctx))
    # sorted() is stable: rule order is kept within a category
    return sorted(insights, key=lambda i: i.category.priority)

"""Deal scoring, letter grade, deal-type label and headline KPI tiles.

Pure functions. Breakpoints come from ``ScoringRules`` so they can be
recalibrated without touching the engine.
"""

from decimal import Decimal

from proforma.config import Settings, settings as default_settings
from proforma.models.assumptions import AssumptionSnapshot, REAL_ESTATE_TAXES
from proforma.models.benchmarks import Bracket, DEFAULT_SCORING, ScoringRules
from proforma.models.results import Kpi, KpiStatus, ReturnsSummary
from proforma.engine.cashflow import per_unit
from proforma.engine.insights import fmt_money, fmt_num


def bracket_points(value: Decimal, brackets: tuple[Bracket, ...], fallback: int) -> int:
    """Points for the first bracket whose threshold ``value`` meets, else fallback."""
    for bracket in brackets:
        if value >= bracket.threshold:
            return bracket.points
    return fallback


def score_deal(
    returns: ReturnsSummary,
    outlier_count: int,
    is_cash_deal: bool,
    rules: ScoringRules = DEFAULT_SCORING,
) -> int:
    """0-100 deal score from year-1 ratios and benchmark outliers."""
    score = rules.base_score
    score += bracket_points(returns.cash_on_cash, rules.cash_on_cash, rules.cash_on_cash_fallback)

    if is_cash_deal or returns.dscr is None:
        score += rules.cash_deal_bonus
    else:
        score += bracket_points(returns.dscr, rules.dscr, rules.dscr_fallback)

    score += bracket_points(returns.cap_rate, rules.cap_rate, rules.cap_rate_fallback)

    if returns.expense_ratio <= rules.expense_ratio_good:
        score += rules.expense_ratio_good_points
    elif returns.expense_ratio > rules.expense_ratio_bad:
        score += rules.expense_ratio_bad_points

    score -= rules.outlier_penalty * outlier_count
    return max(0, min(100, score))


def letter_grade(score: int, rules: ScoringRules = DEFAULT_SCORING) -> str:
    for threshold, grade in rules.grades:
        if score >= threshold:
            return grade
    return rules.floor_grade


def classify_deal(snapshot: AssumptionSnapshot, returns: ReturnsSummary) -> str:
    if snapshot.is_cash_deal:
        return "Cash Acquisition"
    if returns.year1_cash_flow < 0:
        return "Appreciation Play"
    if returns.cash_on_cash >= 8:
        return "Cash Flow Investment"
    return "Stabilized Investment"


def _status(
    value: Decimal,
    good_below: Decimal | None = None,
    bad_above: Decimal | None = None,
    good_above: Decimal | None = None,
    bad_below: Decimal | None = None,
) -> KpiStatus:
    if bad_above is not None and value > bad_above:
        return KpiStatus.WARNING
    if bad_below is not None and value < bad_below:
        return KpiStatus.WARNING
    if good_below is not None and value < good_below:
        return KpiStatus.POSITIVE
    if good_above is not None and value > good_above:
        return KpiStatus.POSITIVE
    return KpiStatus.NEUTRAL


def build_kpis(
    snapshot: AssumptionSnapshot,
    returns: ReturnsSummary,
    settings: Settings = default_settings,
) -> tuple[Kpi, ...]:
    """Headline metric tiles. Tiles whose denominator is missing are omitted."""
    kpis: list[Kpi] = []

    if returns.price_per_sqft > 0:
        kpis.append(Kpi(
            "Price/SF",
            fmt_money(returns.price_per_sqft),
            _status(
                returns.price_per_sqft,
                good_below=settings.price_per_sqft_low,
                bad_above=settings.price_per_sqft_high,
            ),
        ))

    if returns.price_per_unit > 0:
        kpis.append(Kpi(
            "Price/Unit",
            fmt_money(returns.price_per_unit),
            _status(returns.price_per_unit, good_below=Decimal("120000"), bad_above=Decimal("200000")),
        ))

    if returns.grm > 0:
        kpis.append(Kpi(
            "GRM",
            f"{fmt_num(returns.grm, 1)}x",
            _status(returns.grm, good_below=Decimal("9"), bad_above=Decimal("12")),
        ))

    if snapshot.unit_count > 0:
        opex_per_unit = per_unit(returns.year1_total_expenses, snapshot.unit_count)
        kpis.append(Kpi(
            "OpEx/Unit",
            fmt_money(opex_per_unit),
            _status(opex_per_unit, good_below=Decimal("5000"), bad_above=Decimal("7500")),
        ))

    if snapshot.total_sqft > 0:
        rent_per_sqft = snapshot.income.monthly_rent / snapshot.total_sqft
        kpis.append(Kpi(
            "Rent/SF",
            f"${fmt_num(rent_per_sqft)}",
            _status(rent_per_sqft, good_above=Decimal("2.5"), bad_below=Decimal("1.5")),
        ))

    if snapshot.purchase_price > 0:
        taxes = snapshot.expenses.get(REAL_ESTATE_TAXES, Decimal("0"))
        tax_rate = taxes / snapshot.purchase_price * 100
        kpis.append(Kpi(
            "Tax Rate",
            f"{fmt_num(tax_rate)}%",
            KpiStatus.NEGATIVE if tax_rate > settings.high_tax_rate_pct else KpiStatus.NEUTRAL,
        ))

    return tuple(kpis)

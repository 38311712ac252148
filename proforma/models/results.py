from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Mapping

from proforma.models.assumptions import AssumptionSnapshot


@dataclass(frozen=True)
class YearProjection:
    year: int  # 0 = acquisition close, 1..hold_years = operating years

    # Income
    scheduled_rent: Decimal = Decimal("0")
    other_income: Decimal = Decimal("0")
    gross_potential_income: Decimal = Decimal("0")
    vacancy_loss: Decimal = Decimal("0")
    effective_gross_income: Decimal = Decimal("0")

    # Expenses
    expenses: Mapping[str, Decimal] = field(default_factory=dict, hash=False)
    fixed_expenses: Decimal = Decimal("0")
    management: Decimal = Decimal("0")
    total_expenses: Decimal = Decimal("0")

    # Operations
    noi: Decimal = Decimal("0")
    debt_service: Decimal = Decimal("0")
    cash_flow_before_tax: Decimal = Decimal("0")

    # Debt components; the balance is at year end
    principal_paid: Decimal = Decimal("0")
    interest_paid: Decimal = Decimal("0")
    loan_balance: Decimal = Decimal("0")


class IRRStatus(Enum):
    CONVERGED = "converged"
    NON_CONVERGENT = "non_convergent"
    NO_SIGN_CHANGE = "no_sign_change"


@dataclass(frozen=True)
class IRRResult:
    status: IRRStatus
    rate: Decimal | None = None  # Fraction, e.g. 0.1234 for 12.34%
    iterations: int = 0

    @property
    def converged(self) -> bool:
        return self.status is IRRStatus.CONVERGED

    @property
    def rate_pct(self) -> Decimal | None:
        if self.rate is None:
            return None
        return (self.rate * 100).quantize(Decimal("0.01"))


@dataclass(frozen=True)
class DispositionResult:
    exit_year: int = 0
    terminal_noi: Decimal = Decimal("0")
    exit_value: Decimal = Decimal("0")
    selling_costs: Decimal = Decimal("0")
    loan_payoff: Decimal = Decimal("0")
    net_sale_proceeds: Decimal = Decimal("0")


@dataclass(frozen=True)
class ReturnsSummary:
    # Year-1 ratios (percent unless noted)
    cap_rate: Decimal = Decimal("0")
    cash_on_cash: Decimal = Decimal("0")
    dscr: Decimal | None = None  # None = not applicable (no debt service)
    grm: Decimal = Decimal("0")  # multiple
    expense_ratio: Decimal = Decimal("0")

    # Hold-period returns
    exit_value: Decimal = Decimal("0")
    irr: IRRResult = field(default_factory=lambda: IRRResult(IRRStatus.NO_SIGN_CHANGE))
    equity_multiple: Decimal = Decimal("0")
    average_cash_on_cash: Decimal = Decimal("0")
    cash_flow_series: tuple[Decimal, ...] = ()
    npv: Decimal = Decimal("0")  # At the configured discount rate
    payback_years: int | None = None  # None = equity not returned within the hold
    peak_equity: Decimal = Decimal("0")

    # Unlevered (property-level) returns
    unlevered_irr: IRRResult = field(default_factory=lambda: IRRResult(IRRStatus.NO_SIGN_CHANGE))
    unlevered_equity_multiple: Decimal = Decimal("0")
    unlevered_cash_flow_series: tuple[Decimal, ...] = ()
    yield_on_cost: Decimal = Decimal("0")

    # Acquisition & debt
    loan_amount: Decimal = Decimal("0")
    total_cash_required: Decimal = Decimal("0")
    monthly_payment: Decimal = Decimal("0")
    annual_debt_service: Decimal = Decimal("0")
    price_per_unit: Decimal = Decimal("0")
    price_per_sqft: Decimal = Decimal("0")

    # Year-1 operations
    year1_noi: Decimal = Decimal("0")
    year1_cash_flow: Decimal = Decimal("0")
    year1_total_expenses: Decimal = Decimal("0")
    year1_egi: Decimal = Decimal("0")
    year1_gpi: Decimal = Decimal("0")

    @property
    def dscr_applicable(self) -> bool:
        return self.dscr is not None


@dataclass(frozen=True)
class Breakeven:
    occupancy_pct: Decimal = Decimal("100")
    rent_per_unit: Decimal | None = None  # Monthly
    rate_pct: Decimal | None = None  # None = not found in scan range, or no debt
    years_to_positive_cash_flow: int | None = None


class SensitivityDimension(Enum):
    RATE = "rate"
    VACANCY = "vacancy"
    PRICE = "price"


@dataclass(frozen=True)
class SensitivityPoint:
    value: Decimal  # Perturbed input (rate %, vacancy %, or price change %)
    noi: Decimal
    debt_service: Decimal
    cash_flow: Decimal
    dscr: Decimal | None
    cap_rate: Decimal
    cash_on_cash: Decimal
    is_base: bool = False


@dataclass(frozen=True)
class SensitivityGrid:
    dimension: SensitivityDimension
    base_value: Decimal
    points: tuple[SensitivityPoint, ...] = ()

    @property
    def base_point(self) -> SensitivityPoint | None:
        return next((p for p in self.points if p.is_base), None)


class BenchmarkClass(Enum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    OUTLIER = "outlier"


@dataclass(frozen=True)
class BenchmarkEntry:
    category: str
    annual_amount: Decimal
    per_unit: Decimal
    pct_of_egi: Decimal
    low: Decimal
    high: Decimal
    classification: BenchmarkClass

    @property
    def is_outlier(self) -> bool:
        return self.classification is BenchmarkClass.OUTLIER


class InsightCategory(Enum):
    """Declaration order is display priority."""
    CRITICAL = "critical"
    OUTLIER = "outlier"
    SENSITIVITY = "sensitivity"
    BENCHMARK = "benchmark"
    OPPORTUNITY = "opportunity"

    @property
    def priority(self) -> int:
        return list(InsightCategory).index(self)


@dataclass(frozen=True)
class Insight:
    category: InsightCategory
    title: str
    detail: str
    value: str | None = None
    rule: str = ""


class KpiStatus(Enum):
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    WARNING = "warning"
    NEGATIVE = "negative"


@dataclass(frozen=True)
class Kpi:
    label: str
    value: str
    status: KpiStatus


@dataclass(frozen=True)
class ScenarioResult:
    """Hold-period returns of one named scenario."""
    name: str
    description: str
    irr: IRRResult
    equity_multiple: Decimal
    cash_on_cash: Decimal
    npv: Decimal


@dataclass(frozen=True)
class InvestmentAnalysis:
    snapshot: AssumptionSnapshot
    projections: tuple[YearProjection, ...]
    returns: ReturnsSummary
    disposition: DispositionResult
    breakeven: Breakeven
    sensitivity: tuple[SensitivityGrid, ...]
    benchmarks: tuple[BenchmarkEntry, ...]
    insights: tuple[Insight, ...]
    score: int
    grade: str
    deal_type: str
    kpis: tuple[Kpi, ...] = ()
    scenarios: tuple[ScenarioResult, ...] = ()

    def grid(self, dimension: SensitivityDimension) -> SensitivityGrid | None:
        return next((g for g in self.sensitivity if g.dimension is dimension), None)

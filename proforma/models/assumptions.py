from dataclasses import dataclass, field
from decimal import Decimal
from types import MappingProxyType
from typing import Mapping

# Itemized operating expense keys (annual amounts). Management is modeled
# separately as a percentage of EGI and never appears in this map.
REAL_ESTATE_TAXES = "real_estate_taxes"
INSURANCE = "insurance"
WATER = "water"
SEWER = "sewer"
GAS = "gas"
ELECTRIC = "electric"
TRASH = "trash"
LANDSCAPING = "landscaping"
SNOW_REMOVAL = "snow_removal"
REPAIRS_MAINTENANCE = "repairs_maintenance"
PEST_CONTROL = "pest_control"
LEGAL_ACCOUNTING = "legal_accounting"
ADVERTISING = "advertising"
MISCELLANEOUS = "miscellaneous"
REPLACEMENT_RESERVES = "replacement_reserves"

EXPENSE_CATEGORIES: tuple[str, ...] = (
    REAL_ESTATE_TAXES,
    INSURANCE,
    WATER,
    SEWER,
    GAS,
    ELECTRIC,
    TRASH,
    LANDSCAPING,
    SNOW_REMOVAL,
    REPAIRS_MAINTENANCE,
    PEST_CONTROL,
    LEGAL_ACCOUNTING,
    ADVERTISING,
    MISCELLANEOUS,
    REPLACEMENT_RESERVES,
)

# Monthly other-income keys
LAUNDRY = "laundry"
PARKING = "parking"
STORAGE = "storage"
OTHER = "other"

HUNDRED = Decimal("100")


def growth_factor(rate_pct: Decimal, exponent: int) -> Decimal:
    """Geometric growth factor from the base year, computed directly."""
    if exponent == 0:
        return Decimal("1")
    return (1 + rate_pct / HUNDRED) ** exponent


@dataclass(frozen=True)
class Unit:
    label: str
    sqft: Decimal
    monthly_rent: Decimal


@dataclass(frozen=True)
class Lease:
    tenant: str
    sqft: Decimal
    base_rent_monthly: Decimal
    escalation_pct: Decimal | None = None  # None = grows with market rent growth


@dataclass(frozen=True)
class RentRoll:
    """Residential unit rent roll: every unit grows at the market rent growth rate."""
    units: tuple[Unit, ...] = ()

    @property
    def unit_count(self) -> int:
        return len(self.units)

    @property
    def total_sqft(self) -> Decimal:
        return sum((u.sqft for u in self.units), Decimal("0"))

    @property
    def monthly_rent(self) -> Decimal:
        return sum((u.monthly_rent for u in self.units), Decimal("0"))

    def scheduled_rent(self, exponent: int, rent_growth_pct: Decimal) -> Decimal:
        return self.monthly_rent * 12 * growth_factor(rent_growth_pct, exponent)


@dataclass(frozen=True)
class LeaseSchedule:
    """Commercial tenant leases, each escalating on its own contractual rate."""
    leases: tuple[Lease, ...] = ()

    @property
    def unit_count(self) -> int:
        return len(self.leases)

    @property
    def total_sqft(self) -> Decimal:
        return sum((lease.sqft for lease in self.leases), Decimal("0"))

    @property
    def monthly_rent(self) -> Decimal:
        return sum((lease.base_rent_monthly for lease in self.leases), Decimal("0"))

    def scheduled_rent(self, exponent: int, rent_growth_pct: Decimal) -> Decimal:
        total = Decimal("0")
        for lease in self.leases:
            rate = lease.escalation_pct if lease.escalation_pct is not None else rent_growth_pct
            total += lease.base_rent_monthly * 12 * growth_factor(rate, exponent)
        return total


IncomeSource = RentRoll | LeaseSchedule


@dataclass(frozen=True)
class AssumptionSnapshot:
    """Immutable deal inputs. All rates are in percent (7 means 7%).

    Build a new snapshot with ``dataclasses.replace`` on every edit.
    """
    # Purchase
    purchase_price: Decimal
    closing_costs: Decimal = Decimal("0")
    immediate_repairs: Decimal = Decimal("0")

    # Financing
    down_payment_pct: Decimal = Decimal("25")
    interest_rate_pct: Decimal = Decimal("7")
    loan_term_years: int = 30

    # Income
    income: IncomeSource = field(default_factory=RentRoll)
    other_income_monthly: Mapping[str, Decimal] = field(default_factory=dict, hash=False)
    vacancy_pct: Decimal = Decimal("5")

    # Expenses
    expenses: Mapping[str, Decimal] = field(default_factory=dict, hash=False)
    management_pct: Decimal = Decimal("5")  # % of EGI

    # Growth & exit
    rent_growth_pct: Decimal = Decimal("3")
    expense_growth_pct: Decimal = Decimal("3")
    hold_years: int = 10
    exit_cap_rate_pct: Decimal = Decimal("6")
    selling_costs_pct: Decimal = Decimal("0")

    def __post_init__(self):
        if self.hold_years < 1:
            raise ValueError(f"hold_years must be at least 1, got {self.hold_years}")
        if self.loan_term_years < 0:
            raise ValueError(f"loan_term_years must be non-negative, got {self.loan_term_years}")
        if self.loan_term_years < 1 and self.loan_amount > 0:
            raise ValueError(
                f"loan_term_years must be at least 1 when financing {self.loan_amount}"
            )
        object.__setattr__(self, "expenses", MappingProxyType(dict(self.expenses)))
        object.__setattr__(
            self, "other_income_monthly", MappingProxyType(dict(self.other_income_monthly))
        )

    @property
    def down_payment(self) -> Decimal:
        return self.purchase_price * min(self.down_payment_pct, HUNDRED) / HUNDRED

    @property
    def loan_amount(self) -> Decimal:
        return self.purchase_price - self.down_payment

    @property
    def is_cash_deal(self) -> bool:
        return self.down_payment_pct >= HUNDRED or self.loan_amount <= 0

    @property
    def ltv_pct(self) -> Decimal:
        if self.purchase_price <= 0:
            return Decimal("0")
        return self.loan_amount / self.purchase_price * HUNDRED

    @property
    def total_cash_required(self) -> Decimal:
        """Initial equity: down payment + closing costs + immediate repairs."""
        return self.down_payment + self.closing_costs + self.immediate_repairs

    @property
    def total_project_cost(self) -> Decimal:
        """All-in acquisition cost: purchase price + closing costs + immediate repairs."""
        return self.purchase_price + self.closing_costs + self.immediate_repairs

    @property
    def annual_other_income(self) -> Decimal:
        return sum(self.other_income_monthly.values(), Decimal("0")) * 12

    @property
    def base_fixed_expenses(self) -> Decimal:
        """Year-1 itemized expenses, excluding management."""
        return sum(self.expenses.values(), Decimal("0"))

    @property
    def unit_count(self) -> int:
        return self.income.unit_count

    @property
    def total_sqft(self) -> Decimal:
        return self.income.total_sqft


# Snapshot fields a named scenario may override
SCENARIO_FIELDS: frozenset[str] = frozenset({
    "rent_growth_pct",
    "expense_growth_pct",
    "vacancy_pct",
    "exit_cap_rate_pct",
    "interest_rate_pct",
    "purchase_price",
})


@dataclass(frozen=True)
class Scenario:
    """A named what-if case: field overrides applied on top of the base snapshot."""
    name: str
    overrides: Mapping[str, Decimal] = field(default_factory=dict, hash=False)
    description: str = ""

    def __post_init__(self):
        unknown = set(self.overrides) - SCENARIO_FIELDS
        if unknown:
            raise ValueError(f"Scenario {self.name!r} overrides unsupported fields: {sorted(unknown)}")
        object.__setattr__(self, "overrides", MappingProxyType(dict(self.overrides)))

"""Pydantic input schemas for building an AssumptionSnapshot from loose data.

Form data is forgiving: a missing, blank or malformed number becomes the
field's default (0 for amounts) instead of failing validation.
"""

from decimal import Decimal, InvalidOperation
from typing import Any

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from proforma.models.assumptions import (
    HUNDRED,
    AssumptionSnapshot,
    Lease,
    LeaseSchedule,
    RentRoll,
    Unit,
)

# Fields where a negative entry is meaningful
SIGNED_FIELDS = {"rent_growth_pct", "expense_growth_pct", "escalation_pct"}


def to_decimal(value: Any) -> Decimal | None:
    """Parse a number from user input. Returns None when it cannot be read."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip().replace(",", "").replace("$", "").replace("%", "")
        if not value:
            return None
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    if not number.is_finite():
        return None
    return number


def _coerce_number(cls, value: Any, info: ValidationInfo):
    default = cls.model_fields[info.field_name].default
    number = to_decimal(value)
    if number is None:
        return default
    if info.field_name in SIGNED_FIELDS:
        # A rate below -100% would flip the sign of every later year
        return max(number, -HUNDRED)
    if number < 0:
        return Decimal("0") if isinstance(default, Decimal) else 0
    return number


def _coerce_text(cls, value: Any) -> str:
    return "" if value is None else str(value)


def _coerce_mapping(value: Any) -> dict[str, Decimal]:
    if not isinstance(value, dict):
        return {}
    coerced = {}
    for key, amount in value.items():
        number = to_decimal(amount)
        coerced[str(key)] = number if number is not None and number > 0 else Decimal("0")
    return coerced


class UnitInput(BaseModel):
    label: str = ""
    sqft: Decimal = Decimal("0")
    monthly_rent: Decimal = Decimal("0")

    coerce_numbers = field_validator("sqft", "monthly_rent", mode="before")(_coerce_number)
    coerce_label = field_validator("label", mode="before")(_coerce_text)

    def to_unit(self) -> Unit:
        return Unit(label=self.label, sqft=self.sqft, monthly_rent=self.monthly_rent)


class LeaseInput(BaseModel):
    tenant: str = ""
    sqft: Decimal = Decimal("0")
    base_rent_monthly: Decimal = Decimal("0")
    escalation_pct: Decimal | None = None

    coerce_numbers = field_validator(
        "sqft", "base_rent_monthly", "escalation_pct", mode="before"
    )(_coerce_number)
    coerce_tenant = field_validator("tenant", mode="before")(_coerce_text)

    def to_lease(self) -> Lease:
        return Lease(
            tenant=self.tenant,
            sqft=self.sqft,
            base_rent_monthly=self.base_rent_monthly,
            escalation_pct=self.escalation_pct,
        )


class SnapshotInput(BaseModel):
    """Deal inputs as submitted. Rates are in percent."""

    # Purchase
    purchase_price: Decimal = Decimal("0")
    closing_costs: Decimal = Decimal("0")
    immediate_repairs: Decimal = Decimal("0")

    # Financing
    down_payment_pct: Decimal = Decimal("25")
    interest_rate_pct: Decimal = Decimal("7")
    loan_term_years: int = 30

    # Income: a residential rent roll, or commercial leases when present
    units: list[UnitInput] = Field(default_factory=list)
    leases: list[LeaseInput] = Field(default_factory=list)
    other_income_monthly: dict[str, Decimal] = Field(default_factory=dict)
    vacancy_pct: Decimal = Decimal("5")

    # Expenses
    expenses: dict[str, Decimal] = Field(default_factory=dict)
    management_pct: Decimal = Decimal("5")

    # Growth & exit
    rent_growth_pct: Decimal = Decimal("3")
    expense_growth_pct: Decimal = Decimal("3")
    hold_years: int = 10
    exit_cap_rate_pct: Decimal = Decimal("6")
    selling_costs_pct: Decimal = Decimal("0")

    coerce_numbers = field_validator(
        "purchase_price",
        "closing_costs",
        "immediate_repairs",
        "down_payment_pct",
        "interest_rate_pct",
        "vacancy_pct",
        "management_pct",
        "rent_growth_pct",
        "expense_growth_pct",
        "exit_cap_rate_pct",
        "selling_costs_pct",
        mode="before",
    )(_coerce_number)

    @field_validator("loan_term_years", "hold_years", mode="before")
    @classmethod
    def coerce_years(cls, value: Any, info: ValidationInfo) -> int:
        number = to_decimal(value)
        default = cls.model_fields[info.field_name].default
        if number is None or number < 0:
            return default
        if info.field_name == "loan_term_years" and number < 1:
            return default
        return int(number)

    @field_validator("expenses", "other_income_monthly", mode="before")
    @classmethod
    def coerce_amounts(cls, value: Any) -> dict[str, Decimal]:
        return _coerce_mapping(value)

    @field_validator("units", "leases", mode="before")
    @classmethod
    def coerce_rows(cls, value: Any) -> list:
        if not isinstance(value, (list, tuple)):
            return []
        return [row for row in value if isinstance(row, (dict, BaseModel))]

    def to_snapshot(self) -> AssumptionSnapshot:
        """Freeze into an engine snapshot. Raises ValueError for a zero hold period."""
        if self.leases:
            income = LeaseSchedule(tuple(lease.to_lease() for lease in self.leases))
        else:
            income = RentRoll(tuple(unit.to_unit() for unit in self.units))

        return AssumptionSnapshot(
            purchase_price=self.purchase_price,
            closing_costs=self.closing_costs,
            immediate_repairs=self.immediate_repairs,
            down_payment_pct=self.down_payment_pct,
            interest_rate_pct=self.interest_rate_pct,
            loan_term_years=self.loan_term_years,
            income=income,
            other_income_monthly=self.other_income_monthly,
            vacancy_pct=self.vacancy_pct,
            expenses=self.expenses,
            management_pct=self.management_pct,
            rent_growth_pct=self.rent_growth_pct,
            expense_growth_pct=self.expense_growth_pct,
            hold_years=self.hold_years,
            exit_cap_rate_pct=self.exit_cap_rate_pct,
            selling_costs_pct=self.selling_costs_pct,
        )

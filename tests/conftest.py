"""Canonical test fixtures used across all engine tests.

Fixture: $2.3M 12-unit garden apartment, 25% down, 7% rate, 30yr fixed.
10 x 550 SF and 2 x 775 SF units at $1,600/mo, laundry $208.33/mo,
$80,515/yr itemized expenses, 5% vacancy, 5% management.
"""

import pytest
from dataclasses import replace
from decimal import Decimal

from proforma.models.assumptions import (
    AssumptionSnapshot,
    Lease,
    LeaseSchedule,
    RentRoll,
    Unit,
    LAUNDRY,
    REAL_ESTATE_TAXES,
    INSURANCE,
    WATER,
    SEWER,
    GAS,
    ELECTRIC,
    LANDSCAPING,
    REPAIRS_MAINTENANCE,
    PEST_CONTROL,
    LEGAL_ACCOUNTING,
    ADVERTISING,
    REPLACEMENT_RESERVES,
)
from proforma.config import Settings


FIXTURE_EXPENSES = {
    REAL_ESTATE_TAXES: Decimal("47915"),
    INSURANCE: Decimal("11000"),
    WATER: Decimal("4000"),
    SEWER: Decimal("2000"),
    GAS: Decimal("1500"),
    ELECTRIC: Decimal("2800"),
    LANDSCAPING: Decimal("2400"),
    REPAIRS_MAINTENANCE: Decimal("4800"),
    PEST_CONTROL: Decimal("600"),
    LEGAL_ACCOUNTING: Decimal("1200"),
    ADVERTISING: Decimal("500"),
    REPLACEMENT_RESERVES: Decimal("1800"),
}


def _units() -> tuple[Unit, ...]:
    small = tuple(
        Unit(f"{n}", Decimal("550"), Decimal("1600")) for n in range(101, 111)
    )
    large = (
        Unit("201", Decimal("775"), Decimal("1600")),
        Unit("202", Decimal("775"), Decimal("1600")),
    )
    return small + large


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture
def scenario() -> AssumptionSnapshot:
    """$2.3M 12-unit acquisition with standard assumptions."""
    return AssumptionSnapshot(
        purchase_price=Decimal("2300000"),
        closing_costs=Decimal("46000"),
        immediate_repairs=Decimal("0"),
        down_payment_pct=Decimal("25"),
        interest_rate_pct=Decimal("7"),
        loan_term_years=30,
        income=RentRoll(_units()),
        other_income_monthly={LAUNDRY: Decimal("208.33")},
        vacancy_pct=Decimal("5"),
        expenses=FIXTURE_EXPENSES,
        management_pct=Decimal("5"),
        rent_growth_pct=Decimal("3"),
        expense_growth_pct=Decimal("3"),
        hold_years=10,
        exit_cap_rate_pct=Decimal("6"),
    )


@pytest.fixture
def cash_deal(scenario: AssumptionSnapshot) -> AssumptionSnapshot:
    """Same property bought all cash."""
    return replace(scenario, down_payment_pct=Decimal("100"))


@pytest.fixture
def lease_deal() -> AssumptionSnapshot:
    """Three-tenant retail strip: two escalating leases, one at market growth."""
    return AssumptionSnapshot(
        purchase_price=Decimal("1500000"),
        closing_costs=Decimal("30000"),
        down_payment_pct=Decimal("30"),
        interest_rate_pct=Decimal("6.5"),
        loan_term_years=25,
        income=LeaseSchedule((
            Lease("Coffee", Decimal("1200"), Decimal("4000"), Decimal("2")),
            Lease("Salon", Decimal("1500"), Decimal("4500"), Decimal("4")),
            Lease("Office", Decimal("2000"), Decimal("3500")),
        )),
        vacancy_pct=Decimal("7"),
        expenses={
            REAL_ESTATE_TAXES: Decimal("18000"),
            INSURANCE: Decimal("6000"),
            REPAIRS_MAINTENANCE: Decimal("5000"),
        },
        management_pct=Decimal("4"),
        rent_growth_pct=Decimal("3"),
        expense_growth_pct=Decimal("2.5"),
        hold_years=7,
        exit_cap_rate_pct=Decimal("7.5"),
        selling_costs_pct=Decimal("5"),
    )

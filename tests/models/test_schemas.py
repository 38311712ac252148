from decimal import Decimal

import pytest

from proforma.models.assumptions import LeaseSchedule, RentRoll
from proforma.models.schemas import SnapshotInput, to_decimal


class TestToDecimal:
    def test_formatted_strings(self):
        assert to_decimal("$2,300,000") == Decimal("2300000")
        assert to_decimal(" 7.5% ") == Decimal("7.5")

    def test_unreadable(self):
        assert to_decimal("abc") is None
        assert to_decimal("") is None
        assert to_decimal(None) is None
        assert to_decimal(float("nan")) is None
        assert to_decimal(True) is None


class TestSnapshotInput:
    def test_malformed_numbers_fall_back(self):
        data = SnapshotInput(purchase_price="abc", vacancy_pct=None, interest_rate_pct="")
        assert data.purchase_price == Decimal("0")
        assert data.vacancy_pct == Decimal("5")
        assert data.interest_rate_pct == Decimal("7")

    def test_negative_amounts_clamped(self):
        data = SnapshotInput(closing_costs="-500", rent_growth_pct="-1")
        assert data.closing_costs == Decimal("0")
        assert data.rent_growth_pct == Decimal("-1")

    def test_years(self):
        data = SnapshotInput(hold_years="x", loan_term_years="25")
        assert data.hold_years == 10
        assert data.loan_term_years == 25

    def test_zero_loan_term_uses_default(self):
        data = SnapshotInput(purchase_price="500000", loan_term_years="0")
        assert data.loan_term_years == 30
        assert data.to_snapshot().loan_term_years == 30

    def test_growth_below_total_loss_clamped(self):
        data = SnapshotInput(rent_growth_pct="-150", expense_growth_pct="-100")
        assert data.rent_growth_pct == Decimal("-100")
        assert data.expense_growth_pct == Decimal("-100")

    def test_expense_map(self):
        data = SnapshotInput(expenses={"insurance": "bad", "real_estate_taxes": "47,915"})
        assert data.expenses == {"insurance": Decimal("0"), "real_estate_taxes": Decimal("47915")}

    def test_non_mapping_expenses(self):
        assert SnapshotInput(expenses="nope").expenses == {}

    def test_junk_rows_dropped(self):
        data = SnapshotInput(units=[{"label": "1", "sqft": "550", "monthly_rent": "1,600"}, "junk"])
        assert len(data.units) == 1
        assert data.units[0].monthly_rent == Decimal("1600")

    def test_numeric_labels_become_text(self):
        data = SnapshotInput(
            units=[{"label": 101, "sqft": "550", "monthly_rent": "1600"}, {"label": None}],
            leases=[{"tenant": 7, "base_rent_monthly": "4000", "escalation_pct": "-250"}],
        )
        assert data.units[0].label == "101"
        assert data.units[1].label == ""
        assert data.leases[0].tenant == "7"
        assert data.leases[0].escalation_pct == Decimal("-100")

    def test_to_snapshot_rent_roll(self):
        data = SnapshotInput(
            purchase_price="2300000",
            units=[{"label": str(n), "sqft": "550", "monthly_rent": "1600"} for n in range(12)],
            other_income_monthly={"laundry": "208.33"},
        )
        snapshot = data.to_snapshot()
        assert isinstance(snapshot.income, RentRoll)
        assert snapshot.unit_count == 12
        assert snapshot.loan_amount == Decimal("1725000")
        assert snapshot.annual_other_income == Decimal("2499.96")

    def test_to_snapshot_leases(self):
        data = SnapshotInput(
            purchase_price="1500000",
            leases=[
                {"tenant": "Coffee", "sqft": "1200", "base_rent_monthly": "4000", "escalation_pct": "2"},
                {"tenant": "Office", "sqft": "2000", "base_rent_monthly": "3500"},
            ],
        )
        snapshot = data.to_snapshot()
        assert isinstance(snapshot.income, LeaseSchedule)
        assert snapshot.income.leases[1].escalation_pct is None

    def test_zero_hold_rejected(self):
        with pytest.raises(ValueError):
            SnapshotInput(purchase_price="100000", hold_years=0).to_snapshot()

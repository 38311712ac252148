from dataclasses import replace
from decimal import Decimal

from proforma.engine.breakeven import (
    compute_breakeven,
    occupancy_breakeven,
    rent_breakeven,
    years_to_positive_cash_flow,
)
from proforma.engine.projection import project_year


class TestOccupancyBreakeven:
    def test_scenario(self, scenario):
        year1 = project_year(scenario, 1)
        occupancy = occupancy_breakeven(year1, scenario.management_pct)
        # (80,515 + debt service) / (232,899.96 * 0.95)
        assert abs(occupancy - Decimal("98.63")) < Decimal("0.05")

    def test_capped_at_100(self, scenario):
        leveraged = replace(scenario, interest_rate_pct=Decimal("12"))
        year1 = project_year(leveraged, 1)
        assert occupancy_breakeven(year1, leveraged.management_pct) == Decimal("100")

    def test_no_income(self, scenario):
        year1 = project_year(replace(scenario, income=replace(scenario.income, units=())), 1)
        assert occupancy_breakeven(year1, Decimal("5")) == Decimal("100")


class TestRentBreakeven:
    def test_scenario(self, scenario):
        year1 = project_year(scenario, 1)
        rent = rent_breakeven(scenario, year1)
        assert abs(rent - Decimal("1661.87")) < Decimal("0.50")

    def test_cash_flow_is_zero_at_breakeven_rent(self, scenario):
        """Re-projecting with the breakeven rent brings cash flow to about zero."""
        rent = rent_breakeven(scenario, project_year(scenario, 1))
        units = tuple(replace(u, monthly_rent=rent) for u in scenario.income.units)
        at_breakeven = replace(scenario, income=replace(scenario.income, units=units))
        cash_flow = project_year(at_breakeven, 1).cash_flow_before_tax
        assert abs(cash_flow) < Decimal("5")

    def test_no_units(self, scenario):
        empty = replace(scenario, income=replace(scenario.income, units=()))
        assert rent_breakeven(empty, project_year(empty, 1)) is None

    def test_full_vacancy(self, scenario):
        vacant = replace(scenario, vacancy_pct=Decimal("100"))
        assert rent_breakeven(vacant, project_year(vacant, 1)) is None


class TestYearsToPositive:
    def test_already_positive(self):
        assert years_to_positive_cash_flow(
            Decimal("120"), Decimal("100"), Decimal("3"), Decimal("3")
        ) == 0

    def test_no_debt(self):
        assert years_to_positive_cash_flow(
            Decimal("120"), Decimal("0"), Decimal("3"), Decimal("3")
        ) == 0

    def test_catches_up(self):
        # g = 3%; log(1.1) / log(1.03) = 3.22
        assert years_to_positive_cash_flow(
            Decimal("100"), Decimal("110"), Decimal("3"), Decimal("0")
        ) == 4

    def test_no_net_growth(self):
        assert years_to_positive_cash_flow(
            Decimal("100"), Decimal("110"), Decimal("3"), Decimal("3")
        ) is None

    def test_non_positive_noi(self):
        assert years_to_positive_cash_flow(
            Decimal("-10"), Decimal("110"), Decimal("5"), Decimal("0")
        ) is None

    def test_beyond_ceiling(self):
        assert years_to_positive_cash_flow(
            Decimal("10"), Decimal("100"), Decimal("1"), Decimal("0")
        ) is None


class TestComputeBreakeven:
    def test_scenario(self, scenario, settings):
        year1 = project_year(scenario, 1)
        result = compute_breakeven(scenario, year1, settings)
        assert result.rate_pct == Decimal("6.50")
        assert result.years_to_positive_cash_flow is None
        assert result.rent_per_unit is not None

    def test_cash_deal_has_no_rate_breakeven(self, cash_deal, settings):
        year1 = project_year(cash_deal, 1)
        result = compute_breakeven(cash_deal, year1, settings)
        assert result.rate_pct is None
        assert result.years_to_positive_cash_flow == 0

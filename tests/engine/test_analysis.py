from dataclasses import replace
from decimal import Decimal

from proforma.engine.analysis import run_analysis
from proforma.models.benchmarks import ScoringRules
from proforma.models.results import IRRStatus, SensitivityDimension


class TestScenarioAnalysis:
    def test_pinned_figures(self, scenario, settings):
        analysis = run_analysis(scenario, settings)
        assert analysis.projections[1].noi == Decimal("129677.21")
        assert analysis.returns.cap_rate == Decimal("5.6381")
        assert Decimal("0.94") < analysis.returns.dscr < Decimal("0.95")
        assert Decimal("-1.31") < analysis.returns.cash_on_cash < Decimal("-1.28")

    def test_score_and_grade(self, scenario, settings):
        analysis = run_analysis(scenario, settings)
        assert analysis.score == 28
        assert analysis.grade == "F"
        assert analysis.deal_type == "Appreciation Play"

    def test_composition(self, scenario, settings):
        analysis = run_analysis(scenario, settings)
        assert len(analysis.projections) == 11
        assert analysis.snapshot is scenario
        assert len(analysis.sensitivity) == 3
        assert len(analysis.benchmarks) == 5
        assert analysis.insights
        assert len(analysis.kpis) == 6
        assert analysis.breakeven.rate_pct == Decimal("6.50")
        assert analysis.returns.irr.status is IRRStatus.CONVERGED

    def test_grid_lookup(self, scenario, settings):
        analysis = run_analysis(scenario, settings)
        grid = analysis.grid(SensitivityDimension.VACANCY)
        assert grid.base_point.noi == analysis.projections[1].noi

    def test_custom_scoring(self, scenario, settings):
        lenient = ScoringRules(base_score=80)
        assert run_analysis(scenario, settings, scoring=lenient).score == 58

    def test_edit_produces_new_analysis(self, scenario, settings):
        before = run_analysis(scenario, settings)
        after = run_analysis(replace(scenario, vacancy_pct=Decimal("10")), settings)
        assert after.projections[1].noi < before.projections[1].noi
        assert before.snapshot.vacancy_pct == Decimal("5")


class TestCashDealAnalysis:
    def test_score_and_type(self, cash_deal, settings):
        analysis = run_analysis(cash_deal, settings)
        assert analysis.returns.dscr is None
        assert analysis.score == 70
        assert analysis.grade == "B+"
        assert analysis.deal_type == "Cash Acquisition"
        assert analysis.breakeven.rate_pct is None


class TestLeaseAnalysis:
    def test_runs_end_to_end(self, lease_deal, settings):
        analysis = run_analysis(lease_deal, settings)
        assert len(analysis.projections) == 8
        assert analysis.disposition.selling_costs > 0
        assert analysis.returns.irr.status is IRRStatus.CONVERGED
        assert 0 <= analysis.score <= 100


class TestExtremeInputs:
    def test_full_rent_decline_completes(self, scenario, settings):
        analysis = run_analysis(replace(scenario, rent_growth_pct=Decimal("-100")), settings)
        assert analysis.projections[2].scheduled_rent == Decimal("0.00")
        assert analysis.projections[1].noi == Decimal("129677.21")
        assert analysis.breakeven.years_to_positive_cash_flow is None

    def test_full_expense_decline_completes(self, scenario, settings):
        analysis = run_analysis(replace(scenario, expense_growth_pct=Decimal("-100")), settings)
        assert analysis.projections[2].fixed_expenses == Decimal("0.00")
        assert analysis.breakeven.years_to_positive_cash_flow is None

    def test_short_loan_term(self, scenario, settings):
        analysis = run_analysis(replace(scenario, loan_term_years=5), settings)
        assert analysis.projections[6].debt_service == Decimal("0")
        assert analysis.disposition.loan_payoff == Decimal("0")

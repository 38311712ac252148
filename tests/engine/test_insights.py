import logging
from dataclasses import replace
from decimal import Decimal

from proforma.engine.benchmarks import benchmark_expenses
from proforma.engine.breakeven import compute_breakeven
from proforma.engine.disposition import compute_disposition
from proforma.engine.insights import (
    RULES,
    InsightRule,
    fmt_money,
    fmt_num,
    generate_insights,
)
from proforma.engine.projection import project
from proforma.engine.returns import compute_returns
from proforma.models.results import Insight, InsightCategory


def _insights(snapshot, settings, rules=RULES):
    projections = project(snapshot)
    year1 = projections[1]
    returns = compute_returns(snapshot, projections, compute_disposition(snapshot, projections), settings)
    breakeven = compute_breakeven(snapshot, year1, settings)
    entries = benchmark_expenses(year1, snapshot.unit_count)
    return generate_insights(snapshot, returns, breakeven, entries, settings, rules)


def _rules_fired(insights):
    return {i.rule for i in insights}


class TestFormatting:
    def test_money(self):
        assert fmt_money(Decimal("1661.87")) == "$1,662"

    def test_non_finite_is_zero(self):
        assert fmt_money(Decimal("NaN")) == "$0"
        assert fmt_num(float("inf")) == "0.00"
        assert fmt_num(None) == "0.00"


class TestScenarioInsights:
    def test_rules_fired(self, scenario, settings):
        fired = _rules_fired(_insights(scenario, settings))
        assert {
            "negative_leverage",
            "rate_cushion",
            "occupancy_breakeven",
            "rent_breakeven",
            "benchmark_outliers",
            "years_to_positive_cash_flow",
            "exit_cap_rate",
            "low_dscr",
        } <= fired
        assert "all_cash" not in fired
        assert "positive_leverage" not in fired
        assert "margin_compression" not in fired
        assert "price_per_sqft" not in fired

    def test_sorted_by_priority(self, scenario, settings):
        insights = _insights(scenario, settings)
        priorities = [i.category.priority for i in insights]
        assert priorities == sorted(priorities)
        assert insights[0].category is InsightCategory.CRITICAL

    def test_negative_leverage_quotes_rate_breakeven(self, scenario, settings):
        insight = next(i for i in _insights(scenario, settings) if i.rule == "negative_leverage")
        assert insight.category is InsightCategory.CRITICAL
        assert "6.50%" in insight.detail

    def test_one_insight_per_outlier(self, scenario, settings):
        outliers = [i for i in _insights(scenario, settings) if i.category is InsightCategory.OUTLIER]
        assert len(outliers) == 1
        assert outliers[0].title == "Taxes Outlier"

    def test_rent_below_breakeven_is_critical(self, scenario, settings):
        insight = next(i for i in _insights(scenario, settings) if i.rule == "rent_breakeven")
        assert insight.category is InsightCategory.CRITICAL

    def test_flat_growth_never_turns_positive(self, scenario, settings):
        insight = next(
            i for i in _insights(scenario, settings) if i.rule == "years_to_positive_cash_flow"
        )
        assert insight.value == "Never"


class TestConditionalRules:
    def test_all_cash(self, cash_deal, settings):
        fired = _rules_fired(_insights(cash_deal, settings))
        assert "all_cash" in fired
        assert "negative_leverage" not in fired
        assert "low_dscr" not in fired
        assert "rate_cushion" not in fired

    def test_positive_leverage(self, scenario, settings):
        cheap_debt = replace(scenario, interest_rate_pct=Decimal("3.5"))
        fired = _rules_fired(_insights(cheap_debt, settings))
        assert "positive_leverage" in fired
        assert "negative_leverage" not in fired

    def test_margin_compression(self, scenario, settings):
        squeezed = replace(scenario, expense_growth_pct=Decimal("4"))
        fired = _rules_fired(_insights(squeezed, settings))
        assert "margin_compression" in fired
        assert "margin_expansion" not in fired

    def test_margin_expansion(self, scenario, settings):
        widening = replace(scenario, rent_growth_pct=Decimal("4"))
        insights = _insights(widening, settings)
        assert "margin_expansion" in _rules_fired(insights)
        years = next(i for i in insights if i.rule == "years_to_positive_cash_flow")
        assert years.value != "Never"

    def test_high_tax_rate(self, scenario, settings):
        taxed = replace(scenario, expenses={**scenario.expenses, "real_estate_taxes": Decimal("69000")})
        assert "high_tax_rate" in _rules_fired(_insights(taxed, settings))

    def test_high_price_per_sqft(self, scenario, settings):
        pricey = replace(scenario, purchase_price=Decimal("3000000"))
        insight = next(i for i in _insights(pricey, settings) if i.rule == "price_per_sqft")
        assert insight.title == "High Price per SF"

    def test_high_expense_ratio(self, scenario, settings):
        costly = replace(scenario, expenses={**scenario.expenses, "insurance": Decimal("40000")})
        assert "high_expense_ratio" in _rules_fired(_insights(costly, settings))


class TestRuleIsolation:
    def test_failing_rule_is_skipped_and_logged(self, scenario, settings, caplog):
        broken = InsightRule("broken", lambda c: True, lambda c: [Insight(
            InsightCategory.CRITICAL, "Broken", str(Decimal("1") / Decimal("0")),
        )])
        working = InsightRule("working", lambda c: True, lambda c: [Insight(
            InsightCategory.OPPORTUNITY, "Working", "ok",
        )])
        with caplog.at_level(logging.WARNING, logger="proforma.engine.insights"):
            insights = _insights(scenario, settings, (broken, working))
        assert [i.rule for i in insights] == ["working"]
        assert "broken" in caplog.text

    def test_stable_within_category(self, scenario, settings):
        first = InsightRule("first", lambda c: True, lambda c: [Insight(InsightCategory.BENCHMARK, "A", "")])
        second = InsightRule("second", lambda c: True, lambda c: [Insight(InsightCategory.BENCHMARK, "B", "")])
        urgent = InsightRule("urgent", lambda c: True, lambda c: [Insight(InsightCategory.CRITICAL, "C", "")])
        insights = _insights(scenario, settings, (first, second, urgent))
        assert [i.rule for i in insights] == ["urgent", "first", "second"]

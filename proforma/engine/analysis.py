"""Analysis orchestrator: composes all engine sub-modules into a full analysis.

Pure computation. No I/O. AssumptionSnapshot in, InvestmentAnalysis out.
"""

import logging

from proforma.config import Settings, settings as default_settings
from proforma.models.assumptions import AssumptionSnapshot, Scenario
from proforma.models.benchmarks import (
    BenchmarkTable,
    DEFAULT_BENCHMARKS,
    DEFAULT_SCORING,
    ScoringRules,
)
from proforma.models.results import InvestmentAnalysis

from proforma.engine.projection import project
from proforma.engine.disposition import compute_disposition
from proforma.engine.returns import compute_returns
from proforma.engine.breakeven import compute_breakeven
from proforma.engine.sensitivity import sensitivity_grids
from proforma.engine.benchmarks import benchmark_expenses, outliers
from proforma.engine.insights import generate_insights
from proforma.engine.scenarios import run_scenarios
from proforma.engine.scoring import build_kpis, classify_deal, letter_grade, score_deal

logger = logging.getLogger(__name__)


def run_analysis(
    snapshot: AssumptionSnapshot,
    settings: Settings = default_settings,
    benchmarks: BenchmarkTable = DEFAULT_BENCHMARKS,
    scoring: ScoringRules = DEFAULT_SCORING,
    scenarios: tuple[Scenario, ...] = (),
) -> InvestmentAnalysis:
    """Run the complete analysis for one assumption snapshot.

    Every figure is derived from the snapshot passed in, so the result is a
    consistent view of a single set of inputs.
    """
    projections = project(snapshot)
    year1 = projections[1]

    disposition = compute_disposition(snapshot, projections)
    returns = compute_returns(snapshot, projections, disposition, settings)
    breakeven = compute_breakeven(snapshot, year1, settings)
    grids = sensitivity_grids(snapshot)

    entries = benchmark_expenses(year1, snapshot.unit_count, benchmarks)
    insights = generate_insights(snapshot, returns, breakeven, entries, settings)

    score = score_deal(returns, len(outliers(entries)), snapshot.is_cash_deal, scoring)
    grade = letter_grade(score, scoring)

    logger.debug(
        "Analysis complete: noi=%s cap_rate=%s irr=%s score=%d grade=%s insights=%d",
        year1.noi, returns.cap_rate, returns.irr.status.value, score, grade, len(insights),
    )

    return InvestmentAnalysis(
        snapshot=snapshot,
        projections=tuple(projections),
        returns=returns,
        disposition=disposition,
        breakeven=breakeven,
        sensitivity=grids,
        benchmarks=tuple(entries),
        insights=tuple(insights),
        score=score,
        grade=grade,
        deal_type=classify_deal(snapshot, returns),
        kpis=build_kpis(snapshot, returns, settings),
        scenarios=run_scenarios(snapshot, scenarios, settings),
    )

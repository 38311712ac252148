"""Named what-if scenarios re-run through the projection and returns pipeline.

Each scenario replaces a few snapshot fields (rent growth, exit cap, rate,
price, ...) and reports the hold-period returns of the modified deal.

Pure functions. No I/O.
"""

import logging
from dataclasses import replace

from proforma.config import Settings, settings as default_settings
from proforma.models.assumptions import AssumptionSnapshot, Scenario
from proforma.models.results import ScenarioResult
from proforma.engine.disposition import compute_disposition
from proforma.engine.projection import project
from proforma.engine.returns import compute_returns

logger = logging.getLogger(__name__)


def apply_scenario(snapshot: AssumptionSnapshot, scenario: Scenario) -> AssumptionSnapshot:
    return replace(snapshot, **scenario.overrides)


def run_scenario(
    snapshot: AssumptionSnapshot,
    scenario: Scenario,
    settings: Settings = default_settings,
) -> ScenarioResult:
    modified = apply_scenario(snapshot, scenario)
    projections = project(modified)
    disposition = compute_disposition(modified, projections)
    returns = compute_returns(modified, projections, disposition, settings)

    logger.debug(
        "Scenario %r: irr=%s equity_multiple=%s",
        scenario.name, returns.irr.rate_pct, returns.equity_multiple,
    )

    return ScenarioResult(
        name=scenario.name,
        description=scenario.description,
        irr=returns.irr,
        equity_multiple=returns.equity_multiple,
        cash_on_cash=returns.cash_on_cash,
        npv=returns.npv,
    )


def run_scenarios(
    snapshot: AssumptionSnapshot,
    scenarios: tuple[Scenario, ...] | list[Scenario],
    settings: Settings = default_settings,
) -> tuple[ScenarioResult, ...]:
    """Results in the order the scenarios were given."""
    return tuple(run_scenario(snapshot, s, settings) for s in scenarios)

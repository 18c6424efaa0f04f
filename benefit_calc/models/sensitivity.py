"""One-at-a-time NPV sensitivity analysis for tornado charts.

Each contribution (one benefit or cost line item) is scaled down and up
by the variation percentage while everything else is held at base, and
the resulting NPV swing is recorded. Items are ranked widest swing first.
"""

from dataclasses import replace
from typing import Dict, List, Sequence

from benefit_calc.models.calculations import calculate_flows
from benefit_calc.models.flows import (
    BENEFIT,
    Contribution,
    ScenarioResult,
    SensitivityItem,
    YearlyFlow,
)
from benefit_calc.utils.logger import setup_logger

logger = setup_logger(__name__)

TORNADO_LABEL_MAX = 20
TORNADO_LABEL_KEEP = 18


def _vary_flows(
    base_flows: Sequence[YearlyFlow],
    contribution: Contribution,
    multiplier: float,
) -> List[YearlyFlow]:
    """Copy base_flows with one contribution scaled by multiplier.

    The contribution's values align positionally with base_flows as given;
    benefit contributions move benefits, cost contributions move costs.
    """
    varied = []
    for i, flow in enumerate(base_flows):
        delta = contribution.value_at(i) * (multiplier - 1)
        if contribution.type == BENEFIT:
            varied.append(replace(flow, benefits=flow.benefits + delta))
        else:
            varied.append(replace(flow, costs=flow.costs + delta))
    return varied


def sensitivity_analysis(
    base_flows: Sequence[YearlyFlow],
    discount_rate: float,
    contributions: Sequence[Contribution],
    variation_pct: float,
) -> List[SensitivityItem]:
    """Rank contributions by the NPV swing they cause when varied.

    For each contribution, NPV is recomputed with its values multiplied by
    (1 - variation_pct) and (1 + variation_pct). Lowering a cost raises
    NPV, so cost items have npv_low > npv_base > npv_high.

    Args:
        base_flows: Aggregated yearly flows, unperturbed.
        discount_rate: Per-period discount rate as decimal.
        contributions: Line items making up the flows.
        variation_pct: Fractional variation, e.g. 0.2 for +/-20%.

    Returns:
        SensitivityItems sorted by spread, largest first.
    """
    npv_base = calculate_flows(base_flows, discount_rate).npv
    items = []

    for contrib in contributions:
        low_flows = _vary_flows(base_flows, contrib, 1 - variation_pct)
        high_flows = _vary_flows(base_flows, contrib, 1 + variation_pct)

        npv_low = calculate_flows(low_flows, discount_rate).npv
        npv_high = calculate_flows(high_flows, discount_rate).npv

        items.append(SensitivityItem(
            label=contrib.label,
            node_id=contrib.node_id,
            npv_low=npv_low,
            npv_base=npv_base,
            npv_high=npv_high,
            spread=abs(npv_high - npv_low),
        ))

    items.sort(key=lambda item: item.spread, reverse=True)
    logger.debug(
        "Sensitivity +/-%.0f%% over %d contributions", variation_pct * 100, len(items)
    )
    return items


def scenario_analysis(
    base_flows: Sequence[YearlyFlow],
    discount_rate: float,
    variation_pct: float,
) -> ScenarioResult:
    """NPV when every benefit moves together by -/+ variation_pct.

    Costs are held at base. Gives the pessimistic/optimistic bounds shown
    next to the per-item tornado.
    """
    low_flows = [replace(f, benefits=f.benefits * (1 - variation_pct)) for f in base_flows]
    high_flows = [replace(f, benefits=f.benefits * (1 + variation_pct)) for f in base_flows]
    return ScenarioResult(
        npv_low=calculate_flows(low_flows, discount_rate).npv,
        npv_base=calculate_flows(base_flows, discount_rate).npv,
        npv_high=calculate_flows(high_flows, discount_rate).npv,
    )


def _short_label(label: str) -> str:
    if len(label) > TORNADO_LABEL_MAX:
        return label[:TORNADO_LABEL_KEEP] + "..."
    return label


def tornado_chart_rows(items: Sequence[SensitivityItem], limit: int = 10) -> List[Dict]:
    """Convert ranked sensitivity items into tornado bar rows.

    Args:
        items: Output of sensitivity_analysis (already ranked).
        limit: Maximum number of bars.

    Returns:
        List of dicts with the shortened name, low/high offsets from base,
        and the absolute NPVs.
    """
    return [
        {
            "name": _short_label(item.label),
            "low": item.npv_low - item.npv_base,
            "high": item.npv_high - item.npv_base,
            "npv_low": item.npv_low,
            "npv_base": item.npv_base,
            "npv_high": item.npv_high,
        }
        for item in list(items)[:limit]
    ]

"""Tests for line-item aggregation into yearly flows and contributions."""

import pytest

from benefit_calc.data.settings import AnalysisSettings
from benefit_calc.models.flows import YearlyFlow
from benefit_calc.models.line_items import (
    AnalysisInputs,
    BenefitLineItem,
    CostAmount,
    CostLineItem,
    YearEstimate,
    build_contributions,
    build_yearly_flows,
)


@pytest.fixture
def benefit_items():
    return [
        BenefitLineItem(node_id="b1", title="Travel time", values=[
            YearEstimate(year=1, pessimistic=50, likely=100, optimistic=150),
            YearEstimate(year=2, pessimistic=100, likely=200, optimistic=300),
        ]),
        BenefitLineItem(node_id="b2", title="Sick leave", values=[
            YearEstimate(year=2, likely=40),
            YearEstimate(year=3, likely=None, optimistic=60),
        ]),
    ]


@pytest.fixture
def cost_items():
    return [
        CostLineItem(node_id="c1", title="Procurement", values=[CostAmount(year=1, amount=500)]),
        CostLineItem(node_id="c2", title="Licences", values=[
            CostAmount(year=y, amount=30) for y in range(1, 4)
        ] + [CostAmount(year=9, amount=999)]),
    ]


class TestYearEstimate:
    def test_resolve_selected(self):
        est = YearEstimate(year=1, pessimistic=1, likely=2, optimistic=3)
        assert est.resolve("pessimistic") == 1
        assert est.resolve() == 2
        assert est.resolve("optimistic") == 3

    def test_missing_is_zero(self):
        assert YearEstimate(year=1).resolve() == 0.0

    def test_unknown_estimate_raises(self):
        with pytest.raises(ValueError):
            YearEstimate(year=1, likely=5).resolve("actual")

    def test_from_dict_coerces_numbers(self):
        est = YearEstimate.from_dict({"year": "2", "likely": "150.5", "optimistic": None})
        assert est == YearEstimate(year=2, likely=150.5)

    def test_from_dict_ignores_unknown_keys(self):
        est = YearEstimate.from_dict({"year": 1, "likely": 5, "note": "x"})
        assert est == YearEstimate(year=1, likely=5.0)

    def test_from_dict_rejects_non_numeric(self):
        with pytest.raises(ValueError):
            YearEstimate.from_dict({"year": 1, "likely": "abc"})

    def test_cost_amount_from_dict(self):
        assert CostAmount.from_dict({"year": 3, "amount": "40", "comment": ""}) == \
            CostAmount(year=3, amount=40.0)
        with pytest.raises(ValueError):
            CostAmount.from_dict({"year": 3, "amount": "forty"})


class TestBuildYearlyFlows:
    def test_likely(self, benefit_items, cost_items):
        flows = build_yearly_flows(benefit_items, cost_items, time_horizon=3)
        assert flows == [
            YearlyFlow(year=1, benefits=100, costs=530),
            YearlyFlow(year=2, benefits=240, costs=30),
            YearlyFlow(year=3, benefits=0, costs=30),
        ]

    def test_optimistic(self, benefit_items, cost_items):
        flows = build_yearly_flows(benefit_items, cost_items, 3, estimate="optimistic")
        assert [f.benefits for f in flows] == [150, 300, 60]
        assert [f.costs for f in flows] == [530, 30, 30]

    def test_values_beyond_horizon_ignored(self, benefit_items, cost_items):
        flows = build_yearly_flows(benefit_items, cost_items, time_horizon=2)
        assert len(flows) == 2
        assert sum(f.costs for f in flows) == 560

    def test_no_items(self):
        flows = build_yearly_flows([], [], time_horizon=2)
        assert flows == [YearlyFlow(year=1), YearlyFlow(year=2)]


class TestBuildContributions:
    def test_benefits_then_costs(self, benefit_items, cost_items):
        contribs = build_contributions(benefit_items, cost_items, time_horizon=3)
        assert [c.node_id for c in contribs] == ["b1", "b2", "c1", "c2"]
        assert [c.type for c in contribs] == ["benefit", "benefit", "cost", "cost"]

    def test_aligned_to_horizon(self, benefit_items, cost_items):
        contribs = build_contributions(benefit_items, cost_items, time_horizon=3)
        assert contribs[0].yearly_values == [100, 200, 0]
        assert contribs[1].yearly_values == [0, 40, 0]
        assert contribs[3].yearly_values == [30, 30, 30]

    def test_contributions_sum_to_flows(self, benefit_items, cost_items):
        flows = build_yearly_flows(benefit_items, cost_items, 3)
        contribs = build_contributions(benefit_items, cost_items, 3)
        for i, flow in enumerate(flows):
            assert flow.benefits == sum(c.yearly_values[i] for c in contribs if c.type == "benefit")
            assert flow.costs == sum(c.yearly_values[i] for c in contribs if c.type == "cost")


class TestAnalysisInputs:
    def test_uses_settings(self, benefit_items, cost_items):
        inputs = AnalysisInputs(
            name="Case",
            settings=AnalysisSettings(time_horizon_years=2, estimate="pessimistic"),
            benefits=benefit_items,
            costs=cost_items,
        )
        assert [f.benefits for f in inputs.yearly_flows()] == [50, 100]
        assert len(inputs.contributions()) == 4

    def test_dict_round_trip(self, benefit_items, cost_items):
        inputs = AnalysisInputs(name="Case", benefits=benefit_items, costs=cost_items)
        restored = AnalysisInputs.from_dict(inputs.to_dict())
        assert restored == inputs

    def test_from_dict_missing_node_id(self):
        with pytest.raises(KeyError):
            AnalysisInputs.from_dict({"benefits": [{"title": "No id"}]})

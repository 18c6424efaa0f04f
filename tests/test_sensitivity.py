"""Tests for one-at-a-time NPV sensitivity and scenario analysis."""

import pytest
from pytest import approx

from benefit_calc.models.calculations import calculate_flows, present_value
from benefit_calc.models.flows import Contribution, SensitivityItem, YearlyFlow
from benefit_calc.models.sensitivity import (
    scenario_analysis,
    sensitivity_analysis,
    tornado_chart_rows,
)


BASE_FLOWS = [
    YearlyFlow(year=1, benefits=0, costs=1000),
    YearlyFlow(year=2, benefits=500, costs=100),
    YearlyFlow(year=3, benefits=500, costs=100),
]

CONTRIBUTIONS = [
    Contribution(node_id="a", label="Benefit A", yearly_values=[0, 300, 300], type="benefit"),
    Contribution(node_id="b", label="Benefit B", yearly_values=[0, 200, 200], type="benefit"),
    Contribution(node_id="c", label="Cost C", yearly_values=[1000, 100, 100], type="cost"),
]


class TestSensitivityAnalysis:
    def test_sorted_by_spread(self):
        results = sensitivity_analysis(BASE_FLOWS, 0.05, CONTRIBUTIONS, 0.2)
        assert len(results) == 3
        for i in range(1, len(results)):
            assert results[i - 1].spread >= results[i].spread
        assert [r.node_id for r in results] == ["c", "a", "b"]

    def test_benefit_direction(self):
        contrib = [Contribution(node_id="a", label="Benefit A",
                                yearly_values=[0, 500, 500], type="benefit")]
        (item,) = sensitivity_analysis(BASE_FLOWS, 0.05, contrib, 0.2)
        assert item.npv_low < item.npv_base < item.npv_high

    def test_cost_direction_inverse(self):
        contrib = [Contribution(node_id="c", label="Cost C",
                                yearly_values=[1000, 100, 100], type="cost")]
        (item,) = sensitivity_analysis(BASE_FLOWS, 0.05, contrib, 0.2)
        assert item.npv_low > item.npv_base > item.npv_high

    def test_base_npv_shared(self):
        base = calculate_flows(BASE_FLOWS, 0.05).npv
        for item in sensitivity_analysis(BASE_FLOWS, 0.05, CONTRIBUTIONS, 0.2):
            assert item.npv_base == base

    @pytest.mark.parametrize("pct", [0.05, 0.2, 0.5])
    def test_spread_is_linear_in_contribution(self, pct):
        """NPV is linear, so spread = 2 * pct * PV(contribution)."""
        for item, contrib in zip(
            sensitivity_analysis(BASE_FLOWS, 0.05, CONTRIBUTIONS[:1], pct), CONTRIBUTIONS[:1]
        ):
            expected = 2 * pct * present_value(contrib.yearly_values, 0.05)
            assert item.spread == approx(expected)
            assert item.spread == approx(abs(item.npv_high - item.npv_low))

    def test_missing_positions_count_as_zero(self):
        contrib = [Contribution(node_id="x", label="Short", yearly_values=[100], type="benefit")]
        (item,) = sensitivity_analysis(BASE_FLOWS, 0.05, contrib, 0.2)
        assert item.spread == approx(2 * 0.2 * 100 / 1.05)

    def test_values_align_with_flows_as_given(self):
        """Positions follow the caller's flow order, not the sorted years."""
        reversed_flows = list(reversed(BASE_FLOWS))
        contrib = [Contribution(node_id="x", label="First position",
                                yearly_values=[100, 0, 0], type="benefit")]
        (item,) = sensitivity_analysis(reversed_flows, 0.05, contrib, 0.2)
        assert item.spread == approx(2 * 0.2 * 100 / 1.05 ** 3)

    def test_zero_contribution_has_no_spread(self):
        contrib = [Contribution(node_id="z", label="Empty", yearly_values=[0, 0, 0], type="cost")]
        (item,) = sensitivity_analysis(BASE_FLOWS, 0.05, contrib, 0.2)
        assert item.spread == 0
        assert item.npv_low == item.npv_base == item.npv_high

    def test_ties_keep_input_order(self):
        contribs = [
            Contribution(node_id="first", label="First", yearly_values=[0, 100, 0]),
            Contribution(node_id="second", label="Second", yearly_values=[0, 100, 0]),
        ]
        results = sensitivity_analysis(BASE_FLOWS, 0.05, contribs, 0.2)
        assert [r.node_id for r in results] == ["first", "second"]

    def test_no_contributions(self):
        assert sensitivity_analysis(BASE_FLOWS, 0.05, [], 0.2) == []

    def test_empty_flows(self):
        (item,) = sensitivity_analysis([], 0.05, CONTRIBUTIONS[:1], 0.2)
        assert item.npv_low == item.npv_base == item.npv_high == 0
        assert item.spread == 0

    def test_base_flows_not_mutated(self):
        before = [f.to_dict() for f in BASE_FLOWS]
        sensitivity_analysis(BASE_FLOWS, 0.05, CONTRIBUTIONS, 0.3)
        assert [f.to_dict() for f in BASE_FLOWS] == before


class TestContribution:
    def test_invalid_type_raises(self):
        with pytest.raises(ValueError):
            Contribution(node_id="x", label="Bad", yearly_values=[1], type="revenue")

    def test_from_dict(self):
        contrib = Contribution.from_dict(
            {"node_id": 7, "label": "Cost", "yearly_values": [1, 2], "type": "cost"}
        )
        assert contrib.node_id == "7"
        assert contrib.yearly_values == [1.0, 2.0]
        assert contrib.value_at(5) == 0.0

    def test_unhashable_but_comparable(self):
        a = Contribution(node_id="x", label="A", yearly_values=[1.0])
        assert a == Contribution(node_id="x", label="A", yearly_values=[1.0])
        with pytest.raises(TypeError):
            hash(a)


class TestScenarioAnalysis:
    def test_all_benefits_scaled(self):
        scenario = scenario_analysis(BASE_FLOWS, 0.05, 0.2)
        pv_benefits = calculate_flows(BASE_FLOWS, 0.05).pv_benefits
        assert scenario.npv_base == calculate_flows(BASE_FLOWS, 0.05).npv
        assert scenario.npv_high - scenario.npv_base == approx(0.2 * pv_benefits)
        assert scenario.npv_base - scenario.npv_low == approx(0.2 * pv_benefits)

    def test_order(self):
        scenario = scenario_analysis(BASE_FLOWS, 0.03, 0.1)
        assert scenario.npv_low < scenario.npv_base < scenario.npv_high


class TestTornadoChartRows:
    def _item(self, label, low, base, high):
        return SensitivityItem(label=label, node_id=label, npv_low=low, npv_base=base,
                               npv_high=high, spread=abs(high - low))

    def test_offsets_from_base(self):
        rows = tornado_chart_rows([self._item("A", 80, 100, 130)])
        assert rows[0]["low"] == -20
        assert rows[0]["high"] == 30
        assert rows[0]["npv_base"] == 100

    def test_long_labels_shortened(self):
        rows = tornado_chart_rows([self._item("Reduced administrative time", 0, 1, 2)])
        assert rows[0]["name"] == "Reduced administra..."
        rows = tornado_chart_rows([self._item("Exactly twenty chars", 0, 1, 2)])
        assert rows[0]["name"] == "Exactly twenty chars"

    def test_limit(self):
        items = [self._item(f"Item {i}", 0, 1, 2) for i in range(15)]
        assert len(tornado_chart_rows(items)) == 10
        assert len(tornado_chart_rows(items, limit=3)) == 3

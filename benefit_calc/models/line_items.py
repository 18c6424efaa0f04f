"""Benefit and cost line items and their aggregation into yearly flows.

A case study holds many line items, each with per-year estimates.
Benefits carry pessimistic / likely / optimistic (and actual) values;
costs carry a single planned amount. The engine works on one resolved
series, so this module picks an estimate and sums items per year.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from benefit_calc.data.settings import ESTIMATES, AnalysisSettings
from benefit_calc.models.flows import BENEFIT, COST, Contribution, YearlyFlow


def _optional_float(value) -> Optional[float]:
    return float(value) if value is not None else None


@dataclass
class YearEstimate:
    """Three-point benefit estimate for one year.

    Attributes:
        year: Period number, 1-based.
        pessimistic: Low estimate, or None if not entered.
        likely: Most likely estimate, or None.
        optimistic: High estimate, or None.
        actual: Realized value recorded during follow-up, or None.
    """

    year: int
    pessimistic: Optional[float] = None
    likely: Optional[float] = None
    optimistic: Optional[float] = None
    actual: Optional[float] = None

    def resolve(self, estimate: str = "likely") -> float:
        """Return the selected estimate, 0.0 when it is missing."""
        if estimate not in ESTIMATES:
            raise ValueError(f"estimate must be one of {ESTIMATES}, got {estimate!r}")
        value = getattr(self, estimate)
        return float(value) if value is not None else 0.0

    def to_dict(self) -> dict:
        return {
            "year": self.year,
            "pessimistic": self.pessimistic,
            "likely": self.likely,
            "optimistic": self.optimistic,
            "actual": self.actual,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "YearEstimate":
        return cls(
            year=int(data["year"]),
            pessimistic=_optional_float(data.get("pessimistic")),
            likely=_optional_float(data.get("likely")),
            optimistic=_optional_float(data.get("optimistic")),
            actual=_optional_float(data.get("actual")),
        )


@dataclass
class CostAmount:
    """Planned (and optionally realized) cost for one year."""

    year: int
    amount: Optional[float] = None
    actual: Optional[float] = None

    def to_dict(self) -> dict:
        return {"year": self.year, "amount": self.amount, "actual": self.actual}

    @classmethod
    def from_dict(cls, data: dict) -> "CostAmount":
        return cls(
            year=int(data["year"]),
            amount=_optional_float(data.get("amount")),
            actual=_optional_float(data.get("actual")),
        )


@dataclass
class BenefitLineItem:
    """A benefit node of the value map with its yearly estimates."""

    node_id: str
    title: str = ""
    values: List[YearEstimate] = field(default_factory=list)

    def value_for_year(self, year: int, estimate: str = "likely") -> float:
        for v in self.values:
            if v.year == year:
                return v.resolve(estimate)
        return 0.0

    def to_dict(self) -> dict:
        return {
            "node_id": self.node_id,
            "title": self.title,
            "values": [v.to_dict() for v in self.values],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "BenefitLineItem":
        return cls(
            node_id=str(data["node_id"]),
            title=data.get("title", ""),
            values=[YearEstimate.from_dict(v) for v in data.get("values", [])],
        )


@dataclass
class CostLineItem:
    """A cost node of the value map with its yearly amounts."""

    node_id: str
    title: str = ""
    values: List[CostAmount] = field(default_factory=list)

    def value_for_year(self, year: int) -> float:
        for v in self.values:
            if v.year == year:
                return float(v.amount) if v.amount is not None else 0.0
        return 0.0

    def to_dict(self) -> dict:
        return {
            "node_id": self.node_id,
            "title": self.title,
            "values": [v.to_dict() for v in self.values],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CostLineItem":
        return cls(
            node_id=str(data["node_id"]),
            title=data.get("title", ""),
            values=[CostAmount.from_dict(v) for v in data.get("values", [])],
        )


def _years(time_horizon: int) -> List[int]:
    return list(range(1, time_horizon + 1))


def build_yearly_flows(
    benefit_items: Sequence[BenefitLineItem],
    cost_items: Sequence[CostLineItem],
    time_horizon: int,
    estimate: str = "likely",
) -> List[YearlyFlow]:
    """Sum all line items into one YearlyFlow per year 1..time_horizon.

    Args:
        benefit_items: Benefit line items.
        cost_items: Cost line items.
        time_horizon: Number of years in the appraisal horizon.
        estimate: Which benefit estimate to use.

    Returns:
        Flows ordered by year.
    """
    return [
        YearlyFlow(
            year=y,
            benefits=sum(item.value_for_year(y, estimate) for item in benefit_items),
            costs=sum(item.value_for_year(y) for item in cost_items),
        )
        for y in _years(time_horizon)
    ]


def build_contributions(
    benefit_items: Sequence[BenefitLineItem],
    cost_items: Sequence[CostLineItem],
    time_horizon: int,
    estimate: str = "likely",
) -> List[Contribution]:
    """Turn line items into sensitivity contributions aligned to years 1..N.

    Benefit contributions come first, then costs, each in input order.
    """
    years = _years(time_horizon)
    contributions = [
        Contribution(
            node_id=item.node_id,
            label=item.title,
            yearly_values=[item.value_for_year(y, estimate) for y in years],
            type=BENEFIT,
        )
        for item in benefit_items
    ]
    contributions.extend(
        Contribution(
            node_id=item.node_id,
            label=item.title,
            yearly_values=[item.value_for_year(y) for y in years],
            type=COST,
        )
        for item in cost_items
    )
    return contributions


@dataclass
class AnalysisInputs:
    """Complete calculation inputs for one case study.

    Attributes:
        name: Case study name.
        settings: Discount rate, horizon, and sensitivity settings.
        benefits: Benefit line items.
        costs: Cost line items.
    """

    name: str = ""
    settings: AnalysisSettings = field(default_factory=AnalysisSettings)
    benefits: List[BenefitLineItem] = field(default_factory=list)
    costs: List[CostLineItem] = field(default_factory=list)

    def yearly_flows(self) -> List[YearlyFlow]:
        return build_yearly_flows(
            self.benefits, self.costs,
            self.settings.time_horizon_years, self.settings.estimate,
        )

    def contributions(self) -> List[Contribution]:
        return build_contributions(
            self.benefits, self.costs,
            self.settings.time_horizon_years, self.settings.estimate,
        )

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "settings": self.settings.to_dict(),
            "benefits": [b.to_dict() for b in self.benefits],
            "costs": [c.to_dict() for c in self.costs],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "AnalysisInputs":
        return cls(
            name=data.get("name", ""),
            settings=AnalysisSettings.from_dict(data.get("settings", {})),
            benefits=[BenefitLineItem.from_dict(b) for b in data.get("benefits", [])],
            costs=[CostLineItem.from_dict(c) for c in data.get("costs", [])],
        )

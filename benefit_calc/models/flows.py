"""Value types for the benefit realization calculation engine.

Defines the yearly flow series fed into the engine, the calculation
result bundle, and the sensitivity (tornado) types. All types are
frozen dataclasses: they are built once per calculation and discarded.
Types holding list fields compare by value but are explicitly unhashable;
freezing stops field reassignment, not mutation of the lists themselves.
Each supports to_dict()/from_dict() for JSON interchange.
"""

from dataclasses import dataclass, field
from typing import List, Optional

BENEFIT = "benefit"
COST = "cost"
CONTRIBUTION_TYPES = (BENEFIT, COST)


@dataclass(frozen=True)
class YearlyFlow:
    """Aggregated benefits and costs for one period of the horizon.

    Attributes:
        year: Period number, 1-based (year 1 is discounted one full period).
        benefits: Total benefits for the period.
        costs: Total costs for the period.
    """

    year: int
    benefits: float = 0.0
    costs: float = 0.0

    @property
    def net(self) -> float:
        return self.benefits - self.costs

    def to_dict(self) -> dict:
        return {"year": self.year, "benefits": self.benefits, "costs": self.costs}

    @classmethod
    def from_dict(cls, data: dict) -> "YearlyFlow":
        return cls(
            year=int(data["year"]),
            benefits=float(data.get("benefits", 0.0)),
            costs=float(data.get("costs", 0.0)),
        )


@dataclass(frozen=True)
class CalculationInput:
    """Engine input: a yearly flow series and a per-period discount rate.

    Attributes:
        flows: One YearlyFlow per period, in any order.
        discount_rate: Per-period rate as decimal (e.g., 0.03 for 3%).
    """

    flows: List[YearlyFlow] = field(default_factory=list)
    discount_rate: float = 0.03

    __hash__ = None

    def to_dict(self) -> dict:
        return {
            "flows": [f.to_dict() for f in self.flows],
            "discount_rate": self.discount_rate,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CalculationInput":
        return cls(
            flows=[YearlyFlow.from_dict(f) for f in data.get("flows", [])],
            discount_rate=float(data.get("discount_rate", 0.03)),
        )


@dataclass(frozen=True)
class CalculationResult:
    """Financial KPIs computed from a yearly flow series.

    Attributes:
        npv: Net present value (pv_benefits - pv_costs).
        bcr: Benefit-cost ratio, 0.0 when pv_costs is not positive.
        irr: Internal rate of return (decimal), or None if not computable.
        sroi: Social return on investment, or None when pv_costs is not positive.
        payback_years: Interpolated payback period, or None if never reached.
        pv_benefits: Present value of all benefits.
        pv_costs: Present value of all costs.
        net_per_year: Undiscounted net flow per period, sorted by year.
        cumulative_per_year: Running sum of net_per_year.
    """

    npv: float = 0.0
    bcr: float = 0.0
    irr: Optional[float] = None
    sroi: Optional[float] = None
    payback_years: Optional[float] = None
    pv_benefits: float = 0.0
    pv_costs: float = 0.0
    net_per_year: List[float] = field(default_factory=list)
    cumulative_per_year: List[float] = field(default_factory=list)

    __hash__ = None

    def to_dict(self) -> dict:
        return {
            "npv": self.npv,
            "bcr": self.bcr,
            "irr": self.irr,
            "sroi": self.sroi,
            "payback_years": self.payback_years,
            "pv_benefits": self.pv_benefits,
            "pv_costs": self.pv_costs,
            "net_per_year": list(self.net_per_year),
            "cumulative_per_year": list(self.cumulative_per_year),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CalculationResult":
        data = dict(data)
        data["net_per_year"] = list(data.get("net_per_year", []))
        data["cumulative_per_year"] = list(data.get("cumulative_per_year", []))
        return cls(**data)


@dataclass(frozen=True)
class Contribution:
    """One line item's share of the aggregate flow, used for sensitivity runs.

    Attributes:
        node_id: Identifier of the line item.
        label: Display name.
        yearly_values: Per-period values aligned positionally to the base flows.
        type: "benefit" or "cost".
    """

    node_id: str
    label: str
    yearly_values: List[float] = field(default_factory=list)
    type: str = BENEFIT

    __hash__ = None

    def __post_init__(self):
        if self.type not in CONTRIBUTION_TYPES:
            raise ValueError(f"type must be 'benefit' or 'cost', got {self.type!r}")

    def value_at(self, index: int) -> float:
        """Value for the period at position index, 0.0 past the end."""
        if 0 <= index < len(self.yearly_values):
            return self.yearly_values[index]
        return 0.0

    def to_dict(self) -> dict:
        return {
            "node_id": self.node_id,
            "label": self.label,
            "yearly_values": list(self.yearly_values),
            "type": self.type,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Contribution":
        return cls(
            node_id=str(data["node_id"]),
            label=data.get("label", ""),
            yearly_values=[float(v) for v in data.get("yearly_values", [])],
            type=data.get("type", BENEFIT),
        )


@dataclass(frozen=True)
class SensitivityItem:
    """NPV swing for one contribution varied low/high, for tornado charts.

    Attributes:
        label: Contribution display name.
        node_id: Contribution identifier.
        npv_low: NPV with the contribution scaled by (1 - pct).
        npv_base: Unperturbed NPV.
        npv_high: NPV with the contribution scaled by (1 + pct).
        spread: |npv_high - npv_low|; larger means more impact.
    """

    label: str
    node_id: str
    npv_low: float
    npv_base: float
    npv_high: float
    spread: float

    def to_dict(self) -> dict:
        return {
            "label": self.label,
            "node_id": self.node_id,
            "npv_low": self.npv_low,
            "npv_base": self.npv_base,
            "npv_high": self.npv_high,
            "spread": self.spread,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SensitivityItem":
        return cls(**data)


@dataclass(frozen=True)
class ScenarioResult:
    """Portfolio-wide NPV with all benefits scaled down, unchanged, and up."""

    npv_low: float
    npv_base: float
    npv_high: float

    def to_dict(self) -> dict:
        return {
            "npv_low": self.npv_low,
            "npv_base": self.npv_base,
            "npv_high": self.npv_high,
        }

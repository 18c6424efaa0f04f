"""Analysis settings with defaults used by the case-study tool.

The discount rate, horizon and sensitivity range are chosen per case
study; the IRR solver constants are not settings and live in
benefit_calc.models.calculations.
"""

import json
from dataclasses import dataclass
from pathlib import Path

ESTIMATES = ("pessimistic", "likely", "optimistic")

# Range offered by the sensitivity slider (5-50%)
SENSITIVITY_MIN = 0.05
SENSITIVITY_MAX = 0.50


@dataclass
class AnalysisSettings:
    """Per-case-study calculation settings.

    Attributes:
        discount_rate: Per-period discount rate (default 0.03, the Swedish
            public-sector recommendation).
        time_horizon_years: Appraisal horizon in years (default 6).
        sensitivity_pct: Tornado variation as fraction (default 0.20).
        estimate: Benefit estimate to calculate on.
        currency: Display currency code; no conversion is performed.
    """

    discount_rate: float = 0.03
    time_horizon_years: int = 6
    sensitivity_pct: float = 0.20
    estimate: str = "likely"
    currency: str = "SEK"

    def __post_init__(self):
        if self.discount_rate <= -1:
            raise ValueError(f"discount_rate must be > -1, got {self.discount_rate}")
        if self.time_horizon_years < 1:
            raise ValueError(
                f"time_horizon_years must be >= 1, got {self.time_horizon_years}"
            )
        if not SENSITIVITY_MIN <= self.sensitivity_pct <= SENSITIVITY_MAX:
            raise ValueError(
                f"sensitivity_pct must be {SENSITIVITY_MIN}-{SENSITIVITY_MAX}, "
                f"got {self.sensitivity_pct}"
            )
        if self.estimate not in ESTIMATES:
            raise ValueError(f"estimate must be one of {ESTIMATES}, got {self.estimate!r}")

    def to_dict(self) -> dict:
        return {
            "discount_rate": self.discount_rate,
            "time_horizon_years": self.time_horizon_years,
            "sensitivity_pct": self.sensitivity_pct,
            "estimate": self.estimate,
            "currency": self.currency,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "AnalysisSettings":
        valid_fields = {f for f in cls.__dataclass_fields__}
        filtered = {k: v for k, v in data.items() if k in valid_fields}
        return cls(**filtered)


def load_settings(filepath: str) -> AnalysisSettings:
    """Load settings from a JSON file.

    Raises:
        FileNotFoundError: If file does not exist.
        json.JSONDecodeError: If file is not valid JSON.
        ValueError: If a setting is out of range.
    """
    with open(filepath, "r", encoding="utf-8") as f:
        data = json.load(f)
    return AnalysisSettings.from_dict(data)


def save_settings(settings: AnalysisSettings, filepath: str) -> None:
    """Write settings to a JSON file, creating parent directories."""
    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(settings.to_dict(), f, indent=2)

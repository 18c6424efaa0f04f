"""Input validation functions for case-study calculations.

Each validator returns a tuple of (is_valid: bool, message: str).
Messages describe errors or warnings for user display. The calculation
engine itself does not validate; callers run these before invoking it.
"""

import math
from typing import List, Sequence, Tuple

from benefit_calc.data.settings import SENSITIVITY_MAX, SENSITIVITY_MIN
from benefit_calc.models.flows import Contribution, YearlyFlow


def validate_discount_rate(rate: float) -> Tuple[bool, str]:
    """Validate discount rate.

    Args:
        rate: Discount rate as decimal (e.g., 0.03 for 3%).

    Returns:
        (is_valid, message) tuple.
    """
    if not math.isfinite(rate):
        return False, "Discount rate must be a finite number."
    if rate <= -1:
        return False, "Discount rate must be greater than -100%."
    if rate < 0:
        return True, "Warning: Negative discount rate. Verify this is correct."
    if rate > 0.20:
        return True, f"Warning: Discount rate of {rate * 100:.1f}% is unusually high."
    return True, ""


def validate_variation_pct(pct: float) -> Tuple[bool, str]:
    """Validate sensitivity variation fraction (0.05-0.50)."""
    if not SENSITIVITY_MIN <= pct <= SENSITIVITY_MAX:
        return False, (f"Sensitivity variation must be between "
                       f"{SENSITIVITY_MIN * 100:.0f}% and {SENSITIVITY_MAX * 100:.0f}%.")
    return True, ""


def validate_flows(flows: Sequence[YearlyFlow]) -> Tuple[bool, str]:
    """Validate a yearly flow series before calculation.

    Args:
        flows: Flow series as it will be passed to the engine.

    Returns:
        (is_valid, message) tuple.
    """
    if not flows:
        return True, "Warning: No yearly flows. All KPIs will be empty."
    seen = set()
    for flow in flows:
        if flow.year < 1:
            return False, f"Year {flow.year}: years must start at 1."
        if flow.year in seen:
            return False, f"Year {flow.year} appears more than once; aggregate it first."
        seen.add(flow.year)
        if not (math.isfinite(flow.benefits) and math.isfinite(flow.costs)):
            return False, f"Year {flow.year}: benefits and costs must be finite numbers."
    if all(f.costs == 0 for f in flows):
        return True, "Warning: No costs entered. BCR and SROI cannot be calculated."
    return True, ""


def validate_contributions(
    contributions: Sequence[Contribution],
    flows: Sequence[YearlyFlow],
) -> Tuple[bool, str]:
    """Check contributions line up with the flow series.

    Mismatched lengths are allowed (missing positions count as 0) but
    reported as a warning.
    """
    for contrib in contributions:
        if len(contrib.yearly_values) != len(flows):
            return True, (f"Warning: '{contrib.label}' has {len(contrib.yearly_values)} "
                          f"yearly values for {len(flows)} years.")
    return True, ""


def validate_inputs(
    flows: Sequence[YearlyFlow],
    discount_rate: float,
    contributions: Sequence[Contribution] = (),
    variation_pct: float = 0.20,
) -> Tuple[bool, List[str]]:
    """Run all validations on a calculation request.

    Returns:
        (is_valid, messages) where messages includes all errors and warnings.
    """
    checks = [
        validate_flows(flows),
        validate_discount_rate(discount_rate),
        validate_variation_pct(variation_pct),
        validate_contributions(contributions, flows),
    ]
    messages = []
    is_valid = True
    for valid, msg in checks:
        if not valid:
            is_valid = False
        if msg:
            messages.append(msg)
    return is_valid, messages

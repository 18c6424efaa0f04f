"""Financial calculation engine for benefit realization case studies.

Implements the standard investment-appraisal metrics: present value,
NPV, BCR, SROI, IRR (Newton-Raphson), and interpolated payback. All
functions are pure: they take value inputs and return new results.

Discounting convention: the first period of every series is discounted
one full period, i.e. there is no "year 0".
"""

from typing import List, Optional, Sequence

import numpy as np

from benefit_calc.models.flows import CalculationInput, CalculationResult, YearlyFlow
from benefit_calc.utils.logger import setup_logger

logger = setup_logger(__name__)

# IRR solver convergence policy
IRR_INITIAL_GUESS = 0.10
IRR_MAX_ITERATIONS = 100
IRR_TOLERANCE = 1e-7
IRR_DERIVATIVE_FLOOR = 1e-12
IRR_RATE_NUDGE = 0.05
IRR_MIN_RATE = -0.99
IRR_MAX_RATE = 10.0
# Converged roots outside this band are rejected
IRR_MIN_ACCEPTED = -1.0
IRR_MAX_ACCEPTED = 10.0


def present_value(values: Sequence[float], discount_rate: float) -> float:
    r"""Calculate the present value of a per-period series.

    Formula:
        PV = \sum_{i=0}^{N-1} \frac{v_i}{(1+r)^{i+1}}

    Args:
        values: Values for periods 1..N in order.
        discount_rate: Per-period discount rate as decimal (e.g., 0.03 for 3%).

    Returns:
        Present value; 0.0 for an empty series.

    Example:
        >>> present_value([100], 0.10)
        90.90...
    """
    arr = np.asarray(values, dtype=float)
    if arr.size == 0:
        return 0.0
    periods = np.arange(1, arr.size + 1)
    # Pathological rates (<= -1) give inf/nan rather than raising
    with np.errstate(divide="ignore", over="ignore", invalid="ignore"):
        return float(np.sum(arr / np.power(1.0 + discount_rate, periods)))


def calculate_npv(net_flows: Sequence[float], discount_rate: float) -> float:
    r"""Calculate net present value of a net cash flow series.

    Formula:
        NPV = \sum_{t=0}^{N-1} \frac{CF_t}{(1+r)^{t+1}}

    Args:
        net_flows: Net flows (benefits - costs) for periods 1..N.
        discount_rate: Per-period discount rate as decimal.

    Returns:
        Net present value in the same currency units as net_flows.

    Source:
        Brealey, R., Myers, S., & Allen, F. (2020). Principles of Corporate
        Finance (13th ed.). McGraw-Hill. Chapter 2.
    """
    return present_value(net_flows, discount_rate)


def _npv_and_derivative(flows: np.ndarray, rate: float) -> tuple:
    """Return (f(rate), f'(rate)) for the period-1 NPV function."""
    periods = np.arange(1, flows.size + 1)
    base = 1.0 + rate
    with np.errstate(divide="ignore", over="ignore", invalid="ignore"):
        npv = np.sum(flows / np.power(base, periods))
        derivative = np.sum(-periods * flows / np.power(base, periods + 1))
    return float(npv), float(derivative)


def calculate_irr(net_flows: Sequence[float]) -> Optional[float]:
    r"""Calculate internal rate of return by Newton-Raphson iteration.

    Solves for the rate r that makes:
        0 = \sum_{t=0}^{N-1} \frac{CF_t}{(1+r)^{t+1}}

    using the analytic derivative
        f'(r) = \sum_{t=0}^{N-1} \frac{-(t+1) CF_t}{(1+r)^{t+2}}

    The solver starts at 10%, runs at most IRR_MAX_ITERATIONS steps, and
    clamps the working rate to [IRR_MIN_RATE, IRR_MAX_RATE]. A flat slope
    nudges the rate instead of dividing by it. An infinite step is clamped
    like any other; a NaN step ends the search.

    Args:
        net_flows: Nominal (undiscounted) net flows for periods 1..N.

    Returns:
        IRR as a decimal (e.g., 0.12 for 12%), or None when the flows never
        change sign, the solver does not converge, or the root lies outside
        [-1, 10].

    Source:
        Brealey, R., Myers, S., & Allen, F. (2020). Principles of Corporate
        Finance (13th ed.). McGraw-Hill. Chapter 5.
    """
    if len(net_flows) == 0:
        return None

    has_positive = any(cf > 0 for cf in net_flows)
    has_negative = any(cf < 0 for cf in net_flows)
    if not has_positive or not has_negative:
        return None

    flows = np.asarray(net_flows, dtype=float)
    rate = IRR_INITIAL_GUESS
    for _ in range(IRR_MAX_ITERATIONS):
        npv, derivative = _npv_and_derivative(flows, rate)

        if abs(derivative) < IRR_DERIVATIVE_FLOOR:
            rate += IRR_RATE_NUDGE
            continue

        new_rate = rate - npv / derivative
        if np.isnan(new_rate):
            logger.debug("IRR iteration diverged at rate %.6f", rate)
            return None

        if abs(new_rate - rate) < IRR_TOLERANCE:
            if new_rate < IRR_MIN_ACCEPTED or new_rate > IRR_MAX_ACCEPTED:
                logger.debug("IRR root %.6f rejected as implausible", new_rate)
                return None
            return float(new_rate)

        rate = min(max(new_rate, IRR_MIN_RATE), IRR_MAX_RATE)

    logger.debug("IRR did not converge in %d iterations", IRR_MAX_ITERATIONS)
    return None


def calculate_payback(net_flows: Sequence[float]) -> Optional[float]:
    """Calculate interpolated payback period from nominal net flows.

    Finds the first period where the cumulative net flow turns
    non-negative and interpolates linearly within it. The result is
    reported as (i - 1) + fraction for crossing period index i.

    Args:
        net_flows: Net flows for periods 1..N.

    Returns:
        Payback in periods, 0 if the first period is already non-negative,
        or None if the cumulative flow never recovers.
    """
    cumulative = 0.0
    for i, cf in enumerate(net_flows):
        prev_cumulative = cumulative
        cumulative += cf

        if i == 0 and cumulative >= 0:
            return 0.0

        if cumulative >= 0 and prev_cumulative < 0:
            fraction = abs(prev_cumulative) / cf if cf != 0 else 0.0
            return (i - 1) + fraction
    return None


def _cumulative(values: Sequence[float]) -> List[float]:
    running = 0.0
    out = []
    for v in values:
        running += v
        out.append(running)
    return out


def calculate(calc_input: CalculationInput) -> CalculationResult:
    """Compute all financial KPIs for a yearly flow series.

    Flows are sorted by year (stable) before any computation; duplicate
    years are kept as separate periods. An empty series yields a zeroed
    result with None for IRR, SROI and payback.

    Args:
        calc_input: Flow series and discount rate.

    Returns:
        CalculationResult with NPV, BCR, IRR, SROI, payback, PVs, and the
        per-period net and cumulative series.
    """
    flows = calc_input.flows
    r = calc_input.discount_rate

    if not flows:
        logger.debug("Empty flow series, returning zeroed result")
        return CalculationResult()

    ordered = sorted(flows, key=lambda f: f.year)

    benefits = [f.benefits for f in ordered]
    costs = [f.costs for f in ordered]
    net_per_year = [f.benefits - f.costs for f in ordered]

    pv_benefits = present_value(benefits, r)
    pv_costs = present_value(costs, r)
    npv = pv_benefits - pv_costs

    # BCR falls back to 0 and SROI to None when nothing is spent
    bcr = pv_benefits / pv_costs if pv_costs > 0 else 0.0
    sroi = (pv_benefits - pv_costs) / pv_costs if pv_costs > 0 else None

    return CalculationResult(
        npv=npv,
        bcr=bcr,
        irr=calculate_irr(net_per_year),
        sroi=sroi,
        payback_years=calculate_payback(net_per_year),
        pv_benefits=pv_benefits,
        pv_costs=pv_costs,
        net_per_year=net_per_year,
        cumulative_per_year=_cumulative(net_per_year),
    )


def calculate_flows(flows: Sequence[YearlyFlow], discount_rate: float) -> CalculationResult:
    """Shortcut for calculate(CalculationInput(flows, discount_rate))."""
    return calculate(CalculationInput(flows=list(flows), discount_rate=discount_rate))

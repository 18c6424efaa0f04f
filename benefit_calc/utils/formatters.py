"""Number and currency formatting utilities for KPI display."""

import math
from typing import Optional

# Shown where a KPI is not applicable (IRR, SROI, payback)
NOT_APPLICABLE = "—"


def format_currency(value: float, decimals: int = 0, suffix: str = " kr") -> str:
    """Format a number as an abbreviated currency string.

    Args:
        value: The numeric value to format.
        decimals: Number of decimal places.
        suffix: Currency symbol suffix.

    Returns:
        Formatted currency string (e.g., "1.2M kr").
    """
    if abs(value) >= 1e9:
        return f"{value / 1e9:,.{decimals}f}B{suffix}"
    if abs(value) >= 1e6:
        return f"{value / 1e6:,.{decimals}f}M{suffix}"
    if abs(value) >= 1e3:
        return f"{value / 1e3:,.{decimals}f}K{suffix}"
    return f"{value:,.{decimals}f}{suffix}"


def format_currency_exact(value: float, decimals: int = 0, suffix: str = " kr") -> str:
    """Format a number as exact currency string without abbreviation."""
    return f"{value:,.{decimals}f}{suffix}"


def format_percent(value: Optional[float], decimals: int = 1) -> str:
    """Format a decimal as percentage string.

    Args:
        value: Decimal value (e.g., 0.07 for 7%), or None.
        decimals: Number of decimal places.

    Returns:
        Formatted percentage string (e.g., "7.0%"), or an em dash.
    """
    if value is None:
        return NOT_APPLICABLE
    return f"{value * 100:,.{decimals}f}%"


def format_ratio(value: float, decimals: int = 2) -> str:
    """Format a ratio such as BCR (e.g., "1.45")."""
    return f"{value:,.{decimals}f}"


def format_years(value: Optional[float]) -> str:
    """Format a value as years.

    Args:
        value: Number of years, or None if not calculable.

    Returns:
        Formatted string (e.g., "2.6 years"), or an em dash.
    """
    if value is None:
        return NOT_APPLICABLE
    return f"{value:.1f} years"


def format_payback_year(value: Optional[float]) -> str:
    """Format payback as the whole year in which it is reached."""
    if value is None:
        return NOT_APPLICABLE
    return f"Year {math.ceil(value)}"

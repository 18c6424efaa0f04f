"""Chart generation for case-study reports.

Creates matplotlib charts for the NPV tornado diagram and the yearly
cash flow profile. Charts are saved as PNG files.
"""

from typing import List, Sequence

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import matplotlib.ticker as mticker

from benefit_calc.models.flows import CalculationResult, SensitivityItem, YearlyFlow
from benefit_calc.models.sensitivity import tornado_chart_rows

COLOR_WORSE = "#c62828"
COLOR_BETTER = "#2e7d32"


def create_tornado_chart(
    items: Sequence[SensitivityItem],
    output_path: str,
    variation_pct: float = 0.20,
    limit: int = 10,
) -> None:
    """Create a horizontal tornado chart of NPV sensitivity.

    Bars extend from the base NPV to the low and high NPVs of each
    contribution; the widest bar is drawn at the top.

    Args:
        items: Ranked output of sensitivity_analysis.
        output_path: File path to save the PNG chart.
        variation_pct: Variation used, for the chart title.
        limit: Maximum number of bars.
    """
    rows = tornado_chart_rows(items, limit=limit)
    if not rows:
        return

    npv_base = rows[0]["npv_base"]
    fig, ax = plt.subplots(figsize=(8, max(3.5, 0.45 * len(rows) + 1)), dpi=150)

    for i, row in enumerate(rows):
        left = min(row["low"], row["high"])
        right = max(row["low"], row["high"])
        if left < 0:
            ax.barh(i, left, left=npv_base, color=COLOR_WORSE, alpha=0.7, height=0.6)
        if right > 0:
            ax.barh(i, right, left=npv_base, color=COLOR_BETTER, alpha=0.7, height=0.6)

    ax.axvline(x=npv_base, color="#333", linewidth=1.5, linestyle="--",
               label=f"Base NPV: {npv_base:,.0f}")
    ax.set_yticks(list(range(len(rows))))
    ax.set_yticklabels([row["name"] for row in rows], fontsize=9)
    ax.set_xlabel("NPV", fontsize=10)
    ax.set_title(f"Tornado Chart: NPV Sensitivity to ±{variation_pct * 100:.0f}% Changes",
                 fontsize=11, fontweight="bold")
    ax.xaxis.set_major_formatter(mticker.FuncFormatter(lambda x, _: f"{x:,.0f}"))
    ax.legend(loc="lower right", fontsize=8)
    ax.invert_yaxis()
    fig.tight_layout()
    fig.savefig(output_path, bbox_inches="tight", facecolor="white")
    plt.close(fig)


def create_cashflow_chart(
    flows: Sequence[YearlyFlow],
    result: CalculationResult,
    output_path: str,
) -> None:
    """Create a bar chart of yearly benefits and costs with cumulative net.

    Args:
        flows: Yearly flows that produced result.
        result: Calculation result (its cumulative series is plotted).
        output_path: File path to save the PNG chart.
    """
    ordered: List[YearlyFlow] = sorted(flows, key=lambda f: f.year)
    if not ordered:
        return
    years = [f.year for f in ordered]

    fig, ax = plt.subplots(figsize=(8, 4.5), dpi=150)
    bar_width = 0.35

    ax.bar([y - bar_width / 2 for y in years], [-f.costs for f in ordered],
           bar_width, label="Costs", color=COLOR_WORSE, alpha=0.8)
    ax.bar([y + bar_width / 2 for y in years], [f.benefits for f in ordered],
           bar_width, label="Benefits", color=COLOR_BETTER, alpha=0.8)
    ax.plot(years, result.cumulative_per_year, color="#1565c0", marker="o",
            linewidth=1.5, label="Cumulative net")

    ax.set_xlabel("Year", fontsize=11)
    ax.set_xticks(years)
    ax.set_title("Yearly Benefits and Costs", fontsize=13, fontweight="bold")
    ax.legend(fontsize=10)
    ax.axhline(y=0, color="black", linewidth=0.5)
    ax.yaxis.set_major_formatter(mticker.FuncFormatter(lambda x, _: f"{x:,.0f}"))
    ax.grid(axis="y", alpha=0.3)

    fig.tight_layout()
    fig.savefig(output_path, bbox_inches="tight", facecolor="white")
    plt.close(fig)

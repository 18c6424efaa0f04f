#!/usr/bin/env python3
"""
Benefit Realization Calculator CLI

Runs the financial calculation engine on a case study's benefit and cost
line items:
- Load line items and settings from JSON (or use the built-in demo)
- Calculate NPV, BCR, IRR, SROI and payback period
- Scenario analysis (all benefits -/+ pct) and per-item tornado ranking
- Export charts (PNG) and an Excel workbook

Usage:
    python benefit_cli.py --demo
    python benefit_cli.py --load case.json --sensitivity 20
    python benefit_cli.py --load case.json --excel results.xlsx --tornado tornado.png
"""

import argparse
import json
import logging
import sys
from dataclasses import replace
from typing import List, Optional

from xlsxwriter.exceptions import FileCreateError

from benefit_calc.data.settings import ESTIMATES
from benefit_calc.data.storage import load_inputs, save_inputs
from benefit_calc.data.validators import validate_inputs
from benefit_calc.models.calculations import calculate_flows
from benefit_calc.models.flows import CalculationResult, ScenarioResult, SensitivityItem
from benefit_calc.models.line_items import (
    AnalysisInputs,
    BenefitLineItem,
    CostAmount,
    CostLineItem,
    YearEstimate,
)
from benefit_calc.models.sensitivity import scenario_analysis, sensitivity_analysis
from benefit_calc.utils.formatters import (
    format_currency,
    format_payback_year,
    format_percent,
    format_ratio,
    format_years,
)
from benefit_calc.utils.logger import set_level, setup_logger

logger = setup_logger("benefit_calc.cli")


def print_header(text: str, char: str = "=") -> None:
    """Print a formatted section header."""
    width = 70
    print(f"\n{char * width}")
    print(f" {text}")
    print(f"{char * width}")


def print_table(headers: List[str], rows: List[List[str]],
                col_widths: Optional[List[int]] = None) -> None:
    """Print a formatted ASCII table."""
    if col_widths is None:
        col_widths = [max(len(str(row[i])) for row in [headers] + rows) + 2
                      for i in range(len(headers))]

    header_line = "|".join(h.center(w) for h, w in zip(headers, col_widths))
    separator = "+".join("-" * w for w in col_widths)
    print(f"+{separator}+")
    print(f"|{header_line}|")
    print(f"+{separator}+")
    for row in rows:
        row_line = "|".join(str(cell).center(w) for cell, w in zip(row, col_widths))
        print(f"|{row_line}|")
    print(f"+{separator}+")


def create_demo_inputs() -> AnalysisInputs:
    """Home-care digitalisation case used for demonstrations."""
    benefits = [
        BenefitLineItem(
            node_id="b1", title="Reduced travel time",
            values=[YearEstimate(year=y, pessimistic=v * 0.7, likely=v, optimistic=v * 1.2)
                    for y, v in zip(range(1, 7), [0, 350_000, 600_000, 650_000, 650_000, 650_000])],
        ),
        BenefitLineItem(
            node_id="b2", title="Fewer missed visits",
            values=[YearEstimate(year=y, pessimistic=v * 0.8, likely=v, optimistic=v * 1.3)
                    for y, v in zip(range(1, 7), [0, 120_000, 200_000, 220_000, 220_000, 220_000])],
        ),
    ]
    costs = [
        CostLineItem(
            node_id="c1", title="System procurement",
            values=[CostAmount(year=1, amount=1_200_000)],
        ),
        CostLineItem(
            node_id="c2", title="Licences and support",
            values=[CostAmount(year=y, amount=150_000) for y in range(1, 7)],
        ),
    ]
    return AnalysisInputs(name="Demo: digital home care planning",
                          benefits=benefits, costs=costs)


def print_results(inputs: AnalysisInputs, result: CalculationResult) -> None:
    """Print headline KPIs and the yearly cash flow table."""
    settings = inputs.settings
    print_header(f"RESULTS: {inputs.name or 'Unnamed case'}")
    print(f"  Discount rate: {format_percent(settings.discount_rate)}  |  "
          f"Horizon: {settings.time_horizon_years} years  |  Estimate: {settings.estimate}")

    print_table(
        ["Metric", "Value"],
        [
            ["NPV", format_currency(result.npv, 1)],
            ["BCR", format_ratio(result.bcr)],
            ["IRR", format_percent(result.irr)],
            ["SROI", format_percent(result.sroi)],
            ["Payback", f"{format_years(result.payback_years)} ({format_payback_year(result.payback_years)})"],
            ["PV Benefits", format_currency(result.pv_benefits, 1)],
            ["PV Costs", format_currency(result.pv_costs, 1)],
        ],
    )

    flows = sorted(inputs.yearly_flows(), key=lambda f: f.year)
    rows = [
        [str(f.year), format_currency(f.benefits), format_currency(f.costs),
         format_currency(net), format_currency(cum)]
        for f, net, cum in zip(flows, result.net_per_year, result.cumulative_per_year)
    ]
    print_table(["Year", "Benefits", "Costs", "Net", "Cumulative"], rows)


def print_sensitivity(scenario: ScenarioResult, items: List[SensitivityItem],
                      variation_pct: float) -> None:
    """Print scenario NPVs and the ranked tornado table."""
    pct = f"{variation_pct * 100:.0f}%"
    print_header(f"SENSITIVITY ANALYSIS (±{pct})")
    print_table(
        ["Scenario", "NPV"],
        [
            [f"Pessimistic (benefits -{pct})", format_currency(scenario.npv_low, 1)],
            ["Base", format_currency(scenario.npv_base, 1)],
            [f"Optimistic (benefits +{pct})", format_currency(scenario.npv_high, 1)],
        ],
    )
    if items:
        print_table(
            ["Line item", f"NPV -{pct}", f"NPV +{pct}", "Spread"],
            [[item.label, format_currency(item.npv_low, 1),
              format_currency(item.npv_high, 1), format_currency(item.spread, 1)]
             for item in items],
        )


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Benefit Realization Calculator - NPV, BCR, IRR, SROI and payback",
    )
    parser.add_argument("--load", "-l", type=str,
                        help="Load case-study line items from a JSON file")
    parser.add_argument("--demo", action="store_true",
                        help="Run on the built-in demo case")
    parser.add_argument("--save", type=str,
                        help="Save the (possibly overridden) inputs to a JSON file")
    parser.add_argument("--discount-rate", type=float,
                        help="Override the discount rate (e.g. 0.03 for 3%%)")
    parser.add_argument("--estimate", choices=ESTIMATES,
                        help="Benefit estimate to calculate on")
    parser.add_argument("--sensitivity", "-s", type=float, nargs="?", const=20.0,
                        help="Run sensitivity analysis at +/- PCT percent (default 20)")
    parser.add_argument("--tornado", type=str,
                        help="Write the tornado chart PNG (implies --sensitivity)")
    parser.add_argument("--cashflow-chart", type=str,
                        help="Write the yearly cash flow chart PNG")
    parser.add_argument("--excel", type=str,
                        help="Export results to an Excel workbook")
    parser.add_argument("--quiet", "-q", action="store_true",
                        help="Suppress detailed output")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Enable debug logging")

    args = parser.parse_args(argv)
    if args.verbose:
        set_level(logging.DEBUG)

    if not args.load and not args.demo:
        parser.error("one of --load or --demo is required")

    try:
        inputs = load_inputs(args.load) if args.load else create_demo_inputs()
        overrides = {}
        if args.discount_rate is not None:
            overrides["discount_rate"] = args.discount_rate
        if args.estimate:
            overrides["estimate"] = args.estimate
        if args.sensitivity is not None:
            overrides["sensitivity_pct"] = args.sensitivity / 100
        if overrides:
            inputs.settings = replace(inputs.settings, **overrides)
        flows = inputs.yearly_flows()
        contributions = inputs.contributions()
    except (OSError, json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
        logger.error("Could not load inputs: %s", e)
        return 1

    settings = inputs.settings

    is_valid, messages = validate_inputs(
        flows, settings.discount_rate, contributions, settings.sensitivity_pct,
    )
    for msg in messages:
        logger.warning(msg)
    if not is_valid:
        logger.error("Inputs are not valid, aborting")
        return 1

    result = calculate_flows(flows, settings.discount_rate)
    logger.info("Calculated NPV %.0f over %d years", result.npv, len(flows))

    if not args.quiet:
        print_results(inputs, result)

    items = None
    scenario = None
    if args.sensitivity is not None or args.tornado:
        items = sensitivity_analysis(flows, settings.discount_rate, contributions,
                                     settings.sensitivity_pct)
        scenario = scenario_analysis(flows, settings.discount_rate, settings.sensitivity_pct)
        if not args.quiet:
            print_sensitivity(scenario, items, settings.sensitivity_pct)

    if args.save:
        save_inputs(inputs, args.save)
        logger.info("Inputs saved to %s", args.save)

    # Exports are independent; one failing does not stop the others
    if args.tornado:
        try:
            from benefit_calc.reports.charts import create_tornado_chart
            create_tornado_chart(items, args.tornado, settings.sensitivity_pct)
            logger.info("Tornado chart written to %s", args.tornado)
        except (OSError, ValueError) as e:
            logger.error("Error generating tornado chart: %s", e)

    if args.cashflow_chart:
        try:
            from benefit_calc.reports.charts import create_cashflow_chart
            create_cashflow_chart(flows, result, args.cashflow_chart)
            logger.info("Cash flow chart written to %s", args.cashflow_chart)
        except (OSError, ValueError) as e:
            logger.error("Error generating cash flow chart: %s", e)

    if args.excel:
        try:
            from benefit_calc.reports.excel_export import export_workbook
            export_workbook(args.excel, flows, result, settings.discount_rate,
                            sensitivity_items=items, scenario=scenario,
                            title=inputs.name or "Benefit Realization Calculation")
        except (OSError, FileCreateError) as e:
            logger.error("Error generating Excel: %s", e)

    if not args.quiet:
        print_header("ANALYSIS COMPLETE")
        print(f"\n  BCR: {format_ratio(result.bcr)}  |  NPV: {format_currency(result.npv, 1)}  |  "
              f"IRR: {format_percent(result.irr)}\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())

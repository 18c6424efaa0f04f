"""Excel workbook export of calculation results.

Writes an .xlsx workbook with three sheets:
- Summary: headline KPIs (NPV, BCR, IRR, SROI, payback, PVs)
- Cash_Flows: per-year benefits, costs, net, cumulative, and discounting
- Sensitivity: scenario NPVs and the ranked tornado table

Values are written as numbers; KPIs that do not apply are written as
an em dash.
"""

from datetime import datetime
from typing import Optional, Sequence

import xlsxwriter

from benefit_calc.models.flows import (
    CalculationResult,
    ScenarioResult,
    SensitivityItem,
    YearlyFlow,
)
from benefit_calc.utils.formatters import NOT_APPLICABLE
from benefit_calc.utils.logger import setup_logger

logger = setup_logger(__name__)


def _create_formats(wb) -> dict:
    f = {}
    blue = '#1565C0'
    lblue = '#E3F2FD'

    f['title'] = wb.add_format({'bold': True, 'font_size': 16, 'font_color': blue})
    f['subtitle'] = wb.add_format({'italic': True, 'font_color': '#555555', 'font_size': 10})
    f['header'] = wb.add_format({'bold': True, 'font_color': 'white', 'bg_color': blue,
                                 'align': 'center', 'border': 1, 'valign': 'vcenter'})
    f['label'] = wb.add_format({'bold': True, 'border': 1})
    f['currency'] = wb.add_format({'num_format': '#,##0', 'border': 1})
    f['cur_red'] = wb.add_format({'num_format': '#,##0', 'border': 1, 'font_color': '#C62828'})
    f['percent'] = wb.add_format({'num_format': '0.00%', 'border': 1})
    f['number'] = wb.add_format({'num_format': '0.0000', 'border': 1})
    f['ratio'] = wb.add_format({'num_format': '0.00', 'border': 1})
    f['years'] = wb.add_format({'num_format': '0.00', 'border': 1})
    f['center'] = wb.add_format({'align': 'center', 'border': 1})
    f['result_big'] = wb.add_format({'bold': True, 'font_size': 13, 'bg_color': lblue,
                                     'border': 2, 'num_format': '#,##0', 'align': 'center'})
    return f


def _write_optional(ws, row: int, col: int, value: Optional[float], fmt) -> None:
    if value is None:
        ws.write_string(row, col, NOT_APPLICABLE, fmt)
    else:
        ws.write_number(row, col, value, fmt)


def _create_summary_sheet(ws, f, result: CalculationResult, discount_rate: float,
                          title: str) -> None:
    ws.set_column('A:A', 3)
    ws.set_column('B:B', 34)
    ws.set_column('C:C', 18)

    ws.write('B2', title, f['title'])
    ws.write('B3', f"Generated {datetime.now().strftime('%Y-%m-%d %H:%M')}", f['subtitle'])

    ws.write(4, 1, 'Metric', f['header'])
    ws.write(4, 2, 'Value', f['header'])

    rows = [
        ('Net Present Value (NPV)', result.npv, f['result_big']),
        ('Benefit-Cost Ratio (BCR)', result.bcr, f['ratio']),
        ('Internal Rate of Return (IRR)', result.irr, f['percent']),
        ('Social Return on Investment (SROI)', result.sroi, f['ratio']),
        ('Payback Period (years)', result.payback_years, f['years']),
        ('PV Benefits', result.pv_benefits, f['currency']),
        ('PV Costs', result.pv_costs, f['currency']),
        ('Discount Rate', discount_rate, f['percent']),
    ]
    for i, (label, value, fmt) in enumerate(rows):
        ws.write(5 + i, 1, label, f['label'])
        _write_optional(ws, 5 + i, 2, value, fmt)


def _create_cashflows_sheet(ws, f, flows: Sequence[YearlyFlow], result: CalculationResult,
                            discount_rate: float) -> None:
    ws.set_column('A:A', 3)
    ws.set_column('B:B', 8)
    ws.set_column('C:I', 15)

    ws.write('B2', 'Yearly Cash Flows', f['title'])
    headers = ['Year', 'Benefits', 'Costs', 'Net', 'Cumulative Net',
               'Discount Factor', 'PV Net']
    for c, hdr in enumerate(headers):
        ws.write(3, 1 + c, hdr, f['header'])

    ordered = sorted(flows, key=lambda fl: fl.year)
    for i, flow in enumerate(ordered):
        row = 4 + i
        net = result.net_per_year[i]
        factor = 1 / (1 + discount_rate) ** (i + 1)
        ws.write_number(row, 1, flow.year, f['center'])
        ws.write_number(row, 2, flow.benefits, f['currency'])
        ws.write_number(row, 3, flow.costs, f['currency'])
        ws.write_number(row, 4, net, f['cur_red'] if net < 0 else f['currency'])
        ws.write_number(row, 5, result.cumulative_per_year[i], f['currency'])
        ws.write_number(row, 6, factor, f['number'])
        ws.write_number(row, 7, net * factor, f['currency'])


def _create_sensitivity_sheet(ws, f, items: Sequence[SensitivityItem],
                              scenario: Optional[ScenarioResult]) -> None:
    ws.set_column('A:A', 3)
    ws.set_column('B:B', 30)
    ws.set_column('C:F', 16)

    ws.write('B2', 'NPV Sensitivity', f['title'])
    row = 3
    if scenario is not None:
        for c, hdr in enumerate(['Scenario', 'NPV']):
            ws.write(row, 1 + c, hdr, f['header'])
        for label, value in (('Pessimistic', scenario.npv_low),
                             ('Base', scenario.npv_base),
                             ('Optimistic', scenario.npv_high)):
            row += 1
            ws.write(row, 1, label, f['label'])
            ws.write_number(row, 2, value, f['currency'])
        row += 2

    for c, hdr in enumerate(['Line Item', 'NPV Low', 'NPV Base', 'NPV High', 'Spread']):
        ws.write(row, 1 + c, hdr, f['header'])
    for item in items:
        row += 1
        ws.write(row, 1, item.label, f['label'])
        ws.write_number(row, 2, item.npv_low, f['currency'])
        ws.write_number(row, 3, item.npv_base, f['currency'])
        ws.write_number(row, 4, item.npv_high, f['currency'])
        ws.write_number(row, 5, item.spread, f['currency'])


def export_workbook(
    output_path: str,
    flows: Sequence[YearlyFlow],
    result: CalculationResult,
    discount_rate: float,
    sensitivity_items: Optional[Sequence[SensitivityItem]] = None,
    scenario: Optional[ScenarioResult] = None,
    title: str = "Benefit Realization Calculation",
) -> None:
    """Write calculation results to an Excel workbook.

    Args:
        output_path: Destination .xlsx path.
        flows: Yearly flows the result was computed from.
        result: Output of calculate() for flows.
        discount_rate: Discount rate used.
        sensitivity_items: Optional ranked sensitivity output.
        scenario: Optional whole-portfolio scenario NPVs.
        title: Heading written on the summary sheet.
    """
    wb = xlsxwriter.Workbook(output_path)
    f = _create_formats(wb)

    _create_summary_sheet(wb.add_worksheet('Summary'), f, result, discount_rate, title)
    _create_cashflows_sheet(wb.add_worksheet('Cash_Flows'), f, flows, result, discount_rate)
    if sensitivity_items is not None or scenario is not None:
        _create_sensitivity_sheet(wb.add_worksheet('Sensitivity'), f,
                                  sensitivity_items or [], scenario)

    wb.close()
    logger.info("Excel workbook written to %s", output_path)

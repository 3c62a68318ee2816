"""
exports.py — CTC breakdown documents.

Entry points:
    generate_ctc_pdf(result) -> BytesIO       (reportlab, A4 portrait)
    generate_ctc_workbook(result) -> BytesIO  (openpyxl, single sheet)

Both render the same table: Component | Monthly Amount | Annual Amount,
earnings first, then gross, statutory deductions and net take-home.
"""
from __future__ import annotations

import datetime
import logging
from io import BytesIO

from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, Spacer, TableStyle

from payrolldesk.calculator.schemas import CTCResult, TaxRegime
from payrolldesk.reporting import (
    GREEN_LIGHT,
    XLSX_TITLE,
    build_pdf,
    format_inr,
    grid_table,
    new_sheet,
    set_column_widths,
    style_total_row,
    workbook_bytes,
    write_header,
    write_rows,
)

logger = logging.getLogger(__name__)

TABLE_HEADER = ["Component", "Monthly Amount", "Annual Amount"]

REGIME_LABELS: dict[TaxRegime, str] = {
    TaxRegime.old: "Old Regime",
    TaxRegime.new: "New Regime",
}


def breakdown_rows(result: CTCResult) -> list[tuple[str, float, float]]:
    """(label, monthly, annual) rows shared by the PDF and Excel exports."""
    d = result.deductions
    rows: list[tuple[str, float, float]] = [
        (c.label, c.monthly, c.annual) for c in result.breakdown.components
    ]
    rows.append(("Gross Salary", result.breakdown.gross_monthly, result.breakdown.gross_annual))
    rows.append(("EPF (Employee)", d.epf_employee, d.epf_employee * 12))
    rows.append(("Professional Tax", d.professional_tax, d.professional_tax * 12))
    if result.input.options.esi:
        rows.append(("ESI (Employee)", d.esi_employee, d.esi_employee * 12))
    rows.append(("Income Tax", d.income_tax_monthly, d.income_tax_annual))
    rows.append(("Net Take Home", result.net_monthly, result.net_annual))
    return rows


def generate_ctc_pdf(result: CTCResult) -> BytesIO:
    """CTC Breakdown Report as a PDF buffer at position 0."""
    rows = [
        (label, format_inr(monthly), format_inr(annual))
        for label, monthly, annual in breakdown_rows(result)
    ]
    table = grid_table(TABLE_HEADER, rows, col_widths=[80 * mm, 45 * mm, 45 * mm], bold_last_row=True)
    table.setStyle(TableStyle([
        ("BACKGROUND", (0, -1), (-1, -1), GREEN_LIGHT),
        ("ALIGN", (1, 1), (-1, -1), "RIGHT"),
    ]))

    regime_label = REGIME_LABELS[result.input.tax_regime]
    flowables: list = [table]
    if result.warnings:
        styles = getSampleStyleSheet()
        flowables.append(Spacer(1, 4 * mm))
        for warning in result.warnings:
            flowables.append(Paragraph(f"Note: {warning}", styles["Normal"]))

    buffer = build_pdf(
        "CTC Breakdown Report",
        [
            f"Tax regime: {regime_label}",
            f"Report generated: {datetime.date.today().strftime('%d %B %Y')}",
        ],
        flowables,
    )
    logger.info("CTC PDF generated ctc=%s regime=%s", result.input.ctc, regime_label)
    return buffer


def generate_ctc_workbook(result: CTCResult) -> BytesIO:
    """CTC breakdown as an .xlsx buffer at position 0."""
    wb, ws = new_sheet("CTC Breakdown")

    ws.cell(row=1, column=1, value="CTC Breakdown Report").font = XLSX_TITLE
    ws.cell(row=2, column=1, value=f"Tax regime: {REGIME_LABELS[result.input.tax_regime]}")

    row = write_header(ws, TABLE_HEADER, row=4)
    rows = [
        (label, round(monthly, 2), round(annual, 2))
        for label, monthly, annual in breakdown_rows(result)
    ]
    next_row = write_rows(ws, rows, start_row=row)
    style_total_row(ws, next_row - 1, len(TABLE_HEADER))
    set_column_widths(ws, [25, 18, 18])

    logger.info("CTC workbook generated ctc=%s", result.input.ctc)
    return workbook_bytes(wb)

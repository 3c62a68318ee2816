"""
exports.py — Payroll test run documents.

Entry points (all return BytesIO at position 0):
    generate_muster_roll_pdf(report)        landscape A4, green header
    generate_muster_roll_workbook(report)   .xlsx with TOTALS row
    generate_leave_register_pdf(report)     landscape A4, blue header
    generate_statutory_workbook(report)     PF / ESI / PT sections + summary
"""
from __future__ import annotations

import logging
from io import BytesIO

from reportlab.lib.colors import white

from payrolldesk.reporting import (
    BLUE_HEADER,
    GREEN_HEADER,
    XLSX_BOLD,
    XLSX_TITLE,
    build_pdf,
    format_period,
    grid_table,
    new_sheet,
    set_column_widths,
    style_total_row,
    workbook_bytes,
    write_header,
    write_rows,
)
from payrolldesk.test_run.schemas import PayrollTestResult, TestRunReport

logger = logging.getLogger(__name__)

MUSTER_PDF_HEADER = [
    "Sr", "Code", "Name", "Dept", "P", "HD", "L", "A", "Worked",
    "Gross", "EPF", "ESI", "PT", "Ded", "Net",
]

MUSTER_XLSX_HEADER = [
    "Sr No", "Employee Code", "Employee Name", "Department", "Present Days",
    "Half Days", "Leave Days", "Absent Days", "Days Worked", "Gross Salary",
    "EPF (Employee)", "EPF (Employer)", "ESI (Employee)", "ESI (Employer)",
    "Professional Tax", "LWF", "Bonus", "Total Deductions", "Net Salary",
]

LEAVE_PDF_HEADER = [
    "Sr", "Code", "Name", "Dept", "Working Days", "Days Worked",
    "Leave Taken", "Half Days", "Leave Balance", "Leave Earned", "Daily Rate", "Leave Wages",
]


def leave_daily_rate(result: PayrollTestResult) -> float:
    """Gross / working days. A period with no working days has a 0 rate."""
    if result.total_working_days <= 0:
        return 0.0
    return result.gross_salary / result.total_working_days


# ---------------------------------------------------------------------------
# Muster roll
# ---------------------------------------------------------------------------

def generate_muster_roll_pdf(report: TestRunReport) -> BytesIO:
    rows = [
        [
            i, r.employee_code, r.employee_name, r.department,
            r.days_present, r.days_half, r.days_leave, r.days_absent, r.days_worked,
            r.gross_salary, r.epf_employee, r.esic_employee, r.professional_tax,
            r.total_deductions, r.net_salary,
        ]
        for i, r in enumerate(report.results, start=1)
    ]
    table = grid_table(
        MUSTER_PDF_HEADER, rows,
        header_color=GREEN_HEADER, header_text_color=white,
        font_size=7, padding=1.5,
    )
    buffer = build_pdf(
        "TEST RUN - Muster Roll Report",
        [format_period(report.start_date, report.end_date)],
        [table],
        orientation="landscape",
    )
    logger.info("Muster roll PDF generated employees=%d", len(report.results))
    return buffer


def muster_roll_rows(report: TestRunReport) -> list[list]:
    return [
        [
            i, r.employee_code, r.employee_name, r.department,
            r.days_present, r.days_half, r.days_leave, r.days_absent, r.days_worked,
            r.gross_salary, r.epf_employee, r.epf_employer, r.esic_employee, r.esic_employer,
            r.professional_tax, r.lwf, r.bonus, r.total_deductions, r.net_salary,
        ]
        for i, r in enumerate(report.results, start=1)
    ]


def generate_muster_roll_workbook(report: TestRunReport) -> BytesIO:
    wb, ws = new_sheet("Muster Roll")

    ws.cell(row=1, column=1, value="TEST RUN - Muster Roll Report").font = XLSX_TITLE
    ws.cell(row=2, column=1, value=format_period(report.start_date, report.end_date))

    row = write_header(ws, MUSTER_XLSX_HEADER, row=4)
    row = write_rows(ws, muster_roll_rows(report), start_row=row)

    s = report.summary
    totals_row = row + 1
    write_rows(ws, [[
        "TOTALS", "", "", "", "", "", "", "", "",
        s.total_gross_salary, s.total_epf_employee, s.total_epf_employer,
        s.total_esic_employee, s.total_esic_employer, s.total_pt, s.total_lwf,
        s.total_bonus, s.total_deductions, s.total_net_salary,
    ]], start_row=totals_row)
    style_total_row(ws, totals_row, len(MUSTER_XLSX_HEADER))
    set_column_widths(ws, [7, 14, 24, 16] + [12] * (len(MUSTER_XLSX_HEADER) - 4))

    logger.info("Muster roll workbook generated employees=%d", len(report.results))
    return workbook_bytes(wb)


# ---------------------------------------------------------------------------
# Leave register (test run)
# ---------------------------------------------------------------------------

def leave_register_rows(report: TestRunReport) -> list[list]:
    rows = []
    for i, r in enumerate(report.results, start=1):
        daily_rate = leave_daily_rate(r)
        rows.append([
            i, r.employee_code, r.employee_name, r.department,
            r.total_working_days, r.days_worked, r.days_leave, r.days_half,
            0, r.days_leave, round(daily_rate, 2), round(r.days_leave * daily_rate, 2),
        ])
    return rows


def generate_leave_register_pdf(report: TestRunReport) -> BytesIO:
    table = grid_table(
        LEAVE_PDF_HEADER, leave_register_rows(report),
        header_color=BLUE_HEADER, header_text_color=white,
        font_size=7, padding=1.5,
    )
    buffer = build_pdf(
        "TEST RUN - Leave Register Report",
        [format_period(report.start_date, report.end_date)],
        [table],
        orientation="landscape",
    )
    logger.info("Test-run leave register PDF generated employees=%d", len(report.results))
    return buffer


# ---------------------------------------------------------------------------
# Statutory compliance (PF, ESI, PT, LWF)
# ---------------------------------------------------------------------------

def generate_statutory_workbook(report: TestRunReport) -> BytesIO:
    wb, ws = new_sheet("Statutory Report")

    ws.cell(row=1, column=1, value="TEST RUN - Statutory Compliance Report (PF, ESI, PT, LWF)").font = XLSX_TITLE
    ws.cell(row=2, column=1, value=format_period(report.start_date, report.end_date))
    row = 4

    # --- PF ---
    ws.cell(row=row, column=1, value="PF CONTRIBUTIONS").font = XLSX_BOLD
    row = write_header(ws, [
        "Sr", "Employee Code", "Name", "Basic Salary",
        "Employee PF (12%)", "Employer PF (13%)", "Total PF",
    ], row + 1)
    pf = [r for r in report.results if r.epf_employee > 0]
    row = write_rows(ws, [
        [i, r.employee_code, r.employee_name, r.basic_salary,
         r.epf_employee, r.epf_employer, r.epf_employee + r.epf_employer]
        for i, r in enumerate(pf, start=1)
    ], start_row=row) + 1

    # --- ESI ---
    ws.cell(row=row, column=1, value="ESI CONTRIBUTIONS").font = XLSX_BOLD
    row = write_header(ws, [
        "Sr", "Employee Code", "Name", "Gross Salary",
        "Employee ESI (0.75%)", "Employer ESI (3.25%)", "Total ESI",
    ], row + 1)
    esi = [r for r in report.results if r.esic_employee > 0]
    row = write_rows(ws, [
        [i, r.employee_code, r.employee_name, r.gross_salary,
         r.esic_employee, r.esic_employer, r.esic_employee + r.esic_employer]
        for i, r in enumerate(esi, start=1)
    ], start_row=row) + 1

    # --- PT ---
    ws.cell(row=row, column=1, value="PROFESSIONAL TAX").font = XLSX_BOLD
    row = write_header(ws, ["Sr", "Employee Code", "Name", "Gross Salary", "PT Amount"], row + 1)
    pt = [r for r in report.results if r.professional_tax > 0]
    row = write_rows(ws, [
        [i, r.employee_code, r.employee_name, r.gross_salary, r.professional_tax]
        for i, r in enumerate(pt, start=1)
    ], start_row=row) + 1

    # --- Summary ---
    s = report.summary
    ws.cell(row=row, column=1, value="SUMMARY").font = XLSX_BOLD
    write_rows(ws, [
        ["Total EPF (Employee)", s.total_epf_employee],
        ["Total EPF (Employer)", s.total_epf_employer],
        ["Total ESI (Employee)", s.total_esic_employee],
        ["Total ESI (Employer)", s.total_esic_employer],
        ["Total Professional Tax", s.total_pt],
        ["Total LWF", s.total_lwf],
    ], start_row=row + 1)
    set_column_widths(ws, [24, 16, 24, 16, 20, 20, 14])

    logger.info(
        "Statutory workbook generated pf=%d esi=%d pt=%d",
        len(pf), len(esi), len(pt),
    )
    return workbook_bytes(wb)

"""
exports.py — Form 20 "Register of leave with wages" workbook.

Layout: ten title rows (rules, form number, factory, department, year,
Part I - Adults), then the 25-column Form 20 table, one row per employee.
Columns the system does not track are printed as "-" or "No".
"""
from __future__ import annotations

import logging
from io import BytesIO

from payrolldesk.leave_register.schemas import LeaveRegisterReport
from payrolldesk.reporting import (
    XLSX_BOLD,
    new_sheet,
    set_column_widths,
    workbook_bytes,
    write_header,
    write_rows,
)

logger = logging.getLogger(__name__)

FORM20_HEADER = [
    "Sr. No.", "Sr. No. in Register", "Name", "Father's Name", "Date of entry into Service",
    "Calendar year of service", "Number of days of work performed", "Number of days lay-off",
    "Number of days of maternity leave with wages", "Number of leave with wages enjoyed",
    "Total (cols. 5 to 8)", "Balance of leave with wages from preceding year",
    "Leave with wages earned during the year", "Total of cols. 10 & 11",
    "Whether leave with wages refused", "Whether leave not desired during next calendar year",
    "Leave with wages enjoyed From", "Leave with wages enjoyed To", "Balance to credit",
    "Normal rate of wages", "Cash equivalent or advantage", "Rate of wages for leave with wages period",
    "Date of discharge", "Date of amount of payment made in lieu of leave with wages due", "Remarks",
]

FORM20_WIDTHS = [
    8, 12, 25, 20, 15, 10, 12, 10, 12, 12, 10, 12, 12, 10,
    12, 12, 12, 12, 10, 12, 12, 12, 12, 15, 15,
]


def form20_rows(report: LeaveRegisterReport) -> list[list]:
    rows = []
    for i, r in enumerate(report.rows, start=1):
        rows.append([
            i,
            r.employee_code,
            r.employee_name,
            "-",
            r.join_date.isoformat() if r.join_date else "-",
            r.years_of_service,
            r.days_worked,
            r.lay_off_days,
            r.maternity_leave,
            r.leave_enjoyed,
            r.total_days,
            r.previous_balance,
            r.earned_leave,
            r.total_leave,
            "No",
            "No",
            "-",
            "-",
            r.balance_leave,
            r.daily_rate,
            "-",
            r.daily_rate,
            "-",
            r.leave_wages if r.leave_wages > 0 else "-",
            "",
        ])
    return rows


def generate_form20_workbook(report: LeaveRegisterReport) -> BytesIO:
    """Form 20 register as an .xlsx buffer at position 0."""
    wb, ws = new_sheet("Leave Register Form 20")

    title_rows = [
        ["The Maharashtra Factories Rules"],
        ["FORM 20"],
        ["(See Rules 105 and 106)"],
        ["Register of leave with wages"],
        [""],
        [f"Factory: {report.factory_name}"],
        [f"Department: {report.department_name}"],
        [f"Calendar Year: {report.year}"],
        ["Part I - Adults"],
        [""],
    ]
    row = write_rows(ws, title_rows, start_row=1)
    for title_row in (1, 2, 4):
        ws.cell(row=title_row, column=1).font = XLSX_BOLD

    row = write_header(ws, FORM20_HEADER, row)
    write_rows(ws, form20_rows(report), start_row=row)
    set_column_widths(ws, FORM20_WIDTHS)

    logger.info(
        "Form 20 workbook generated year=%d employees=%d",
        report.year, len(report.rows),
    )
    return workbook_bytes(wb)


def form20_filename(year: int) -> str:
    return f"Leave_Register_Form_20_{year}.xlsx"

"""
Leave-with-wages register (Form 20, Maharashtra Factories Rules 105 & 106).

Pure functions. One row per employee for a calendar year, derived from
attendance marks and approved leave requests that START in that year.
"""
from __future__ import annotations

import datetime
import logging
from typing import Iterable, Sequence

from payrolldesk.money import round_rupees
from payrolldesk.leave_register.schemas import LeaveRegisterRow, LeaveRequest
from payrolldesk.test_run.schemas import AttendanceRecord, AttendanceStatus, Employee

logger = logging.getLogger(__name__)

DAYS_PER_EARNED_LEAVE = 20       # One day of leave per 20 days worked
WAGE_DAYS_PER_MONTH   = 26
DEFAULT_BASIC_SALARY  = 15_000   # Used when the employee record has no basic
MATERNITY_LEAVE_TYPE  = "maternity"


def calculate_leave_data(
    employee: Employee,
    year: int,
    attendance: Iterable[AttendanceRecord],
    leaves: Iterable[LeaveRequest],
) -> LeaveRegisterRow:
    """Form 20 figures for one employee in one calendar year."""
    year_attendance = [
        a for a in attendance
        if a.user_id == employee.id and a.date.year == year
    ]
    days_worked = sum(1 for a in year_attendance if a.status == AttendanceStatus.present)
    lay_off_days = sum(1 for a in year_attendance if a.status == AttendanceStatus.layoff)

    approved = [
        lv for lv in leaves
        if lv.user_id == employee.id and lv.status == "approved" and lv.start_date.year == year
    ]
    maternity_leave = sum(lv.days for lv in approved if lv.leave_type == MATERNITY_LEAVE_TYPE)
    leave_enjoyed = sum(lv.days for lv in approved if lv.leave_type != MATERNITY_LEAVE_TYPE)

    earned_leave = days_worked // DAYS_PER_EARNED_LEAVE
    previous_balance = 0   # Carry-forward is not tracked yet
    total_leave = earned_leave + previous_balance

    basic = employee.basic_salary or DEFAULT_BASIC_SALARY
    daily_rate = round_rupees(basic / WAGE_DAYS_PER_MONTH)

    years_of_service = year - employee.join_date.year if employee.join_date else 0

    return LeaveRegisterRow(
        employee_id=employee.id,
        employee_code=employee.code,
        employee_name=employee.full_name,
        join_date=employee.join_date,
        years_of_service=years_of_service,
        days_worked=days_worked,
        lay_off_days=lay_off_days,
        maternity_leave=maternity_leave,
        leave_enjoyed=leave_enjoyed,
        total_days=days_worked + lay_off_days + maternity_leave + leave_enjoyed,
        previous_balance=previous_balance,
        earned_leave=earned_leave,
        total_leave=total_leave,
        balance_leave=total_leave - leave_enjoyed,
        daily_rate=daily_rate,
        leave_wages=daily_rate * leave_enjoyed,
    )


def build_register(
    employees: Sequence[Employee],
    year: int,
    attendance: Sequence[AttendanceRecord],
    leaves: Sequence[LeaveRequest],
) -> list[LeaveRegisterRow]:
    rows = [calculate_leave_data(e, year, attendance, leaves) for e in employees]
    logger.info("Leave register built year=%d employees=%d", year, len(rows))
    return rows


def selectable_years(today: datetime.date | None = None) -> list[int]:
    """Year picker options: two years back through two years ahead."""
    current = (today or datetime.date.today()).year
    return [current - 2 + i for i in range(5)]

"""Form 20 leave register calculations."""
from __future__ import annotations

import datetime

import pytest
from pydantic import ValidationError

from payrolldesk.leave_register.engine import (
    DEFAULT_BASIC_SALARY,
    build_register,
    calculate_leave_data,
    selectable_years,
)
from payrolldesk.leave_register.schemas import LeaveRequest
from payrolldesk.test_run.attendance import iter_days
from payrolldesk.test_run.schemas import AttendanceRecord, AttendanceStatus, Employee

D = datetime.date


@pytest.fixture
def employee() -> Employee:
    return Employee(
        id=1, first_name="Sunita", last_name="Rao", employee_code="ASN-001",
        join_date=D(2020, 5, 1), basic_salary=26_000,
    )


@pytest.fixture
def attendance() -> list[AttendanceRecord]:
    days = list(iter_days(D(2025, 1, 1), D(2025, 2, 20)))
    records = [
        AttendanceRecord(user_id=1, date=day, status=AttendanceStatus.present)
        for day in days[:45]
    ]
    records += [
        AttendanceRecord(user_id=1, date=D(2025, 3, 3), status=AttendanceStatus.layoff),
        AttendanceRecord(user_id=1, date=D(2025, 3, 4), status=AttendanceStatus.layoff),
        AttendanceRecord(user_id=1, date=D(2025, 3, 5), status=AttendanceStatus.absent),
        # Other year and other employee never count
        AttendanceRecord(user_id=1, date=D(2024, 12, 31), status=AttendanceStatus.present),
        AttendanceRecord(user_id=2, date=D(2025, 3, 3), status=AttendanceStatus.present),
    ]
    return records


@pytest.fixture
def leaves() -> list[LeaveRequest]:
    return [
        LeaveRequest(id=1, user_id=1, leave_type="casual", start_date=D(2025, 4, 1),
                     end_date=D(2025, 4, 3), status="approved"),
        LeaveRequest(id=2, user_id=1, leave_type="maternity", start_date=D(2025, 6, 1),
                     end_date=D(2025, 6, 10), status="approved"),
        LeaveRequest(id=3, user_id=1, leave_type="sick", start_date=D(2025, 7, 1),
                     end_date=D(2025, 7, 2), status="pending"),
        LeaveRequest(id=4, user_id=1, leave_type="casual", start_date=D(2024, 12, 30),
                     end_date=D(2025, 1, 2), status="approved"),
        LeaveRequest(id=5, user_id=2, leave_type="casual", start_date=D(2025, 4, 1),
                     end_date=D(2025, 4, 5), status="approved"),
    ]


def test_register_row_figures(employee, attendance, leaves) -> None:
    row = calculate_leave_data(employee, 2025, attendance, leaves)

    assert row.days_worked == 45
    assert row.lay_off_days == 2
    assert row.maternity_leave == 10
    assert row.leave_enjoyed == 3
    assert row.total_days == 60

    assert row.earned_leave == 2          # floor(45 / 20)
    assert row.previous_balance == 0
    assert row.total_leave == 2
    assert row.balance_leave == -1

    assert row.daily_rate == 1_000        # 26000 / 26
    assert row.leave_wages == 3_000
    assert row.years_of_service == 5
    assert row.employee_code == "ASN-001"
    assert row.employee_name == "Sunita Rao"


def test_default_basic_salary_used(leaves) -> None:
    employee = Employee(id=1, first_name="A")
    row = calculate_leave_data(employee, 2025, [], leaves)
    assert row.daily_rate == round(DEFAULT_BASIC_SALARY / 26) == 577
    assert row.years_of_service == 0
    assert row.days_worked == 0
    assert row.earned_leave == 0


def test_build_register_one_row_per_employee(employee, attendance, leaves) -> None:
    other = Employee(id=2, first_name="Vijay")
    rows = build_register([employee, other], 2025, attendance, leaves)
    assert [r.employee_id for r in rows] == [1, 2]
    assert rows[1].days_worked == 1
    assert rows[1].leave_enjoyed == 5


def test_leave_request_days_inclusive() -> None:
    leave = LeaveRequest(id=1, user_id=1, leave_type="casual",
                         start_date=D(2025, 4, 1), end_date=D(2025, 4, 1), status="approved")
    assert leave.days == 1


def test_leave_request_rejects_end_before_start() -> None:
    with pytest.raises(ValidationError):
        LeaveRequest(id=1, user_id=1, leave_type="casual",
                     start_date=D(2025, 4, 3), end_date=D(2025, 4, 1), status="approved")


def test_selectable_years() -> None:
    assert selectable_years(D(2025, 6, 1)) == [2023, 2024, 2025, 2026, 2027]


def test_daily_rate_half_rupee_rounds_up() -> None:
    # 15613 / 26 = 600.5
    employee = Employee(id=1, first_name="A", basic_salary=15_613)
    assert calculate_leave_data(employee, 2025, [], []).daily_rate == 601

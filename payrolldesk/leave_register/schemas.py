"""
schemas.py — Leave register (Form 20) Pydantic v2 data contracts.

Defines:
  - LeaveRequest           (approved/pending/rejected leave applications)
  - LeaveRegisterRow       (one Form 20 line per employee)
  - LeaveRegisterRequest   (POST /api/reports/leave-register body)
  - LeaveRegisterReport    (response + export input)
"""
from __future__ import annotations

import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from payrolldesk.test_run.schemas import AttendanceRecord, Employee


class LeaveRequest(BaseModel):
    """A leave application. Only status == 'approved' counts in the register."""
    model_config = ConfigDict(extra="forbid")

    id: int
    user_id: int
    leave_type: str                  # "maternity" is tracked separately
    start_date: datetime.date
    end_date: datetime.date
    status: str
    reason: Optional[str] = None

    @model_validator(mode="after")
    def validate_dates(self) -> "LeaveRequest":
        if self.end_date < self.start_date:
            raise ValueError(
                f"end_date ({self.end_date}) is before start_date ({self.start_date})"
            )
        return self

    @property
    def days(self) -> int:
        """Inclusive day count."""
        return (self.end_date - self.start_date).days + 1


class LeaveRegisterRow(BaseModel):
    """
    Form 20 figures for one employee and calendar year.

    total_days       = days_worked + lay_off_days + maternity_leave + leave_enjoyed
    earned_leave     = floor(days_worked / 20)
    total_leave      = earned_leave + previous_balance
    balance_leave    = total_leave - leave_enjoyed
    daily_rate       = basic / 26, halves rounded up
    leave_wages      = daily_rate × leave_enjoyed
    """
    model_config = ConfigDict(extra="forbid")

    employee_id: int
    employee_code: str
    employee_name: str
    join_date: Optional[datetime.date] = None
    years_of_service: int
    days_worked: int
    lay_off_days: int
    maternity_leave: int
    leave_enjoyed: int
    total_days: int
    previous_balance: int
    earned_leave: int
    total_leave: int
    balance_leave: int
    daily_rate: float
    leave_wages: float


class LeaveRegisterRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    year: int = Field(..., ge=1900, le=2200)
    employees: List[Employee] = Field(default_factory=list)
    leave_requests: List[LeaveRequest] = Field(default_factory=list)
    attendance_records: List[AttendanceRecord] = Field(default_factory=list)
    factory_name: Optional[str] = None          # settings.factory_name when omitted
    department_name: str = "All Departments"


class LeaveRegisterReport(BaseModel):
    model_config = ConfigDict(extra="forbid")

    year: int
    factory_name: str
    department_name: str
    rows: List[LeaveRegisterRow] = Field(default_factory=list)


__all__ = [
    "LeaveRequest",
    "LeaveRegisterRow",
    "LeaveRegisterRequest",
    "LeaveRegisterReport",
]

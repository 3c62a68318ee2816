"""
schemas.py — Payroll test run Pydantic v2 data contracts.

Defines:
  - AttendanceStatus, DateRangeKind enums
  - Employee, Department, AttendanceRecord, AttendanceDay  (inputs)
  - SalaryComponentSettings                                (company payroll settings)
  - TestRunRequest                                         (POST /api/payroll/test-run body)
  - PayrollTestResult, TestRunSummary, TestRunReport       (outputs)

Monetary outputs are whole rupees: every figure is rounded once, when the
per-employee result is built, and totals are sums of those rounded figures.
"""
from __future__ import annotations

import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class AttendanceStatus(str, Enum):
    present = "present"
    absent = "absent"
    leave = "leave"
    halfday = "halfday"
    weekend = "weekend"
    layoff = "layoff"


class DateRangeKind(str, Enum):
    last15 = "last15"
    last30 = "last30"
    current_month = "current_month"
    custom = "custom"


# ---------------------------------------------------------------------------
# Master data (arrives with the request: nothing is stored)
# ---------------------------------------------------------------------------

class Department(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: int
    name: str


class Employee(BaseModel):
    """
    Employee master record as the payroll screens consume it.

    salary is the MONTHLY CTC. basic_salary is only used by the leave
    register (Form 20) daily-rate column.
    """
    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    id: int
    first_name: str
    last_name: str = ""
    employee_code: Optional[str] = None
    department_id: Optional[int] = None
    position: Optional[str] = None
    join_date: Optional[datetime.date] = None
    salary: float = Field(default=0, ge=0)
    basic_salary: Optional[float] = Field(default=None, ge=0)
    is_active: bool = True
    status: str = "active"
    pf_applicable: bool = True
    esic_applicable: bool = False
    pt_applicable: bool = True
    lwf_applicable: bool = False
    bonus_applicable: bool = False

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def code(self) -> str:
        return self.employee_code or f"EMP{self.id}"

    @property
    def on_payroll(self) -> bool:
        return self.is_active and self.status == "active"


class AttendanceRecord(BaseModel):
    """A recorded attendance mark for one employee on one date."""
    model_config = ConfigDict(extra="forbid")

    user_id: int
    date: datetime.date
    status: AttendanceStatus
    hours_worked: Optional[float] = None


class AttendanceDay(BaseModel):
    model_config = ConfigDict(extra="forbid")

    date: datetime.date
    status: AttendanceStatus


class SalaryComponentSettings(BaseModel):
    """
    Company-level salary structure used by the test run.

    basic_salary_percentage is a share of pro-rated gross; hra_percentage is a
    share of BASIC, not of gross.
    """
    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    basic_salary_percentage: float = Field(default=50, ge=0, le=100)
    hra_percentage: float = Field(default=50, ge=0, le=100)
    epf_percentage: float = Field(default=12, ge=0, le=100)
    esic_percentage: float = Field(default=0.75, ge=0, le=100)
    professional_tax: float = Field(default=200, ge=0)


# ---------------------------------------------------------------------------
# Request
# ---------------------------------------------------------------------------

class TestRunRequest(BaseModel):
    """
    Everything a test run needs. seed makes the simulated attendance
    reproducible; omit it for a fresh random draw.
    """
    __test__ = False   # not a pytest test class despite the name

    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    employees: List[Employee] = Field(default_factory=list)
    departments: List[Department] = Field(default_factory=list)
    attendance_records: List[AttendanceRecord] = Field(default_factory=list)

    date_range: DateRangeKind = DateRangeKind.last15
    custom_start_date: Optional[datetime.date] = None
    custom_end_date: Optional[datetime.date] = None
    today: Optional[datetime.date] = None

    include_bonus: bool = True
    bonus_percentage: float = Field(default=8.33, ge=0, le=100)
    salary_components: SalaryComponentSettings = Field(default_factory=SalaryComponentSettings)
    seed: Optional[int] = None

    @model_validator(mode="after")
    def validate_custom_range(self) -> "TestRunRequest":
        """Custom ranges need both dates, start on or before end."""
        if self.date_range == DateRangeKind.custom:
            if self.custom_start_date is None or self.custom_end_date is None:
                raise ValueError("custom date range requires custom_start_date and custom_end_date")
            if self.custom_start_date > self.custom_end_date:
                raise ValueError(
                    f"custom_start_date ({self.custom_start_date}) is after "
                    f"custom_end_date ({self.custom_end_date})"
                )
        return self


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------

class PayrollTestResult(BaseModel):
    """Pro-rated payroll for one employee over the test-run period."""
    __test__ = False

    model_config = ConfigDict(extra="forbid")

    employee_id: int
    employee_name: str
    employee_code: str
    department: str
    monthly_ctc: float
    days_worked: float
    days_present: int
    days_half: int
    days_absent: int
    days_leave: int
    total_working_days: int
    gross_salary: float
    basic_salary: float
    hra: float
    da: float
    special_allowance: float
    other_allowances: float
    epf_employee: float
    epf_employer: float
    esic_employee: float
    esic_employer: float
    professional_tax: float
    lwf: float
    bonus: float
    total_deductions: float
    net_salary: float
    attendance: List[AttendanceDay] = Field(default_factory=list)


class TestRunSummary(BaseModel):
    """Totals across every employee in the run."""
    __test__ = False

    model_config = ConfigDict(extra="forbid")

    total_employees: int = 0
    total_gross_salary: float = 0
    total_net_salary: float = 0
    total_epf_employee: float = 0
    total_epf_employer: float = 0
    total_esic_employee: float = 0
    total_esic_employer: float = 0
    total_pt: float = 0
    total_lwf: float = 0
    total_bonus: float = 0
    total_deductions: float = 0


class TestRunReport(BaseModel):
    """Response of POST /api/payroll/test-run and input of its exports."""
    __test__ = False

    model_config = ConfigDict(extra="forbid")

    start_date: datetime.date
    end_date: datetime.date
    period_days: int
    results: List[PayrollTestResult] = Field(default_factory=list)
    summary: TestRunSummary = Field(default_factory=TestRunSummary)


__all__ = [
    "AttendanceStatus",
    "DateRangeKind",
    "Department",
    "Employee",
    "AttendanceRecord",
    "AttendanceDay",
    "SalaryComponentSettings",
    "TestRunRequest",
    "PayrollTestResult",
    "TestRunSummary",
    "TestRunReport",
]

"""
PayrollDesk Test Run Engine — simulated payroll over a short period.
Pure functions apart from the optional per-employee delay in the async runner.

Per employee:
  1. days_worked = present + 0.5 × halfday
  2. gross = (monthly CTC / 30) × days_worked     (0 when nothing was worked)
  3. basic = gross × basic%; hra = basic × hra%; da = basic × 10%;
     other = basic × 20%; special = max(0, gross − the four above)
  4. EPF on min(basic, ₹15,000): employee 12%, employer 13%
  5. ESI on gross when gross <= ₹21,000: employee 0.75%, employer 3.25%
  6. PT ₹200, LWF ₹25, bonus = basic × bonus% when enabled
  7. deductions = EPF + ESI + PT + LWF; net = gross + bonus − deductions
"""
from __future__ import annotations

import asyncio
import datetime
import logging
import random
from typing import Iterable, Optional, Sequence

from payrolldesk.money import round_rupees
from payrolldesk.test_run.attendance import (
    RandomSource,
    generate_test_attendance,
    resolve_date_range,
)
from payrolldesk.test_run.schemas import (
    AttendanceDay,
    AttendanceStatus,
    Department,
    Employee,
    PayrollTestResult,
    SalaryComponentSettings,
    TestRunReport,
    TestRunRequest,
    TestRunSummary,
)

logger = logging.getLogger(__name__)

# ===========================================================================
# CONSTANTS
# ===========================================================================

PRORATION_DIVISOR     = 30        # Fixed days-per-month, regardless of calendar

DA_OF_BASIC           = 0.10
OTHER_OF_BASIC        = 0.20

EPF_WAGE_CEILING      = 15_000
EPF_EMPLOYEE_RATE     = 0.12
EPF_EMPLOYER_RATE     = 0.13

ESIC_WAGE_CEILING     = 21_000
ESIC_EMPLOYEE_RATE    = 0.0075
ESIC_EMPLOYER_RATE    = 0.0325

LWF_AMOUNT            = 25


def department_name(department_id: Optional[int], departments: Sequence[Department]) -> str:
    if not department_id:
        return "Unassigned"
    for dept in departments:
        if dept.id == department_id:
            return dept.name
    return "Unassigned"


def _count(attendance: Sequence[AttendanceDay], status: AttendanceStatus) -> int:
    return sum(1 for day in attendance if day.status == status)


def prorated_gross(monthly_ctc: float, days_worked: float) -> float:
    """Daily rate × days worked. Zero days worked is zero pay, never an error."""
    if days_worked <= 0:
        return 0.0
    return monthly_ctc / PRORATION_DIVISOR * days_worked


def calculate_payroll(
    employee: Employee,
    attendance: Sequence[AttendanceDay],
    components: SalaryComponentSettings | None = None,
    include_bonus: bool = True,
    bonus_percentage: float = 8.33,
    department: str = "Unassigned",
) -> PayrollTestResult:
    """Payroll for one employee given their attendance over the period."""
    components = components or SalaryComponentSettings()

    total_days = len(attendance)
    weekend_days = _count(attendance, AttendanceStatus.weekend)
    present_days = _count(attendance, AttendanceStatus.present)
    half_days = _count(attendance, AttendanceStatus.halfday)
    leave_days = _count(attendance, AttendanceStatus.leave)
    absent_days = _count(attendance, AttendanceStatus.absent)

    days_worked = present_days + half_days * 0.5
    gross = prorated_gross(employee.salary, days_worked)

    basic = gross * components.basic_salary_percentage / 100
    hra = basic * components.hra_percentage / 100
    da = basic * DA_OF_BASIC
    other = basic * OTHER_OF_BASIC
    special = max(0.0, gross - (basic + hra + da + other))

    if employee.pf_applicable:
        pf_wage = min(basic, EPF_WAGE_CEILING)
        epf_employee = round_rupees(pf_wage * EPF_EMPLOYEE_RATE)
        epf_employer = round_rupees(pf_wage * EPF_EMPLOYER_RATE)
    else:
        epf_employee = epf_employer = 0

    if employee.esic_applicable and gross <= ESIC_WAGE_CEILING:
        esic_employee = round_rupees(gross * ESIC_EMPLOYEE_RATE)
        esic_employer = round_rupees(gross * ESIC_EMPLOYER_RATE)
    else:
        esic_employee = esic_employer = 0

    professional_tax = components.professional_tax if employee.pt_applicable else 0
    lwf = LWF_AMOUNT if employee.lwf_applicable else 0
    bonus = (
        round_rupees(basic * bonus_percentage / 100)
        if include_bonus and employee.bonus_applicable
        else 0
    )

    total_deductions = epf_employee + esic_employee + professional_tax + lwf
    net = gross + bonus - total_deductions

    return PayrollTestResult(
        employee_id=employee.id,
        employee_name=employee.full_name,
        employee_code=employee.code,
        department=department,
        monthly_ctc=employee.salary,
        days_worked=days_worked,
        days_present=present_days,
        days_half=half_days,
        days_absent=absent_days,
        days_leave=leave_days,
        total_working_days=total_days - weekend_days,
        gross_salary=round_rupees(gross),
        basic_salary=round_rupees(basic),
        hra=round_rupees(hra),
        da=round_rupees(da),
        special_allowance=round_rupees(special),
        other_allowances=round_rupees(other),
        epf_employee=epf_employee,
        epf_employer=epf_employer,
        esic_employee=esic_employee,
        esic_employer=esic_employer,
        professional_tax=professional_tax,
        lwf=lwf,
        bonus=bonus,
        total_deductions=total_deductions,
        net_salary=round_rupees(net),
        attendance=list(attendance),
    )


def summarize(results: Iterable[PayrollTestResult]) -> TestRunSummary:
    """Sum every per-employee figure. An empty run is all zeros."""
    summary = TestRunSummary()
    for r in results:
        summary.total_employees += 1
        summary.total_gross_salary += r.gross_salary
        summary.total_net_salary += r.net_salary
        summary.total_epf_employee += r.epf_employee
        summary.total_epf_employer += r.epf_employer
        summary.total_esic_employee += r.esic_employee
        summary.total_esic_employer += r.esic_employer
        summary.total_pt += r.professional_tax
        summary.total_lwf += r.lwf
        summary.total_bonus += r.bonus
        summary.total_deductions += r.total_deductions
    return summary


def _prepare(
    request: TestRunRequest,
    today: Optional[datetime.date],
    rng: Optional[RandomSource],
) -> tuple[datetime.date, datetime.date, RandomSource, list[Employee]]:
    today = today or request.today or datetime.date.today()
    start, end = resolve_date_range(
        request.date_range, today, request.custom_start_date, request.custom_end_date
    )
    if rng is None:
        rng = random.Random(request.seed)
    employees = [e for e in request.employees if e.on_payroll]
    return start, end, rng, employees


def _result_for(
    request: TestRunRequest,
    employee: Employee,
    start: datetime.date,
    end: datetime.date,
    rng: RandomSource,
) -> PayrollTestResult:
    attendance = generate_test_attendance(
        employee.id, start, end, request.attendance_records, rng
    )
    return calculate_payroll(
        employee,
        attendance,
        components=request.salary_components,
        include_bonus=request.include_bonus,
        bonus_percentage=request.bonus_percentage,
        department=department_name(employee.department_id, request.departments),
    )


def _report(start: datetime.date, end: datetime.date, results: list[PayrollTestResult]) -> TestRunReport:
    return TestRunReport(
        start_date=start,
        end_date=end,
        period_days=(end - start).days + 1,
        results=results,
        summary=summarize(results),
    )


def run_payroll_test(
    request: TestRunRequest,
    today: Optional[datetime.date] = None,
    rng: Optional[RandomSource] = None,
) -> TestRunReport:
    """
    Sequential test run over every active employee.

    Attendance draws come from rng in employee order, so the same request,
    date and random sequence always produce the same report.
    """
    start, end, rng, employees = _prepare(request, today, rng)
    results = [_result_for(request, e, start, end, rng) for e in employees]
    logger.info(
        "Test run completed employees=%d period=%s..%s",
        len(results), start, end,
    )
    return _report(start, end, results)


async def run_payroll_test_async(
    request: TestRunRequest,
    today: Optional[datetime.date] = None,
    rng: Optional[RandomSource] = None,
    item_delay: float = 0.0,
) -> TestRunReport:
    """
    Same as run_payroll_test(), pausing item_delay seconds before each
    employee so a caller streaming progress can pace the run.
    """
    start, end, rng, employees = _prepare(request, today, rng)
    results: list[PayrollTestResult] = []
    for employee in employees:
        if item_delay > 0:
            await asyncio.sleep(item_delay)
        results.append(_result_for(request, employee, start, end, rng))
    logger.info(
        "Test run completed employees=%d period=%s..%s delay=%ss",
        len(results), start, end, item_delay,
    )
    return _report(start, end, results)

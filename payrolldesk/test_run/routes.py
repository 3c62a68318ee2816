"""
Payroll test run HTTP routes — POST /api/payroll/test-run,
                               POST /api/payroll/test-run/export/{kind}

The run endpoint paces itself with settings.test_run_item_delay_ms between
employees. Export endpoints take a TestRunReport body (as returned by the run
endpoint), so a report can be re-exported without re-drawing attendance.
"""
from __future__ import annotations

import logging
from enum import Enum
from io import BytesIO
from typing import Callable

from fastapi import APIRouter
from fastapi.responses import JSONResponse, StreamingResponse

from payrolldesk.config import settings
from payrolldesk.reporting import PDF_MEDIA_TYPE, XLSX_MEDIA_TYPE, export_filename
from payrolldesk.test_run.engine import run_payroll_test_async
from payrolldesk.test_run.exports import (
    generate_leave_register_pdf,
    generate_muster_roll_pdf,
    generate_muster_roll_workbook,
    generate_statutory_workbook,
)
from payrolldesk.test_run.schemas import TestRunReport, TestRunRequest

router = APIRouter(prefix="/api/payroll", tags=["payroll_test_run"])
logger = logging.getLogger(__name__)


class ExportKind(str, Enum):
    muster_pdf = "muster-pdf"
    muster_xlsx = "muster-xlsx"
    leave_pdf = "leave-pdf"
    statutory_xlsx = "statutory-xlsx"


# kind → (builder, filename prefix, extension, media type)
_EXPORTS: dict[ExportKind, tuple[Callable[[TestRunReport], BytesIO], str, str, str]] = {
    ExportKind.muster_pdf: (generate_muster_roll_pdf, "Test_Muster_Roll", "pdf", PDF_MEDIA_TYPE),
    ExportKind.muster_xlsx: (generate_muster_roll_workbook, "Test_Muster_Roll", "xlsx", XLSX_MEDIA_TYPE),
    ExportKind.leave_pdf: (generate_leave_register_pdf, "Test_Leave_Register", "pdf", PDF_MEDIA_TYPE),
    ExportKind.statutory_xlsx: (generate_statutory_workbook, "Test_Statutory_Report", "xlsx", XLSX_MEDIA_TYPE),
}


@router.post("/test-run")
async def test_run(request_body: TestRunRequest) -> JSONResponse:
    """
    Simulate attendance and compute payroll for every active employee.
    ValueError (bad date range) surfaces through the global 422 handler.
    """
    report = await run_payroll_test_async(
        request_body,
        item_delay=settings.test_run_item_delay_ms / 1000,
    )

    logger.info(
        "Test run served employees=%d gross=%s net=%s",
        report.summary.total_employees,
        report.summary.total_gross_salary,
        report.summary.total_net_salary,
    )
    return JSONResponse(status_code=200, content=report.model_dump(mode="json"))


@router.post("/test-run/export/{kind}")
async def export_test_run(kind: ExportKind, report: TestRunReport) -> StreamingResponse:
    """Render a previously computed test run as PDF or Excel."""
    builder, prefix, ext, media_type = _EXPORTS[kind]
    buffer = builder(report)
    filename = export_filename(prefix, ext)
    logger.info("Test run exported kind=%s filename=%s", kind.value, filename)
    return StreamingResponse(
        buffer,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )

"""
Leave register HTTP routes — POST /api/reports/leave-register,
                              POST /api/reports/leave-register/export,
                              GET  /api/reports/leave-register/years
"""
from __future__ import annotations

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse, StreamingResponse

from payrolldesk.config import settings
from payrolldesk.leave_register.engine import build_register, selectable_years
from payrolldesk.leave_register.exports import form20_filename, generate_form20_workbook
from payrolldesk.leave_register.schemas import LeaveRegisterReport, LeaveRegisterRequest
from payrolldesk.reporting import XLSX_MEDIA_TYPE

router = APIRouter(prefix="/api/reports", tags=["leave_register"])
logger = logging.getLogger(__name__)


def _build_report(body: LeaveRegisterRequest) -> LeaveRegisterReport:
    rows = build_register(body.employees, body.year, body.attendance_records, body.leave_requests)
    return LeaveRegisterReport(
        year=body.year,
        factory_name=body.factory_name or settings.factory_name,
        department_name=body.department_name,
        rows=rows,
    )


@router.post("/leave-register")
async def leave_register(body: LeaveRegisterRequest) -> JSONResponse:
    report = _build_report(body)
    return JSONResponse(status_code=200, content=report.model_dump(mode="json"))


@router.post("/leave-register/export")
async def export_leave_register(body: LeaveRegisterRequest) -> StreamingResponse:
    """Download Form 20 as Leave_Register_Form_20_<year>.xlsx."""
    report = _build_report(body)
    buffer = generate_form20_workbook(report)
    filename = form20_filename(body.year)
    logger.info("Form 20 exported year=%d filename=%s", body.year, filename)
    return StreamingResponse(
        buffer,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/leave-register/years")
async def leave_register_years() -> JSONResponse:
    return JSONResponse(status_code=200, content={"years": selectable_years()})

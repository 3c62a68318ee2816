"""
CTC calculator HTTP routes — POST /api/ctc/calculate,
                              POST /api/ctc/compare,
                              POST /api/ctc/export/pdf,
                              POST /api/ctc/export/xlsx

Every endpoint takes a CompensationInput body. Nothing is stored: the
breakdown is recomputed on every request.
"""
from __future__ import annotations

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse, StreamingResponse

from payrolldesk.calculator.ctc_engine import calculate_ctc
from payrolldesk.calculator.exports import generate_ctc_pdf, generate_ctc_workbook
from payrolldesk.calculator.schemas import CompensationInput, CTCResult
from payrolldesk.calculator.tax_engine import compare_regimes
from payrolldesk.calculator.validator import validate_compensation
from payrolldesk.errors import make_validation_error_response
from payrolldesk.reporting import PDF_MEDIA_TYPE, XLSX_MEDIA_TYPE

router = APIRouter(prefix="/api/ctc", tags=["ctc_calculator"])
logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _validated_result(data: CompensationInput) -> CTCResult:
    """Business-rule validation, then the calculator. Raises ValueError on violations."""
    warnings = validate_compensation(data)
    result = calculate_ctc(data)
    if warnings:
        result = result.model_copy(update={"warnings": warnings + result.warnings})
    return result


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("/calculate")
async def calculate(data: CompensationInput) -> JSONResponse:
    """Itemised breakdown, deductions and net take-home for one input."""
    try:
        result = _validated_result(data)
    except ValueError as exc:
        return make_validation_error_response(str(exc), "Compensation validation failed")

    logger.info(
        "CTC calculated ctc=%s period=%s regime=%s net_monthly=%.2f",
        data.ctc,
        data.pay_period.value,
        data.tax_regime.value,
        result.net_monthly,
    )
    return JSONResponse(status_code=200, content=result.model_dump(mode="json"))


@router.post("/compare")
async def compare(data: CompensationInput) -> JSONResponse:
    """Annual tax under both regimes for the input's CTC and EPF."""
    try:
        result = _validated_result(data)
    except ValueError as exc:
        return make_validation_error_response(str(exc), "Compensation validation failed")

    comparison = compare_regimes(
        data.annual_ctc,
        annual_retirement_contribution=result.deductions.epf_employee * 12,
    )
    logger.info(
        "Regimes compared ctc=%s recommended=%s savings=%s",
        data.ctc,
        comparison.recommended_regime.value,
        comparison.savings_amount,
    )
    return JSONResponse(status_code=200, content=comparison.model_dump(mode="json"))


@router.post("/export/pdf", response_model=None)
async def export_pdf(data: CompensationInput) -> StreamingResponse | JSONResponse:
    """Download the breakdown as ctc-breakdown.pdf."""
    try:
        result = _validated_result(data)
    except ValueError as exc:
        return make_validation_error_response(str(exc), "Compensation validation failed")

    buffer = generate_ctc_pdf(result)
    return StreamingResponse(
        buffer,
        media_type=PDF_MEDIA_TYPE,
        headers={"Content-Disposition": 'attachment; filename="ctc-breakdown.pdf"'},
    )


@router.post("/export/xlsx", response_model=None)
async def export_xlsx(data: CompensationInput) -> StreamingResponse | JSONResponse:
    """Download the breakdown as ctc-breakdown.xlsx."""
    try:
        result = _validated_result(data)
    except ValueError as exc:
        return make_validation_error_response(str(exc), "Compensation validation failed")

    buffer = generate_ctc_workbook(result)
    return StreamingResponse(
        buffer,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": 'attachment; filename="ctc-breakdown.xlsx"'},
    )

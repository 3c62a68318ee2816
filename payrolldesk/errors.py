"""
errors.py — cross-cutting error envelope shared by every router.

Structure: {"error": {"code": "...", "message": "...", "details": [...]}}

Business-rule validators raise ValueError whose message is a JSON-encoded
list of {field, issue} dicts; routes turn that into a 422 envelope with
make_validation_error_response().
"""
from __future__ import annotations

import json
from typing import Any, List, Optional

from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field


class ErrorDetail(BaseModel):
    """Single field-level validation or business-rule error."""
    model_config = ConfigDict(extra="forbid")

    field: Optional[str] = None   # Dot-notation field path, e.g. "percentages.basic"
    issue: str                     # Human-readable description of the problem


class ErrorBody(BaseModel):
    """Error envelope body."""
    model_config = ConfigDict(extra="forbid")

    code: str                                      # VALIDATION_ERROR, NOT_FOUND, etc.
    message: str                                   # High-level error description
    details: List[ErrorDetail] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    """Standard error response format for all PayrollDesk endpoints."""
    model_config = ConfigDict(extra="forbid")

    error: ErrorBody


def violations_error(violations: list[dict[str, Any]]) -> ValueError:
    """Build the ValueError business-rule validators raise."""
    return ValueError(json.dumps(violations))


def error_response(
    code: str,
    message: str,
    details: list[dict[str, Any]] | None = None,
    status_code: int = 500,
) -> JSONResponse:
    """Every error body the API returns goes through ErrorResponse."""
    body = ErrorResponse(
        error=ErrorBody(
            code=code,
            message=message,
            details=[ErrorDetail(**d) for d in details or []],
        )
    )
    return JSONResponse(status_code=status_code, content=body.model_dump())


def make_validation_error_response(
    violations_json: str,
    message: str = "Request validation failed",
) -> JSONResponse:
    """Parse JSON-encoded violations and return standard 422 error envelope."""
    try:
        violations: list[dict] = json.loads(violations_json)
    except (json.JSONDecodeError, ValueError):
        violations = [{"field": None, "issue": violations_json}]
    if not isinstance(violations, list):
        violations = [{"field": None, "issue": violations_json}]
    details = [{"field": v.get("field"), "issue": v["issue"]} for v in violations]
    return error_response("VALIDATION_ERROR", message, details, status_code=422)

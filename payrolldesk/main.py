"""
main.py — PayrollDesk FastAPI application entry point.

Start with: uvicorn payrolldesk.main:app --reload --port 8000

Every failure leaves the API as an errors.ErrorResponse envelope: schema
violations and ValueErrors from the engines as 422, HTTP errors with a
semantic code, anything else as 500 INTERNAL_ERROR.
"""
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from payrolldesk.calculator.routes import router as ctc_router
from payrolldesk.config import settings
from payrolldesk.errors import error_response
from payrolldesk.leave_register.routes import router as leave_register_router
from payrolldesk.test_run.routes import router as test_run_router

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

HTTP_ERROR_CODES = {
    400: "BAD_REQUEST",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    422: "VALIDATION_ERROR",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Stateless: no connections to open or close.
    logger.info(
        "PayrollDesk v%s up (factory=%r, test run delay=%dms)",
        settings.app_version,
        settings.factory_name,
        settings.test_run_item_delay_ms,
    )
    yield
    logger.info("PayrollDesk stopped")


app = FastAPI(
    title="PayrollDesk API",
    version=settings.app_version,
    description=(
        "Payroll administration calculations: CTC breakdown with old/new regime "
        "income tax, simulated payroll test runs, and the Form 20 leave register."
    ),
    lifespan=lifespan,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """One detail per failing field, path without the leading 'body'."""
    details = [
        {
            "field": ".".join(str(loc) for loc in err["loc"] if loc != "body") or None,
            "issue": err["msg"],
        }
        for err in exc.errors()
    ]
    return error_response("VALIDATION_ERROR", "Request validation failed", details, status_code=422)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    code = HTTP_ERROR_CODES.get(exc.status_code, f"HTTP_{exc.status_code}")
    return error_response(code, str(exc.detail), status_code=exc.status_code)


@app.exception_handler(ValueError)
async def engine_value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
    """Date ranges and tax inputs the engines refuse to compute."""
    logger.info("Rejected %s %s: %s", request.method, request.url.path, exc)
    return error_response("VALIDATION_ERROR", str(exc), status_code=422)


@app.exception_handler(Exception)
async def internal_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=True)
    details = [{"issue": f"{type(exc).__name__}: {exc}"}] if settings.debug else []
    return error_response("INTERNAL_ERROR", "An unexpected error occurred", details)


@app.get("/api/health", tags=["System"])
async def health_check() -> dict:
    return {
        "status": "ok",
        "version": settings.app_version,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


app.include_router(ctc_router)
app.include_router(test_run_router)
app.include_router(leave_register_router)

"""
Main Application Entry Point
----------------------------
FastAPI app for the Underwriting Ledger.

Handles:
 - Policy issuance (risk scoring + premium pricing)
 - Claim submission (fraud scoring + approval recommendation)
 - Contract state and administration
 - Health and system info endpoints
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from datetime import datetime, timezone
import traceback
import json

# =========================================================
# 📦 Internal Imports
# =========================================================
from underwriting.utils.logger import logger
from underwriting.utils.db import init_db
from underwriting.utils.logging_middleware import LoggingMiddleware
from underwriting.config import config
from underwriting.models.errors import ErrorCode, LedgerError
from underwriting.api.endpoints import admin, claims, policies

APP_VERSION = "1.0.0"

# =========================================================
# 🚀 FastAPI Initialization
# =========================================================
app = FastAPI(
    title="Underwriting Ledger",
    version=APP_VERSION,
    description="Deterministic underwriting, premium pricing and claim fraud scoring.",
)

app.add_middleware(LoggingMiddleware)

# =========================================================
# 🔌 Include Routers (only main file uses prefix)
# =========================================================
app.include_router(policies.router, prefix="/api/v1")
app.include_router(claims.router, prefix="/api/v1")
app.include_router(admin.router, prefix="/api/v1")

# =========================================================
# ⚙️ Exception Handlers
# =========================================================
ERROR_STATUS = {
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.UNAUTHORIZED: 403,
    ErrorCode.INVALID_AMOUNT: 400,
    ErrorCode.POLICY_EXPIRED: 409,
    ErrorCode.INVALID_RISK_SCORE: 422,
    ErrorCode.INVALID_EVIDENCE: 422,
    ErrorCode.PAUSED: 503,
    ErrorCode.TRANSFER_FAILURE: 402,
}


@app.exception_handler(LedgerError)
async def ledger_exception_handler(request: Request, exc: LedgerError):
    """Maps categorical ledger failures onto HTTP statuses."""
    status_code = ERROR_STATUS.get(exc.code, 400)
    logger.info(json.dumps({
        "event": "request_rejected",
        "code": exc.code.value,
        "status": status_code,
        "path": str(request.url.path),
    }))
    return JSONResponse(status_code=status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handles invalid request payloads gracefully."""
    log_data = {
        "event": "request_error",
        "type": "ValidationError",
        "status": 422,
        "path": str(request.url.path),
        "errors": exc.errors(),
    }
    logger.error(json.dumps(log_data, default=str))

    return JSONResponse(
        status_code=422,
        content={"detail": "Invalid input. Please check your request payload."},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Catch-all for unexpected runtime exceptions."""
    log_data = {
        "event": "request_error",
        "type": type(exc).__name__,
        "status": 500,
        "path": str(request.url.path),
        "trace": traceback.format_exc(),
    }
    logger.error(json.dumps(log_data))

    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error. Please try again later."},
    )


# =========================================================
# 🧩 Utility Endpoints
# =========================================================
@app.get("/")
async def root():
    """Root endpoint for system information."""
    return {
        "status": "running",
        "version": APP_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "message": "Underwriting Ledger API",
        "environment": config.ENV,
    }


@app.get("/health")
async def health():
    """Basic health check."""
    return {"status": "healthy"}


@app.on_event("startup")
async def startup():
    """Creates tables and counters, then logs all routes."""
    init_db()
    logger.info("🚦 Registered Routes:")
    for route in app.routes:
        logger.info(f"  • {route.path}")


def run_api() -> None:
    import uvicorn

    logger.info("🚀 Starting Underwriting Ledger API")
    uvicorn.run(
        "underwriting.main:app",
        host=config.API_HOST,
        port=config.API_PORT,
        reload=config.DEBUG,
    )


# =========================================================
# 🏁 Local Debug Runner
# =========================================================
if __name__ == "__main__":
    run_api()

"""
Request/Response Logging Middleware
-----------------------------------
Logs every API request and response in structured JSON format.

Features:
- Captures method, path, caller (from the bearer token), latency, and status code
- Masks identity-like query parameters
- Skips health check & docs routes for noise reduction
"""

import time
import json
import uuid
from fastapi import Request
from fastapi import HTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response
from underwriting.utils.logger import logger
from underwriting.utils.security import verify_jwt_token


class LoggingMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, redact_pii: bool = True):
        super().__init__(app)
        self.redact_pii = redact_pii

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        path = request.url.path
        method = request.method
        trace_id = str(uuid.uuid4())
        caller = self._caller_from(request)

        skip_paths = ["/health", "/docs", "/openapi.json", "/favicon.ico"]
        if any(path.startswith(skip) for skip in skip_paths):
            return await call_next(request)

        params = dict(request.query_params)
        if self.redact_pii:
            params = self._mask_sensitive(params)

        logger.info(
            json.dumps({
                "trace_id": trace_id,
                "event": "request_start",
                "method": method,
                "path": path,
                "caller": caller,
                "client_ip": request.client.host if request.client else "unknown",
                "params": params,
            }, default=str)
        )

        try:
            response: Response = await call_next(request)
        except Exception as e:
            logger.error(
                json.dumps({
                    "trace_id": trace_id,
                    "event": "request_error",
                    "method": method,
                    "path": path,
                    "caller": caller,
                    "error_type": type(e).__name__,
                    "error_message": str(e),
                    "latency_ms": round((time.time() - start_time) * 1000, 2),
                }, default=str)
            )
            raise

        logger.info(
            json.dumps({
                "trace_id": trace_id,
                "event": "request_end",
                "method": method,
                "path": path,
                "status_code": response.status_code,
                "caller": caller,
                "latency_ms": round((time.time() - start_time) * 1000, 2),
            }, default=str)
        )
        response.headers["X-Trace-Id"] = trace_id
        return response

    # --------------------------
    # Internal helpers
    # --------------------------
    @staticmethod
    def _caller_from(request: Request) -> str:
        auth_header = request.headers.get("Authorization")
        if not auth_header or not auth_header.startswith("Bearer "):
            return "anonymous"
        try:
            return verify_jwt_token(auth_header.split(" ", 1)[1]).get("sub", "unknown")
        except HTTPException:
            return "invalid-token"

    def _mask_sensitive(self, params: dict) -> dict:
        """Mask sensitive query parameters."""
        masked = {}
        for key, val in params.items():
            if any(x in key.lower() for x in ("identity", "token", "email")):
                masked[key] = "[REDACTED]"
            else:
                masked[key] = val
        return masked

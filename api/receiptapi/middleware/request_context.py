"""
Request id for every call, echoed back in X-Request-ID for log correlation.
"""

import logging
import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from ..logging_config import log_with_context

logger = logging.getLogger("receiptapi.requests")


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Stamp request.state.request_id and log one line per request."""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())[:8]
        request.state.request_id = request_id

        t0 = time.time()
        response = await call_next(request)

        log_with_context(
            logger,
            logging.INFO,
            "request handled",
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=int((time.time() - t0) * 1000),
        )
        response.headers["X-Request-ID"] = request_id
        return response

import os
import json
import logging
import time
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware


access_logger = logging.getLogger("vedic_api.access")


def _access_record(request: Request, status: int, latency_ms: float) -> dict:
    """Access line fields; handlers add Panchang context through ``request.state``."""

    return {
        "ts": time.time(),
        "ip": request.client.host if request.client else None,
        "method": request.method,
        "endpoint": request.url.path,
        "query": str(request.url.query) or None,
        "status": status,
        "latency_ms": latency_ms,
        "ayanamsha": getattr(request.state, "ayanamsha", None),
        "cache_hit": getattr(request.state, "cache_hit", None),
    }


class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        if os.getenv("LOGGING_ENABLED", "false").lower() != "true":
            return await call_next(request)

        start = time.perf_counter()
        response = await call_next(request)
        elapsed = round((time.perf_counter() - start) * 1000, 2)
        record = _access_record(request, response.status_code, elapsed)
        if response.status_code >= 500:
            access_logger.error(json.dumps(record))
        else:
            access_logger.info(json.dumps(record))
        return response

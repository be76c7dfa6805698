"""
HTTP中间件：请求ID传递与访问日志
"""
import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from app.core.logging import get_logger

logger = get_logger("access")

SKIP_PATHS = ("/health", "/docs", "/redoc", "/openapi.json")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """传递或生成 X-Request-ID，并记录每个请求的耗时与状态码"""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))
        request.state.request_id = request_id

        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000

        response.headers["X-Request-ID"] = request_id
        if request.url.path not in SKIP_PATHS:
            logger.info(
                "%s %s %s %.1fms request_id=%s",
                request.method, request.url.path, response.status_code, duration_ms, request_id,
            )
        return response

import json
import logging
import time
from typing import Any, Dict

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware


INVOKE_METHODS = {"POST"}
MAX_LOGGED_BODY = 2048
logger = logging.getLogger("app.middleware.request")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every request's outcome; chaincode invokes also get their request body."""

    async def dispatch(self, request: Request, call_next):  # type: ignore[override]
        method = request.method.upper()
        start_time = time.perf_counter()

        if method in INVOKE_METHODS:
            body = await self._read_body(request)
            logger.info("Invoke request %s %s body=%s", method, request.url.path, body)

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        log = logger.warning if response.status_code >= 400 else logger.info
        log(
            "%s %s status=%s duration_ms=%.2f",
            method,
            request.url.path,
            response.status_code,
            duration_ms,
        )
        return response

    async def _read_body(self, request: Request) -> Any:
        try:
            body_bytes = await request.body()
        except Exception as exc:
            logger.debug("Failed to read request body: %s", exc)
            return None
        if not body_bytes:
            return None

        async def receive() -> Dict[str, Any]:
            return {"type": "http.request", "body": body_bytes, "more_body": False}

        request._receive = receive  # type: ignore[attr-defined]

        trimmed = body_bytes[:MAX_LOGGED_BODY]
        try:
            return json.loads(trimmed)
        except (json.JSONDecodeError, UnicodeDecodeError):
            return trimmed.decode("utf-8", errors="replace")

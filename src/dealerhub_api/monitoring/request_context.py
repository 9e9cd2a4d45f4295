"""Request context middleware for logging."""

import asyncio
import json
import time
import uuid
from typing import Any
from typing import Callable
from typing import Optional

from fastapi import Request
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware

from dealerhub_api.dependencies import DEALER_ID_HEADER

# Request bodies above this size are logged as a preview only
MAX_BODY_LOG_SIZE = 10000

# Body fields never written to logs
REDACTED_FIELDS = {"password", "token", "secret", "authorization"}


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Middleware to capture request context and log one entry per request."""

    async def dispatch(self, request: Request, call_next: Callable) -> Any:
        """
        Capture request context and add it to every log line emitted while handling the request.

        Captures:
        - Request ID (from X-Request-ID header or generated)
        - Client IP (first X-Forwarded-For hop or direct peer)
        - Acting dealer (X-Dealer-Id header, "anonymous" when absent)
        - Request path and method
        - Request body for POST/PUT/PATCH/DELETE, stored on request.state for error handlers
        """
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

        client_ip = self._get_client_ip(request)

        dealer_id = (request.headers.get(DEALER_ID_HEADER) or "").strip() or "anonymous"

        request_path = f"{request.method} {request.url.path}"

        request.state.request_body = None
        if request.method in ("POST", "PUT", "PATCH", "DELETE"):
            request.state.request_body = await self._get_request_body(request)

        with logger.contextualize(
            request_id=request_id,
            client_ip=client_ip,
            dealer_id=dealer_id,
            request_path=request_path,
        ):
            start_time = time.time()
            response = await call_next(request)
            duration_ms = (time.time() - start_time) * 1000

            logger.info(
                f"{request.method} {request.url.path} - {response.status_code}",
                event_type="http_request",
                http_method=request.method,
                url_path=str(request.url.path),
                url_query=str(request.query_params) if request.query_params else None,
                request_body=request.state.request_body,
                status_code=response.status_code,
                response_time_ms=round(duration_ms, 2),
            )

            response.headers["X-Request-ID"] = request_id
            return response

    async def _get_request_body(self, request: Request) -> Optional[dict]:
        """
        Read the request body for logging.

        Returns:
            Parsed (and redacted) JSON body, a preview dict for large or non-JSON bodies, or None
        """
        try:
            body = await asyncio.wait_for(request.body(), timeout=2.0)
        except asyncio.TimeoutError:
            return {"_error": "Request body read timeout (>2s)"}

        if not body:
            return None

        content_type = request.headers.get("Content-Type", "")
        if "application/json" not in content_type.lower():
            return {"_preview": body[:200].decode("utf-8", errors="replace"), "_content_type": content_type}

        if len(body) > MAX_BODY_LOG_SIZE:
            return {"_truncated": True, "_size": len(body), "_preview": body[:1000].decode("utf-8", errors="replace")}

        try:
            parsed = json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            return {"_error": "Failed to parse request body", "_error_detail": str(e)}

        return redact_body(parsed)

    def _get_client_ip(self, request: Request) -> str:
        """Get the real client IP, preferring the first X-Forwarded-For hop."""
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()

        if request.client:
            return request.client.host

        return "unknown"


def redact_body(body: Any) -> Any:
    """Replace values of sensitive keys with a marker, recursively."""
    if isinstance(body, dict):
        return {
            key: "***REDACTED***" if str(key).lower() in REDACTED_FIELDS else redact_body(value)
            for key, value in body.items()
        }
    if isinstance(body, list):
        return [redact_body(item) for item in body]
    return body

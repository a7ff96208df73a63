"""Structured logging utilities and request middleware for the status API."""

import json
import logging
import time
import uuid
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response


LOG = logging.getLogger("wavegate")
if not LOG.hasHandlers():
    handler = logging.StreamHandler()
    formatter = logging.Formatter("%(asctime)s %(levelname)s %(message)s")
    handler.setFormatter(formatter)
    LOG.addHandler(handler)
LOG.setLevel(logging.INFO)


def set_level(level: str) -> None:
    """Set the gateway log level from a name such as ``"DEBUG"``."""
    LOG.setLevel(level.upper())


def log_debug(event: str, **kwargs: object) -> None:
    """Log a debug event as structured JSON."""
    log = {"level": "debug", "event": event, **kwargs}
    LOG.debug(json.dumps(log, default=str))


def log_info(event: str, **kwargs: object) -> None:
    """Log an informational event as structured JSON."""
    log = {"level": "info", "event": event, **kwargs}
    LOG.info(json.dumps(log, default=str))


def log_warning(event: str, **kwargs: object) -> None:
    """Log a warning event as structured JSON."""
    log = {"level": "warning", "event": event, **kwargs}
    LOG.warning(json.dumps(log, default=str))


def log_error(event: str, **kwargs: object) -> None:
    """Log an error event as structured JSON."""
    log = {"level": "error", "event": event, **kwargs}
    LOG.error(json.dumps(log, default=str))


def _redact_headers(headers: dict) -> dict:
    """Redact sensitive headers such as authorization tokens."""
    redacted = {}
    for k, v in headers.items():
        if k.lower() in ("authorization", "x-api-key"):
            redacted[k] = "<redacted>"
        else:
            redacted[k] = v
    return redacted


class RequestLogMiddleware(BaseHTTPMiddleware):
    """Log each status API request with its status code and duration."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        rid = request.headers.get("x-request-id", str(uuid.uuid4()))
        start = time.time()

        response = await call_next(request)

        dur_ms = int((time.time() - start) * 1000)
        log_info(
            "http_request",
            request_id=rid,
            method=request.method,
            path=request.url.path,
            query=dict(request.query_params),
            headers=_redact_headers(dict(request.headers)),
            status=response.status_code,
            duration_ms=dur_ms,
        )
        response.headers["x-request-id"] = rid
        return response

from __future__ import annotations

import logging
import secrets
import string
import time

from fastapi.responses import JSONResponse
from starlette.datastructures import Headers
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from .errors import PayloadTooLarge
from .logging import correlation_id_var

CORRELATION_HEADER = "X-Correlation-ID"
_ALPHABET = string.ascii_letters + string.digits
_BODY_METHODS = {"POST", "PUT", "PATCH"}

access_logger = logging.getLogger("catalog_api.access")


def new_correlation_id(length: int = 12) -> str:
    return "".join(secrets.choice(_ALPHABET) for _ in range(length))


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Reuse the caller's X-Correlation-ID or mint one, and echo it on the response."""

    async def dispatch(self, request, call_next):
        cid = request.headers.get(CORRELATION_HEADER) or new_correlation_id()
        request.state.correlation_id = cid
        reset = correlation_id_var.set(cid)
        try:
            response = await call_next(request)
        finally:
            correlation_id_var.reset(reset)
        response.headers[CORRELATION_HEADER] = cid
        return response


class AccessLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        client = request.client.host if request.client else "-"
        access_logger.info(
            "%s %s %s %s %d %.2fms",
            client,
            request.method,
            request.url.path,
            request.headers.get("user-agent", "-"),
            response.status_code,
            elapsed_ms,
        )
        return response


class BodySizeLimitMiddleware:
    """
    Reject POST/PUT bodies above `limit` bytes with 413.

    A declared Content-Length is checked up front. Chunked bodies are
    counted as they arrive and buffered at most up to `limit` before the
    app sees them.
    """

    def __init__(self, app: ASGIApp, *, limit: int) -> None:
        self.app = app
        self._limit = limit

    async def _too_large(self, scope: Scope, receive: Receive, send: Send) -> None:
        err = PayloadTooLarge()
        response = JSONResponse({"message": err.message}, status_code=err.status_code)
        await response(scope, receive, send)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or scope["method"] not in _BODY_METHODS:
            await self.app(scope, receive, send)
            return

        declared = Headers(scope=scope).get("content-length")
        if declared is not None:
            if declared.isdigit() and int(declared) > self._limit:
                await self._too_large(scope, receive, send)
                return
            await self.app(scope, receive, send)
            return

        buffered: list[Message] = []
        received = 0
        while True:
            message = await receive()
            buffered.append(message)
            if message["type"] != "http.request":
                break
            received += len(message.get("body", b""))
            if received > self._limit:
                await self._too_large(scope, receive, send)
                return
            if not message.get("more_body", False):
                break

        async def replay() -> Message:
            if buffered:
                return buffered.pop(0)
            return await receive()

        await self.app(scope, replay, send)

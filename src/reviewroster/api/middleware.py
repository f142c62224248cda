"""Request logging and timeout middleware."""
import asyncio
import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from .errors import error_body

logger = logging.getLogger(__name__)

IGNORED_PREFIXES = ("/health", "/docs", "/redoc", "/openapi.json")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs each request with a request id and duration.

    The request id is taken from X-Request-ID when the caller sends one and
    echoed back on every response.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get("x-request-id") or uuid.uuid4().hex
        request.state.request_id = request_id

        start = time.perf_counter()
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id

        if not request.url.path.startswith(IGNORED_PREFIXES):
            duration_ms = int((time.perf_counter() - start) * 1000)
            if response.status_code >= 500:
                level = logging.ERROR
            elif response.status_code >= 400:
                level = logging.WARNING
            else:
                level = logging.INFO
            logger.log(
                level,
                "request %s %s -> %s dur_ms=%s request_id=%s",
                request.method,
                request.url.path,
                response.status_code,
                duration_ms,
                request_id,
            )
        return response


class RequestTimeoutMiddleware:
    """Cancel requests that run longer than ``timeout`` seconds.

    Cancellation propagates into the handler, so an open unit of work rolls
    back. A timeout of 0 disables the limit.
    """

    def __init__(self, app: ASGIApp, timeout: float = 30.0):
        self.app = app
        self.timeout = timeout

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or not self.timeout:
            await self.app(scope, receive, send)
            return

        response_started = False

        async def send_wrapper(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await asyncio.wait_for(self.app(scope, receive, send_wrapper), self.timeout)
        except asyncio.TimeoutError:
            logger.warning(
                "request %s %s timed out after %ss", scope["method"], scope["path"], self.timeout
            )
            if response_started:
                raise
            response = JSONResponse(
                status_code=504,
                content=error_body("TIMEOUT", "request timed out"),
            )
            await response(scope, receive, send)

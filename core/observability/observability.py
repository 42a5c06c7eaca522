"""Request context for logs: request id, method, path and client id."""

import time
import typing
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from structlog.contextvars import bind_contextvars, clear_contextvars

from core.utils.logging import get_logger

logger = get_logger(__name__)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Bind request_id/method/path to logs and set X-Request-ID."""

    def __init__(self, app, header_name: str = "X-Request-ID") -> None:
        """Constructor."""
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(
        self,
        request: Request,
        call_next: typing.Callable[[Request], typing.Awaitable[Response]],
    ):
        """Bind request_id to logs and set X-Request-ID header."""
        request_id = request.headers.get(self.header_name) or str(uuid.uuid4())

        bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )
        start = time.perf_counter()
        try:
            logger.info(
                "http.request.start",
                client_host=getattr(request.client, "host", None),
            )
            response = await call_next(request)
            logger.info(
                "http.request.end",
                status_code=response.status_code,
                duration_ms=int((time.perf_counter() - start) * 1000),
                client_id=getattr(request.state, "client_id", None),
            )
        finally:
            clear_contextvars()

        response.headers[self.header_name] = request_id
        return response


from __future__ import annotations

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

DB_UNAVAILABLE_ERROR = "سرویس پایگاه داده در دسترس نیست"
DB_UNAVAILABLE_DETAILS = (
    "Database service is not available. Please try again later or contact support."
)


def database_unavailable_response() -> JSONResponse:
    return JSONResponse(
        status_code=503,
        content={
            "success": False,
            "error": DB_UNAVAILABLE_ERROR,
            "details": DB_UNAVAILABLE_DETAILS,
        },
    )


class DatabaseAvailabilityMiddleware(BaseHTTPMiddleware):
    """Reject requests under a path prefix while the database is marked down."""

    def __init__(self, app: ASGIApp, prefix: str) -> None:
        super().__init__(app)
        self._prefix = prefix

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        if request.url.path.startswith(self._prefix):
            monitor = request.app.state.db_monitor
            if not monitor.is_ready:
                return database_unavailable_response()
        return await call_next(request)

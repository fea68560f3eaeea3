"""In-memory rate limiting middleware.

Limits (production only):
  /auth/login      → 10 requests/minute per IP
  DELETE requests  → 30 requests/minute per session token

No Redis required, suitable for a single instance.
"""

import time
from collections import defaultdict

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

# (prefix, max_requests, window_seconds)
_IP_RULES: list[tuple[str, int, int]] = [
    ("/auth/login", 10, 60),
]

# (method, max_requests, window_seconds)
_SESSION_RULES: list[tuple[str, int, int]] = [
    ("DELETE", 30, 60),
]


class _SlidingWindow:
    """Sliding-window hit counter keyed by an arbitrary string."""

    def __init__(self) -> None:
        # key -> list of timestamps
        self._hits: dict[str, list[float]] = defaultdict(list)

    def is_allowed(self, key: str, max_requests: int, window: int) -> bool:
        now = time.monotonic()
        cutoff = now - window
        self._hits[key] = hits = [t for t in self._hits[key] if t > cutoff]
        if len(hits) >= max_requests:
            return False
        hits.append(now)
        return True

    def clear(self) -> None:
        self._hits.clear()


_ip_window = _SlidingWindow()
_session_window = _SlidingWindow()


class RateLimitMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        from app.config import settings
        if not settings.is_production:
            return await call_next(request)

        path = request.url.path
        client_ip = request.client.host if request.client else "unknown"

        for prefix, max_req, window in _IP_RULES:
            if path.startswith(prefix):
                key = f"ip:{client_ip}:{prefix}"
                if not _ip_window.is_allowed(key, max_req, window):
                    return _rate_limit_response(request)

        # Agent identity isn't resolved yet, so key on the session token
        token = request.headers.get("X-Session-Token")
        if token:
            for method, max_req, window in _SESSION_RULES:
                if request.method == method:
                    key = f"session:{token}:{method}"
                    if not _session_window.is_allowed(key, max_req, window):
                        return _rate_limit_response(request)

        return await call_next(request)


def _rate_limit_response(request: Request) -> JSONResponse:
    request_id = getattr(request.state, "request_id", None)
    return JSONResponse(
        status_code=429,
        content={
            "error": True,
            "status_code": 429,
            "detail": "Rate limit exceeded. Please try again later.",
            "request_id": request_id,
        },
        headers={"Retry-After": "60"},
    )

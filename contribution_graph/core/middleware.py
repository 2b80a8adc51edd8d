from collections import defaultdict
from collections import deque
from collections.abc import Awaitable
from collections.abc import Callable
from collections.abc import Iterable
from threading import RLock
from time import monotonic

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response


class LayoutRateLimitMiddleware(BaseHTTPMiddleware):
    """In-memory sliding-window rate limiter for layout build requests."""

    def __init__(
        self,
        app,
        requests_per_window: int = 30,
        window_seconds: int = 60,
        limited_routes: Iterable[tuple[str, str]] = (("POST", "/calendar/layout"),),
    ) -> None:
        super().__init__(app)
        # Guard against invalid config values (0 or negatives).
        self.max_requests = max(1, requests_per_window)
        self.window_seconds = max(1, window_seconds)
        # Matched on (method, path).
        self.limited_routes = frozenset(limited_routes)
        # One queue of request timestamps per client key.
        self._ip_buckets: dict[str, deque[float]] = defaultdict(deque)
        # Lock keeps operations on shared buckets thread-safe.
        self._lock = RLock()

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        # 1) Only layout builds are limited. Everything else passes through.
        if (request.method, request.url.path) not in self.limited_routes:
            return await call_next(request)

        retry_after = self._register(self._client_ip(request), monotonic())

        # 2) Over budget: answer 429 without building the layout.
        if retry_after is not None:
            return JSONResponse(
                status_code=429,
                content={"detail": "Too Many Requests"},
                headers={"Retry-After": str(retry_after)},
            )

        return await call_next(request)

    def _register(self, client_key: str, now: float) -> int | None:
        """Record a request and return seconds to wait when over the limit."""

        with self._lock:
            # Drop timestamps that slid out of the window.
            bucket = self._ip_buckets[client_key]
            cutoff = now - self.window_seconds
            while bucket and bucket[0] <= cutoff:
                bucket.popleft()

            if len(bucket) >= self.max_requests:
                return max(1, int(self.window_seconds - (now - bucket[0])))

            bucket.append(now)
            return None

    @staticmethod
    def _client_ip(request: Request) -> str:
        # Reverse proxies set X-Forwarded-For.
        forwarded_for = request.headers.get("x-forwarded-for")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip() or "unknown"

        if request.client and request.client.host:
            return request.client.host

        return "unknown"

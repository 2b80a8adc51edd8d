from fastapi import FastAPI

from contribution_graph.api.routes.calendar import router
from contribution_graph.core.middleware import LayoutRateLimitMiddleware
from contribution_graph.core.observability import configure_logging
from contribution_graph.core.observability import init_sentry
from contribution_graph.settings import Settings


def create_app() -> FastAPI:
    """Build the FastAPI application with observability and rate limiting."""

    settings = Settings()
    configure_logging(settings)
    init_sentry(settings)

    application = FastAPI(title="contribution-graph")
    application.add_middleware(
        LayoutRateLimitMiddleware,
        requests_per_window=settings.rate_limit_per_minute,
        window_seconds=settings.rate_limit_window_seconds,
    )
    application.include_router(router)
    return application


app = create_app()

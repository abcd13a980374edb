from fastapi import FastAPI

from contrib_chart.api.routes.chart import router
from contrib_chart.core.middleware import RateLimitMiddleware
from contrib_chart.core.observability import configure_logging
from contrib_chart.core.observability import init_sentry
from contrib_chart.settings import Settings


def create_app(app_settings: Settings | None = None) -> FastAPI:
    """Build the FastAPI application with observability and rate limiting."""

    app_settings = app_settings or Settings()
    configure_logging(app_settings)
    init_sentry(app_settings)

    application = FastAPI(title="Contribution Chart")
    application.add_middleware(
        RateLimitMiddleware,
        requests_per_window=app_settings.rate_limit_per_minute,
        window_seconds=app_settings.rate_limit_window_seconds,
    )
    application.include_router(router)
    return application


app = create_app()

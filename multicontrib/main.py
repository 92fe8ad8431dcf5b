from fastapi import FastAPI

from multicontrib.api.routes.render import router as render_router
from multicontrib.core.logger import setup_logger
from multicontrib.core.middleware import RenderRateLimitMiddleware
from multicontrib.core.observability import init_sentry
from multicontrib.settings import Settings


def create_app(app_settings: Settings | None = None) -> FastAPI:
    """Build the FastAPI application with logging, Sentry and rate limiting."""

    app_settings = app_settings or Settings()
    setup_logger(app_settings.log_level)
    init_sentry(app_settings)

    application = FastAPI(title="multicontrib")
    application.add_middleware(
        RenderRateLimitMiddleware,
        requests_per_window=app_settings.rate_limit_per_minute,
        window_seconds=app_settings.rate_limit_window_seconds,
    )
    application.include_router(render_router)
    return application


app = create_app()

"""
projecthub entry point.

REST API for projects (auth, CRUD, analytics) plus a WebSocket relay that
lets dashboards tell each other a project changed.
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from projecthub.config import settings
from projecthub.api.router import api_router, auth_router, realtime_router
from projecthub.api.helpers.authentication import (
    build_password_hasher,
    build_token_signer,
)
from projecthub.api.helpers.rate_limit import (
    FixedWindowRateLimiter,
    rate_limit_middleware,
)
from projecthub.api.helpers.responses import (
    apply_security_headers,
    register_exception_handlers,
)
from projecthub.bootstrap import create_tables, log_startup_banner
from projecthub.db.session import get_engine
from projecthub.realtime import ChannelRegistry
from projecthub.utils import utcnow
from logging import getLogger, Filter
import logging

logger = getLogger(__name__)
logger.setLevel(logging.INFO)


class HealthCheckFilter(Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        return record.getMessage().find("/health") == -1


logging.getLogger("uvicorn.access").addFilter(HealthCheckFilter())


app = FastAPI(title=settings.app_name, debug=settings.debug, redirect_slashes=False)

app.state.rate_limiter = FixedWindowRateLimiter(
    enabled=settings.rate_limit_enabled,
    max_requests=settings.rate_limit_max_requests,
    window_seconds=settings.rate_limit_window_seconds,
)


@app.on_event("startup")
async def startup_event():
    # the registry must exist even if the database is unreachable
    app.state.realtime_registry = ChannelRegistry(
        queue_size=settings.realtime_queue_size
    )
    try:
        logger.info("--- Starting projecthub startup ---")

        app.state.password_hasher = build_password_hasher()
        app.state.token_signer = build_token_signer()

        if settings.auto_create_tables:
            await create_tables(get_engine())

        log_startup_banner()
        logger.info("--- projecthub startup completed ---")
    except Exception as e:
        logger.error(f"Warning: Failed to setup resources: {e}")
        import traceback

        logger.error(f"Full traceback: {traceback.format_exc()}")


@app.on_event("shutdown")
async def shutdown_event():
    try:
        logger.info("--- Server shutting down! ---")

        from projecthub.db.session import dispose_engine

        await dispose_engine()
        logger.info("--- Database connections closed. ---")
    except Exception as e:
        logger.error(f"Warning: Error during shutdown: {e}")


# added before the headers middleware, which then wraps it, so 429s get the headers too
app.middleware("http")(rate_limit_middleware)


@app.middleware("http")
async def _security_headers_middleware(request: Request, call_next):
    return apply_security_headers(await call_next(request))


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(auth_router, prefix="/api")
app.include_router(api_router, prefix="/api")
app.include_router(realtime_router)


@app.get("/health")
def health_check():
    return {
        "status": "healthy",
        "message": f"{settings.app_name} is running",
        "timestamp": utcnow().isoformat(),
        "version": settings.version,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.port)

import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from app.core.api_key import ApiKeyMiddleware, build_gate
from app.core.config import settings
from app.core.database import init_db
from app.core.errors import register_exception_handlers
from app.core.logging_config import setup_logging
from app.api.endpoints import applications, health, jobs, users

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.

    The schema must exist before any request is served, so a failure here
    aborts startup.
    """
    setup_logging(settings.LOG_LEVEL, json_logs=settings.JSON_LOGS)
    logger.info("Starting up Job Board API...")
    try:
        init_db()
    except Exception:
        logger.critical("Database initialization failed, refusing to start", exc_info=True)
        raise
    logger.info("Database initialized successfully")

    yield

    logger.info("Shutting down Job Board API...")


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version="1.0.0",
        description="Job board API for users, job postings and applications",
        lifespan=lifespan
    )

    # Middleware added last runs first: CORS wraps the API key gate so
    # rejected requests still carry CORS headers.
    app.add_middleware(
        ApiKeyMiddleware,
        gate=build_gate(settings),
        log_only=settings.API_KEY_LOG_ONLY,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Accept", "Content-Type", settings.API_KEY_HEADER],
        max_age=3600,
    )

    register_exception_handlers(app)

    app.include_router(users.router, prefix=settings.API_V1_STR)
    app.include_router(jobs.router, prefix=settings.API_V1_STR)
    app.include_router(applications.router, prefix=settings.API_V1_STR)
    app.include_router(health.router)

    @app.get("/")
    async def root():
        """Root endpoint"""
        return {
            "message": settings.PROJECT_NAME,
            "version": "1.0.0",
            "docs": "/docs"
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8080,
        log_level=settings.LOG_LEVEL.lower()
    )

"""
Request Ledger - FastAPI Application Entry Point

A Postman-like service that executes arbitrary HTTP requests on the
caller's behalf and keeps a history of the attempts.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import Settings, get_settings
from .database import create_db_engine, create_session_factory, init_db
from .exceptions import register_exception_handlers
from .middleware import RequestLoggingMiddleware
from .repositories.attempt_repository import SQLAlchemyAttemptStore
from .routers import history, service
from .services.history_ledger import HistoryLedger
from .services.http_executor import RequestExecutor
from .utils.logging import configure_logging, get_logger

logger = get_logger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Build the FastAPI application.

    The database engine, history ledger and request executor are created
    in the lifespan and kept on ``app.state`` for the route dependencies.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler for startup and shutdown events."""
        configure_logging(settings.log_level, settings.environment)

        engine = create_db_engine(settings.database_url, echo=settings.database_echo)
        init_db(engine)

        app.state.engine = engine
        app.state.ledger = HistoryLedger(
            store=SQLAlchemyAttemptStore(create_session_factory(engine)),
            display_timezone=settings.display_timezone
        )
        app.state.executor = RequestExecutor(default_timeout_ms=settings.request_timeout_ms)
        logger.info("application_started", environment=settings.environment)

        yield

        engine.dispose()
        logger.info("application_stopped")

    app = FastAPI(
        title="Request Ledger",
        description="Execute HTTP requests on the caller's behalf and keep a history of them",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan
    )
    app.state.settings = settings

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register global exception handlers
    register_exception_handlers(app)

    @app.get("/")
    async def root():
        """Root endpoint returning API information."""
        return {
            "name": "Request Ledger",
            "version": "1.0.0",
            "docs": "/docs"
        }

    # Register routers
    app.include_router(service.router)
    app.include_router(history.router)

    return app


app = create_app()

"""
Main FastAPI application (entrypoint).

Responsibilities:
- Wire the users router
- Register centralized exception handlers
- Provide middleware: CORS, request-id logging
- Add root, health and readiness endpoints
- Own the Database lifecycle (created on startup, disposed on shutdown)

Run with: python main.py, or uvicorn main:app --port 3000
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
import uvicorn

from api import routes_users
from config.settings import Settings, settings as default_settings
from core.db import Database
from core.exception_handlers import register_exception_handlers
from core.logging import request_logging_middleware, setup_logging
from core.response import error

logger = logging.getLogger(__name__)


async def startup(app: FastAPI) -> None:
    """Open the connection pool and, when configured, create tables."""
    settings: Settings = app.state.settings
    database = Database(settings)
    app.state.database = database
    if settings.DB_CREATE_TABLES:
        await database.create_all()
    logger.info("Server running on port %s", settings.PORT)


async def shutdown(app: FastAPI) -> None:
    database = getattr(app.state, "database", None)
    if database is not None:
        await database.dispose()
        app.state.database = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    await startup(app)
    yield
    await shutdown(app)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or default_settings
    setup_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title=settings.API_TITLE,
        description=settings.API_DESCRIPTION,
        version=settings.API_VERSION,
        docs_url="/api-docs",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(routes_users.router, tags=["users"])

    register_exception_handlers(app)

    # adds X-Request-ID header and logs each request
    app.middleware("http")(request_logging_middleware)

    @app.get("/", response_class=PlainTextResponse)
    async def root():
        """Welcome endpoint"""
        return "Hello, World!"

    @app.get("/health")
    async def health():
        """Liveness probe; does not touch the database."""
        return {"status": "ok"}

    @app.get("/ready")
    async def ready():
        """Readiness: check DB connectivity."""
        database = app.state.database
        if database is not None and await database.health_check():
            return {"ready": True}
        return JSONResponse(status_code=503, content=error("Database unavailable", code="db_unreachable"))

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run("main:app", host=default_settings.HOST, port=default_settings.PORT, reload=default_settings.DEBUG)

"""FastAPI application for SurveyDisco.ai."""

from __future__ import annotations

import time
from contextlib import asynccontextmanager
from pathlib import Path
from uuid import uuid4

import structlog
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from prometheus_fastapi_instrumentator import Instrumentator
from starlette.middleware.base import BaseHTTPMiddleware

from surveydisco import __version__
from surveydisco.config import get_config
from surveydisco.core.logging import configure_logging
from surveydisco.db.connection import close_db, get_session, init_db
from surveydisco.onedrive.pending import purge_expired
from surveydisco.web.dependencies import build_services
from surveydisco.web.routes import health, onedrive, projects, settings, todos

# Initialize structured logging
configure_logging()
logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    config = get_config()
    await init_db()
    async with get_session() as session:
        purged = await purge_expired(session)
    app.state.services = build_services(config)
    logger.info("startup_complete", environment=config.environment, pending_purged=purged)
    try:
        yield
    finally:
        await app.state.services.aclose()
        await close_db()


app = FastAPI(
    title="SurveyDisco.ai",
    description="Survey inquiry parsing, project cards and OneDrive job folders",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)


REQUEST_ID_HEADER = "X-Request-ID"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Bind a request id into structlog contextvars and log each request's outcome."""

    async def dispatch(self, request: Request, call_next):
        structlog.contextvars.clear_contextvars()
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())
        structlog.contextvars.bind_contextvars(
            request_id=request_id, method=request.method, path=request.url.path
        )
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(
                "request_failed",
                error=str(exc),
                duration_ms=round((time.perf_counter() - started) * 1000, 1),
            )
            raise

        # API traffic only; static frontend assets are not logged
        if request.url.path.startswith("/api/"):
            logger.info(
                "request_completed",
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 1),
            )
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


app.add_middleware(RequestLoggingMiddleware)

# Prometheus Metrics
Instrumentator().instrument(app).expose(app)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=exc.headers,
    )


# Include Routers
app.include_router(health.router)
app.include_router(projects.router)
app.include_router(todos.router)
app.include_router(settings.router)
app.include_router(onedrive.router)

# Serve the built frontend if present; mounted last so API routes win
frontend_dir = Path("frontend/build")
if frontend_dir.exists():
    app.mount("/", StaticFiles(directory=str(frontend_dir), html=True), name="frontend")

"""
Taskboard API Server

Entry point for the FastAPI application.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from taskboard.core.config import get_settings
from taskboard.core.database import dispose_engine
from taskboard.core.errors import AccessError
from taskboard.core.logging_config import configure_logging
from taskboard.core.middleware import RequestContextMiddleware, SecurityHeadersMiddleware
from taskboard.api.v1 import router as api_v1_router

settings = get_settings()
log = structlog.get_logger()


async def access_error_handler(request: Request, exc: AccessError) -> JSONResponse:
    """Render Forbidden/NotFound from the policy engine as 403/404."""
    return JSONResponse(status_code=exc.status_code, content={"error": exc.to_dict()})


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    configure_logging(settings.log_level, settings.log_format)

    app = FastAPI(
        title="Taskboard",
        description="Workspaces, projects and kanban tasks with role-based access.",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    # Middleware (order matters - last added is outermost)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "PUT", "DELETE"],
        allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
    )
    app.add_middleware(RequestContextMiddleware)

    app.add_exception_handler(AccessError, access_error_handler)

    app.include_router(api_v1_router, prefix="/api/v1")

    @app.get("/health", tags=["System"])
    async def health_check():
        """Health check endpoint for liveness probes."""
        return {"status": "ok"}

    @app.get("/ready", tags=["System"])
    async def readiness_check():
        """Readiness check endpoint for startup probes."""
        return {"status": "ready"}

    @app.on_event("startup")
    async def on_startup():
        log.info("Taskboard starting", debug=settings.debug)

    @app.on_event("shutdown")
    async def on_shutdown():
        log.info("Taskboard shutting down")
        await dispose_engine()

    return app


app = create_app()

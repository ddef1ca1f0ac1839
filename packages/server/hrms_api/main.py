"""
HRMS API Server

Entry point for the FastAPI application.
"""

import argparse
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from hrms_api.api.v1 import router as api_router
from hrms_api.core.config import get_settings
from hrms_api.core.database import dispose_engine
from hrms_api.core.errors import HRMSError, is_unique_violation
from hrms_api.core.logging_config import configure_logging
from hrms_api.core.middleware import RequestContextMiddleware, SecurityHeadersMiddleware
from hrms_api.core.redis import close_redis

settings = get_settings()
log = structlog.get_logger()


def _field_errors(exc: RequestValidationError) -> list[dict]:
    errors = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part != "body"]
        errors.append({"field": ".".join(loc) or "body", "message": err.get("msg", "")})
    return errors


def register_exception_handlers(app: FastAPI) -> None:
    """Every error response is a JSON object carrying ``message``."""

    @app.exception_handler(HRMSError)
    async def hrms_error_handler(request: Request, exc: HRMSError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_body())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"message": "Validation error", "errors": _field_errors(exc)},
        )

    @app.exception_handler(IntegrityError)
    async def integrity_error_handler(request: Request, exc: IntegrityError):
        if not is_unique_violation(exc):
            return await unhandled_error_handler(request, exc)
        log.warning("request.duplicate_entry", error=str(exc.orig))
        return JSONResponse(status_code=400, content={"message": "Duplicate entry"})

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        log.error("request.unhandled_error", exc_info=exc)
        return JSONResponse(status_code=500, content={"message": "Internal server error"})


@asynccontextmanager
async def lifespan(app: FastAPI):
    log.info("HRMS API starting", port=settings.port, revoke_on_logout=settings.revoke_on_logout)
    yield
    log.info("HRMS API shutting down")
    await close_redis()
    await dispose_engine()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    configure_logging(settings.log_level, settings.log_format)

    app = FastAPI(
        title="HRMS",
        description="Multi-tenant employee and team management.",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Middleware (last added is outermost)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type", "Authorization"],
    )

    register_exception_handlers(app)

    app.include_router(api_router, prefix="/api")

    @app.get("/health", tags=["System"])
    async def health_check():
        """Liveness check."""
        return {"status": "OK", "timestamp": datetime.now(timezone.utc).isoformat()}

    @app.get("/", tags=["System"])
    async def root():
        return {"message": "HRMS API Server", "version": app.version}

    return app


app = create_app()


def run() -> None:
    """``hrms-server`` console script."""
    parser = argparse.ArgumentParser(description="Run the HRMS API server")
    parser.add_argument("--host", default=settings.host)
    parser.add_argument("--port", type=int, default=settings.port)
    parser.add_argument("--reload", action="store_true", help="Reload on code changes")
    args = parser.parse_args()

    uvicorn.run(
        "hrms_api.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_config=None,
    )


if __name__ == "__main__":
    run()

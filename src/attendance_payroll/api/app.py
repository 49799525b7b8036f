"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from attendance_payroll import __version__
from attendance_payroll.api.routes import (
    health_router,
    leave_payments_router,
    payrolls_router,
    settings_router,
    time_logs_router,
)
from attendance_payroll.config import get_settings
from attendance_payroll.database import dispose_db, init_db
from attendance_payroll.errors import (
    GatewayError,
    NotFoundError,
    PreconditionFailedError,
    ValidationError,
)
from attendance_payroll.logging_config import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    settings = get_settings()
    configure_logging(settings.log_level)
    init_db(settings.database_url)
    yield
    await dispose_db()


def _error(status_code: int, detail: str, code: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": detail, "code": code})


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Attendance Payroll API",
        description="Attendance-driven payroll generation and settlement",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
        return _error(status.HTTP_404_NOT_FOUND, str(exc), "NOT_FOUND")

    @app.exception_handler(ValidationError)
    async def validation_handler(request: Request, exc: ValidationError) -> JSONResponse:
        return _error(status.HTTP_422_UNPROCESSABLE_ENTITY, str(exc), "VALIDATION_ERROR")

    @app.exception_handler(PreconditionFailedError)
    async def precondition_handler(request: Request, exc: PreconditionFailedError) -> JSONResponse:
        return _error(status.HTTP_409_CONFLICT, str(exc), exc.reason)

    @app.exception_handler(GatewayError)
    async def gateway_handler(request: Request, exc: GatewayError) -> JSONResponse:
        logger.error("Payment gateway error on %s: %s", request.url.path, exc)
        return _error(status.HTTP_502_BAD_GATEWAY, str(exc), "GATEWAY_ERROR")

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception("Unhandled error on %s", request.url.path)
        return _error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "An unexpected error occurred",
            "INTERNAL_ERROR",
        )

    app.include_router(health_router)
    app.include_router(payrolls_router, prefix="/api/v1")
    app.include_router(leave_payments_router, prefix="/api/v1")
    app.include_router(time_logs_router, prefix="/api/v1")
    app.include_router(settings_router, prefix="/api/v1")

    return app


# Default app instance for uvicorn
app = create_app()

"""Application configuration and router setup."""

import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

import fastapi
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware import cors
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from components.core import init_db
from components.core.config import get_settings
from components.core.database import DatabaseManager
from components.core.logging import setup_logging
from components.core.schemas import ServiceInfo
from restapi.endpoints import accounts, auth, customers, health_check, loans, transactions

logger = logging.getLogger(__name__)

API_PREFIX = "/api"


def _validation_message(exc: RequestValidationError) -> str:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location}: {error.get('msg')}" if location else error.get("msg", ""))
    return "; ".join(messages) or "Invalid request"


def register_exception_handlers(app: fastapi.FastAPI) -> None:
    """Render every error as {"success": false, "message": ...}."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "message": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "success": False,
                "message": _validation_message(exc),
                "errors": [
                    {"loc": list(error.get("loc", ())), "msg": error.get("msg")}
                    for error in exc.errors()
                ],
            },
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "message": "Internal server error"},
        )


def create_app(db_manager: Optional[DatabaseManager] = None) -> fastapi.FastAPI:
    """
    Create and configure the FastAPI application.

    `db_manager` is the data-access handle; it is opened when the app starts
    and disposed when it stops. One is built from settings when not given.
    """
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)

    @asynccontextmanager
    async def lifespan(app: fastapi.FastAPI):
        async with init_db.database_lifespan(app):
            logger.info("%s started", settings.APP_NAME)
            yield
        logger.info("%s stopped", settings.APP_NAME)

    app = fastapi.FastAPI(
        title=settings.APP_NAME,
        description="Banking System API: accounts, transactions, loans and customer profiles",
        version=settings.API_VERSION,
        lifespan=lifespan,
    )

    # Initialize database
    init_db.init_db(app, db_manager or DatabaseManager(settings=settings))

    # Add CORS middleware
    app.add_middleware(
        cors.CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            "%s %s -> %s (%.1f ms)",
            request.method, request.url.path, response.status_code, elapsed_ms,
        )
        return response

    register_exception_handlers(app)

    # Include routers
    app.include_router(health_check.router, prefix=API_PREFIX)
    app.include_router(auth.router, prefix=API_PREFIX)
    app.include_router(accounts.router, prefix=API_PREFIX)
    app.include_router(transactions.router, prefix=API_PREFIX)
    app.include_router(loans.router, prefix=API_PREFIX)
    app.include_router(customers.router, prefix=API_PREFIX)

    @app.get("/", response_model=ServiceInfo, tags=["services"])
    async def root() -> ServiceInfo:
        return ServiceInfo(
            message=settings.APP_NAME,
            version=settings.API_VERSION,
            endpoints={
                "auth": f"{API_PREFIX}/auth",
                "accounts": f"{API_PREFIX}/accounts",
                "transactions": f"{API_PREFIX}/transactions",
                "loans": f"{API_PREFIX}/loans",
                "customers": f"{API_PREFIX}/customers",
                "health": f"{API_PREFIX}/health",
            },
        )

    return app

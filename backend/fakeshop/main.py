"""FastAPI application bootstrap: routers, error envelopes, catalog client lifecycle."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from http import HTTPStatus
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from fakeshop.api.routers import health, products
from fakeshop.core.config import Settings, get_settings
from fakeshop.core.errors import CatalogError
from fakeshop.db.session import init_db
from fakeshop.external.fakestore import FakestoreClient

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(level=settings.log_level.upper(), format=LOG_FORMAT)


def _error_body(request: Request, status_code: int, message, error: str) -> dict:
    return {
        "status_code": status_code,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "path": request.url.path,
        "method": request.method,
        "message": message,
        "error": error,
    }


async def catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
    logger.error(
        f"{request.method} {request.url.path} {exc.status_code} - {exc.message}"
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(request, exc.status_code, exc.message, exc.error),
    )


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    messages = [
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
        for err in exc.errors()
    ]
    logger.warning(f"{request.method} {request.url.path} 400 - {messages}")
    return JSONResponse(
        status_code=400,
        content=_error_body(request, 400, messages, "Bad Request"),
    )


async def http_error_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    logger.error(f"{request.method} {request.url.path} {exc.status_code} - {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(
            request, exc.status_code, exc.detail, HTTPStatus(exc.status_code).phrase
        ),
        headers=getattr(exc, "headers", None),
    )


def create_app(
    settings: Settings | None = None,
    catalog_client: FakestoreClient | None = None,
) -> FastAPI:
    """Instantiate the FastAPI app and include top-level routers.

    ``catalog_client`` replaces the FakeStore client built from settings; the
    app does not close a client it did not create.
    """
    settings = settings or get_settings()
    configure_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if settings.auto_create_tables and not settings.is_production:
            init_db()

        owns_client = catalog_client is None
        app.state.catalog_client = catalog_client or FakestoreClient(
            settings.fakestore_api_url, timeout=settings.external_timeout_seconds
        )
        logger.info(f"[Catalog] Using FakeStore API at {settings.fakestore_api_url}")
        try:
            yield
        finally:
            if owns_client:
                await app.state.catalog_client.aclose()

    app = FastAPI(
        title=settings.app_name,
        description="A RESTful API for fake shop products",
        version="1.0.0",
        lifespan=lifespan,
    )

    logger.info(f"[CORS] Allowed origins: {settings.cors_origins}")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(CatalogError, catalog_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)

    app.include_router(health.router)
    app.include_router(products.router, prefix="/products", tags=["products"])

    return app


app = create_app()

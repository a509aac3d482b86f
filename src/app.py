"""Storefront FastAPI application.

Single web server for the catalogue, cart, checkout, order, address and
payment endpoints. Every response uses the ``{success, message, data}``
envelope, errors included.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

from contextlib import asynccontextmanager
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from catalogue.api import category_router, product_router
from identity.api.routes import profile_router
from identity.api.routes import router as address_router
from ordering.api.routes import admin_router, cart_router, order_router, wishlist_router
from payments.api.routes import router as payment_router
from shared.config import get_settings
from shared.database import get_database
from shared.errors import PersistenceError, StorefrontError
from shared.logging import add_context, clear_context, configure_logging
from shared.responses import failure

logger = structlog.get_logger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.environment, settings.log_dir)
    if settings.create_schema_on_startup:
        get_database().setup_db()
    logger.info("Storefront started", environment=settings.environment)
    yield
    get_database().dispose()


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Storefront API",
    description="E-commerce backend: catalogue, cart, checkout, orders and payments",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    """Bind a request id and path to every log line emitted while handling the request."""
    request_id = request.headers.get("X-Request-ID") or uuid4().hex
    add_context(request_id=request_id, method=request.method, path=request.url.path)
    try:
        response = await call_next(request)
    finally:
        clear_context()
    response.headers["X-Request-ID"] = request_id
    return response


# ---------------------------------------------------------------------------
# Error rendering
# ---------------------------------------------------------------------------
@app.exception_handler(StorefrontError)
async def storefront_error_handler(request: Request, exc: StorefrontError) -> JSONResponse:
    if isinstance(exc, PersistenceError):
        logger.error("Storage failure", path=request.url.path, cause=repr(exc.__cause__))
    else:
        logger.info("Request rejected", path=request.url.path, status=exc.status_code, reason=exc.message)
    return JSONResponse(status_code=exc.status_code, content=failure(exc.message))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"] if part != "body")
        details.append(f"{field}: {error['msg']}" if field else error["msg"])
    return JSONResponse(status_code=400, content=failure("; ".join(details) or "Invalid request"))


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error", path=request.url.path)
    return JSONResponse(status_code=500, content=failure("Internal server error"))


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
app.include_router(product_router)
app.include_router(category_router)
app.include_router(address_router)
app.include_router(profile_router)
app.include_router(cart_router)
app.include_router(wishlist_router)
app.include_router(order_router)
app.include_router(admin_router)
app.include_router(payment_router)


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------
@app.get("/health")
def health():
    return {"success": True, "message": "Storefront API is running", "data": {"status": "ok"}}

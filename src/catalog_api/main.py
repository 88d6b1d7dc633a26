from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import DBAPIError, SQLAlchemyError

from catalog_api.config import settings
from catalog_api.db.session import create_engine, create_session_factory, shutdown
from catalog_api.dependencies import DB
from catalog_api.exceptions import (
    AuthenticationError,
    ConflictError,
    DomainError,
    NotFoundError,
    PermissionDeniedError,
)
from catalog_api.logging import get_logger
from catalog_api.middleware import RequestIDMiddleware
from catalog_api.routers.product import router as product_router
from catalog_api.schemas.error import ErrorResponse

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan context manager — code before yield runs on startup, after yield on shutdown.

    Startup: build the engine and session factory, expose them on app.state.
    Shutdown: close database connections gracefully.
    """
    engine = create_engine(settings)
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    logger.info("storage_opened")
    yield
    await shutdown(engine)
    logger.info("storage_closed")


app = FastAPI(title="Placeholder Catalog API", lifespan=lifespan)
app.add_middleware(RequestIDMiddleware)
app.include_router(product_router)


def _error_json(code: str, message: str) -> dict[str, object]:
    """Build the standard error envelope as a dict for JSONResponse."""
    return ErrorResponse(code=code, message=message).model_dump()


def _validation_message(exc: RequestValidationError) -> str:
    """Turn the first pydantic error into a one-line message naming the field."""
    errors = exc.errors()
    if not errors:
        return "Invalid request body"
    first = errors[0]
    loc = [str(part) for part in first.get("loc", ()) if part != "body"]
    if not loc:
        return "Request body is required"
    field = ".".join(loc)
    if first.get("type") in {"missing", "string_too_short"}:
        return f"{field} is required"
    return f"{field}: {first.get('msg', 'invalid value')}"


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    """Return 404 naming the most specific path segment that did not resolve."""
    return JSONResponse(status_code=404, content=_error_json(exc.code, exc.message))


@app.exception_handler(ConflictError)
async def conflict_handler(request: Request, exc: ConflictError) -> JSONResponse:
    """Return 409 for duplicate names and lost concurrent updates."""
    logger.warning("conflict", error=exc.message, path=request.url.path)
    return JSONResponse(status_code=409, content=_error_json(exc.code, exc.message))


@app.exception_handler(AuthenticationError)
async def unauthorized_handler(request: Request, exc: AuthenticationError) -> JSONResponse:
    return JSONResponse(status_code=401, content=_error_json(exc.code, exc.message))


@app.exception_handler(PermissionDeniedError)
async def forbidden_handler(request: Request, exc: PermissionDeniedError) -> JSONResponse:
    return JSONResponse(status_code=403, content=_error_json(exc.code, exc.message))


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Return 400 for invalid bodies, repeated seeding and other domain violations."""
    logger.warning("domain_error", error=exc.message, path=request.url.path)
    return JSONResponse(status_code=400, content=_error_json(exc.code, exc.message))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Return 400 (not FastAPI's default 422) with the offending field in the message."""
    message = _validation_message(exc)
    logger.warning("invalid_body", error=message, path=request.url.path)
    return JSONResponse(status_code=400, content=_error_json("invalid_body", message))


@app.exception_handler(SQLAlchemyError)
async def storage_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Return 500 with the driver's message; the engine never retries."""
    logger.exception("storage_error", path=request.url.path, method=request.method)
    message = str(exc.orig) if isinstance(exc, DBAPIError) else str(exc)
    return JSONResponse(status_code=500, content=_error_json("storage_error", message))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log unhandled exceptions and return a safe error response.

    - Logs full exception with traceback (includes request_id from context)
    - Returns generic error to client (no stack traces leaked)
    """
    logger.exception("unhandled_exception", path=request.url.path, method=request.method)
    return JSONResponse(
        status_code=500,
        content=_error_json("internal_error", "Internal server error"),
    )


@app.get("/health")
async def health(db: DB) -> dict[str, str]:
    """Health check endpoint — verifies database connectivity.

    Returns 200 OK only if the database responds to a ping query.
    """
    await db.execute(text("SELECT 1"))
    return {"status": "ok"}

"""FastAPI application factory.

create_app() returns a configured FastAPI instance. The lifespan owns
the Database handle: connect at startup, dispose at shutdown. Domain
errors from inkpot.errors are rendered by the handlers registered here.
"""

import logging
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from inkpot import __version__
from inkpot.api import api_router
from inkpot.config import settings
from inkpot.db.engine import Database
from inkpot.errors import InkpotError, InternalFault, InvalidInput, InvalidToken, NoToken
from inkpot.schemas import field_errors

logger = structlog.get_logger()


def configure_logging() -> None:
    """Set the structlog level filter and renderer.

    Console output in development, one JSON object per line elsewhere.
    """
    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if settings.environment == "development":
        processors.append(structlog.dev.ConsoleRenderer())
    else:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Anything before `yield` runs at startup, after `yield` runs at shutdown.
    """
    logger.info(
        "inkpot.starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
    )

    database = Database(settings.database_url, echo=settings.debug)
    await database.connect(create_tables=settings.create_tables)
    app.state.database = database
    logger.info("inkpot.database_connected")

    yield

    logger.info("inkpot.shutdown")
    await database.dispose()


# ─── Error handlers ─────────────────────────────────────


def _error_response(exc: InkpotError) -> JSONResponse:
    content = {"detail": exc.message}
    if isinstance(exc, InvalidInput):
        content["errors"] = exc.errors
    headers = None
    if isinstance(exc, (NoToken, InvalidToken)):
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(status_code=exc.status_code, content=content, headers=headers)


async def handle_inkpot_error(request: Request, exc: InkpotError) -> JSONResponse:
    return _error_response(exc)


async def handle_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return _error_response(InvalidInput(field_errors(exc)))


async def handle_store_error(
    request: Request, exc: SQLAlchemyError | OSError
) -> JSONResponse:
    # Details stay in the log; the client gets an opaque 500.
    # OSError covers driver connect failures that SQLAlchemy does not wrap.
    logger.error(
        "store.error",
        path=request.url.path,
        error=exc.__class__.__name__,
        exc_info=exc,
    )
    return _error_response(InternalFault())


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    configure_logging()

    app = FastAPI(
        title="Inkpot",
        description="Minimal blogging backend with signup, signin and per-author blog CRUD",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_exception_handler(InkpotError, handle_inkpot_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(SQLAlchemyError, handle_store_error)
    app.add_exception_handler(OSError, handle_store_error)

    # ── Middleware stack ──────────────────────────────────────
    # Starlette middleware executes in reverse order of registration.
    # Request flow: RequestId → Security → CORS → handler

    from inkpot.middleware.request_id import RequestIdMiddleware
    from inkpot.middleware.security import SecurityHeadersMiddleware

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIdMiddleware)

    app.include_router(api_router)

    return app


# Default app instance (used by uvicorn: inkpot.main:app)
app = create_app()

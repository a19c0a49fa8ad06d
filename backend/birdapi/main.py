"""
Bird Sightings Backend - FastAPI Application Factory
=====================================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() registers middleware, exception handlers and routers.
Who:   uvicorn (`uvicorn birdapi.main:app --port 8080`) and the test suite.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware:  [Request ID] → [Request Logging]      │
    │                                                     │
    │  Routes:      /api/v1/birds      /api/v1/sightings  │
    │               /health                               │
    │                                                     │
    │  Exception Handlers:                                │
    │   Validation→400  NotFound→404  BirdInUse→409       │
    │   ReferenceResolution→422  Database→500             │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging, schema creation, optional example data
    Shutdown: dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from birdapi import __version__
from birdapi.config import settings
from birdapi.database import async_session_factory, dispose_engine, init_db
from birdapi.exceptions import (
    BirdInUseError,
    DatabaseError,
    NotFoundError,
    ReferenceResolutionError,
    ValidationError,
)
from birdapi.middleware.logging import RequestLoggingMiddleware
from birdapi.middleware.request_id import RequestIDMiddleware, request_id_var
from birdapi.routes import birds, health, sightings
from birdapi.services.seed_service import seed_example_data

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure the root logger once, before anything else logs.

    Format: 2024-05-01T10:00:00 [INFO] birdapi.services.bird_service: Bird created: 4 (Sparrow)
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # These libraries log every statement/connection at INFO or DEBUG
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    logger.info("Bird Sightings API %s starting up...", __version__)

    await init_db()
    logger.info("Database schema ready")

    if settings.seed_example_data:
        async with async_session_factory() as session:
            await seed_example_data(session)
            await session.commit()

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    logger.info("Bird Sightings API shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error(status_code: int, error: str, message: str, details: dict | None = None) -> JSONResponse:
    content = {
        "error": error,
        "message": message,
        "request_id": request_id_var.get(""),
    }
    if details:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=jsonable_encoder(content))


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map each application exception to one HTTP status.

    Handler table:
        ValidationError / RequestValidationError → 400 validation_error
        NotFoundError                            → 404 not_found
        BirdInUseError                           → 409 bird_in_use
        ReferenceResolutionError                 → 422 reference_resolution_error
        DatabaseError                            → 500 server_error
        Exception (fallback)                     → 500 internal_server_error

    Internal details (SQL, stack traces) only ever go to the server log.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return _error(400, "validation_error", exc.message, exc.context)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        """Malformed ids, numbers or dates in the path, query or body."""
        problems = [
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
            for err in exc.errors()
        ]
        message = "; ".join(problems) or "Invalid request"
        logger.warning("[%s] Request validation failed: %s", request_id_var.get(""), message)
        return _error(400, "validation_error", message, {"errors": problems})

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error(404, "not_found", exc.message)

    @app.exception_handler(BirdInUseError)
    async def handle_bird_in_use(request: Request, exc: BirdInUseError):
        return _error(409, "bird_in_use", exc.message, exc.context)

    @app.exception_handler(ReferenceResolutionError)
    async def handle_reference_resolution(request: Request, exc: ReferenceResolutionError):
        return _error(422, "reference_resolution_error", exc.message, exc.context)

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        rid = request_id_var.get("")
        logger.error("[%s] Database error: %s | Context: %s", rid, exc.message, exc.context)
        return _error(500, "server_error", exc.message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error("[%s] Unexpected error: %s", request_id_var.get(""), str(exc), exc_info=True)
        return _error(
            500,
            "internal_server_error",
            "An unexpected error occurred. Please try again or contact support.",
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    app = FastAPI(
        title="Bird Sightings API",
        description=(
            "Record birds and their sightings, and query sightings by bird, "
            "location and time interval."
        ),
        version=__version__,
        lifespan=lifespan,
    )

    # Last added runs first: RequestID wraps RequestLogging
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(birds.router)
    app.include_router(sightings.router)
    app.include_router(health.router)

    return app


app = create_app()

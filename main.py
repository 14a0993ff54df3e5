"""FastAPI application entrypoint."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from storefront.api import categories_router
from storefront.api.errors import request_validation_exception_handler
from storefront.core.config import settings
from storefront.db.migrations import run_migrations
from storefront.db.session import verify_connection


logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Verify the database, apply migrations and prepare the upload directory."""
    try:
        logger.info("Startup: verifying database connection")
        verify_connection()
        app.state.database_url = settings.database_url

        logger.info("Startup: running database migrations")
        run_migrations()

        Path(settings.upload_dir).mkdir(parents=True, exist_ok=True)
        logger.info("Startup: serving uploads from %s", settings.upload_dir)
    except Exception:
        logger.error("Startup failure", exc_info=True)
        raise

    yield

    logger.info("Shutdown complete")


app = FastAPI(title="Storefront Catalog API", lifespan=lifespan)

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.rate_limit_default],
    enabled=settings.rate_limit_enabled,
)
app.state.limiter = limiter
app.add_middleware(SlowAPIMiddleware)
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_exception_handler(RequestValidationError, request_validation_exception_handler)  # type: ignore[arg-type]

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_origin],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.mount(
    settings.upload_url_prefix,
    StaticFiles(directory=settings.upload_dir, check_dir=False),
    name="uploads",
)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


app.include_router(categories_router, prefix="/api/v1")

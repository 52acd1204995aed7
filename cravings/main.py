"""Main application entry point with FastAPI."""

import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI
from pydantic import ValidationError

from .api import (
    accounts_router,
    cron_router,
    grocery_list_router,
    inventory_router,
    preferences_router,
    recipes_router,
)
from .config import get_settings
from .database import check_database_health, dispose_engine
from .email_service import is_configured as email_is_configured

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def validate_environment():
    """Validate all required environment variables on startup."""
    try:
        settings = get_settings()
        logger.info("Environment variables validated successfully")
        return settings
    except ValidationError as e:
        logger.error("ERROR: Missing or invalid environment variables:")
        logger.error(str(e))
        sys.exit(1)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup and shutdown."""
    logger.info("Starting Cravings...")

    settings = validate_environment()

    if not check_database_health():
        logger.warning("Database is not reachable at startup")
    if not email_is_configured():
        logger.warning("EmailJS is not configured; grocery list emails will fail")

    logger.info(
        f"Recipe feed: page size {settings.recipe_page_size}, "
        f"candidate pool {settings.recipe_candidate_pool}, "
        f"strict filter {settings.strict_dietary_filter}"
    )
    logger.info("Cravings started successfully")

    yield

    logger.info("Shutting down Cravings...")
    dispose_engine()
    logger.info("Cravings shutdown complete")


# Create FastAPI app
app = FastAPI(
    title="Cravings",
    description="Recipe discovery filtered by dietary preferences",
    version="1.0.0",
    lifespan=lifespan,
)

app.include_router(accounts_router)
app.include_router(preferences_router)
app.include_router(recipes_router)
app.include_router(grocery_list_router)
app.include_router(inventory_router)
app.include_router(cron_router)


@app.get("/health")
async def health_check():
    """Health check endpoint.

    Verifies database connection and returns status.
    """
    db_healthy = check_database_health()

    if db_healthy:
        return {
            "status": "healthy",
            "database": "connected",
        }
    else:
        return {
            "status": "unhealthy",
            "database": "disconnected",
        }


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "Cravings",
        "status": "running",
        "version": "1.0.0",
    }

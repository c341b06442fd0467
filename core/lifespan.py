"""
Define application startup and shutdown procedures
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from core.config import get_settings

from core.opensearch import get_opensearch_client, init_indexes
from core.logger import logger


def _log_setting(key: str, value):
    """Log a setting, masking sensitive values like passwords and secrets"""
    if ("PASSWORD" in key or "SECRET" in key) and value is not None:
        logger.info("  %s: %s", key, "*****")
    else:
        logger.info("  %s: %s", key, value)


def log_settings(settings) -> None:
    logger.info("Configuration Settings:")

    # Log computed fields first (they don't appear in vars())
    computed_fields = {
        "OPENSEARCH_HOST": settings.OPENSEARCH_HOST,
        "OPENSEARCH_PORT": settings.OPENSEARCH_PORT,
        "OPENSEARCH_USER": settings.OPENSEARCH_USER,
        "OPENSEARCH_PASSWORD": settings.OPENSEARCH_PASSWORD,
        "OPENSEARCH_USE_SSL": settings.OPENSEARCH_USE_SSL,
        "OPENSEARCH_VERIFY_CERTS": settings.OPENSEARCH_VERIFY_CERTS,
    }

    for key, value in computed_fields.items():
        _log_setting(key, value)

    # Log remaining settings
    for key, value in vars(settings).items():
        _log_setting(key, value)


# Handle startup/shutdown tasks
@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("In lifespan...starting up")
    log_settings(get_settings())

    logger.info("Initializing OpenSearch indexes...")
    client = get_opensearch_client()
    if client is None:
        logger.warning("OPENSEARCH_HOST is not set, file endpoints are unavailable.")
    init_indexes(client)

    logger.info("In lifespan...yield")
    try:
        yield
    finally:
        # Shutdown
        logger.info("In lifespan...shutting down")

"""
OpenSearch configuration
"""

from opensearchpy import OpenSearch
from core.config import get_settings
from core.logger import logger

client = None


def get_indexes() -> list[str]:
    """Indexes that must exist before the API serves requests"""
    return [get_settings().FILES_INDEX]


def get_opensearch_client():
    global client

    if client:
        return client

    settings = get_settings()

    # Connect to opensearch
    if settings.OPENSEARCH_USER and settings.OPENSEARCH_PASSWORD:
        auth = (settings.OPENSEARCH_USER, settings.OPENSEARCH_PASSWORD)
    else:
        auth = None

    if settings.OPENSEARCH_HOST is None:
        client = None
    else:
        client = OpenSearch(
            hosts=[
                {
                    "host": settings.OPENSEARCH_HOST,
                    "port": int(settings.OPENSEARCH_PORT),
                }
            ],
            http_compress=True,  # enables gzip compression for request bodies
            http_auth=auth,
            use_ssl=settings.OPENSEARCH_USE_SSL,
            verify_certs=settings.OPENSEARCH_VERIFY_CERTS,
            ssl_show_warn=settings.OPENSEARCH_VERIFY_CERTS,
        )
    return client


def reset_opensearch_client() -> None:
    """Drop the cached client so the next call rebuilds it from settings"""
    global client
    client = None


def init_indexes(client, indexes: list[str] | None = None):
    if client is None:
        return

    # Create index if it does not exist
    for index in indexes or get_indexes():
        if not client.indices.exists(index=index):
            client.indices.create(index=index)
            logger.info("Index '%s' created successfully.", index)
        else:
            logger.info("Index '%s' already exists.", index)

"""Connection pool lifecycle for the DAOs."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from psycopg_pool import ConnectionPool

from .config import Settings, get_settings

logger = logging.getLogger(__name__)


@contextmanager
def open_pool(settings: Settings | None = None) -> Iterator[ConnectionPool]:
    """Open a Postgres pool for the duration of the block and close it afterwards."""
    settings = settings or get_settings()
    pool = ConnectionPool(
        settings.database_url,
        min_size=settings.pool_min_size,
        max_size=settings.pool_max_size,
        open=False,
    )
    pool.open()
    logger.info("connection pool opened (max_size = %s)", settings.pool_max_size)
    try:
        yield pool
    finally:
        pool.close()
        pool.wait_close()
        logger.info("connection pool closed")

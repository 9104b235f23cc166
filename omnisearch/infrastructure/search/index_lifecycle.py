"""Search index table lifecycle (implements IIndexLifecycle).

The active table is what searches read. A reindex builds a pending table
next to it and swaps it in with renames inside one transaction, so
readers see either the old or the new index, never a partial one.
"""

from __future__ import annotations

import logging
import uuid

from sqlalchemy import MetaData, inspect, text
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine

from omnisearch.core.constants import (
    INDEX_TABLE_ACTIVE,
    INDEX_TABLE_PENDING,
    INDEX_TABLE_RETIRED,
)
from omnisearch.infrastructure.persistence.models.search_index import (
    build_search_index_table,
)

logger = logging.getLogger(__name__)


async def _has_table(conn: AsyncConnection, name: str) -> bool:
    return await conn.run_sync(lambda sync_conn: inspect(sync_conn).has_table(name))


async def _create_table(conn: AsyncConnection, name: str) -> None:
    table = build_search_index_table(name, MetaData(), index_suffix=uuid.uuid4().hex[:8])
    await conn.run_sync(lambda sync_conn: table.create(sync_conn, checkfirst=True))


class PostgresIndexLifecycle:
    """Creates, stages, and activates the search index tables.

    Holds the readiness flag read by the readiness gate. The flag is set by
    ensure_ready() and activate_pending() and never cleared.
    """

    def __init__(self, engine: AsyncEngine) -> None:
        self.engine = engine
        self._initialized = False

    def is_initialized(self) -> bool:
        return self._initialized

    async def ensure_ready(self, force_reset: bool = False) -> None:
        """Create the active index if missing; drop it first when force_reset."""
        async with self.engine.begin() as conn:
            if force_reset:
                logger.info("Dropping search index %s (force reset)", INDEX_TABLE_ACTIVE)
                await conn.execute(text(f"DROP TABLE IF EXISTS {INDEX_TABLE_ACTIVE}"))
            if not await _has_table(conn, INDEX_TABLE_ACTIVE):
                logger.info("Creating search index %s", INDEX_TABLE_ACTIVE)
                await _create_table(conn, INDEX_TABLE_ACTIVE)
        self._initialized = True

    async def maybe_create_pending(self) -> None:
        """Create the pending index if it does not exist yet."""
        async with self.engine.begin() as conn:
            if await _has_table(conn, INDEX_TABLE_PENDING):
                logger.info("Pending search index %s already exists", INDEX_TABLE_PENDING)
                return
            logger.info("Creating pending search index %s", INDEX_TABLE_PENDING)
            await _create_table(conn, INDEX_TABLE_PENDING)

    async def activate_pending(self) -> None:
        """Swap the pending index in as the active one (single transaction).

        Does nothing when there is no pending index.
        """
        async with self.engine.begin() as conn:
            if not await _has_table(conn, INDEX_TABLE_PENDING):
                logger.warning("No pending search index to activate")
                return
            await conn.execute(text(f"DROP TABLE IF EXISTS {INDEX_TABLE_RETIRED}"))
            await conn.execute(
                text(f"ALTER TABLE IF EXISTS {INDEX_TABLE_ACTIVE} RENAME TO {INDEX_TABLE_RETIRED}")
            )
            await conn.execute(
                text(f"ALTER TABLE {INDEX_TABLE_PENDING} RENAME TO {INDEX_TABLE_ACTIVE}")
            )
            await conn.execute(text(f"DROP TABLE IF EXISTS {INDEX_TABLE_RETIRED}"))
        logger.info("Activated pending search index")
        self._initialized = True

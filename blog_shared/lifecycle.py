"""
Application-owned lifecycle for the store clients.

The library installs no signal handlers. A service opens its clients in its
composition root and releases them when its main loop ends:

    async with open_stores() as stores:
        await run_service(stores.postgres, stores.mongo)

Services that use the process-wide defaults call ``await shutdown()`` from
their own shutdown hook (FastAPI lifespan, worker ``finally`` block, ...).
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, List, Optional

from blog_shared.config import SharedSettings
from blog_shared.db import client as db_client
from blog_shared.db.client import PostgresClient
from blog_shared.documents import client as documents_client
from blog_shared.documents.client import MongoClientManager

logger = logging.getLogger(__name__)


@dataclass
class StoreClients:
    """The clients a service holds for its lifetime."""

    postgres: Optional[PostgresClient] = None
    mongo: Optional[MongoClientManager] = None

    async def close(self) -> None:
        """Close every client, then re-raise the first close error, if any."""
        errors: List[BaseException] = []

        if self.mongo is not None:
            try:
                await self.mongo.disconnect()
            except Exception as e:
                logger.error(f"Error closing MongoDB client: {e}")
                errors.append(e)

        if self.postgres is not None:
            try:
                self.postgres.close()
            except Exception as e:
                logger.error(f"Error closing relational client: {e}")
                errors.append(e)

        if errors:
            raise errors[0]


@asynccontextmanager
async def open_stores(
    settings: Optional[SharedSettings] = None,
    *,
    postgres: bool = True,
    mongo: bool = True,
) -> AsyncIterator[StoreClients]:
    """Open the requested clients and guarantee they are closed on exit.

    Args:
        settings: Shared settings; read from the environment when omitted.
        postgres: Open a relational client.
        mongo: Connect a document store client.
    """
    stores = StoreClients(
        postgres=PostgresClient(settings) if postgres else None,
        mongo=MongoClientManager(settings) if mongo else None,
    )
    try:
        if stores.postgres is not None:
            stores.postgres.open()
        if stores.mongo is not None:
            await stores.mongo.connect()
        yield stores
    finally:
        await stores.close()


async def shutdown() -> None:
    """Close the process-wide default clients. Safe to call repeatedly."""
    await StoreClients(
        postgres=db_client.get_default_client(),
        mongo=documents_client.get_manager(),
    ).close()
    logger.info("Store clients shut down")

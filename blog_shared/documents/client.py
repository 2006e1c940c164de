"""
Document store client for blog microservices.

``MongoClientManager`` tracks a single logical connection to MongoDB through
the Motor async driver. ``connect()`` is a no-op once connected. The
connected flag follows the driver's view of the whole topology: it clears
when no server is readable and is set again when one recovers. The driver
keeps reconnecting on its own; the live client is only closed by
``disconnect()``.

No retry or backoff happens here: a failed ``connect()`` is logged once and
the driver error is re-raised to the caller.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Dict, Iterable, List, Optional

from motor.motor_asyncio import (
    AsyncIOMotorClient,
    AsyncIOMotorCollection,
    AsyncIOMotorDatabase,
)
from pymongo import monitoring

from blog_shared.config import SharedSettings
from blog_shared.documents.collection import DocumentCollection
from blog_shared.documents.collections import ALL_COLLECTIONS, CollectionSchema
from blog_shared.errors import ConfigurationError

logger = logging.getLogger(__name__)

ClientFactory = Callable[..., AsyncIOMotorClient]


class _TopologyListener(monitoring.TopologyListener):
    """Mirrors topology readability onto the manager's connected flag.

    Events arrive on driver monitor threads. A listener is detached when its
    client is closed so late events cannot touch a newer client's state.
    """

    def __init__(self, manager: "MongoClientManager"):
        self._manager: Optional[MongoClientManager] = manager

    def detach(self) -> None:
        self._manager = None

    def opened(self, event: monitoring.TopologyOpenedEvent) -> None:
        pass

    def description_changed(self, event: monitoring.TopologyDescriptionChangedEvent) -> None:
        manager = self._manager
        if manager is None:
            return
        if event.new_description.has_readable_server():
            manager._mark_connected()
        else:
            manager._mark_disconnected(
                f"no readable server in topology {event.new_description.topology_type_name}"
            )

    def closed(self, event: monitoring.TopologyClosedEvent) -> None:
        pass


class MongoClientManager:
    """Single logical MongoDB connection.

    Args:
        settings: Settings to use; when omitted they are read from the
            environment at ``connect()`` time.
        client_factory: Callable building the Motor client, defaults to
            ``AsyncIOMotorClient``.
    """

    def __init__(
        self,
        settings: Optional[SharedSettings] = None,
        client_factory: Optional[ClientFactory] = None,
    ):
        self._settings = settings
        self._client_factory = client_factory
        self._client: Optional[AsyncIOMotorClient] = None
        self._database_name: Optional[str] = None
        self._connected = False
        self._listener: Optional[_TopologyListener] = None
        # Created on first connect() and rebuilt if the event loop changes
        self._lock: Optional[asyncio.Lock] = None
        self._lock_loop: Optional[asyncio.AbstractEventLoop] = None

    @property
    def is_connected(self) -> bool:
        return self._connected

    @property
    def client(self) -> AsyncIOMotorClient:
        if self._client is None:
            raise RuntimeError("MongoDB client is not connected; await connect() first")
        return self._client

    @property
    def database(self) -> AsyncIOMotorDatabase:
        return self.client[self._database_name]

    def _mark_disconnected(self, reason: str) -> None:
        if self._connected:
            logger.warning(f"MongoDB disconnected: {reason}")
        self._connected = False

    def _mark_connected(self) -> None:
        if self._client is None:
            return
        if not self._connected:
            logger.info("MongoDB connection recovered")
        self._connected = True

    def _get_lock(self) -> asyncio.Lock:
        loop = asyncio.get_running_loop()
        if self._lock is None or self._lock_loop is not loop:
            self._lock = asyncio.Lock()
            self._lock_loop = loop
        return self._lock

    async def connect(self) -> None:
        """Open the connection unless already connected.

        When a client already exists but the topology was reported
        unreadable, the same client is pinged again rather than replaced.

        Raises:
            ConfigurationError: MONGODB_URI is not set.
            pymongo.errors.PyMongoError: the server could not be reached.
        """
        if self._connected:
            return

        async with self._get_lock():
            if self._connected:
                return

            if self._client is not None:
                await self._reping()
                return

            settings = self._settings or SharedSettings()
            uri = settings.mongodb_connection_uri()
            if not uri:
                raise ConfigurationError("MONGODB_URI")

            listener = _TopologyListener(self)
            factory = self._client_factory or AsyncIOMotorClient
            client = factory(
                uri,
                maxPoolSize=settings.mongodb_max_pool_size,
                minPoolSize=settings.mongodb_min_pool_size,
                socketTimeoutMS=settings.mongodb_socket_timeout_ms,
                serverSelectionTimeoutMS=settings.mongodb_server_selection_timeout_ms,
                event_listeners=[listener],
            )

            try:
                await client.admin.command("ping")
            except Exception as e:
                logger.error(f"Failed to connect to MongoDB: {e}")
                listener.detach()
                client.close()
                raise

            self._client = client
            self._listener = listener
            self._database_name = settings.mongodb_database_name()
            self._connected = True
            logger.info(f"Connected to MongoDB database '{self._database_name}'")

    async def _reping(self) -> None:
        try:
            await self._client.admin.command("ping")
        except Exception as e:
            logger.error(f"MongoDB still unreachable: {e}")
            raise
        self._connected = True
        logger.info(f"Reconnected to MongoDB database '{self._database_name}'")

    async def _close_client(self) -> None:
        client, self._client = self._client, None
        listener, self._listener = self._listener, None
        self._connected = False
        if listener is not None:
            listener.detach()
        if client is not None:
            client.close()
            logger.info("MongoDB client closed")

    async def disconnect(self) -> None:
        """Close the connection. Safe to call repeatedly or before ``connect()``."""
        await self._close_client()

    def get_collection(self, name: str) -> AsyncIOMotorCollection:
        return self.database[name]

    def collection(self, schema: CollectionSchema) -> DocumentCollection:
        """Typed, validating handle for a declared collection."""
        return DocumentCollection(schema, self.database[schema.name])

    async def ensure_indexes(
        self, schemas: Iterable[CollectionSchema] = ALL_COLLECTIONS
    ) -> Dict[str, List[str]]:
        """Create every declared index; returns index names per collection.

        ``create_indexes`` is idempotent for identical index options. Changing
        an existing index's options (e.g. a TTL) requires dropping it first.
        """
        created: Dict[str, List[str]] = {}
        for schema in schemas:
            models = schema.index_models()
            if not models:
                created[schema.name] = []
                continue
            names = await self.database[schema.name].create_indexes(models)
            created[schema.name] = list(names)
            logger.debug(f"Ensured {len(names)} indexes on {schema.name}")
        logger.info(f"Ensured indexes on {len(created)} collections")
        return created


# ==================== Process-wide default ====================

_default_manager = MongoClientManager()


def get_manager() -> MongoClientManager:
    """The process-wide manager (not necessarily connected)."""
    return _default_manager


async def connect() -> MongoClientManager:
    """Connect the process-wide manager and return it."""
    await _default_manager.connect()
    return _default_manager


async def disconnect() -> None:
    """Disconnect the process-wide manager; no-op if not connected."""
    await _default_manager.disconnect()


def get_database() -> AsyncIOMotorDatabase:
    """Database handle of the connected process-wide manager."""
    return _default_manager.database

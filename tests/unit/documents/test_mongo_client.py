"""
Tests for MongoClientManager.

Uses FakeClientFactory so no MongoDB server is needed.
"""

import asyncio
import logging
from types import SimpleNamespace

import pytest
from pymongo.errors import ServerSelectionTimeoutError

from blog_shared.config import SharedSettings
from blog_shared.documents import client as documents_client
from blog_shared.documents.client import MongoClientManager, _TopologyListener
from blog_shared.documents.collection import DocumentCollection
from blog_shared.documents.collections import ALL_COLLECTIONS, ERROR_LOGS, PAGE_VIEWS
from blog_shared.errors import ConfigurationError
from tests.fakes.mongo import FakeClientFactory


def topology_changed(readable):
    """Minimal TopologyDescriptionChangedEvent stand-in."""
    description = SimpleNamespace(
        has_readable_server=lambda: readable,
        topology_type_name="ReplicaSetWithPrimary" if readable else "ReplicaSetNoPrimary",
    )
    return SimpleNamespace(new_description=description)


@pytest.mark.asyncio
async def test_connect_pings_and_uses_pool_options(mongo_manager, mongo_factory):
    """Test connect builds one client with the configured options."""
    await mongo_manager.connect()

    assert mongo_manager.is_connected is True
    client = mongo_factory.last
    assert client.uri == "mongodb://localhost:27017/blog_test"
    assert client.admin.commands == ["ping"]
    assert client.options["maxPoolSize"] == 10
    assert client.options["minPoolSize"] == 2
    assert client.options["socketTimeoutMS"] == 45000
    assert client.options["serverSelectionTimeoutMS"] == 5000
    assert isinstance(client.options["event_listeners"][0], _TopologyListener)


@pytest.mark.asyncio
async def test_connect_is_idempotent(mongo_manager, mongo_factory):
    """Test repeated connect calls reuse the live client."""
    await mongo_manager.connect()
    await mongo_manager.connect()

    assert len(mongo_factory.clients) == 1


@pytest.mark.asyncio
async def test_concurrent_connect_builds_one_client(mongo_manager, mongo_factory):
    """Test concurrent first callers share a single connection attempt."""
    await asyncio.gather(*(mongo_manager.connect() for _ in range(5)))

    assert len(mongo_factory.clients) == 1
    assert mongo_manager.is_connected is True


@pytest.mark.asyncio
async def test_missing_uri():
    """Test a missing URI fails before any client is built."""
    factory = FakeClientFactory()
    manager = MongoClientManager(SharedSettings(), client_factory=factory)

    with pytest.raises(ConfigurationError) as exc_info:
        await manager.connect()

    assert exc_info.value.setting == "MONGODB_URI"
    assert "MONGODB_URI environment variable is not set" in str(exc_info.value)
    assert factory.clients == []
    assert manager.is_connected is False


@pytest.mark.asyncio
async def test_ping_failure_reraises_and_caches_nothing(mongo_settings, caplog):
    """Test an unreachable server surfaces the driver error."""
    factory = FakeClientFactory(fail_ping=True)
    manager = MongoClientManager(mongo_settings, client_factory=factory)

    with pytest.raises(ServerSelectionTimeoutError):
        await manager.connect()

    assert manager.is_connected is False
    assert factory.last.closed is True
    assert "Failed to connect to MongoDB" in caplog.text
    with pytest.raises(RuntimeError):
        manager.client

    # The next attempt builds a fresh client
    factory.fail_ping = False
    await manager.connect()
    assert manager.is_connected is True
    assert len(factory.clients) == 2


@pytest.mark.asyncio
async def test_disconnect_closes_client(mongo_manager, mongo_factory):
    await mongo_manager.connect()
    await mongo_manager.disconnect()

    assert mongo_manager.is_connected is False
    assert mongo_factory.last.closed is True
    with pytest.raises(RuntimeError, match="not connected"):
        mongo_manager.database


@pytest.mark.asyncio
async def test_disconnect_is_idempotent(mongo_manager):
    await mongo_manager.disconnect()
    await mongo_manager.connect()
    await mongo_manager.disconnect()
    await mongo_manager.disconnect()

    assert mongo_manager.is_connected is False


@pytest.mark.asyncio
async def test_reconnect_after_disconnect(mongo_manager, mongo_factory):
    await mongo_manager.connect()
    await mongo_manager.disconnect()
    await mongo_manager.connect()

    assert mongo_manager.is_connected is True
    assert len(mongo_factory.clients) == 2
    assert mongo_manager.client is mongo_factory.last


@pytest.mark.asyncio
async def test_one_unreachable_member_keeps_connection(mongo_manager, mongo_factory):
    """Test a member dropping out of a still-readable topology changes nothing."""
    await mongo_manager.connect()
    live = mongo_factory.last
    listener = live.options["event_listeners"][0]

    listener.description_changed(topology_changed(readable=True))
    await mongo_manager.connect()

    assert mongo_manager.is_connected is True
    assert len(mongo_factory.clients) == 1
    assert live.closed is False
    assert live.admin.commands == ["ping"]


@pytest.mark.asyncio
async def test_unreadable_topology_keeps_client(mongo_manager, mongo_factory, caplog):
    """Test losing every readable server clears the flag without closing the client."""
    await mongo_manager.connect()
    live = mongo_factory.last
    listener = live.options["event_listeners"][0]

    with caplog.at_level(logging.WARNING, logger="blog_shared.documents.client"):
        listener.description_changed(topology_changed(readable=False))

    assert mongo_manager.is_connected is False
    assert "MongoDB disconnected" in caplog.text

    await mongo_manager.connect()

    assert mongo_manager.is_connected is True
    assert len(mongo_factory.clients) == 1
    assert live.closed is False
    assert mongo_manager.client is live
    assert live.admin.commands == ["ping", "ping"]


@pytest.mark.asyncio
async def test_topology_recovery_marks_connected(mongo_manager, mongo_factory):
    await mongo_manager.connect()
    listener = mongo_factory.last.options["event_listeners"][0]

    listener.description_changed(topology_changed(readable=False))
    listener.description_changed(topology_changed(readable=True))

    assert mongo_manager.is_connected is True
    assert mongo_factory.last.closed is False


@pytest.mark.asyncio
async def test_failed_reconnect_keeps_client(mongo_manager, mongo_factory):
    """Test a failed ping on an existing client raises and leaves it open."""
    await mongo_manager.connect()
    live = mongo_factory.last
    live.options["event_listeners"][0].description_changed(topology_changed(readable=False))
    live.fail_ping = True

    with pytest.raises(ServerSelectionTimeoutError):
        await mongo_manager.connect()

    assert mongo_manager.is_connected is False
    assert live.closed is False
    assert mongo_manager.client is live

    live.fail_ping = False
    await mongo_manager.connect()
    assert mongo_manager.is_connected is True
    assert len(mongo_factory.clients) == 1


@pytest.mark.asyncio
async def test_closed_client_listener_is_detached(mongo_manager, mongo_factory):
    """Test events from a closed client do not touch the manager."""
    await mongo_manager.connect()
    old_listener = mongo_factory.last.options["event_listeners"][0]
    await mongo_manager.disconnect()
    await mongo_manager.connect()

    old_listener.description_changed(topology_changed(readable=False))

    assert mongo_manager.is_connected is True


def test_connect_across_event_loops(mongo_settings):
    """Test one manager serves callers from successive event loops."""
    factory = FakeClientFactory()
    manager = MongoClientManager(mongo_settings, client_factory=factory)

    async def cycle():
        await asyncio.gather(manager.connect(), manager.connect())
        assert manager.is_connected is True
        await manager.disconnect()

    asyncio.run(cycle())
    asyncio.run(cycle())

    assert len(factory.clients) == 2
    assert all(client.closed for client in factory.clients)


def test_manager_builds_without_event_loop():
    """Test a manager can be created at import time with no running loop."""
    manager = MongoClientManager()
    assert manager.is_connected is False


@pytest.mark.asyncio
async def test_database_name_resolution(mongo_factory):
    settings = SharedSettings(mongodb_uri="mongodb://localhost/fromuri", mongodb_database="explicit")
    manager = MongoClientManager(settings, client_factory=mongo_factory)
    await manager.connect()

    assert manager.database.name == "explicit"
    assert manager.get_collection("pageViews") is manager.database["pageViews"]


@pytest.mark.asyncio
async def test_collection_handle(mongo_manager):
    await mongo_manager.connect()

    handle = mongo_manager.collection(PAGE_VIEWS)

    assert isinstance(handle, DocumentCollection)
    assert handle.name == "pageViews"
    assert handle.raw is mongo_manager.database["pageViews"]


@pytest.mark.asyncio
async def test_ensure_indexes(mongo_manager):
    await mongo_manager.connect()

    created = await mongo_manager.ensure_indexes()

    assert set(created) == {schema.name for schema in ALL_COLLECTIONS}
    page_view_indexes = mongo_manager.database["pageViews"].indexes
    assert page_view_indexes["timestamp_1"]["expireAfterSeconds"] == 7_776_000
    notification_indexes = mongo_manager.database["notifications"].indexes
    assert notification_indexes["expiresAt_1"]["expireAfterSeconds"] == 0
    assert "postId_1_timestamp_-1" in created["pageViews"]


@pytest.mark.asyncio
async def test_ensure_indexes_subset(mongo_manager):
    await mongo_manager.connect()

    created = await mongo_manager.ensure_indexes([ERROR_LOGS])

    assert list(created) == ["errorLogs"]
    ttl = mongo_manager.database["errorLogs"].indexes["timestamp_1"]
    assert ttl["partialFilterExpression"] == {"resolved": True}


class TestDefaultManager:
    """Test the process-wide helpers."""

    @pytest.mark.asyncio
    async def test_connect_returns_default(self, default_mongo_manager):
        manager = await documents_client.connect()
        assert manager is default_mongo_manager
        assert documents_client.get_manager() is default_mongo_manager
        assert documents_client.get_database() is default_mongo_manager.database

    @pytest.mark.asyncio
    async def test_disconnect(self, default_mongo_manager):
        await documents_client.connect()
        await documents_client.disconnect()
        await documents_client.disconnect()
        assert default_mongo_manager.is_connected is False

    @pytest.mark.asyncio
    async def test_reads_environment_at_connect_time(self, monkeypatch, mongo_factory):
        manager = MongoClientManager(client_factory=mongo_factory)
        monkeypatch.setattr(documents_client, "_default_manager", manager)
        monkeypatch.setenv("MONGODB_URI", "mongodb://envhost:27017/envdb")

        await documents_client.connect()

        assert mongo_factory.last.uri == "mongodb://envhost:27017/envdb"
        assert manager.database.name == "envdb"

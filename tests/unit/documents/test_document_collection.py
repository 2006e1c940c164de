"""Tests for the validating collection handle."""

from datetime import datetime, timedelta, timezone

import pytest

from blog_shared.documents.collection import DocumentCollection
from blog_shared.documents.collections import NOTIFICATIONS, SEARCH_QUERIES
from blog_shared.documents.models import Notification, SearchQuery
from blog_shared.errors import DocumentValidationError
from tests.fakes.mongo import FakeCollection


@pytest.fixture
def raw_notifications():
    return FakeCollection("notifications")


@pytest.fixture
def notifications(raw_notifications):
    return DocumentCollection(NOTIFICATIONS, raw_notifications)


def notification(user_id="u1", **overrides):
    data = {
        "userId": user_id,
        "type": "post.liked",
        "title": "New like",
        "message": "Someone liked your post",
    }
    data.update(overrides)
    return data


@pytest.mark.asyncio
async def test_insert_one_stores_camel_case(notifications, raw_notifications):
    inserted_id = await notifications.insert_one(notification())

    stored = raw_notifications.documents[0]
    assert stored["_id"] == inserted_id
    assert stored["userId"] == "u1"
    assert stored["channels"]["inApp"]["enabled"] is True
    assert "expiresAt" not in stored


@pytest.mark.asyncio
async def test_insert_one_rejects_invalid(notifications, raw_notifications):
    with pytest.raises(DocumentValidationError) as exc_info:
        await notifications.insert_one(notification(priority="whenever"))

    assert exc_info.value.collection == "notifications"
    assert raw_notifications.documents == []


@pytest.mark.asyncio
async def test_insert_model_instance(notifications):
    model = Notification(user_id="u2", type="t", title="x", message="y")
    await notifications.insert_one(model)

    assert await notifications.count({"userId": "u2"}) == 1


@pytest.mark.asyncio
async def test_insert_many_validates_all_first(notifications, raw_notifications):
    with pytest.raises(DocumentValidationError):
        await notifications.insert_many([notification(), notification(title=None)])

    assert raw_notifications.documents == []

    ids = await notifications.insert_many([notification("a"), notification("b")])
    assert len(ids) == 2
    assert await notifications.count() == 2


@pytest.mark.asyncio
async def test_insert_many_empty(notifications):
    assert await notifications.insert_many([]) == []


@pytest.mark.asyncio
async def test_find_one_returns_model(notifications):
    expires = datetime(2030, 1, 1, tzinfo=timezone.utc)
    await notifications.insert_one(notification(expiresAt=expires, priority="high"))

    found = await notifications.find_one({"userId": "u1"})

    assert isinstance(found, Notification)
    assert found.id is not None
    assert found.priority == "high"
    assert found.expires_at == expires
    assert await notifications.find_one({"userId": "nobody"}) is None


@pytest.mark.asyncio
async def test_find_sort_and_limit():
    queries = DocumentCollection(SEARCH_QUERIES, FakeCollection("searchQueries"))
    start = datetime(2025, 1, 1, tzinfo=timezone.utc)
    await queries.insert_many([
        {"query": f"q{i}", "userId": "u1", "executionTimeMs": i, "timestamp": start + timedelta(minutes=i)}
        for i in range(5)
    ])

    latest = await queries.find({"userId": "u1"}, sort=[("timestamp", -1)], limit=2)

    assert [q.query for q in latest] == ["q4", "q3"]
    assert all(isinstance(q, SearchQuery) for q in latest)


@pytest.mark.asyncio
async def test_find_without_filter(notifications):
    await notifications.insert_many([notification("a"), notification("b")])
    assert len(await notifications.find()) == 2

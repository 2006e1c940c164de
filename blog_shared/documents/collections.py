"""
Collection declarations for the document store.

Each ``CollectionSchema`` names a collection, the document model stored in
it, and the indexes the store must maintain. Declarations are static data;
``MongoClientManager.ensure_indexes`` turns them into ``create_indexes``
calls.

Retention is expressed as TTL indexes (``expireAfterSeconds`` from the
indexed date field, or 0 to expire at the date stored in the field). A TTL
index on a field doubles as that field's single-field index, since MongoDB
allows only one index per key pattern.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Optional, Tuple, Type

from pymongo import ASCENDING, DESCENDING, IndexModel

from blog_shared.documents.models import (
    AnalyticsEvent,
    AuditLog,
    EmailLog,
    ErrorLog,
    Notification,
    NotificationQueueItem,
    PageView,
    PerformanceLog,
    PushNotificationLog,
    SearchQuery,
    StoredDocument,
    SystemLog,
    UserActivity,
)

DAY = 24 * 60 * 60

PAGE_VIEW_RETENTION = 90 * DAY  # 7_776_000
USER_ACTIVITY_RETENTION = 365 * DAY  # 31_536_000
DELIVERY_LOG_RETENTION = 30 * DAY  # 2_592_000
AUDIT_LOG_RETENTION = 2 * 365 * DAY  # 63_072_000
SYSTEM_LOG_RETENTION = 30 * DAY
RESOLVED_ERROR_RETENTION = 30 * DAY
PERFORMANCE_LOG_RETENTION = 7 * DAY  # 604_800
EXPIRE_AT_FIELD_VALUE = 0


@dataclass(frozen=True)
class IndexSpec:
    """One index on a collection.

    Keys are ``(field, direction)`` pairs; ``IndexSpec.on`` accepts field
    names with a leading ``-`` for descending order.
    """

    keys: Tuple[Tuple[str, int], ...]
    unique: bool = False
    expire_after_seconds: Optional[int] = None
    partial_filter: Optional[Dict[str, Any]] = None
    explicit_name: Optional[str] = None

    @classmethod
    def on(cls, *fields: str, **options: Any) -> "IndexSpec":
        keys = tuple(
            (name[1:], DESCENDING) if name.startswith("-") else (name, ASCENDING)
            for name in fields
        )
        return cls(keys=keys, **options)

    @classmethod
    def ttl(cls, date_field: str, seconds: int, **options: Any) -> "IndexSpec":
        """TTL index removing documents ``seconds`` after ``date_field``."""
        if seconds < 0:
            raise ValueError("expireAfterSeconds must be >= 0")
        return cls.on(date_field, expire_after_seconds=seconds, **options)

    @property
    def name(self) -> str:
        """Index name; matches PyMongo's generated name unless set explicitly."""
        if self.explicit_name:
            return self.explicit_name
        return "_".join(f"{key}_{direction}" for key, direction in self.keys)

    @property
    def is_ttl(self) -> bool:
        return self.expire_after_seconds is not None

    @property
    def fields(self) -> Tuple[str, ...]:
        return tuple(key for key, _ in self.keys)

    def to_index_model(self) -> IndexModel:
        options: Dict[str, Any] = {"name": self.name}
        if self.unique:
            options["unique"] = True
        if self.expire_after_seconds is not None:
            options["expireAfterSeconds"] = self.expire_after_seconds
        if self.partial_filter is not None:
            options["partialFilterExpression"] = self.partial_filter
        return IndexModel(list(self.keys), **options)


@dataclass(frozen=True)
class CollectionSchema:
    """A collection name, its document model and its indexes."""

    name: str
    model: Type[StoredDocument]
    indexes: Tuple[IndexSpec, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        seen = set()
        for index in self.indexes:
            if index.keys in seen:
                raise ValueError(
                    f"{self.name}: duplicate index key pattern {index.keys}"
                )
            seen.add(index.keys)
        ttl = [index for index in self.indexes if index.is_ttl]
        if len(ttl) > 1:
            raise ValueError(f"{self.name}: at most one TTL index is supported")

    @property
    def ttl_index(self) -> Optional[IndexSpec]:
        return next((index for index in self.indexes if index.is_ttl), None)

    def index_models(self) -> list[IndexModel]:
        return [index.to_index_model() for index in self.indexes]


# ==================== Analytics ====================

PAGE_VIEWS = CollectionSchema(
    name="pageViews",
    model=PageView,
    indexes=(
        IndexSpec.on("postId"),
        IndexSpec.on("userId"),
        IndexSpec.on("sessionId"),
        IndexSpec.on("postId", "-timestamp"),
        IndexSpec.on("userId", "-timestamp"),
        IndexSpec.on("device.type"),
        IndexSpec.ttl("timestamp", PAGE_VIEW_RETENTION),
    ),
)

ANALYTICS_EVENTS = CollectionSchema(
    name="analyticsEvents",
    model=AnalyticsEvent,
    indexes=(
        IndexSpec.on("eventType", "-timestamp"),
        IndexSpec.on("userId", "-timestamp"),
        IndexSpec.on("sessionId"),
    ),
)

USER_ACTIVITIES = CollectionSchema(
    name="userActivities",
    model=UserActivity,
    indexes=(
        IndexSpec.on("userId", "-timestamp"),
        IndexSpec.on("activityType", "-timestamp"),
        IndexSpec.ttl("timestamp", USER_ACTIVITY_RETENTION),
    ),
)

SEARCH_QUERIES = CollectionSchema(
    name="searchQueries",
    model=SearchQuery,
    indexes=(
        IndexSpec.on("normalizedQuery", "-timestamp"),
        IndexSpec.on("userId", "-timestamp"),
        IndexSpec.on("timestamp"),
    ),
)

# ==================== Notifications ====================

NOTIFICATIONS = CollectionSchema(
    name="notifications",
    model=Notification,
    indexes=(
        IndexSpec.on("userId"),
        IndexSpec.on("type"),
        IndexSpec.on("createdAt"),
        IndexSpec.on("userId", "-createdAt"),
        IndexSpec.on("userId", "channels.inApp.read"),
        IndexSpec.on("priority", "-createdAt"),
        # Documents without expiresAt are never removed
        IndexSpec.ttl("expiresAt", EXPIRE_AT_FIELD_VALUE),
    ),
)

NOTIFICATION_QUEUE = CollectionSchema(
    name="notificationQueue",
    model=NotificationQueueItem,
    indexes=(
        IndexSpec.on("status", "nextAttemptAt"),
        IndexSpec.on("notificationId"),
        IndexSpec.on("userId"),
    ),
)

EMAIL_LOGS = CollectionSchema(
    name="emailLogs",
    model=EmailLog,
    indexes=(
        IndexSpec.on("providerMessageId"),
        IndexSpec.on("userId", "-createdAt"),
        IndexSpec.on("status"),
        IndexSpec.ttl("createdAt", DELIVERY_LOG_RETENTION),
    ),
)

PUSH_NOTIFICATION_LOGS = CollectionSchema(
    name="pushNotificationLogs",
    model=PushNotificationLog,
    indexes=(
        IndexSpec.on("providerMessageId"),
        IndexSpec.on("userId", "-createdAt"),
        IndexSpec.on("status"),
        IndexSpec.ttl("createdAt", DELIVERY_LOG_RETENTION),
    ),
)

# ==================== Logs ====================

AUDIT_LOGS = CollectionSchema(
    name="auditLogs",
    model=AuditLog,
    indexes=(
        IndexSpec.on("userId"),
        IndexSpec.on("action"),
        IndexSpec.on("resource"),
        IndexSpec.on("userId", "-timestamp"),
        IndexSpec.on("resource", "resourceId", "-timestamp"),
        IndexSpec.on("action", "-timestamp"),
        IndexSpec.ttl("timestamp", AUDIT_LOG_RETENTION),
    ),
)

SYSTEM_LOGS = CollectionSchema(
    name="systemLogs",
    model=SystemLog,
    indexes=(
        IndexSpec.on("service", "level", "-timestamp"),
        IndexSpec.ttl("timestamp", SYSTEM_LOG_RETENTION),
    ),
)

ERROR_LOGS = CollectionSchema(
    name="errorLogs",
    model=ErrorLog,
    indexes=(
        IndexSpec.on("service", "-timestamp"),
        IndexSpec.on("fingerprint"),
        IndexSpec.on("resolved", "severity"),
        # Resolved errors expire 30 days after they were logged; unresolved
        # ones are retained indefinitely
        IndexSpec.ttl(
            "timestamp",
            RESOLVED_ERROR_RETENTION,
            partial_filter={"resolved": True},
        ),
    ),
)

PERFORMANCE_LOGS = CollectionSchema(
    name="performanceLogs",
    model=PerformanceLog,
    indexes=(
        IndexSpec.on("service", "operation", "-timestamp"),
        IndexSpec.ttl("timestamp", PERFORMANCE_LOG_RETENTION),
    ),
)


ALL_COLLECTIONS: Tuple[CollectionSchema, ...] = (
    PAGE_VIEWS,
    ANALYTICS_EVENTS,
    USER_ACTIVITIES,
    SEARCH_QUERIES,
    NOTIFICATIONS,
    NOTIFICATION_QUEUE,
    EMAIL_LOGS,
    PUSH_NOTIFICATION_LOGS,
    AUDIT_LOGS,
    SYSTEM_LOGS,
    ERROR_LOGS,
    PERFORMANCE_LOGS,
)


def iter_ttl_indexes() -> Iterator[Tuple[CollectionSchema, IndexSpec]]:
    """Yield every (collection, TTL index) pair."""
    for schema in ALL_COLLECTIONS:
        if schema.ttl_index is not None:
            yield schema, schema.ttl_index


def get_collection_schema(name: str) -> CollectionSchema:
    """Look up a declaration by collection name or model class name."""
    for schema in ALL_COLLECTIONS:
        if name in (schema.name, schema.model.__name__):
            return schema
    raise KeyError(f"Unknown collection: {name}")

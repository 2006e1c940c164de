"""
Pydantic document models for the MongoDB collections.

Python attributes are snake_case; stored field names are camelCase aliases
(``post_id`` <-> ``postId``). References to relational rows (users, posts,
notifications) are plain strings with no integrity enforcement.

Every model carries the timestamp its TTL index (if any) is keyed on; see
``blog_shared.documents.collections`` for the index declarations.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from blog_shared.enums import (
    AuditStatus,
    DeliveryStatus,
    DeviceType,
    ErrorSeverity,
    LogLevel,
    NotificationChannel,
    NotificationPriority,
    PushPlatform,
    QueueStatus,
)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DocumentModel(BaseModel):
    """Base for stored documents and their embedded sub-documents."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
        validate_default=True,
        extra="ignore",
    )


class StoredDocument(DocumentModel):
    """Top-level document; ``id`` maps to Mongo's ``_id``."""

    id: Optional[Any] = Field(default=None, alias="_id")


# ==================== Analytics ====================

class DeviceInfo(DocumentModel):
    type: DeviceType
    os: str
    browser: str


class GeoInfo(DocumentModel):
    country: Optional[str] = None
    city: Optional[str] = None
    timezone: Optional[str] = None


class PageView(StoredDocument):
    """Engagement snapshot for one visit to a post."""

    post_id: str
    post_slug: str
    user_id: Optional[str] = None
    session_id: str
    ip_address: str
    user_agent: str
    device: DeviceInfo
    time_spent: Optional[float] = Field(default=None, ge=0)  # seconds
    scroll_depth: Optional[float] = Field(default=None, ge=0, le=100)  # percent
    interacted: bool = False
    referrer: Optional[str] = None
    source: str
    campaign: Optional[str] = None
    medium: Optional[str] = None
    geo: Optional[GeoInfo] = None
    timestamp: datetime = Field(default_factory=utcnow)
    exited_at: Optional[datetime] = None


class AnalyticsEvent(StoredDocument):
    """Generic typed event envelope with a free-form property bag."""

    event_type: str
    event_name: str
    user_id: Optional[str] = None
    session_id: Optional[str] = None
    post_id: Optional[str] = None
    properties: Dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=utcnow)


class UserActivity(StoredDocument):
    """Activity-feed entry."""

    user_id: str
    activity_type: str
    target_id: Optional[str] = None
    target_type: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)
    is_public: bool = True
    timestamp: datetime = Field(default_factory=utcnow)


class ClickedResult(DocumentModel):
    post_id: str
    position: int = Field(ge=0)
    clicked_at: datetime = Field(default_factory=utcnow)


class SearchQuery(StoredDocument):
    """Search request with click-through results and latency."""

    query: str = Field(min_length=1)
    normalized_query: Optional[str] = None
    user_id: Optional[str] = None
    session_id: Optional[str] = None
    filters: Dict[str, Any] = Field(default_factory=dict)
    result_count: int = Field(default=0, ge=0)
    clicked_results: List[ClickedResult] = Field(default_factory=list)
    execution_time_ms: float = Field(ge=0)
    timestamp: datetime = Field(default_factory=utcnow)


# ==================== Notifications ====================

class RelatedEntity(DocumentModel):
    id: Optional[str] = None
    type: Optional[str] = None


class InAppChannel(DocumentModel):
    enabled: bool = True
    read: bool = False
    read_at: Optional[datetime] = None


class EmailChannel(DocumentModel):
    enabled: bool = False
    sent: bool = False
    sent_at: Optional[datetime] = None
    email_id: Optional[str] = None


class PushChannel(DocumentModel):
    enabled: bool = False
    sent: bool = False
    sent_at: Optional[datetime] = None
    push_id: Optional[str] = None


class NotificationChannels(DocumentModel):
    in_app: InAppChannel = Field(default_factory=InAppChannel)
    email: EmailChannel = Field(default_factory=EmailChannel)
    push: PushChannel = Field(default_factory=PushChannel)


class Notification(StoredDocument):
    """Multi-channel notification.

    Removed by the store at ``expires_at``; without it the record is kept.
    """

    user_id: str
    type: str
    title: str
    message: str
    action_url: Optional[str] = None
    action_text: Optional[str] = None
    related_entity: Optional[RelatedEntity] = None
    actor_id: Optional[str] = None
    actor_name: Optional[str] = None
    actor_avatar: Optional[str] = None
    channels: NotificationChannels = Field(default_factory=NotificationChannels)
    priority: NotificationPriority = NotificationPriority.MEDIUM
    created_at: datetime = Field(default_factory=utcnow)
    expires_at: Optional[datetime] = None


class QueueError(DocumentModel):
    attempt: int = Field(ge=1)
    error: str
    occurred_at: datetime = Field(default_factory=utcnow)


class NotificationQueueItem(StoredDocument):
    """Delivery job for one notification on one channel."""

    notification_id: str
    user_id: str
    channel: NotificationChannel
    payload: Dict[str, Any] = Field(default_factory=dict)
    status: QueueStatus = QueueStatus.PENDING
    attempts: int = Field(default=0, ge=0)
    max_attempts: int = Field(default=3, ge=1)
    next_attempt_at: Optional[datetime] = None
    last_error: Optional[str] = None
    error_history: List[QueueError] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)
    processed_at: Optional[datetime] = None


class DeliveryEvent(DocumentModel):
    """Provider webhook event (delivered, opened, bounced...)."""

    type: str
    timestamp: datetime = Field(default_factory=utcnow)
    metadata: Dict[str, Any] = Field(default_factory=dict)


class EmailLog(StoredDocument):
    """Email provider delivery receipt."""

    notification_id: Optional[str] = None
    user_id: Optional[str] = None
    to: str
    from_address: str = Field(alias="from")
    subject: str
    template: Optional[str] = None
    provider: str
    provider_message_id: Optional[str] = None
    status: DeliveryStatus = DeliveryStatus.QUEUED
    events: List[DeliveryEvent] = Field(default_factory=list)
    error: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)


class PushNotificationLog(StoredDocument):
    """Push provider delivery receipt."""

    notification_id: Optional[str] = None
    user_id: str
    device_token: str
    platform: PushPlatform
    provider: str
    provider_message_id: Optional[str] = None
    title: str
    body: str
    data: Dict[str, Any] = Field(default_factory=dict)
    status: DeliveryStatus = DeliveryStatus.QUEUED
    events: List[DeliveryEvent] = Field(default_factory=list)
    error: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)


# ==================== Logs ====================

class AuditChanges(DocumentModel):
    before: Optional[Dict[str, Any]] = None
    after: Optional[Dict[str, Any]] = None


class AuditLog(StoredDocument):
    """Compliance record of who did what to which resource."""

    user_id: Optional[str] = None
    user_email: Optional[str] = None
    user_role: Optional[str] = None
    action: str
    resource: str
    resource_id: str
    changes: Optional[AuditChanges] = None
    ip_address: str
    user_agent: str
    method: Optional[str] = None
    endpoint: Optional[str] = None
    status: AuditStatus
    error_message: Optional[str] = None
    timestamp: datetime = Field(default_factory=utcnow)


class SystemLog(StoredDocument):
    level: LogLevel
    service: str
    message: str
    context: Dict[str, Any] = Field(default_factory=dict)
    host: Optional[str] = None
    pid: Optional[int] = None
    timestamp: datetime = Field(default_factory=utcnow)


class ErrorLog(StoredDocument):
    """Captured exception. Only resolved errors are ever expired."""

    service: str
    error_type: str
    message: str
    stack: Optional[str] = None
    severity: ErrorSeverity = ErrorSeverity.MEDIUM
    fingerprint: Optional[str] = None
    occurrences: int = Field(default=1, ge=1)
    user_id: Optional[str] = None
    request_id: Optional[str] = None
    context: Dict[str, Any] = Field(default_factory=dict)
    resolved: bool = False
    resolved_at: Optional[datetime] = None
    resolved_by: Optional[str] = None
    timestamp: datetime = Field(default_factory=utcnow)


class PerformanceLog(StoredDocument):
    service: str
    operation: str
    duration_ms: float = Field(ge=0)
    status_code: Optional[int] = None
    endpoint: Optional[str] = None
    method: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=utcnow)

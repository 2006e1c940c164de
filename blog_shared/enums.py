"""
Enumerated value sets shared by the relational and document schemas.

Relational enums are persisted by member name (``READER``, ``DRAFT``...) as
PostgreSQL enum types; document enums are stored by value.
"""

from __future__ import annotations

from enum import Enum


# ==================== Relational ====================

class UserRole(str, Enum):
    """Account role."""

    READER = "reader"
    AUTHOR = "author"
    EDITOR = "editor"
    ADMIN = "admin"


class PostStatus(str, Enum):
    """Editorial state of a post."""

    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"
    DELETED = "deleted"


class PostVisibility(str, Enum):
    """Who can see a post."""

    PUBLIC = "public"
    UNLISTED = "unlisted"
    PRIVATE = "private"


class CommentStatus(str, Enum):
    """Moderation state of a comment."""

    PENDING = "pending"
    APPROVED = "approved"
    SPAM = "spam"
    DELETED = "deleted"


class MediaStatus(str, Enum):
    """Processing state of an uploaded file."""

    PROCESSING = "processing"
    READY = "ready"
    FAILED = "failed"

    def is_terminal(self) -> bool:
        """Check if processing has finished."""
        return self in (MediaStatus.READY, MediaStatus.FAILED)


# ==================== Documents ====================

class DeviceType(str, Enum):
    MOBILE = "mobile"
    TABLET = "tablet"
    DESKTOP = "desktop"


class NotificationPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class NotificationChannel(str, Enum):
    IN_APP = "in_app"
    EMAIL = "email"
    PUSH = "push"


class QueueStatus(str, Enum):
    """Delivery job state."""

    PENDING = "pending"
    PROCESSING = "processing"
    SENT = "sent"
    FAILED = "failed"


class DeliveryStatus(str, Enum):
    """Provider-reported delivery state for email and push receipts."""

    QUEUED = "queued"
    SENT = "sent"
    DELIVERED = "delivered"
    OPENED = "opened"
    CLICKED = "clicked"
    BOUNCED = "bounced"
    FAILED = "failed"


class PushPlatform(str, Enum):
    IOS = "ios"
    ANDROID = "android"
    WEB = "web"


class AuditStatus(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"


class LogLevel(str, Enum):
    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"
    FATAL = "fatal"


class ErrorSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

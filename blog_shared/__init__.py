"""
Shared module for blog platform microservices.

Contains the data-layer code used across the auth, content, notification,
analytics and media services:
- config: Environment-based settings and logging setup
- enums: Enumerated value sets for both stores
- db: SQLAlchemy models, Pydantic schemas and the PostgreSQL client
- documents: MongoDB document models, collection/index declarations,
  validation and the Motor connection manager
- lifecycle: Application-owned open/close of the store clients
"""

from blog_shared.config import SharedSettings, configure_logging, get_settings
from blog_shared.db import PostgresClient, disconnect_client, get_client
from blog_shared.documents import MongoClientManager, connect, disconnect
from blog_shared.enums import (
    AuditStatus,
    CommentStatus,
    DeliveryStatus,
    DeviceType,
    ErrorSeverity,
    LogLevel,
    MediaStatus,
    NotificationChannel,
    NotificationPriority,
    PostStatus,
    PostVisibility,
    PushPlatform,
    QueueStatus,
    UserRole,
)
from blog_shared.errors import (
    BlogSharedError,
    ConfigurationError,
    DocumentValidationError,
)
from blog_shared.lifecycle import StoreClients, open_stores, shutdown

__all__ = [
    # Configuration
    "SharedSettings",
    "get_settings",
    "configure_logging",
    # Clients
    "PostgresClient",
    "get_client",
    "disconnect_client",
    "MongoClientManager",
    "connect",
    "disconnect",
    "StoreClients",
    "open_stores",
    "shutdown",
    # Errors
    "BlogSharedError",
    "ConfigurationError",
    "DocumentValidationError",
    # Enums
    "UserRole",
    "PostStatus",
    "PostVisibility",
    "CommentStatus",
    "MediaStatus",
    "DeviceType",
    "NotificationPriority",
    "NotificationChannel",
    "QueueStatus",
    "DeliveryStatus",
    "PushPlatform",
    "AuditStatus",
    "LogLevel",
    "ErrorSeverity",
]

"""
Shared document store module for blog microservices.

Provides MongoDB document models, collection and index declarations,
per-collection validation, and the Motor-based connection manager.
"""

from blog_shared.documents.client import (
    MongoClientManager,
    connect,
    disconnect,
    get_database,
    get_manager,
)
from blog_shared.documents.collection import DocumentCollection
from blog_shared.documents.collections import (
    ALL_COLLECTIONS,
    ANALYTICS_EVENTS,
    AUDIT_LOGS,
    EMAIL_LOGS,
    ERROR_LOGS,
    NOTIFICATION_QUEUE,
    NOTIFICATIONS,
    PAGE_VIEWS,
    PERFORMANCE_LOGS,
    PUSH_NOTIFICATION_LOGS,
    SEARCH_QUERIES,
    SYSTEM_LOGS,
    USER_ACTIVITIES,
    CollectionSchema,
    IndexSpec,
    get_collection_schema,
    iter_ttl_indexes,
)
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
    SystemLog,
    UserActivity,
)
from blog_shared.documents.validation import (
    validate_analytics_event,
    validate_audit_log,
    validate_document,
    validate_email_log,
    validate_error_log,
    validate_notification,
    validate_notification_queue_item,
    validate_page_view,
    validate_performance_log,
    validate_push_notification_log,
    validate_search_query,
    validate_system_log,
    validate_user_activity,
)

__all__ = [
    # Client
    "MongoClientManager",
    "DocumentCollection",
    "connect",
    "disconnect",
    "get_database",
    "get_manager",
    # Declarations
    "CollectionSchema",
    "IndexSpec",
    "ALL_COLLECTIONS",
    "PAGE_VIEWS",
    "ANALYTICS_EVENTS",
    "USER_ACTIVITIES",
    "SEARCH_QUERIES",
    "NOTIFICATIONS",
    "NOTIFICATION_QUEUE",
    "EMAIL_LOGS",
    "PUSH_NOTIFICATION_LOGS",
    "AUDIT_LOGS",
    "SYSTEM_LOGS",
    "ERROR_LOGS",
    "PERFORMANCE_LOGS",
    "get_collection_schema",
    "iter_ttl_indexes",
    # Document models
    "PageView",
    "AnalyticsEvent",
    "UserActivity",
    "SearchQuery",
    "Notification",
    "NotificationQueueItem",
    "EmailLog",
    "PushNotificationLog",
    "AuditLog",
    "SystemLog",
    "ErrorLog",
    "PerformanceLog",
    # Validation
    "validate_document",
    "validate_page_view",
    "validate_analytics_event",
    "validate_user_activity",
    "validate_search_query",
    "validate_notification",
    "validate_notification_queue_item",
    "validate_email_log",
    "validate_push_notification_log",
    "validate_audit_log",
    "validate_system_log",
    "validate_error_log",
    "validate_performance_log",
]

"""
Field-level validation for documents before they are written.

``validate_document`` checks types, enumerated values, required fields and
ranges, fills defaults, and returns the camelCase mapping that is stored.
Each collection also gets a named wrapper so a service can validate the one
shape it writes without looking up the declaration.

Business rules (rate limits, ownership, retention overrides) are the calling
service's concern and are not checked here.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Union

from pydantic import ValidationError

from blog_shared.documents.collections import (
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
)
from blog_shared.documents.models import StoredDocument
from blog_shared.errors import DocumentValidationError

DocumentInput = Union[Mapping[str, Any], StoredDocument]


def to_document(instance: StoredDocument) -> Dict[str, Any]:
    """Serialize a model to its stored form.

    Unset optional fields are omitted rather than stored as null, so a
    notification without ``expiresAt`` carries no expiry at all.
    """
    return instance.model_dump(by_alias=True, exclude_none=True)


def parse_document(schema: CollectionSchema, data: DocumentInput) -> StoredDocument:
    """Validate ``data`` against the collection's model and return the instance."""
    if isinstance(data, StoredDocument):
        if not isinstance(data, schema.model):
            raise DocumentValidationError(
                schema.name,
                [{
                    "loc": (),
                    "msg": f"expected {schema.model.__name__}, got {type(data).__name__}",
                }],
            )
        data = data.model_dump(by_alias=True, exclude_none=True)

    try:
        return schema.model.model_validate(data)
    except ValidationError as e:
        raise DocumentValidationError(schema.name, e.errors()) from e


def validate_document(schema: CollectionSchema, data: DocumentInput) -> Dict[str, Any]:
    """Validate ``data`` and return the mapping to store.

    Raises:
        DocumentValidationError: a field is missing, mistyped, out of range
            or outside its enumerated values.
    """
    return to_document(parse_document(schema, data))


def validate_page_view(data: DocumentInput) -> Dict[str, Any]:
    """Device type must be mobile/tablet/desktop; scroll depth is 0-100."""
    return validate_document(PAGE_VIEWS, data)


def validate_analytics_event(data: DocumentInput) -> Dict[str, Any]:
    return validate_document(ANALYTICS_EVENTS, data)


def validate_user_activity(data: DocumentInput) -> Dict[str, Any]:
    return validate_document(USER_ACTIVITIES, data)


def validate_search_query(data: DocumentInput) -> Dict[str, Any]:
    """Query text is required and non-empty; latency and positions are non-negative."""
    return validate_document(SEARCH_QUERIES, data)


def validate_notification(data: DocumentInput) -> Dict[str, Any]:
    """Fills per-channel defaults: in-app enabled, email and push disabled."""
    return validate_document(NOTIFICATIONS, data)


def validate_notification_queue_item(data: DocumentInput) -> Dict[str, Any]:
    return validate_document(NOTIFICATION_QUEUE, data)


def validate_email_log(data: DocumentInput) -> Dict[str, Any]:
    return validate_document(EMAIL_LOGS, data)


def validate_push_notification_log(data: DocumentInput) -> Dict[str, Any]:
    return validate_document(PUSH_NOTIFICATION_LOGS, data)


def validate_audit_log(data: DocumentInput) -> Dict[str, Any]:
    """Status must be success or failure."""
    return validate_document(AUDIT_LOGS, data)


def validate_system_log(data: DocumentInput) -> Dict[str, Any]:
    return validate_document(SYSTEM_LOGS, data)


def validate_error_log(data: DocumentInput) -> Dict[str, Any]:
    """``resolvedAt`` is stored only when given; expiry of resolved errors is keyed on ``timestamp``."""
    return validate_document(ERROR_LOGS, data)


def validate_performance_log(data: DocumentInput) -> Dict[str, Any]:
    return validate_document(PERFORMANCE_LOGS, data)

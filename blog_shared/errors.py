"""
Exceptions raised by the shared blog data layer.

Only configuration and document validation failures originate here.
Connection failures and query errors propagate unmodified from SQLAlchemy
and PyMongo so that calling services can map them to their own error kinds.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence


class BlogSharedError(Exception):
    """Base class for errors raised by blog_shared."""


class ConfigurationError(BlogSharedError):
    """A required setting (connection string, URI) is missing or unusable."""

    def __init__(self, setting: str, message: Optional[str] = None):
        self.setting = setting
        super().__init__(
            message or f"{setting} environment variable is not set"
        )


class DocumentValidationError(BlogSharedError, ValueError):
    """A document failed field-level validation for its collection."""

    def __init__(self, collection: str, errors: Sequence[dict[str, Any]]):
        self.collection = collection
        self.errors = list(errors)
        details = "; ".join(
            f"{'.'.join(str(p) for p in err.get('loc', ())) or '<root>'}: {err.get('msg')}"
            for err in self.errors
        )
        super().__init__(f"Invalid {collection} document: {details}")

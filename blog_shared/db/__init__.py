"""
Shared relational database module for blog microservices.

Provides SQLAlchemy models, Pydantic schemas and the PostgreSQL client.
"""

from blog_shared.db.client import (
    PostgresClient,
    check_connection,
    disconnect_client,
    get_client,
    get_default_client,
    get_engine,
    get_session,
    init_db,
)
from blog_shared.db.models import (
    Base,
    Bookmark,
    Category,
    Comment,
    Like,
    Media,
    MediaVariant,
    Post,
    PostCategory,
    PostTag,
    Profile,
    Session,
    Tag,
    User,
)
from blog_shared.db.schemas import (
    BookmarkSchema,
    CategorySchema,
    CommentSchema,
    LikeSchema,
    MediaSchema,
    MediaVariantSchema,
    PostCategorySchema,
    PostSchema,
    PostTagSchema,
    ProfileSchema,
    SessionSchema,
    TagSchema,
    UserSchema,
)

__all__ = [
    # Client
    "PostgresClient",
    "get_client",
    "get_default_client",
    "get_engine",
    "get_session",
    "disconnect_client",
    "init_db",
    "check_connection",
    # SQLAlchemy models
    "Base",
    "User",
    "Profile",
    "Session",
    "Post",
    "Category",
    "Tag",
    "PostCategory",
    "PostTag",
    "Comment",
    "Like",
    "Bookmark",
    "Media",
    "MediaVariant",
    # Pydantic schemas
    "UserSchema",
    "ProfileSchema",
    "SessionSchema",
    "PostSchema",
    "CategorySchema",
    "TagSchema",
    "PostCategorySchema",
    "PostTagSchema",
    "CommentSchema",
    "LikeSchema",
    "BookmarkSchema",
    "MediaSchema",
    "MediaVariantSchema",
]

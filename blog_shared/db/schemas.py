"""
Pydantic schemas for relational entities.

These schemas give consuming services typed, detached values built from ORM
rows (``UserSchema.model_validate(user)``) and decouple their API layers from
the ORM models.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from blog_shared.enums import (
    CommentStatus,
    MediaStatus,
    PostStatus,
    PostVisibility,
    UserRole,
)


class UserSchema(BaseModel):
    """Account record. The password hash is never exposed."""

    id: str
    email: str
    username: str
    role: UserRole = UserRole.READER
    is_verified: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ProfileSchema(BaseModel):
    """User profile."""

    id: str
    user_id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    display_name: Optional[str] = None
    bio: Optional[str] = None
    avatar: Optional[str] = None
    website: Optional[str] = None
    twitter: Optional[str] = None
    linkedin: Optional[str] = None
    github: Optional[str] = None
    is_author_verified: bool = False
    author_badge: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class SessionSchema(BaseModel):
    """Bearer-token session."""

    id: str
    user_id: str
    token: str
    expires_at: datetime
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at <= now


class PostSchema(BaseModel):
    """Blog post without its body relationships."""

    id: str
    author_id: str
    title: str
    slug: str
    excerpt: Optional[str] = None
    content: str
    cover_image: Optional[str] = None
    status: PostStatus = PostStatus.DRAFT
    visibility: PostVisibility = PostVisibility.PUBLIC
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    keywords: List[str] = Field(default_factory=list)
    view_count: int = 0
    like_count: int = 0
    comment_count: int = 0
    read_time: Optional[int] = None
    published_at: Optional[datetime] = None
    scheduled_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("keywords", mode="before")
    @classmethod
    def _null_keywords(cls, value):
        # The column is nullable
        return [] if value is None else value


class CategorySchema(BaseModel):
    """Category tree node."""

    id: str
    name: str
    slug: str
    description: Optional[str] = None
    icon: Optional[str] = None
    color: Optional[str] = None
    parent_id: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class TagSchema(BaseModel):
    id: str
    name: str
    slug: str

    model_config = ConfigDict(from_attributes=True)


class PostCategorySchema(BaseModel):
    post_id: str
    category_id: str

    model_config = ConfigDict(from_attributes=True)


class PostTagSchema(BaseModel):
    post_id: str
    tag_id: str

    model_config = ConfigDict(from_attributes=True)


class CommentSchema(BaseModel):
    """Comment or reply."""

    id: str
    post_id: str
    author_id: str
    content: str
    parent_id: Optional[str] = None
    status: CommentStatus = CommentStatus.APPROVED
    like_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class LikeSchema(BaseModel):
    id: str
    user_id: str
    post_id: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class BookmarkSchema(BaseModel):
    id: str
    user_id: str
    post_id: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class MediaVariantSchema(BaseModel):
    id: str
    media_id: str
    variant: str
    url: str
    width: Optional[int] = None
    height: Optional[int] = None
    size: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)


class MediaSchema(BaseModel):
    """Uploaded file with its renditions."""

    id: str
    user_id: str
    filename: str
    original_name: str
    mime_type: str
    size: int
    storage_provider: str
    storage_key: str
    url: str
    width: Optional[int] = None
    height: Optional[int] = None
    duration: Optional[int] = None
    status: MediaStatus = MediaStatus.PROCESSING
    created_at: Optional[datetime] = None
    variants: List[MediaVariantSchema] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)

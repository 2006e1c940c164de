"""
SQLAlchemy ORM models for the blog platform.

These models define the relational schema shared by the auth, content,
notification and media services: accounts, posts and their taxonomy,
reader interactions, and uploaded media.

Cascade rules live in the database (``ON DELETE``) and are mirrored on the
ORM relationships with ``passive_deletes=True`` so SQLAlchemy never tries to
null out a NOT NULL foreign key before the store cascades.

Authored content references its author by a plain indexed ``author_id`` /
``user_id`` column with no foreign key: deleting a user removes its profile
and sessions only.
"""

from __future__ import annotations

import uuid

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Enum as SAEnum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import declarative_base, relationship

from blog_shared.enums import (
    CommentStatus,
    MediaStatus,
    PostStatus,
    PostVisibility,
    UserRole,
)

Base = declarative_base()

# TEXT[] on PostgreSQL, JSON elsewhere (SQLite test databases)
StringList = ARRAY(Text).with_variant(JSON(none_as_null=True), "sqlite")


def new_id() -> str:
    """Generate a primary key for a new row."""
    return uuid.uuid4().hex


def _id_column():
    return Column(String(32), primary_key=True, default=new_id)


def _created_at():
    return Column(DateTime, nullable=False, server_default=func.now())


def _updated_at():
    return Column(
        DateTime,
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )


# ==================== Accounts ====================

class User(Base):
    """Account record. ``password_hash`` is null for federated identities."""

    __tablename__ = "users"

    id = _id_column()
    email = Column(String(320), nullable=False, unique=True)
    username = Column(String(64), nullable=False, unique=True)
    password_hash = Column(Text, nullable=True)
    role = Column(
        SAEnum(UserRole, name="user_role"),
        nullable=False,
        default=UserRole.READER,
        server_default=UserRole.READER.name,
    )
    is_verified = Column(Boolean, nullable=False, default=False, server_default="0")
    created_at = _created_at()
    updated_at = _updated_at()

    # Relationships
    profile = relationship(
        "Profile",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    sessions = relationship(
        "Session",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        Index("idx_users_email", "email"),
        Index("idx_users_username", "username"),
        Index("idx_users_role", "role"),
    )


class Profile(Base):
    """Display metadata for a user (1:1)."""

    __tablename__ = "profiles"

    id = _id_column()
    user_id = Column(
        String(32),
        ForeignKey("users.id", ondelete="CASCADE", onupdate="CASCADE"),
        nullable=False,
        unique=True,
    )
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    display_name = Column(String, nullable=True)
    bio = Column(Text, nullable=True)
    avatar = Column(Text, nullable=True)
    website = Column(Text, nullable=True)
    # Social handles
    twitter = Column(String, nullable=True)
    linkedin = Column(String, nullable=True)
    github = Column(String, nullable=True)
    is_author_verified = Column(
        Boolean, nullable=False, default=False, server_default="0"
    )
    author_badge = Column(String, nullable=True)
    created_at = _created_at()
    updated_at = _updated_at()

    user = relationship("User", back_populates="profile")


class Session(Base):
    """Bearer-token session. Expired rows are removed by the auth service."""

    __tablename__ = "sessions"

    id = _id_column()
    user_id = Column(
        String(32),
        ForeignKey("users.id", ondelete="CASCADE", onupdate="CASCADE"),
        nullable=False,
    )
    token = Column(Text, nullable=False, unique=True)
    expires_at = Column(DateTime, nullable=False)
    created_at = _created_at()

    user = relationship("User", back_populates="sessions")

    __table_args__ = (
        Index("idx_sessions_user_id", "user_id"),
        Index("idx_sessions_expires_at", "expires_at"),
    )


# ==================== Content ====================

class Post(Base):
    """Blog post. View/like/comment counters are maintained by other services."""

    __tablename__ = "posts"

    id = _id_column()
    author_id = Column(String(32), nullable=False)
    title = Column(Text, nullable=False)
    slug = Column(String(255), nullable=False, unique=True)
    excerpt = Column(Text, nullable=True)
    content = Column(Text, nullable=False)
    cover_image = Column(Text, nullable=True)
    status = Column(
        SAEnum(PostStatus, name="post_status"),
        nullable=False,
        default=PostStatus.DRAFT,
        server_default=PostStatus.DRAFT.name,
    )
    visibility = Column(
        SAEnum(PostVisibility, name="post_visibility"),
        nullable=False,
        default=PostVisibility.PUBLIC,
        server_default=PostVisibility.PUBLIC.name,
    )
    # SEO
    meta_title = Column(Text, nullable=True)
    meta_description = Column(Text, nullable=True)
    keywords = Column(StringList, nullable=True, default=list)
    # Denormalized counters
    view_count = Column(Integer, nullable=False, default=0, server_default="0")
    like_count = Column(Integer, nullable=False, default=0, server_default="0")
    comment_count = Column(Integer, nullable=False, default=0, server_default="0")
    read_time = Column(Integer, nullable=True)  # minutes
    published_at = Column(DateTime, nullable=True)
    scheduled_at = Column(DateTime, nullable=True)
    created_at = _created_at()
    updated_at = _updated_at()

    # Relationships
    categories = relationship(
        "PostCategory",
        back_populates="post",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    tags = relationship(
        "PostTag",
        back_populates="post",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    comments = relationship(
        "Comment",
        back_populates="post",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    likes = relationship(
        "Like",
        back_populates="post",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    bookmarks = relationship(
        "Bookmark",
        back_populates="post",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        Index("idx_posts_author_id", "author_id"),
        Index("idx_posts_status", "status"),
        Index("idx_posts_published_at", "published_at"),
    )


class Category(Base):
    """Category tree node. Depth limits are enforced by the content service."""

    __tablename__ = "categories"

    id = _id_column()
    name = Column(String(128), nullable=False, unique=True)
    slug = Column(String(128), nullable=False, unique=True)
    description = Column(Text, nullable=True)
    icon = Column(String, nullable=True)
    color = Column(String(32), nullable=True)
    parent_id = Column(
        String(32),
        ForeignKey("categories.id", ondelete="SET NULL", onupdate="CASCADE"),
        nullable=True,
    )
    created_at = _created_at()
    updated_at = _updated_at()

    # Relationships
    parent = relationship("Category", remote_side=[id], back_populates="children")
    children = relationship("Category", back_populates="parent", passive_deletes=True)
    posts = relationship(
        "PostCategory",
        back_populates="category",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        Index("idx_categories_parent_id", "parent_id"),
    )


class Tag(Base):
    """Flat label."""

    __tablename__ = "tags"

    id = _id_column()
    name = Column(String(128), nullable=False, unique=True)
    slug = Column(String(128), nullable=False, unique=True)
    created_at = _created_at()

    posts = relationship(
        "PostTag",
        back_populates="tag",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class PostCategory(Base):
    """Post <-> Category junction."""

    __tablename__ = "post_categories"

    post_id = Column(
        String(32),
        ForeignKey("posts.id", ondelete="CASCADE", onupdate="CASCADE"),
        primary_key=True,
    )
    category_id = Column(
        String(32),
        ForeignKey("categories.id", ondelete="CASCADE", onupdate="CASCADE"),
        primary_key=True,
    )

    post = relationship("Post", back_populates="categories")
    category = relationship("Category", back_populates="posts")


class PostTag(Base):
    """Post <-> Tag junction."""

    __tablename__ = "post_tags"

    post_id = Column(
        String(32),
        ForeignKey("posts.id", ondelete="CASCADE", onupdate="CASCADE"),
        primary_key=True,
    )
    tag_id = Column(
        String(32),
        ForeignKey("tags.id", ondelete="CASCADE", onupdate="CASCADE"),
        primary_key=True,
    )

    post = relationship("Post", back_populates="tags")
    tag = relationship("Tag", back_populates="posts")


# ==================== Interactions ====================

class Comment(Base):
    """Comment on a post; ``parent_id`` links a reply to the comment it answers."""

    __tablename__ = "comments"

    id = _id_column()
    post_id = Column(
        String(32),
        ForeignKey("posts.id", ondelete="CASCADE", onupdate="CASCADE"),
        nullable=False,
    )
    author_id = Column(String(32), nullable=False)
    content = Column(Text, nullable=False)
    parent_id = Column(
        String(32),
        ForeignKey("comments.id", ondelete="SET NULL", onupdate="CASCADE"),
        nullable=True,
    )
    status = Column(
        SAEnum(CommentStatus, name="comment_status"),
        nullable=False,
        default=CommentStatus.APPROVED,
        server_default=CommentStatus.APPROVED.name,
    )
    like_count = Column(Integer, nullable=False, default=0, server_default="0")
    created_at = _created_at()
    updated_at = _updated_at()

    # Relationships
    post = relationship("Post", back_populates="comments")
    parent = relationship("Comment", remote_side=[id], back_populates="replies")
    replies = relationship("Comment", back_populates="parent", passive_deletes=True)

    __table_args__ = (
        Index("idx_comments_post_id", "post_id"),
        Index("idx_comments_author_id", "author_id"),
        Index("idx_comments_parent_id", "parent_id"),
        Index("idx_comments_status", "status"),
    )


class Like(Base):
    """A user's like on a post; one per (user, post)."""

    __tablename__ = "likes"

    id = _id_column()
    user_id = Column(String(32), nullable=False)
    post_id = Column(
        String(32),
        ForeignKey("posts.id", ondelete="CASCADE", onupdate="CASCADE"),
        nullable=False,
    )
    created_at = _created_at()

    post = relationship("Post", back_populates="likes")

    __table_args__ = (
        UniqueConstraint("user_id", "post_id", name="uq_likes_user_post"),
        Index("idx_likes_post_id", "post_id"),
        Index("idx_likes_user_id", "user_id"),
    )


class Bookmark(Base):
    """A user's saved post; one per (user, post)."""

    __tablename__ = "bookmarks"

    id = _id_column()
    user_id = Column(String(32), nullable=False)
    post_id = Column(
        String(32),
        ForeignKey("posts.id", ondelete="CASCADE", onupdate="CASCADE"),
        nullable=False,
    )
    created_at = _created_at()

    post = relationship("Post", back_populates="bookmarks")

    __table_args__ = (
        UniqueConstraint("user_id", "post_id", name="uq_bookmarks_user_post"),
        Index("idx_bookmarks_user_id", "user_id"),
        Index("idx_bookmarks_post_id", "post_id"),
    )


# ==================== Media ====================

class Media(Base):
    """Uploaded file metadata."""

    __tablename__ = "media"

    id = _id_column()
    user_id = Column(String(32), nullable=False)
    filename = Column(Text, nullable=False)
    original_name = Column(Text, nullable=False)
    mime_type = Column(String(255), nullable=False)
    size = Column(Integer, nullable=False)  # bytes
    storage_provider = Column(String(64), nullable=False)
    storage_key = Column(Text, nullable=False)
    url = Column(Text, nullable=False)
    width = Column(Integer, nullable=True)
    height = Column(Integer, nullable=True)
    duration = Column(Integer, nullable=True)  # seconds, audio/video only
    status = Column(
        SAEnum(MediaStatus, name="media_status"),
        nullable=False,
        default=MediaStatus.PROCESSING,
        server_default=MediaStatus.PROCESSING.name,
    )
    created_at = _created_at()
    updated_at = _updated_at()

    variants = relationship(
        "MediaVariant",
        back_populates="media",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        Index("idx_media_user_id", "user_id"),
        Index("idx_media_status", "status"),
    )


class MediaVariant(Base):
    """Derived rendition of a media file (thumbnail, webp, ...)."""

    __tablename__ = "media_variants"

    id = _id_column()
    media_id = Column(
        String(32),
        ForeignKey("media.id", ondelete="CASCADE", onupdate="CASCADE"),
        nullable=False,
    )
    variant = Column(String(64), nullable=False)
    url = Column(Text, nullable=False)
    width = Column(Integer, nullable=True)
    height = Column(Integer, nullable=True)
    size = Column(Integer, nullable=True)

    media = relationship("Media", back_populates="variants")

    __table_args__ = (
        Index("idx_media_variants_media_id", "media_id"),
    )

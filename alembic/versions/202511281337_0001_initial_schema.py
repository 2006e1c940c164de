"""initial blog schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2025-11-28
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


user_role = sa.Enum("READER", "AUTHOR", "EDITOR", "ADMIN", name="user_role")
post_status = sa.Enum("DRAFT", "PUBLISHED", "ARCHIVED", "DELETED", name="post_status")
post_visibility = sa.Enum("PUBLIC", "UNLISTED", "PRIVATE", name="post_visibility")
comment_status = sa.Enum("PENDING", "APPROVED", "SPAM", "DELETED", name="comment_status")
media_status = sa.Enum("PROCESSING", "READY", "FAILED", name="media_status")


def _created_at() -> sa.Column:
    return sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.text("now()"))


def _updated_at() -> sa.Column:
    return sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.text("now()"))


def _post_fk(name: str = "post_id", **kwargs) -> sa.Column:
    return sa.Column(
        name,
        sa.String(length=32),
        sa.ForeignKey("posts.id", ondelete="CASCADE", onupdate="CASCADE"),
        **kwargs,
    )


def upgrade() -> None:
    # Accounts
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=32), primary_key=True),
        sa.Column("email", sa.String(length=320), nullable=False, unique=True),
        sa.Column("username", sa.String(length=64), nullable=False, unique=True),
        sa.Column("password_hash", sa.Text(), nullable=True),
        sa.Column("role", user_role, nullable=False, server_default="READER"),
        sa.Column("is_verified", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        _created_at(),
        _updated_at(),
    )
    op.create_index("idx_users_email", "users", ["email"])
    op.create_index("idx_users_username", "users", ["username"])
    op.create_index("idx_users_role", "users", ["role"])

    op.create_table(
        "profiles",
        sa.Column("id", sa.String(length=32), primary_key=True),
        sa.Column(
            "user_id",
            sa.String(length=32),
            sa.ForeignKey("users.id", ondelete="CASCADE", onupdate="CASCADE"),
            nullable=False,
            unique=True,
        ),
        sa.Column("first_name", sa.String(), nullable=True),
        sa.Column("last_name", sa.String(), nullable=True),
        sa.Column("display_name", sa.String(), nullable=True),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("avatar", sa.Text(), nullable=True),
        sa.Column("website", sa.Text(), nullable=True),
        sa.Column("twitter", sa.String(), nullable=True),
        sa.Column("linkedin", sa.String(), nullable=True),
        sa.Column("github", sa.String(), nullable=True),
        sa.Column("is_author_verified", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("author_badge", sa.String(), nullable=True),
        _created_at(),
        _updated_at(),
    )

    op.create_table(
        "sessions",
        sa.Column("id", sa.String(length=32), primary_key=True),
        sa.Column(
            "user_id",
            sa.String(length=32),
            sa.ForeignKey("users.id", ondelete="CASCADE", onupdate="CASCADE"),
            nullable=False,
        ),
        sa.Column("token", sa.Text(), nullable=False, unique=True),
        sa.Column("expires_at", sa.DateTime(), nullable=False),
        _created_at(),
    )
    op.create_index("idx_sessions_user_id", "sessions", ["user_id"])
    op.create_index("idx_sessions_expires_at", "sessions", ["expires_at"])

    # Content
    op.create_table(
        "posts",
        sa.Column("id", sa.String(length=32), primary_key=True),
        sa.Column("author_id", sa.String(length=32), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("slug", sa.String(length=255), nullable=False, unique=True),
        sa.Column("excerpt", sa.Text(), nullable=True),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("cover_image", sa.Text(), nullable=True),
        sa.Column("status", post_status, nullable=False, server_default="DRAFT"),
        sa.Column("visibility", post_visibility, nullable=False, server_default="PUBLIC"),
        sa.Column("meta_title", sa.Text(), nullable=True),
        sa.Column("meta_description", sa.Text(), nullable=True),
        sa.Column("keywords", postgresql.ARRAY(sa.Text()), nullable=True),
        sa.Column("view_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("like_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("comment_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("read_time", sa.Integer(), nullable=True),
        sa.Column("published_at", sa.DateTime(), nullable=True),
        sa.Column("scheduled_at", sa.DateTime(), nullable=True),
        _created_at(),
        _updated_at(),
    )
    op.create_index("idx_posts_author_id", "posts", ["author_id"])
    op.create_index("idx_posts_status", "posts", ["status"])
    op.create_index("idx_posts_published_at", "posts", ["published_at"])

    op.create_table(
        "categories",
        sa.Column("id", sa.String(length=32), primary_key=True),
        sa.Column("name", sa.String(length=128), nullable=False, unique=True),
        sa.Column("slug", sa.String(length=128), nullable=False, unique=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("icon", sa.String(), nullable=True),
        sa.Column("color", sa.String(length=32), nullable=True),
        sa.Column(
            "parent_id",
            sa.String(length=32),
            sa.ForeignKey("categories.id", ondelete="SET NULL", onupdate="CASCADE"),
            nullable=True,
        ),
        _created_at(),
        _updated_at(),
    )
    op.create_index("idx_categories_parent_id", "categories", ["parent_id"])

    op.create_table(
        "tags",
        sa.Column("id", sa.String(length=32), primary_key=True),
        sa.Column("name", sa.String(length=128), nullable=False, unique=True),
        sa.Column("slug", sa.String(length=128), nullable=False, unique=True),
        _created_at(),
    )

    op.create_table(
        "post_categories",
        _post_fk(primary_key=True),
        sa.Column(
            "category_id",
            sa.String(length=32),
            sa.ForeignKey("categories.id", ondelete="CASCADE", onupdate="CASCADE"),
            primary_key=True,
        ),
    )

    op.create_table(
        "post_tags",
        _post_fk(primary_key=True),
        sa.Column(
            "tag_id",
            sa.String(length=32),
            sa.ForeignKey("tags.id", ondelete="CASCADE", onupdate="CASCADE"),
            primary_key=True,
        ),
    )

    # Interactions
    op.create_table(
        "comments",
        sa.Column("id", sa.String(length=32), primary_key=True),
        _post_fk(nullable=False),
        sa.Column("author_id", sa.String(length=32), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column(
            "parent_id",
            sa.String(length=32),
            sa.ForeignKey("comments.id", ondelete="SET NULL", onupdate="CASCADE"),
            nullable=True,
        ),
        sa.Column("status", comment_status, nullable=False, server_default="APPROVED"),
        sa.Column("like_count", sa.Integer(), nullable=False, server_default="0"),
        _created_at(),
        _updated_at(),
    )
    op.create_index("idx_comments_post_id", "comments", ["post_id"])
    op.create_index("idx_comments_author_id", "comments", ["author_id"])
    op.create_index("idx_comments_parent_id", "comments", ["parent_id"])
    op.create_index("idx_comments_status", "comments", ["status"])

    for table in ("likes", "bookmarks"):
        op.create_table(
            table,
            sa.Column("id", sa.String(length=32), primary_key=True),
            sa.Column("user_id", sa.String(length=32), nullable=False),
            _post_fk(nullable=False),
            _created_at(),
            sa.UniqueConstraint("user_id", "post_id", name=f"uq_{table}_user_post"),
        )
        op.create_index(f"idx_{table}_user_id", table, ["user_id"])
        op.create_index(f"idx_{table}_post_id", table, ["post_id"])

    # Media
    op.create_table(
        "media",
        sa.Column("id", sa.String(length=32), primary_key=True),
        sa.Column("user_id", sa.String(length=32), nullable=False),
        sa.Column("filename", sa.Text(), nullable=False),
        sa.Column("original_name", sa.Text(), nullable=False),
        sa.Column("mime_type", sa.String(length=255), nullable=False),
        sa.Column("size", sa.Integer(), nullable=False),
        sa.Column("storage_provider", sa.String(length=64), nullable=False),
        sa.Column("storage_key", sa.Text(), nullable=False),
        sa.Column("url", sa.Text(), nullable=False),
        sa.Column("width", sa.Integer(), nullable=True),
        sa.Column("height", sa.Integer(), nullable=True),
        sa.Column("duration", sa.Integer(), nullable=True),
        sa.Column("status", media_status, nullable=False, server_default="PROCESSING"),
        _created_at(),
        _updated_at(),
    )
    op.create_index("idx_media_user_id", "media", ["user_id"])
    op.create_index("idx_media_status", "media", ["status"])

    op.create_table(
        "media_variants",
        sa.Column("id", sa.String(length=32), primary_key=True),
        sa.Column(
            "media_id",
            sa.String(length=32),
            sa.ForeignKey("media.id", ondelete="CASCADE", onupdate="CASCADE"),
            nullable=False,
        ),
        sa.Column("variant", sa.String(length=64), nullable=False),
        sa.Column("url", sa.Text(), nullable=False),
        sa.Column("width", sa.Integer(), nullable=True),
        sa.Column("height", sa.Integer(), nullable=True),
        sa.Column("size", sa.Integer(), nullable=True),
    )
    op.create_index("idx_media_variants_media_id", "media_variants", ["media_id"])


def downgrade() -> None:
    op.drop_index("idx_media_variants_media_id", table_name="media_variants")
    op.drop_table("media_variants")
    op.drop_index("idx_media_status", table_name="media")
    op.drop_index("idx_media_user_id", table_name="media")
    op.drop_table("media")

    for table in ("bookmarks", "likes"):
        op.drop_index(f"idx_{table}_post_id", table_name=table)
        op.drop_index(f"idx_{table}_user_id", table_name=table)
        op.drop_table(table)

    for index in ("status", "parent_id", "author_id", "post_id"):
        op.drop_index(f"idx_comments_{index}", table_name="comments")
    op.drop_table("comments")

    op.drop_table("post_tags")
    op.drop_table("post_categories")
    op.drop_table("tags")
    op.drop_index("idx_categories_parent_id", table_name="categories")
    op.drop_table("categories")

    for index in ("published_at", "status", "author_id"):
        op.drop_index(f"idx_posts_{index}", table_name="posts")
    op.drop_table("posts")

    op.drop_index("idx_sessions_expires_at", table_name="sessions")
    op.drop_index("idx_sessions_user_id", table_name="sessions")
    op.drop_table("sessions")
    op.drop_table("profiles")
    op.drop_index("idx_users_role", table_name="users")
    op.drop_index("idx_users_username", table_name="users")
    op.drop_index("idx_users_email", table_name="users")
    op.drop_table("users")

    bind = op.get_bind()
    for enum in (media_status, comment_status, post_visibility, post_status, user_role):
        enum.drop(bind, checkfirst=True)

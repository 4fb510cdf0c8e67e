"""Baseline: content tables

- events, news, blog_posts, gallery, campaigns, donations,
  testimonials, contacts, admin_users
- unique slugs (receipt numbers for donations, emails for admin users)
- list indexes used by the public and admin listings
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "20261019_0001_content_tables"
down_revision = None
branch_labels = None
depends_on = None


def _status(name: str, *states: str, default: str) -> sa.Column:
    return sa.Column(
        "status",
        sa.Enum(*states, name=name, native_enum=False, create_constraint=True),
        nullable=False,
        server_default=default,
    )


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "events",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("slug", sa.String(200), nullable=False, unique=True),
        sa.Column("description", sa.String(500), nullable=False),
        sa.Column("content", sa.Text()),
        sa.Column("featured_image", sa.Text(), nullable=False),
        sa.Column("youtube_url", sa.Text()),
        sa.Column("date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("time", sa.String(50), nullable=False),
        sa.Column("location", sa.String(300), nullable=False),
        sa.Column("capacity", sa.Integer()),
        sa.Column("registered", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("registration_open", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("registration_link", sa.Text()),
        sa.Column("category", sa.String(50), nullable=False),
        sa.Column("tags", sa.JSON(), nullable=False),
        _status("event_status", "draft", "published", "cancelled", "completed", default="draft"),
        sa.Column("organizer", sa.JSON(), nullable=False),
        sa.Column("seo", sa.JSON(), nullable=False),
        sa.Column("price", sa.Float(), nullable=False, server_default="0"),
        sa.Column("currency", sa.String(3), nullable=False, server_default="IDR"),
        *_timestamps(),
    )
    op.create_index("ix_events_date_status", "events", ["date", "status"])
    op.create_index("ix_events_category_status", "events", ["category", "status"])

    op.create_table(
        "news",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("excerpt", sa.String(500), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("slug", sa.String(200), nullable=False, unique=True),
        sa.Column("image", sa.Text()),
        sa.Column("video_url", sa.Text()),
        sa.Column("author", sa.JSON(), nullable=False),
        _status("news_status", "draft", "published", default="draft"),
        sa.Column("published_at", sa.DateTime(timezone=True)),
        sa.Column("views", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("category", sa.String(100), nullable=False),
        sa.Column("priority", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("featured", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("tags", sa.JSON(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_news_status_published_at", "news", ["status", "published_at"])
    op.create_index("ix_news_category_status", "news", ["category", "status"])

    op.create_table(
        "blog_posts",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("slug", sa.String(200), nullable=False, unique=True),
        sa.Column("excerpt", sa.String(500), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("featured_image", sa.Text(), nullable=False),
        sa.Column("author", sa.JSON(), nullable=False),
        sa.Column("category", sa.String(50), nullable=False),
        sa.Column("tags", sa.JSON(), nullable=False),
        _status("blog_status", "draft", "published", "archived", default="draft"),
        sa.Column("seo", sa.JSON(), nullable=False),
        sa.Column("read_time", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("views", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("published_at", sa.DateTime(timezone=True)),
        *_timestamps(),
    )
    op.create_index("ix_blog_posts_status_published_at", "blog_posts", ["status", "published_at"])

    op.create_table(
        "gallery",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("slug", sa.String(200), nullable=False, unique=True),
        sa.Column("description", sa.String(1000)),
        sa.Column("type", sa.String(10), nullable=False, server_default="image"),
        sa.Column("cover_image", sa.Text(), nullable=False),
        sa.Column("content", sa.JSON()),
        sa.Column("items", sa.JSON(), nullable=False),
        sa.Column("category", sa.String(50), nullable=False),
        sa.Column("tags", sa.JSON(), nullable=False),
        _status("gallery_status", "draft", "published", "archived", default="draft"),
        sa.Column("featured", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("views", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("seo", sa.JSON(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_gallery_status_created_at", "gallery", ["status", "created_at"])

    op.create_table(
        "campaigns",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("slug", sa.String(200), nullable=False, unique=True),
        sa.Column("description", sa.String(2000), nullable=False),
        sa.Column("goal", sa.Float(), nullable=False),
        sa.Column("collected", sa.Float(), nullable=False, server_default="0"),
        sa.Column("currency", sa.String(3), nullable=False, server_default="IDR"),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_date", sa.DateTime(timezone=True)),
        _status("campaign_status", "draft", "active", "completed", "cancelled", default="draft"),
        sa.Column("featured", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("image", sa.Text()),
        sa.Column("category", sa.String(50), nullable=False),
        sa.Column("progress", sa.Float(), nullable=False, server_default="0"),
        sa.Column("donor_count", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
    )
    op.create_index(
        "ix_campaigns_status_featured_created_at", "campaigns", ["status", "featured", "created_at"]
    )

    op.create_table(
        "donations",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("donor_name", sa.String(100), nullable=False),
        sa.Column("donor_email", sa.String(255)),
        sa.Column("donor_phone", sa.String(50)),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column("currency", sa.String(3), nullable=False, server_default="IDR"),
        sa.Column("campaign", sa.String(200)),
        sa.Column("payment_method", sa.String(20), nullable=False),
        _status("donation_status", "pending", "completed", "failed", "refunded", default="pending"),
        sa.Column("transaction_id", sa.String(100)),
        sa.Column("receipt_number", sa.String(50), nullable=False, unique=True),
        sa.Column("is_anonymous", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("message", sa.String(500)),
        sa.Column("dedication", sa.String(200)),
        sa.Column("address", sa.JSON(), nullable=False),
        sa.Column("payment_date", sa.DateTime(timezone=True)),
        sa.Column("receipt_sent", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("receipt_sent_at", sa.DateTime(timezone=True)),
        sa.Column("notes", sa.String(1000)),
        *_timestamps(),
    )
    op.create_index("ix_donations_status_created_at", "donations", ["status", "created_at"])
    op.create_index("ix_donations_campaign_status", "donations", ["campaign", "status"])
    op.create_index("ix_donations_donor_email", "donations", ["donor_email"])

    op.create_table(
        "testimonials",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("role", sa.String(100)),
        sa.Column("content", sa.String(1000), nullable=False),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column("avatar", sa.Text()),
        sa.Column("category", sa.String(50), nullable=False),
        _status("testimonial_status", "pending", "approved", "rejected", default="pending"),
        sa.Column("featured", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("source", sa.String(10), nullable=False, server_default="form"),
        sa.Column("email", sa.String(255)),
        sa.Column("phone", sa.String(50)),
        sa.Column("location", sa.String(200)),
        sa.Column("approved_by", sa.String(100)),
        sa.Column("approved_at", sa.DateTime(timezone=True)),
        *_timestamps(),
    )
    op.create_index(
        "ix_testimonials_status_featured_created_at", "testimonials", ["status", "featured", "created_at"]
    )

    op.create_table(
        "contacts",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("subject", sa.String(200), nullable=False),
        sa.Column("message", sa.String(2000), nullable=False),
        _status("contact_status", "unread", "read", "replied", "archived", default="unread"),
        sa.Column("priority", sa.String(10), nullable=False, server_default="medium"),
        sa.Column("source", sa.String(10), nullable=False, server_default="website"),
        sa.Column("ip_address", sa.String(64)),
        sa.Column("user_agent", sa.Text()),
        sa.Column("responded_by", sa.String(100)),
        sa.Column("responded_at", sa.DateTime(timezone=True)),
        sa.Column("notes", sa.Text()),
        *_timestamps(),
    )

    op.create_table(
        "admin_users",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column("name", sa.String(100), nullable=False, server_default="Administrator"),
        sa.Column(
            "role",
            sa.Enum("admin", "editor", "superadmin", name="admin_role", native_enum=False, create_constraint=True),
            nullable=False,
            server_default="admin",
        ),
        *_timestamps(),
    )


def downgrade() -> None:
    op.drop_table("admin_users")
    op.drop_table("contacts")
    op.drop_index("ix_testimonials_status_featured_created_at", table_name="testimonials")
    op.drop_table("testimonials")
    op.drop_index("ix_donations_donor_email", table_name="donations")
    op.drop_index("ix_donations_campaign_status", table_name="donations")
    op.drop_index("ix_donations_status_created_at", table_name="donations")
    op.drop_table("donations")
    op.drop_index("ix_campaigns_status_featured_created_at", table_name="campaigns")
    op.drop_table("campaigns")
    op.drop_index("ix_gallery_status_created_at", table_name="gallery")
    op.drop_table("gallery")
    op.drop_index("ix_blog_posts_status_published_at", table_name="blog_posts")
    op.drop_table("blog_posts")
    op.drop_index("ix_news_category_status", table_name="news")
    op.drop_index("ix_news_status_published_at", table_name="news")
    op.drop_table("news")
    op.drop_index("ix_events_category_status", table_name="events")
    op.drop_index("ix_events_date_status", table_name="events")
    op.drop_table("events")

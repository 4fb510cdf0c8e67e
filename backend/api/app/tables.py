from __future__ import annotations

from uuid import uuid4

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Enum,
    Float,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
)

from app.workflow import STATES, DEFAULT_STATE, utcnow

metadata = MetaData()


def new_id() -> str:
    return str(uuid4())


def _id() -> Column:
    return Column("id", String(36), primary_key=True, default=new_id)


def _status(kind: str) -> Column:
    return Column(
        "status",
        Enum(*STATES[kind], name=f"{kind}_status", native_enum=False, create_constraint=True),
        nullable=False,
        default=DEFAULT_STATE[kind],
    )


def _timestamps() -> list[Column]:
    # updated_at is refreshed on every UPDATE issued through these tables.
    return [
        Column("created_at", DateTime(timezone=True), nullable=False, default=utcnow),
        Column("updated_at", DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow),
    ]


events = Table(
    "events",
    metadata,
    _id(),
    Column("title", String(200), nullable=False),
    Column("slug", String(200), nullable=False, unique=True),
    Column("description", String(500), nullable=False),
    Column("content", Text),
    Column("featured_image", Text, nullable=False),
    Column("youtube_url", Text),
    Column("date", DateTime(timezone=True), nullable=False),
    Column("time", String(50), nullable=False),
    Column("location", String(300), nullable=False),
    Column("capacity", Integer),
    Column("registered", Integer, nullable=False, default=0),
    Column("registration_open", Boolean, nullable=False, default=True),
    Column("registration_link", Text),
    Column("category", String(50), nullable=False),
    Column("tags", JSON, nullable=False, default=list),
    _status("event"),
    Column("organizer", JSON, nullable=False, default=dict),
    Column("seo", JSON, nullable=False, default=dict),
    Column("price", Float, nullable=False, default=0),
    Column("currency", String(3), nullable=False, default="IDR"),
    *_timestamps(),
)
Index("ix_events_date_status", events.c.date, events.c.status)
Index("ix_events_category_status", events.c.category, events.c.status)

news = Table(
    "news",
    metadata,
    _id(),
    Column("title", String(200), nullable=False),
    Column("excerpt", String(500), nullable=False),
    Column("content", Text, nullable=False),
    Column("slug", String(200), nullable=False, unique=True),
    Column("image", Text),
    Column("video_url", Text),
    Column("author", JSON, nullable=False, default=dict),
    _status("news"),
    Column("published_at", DateTime(timezone=True)),
    Column("views", Integer, nullable=False, default=0),
    Column("category", String(100), nullable=False),
    Column("priority", Integer, nullable=False, default=1),
    Column("featured", Boolean, nullable=False, default=False),
    Column("tags", JSON, nullable=False, default=list),
    *_timestamps(),
)
Index("ix_news_status_published_at", news.c.status, news.c.published_at)
Index("ix_news_category_status", news.c.category, news.c.status)

blog_posts = Table(
    "blog_posts",
    metadata,
    _id(),
    Column("title", String(200), nullable=False),
    Column("slug", String(200), nullable=False, unique=True),
    Column("excerpt", String(500), nullable=False),
    Column("content", Text, nullable=False),
    Column("featured_image", Text, nullable=False),
    Column("author", JSON, nullable=False, default=dict),
    Column("category", String(50), nullable=False),
    Column("tags", JSON, nullable=False, default=list),
    _status("blog"),
    Column("seo", JSON, nullable=False, default=dict),
    Column("read_time", Integer, nullable=False, default=0),
    Column("views", Integer, nullable=False, default=0),
    Column("published_at", DateTime(timezone=True)),
    *_timestamps(),
)
Index("ix_blog_posts_status_published_at", blog_posts.c.status, blog_posts.c.published_at)

gallery = Table(
    "gallery",
    metadata,
    _id(),
    Column("title", String(200), nullable=False),
    Column("slug", String(200), nullable=False, unique=True),
    Column("description", String(1000)),
    Column("type", String(10), nullable=False, default="image"),
    Column("cover_image", Text, nullable=False),
    Column("content", JSON),
    Column("items", JSON, nullable=False, default=list),
    Column("category", String(50), nullable=False),
    Column("tags", JSON, nullable=False, default=list),
    _status("gallery"),
    Column("featured", Boolean, nullable=False, default=False),
    Column("views", Integer, nullable=False, default=0),
    Column("seo", JSON, nullable=False, default=dict),
    *_timestamps(),
)
Index("ix_gallery_status_created_at", gallery.c.status, gallery.c.created_at)

campaigns = Table(
    "campaigns",
    metadata,
    _id(),
    Column("title", String(200), nullable=False),
    Column("slug", String(200), nullable=False, unique=True),
    Column("description", String(2000), nullable=False),
    Column("goal", Float, nullable=False),
    Column("collected", Float, nullable=False, default=0),
    Column("currency", String(3), nullable=False, default="IDR"),
    Column("start_date", DateTime(timezone=True), nullable=False),
    Column("end_date", DateTime(timezone=True)),
    _status("campaign"),
    Column("featured", Boolean, nullable=False, default=False),
    Column("image", Text),
    Column("category", String(50), nullable=False),
    Column("progress", Float, nullable=False, default=0),
    Column("donor_count", Integer, nullable=False, default=0),
    *_timestamps(),
)
Index("ix_campaigns_status_featured_created_at", campaigns.c.status, campaigns.c.featured, campaigns.c.created_at)

donations = Table(
    "donations",
    metadata,
    _id(),
    Column("donor_name", String(100), nullable=False),
    Column("donor_email", String(255)),
    Column("donor_phone", String(50)),
    Column("amount", Float, nullable=False),
    Column("currency", String(3), nullable=False, default="IDR"),
    # campaign slug; empty for general donations
    Column("campaign", String(200)),
    Column("payment_method", String(20), nullable=False),
    _status("donation"),
    Column("transaction_id", String(100)),
    Column("receipt_number", String(50), nullable=False, unique=True),
    Column("is_anonymous", Boolean, nullable=False, default=False),
    Column("message", String(500)),
    Column("dedication", String(200)),
    Column("address", JSON, nullable=False, default=dict),
    Column("payment_date", DateTime(timezone=True)),
    Column("receipt_sent", Boolean, nullable=False, default=False),
    Column("receipt_sent_at", DateTime(timezone=True)),
    Column("notes", String(1000)),
    *_timestamps(),
)
Index("ix_donations_status_created_at", donations.c.status, donations.c.created_at)
Index("ix_donations_campaign_status", donations.c.campaign, donations.c.status)
Index("ix_donations_donor_email", donations.c.donor_email)

testimonials = Table(
    "testimonials",
    metadata,
    _id(),
    Column("name", String(100), nullable=False),
    Column("role", String(100)),
    Column("content", String(1000), nullable=False),
    Column("rating", Integer, nullable=False),
    Column("avatar", Text),
    Column("category", String(50), nullable=False),
    _status("testimonial"),
    Column("featured", Boolean, nullable=False, default=False),
    Column("source", String(10), nullable=False, default="form"),
    Column("email", String(255)),
    Column("phone", String(50)),
    Column("location", String(200)),
    Column("approved_by", String(100)),
    Column("approved_at", DateTime(timezone=True)),
    *_timestamps(),
)
Index("ix_testimonials_status_featured_created_at", testimonials.c.status, testimonials.c.featured, testimonials.c.created_at)

contacts = Table(
    "contacts",
    metadata,
    _id(),
    Column("name", String(100), nullable=False),
    Column("email", String(255), nullable=False),
    Column("subject", String(200), nullable=False),
    Column("message", String(2000), nullable=False),
    _status("contact"),
    Column("priority", String(10), nullable=False, default="medium"),
    Column("source", String(10), nullable=False, default="website"),
    Column("ip_address", String(64)),
    Column("user_agent", Text),
    Column("responded_by", String(100)),
    Column("responded_at", DateTime(timezone=True)),
    Column("notes", Text),
    *_timestamps(),
)

admin_users = Table(
    "admin_users",
    metadata,
    _id(),
    Column("email", String(255), nullable=False, unique=True),
    Column("password_hash", Text, nullable=False),
    Column("name", String(100), nullable=False, default="Administrator"),
    Column(
        "role",
        Enum("admin", "editor", "superadmin", name="admin_role", native_enum=False, create_constraint=True),
        nullable=False,
        default="admin",
    ),
    *_timestamps(),
)

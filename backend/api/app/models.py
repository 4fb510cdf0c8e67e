from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sqlalchemy import Table

from app import tables
from app.workflow import PUBLIC_STATE


@dataclass(frozen=True)
class RelatedRule:
    """Secondary query attached to a detail view."""

    category_field: str = "category"
    order_field: str = "date"
    descending: bool = False
    upcoming_only: bool = True
    limit: int = 3
    fields: tuple[str, ...] = ()


@dataclass(frozen=True)
class Resource:
    kind: str
    label: str
    table: Table
    # (column, descending) pairs, applied in order, id appended as tie-breaker
    public_order: tuple[tuple[str, bool], ...]
    search_fields: tuple[str, ...] = ("title",)
    list_fields: Optional[tuple[str, ...]] = None
    hidden_fields: tuple[str, ...] = ()
    default_limit: int = 10
    counts_views: bool = False
    related: Optional[RelatedRule] = None
    ignored_categories: tuple[str, ...] = ()
    sortable: tuple[str, ...] = ()

    @property
    def public_status(self) -> str:
        return PUBLIC_STATE[self.kind]


EVENTS = Resource(
    kind="event",
    label="Event",
    table=tables.events,
    public_order=(("date", False),),
    search_fields=("title", "description", "location", "tags"),
    list_fields=(
        "id", "title", "slug", "description", "featured_image", "youtube_url", "date", "time",
        "location", "category", "tags", "registration_open", "capacity", "registered", "price",
    ),
    related=RelatedRule(
        fields=("id", "title", "slug", "description", "featured_image", "date", "time", "location"),
    ),
)

NEWS = Resource(
    kind="news",
    label="News",
    table=tables.news,
    public_order=(("published_at", True),),
    search_fields=("title", "excerpt", "content", "tags"),
    counts_views=True,
    related=RelatedRule(
        order_field="published_at",
        descending=True,
        upcoming_only=False,
        fields=("id", "title", "slug", "excerpt", "image", "published_at", "category"),
    ),
    ignored_categories=("all",),
    sortable=("published_at", "created_at", "views", "priority", "title"),
)

BLOG = Resource(
    kind="blog",
    label="Blog",
    table=tables.blog_posts,
    public_order=(("published_at", True), ("created_at", True)),
    search_fields=("title", "excerpt", "content"),
    list_fields=(
        "id", "title", "slug", "excerpt", "featured_image", "author", "category",
        "published_at", "views", "tags", "read_time",
    ),
    counts_views=True,
)

GALLERY = Resource(
    kind="gallery",
    label="Gallery item",
    table=tables.gallery,
    public_order=(("featured", True), ("created_at", True)),
    search_fields=("title", "description", "tags"),
    default_limit=12,
    counts_views=True,
    ignored_categories=("All",),
)

CAMPAIGNS = Resource(
    kind="campaign",
    label="Campaign",
    table=tables.campaigns,
    public_order=(("featured", True), ("created_at", True)),
    search_fields=("title", "description"),
    default_limit=50,
)

TESTIMONIALS = Resource(
    kind="testimonial",
    label="Testimonial",
    table=tables.testimonials,
    public_order=(("featured", True), ("created_at", True)),
    search_fields=("name", "content"),
    hidden_fields=("email", "phone", "approved_by"),
    default_limit=9,
    ignored_categories=("all",),
)

# Admin inbox only; contact messages never reach a public listing.
CONTACTS = Resource(
    kind="contact",
    label="Contact message",
    table=tables.contacts,
    public_order=(("created_at", True),),
    search_fields=("name", "email", "subject", "message"),
    default_limit=20,
)

DONATIONS = Resource(
    kind="donation",
    label="Donation",
    table=tables.donations,
    public_order=(("created_at", True),),
    search_fields=("donor_name", "donor_email", "campaign"),
)

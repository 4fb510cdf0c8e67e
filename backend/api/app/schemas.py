import re
from datetime import datetime
from typing import ClassVar, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

EMAIL_PATTERN = r"^\w+([.-]?\w+)*@\w+([.-]?\w+)*(\.\w{2,3})+$"
YOUTUBE_PATTERN = r"^https://(www\.)?(youtube\.com/watch\?v=|youtu\.be/)"

EventStatus = Literal["draft", "published", "cancelled", "completed"]
NewsStatus = Literal["draft", "published"]
BlogStatus = Literal["draft", "published", "archived"]
GalleryStatus = Literal["draft", "published", "archived"]
CampaignStatus = Literal["draft", "active", "completed", "cancelled"]
TestimonialStatus = Literal["pending", "approved", "rejected"]
ContactStatus = Literal["unread", "read", "replied", "archived"]
DonationStatus = Literal["pending", "completed", "failed", "refunded"]

EventCategory = Literal["Religious", "Educational", "Social", "Sports", "Cultural", "Workshop"]
BlogCategory = Literal["Religious", "Education", "Community", "Events", "News", "Stories"]
GalleryCategory = Literal["Events", "Daily Life", "Ceremonies", "Education", "Sports", "Religious", "Videos"]
CampaignCategory = Literal["Education", "Infrastructure", "Emergency", "General", "Events"]
TestimonialCategory = Literal[
    "General", "Academic", "Spiritual", "Facility", "Service",
    "Student", "Parent", "Alumni", "Teacher", "Community",
]
Currency = Literal["IDR", "USD", "EUR"]
PaymentMethod = Literal["bank_transfer", "credit_card", "e_wallet", "cash", "check"]


class BodyIn(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")


class PatchIn(BodyIn):
    """
    Partial update body. Only fields the client actually sent are written;
    sending null for a column that cannot be empty is rejected.
    """

    required: ClassVar[tuple[str, ...]] = ()

    @model_validator(mode="after")
    def required_not_null(self):
        for name in self.required:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


# ----------------------------
# Nested objects (stored as JSON)
# ----------------------------

class Seo(BodyIn):
    title: Optional[str] = None
    description: Optional[str] = None
    keywords: List[str] = Field(default_factory=list)


class Author(BodyIn):
    name: str = Field(..., min_length=1)
    email: Optional[str] = None
    role: Optional[str] = "Admin"
    avatar: Optional[str] = None


class Organizer(BodyIn):
    name: str = Field(..., min_length=1)
    contact: Optional[str] = None


class Media(BodyIn):
    type: Literal["image", "youtube"]
    url: str = Field(..., min_length=1)
    caption: Optional[str] = None
    alt_text: Optional[str] = None
    youtube_id: Optional[str] = None
    order: int = 0


# ----------------------------
# Events
# ----------------------------

class EventCreateIn(BodyIn):
    title: str = Field(..., min_length=1, max_length=200)
    slug: Optional[str] = Field(None, max_length=200)
    description: str = Field(..., min_length=1, max_length=500)
    content: Optional[str] = None
    featured_image: str = Field(..., min_length=1)
    youtube_url: Optional[str] = None
    date: datetime
    time: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1)
    capacity: Optional[int] = Field(None, ge=1)
    registered: int = Field(0, ge=0)
    registration_open: bool = True
    registration_link: Optional[str] = None
    category: EventCategory
    tags: List[str] = Field(default_factory=list)
    status: EventStatus = "draft"
    organizer: Organizer = Field(default_factory=lambda: Organizer(name="Admin"))
    seo: Seo = Field(default_factory=Seo)
    price: float = Field(0, ge=0)
    currency: Currency = "IDR"


class EventUpdateIn(PatchIn):
    required = ("title", "description", "featured_image", "date", "time", "location", "category", "status")

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    slug: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = Field(None, min_length=1, max_length=500)
    content: Optional[str] = None
    featured_image: Optional[str] = None
    youtube_url: Optional[str] = None
    date: Optional[datetime] = None
    time: Optional[str] = None
    location: Optional[str] = None
    capacity: Optional[int] = Field(None, ge=1)
    registered: Optional[int] = Field(None, ge=0)
    registration_open: Optional[bool] = None
    registration_link: Optional[str] = None
    category: Optional[EventCategory] = None
    tags: Optional[List[str]] = None
    status: Optional[EventStatus] = None
    organizer: Optional[Organizer] = None
    seo: Optional[Seo] = None
    price: Optional[float] = Field(None, ge=0)
    currency: Optional[Currency] = None


# ----------------------------
# News
# ----------------------------

class _NewsVideo(BaseModel):
    @field_validator("video_url", check_fields=False)
    @classmethod
    def youtube_only(cls, v: Optional[str]) -> Optional[str]:
        if v and not re.match(YOUTUBE_PATTERN, v):
            raise ValueError("Please enter a valid YouTube URL")
        return v or None


class NewsCreateIn(BodyIn, _NewsVideo):
    title: str = Field(..., min_length=1, max_length=200)
    slug: Optional[str] = Field(None, max_length=200)
    excerpt: str = Field(..., min_length=1, max_length=500)
    content: str = Field(..., min_length=1)
    image: Optional[str] = None
    video_url: Optional[str] = None
    author: Author
    status: NewsStatus = "draft"
    published_at: Optional[datetime] = None
    category: str = Field(..., min_length=1, max_length=100)
    priority: int = Field(1, ge=1, le=5)
    featured: bool = False
    tags: List[str] = Field(default_factory=list)


class NewsUpdateIn(PatchIn, _NewsVideo):
    required = ("title", "excerpt", "content", "author", "status", "category")

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    slug: Optional[str] = Field(None, max_length=200)
    excerpt: Optional[str] = Field(None, min_length=1, max_length=500)
    content: Optional[str] = Field(None, min_length=1)
    image: Optional[str] = None
    video_url: Optional[str] = None
    author: Optional[Author] = None
    status: Optional[NewsStatus] = None
    published_at: Optional[datetime] = None
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    priority: Optional[int] = Field(None, ge=1, le=5)
    featured: Optional[bool] = None
    tags: Optional[List[str]] = None


# ----------------------------
# Blog
# ----------------------------

class BlogCreateIn(BodyIn):
    title: str = Field(..., min_length=1, max_length=200)
    slug: Optional[str] = Field(None, max_length=200)
    excerpt: str = Field(..., min_length=1, max_length=500)
    content: str = Field(..., min_length=1)
    featured_image: str = Field(..., min_length=1)
    author: Author
    category: BlogCategory
    tags: List[str] = Field(default_factory=list)
    status: BlogStatus = "draft"
    seo: Seo = Field(default_factory=Seo)
    published_at: Optional[datetime] = None


class BlogUpdateIn(PatchIn):
    required = ("title", "excerpt", "content", "featured_image", "author", "category", "status")

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    slug: Optional[str] = Field(None, max_length=200)
    excerpt: Optional[str] = Field(None, min_length=1, max_length=500)
    content: Optional[str] = Field(None, min_length=1)
    featured_image: Optional[str] = None
    author: Optional[Author] = None
    category: Optional[BlogCategory] = None
    tags: Optional[List[str]] = None
    status: Optional[BlogStatus] = None
    seo: Optional[Seo] = None
    published_at: Optional[datetime] = None


# ----------------------------
# Gallery
# ----------------------------

class GalleryCreateIn(BodyIn):
    title: str = Field(..., min_length=1, max_length=200)
    slug: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    type: Literal["image", "video", "album"] = "image"
    cover_image: str = Field(..., min_length=1)
    content: Optional[Media] = None
    items: List[Media] = Field(default_factory=list)
    category: GalleryCategory
    tags: List[str] = Field(default_factory=list)
    status: GalleryStatus = "draft"
    featured: bool = False
    seo: Seo = Field(default_factory=Seo)


class GalleryUpdateIn(PatchIn):
    required = ("title", "type", "cover_image", "items", "category", "status")

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    slug: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    type: Optional[Literal["image", "video", "album"]] = None
    cover_image: Optional[str] = None
    content: Optional[Media] = None
    items: Optional[List[Media]] = None
    category: Optional[GalleryCategory] = None
    tags: Optional[List[str]] = None
    status: Optional[GalleryStatus] = None
    featured: Optional[bool] = None
    seo: Optional[Seo] = None


# ----------------------------
# Donation campaigns
# ----------------------------

class CampaignCreateIn(BodyIn):
    title: str = Field(..., min_length=1, max_length=200)
    slug: Optional[str] = Field(None, max_length=200)
    description: str = Field(..., min_length=1, max_length=2000)
    goal: float = Field(..., gt=0)
    collected: float = Field(0, ge=0)
    currency: Currency = "IDR"
    start_date: datetime
    end_date: Optional[datetime] = None
    status: CampaignStatus = "draft"
    featured: bool = False
    image: Optional[str] = None
    category: CampaignCategory
    donor_count: int = Field(0, ge=0)


class CampaignUpdateIn(PatchIn):
    required = ("title", "description", "goal", "collected", "currency", "start_date", "status", "category")

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    slug: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = Field(None, min_length=1, max_length=2000)
    goal: Optional[float] = Field(None, gt=0)
    collected: Optional[float] = Field(None, ge=0)
    currency: Optional[Currency] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    status: Optional[CampaignStatus] = None
    featured: Optional[bool] = None
    image: Optional[str] = None
    category: Optional[CampaignCategory] = None
    donor_count: Optional[int] = Field(None, ge=0)


# ----------------------------
# Donations
# ----------------------------

class Address(BodyIn):
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    zip_code: Optional[str] = None


class _DonorEmail(BaseModel):
    @field_validator("donor_email", check_fields=False)
    @classmethod
    def donor_email_or_blank(cls, v: Optional[str]) -> Optional[str]:
        if v and not re.match(EMAIL_PATTERN, v):
            raise ValueError("Please enter a valid email")
        return v.lower() if v else None


class DonationSubmitIn(BodyIn, _DonorEmail):
    """Public donation form. `campaign` is the slug of an active campaign."""

    donor_name: str = Field(..., min_length=1, max_length=100)
    donor_email: Optional[str] = None
    donor_phone: Optional[str] = None
    amount: float = Field(..., gt=0)
    currency: Currency = "IDR"
    campaign: Optional[str] = Field(None, max_length=200)
    payment_method: PaymentMethod
    transaction_id: Optional[str] = Field(None, max_length=100)
    is_anonymous: bool = False
    message: Optional[str] = Field(None, max_length=500)
    dedication: Optional[str] = Field(None, max_length=200)
    address: Address = Field(default_factory=Address)

    def to_row(self) -> dict:
        row = self.model_dump()
        # payment is taken as settled on submission
        row["status"] = "completed"
        row["campaign"] = self.campaign or None
        return row


class DonationCreateIn(BodyIn, _DonorEmail):
    donor_name: str = Field(..., min_length=1, max_length=100)
    donor_email: Optional[str] = None
    donor_phone: Optional[str] = None
    amount: float = Field(..., gt=0)
    currency: Currency = "IDR"
    campaign: Optional[str] = Field(None, max_length=200)
    payment_method: PaymentMethod = "bank_transfer"
    status: DonationStatus = "pending"
    transaction_id: Optional[str] = Field(None, max_length=100)
    receipt_number: Optional[str] = Field(None, max_length=50)
    is_anonymous: bool = False
    message: Optional[str] = Field(None, max_length=500)
    dedication: Optional[str] = Field(None, max_length=200)
    address: Address = Field(default_factory=Address)
    notes: Optional[str] = Field(None, max_length=1000)


class DonationUpdateIn(PatchIn, _DonorEmail):
    required = (
        "donor_name", "amount", "currency", "payment_method", "status",
        "receipt_number", "is_anonymous", "address", "receipt_sent",
    )

    donor_name: Optional[str] = Field(None, min_length=1, max_length=100)
    donor_email: Optional[str] = None
    donor_phone: Optional[str] = None
    amount: Optional[float] = Field(None, gt=0)
    currency: Optional[Currency] = None
    campaign: Optional[str] = Field(None, max_length=200)
    payment_method: Optional[PaymentMethod] = None
    status: Optional[DonationStatus] = None
    transaction_id: Optional[str] = Field(None, max_length=100)
    receipt_number: Optional[str] = Field(None, min_length=1, max_length=50)
    is_anonymous: Optional[bool] = None
    message: Optional[str] = Field(None, max_length=500)
    dedication: Optional[str] = Field(None, max_length=200)
    address: Optional[Address] = None
    receipt_sent: Optional[bool] = None
    notes: Optional[str] = Field(None, max_length=1000)


# ----------------------------
# Testimonials
# ----------------------------

class TestimonialCreateIn(BodyIn):
    name: str = Field(..., min_length=1, max_length=100)
    role: Optional[str] = Field(None, max_length=100)
    content: str = Field(..., min_length=1, max_length=1000)
    rating: int = Field(..., ge=1, le=5)
    avatar: Optional[str] = None
    category: TestimonialCategory = "General"
    status: TestimonialStatus = "pending"
    featured: bool = False
    source: Literal["form", "admin", "import", "public"] = "admin"
    email: Optional[str] = Field(None, pattern=EMAIL_PATTERN)
    phone: Optional[str] = None
    location: Optional[str] = Field(None, max_length=200)
    approved_by: Optional[str] = None


class TestimonialUpdateIn(PatchIn):
    required = ("name", "content", "rating", "category", "status")

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    role: Optional[str] = Field(None, max_length=100)
    content: Optional[str] = Field(None, min_length=1, max_length=1000)
    rating: Optional[int] = Field(None, ge=1, le=5)
    avatar: Optional[str] = None
    category: Optional[TestimonialCategory] = None
    status: Optional[TestimonialStatus] = None
    featured: Optional[bool] = None
    email: Optional[str] = Field(None, pattern=EMAIL_PATTERN)
    phone: Optional[str] = None
    location: Optional[str] = Field(None, max_length=200)
    approved_by: Optional[str] = None


class TestimonialSubmitIn(BodyIn):
    """Public submission; always stored as pending until an admin approves it."""

    name: str = Field(..., min_length=1, max_length=100)
    position: Optional[str] = Field(None, max_length=100)
    content: str = Field(..., min_length=50, max_length=300)
    rating: int = Field(5, ge=1, le=5)
    avatar: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = Field(None, max_length=200)
    category: TestimonialCategory = "General"

    @field_validator("email")
    @classmethod
    def email_or_blank(cls, v: Optional[str]) -> Optional[str]:
        if v and not re.match(EMAIL_PATTERN, v):
            raise ValueError("Please enter a valid email")
        return v.lower() if v else None

    def to_row(self) -> dict:
        return {
            "name": self.name,
            "role": self.position or "Visitor",
            "content": self.content,
            "rating": self.rating,
            "avatar": self.avatar,
            "email": self.email,
            "phone": self.phone,
            "location": self.location,
            "category": self.category,
            "status": "pending",
            "featured": False,
            "source": "public",
        }


# ----------------------------
# Contact form
# ----------------------------

class ContactSubmitIn(BodyIn):
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., max_length=255, pattern=EMAIL_PATTERN)
    subject: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=10, max_length=2000)

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        return v.lower()


class ContactUpdateIn(PatchIn):
    required = ("status", "priority")

    status: Optional[ContactStatus] = None
    priority: Optional[Literal["low", "medium", "high"]] = None
    responded_by: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = None

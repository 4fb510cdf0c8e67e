from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query, Request
from sqlalchemy.engine import Engine

from app import repo
from app.db import get_engine
from app.errors import ok, store_errors
from app.models import BLOG, CAMPAIGNS, CONTACTS, EVENTS, GALLERY, NEWS, TESTIMONIALS, Resource
from app.schemas import ContactSubmitIn, DonationSubmitIn, TestimonialSubmitIn

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["public"])


def _listing(engine: Engine, res: Resource, page: int, limit: Optional[int], **filters: Any) -> Dict[str, Any]:
    limit = limit or res.default_limit
    with store_errors(f"Failed to fetch {res.table.name}"):
        items, total = repo.list_public(engine, res, limit=limit, offset=(page - 1) * limit, **filters)
    return ok(
        items,
        total=total,
        pagination={"page": page, "limit": limit, "pages": repo.pages(total, limit)},
    )


def record_view(engine: Engine, res: Resource, doc_id: str) -> None:
    """
    Best-effort view counter bump, run after the response is sent.
    Failures are logged and dropped; they never reach the client.
    """
    try:
        repo.increment_views(engine, res, doc_id)
    except Exception:
        logger.warning("View count update failed for %s %s", res.kind, doc_id, exc_info=True)


def _detail(engine: Engine, res: Resource, slug: str, background_tasks: BackgroundTasks) -> Dict[str, Any]:
    with store_errors(f"Failed to fetch {res.label.lower()}"):
        doc = repo.get_public(engine, res, slug)
        if res.related is not None:
            doc["related"] = repo.list_related(engine, res, doc)

    if res.counts_views:
        background_tasks.add_task(record_view, engine, res, doc["id"])
        doc["views"] = (doc.get("views") or 0) + 1

    return ok(doc)


# -----------------------------
# Events
# -----------------------------
@router.get("/events")
def list_events(
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1, le=100),
    category: Optional[str] = None,
    search: Optional[str] = None,
    upcoming: bool = False,
    engine: Engine = Depends(get_engine),
):
    return _listing(engine, EVENTS, page, limit, category=category, search=search, upcoming=upcoming)


@router.get("/events/{slug}")
def get_event(slug: str, background_tasks: BackgroundTasks, engine: Engine = Depends(get_engine)):
    return _detail(engine, EVENTS, slug, background_tasks)


# -----------------------------
# News
# -----------------------------
@router.get("/news")
def list_news(
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1, le=100),
    category: Optional[str] = None,
    search: Optional[str] = None,
    featured: bool = False,
    sort: Optional[str] = Query(None, alias="sortBy"),
    order: Optional[str] = Query(None, alias="sortOrder"),
    engine: Engine = Depends(get_engine),
):
    return _listing(
        engine, NEWS, page, limit,
        category=category, search=search, featured=featured, sort=sort, order=order,
    )


@router.get("/news/{slug}")
def get_news(slug: str, background_tasks: BackgroundTasks, engine: Engine = Depends(get_engine)):
    return _detail(engine, NEWS, slug, background_tasks)


# -----------------------------
# Blog
# -----------------------------
@router.get("/blog")
def list_blog(
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1, le=100),
    category: Optional[str] = None,
    search: Optional[str] = None,
    engine: Engine = Depends(get_engine),
):
    return _listing(engine, BLOG, page, limit, category=category, search=search)


@router.get("/blog/{slug}")
def get_blog_post(slug: str, background_tasks: BackgroundTasks, engine: Engine = Depends(get_engine)):
    return _detail(engine, BLOG, slug, background_tasks)


# -----------------------------
# Gallery
# -----------------------------
@router.get("/gallery")
def list_gallery(
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1, le=100),
    category: Optional[str] = None,
    search: Optional[str] = None,
    featured: bool = False,
    engine: Engine = Depends(get_engine),
):
    return _listing(engine, GALLERY, page, limit, category=category, search=search, featured=featured)


@router.get("/gallery/{slug}")
def get_gallery_item(slug: str, background_tasks: BackgroundTasks, engine: Engine = Depends(get_engine)):
    return _detail(engine, GALLERY, slug, background_tasks)


# -----------------------------
# Donation campaigns
# -----------------------------
@router.get("/campaigns")
def list_campaigns(
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1, le=100),
    engine: Engine = Depends(get_engine),
):
    return _listing(engine, CAMPAIGNS, page, limit)


@router.get("/campaigns/{slug}")
def get_campaign(slug: str, background_tasks: BackgroundTasks, engine: Engine = Depends(get_engine)):
    return _detail(engine, CAMPAIGNS, slug, background_tasks)


@router.post("/donations", status_code=201)
def submit_donation(body: DonationSubmitIn, engine: Engine = Depends(get_engine)):
    with store_errors("Failed to process donation"):
        item = repo.record_donation(engine, body.to_row())

    logger.info("Donation recorded: %s", item["receipt_number"])
    return ok(item, message="Donation successful")


# -----------------------------
# Testimonials + contact form
# -----------------------------
@router.get("/testimonials")
def list_testimonials(
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1, le=100),
    category: Optional[str] = None,
    featured: bool = False,
    engine: Engine = Depends(get_engine),
):
    return _listing(engine, TESTIMONIALS, page, limit, category=category, featured=featured)


@router.post("/testimonials/submit", status_code=201)
def submit_testimonial(body: TestimonialSubmitIn, engine: Engine = Depends(get_engine)):
    with store_errors("Failed to submit testimonial"):
        item = repo.create(engine, TESTIMONIALS, body.to_row())

    for hidden in TESTIMONIALS.hidden_fields:
        item.pop(hidden, None)
    return ok(item, message="Testimonial submitted. It will be shown after admin approval.")


def _client_ip(request: Request) -> Optional[str]:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.headers.get("x-real-ip") or (request.client.host if request.client else None)


@router.post("/contact/submit", status_code=201)
def submit_contact(body: ContactSubmitIn, request: Request, engine: Engine = Depends(get_engine)):
    row = body.model_dump()
    row.update(
        status="unread",
        source="website",
        ip_address=_client_ip(request),
        user_agent=request.headers.get("user-agent"),
    )
    with store_errors("Failed to send message"):
        item = repo.create(engine, CONTACTS, row)

    logger.info("Contact message received from %s", item["email"])
    return ok(
        {"id": item["id"], "name": item["name"], "subject": item["subject"], "created_at": item["created_at"]},
        message="Message sent successfully",
    )

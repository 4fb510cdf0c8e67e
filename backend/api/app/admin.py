# Admin JSON API. Authentication is disabled in this build: every route is open.
# Route bodies are annotated with closure variables, so annotations here must
# stay evaluated (no `from __future__ import annotations`).
import logging
import threading
import time
from typing import Any, Dict, Optional, Type

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.engine import Engine

from app import repo
from app.db import get_engine
from app.errors import ok, store_errors
from app.models import BLOG, CAMPAIGNS, CONTACTS, DONATIONS, EVENTS, GALLERY, NEWS, TESTIMONIALS, Resource
from app.schemas import (
    BodyIn,
    PatchIn,
    BlogCreateIn,
    BlogUpdateIn,
    CampaignCreateIn,
    CampaignUpdateIn,
    ContactUpdateIn,
    DonationCreateIn,
    DonationUpdateIn,
    EventCreateIn,
    EventUpdateIn,
    GalleryCreateIn,
    GalleryUpdateIn,
    NewsCreateIn,
    NewsUpdateIn,
    TestimonialCreateIn,
    TestimonialUpdateIn,
)
from app.workflow import list_states, utcnow, validate_status

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["admin"])

SUMMARY_TTL_SECONDS = 30.0


def _register(
    path: str,
    res: Resource,
    create_model: Optional[Type[BodyIn]],
    update_model: Type[PatchIn],
) -> None:
    plural = res.table.name.replace("_", " ")
    label = res.label.lower()

    @router.get(f"/{path}", name=f"admin_list_{path}")
    def list_items(
        page: int = Query(1, ge=1),
        limit: int = Query(10, ge=1, le=100),
        status: Optional[str] = None,
        search: Optional[str] = None,
        engine: Engine = Depends(get_engine),
    ):
        if status:
            status = validate_status(res.kind, status)
        with store_errors(f"Failed to fetch {plural}"):
            items, total = repo.list_all(
                engine, res, limit=limit, offset=(page - 1) * limit, status=status, search=search
            )
        return ok(
            items,
            total=total,
            pagination={"page": page, "limit": limit, "pages": repo.pages(total, limit)},
        )

    @router.get(f"/{path}/statuses", name=f"admin_{path}_statuses")
    def statuses():
        return ok(list_states(res.kind))

    @router.get(f"/{path}/{{item_id}}", name=f"admin_get_{path}")
    def get_item(item_id: str, engine: Engine = Depends(get_engine)):
        item_id = repo.validate_id(item_id, res.label)
        with store_errors(f"Failed to fetch {label}"):
            return ok(repo.get_by_id(engine, res, item_id))

    if create_model is not None:

        @router.post(f"/{path}", status_code=201, name=f"admin_create_{path}")
        def create_item(body: create_model, engine: Engine = Depends(get_engine)):  # type: ignore[valid-type]
            with store_errors(f"Failed to create {label}"):
                item = repo.create(engine, res, body.model_dump())
            logger.info("%s created: %s", res.label, item["id"])
            return ok(item, message=f"{res.label} created successfully")

    @router.put(f"/{path}/{{item_id}}", name=f"admin_update_{path}")
    def update_item(item_id: str, body: update_model, engine: Engine = Depends(get_engine)):  # type: ignore[valid-type]
        item_id = repo.validate_id(item_id, res.label)
        with store_errors(f"Failed to update {label}"):
            item = repo.update(engine, res, item_id, body.changes())
        logger.info("%s updated: %s", res.label, item_id)
        return ok(item, message=f"{res.label} updated successfully")


_register("events", EVENTS, EventCreateIn, EventUpdateIn)
_register("news", NEWS, NewsCreateIn, NewsUpdateIn)
_register("blog", BLOG, BlogCreateIn, BlogUpdateIn)
_register("gallery", GALLERY, GalleryCreateIn, GalleryUpdateIn)
_register("campaigns", CAMPAIGNS, CampaignCreateIn, CampaignUpdateIn)
_register("donations", DONATIONS, DonationCreateIn, DonationUpdateIn)
_register("testimonials", TESTIMONIALS, TestimonialCreateIn, TestimonialUpdateIn)
# contact messages arrive through the public form only
_register("contacts", CONTACTS, None, ContactUpdateIn)


# -----------------------------
# Dashboard summary
# -----------------------------
class SummaryCache:
    """In-process cache so dashboard refreshes don't recount every table."""

    def __init__(self, ttl: float = SUMMARY_TTL_SECONDS) -> None:
        self.ttl = ttl
        self._lock = threading.Lock()
        self._data: Optional[Dict[str, Any]] = None
        self._stamp = 0.0

    def get(self) -> Optional[Dict[str, Any]]:
        with self._lock:
            if self._data is not None and time.monotonic() - self._stamp < self.ttl:
                return self._data
            return None

    def put(self, data: Dict[str, Any]) -> None:
        with self._lock:
            self._data = data
            self._stamp = time.monotonic()


@router.get("/summary")
def summary(request: Request, engine: Engine = Depends(get_engine)):
    summary_cache: SummaryCache = request.app.state.summary_cache
    cached = summary_cache.get()
    if cached is not None:
        return ok(cached, cached=True)

    with store_errors("Failed to load summary"):
        data = repo.summary(engine)
    data["generated_at"] = utcnow()
    summary_cache.put(data)
    return ok(data)

from __future__ import annotations

import math
import re
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional
from uuid import uuid4

from app.errors import ValidationError

# Allowed values of the `status` column per entity type.
STATES: dict[str, list[str]] = {
    "event": ["draft", "published", "cancelled", "completed"],
    "news": ["draft", "published"],
    "blog": ["draft", "published", "archived"],
    "gallery": ["draft", "published", "archived"],
    "campaign": ["draft", "active", "completed", "cancelled"],
    "testimonial": ["pending", "approved", "rejected"],
    "contact": ["unread", "read", "replied", "archived"],
    # payment status of a single donation
    "donation": ["pending", "completed", "failed", "refunded"],
}

# Status that makes a document visible on public endpoints.
PUBLIC_STATE: dict[str, str] = {
    "event": "published",
    "news": "published",
    "blog": "published",
    "gallery": "published",
    "campaign": "active",
    "testimonial": "approved",
}

DEFAULT_STATE: dict[str, str] = {
    "event": "draft",
    "news": "draft",
    "blog": "draft",
    "gallery": "draft",
    "campaign": "draft",
    "testimonial": "pending",
    "contact": "unread",
    "donation": "pending",
}

# Entity types addressed publicly by slug.
SLUGGED: set[str] = {"event", "news", "blog", "gallery", "campaign"}

WORDS_PER_MINUTE = 200


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def list_states(kind: str) -> list[str]:
    return list(STATES[kind])


def _normalize_state(state: str) -> str:
    if not state:
        return state
    return state.strip().lower()


def validate_status(kind: str, status: str) -> str:
    """
    Returns the normalized status or raises ValidationError.
    """
    s = _normalize_state(status)
    if s not in STATES[kind]:
        raise ValidationError(
            f"Invalid status '{status}'",
            details={"status": f"must be one of {STATES[kind]}"},
        )
    return s


def is_public(kind: str, status: Optional[str]) -> bool:
    public = PUBLIC_STATE.get(kind)
    return public is not None and _normalize_state(status or "") == public


def slugify(title: str) -> str:
    s = title.lower()
    s = re.sub(r"[^a-z0-9\s-]", "", s)
    s = re.sub(r"\s+", "-", s)
    s = re.sub(r"-+", "-", s)
    return s.strip("-")


def read_time(content: str) -> int:
    return math.ceil(len(content.split()) / WORDS_PER_MINUTE)


def campaign_progress(collected: float, goal: float) -> float:
    if not goal or goal <= 0:
        return 0.0
    return min(collected / goal * 100, 100.0)


def receipt_number(now: Optional[datetime] = None) -> str:
    stamp = int((now or utcnow()).timestamp() * 1000)
    return f"RCP-{stamp}-{uuid4().hex[:9].upper()}"


def campaign_credit(campaign: Mapping[str, Any], amount: float) -> Dict[str, Any]:
    """
    Column values for a campaign after a completed donation of `amount`.
    An active campaign that reaches its goal is closed as completed.
    """
    collected = (campaign.get("collected") or 0) + amount
    goal = campaign.get("goal") or 0
    values: Dict[str, Any] = {
        "collected": collected,
        "donor_count": (campaign.get("donor_count") or 0) + 1,
        "progress": campaign_progress(collected, goal),
    }
    if goal and collected >= goal and campaign.get("status") == "active":
        values["status"] = "completed"
    return values


def before_save(
    kind: str,
    changes: Dict[str, Any],
    existing: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Pre-persist hook shared by inserts and updates.

    `changes` holds the columns being written, `existing` the stored row on
    update (None on insert). Returns the column values to persist; the
    `updated_at` refresh itself is done by the table's onupdate.
    """
    doc = dict(changes)
    merged: Dict[str, Any] = dict(existing or {})
    merged.update(doc)

    if "status" in doc and doc["status"] is not None:
        doc["status"] = validate_status(kind, doc["status"])
        merged["status"] = doc["status"]
    elif existing is None:
        doc["status"] = DEFAULT_STATE[kind]
        merged["status"] = doc["status"]

    if kind in SLUGGED:
        if doc.get("slug"):
            doc["slug"] = slugify(doc["slug"])
            merged["slug"] = doc["slug"]
        if not merged.get("slug") and merged.get("title"):
            doc["slug"] = slugify(merged["title"])
        if existing is None and not doc.get("slug"):
            raise ValidationError("Validation error", details={"slug": "Slug is required"})

    if kind in ("news", "blog"):
        if merged.get("status") == "published" and not merged.get("published_at"):
            doc["published_at"] = utcnow()

    if kind == "blog" and doc.get("content") is not None:
        doc["read_time"] = read_time(doc["content"])

    if kind == "event":
        capacity = merged.get("capacity")
        if capacity and (merged.get("registered") or 0) > capacity:
            raise ValidationError(
                "Validation error",
                details={"registered": "Registered count cannot exceed capacity"},
            )

    if kind == "campaign":
        goal = merged.get("goal") or 0
        doc["progress"] = campaign_progress(merged.get("collected") or 0, goal)

    if kind == "testimonial":
        if merged.get("status") == "approved" and not merged.get("approved_at"):
            doc["approved_at"] = utcnow()

    if kind == "contact":
        if merged.get("status") == "replied" and not merged.get("responded_at"):
            doc["responded_at"] = utcnow()

    if kind == "donation":
        if existing is None and not doc.get("receipt_number"):
            doc["receipt_number"] = receipt_number()
        if merged.get("status") == "completed" and not merged.get("payment_date"):
            doc["payment_date"] = utcnow()
        if doc.get("receipt_sent") and not merged.get("receipt_sent_at"):
            doc["receipt_sent_at"] = utcnow()

    return doc

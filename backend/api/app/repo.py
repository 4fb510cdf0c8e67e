from __future__ import annotations

import logging
import math
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Tuple
from uuid import UUID

from sqlalchemy import JSON, String, Table, cast, func, or_, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError

from app import tables
from app.errors import NotFoundError, ValidationError
from app.models import CAMPAIGNS, DONATIONS, Resource
from app.workflow import before_save, campaign_credit, utcnow

logger = logging.getLogger(__name__)


# ----------------------------
# Helpers (safe + deterministic)
# ----------------------------

def _columns(table: Table, fields: Optional[Tuple[str, ...]], hidden: Tuple[str, ...] = ()) -> list:
    if fields:
        return [table.c[f] for f in fields]
    return [c for c in table.c if c.name not in hidden]


def _order_by(res: Resource, sort: Optional[str] = None, order: Optional[str] = None) -> list:
    """
    Explicit allow-list: only columns listed in `res.sortable` may be
    requested; anything else falls back to the resource's fixed order.
    The primary key is always the final tie-breaker so pages are stable.
    """
    t = res.table
    s = (sort or "").strip()
    if s and s in res.sortable:
        col = t.c[s]
        clauses = [col.asc() if (order or "").strip().lower() == "asc" else col.desc()]
    else:
        clauses = [t.c[name].desc() if desc else t.c[name].asc() for name, desc in res.public_order]
    clauses.append(t.c.id.asc())
    return clauses


def _search_clause(res: Resource, q: str):
    pattern = f"%{q}%"
    clauses = []
    for name in res.search_fields:
        col = res.table.c[name]
        # JSON lists (tags) are matched against their serialized text
        if isinstance(col.type, JSON):
            col = cast(col, String)
        clauses.append(col.ilike(pattern))
    return or_(*clauses)


def pages(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit else 0


def validate_id(value: str, label: str) -> str:
    try:
        return str(UUID(value))
    except (ValueError, TypeError):
        raise ValidationError(f"Invalid {label.lower()} ID") from None


def _integrity_error(res: Resource, e: IntegrityError) -> ValidationError:
    """Maps a constraint violation to a 400, naming the duplicated column when there is one."""
    msg = str(e.orig)
    if "unique" in msg.lower():
        for col in res.table.c:
            if col.unique and col.name in msg:
                field = col.name.replace("_", " ")
                return ValidationError(f"{res.label} with this {field} already exists", details=msg)
    return ValidationError(f"Invalid {res.label.lower()} data", details=msg)


def _page(conn, table: Table, cols: list, where: list, order: list, limit: int, offset: int):
    stmt = select(*cols).where(*where).order_by(*order).limit(limit).offset(offset)
    total_stmt = select(func.count()).select_from(table).where(*where)
    rows = conn.execute(stmt).mappings().all()
    total = conn.execute(total_stmt).scalar_one()
    return [dict(r) for r in rows], int(total)


# ----------------------------
# Public reads
# ----------------------------

def list_public(
    engine: Engine,
    res: Resource,
    limit: int,
    offset: int = 0,
    category: Optional[str] = None,
    search: Optional[str] = None,
    featured: bool = False,
    upcoming: bool = False,
    sort: Optional[str] = None,
    order: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Tuple[List[Dict[str, Any]], int]:
    t = res.table
    where = [t.c.status == res.public_status]

    if category and category not in res.ignored_categories:
        where.append(t.c.category == category)
    if search:
        where.append(_search_clause(res, search))
    if featured and "featured" in t.c:
        where.append(t.c.featured.is_(True))
    if upcoming and "date" in t.c:
        where.append(t.c.date >= (now or utcnow()))

    cols = _columns(t, res.list_fields, res.hidden_fields)
    with engine.begin() as conn:
        return _page(conn, t, cols, where, _order_by(res, sort, order), limit, offset)


def get_public(engine: Engine, res: Resource, slug: str) -> Dict[str, Any]:
    """
    Single published document by slug. Raises NotFoundError when no
    document with that slug is publicly visible.
    """
    t = res.table
    stmt = select(*_columns(t, None, res.hidden_fields)).where(
        t.c.slug == slug,
        t.c.status == res.public_status,
    )
    with engine.begin() as conn:
        row = conn.execute(stmt).mappings().first()

    if not row:
        raise NotFoundError(f"{res.label} not found")
    return dict(row)


def list_related(
    engine: Engine,
    res: Resource,
    doc: Mapping[str, Any],
    now: Optional[datetime] = None,
) -> List[Dict[str, Any]]:
    rule = res.related
    if rule is None:
        return []

    t = res.table
    order_col = t.c[rule.order_field]
    where = [
        t.c[rule.category_field] == doc[rule.category_field],
        t.c.status == res.public_status,
        t.c.id != doc["id"],
    ]
    if rule.upcoming_only:
        where.append(order_col >= (now or utcnow()))

    stmt = (
        select(*_columns(t, rule.fields))
        .where(*where)
        .order_by(order_col.desc() if rule.descending else order_col.asc(), t.c.id.asc())
        .limit(rule.limit)
    )
    with engine.begin() as conn:
        rows = conn.execute(stmt).mappings().all()
    return [dict(r) for r in rows]


def increment_views(engine: Engine, res: Resource, doc_id: str) -> None:
    t = res.table
    with engine.begin() as conn:
        conn.execute(t.update().where(t.c.id == doc_id).values(views=t.c.views + 1))


# ----------------------------
# Admin CRUD
# ----------------------------

def list_all(
    engine: Engine,
    res: Resource,
    limit: int,
    offset: int = 0,
    status: Optional[str] = None,
    search: Optional[str] = None,
) -> Tuple[List[Dict[str, Any]], int]:
    t = res.table
    where = []
    if status:
        where.append(t.c.status == status)
    if search:
        where.append(_search_clause(res, search))

    order = [t.c.created_at.desc(), t.c.id.asc()]
    with engine.begin() as conn:
        return _page(conn, t, list(t.c), where, order, limit, offset)


def _get_by_id(conn, res: Resource, doc_id: str) -> Dict[str, Any]:
    t = res.table
    row = conn.execute(select(t).where(t.c.id == doc_id)).mappings().first()
    if not row:
        raise NotFoundError(f"{res.label} not found")
    return dict(row)


def get_by_id(engine: Engine, res: Resource, doc_id: str) -> Dict[str, Any]:
    with engine.begin() as conn:
        return _get_by_id(conn, res, doc_id)


def create(engine: Engine, res: Resource, values: Mapping[str, Any]) -> Dict[str, Any]:
    doc = before_save(res.kind, dict(values))
    doc["id"] = tables.new_id()

    try:
        with engine.begin() as conn:
            conn.execute(res.table.insert().values(**doc))
            return _get_by_id(conn, res, doc["id"])
    except IntegrityError as e:
        raise _integrity_error(res, e) from e


def update(engine: Engine, res: Resource, doc_id: str, values: Mapping[str, Any]) -> Dict[str, Any]:
    t = res.table
    try:
        with engine.begin() as conn:
            existing = _get_by_id(conn, res, doc_id)
            doc = before_save(res.kind, dict(values), existing)
            if not doc:
                doc = {"updated_at": utcnow()}
            conn.execute(t.update().where(t.c.id == doc_id).values(**doc))
            return _get_by_id(conn, res, doc_id)
    except IntegrityError as e:
        raise _integrity_error(res, e) from e


def record_donation(engine: Engine, values: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Stores a completed public donation and credits its campaign, if any,
    in one transaction. The campaign must be active; otherwise nothing is
    written and NotFoundError is raised.
    """
    res = DONATIONS
    c = tables.campaigns
    doc = before_save(res.kind, dict(values))
    doc["id"] = tables.new_id()

    try:
        with engine.begin() as conn:
            slug = doc.get("campaign")
            if slug:
                campaign = conn.execute(
                    select(c).where(c.c.slug == slug, c.c.status == CAMPAIGNS.public_status).with_for_update()
                ).mappings().first()
                if not campaign:
                    raise NotFoundError("Campaign not found or not active")

            conn.execute(res.table.insert().values(**doc))

            if slug:
                credit = campaign_credit(campaign, doc["amount"])
                conn.execute(c.update().where(c.c.id == campaign["id"]).values(**credit))
                logger.info("Campaign %s credited, collected=%s", slug, credit["collected"])

            return _get_by_id(conn, res, doc["id"])
    except IntegrityError as e:
        raise _integrity_error(res, e) from e


# ----------------------------
# Dashboard
# ----------------------------

def summary(engine: Engine, recent_limit: int = 8) -> Dict[str, Any]:
    counted = {
        "news": tables.news,
        "blogs": tables.blog_posts,
        "events": tables.events,
        "gallery": tables.gallery,
        "testimonials": tables.testimonials,
        "campaigns": tables.campaigns,
    }
    recent_sources = {"news": tables.news, "blog": tables.blog_posts, "event": tables.events}

    with engine.begin() as conn:
        content = {
            name: int(conn.execute(select(func.count()).select_from(t)).scalar_one())
            for name, t in counted.items()
        }
        users = int(conn.execute(select(func.count()).select_from(tables.admin_users)).scalar_one())
        d = tables.donations
        donation_count, donation_total = conn.execute(
            select(func.count(), func.coalesce(func.sum(d.c.amount), 0)).select_from(d)
        ).one()

        recent: List[Dict[str, Any]] = []
        for kind, t in recent_sources.items():
            stmt = (
                select(t.c.id, t.c.title, t.c.created_at)
                .order_by(t.c.created_at.desc(), t.c.id.asc())
                .limit(5)
            )
            for r in conn.execute(stmt).mappings().all():
                recent.append({"id": r["id"], "type": kind, "title": r["title"] or "(untitled)", "created_at": r["created_at"]})

    recent.sort(key=lambda item: item["created_at"], reverse=True)
    return {
        "stats": {
            "content": content,
            "donations": {"count": int(donation_count), "total_amount": float(donation_total or 0)},
            "users": users,
        },
        "recent": recent[:recent_limit],
    }

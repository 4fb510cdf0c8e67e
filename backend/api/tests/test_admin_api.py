"""Admin create/edit/list endpoints and the dashboard summary."""
import uuid

import pytest
from fastapi.testclient import TestClient

from app import repo, tables
from app.errors import ValidationError
from app.main import create_app
from app.models import CONTACTS

from conftest import fake, sqlite_factory


def event_body(**overrides):
    body = {
        "title": "Open Day 2026",
        "description": "Campus tour for new families",
        "featured_image": "https://img.example.org/open-day.jpg",
        "date": "2030-05-01T08:00:00Z",
        "time": "08:00",
        "location": "Main Hall",
        "category": "Educational",
    }
    body.update(overrides)
    return body


def test_create_event_derives_slug_and_defaults(client):
    resp = client.post("/api/admin/events", json=event_body())

    assert resp.status_code == 201
    body = resp.json()
    assert body["success"] is True
    assert body["message"] == "Event created successfully"
    data = body["data"]
    assert data["slug"] == "open-day-2026"
    assert data["status"] == "draft"
    assert data["registered"] == 0
    assert data["organizer"] == {"name": "Admin", "contact": None}
    assert data["created_at"] and data["updated_at"]
    uuid.UUID(data["id"])


def test_created_draft_is_not_public_until_published(client):
    created = client.post("/api/admin/events", json=event_body()).json()["data"]

    assert client.get("/api/events/open-day-2026").status_code == 404

    resp = client.put(f"/api/admin/events/{created['id']}", json={"status": "published"})

    assert resp.status_code == 200
    assert resp.json()["data"]["status"] == "published"
    assert client.get("/api/events/open-day-2026").status_code == 200


def test_duplicate_slug_is_rejected(client):
    client.post("/api/admin/events", json=event_body(slug="same"))
    resp = client.post("/api/admin/events", json=event_body(slug="same"))

    assert resp.status_code == 400
    assert resp.json()["success"] is False
    assert resp.json()["error"] == "Event with this slug already exists"


def test_admin_supplied_slug_is_normalized(client):
    resp = client.post("/api/admin/events", json=event_body(slug="Open Day!", status="published"))

    assert resp.json()["data"]["slug"] == "open-day"
    assert client.get("/api/events/open-day").status_code == 200


def test_other_constraint_violations_do_not_mention_slug(engine):
    with pytest.raises(ValidationError) as exc:
        repo.create(engine, CONTACTS, {"email": "a@example.org", "subject": "Hi", "message": "no name given"})

    assert exc.value.message == "Invalid contact message data"
    assert exc.value.status_code == 400


def test_create_validation_error_envelope(client):
    resp = client.post("/api/admin/events", json=event_body(category="Parade", title=""))

    assert resp.status_code == 400
    body = resp.json()
    assert body["success"] is False
    assert body["error"] == "Validation error"
    assert "category" in body["details"]
    assert "title" in body["details"]


def test_registered_cannot_exceed_capacity(client):
    resp = client.post("/api/admin/events", json=event_body(capacity=10, registered=11))

    assert resp.status_code == 400
    assert resp.json()["details"] == {"registered": "Registered count cannot exceed capacity"}


def test_get_by_id_rejects_malformed_and_missing_ids(client):
    malformed = client.get("/api/admin/events/not-a-uuid")
    missing = client.get(f"/api/admin/events/{uuid.uuid4()}")

    assert malformed.status_code == 400
    assert malformed.json() == {"success": False, "error": "Invalid event ID"}
    assert missing.status_code == 404
    assert missing.json() == {"success": False, "error": "Event not found"}


def test_update_is_partial_and_refreshes_updated_at(client):
    created = client.post("/api/admin/events", json=event_body(location="Hall A")).json()["data"]

    resp = client.put(f"/api/admin/events/{created['id']}", json={"time": "09:30"})

    data = resp.json()["data"]
    assert data["time"] == "09:30"
    assert data["location"] == "Hall A"
    assert data["title"] == created["title"]
    assert data["updated_at"] >= created["updated_at"]


def test_update_rejects_null_for_required_column(client):
    created = client.post("/api/admin/events", json=event_body()).json()["data"]

    resp = client.put(f"/api/admin/events/{created['id']}", json={"title": None})

    assert resp.status_code == 400
    assert resp.json()["success"] is False


def test_update_missing_document_is_404(client):
    resp = client.put(f"/api/admin/news/{uuid.uuid4()}", json={"featured": True})

    assert resp.status_code == 404
    assert resp.json()["error"] == "News not found"


def test_news_publish_stamps_published_at_once(client):
    created = client.post(
        "/api/admin/news",
        json={
            "title": "Exam Results",
            "excerpt": "Results are out",
            "content": "All students passed.",
            "author": {"name": fake.name()},
            "category": "Academic",
        },
    ).json()["data"]
    assert created["published_at"] is None

    first = client.put(f"/api/admin/news/{created['id']}", json={"status": "published"}).json()["data"]
    second = client.put(f"/api/admin/news/{created['id']}", json={"title": "Exam Results (updated)"}).json()["data"]

    assert first["published_at"] is not None
    assert second["published_at"] == first["published_at"]


def test_news_video_url_must_be_youtube(client):
    resp = client.post(
        "/api/admin/news",
        json={
            "title": "Video",
            "excerpt": "x",
            "content": "y",
            "author": {"name": "Admin"},
            "category": "Academic",
            "video_url": "https://vimeo.com/123",
        },
    )

    assert resp.status_code == 400
    assert "video_url" in resp.json()["details"]


def test_blog_read_time_computed_from_content(client):
    content = " ".join(["word"] * 450)
    resp = client.post(
        "/api/admin/blog",
        json={
            "title": "Long Read",
            "excerpt": "A long one",
            "content": content,
            "featured_image": "https://img.example.org/long.jpg",
            "author": {"name": "Editor"},
            "category": "Stories",
        },
    )

    assert resp.status_code == 201
    assert resp.json()["data"]["read_time"] == 3


def test_campaign_progress_recomputed_on_update(client):
    created = client.post(
        "/api/admin/campaigns",
        json={
            "title": "New Library",
            "description": "Books for everyone",
            "goal": 200,
            "start_date": "2026-01-01T00:00:00Z",
            "category": "Education",
        },
    ).json()["data"]
    assert created["progress"] == 0

    updated = client.put(f"/api/admin/campaigns/{created['id']}", json={"collected": 300}).json()["data"]

    assert updated["progress"] == 100


def test_list_filters_by_status_and_rejects_unknown_status(client):
    client.post("/api/admin/events", json=event_body(slug="a", status="published"))
    client.post("/api/admin/events", json=event_body(slug="b"))

    published = client.get("/api/admin/events", params={"status": "published"}).json()
    everything = client.get("/api/admin/events").json()
    bad = client.get("/api/admin/events", params={"status": "deleted"})

    assert [e["slug"] for e in published["data"]] == ["a"]
    assert everything["total"] == 2
    assert bad.status_code == 400


def test_statuses_endpoint(client):
    body = client.get("/api/admin/campaigns/statuses").json()

    assert body == {"success": True, "data": ["draft", "active", "completed", "cancelled"]}


def test_testimonial_approval_stamps_approved_at(client):
    created = client.post(
        "/api/admin/testimonials",
        json={"name": "Siti", "content": "Great school", "rating": 5},
    ).json()["data"]
    assert created["status"] == "pending"
    assert created["approved_at"] is None

    approved = client.put(
        f"/api/admin/testimonials/{created['id']}",
        json={"status": "approved", "approved_by": "admin"},
    ).json()["data"]

    assert approved["approved_at"] is not None


# -----------------------------
# Public submissions + inbox
# -----------------------------
def test_public_testimonial_submission_is_pending(client):
    resp = client.post(
        "/api/testimonials/submit",
        json={"name": "Budi", "content": "x" * 60, "email": "budi@example.com", "position": "Parent"},
    )

    assert resp.status_code == 201
    data = resp.json()["data"]
    assert data["status"] == "pending"
    assert data["source"] == "public"
    assert data["role"] == "Parent"
    assert "email" not in data
    assert client.get("/api/testimonials").json()["total"] == 0


def test_public_testimonial_length_limits(client):
    short = client.post("/api/testimonials/submit", json={"name": "A", "content": "too short"})
    long = client.post("/api/testimonials/submit", json={"name": "A", "content": "x" * 301})

    assert short.status_code == 400
    assert long.status_code == 400


def test_contact_submission_lands_in_admin_inbox(client):
    resp = client.post(
        "/api/contact/submit",
        json={"name": "Rina", "email": "Rina@Example.com", "subject": "Admission", "message": "When does enrolment open?"},
        headers={"User-Agent": "pytest", "X-Forwarded-For": "203.0.113.7, 10.0.0.1"},
    )
    assert resp.status_code == 201
    contact_id = resp.json()["data"]["id"]

    inbox = client.get("/api/admin/contacts").json()
    assert inbox["total"] == 1
    stored = inbox["data"][0]
    assert stored["email"] == "rina@example.com"
    assert stored["status"] == "unread"
    assert stored["ip_address"] == "203.0.113.7"
    assert stored["user_agent"] == "pytest"

    replied = client.put(f"/api/admin/contacts/{contact_id}", json={"status": "replied"}).json()["data"]
    assert replied["responded_at"] is not None


def test_contact_submission_validates_email(client):
    resp = client.post(
        "/api/contact/submit",
        json={"name": "Rina", "email": "nope", "subject": "Hi", "message": "Hello there, school"},
    )

    assert resp.status_code == 400
    assert "email" in resp.json()["details"]


def test_contacts_cannot_be_created_by_admin(client):
    resp = client.post("/api/admin/contacts", json={"name": "x"})

    assert resp.status_code == 405


# -----------------------------
# Donations
# -----------------------------
def test_admin_recorded_donation_defaults_to_pending(client):
    resp = client.post("/api/admin/donations", json={"donor_name": "Budi", "amount": 100_000})

    assert resp.status_code == 201
    data = resp.json()["data"]
    assert data["status"] == "pending"
    assert data["payment_method"] == "bank_transfer"
    assert data["receipt_number"].startswith("RCP-")
    assert data["payment_date"] is None

    paid = client.put(f"/api/admin/donations/{data['id']}", json={"status": "completed"}).json()["data"]
    assert paid["payment_date"] is not None


def test_duplicate_receipt_number_is_rejected(client):
    body = {"donor_name": "Budi", "amount": 50_000, "receipt_number": "DN-1"}
    client.post("/api/admin/donations", json=body)
    resp = client.post("/api/admin/donations", json=body)

    assert resp.status_code == 400
    assert resp.json()["error"] == "Donation with this receipt number already exists"


def test_admin_donation_list_searches_campaign(client):
    client.post("/api/admin/donations", json={"donor_name": "A", "amount": 10, "campaign": "new-library"})
    client.post("/api/admin/donations", json={"donor_name": "B", "amount": 20, "status": "failed"})

    by_campaign = client.get("/api/admin/donations", params={"search": "library"}).json()
    failed = client.get("/api/admin/donations", params={"status": "failed"}).json()

    assert [d["donor_name"] for d in by_campaign["data"]] == ["A"]
    assert [d["donor_name"] for d in failed["data"]] == ["B"]


# -----------------------------
# Dashboard
# -----------------------------
def test_summary_counts_and_caches(client, engine, make_event, make_news):
    make_event("e1")
    make_news("n1")
    with engine.begin() as conn:
        conn.execute(tables.admin_users.insert().values(id=tables.new_id(), email="a@example.org", password_hash="x"))

    first = client.get("/api/admin/summary").json()
    make_event("e2")
    second = client.get("/api/admin/summary").json()

    stats = first["data"]["stats"]
    assert stats["content"]["events"] == 1
    assert stats["content"]["news"] == 1
    assert stats["users"] == 1
    assert {r["type"] for r in first["data"]["recent"]} == {"event", "news"}
    assert "cached" not in first
    assert second["cached"] is True
    assert second["data"]["stats"]["content"]["events"] == 1
    assert stats["donations"] == {"count": 0, "total_amount": 0.0}


def test_summary_reports_donation_totals(client):
    client.post("/api/admin/donations", json={"donor_name": "A", "amount": 10_000})
    client.post("/api/donations", json={"donor_name": "B", "amount": 5_000, "payment_method": "cash"})

    stats = client.get("/api/admin/summary").json()["data"]["stats"]

    assert stats["donations"] == {"count": 2, "total_amount": 15_000.0}


def test_summary_cache_belongs_to_its_app(client, settings):
    assert client.get("/api/admin/summary").json().get("cached") is None
    assert client.get("/api/admin/summary").json()["cached"] is True

    other = create_app(settings, engine_factory=sqlite_factory)
    with TestClient(other) as c:
        fresh = c.get("/api/admin/summary").json()
    other.state.connections.dispose()

    assert "cached" not in fresh
    assert other.state.summary_cache is not client.app.state.summary_cache

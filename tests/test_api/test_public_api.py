"""End-to-end tests for the student-facing routes."""
from __future__ import annotations

import re

from app.models.suggestions import Reply, Suggestion, SuggestionStatus


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_departments_are_public(client, departments):
    r = client.get("/api/v1/departments")
    assert r.status_code == 200
    assert [d["name"] for d in r.json()] == [d.name for d in departments]


def test_submit_then_track(client, departments):
    r = client.post(
        "/api/v1/suggestions",
        json={"title": "Fix WiFi", "content": "Library WiFi drops", "department_id": departments[0].id},
    )
    assert r.status_code == 200, r.text
    code = r.json()["tracking_code"]
    assert re.fullmatch(r"[A-Z0-9]{6}", code)

    r = client.get(f"/api/v1/suggestions/{code}")
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "pending-review"
    assert body["upvotes"] == 0
    assert body["department"]["name"] == departments[0].name
    assert body["replies"] == []


def test_unknown_tracking_code(client):
    r = client.get("/api/v1/suggestions/NOPE00")
    assert r.status_code == 404
    assert r.json() == {"detail": "Suggestion not found"}


def test_fourth_rate_limited_call_is_rejected(client):
    payload = {"title": "t", "content": "c"}
    for _ in range(3):
        assert client.post("/api/v1/suggestions", json=payload).status_code == 200

    r = client.post("/api/v1/suggestions", json=payload)
    assert r.status_code == 429
    assert "detail" in r.json()


def test_rate_limit_is_shared_across_marked_routes(client, seeded):
    code = client.post("/api/v1/suggestions", json={"title": "t", "content": "c"}).json()["tracking_code"]
    sid = seeded.query(Suggestion).filter_by(tracking_code=code).one().id

    assert client.post(f"/api/v1/suggestions/{sid}/upvote").status_code == 200
    assert client.get(f"/api/v1/suggestions/{code}").status_code == 200
    assert client.post(f"/api/v1/suggestions/{sid}/upvote").status_code == 429

    # Unmarked routes are never limited.
    assert client.get("/api/v1/suggestions").status_code == 200


def test_submit_validation_errors_are_400(client):
    r = client.post("/api/v1/suggestions", json={"title": "", "content": "c"})
    assert r.status_code == 400
    assert "title" in r.json()["detail"]

    r = client.post("/api/v1/suggestions", json={"title": "x" * 101, "content": "c"})
    assert r.status_code == 400

    r = client.post("/api/v1/suggestions", json={"title": "t", "content": "c", "department_id": 999})
    assert r.status_code == 400
    assert r.json() == {"detail": "Invalid department ID"}


def test_title_length_counts_characters(client):
    r = client.post("/api/v1/suggestions", json={"title": "图" * 100, "content": "c"})
    assert r.status_code == 200


def test_upvote_returns_new_count(client, seeded):
    s = Suggestion(tracking_code="UPV001", title="t", content="c", is_public=True)
    seeded.add(s)
    seeded.commit()

    r = client.post(f"/api/v1/suggestions/{s.id}/upvote")
    assert r.status_code == 200
    assert r.json() == {"upvotes": 1}

    assert client.post("/api/v1/suggestions/999/upvote").status_code == 404


def test_public_list_shape_and_paging(client, seeded):
    for i in range(3):
        seeded.add(
            Suggestion(
                tracking_code=f"PUB00{i}", title=f"t{i}", content="c", is_public=True, status=SuggestionStatus.PENDING
            )
        )
    seeded.add(
        Suggestion(tracking_code="PRIV01", title="private", content="c", is_public=False, status=SuggestionStatus.PENDING)
    )
    seeded.commit()

    r = client.get("/api/v1/suggestions", params={"page": 1, "pageSize": 2})
    assert r.status_code == 200
    body = r.json()
    assert body["total"] == 3
    assert body["page"] == 1
    assert body["page_size"] == 2
    assert len(body["data"]) == 2

    # Garbage paging falls back to defaults.
    body = client.get("/api/v1/suggestions", params={"page": "abc", "pageSize": "-4"}).json()
    assert body["page"] == 1
    assert body["page_size"] == 10


def test_reply_author_never_exposes_password_hash(client, seeded, root_admin):
    s = Suggestion(tracking_code="RPL001", title="t", content="c")
    s.replies.append(Reply(content="On it", replier_id=root_admin.id))
    seeded.add(s)
    seeded.commit()

    r = client.get("/api/v1/suggestions/RPL001")
    assert r.status_code == 200
    reply = r.json()["replies"][0]
    assert reply["content"] == "On it"
    assert reply["replier"]["username"] == "superadmin"
    assert "password_hash" not in reply["replier"]
    assert "password" not in r.text


def test_oversized_paging_values_fall_back_to_defaults(client):
    r = client.get("/api/v1/suggestions", params={"page": "9" * 23, "pageSize": "9" * 23, "department_id": "9" * 23})
    assert r.status_code == 200
    body = r.json()
    assert (body["page"], body["page_size"]) == (1, 10)


def test_oversized_path_id_is_400(client):
    r = client.post(f"/api/v1/suggestions/{'9' * 23}/upvote")
    assert r.status_code == 400
    assert r.json()["detail"].startswith("path.id")


def test_oversized_department_on_submit_is_400(client):
    r = client.post("/api/v1/suggestions", json={"title": "t", "content": "c", "department_id": int("9" * 23)})
    assert r.status_code == 400
    assert "department_id" in r.json()["detail"]

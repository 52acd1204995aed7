# tests/test_grocery_list.py
from datetime import datetime, timedelta

import pytest

from cravings import claude_service, email_service, spoonacular_service
from cravings.api.grocery_list import format_local_time
from cravings.claude_service import GroceryListOrganizerError
from cravings.email_service import EmailDeliveryError
from cravings.models import ScheduledEmail, ScheduledEmailStatus


@pytest.fixture
def organizer(monkeypatch):
    seen = []

    def fake_organize(lines):
        seen.append(list(lines))
        return "Produce:\n" + "\n".join(f"- {line}" for line in lines)

    monkeypatch.setattr(
        spoonacular_service, "get_recipe_details",
        lambda recipe_id: {
            "id": recipe_id,
            "title": "Chickpea Curry",
            "extendedIngredients": [
                {"name": "chickpeas", "original": "1 can chickpeas"},
                {"name": "spinach", "original": "2 cups spinach"},
            ],
        },
    )
    monkeypatch.setattr(claude_service, "organize_grocery_list", fake_organize)
    return seen


@pytest.fixture
def outbox(monkeypatch):
    sent = []

    def fake_send(to_email, grocery_list, recipe_name):
        sent.append({"to": to_email, "list": grocery_list, "subject": recipe_name})

    monkeypatch.setattr(email_service, "send_grocery_list_email", fake_send)
    return sent


def test_empty_list(client, auth):
    assert client.get("/api/grocery-list", headers=auth).json() == {"items": ""}


def test_add_recipe_merges_with_existing_lines(client, auth, organizer):
    client.post("/api/grocery-list/update", json={"items": "Pantry:\n- rice"}, headers=auth)

    resp = client.post("/api/grocery-list/add", json={"recipeId": 2}, headers=auth)
    assert resp.status_code == 200
    assert organizer[0] == ["Pantry:", "- rice", "1 can chickpeas", "2 cups spinach"]

    items = client.get("/api/grocery-list", headers=auth).json()["items"]
    assert items == resp.json()["groceryList"]
    assert "- 1 can chickpeas" in items


def test_add_recipe_requires_recipe_id(client, auth, organizer):
    assert client.post("/api/grocery-list/add", json={}, headers=auth).status_code == 422


def test_add_recipe_reports_organizer_failure(client, auth, organizer, monkeypatch):
    def fail(lines):
        raise GroceryListOrganizerError("Language model request failed")

    monkeypatch.setattr(claude_service, "organize_grocery_list", fail)
    resp = client.post("/api/grocery-list/add", json={"recipeId": 2}, headers=auth)
    assert resp.status_code == 500
    assert client.get("/api/grocery-list", headers=auth).json() == {"items": ""}


def test_update_and_clear(client, auth):
    assert client.post("/api/grocery-list/update", json={"items": ""}, headers=auth).status_code == 400

    client.post("/api/grocery-list/update", json={"items": "- milk"}, headers=auth)
    assert client.get("/api/grocery-list", headers=auth).json() == {"items": "- milk"}

    assert client.post("/api/grocery-list/clear", headers=auth).status_code == 200
    assert client.get("/api/grocery-list", headers=auth).json() == {"items": ""}


def test_send_emails_list_and_clears_it(client, account, outbox):
    auth, user = account
    assert client.post("/api/grocery-list/send", headers=auth).status_code == 400

    client.post("/api/grocery-list/update", json={"items": "- milk"}, headers=auth)
    resp = client.post("/api/grocery-list/send", headers=auth)
    assert resp.status_code == 200
    assert outbox == [{"to": user["email"], "list": "- milk", "subject": "Your Grocery List"}]
    assert client.get("/api/grocery-list", headers=auth).json() == {"items": ""}


def test_send_failure_keeps_list(client, auth, monkeypatch):
    def fail(**kwargs):
        raise EmailDeliveryError("EmailJS rejected the email")

    monkeypatch.setattr(email_service, "send_grocery_list_email", fail)
    client.post("/api/grocery-list/update", json={"items": "- milk"}, headers=auth)

    assert client.post("/api/grocery-list/send", headers=auth).status_code == 500
    assert client.get("/api/grocery-list", headers=auth).json() == {"items": "- milk"}


def test_format_local_time():
    assert format_local_time(datetime(2025, 3, 5, 18, 30)) == "March 5, 2025 6:30 PM"
    assert format_local_time(datetime(2025, 12, 25, 0, 5)) == "December 25, 2025 12:05 AM"


# --- Scheduling ---


def test_schedule_validation(client, auth):
    assert client.post(
        "/api/grocery-list/schedule", json={"scheduledDate": "2099-01-01"}, headers=auth
    ).status_code == 400
    assert client.post(
        "/api/grocery-list/schedule",
        json={"scheduledDate": "2099-01-01", "scheduledTime": "09:30"},
        headers=auth,
    ).status_code == 404

    client.post("/api/grocery-list/update", json={"items": "- milk"}, headers=auth)
    assert client.post(
        "/api/grocery-list/schedule",
        json={"scheduledDate": "tomorrow", "scheduledTime": "9ish"},
        headers=auth,
    ).status_code == 400


def test_schedule_stores_utc_and_snapshots_list(client, auth, db):
    client.post("/api/grocery-list/update", json={"items": "- milk"}, headers=auth)
    resp = client.post(
        "/api/grocery-list/schedule",
        json={"scheduledDate": "2099-01-01", "scheduledTime": "09:30"},
        headers=auth,
    )
    assert resp.status_code == 200
    assert resp.json()["scheduledFor"] == "January 1, 2099 9:30 AM"

    row = db.get(ScheduledEmail, resp.json()["id"])
    assert row.status == ScheduledEmailStatus.PENDING
    # America/New_York is UTC-5 in January
    assert row.scheduled_for == datetime(2099, 1, 1, 14, 30)
    assert row.data == {"groceryList": "- milk"}

    # Later edits do not change what gets sent
    client.post("/api/grocery-list/update", json={"items": "- eggs"}, headers=auth)
    db.expire_all()
    assert db.get(ScheduledEmail, row.id).data == {"groceryList": "- milk"}


def test_list_and_cancel_scheduled(client, auth):
    client.post("/api/grocery-list/update", json={"items": "- milk"}, headers=auth)
    for date in ("2099-01-01", "2099-02-01"):
        client.post(
            "/api/grocery-list/schedule",
            json={"scheduledDate": date, "scheduledTime": "08:00"},
            headers=auth,
        )

    scheduled = client.get("/api/grocery-list/scheduled", headers=auth).json()["scheduledEmails"]
    assert [s["scheduledFor"][:10] for s in scheduled] == ["2099-02-01", "2099-01-01"]
    assert all(s["status"] == "PENDING" for s in scheduled)

    target = scheduled[0]["id"]
    assert client.delete(f"/api/grocery-list/schedule/{target}", headers=auth).status_code == 200
    assert client.delete(f"/api/grocery-list/schedule/{target}", headers=auth).status_code == 404
    remaining = client.get("/api/grocery-list/scheduled", headers=auth).json()["scheduledEmails"]
    assert len(remaining) == 1


def test_process_my_scheduled_sends_only_due(client, account, monkeypatch):
    auth, user = account
    sent = []
    monkeypatch.setattr(
        "cravings.scheduler.send_grocery_list_email",
        lambda to_email, grocery_list, recipe_name: sent.append((to_email, grocery_list)),
    )

    resp = client.post("/api/grocery-list/process-scheduled", headers=auth)
    assert resp.json()["message"] == "No scheduled emails to process"

    client.post("/api/grocery-list/update", json={"items": "- milk"}, headers=auth)
    past = datetime.now() - timedelta(days=2)
    for date in (past.date().isoformat(), "2099-01-01"):
        client.post(
            "/api/grocery-list/schedule",
            json={"scheduledDate": date, "scheduledTime": "08:00"},
            headers=auth,
        )

    resp = client.post("/api/grocery-list/process-scheduled", headers=auth)
    results = resp.json()["results"]
    assert len(results) == 1
    assert results[0]["status"] == "SENT"
    assert sent == [(user["email"], "- milk")]

    # Already sent; not picked up again
    resp = client.post("/api/grocery-list/process-scheduled", headers=auth)
    assert resp.json()["results"] == []

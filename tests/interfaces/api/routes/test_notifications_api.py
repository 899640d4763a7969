"""Tests for the notification, user and health endpoints."""

from __future__ import annotations

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from app.domain.entities import NotificationStatus, NotificationType
from app.interfaces.api.dependencies import (
    get_app_settings,
    get_db,
    get_notification_dispatcher,
)
from main import create_app


@pytest.fixture()
def client(session_factory, dispatcher, settings):
    app = create_app()

    def _get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_notification_dispatcher] = lambda: dispatcher
    app.dependency_overrides[get_app_settings] = lambda: settings
    return TestClient(app)


def _create_user(client, **overrides):
    payload = {
        "name": "Ana Torres",
        "email": "ana@example.com",
        "contact_number": "+15550001111",
    }
    payload.update(overrides)
    response = client.post("/users/", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def test_create_and_read_user(client):
    user = _create_user(client)

    response = client.get(f"/users/{user['id']}")

    assert response.status_code == 200
    assert response.json()["email"] == "ana@example.com"
    assert client.get("/users/999").status_code == 404


def test_duplicate_user_email_is_rejected(client):
    _create_user(client)

    response = client.post("/users/", json={"name": "Other", "email": "ANA@example.com"})

    assert response.status_code == 400


def test_create_notification_sends_immediately(client, email_sender):
    user = _create_user(client)

    response = client.post(
        "/notifications/",
        json={
            "recipient_id": user["id"],
            "type": "TRAINING_PROGRESS",
            "title": "Week 3",
            "message": "Week 3 completed",
            "channels": {"email": {"enabled": True}, "inApp": {"enabled": True}},
            "action_url": "/htd/trainings/9",
        },
    )

    assert response.status_code == 201, response.text
    body = response.json()
    assert body["status"] == NotificationStatus.SENT.value
    assert body["channels"]["email"]["sent"] is True
    assert body["channels"]["inApp"]["enabled"] is True
    assert body["channels"]["sms"]["enabled"] is False
    assert body["recipient"]["name"] == "Ana Torres"
    assert len(email_sender.sent) == 1


def test_create_notification_for_unknown_recipient(client):
    response = client.post(
        "/notifications/",
        json={"recipient_id": 404, "title": "Hello", "message": "World"},
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Notification recipient not found"


def test_payment_reminder_endpoint(client, email_sender):
    user = _create_user(client)

    response = client.post(
        "/notifications/payment-reminder",
        json={
            "candidate_id": "C-42",
            "amount": 500,
            "due_date": "2024-09-01",
            "user_id": user["id"],
        },
    )

    assert response.status_code == 201, response.text
    body = response.json()
    assert body["type"] == NotificationType.PAYMENT_REMINDER.value
    assert "Payment of $500 is due on 9/1/2024" in body["message"]
    assert body["channels"]["sms"]["enabled"] is False
    assert body["status"] == NotificationStatus.SENT.value


def test_scheduled_notification_is_sent_by_sweep(client, clock, email_sender):
    user = _create_user(client)
    scheduled_for = (clock() + timedelta(hours=1)).isoformat()

    created = client.post(
        "/notifications/",
        json={
            "recipient_id": user["id"],
            "title": "Reminder",
            "message": "Tomorrow",
            "channels": {"email": {"enabled": True}},
            "scheduled_for": scheduled_for,
        },
    ).json()
    assert created["status"] == NotificationStatus.PENDING.value

    assert client.post("/notifications/sweep").json() == {"processed": 0}

    clock.advance(hours=2)

    assert client.post("/notifications/sweep").json() == {"processed": 1}
    detail = client.get(f"/notifications/{created['id']}").json()
    assert detail["status"] == NotificationStatus.SENT.value
    assert len(email_sender.sent) == 1


def test_dispatch_endpoint_reports_outcome(client, clock):
    user = _create_user(client)
    created = client.post(
        "/notifications/",
        json={
            "recipient_id": user["id"],
            "title": "Later",
            "message": "Not yet",
            "channels": {"email": {"enabled": True}},
            "scheduled_for": (clock() + timedelta(days=1)).isoformat(),
        },
    ).json()

    early = client.post(f"/notifications/{created['id']}/dispatch")
    assert early.status_code == 200
    assert early.json()["outcome"] == "NOT_ELIGIBLE"
    assert early.json()["success"] is False

    clock.advance(days=2)

    sent = client.post(f"/notifications/{created['id']}/dispatch").json()
    assert sent["outcome"] == "SENT"
    assert sent["success"] is True

    assert client.post("/notifications/999/dispatch").status_code == 404


def test_inbox_listing_and_read_state(client):
    user = _create_user(client)
    for index in range(3):
        client.post(
            "/notifications/",
            json={
                "recipient_id": user["id"],
                "title": f"Update {index}",
                "message": "In-app only",
                "channels": {"inApp": {"enabled": True}},
                "priority": "HIGH" if index == 0 else "LOW",
            },
        )

    page = client.get(
        "/notifications/", params={"recipient_id": user["id"], "page": 1, "limit": 2}
    ).json()
    assert page["pagination"] == {"page": 1, "limit": 2, "total": 3, "pages": 2}
    assert [item["title"] for item in page["notifications"]] == ["Update 2", "Update 1"]

    high = client.get(
        "/notifications/", params={"recipient_id": user["id"], "priority": "HIGH"}
    ).json()
    assert [item["title"] for item in high["notifications"]] == ["Update 0"]

    first_id = page["notifications"][0]["id"]
    read = client.patch(
        f"/notifications/{first_id}/read", params={"recipient_id": user["id"]}
    )
    assert read.status_code == 200
    assert read.json()["is_read"] is True

    unread = client.get(
        "/notifications/", params={"recipient_id": user["id"], "unreadOnly": "true"}
    ).json()
    assert unread["pagination"]["total"] == 2

    updated = client.patch("/notifications/read-all", params={"recipient_id": user["id"]})
    assert updated.json() == {"updated": 2}

    other = client.patch(f"/notifications/{first_id}/read", params={"recipient_id": 999})
    assert other.status_code == 404


def test_unknown_notification_returns_404(client):
    response = client.get("/notifications/12345")

    assert response.status_code == 404
    assert response.json()["detail"] == "Notification not found"


def test_sms_health_endpoint(client):
    response = client.get("/health/sms")

    assert response.status_code == 200
    body = response.json()
    assert body["is_configured"] is False
    assert "TWILIO_ACCOUNT_SID is not configured" in body["issues"]

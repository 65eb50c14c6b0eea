# tests/v1/test_notifications.py
"""Tests for the notification inbox endpoints."""

from datetime import UTC, datetime, timedelta

from fastapi import status

from debate_stage.models import Notification


def _notification(db_session, user, title, minutes_ago=0, read=False):
    notification = Notification(
        user_id=user.id,
        type="new_follower",
        title=title,
        message=None,
        link="",
        read=read,
        created_at=datetime.now(UTC) - timedelta(minutes=minutes_ago),
    )
    db_session.add(notification)
    db_session.commit()
    db_session.refresh(notification)
    return notification


def test_list_notifications_newest_first(client, db_session, auth_token, test_user, other_user):
    _notification(db_session, test_user, "older", minutes_ago=5)
    _notification(db_session, test_user, "newer", minutes_ago=1)
    _notification(db_session, other_user, "not mine")

    response = client.get("/api/v1/notifications", headers=auth_token)

    assert response.status_code == status.HTTP_200_OK
    assert [n["title"] for n in response.json()["notifications"]] == ["newer", "older"]


def test_unread_only_filter(client, db_session, auth_token, test_user):
    _notification(db_session, test_user, "seen", read=True)
    _notification(db_session, test_user, "fresh")

    response = client.get(
        "/api/v1/notifications", params={"unreadOnly": "true"}, headers=auth_token
    )

    assert [n["title"] for n in response.json()["notifications"]] == ["fresh"]


def test_mark_read(client, db_session, auth_token, test_user):
    notification = _notification(db_session, test_user, "ping")

    response = client.post(f"/api/v1/notifications/{notification.id}/read", headers=auth_token)

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["notification"]["read"] is True


def test_mark_read_of_someone_else_is_404(client, db_session, auth_token, other_user):
    notification = _notification(db_session, other_user, "private")

    response = client.post(f"/api/v1/notifications/{notification.id}/read", headers=auth_token)

    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_inbox_requires_auth(client):
    assert client.get("/api/v1/notifications").status_code == status.HTTP_401_UNAUTHORIZED

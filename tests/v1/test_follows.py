# tests/v1/test_follows.py
"""Tests for follow toggling and follower listings."""

from fastapi import status
from sqlalchemy import select

from debate_stage.models import FollowRecord
from debate_stage.models.enums import NotificationType


def _follow(client, path, headers):
    return client.post(f"/api/v1/{path}/follow", headers=headers)


class TestToggleFollow:
    """Follow then unfollow with counter tracking."""

    def test_follow_then_unfollow_claim(self, client, auth_token, test_claim) -> None:
        response = _follow(client, f"claims/{test_claim.id}", auth_token)
        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {
            "success": True,
            "isFollowing": True,
            "claim": {"id": test_claim.id, "followCount": 1},
        }

        response = _follow(client, f"claims/{test_claim.id}", auth_token)
        assert response.json() == {
            "success": True,
            "isFollowing": False,
            "claim": {"id": test_claim.id, "followCount": 0},
        }

    def test_follow_counts_distinct_users(
        self, client, auth_token, other_auth_token, test_perspective
    ) -> None:
        path = f"perspectives/{test_perspective.id}"
        _follow(client, path, auth_token)
        response = _follow(client, path, other_auth_token)

        assert response.json()["perspective"]["followCount"] == 2

    def test_follow_evidence_creates_single_record(
        self, client, db_session, auth_token, test_user, test_evidence
    ) -> None:
        _follow(client, f"evidence/{test_evidence.id}", auth_token)

        records = db_session.scalars(select(FollowRecord)).all()
        assert [(r.target_type, r.target_id, r.user_id) for r in records] == [
            ("evidence", test_evidence.id, test_user.id)
        ]

    def test_follow_state_lookup(self, client, auth_token, test_claim) -> None:
        path = f"/api/v1/claims/{test_claim.id}/follow"
        assert client.get(path, headers=auth_token).json()["isFollowing"] is False

        _follow(client, f"claims/{test_claim.id}", auth_token)
        assert client.get(path, headers=auth_token).json()["isFollowing"] is True


class TestFollowUsers:
    """User targets add the self-follow check and the new-follower notification."""

    def test_follow_user_notifies(
        self, client, notifier, auth_token, test_user, other_user
    ) -> None:
        response = _follow(client, f"users/{other_user.id}", auth_token)

        assert response.json()["user"] == {"id": other_user.id, "followCount": 1}
        assert len(notifier.messages) == 1
        message = notifier.messages[0]
        assert message.type is NotificationType.NEW_FOLLOWER
        assert message.user_id == other_user.id
        assert message.title == "New follower"
        assert message.message == "@alice started following you"
        assert message.link == f"/profile/{test_user.id}"

    def test_unfollow_user_is_silent(self, client, notifier, auth_token, other_user) -> None:
        _follow(client, f"users/{other_user.id}", auth_token)
        _follow(client, f"users/{other_user.id}", auth_token)

        assert len(notifier.messages) == 1

    def test_following_content_never_notifies(
        self, client, notifier, auth_token, test_claim
    ) -> None:
        _follow(client, f"claims/{test_claim.id}", auth_token)

        assert notifier.messages == []

    def test_cannot_follow_yourself(self, client, db_session, auth_token, test_user) -> None:
        response = _follow(client, f"users/{test_user.id}", auth_token)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {"success": False, "error": "Cannot follow yourself"}
        assert db_session.scalars(select(FollowRecord)).all() == []

    def test_unknown_user_is_404(self, client, auth_token) -> None:
        response = _follow(client, "users/424242", auth_token)

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["error"] == "User not found"

    def test_follow_requires_auth(self, client, test_claim) -> None:
        response = client.post(f"/api/v1/claims/{test_claim.id}/follow")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_malformed_id_is_400(self, client, auth_token) -> None:
        response = _follow(client, "evidence/ten", auth_token)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"] == "Invalid evidence ID format"


class TestFollowerListings:
    """Followers and following lists, newest first."""

    def test_followers_and_following(
        self,
        client,
        headers_for,
        test_user,
        other_user,
        moderator,
    ) -> None:
        _follow(client, f"users/{other_user.id}", headers_for(test_user))
        _follow(client, f"users/{other_user.id}", headers_for(moderator))

        response = client.get(f"/api/v1/users/{other_user.id}/followers")
        assert response.status_code == status.HTTP_200_OK
        followers = response.json()["followers"]
        assert [f["username"] for f in followers] == ["mod", "alice"]
        assert set(followers[0]) == {"id", "username", "firstName", "lastName", "avatarUrl"}

        response = client.get(f"/api/v1/users/{test_user.id}/following")
        assert [f["id"] for f in response.json()["following"]] == [other_user.id]

    def test_listing_unknown_user_is_404(self, client) -> None:
        response = client.get("/api/v1/users/777/followers")

        assert response.status_code == status.HTTP_404_NOT_FOUND

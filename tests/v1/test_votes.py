# tests/v1/test_votes.py
"""Tests for the vote endpoints across all votable target types."""

import pytest
from fastapi import status
from sqlalchemy import func, select

from debate_stage.core.errors import AggregationError
from debate_stage.models import VoteRecord
from debate_stage.models.enums import NotificationType
from debate_stage.services.scoring import ClaimScoreAggregator


def _vote(client, path, vote_type, headers):
    return client.post(f"/api/v1/{path}/vote", json={"voteType": vote_type}, headers=headers)


def _vote_count(db_session) -> int:
    return db_session.scalar(select(func.count()).select_from(VoteRecord))


class TestVoteStateMachine:
    """Create, toggle-off and switch through the HTTP surface."""

    def test_upvote_then_same_vote_withdraws(self, client, auth_token, test_evidence) -> None:
        """A second identical vote removes the first."""
        path = f"evidence/{test_evidence.id}"

        response = _vote(client, path, "upvote", auth_token)
        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["success"] is True
        assert data["evidence"] == {
            "id": test_evidence.id,
            "upvotes": 1,
            "downvotes": 0,
            "score": 1,
        }
        assert data["userVote"] == "upvote"

        response = _vote(client, path, "upvote", auth_token)
        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["evidence"]["upvotes"] == 0
        assert data["evidence"]["downvotes"] == 0
        assert data["evidence"]["score"] == 0
        assert data["userVote"] is None

    def test_two_users_opposite_votes(
        self, client, auth_token, other_auth_token, test_evidence
    ) -> None:
        path = f"evidence/{test_evidence.id}"
        _vote(client, path, "upvote", auth_token)
        response = _vote(client, path, "downvote", other_auth_token)

        data = response.json()
        assert data["evidence"] == {
            "id": test_evidence.id,
            "upvotes": 1,
            "downvotes": 1,
            "score": 0,
        }
        assert data["userVote"] == "downvote"

    def test_switch_moves_vote_between_counters(
        self, client, db_session, auth_token, test_user, test_evidence
    ) -> None:
        """Switching direction keeps a single ledger row and moves one count."""
        path = f"evidence/{test_evidence.id}"
        _vote(client, path, "upvote", auth_token)
        response = _vote(client, path, "downvote", auth_token)

        data = response.json()
        assert data["evidence"]["upvotes"] == 0
        assert data["evidence"]["downvotes"] == 1
        assert data["evidence"]["score"] == -1
        assert data["userVote"] == "downvote"

        records = db_session.scalars(select(VoteRecord)).all()
        assert len(records) == 1
        assert records[0].user_id == test_user.id
        assert records[0].direction == -1

    def test_my_vote_reports_current_direction(self, client, auth_token, test_perspective) -> None:
        path = f"/api/v1/perspectives/{test_perspective.id}/my-vote"

        assert client.get(path, headers=auth_token).json() == {"success": True, "userVote": None}

        _vote(client, f"perspectives/{test_perspective.id}", "downvote", auth_token)
        assert client.get(path, headers=auth_token).json() == {
            "success": True,
            "userVote": "downvote",
        }


class TestTargetTypes:
    """Each target type shares the state machine but shapes its response differently."""

    def test_claim_vote_has_no_score_fields(self, client, auth_token, test_claim) -> None:
        response = _vote(client, f"claims/{test_claim.id}", "upvote", auth_token)

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["claim"] == {"id": test_claim.id, "upvotes": 1, "downvotes": 0}

    def test_evidence_vote_returns_claim_total(
        self, client, auth_token, test_claim, test_evidence
    ) -> None:
        response = _vote(client, f"evidence/{test_evidence.id}", "upvote", auth_token)

        assert response.json()["claim"] == {"id": test_claim.id, "totalScore": 1.0}

    def test_perspective_vote_returns_claim_total(
        self, client, auth_token, test_claim, test_perspective
    ) -> None:
        response = _vote(client, f"perspectives/{test_perspective.id}", "downvote", auth_token)

        data = response.json()
        assert data["perspective"]["score"] == -1
        assert data["claim"] == {"id": test_claim.id, "totalScore": -1.0}

    def test_pending_evidence_does_not_move_claim(
        self, client, auth_token, test_claim, make_evidence
    ) -> None:
        evidence = make_evidence(status="pending")

        response = _vote(client, f"evidence/{evidence.id}", "upvote", auth_token)

        data = response.json()
        assert data["evidence"]["upvotes"] == 1
        assert data["claim"]["totalScore"] == 0.0

    def test_reply_vote_does_not_touch_claim(self, client, auth_token, test_reply) -> None:
        response = _vote(client, f"replies/{test_reply.id}", "upvote", auth_token)

        data = response.json()
        assert data["reply"]["score"] == 1
        assert "claim" not in data


class TestVoteErrors:
    """Validation, authentication and existence checks."""

    def test_unknown_target_is_404_without_side_effects(
        self, client, db_session, auth_token, test_evidence
    ) -> None:
        response = _vote(client, "evidence/999999", "upvote", auth_token)

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json() == {"success": False, "error": "Evidence not found"}
        assert _vote_count(db_session) == 0
        db_session.refresh(test_evidence)
        assert (test_evidence.upvotes, test_evidence.downvotes) == (0, 0)

    def test_largest_storable_id_is_404(self, client, auth_token) -> None:
        response = _vote(client, "claims/2147483647", "upvote", auth_token)

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["error"] == "Claim not found"

    @pytest.mark.parametrize("raw_id", ["abc", "0", "-4", "1.5", "2147483648"])
    def test_malformed_id_is_400(self, client, auth_token, raw_id) -> None:
        response = _vote(client, f"claims/{raw_id}", "upvote", auth_token)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {"success": False, "error": "Invalid claim ID format"}

    def test_malformed_vote_type_is_400(self, client, auth_token, test_claim) -> None:
        response = _vote(client, f"claims/{test_claim.id}", "sideways", auth_token)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        data = response.json()
        assert data["success"] is False
        assert data["error"] == "Validation failed"
        assert data["details"]

    def test_missing_token_is_401(self, client, test_claim) -> None:
        response = client.post(
            f"/api/v1/claims/{test_claim.id}/vote",
            json={"voteType": "upvote"},
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json() == {"success": False, "error": "Authentication required"}

    def test_invalid_token_is_401(self, client, test_claim) -> None:
        response = _vote(
            client,
            f"claims/{test_claim.id}",
            "upvote",
            {"Authorization": "Bearer not-a-jwt"},
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["error"] == "Could not validate credentials"


class TestVoteSideEffects:
    """Claim aggregation and reply notifications never fail the vote."""

    def test_aggregation_failure_is_swallowed(
        self, client, mocker, auth_token, test_evidence
    ) -> None:
        mocker.patch.object(
            ClaimScoreAggregator,
            "recompute_claim_score",
            side_effect=AggregationError("store unavailable"),
        )

        response = _vote(client, f"evidence/{test_evidence.id}", "upvote", auth_token)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["evidence"]["upvotes"] == 1
        assert "claim" not in data

    def test_new_reply_vote_notifies_author(
        self, client, notifier, auth_token, test_reply, other_user
    ) -> None:
        _vote(client, f"replies/{test_reply.id}", "upvote", auth_token)

        assert len(notifier.messages) == 1
        message = notifier.messages[0]
        assert message.user_id == other_user.id
        assert message.type is NotificationType.VOTE_RECEIVED
        assert message.title == "Your reply received a Yes vote"
        assert message.message == "@alice upvoted your reply"

    def test_withdraw_and_switch_do_not_notify(
        self, client, notifier, auth_token, test_reply
    ) -> None:
        path = f"replies/{test_reply.id}"
        _vote(client, path, "upvote", auth_token)
        _vote(client, path, "downvote", auth_token)
        _vote(client, path, "downvote", auth_token)

        assert len(notifier.messages) == 1

    def test_revote_after_withdraw_notifies_again(
        self, client, notifier, auth_token, test_reply
    ) -> None:
        path = f"replies/{test_reply.id}"
        _vote(client, path, "upvote", auth_token)
        _vote(client, path, "upvote", auth_token)
        _vote(client, path, "downvote", auth_token)

        assert [m.title for m in notifier.messages] == [
            "Your reply received a Yes vote",
            "Your reply received a No vote",
        ]
        assert notifier.messages[1].message == "@alice downvoted your reply"

    def test_author_voting_own_reply_is_silent(
        self, client, notifier, other_auth_token, test_reply
    ) -> None:
        response = _vote(client, f"replies/{test_reply.id}", "upvote", other_auth_token)

        assert response.status_code == status.HTTP_200_OK
        assert notifier.messages == []

    def test_non_reply_votes_never_notify(
        self, client, notifier, auth_token, test_evidence, test_perspective, test_claim
    ) -> None:
        _vote(client, f"evidence/{test_evidence.id}", "upvote", auth_token)
        _vote(client, f"perspectives/{test_perspective.id}", "upvote", auth_token)
        _vote(client, f"claims/{test_claim.id}", "upvote", auth_token)

        assert notifier.messages == []

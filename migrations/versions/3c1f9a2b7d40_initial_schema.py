"""initial schema

Revision ID: 3c1f9a2b7d40
Revises:
Create Date: 2026-10-19 09:12:44.318205

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "3c1f9a2b7d40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _counters() -> list[sa.Column]:
    return [
        sa.Column("upvotes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("downvotes", sa.Integer(), nullable=False, server_default="0"),
    ]


def _created_at() -> sa.Column:
    return sa.Column("created_at", sa.DateTime(timezone=True), nullable=False)


def upgrade() -> None:
    """Create users, debate content, the vote/follow ledgers and notifications."""
    op.create_table(
        "user_account",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("username", sa.String(length=64), nullable=False),
        sa.Column("first_name", sa.Text(), nullable=True),
        sa.Column("last_name", sa.Text(), nullable=True),
        sa.Column("avatar_url", sa.Text(), nullable=True),
        sa.Column("role", sa.String(length=16), nullable=False, server_default="user"),
        sa.Column("follow_count", sa.Integer(), nullable=False, server_default="0"),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("username"),
    )

    op.create_table(
        "claim",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("author_id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(length=500), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=16), nullable=False, server_default="pending"),
        *_counters(),
        sa.Column("total_score", sa.Float(), nullable=False, server_default="0"),
        sa.Column("follow_count", sa.Integer(), nullable=False, server_default="0"),
        _created_at(),
        sa.ForeignKeyConstraint(["author_id"], ["user_account.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_claim_status", "claim", ["status"])

    for table, text_columns, default_status in (
        (
            "evidence",
            [sa.Column("url", sa.Text(), nullable=True)],
            "pending",
        ),
        (
            "perspective",
            [sa.Column("body", sa.Text(), nullable=False)],
            "approved",
        ),
    ):
        op.create_table(
            table,
            sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
            sa.Column("claim_id", sa.Integer(), nullable=False),
            sa.Column("author_id", sa.Integer(), nullable=False),
            sa.Column("position", sa.String(length=16), nullable=False),
            sa.Column("title", sa.String(length=500), nullable=True),
            *text_columns,
            sa.Column(
                "status", sa.String(length=16), nullable=False, server_default=default_status
            ),
            *_counters(),
            sa.Column("score", sa.Integer(), nullable=False, server_default="0"),
            sa.Column("follow_count", sa.Integer(), nullable=False, server_default="0"),
            _created_at(),
            sa.ForeignKeyConstraint(["claim_id"], ["claim.id"], ondelete="CASCADE"),
            sa.ForeignKeyConstraint(["author_id"], ["user_account.id"]),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index(f"ix_{table}_claim_status", table, ["claim_id", "status"])

    op.create_table(
        "reply",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("parent_type", sa.String(length=16), nullable=False),
        sa.Column("parent_id", sa.Integer(), nullable=False),
        sa.Column("author_id", sa.Integer(), nullable=False),
        sa.Column("body", sa.Text(), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False, server_default="approved"),
        *_counters(),
        sa.Column("score", sa.Integer(), nullable=False, server_default="0"),
        _created_at(),
        sa.ForeignKeyConstraint(["author_id"], ["user_account.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_reply_parent", "reply", ["parent_type", "parent_id"])

    op.create_table(
        "vote_record",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("target_type", sa.String(length=16), nullable=False),
        sa.Column("target_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("direction", sa.SmallInteger(), nullable=False),
        _created_at(),
        sa.CheckConstraint("direction IN (1, -1)", name="ck_vote_record_direction"),
        sa.ForeignKeyConstraint(["user_id"], ["user_account.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "target_type", "target_id", "user_id", name="uq_vote_record_target_user"
        ),
    )
    op.create_index("ix_vote_record_target", "vote_record", ["target_type", "target_id"])

    op.create_table(
        "follow_record",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("target_type", sa.String(length=16), nullable=False),
        sa.Column("target_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        _created_at(),
        sa.ForeignKeyConstraint(["user_id"], ["user_account.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "target_type", "target_id", "user_id", name="uq_follow_record_target_user"
        ),
    )
    op.create_index("ix_follow_record_target", "follow_record", ["target_type", "target_id"])
    op.create_index("ix_follow_record_user", "follow_record", ["user_id"])

    op.create_table(
        "notification",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("type", sa.String(length=32), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("link", sa.Text(), nullable=True),
        sa.Column("read", sa.Boolean(), nullable=False, server_default=sa.false()),
        _created_at(),
        sa.ForeignKeyConstraint(["user_id"], ["user_account.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_notification_user_read", "notification", ["user_id", "read"])


def downgrade() -> None:
    """Drop every table created by this revision."""
    op.drop_index("ix_notification_user_read", table_name="notification")
    op.drop_table("notification")
    op.drop_index("ix_follow_record_user", table_name="follow_record")
    op.drop_index("ix_follow_record_target", table_name="follow_record")
    op.drop_table("follow_record")
    op.drop_index("ix_vote_record_target", table_name="vote_record")
    op.drop_table("vote_record")
    op.drop_index("ix_reply_parent", table_name="reply")
    op.drop_table("reply")
    for table in ("perspective", "evidence"):
        op.drop_index(f"ix_{table}_claim_status", table_name=table)
        op.drop_table(table)
    op.drop_index("ix_claim_status", table_name="claim")
    op.drop_table("claim")
    op.drop_table("user_account")

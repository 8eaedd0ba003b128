"""initial_schema

Create the schema for Meet:
- Users (profiles of identity service accounts)
- Invitations (pending -> accepted | rejected)
- Meetings (derived from accepted invitations, two participants)

Revision ID: 3f1c2a9d7b10
Revises:
Create Date: 2026-10-19 09:12:44.318204

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "3f1c2a9d7b10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    # ========================================================================
    # USERS table
    # ========================================================================
    op.create_table(
        "users",
        sa.Column("id", sa.String(128), nullable=False),  # Identity service user ID
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("display_name", sa.String(255), nullable=False),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("avatar_url", sa.Text(), nullable=False),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_users_display_name", "users", ["display_name"])

    # ========================================================================
    # INVITATIONS table
    # ========================================================================
    op.create_table(
        "invitations",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("sender_id", sa.String(128), nullable=False),
        sa.Column("sender_name", sa.String(255), nullable=False),
        sa.Column("sender_avatar", sa.Text(), nullable=False),
        sa.Column("receiver_id", sa.String(128), nullable=False),
        sa.Column("receiver_name", sa.String(255), nullable=False),
        sa.Column("receiver_avatar", sa.Text(), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("proposed_time", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("updated_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["sender_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["receiver_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            "status IN ('pending', 'accepted', 'rejected')",
            name="ck_invitations_status",
        ),
        sa.CheckConstraint(
            "sender_id <> receiver_id", name="ck_invitations_distinct_parties"
        ),
    )
    op.create_index(
        "idx_invitations_receiver_created",
        "invitations",
        ["receiver_id", sa.text("created_at DESC")],
    )

    # ========================================================================
    # MEETINGS table
    # ========================================================================
    op.create_table(
        "meetings",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column(
            "participants", postgresql.ARRAY(sa.String(128)), nullable=False
        ),  # [sender, receiver]
        sa.Column("participant_names", postgresql.ARRAY(sa.String(255)), nullable=False),
        sa.Column("start_time", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("end_time", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("created_from", sa.UUID(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="scheduled"),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["created_from"], ["invitations.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("created_from", name="uq_meetings_created_from"),
        sa.CheckConstraint(
            "cardinality(participants) = 2", name="ck_meetings_two_participants"
        ),
        sa.CheckConstraint("end_time > start_time", name="ck_meetings_time_range"),
    )
    op.create_index(
        "idx_meetings_participants",
        "meetings",
        ["participants"],
        postgresql_using="gin",
    )
    op.create_index("idx_meetings_start_time", "meetings", ["start_time"])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("idx_meetings_start_time", table_name="meetings")
    op.drop_index("idx_meetings_participants", table_name="meetings")
    op.drop_table("meetings")
    op.drop_index("idx_invitations_receiver_created", table_name="invitations")
    op.drop_table("invitations")
    op.drop_index("idx_users_display_name", table_name="users")
    op.drop_table("users")

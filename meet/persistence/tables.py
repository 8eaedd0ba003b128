"""SQLAlchemy table definitions for Meet.

They match the schema defined in Alembic migrations.
"""

from sqlalchemy import (
    CheckConstraint,
    Column,
    ForeignKey,
    Index,
    MetaData,
    String,
    Table,
    Text,
)
from sqlalchemy.dialects.postgresql import ARRAY, TIMESTAMP, UUID

# Metadata object for all tables
metadata = MetaData()

# ============================================================================
# USERS TABLE (profiles of identity service accounts)
# ============================================================================
users_table = Table(
    "users",
    metadata,
    Column("id", String(128), primary_key=True),  # Identity service user ID
    Column("email", String(255), nullable=False),
    Column("display_name", String(255), nullable=False),
    Column("bio", Text, nullable=True),
    Column("avatar_url", Text, nullable=False),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)

Index("idx_users_display_name", users_table.c.display_name)

# ============================================================================
# INVITATIONS TABLE
# ============================================================================
invitations_table = Table(
    "invitations",
    metadata,
    Column("id", UUID(as_uuid=True), primary_key=True),
    Column("sender_id", String(128), ForeignKey("users.id"), nullable=False),
    Column("sender_name", String(255), nullable=False),
    Column("sender_avatar", Text, nullable=False),
    Column("receiver_id", String(128), ForeignKey("users.id"), nullable=False),
    Column("receiver_name", String(255), nullable=False),
    Column("receiver_avatar", Text, nullable=False),
    Column("title", String(255), nullable=False),
    Column("description", Text, nullable=True),
    Column("proposed_time", TIMESTAMP(timezone=True), nullable=False),
    Column("status", String(20), nullable=False, server_default="pending"),
    Column("created_at", TIMESTAMP(timezone=True), nullable=False),
    Column("updated_at", TIMESTAMP(timezone=True), nullable=False),
    CheckConstraint(
        "status IN ('pending', 'accepted', 'rejected')", name="ck_invitations_status"
    ),
    CheckConstraint("sender_id <> receiver_id", name="ck_invitations_distinct_parties"),
)

Index(
    "idx_invitations_receiver_created",
    invitations_table.c.receiver_id,
    invitations_table.c.created_at.desc(),
)

# ============================================================================
# MEETINGS TABLE
# ============================================================================
meetings_table = Table(
    "meetings",
    metadata,
    Column("id", UUID(as_uuid=True), primary_key=True),
    Column("title", String(255), nullable=False),
    Column("description", Text, nullable=True),
    Column("participants", ARRAY(String(128)), nullable=False),  # [sender, receiver]
    Column("participant_names", ARRAY(String(255)), nullable=False),
    Column("start_time", TIMESTAMP(timezone=True), nullable=False),
    Column("end_time", TIMESTAMP(timezone=True), nullable=False),
    Column(
        "created_from",
        UUID(as_uuid=True),
        ForeignKey("invitations.id"),
        nullable=False,
        unique=True,
    ),
    Column("status", String(20), nullable=False, server_default="scheduled"),
    Column("created_at", TIMESTAMP(timezone=True), nullable=False),
    CheckConstraint(
        "cardinality(participants) = 2", name="ck_meetings_two_participants"
    ),
    CheckConstraint("end_time > start_time", name="ck_meetings_time_range"),
)

Index(
    "idx_meetings_participants",
    meetings_table.c.participants,
    postgresql_using="gin",
)
Index("idx_meetings_start_time", meetings_table.c.start_time)

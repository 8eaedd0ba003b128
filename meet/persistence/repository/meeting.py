"""PostgreSQL implementation of Meeting repository."""

from typing import Optional

from sqlalchemy import insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from meet.domain.model import Meeting
from meet.domain.repository import MEETINGS_CHANNEL, MeetingRepository
from meet.domain.value import InvitationId, MeetingId, UserId
from meet.persistence.changefeed.postgres import notify_change
from meet.persistence.mappers import meeting_to_dict, row_to_meeting
from meet.persistence.tables import meetings_table

from .base import store_errors


class PostgresMeetingRepository(MeetingRepository):
    """PostgreSQL implementation of MeetingRepository."""

    def __init__(self, session: AsyncSession, channel_prefix: str) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
            channel_prefix: Prefix of change notification channels
        """
        self.session = session
        self.channel_prefix = channel_prefix

    async def find_by_id(self, meeting_id: MeetingId) -> Optional[Meeting]:
        """Find a meeting by ID."""
        async with store_errors(self.session, "meetings.find_by_id"):
            stmt = select(meetings_table).where(meetings_table.c.id == meeting_id)
            result = await self.session.execute(stmt)
            row = result.mappings().first()
            return row_to_meeting(dict(row)) if row else None

    async def find_by_invitation(
        self, invitation_id: InvitationId
    ) -> Optional[Meeting]:
        """Find the meeting derived from an invitation."""
        async with store_errors(self.session, "meetings.find_by_invitation"):
            stmt = select(meetings_table).where(
                meetings_table.c.created_from == invitation_id
            )
            result = await self.session.execute(stmt)
            row = result.mappings().first()
            return row_to_meeting(dict(row)) if row else None

    async def find_by_participant(self, participant_id: UserId) -> list[Meeting]:
        """Find a user's meetings, earliest start first."""
        async with store_errors(self.session, "meetings.find_by_participant"):
            stmt = (
                select(meetings_table)
                .where(meetings_table.c.participants.contains([participant_id]))
                .order_by(meetings_table.c.start_time.asc())
            )
            result = await self.session.execute(stmt)
            return [row_to_meeting(dict(row)) for row in result.mappings().all()]

    async def add(self, meeting: Meeting) -> Meeting:
        """Insert a new meeting."""
        async with store_errors(self.session, "meetings.add"):
            stmt = insert(meetings_table).values(**meeting_to_dict(meeting))
            await self.session.execute(stmt)
            await notify_change(
                self.session,
                self.channel_prefix,
                MEETINGS_CHANNEL,
                str(meeting.id),
                meeting.participants,
            )
            await self.session.flush()
            return meeting

"""In-memory meeting repository for testing."""

from typing import Optional

from meet.domain.model.meeting import Meeting
from meet.domain.repository.change_feed import MEETINGS_CHANNEL
from meet.domain.repository.meeting import MeetingRepository
from meet.domain.value import InvitationId, MeetingId, UserId
from meet.persistence.changefeed.inmemory import InMemoryChangeFeed

from .base import InMemoryStore


class InMemoryMeetingRepository(InMemoryStore, MeetingRepository):
    """In-memory implementation of MeetingRepository for testing."""

    def __init__(
        self, change_feed: InMemoryChangeFeed | None = None, latency: float = 0.0
    ) -> None:
        super().__init__(latency)
        self.change_feed = change_feed
        self._meetings: dict[MeetingId, Meeting] = {}

    async def find_by_id(self, meeting_id: MeetingId) -> Optional[Meeting]:
        """Find a meeting by ID."""
        await self._round_trip("find_by_id")
        return self._meetings.get(meeting_id)

    async def find_by_invitation(
        self, invitation_id: InvitationId
    ) -> Optional[Meeting]:
        """Find the meeting derived from an invitation."""
        await self._round_trip("find_by_invitation")
        for meeting in self._meetings.values():
            if meeting.created_from == invitation_id:
                return meeting
        return None

    async def find_by_participant(self, participant_id: UserId) -> list[Meeting]:
        """Find a user's meetings, earliest start first."""
        await self._round_trip("find_by_participant")
        matches = [m for m in self._meetings.values() if m.includes(participant_id)]
        matches.sort(key=lambda m: m.start_time)
        return matches

    async def add(self, meeting: Meeting) -> Meeting:
        """Insert a new meeting."""
        await self._round_trip("add")
        self._meetings[meeting.id] = meeting
        if self.change_feed is not None:
            self.change_feed.publish(
                MEETINGS_CHANNEL, str(meeting.id), meeting.participants
            )
        return meeting

"""Meeting repository interface."""

from abc import ABC, abstractmethod
from typing import Optional

from meet.domain.model.meeting import Meeting
from meet.domain.value import InvitationId, MeetingId, UserId


class MeetingRepository(ABC):
    """Repository for Meeting entity.

    Every write publishes a change event on the meetings channel with
    both participants as audience.
    """

    @abstractmethod
    async def find_by_id(self, meeting_id: MeetingId) -> Optional[Meeting]:
        """Find a meeting by ID."""
        pass

    @abstractmethod
    async def find_by_invitation(
        self, invitation_id: InvitationId
    ) -> Optional[Meeting]:
        """Find the meeting derived from an invitation, if any."""
        pass

    @abstractmethod
    async def find_by_participant(self, participant_id: UserId) -> list[Meeting]:
        """Find all meetings a user takes part in.

        Args:
            participant_id: The participant's user ID

        Returns:
            Meetings ordered by start_time ascending
        """
        pass

    @abstractmethod
    async def add(self, meeting: Meeting) -> Meeting:
        """Insert a new meeting.

        Args:
            meeting: The meeting to insert

        Returns:
            The stored meeting
        """
        pass

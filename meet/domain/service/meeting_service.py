"""Meeting domain service.

Holds the pure derivation of a meeting from an accepted invitation and the
meeting store operations.
"""

from datetime import datetime
from typing import Iterable
from uuid import uuid4

import logfire

from meet.domain.error import ValidationError
from meet.domain.model.common import utcnow
from meet.domain.model.invitation import Invitation
from meet.domain.model.meeting import MEETING_DURATION, Meeting, MeetingDraft
from meet.domain.repository import MEETINGS_CHANNEL, ChangeFeed, MeetingRepository
from meet.domain.subscription import LiveQuery, SnapshotListener, Subscription
from meet.domain.value import (
    InvitationId,
    InvitationStatus,
    MeetingId,
    MeetingStatus,
    MeetingTiming,
    UserId,
)

from .base import Service


def derive_meeting(invitation: Invitation) -> MeetingDraft:
    """Build the meeting draft for an accepted invitation.

    Pure function: the same invitation always yields the same draft.
    The sender is always participant 0.

    Args:
        invitation: An invitation with status ACCEPTED

    Returns:
        Meeting draft lasting MEETING_DURATION from the proposed time

    Raises:
        ValidationError: If the invitation is not accepted
    """
    if invitation.status != InvitationStatus.ACCEPTED:
        raise ValidationError(
            f"Meetings can only be derived from accepted invitations, "
            f"invitation {invitation.id} is {invitation.status.value}"
        )

    return MeetingDraft(
        title=invitation.title,
        description=invitation.description,
        participants=(invitation.sender_id, invitation.receiver_id),
        participant_names=(invitation.sender_name, invitation.receiver_name),
        start_time=invitation.proposed_time,
        end_time=invitation.proposed_time + MEETING_DURATION,
        created_from=invitation.id,
        status=MeetingStatus.SCHEDULED,
    )


class MeetingService(Service):
    """Domain service for the meeting store."""

    def __init__(
        self, meeting_repository: MeetingRepository, change_feed: ChangeFeed
    ) -> None:
        """Initialize meeting service.

        Args:
            meeting_repository: Meeting repository
            change_feed: Feed of committed writes for live queries
        """
        self.meeting_repository = meeting_repository
        self.change_feed = change_feed

    async def persist(self, draft: MeetingDraft, now: datetime | None = None) -> Meeting:
        """Store a meeting draft, assigning its ID and creation time.

        Args:
            draft: Meeting draft from derive_meeting
            now: Creation instant (defaults to the current time)

        Returns:
            Stored meeting
        """
        with logfire.span(
            "meeting_service.persist", created_from=str(draft.created_from)
        ):
            meeting = Meeting(
                **draft.model_dump(),
                id=MeetingId(uuid4()),
                created_at=now or utcnow(),
            )
            saved = await self.meeting_repository.add(meeting)
            logfire.info(
                "Meeting created",
                meeting_id=str(saved.id),
                created_from=str(saved.created_from),
                start_time=saved.start_time.isoformat(),
            )
            return saved

    async def find_by_invitation(self, invitation_id: InvitationId) -> Meeting | None:
        """Find the meeting created from an invitation, if any."""
        return await self.meeting_repository.find_by_invitation(invitation_id)

    async def list_for_participant(self, participant_id: UserId) -> list[Meeting]:
        """List a user's meetings, earliest start first."""
        with logfire.span(
            "meeting_service.list_for_participant", participant_id=participant_id
        ):
            meetings = await self.meeting_repository.find_by_participant(participant_id)
            logfire.info(
                "Meetings listed", participant_id=participant_id, count=len(meetings)
            )
            return meetings

    def subscribe(
        self, participant_id: UserId, on_change: SnapshotListener
    ) -> Subscription:
        """Subscribe to the meetings a user takes part in.

        on_change receives the full list (earliest start first) once, then
        again after every write that concerns the participant.
        """
        logfire.info("Meeting subscription opened", participant_id=participant_id)
        query: LiveQuery[Meeting] = LiveQuery(
            name="meetings",
            change_feed=self.change_feed,
            channel=MEETINGS_CHANNEL,
            key=participant_id,
            fetch=lambda: self.meeting_repository.find_by_participant(participant_id),
            listener=on_change,
        )
        return query.start()

    @staticmethod
    def classify(meeting: Meeting, now: datetime | None = None) -> MeetingTiming:
        """Upcoming if the meeting starts strictly after now, else past."""
        now = now or utcnow()
        if meeting.start_time > now:
            return MeetingTiming.UPCOMING
        return MeetingTiming.PAST

    @classmethod
    def partition(
        cls, meetings: Iterable[Meeting], now: datetime | None = None
    ) -> tuple[list[Meeting], list[Meeting]]:
        """Split meetings into (upcoming, past), keeping their order."""
        now = now or utcnow()
        upcoming: list[Meeting] = []
        past: list[Meeting] = []
        for meeting in meetings:
            if cls.classify(meeting, now) == MeetingTiming.UPCOMING:
                upcoming.append(meeting)
            else:
                past.append(meeting)
        return upcoming, past

"""Get meetings use case."""

from datetime import datetime

from pydantic import BaseModel

from meet.domain.model import Meeting
from meet.domain.model.common import utcnow
from meet.domain.service import MeetingService
from meet.domain.value import MeetingStatus, MeetingTiming, UserId


class MeetingInfo(BaseModel):
    """Meeting as seen by one of its participants."""

    id: str
    title: str
    description: str | None
    participants: list[str]
    participant_names: list[str]
    other_participant_name: str
    start_time: datetime
    end_time: datetime
    created_from: str
    status: MeetingStatus
    timing: MeetingTiming

    @classmethod
    def from_meeting(
        cls, meeting: Meeting, viewer_id: UserId, now: datetime | None = None
    ) -> "MeetingInfo":
        return cls(
            id=str(meeting.id),
            title=meeting.title,
            description=meeting.description,
            participants=list(meeting.participants),
            participant_names=list(meeting.participant_names),
            other_participant_name=meeting.other_participant_name(viewer_id),
            start_time=meeting.start_time,
            end_time=meeting.end_time,
            created_from=str(meeting.created_from),
            status=meeting.status,
            timing=MeetingService.classify(meeting, now),
        )


class GetMeetingsRequest(BaseModel):
    """Get meetings request."""

    participant_id: str


class GetMeetingsResponse(BaseModel):
    """A user's meetings split by the current time, earliest start first."""

    upcoming: list[MeetingInfo]
    past: list[MeetingInfo]


class GetMeetingsUseCase:
    """Use case for reading a user's meetings."""

    def __init__(self, meeting_service: MeetingService) -> None:
        self.meeting_service = meeting_service

    async def execute(
        self, request: GetMeetingsRequest, now: datetime | None = None
    ) -> GetMeetingsResponse:
        viewer_id = UserId(request.participant_id)
        now = now or utcnow()
        meetings = await self.meeting_service.list_for_participant(viewer_id)
        upcoming, past = MeetingService.partition(meetings, now)
        return GetMeetingsResponse(
            upcoming=[MeetingInfo.from_meeting(m, viewer_id, now) for m in upcoming],
            past=[MeetingInfo.from_meeting(m, viewer_id, now) for m in past],
        )

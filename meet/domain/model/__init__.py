"""Domain model entities for Meet."""

from meet.domain.model.invitation import Invitation
from meet.domain.model.meeting import MEETING_DURATION, Meeting, MeetingDraft
from meet.domain.model.user import User

__all__ = [
    "User",
    "Invitation",
    "Meeting",
    "MeetingDraft",
    "MEETING_DURATION",
]

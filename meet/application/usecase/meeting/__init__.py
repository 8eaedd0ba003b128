"""Meeting use cases."""

from .get_meetings import GetMeetingsUseCase, MeetingInfo

__all__ = ["GetMeetingsUseCase", "MeetingInfo"]

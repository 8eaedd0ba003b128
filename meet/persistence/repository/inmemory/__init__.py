"""In-memory repository implementations for testing."""

from .invitation import InMemoryInvitationRepository
from .meeting import InMemoryMeetingRepository
from .user import InMemoryUserRepository

__all__ = [
    "InMemoryInvitationRepository",
    "InMemoryMeetingRepository",
    "InMemoryUserRepository",
]

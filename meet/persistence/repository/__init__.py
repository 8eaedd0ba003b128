"""PostgreSQL repository implementations."""

from meet.persistence.repository.invitation import PostgresInvitationRepository
from meet.persistence.repository.meeting import PostgresMeetingRepository
from meet.persistence.repository.user import PostgresUserRepository

__all__ = [
    "PostgresInvitationRepository",
    "PostgresMeetingRepository",
    "PostgresUserRepository",
]

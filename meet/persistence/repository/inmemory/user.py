"""In-memory user repository for testing."""

from typing import Optional

from meet.domain.model.user import User
from meet.domain.repository.user import UserRepository
from meet.domain.value import UserId

from .base import InMemoryStore


class InMemoryUserRepository(InMemoryStore, UserRepository):
    """In-memory implementation of UserRepository for testing."""

    def __init__(self, latency: float = 0.0) -> None:
        super().__init__(latency)
        self._users: dict[UserId, User] = {}

    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        """Find a user by ID."""
        await self._round_trip("find_by_id")
        return self._users.get(user_id)

    async def find_all_by_display_name(self) -> list[User]:
        """List every user ordered by display name (code point order)."""
        await self._round_trip("find_all_by_display_name")
        return sorted(self._users.values(), key=lambda u: u.display_name)

    async def save(self, user: User) -> User:
        """Save or update a user."""
        await self._round_trip("save")
        self._users[user.id] = user
        return user

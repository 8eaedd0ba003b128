"""User repository interface."""

from abc import ABC, abstractmethod
from typing import Optional

from meet.domain.model.user import User
from meet.domain.value import UserId


class UserRepository(ABC):
    """Repository for User entity.

    Defines the contract for user persistence operations.
    Implementations live in the infrastructure layer.
    """

    @abstractmethod
    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        """Find a user by ID.

        Args:
            user_id: The user's unique identifier

        Returns:
            The user if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_all_by_display_name(self) -> list[User]:
        """List every user ordered by display name ascending.

        Ordering is case-sensitive (code point order).

        Returns:
            All users
        """
        pass

    @abstractmethod
    async def save(self, user: User) -> User:
        """Save a user (create or update).

        Args:
            user: The user to save

        Returns:
            The saved user
        """
        pass

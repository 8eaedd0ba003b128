"""User domain service."""

from dataclasses import dataclass, field
from datetime import datetime

import logfire

from meet.domain.error import NotFoundError, StoreUnavailableError, ValidationError
from meet.domain.model import User
from meet.domain.model.common import utcnow
from meet.domain.repository import UserRepository
from meet.domain.value import Identity, UserId

from .base import Service


@dataclass
class DirectoryListing:
    """Result of listing the user directory.

    A failed read yields no users and carries the error instead of raising.
    """

    users: list[User] = field(default_factory=list)
    error: StoreUnavailableError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class UserService(Service):
    """Domain service for user profiles and the directory."""

    def __init__(self, user_repository: UserRepository, avatar_url_template: str) -> None:
        """Initialize user service.

        Args:
            user_repository: User repository
            avatar_url_template: Default avatar URL, formatted with user_id
        """
        self.user_repository = user_repository
        self.avatar_url_template = avatar_url_template

    async def get_by_id(self, user_id: UserId) -> User:
        """Get user by ID.

        Args:
            user_id: User ID

        Returns:
            User entity

        Raises:
            NotFoundError: If user not found
        """
        with logfire.span("user_service.get_by_id", user_id=user_id):
            user = await self.user_repository.find_by_id(user_id)
            if not user:
                logfire.warn("User not found", user_id=user_id)
                raise NotFoundError("User", user_id)
            return user

    async def list_users(self) -> DirectoryListing:
        """List all users ordered by display name.

        Returns:
            Directory listing; on a store failure the listing is empty and
            carries the error
        """
        with logfire.span("user_service.list_users"):
            try:
                users = await self.user_repository.find_all_by_display_name()
            except StoreUnavailableError as e:
                logfire.error("Failed to load users", error=str(e))
                return DirectoryListing(error=e)
            logfire.info("Users listed", count=len(users))
            return DirectoryListing(users=users)

    async def create_profile(
        self,
        identity: Identity,
        display_name: str,
        bio: str | None = None,
        now: datetime | None = None,
    ) -> User:
        """Create the profile record for a newly registered identity.

        Args:
            identity: Identity returned by the identity service
            display_name: Name shown in the directory and on invitations
            bio: Optional short bio
            now: Creation instant (defaults to the current time)

        Returns:
            Created user

        Raises:
            ValidationError: If the display name is blank
        """
        display_name = display_name.strip()
        if not display_name:
            raise ValidationError("Display name must not be empty")

        with logfire.span("user_service.create_profile", user_id=identity.user_id):
            user = User(
                id=identity.user_id,
                email=identity.email,
                display_name=display_name,
                bio=bio or None,
                avatar_url=self.avatar_url_template.format(user_id=identity.user_id),
                created_at=now or utcnow(),
            )
            saved = await self.user_repository.save(user)
            logfire.info("User profile created", user_id=saved.id)
            return saved

    async def update_profile(
        self,
        user_id: UserId,
        display_name: str | None = None,
        bio: str | None = None,
        avatar_url: str | None = None,
    ) -> User:
        """Update the editable profile fields of a user.

        Fields left as None keep their current value. Invitations already
        sent keep the name and avatar they were created with.

        Raises:
            NotFoundError: If user not found
            ValidationError: If the new display name is blank
        """
        with logfire.span("user_service.update_profile", user_id=user_id):
            user = await self.get_by_id(user_id)

            if display_name is not None and not display_name.strip():
                raise ValidationError("Display name must not be empty")

            updated = user.model_copy(
                update={
                    "display_name": display_name.strip()
                    if display_name is not None
                    else user.display_name,
                    "bio": bio if bio is not None else user.bio,
                    "avatar_url": avatar_url
                    if avatar_url is not None
                    else user.avatar_url,
                }
            )
            saved = await self.user_repository.save(updated)
            logfire.info("User profile updated", user_id=user_id)
            return saved

"""List users use case."""

from pydantic import BaseModel

from meet.domain.service import UserService
from meet.domain.value import UserId


class ListUsersRequest(BaseModel):
    """List users request."""

    viewer_id: str


class DirectoryEntry(BaseModel):
    """One user in the directory."""

    user_id: str
    display_name: str
    bio: str | None
    avatar_url: str
    is_current_user: bool


class ListUsersResponse(BaseModel):
    """List users response.

    error is set when the directory could not be read; users is then empty.
    """

    users: list[DirectoryEntry]
    error: str | None = None


class ListUsersUseCase:
    """Use case for browsing the user directory."""

    def __init__(self, user_service: UserService) -> None:
        self.user_service = user_service

    async def execute(self, request: ListUsersRequest) -> ListUsersResponse:
        """List every user ordered by display name, flagging the viewer."""
        listing = await self.user_service.list_users()
        viewer_id = UserId(request.viewer_id)

        return ListUsersResponse(
            users=[
                DirectoryEntry(
                    user_id=user.id,
                    display_name=user.display_name,
                    bio=user.bio,
                    avatar_url=user.avatar_url,
                    is_current_user=user.id == viewer_id,
                )
                for user in listing.users
            ],
            error=str(listing.error) if listing.error else None,
        )

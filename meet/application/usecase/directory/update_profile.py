"""Update profile use case."""

from pydantic import BaseModel, Field

from meet.domain.service import UserService
from meet.domain.value import UserId


class UpdateProfileRequest(BaseModel):
    """Update profile request."""

    user_id: str  # From authenticated user
    display_name: str | None = Field(default=None, max_length=255)
    bio: str | None = Field(default=None, max_length=500)
    avatar_url: str | None = None


class UpdateProfileResponse(BaseModel):
    """Update profile response."""

    user_id: str
    email: str
    display_name: str
    bio: str | None
    avatar_url: str


class UpdateProfileUseCase:
    """Use case for editing the signed-in user's profile.

    Invitations that were already sent keep the old name and avatar.
    """

    def __init__(self, user_service: UserService) -> None:
        """Initialize update profile use case.

        Args:
            user_service: User domain service
        """
        self.user_service = user_service

    async def execute(self, request: UpdateProfileRequest) -> UpdateProfileResponse:
        """Execute update profile flow.

        Raises:
            NotFoundError: If user not found
            ValidationError: If the display name is blank
        """
        user = await self.user_service.update_profile(
            UserId(request.user_id),
            display_name=request.display_name,
            bio=request.bio,
            avatar_url=request.avatar_url,
        )
        return UpdateProfileResponse(
            user_id=user.id,
            email=user.email,
            display_name=user.display_name,
            bio=user.bio,
            avatar_url=user.avatar_url,
        )

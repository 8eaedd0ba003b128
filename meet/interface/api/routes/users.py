"""User directory routes."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Cookie
from pydantic import BaseModel, Field

from meet.application.usecase.directory import ListUsersUseCase, UpdateProfileUseCase
from meet.application.usecase.directory.list_users import (
    ListUsersRequest,
    ListUsersResponse,
)
from meet.application.usecase.directory.update_profile import (
    UpdateProfileRequest,
    UpdateProfileResponse,
)
from meet.domain.service import JWTService
from meet.interface.api.authentication import require_identity

router = APIRouter(prefix="/users", tags=["users"], route_class=DishkaRoute)


class UpdateProfileAPIRequest(BaseModel):
    """API request for updating the current user's profile."""

    display_name: str | None = Field(default=None, max_length=255)
    bio: str | None = Field(default=None, max_length=500)
    avatar_url: str | None = None


@router.get("", response_model=ListUsersResponse)
async def list_users(
    list_users_use_case: FromDishka[ListUsersUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> ListUsersResponse:
    """List every user ordered by display name.

    If the directory cannot be read the list is empty and error is set.
    """
    identity = require_identity(jwt_service, auth_token)
    return await list_users_use_case.execute(
        ListUsersRequest(viewer_id=identity.user_id)
    )


@router.patch("/me", response_model=UpdateProfileResponse)
async def update_my_profile(
    request: UpdateProfileAPIRequest,
    update_profile_use_case: FromDishka[UpdateProfileUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> UpdateProfileResponse:
    """Update the current user's display name, bio or avatar.

    Example:
        PATCH /users/me
        {"display_name": "Alice B.", "bio": "Product designer"}
    """
    identity = require_identity(jwt_service, auth_token)
    return await update_profile_use_case.execute(
        UpdateProfileRequest(
            user_id=identity.user_id,
            display_name=request.display_name,
            bio=request.bio,
            avatar_url=request.avatar_url,
        )
    )

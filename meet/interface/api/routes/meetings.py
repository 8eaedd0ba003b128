"""Meeting routes."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Cookie

from meet.application.usecase.meeting import GetMeetingsUseCase
from meet.application.usecase.meeting.get_meetings import (
    GetMeetingsRequest,
    GetMeetingsResponse,
)
from meet.domain.service import JWTService
from meet.interface.api.authentication import require_identity

router = APIRouter(prefix="/meetings", tags=["meetings"], route_class=DishkaRoute)


@router.get("", response_model=GetMeetingsResponse)
async def get_meetings(
    get_meetings_use_case: FromDishka[GetMeetingsUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> GetMeetingsResponse:
    """List the current user's meetings split into upcoming and past."""
    identity = require_identity(jwt_service, auth_token)
    return await get_meetings_use_case.execute(
        GetMeetingsRequest(participant_id=identity.user_id)
    )

"""Logout use case."""

from pydantic import BaseModel

from meet.application.usecase.base import BaseUseCase
from meet.domain.service import IdentityService, JWTService


class LogoutRequest(BaseModel):
    """Logout request."""

    token: str | None = None


class LogoutUseCase(BaseUseCase):
    """Use case for ending a session.

    Logging out without a valid token is not an error.
    """

    def __init__(
        self, identity_service: IdentityService, jwt_service: JWTService
    ) -> None:
        self.identity_service = identity_service
        self.jwt_service = jwt_service

    async def execute(self, request: LogoutRequest) -> None:
        identity = self.jwt_service.get_identity_from_token(request.token)
        if identity is not None:
            await self.identity_service.sign_out(identity)

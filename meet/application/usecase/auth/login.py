"""Login use case."""

from pydantic import BaseModel

from meet.application.usecase.base import BaseUseCase
from meet.domain.service import IdentityService, JWTService


class LoginRequest(BaseModel):
    """Login request."""

    email: str
    password: str


class LoginResponse(BaseModel):
    """Login response."""

    user_id: str
    email: str
    token: str


class LoginUseCase(BaseUseCase):
    """Use case for signing in with email and password."""

    def __init__(
        self, identity_service: IdentityService, jwt_service: JWTService
    ) -> None:
        self.identity_service = identity_service
        self.jwt_service = jwt_service

    async def execute(self, request: LoginRequest) -> LoginResponse:
        """Authenticate and issue a session token.

        Raises:
            IdentityError: If the credentials are rejected
        """
        identity = await self.identity_service.sign_in(request.email, request.password)
        token = self.jwt_service.create_token(identity)
        return LoginResponse(user_id=identity.user_id, email=identity.email, token=token)

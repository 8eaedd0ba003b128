"""Register use case."""

from pydantic import BaseModel, Field

from meet.application.usecase.base import BaseUseCase
from meet.domain.service import IdentityService, JWTService, UserService


class RegisterRequest(BaseModel):
    """Register request."""

    email: str
    password: str
    display_name: str = Field(min_length=1, max_length=255)
    bio: str | None = Field(default=None, max_length=500)


class RegisterResponse(BaseModel):
    """Register response."""

    user_id: str
    email: str
    display_name: str
    avatar_url: str
    token: str


class RegisterUseCase(BaseUseCase):
    """Use case for creating an account and its directory profile."""

    def __init__(
        self,
        identity_service: IdentityService,
        user_service: UserService,
        jwt_service: JWTService,
    ) -> None:
        """Initialize register use case.

        Args:
            identity_service: Identity domain service
            user_service: User domain service
            jwt_service: JWT token domain service
        """
        self.identity_service = identity_service
        self.user_service = user_service
        self.jwt_service = jwt_service

    async def execute(self, request: RegisterRequest) -> RegisterResponse:
        """Execute registration flow.

        Steps:
        1. Create the account with the identity service
        2. Create the user's profile in the directory
        3. Issue a session token

        Raises:
            IdentityError: If the identity service refuses the account
            ValidationError: If the display name is blank
        """
        identity = await self.identity_service.sign_up(
            request.email, request.password, request.display_name
        )
        user = await self.user_service.create_profile(
            identity, request.display_name, request.bio
        )
        token = self.jwt_service.create_token(identity)

        return RegisterResponse(
            user_id=user.id,
            email=user.email,
            display_name=user.display_name,
            avatar_url=user.avatar_url,
            token=token,
        )

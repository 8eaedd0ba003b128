"""Authentication routes."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Cookie, Response, status
from pydantic import BaseModel, Field

from meet.application.usecase.auth import (
    GetCurrentUserUseCase,
    LoginUseCase,
    LogoutUseCase,
    RegisterUseCase,
)
from meet.application.usecase.auth.get_current_user import (
    GetCurrentUserRequest,
    GetCurrentUserResponse,
)
from meet.application.usecase.auth.login import LoginRequest
from meet.application.usecase.auth.logout import LogoutRequest
from meet.application.usecase.auth.register import RegisterRequest
from meet.config import Settings
from meet.domain.error import NotFoundError
from meet.interface.api.authentication import clear_auth_cookie, set_auth_cookie
from meet.util.jwt import JWTError

router = APIRouter(prefix="/auth", tags=["authentication"], route_class=DishkaRoute)


class RegisterAPIRequest(BaseModel):
    """API request for creating an account."""

    email: str
    password: str
    display_name: str = Field(min_length=1, max_length=255)
    bio: str | None = Field(default=None, max_length=500)


class LoginAPIRequest(BaseModel):
    """API request for signing in."""

    email: str
    password: str


class SessionResponse(BaseModel):
    """Identity of the newly signed-in user."""

    user_id: str
    email: str


class LogoutResponse(BaseModel):
    """Logout response."""

    success: bool
    message: str


class AuthStatusResponse(BaseModel):
    """Authentication status.

    Used by /auth/me to return the current user if authenticated, or
    indicate unauthenticated state without raising an error.
    """

    authenticated: bool
    user: GetCurrentUserResponse | None = None


@router.post(
    "/register", response_model=SessionResponse, status_code=status.HTTP_201_CREATED
)
async def register(
    request: RegisterAPIRequest,
    response: Response,
    register_use_case: FromDishka[RegisterUseCase],
    settings: FromDishka[Settings],
) -> SessionResponse:
    """Create an account, its directory profile and a session.

    Example:
        POST /auth/register
        {
            "email": "alice@example.com",
            "password": "secret1",
            "display_name": "Alice"
        }

        Response (201, sets cookie auth_token):
        {
            "user_id": "Xb3...",
            "email": "alice@example.com"
        }
    """
    result = await register_use_case.execute(
        RegisterRequest(
            email=request.email,
            password=request.password,
            display_name=request.display_name,
            bio=request.bio,
        )
    )
    set_auth_cookie(response, result.token, settings)
    return SessionResponse(user_id=result.user_id, email=result.email)


@router.post("/login", response_model=SessionResponse)
async def login(
    request: LoginAPIRequest,
    response: Response,
    login_use_case: FromDishka[LoginUseCase],
    settings: FromDishka[Settings],
) -> SessionResponse:
    """Sign in with email and password and set the session cookie."""
    result = await login_use_case.execute(
        LoginRequest(email=request.email, password=request.password)
    )
    set_auth_cookie(response, result.token, settings)
    return SessionResponse(user_id=result.user_id, email=result.email)


@router.post("/logout", response_model=LogoutResponse)
async def logout(
    response: Response,
    logout_use_case: FromDishka[LogoutUseCase],
    auth_token: str | None = Cookie(default=None),
) -> LogoutResponse:
    """Sign out and clear the session cookie."""
    await logout_use_case.execute(LogoutRequest(token=auth_token))
    clear_auth_cookie(response)
    return LogoutResponse(success=True, message="Successfully logged out")


@router.get("/me", response_model=AuthStatusResponse)
async def get_current_user(
    get_current_user_use_case: FromDishka[GetCurrentUserUseCase],
    auth_token: str | None = Cookie(default=None),
) -> AuthStatusResponse:
    """Get current user if authenticated, or return unauthenticated status.

    Safe to call without authentication: it returns authenticated=false
    instead of an error.
    """
    if not auth_token:
        return AuthStatusResponse(authenticated=False)

    try:
        user = await get_current_user_use_case.execute(
            GetCurrentUserRequest(token=auth_token)
        )
    except (JWTError, NotFoundError):
        return AuthStatusResponse(authenticated=False)
    return AuthStatusResponse(authenticated=True, user=user)

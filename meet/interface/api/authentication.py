"""Cookie authentication for API routes."""

from fastapi import HTTPException, Response, status

from meet.config import Settings
from meet.domain.service import JWTService
from meet.domain.value import Identity

AUTH_COOKIE = "auth_token"


def require_identity(jwt_service: JWTService, auth_token: str | None) -> Identity:
    """Resolve the caller's identity from the auth cookie.

    Raises:
        HTTPException: 401 if the token is missing, invalid or expired
    """
    identity = jwt_service.get_identity_from_token(auth_token)
    if identity is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return identity


def set_auth_cookie(response: Response, token: str, settings: Settings) -> None:
    """Attach the session token cookie.

    Production serves the API and frontend from different hosts, which
    needs SameSite=None and Secure; development is same-site over HTTP.
    """
    is_production = settings.environment == "production"
    response.set_cookie(
        key=AUTH_COOKIE,
        value=token,
        httponly=True,
        secure=is_production,
        samesite="none" if is_production else "lax",
        path="/",
        max_age=settings.auth.jwt_expiry_days * 24 * 60 * 60,
    )


def clear_auth_cookie(response: Response) -> None:
    response.delete_cookie(key=AUTH_COOKIE, path="/")

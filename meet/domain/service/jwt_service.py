"""JWT token domain service."""

import logfire

from meet.config import AuthSettings
from meet.domain.value import Identity
from meet.util.jwt import JWTError, TokenPayload, create_token, verify_token

from .base import Service


class JWTService(Service):
    """Domain service for session tokens."""

    def __init__(self, auth_settings: AuthSettings) -> None:
        """Initialize JWT service.

        Args:
            auth_settings: Authentication settings
        """
        self.auth_settings = auth_settings

    def create_token(self, identity: Identity) -> str:
        """Create a session token for an identity."""
        with logfire.span("jwt_service.create_token", user_id=identity.user_id):
            token = create_token(identity.user_id, identity.email, self.auth_settings)
            logfire.info("JWT token created", user_id=identity.user_id)
            return token

    def verify_token(self, token: str) -> TokenPayload:
        """Verify JWT token and extract payload.

        Args:
            token: JWT token string

        Returns:
            Token payload

        Raises:
            JWTError: If token is invalid or expired
        """
        with logfire.span("jwt_service.verify_token"):
            try:
                payload = verify_token(token, self.auth_settings)
            except JWTError as e:
                logfire.warn("JWT token verification failed", error=str(e))
                raise
            logfire.debug("JWT token verified", user_id=payload.user_id)
            return payload

    def get_identity_from_token(self, token: str | None) -> Identity | None:
        """Resolve the identity carried by a token without raising.

        Args:
            token: JWT token string (optional)

        Returns:
            Identity if the token is valid, None if it is missing or invalid
        """
        if not token:
            return None

        try:
            payload = self.verify_token(token)
        except JWTError:
            return None
        return Identity(user_id=payload.user_id, email=payload.email)

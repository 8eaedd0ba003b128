"""Identity domain service."""

import logfire

from meet.domain.error import IdentityError
from meet.domain.value import Identity

from .base import Service


class IdentityClient:
    """Interface to an external identity service."""

    async def sign_up(self, email: str, password: str, display_name: str) -> Identity:
        """Register a new account.

        Args:
            email: Account email
            password: Account password
            display_name: Name stored on the account

        Returns:
            Identity of the new account

        Raises:
            IdentityError: If the account cannot be created
        """
        raise NotImplementedError

    async def sign_in(self, email: str, password: str) -> Identity:
        """Authenticate with email and password.

        Returns:
            Identity of the authenticated account

        Raises:
            IdentityError: If the credentials are rejected
        """
        raise NotImplementedError

    async def sign_out(self, identity: Identity) -> None:
        """End the identity's session with the provider."""
        raise NotImplementedError


class IdentityService(Service):
    """Domain service for sign-up, sign-in and sign-out.

    Failures from the identity client are logged and re-raised as typed
    IdentityError values; they are never swallowed.
    """

    def __init__(self, identity_client: IdentityClient) -> None:
        """Initialize identity service.

        Args:
            identity_client: Identity service client
        """
        self.identity_client = identity_client

    async def sign_up(self, email: str, password: str, display_name: str) -> Identity:
        """Register a new account. See IdentityClient.sign_up."""
        with logfire.span("identity_service.sign_up", email=email):
            try:
                identity = await self.identity_client.sign_up(
                    email, password, display_name
                )
            except IdentityError as e:
                logfire.warn("Sign-up failed", email=email, reason=e.reason.value)
                raise
            logfire.info("Account registered", user_id=identity.user_id)
            return identity

    async def sign_in(self, email: str, password: str) -> Identity:
        """Authenticate with email and password. See IdentityClient.sign_in."""
        with logfire.span("identity_service.sign_in", email=email):
            try:
                identity = await self.identity_client.sign_in(email, password)
            except IdentityError as e:
                logfire.warn("Sign-in failed", email=email, reason=e.reason.value)
                raise
            logfire.info("Signed in", user_id=identity.user_id)
            return identity

    async def sign_out(self, identity: Identity) -> None:
        """End the identity's session."""
        with logfire.span("identity_service.sign_out", user_id=identity.user_id):
            await self.identity_client.sign_out(identity)
            logfire.info("Signed out", user_id=identity.user_id)

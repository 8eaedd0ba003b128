"""Client-side identity session.

Tracks which identity (if any) a client process is signed in as and tells
listeners about every sign-in and sign-out, in the order they happened.

Usage:
    session = IdentitySession(identity_service)
    await session.on_session_change(render_for_identity)
    await session.resolve(restored_identity)  # None if nobody was signed in
    await session.sign_in(email, password)
"""

import asyncio
import inspect
from typing import Awaitable, Callable

import logfire

from meet.domain.subscription import Subscription
from meet.domain.value import Identity

from .identity_service import IdentityService

SessionListener = Callable[[Identity | None], Awaitable[None] | None]


class IdentitySession:
    """Signed-in state of one client process.

    Before resolve() is called the session is unresolved and
    current_identity() returns None. Listeners registered before resolution
    get their first call when the session resolves.
    """

    def __init__(self, identity_service: IdentityService) -> None:
        """Initialize session.

        Args:
            identity_service: Identity service used for sign-up/in/out
        """
        self.identity_service = identity_service
        self._identity: Identity | None = None
        self._resolved = False
        self._listeners: dict[Subscription, SessionListener] = {}
        self._lock = asyncio.Lock()

    @property
    def resolved(self) -> bool:
        return self._resolved

    def current_identity(self) -> Identity | None:
        """The signed-in identity, or None if signed out or unresolved."""
        return self._identity

    async def on_session_change(self, callback: SessionListener) -> Subscription:
        """Register a listener for sign-in and sign-out transitions.

        If the session is already resolved the callback is called once with
        the current identity before this returns.

        Returns:
            Subscription; unsubscribe() stops further calls
        """
        subscription = Subscription("session")
        async with self._lock:
            self._listeners[subscription] = callback
            if self._resolved:
                await self._call(subscription, callback, self._identity)
        return subscription

    async def resolve(self, identity: Identity | None) -> None:
        """Finish restoring the session at startup.

        Args:
            identity: Restored identity, or None if nobody is signed in
        """
        async with self._lock:
            await self._commit(identity, first=not self._resolved)

    async def sign_up(self, email: str, password: str, display_name: str) -> Identity:
        """Register a new account and sign in as it.

        Raises:
            IdentityError: If the account cannot be created
        """
        identity = await self.identity_service.sign_up(email, password, display_name)
        async with self._lock:
            await self._commit(identity)
        return identity

    async def sign_in(self, email: str, password: str) -> Identity:
        """Sign in with email and password.

        Raises:
            IdentityError: If the credentials are rejected
        """
        identity = await self.identity_service.sign_in(email, password)
        async with self._lock:
            await self._commit(identity)
        return identity

    async def sign_out(self) -> None:
        """Sign out the current identity. No-op if nobody is signed in."""
        async with self._lock:
            if self._identity is None:
                return
            await self.identity_service.sign_out(self._identity)
            await self._commit(None)

    async def _commit(self, identity: Identity | None, first: bool = False) -> None:
        changed = first or identity != self._identity
        self._identity = identity
        self._resolved = True
        if not changed:
            return

        logfire.info(
            "Session changed",
            user_id=identity.user_id if identity else None,
        )
        for subscription, callback in list(self._listeners.items()):
            if subscription.closed:
                del self._listeners[subscription]
                continue
            await self._call(subscription, callback, identity)

    async def _call(
        self,
        subscription: Subscription,
        callback: SessionListener,
        identity: Identity | None,
    ) -> None:
        if subscription.closed:
            return
        try:
            result = callback(identity)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            logfire.error("Session listener failed", error=str(e))

"""Firebase Identity Toolkit client.

Talks to the Identity Toolkit REST API (or the local Auth emulator) to
register and authenticate email/password accounts.
"""

import re
import uuid

import httpx
import logfire

from meet.adapter.error import ProviderError
from meet.domain.error import IdentityError
from meet.domain.service.identity_service import IdentityClient
from meet.domain.value import Identity, IdentityFailureReason, UserId

# Identity Toolkit error codes and the failure reason each one maps to
ERROR_CODES: dict[str, IdentityFailureReason] = {
    "EMAIL_EXISTS": IdentityFailureReason.EMAIL_ALREADY_REGISTERED,
    "INVALID_EMAIL": IdentityFailureReason.INVALID_CREDENTIAL_FORMAT,
    "MISSING_EMAIL": IdentityFailureReason.INVALID_CREDENTIAL_FORMAT,
    "MISSING_PASSWORD": IdentityFailureReason.INVALID_CREDENTIAL_FORMAT,
    "WEAK_PASSWORD": IdentityFailureReason.WEAK_CREDENTIAL,
    "EMAIL_NOT_FOUND": IdentityFailureReason.INVALID_CREDENTIALS,
    "INVALID_PASSWORD": IdentityFailureReason.INVALID_CREDENTIALS,
    "INVALID_LOGIN_CREDENTIALS": IdentityFailureReason.INVALID_CREDENTIALS,
    "USER_DISABLED": IdentityFailureReason.INVALID_CREDENTIALS,
    "TOO_MANY_ATTEMPTS_TRY_LATER": IdentityFailureReason.TRANSIENT_NETWORK,
}

MIN_PASSWORD_LENGTH = 6

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def map_error_code(message: str) -> IdentityFailureReason | None:
    """Map an Identity Toolkit error message to a failure reason.

    Messages look like "WEAK_PASSWORD : Password should be at least 6
    characters"; only the code before " : " is significant.

    Args:
        message: Error message from the response body

    Returns:
        Failure reason, or None for codes we do not recognise
    """
    code = message.split(" : ", 1)[0].strip()
    return ERROR_CODES.get(code)


class FirebaseIdentityClient(IdentityClient):
    """Base class for Firebase identity clients.

    Provides type distinction for dependency injection.
    """

    pass


class RealFirebaseIdentityClient(FirebaseIdentityClient):
    """Identity Toolkit REST client."""

    def __init__(
        self,
        api_key: str,
        base_url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize Firebase identity client.

        Args:
            api_key: Web API key of the Firebase project
            base_url: Identity Toolkit base URL (Google or the emulator)
            timeout: Seconds before a request is abandoned
            transport: Optional httpx transport, used by tests
        """
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def sign_up(self, email: str, password: str, display_name: str) -> Identity:
        """Create an account and set its display name.

        Raises:
            IdentityError: If the account cannot be created
            ProviderError: If the response has an unrecognised error code
        """
        result = await self._post(
            "accounts:signUp",
            {"email": email, "password": password, "returnSecureToken": True},
        )
        await self._post(
            "accounts:update",
            {
                "idToken": result["idToken"],
                "displayName": display_name,
                "returnSecureToken": False,
            },
        )
        logfire.info("Firebase account created", user_id=result["localId"])
        return Identity(user_id=UserId(result["localId"]), email=result["email"])

    async def sign_in(self, email: str, password: str) -> Identity:
        """Authenticate with email and password.

        Raises:
            IdentityError: If the credentials are rejected
            ProviderError: If the response has an unrecognised error code
        """
        result = await self._post(
            "accounts:signInWithPassword",
            {"email": email, "password": password, "returnSecureToken": True},
        )
        return Identity(user_id=UserId(result["localId"]), email=result["email"])

    async def sign_out(self, identity: Identity) -> None:
        """Firebase ID tokens are held by the client; nothing to revoke."""
        logfire.debug("Firebase sign-out", user_id=identity.user_id)

    async def _post(self, method: str, body: dict) -> dict:
        """Call an Identity Toolkit method.

        Args:
            method: Method path, e.g. "accounts:signUp"
            body: JSON request body

        Returns:
            Decoded JSON response

        Raises:
            IdentityError: For known error codes, 5xx responses and transport errors
            ProviderError: For unrecognised error responses
        """
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url, timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.post(
                    f"/{method}", params={"key": self.api_key}, json=body
                )
        except httpx.TransportError as e:
            logfire.error("Firebase request failed", method=method, error=str(e))
            raise IdentityError(IdentityFailureReason.TRANSIENT_NETWORK, str(e))

        if response.status_code >= 500:
            logfire.error(
                "Firebase server error",
                method=method,
                status_code=response.status_code,
            )
            raise IdentityError(
                IdentityFailureReason.TRANSIENT_NETWORK,
                f"Identity service returned {response.status_code}",
            )

        if response.status_code != 200:
            message = self._error_message(response)
            reason = map_error_code(message)
            if reason is None:
                logfire.error(
                    "Unrecognised Firebase error",
                    method=method,
                    status_code=response.status_code,
                    error=message,
                )
                raise ProviderError(f"{method} failed: {message}")
            raise IdentityError(reason, message)

        return response.json()

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            return response.json()["error"]["message"]
        except (ValueError, KeyError, TypeError):
            return response.text


class MockFirebaseIdentityClient(FirebaseIdentityClient):
    """In-memory identity service for testing.

    Applies the same validation rules and failure reasons as Firebase.
    """

    def __init__(self) -> None:
        # email -> (user_id, password, display_name)
        self._accounts: dict[str, tuple[str, str, str]] = {}
        # Set to simulate an unreachable identity service
        self.offline = False

    async def sign_up(self, email: str, password: str, display_name: str) -> Identity:
        """Register an account in memory."""
        self._check_online()
        if not email or not EMAIL_PATTERN.match(email) or not password:
            raise IdentityError(IdentityFailureReason.INVALID_CREDENTIAL_FORMAT)
        if email in self._accounts:
            raise IdentityError(IdentityFailureReason.EMAIL_ALREADY_REGISTERED)
        if len(password) < MIN_PASSWORD_LENGTH:
            raise IdentityError(IdentityFailureReason.WEAK_CREDENTIAL)

        user_id = uuid.uuid4().hex[:28]
        self._accounts[email] = (user_id, password, display_name)
        return Identity(user_id=UserId(user_id), email=email)

    async def sign_in(self, email: str, password: str) -> Identity:
        """Check credentials against the registered accounts."""
        self._check_online()
        if not email or not EMAIL_PATTERN.match(email) or not password:
            raise IdentityError(IdentityFailureReason.INVALID_CREDENTIAL_FORMAT)
        account = self._accounts.get(email)
        if account is None or account[1] != password:
            raise IdentityError(IdentityFailureReason.INVALID_CREDENTIALS)
        return Identity(user_id=UserId(account[0]), email=email)

    async def sign_out(self, identity: Identity) -> None:
        """Nothing to revoke."""
        pass

    def _check_online(self) -> None:
        if self.offline:
            raise IdentityError(IdentityFailureReason.TRANSIENT_NETWORK)

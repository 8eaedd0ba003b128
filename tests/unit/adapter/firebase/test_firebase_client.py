"""Unit tests for the Firebase identity clients."""

import json

import httpx
import pytest

from meet.adapter.error import ProviderError
from meet.adapter.firebase import MockFirebaseIdentityClient, RealFirebaseIdentityClient
from meet.adapter.firebase.client import map_error_code
from meet.domain.error import IdentityError
from meet.domain.value import IdentityFailureReason

BASE_URL = "http://localhost:9099/identitytoolkit.googleapis.com/v1"


def _error(status_code: int, message: str) -> httpx.Response:
    return httpx.Response(
        status_code, json={"error": {"code": status_code, "message": message}}
    )


def _client(handler) -> RealFirebaseIdentityClient:
    return RealFirebaseIdentityClient(
        api_key="demo-key",
        base_url=BASE_URL,
        transport=httpx.MockTransport(handler),
    )


class TestMapErrorCode:
    """Tests for map_error_code."""

    @pytest.mark.parametrize(
        "message,reason",
        [
            ("EMAIL_EXISTS", IdentityFailureReason.EMAIL_ALREADY_REGISTERED),
            ("INVALID_EMAIL", IdentityFailureReason.INVALID_CREDENTIAL_FORMAT),
            (
                "WEAK_PASSWORD : Password should be at least 6 characters",
                IdentityFailureReason.WEAK_CREDENTIAL,
            ),
            ("INVALID_LOGIN_CREDENTIALS", IdentityFailureReason.INVALID_CREDENTIALS),
            ("EMAIL_NOT_FOUND", IdentityFailureReason.INVALID_CREDENTIALS),
        ],
    )
    def test_known_codes(self, message, reason):
        assert map_error_code(message) == reason

    def test_unknown_code(self):
        assert map_error_code("PROJECT_NOT_FOUND") is None


class TestRealFirebaseIdentityClient:
    """Tests for RealFirebaseIdentityClient against a mock transport."""

    @pytest.mark.asyncio
    async def test_sign_up_sets_display_name(self):
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            if request.url.path.endswith("accounts:signUp"):
                return httpx.Response(
                    200,
                    json={
                        "localId": "uid-1",
                        "email": "alice@example.com",
                        "idToken": "id-token",
                    },
                )
            return httpx.Response(200, json={"localId": "uid-1"})

        identity = await _client(handler).sign_up(
            "alice@example.com", "secret1", "Alice"
        )

        assert identity.user_id == "uid-1"
        assert identity.email == "alice@example.com"
        assert [r.url.path.rsplit("/", 1)[-1] for r in requests] == [
            "accounts:signUp",
            "accounts:update",
        ]
        assert all(r.url.params["key"] == "demo-key" for r in requests)
        update = json.loads(requests[1].content)
        assert update["idToken"] == "id-token"
        assert update["displayName"] == "Alice"

    @pytest.mark.asyncio
    async def test_sign_in(self):
        def handler(request: httpx.Request) -> httpx.Response:
            body = json.loads(request.content)
            assert body["returnSecureToken"] is True
            return httpx.Response(
                200, json={"localId": "uid-1", "email": body["email"]}
            )

        identity = await _client(handler).sign_in("alice@example.com", "secret1")

        assert identity.user_id == "uid-1"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "message,reason",
        [
            ("EMAIL_EXISTS", IdentityFailureReason.EMAIL_ALREADY_REGISTERED),
            (
                "WEAK_PASSWORD : Password should be at least 6 characters",
                IdentityFailureReason.WEAK_CREDENTIAL,
            ),
            ("INVALID_EMAIL", IdentityFailureReason.INVALID_CREDENTIAL_FORMAT),
        ],
    )
    async def test_sign_up_failures(self, message, reason):
        client = _client(lambda request: _error(400, message))

        with pytest.raises(IdentityError) as exc_info:
            await client.sign_up("alice@example.com", "secret1", "Alice")

        assert exc_info.value.reason == reason

    @pytest.mark.asyncio
    async def test_wrong_password(self):
        client = _client(lambda request: _error(400, "INVALID_LOGIN_CREDENTIALS"))

        with pytest.raises(IdentityError) as exc_info:
            await client.sign_in("alice@example.com", "wrong-password")

        assert exc_info.value.reason == IdentityFailureReason.INVALID_CREDENTIALS

    @pytest.mark.asyncio
    async def test_server_error_is_transient(self):
        client = _client(lambda request: httpx.Response(503, text="unavailable"))

        with pytest.raises(IdentityError) as exc_info:
            await client.sign_in("alice@example.com", "secret1")

        assert exc_info.value.reason == IdentityFailureReason.TRANSIENT_NETWORK

    @pytest.mark.asyncio
    async def test_connection_failure_is_transient(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(IdentityError) as exc_info:
            await _client(handler).sign_in("alice@example.com", "secret1")

        assert exc_info.value.reason == IdentityFailureReason.TRANSIENT_NETWORK

    @pytest.mark.asyncio
    async def test_unknown_error_code(self):
        client = _client(lambda request: _error(400, "CONFIGURATION_NOT_FOUND"))

        with pytest.raises(ProviderError):
            await client.sign_in("alice@example.com", "secret1")


class TestMockFirebaseIdentityClient:
    """Tests for the in-memory identity client."""

    @pytest.mark.asyncio
    async def test_sign_up_then_sign_in(self):
        client = MockFirebaseIdentityClient()

        registered = await client.sign_up("alice@example.com", "secret1", "Alice")
        signed_in = await client.sign_in("alice@example.com", "secret1")

        assert signed_in == registered

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "email,password,reason",
        [
            ("not-an-email", "secret1", IdentityFailureReason.INVALID_CREDENTIAL_FORMAT),
            ("alice@example.com", "", IdentityFailureReason.INVALID_CREDENTIAL_FORMAT),
            ("bob@example.com", "12345", IdentityFailureReason.WEAK_CREDENTIAL),
            (
                "alice@example.com",
                "another1",
                IdentityFailureReason.EMAIL_ALREADY_REGISTERED,
            ),
        ],
    )
    async def test_sign_up_failures(self, email, password, reason):
        client = MockFirebaseIdentityClient()
        await client.sign_up("alice@example.com", "secret1", "Alice")

        with pytest.raises(IdentityError) as exc_info:
            await client.sign_up(email, password, "Someone")

        assert exc_info.value.reason == reason

    @pytest.mark.asyncio
    async def test_wrong_password(self):
        client = MockFirebaseIdentityClient()
        await client.sign_up("alice@example.com", "secret1", "Alice")

        with pytest.raises(IdentityError) as exc_info:
            await client.sign_in("alice@example.com", "secret2")

        assert exc_info.value.reason == IdentityFailureReason.INVALID_CREDENTIALS

    @pytest.mark.asyncio
    async def test_offline(self):
        client = MockFirebaseIdentityClient()
        client.offline = True

        with pytest.raises(IdentityError) as exc_info:
            await client.sign_up("alice@example.com", "secret1", "Alice")

        assert exc_info.value.reason == IdentityFailureReason.TRANSIENT_NETWORK

"""Unit tests for IdentitySession."""

import pytest

from meet.domain.error import IdentityError
from meet.domain.service import IdentityService, IdentitySession
from meet.domain.value import Identity, IdentityFailureReason, UserId
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked
unit_env = create_env_fixture()


class _Recorder:
    def __init__(self) -> None:
        self.calls: list[Identity | None] = []

    def __call__(self, identity: Identity | None) -> None:
        self.calls.append(identity)


async def _session(unit_env) -> IdentitySession:
    return IdentitySession(await unit_env.get(IdentityService))


class TestResolve:
    """Tests for session resolution."""

    @pytest.mark.asyncio
    async def test_unresolved_until_resolve(self, unit_env):
        session = await _session(unit_env)
        recorder = _Recorder()

        await session.on_session_change(recorder)

        assert not session.resolved
        assert session.current_identity() is None
        assert recorder.calls == []

        await session.resolve(None)

        assert session.resolved
        assert recorder.calls == [None]

    @pytest.mark.asyncio
    async def test_listener_added_after_resolve_is_called_immediately(self, unit_env):
        session = await _session(unit_env)
        identity = Identity(user_id=UserId("abc"), email="abc@example.com")
        await session.resolve(identity)
        recorder = _Recorder()

        await session.on_session_change(recorder)

        assert recorder.calls == [identity]


class TestSignInOut:
    """Tests for sign-up, sign-in and sign-out transitions."""

    @pytest.mark.asyncio
    async def test_transitions_are_reported_in_order(self, unit_env):
        session = await _session(unit_env)
        await session.resolve(None)
        recorder = _Recorder()
        await session.on_session_change(recorder)

        signed_up = await session.sign_up("alice@example.com", "secret1", "Alice")
        await session.sign_out()
        signed_in = await session.sign_in("alice@example.com", "secret1")

        assert recorder.calls == [None, signed_up, None, signed_in]
        assert signed_in.user_id == signed_up.user_id
        assert session.current_identity() == signed_in

    @pytest.mark.asyncio
    async def test_sign_out_when_signed_out_is_noop(self, unit_env):
        session = await _session(unit_env)
        await session.resolve(None)
        recorder = _Recorder()
        await session.on_session_change(recorder)

        await session.sign_out()

        assert recorder.calls == [None]

    @pytest.mark.asyncio
    async def test_failed_sign_in_keeps_state(self, unit_env):
        session = await _session(unit_env)
        await session.resolve(None)
        recorder = _Recorder()
        await session.on_session_change(recorder)

        with pytest.raises(IdentityError) as exc_info:
            await session.sign_in("nobody@example.com", "secret1")

        assert exc_info.value.reason == IdentityFailureReason.INVALID_CREDENTIALS
        assert session.current_identity() is None
        assert recorder.calls == [None]

    @pytest.mark.asyncio
    async def test_unsubscribed_listener_is_not_called(self, unit_env):
        session = await _session(unit_env)
        await session.resolve(None)
        recorder = _Recorder()
        subscription = await session.on_session_change(recorder)

        subscription.unsubscribe()
        await session.sign_up("alice@example.com", "secret1", "Alice")

        assert recorder.calls == [None]

    @pytest.mark.asyncio
    async def test_failing_listener_does_not_block_others(self, unit_env):
        session = await _session(unit_env)
        await session.resolve(None)

        def broken(identity):
            raise RuntimeError("boom")

        recorder = _Recorder()
        await session.on_session_change(broken)
        await session.on_session_change(recorder)

        identity = await session.sign_up("alice@example.com", "secret1", "Alice")

        assert recorder.calls == [None, identity]

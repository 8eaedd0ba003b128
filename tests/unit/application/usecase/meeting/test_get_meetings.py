"""Unit tests for GetMeetingsUseCase."""

import pytest

from meet.application.lifecycle import LifecycleCoordinator
from meet.application.usecase.meeting import GetMeetingsUseCase
from meet.application.usecase.meeting.get_meetings import GetMeetingsRequest
from meet.domain.repository import UserRepository
from meet.domain.value import MeetingTiming, UserId
from tests.conftest import NOW, later, make_user
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()


async def _schedule(coordinator: LifecycleCoordinator, title: str, days: int) -> None:
    invitation_id = await coordinator.propose(
        UserId("bob"), UserId("alice"), title, None, later(days=days), NOW
    )
    await coordinator.accept(UserId("alice"), invitation_id, NOW)


class TestGetMeetingsUseCase:
    """Tests for GetMeetingsUseCase."""

    @pytest.mark.asyncio
    async def test_splits_by_evaluation_time(self, unit_env):
        user_repo = await unit_env.get(UserRepository)
        await make_user(user_repo, "alice", "Alice")
        await make_user(user_repo, "bob", "Bob")
        coordinator = await unit_env.get(LifecycleCoordinator)
        use_case = await unit_env.get(GetMeetingsUseCase)
        await _schedule(coordinator, "Soon", 1)
        await _schedule(coordinator, "Later", 3)

        response = await use_case.execute(
            GetMeetingsRequest(participant_id="alice"), now=later(days=2)
        )

        assert [m.title for m in response.past] == ["Soon"]
        assert [m.title for m in response.upcoming] == ["Later"]
        assert response.past[0].timing == MeetingTiming.PAST
        assert response.upcoming[0].timing == MeetingTiming.UPCOMING

    @pytest.mark.asyncio
    async def test_other_participant_name_depends_on_viewer(self, unit_env):
        user_repo = await unit_env.get(UserRepository)
        await make_user(user_repo, "alice", "Alice")
        await make_user(user_repo, "bob", "Bob")
        coordinator = await unit_env.get(LifecycleCoordinator)
        use_case = await unit_env.get(GetMeetingsUseCase)
        await _schedule(coordinator, "Sync", 1)

        for_alice = await use_case.execute(
            GetMeetingsRequest(participant_id="alice"), now=NOW
        )
        for_bob = await use_case.execute(GetMeetingsRequest(participant_id="bob"), now=NOW)

        assert for_alice.upcoming[0].other_participant_name == "Bob"
        assert for_bob.upcoming[0].other_participant_name == "Alice"

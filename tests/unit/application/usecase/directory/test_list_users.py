"""Unit tests for the directory use cases."""

import pytest

from meet.application.usecase.directory import ListUsersUseCase, UpdateProfileUseCase
from meet.application.usecase.directory.list_users import ListUsersRequest
from meet.application.usecase.directory.update_profile import UpdateProfileRequest
from meet.application.lifecycle import LifecycleCoordinator
from meet.domain.repository import UserRepository
from meet.domain.service import InvitationService
from meet.domain.value import UserId
from tests.conftest import NOW, later, make_user
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()


class TestListUsersUseCase:
    """Tests for ListUsersUseCase."""

    @pytest.mark.asyncio
    async def test_marks_current_user(self, unit_env):
        user_repo = await unit_env.get(UserRepository)
        await make_user(user_repo, "bob", "Bob")
        await make_user(user_repo, "alice", "Alice")
        use_case = await unit_env.get(ListUsersUseCase)

        response = await use_case.execute(ListUsersRequest(viewer_id="alice"))

        assert response.error is None
        assert [(u.display_name, u.is_current_user) for u in response.users] == [
            ("Alice", True),
            ("Bob", False),
        ]

    @pytest.mark.asyncio
    async def test_reports_store_failure(self, unit_env):
        user_repo = await unit_env.get(UserRepository)
        user_repo.unavailable = True
        use_case = await unit_env.get(ListUsersUseCase)

        response = await use_case.execute(ListUsersRequest(viewer_id="alice"))

        assert response.users == []
        assert response.error


class TestUpdateProfileUseCase:
    """Tests for UpdateProfileUseCase."""

    @pytest.mark.asyncio
    async def test_sent_invitations_keep_old_name(self, unit_env):
        """Profile edits do not rewrite invitations that were already sent."""
        user_repo = await unit_env.get(UserRepository)
        await make_user(user_repo, "alice", "Alice")
        await make_user(user_repo, "bob", "Bob")
        coordinator = await unit_env.get(LifecycleCoordinator)
        invitation_service = await unit_env.get(InvitationService)
        use_case = await unit_env.get(UpdateProfileUseCase)
        invitation_id = await coordinator.propose(
            UserId("bob"), UserId("alice"), "Coffee", None, later(days=1), NOW
        )

        response = await use_case.execute(
            UpdateProfileRequest(user_id="bob", display_name="Robert")
        )

        assert response.display_name == "Robert"
        invitation = await invitation_service.get(invitation_id)
        assert invitation.sender_name == "Bob"

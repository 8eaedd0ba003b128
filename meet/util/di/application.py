"""Application layer DI providers."""

from dishka import Scope, provide

from meet.application.lifecycle import InFlightRegistry, LifecycleCoordinator
from meet.application.usecase.auth import (
    GetCurrentUserUseCase,
    LoginUseCase,
    LogoutUseCase,
    RegisterUseCase,
)
from meet.application.usecase.directory import ListUsersUseCase, UpdateProfileUseCase
from meet.application.usecase.invitation import (
    GetInvitationsUseCase,
    ProposeMeetingUseCase,
    RespondToInvitationUseCase,
)
from meet.application.usecase.meeting import GetMeetingsUseCase
from meet.domain.service import (
    IdentityService,
    InvitationService,
    JWTService,
    MeetingService,
    UserService,
)
from meet.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    # Lifecycle
    @provide(scope=Scope.APP)
    def get_in_flight_registry(self) -> InFlightRegistry:
        """Provide the process-wide in-flight registry."""
        return InFlightRegistry()

    @provide(scope=Scope.REQUEST)
    def get_lifecycle_coordinator(
        self,
        invitation_service: InvitationService,
        meeting_service: MeetingService,
        user_service: UserService,
        in_flight: InFlightRegistry,
    ) -> LifecycleCoordinator:
        """Provide lifecycle coordinator."""
        return LifecycleCoordinator(
            invitation_service=invitation_service,
            meeting_service=meeting_service,
            user_service=user_service,
            in_flight=in_flight,
        )

    # Auth use cases
    @provide(scope=Scope.REQUEST)
    def get_register_use_case(
        self,
        identity_service: IdentityService,
        user_service: UserService,
        jwt_service: JWTService,
    ) -> RegisterUseCase:
        """Provide register use case."""
        return RegisterUseCase(
            identity_service=identity_service,
            user_service=user_service,
            jwt_service=jwt_service,
        )

    @provide(scope=Scope.REQUEST)
    def get_login_use_case(
        self, identity_service: IdentityService, jwt_service: JWTService
    ) -> LoginUseCase:
        """Provide login use case."""
        return LoginUseCase(identity_service=identity_service, jwt_service=jwt_service)

    @provide(scope=Scope.REQUEST)
    def get_logout_use_case(
        self, identity_service: IdentityService, jwt_service: JWTService
    ) -> LogoutUseCase:
        """Provide logout use case."""
        return LogoutUseCase(identity_service=identity_service, jwt_service=jwt_service)

    @provide(scope=Scope.REQUEST)
    def get_current_user_use_case(
        self, jwt_service: JWTService, user_service: UserService
    ) -> GetCurrentUserUseCase:
        """Provide get current user use case."""
        return GetCurrentUserUseCase(jwt_service=jwt_service, user_service=user_service)

    # Directory use cases
    @provide(scope=Scope.REQUEST)
    def get_list_users_use_case(self, user_service: UserService) -> ListUsersUseCase:
        """Provide list users use case."""
        return ListUsersUseCase(user_service=user_service)

    @provide(scope=Scope.REQUEST)
    def get_update_profile_use_case(
        self, user_service: UserService
    ) -> UpdateProfileUseCase:
        """Provide update profile use case."""
        return UpdateProfileUseCase(user_service=user_service)

    # Invitation use cases
    @provide(scope=Scope.REQUEST)
    def get_propose_meeting_use_case(
        self,
        coordinator: LifecycleCoordinator,
        invitation_service: InvitationService,
    ) -> ProposeMeetingUseCase:
        """Provide propose meeting use case."""
        return ProposeMeetingUseCase(
            coordinator=coordinator, invitation_service=invitation_service
        )

    @provide(scope=Scope.REQUEST)
    def get_respond_to_invitation_use_case(
        self, coordinator: LifecycleCoordinator
    ) -> RespondToInvitationUseCase:
        """Provide respond to invitation use case."""
        return RespondToInvitationUseCase(coordinator=coordinator)

    @provide(scope=Scope.REQUEST)
    def get_get_invitations_use_case(
        self, invitation_service: InvitationService
    ) -> GetInvitationsUseCase:
        """Provide get invitations use case."""
        return GetInvitationsUseCase(invitation_service=invitation_service)

    # Meeting use cases
    @provide(scope=Scope.REQUEST)
    def get_get_meetings_use_case(
        self, meeting_service: MeetingService
    ) -> GetMeetingsUseCase:
        """Provide get meetings use case."""
        return GetMeetingsUseCase(meeting_service=meeting_service)

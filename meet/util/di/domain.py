"""Domain layer DI providers."""

from dishka import Scope, provide

from meet.config import AuthSettings, DirectorySettings
from meet.domain.repository import (
    ChangeFeed,
    InvitationRepository,
    MeetingRepository,
    UserRepository,
)
from meet.domain.service import (
    IdentityClient,
    IdentityService,
    InvitationService,
    JWTService,
    MeetingService,
    UserService,
)
from meet.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped to align with repository/session lifecycle.
    Each HTTP request gets fresh service instances with their own transaction.
    """

    scope = Scope.REQUEST

    @provide
    def get_identity_service(self, identity_client: IdentityClient) -> IdentityService:
        """Provide identity domain service."""
        return IdentityService(identity_client=identity_client)

    @provide
    def get_jwt_service(self, auth_settings: AuthSettings) -> JWTService:
        """Provide JWT token domain service."""
        return JWTService(auth_settings=auth_settings)

    @provide
    def get_user_service(
        self, user_repository: UserRepository, directory_settings: DirectorySettings
    ) -> UserService:
        """Provide user domain service."""
        return UserService(
            user_repository=user_repository,
            avatar_url_template=directory_settings.avatar_url_template,
        )

    @provide
    def get_invitation_service(
        self, invitation_repository: InvitationRepository, change_feed: ChangeFeed
    ) -> InvitationService:
        """Provide invitation domain service."""
        return InvitationService(
            invitation_repository=invitation_repository, change_feed=change_feed
        )

    @provide
    def get_meeting_service(
        self, meeting_repository: MeetingRepository, change_feed: ChangeFeed
    ) -> MeetingService:
        """Provide meeting domain service."""
        return MeetingService(
            meeting_repository=meeting_repository, change_feed=change_feed
        )

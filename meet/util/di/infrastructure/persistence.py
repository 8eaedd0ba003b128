"""Persistence infrastructure providers."""

from collections.abc import AsyncIterator

from dishka import Scope, provide
import logfire
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from meet.config import Settings
from meet.domain.repository import (
    ChangeFeed,
    InvitationRepository,
    MeetingRepository,
    UserRepository,
)
from meet.persistence.changefeed import PostgresChangeFeed
from meet.persistence.database import create_engine, create_session_factory
from meet.persistence.repository import (
    PostgresInvitationRepository,
    PostgresMeetingRepository,
    PostgresUserRepository,
)
from meet.util.di.base import ProviderBase
from meet.util.observability import instrument_sqlalchemy


class PersistenceProvider(ProviderBase):
    """Persistence component base."""

    __mock_component__ = "persistence"


class ProdPersistenceProvider(PersistenceProvider):
    """Production persistence provider using PostgreSQL."""

    __is_mock__ = False

    scope = Scope.APP

    @provide(scope=Scope.APP)
    async def get_engine(self, settings: Settings) -> AsyncIterator[AsyncEngine]:
        """Provide database engine, disposed when the app shuts down."""
        engine = create_engine(settings)
        # Instrument SQLAlchemy for observability
        instrument_sqlalchemy(engine)
        yield engine
        await engine.dispose()

    @provide(scope=Scope.APP)
    def get_session_factory(
        self, engine: AsyncEngine
    ) -> async_sessionmaker[AsyncSession]:
        """Provide session factory."""
        return create_session_factory(engine)

    @provide(scope=Scope.APP)
    async def get_change_feed(
        self, engine: AsyncEngine, settings: Settings
    ) -> AsyncIterator[ChangeFeed]:
        """Provide the LISTEN/NOTIFY change feed shared by all subscriptions."""
        feed = PostgresChangeFeed(engine, settings.database.notify_channel_prefix)
        yield feed
        await feed.close()

    @provide(scope=Scope.REQUEST)
    async def get_session(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> AsyncIterator[AsyncSession]:
        """Provide database session for request scope.

        The session is committed at the end of the request if no exception
        occurred, or rolled back if one was raised. Change notifications
        queued during the request are delivered on commit.
        """
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
                logfire.debug("Session committed")
            except Exception as e:
                logfire.warn("Session rollback", error=str(e))
                await session.rollback()
                raise

    @provide(scope=Scope.REQUEST)
    def get_user_repository(self, session: AsyncSession) -> UserRepository:
        """Provide User repository."""
        return PostgresUserRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_invitation_repository(
        self, session: AsyncSession, settings: Settings
    ) -> InvitationRepository:
        """Provide Invitation repository."""
        return PostgresInvitationRepository(
            session, settings.database.notify_channel_prefix
        )

    @provide(scope=Scope.REQUEST)
    def get_meeting_repository(
        self, session: AsyncSession, settings: Settings
    ) -> MeetingRepository:
        """Provide Meeting repository."""
        return PostgresMeetingRepository(
            session, settings.database.notify_channel_prefix
        )

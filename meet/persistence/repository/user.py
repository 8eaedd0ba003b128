"""PostgreSQL implementation of User repository."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from meet.domain.model import User
from meet.domain.repository import UserRepository
from meet.domain.value import UserId
from meet.persistence.mappers import row_to_user, user_to_dict
from meet.persistence.tables import users_table

from .base import store_errors


class PostgresUserRepository(UserRepository):
    """PostgreSQL implementation of UserRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        """Find a user by ID."""
        async with store_errors(self.session, "users.find_by_id"):
            stmt = select(users_table).where(users_table.c.id == user_id)
            result = await self.session.execute(stmt)
            row = result.mappings().first()
            return row_to_user(dict(row)) if row else None

    async def find_all_by_display_name(self) -> list[User]:
        """List every user ordered by display name (code point order)."""
        async with store_errors(self.session, "users.find_all_by_display_name"):
            stmt = select(users_table).order_by(
                users_table.c.display_name.collate("C"), users_table.c.id
            )
            result = await self.session.execute(stmt)
            return [row_to_user(dict(row)) for row in result.mappings().all()]

    async def save(self, user: User) -> User:
        """Insert a user or update its profile fields.

        Args:
            user: User to save

        Returns:
            Saved user
        """
        user_dict = user_to_dict(user)
        async with store_errors(self.session, "users.save"):
            stmt = insert(users_table).values(**user_dict)
            stmt = stmt.on_conflict_do_update(
                index_elements=[users_table.c.id],
                set_={
                    "display_name": stmt.excluded.display_name,
                    "bio": stmt.excluded.bio,
                    "avatar_url": stmt.excluded.avatar_url,
                },
            ).returning(users_table)
            result = await self.session.execute(stmt)
            await self.session.flush()
            row = result.mappings().one()
            return row_to_user(dict(row))

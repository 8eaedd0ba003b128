"""PostgreSQL implementation of Invitation repository."""

from datetime import datetime
from typing import Optional

from sqlalchemy import and_, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from meet.domain.model import Invitation
from meet.domain.repository import INVITATIONS_CHANNEL, InvitationRepository
from meet.domain.value import InvitationId, InvitationStatus, UserId
from meet.persistence.changefeed.postgres import notify_change
from meet.persistence.mappers import invitation_to_dict, row_to_invitation
from meet.persistence.tables import invitations_table

from .base import store_errors


class PostgresInvitationRepository(InvitationRepository):
    """PostgreSQL implementation of InvitationRepository.

    Writes queue a change notification in the same transaction, so
    subscribers only hear about committed changes.
    """

    def __init__(self, session: AsyncSession, channel_prefix: str) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
            channel_prefix: Prefix of change notification channels
        """
        self.session = session
        self.channel_prefix = channel_prefix

    async def find_by_id(self, invitation_id: InvitationId) -> Optional[Invitation]:
        """Find an invitation by ID."""
        async with store_errors(self.session, "invitations.find_by_id"):
            stmt = select(invitations_table).where(
                invitations_table.c.id == invitation_id
            )
            result = await self.session.execute(stmt)
            row = result.mappings().first()
            return row_to_invitation(dict(row)) if row else None

    async def find_by_receiver(self, receiver_id: UserId) -> list[Invitation]:
        """Find invitations addressed to a user, newest first."""
        async with store_errors(self.session, "invitations.find_by_receiver"):
            stmt = (
                select(invitations_table)
                .where(invitations_table.c.receiver_id == receiver_id)
                .order_by(invitations_table.c.created_at.desc())
            )
            result = await self.session.execute(stmt)
            return [row_to_invitation(dict(row)) for row in result.mappings().all()]

    async def add(self, invitation: Invitation) -> Invitation:
        """Insert a new invitation."""
        async with store_errors(self.session, "invitations.add"):
            stmt = insert(invitations_table).values(**invitation_to_dict(invitation))
            await self.session.execute(stmt)
            await self._notify(invitation)
            await self.session.flush()
            return invitation

    async def transition_status(
        self,
        invitation_id: InvitationId,
        expected: InvitationStatus,
        new_status: InvitationStatus,
        updated_at: datetime,
    ) -> Optional[Invitation]:
        """Change the status only if it still equals expected.

        The status check and write are a single UPDATE, so two concurrent
        responders cannot both succeed.
        """
        async with store_errors(self.session, "invitations.transition_status"):
            stmt = (
                update(invitations_table)
                .where(
                    and_(
                        invitations_table.c.id == invitation_id,
                        invitations_table.c.status == expected.value,
                    )
                )
                .values(status=new_status.value, updated_at=updated_at)
                .returning(invitations_table)
            )
            result = await self.session.execute(stmt)
            row = result.mappings().first()
            if row is None:
                return None

            updated = row_to_invitation(dict(row))
            await self._notify(updated)
            await self.session.flush()
            return updated

    async def _notify(self, invitation: Invitation) -> None:
        await notify_change(
            self.session,
            self.channel_prefix,
            INVITATIONS_CHANNEL,
            str(invitation.id),
            [invitation.receiver_id],
        )

"""PostgreSQL change feed using LISTEN/NOTIFY.

Repositories call notify_change inside the writing transaction, so the
notification is only delivered if the write commits. One dedicated
connection per process listens on every channel that has subscribers and
fans events out to local streams. If that connection is lost, every open
stream fails and the next subscribe connects again.
"""

import asyncio
import json
from typing import Any, Iterable

import asyncpg
import logfire
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, AsyncSession

from meet.domain.error import StoreUnavailableError
from meet.domain.repository.change_feed import ChangeEvent, ChangeFeed, ChangeStream


def channel_name(prefix: str, channel: str) -> str:
    """Database notification channel for a collection channel."""
    return f"{prefix}_{channel}"


async def notify_change(
    session: AsyncSession,
    prefix: str,
    channel: str,
    record_id: str,
    audience: Iterable[str],
) -> None:
    """Queue a change notification in the session's transaction.

    Args:
        session: Session holding the write
        prefix: Notification channel prefix
        channel: Collection channel name
        record_id: ID of the written record
        audience: User IDs whose queries may be affected
    """
    payload = json.dumps({"id": record_id, "audience": sorted(audience)})
    await session.execute(
        text("SELECT pg_notify(:channel, :payload)"),
        {"channel": channel_name(prefix, channel), "payload": payload},
    )


class PostgresChangeFeed(ChangeFeed):
    """Change feed backed by PostgreSQL notifications."""

    def __init__(self, engine: AsyncEngine, channel_prefix: str) -> None:
        """Initialize change feed.

        Args:
            engine: Database engine used for the listening connection
            channel_prefix: Prefix of notification channel names
        """
        super().__init__()
        self.engine = engine
        self.channel_prefix = channel_prefix
        self._connection: AsyncConnection | None = None
        self._driver_connection: Any = None
        self._lost_connection: AsyncConnection | None = None
        self._listening: set[str] = set()
        self._lock = asyncio.Lock()

    async def subscribe(
        self, channel: str, audience_key: str | None = None
    ) -> ChangeStream:
        """Open a stream of events on channel.

        Raises:
            StoreUnavailableError: If the database cannot be reached
        """
        await self._listen(channel)
        return self._register(channel, audience_key)

    async def _listen(self, channel: str) -> None:
        async with self._lock:
            if channel in self._listening:
                return
            try:
                if self._connection is None:
                    await self._discard_lost_connection()
                    self._connection = await self.engine.connect()
                    raw = await self._connection.get_raw_connection()
                    self._driver_connection = raw.driver_connection
                    self._driver_connection.add_termination_listener(
                        self._on_connection_lost
                    )
                await self._driver_connection.add_listener(
                    channel_name(self.channel_prefix, channel), self._on_notification
                )
            except (SQLAlchemyError, asyncpg.PostgresError, OSError) as e:
                logfire.error("Failed to listen for changes", channel=channel, error=str(e))
                await self._reset()
                raise StoreUnavailableError(f"Cannot listen on {channel}: {e}") from e

            self._listening.add(channel)
            logfire.info("Listening for changes", channel=channel)

    def _on_notification(
        self, connection: Any, pid: int, db_channel: str, payload: str
    ) -> None:
        channel = db_channel.removeprefix(f"{self.channel_prefix}_")
        try:
            data = json.loads(payload)
            event = ChangeEvent(
                channel=channel,
                record_id=data["id"],
                audience=frozenset(data.get("audience", [])),
            )
        except (ValueError, KeyError) as e:
            logfire.warn("Malformed change notification", channel=channel, error=str(e))
            return
        self._dispatch(event)

    def _on_connection_lost(self, connection: Any) -> None:
        """Called by asyncpg when the listening connection terminates.

        Every open stream fails, and the next subscribe reconnects.
        """
        logfire.error("Change feed connection lost", channels=sorted(self._listening))
        self._lost_connection = self._connection
        self._connection = None
        self._driver_connection = None
        self._listening.clear()
        self._fail_streams(StoreUnavailableError("Change feed connection lost"))

    async def _discard_lost_connection(self) -> None:
        lost, self._lost_connection = self._lost_connection, None
        if lost is None:
            return
        try:
            await lost.invalidate()
            await lost.close()
        except (SQLAlchemyError, OSError) as e:
            logfire.warn("Failed to release lost change feed connection", error=str(e))

    async def _reset(self) -> None:
        if self._driver_connection is not None:
            self._driver_connection.remove_termination_listener(
                self._on_connection_lost
            )
        if self._connection is not None:
            await self._connection.close()
        self._connection = None
        self._driver_connection = None
        self._listening.clear()
        await self._discard_lost_connection()

    async def close(self) -> None:
        """Stop listening and release the connection."""
        async with self._lock:
            if self._driver_connection is not None:
                for channel in self._listening:
                    await self._driver_connection.remove_listener(
                        channel_name(self.channel_prefix, channel),
                        self._on_notification,
                    )
            await self._reset()
            logfire.info("Change feed closed")

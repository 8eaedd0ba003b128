"""Test configuration and fixtures."""

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Callable

from meet.domain.model.user import User
from meet.domain.repository import UserRepository
from meet.domain.subscription import Snapshot
from meet.domain.value import UserId

# Fixed evaluation instant used across tests
NOW = datetime(2025, 1, 1, 9, 0, tzinfo=timezone.utc)


def later(minutes: int = 0, hours: int = 0, days: int = 0) -> datetime:
    """Instant relative to NOW."""
    return NOW + timedelta(minutes=minutes, hours=hours, days=days)


async def make_user(
    user_repo: UserRepository,
    user_id: str,
    display_name: str,
    bio: str | None = None,
) -> User:
    """Helper to store a test user."""
    user = User(
        id=UserId(user_id),
        email=f"{user_id}@example.com",
        display_name=display_name,
        bio=bio,
        avatar_url=f"https://i.pravatar.cc/150?u={user_id}",
        created_at=NOW,
    )
    return await user_repo.save(user)


class SnapshotRecorder:
    """Listener that records every snapshot it receives."""

    def __init__(self) -> None:
        self.snapshots: list[Snapshot] = []
        self._received = asyncio.Event()

    def __call__(self, snapshot: Snapshot) -> None:
        self.snapshots.append(snapshot)
        self._received.set()

    @property
    def latest(self) -> Snapshot | None:
        return self.snapshots[-1] if self.snapshots else None

    async def wait_for(
        self, predicate: Callable[[Snapshot], bool], timeout: float = 1.0
    ) -> Snapshot:
        """Wait until the latest snapshot satisfies predicate."""

        async def _wait() -> Snapshot:
            while True:
                if self.latest is not None and predicate(self.latest):
                    return self.latest
                self._received.clear()
                await self._received.wait()

        return await asyncio.wait_for(_wait(), timeout)

    async def wait_for_version(self, version: int, timeout: float = 1.0) -> Snapshot:
        return await self.wait_for(lambda s: s.version >= version, timeout)


async def settle(rounds: int = 10) -> None:
    """Let background tasks run."""
    for _ in range(rounds):
        await asyncio.sleep(0)

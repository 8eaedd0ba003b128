"""Live query subscriptions.

A subscription delivers full snapshots of a query's result: once when it
starts and again after every change that concerns its key. Snapshots are
delivered by a single background task, so a newer snapshot is never
followed by an older one. If the change feed drops the subscription, an
error snapshot is delivered and the query listens again, re-reading once it
is back.

Usage:
    async def on_change(snapshot: Snapshot) -> None:
        render(snapshot.items)

    subscription = invitation_service.subscribe(user_id, on_change)
    ...
    subscription.unsubscribe()
"""

import asyncio
import inspect
from typing import Awaitable, Callable, Generic, Sequence, TypeVar

import logfire
from pydantic import Field

from meet.domain.error import StoreUnavailableError
from meet.domain.model.common import DomainModel
from meet.domain.repository.change_feed import ChangeFeed, ChangeStream

T = TypeVar("T")

# Seconds to wait before each attempt to listen again after a lost stream
RESUBSCRIBE_DELAYS = (0.5, 1.0, 2.0, 5.0, 10.0)


class Snapshot(DomainModel, Generic[T]):
    """Full result of a live query at one point in time.

    A failed read is delivered as an empty snapshot carrying the error.
    """

    items: list[T] = Field(default_factory=list)
    version: int
    error: StoreUnavailableError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


SnapshotListener = Callable[[Snapshot], Awaitable[None] | None]


class Subscription:
    """Cancellable handle for a live query."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._closed = False
        self._task: asyncio.Task | None = None
        self._stream: ChangeStream | None = None

    @property
    def closed(self) -> bool:
        return self._closed

    def unsubscribe(self) -> None:
        """Stop delivery and release the change stream.

        Delivery stops immediately; calling this again is a no-op.
        """
        if self._closed:
            return
        self._closed = True
        if self._stream is not None:
            self._stream.close()
        if self._task is not None and self._task is not asyncio.current_task():
            self._task.cancel()
        logfire.debug("Subscription closed", subscription=self.name)

    def _attach(self, stream: ChangeStream) -> bool:
        if self._closed:
            stream.close()
            return False
        self._stream = stream
        return True


class LiveQuery(Generic[T]):
    """Re-runs a query whenever the change feed reports a relevant write."""

    def __init__(
        self,
        name: str,
        change_feed: ChangeFeed,
        channel: str,
        key: str,
        fetch: Callable[[], Awaitable[list[T]]],
        listener: SnapshotListener,
        resubscribe_delays: Sequence[float] = RESUBSCRIBE_DELAYS,
    ) -> None:
        self.name = name
        self.change_feed = change_feed
        self.channel = channel
        self.key = key
        self.fetch = fetch
        self.listener = listener
        self.resubscribe_delays = resubscribe_delays

    def start(self) -> Subscription:
        """Start delivering snapshots in the background.

        Returns immediately; the first snapshot arrives asynchronously.
        """
        subscription = Subscription(f"{self.name}:{self.key}")
        subscription._task = asyncio.create_task(
            self._run(subscription), name=subscription.name
        )
        return subscription

    async def _run(self, subscription: Subscription) -> None:
        try:
            stream = await self.change_feed.subscribe(self.channel, self.key)
        except StoreUnavailableError as e:
            logfire.error(
                "Subscription could not listen for changes",
                subscription=subscription.name,
                error=str(e),
            )
            await self._deliver(subscription, Snapshot(version=1, error=e))
            subscription.unsubscribe()
            return

        if not subscription._attach(stream):
            return

        version = 0
        while not subscription.closed:
            version += 1
            snapshot = await self._snapshot(subscription, version)
            await self._deliver(subscription, snapshot)
            if subscription.closed:
                break
            try:
                await stream.next_batch()
            except StoreUnavailableError as e:
                logfire.warn(
                    "Live query lost its change stream",
                    subscription=subscription.name,
                    error=str(e),
                )
                version += 1
                await self._deliver(subscription, Snapshot(version=version, error=e))
                resumed = await self._resubscribe(subscription)
                if resumed is None:
                    return
                # Loop re-fetches, picking up writes missed while disconnected
                stream = resumed

    async def _resubscribe(self, subscription: Subscription) -> ChangeStream | None:
        """Open a new change stream, retrying after each delay.

        Closes the subscription and returns None if every attempt fails.
        """
        for attempt, delay in enumerate(self.resubscribe_delays, start=1):
            await asyncio.sleep(delay)
            if subscription.closed:
                return None
            try:
                stream = await self.change_feed.subscribe(self.channel, self.key)
            except StoreUnavailableError as e:
                logfire.warn(
                    "Live query resubscribe failed",
                    subscription=subscription.name,
                    attempt=attempt,
                    error=str(e),
                )
                continue
            if not subscription._attach(stream):
                return None
            logfire.info(
                "Live query resubscribed", subscription=subscription.name, attempt=attempt
            )
            return stream

        logfire.error("Live query gave up listening", subscription=subscription.name)
        subscription.unsubscribe()
        return None

    async def _snapshot(self, subscription: Subscription, version: int) -> Snapshot:
        try:
            items = await self.fetch()
        except StoreUnavailableError as e:
            logfire.warn(
                "Live query read failed",
                subscription=subscription.name,
                version=version,
                error=str(e),
            )
            return Snapshot(version=version, error=e)
        return Snapshot(items=items, version=version)

    async def _deliver(self, subscription: Subscription, snapshot: Snapshot) -> None:
        if subscription.closed:
            return
        try:
            result = self.listener(snapshot)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            # A failing listener must not stop later snapshots
            logfire.error(
                "Subscription listener failed",
                subscription=subscription.name,
                version=snapshot.version,
                error=str(e),
            )

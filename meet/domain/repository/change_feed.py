"""Change feed interface.

A change feed tells live queries that something in a collection changed.
Events only carry the record ID and the users it concerns; subscribers
re-run their query to get the new state.
"""

import asyncio
from abc import ABC, abstractmethod
from collections import defaultdict
from typing import Callable

from pydantic import BaseModel, ConfigDict

from meet.domain.error import StoreUnavailableError

INVITATIONS_CHANNEL = "invitations"
MEETINGS_CHANNEL = "meetings"


class ChangeEvent(BaseModel):
    """A committed write to one record of a collection."""

    model_config = ConfigDict(frozen=True)

    channel: str
    record_id: str
    audience: frozenset[str]  # User IDs whose queries may be affected


class ChangeStream:
    """Queue of change events delivered to a single subscriber."""

    def __init__(
        self,
        channel: str,
        audience_key: str | None,
        on_close: Callable[["ChangeStream"], None],
    ) -> None:
        self.channel = channel
        self.audience_key = audience_key
        self._on_close = on_close
        # None is queued only to wake a waiter after fail()
        self._queue: asyncio.Queue[ChangeEvent | None] = asyncio.Queue()
        self._closed = False
        self._error: StoreUnavailableError | None = None

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def failed(self) -> bool:
        return self._error is not None

    def offer(self, event: ChangeEvent) -> None:
        """Queue the event if it concerns this stream's audience key."""
        if self._closed or self._error is not None:
            return
        if self.audience_key is not None and self.audience_key not in event.audience:
            return
        self._queue.put_nowait(event)

    def fail(self, error: StoreUnavailableError) -> None:
        """End the stream because its feed stopped receiving changes.

        The pending or next call to next_batch raises error. The subscriber
        has to open a new stream to hear about later changes.
        """
        if self._closed or self._error is not None:
            return
        self._error = error
        self._queue.put_nowait(None)

    async def next_batch(self) -> list[ChangeEvent]:
        """Wait for at least one event and drain everything already queued.

        Raises:
            StoreUnavailableError: If the stream failed
        """
        batch = [await self._queue.get()]
        while not self._queue.empty():
            batch.append(self._queue.get_nowait())
        if self._error is not None:
            raise self._error
        return [event for event in batch if event is not None]

    def close(self) -> None:
        """Stop receiving events. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        self._on_close(self)


class ChangeFeed(ABC):
    """Fan-out of change events to local streams.

    Implementations decide where events come from (an in-process publish
    or a database notification channel).
    """

    def __init__(self) -> None:
        self._streams: dict[str, set[ChangeStream]] = defaultdict(set)

    @abstractmethod
    async def subscribe(
        self, channel: str, audience_key: str | None = None
    ) -> ChangeStream:
        """Open a stream of events on channel.

        Args:
            channel: Collection channel name
            audience_key: Only deliver events whose audience contains this user ID

        Returns:
            An open change stream

        Raises:
            StoreUnavailableError: If the feed cannot listen on the channel
        """
        pass

    def _register(self, channel: str, audience_key: str | None) -> ChangeStream:
        stream = ChangeStream(channel, audience_key, self._unregister)
        self._streams[channel].add(stream)
        return stream

    def _unregister(self, stream: ChangeStream) -> None:
        self._streams[stream.channel].discard(stream)

    def _dispatch(self, event: ChangeEvent) -> None:
        for stream in list(self._streams.get(event.channel, ())):
            stream.offer(event)

    def _fail_streams(self, error: StoreUnavailableError) -> None:
        """Fail and forget every open stream on every channel."""
        streams = [stream for group in self._streams.values() for stream in group]
        self._streams.clear()
        for stream in streams:
            stream.fail(error)

    def stream_count(self, channel: str) -> int:
        """Number of open streams on channel."""
        return len(self._streams.get(channel, ()))

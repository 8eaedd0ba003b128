"""In-process change feed for testing and single-process deployments."""

from typing import Iterable

import logfire

from meet.domain.error import StoreUnavailableError
from meet.domain.repository.change_feed import ChangeEvent, ChangeFeed, ChangeStream


class InMemoryChangeFeed(ChangeFeed):
    """Change feed fed directly by the in-memory repositories."""

    def __init__(self) -> None:
        super().__init__()
        # Set to simulate a store that refuses new listeners
        self.unavailable = False

    async def subscribe(
        self, channel: str, audience_key: str | None = None
    ) -> ChangeStream:
        """Open a stream of events on channel."""
        if self.unavailable:
            raise StoreUnavailableError(f"Cannot listen on {channel}")
        return self._register(channel, audience_key)

    def publish(self, channel: str, record_id: str, audience: Iterable[str]) -> None:
        """Deliver a committed write to every open stream on channel."""
        event = ChangeEvent(
            channel=channel, record_id=record_id, audience=frozenset(audience)
        )
        logfire.debug("Change published", channel=channel, record_id=record_id)
        self._dispatch(event)

"""Shared behaviour of the in-memory repositories."""

import asyncio

from meet.domain.error import StoreUnavailableError


class InMemoryStore:
    """Simulated round trip to a document store.

    Every operation yields to the event loop once (or sleeps for latency
    seconds), and fails with StoreUnavailableError while unavailable is set.
    """

    def __init__(self, latency: float = 0.0) -> None:
        self.latency = latency
        self.unavailable = False

    async def _round_trip(self, operation: str) -> None:
        await asyncio.sleep(self.latency)
        if self.unavailable:
            raise StoreUnavailableError(f"{type(self).__name__}.{operation} failed")

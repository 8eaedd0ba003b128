"""Unit tests for the PostgreSQL change feed that need no database."""

import json
from types import SimpleNamespace

import pytest

from meet.domain.error import StoreUnavailableError
from meet.domain.repository import INVITATIONS_CHANNEL, MEETINGS_CHANNEL
from meet.persistence.changefeed import PostgresChangeFeed, notify_change
from meet.persistence.changefeed.postgres import channel_name


class _RecordingSession:
    """Stands in for an AsyncSession, recording executed statements."""

    def __init__(self) -> None:
        self.executed: list[tuple[str, dict]] = []

    async def execute(self, statement, params):
        self.executed.append((str(statement), params))


class TestNotifyChange:
    """Tests for notify_change."""

    def test_channel_name(self):
        assert channel_name("meet", INVITATIONS_CHANNEL) == "meet_invitations"

    @pytest.mark.asyncio
    async def test_queues_pg_notify(self):
        session = _RecordingSession()

        await notify_change(session, "meet", INVITATIONS_CHANNEL, "inv-1", {"bob", "alice"})

        statement, params = session.executed[0]
        assert "pg_notify" in statement
        assert params["channel"] == "meet_invitations"
        assert json.loads(params["payload"]) == {
            "id": "inv-1",
            "audience": ["alice", "bob"],
        }


class TestNotificationDispatch:
    """Tests for turning notifications into change events."""

    @pytest.mark.asyncio
    async def test_notification_reaches_matching_stream(self):
        # The engine is only used once a channel is listened on
        feed = PostgresChangeFeed(engine=None, channel_prefix="meet")
        stream = feed._register(INVITATIONS_CHANNEL, "alice")

        feed._on_notification(
            None,
            1,
            "meet_invitations",
            json.dumps({"id": "inv-1", "audience": ["alice"]}),
        )

        batch = await stream.next_batch()
        assert batch[0].record_id == "inv-1"
        assert batch[0].channel == INVITATIONS_CHANNEL

    @pytest.mark.asyncio
    async def test_malformed_notification_is_dropped(self):
        feed = PostgresChangeFeed(engine=None, channel_prefix="meet")
        stream = feed._register(INVITATIONS_CHANNEL, None)

        feed._on_notification(None, 1, "meet_invitations", "not json")
        feed._on_notification(None, 1, "meet_invitations", json.dumps({"audience": []}))
        feed._on_notification(
            None, 1, "meet_invitations", json.dumps({"id": "inv-2", "audience": []})
        )

        batch = await stream.next_batch()
        assert [e.record_id for e in batch] == ["inv-2"]


class _FakeDriverConnection:
    """Stands in for the asyncpg connection behind the listening connection."""

    def __init__(self) -> None:
        self.listeners: dict[str, object] = {}
        self.termination_listeners: list = []

    async def add_listener(self, channel, callback):
        self.listeners[channel] = callback

    async def remove_listener(self, channel, callback):
        self.listeners.pop(channel, None)

    def add_termination_listener(self, callback):
        self.termination_listeners.append(callback)

    def remove_termination_listener(self, callback):
        self.termination_listeners.remove(callback)

    def terminate(self):
        for callback in list(self.termination_listeners):
            callback(self)


class _FakeConnection:
    def __init__(self) -> None:
        self.raw = SimpleNamespace(driver_connection=_FakeDriverConnection())
        self.invalidated = False
        self.closed = False

    async def get_raw_connection(self):
        return self.raw

    async def invalidate(self):
        self.invalidated = True

    async def close(self):
        self.closed = True


class _FakeEngine:
    def __init__(self) -> None:
        self.connections: list[_FakeConnection] = []

    async def connect(self):
        connection = _FakeConnection()
        self.connections.append(connection)
        return connection


class TestConnectionLoss:
    """Tests for losing the listening connection."""

    @pytest.mark.asyncio
    async def test_lost_connection_fails_open_streams(self):
        engine = _FakeEngine()
        feed = PostgresChangeFeed(engine=engine, channel_prefix="meet")
        invitations = await feed.subscribe(INVITATIONS_CHANNEL, "alice")
        meetings = await feed.subscribe(MEETINGS_CHANNEL, "alice")

        engine.connections[0].raw.driver_connection.terminate()

        with pytest.raises(StoreUnavailableError):
            await invitations.next_batch()
        with pytest.raises(StoreUnavailableError):
            await meetings.next_batch()
        assert feed.stream_count(INVITATIONS_CHANNEL) == 0
        assert feed.stream_count(MEETINGS_CHANNEL) == 0

    @pytest.mark.asyncio
    async def test_next_subscribe_listens_on_new_connection(self):
        engine = _FakeEngine()
        feed = PostgresChangeFeed(engine=engine, channel_prefix="meet")
        await feed.subscribe(INVITATIONS_CHANNEL, "alice")
        lost = engine.connections[0]
        lost.raw.driver_connection.terminate()

        stream = await feed.subscribe(INVITATIONS_CHANNEL, "alice")
        feed._on_notification(
            None,
            1,
            "meet_invitations",
            json.dumps({"id": "inv-1", "audience": ["alice"]}),
        )

        assert len(engine.connections) == 2
        assert lost.invalidated and lost.closed
        assert "meet_invitations" in engine.connections[1].raw.driver_connection.listeners
        batch = await stream.next_batch()
        assert batch[0].record_id == "inv-1"

    @pytest.mark.asyncio
    async def test_close_does_not_fail_streams(self):
        engine = _FakeEngine()
        feed = PostgresChangeFeed(engine=engine, channel_prefix="meet")
        stream = await feed.subscribe(INVITATIONS_CHANNEL, "alice")
        driver = engine.connections[0].raw.driver_connection

        await feed.close()

        assert driver.termination_listeners == []
        assert driver.listeners == {}
        assert not stream.failed

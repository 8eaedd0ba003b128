"""Unit tests for MeetingService."""

from datetime import datetime
from uuid import uuid4

import pytest

from meet.domain.model import MEETING_DURATION, MeetingDraft
from meet.domain.repository import MeetingRepository
from meet.domain.service import MeetingService
from meet.domain.value import InvitationId, MeetingTiming, UserId
from tests.conftest import NOW, SnapshotRecorder, later, settle
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked
unit_env = create_env_fixture()


def _draft(
    start: datetime,
    sender: str = "bob",
    receiver: str = "alice",
    title: str = "Sync",
) -> MeetingDraft:
    return MeetingDraft(
        title=title,
        participants=(UserId(sender), UserId(receiver)),
        participant_names=(sender.title(), receiver.title()),
        start_time=start,
        end_time=start + MEETING_DURATION,
        created_from=InvitationId(uuid4()),
    )


class TestPersist:
    """Tests for persist method."""

    @pytest.mark.asyncio
    async def test_assigns_id_and_creation_time(self, unit_env):
        meeting_service = await unit_env.get(MeetingService)
        meeting_repo = await unit_env.get(MeetingRepository)
        draft = _draft(later(days=1))

        meeting = await meeting_service.persist(draft, NOW)

        assert meeting.id is not None
        assert meeting.created_at == NOW
        assert meeting.created_from == draft.created_from
        assert await meeting_repo.find_by_id(meeting.id) == meeting

    @pytest.mark.asyncio
    async def test_find_by_invitation(self, unit_env):
        meeting_service = await unit_env.get(MeetingService)
        draft = _draft(later(days=1))
        meeting = await meeting_service.persist(draft, NOW)

        assert await meeting_service.find_by_invitation(draft.created_from) == meeting
        assert await meeting_service.find_by_invitation(InvitationId(uuid4())) is None


class TestListForParticipant:
    """Tests for list_for_participant method."""

    @pytest.mark.asyncio
    async def test_earliest_start_first_for_either_participant(self, unit_env):
        meeting_service = await unit_env.get(MeetingService)
        late = await meeting_service.persist(_draft(later(days=3), title="Late"), NOW)
        early = await meeting_service.persist(
            _draft(later(days=1), sender="alice", receiver="carol", title="Early"), NOW
        )
        await meeting_service.persist(
            _draft(later(days=2), sender="bob", receiver="carol"), NOW
        )

        meetings = await meeting_service.list_for_participant(UserId("alice"))

        assert [m.id for m in meetings] == [early.id, late.id]


class TestClassify:
    """Tests for classify and partition."""

    def test_future_start_is_upcoming(self):
        meeting = _draft(later(minutes=1))

        assert MeetingService.classify(meeting, NOW) == MeetingTiming.UPCOMING

    def test_start_at_now_is_past(self):
        """A meeting is upcoming only if it starts strictly after now."""
        meeting = _draft(NOW)

        assert MeetingService.classify(meeting, NOW) == MeetingTiming.PAST

    def test_in_progress_meeting_is_past(self):
        meeting = _draft(later(minutes=-30))

        assert MeetingService.classify(meeting, NOW) == MeetingTiming.PAST

    def test_partition_keeps_order(self):
        meetings = [
            _draft(later(hours=-2), title="a"),
            _draft(later(hours=1), title="b"),
            _draft(later(hours=-1), title="c"),
            _draft(later(hours=2), title="d"),
        ]

        upcoming, past = MeetingService.partition(meetings, NOW)

        assert [m.title for m in upcoming] == ["b", "d"]
        assert [m.title for m in past] == ["a", "c"]


class TestSubscribe:
    """Tests for live meeting subscriptions."""

    @pytest.mark.asyncio
    async def test_both_participants_see_new_meeting(self, unit_env):
        meeting_service = await unit_env.get(MeetingService)
        alice = SnapshotRecorder()
        bob = SnapshotRecorder()
        alice_sub = meeting_service.subscribe(UserId("alice"), alice)
        bob_sub = meeting_service.subscribe(UserId("bob"), bob)
        await alice.wait_for_version(1)
        await bob.wait_for_version(1)

        meeting = await meeting_service.persist(_draft(later(days=1)), NOW)
        alice_snapshot = await alice.wait_for(lambda s: len(s.items) == 1)
        bob_snapshot = await bob.wait_for(lambda s: len(s.items) == 1)
        alice_sub.unsubscribe()
        bob_sub.unsubscribe()

        assert alice_snapshot.items[0].id == meeting.id
        assert bob_snapshot.items[0].id == meeting.id

    @pytest.mark.asyncio
    async def test_non_participant_gets_no_update(self, unit_env):
        meeting_service = await unit_env.get(MeetingService)
        carol = SnapshotRecorder()
        subscription = meeting_service.subscribe(UserId("carol"), carol)
        await carol.wait_for_version(1)

        await meeting_service.persist(_draft(later(days=1)), NOW)
        await settle()
        subscription.unsubscribe()

        assert len(carol.snapshots) == 1
        assert carol.snapshots[0].items == []

    @pytest.mark.asyncio
    async def test_snapshot_ordered_by_start(self, unit_env):
        meeting_service = await unit_env.get(MeetingService)
        second = await meeting_service.persist(_draft(later(days=2)), NOW)
        recorder = SnapshotRecorder()
        subscription = meeting_service.subscribe(UserId("alice"), recorder)
        await recorder.wait_for_version(1)

        first = await meeting_service.persist(_draft(later(days=1)), NOW)
        snapshot = await recorder.wait_for(lambda s: len(s.items) == 2)
        subscription.unsubscribe()

        assert [m.id for m in snapshot.items] == [first.id, second.id]

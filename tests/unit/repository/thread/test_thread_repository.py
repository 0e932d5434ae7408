import asyncio
import uuid
import pytest
from datetime import datetime, timedelta, timezone
from sqlalchemy.ext.asyncio import AsyncSession
from synapse.models.thread import canonical_pair
from synapse.db.session import AsyncSessionLocal
from synapse.repositories import thread as thread_repo

T0 = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)

@pytest.mark.unit
def test_canonical_pair_is_order_independent():
    a, b = uuid.uuid4(), uuid.uuid4()
    assert canonical_pair(a, b) == canonical_pair(b, a)
    low, high = canonical_pair(a, b)
    assert low < high

@pytest.mark.asyncio
@pytest.mark.unit
async def test_find_by_pair_symmetry(db_session: AsyncSession, make_user):
    alice, bob, carol = await make_user("alice"), await make_user("bob"), await make_user("carol")
    th = await thread_repo.create(db_session, sender_id=alice.id, receiver_id=bob.id, text="hi", at=T0)
    ab = await thread_repo.find_by_pair(db_session, alice.id, bob.id)
    ba = await thread_repo.find_by_pair(db_session, bob.id, alice.id)
    assert ab is not None and ba is not None and ab.id == ba.id == th.id
    assert await thread_repo.find_by_pair(db_session, alice.id, carol.id) is None

@pytest.mark.asyncio
@pytest.mark.unit
async def test_record_new_message_moves_summary_and_counters(db_session: AsyncSession, make_user):
    alice, bob = await make_user("alice"), await make_user("bob")
    th = await thread_repo.create(db_session, sender_id=alice.id, receiver_id=bob.id, text="hi", at=T0)
    later = T0 + timedelta(minutes=1)
    await thread_repo.record_new_message(
        db_session, th.id, sender_id=alice.id, receiver_id=bob.id, text="again", at=later
    )
    assert await thread_repo.get_unread_counters(db_session, th.id) == {alice.id: 0, bob.id: 2}
    await thread_repo.record_new_message(
        db_session, th.id, sender_id=bob.id, receiver_id=alice.id, text="hey", at=later + timedelta(minutes=1)
    )
    assert await thread_repo.get_unread_counters(db_session, th.id) == {alice.id: 1, bob.id: 0}
    fetched = await thread_repo.get_by_id(db_session, th.id)
    assert fetched.last_message == "hey"
    assert fetched.last_message_sender_id == bob.id

@pytest.mark.asyncio
@pytest.mark.unit
async def test_reset_unread_reports_modifications(db_session: AsyncSession, make_user):
    alice, bob = await make_user("alice"), await make_user("bob")
    th = await thread_repo.create(db_session, sender_id=alice.id, receiver_id=bob.id, text="hi", at=T0)
    assert await thread_repo.reset_unread(db_session, th.id, bob.id) == 1
    assert await thread_repo.reset_unread(db_session, th.id, bob.id) == 0
    assert await thread_repo.get_unread_counters(db_session, th.id) == {alice.id: 0, bob.id: 0}

@pytest.mark.asyncio
@pytest.mark.unit
async def test_list_for_user_newest_first(db_session: AsyncSession, make_user):
    me = await make_user("me")
    friends = [await make_user(n) for n in ("ann", "ben", "cat")]
    ids = []
    for minutes, friend in enumerate(friends):
        th = await thread_repo.create(
            db_session, sender_id=friend.id, receiver_id=me.id, text=f"from {friend.name}",
            at=T0 + timedelta(minutes=minutes),
        )
        ids.append(th.id)
    rows = await thread_repo.list_for_user(db_session, me.id)
    assert [t.id for t, _other, _unread in rows] == list(reversed(ids))
    assert [other.id for _t, other, _unread in rows] == [f.id for f in reversed(friends)]
    assert all(unread == 1 for _t, _other, unread in rows)

@pytest.mark.asyncio
@pytest.mark.unit
async def test_list_for_user_only_own_threads(db_session: AsyncSession, make_user):
    alice, bob, carol = await make_user("alice"), await make_user("bob"), await make_user("carol")
    await thread_repo.create(db_session, sender_id=alice.id, receiver_id=bob.id, text="x", at=T0)
    await thread_repo.create(db_session, sender_id=bob.id, receiver_id=carol.id, text="y", at=T0)
    rows = await thread_repo.list_for_user(db_session, alice.id)
    assert len(rows) == 1
    _thread, other, unread = rows[0]
    assert other.id == bob.id and unread == 0
    assert await thread_repo.list_for_user(db_session, uuid.uuid4()) == []

@pytest.mark.asyncio
@pytest.mark.unit
async def test_has_unread(db_session: AsyncSession, make_user):
    alice, bob = await make_user("alice"), await make_user("bob")
    assert await thread_repo.has_unread(db_session, bob.id) is False
    th = await thread_repo.create(db_session, sender_id=alice.id, receiver_id=bob.id, text="hi", at=T0)
    assert await thread_repo.has_unread(db_session, bob.id) is True
    assert await thread_repo.has_unread(db_session, alice.id) is False
    await thread_repo.reset_unread(db_session, th.id, bob.id)
    assert await thread_repo.has_unread(db_session, bob.id) is False

@pytest.mark.asyncio
@pytest.mark.unit
async def test_concurrent_increments_are_not_lost(db_session: AsyncSession, make_user):
    alice, bob = await make_user("alice"), await make_user("bob")
    th = await thread_repo.create(db_session, sender_id=alice.id, receiver_id=bob.id, text="hi", at=T0)
    await db_session.commit()
    thread_id, bob_id = th.id, bob.id

    async def bump():
        async with AsyncSessionLocal() as session:
            await thread_repo.increment_unread(session, thread_id, bob_id)
            await session.commit()

    # each request runs in its own session, as concurrent sends do
    await asyncio.gather(*(bump() for _ in range(5)))

    async with AsyncSessionLocal() as fresh:
        counters = await thread_repo.get_unread_counters(fresh, thread_id)
    assert counters[bob_id] == 6

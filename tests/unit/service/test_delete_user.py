import pytest
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession
from synapse.repositories import message as message_repo
from synapse.repositories import thread as thread_repo
from synapse.services.message import send_message
from synapse.services.thread import list_threads_for_user, has_unread_messages
from synapse.services.user import delete_user

async def _enforce_foreign_keys(session: AsyncSession):
    # sqlite only checks foreign keys when asked to, per connection
    if session.get_bind().dialect.name == "sqlite":
        await session.execute(text("PRAGMA foreign_keys=ON"))

@pytest.mark.asyncio
@pytest.mark.unit
async def test_delete_user_with_chat_history(db_session: AsyncSession, make_user):
    alice, bob = await make_user("alice"), await make_user("bob")
    alice_id, bob_id = alice.id, bob.id
    await _enforce_foreign_keys(db_session)
    sent = await send_message(db_session, sender_id=alice_id, receiver_id=bob_id, text="hi")
    reply = await send_message(db_session, sender_id=bob_id, receiver_id=alice_id, text="hey")

    await delete_user(db_session, alice_id)
    await db_session.flush()

    # the deleted user's counter goes with them; the thread and log stay
    assert await thread_repo.get_unread_counters(db_session, sent.thread_id) == {bob_id: 0}
    assert await thread_repo.get_by_id(db_session, sent.thread_id) is not None
    assert (await message_repo.get_by_id(db_session, reply.message_id)).text == "hey"
    # and the chat drops out of the survivor's listing
    assert await list_threads_for_user(db_session, bob_id) == []
    assert await has_unread_messages(db_session, bob_id) is False
    await db_session.commit()

@pytest.mark.asyncio
@pytest.mark.integration
async def test_delete_user_endpoint_after_chatting(client, db_session: AsyncSession, make_user):
    alice, bob = await make_user("alice"), await make_user("bob")
    resp = await client.post('/api/v1/messages', json={"senderId": str(alice.id), "receiverId": str(bob.id), "text": "hi"})
    assert resp.status_code == 201
    d = await client.delete(f'/api/v1/users/{alice.id}')
    assert d.status_code == 204
    listing = await client.get(f'/api/v1/chat-info/{bob.id}')
    assert listing.json() == []

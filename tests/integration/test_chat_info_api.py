import uuid
import pytest

async def _send(client, sender, receiver, text):
	resp = await client.post('/api/v1/messages/', json={"senderId": str(sender.id), "receiverId": str(receiver.id), "text": text})
	assert resp.status_code == 201, resp.text
	return resp.json()

@pytest.mark.asyncio
@pytest.mark.integration
async def test_chat_list(client, make_user):
	alice, bob, carol = await make_user("alice"), await make_user("bob"), await make_user("carol")
	await _send(client, bob, alice, "from bob")
	await _send(client, carol, alice, "from carol")
	resp = await client.get(f'/api/v1/chat-info/{alice.id}')
	assert resp.status_code == 200
	chats = resp.json()
	# most recent first
	assert [c['other_user']['name'] for c in chats] == ["Carol", "Bob"]
	assert chats[0]['last_message'] == "from carol"
	assert chats[0]['last_message_sender_id'] == str(carol.id)
	assert all(c['unread_count'] == 1 for c in chats)
	assert 'email' not in chats[0]['other_user']

@pytest.mark.asyncio
@pytest.mark.integration
async def test_chat_list_empty(client, make_user):
	alice = await make_user("alice")
	resp = await client.get(f'/api/v1/chat-info/{alice.id}')
	assert resp.status_code == 200
	assert resp.json() == []

@pytest.mark.asyncio
@pytest.mark.integration
async def test_unread_flag(client, make_user):
	alice, bob = await make_user("alice"), await make_user("bob")
	assert (await client.get(f'/api/v1/chat-info/unread/{bob.id}')).json() == {"has_new_messages": False}
	await _send(client, alice, bob, "hi")
	assert (await client.get(f'/api/v1/chat-info/unread/{bob.id}')).json() == {"has_new_messages": True}
	assert (await client.get(f'/api/v1/chat-info/unread/{alice.id}')).json() == {"has_new_messages": False}

@pytest.mark.asyncio
@pytest.mark.integration
async def test_mark_read(client, make_user):
	alice, bob = await make_user("alice"), await make_user("bob")
	sent = await _send(client, alice, bob, "hi")
	await _send(client, alice, bob, "again")
	resp = await client.patch(f"/api/v1/chat-info/read/{sent['thread_id']}/{bob.id}")
	assert resp.status_code == 200
	assert resp.json() == {"success": True, "message": "Unread messages cleared", "modified": 1}
	again = await client.patch(f"/api/v1/chat-info/read/{sent['thread_id']}/{bob.id}")
	assert again.status_code == 200
	assert again.json()['modified'] == 0
	chats = (await client.get(f'/api/v1/chat-info/{bob.id}')).json()
	assert chats[0]['unread_count'] == 0

@pytest.mark.asyncio
@pytest.mark.integration
async def test_mark_read_unknown_chat(client, make_user):
	alice = await make_user("alice")
	resp = await client.patch(f'/api/v1/chat-info/read/{uuid.uuid4()}/{alice.id}')
	assert resp.status_code == 404
	assert resp.json()['detail'] == "Chat not found"

@pytest.mark.asyncio
@pytest.mark.integration
async def test_mark_read_outsider(client, make_user):
	alice, bob, carol = await make_user("alice"), await make_user("bob"), await make_user("carol")
	sent = await _send(client, alice, bob, "hi")
	resp = await client.patch(f"/api/v1/chat-info/read/{sent['thread_id']}/{carol.id}")
	assert resp.status_code == 403

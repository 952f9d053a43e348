"""Tests for the in-memory thread store."""

import re

import pytest
from structlog.testing import capture_logs

from threadflow.domain.context.memory.thread_store import ThreadStore
from threadflow.domain.models.conversation import ChatMessage, MessageRole, TextPart


class TestThreadStore:

    @pytest.mark.asyncio
    async def test_create_assigns_ids_and_timestamps(self, store):
        thread_id = await store.create([ChatMessage.user("hi")])
        thread = await store.get(thread_id)

        assert re.match(r"^thread_\d+_[0-9a-z]{9}$", thread_id)
        assert thread.session_id.startswith("session_")
        assert thread.created_at == thread.last_message_at
        assert thread.brand_voice_injected is False

    @pytest.mark.asyncio
    async def test_ids_are_unique(self, store):
        ids = {await store.create([]) for _ in range(50)}
        assert len(ids) == 50

    @pytest.mark.asyncio
    async def test_get_unknown_returns_none(self, store):
        assert await store.get("missing") is None

    @pytest.mark.asyncio
    async def test_get_returns_defensive_copy(self, store):
        thread_id = await store.create([ChatMessage.user("hi")])
        copy = await store.get(thread_id)
        copy.messages.append(ChatMessage.assistant("tampered"))

        fresh = await store.get(thread_id)
        assert len(fresh.messages) == 1

    @pytest.mark.asyncio
    async def test_append_updates_last_message_at(self, store):
        thread_id = await store.create([])
        before = (await store.get(thread_id)).last_message_at

        thread = await store.append(thread_id, ChatMessage.user("hi"))

        assert thread.last_message_at >= before
        assert thread.messages[-1].content == "hi"

    @pytest.mark.asyncio
    async def test_append_unknown_returns_none(self, store):
        assert await store.append("missing", ChatMessage.user("hi")) is None
        assert await store.count() == 0

    @pytest.mark.asyncio
    async def test_append_windows_stored_thread(self):
        store = ThreadStore(max_messages=5)
        thread_id = await store.create([ChatMessage.system("persona")], brand_voice_injected=True)

        for i in range(12):
            thread = await store.append(thread_id, ChatMessage.user(f"m{i}"))
            assert len(thread.messages) <= 5

        stored = await store.get(thread_id)
        assert stored.messages[0].content == "persona"
        assert [m.content for m in stored.messages[1:]] == ["m8", "m9", "m10", "m11"]

    @pytest.mark.asyncio
    async def test_create_logs_stored_count(self):
        store = ThreadStore(max_messages=3)
        seed = [ChatMessage.system("persona")] + [ChatMessage.user(f"m{i}") for i in range(6)]

        with capture_logs() as logs:
            thread_id = await store.create(seed)

        created = [entry for entry in logs if entry["event"] == "Created thread"]
        assert created[0]["message_count"] == 3
        assert len((await store.get(thread_id)).messages) == 3

    @pytest.mark.asyncio
    async def test_remove_is_idempotent(self, store):
        thread_id = await store.create([])

        assert await store.remove(thread_id) is True
        assert await store.remove(thread_id) is False
        assert await store.remove("never-existed") is False

    @pytest.mark.asyncio
    async def test_clear(self, store):
        await store.create([])
        await store.create([])

        assert await store.clear() == 2
        assert await store.thread_ids() == []

    def test_invalid_cap(self):
        with pytest.raises(ValueError):
            ThreadStore(max_messages=0)


class TestStoredHistoryIsolation:
    """Messages handed to the store cannot be edited through the caller's reference."""

    def test_multimodal_content_is_immutable(self):
        message = ChatMessage.user([TextPart(text="original")])

        assert isinstance(message.content, tuple)
        with pytest.raises(AttributeError):
            message.content.append(TextPart(text="INJECTED"))
        with pytest.raises(TypeError):
            message.content[0] = TextPart(text="rewritten")

    @pytest.mark.asyncio
    async def test_append_keeps_its_own_copy(self, store):
        thread_id = await store.create([])
        # unvalidated construction leaves a mutable list in place
        message = ChatMessage.model_construct(
            role=MessageRole.USER, content=[TextPart(text="original")]
        )

        await store.append(thread_id, message)
        message.content.append(TextPart(text="INJECTED"))
        message.content[0] = TextPart(text="rewritten")

        stored = await store.get(thread_id)
        assert [part.text for part in stored.messages[0].content] == ["original"]

    @pytest.mark.asyncio
    async def test_create_keeps_its_own_copy(self, store):
        message = ChatMessage.model_construct(
            role=MessageRole.USER, content=[TextPart(text="seed")]
        )

        thread_id = await store.create([message])
        message.content.clear()

        stored = await store.get(thread_id)
        assert stored.messages[0] is not message
        assert [part.text for part in stored.messages[0].content] == ["seed"]

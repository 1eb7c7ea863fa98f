import json

from presence_toolkit.transcripts.base import TranscriptEntry, conversation_key
from presence_toolkit.transcripts.in_memory import InMemoryTranscriptStore


def test_conversation_key_is_order_independent():
    assert conversation_key("bob", "alice") == "alice|bob"
    assert conversation_key("alice", "bob") == "alice|bob"


async def test_history_is_empty_before_any_message(transcripts):
    assert await transcripts.history("alice", "bob") == []
    assert await transcripts.history("alice", "bob") == []


async def test_history_is_shared_and_in_append_order(transcripts):
    await transcripts.append("alice", "bob", "alice", "hi")
    await transcripts.append("bob", "alice", "bob", "hey")
    await transcripts.append("alice", "bob", "alice", "how are you?")

    history = await transcripts.history("alice", "bob")
    assert [(entry.sender, entry.text) for entry in history] == [
        ("alice", "hi"),
        ("bob", "hey"),
        ("alice", "how are you?"),
    ]
    assert await transcripts.history("bob", "alice") == history


async def test_transcripts_of_different_pairs_are_isolated(transcripts):
    await transcripts.append("alice", "bob", "alice", "for bob")
    await transcripts.append("alice", "carol", "alice", "for carol")

    assert [entry.text for entry in await transcripts.history("bob", "alice")] == ["for bob"]
    assert [entry.text for entry in await transcripts.history("carol", "alice")] == ["for carol"]
    assert await transcripts.history("bob", "carol") == []


async def test_timestamps_never_decrease_when_the_clock_steps_back():
    ticks = iter([1_000, 2_000, 1_500, 3_000])
    store = InMemoryTranscriptStore(clock=lambda: next(ticks))

    for text in ("a", "b", "c", "d"):
        await store.append("alice", "bob", "alice", text)

    assert [entry.timestamp for entry in await store.history("alice", "bob")] == [1_000, 2_000, 2_000, 3_000]


async def test_returned_history_is_a_copy(transcripts):
    await transcripts.append("alice", "bob", "alice", "hi")
    history = await transcripts.history("alice", "bob")
    history.clear()

    assert len(await transcripts.history("alice", "bob")) == 1


def test_entry_serializes_sender_as_from():
    entry = TranscriptEntry(sender="alice", text="hi", timestamp=42)
    assert json.loads(entry.model_dump_json(by_alias=True)) == {"from": "alice", "text": "hi", "timestamp": 42}

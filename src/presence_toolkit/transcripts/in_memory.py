import asyncio
from collections.abc import Callable

from presence_toolkit.transcripts.base import TranscriptEntry, TranscriptStore, conversation_key
from presence_toolkit.utils.time import get_current_timestamp


class InMemoryTranscriptStore(TranscriptStore):
    """
    Dictionary of lists keyed by 'conversation_key'.

    Reads never create a transcript. Timestamps come from 'clock' and are
    clamped to the last entry of the same transcript, so a wall clock stepping
    backwards cannot reorder history.
    """

    def __init__(self, clock: Callable[[], int] = get_current_timestamp) -> None:
        self._transcripts: dict[str, list[TranscriptEntry]] = {}
        self._clock = clock
        self._lock = asyncio.Lock()

    async def append(self, a: str, b: str, sender: str, text: str) -> TranscriptEntry:
        key = conversation_key(a, b)
        async with self._lock:
            transcript = self._transcripts.setdefault(key, [])
            timestamp = self._clock()
            if transcript:
                timestamp = max(timestamp, transcript[-1].timestamp)
            entry = TranscriptEntry(sender=sender, text=text, timestamp=timestamp)
            transcript.append(entry)
        return entry

    async def history(self, a: str, b: str) -> list[TranscriptEntry]:
        async with self._lock:
            return list(self._transcripts.get(conversation_key(a, b), ()))

"""
Transcript data model and storage interface.

A transcript is the append-only message log shared by two identities. Both
participants address the same transcript through 'conversation_key', which
orders the pair canonically, so 'history(a, b)' and 'history(b, a)' are always
the same sequence. Entries are never edited or deleted and are returned in
append order.

The store does not check friendship; the router authorizes before calling it.

Concrete implementation: 'InMemoryTranscriptStore'.
"""

from abc import ABC, abstractmethod

from pydantic import BaseModel, ConfigDict, Field

CONVERSATION_KEY_SEPARATOR = "|"


def conversation_key(a: str, b: str) -> str:
    """Canonical key of the unordered pair (a, b)."""
    first, second = sorted((a, b))
    return f"{first}{CONVERSATION_KEY_SEPARATOR}{second}"


class TranscriptEntry(BaseModel):
    """
    One chat message as recorded in a transcript.

    'sender' is serialized as 'from' on the wire. 'timestamp' is in
    milliseconds and never decreases within one transcript.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    sender: str = Field(alias="from")
    text: str
    timestamp: int


class TranscriptStore(ABC):
    """Abstract repository for per-pair message transcripts."""

    @abstractmethod
    async def append(self, a: str, b: str, sender: str, text: str) -> TranscriptEntry:
        """Append a message from 'sender' to the transcript of (a, b) and return it."""
        pass

    @abstractmethod
    async def history(self, a: str, b: str) -> list[TranscriptEntry]:
        """Return the transcript of (a, b) in append order; empty if none exists."""
        pass

"""
Presentation profile storage.

Profiles hold per-identity metadata that the router forwards but never
interprets; currently only the avatar (typically a data URL chosen by the
client). Profiles outlive connections for the life of the process, so a
friend who reconnects keeps the avatar they last published.

Concrete implementation: 'InMemoryProfileDirectory'.
"""

from abc import ABC, abstractmethod


class ProfileDirectory(ABC):
    """Abstract store of per-identity presentation metadata."""

    @abstractmethod
    async def set_avatar(self, name: str, avatar: str) -> None:
        pass

    @abstractmethod
    async def avatar_of(self, name: str) -> str | None:
        pass

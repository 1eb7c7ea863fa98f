import asyncio

from presence_toolkit.profiles.base import ProfileDirectory


class InMemoryProfileDirectory(ProfileDirectory):
    def __init__(self) -> None:
        self._avatars: dict[str, str] = {}
        self._lock = asyncio.Lock()

    async def set_avatar(self, name: str, avatar: str) -> None:
        async with self._lock:
            self._avatars[name] = avatar

    async def avatar_of(self, name: str) -> str | None:
        async with self._lock:
            return self._avatars.get(name)

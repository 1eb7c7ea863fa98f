import asyncio

from loguru import logger

from presence_toolkit.connections.base import ClaimResult, ConnectionRegistry
from presence_toolkit.errors import InvalidName, NameTaken


class InMemoryConnectionRegistry(ConnectionRegistry):
    """
    Process-local connection registry backed by two dictionaries.

    '_names' maps connection id to the claimed name (None while anonymous) and
    '_owners' is its inverse for claimed names only. Both maps are only touched
    while '_lock' is held, so the pair is always consistent.
    """

    def __init__(self) -> None:
        self._names: dict[str, str | None] = {}
        self._owners: dict[str, str] = {}
        self._lock = asyncio.Lock()

    async def open(self, connection_id: str) -> None:
        async with self._lock:
            self._names.setdefault(connection_id, None)

    async def claim(self, connection_id: str, name: str) -> ClaimResult:
        normalized = name.strip()
        if not normalized:
            raise InvalidName()

        async with self._lock:
            if connection_id not in self._names:
                raise KeyError(f"Connection {connection_id!r} is not open")
            owner = self._owners.get(normalized)
            if owner is not None and owner != connection_id:
                raise NameTaken()

            previous = self._names.get(connection_id)
            if previous is not None and previous != normalized:
                del self._owners[previous]
            self._names[connection_id] = normalized
            self._owners[normalized] = connection_id

        if previous != normalized:
            logger.info(f"Connection {connection_id} claimed {normalized!r} (previous={previous!r})")
        return ClaimResult(connection_id=connection_id, name=normalized, previous=previous)

    async def resolve(self, name: str) -> str | None:
        async with self._lock:
            return self._owners.get(name)

    async def identity_of(self, connection_id: str) -> str | None:
        async with self._lock:
            return self._names.get(connection_id)

    async def release(self, connection_id: str) -> str | None:
        async with self._lock:
            name = self._names.pop(connection_id, None)
            if name is not None and self._owners.get(name) == connection_id:
                del self._owners[name]

        if name is not None:
            logger.info(f"Released {name!r} from connection {connection_id}")
        return name

    async def online_identities(self) -> list[str]:
        async with self._lock:
            return sorted(self._owners)

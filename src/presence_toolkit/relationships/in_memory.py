import asyncio

from loguru import logger

from presence_toolkit.relationships.base import RelationshipGraph, RequestOutcome


class InMemoryRelationshipGraph(RelationshipGraph):
    """
    Adjacency-set implementation of 'RelationshipGraph'.

    '_friends[name]' holds the friends of 'name' and '_pending[name]' the
    requesters waiting on 'name'. Both edge directions are written under the
    same lock acquisition, so no reader ever observes a one-sided friendship.
    """

    def __init__(self) -> None:
        self._friends: dict[str, set[str]] = {}
        self._pending: dict[str, set[str]] = {}
        self._lock = asyncio.Lock()

    async def ensure_identity(self, name: str) -> None:
        async with self._lock:
            self._friends.setdefault(name, set())
            self._pending.setdefault(name, set())

    async def is_known(self, name: str) -> bool:
        async with self._lock:
            return name in self._friends

    async def request(self, requester: str, target: str) -> RequestOutcome:
        async with self._lock:
            if requester == target or target not in self._friends or requester not in self._friends:
                return RequestOutcome.DROPPED
            if target in self._friends[requester]:
                return RequestOutcome.ALREADY_FRIENDS
            self._pending[target].add(requester)
        logger.debug(f"Friend request pending: {requester!r} -> {target!r}")
        return RequestOutcome.PENDING

    async def respond(self, target: str, requester: str, accept: bool) -> bool:
        async with self._lock:
            pending = self._pending.get(target)
            if pending is None or requester not in pending:
                return False
            pending.discard(requester)
            if not accept or requester not in self._friends:
                return False
            self._friends[target].add(requester)
            self._friends[requester].add(target)
            # a crossed request in the other direction is settled by the same edge
            self._pending[requester].discard(target)
        logger.info(f"Friendship created: {requester!r} <-> {target!r}")
        return True

    async def are_friends(self, a: str, b: str) -> bool:
        async with self._lock:
            return b in self._friends.get(a, ())

    async def friends_of(self, name: str) -> list[str]:
        async with self._lock:
            return sorted(self._friends.get(name, ()))

    async def pending_for(self, name: str) -> list[str]:
        async with self._lock:
            return sorted(self._pending.get(name, ()))

"""
Friendship graph and pending friend requests.

Friendship is an undirected edge between two identities: once A and B are
friends, both 'are_friends(A, B)' and 'are_friends(B, A)' hold. Edges are only
created by accepting a pending request and are never removed. A request is a
directed pending relation from requester to target; each ordered pair has at
most one outstanding request, so re-sending a request is a no-op.

An identity becomes "known" to the graph the first time it claims a name
('ensure_identity'). Requests addressed to identities the graph has never
seen are dropped, which keeps "never connected" distinct from "offline".

Concrete implementation: 'InMemoryRelationshipGraph'.
"""

from abc import ABC, abstractmethod
from enum import StrEnum


class RequestOutcome(StrEnum):
    """Result of 'RelationshipGraph.request'."""

    DROPPED = "dropped"
    ALREADY_FRIENDS = "already_friends"
    PENDING = "pending"


class RelationshipGraph(ABC):
    """Abstract store for symmetric friendships and directed pending requests."""

    @abstractmethod
    async def ensure_identity(self, name: str) -> None:
        """Create empty friend and pending sets for 'name' if it is new."""
        pass

    @abstractmethod
    async def is_known(self, name: str) -> bool:
        pass

    @abstractmethod
    async def request(self, requester: str, target: str) -> RequestOutcome:
        """Record a pending request from 'requester' to 'target'.

        Returns DROPPED for unknown targets and self-requests, ALREADY_FRIENDS
        when the edge already exists, and PENDING otherwise (including when the
        same request was already pending).
        """
        pass

    @abstractmethod
    async def respond(self, target: str, requester: str, accept: bool) -> bool:
        """Resolve the request from 'requester' to 'target'.

        The pending entry is removed either way. Returns True only when a new
        friendship edge was created, which requires the request to have been
        pending and 'accept' to be true.
        """
        pass

    @abstractmethod
    async def are_friends(self, a: str, b: str) -> bool:
        pass

    @abstractmethod
    async def friends_of(self, name: str) -> list[str]:
        pass

    @abstractmethod
    async def pending_for(self, name: str) -> list[str]:
        """Requesters currently waiting on an answer from 'name'."""
        pass

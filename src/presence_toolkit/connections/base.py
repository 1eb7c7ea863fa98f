"""
Connection registry data model and storage interface.

A connection is an opaque handle to one live transport session. It is opened
when the transport accepts a socket, may hold at most one claimed display
name at a time, and is released exactly once when the transport closes. The
registry is the only place that knows which connection currently speaks for
which identity, so it is also where the "one live connection per name" rule
is enforced.

The 'ConnectionRegistry' ABC keeps the router free of storage details.
Concrete implementation: 'InMemoryConnectionRegistry'.
"""

from abc import ABC, abstractmethod

from pydantic import BaseModel


class ClaimResult(BaseModel):
    """
    Outcome of a successful claim.

    'previous' is the name the connection held before the claim, or None. It
    equals 'name' when a connection re-claims the name it already holds.
    """

    connection_id: str
    name: str
    previous: str | None = None


class ConnectionRegistry(ABC):
    """Abstract registry binding live connections to claimed identities."""

    @abstractmethod
    async def open(self, connection_id: str) -> None:
        """Register a freshly accepted, still anonymous connection."""
        pass

    @abstractmethod
    async def claim(self, connection_id: str, name: str) -> ClaimResult:
        """Bind 'name' to the connection.

        Raises 'InvalidName' if the trimmed name is empty and 'NameTaken' if a
        different live connection holds it. On failure the connection keeps
        whatever identity it had before. Claiming on a connection that was
        never opened, or was already released, raises KeyError.
        """
        pass

    @abstractmethod
    async def resolve(self, name: str) -> str | None:
        """Return the live connection holding 'name', or None when offline."""
        pass

    @abstractmethod
    async def identity_of(self, connection_id: str) -> str | None:
        """Return the name bound to the connection, or None while anonymous."""
        pass

    @abstractmethod
    async def release(self, connection_id: str) -> str | None:
        """Forget the connection and free its name. Returns the freed name, if any."""
        pass

    @abstractmethod
    async def online_identities(self) -> list[str]:
        pass

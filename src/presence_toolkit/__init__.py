"""
Presence and friend-messaging router.

Clients connect over a WebSocket, claim a display name, become friends through
a request/accept handshake and exchange chat messages and typing signals. The
stores are pluggable; the in-memory implementations keep everything for the
life of the process:

    from presence_toolkit import (
        Router, InMemoryConnectionRegistry, InMemoryRelationshipGraph,
        InMemoryTranscriptStore, InMemoryProfileDirectory, create_app,
    )
"""

from presence_toolkit.api.websocket import ConnectionHub, create_app
from presence_toolkit.connections.in_memory import InMemoryConnectionRegistry
from presence_toolkit.profiles.in_memory import InMemoryProfileDirectory
from presence_toolkit.relationships.in_memory import InMemoryRelationshipGraph
from presence_toolkit.router.router import Delivery, IdentityStatus, Router
from presence_toolkit.transcripts.in_memory import InMemoryTranscriptStore

__all__ = [
    "ConnectionHub",
    "Delivery",
    "IdentityStatus",
    "InMemoryConnectionRegistry",
    "InMemoryProfileDirectory",
    "InMemoryRelationshipGraph",
    "InMemoryTranscriptStore",
    "Router",
    "create_app",
]

import pytest

from presence_toolkit.connections.in_memory import InMemoryConnectionRegistry
from presence_toolkit.profiles.in_memory import InMemoryProfileDirectory
from presence_toolkit.relationships.in_memory import InMemoryRelationshipGraph
from presence_toolkit.router.router import Router
from presence_toolkit.transcripts.in_memory import InMemoryTranscriptStore


@pytest.fixture
def registry():
    return InMemoryConnectionRegistry()


@pytest.fixture
def graph():
    return InMemoryRelationshipGraph()


@pytest.fixture
def transcripts():
    return InMemoryTranscriptStore()


@pytest.fixture
def profiles():
    return InMemoryProfileDirectory()


@pytest.fixture
def router(registry, graph, transcripts, profiles):
    return Router(registry=registry, graph=graph, transcripts=transcripts, profiles=profiles)


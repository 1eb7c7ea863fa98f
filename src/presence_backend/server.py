"""
Presence server entry point.

Wires the in-memory stores into a 'Router', mounts it on a FastAPI app and
serves it with uvicorn. All state lives in process memory and is gone on
restart.

Usage:
    python -m presence_backend.server

    PRESENCE_PORT=8080 LOG_LEVEL=DEBUG python -m presence_backend.server

    HISTORY_REQUIRES_FRIENDSHIP=0 python -m presence_backend.server

See 'presence_backend.config' for every supported environment variable.
"""

import sys

import uvicorn
from fastapi import FastAPI
from loguru import logger

from presence_backend.config import Settings
from presence_toolkit.api.websocket import create_app
from presence_toolkit.connections.in_memory import InMemoryConnectionRegistry
from presence_toolkit.profiles.in_memory import InMemoryProfileDirectory
from presence_toolkit.relationships.in_memory import InMemoryRelationshipGraph
from presence_toolkit.router.router import Router
from presence_toolkit.transcripts.in_memory import InMemoryTranscriptStore

_UVICORN_LEVELS = {"critical", "error", "warning", "info", "debug", "trace"}


def configure_logging(level: str) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level)


def build_router(settings: Settings) -> Router:
    """Assemble a router over fresh in-memory stores."""
    return Router(
        registry=InMemoryConnectionRegistry(),
        graph=InMemoryRelationshipGraph(),
        transcripts=InMemoryTranscriptStore(),
        profiles=InMemoryProfileDirectory(),
        history_requires_friendship=settings.history_requires_friendship,
        max_avatar_bytes=settings.max_avatar_bytes,
    )


def build_app(settings: Settings) -> FastAPI:
    return create_app(build_router(settings), path=settings.ws_path)


def main() -> None:
    try:
        settings = Settings.from_env()
    except ValueError as exc:
        raise SystemExit(str(exc)) from exc

    configure_logging(settings.log_level)
    logger.info(
        f"Starting presence server on ws://{settings.host}:{settings.port}{settings.ws_path}  "
        f"history_requires_friendship={settings.history_requires_friendship}"
    )
    uvicorn_level = settings.log_level.lower() if settings.log_level.lower() in _UVICORN_LEVELS else "info"
    uvicorn.run(build_app(settings), host=settings.host, port=settings.port, log_level=uvicorn_level)


if __name__ == "__main__":
    main()

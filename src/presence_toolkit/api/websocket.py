"""
WebSocket transport for the router.

'ConnectionHub' binds a 'Router' to a FastAPI application. It owns the only
mapping from connection handles to live 'WebSocket' objects: the router decides
who receives what, the hub performs the sends. Each socket is served by one
receive loop, so events from one connection are handled in arrival order, and
the loop's 'finally' block is the single place a connection is released.

Outbound frames go through a bounded per-peer outbox drained by that peer's
own writer task. 'deliver' only enqueues, so a slow or stalled recipient can
never hold up the receive loop of the connection that produced the frame.
Delivery is best effort: frames for closed connections are skipped, frames
that overflow a full outbox are dropped, and a failing send stops that peer's
writer without affecting anyone else.
"""

import asyncio
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from loguru import logger

from presence_toolkit.router.router import Delivery, Router

DEFAULT_OUTBOX_SIZE = 256


@dataclass
class _Peer:
    websocket: WebSocket
    outbox: asyncio.Queue[str]
    writer: asyncio.Task | None = None


class ConnectionHub:
    def __init__(self, router: Router, outbox_size: int = DEFAULT_OUTBOX_SIZE) -> None:
        self.router = router
        self.outbox_size = outbox_size
        self._peers: dict[str, _Peer] = {}

    def bind_to_app(self, app: FastAPI, path: str = "/ws") -> None:
        """Register the WebSocket endpoint at 'path' and a '/health' probe."""
        app.add_api_websocket_route(path, self.serve)
        app.add_api_route("/health", self.health, methods=["GET"])

    async def health(self) -> dict[str, Any]:
        online = await self.router.registry.online_identities()
        return {"status": "ok", "online": len(online)}

    async def serve(self, websocket: WebSocket) -> None:
        await websocket.accept()
        connection_id = await self.router.connect()
        self.attach(connection_id, websocket)
        try:
            while True:
                message = await websocket.receive()
                if message["type"] == "websocket.disconnect":
                    break
                raw = message.get("text")
                if raw is None:
                    raw = message.get("bytes")
                if raw is None:
                    continue
                self.deliver(await self.router.handle(connection_id, raw))
        except WebSocketDisconnect:
            pass
        finally:
            await self.detach(connection_id)
            await self.router.disconnect(connection_id)

    def attach(self, connection_id: str, websocket: WebSocket) -> None:
        """Start the writer task of a newly accepted connection."""
        peer = _Peer(websocket=websocket, outbox=asyncio.Queue(maxsize=self.outbox_size))
        peer.writer = asyncio.create_task(self._write(connection_id, peer))
        self._peers[connection_id] = peer

    async def detach(self, connection_id: str) -> None:
        """Stop the writer of 'connection_id'; frames still queued are discarded."""
        peer = self._peers.pop(connection_id, None)
        if peer is None or peer.writer is None:
            return
        peer.writer.cancel()
        await asyncio.wait([peer.writer])

    def deliver(self, deliveries: Iterable[Delivery]) -> None:
        for delivery in deliveries:
            peer = self._peers.get(delivery.connection_id)
            if peer is None:
                logger.debug(f"Skipping {delivery.event.type!r} for closed connection {delivery.connection_id}")
                continue
            try:
                peer.outbox.put_nowait(delivery.event.encode())
            except asyncio.QueueFull:
                logger.warning(f"Outbox of {delivery.connection_id} is full, dropping {delivery.event.type!r}")

    async def _write(self, connection_id: str, peer: _Peer) -> None:
        while True:
            frame = await peer.outbox.get()
            try:
                await peer.websocket.send_text(frame)
            except (WebSocketDisconnect, RuntimeError, OSError) as exc:
                logger.warning(f"Delivery to {connection_id} failed, stopping its writer: {exc}")
                return


def create_app(router: Router, path: str = "/ws") -> FastAPI:
    app = FastAPI(title="Presence Router")
    ConnectionHub(router).bind_to_app(app, path)
    return app

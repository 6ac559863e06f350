from __future__ import annotations

import asyncio
import contextlib
import json
import logging
import uuid
from dataclasses import dataclass
from typing import Dict, Optional, Union

import websockets
from websockets.asyncio.server import ServerConnection, serve

from engine.models import ConnectionId, GameConfig, parse_action
from engine.registry import RoomRegistry

from .broadcaster import Broadcaster
from .coordinator import ConnectionCoordinator

LOGGER = logging.getLogger("gang_lobby")

# RoomServer glues the room registry to WebSocket clients. Every network
# concern lives here; rooms stay pure.


@dataclass
class ServerConfig:
    host: str = "0.0.0.0"
    port: int = 8765


def new_connection_id() -> ConnectionId:
    return ConnectionId(uuid.uuid4().hex)


class RoomServer:
    def __init__(self, game_config: Optional[GameConfig] = None) -> None:
        self.registry = RoomRegistry(game_config)
        self.broadcaster = Broadcaster()
        self.coordinator = ConnectionCoordinator(self.registry, self.broadcaster)

    async def start(self, config: Optional[ServerConfig] = None) -> None:
        config = config or ServerConfig()
        # serve keeps accepting clients until the process stops.
        async with serve(self._handle_connection, config.host, config.port):
            LOGGER.info("Room server listening on %s:%s", config.host, config.port)
            await asyncio.Future()

    async def _handle_connection(self, websocket: ServerConnection) -> None:
        connection_id = new_connection_id()
        outbox = self.broadcaster.attach(connection_id)
        pump = asyncio.create_task(self._pump(connection_id, websocket, outbox))
        self.broadcaster.send(connection_id, "welcome", {"connectionId": connection_id})
        LOGGER.info("Connection %s opened", connection_id)

        try:
            async for raw in websocket:
                self.handle_message(connection_id, raw)
        except websockets.ConnectionClosed:
            pass
        finally:
            self.coordinator.leave_or_disconnect(connection_id)
            self.broadcaster.detach(connection_id)
            pump.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await pump
        LOGGER.info("Connection %s closed", connection_id)

    def handle_message(self, connection_id: ConnectionId, raw: Union[str, bytes]) -> None:
        # Runs to completion without awaiting, so no other action can observe
        # a half-applied change.
        message = self._decode(raw)
        action = parse_action(message)
        if action is None:
            LOGGER.debug("Dropped malformed message from %s: %r", connection_id, raw)
            return
        self.coordinator.dispatch(connection_id, action)

    async def _pump(
        self, connection_id: ConnectionId, websocket: ServerConnection, outbox: asyncio.Queue[str]
    ) -> None:
        while True:
            message = await outbox.get()
            try:
                await websocket.send(message)
            except websockets.ConnectionClosed:
                # Stop queueing for a dead peer; the read loop cleans up the seat.
                LOGGER.debug("Send to %s failed; detaching outbox", connection_id)
                self.broadcaster.detach(connection_id)
                return

    def _decode(self, raw: Union[str, bytes]) -> Dict[str, object]:
        try:
            decoded = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError):
            return {}
        return decoded if isinstance(decoded, dict) else {}

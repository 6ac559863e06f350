from __future__ import annotations

import asyncio
import json
import logging
from datetime import datetime, timezone
from typing import Callable, Dict

from engine.models import ConnectionId
from engine.room import Room

LOGGER = logging.getLogger("gang_lobby")


def envelope(msg_type: str, payload: Dict[str, object]) -> str:
    body: Dict[str, object] = {"type": msg_type, "v": 1, "ts": datetime.now(timezone.utc).isoformat()}
    body.update(payload)
    return json.dumps(body)


class Broadcaster:
    """Queues outbound events per connection.

    Sending never awaits: each message is appended to the recipient's outbox
    and a pump task owned by the server writes it to the socket. Messages to
    one connection therefore leave in the order the room produced them, and a
    dead socket only loses its own messages.
    """

    def __init__(self) -> None:
        self.outboxes: Dict[ConnectionId, asyncio.Queue[str]] = {}

    def attach(self, connection_id: ConnectionId) -> asyncio.Queue[str]:
        outbox: asyncio.Queue[str] = asyncio.Queue()
        self.outboxes[connection_id] = outbox
        return outbox

    def detach(self, connection_id: ConnectionId) -> None:
        self.outboxes.pop(connection_id, None)

    def send(self, connection_id: ConnectionId, msg_type: str, payload: Dict[str, object]) -> None:
        outbox = self.outboxes.get(connection_id)
        if outbox is None:
            LOGGER.debug("No outbox for %s; dropping %s", connection_id, msg_type)
            return
        outbox.put_nowait(envelope(msg_type, payload))

    def broadcast(self, room: Room, msg_type: str, payload: Dict[str, object]) -> None:
        message = envelope(msg_type, payload)
        for connection_id in room.players:
            outbox = self.outboxes.get(connection_id)
            if outbox is not None:
                outbox.put_nowait(message)

    def broadcast_each(
        self,
        room: Room,
        msg_type: str,
        build: Callable[[ConnectionId], Dict[str, object]],
    ) -> None:
        # Individually projected payloads, one per seated connection.
        for connection_id in room.players:
            self.send(connection_id, msg_type, build(connection_id))

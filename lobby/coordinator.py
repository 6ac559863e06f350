from __future__ import annotations

import logging
from typing import Dict, Optional

from engine.errors import ActionRejected, PreconditionFailed, UnknownTarget
from engine.models import (
    ClientAction,
    ConnectionId,
    DealCommunityCards,
    JoinRoom,
    RevealHands,
    StartGame,
    TransferChip,
)
from engine.registry import RoomRegistry
from engine.room import Room
from engine.views import community_view, game_state_view, lobby_view, reveal_view

from .broadcaster import Broadcaster

LOGGER = logging.getLogger("gang_lobby")

# ConnectionCoordinator knows which room each connection sits in and turns
# client actions into room calls plus outbound events. Rooms do the checks;
# anything they reject is logged here and dropped.


class ConnectionCoordinator:
    def __init__(self, registry: RoomRegistry, broadcaster: Broadcaster) -> None:
        self.registry = registry
        self.broadcaster = broadcaster
        self.memberships: Dict[ConnectionId, str] = {}

    def room_for(self, connection_id: ConnectionId) -> Optional[Room]:
        room_name = self.memberships.get(connection_id)
        if room_name is None:
            return None
        return self.registry.get(room_name)

    def dispatch(self, connection_id: ConnectionId, action: ClientAction) -> None:
        try:
            if isinstance(action, JoinRoom):
                self.join_room(connection_id, action.room_name, action.username)
            elif isinstance(action, StartGame):
                self.start_game(connection_id)
            elif isinstance(action, DealCommunityCards):
                self.deal_community_cards(connection_id)
            elif isinstance(action, TransferChip):
                self.transfer_chip(connection_id, action.target_player_id)
            elif isinstance(action, RevealHands):
                self.reveal_hands(connection_id)
            else:
                raise PreconditionFailed("UNSUPPORTED", f"Unsupported action {action!r}")
        except ActionRejected as exc:
            LOGGER.info(
                "Rejected action connection=%s action=%s code=%s reason=%s",
                connection_id,
                type(action).__name__,
                exc.code,
                exc.msg,
            )
            return
        LOGGER.debug("Applied action connection=%s action=%s", connection_id, action)

    # Membership ------------------------------------------------------

    def join_room(self, connection_id: ConnectionId, room_name: str, username: str) -> None:
        current = self.memberships.get(connection_id)
        if current == room_name:
            raise PreconditionFailed("ALREADY_SEATED", "Already in this room")
        if current is not None:
            self.leave_or_disconnect(connection_id)

        room = self.registry.get_or_create(room_name)
        player = room.add_player(connection_id, username)
        self.memberships[connection_id] = room_name
        LOGGER.info(
            "%s joined room %s (players=%s host=%s)",
            username,
            room_name,
            len(room.players),
            player.is_host,
        )

        self.broadcaster.broadcast(room, "updateLobby", lobby_view(room))
        if room.started:
            # Late joiner watches the running hand without seeing anyone's cards.
            self.broadcaster.send(connection_id, "gameStarted", game_state_view(room, connection_id))

    def leave_or_disconnect(self, connection_id: ConnectionId) -> None:
        room_name = self.memberships.pop(connection_id, None)
        if room_name is None:
            return
        room = self.registry.get(room_name)
        if room is None:
            return
        player = room.remove_player(connection_id)
        if player is not None:
            LOGGER.info("%s left room %s", player.username, room_name)
        if self.registry.discard_if_empty(room):
            return
        self.broadcaster.broadcast(room, "updateLobby", lobby_view(room))

    # Game actions ----------------------------------------------------

    def _seated_room(self, connection_id: ConnectionId) -> Room:
        room = self.room_for(connection_id)
        if room is None:
            raise UnknownTarget("NO_ROOM", "Connection is not in a room")
        return room

    def start_game(self, connection_id: ConnectionId) -> None:
        room = self._seated_room(connection_id)
        room.start_game(connection_id)
        self.broadcaster.broadcast_each(room, "gameStarted", lambda recipient: game_state_view(room, recipient))

    def deal_community_cards(self, connection_id: ConnectionId) -> None:
        room = self._seated_room(connection_id)
        room.deal_community_cards(connection_id)
        self.broadcaster.broadcast(room, "communityCardsDealt", community_view(room))

    def transfer_chip(self, connection_id: ConnectionId, target_id: ConnectionId) -> None:
        room = self._seated_room(connection_id)
        room.transfer_chip(connection_id, target_id)
        self.broadcaster.broadcast_each(room, "gameStateUpdated", lambda recipient: game_state_view(room, recipient))

    def reveal_hands(self, connection_id: ConnectionId) -> None:
        room = self._seated_room(connection_id)
        room.reveal_hands(connection_id)
        self.broadcaster.broadcast(room, "handsRevealed", reveal_view(room))

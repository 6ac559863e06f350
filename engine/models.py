from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Dict, List, NewType, Optional, Union

from .cards import Card, cards_to_dicts

# Opaque per-connection identifier. The transport assigns it; the engine only
# compares and stores it.
ConnectionId = NewType("ConnectionId", str)


class BettingRound(IntEnum):
    PRE_FLOP = 0
    FLOP = 1
    TURN = 2
    RIVER = 3

    @property
    def display(self) -> str:
        return ROUND_NAMES[self]


ROUND_NAMES = {
    BettingRound.PRE_FLOP: "Pre-flop",
    BettingRound.FLOP: "Flop",
    BettingRound.TURN: "Turn",
    BettingRound.RIVER: "River",
}


class RoomPhase(str, Enum):
    LOBBY = "LOBBY"
    BETTING = "BETTING"
    REVEALED = "REVEALED"


class GameResult(str, Enum):
    WON = "WON"
    LOST = "LOST"


@dataclass
class GameConfig:
    min_players: int = 2
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.min_players < 2:
            raise ValueError("min_players must be at least 2")


@dataclass
class Player:
    connection_id: ConnectionId
    username: str
    hand: List[Card] = field(default_factory=list)
    chip: Optional[int] = None
    is_host: bool = False

    def reset_for_game(self) -> None:
        self.hand.clear()
        self.chip = None

    def to_dict(self, *, include_hand: bool = True) -> Dict[str, object]:
        return {
            "id": self.connection_id,
            "username": self.username,
            "hand": cards_to_dicts(self.hand) if include_hand else [],
            "chip": self.chip,
            "isHost": self.is_host,
        }


# Client actions ----------------------------------------------------------
# One dataclass per inbound message type; parse_action is the only way raw
# JSON becomes one of these.


@dataclass(frozen=True)
class JoinRoom:
    room_name: str
    username: str


@dataclass(frozen=True)
class StartGame:
    pass


@dataclass(frozen=True)
class DealCommunityCards:
    pass


@dataclass(frozen=True)
class TransferChip:
    target_player_id: ConnectionId


@dataclass(frozen=True)
class RevealHands:
    pass


ClientAction = Union[JoinRoom, StartGame, DealCommunityCards, TransferChip, RevealHands]

_NO_PAYLOAD = {
    "startGame": StartGame,
    "dealCommunityCards": DealCommunityCards,
    "revealHands": RevealHands,
}


def parse_action(message: Dict[str, object]) -> Optional[ClientAction]:
    """Validate a decoded client message. Returns None for anything malformed."""
    if not isinstance(message, dict):
        return None
    msg_type = message.get("type")
    if not isinstance(msg_type, str):
        return None
    if msg_type in _NO_PAYLOAD:
        return _NO_PAYLOAD[msg_type]()
    if msg_type == "joinRoom":
        room_name = message.get("roomName")
        username = message.get("username")
        if not isinstance(room_name, str) or not isinstance(username, str):
            return None
        # Room names key the registry and are trimmed; usernames are kept as sent.
        room_name = room_name.strip()
        if not room_name or not username:
            return None
        return JoinRoom(room_name=room_name, username=username)
    if msg_type == "transferChip":
        target = message.get("targetPlayerId")
        if not isinstance(target, str) or not target:
            return None
        return TransferChip(target_player_id=ConnectionId(target))
    return None

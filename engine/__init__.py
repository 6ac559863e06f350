"""Game-state primitives for The Gang rooms, shared by the WebSocket host."""

from .cards import Card, RANKS, SUITS, build_deck, deal, draw
from .errors import ActionRejected, NotHost, PreconditionFailed, UnknownTarget
from .evaluator import describe_strength, evaluate_strength
from .models import BettingRound, ConnectionId, GameConfig, GameResult, Player, RoomPhase, parse_action
from .registry import RoomRegistry
from .room import Room, chips_match_strength

__all__ = [
    "Card",
    "RANKS",
    "SUITS",
    "build_deck",
    "deal",
    "draw",
    "ActionRejected",
    "NotHost",
    "PreconditionFailed",
    "UnknownTarget",
    "describe_strength",
    "evaluate_strength",
    "BettingRound",
    "ConnectionId",
    "GameConfig",
    "GameResult",
    "Player",
    "RoomPhase",
    "parse_action",
    "RoomRegistry",
    "Room",
    "chips_match_strength",
]

from __future__ import annotations

from typing import Dict, List, Optional

from .cards import cards_to_dicts
from .evaluator import describe_strength
from .models import ConnectionId
from .room import Room

# Payload builders for outbound events. Only the per-recipient views carry
# hole cards; until the reveal every other player's hand is emptied.

CHIP_HISTORY_LABELS = ("Initial", "After Flop", "After Turn", "After River")


def chip_history_label(index: int) -> str:
    if 0 <= index < len(CHIP_HISTORY_LABELS):
        return CHIP_HISTORY_LABELS[index]
    return f"Snapshot {index + 1}"


def project_players(room: Room, recipient: Optional[ConnectionId]) -> Dict[str, Dict[str, object]]:
    """Player mapping as ``recipient`` may see it."""
    return {
        connection_id: player.to_dict(include_hand=room.revealed or connection_id == recipient)
        for connection_id, player in room.players.items()
    }


def chip_history_view(room: Room) -> List[Dict[str, Dict[str, object]]]:
    return [{cid: dict(entry) for cid, entry in snapshot.items()} for snapshot in room.chip_history]


def _round_fields(room: Room) -> Dict[str, object]:
    return {
        "roomName": room.name,
        "bettingRound": int(room.betting_round),
        "bettingRoundName": room.betting_round.display,
        "chipHistoryLabels": [chip_history_label(idx) for idx in range(len(room.chip_history))],
    }


def game_state_view(room: Room, recipient: ConnectionId) -> Dict[str, object]:
    """Snapshot sent as ``gameStarted`` and ``gameStateUpdated``."""
    return {
        **_round_fields(room),
        "started": room.started,
        "communityCards": cards_to_dicts(room.community_cards),
        "chipHistory": chip_history_view(room),
        "revealed": room.revealed,
        "result": room.result.value if room.result else None,
        "hostId": room.host_id,
        "players": project_players(room, recipient),
    }


def lobby_view(room: Room) -> Dict[str, object]:
    # Lobby updates go to everyone alike, so they never carry hands.
    return {
        "roomName": room.name,
        "hostId": room.host_id,
        "players": {cid: player.to_dict(include_hand=False) for cid, player in room.players.items()},
    }


def community_view(room: Room) -> Dict[str, object]:
    return {
        **_round_fields(room),
        "communityCards": cards_to_dicts(room.community_cards),
        "chipHistory": chip_history_view(room),
    }


def reveal_view(room: Room) -> Dict[str, object]:
    reveal_order = []
    for player in room.dealt_players():
        strength = room.hand_strengths.get(player.connection_id)
        reveal_order.append(
            {
                "id": player.connection_id,
                "username": player.username,
                "chip": player.chip,
                "hand": cards_to_dicts(player.hand),
                "handStrength": strength,
                "category": describe_strength(strength) if strength is not None else None,
            }
        )
    return {
        **_round_fields(room),
        "communityCards": cards_to_dicts(room.community_cards),
        "players": project_players(room, None),
        "result": room.result.value if room.result else None,
        "revealOrder": reveal_order,
    }

from __future__ import annotations

import json
from typing import Dict, Iterable, List, Sequence

from engine.cards import Card, full_deck, parse_cards
from engine.models import BettingRound, ConnectionId, GameConfig
from engine.room import Room


def cid(idx: int) -> ConnectionId:
    return ConnectionId(f"conn-{idx}")


def create_room(players: int = 3, *, seed: int = 42, name: str = "table") -> Room:
    """Instantiate a room with ``players`` seated; conn-0 is the host."""
    room = Room(name, GameConfig(seed=seed))
    for idx in range(players):
        room.add_player(cid(idx), f"Player{idx}")
    return room


def start_room(players: int = 3, *, seed: int = 42) -> Room:
    room = create_room(players, seed=seed)
    room.start_game(cid(0))
    return room


def deal_to_river(room: Room) -> None:
    assert room.host_id is not None
    for _ in range(3):
        room.deal_community_cards(room.host_id)


def rig_river(room: Room, hands: Sequence[Sequence[str]], community: Sequence[str]) -> None:
    """Replace the dealt cards of a started room with scripted ones on the river."""
    used: List[Card] = []
    for player, labels in zip(room.players.values(), hands):
        player.hand = parse_cards(list(labels))
        used.extend(player.hand)
    room.community_cards = parse_cards(list(community))
    used.extend(room.community_cards)
    room.deck = [card for card in full_deck() if card not in used]
    room.betting_round = BettingRound.RIVER


def all_cards(room: Room) -> List[Card]:
    cards = list(room.deck) + list(room.community_cards)
    for player in room.players.values():
        cards.extend(player.hand)
    return cards


def drain(outbox) -> List[Dict[str, object]]:
    messages = []
    while not outbox.empty():
        messages.append(json.loads(outbox.get_nowait()))
    return messages


def types_of(messages: Iterable[Dict[str, object]]) -> List[str]:
    return [str(message["type"]) for message in messages]

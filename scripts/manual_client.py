#!/usr/bin/env python3
from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import websockets
from websockets.asyncio.client import ClientConnection

logging.basicConfig(level=logging.INFO)

# ManualClient joins a room and lets a person drive it from the terminal.

HELP = """Commands:
  start            start a game (host only)
  deal             deal the next community cards (host only)
  give <name|id>   swap your chip with another player
  reveal           reveal all hands on the river (host only)
  table            reprint the table
  quit             leave"""


@dataclass
class TableView:
    connection_id: Optional[str] = None
    players: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    community: List[Dict[str, str]] = field(default_factory=list)
    round_name: str = "Pre-flop"
    result: Optional[str] = None


def card_text(card: Dict[str, str]) -> str:
    return f"{card['rank']}{card['suit'][0]}"


def resolve_target(token: str, players: Dict[str, Dict[str, Any]]) -> Optional[str]:
    if token in players:
        return token
    matches = [pid for pid, player in players.items() if player.get("username") == token]
    # Usernames are not unique; only accept an unambiguous match.
    return matches[0] if len(matches) == 1 else None


def build_command(line: str, view: TableView) -> Optional[Dict[str, Any]]:
    parts = line.strip().split()
    if not parts:
        return None
    verb = parts[0].lower()
    if verb == "start":
        return {"type": "startGame"}
    if verb == "deal":
        return {"type": "dealCommunityCards"}
    if verb == "reveal":
        return {"type": "revealHands"}
    if verb == "give" and len(parts) == 2:
        target = resolve_target(parts[1], view.players)
        if target is None:
            return None
        return {"type": "transferChip", "targetPlayerId": target}
    return None


class ManualClient:
    def __init__(self, url: str, room: str, username: str) -> None:
        self.url = url
        self.room = room
        self.username = username
        self.websocket: Optional[ClientConnection] = None
        self.view = TableView()

    async def run(self) -> None:
        async with websockets.connect(self.url) as ws:
            self.websocket = ws
            await self._send({"type": "joinRoom", "roomName": self.room, "username": self.username})
            print(HELP)
            reader = asyncio.create_task(self._read_loop())
            try:
                await self._prompt_loop()
            finally:
                reader.cancel()

    async def _read_loop(self) -> None:
        assert self.websocket is not None
        async for raw in self.websocket:
            self._print_message(json.loads(raw))

    async def _prompt_loop(self) -> None:
        while True:
            line = await asyncio.to_thread(input, "> ")
            verb = line.strip().lower()
            if verb == "quit":
                return
            if verb == "table":
                self._render_table()
                continue
            command = build_command(line, self.view)
            if command is None:
                print(HELP)
                continue
            await self._send(command)

    def _print_message(self, msg: Dict[str, Any]) -> None:
        msg_type = msg.get("type")
        print(f"\n>>> {msg_type}")
        if msg_type == "welcome":
            self.view.connection_id = msg.get("connectionId")
        elif msg_type == "updateLobby":
            self.view.players = msg.get("players", {})
        elif msg_type in ("gameStarted", "gameStateUpdated"):
            self.view.players = msg.get("players", {})
            self.view.community = msg.get("communityCards", [])
            self.view.round_name = msg.get("bettingRoundName", self.view.round_name)
            self.view.result = msg.get("result")
        elif msg_type == "communityCardsDealt":
            self.view.community = msg.get("communityCards", [])
            self.view.round_name = msg.get("bettingRoundName", self.view.round_name)
        elif msg_type == "handsRevealed":
            self.view.players = msg.get("players", {})
            self.view.result = msg.get("result")
            for entry in msg.get("revealOrder", []):
                hand = " ".join(card_text(card) for card in entry["hand"])
                print(f"  chip {entry['chip']}: {entry['username']} {hand} -> {entry['category']} ({entry['handStrength']})")
            print(f"Result: {self.view.result}")
        else:
            print(json.dumps(msg, indent=2))
        self._render_table()

    def _render_table(self) -> None:
        board = " ".join(card_text(card) for card in self.view.community) or "--"
        print(f"Room {self.room} | {self.view.round_name} | Board {board}")
        for pid, player in self.view.players.items():
            tags = []
            if player.get("isHost"):
                tags.append("HOST")
            if pid == self.view.connection_id:
                tags.append("ME")
            hand = " ".join(card_text(card) for card in player.get("hand", [])) or "?? ??"
            label = f" [{','.join(tags)}]" if tags else ""
            print(f"  {player['username']:<12} chip={player.get('chip')} hand={hand} id={pid}{label}")

    async def _send(self, payload: Dict[str, Any]) -> None:
        assert self.websocket is not None
        await self.websocket.send(json.dumps(payload))


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="The Gang manual client")
    parser.add_argument("--url", default="ws://127.0.0.1:8765")
    parser.add_argument("--room", required=True)
    parser.add_argument("--name", required=True)
    return parser.parse_args(argv)


def main(argv: list[str]) -> None:
    args = parse_args(argv)
    client = ManualClient(url=args.url, room=args.room, username=args.name)
    try:
        asyncio.run(client.run())
    except KeyboardInterrupt:
        print("\nSession closed")


if __name__ == "__main__":
    main(sys.argv[1:])

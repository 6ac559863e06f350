from __future__ import annotations

import logging
import random
from typing import Dict, List, Optional, Sequence, Tuple

from .cards import Card, build_deck, deal
from .errors import NotHost, PreconditionFailed, UnknownTarget
from .evaluator import evaluate_strength
from .models import BettingRound, ConnectionId, GameConfig, GameResult, Player, RoomPhase

LOGGER = logging.getLogger("gang_engine")

# Room keeps all state for one game in memory. No networking lives here, only
# membership, dealing, chip swaps and scoring. Every failed check raises an
# ActionRejected subclass before anything is mutated.

HOLE_CARDS = 2
COMMUNITY_DEALS = {
    BettingRound.PRE_FLOP: (3, BettingRound.FLOP),
    BettingRound.FLOP: (1, BettingRound.TURN),
    BettingRound.TURN: (1, BettingRound.RIVER),
}

ChipSnapshot = Dict[ConnectionId, Dict[str, object]]


def chips_match_strength(entries: Sequence[Tuple[int, int]]) -> GameResult:
    """WON iff strengths strictly increase when entries are ordered by chip.

    ``entries`` holds ``(chip, strength)`` pairs. Ties always lose.
    """
    ordered = sorted(entries, key=lambda entry: entry[0])
    for (_, lower), (_, higher) in zip(ordered, ordered[1:]):
        if higher <= lower:
            return GameResult.LOST
    return GameResult.WON


class Room:
    """One named game instance: players, deck, community cards and chips."""

    def __init__(self, name: str, config: Optional[GameConfig] = None) -> None:
        self.name = name
        self.config = config or GameConfig()
        self.rng = random.Random(self.config.seed)
        self.players: Dict[ConnectionId, Player] = {}
        self.host_id: Optional[ConnectionId] = None
        self.started = False
        self.deck: List[Card] = []
        self.community_cards: List[Card] = []
        self.betting_round = BettingRound.PRE_FLOP
        self.chip_history: List[ChipSnapshot] = []
        self.revealed = False
        self.result: Optional[GameResult] = None
        self.hand_strengths: Dict[ConnectionId, int] = {}

    @property
    def phase(self) -> RoomPhase:
        if not self.started:
            return RoomPhase.LOBBY
        if self.revealed:
            return RoomPhase.REVEALED
        return RoomPhase.BETTING

    def is_empty(self) -> bool:
        return not self.players

    # Membership ------------------------------------------------------

    def add_player(self, connection_id: ConnectionId, username: str) -> Player:
        if connection_id in self.players:
            raise PreconditionFailed("ALREADY_SEATED", "Connection already seated in this room")
        player = Player(connection_id=connection_id, username=username, is_host=self.is_empty())
        self.players[connection_id] = player
        if player.is_host:
            self.host_id = connection_id
        return player

    def remove_player(self, connection_id: ConnectionId) -> Optional[Player]:
        player = self.players.pop(connection_id, None)
        if player is None:
            return None
        if connection_id == self.host_id:
            self._elect_host()
        return player

    def _elect_host(self) -> None:
        # Deterministic policy: the earliest joiner still seated takes over.
        self.host_id = None
        for player in self.players.values():
            player.is_host = False
        if self.players:
            successor = next(iter(self.players.values()))
            successor.is_host = True
            self.host_id = successor.connection_id
            LOGGER.info("Room %s host passed to %s", self.name, successor.username)

    def _require_host(self, caller: ConnectionId, action: str) -> None:
        if caller not in self.players:
            raise UnknownTarget("UNKNOWN_PLAYER", "Caller is not seated in this room")
        if caller != self.host_id:
            raise NotHost(action)

    # Game lifecycle --------------------------------------------------

    def start_game(self, caller: ConnectionId) -> None:
        self._require_host(caller, "start the game")
        if len(self.players) < self.config.min_players:
            raise PreconditionFailed("NOT_ENOUGH_PLAYERS", "Not enough players to start")

        self.community_cards = []
        self.chip_history = []
        self.revealed = False
        self.result = None
        self.hand_strengths = {}
        self.betting_round = BettingRound.PRE_FLOP
        self.deck = build_deck(rng=self.rng)

        for chip, player in enumerate(self.players.values(), start=1):
            player.reset_for_game()
            player.hand.extend(deal(self.deck, HOLE_CARDS))
            player.chip = chip

        self.started = True
        self._record_chips()
        LOGGER.info("Room %s started a game with %s players", self.name, len(self.players))

    def deal_community_cards(self, caller: ConnectionId) -> List[Card]:
        self._require_host(caller, "deal community cards")
        if not self.started:
            raise PreconditionFailed("NOT_STARTED", "Game has not started")
        step = COMMUNITY_DEALS.get(self.betting_round)
        if step is None:
            raise PreconditionFailed("NO_MORE_CARDS", "All community cards are already dealt")

        count, next_round = step
        cards = deal(self.deck, count)
        self.community_cards.extend(cards)
        self.betting_round = next_round
        self._record_chips()
        return cards

    def transfer_chip(self, caller: ConnectionId, target_id: ConnectionId) -> None:
        source = self.players.get(caller)
        target = self.players.get(target_id)
        if source is None or target is None:
            raise UnknownTarget("UNKNOWN_PLAYER", "Both players must be seated in this room")
        if source is target:
            raise PreconditionFailed("SELF_TRANSFER", "Cannot transfer a chip to yourself")
        if source.chip is None or target.chip is None:
            raise PreconditionFailed("NO_CHIP", "Both players need a chip")
        if self.revealed:
            raise PreconditionFailed("ALREADY_REVEALED", "Hands are already revealed")

        source.chip, target.chip = target.chip, source.chip

    def reveal_hands(self, caller: ConnectionId) -> GameResult:
        self._require_host(caller, "reveal hands")
        if not self.started or self.betting_round != BettingRound.RIVER:
            raise PreconditionFailed("NOT_RIVER", "Hands can only be revealed on the river")
        if self.revealed:
            raise PreconditionFailed("ALREADY_REVEALED", "Hands are already revealed")

        contenders = self.dealt_players()
        if not contenders:
            raise PreconditionFailed("NO_HANDS", "Nobody at the table holds a hand")

        strengths = {
            player.connection_id: evaluate_strength(player.hand, self.community_cards)
            for player in contenders
        }
        entries = [(player.chip, strengths[player.connection_id]) for player in contenders]

        self.hand_strengths = strengths
        self.result = chips_match_strength(entries)
        self.revealed = True
        LOGGER.info("Room %s revealed hands: %s", self.name, self.result.value)
        return self.result

    # Queries ---------------------------------------------------------

    def dealt_players(self) -> List[Player]:
        """Players holding both a chip and a full hand, ordered by chip."""
        dealt = [
            player
            for player in self.players.values()
            if player.chip is not None and len(player.hand) == HOLE_CARDS
        ]
        return sorted(dealt, key=lambda player: player.chip)

    def chip_snapshot(self) -> ChipSnapshot:
        return {
            connection_id: {"username": player.username, "chip": player.chip}
            for connection_id, player in self.players.items()
        }

    def _record_chips(self) -> None:
        self.chip_history.append(self.chip_snapshot())

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Dict, List, Optional

SUITS = ("hearts", "diamonds", "clubs", "spades")
RANKS = ("2", "3", "4", "5", "6", "7", "8", "9", "10", "J", "Q", "K", "A")
RANK_VALUE = {rank: idx for idx, rank in enumerate(RANKS, start=2)}

DECK_SIZE = len(SUITS) * len(RANKS)


@dataclass(frozen=True)
class Card:
    suit: str
    rank: str

    def __post_init__(self) -> None:
        if self.rank not in RANK_VALUE:
            raise ValueError(f"Invalid rank: {self.rank}")
        if self.suit not in SUITS:
            raise ValueError(f"Invalid suit: {self.suit}")

    @property
    def value(self) -> int:
        return RANK_VALUE[self.rank]

    @property
    def label(self) -> str:
        return f"{self.rank}{self.suit[0]}"

    def to_dict(self) -> Dict[str, str]:
        return {"suit": self.suit, "rank": self.rank}


def full_deck() -> List[Card]:
    """The 52-card universe in suit-major order (unshuffled)."""
    return [Card(suit, rank) for suit in SUITS for rank in RANKS]


def build_deck(seed: Optional[int] = None, rng: Optional[random.Random] = None) -> List[Card]:
    # random.shuffle walks from the last index down, swapping each slot with a
    # uniformly chosen index at or below it (Fisher-Yates).
    rng = rng or random.Random(seed)
    deck = full_deck()
    rng.shuffle(deck)
    return deck


def draw(deck: List[Card]) -> Card:
    """Remove and return the top card (the end of the list)."""
    if not deck:
        raise ValueError("Cannot draw from an empty deck")
    return deck.pop()


def deal(deck: List[Card], count: int) -> List[Card]:
    if len(deck) < count:
        raise ValueError("Not enough cards left in deck")
    return [draw(deck) for _ in range(count)]


def cards_to_dicts(cards: List[Card]) -> List[Dict[str, str]]:
    return [card.to_dict() for card in cards]


def parse_label(label: str) -> Card:
    """Parse a short label such as ``"10h"`` or ``"As"`` into a Card."""
    if len(label) < 2:
        raise ValueError(f"Invalid card label: {label}")
    rank, suit_letter = label[:-1], label[-1]
    for suit in SUITS:
        if suit[0] == suit_letter:
            return Card(suit, rank)
    raise ValueError(f"Invalid card label: {label}")


def parse_cards(labels: List[str]) -> List[Card]:
    return [parse_label(label) for label in labels]

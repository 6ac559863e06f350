from __future__ import annotations

from collections import Counter
from typing import List, Optional, Sequence

from .cards import Card

# Scores are a category band plus one tiebreak rank, so any two hands compare
# as plain integers. Detection runs over the whole combined card set (not the
# best five of seven) and an ace always counts as 14, so A-2-3-4-5 is never a
# straight. Straights, flushes and two pair break ties on the overall high card.
STRAIGHT_FLUSH = 800
FOUR_OF_A_KIND = 700
FULL_HOUSE = 600
FLUSH = 500
STRAIGHT = 400
THREE_OF_A_KIND = 300
TWO_PAIR = 200
ONE_PAIR = 100

CATEGORY_NAMES = (
    (STRAIGHT_FLUSH, "straight_flush"),
    (FOUR_OF_A_KIND, "four_of_a_kind"),
    (FULL_HOUSE, "full_house"),
    (FLUSH, "flush"),
    (STRAIGHT, "straight"),
    (THREE_OF_A_KIND, "three_of_a_kind"),
    (TWO_PAIR, "two_pair"),
    (ONE_PAIR, "pair"),
)


def evaluate_strength(hole: Sequence[Card], community: Sequence[Card]) -> int:
    """Score two hole cards plus 3-5 community cards. Higher is better."""
    if len(hole) != 2:
        raise ValueError("Exactly two hole cards required")
    if not 3 <= len(community) <= 5:
        raise ValueError("Between three and five community cards required")
    return score_cards(list(hole) + list(community))


def score_cards(cards: Sequence[Card]) -> int:
    values = [card.value for card in cards]
    high_card = max(values)
    counts = Counter(values)

    straight_high = _straight_high(values)
    flush_high = _flush_high(cards)

    quads = _ranks_with(counts, 4)
    trips = _ranks_with(counts, 3)
    pairs = _ranks_with(counts, 2)

    if straight_high is not None and flush_high is not None:
        return STRAIGHT_FLUSH + high_card
    if quads:
        return FOUR_OF_A_KIND + quads[0]
    if trips and len(pairs) >= 2:
        # pairs includes the triple itself; a second triple also fills the house
        return FULL_HOUSE + trips[0]
    if flush_high is not None:
        return FLUSH + high_card
    if straight_high is not None:
        return STRAIGHT + high_card
    if trips:
        return THREE_OF_A_KIND + trips[0]
    if len(pairs) >= 2:
        return TWO_PAIR + high_card
    if pairs:
        return ONE_PAIR + pairs[0]
    return high_card


def describe_strength(score: int) -> str:
    for floor, name in CATEGORY_NAMES:
        if score >= floor:
            return name
    return "high_card"


def _ranks_with(counts: Counter, minimum: int) -> List[int]:
    return sorted((value for value, count in counts.items() if count >= minimum), reverse=True)


def _straight_high(values: Sequence[int]) -> Optional[int]:
    ordered = sorted(set(values))
    best = None
    for idx in range(len(ordered) - 4):
        window = ordered[idx : idx + 5]
        if window[-1] - window[0] == 4:
            best = window[-1]
    return best


def _flush_high(cards: Sequence[Card]) -> Optional[int]:
    by_suit: dict[str, List[int]] = {}
    for card in cards:
        by_suit.setdefault(card.suit, []).append(card.value)
    for values in by_suit.values():
        if len(values) >= 5:
            return max(values)
    return None

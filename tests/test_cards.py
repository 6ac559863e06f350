import random

import pytest

from engine.cards import Card, DECK_SIZE, build_deck, deal, draw, full_deck, parse_label


def test_full_deck_has_52_distinct_cards():
    deck = full_deck()
    assert len(deck) == DECK_SIZE == 52
    assert len(set(deck)) == 52


def test_shuffled_deck_is_a_permutation_of_the_universe():
    universe = set(full_deck())
    for seed in range(20):
        deck = build_deck(seed=seed)
        assert len(deck) == 52
        assert set(deck) == universe


def test_shuffle_order_varies_but_is_reproducible_with_seed():
    assert build_deck(seed=7) == build_deck(seed=7)
    assert build_deck(seed=7) != build_deck(seed=8)
    assert build_deck(rng=random.Random(7)) == build_deck(seed=7)


def test_draw_takes_from_the_end():
    deck = [Card("hearts", "2"), Card("spades", "A")]
    assert draw(deck) == Card("spades", "A")
    assert deck == [Card("hearts", "2")]


def test_deal_raises_when_deck_exhausted():
    deck = [Card("hearts", "A"), Card("diamonds", "K")]
    deal(deck, 2)
    with pytest.raises(ValueError, match="Not enough cards"):
        deal(deck, 1)
    with pytest.raises(ValueError, match="empty deck"):
        draw(deck)


def test_card_validation_rejects_invalid_values():
    with pytest.raises(ValueError, match="Invalid rank"):
        Card("hearts", "1")
    with pytest.raises(ValueError, match="Invalid suit"):
        Card("stars", "A")


def test_card_wire_form_and_labels():
    card = parse_label("10h")
    assert card == Card("hearts", "10")
    assert card.value == 10
    assert card.to_dict() == {"suit": "hearts", "rank": "10"}
    assert parse_label("Qs").label == "Qs"
    with pytest.raises(ValueError):
        parse_label("Zx")

from engine.cards import full_deck
from engine.models import BettingRound, GameResult, RoomPhase
from engine.room import Room, chips_match_strength

from .helpers import all_cards, cid, create_room, deal_to_river, rig_river, start_room


def test_first_joiner_becomes_host():
    room = Room("table")
    first = room.add_player(cid(0), "Ann")
    second = room.add_player(cid(1), "Bob")
    assert first.is_host and not second.is_host
    assert room.host_id == cid(0)
    assert room.phase == RoomPhase.LOBBY


def test_host_leaving_promotes_first_remaining_joiner():
    room = create_room(4)
    room.remove_player(cid(0))
    assert room.host_id == cid(1)
    assert [p.connection_id for p in room.players.values() if p.is_host] == [cid(1)]

    room.remove_player(cid(2))
    assert room.host_id == cid(1)

    room.remove_player(cid(1))
    assert room.host_id == cid(3)
    assert room.players[cid(3)].is_host

    room.remove_player(cid(3))
    assert room.is_empty()
    assert room.host_id is None


def test_remove_unknown_player_is_harmless():
    room = create_room(2)
    assert room.remove_player(cid(9)) is None
    assert room.host_id == cid(0)


def test_start_game_deals_two_cards_and_positional_chips():
    room = start_room(4)
    assert room.started
    assert room.phase == RoomPhase.BETTING
    assert room.betting_round == BettingRound.PRE_FLOP
    assert [p.chip for p in room.players.values()] == [1, 2, 3, 4]
    assert all(len(p.hand) == 2 for p in room.players.values())
    assert len(room.deck) == 52 - 8
    assert room.chip_history == [room.chip_snapshot()]
    assert room.chip_history[0][cid(2)] == {"username": "Player2", "chip": 3}


def test_deck_integrity_through_a_whole_hand():
    room = start_room(5)
    universe = sorted(full_deck(), key=lambda card: (card.suit, card.value))

    def check():
        cards = all_cards(room)
        assert len(cards) == 52
        assert sorted(cards, key=lambda card: (card.suit, card.value)) == universe

    check()
    for _ in range(3):
        room.deal_community_cards(cid(0))
        check()


def test_round_advances_three_four_five_cards():
    room = start_room(2)
    counts, rounds = [], []
    for _ in range(3):
        room.deal_community_cards(cid(0))
        counts.append(len(room.community_cards))
        rounds.append(int(room.betting_round))
    assert counts == [3, 4, 5]
    assert rounds == [1, 2, 3]
    assert len(room.chip_history) == 4


def test_chip_transfer_swaps_and_double_swap_is_identity():
    room = start_room(3)
    before = {pid: p.chip for pid, p in room.players.items()}

    room.transfer_chip(cid(2), cid(0))
    assert room.players[cid(2)].chip == before[cid(0)]
    assert room.players[cid(0)].chip == before[cid(2)]
    assert sorted(p.chip for p in room.players.values()) == [1, 2, 3]

    room.transfer_chip(cid(2), cid(0))
    assert {pid: p.chip for pid, p in room.players.items()} == before


def test_chip_history_records_chips_at_each_deal():
    room = start_room(2)
    room.transfer_chip(cid(0), cid(1))
    room.deal_community_cards(cid(0))
    assert room.chip_history[0][cid(0)]["chip"] == 1
    assert room.chip_history[1][cid(0)]["chip"] == 2


def test_reveal_won_when_chips_follow_strength():
    room = start_room(3)
    rig_river(
        room,
        hands=[["3d", "5h"], ["Kd", "8h"], ["9d", "9h"]],
        community=["2c", "7d", "9s", "Jh", "4c"],
    )
    result = room.reveal_hands(cid(0))
    assert result == GameResult.WON
    assert room.revealed
    assert room.phase == RoomPhase.REVEALED
    assert room.hand_strengths == {cid(0): 11, cid(1): 13, cid(2): 309}


def test_reveal_lost_after_swapping_lowest_and_highest_chips():
    room = start_room(3)
    rig_river(
        room,
        hands=[["3d", "5h"], ["Kd", "8h"], ["9d", "9h"]],
        community=["2c", "7d", "9s", "Jh", "4c"],
    )
    room.transfer_chip(cid(0), cid(2))
    assert room.reveal_hands(cid(0)) == GameResult.LOST
    assert [p.connection_id for p in room.dealt_players()] == [cid(2), cid(1), cid(0)]


def test_chips_match_strength_ordering_rule():
    assert chips_match_strength([(1, 50), (2, 300), (3, 700)]) == GameResult.WON
    assert chips_match_strength([(1, 700), (2, 300), (3, 50)]) == GameResult.LOST
    assert chips_match_strength([(3, 700), (1, 50), (2, 300)]) == GameResult.WON
    assert chips_match_strength([(1, 300), (2, 300)]) == GameResult.LOST
    assert chips_match_strength([(1, 5)]) == GameResult.WON


def test_restart_resets_hand_scoped_state():
    room = start_room(3)
    deal_to_river(room)
    room.reveal_hands(cid(0))
    old_hands = {pid: list(p.hand) for pid, p in room.players.items()}

    room.start_game(cid(0))
    assert room.betting_round == BettingRound.PRE_FLOP
    assert room.community_cards == []
    assert not room.revealed
    assert room.result is None
    assert room.hand_strengths == {}
    assert len(room.chip_history) == 1
    assert [p.chip for p in room.players.values()] == [1, 2, 3]
    assert {pid: list(p.hand) for pid, p in room.players.items()} != old_hands


def test_late_joiner_has_no_hand_and_is_left_out_of_reveal():
    room = start_room(2)
    late = room.add_player(cid(5), "Late")
    assert late.hand == [] and late.chip is None
    deal_to_river(room)
    room.reveal_hands(cid(0))
    assert cid(5) not in room.hand_strengths
    assert len(room.dealt_players()) == 2


def test_reveal_lost_when_two_straights_tie_on_the_board_high_card():
    room = start_room(2)
    rig_river(
        room,
        hands=[["5c", "6d"], ["10c", "Jd"]],
        community=["7h", "8s", "9c", "Kd", "2h"],
    )
    assert room.reveal_hands(cid(0)) == GameResult.LOST
    assert room.hand_strengths == {cid(0): 413, cid(1): 413}

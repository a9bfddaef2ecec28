import pytest

from app.board import build_board
from app.errors import BadCredentials, IllegalMove, TurnViolation
from app.rules import (
    authenticate, can_join, check_placement, current_player, current_player_index, require_turn,
)
from app.schemas import BLANK, PlacedTile

from helpers import entry, make_state, word


def pass_entry(player_id='p1'):
    e = entry([], player_id)
    e.isPass = True
    return e


def staged_from(player, *coords, letters=None):
    out = []
    for i, (t, (x, y)) in enumerate(zip(player.rack, coords)):
        letter = letters[i] if letters else t.letter
        out.append(PlacedTile(id=t.id, letter=letter, points=99, x=x, y=y))
    return out


def test_turn_follows_history_length():
    state = make_state({'ALICE': 'CATSEAR', 'BOB': 'DOGSEAT', 'CAROL': 'BIRDSEE'})
    assert current_player_index(state) == 0
    state.history = [pass_entry('p1')]
    assert current_player(state).name == 'BOB'
    state.history = [pass_entry('p1')] * 4
    assert current_player_index(state) == 1


def test_no_players_no_turn():
    state = make_state({})
    assert current_player(state) is None
    assert can_join(state)


def test_third_player_may_join_before_everyone_has_moved():
    state = make_state({'ALICE': 'CATSEAR', 'BOB': 'DOGSEAT'})
    state.history = [pass_entry('p1')]
    assert can_join(state, 'CAROL')


def test_no_new_players_once_everyone_has_moved():
    state = make_state({'ALICE': 'CATSEAR', 'BOB': 'DOGSEAT'})
    state.history = [pass_entry('p1'), pass_entry('p2')]
    assert not can_join(state, 'CAROL')
    # existing players can always come back
    assert can_join(state, 'alice')


def test_lobby_holds_four_players():
    state = make_state({'A': 'AAAAAAA', 'B': 'EEEEEEE', 'C': 'IIIIIII', 'D': 'OOOOOOO'})
    assert not can_join(state, 'E')


def test_ended_game_takes_no_new_players():
    state = make_state({'ALICE': 'CATSEAR'})
    state.gamePhase = 'ended'
    assert not can_join(state, 'BOB')


def test_authenticate_checks_code():
    state = make_state({'ALICE': 'CATSEAR'})
    assert authenticate(state, 'p1', 'alice-code').name == 'ALICE'
    with pytest.raises(BadCredentials):
        authenticate(state, 'p1', 'nope')
    with pytest.raises(BadCredentials):
        authenticate(state, 'p9', 'alice-code')


def test_require_turn():
    state = make_state({'ALICE': 'CATSEAR', 'BOB': 'DOGSEAT'})
    alice, bob = state.players
    require_turn(state, alice)
    with pytest.raises(TurnViolation):
        require_turn(state, bob)
    state.gamePhase = 'ended'
    with pytest.raises(TurnViolation):
        require_turn(state, alice)


def test_placement_uses_rack_letters_and_points():
    state = make_state({'ALICE': 'CATSEAR'})
    player = state.players[0]
    staged = staged_from(player, (7, 6), (7, 7), (7, 8), letters='XYZ')
    placed = check_placement(build_board([]), player, staged)
    assert [t.letter for t in placed] == ['C', 'A', 'T']
    assert [t.points for t in placed] == [3, 1, 1]
    assert [(t.x, t.y) for t in placed] == [(7, 6), (7, 7), (7, 8)]


def test_blank_takes_the_chosen_letter():
    state = make_state({'ALICE': BLANK + 'ATSEAR'})
    player = state.players[0]
    staged = staged_from(player, (7, 6), (7, 7), letters='cA')
    placed = check_placement(build_board([]), player, staged)
    assert placed[0].letter == 'C'
    assert placed[0].originalLetter == BLANK
    assert placed[0].points == 0


def test_blank_needs_a_letter():
    state = make_state({'ALICE': BLANK + 'ATSEAR'})
    player = state.players[0]
    with pytest.raises(IllegalMove):
        check_placement(build_board([]), player, staged_from(player, (7, 6), (7, 7), letters=[BLANK, 'A']))


def test_tiles_must_come_from_the_rack():
    state = make_state({'ALICE': 'CATSEAR'})
    player = state.players[0]
    stranger = PlacedTile(id='NOTMINE', letter='Q', points=10, x=7, y=7)
    with pytest.raises(IllegalMove):
        check_placement(build_board([]), player, [stranger])


def test_tile_used_twice():
    state = make_state({'ALICE': 'CATSEAR'})
    player = state.players[0]
    first = staged_from(player, (7, 7))[0]
    again = first.model_copy(update={'y': 8})
    with pytest.raises(IllegalMove):
        check_placement(build_board([]), player, [first, again])


def test_occupied_and_off_board_squares():
    state = make_state({'ALICE': 'CATSEAR'})
    player = state.players[0]
    board = build_board([entry(word('AT', 7, 7))])
    with pytest.raises(IllegalMove):
        check_placement(board, player, staged_from(player, (7, 7)))
    with pytest.raises(IllegalMove):
        check_placement(board, player, staged_from(player, (15, 0)))
    with pytest.raises(IllegalMove):
        check_placement(board, player, staged_from(player, (3, 3), (3, 3)))


def test_tiles_must_share_a_row_or_column():
    state = make_state({'ALICE': 'CATSEAR'})
    player = state.players[0]
    with pytest.raises(IllegalMove):
        check_placement(build_board([]), player, staged_from(player, (7, 7), (8, 8)))
    # a gap is allowed, connectivity is not checked
    placed = check_placement(build_board([]), player, staged_from(player, (7, 1), (7, 9)))
    assert len(placed) == 2

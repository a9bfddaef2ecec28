from __future__ import annotations
from typing import Dict, List, Optional

from .board import Board, in_bounds
from .errors import BadCredentials, IllegalMove, TurnViolation
from .schemas import BLANK, GameState, PlacedTile, Player, Tile

MAX_PLAYERS = 4

def current_player_index(state: GameState) -> Optional[int]:
    """Whose turn it is, derived from the history length. Never stored."""
    if not state.players:
        return None
    return len(state.history) % len(state.players)

def current_player(state: GameState) -> Optional[Player]:
    idx = current_player_index(state)
    return None if idx is None else state.players[idx]

def find_player(state: GameState, player_id: str) -> Optional[Player]:
    return next((p for p in state.players if p.id == player_id), None)

def find_player_by_name(state: GameState, name: str) -> Optional[Player]:
    wanted = name.strip().lower()
    return next((p for p in state.players if p.name.lower() == wanted), None)

def can_join(state: GameState, name: Optional[str] = None) -> bool:
    """Rejoining is always allowed; new players only until everyone has moved once."""
    if name and find_player_by_name(state, name):
        return True
    if state.gamePhase != 'playing' or len(state.players) >= MAX_PLAYERS:
        return False
    return not state.players or len(state.history) < len(state.players)

def authenticate(state: GameState, player_id: str, code: str) -> Player:
    player = find_player(state, player_id)
    if player is None or player.code != code:
        raise BadCredentials('Unknown player or wrong code.')
    return player

def require_turn(state: GameState, player: Player) -> None:
    if state.gamePhase != 'playing':
        raise TurnViolation('The game has ended.')
    current = current_player(state)
    if current is None:
        raise TurnViolation('Nobody has joined yet.')
    if current.id != player.id:
        raise TurnViolation(f"It's not your turn. It's {current.name}'s turn.")

def take_from_rack(player: Player, tile_ids: List[str]) -> List[Tile]:
    """The rack tiles with the given ids, in the order asked for."""
    if len(set(tile_ids)) != len(tile_ids):
        raise IllegalMove('The same tile was used twice.')
    rack: Dict[str, Tile] = {t.id: t for t in player.rack}
    missing = [tid for tid in tile_ids if tid not in rack]
    if missing:
        raise IllegalMove(f"Tiles not in your rack: {', '.join(missing)}")
    return [rack[tid] for tid in tile_ids]

def check_placement(board: Board, player: Player, staged: List[PlacedTile]) -> List[PlacedTile]:
    """Validate a staged move and rebuild it from the player's own tiles.

    Letters and points come from the rack, only the coordinates (and the
    letter chosen for a blank) come from the request. Adjacency to earlier
    words is not checked.
    """
    if not staged:
        raise IllegalMove('No tiles placed.')
    rack_tiles = take_from_rack(player, [t.id for t in staged])

    placed: List[PlacedTile] = []
    seen = set()
    for tile, request in zip(rack_tiles, staged):
        x, y = request.x, request.y
        if not in_bounds(x, y):
            raise IllegalMove(f"Square ({x}, {y}) is off the board.")
        if (x, y) in seen or board[x][y].tile is not None:
            raise IllegalMove(f"Square ({x}, {y}) is already taken.")
        seen.add((x, y))

        if tile.is_blank:
            letter = request.letter.strip().upper()
            if len(letter) != 1 or not letter.isalpha():
                raise IllegalMove('Choose a letter for the blank tile.')
            placed.append(PlacedTile(id=tile.id, letter=letter, points=0, originalLetter=BLANK, x=x, y=y))
        else:
            placed.append(PlacedTile(id=tile.id, letter=tile.letter, points=tile.points, x=x, y=y))

    if len({t.x for t in placed}) > 1 and len({t.y for t in placed}) > 1:
        raise IllegalMove('Tiles must be placed in a single row or column.')
    return placed

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple, Union

from .schemas import BoardSquare, PlacedTile, PlayedWord

BOARD_SIZE = 15
CENTER = (7, 7)

Board = List[List[BoardSquare]]
Coord = Tuple[int, int]

# (row, col) == (x, y)
PREMIUM_SQUARES = {
    ('word', 3): [(0, 0), (0, 7), (0, 14), (7, 0), (7, 14), (14, 0), (14, 7), (14, 14)],
    ('word', 2): [
        (1, 1), (2, 2), (3, 3), (4, 4), (1, 13), (2, 12), (3, 11), (4, 10),
        (10, 4), (11, 3), (12, 2), (13, 1), (10, 10), (11, 11), (12, 12), (13, 13),
    ],
    ('letter', 3): [
        (1, 5), (1, 9), (5, 1), (5, 5), (5, 9), (5, 13),
        (9, 1), (9, 5), (9, 9), (9, 13), (13, 5), (13, 9),
    ],
    ('letter', 2): [
        (0, 3), (0, 11), (2, 6), (2, 8), (3, 0), (3, 7), (3, 14), (6, 2),
        (6, 6), (6, 8), (6, 12), (7, 3), (7, 11), (8, 2), (8, 6), (8, 8),
        (8, 12), (11, 0), (11, 7), (11, 14), (12, 6), (12, 8), (14, 3), (14, 11),
    ],
}

def in_bounds(x: int, y: int) -> bool:
    return 0 <= x < BOARD_SIZE and 0 <= y < BOARD_SIZE

def create_initial_board() -> Board:
    board = [[BoardSquare(x=x, y=y) for y in range(BOARD_SIZE)] for x in range(BOARD_SIZE)]
    for (kind, factor), coords in PREMIUM_SQUARES.items():
        for x, y in coords:
            board[x][y].multiplierType = kind
            board[x][y].multiplier = factor
    cx, cy = CENTER
    board[cx][cy].isCenter = True
    board[cx][cy].multiplierType = 'word'
    board[cx][cy].multiplier = 2
    return board

def build_board(history: Iterable[PlayedWord]) -> Board:
    """Replay every placement in ``history`` onto an empty board.

    The board is never read back from storage: occupancy is whatever the
    history says, so two states with the same history always agree.
    """
    board = create_initial_board()
    for entry in history:
        for tile in entry.tiles:
            if in_bounds(tile.x, tile.y):
                board[tile.x][tile.y].tile = tile
    return board

def occupied(board: Board) -> Dict[Coord, PlacedTile]:
    return {
        (sq.x, sq.y): sq.tile
        for row in board for sq in row
        if sq.tile is not None
    }

@dataclass(frozen=True)
class Committed:
    tile: PlacedTile

@dataclass(frozen=True)
class Staged:
    tile: PlacedTile

# None is an empty square
Cell = Union[Committed, Staged, None]

def index_staged(staged: Iterable[PlacedTile]) -> Dict[Coord, PlacedTile]:
    return {(t.x, t.y): t for t in staged}

def cell_at(board: Board, staged: Dict[Coord, PlacedTile], x: int, y: int) -> Cell:
    if not in_bounds(x, y):
        return None
    tile: Optional[PlacedTile] = staged.get((x, y))
    if tile is not None:
        return Staged(tile)
    square = board[x][y]
    if square.tile is not None:
        return Committed(square.tile)
    return None

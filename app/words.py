from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence, Tuple

from .board import Board, Coord, Staged, cell_at, index_staged
from .schemas import Axis, PlacedTile

HORIZONTAL: Axis = 'horizontal'
VERTICAL: Axis = 'vertical'

# x is the row, so a horizontal word advances along y
STEPS: Dict[str, Tuple[int, int]] = {
    HORIZONTAL: (0, 1),
    VERTICAL: (1, 0),
}

@dataclass(frozen=True)
class WordCell:
    x: int
    y: int
    tile: PlacedTile
    staged: bool

@dataclass
class WordInfo:
    word: str
    cells: List[WordCell]
    axis: Axis

    @property
    def key(self) -> Tuple[str, int, int, int]:
        start = self.cells[0]
        return (self.axis, start.x, start.y, len(self.cells))

    @property
    def new_tiles(self) -> int:
        return sum(1 for c in self.cells if c.staged)

def other_axis(axis: Axis) -> Axis:
    return VERTICAL if axis == HORIZONTAL else HORIZONTAL

def main_axis(staged: Sequence[PlacedTile]) -> Axis:
    return HORIZONTAL if len({t.x for t in staged}) == 1 else VERTICAL

def walk(board: Board, staged: Dict[Coord, PlacedTile], x: int, y: int, axis: Axis) -> List[WordCell]:
    """Collect the full run of occupied squares through (x, y) along ``axis``."""
    dx, dy = STEPS[axis]
    while cell_at(board, staged, x - dx, y - dy) is not None:
        x, y = x - dx, y - dy
    line: List[WordCell] = []
    while True:
        cell = cell_at(board, staged, x, y)
        if cell is None:
            break
        line.append(WordCell(x=x, y=y, tile=cell.tile, staged=isinstance(cell, Staged)))
        x, y = x + dx, y + dy
    return line

def locate_words(board: Board, staged_tiles: Iterable[PlacedTile]) -> List[WordInfo]:
    """Every word (main line and cross words) formed by ``staged_tiles``.

    ``board`` holds the committed tiles. Staged tiles shadow committed ones
    on the same square. Words are returned in discovery order, main line
    first, each distinct position at most once.
    """
    staged = list(staged_tiles)
    if not staged:
        return []
    index = index_staged(staged)
    found: Dict[Tuple[str, int, int, int], WordInfo] = {}

    def add(line: List[WordCell], axis: Axis) -> None:
        if len(line) < 2:
            return
        info = WordInfo(word=''.join(c.tile.letter for c in line), cells=line, axis=axis)
        found.setdefault(info.key, info)

    if len(staged) == 1:
        # no line to follow yet, so either axis may hold the word
        tile = staged[0]
        for axis in (HORIZONTAL, VERTICAL):
            add(walk(board, index, tile.x, tile.y, axis), axis)
        return list(found.values())

    axis = main_axis(staged)
    first = staged[0]
    add(walk(board, index, first.x, first.y, axis), axis)
    cross = other_axis(axis)
    for tile in staged:
        add(walk(board, index, tile.x, tile.y, cross), cross)
    return list(found.values())

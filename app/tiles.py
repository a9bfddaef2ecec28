"""Tile distribution, the draw bag, and the conservation audit.

Every tile in a game is in exactly one of three places: the bag, a rack,
or the board (that is, some history entry). Summed per letter class the
three always add up to :data:`TILE_DISTRIBUTION`. A blank keeps its class
after it is played, whatever letter it was assigned.
"""
from __future__ import annotations
import random
import uuid
from collections import Counter
from dataclasses import dataclass, field
from itertools import chain
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from .schemas import BLANK, Tile

RACK_SIZE = 7

LETTER_POINTS: Dict[str, int] = {
    'A': 1, 'B': 3, 'C': 3, 'D': 2, 'E': 1, 'F': 4, 'G': 2, 'H': 4, 'I': 1,
    'J': 8, 'K': 5, 'L': 1, 'M': 3, 'N': 1, 'O': 1, 'P': 3, 'Q': 10, 'R': 1,
    'S': 1, 'T': 1, 'U': 1, 'V': 4, 'W': 4, 'X': 8, 'Y': 4, 'Z': 10, BLANK: 0,
}

TILE_DISTRIBUTION: Dict[str, int] = {
    'A': 9, 'B': 2, 'C': 2, 'D': 4, 'E': 12, 'F': 2, 'G': 3, 'H': 2, 'I': 9,
    'J': 1, 'K': 1, 'L': 4, 'M': 2, 'N': 6, 'O': 8, 'P': 2, 'Q': 1, 'R': 6,
    'S': 4, 'T': 6, 'U': 4, 'V': 2, 'W': 2, 'X': 1, 'Y': 2, 'Z': 1, BLANK: 2,
}

def new_tile_id() -> str:
    return uuid.uuid4().hex[:8].upper()

def make_tile(letter: str) -> Tile:
    return Tile(id=new_tile_id(), letter=letter, points=LETTER_POINTS.get(letter, 0))

def shuffled(tiles: Iterable[Tile], rng: Optional[random.Random] = None) -> List[Tile]:
    out = list(tiles)
    (rng or random).shuffle(out)
    return out

def new_tile_bag(rng: Optional[random.Random] = None,
                 distribution: Mapping[str, int] = TILE_DISTRIBUTION) -> List[Tile]:
    tiles = [make_tile(letter) for letter, count in distribution.items() for _ in range(count)]
    return shuffled(tiles, rng)

def draw_tiles(bag: List[Tile], count: int) -> Tuple[List[Tile], List[Tile]]:
    """Split ``bag`` into (drawn, remaining), drawing from the front."""
    count = max(0, min(count, len(bag)))
    return bag[:count], bag[count:]

def count_tiles(tiles: Iterable[Tile]) -> Counter:
    return Counter(t.letter_class for t in tiles)

def expected_bag(distribution: Mapping[str, int],
                 racks: Iterable[Iterable[Tile]],
                 history_tiles: Iterable[Tile]) -> List[Tile]:
    """The bag implied by conservation: distribution minus everything in play."""
    in_play = count_tiles(chain(chain.from_iterable(racks), history_tiles))
    bag: List[Tile] = []
    for letter, initial in distribution.items():
        bag.extend(make_tile(letter) for _ in range(max(0, initial - in_play[letter])))
    return bag

@dataclass
class EconomyDrift:
    expected: List[Tile]
    # per letter class: tiles the bag lacks / holds beyond the expected count
    missing: Dict[str, int] = field(default_factory=dict)
    surplus: Dict[str, int] = field(default_factory=dict)
    # more tiles in play than the distribution has; cannot be repaired
    overdrawn: Dict[str, int] = field(default_factory=dict)

    def describe(self) -> str:
        parts = []
        for label, counts in (('missing', self.missing), ('surplus', self.surplus), ('overdrawn', self.overdrawn)):
            if counts:
                letters = ', '.join(f"{_label(k)}x{v}" for k, v in sorted(counts.items()))
                parts.append(f"{label} {letters}")
        return '; '.join(parts)

def _label(letter: str) -> str:
    return 'blank' if letter == BLANK else letter

def audit_bag(bag: Iterable[Tile],
              racks: Iterable[Iterable[Tile]],
              history_tiles: Iterable[Tile],
              distribution: Mapping[str, int] = TILE_DISTRIBUTION) -> Optional[EconomyDrift]:
    """Compare ``bag`` with the bag conservation requires.

    Returns None when every letter class matches, otherwise the drift with a
    fresh expected bag to replace it with.
    """
    racks = [list(r) for r in racks]
    history_tiles = list(history_tiles)
    expected = expected_bag(distribution, racks, history_tiles)

    have = count_tiles(bag)
    want = count_tiles(expected)
    in_play = count_tiles(chain(chain.from_iterable(racks), history_tiles))

    missing = {k: want[k] - have[k] for k in want if want[k] > have[k]}
    surplus = {k: have[k] - want[k] for k in have if have[k] > want[k]}
    overdrawn = {k: n - distribution.get(k, 0) for k, n in in_play.items() if n > distribution.get(k, 0)}
    if not (missing or surplus or overdrawn):
        return None
    return EconomyDrift(expected=expected, missing=missing, surplus=surplus, overdrawn=overdrawn)

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, List, Tuple

from .board import Board
from .schemas import MoveScoreView, PlacedTile, WordView
from .tiles import RACK_SIZE
from .words import WordInfo, locate_words

BINGO_BONUS = 50

@dataclass
class WordScore:
    info: WordInfo
    score: int
    new_tiles: int

    @property
    def counted(self) -> bool:
        return self.new_tiles > 0

@dataclass
class MoveScore:
    score: int
    words: List[WordScore]
    isBingo: bool

    @property
    def formed_words(self) -> List[str]:
        return [w.info.word for w in self.words if w.counted]

    def to_view(self) -> MoveScoreView:
        return MoveScoreView(
            score=self.score,
            isBingo=self.isBingo,
            words=[WordView(word=w.info.word, axis=w.info.axis, score=w.score) for w in self.words if w.counted],
        )

def score_word(info: WordInfo, board: Board) -> Tuple[int, int]:
    """Return (score, number of newly placed tiles) for one word.

    Premium squares only count under tiles placed this move.
    """
    total = 0
    word_multiplier = 1
    new_tiles = 0
    for cell in info.cells:
        letter_score = 0 if cell.tile.is_blank else cell.tile.points
        if cell.staged:
            new_tiles += 1
            square = board[cell.x][cell.y]
            if square.multiplierType == 'letter':
                letter_score *= square.multiplier
            elif square.multiplierType == 'word':
                word_multiplier *= square.multiplier
        total += letter_score
    return total * word_multiplier, new_tiles

def score_move(staged_tiles: Iterable[PlacedTile], board: Board) -> MoveScore:
    staged = list(staged_tiles)
    if not staged:
        return MoveScore(score=0, words=[], isBingo=False)

    words: List[WordScore] = []
    total = 0
    for info in locate_words(board, staged):
        score, new_tiles = score_word(info, board)
        words.append(WordScore(info=info, score=score, new_tiles=new_tiles))
        # words made only of earlier tiles were scored when they were played
        if new_tiles > 0:
            total += score

    is_bingo = len(staged) == RACK_SIZE
    if is_bingo:
        total += BINGO_BONUS
    return MoveScore(score=total, words=words, isBingo=is_bingo)

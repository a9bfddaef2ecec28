from __future__ import annotations
from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import List, Literal, Optional

BLANK = ' '

Axis = Literal['horizontal', 'vertical']
MultiplierType = Literal['letter', 'word']
GamePhase = Literal['playing', 'ended']

class Tile(BaseModel):
    id: str
    letter: str
    points: int = 0
    # set once a blank has been assigned a letter
    originalLetter: Optional[str] = None

    @property
    def letter_class(self) -> str:
        return self.originalLetter if self.originalLetter is not None else self.letter

    @property
    def is_blank(self) -> bool:
        return self.letter_class == BLANK

class PlacedTile(Tile):
    x: int
    y: int

class BoardSquare(BaseModel):
    x: int
    y: int
    multiplierType: Optional[MultiplierType] = None
    multiplier: int = 1
    isCenter: bool = False
    tile: Optional[PlacedTile] = None

class Player(BaseModel):
    id: str
    name: str
    score: int = 0
    rack: List[Tile] = []
    code: str
    isComputer: bool = False

class PlayedWord(BaseModel):
    playerId: str
    playerName: str
    word: str = ''
    tiles: List[PlacedTile] = []
    score: int = 0
    isPass: bool = False
    isSwap: bool = False
    isResign: bool = False
    timestamp: str

    @model_validator(mode='after')
    def _one_kind(self) -> 'PlayedWord':
        if sum([self.isPass, self.isSwap, self.isResign]) > 1:
            raise ValueError('isPass, isSwap and isResign are mutually exclusive')
        return self

class GameState(BaseModel):
    # Older documents carry a board snapshot; it is derived, so drop it.
    model_config = ConfigDict(extra='ignore')

    gameId: str
    players: List[Player] = []
    tileBag: List[Tile] = []
    history: List[PlayedWord] = []
    gamePhase: GamePhase = 'playing'
    endStatus: Optional[str] = None
    createdAt: Optional[str] = None
    crosswordTitle: Optional[str] = None

# Requests

class JoinRequest(BaseModel):
    name: str
    code: str

class PlayerAction(BaseModel):
    playerId: str
    code: str

class MoveRequest(PlayerAction):
    tiles: List[PlacedTile] = Field(..., min_length=1)

class SwapRequest(PlayerAction):
    tileIds: List[str] = Field(..., min_length=1)

class SuggestRequest(BaseModel):
    word: str

class PreviewRequest(BaseModel):
    tiles: List[PlacedTile] = []

# Responses

class PlayerView(BaseModel):
    id: str
    name: str
    score: int
    rackSize: int
    isComputer: bool = False

class GameView(BaseModel):
    gameId: str
    gamePhase: GamePhase
    endStatus: Optional[str] = None
    crosswordTitle: Optional[str] = None
    players: List[PlayerView]
    bagCount: int
    history: List[PlayedWord]
    board: List[List[BoardSquare]]
    currentPlayerId: Optional[str] = None
    sha: str

class WordView(BaseModel):
    word: str
    axis: Axis
    score: int

class MoveScoreView(BaseModel):
    score: int
    isBingo: bool
    words: List[WordView]

class JoinResult(BaseModel):
    playerId: str
    rack: List[Tile]
    rejoined: bool = False
    game: GameView

class MoveResult(BaseModel):
    entry: PlayedWord
    rack: List[Tile]
    game: GameView

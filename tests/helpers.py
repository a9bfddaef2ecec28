from typing import Dict, List

from app.board import create_initial_board
from app.schemas import BLANK, GameState, PlacedTile, PlayedWord, Player, Tile
from app.store import GameRepository
from app.tiles import LETTER_POINTS, TILE_DISTRIBUTION, count_tiles, expected_bag, new_tile_id


def tile(letter: str) -> Tile:
    return Tile(id=new_tile_id(), letter=letter, points=LETTER_POINTS[letter])


def placed(letter: str, x: int, y: int, blank: bool = False) -> PlacedTile:
    if blank:
        return PlacedTile(id=new_tile_id(), letter=letter, points=0, originalLetter=BLANK, x=x, y=y)
    return PlacedTile(id=new_tile_id(), letter=letter, points=LETTER_POINTS[letter], x=x, y=y)


def place_at(t: Tile, x: int, y: int) -> PlacedTile:
    return PlacedTile(**t.model_dump(), x=x, y=y)


def word(letters: str, x: int, y: int, vertical: bool = False) -> List[PlacedTile]:
    return [
        placed(ch, x + i if vertical else x, y if vertical else y + i)
        for i, ch in enumerate(letters)
    ]


def entry(tiles: List[PlacedTile], player_id: str = 'p1', name: str = 'ALICE') -> PlayedWord:
    return PlayedWord(
        playerId=player_id, playerName=name,
        word=''.join(t.letter for t in tiles), tiles=tiles,
        timestamp='2024-01-01T00:00:00+00:00',
    )


def plain_board():
    """A board with no premium squares at all."""
    board = create_initial_board()
    for row in board:
        for square in row:
            square.multiplierType = None
            square.multiplier = 1
    return board


def make_state(racks: Dict[str, str], history: List[PlayedWord] = (), game_id: str = 'GAME01') -> GameState:
    """A consistent game: players with the given racks, bag holding the rest."""
    players = [
        Player(id=f"p{i + 1}", name=name, rack=[tile(ch) for ch in letters], code=f"{name.lower()}-code")
        for i, (name, letters) in enumerate(racks.items())
    ]
    history = list(history)
    bag = expected_bag(TILE_DISTRIBUTION, [p.rack for p in players], [t for e in history for t in e.tiles])
    return GameState(gameId=game_id, players=players, tileBag=bag, history=history)


def seed(store, state: GameState) -> str:
    return GameRepository(store).write(state, None, 'seed')


def conserved(state: GameState) -> bool:
    counts = count_tiles(state.tileBag)
    for p in state.players:
        counts.update(count_tiles(p.rack))
    counts.update(count_tiles(t for e in state.history for t in e.tiles))
    return dict(counts) == TILE_DISTRIBUTION


class LocalConfig:
    GITHUB_TOKEN = None
    GITHUB_REPO = 'example/games'
    GITHUB_BRANCH = 'games'
    GITHUB_API_URL = 'https://api.github.test'
    STORE_TIMEOUT_SEC = 1.0
    WORDS_PATH = None
    SUGGESTIONS_PATH = 'dictionary/suggested-words.txt'
    MAX_CONFLICT_RETRIES = 3
    LOG_LEVEL = 'DEBUG'
    CORS_ORIGINS = ['*']

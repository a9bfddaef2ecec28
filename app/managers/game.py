from __future__ import annotations
import logging
import random
import string
import uuid
from datetime import datetime, timezone
from typing import Callable, List, Optional, Set, Tuple, TypeVar, Union

from ..board import build_board
from ..dictionary import DictionaryService
from ..errors import BadCredentials, Conflict, IllegalMove, InvalidWord, JoinRejected
from ..rules import (
    MAX_PLAYERS, authenticate, can_join, check_placement, current_player,
    find_player_by_name, require_turn, take_from_rack,
)
from ..schemas import GameState, GameView, PlacedTile, PlayedWord, Player, PlayerView
from ..scoring import MoveScore, score_move
from ..store import DocumentStore, GameRepository
from ..tiles import RACK_SIZE, audit_bag, draw_tiles, new_tile_bag, shuffled

logger = logging.getLogger(__name__)

T = TypeVar('T')

GAME_ID_CHARS = string.ascii_uppercase + string.digits
GAME_ID_LENGTH = 6

def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()

def generate_game_id(rng=random, length: int = GAME_ID_LENGTH) -> str:
    return ''.join(rng.choice(GAME_ID_CHARS) for _ in range(length))

def resigned_ids(state: GameState) -> Set[str]:
    return {e.playerId for e in state.history if e.isResign}

def active_players(state: GameState) -> List[Player]:
    gone = resigned_ids(state)
    return [p for p in state.players if p.id not in gone]

def to_view(state: GameState, sha: str) -> GameView:
    current = current_player(state) if state.gamePhase == 'playing' else None
    return GameView(
        gameId=state.gameId,
        gamePhase=state.gamePhase,
        endStatus=state.endStatus,
        crosswordTitle=state.crosswordTitle,
        players=[
            PlayerView(id=p.id, name=p.name, score=p.score, rackSize=len(p.rack), isComputer=p.isComputer)
            for p in state.players
        ],
        bagCount=len(state.tileBag),
        history=state.history,
        board=build_board(state.history),
        currentPlayerId=current.id if current else None,
        sha=sha,
    )

class GameManager:
    """Game actions over the versioned store.

    Every action reads (and repairs) the current document, applies a pure
    change to a private copy and writes it back once with the token from
    that read. Losing the race means starting again from a fresh read.
    """

    def __init__(self, store: DocumentStore, dictionary: DictionaryService,
                 max_retries: int = 3, rng: Optional[random.Random] = None):
        self.repo = GameRepository(store)
        self.dictionary = dictionary
        self.max_retries = max_retries
        self.rng = rng or random.Random()

    # Reads

    def load_and_repair(self, game_id: str) -> Tuple[GameState, str]:
        """Read a game and fix anything the tile economy says is off.

        The board is always rebuilt from history, so only the bag and the
        racks can need repair. When they do the fix is written back and the
        token from that write is returned.
        """
        conflicts = 0
        while True:
            state, sha = self.repo.read(game_id)
            if not self.repair(state):
                return state, sha
            try:
                sha = self.repo.write(state, sha, f"SYSTEM: Corrected tile bag and player racks for game {game_id}")
                return state, sha
            except Conflict:
                # someone else wrote first; repair whatever they left
                conflicts += 1
                if conflicts > self.max_retries:
                    raise
                logger.warning('Repair of game %s lost a race, re-reading', game_id)

    def repair(self, state: GameState) -> bool:
        """Rebalance the bag and refill racks in place. True if anything changed."""
        if state.gamePhase != 'playing':
            return False
        dirty = False

        history_tiles = [t for entry in state.history for t in entry.tiles]
        drift = audit_bag(state.tileBag, [p.rack for p in state.players], history_tiles)
        if drift is not None and drift.overdrawn:
            # a new bag cannot take tiles back off racks or the board
            logger.error('Game %s has more tiles in play than exist: %s', state.gameId, drift.overdrawn)
        if drift is not None and (drift.missing or drift.surplus):
            logger.warning('Correcting tile bag for game %s: %s', state.gameId, drift.describe())
            state.tileBag = shuffled(drift.expected, self.rng)
            dirty = True

        gone = resigned_ids(state)
        for player in state.players:
            if player.id in gone:
                continue
            needed = RACK_SIZE - len(player.rack)
            if needed > 0 and state.tileBag:
                drawn, state.tileBag = draw_tiles(state.tileBag, needed)
                player.rack = player.rack + drawn
                dirty = True
        return dirty

    def get_game(self, game_id: str) -> GameView:
        return to_view(*self.load_and_repair(game_id))

    def preview_move(self, game_id: str, tiles: List[PlacedTile]) -> MoveScore:
        state, _ = self.load_and_repair(game_id)
        return score_move(tiles, build_board(state.history))

    # Writes

    def perform(self, game_id: str, action: Callable[[GameState], T],
                message: Union[str, Callable[[T], str]]) -> Tuple[GameState, str, T]:
        """Run ``action`` against the latest state and commit it with CAS.

        ``action`` mutates the draft it is given and may raise a
        :class:`~app.errors.GameError` to abandon the change. It is re-run
        from scratch after every lost race, so its preconditions are
        checked against fresh state each time.
        """
        conflicts = 0
        while True:
            text = None
            try:
                state, sha = self.load_and_repair(game_id)
                draft = state.model_copy(deep=True)
                result = action(draft)
                text = message(result) if callable(message) else message
                new_sha = self.repo.write(draft, sha, text)
            except Conflict:
                conflicts += 1
                if conflicts > self.max_retries:
                    logger.error('Giving up on game %s after %d conflicts', game_id, conflicts)
                    raise
                logger.warning('Game %s changed underneath us (%s), retrying', game_id, text)
                continue
            return draft, new_sha, result

    def create_game(self, game_id: Optional[str] = None) -> Tuple[GameState, str]:
        attempts = 0
        while True:
            state = GameState(
                gameId=game_id or generate_game_id(self.rng),
                tileBag=new_tile_bag(self.rng),
                createdAt=now_iso(),
            )
            try:
                sha = self.repo.write(state, None, f"feat: Create game {state.gameId}")
                return state, sha
            except Conflict:
                # a chosen id is the caller's problem, a random one we just redraw
                attempts += 1
                if game_id is not None or attempts > self.max_retries:
                    raise

    def join(self, game_id: str, name: str, code: str) -> Tuple[GameState, str, Player, bool]:
        """Add a player, or let an existing one back in with their code.

        Returns (state, sha, player, rejoined).
        """
        name, code = name.strip(), code.strip()
        if not name or not code:
            raise JoinRejected('Player name and code cannot be empty.')

        state, sha = self.load_and_repair(game_id)
        existing = find_player_by_name(state, name)
        if existing is not None:
            if existing.code != code:
                raise BadCredentials('A player with that name already exists, but the code is incorrect.')
            return state, sha, existing, True

        def add_player(draft: GameState) -> Player:
            if find_player_by_name(draft, name):
                raise JoinRejected(f"{name} has just joined from somewhere else.")
            if not can_join(draft):
                if len(draft.players) >= MAX_PLAYERS:
                    raise JoinRejected(f"Lobby is full (max {MAX_PLAYERS} players).")
                raise JoinRejected('The game is too far along to join.')
            if len(draft.tileBag) < RACK_SIZE:
                raise JoinRejected('Not enough tiles left in the bag to start.')
            rack, draft.tileBag = draw_tiles(draft.tileBag, RACK_SIZE)
            player = Player(id=f"p{uuid.uuid4().hex[:10]}", name=name, rack=rack, code=code)
            draft.players.append(player)
            return player

        state, sha, player = self.perform(game_id, add_player, f"feat: {name} joined game {game_id}")
        logger.info('%s joined game %s as %s', name, game_id, player.id)
        return state, sha, player, False

    def play_word(self, game_id: str, player_id: str, code: str,
                  tiles: List[PlacedTile]) -> Tuple[GameState, str, PlayedWord]:
        def play(draft: GameState) -> PlayedWord:
            player = authenticate(draft, player_id, code)
            require_turn(draft, player)
            board = build_board(draft.history)
            placed = check_placement(board, player, tiles)
            result = score_move(placed, board)

            words = result.formed_words
            if not words:
                raise IllegalMove('Tiles must form a word of at least two letters.')
            invalid = self.dictionary.invalid(words)
            if invalid:
                raise InvalidWord(invalid)

            played = {t.id for t in placed}
            drawn, draft.tileBag = draw_tiles(draft.tileBag, len(placed))
            player.rack = [t for t in player.rack if t.id not in played] + drawn
            player.score += result.score

            entry = PlayedWord(
                playerId=player.id, playerName=player.name, word=words[0],
                tiles=placed, score=result.score, timestamp=now_iso(),
            )
            draft.history.append(entry)
            if not player.rack and not draft.tileBag:
                self._end(draft, f"{player.name} played out")
            else:
                self._skip_resigned(draft)
            return entry

        state, sha, entry = self.perform(
            game_id, play, lambda e: f"feat: {e.playerName} played {e.word} for {e.score}")
        return state, sha, entry

    def pass_turn(self, game_id: str, player_id: str, code: str) -> Tuple[GameState, str, PlayedWord]:
        def pass_(draft: GameState) -> PlayedWord:
            player = authenticate(draft, player_id, code)
            require_turn(draft, player)
            entry = PlayedWord(playerId=player.id, playerName=player.name, isPass=True, timestamp=now_iso())
            draft.history.append(entry)
            self._skip_resigned(draft)
            return entry

        return self.perform(game_id, pass_, lambda e: f"feat: {e.playerName} passed")

    def swap_tiles(self, game_id: str, player_id: str, code: str,
                   tile_ids: List[str]) -> Tuple[GameState, str, PlayedWord]:
        def swap(draft: GameState) -> PlayedWord:
            player = authenticate(draft, player_id, code)
            require_turn(draft, player)
            returned = take_from_rack(player, tile_ids)
            if len(draft.tileBag) < len(returned):
                raise IllegalMove('Not enough tiles in the bag to swap.')
            # draw first so the same tiles cannot come straight back
            drawn, rest = draw_tiles(draft.tileBag, len(returned))
            draft.tileBag = shuffled(rest + returned, self.rng)
            swapped = set(tile_ids)
            player.rack = [t for t in player.rack if t.id not in swapped] + drawn
            entry = PlayedWord(playerId=player.id, playerName=player.name, isSwap=True, timestamp=now_iso())
            draft.history.append(entry)
            self._skip_resigned(draft)
            return entry

        return self.perform(game_id, swap, lambda e: f"feat: {e.playerName} swapped tiles")

    def resign(self, game_id: str, player_id: str, code: str) -> Tuple[GameState, str, PlayedWord]:
        def resign_(draft: GameState) -> PlayedWord:
            player = authenticate(draft, player_id, code)
            require_turn(draft, player)
            draft.tileBag = shuffled(draft.tileBag + player.rack, self.rng)
            player.rack = []
            entry = PlayedWord(playerId=player.id, playerName=player.name, isResign=True, timestamp=now_iso())
            draft.history.append(entry)
            remaining = active_players(draft)
            if len(remaining) < 2:
                winner = max(remaining, key=lambda p: p.score, default=None)
                self._end(draft, f"{winner.name} won by resignation" if winner else 'Everyone resigned')
            else:
                self._skip_resigned(draft)
            return entry

        return self.perform(game_id, resign_, lambda e: f"feat: {e.playerName} resigned")

    def set_title(self, game_id: str, title: str) -> Tuple[GameState, str]:
        def name_it(draft: GameState) -> None:
            draft.crosswordTitle = title

        state, sha, _ = self.perform(game_id, name_it, f"feat: Title game {game_id}")
        return state, sha

    # Helpers

    def _end(self, draft: GameState, status: str) -> None:
        draft.gamePhase = 'ended'
        draft.endStatus = status
        logger.info('Game %s ended: %s', draft.gameId, status)

    def _skip_resigned(self, draft: GameState) -> None:
        # Keeps turn order a function of history length: resigned seats pass.
        gone = resigned_ids(draft)
        if not gone or draft.gamePhase != 'playing':
            return
        current = current_player(draft)
        while current is not None and current.id in gone:
            draft.history.append(PlayedWord(
                playerId=current.id, playerName=current.name, isPass=True, timestamp=now_iso(),
            ))
            current = current_player(draft)

from __future__ import annotations
import logging
from typing import Dict

from fastapi import APIRouter, Depends, Request

from ..errors import GameError
from ..managers.game import GameManager, to_view
from ..schemas import (
    GameView, JoinRequest, JoinResult, MoveRequest, MoveResult, MoveScoreView,
    PlayerAction, PreviewRequest, SwapRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix='/games', tags=['games'])

def get_manager(request: Request) -> GameManager:
    return request.app.state.manager

def _move_result(state, sha, entry, player_id: str) -> MoveResult:
    player = next(p for p in state.players if p.id == player_id)
    return MoveResult(entry=entry, rack=player.rack, game=to_view(state, sha))

@router.post('', status_code=201)
def create_game(manager: GameManager = Depends(get_manager)) -> Dict[str, str]:
    state, sha = manager.create_game()
    return {'gameId': state.gameId, 'sha': sha}

@router.get('/{game_id}', response_model=GameView)
def get_game(game_id: str, manager: GameManager = Depends(get_manager)):
    return manager.get_game(game_id.upper())

@router.post('/{game_id}/players', response_model=JoinResult)
def join_game(game_id: str, body: JoinRequest, manager: GameManager = Depends(get_manager)):
    state, sha, player, rejoined = manager.join(game_id.upper(), body.name, body.code)
    return JoinResult(playerId=player.id, rack=player.rack, rejoined=rejoined, game=to_view(state, sha))

@router.post('/{game_id}/moves', response_model=MoveResult)
def play_word(game_id: str, body: MoveRequest, manager: GameManager = Depends(get_manager)):
    state, sha, entry = manager.play_word(game_id.upper(), body.playerId, body.code, body.tiles)
    return _move_result(state, sha, entry, body.playerId)

@router.post('/{game_id}/pass', response_model=MoveResult)
def pass_turn(game_id: str, body: PlayerAction, manager: GameManager = Depends(get_manager)):
    state, sha, entry = manager.pass_turn(game_id.upper(), body.playerId, body.code)
    return _move_result(state, sha, entry, body.playerId)

@router.post('/{game_id}/swap', response_model=MoveResult)
def swap_tiles(game_id: str, body: SwapRequest, manager: GameManager = Depends(get_manager)):
    state, sha, entry = manager.swap_tiles(game_id.upper(), body.playerId, body.code, body.tileIds)
    return _move_result(state, sha, entry, body.playerId)

@router.post('/{game_id}/resign', response_model=MoveResult)
def resign(game_id: str, body: PlayerAction, manager: GameManager = Depends(get_manager)):
    state, sha, entry = manager.resign(game_id.upper(), body.playerId, body.code)
    return _move_result(state, sha, entry, body.playerId)

@router.post('/{game_id}/preview', response_model=MoveScoreView)
def preview_move(game_id: str, body: PreviewRequest, manager: GameManager = Depends(get_manager)):
    return manager.preview_move(game_id.upper(), body.tiles).to_view()

@router.get('/{game_id}/title')
def get_title(game_id: str, request: Request, manager: GameManager = Depends(get_manager)) -> Dict[str, str]:
    game_id = game_id.upper()
    state, _ = manager.load_and_repair(game_id)
    if state.crosswordTitle:
        return {'title': state.crosswordTitle}
    title = request.app.state.titles.get_title([e.word for e in state.history if e.word])
    if state.gamePhase == 'ended':
        # only finished puzzles keep their title
        try:
            manager.set_title(game_id, title)
        except GameError as exc:
            logger.warning('Could not save title for game %s: %s', game_id, exc)
    return {'title': title}

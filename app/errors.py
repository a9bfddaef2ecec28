from __future__ import annotations

class GameError(Exception):
    """Base class for failures surfaced by game operations."""

    status_code = 400
    code = 'game_error'

class NotFound(GameError):
    status_code = 404
    code = 'not_found'

class Conflict(GameError):
    # CAS token mismatch; callers re-read and retry
    status_code = 409
    code = 'conflict'

class InvalidWord(GameError):
    status_code = 422
    code = 'invalid_word'

    def __init__(self, words):
        self.words = list(words)
        super().__init__(f"Not valid: {', '.join(self.words)}")

class TurnViolation(GameError):
    status_code = 409
    code = 'turn_violation'

class IllegalMove(GameError):
    status_code = 400
    code = 'illegal_move'

class JoinRejected(GameError):
    status_code = 403
    code = 'join_rejected'

class BadCredentials(GameError):
    status_code = 403
    code = 'bad_credentials'

class StoreError(GameError):
    status_code = 502
    code = 'store_error'

class AlreadyExists(GameError):
    status_code = 409
    code = 'already_exists'

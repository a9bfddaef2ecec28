"""Versioned document storage with compare-and-swap writes.

A store maps a path to ``(content, token)``. The token is opaque and only
ever compared for equality. A write names the token it expects the document
to have; if anyone else wrote in between the write fails with
:class:`~app.errors.Conflict` and nothing is stored.
"""
from __future__ import annotations
import base64
import hashlib
import logging
import threading
from typing import Dict, Optional, Tuple

import requests
from pydantic import ValidationError

from .errors import Conflict, NotFound, StoreError
from .schemas import GameState

logger = logging.getLogger(__name__)

class DocumentStore:
    def read(self, path: str) -> Tuple[str, str]:
        raise NotImplementedError

    def write(self, path: str, content: str, expected_token: Optional[str], message: str) -> str:
        """Store ``content`` if the current token equals ``expected_token``.

        ``expected_token=None`` creates the document and conflicts if it
        already exists. Returns the new token.
        """
        raise NotImplementedError

class MemoryStore(DocumentStore):
    """In-process store; the lock makes check-and-write atomic."""

    def __init__(self):
        self._docs: Dict[str, Tuple[str, str]] = {}
        self._lock = threading.Lock()
        self._version = 0
        self.log: list = []  # (path, message) per successful write

    def read(self, path: str) -> Tuple[str, str]:
        with self._lock:
            if path not in self._docs:
                raise NotFound(path)
            return self._docs[path]

    def write(self, path: str, content: str, expected_token: Optional[str], message: str) -> str:
        with self._lock:
            current = self._docs.get(path)
            current_token = current[1] if current else None
            if current_token != expected_token:
                raise Conflict(f"{path}: expected {expected_token}, found {current_token}")
            self._version += 1
            token = hashlib.sha1(f"{self._version}:{content}".encode('utf-8')).hexdigest()
            self._docs[path] = (content, token)
            self.log.append((path, message))
            return token

class GitHubContentsStore(DocumentStore):
    """Documents as files on a branch of a GitHub repository.

    The blob sha is the version token; GitHub rejects a PUT whose ``sha``
    is stale.
    """

    def __init__(self, token: str, repo: str, branch: str,
                 api_url: str = 'https://api.github.com',
                 session: Optional[requests.Session] = None,
                 timeout: float = 10.0):
        self.repo = repo
        self.branch = branch
        self.base_url = f"{api_url.rstrip('/')}/repos/{repo}/contents"
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            'Authorization': f'token {token}',
            'Accept': 'application/vnd.github.v3+json',
            'X-GitHub-Api-Version': '2022-11-28',
        })

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def read(self, path: str) -> Tuple[str, str]:
        try:
            resp = self.session.get(self._url(path), params={'ref': self.branch}, timeout=self.timeout)
        except requests.RequestException as exc:
            raise StoreError(f"GET {path} failed: {exc}") from exc
        if resp.status_code == 404:
            raise NotFound(path)
        if not resp.ok:
            raise StoreError(f"GET {path}: {resp.status_code} {resp.reason}")
        data = resp.json()
        content = base64.b64decode(data['content']).decode('utf-8')
        return content, data['sha']

    def write(self, path: str, content: str, expected_token: Optional[str], message: str) -> str:
        body = {
            'message': message,
            'content': base64.b64encode(content.encode('utf-8')).decode('ascii'),
            'branch': self.branch,
        }
        if expected_token is not None:
            body['sha'] = expected_token
        try:
            resp = self.session.put(self._url(path), json=body, timeout=self.timeout)
        except requests.RequestException as exc:
            raise StoreError(f"PUT {path} failed: {exc}") from exc
        # 409: sha does not match the branch head; 422: file exists and no sha given
        if resp.status_code in (409, 422):
            raise Conflict(f"{path}: {_error_message(resp)}")
        if not resp.ok:
            raise StoreError(f"PUT {path}: {resp.status_code} {_error_message(resp)}")
        return resp.json()['content']['sha']

def _error_message(resp: requests.Response) -> str:
    try:
        return resp.json().get('message', resp.reason)
    except ValueError:
        return resp.reason

class GameRepository:
    """Game states as pretty-printed JSON documents at ``<gameId>.json``."""

    def __init__(self, store: DocumentStore):
        self.store = store

    @staticmethod
    def path(game_id: str) -> str:
        return f"{game_id}.json"

    def read(self, game_id: str) -> Tuple[GameState, str]:
        try:
            content, token = self.store.read(self.path(game_id))
        except NotFound as exc:
            raise NotFound(f'Game with ID "{game_id}" not found.') from exc
        try:
            return GameState.model_validate_json(content), token
        except ValidationError as exc:
            raise StoreError(f"game {game_id} is not a valid document: {exc}") from exc

    def write(self, state: GameState, expected_token: Optional[str], message: str) -> str:
        token = self.store.write(self.path(state.gameId), state.model_dump_json(indent=2), expected_token, message)
        logger.info('%s (%s)', message, token)
        return token

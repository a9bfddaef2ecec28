"""Word definitions and puzzle titles.

Both are nice-to-haves next to the game: every failure is logged and turned
into "no answer" so it can never get in the way of a move. The actual text
comes from an injected provider (typically a language model client); with
no provider only cached definitions and a local title are available.
"""
from __future__ import annotations
import logging
from typing import Callable, Dict, List, Optional

from .dictionary import DictionaryService
from .errors import GameError, NotFound
from .store import DocumentStore

logger = logging.getLogger(__name__)

INVALID_WORD = 'Not a valid Scrabble word.'

DefinitionProvider = Callable[[str], Optional[str]]
TitleProvider = Callable[[List[str]], Optional[str]]

class DefinitionService:
    def __init__(self, dictionary: DictionaryService,
                 store: Optional[DocumentStore] = None,
                 provider: Optional[DefinitionProvider] = None):
        self.dictionary = dictionary
        self.store = store
        self.provider = provider
        self._cache: Dict[str, str] = {}

    @staticmethod
    def path(word: str) -> str:
        return f"dictionary/{word}.txt"

    def get_definition(self, word: str) -> Optional[str]:
        word = word.strip().upper()
        if len(word) < 2:
            return None
        if word in self._cache:
            return self._cache[word]
        if not self.dictionary.is_valid(word):
            self._cache[word] = INVALID_WORD
            return INVALID_WORD

        definition = self._load(word)
        if definition is None:
            definition = self._ask(word)
            if definition:
                self._save(word, definition)
        if definition:
            self._cache[word] = definition
        return definition

    def _load(self, word: str) -> Optional[str]:
        if self.store is None:
            return None
        try:
            content, _ = self.store.read(self.path(word))
            return content
        except NotFound:
            return None
        except GameError:
            logger.exception('Could not read cached definition for %s', word)
            return None

    def _ask(self, word: str) -> Optional[str]:
        if self.provider is None:
            return None
        try:
            text = self.provider(word)
        except Exception:
            logger.exception('Definition lookup failed for %s', word)
            return None
        return text.strip() if text else None

    def _save(self, word: str, definition: str) -> None:
        if self.store is None:
            return
        path = self.path(word)
        try:
            try:
                _, sha = self.store.read(path)
            except NotFound:
                sha = None
            verb = 'Update' if sha else 'Create'
            self.store.write(path, definition, sha, f"feat: {verb} definition for {word}")
        except GameError as exc:
            logger.warning('Could not cache definition for %s: %s', word, exc)

def fallback_title(words: List[str]) -> str:
    if not words:
        return 'Untitled'
    return max(words, key=lambda w: (len(w), w)).title()

class TitleService:
    def __init__(self, provider: Optional[TitleProvider] = None):
        self.provider = provider

    def get_title(self, words: List[str]) -> str:
        words = [w.strip().upper() for w in words if w and w.strip()]
        if self.provider is not None and words:
            try:
                title = self.provider(words)
            except Exception:
                logger.exception('Title generation failed')
                title = None
            if title and title.strip():
                return title.strip()
        return fallback_title(words)

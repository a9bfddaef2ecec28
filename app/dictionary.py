from __future__ import annotations
import logging
import os
import re
from typing import Iterable, List, Optional, Set

from .errors import AlreadyExists, Conflict, IllegalMove, NotFound
from .store import DocumentStore

logger = logging.getLogger(__name__)

# Used when no word list is configured, e.g. local development and tests.
DEFAULT_WORDS = {
    # Common short words (2-3 letters)
    'AA','AB','AD','AE','AG','AH','AI','AL','AM','AN','AR','AS','AT','AW','AX','AY',
    'BA','BE','BI','BO','BY',
    'DO','ED','EF','EH','EL','EM','EN','ER','ES','ET','EX',
    'FA','GO','HA','HE','HI','HM','HO','ID','IF','IN','IS','IT','JO','KA','KI','LA','LI','LO',
    'MA','ME','MI','MM','MO','MU','MY','NA','NE','NO','NU','OD','OE','OF','OH','OI','OM','ON','OP','OR','OS','OW','OX','OY',
    'PA','PE','PI','QI','RE','SH','SI','SO','TA','TI','TO','UH','UM','UN','UP','US','UT','WE','WO','XI','XU','YA','YE','YO',
    'ACT','ARE','ART','BAT','CAB','CAT','EAT','ERA','RAT','SAT','TAB','TAR','TEA','ZOO',
    # Some 4-7 letter common words
    'HELLO','WORLD','TILE','TILES','BOARD','WORD','WORDS','PLAY','GAME','POINT','QUIZ','JAZZ','FUZZ','PUZZLE','BLANK',
    'DOG','FISH','BIRD','HOUSE','MOUSE','TABLE','CHAIR','ECHO','RHYTHM','CATS','SCRABBLE',
}

class DictionaryService:
    def __init__(self, words: Optional[Iterable[str]] = None):
        # Store uppercase words
        self._words: Set[str] = {w.strip().upper() for w in (words if words is not None else DEFAULT_WORDS) if w.strip()}

    def __len__(self) -> int:
        return len(self._words)

    def __contains__(self, word: str) -> bool:
        return self.is_valid(word)

    def is_valid(self, word: str) -> bool:
        if not word:
            return False
        return word.strip().upper() in self._words

    def invalid(self, words: Iterable[str]) -> list:
        return [w for w in words if not self.is_valid(w)]

    @classmethod
    def from_file(cls, path: str) -> 'DictionaryService':
        with open(path, 'r', encoding='utf-8') as f:
            service = cls(line for line in f)
        logger.info('Loaded %d words from %s', len(service), path)
        return service

def load_dictionary(path: Optional[str]) -> DictionaryService:
    if path and os.path.exists(path):
        return DictionaryService.from_file(path)
    logger.warning('Word list %r not found, using the built-in list of %d words', path, len(DEFAULT_WORDS))
    return DictionaryService()

WORD_FORMAT = re.compile(r'^[A-Z]{2,}$')

class SuggestionService:
    """Words players want added, kept as a sorted list in the store for review."""

    def __init__(self, store: DocumentStore, dictionary: DictionaryService,
                 path: str = 'dictionary/suggested-words.txt', max_retries: int = 3):
        self.store = store
        self.dictionary = dictionary
        self.path = path
        self.max_retries = max_retries

    def pending(self) -> List[str]:
        words, _ = self._read()
        return words

    def suggest(self, word: str) -> List[str]:
        """Add ``word`` to the pending list and return the new list."""
        word = word.strip().upper()
        if not WORD_FORMAT.match(word):
            raise IllegalMove('Invalid word format.')
        if self.dictionary.is_valid(word):
            raise AlreadyExists(f'Word "{word}" already exists.')

        conflicts = 0
        while True:
            words, sha = self._read()
            if word in words:
                raise AlreadyExists(f'Word "{word}" has already been suggested.')
            words = sorted(set(words) | {word})
            try:
                self.store.write(self.path, '\n'.join(words), sha, f'feat: Add "{word}" to dictionary')
            except Conflict:
                conflicts += 1
                if conflicts > self.max_retries:
                    raise
                logger.warning('Suggestion list changed while adding %s, retrying', word)
                continue
            logger.info('%s suggested for the dictionary', word)
            return words

    def _read(self):
        try:
            content, sha = self.store.read(self.path)
        except NotFound:
            return [], None
        return [w.strip().upper() for w in content.splitlines() if w.strip()], sha

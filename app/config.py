import os

class Config:
    # Remote store. Without a token the game runs on the in-memory store.
    GITHUB_TOKEN = os.environ.get('GITHUB_TOKEN')
    # owner/name, required together with the token
    GITHUB_REPO = os.environ.get('GITHUB_REPO')
    GITHUB_BRANCH = os.environ.get('GITHUB_BRANCH', 'games')
    GITHUB_API_URL = os.environ.get('GITHUB_API_URL', 'https://api.github.com')
    STORE_TIMEOUT_SEC = float(os.environ.get('STORE_TIMEOUT_SEC', '10'))
    # One word per line; falls back to the built-in list when missing
    WORDS_PATH = os.environ.get('WORDS_PATH', 'valid-words.txt')
    SUGGESTIONS_PATH = os.environ.get('SUGGESTIONS_PATH', 'dictionary/suggested-words.txt')
    # How often a mutation is re-run after losing a CAS race
    MAX_CONFLICT_RETRIES = int(os.environ.get('MAX_CONFLICT_RETRIES', '3'))
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*').split(',')

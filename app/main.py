from __future__ import annotations
import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .assistants import DefinitionProvider, DefinitionService, TitleProvider, TitleService
from .config import Config
from .dictionary import DictionaryService, SuggestionService, load_dictionary
from .errors import GameError, StoreError
from .managers.game import GameManager
from .routers import dictionary as dictionary_routes
from .routers import games as game_routes
from .store import DocumentStore, GitHubContentsStore, MemoryStore

logger = logging.getLogger(__name__)

def build_store(config=Config) -> DocumentStore:
    if config.GITHUB_TOKEN:
        if not config.GITHUB_REPO:
            raise RuntimeError('GITHUB_REPO must be set when GITHUB_TOKEN is.')
        return GitHubContentsStore(
            token=config.GITHUB_TOKEN,
            repo=config.GITHUB_REPO,
            branch=config.GITHUB_BRANCH,
            api_url=config.GITHUB_API_URL,
            timeout=config.STORE_TIMEOUT_SEC,
        )
    logger.warning('GITHUB_TOKEN is not set. Games are kept in memory and lost on restart.')
    return MemoryStore()

def create_app(config_class=Config,
               store: Optional[DocumentStore] = None,
               dictionary: Optional[DictionaryService] = None,
               definition_provider: Optional[DefinitionProvider] = None,
               title_provider: Optional[TitleProvider] = None) -> FastAPI:
    logging.basicConfig(
        level=config_class.LOG_LEVEL,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )
    app = FastAPI(title="Wordgrid Server", version="0.2.0")

    # CORS for REST
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config_class.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=['*'],
        allow_headers=['*'],
    )

    if store is None:
        store = build_store(config_class)
    if dictionary is None:
        dictionary = load_dictionary(config_class.WORDS_PATH)

    app.state.store = store
    app.state.dictionary = dictionary
    app.state.manager = GameManager(store, dictionary, max_retries=config_class.MAX_CONFLICT_RETRIES)
    app.state.definitions = DefinitionService(dictionary, store, definition_provider)
    app.state.titles = TitleService(title_provider)
    app.state.suggestions = SuggestionService(
        store, dictionary, config_class.SUGGESTIONS_PATH, config_class.MAX_CONFLICT_RETRIES)

    app.include_router(game_routes.router)
    app.include_router(dictionary_routes.router)

    @app.exception_handler(GameError)
    async def handle_game_error(request: Request, exc: GameError):
        if isinstance(exc, StoreError):
            logger.error('%s %s: %s', request.method, request.url.path, exc)
        else:
            logger.info('%s %s rejected (%s): %s', request.method, request.url.path, exc.code, exc)
        body = { 'error': exc.code, 'detail': str(exc) }
        if hasattr(exc, 'words'):
            body['words'] = exc.words
        return JSONResponse(status_code=exc.status_code, content=body)

    @app.get('/health')
    async def health():
        return { 'ok': True }

    return app

app = create_app()

# Export ASGI app for uvicorn
application = app

# For local running: uvicorn app.main:application --reload --host 0.0.0.0 --port 8000

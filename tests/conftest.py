import random

import pytest
from fastapi.testclient import TestClient

from app.dictionary import DictionaryService
from app.main import create_app
from app.managers.game import GameManager
from app.store import MemoryStore

from helpers import LocalConfig

WORDS = [
    'AA', 'AB', 'AT', 'TA', 'TO', 'ACT', 'BAT', 'CAT', 'CATS', 'TAB', 'TAR',
    'RAT', 'ART', 'TEA', 'EAT', 'SCAT', 'CART', 'CARTS',
]


@pytest.fixture()
def store():
    return MemoryStore()


@pytest.fixture()
def dictionary():
    return DictionaryService(WORDS)


@pytest.fixture()
def manager(store, dictionary):
    return GameManager(store, dictionary, max_retries=3, rng=random.Random(7))


@pytest.fixture()
def web_app(store, dictionary):
    return create_app(LocalConfig, store=store, dictionary=dictionary)


@pytest.fixture()
def client(web_app):
    with TestClient(web_app) as test_client:
        yield test_client

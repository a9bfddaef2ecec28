from fastapi.testclient import TestClient

from app.assistants import INVALID_WORD
from app.main import create_app
from app.store import GameRepository

from helpers import LocalConfig, entry, make_state, seed, word


def seeded(store):
    state = make_state({'ALICE': 'CATSEAR', 'BOB': 'DOGSEAT'})
    seed(store, state)
    return state


def move_body(player, indices, code, x=7, y=6):
    tiles = [
        dict(player.rack[i].model_dump(), x=x, y=y + n)
        for n, i in enumerate(indices)
    ]
    return {'playerId': player.id, 'code': code, 'tiles': tiles}


def test_health(client):
    assert client.get('/health').json() == {'ok': True}


def test_create_and_fetch(client):
    resp = client.post('/games')
    assert resp.status_code == 201
    game_id = resp.json()['gameId']

    resp = client.get(f'/games/{game_id.lower()}')
    assert resp.status_code == 200
    game = resp.json()
    assert game['gameId'] == game_id
    assert game['bagCount'] == 100
    assert game['currentPlayerId'] is None
    assert len(game['board']) == 15 and all(len(row) == 15 for row in game['board'])
    assert game['board'][7][7]['isCenter']


def test_unknown_game(client):
    resp = client.get('/games/NOPE00')
    assert resp.status_code == 404
    body = resp.json()
    assert body['error'] == 'not_found'
    assert 'NOPE00' in body['detail']


def test_join(client, store):
    seeded(store)
    resp = client.post('/games/GAME01/players', json={'name': 'CAROL', 'code': 'carol-code'})
    assert resp.status_code == 200
    body = resp.json()
    assert len(body['rack']) == 7
    assert not body['rejoined']
    assert [p['name'] for p in body['game']['players']] == ['ALICE', 'BOB', 'CAROL']


def test_rejoin_with_wrong_code(client, store):
    seeded(store)
    resp = client.post('/games/GAME01/players', json={'name': 'alice', 'code': 'nope'})
    assert resp.status_code == 403
    assert resp.json()['error'] == 'bad_credentials'


def test_play_a_word(client, store):
    state = seeded(store)
    resp = client.post('/games/GAME01/moves', json=move_body(state.players[0], [0, 1, 2], 'alice-code'))
    assert resp.status_code == 200
    body = resp.json()
    assert body['entry']['word'] == 'CAT'
    assert body['entry']['score'] == 10
    assert len(body['rack']) == 7
    assert body['game']['currentPlayerId'] == 'p2'
    assert body['game']['board'][7][7]['tile']['letter'] == 'A'
    assert body['game']['sha'] == GameRepository(store).read('GAME01')[1]


def test_invalid_word(client, store):
    state = seeded(store)
    resp = client.post('/games/GAME01/moves', json=move_body(state.players[0], [3, 4, 5], 'alice-code'))
    assert resp.status_code == 422
    body = resp.json()
    assert body['error'] == 'invalid_word'
    assert body['words'] == ['SEA']


def test_not_your_turn(client, store):
    state = seeded(store)
    resp = client.post('/games/GAME01/moves', json=move_body(state.players[1], [4, 5, 6], 'bob-code'))
    assert resp.status_code == 409
    assert resp.json()['error'] == 'turn_violation'


def test_move_needs_tiles(client, store):
    seeded(store)
    resp = client.post('/games/GAME01/moves', json={'playerId': 'p1', 'code': 'alice-code', 'tiles': []})
    assert resp.status_code == 422


def test_preview(client, store):
    state = seeded(store)
    body = move_body(state.players[0], [0, 1, 2], 'alice-code')
    resp = client.post('/games/GAME01/preview', json={'tiles': body['tiles']})
    assert resp.status_code == 200
    assert resp.json() == {
        'score': 10,
        'isBingo': False,
        'words': [{'word': 'CAT', 'axis': 'horizontal', 'score': 10}],
    }
    assert len(store.log) == 1


def test_pass_swap_and_resign(client, store):
    state = seeded(store)
    resp = client.post('/games/GAME01/pass', json={'playerId': 'p1', 'code': 'alice-code'})
    assert resp.json()['entry']['isPass']

    bob = state.players[1]
    resp = client.post('/games/GAME01/swap', json={'playerId': 'p2', 'code': 'bob-code', 'tileIds': [bob.rack[0].id]})
    assert resp.status_code == 200
    assert bob.rack[0].id not in {t['id'] for t in resp.json()['rack']}

    resp = client.post('/games/GAME01/resign', json={'playerId': 'p1', 'code': 'alice-code'})
    game = resp.json()['game']
    assert game['gamePhase'] == 'ended'
    assert game['endStatus'] == 'BOB won by resignation'


def test_validate_word(client):
    assert client.get('/dict/validate', params={'word': 'cat'}).json() == {'word': 'CAT', 'valid': True}
    assert client.get('/dict/validate', params={'word': 'xyzzy'}).json() == {'word': 'XYZZY', 'valid': False}


def test_define_word(store, dictionary):
    web_app = create_app(LocalConfig, store=store, dictionary=dictionary,
                         definition_provider=lambda w: 'A small domesticated feline.')
    with TestClient(web_app) as client:
        resp = client.get('/dict/define', params={'word': 'cat'})
        assert resp.json() == {'word': 'CAT', 'definition': 'A small domesticated feline.'}
        resp = client.get('/dict/define', params={'word': 'zzz'})
        assert resp.json()['definition'] == INVALID_WORD
    assert store.read('dictionary/CAT.txt')[0] == 'A small domesticated feline.'


def test_title_of_a_finished_game(client, store):
    state = make_state({'ALICE': 'SEARDOG', 'BOB': 'DOGSEAT'}, [entry(word('CAT', 7, 6))])
    state.gamePhase = 'ended'
    seed(store, state)

    resp = client.get('/games/GAME01/title')
    assert resp.json() == {'title': 'Cat'}
    assert GameRepository(store).read('GAME01')[0].crosswordTitle == 'Cat'


def test_title_of_a_running_game_is_not_saved(client, store):
    seed(store, make_state({'ALICE': 'SEARDOG'}, [entry(word('CARTS', 7, 5))]))
    assert client.get('/games/GAME01/title').json() == {'title': 'Carts'}
    assert GameRepository(store).read('GAME01')[0].crosswordTitle is None


def test_suggest_word(client, store):
    resp = client.post('/dict/suggest', json={'word': 'zebra'})
    assert resp.status_code == 201
    assert resp.json() == {'word': 'ZEBRA', 'pending': 1}
    assert store.read('dictionary/suggested-words.txt')[0] == 'ZEBRA'

    resp = client.post('/dict/suggest', json={'word': 'ZEBRA'})
    assert resp.status_code == 409
    assert resp.json()['error'] == 'already_exists'

    resp = client.post('/dict/suggest', json={'word': 'z3bra'})
    assert resp.status_code == 400
    assert resp.json()['detail'] == 'Invalid word format.'

# tests/test_miniatures_api.py

import pytest

from apps.board.models import Miniature

MINIATURES = '/api/miniatures'


@pytest.fixture
def miniature(api, stages):
    return api.post(MINIATURES, {'name': 'Space Marine', 'description': 'Intercessor'}).json()['data']


# =================== CRIAÇÃO ===================

def test_create_defaults_to_first_stage(api, stages):
    response = api.post(MINIATURES, {'name': '  Space Marine  ', 'description': ' Intercessor '})

    assert response.status_code == 201
    data = response.json()['data']
    assert data['id'].startswith('mini_')
    assert data['name'] == 'Space Marine'
    assert data['description'] == 'Intercessor'
    assert data['stageId'] == stages[0]['id']


def test_create_without_stages_initializes_defaults(api, user):
    user.stages.all().delete()

    data = api.post(MINIATURES, {'name': 'Space Marine'}).json()['data']

    assert user.stages.count() == 8
    assert data['stageId'] == user.stages.order_by('sort_order').first().id


def test_create_in_given_stage_with_extension_fields(api, stages):
    response = api.post(MINIATURES, {
        'name': 'Hive Tyrant',
        'stageId': stages[3]['id'],
        'estimatedHours': 12.5,
        'difficulty': 'expert',
        'notes': 'Magnetizar os braços',
    })

    assert response.status_code == 201
    data = response.json()['data']
    assert data['stageId'] == stages[3]['id']
    assert data['estimatedHours'] == 12.5
    assert data['difficulty'] == 'expert'
    assert data['notes'] == 'Magnetizar os braços'
    assert 'actualHours' not in data
    assert 'imageUrl' not in data


def test_create_in_other_users_stage_fails(api, other_api, stages):
    foreign_stage = other_api.get('/api/stages').json()['data'][0]['id']

    response = api.post(MINIATURES, {'name': 'Intruso', 'stageId': foreign_stage})

    assert response.status_code == 400
    assert response.json()['error'] == 'Invalid stage ID'
    assert Miniature.objects.count() == 0


@pytest.mark.parametrize('payload', [{}, {'name': ''}, {'name': '   '}, {'name': 42}])
def test_create_requires_name_string(api, stages, payload):
    response = api.post(MINIATURES, payload)

    assert response.status_code == 400
    assert response.json()['error'] == 'Name is required and must be a non-empty string'


@pytest.mark.parametrize('payload, message', [
    ({'name': 'Orc', 'difficulty': 'impossible'},
     'Difficulty must be one of: beginner, intermediate, advanced, expert'),
    ({'name': 'Orc', 'estimatedHours': -1}, 'estimatedHours must be zero or more'),
    ({'name': 'Orc', 'imageUrl': 'nao-e-url'}, 'imageUrl must be a valid URL'),
])
def test_create_validates_extension_fields(api, stages, payload, message):
    response = api.post(MINIATURES, payload)

    assert response.status_code == 400
    assert response.json()['error'] == message


def test_create_requires_authentication(anonymous_api):
    assert anonymous_api.post(MINIATURES, {'name': 'Orc'}).status_code == 401


# =================== LISTAGEM ===================

def test_list_only_own_miniatures(api, other_api, miniature):
    other_api.post(MINIATURES, {'name': 'Do rival'})

    data = api.get(MINIATURES).json()['data']

    assert [m['id'] for m in data] == [miniature['id']]


def test_list_filtered_by_stage(api, stages, miniature):
    api.post(MINIATURES, {'name': 'Ork', 'stageId': stages[2]['id']})

    in_queue = api.get(MINIATURES, {'stageId': stages[0]['id']}).json()['data']
    in_base_coat = api.get(MINIATURES, {'stageId': stages[2]['id']}).json()['data']

    assert [m['name'] for m in in_queue] == ['Space Marine']
    assert [m['name'] for m in in_base_coat] == ['Ork']


def test_stats_counts_per_stage(api, stages, miniature):
    api.post(MINIATURES, {'name': 'Ork 1', 'stageId': stages[2]['id']})
    api.post(MINIATURES, {'name': 'Ork 2', 'stageId': stages[2]['id']})

    response = api.get(f'{MINIATURES}/stats')

    assert response.status_code == 200
    assert response.json()['data'] == {stages[0]['id']: 1, stages[2]['id']: 2}


# =================== DETALHE ===================

def test_get_miniature(api, miniature):
    response = api.get(f"{MINIATURES}/{miniature['id']}")

    assert response.status_code == 200
    assert response.json()['data'] == miniature


def test_other_users_miniature_is_not_found(other_api, miniature):
    path = f"{MINIATURES}/{miniature['id']}"

    for response in (
        other_api.get(path),
        other_api.patch(path, {'name': 'Roubada'}),
        other_api.delete(path),
        other_api.post(f'{path}/move', {'stageId': 'stage_x'}),
    ):
        assert response.status_code == 404
        assert response.json()['error'] == 'Miniature not found'

    assert Miniature.objects.get(pk=miniature['id']).name == 'Space Marine'


def test_update_miniature(api, miniature):
    response = api.patch(f"{MINIATURES}/{miniature['id']}", {
        'name': 'Space Marine Sergeant',
        'actualHours': 3,
        'notes': '',
    })

    assert response.status_code == 200
    data = response.json()['data']
    assert data['name'] == 'Space Marine Sergeant'
    assert data['actualHours'] == 3.0
    assert data['description'] == 'Intercessor'


def test_update_to_other_users_stage_is_refused(api, other_api, miniature):
    foreign_stage = other_api.get('/api/stages').json()['data'][0]['id']

    response = api.patch(f"{MINIATURES}/{miniature['id']}", {'stageId': foreign_stage})

    assert response.status_code == 400
    assert Miniature.objects.get(pk=miniature['id']).stage_id == miniature['stageId']


def test_update_without_valid_fields(api, miniature):
    response = api.patch(f"{MINIATURES}/{miniature['id']}", {'userId': 'user_x'})

    assert response.status_code == 400
    assert response.json()['error'] == 'No valid updates provided'


def test_delete_miniature(api, miniature):
    path = f"{MINIATURES}/{miniature['id']}"

    assert api.delete(path).status_code == 200
    assert api.get(path).status_code == 404


# =================== MOVIMENTAÇÃO ===================

def test_move_to_stage(api, stages, miniature):
    response = api.post(f"{MINIATURES}/{miniature['id']}/move", {'stageId': stages[4]['id']})

    assert response.status_code == 200
    assert response.json()['data']['stageId'] == stages[4]['id']
    assert Miniature.objects.get(pk=miniature['id']).stage_id == stages[4]['id']


def test_move_to_foreign_stage_keeps_stage(api, other_api, miniature):
    foreign_stage = other_api.get('/api/stages').json()['data'][0]['id']

    response = api.post(f"{MINIATURES}/{miniature['id']}/move", {'stageId': foreign_stage})

    assert response.status_code == 400
    assert response.json()['error'] == 'Invalid stage ID'
    assert Miniature.objects.get(pk=miniature['id']).stage_id == miniature['stageId']


def test_move_requires_stage_id(api, miniature):
    response = api.post(f"{MINIATURES}/{miniature['id']}/move", {})

    assert response.status_code == 400
    assert response.json()['error'] == 'stageId is required'

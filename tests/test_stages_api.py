# tests/test_stages_api.py

from unittest import mock

from django.db import DatabaseError

from apps.board.models import Miniature, Stage

STAGES = '/api/stages'


def _ids(stages):
    return [stage['id'] for stage in stages]


# =================== LISTAGEM ===================

def test_list_returns_default_stages_in_order(api):
    response = api.get(STAGES)

    assert response.status_code == 200
    stages = response.json()['data']
    assert [s['name'] for s in stages][:2] == ['Queue', 'Prime']
    assert [s['sortOrder'] for s in stages] == [0, 10, 20, 30, 40, 50, 60, 70]
    assert all(s['isDefault'] for s in stages)
    assert all(s['id'].startswith('stage_') for s in stages)


def test_list_initializes_defaults_lazily(api, user):
    Stage.objects.filter(user=user).delete()

    stages = api.get(STAGES).json()['data']

    assert len(stages) == 8
    assert Stage.objects.filter(user=user).count() == 8


def test_list_requires_authentication(anonymous_api):
    response = anonymous_api.get(STAGES)

    assert response.status_code == 401
    assert response.json() == {'success': False, 'error': 'Authentication required'}


def test_list_storage_failure_is_generic(api):
    with mock.patch('apps.board.services.Stage.objects.filter', side_effect=DatabaseError('boom')):
        response = api.get(STAGES)

    assert response.status_code == 500
    assert response.json() == {'success': False, 'error': 'Failed to fetch stages'}


# =================== CRIAÇÃO ===================

def test_create_appends_after_last_stage(api, stages):
    response = api.post(STAGES, {'name': '  Varnish ', 'color': 'blue'})

    assert response.status_code == 201
    stage = response.json()['data']
    assert stage['name'] == 'Varnish'
    assert stage['color'] == 'blue'
    assert stage['sortOrder'] == 80
    assert stage['isDefault'] is False


def test_create_defaults_color_to_gray(api, stages):
    stage = api.post(STAGES, {'name': 'Varnish'}).json()['data']

    assert stage['color'] == 'gray'
    assert stage['description'] == ''


def test_create_after_stage_uses_midpoint(api, stages):
    queue, prime = stages[0], stages[1]

    stage = api.post(STAGES, {'name': 'Clean Up', 'insertAfterStageId': queue['id']}).json()['data']

    assert queue['sortOrder'] < stage['sortOrder'] < prime['sortOrder']
    assert stage['sortOrder'] == 5


def test_create_repeatedly_between_same_neighbors_keeps_order(api, stages):
    queue = stages[0]

    for number in range(6):
        response = api.post(STAGES, {'name': f'Step {number}', 'insertAfterStageId': queue['id']})
        assert response.status_code == 201

    current = api.get(STAGES).json()['data']
    orders = [s['sortOrder'] for s in current]
    assert orders == sorted(orders)
    assert len(set(orders)) == len(orders)
    # Cada inserção fica logo depois de Queue, empurrando a anterior
    assert [s['name'] for s in current[:7]] == [
        'Queue', 'Step 5', 'Step 4', 'Step 3', 'Step 2', 'Step 1', 'Step 0'
    ]
    assert current[7]['name'] == 'Prime'


def test_create_at_position_returns_all_stages(api, stages):
    response = api.post(STAGES, {'name': 'Magnetize', 'insertAtPosition': 1})

    assert response.status_code == 201
    body = response.json()
    new_id = body['data']['id']
    all_stages = body['allStages']
    assert _ids(all_stages)[:3] == [stages[0]['id'], new_id, stages[1]['id']]
    assert [s['sortOrder'] for s in all_stages] == [(i + 1) * 10 for i in range(9)]


def test_create_duplicate_name_is_case_insensitive(api, stages):
    response = api.post(STAGES, {'name': 'base coat'})

    assert response.status_code == 400
    assert response.json()['error'] == 'A stage with this name already exists'
    assert len(api.get(STAGES).json()['data']) == 8


def test_same_name_allowed_for_other_user(api, other_api, stages):
    assert other_api.post(STAGES, {'name': 'Varnish'}).status_code == 201
    assert api.post(STAGES, {'name': 'Varnish'}).status_code == 201


def test_create_validation_messages(api, stages):
    cases = [
        ({}, 'Stage name is required'),
        ({'name': '   '}, 'Stage name is required'),
        ({'name': 'A'}, 'Stage name must be at least 2 characters'),
        ({'name': 'x' * 51}, 'Stage name must be 50 characters or less'),
        ({'name': 'Varnish', 'color': 'teal'},
         'Color must be one of: gray, yellow, orange, purple, pink, indigo, emerald, green, blue, red'),
    ]
    for payload, message in cases:
        response = api.post(STAGES, payload)
        assert response.status_code == 400, payload
        assert response.json()['error'] == message


# =================== REORDENAÇÃO ===================

def test_reorder_rotation_is_reflected_on_fetch(api, stages):
    a, b, c = _ids(stages)[:3]

    response = api.put(STAGES, {'orderedStageIds': [c, a, b]})

    assert response.status_code == 200
    fetched = api.get(STAGES).json()['data']
    assert _ids(fetched)[:3] == [c, a, b]
    orders = [s['sortOrder'] for s in fetched]
    assert orders == sorted(orders)


def test_reorder_full_list(api, stages):
    reversed_ids = list(reversed(_ids(stages)))

    data = api.put(STAGES, {'orderedStageIds': reversed_ids}).json()['data']

    assert _ids(data) == reversed_ids
    assert [s['sortOrder'] for s in data] == [10, 20, 30, 40, 50, 60, 70, 80]


def test_reorder_partial_list_keeps_unlisted_after(api, stages):
    ids = _ids(stages)

    data = api.put(STAGES, {'orderedStageIds': [ids[5]]}).json()['data']

    assert _ids(data) == [ids[5]] + ids[:5] + ids[6:]


def test_reorder_rejects_unknown_and_foreign_ids(api, other_api, stages):
    foreign = other_api.get(STAGES).json()['data'][0]['id']

    response = api.put(STAGES, {'orderedStageIds': [stages[0]['id'], 'stage_nope', foreign]})

    assert response.status_code == 400
    assert response.json()['error'] == f'Invalid stage IDs: stage_nope, {foreign}'


def test_reorder_requires_array(api, stages):
    response = api.put(STAGES, {'orderedStageIds': 'stage_x'})

    assert response.status_code == 400
    assert response.json()['error'] == 'orderedStageIds must be an array'


# =================== DETALHE / ALTERAÇÃO ===================

def test_get_single_stage(api, stages):
    response = api.get(f"{STAGES}/{stages[2]['id']}")

    assert response.status_code == 200
    assert response.json()['data']['name'] == 'Base Coat'


def test_other_users_stage_is_not_found(api, other_api, stages):
    stage_id = stages[0]['id']

    for response in (
        other_api.get(f'{STAGES}/{stage_id}'),
        other_api.patch(f'{STAGES}/{stage_id}', {'name': 'Roubado'}),
        other_api.delete(f'{STAGES}/{stage_id}'),
    ):
        assert response.status_code == 404
        assert response.json()['error'] == 'Stage not found'


def test_update_stage(api, stages):
    response = api.patch(f"{STAGES}/{stages[0]['id']}", {
        'name': 'Backlog', 'color': 'red', 'description': '',
    })

    assert response.status_code == 200
    data = response.json()['data']
    assert (data['name'], data['color'], data['description']) == ('Backlog', 'red', '')
    assert data['isDefault'] is True


def test_update_rename_to_existing_name_fails(api, stages):
    response = api.patch(f"{STAGES}/{stages[0]['id']}", {'name': 'PRIME'})

    assert response.status_code == 400
    assert response.json()['error'] == 'A stage with this name already exists'


def test_update_rename_changing_only_case(api, stages):
    response = api.patch(f"{STAGES}/{stages[0]['id']}", {'name': 'QUEUE'})

    assert response.status_code == 200
    assert response.json()['data']['name'] == 'QUEUE'


def test_update_without_valid_fields(api, stages):
    response = api.patch(f"{STAGES}/{stages[0]['id']}", {'isDefault': False})

    assert response.status_code == 400
    assert response.json()['error'] == 'No valid updates provided'


def test_update_invalid_color(api, stages):
    response = api.patch(f"{STAGES}/{stages[0]['id']}", {'color': 'teal'})

    assert response.status_code == 400
    assert response.json()['error'].startswith('Color must be one of:')


# =================== REMOÇÃO ===================

def test_delete_custom_empty_stage(api, stages):
    stage = api.post(STAGES, {'name': 'Varnish'}).json()['data']

    response = api.delete(f"{STAGES}/{stage['id']}")

    assert response.status_code == 200
    assert not Stage.objects.filter(pk=stage['id']).exists()


def test_delete_default_stage_is_refused(api, stages):
    response = api.delete(f"{STAGES}/{stages[0]['id']}")

    assert response.status_code == 400
    assert response.json()['error'] == 'Cannot delete default stages. You can edit them instead.'


def test_delete_stage_with_miniatures_is_refused(api, user, stages):
    stage = api.post(STAGES, {'name': 'Varnish'}).json()['data']
    api.post('/api/miniatures', {'name': 'Knight', 'stageId': stage['id']})

    response = api.delete(f"{STAGES}/{stage['id']}")

    assert response.status_code == 400
    assert response.json()['error'] == (
        'Cannot delete stage with 1 miniatures. Move them to other stages first.'
    )
    assert Stage.objects.filter(pk=stage['id']).exists()
    assert Miniature.objects.filter(user=user).count() == 1

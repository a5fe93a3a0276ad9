# tests/test_client.py

from unittest import mock

import pytest
import requests

from apps.board.client import ApiError, TrackerClient


def _response(status=200, body=None, json_error=False):
    response = mock.Mock()
    response.status_code = status
    response.ok = 200 <= status < 300
    if json_error:
        response.json.side_effect = ValueError('not json')
    else:
        response.json.return_value = body
    return response


@pytest.fixture
def session():
    return mock.Mock(spec=requests.Session)


@pytest.fixture
def client(session):
    return TrackerClient('http://tracker.local/', session=session, timeout=3)


def _last_call(session):
    args, kwargs = session.request.call_args
    return args, kwargs


def test_login_stores_token_and_sends_it_afterwards(client, session):
    session.request.side_effect = [
        _response(body={'success': True, 'data': {'user': {'id': 'user_1'}, 'token': 'tok'}}),
        _response(body={'success': True, 'data': {'id': 'user_1'}}),
    ]

    user = client.login('pintor@example.com', 'segredo123')
    me = client.me()

    assert user == {'id': 'user_1'}
    assert me == {'id': 'user_1'}
    assert client.token == 'tok'
    args, kwargs = _last_call(session)
    assert args == ('GET', 'http://tracker.local/api/auth/me')
    assert kwargs['headers']['Authorization'] == 'Bearer tok'
    assert kwargs['timeout'] == 3


def test_error_envelope_becomes_api_error(client, session):
    session.request.return_value = _response(400, {'success': False, 'error': 'Invalid stage ID'})

    with pytest.raises(ApiError) as info:
        client.move_miniature('mini_1', 'stage_x')

    assert info.value.message == 'Invalid stage ID'
    assert info.value.status == 400
    args, kwargs = _last_call(session)
    assert args == ('POST', 'http://tracker.local/api/miniatures/mini_1/move')
    assert kwargs['json'] == {'stageId': 'stage_x'}


def test_unauthorized_is_flagged(client, session):
    session.request.return_value = _response(401, {'success': False, 'error': 'Authentication required'})

    with pytest.raises(ApiError) as info:
        client.list_stages()

    assert info.value.is_auth_error


def test_non_json_response(client, session):
    session.request.return_value = _response(502, json_error=True)

    with pytest.raises(ApiError) as info:
        client.list_miniatures()

    assert info.value.message == 'HTTP error! status: 502'
    assert info.value.status == 502


def test_network_failure(client, session):
    session.request.side_effect = requests.ConnectionError('recusado')

    with pytest.raises(ApiError) as info:
        client.list_stages()

    assert info.value.status is None


def test_success_false_with_200_is_error(client, session):
    session.request.return_value = _response(200, {'success': False, 'error': 'estranho'})

    with pytest.raises(ApiError):
        client.miniature_stats()


def test_payloads_use_camel_case_and_skip_none(client, session):
    session.request.return_value = _response(201, {'success': True, 'data': {'id': 'mini_1'}})

    client.create_miniature('Ork', stage_id='stage_1', estimated_hours=2.5, image_url=None)

    _, kwargs = _last_call(session)
    assert kwargs['json'] == {
        'name': 'Ork',
        'description': '',
        'stageId': 'stage_1',
        'estimatedHours': 2.5,
    }


def test_list_miniatures_filter(client, session):
    session.request.return_value = _response(body={'success': True, 'data': []})

    client.list_miniatures(stage_id='stage_1')

    _, kwargs = _last_call(session)
    assert kwargs['params'] == {'stageId': 'stage_1'}


def test_create_stage_returns_all_stages_when_positioned(client, session):
    session.request.return_value = _response(201, {
        'success': True,
        'data': {'id': 'stage_new'},
        'allStages': [{'id': 'stage_a'}, {'id': 'stage_new'}],
    })

    stage, all_stages = client.create_stage('Varnish', insert_at_position=1)

    assert stage == {'id': 'stage_new'}
    assert [s['id'] for s in all_stages] == ['stage_a', 'stage_new']
    _, kwargs = _last_call(session)
    assert kwargs['json'] == {'name': 'Varnish', 'description': '', 'color': 'gray', 'insertAtPosition': 1}


def test_reorder_stages(client, session):
    session.request.return_value = _response(body={'success': True, 'data': []})

    client.reorder_stages(('c', 'a', 'b'))

    args, kwargs = _last_call(session)
    assert args == ('PUT', 'http://tracker.local/api/stages')
    assert kwargs['json'] == {'orderedStageIds': ['c', 'a', 'b']}


def test_logout_discards_token_even_on_failure(client, session):
    client.token = 'tok'
    session.request.side_effect = requests.Timeout('lento')

    with pytest.raises(ApiError):
        client.logout()

    assert client.token is None

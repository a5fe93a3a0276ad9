# tests/conftest.py

import json

import pytest

from apps.core.auth_service import auth_service


class ApiClient:
    """Django test Client que fala JSON e envia o bearer token"""

    def __init__(self, client, token=None):
        self.client = client
        self.token = token

    def _headers(self):
        if self.token:
            return {'HTTP_AUTHORIZATION': f'Bearer {self.token}'}
        return {}

    def _send(self, method, path, data=None):
        body = json.dumps(data) if data is not None else ''
        return getattr(self.client, method)(
            path, data=body, content_type='application/json', **self._headers()
        )

    def get(self, path, params=None):
        return self.client.get(path, params or {}, **self._headers())

    def post(self, path, data=None):
        return self._send('post', path, data)

    def put(self, path, data=None):
        return self._send('put', path, data)

    def patch(self, path, data=None):
        return self._send('patch', path, data)

    def delete(self, path):
        return self._send('delete', path)


@pytest.fixture
def registered(db):
    """(usuario, token) de um pintor já registrado"""
    return auth_service.register('pintor@example.com', 'pintor', 'segredo123')


@pytest.fixture
def user(registered):
    return registered[0]


@pytest.fixture
def api(client, registered):
    return ApiClient(client, token=registered[1])


@pytest.fixture
def anonymous_api(client, db):
    return ApiClient(client)


@pytest.fixture
def other_registered(db):
    return auth_service.register('rival@example.com', 'rival', 'outrasenha1')


@pytest.fixture
def other_api(registered, other_registered):
    from django.test import Client
    return ApiClient(Client(), token=other_registered[1])


@pytest.fixture
def stages(api):
    """Estágios padrão do pintor, na ordem de exibição"""
    return api.get('/api/stages').json()['data']

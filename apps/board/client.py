# apps/board/client.py

"""
Cliente HTTP da API do MyMini Tracker

Usa requests.Session e guarda o bearer token após login/registro. Toda
resposta com {success: false}, status fora de 2xx ou falha de rede vira
ApiError; não há retentativas.

Uso:
    client = TrackerClient('http://localhost:8000')
    client.login('pintor@example.com', 'segredo123')
    stages = client.list_stages()
    client.move_miniature('mini_...', stages[1]['id'])
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

import requests

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Falha de uma chamada à API (status None = erro de rede)"""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status = status

    @property
    def is_auth_error(self) -> bool:
        return self.status == 401


def _camel(name: str) -> str:
    head, *rest = name.split('_')
    return head + ''.join(part.title() for part in rest)


def _payload(values: Dict[str, Any]) -> Dict[str, Any]:
    """snake_case -> camelCase, sem os valores None"""
    return {_camel(key): value for key, value in values.items() if value is not None}


class TrackerClient:

    def __init__(self, base_url: str, token: Optional[str] = None,
                 timeout: Optional[float] = None, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip('/')
        self.token = token
        self.timeout = timeout
        self.session = session or requests.Session()

    # =================== TRANSPORTE ===================

    def _request(self, method: str, path: str, json: Optional[Dict] = None,
                 params: Optional[Dict] = None) -> Dict[str, Any]:
        headers = {'Accept': 'application/json'}
        if self.token:
            headers['Authorization'] = f'Bearer {self.token}'

        url = f'{self.base_url}{path}'
        try:
            response = self.session.request(
                method, url, json=json, params=params, headers=headers, timeout=self.timeout
            )
        except requests.RequestException as exc:
            logger.warning("Falha de rede em %s %s: %s", method, url, exc)
            raise ApiError(str(exc)) from exc

        try:
            body = response.json()
        except ValueError:
            raise ApiError(f'HTTP error! status: {response.status_code}', response.status_code)

        if not response.ok or not isinstance(body, dict) or not body.get('success'):
            message = body.get('error') if isinstance(body, dict) else None
            raise ApiError(message or f'HTTP error! status: {response.status_code}', response.status_code)

        return body

    def _data(self, method: str, path: str, **kwargs) -> Any:
        return self._request(method, path, **kwargs).get('data')

    # =================== AUTENTICAÇÃO ===================

    def _authenticate(self, path: str, payload: Dict) -> Dict:
        data = self._data('POST', path, json=payload)
        self.token = data['token']
        return data['user']

    def register(self, email: str, username: str, password: str) -> Dict:
        return self._authenticate('/api/auth/register', {
            'email': email, 'username': username, 'password': password,
        })

    def login(self, email: str, password: str) -> Dict:
        return self._authenticate('/api/auth/login', {'email': email, 'password': password})

    def me(self) -> Dict:
        return self._data('GET', '/api/auth/me')

    def logout(self):
        """Servidor só confirma; o token é descartado aqui"""
        try:
            self._request('POST', '/api/auth/logout')
        finally:
            self.token = None

    def update_profile(self, email: Optional[str] = None, username: Optional[str] = None) -> Dict:
        return self._data('PATCH', '/api/auth/profile', json=_payload({'email': email, 'username': username}))

    # =================== MINIATURAS ===================

    def list_miniatures(self, stage_id: Optional[str] = None) -> List[Dict]:
        params = {'stageId': stage_id} if stage_id else None
        return self._data('GET', '/api/miniatures', params=params)

    def get_miniature(self, miniature_id: str) -> Dict:
        return self._data('GET', f'/api/miniatures/{miniature_id}')

    def create_miniature(self, name: str, description: str = '', stage_id: Optional[str] = None,
                         **extra) -> Dict:
        payload = _payload(dict(extra, name=name, description=description, stage_id=stage_id))
        return self._data('POST', '/api/miniatures', json=payload)

    def update_miniature(self, miniature_id: str, **changes) -> Dict:
        return self._data('PATCH', f'/api/miniatures/{miniature_id}', json=_payload(changes))

    def move_miniature(self, miniature_id: str, stage_id: str) -> Dict:
        return self._data('POST', f'/api/miniatures/{miniature_id}/move', json={'stageId': stage_id})

    def delete_miniature(self, miniature_id: str):
        self._request('DELETE', f'/api/miniatures/{miniature_id}')

    def miniature_stats(self) -> Dict[str, int]:
        return self._data('GET', '/api/miniatures/stats')

    # =================== ESTÁGIOS ===================

    def list_stages(self) -> List[Dict]:
        return self._data('GET', '/api/stages')

    def get_stage(self, stage_id: str) -> Dict:
        return self._data('GET', f'/api/stages/{stage_id}')

    def create_stage(self, name: str, description: str = '', color: str = 'gray',
                     insert_after_stage_id: Optional[str] = None,
                     insert_at_position: Optional[int] = None) -> Tuple[Dict, Optional[List[Dict]]]:
        """Retorna (estagio, todos_os_estagios); a lista só vem com insert_at_position"""
        body = self._request('POST', '/api/stages', json=_payload({
            'name': name,
            'description': description,
            'color': color,
            'insert_after_stage_id': insert_after_stage_id,
            'insert_at_position': insert_at_position,
        }))
        return body['data'], body.get('allStages')

    def update_stage(self, stage_id: str, **changes) -> Dict:
        return self._data('PATCH', f'/api/stages/{stage_id}', json=_payload(changes))

    def delete_stage(self, stage_id: str):
        self._request('DELETE', f'/api/stages/{stage_id}')

    def reorder_stages(self, ordered_stage_ids: Sequence[str]) -> List[Dict]:
        return self._data('PUT', '/api/stages', json={'orderedStageIds': list(ordered_stage_ids)})

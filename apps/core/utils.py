# apps/core/utils.py

import json
import secrets
import string
import time
from datetime import datetime, timezone as dt_timezone
from typing import Any, Dict, Optional

from django.core.exceptions import ValidationError
from django.http import JsonResponse

ID_ALPHABET = string.ascii_lowercase + string.digits


def generate_id(prefix: str) -> str:
    """
    Gera id único no formato prefix_timestamp_random

    O timestamp em milissegundos dá uma ordenação aproximada por criação,
    a parte aleatória (9 caracteres base36) garante unicidade.
    """
    timestamp = int(time.time() * 1000)
    random_part = ''.join(secrets.choice(ID_ALPHABET) for _ in range(9))
    return f"{prefix}_{timestamp}_{random_part}"


def generate_user_id() -> str:
    return generate_id('user')


def generate_stage_id() -> str:
    return generate_id('stage')


def generate_miniature_id() -> str:
    return generate_id('mini')


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    """Formata datetime como ISO 8601 em UTC (ex: 2024-05-01T12:00:00.000Z)"""
    if value is None:
        return None
    value = value.astimezone(dt_timezone.utc)
    return value.isoformat(timespec='milliseconds').replace('+00:00', 'Z')


# === ENVELOPE JSON ===

def api_success(data: Any = None, status: int = 200, **extra) -> JsonResponse:
    """Resposta de sucesso no envelope {success, data}"""
    payload = {'success': True, 'data': data}
    payload.update(extra)
    return JsonResponse(payload, status=status)


def api_error(message: str, status: int = 400) -> JsonResponse:
    """Resposta de erro no envelope {success, error}"""
    return JsonResponse({'success': False, 'error': message}, status=status)


def parse_json_body(request) -> Dict[str, Any]:
    """
    Lê o corpo JSON da requisição

    Corpo vazio vira dict vazio; qualquer coisa que não seja um objeto JSON
    é erro de validação.
    """
    if not request.body:
        return {}
    try:
        body = json.loads(request.body)
    except (ValueError, UnicodeDecodeError):
        raise ValidationError('Request body must be valid JSON')
    if not isinstance(body, dict):
        raise ValidationError('Request body must be a JSON object')
    return body


def error_message(exc: ValidationError) -> str:
    """Primeira mensagem legível de um ValidationError"""
    messages = exc.messages
    return messages[0] if messages else 'Invalid request'

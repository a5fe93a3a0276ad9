# apps/core/views.py

import logging

from django.core.cache import cache
from django.core.exceptions import ValidationError
from django.http import JsonResponse
from django.utils import timezone
from django.views.decorators.csrf import csrf_exempt

from apps import __version__
from .auth_service import auth_service, ProfileUpdate
from .exceptions import StorageError
from .models import User
from .permissions import identity_required, require_methods
from .utils import api_error, api_success, error_message, parse_json_body

logger = logging.getLogger(__name__)


def _auth_payload(user, token):
    return {'user': user.to_public_dict(), 'token': token}


@csrf_exempt
@require_methods('POST')
def register_view(request):
    """
    POST /api/auth/register

    Cria conta (email, username, password) e já devolve o token.
    """
    try:
        body = parse_json_body(request)
        email = body.get('email')
        username = body.get('username')
        password = body.get('password')

        if not email or not username or not password:
            return api_error('Email, username, and password are required')

        user, token = auth_service.register(email, username, password)

    except ValidationError as e:
        return api_error(error_message(e))
    except StorageError:
        return api_error('An error occurred during registration', status=500)

    return api_success(_auth_payload(user, token), status=201)


@csrf_exempt
@require_methods('POST')
def login_view(request):
    """POST /api/auth/login - autentica por email e senha"""
    try:
        body = parse_json_body(request)
        email = body.get('email')
        password = body.get('password')

        if not isinstance(email, str) or not isinstance(password, str) or not email or not password:
            return api_error('Email and password are required')

        result = auth_service.login(email, password)

    except ValidationError as e:
        return api_error(error_message(e))
    except StorageError:
        return api_error('An error occurred during login', status=500)

    if result is None:
        return api_error('Invalid email or password', status=401)

    user, token = result
    return api_success(_auth_payload(user, token))


@require_methods('GET')
@identity_required(message='Invalid or expired token')
def me_view(request):
    """GET /api/auth/me - usuário dono do token"""
    return api_success(request.identity.user.to_public_dict())


@csrf_exempt
@require_methods('POST')
def logout_view(request):
    """
    POST /api/auth/logout

    Token não é revogado no servidor; o cliente apenas o descarta.
    """
    return api_success({'message': 'Logged out successfully'})


@csrf_exempt
@require_methods('PATCH')
@identity_required
def profile_view(request):
    """PATCH /api/auth/profile - altera email e/ou username"""
    try:
        update = ProfileUpdate.from_payload(parse_json_body(request))
        user = auth_service.update_profile(request.identity.user, update)
    except ValidationError as e:
        return api_error(error_message(e))
    except StorageError as e:
        return api_error(e.public_message, status=500)

    return api_success(user.to_public_dict())


def health_check(request):
    """
    Health check para monitoramento
    """
    try:
        # Verificar conexão com banco
        User.objects.count()

        # Verificar cache
        cache.set('health_check', 'ok', 60)
        cache.get('health_check')

        status = {
            'status': 'healthy',
            'database': 'ok',
            'cache': 'ok',
            'timestamp': timezone.now().isoformat(),
            'version': __version__
        }

        return JsonResponse(status)

    except Exception:
        # Banco ou cache (Redis) indisponível
        logger.exception("Health check falhou")
        status = {
            'status': 'unhealthy',
            'timestamp': timezone.now().isoformat(),
            'version': __version__
        }

        return JsonResponse(status, status=503)

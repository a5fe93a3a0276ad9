# apps/core/middleware.py

import logging
from dataclasses import dataclass
from typing import Optional

from .exceptions import StorageError
from .models import User
from .utils import api_error

logger = logging.getLogger(__name__)

BEARER_PREFIX = 'Bearer '


@dataclass(frozen=True)
class Identity:
    """
    Identidade verificada da requisição

    Só existe quando o token é válido, não expirou e o usuário ainda
    existe no banco. Todas as views protegidas usam exatamente este tipo.
    """

    user: User

    @property
    def user_id(self) -> str:
        return self.user.pk

    @property
    def email(self) -> str:
        return self.user.email

    @property
    def username(self) -> str:
        return self.user.username


def resolve_identity(authorization: Optional[str]) -> Optional[Identity]:
    """Converte o header Authorization em Identity (ou None)"""
    from .auth_service import auth_service

    if not authorization or not authorization.startswith(BEARER_PREFIX):
        return None

    token = authorization[len(BEARER_PREFIX):].strip()
    if not token:
        return None

    user = auth_service.user_for_token(token)
    if user is None:
        return None
    return Identity(user=user)


class BearerTokenMiddleware:
    """
    Middleware que resolve o bearer token em request.identity

    Não bloqueia nada sozinho: quem exige autenticação é o decorator
    permissions.identity_required, que responde 401 uniforme.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        try:
            request.identity = resolve_identity(request.headers.get('Authorization'))
        except StorageError:
            # Banco fora do ar: sem identidade, rotas protegidas respondem 401
            request.identity = None
        return self.get_response(request)


class ApiExceptionMiddleware:
    """
    Garante o envelope JSON para erros inesperados nas rotas /api/

    StorageError vira "Failed to <operação>"; qualquer outra exceção vira
    uma mensagem genérica. Detalhes ficam só no log.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        return self.get_response(request)

    def process_exception(self, request, exception):
        if not request.path.startswith('/api/'):
            return None  # Deixar o Django lidar com o resto

        if isinstance(exception, StorageError):
            return api_error(exception.public_message, status=500)

        logger.exception("Erro inesperado em %s %s", request.method, request.path)
        return api_error('Internal server error', status=500)

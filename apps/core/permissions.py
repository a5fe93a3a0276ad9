# apps/core/permissions.py

from functools import wraps

from .utils import api_error


def identity_required(view_func=None, *, message='Authentication required'):
    """
    Decorator que exige identidade verificada (request.identity)

    Token ausente, malformado, expirado ou de usuário removido resultam
    todos no mesmo 401.

    Uso:
        @identity_required
        def minha_view(request): ...

        @identity_required(message='Invalid or expired token')
        def outra_view(request): ...
    """

    def decorator(func):
        @wraps(func)
        def wrapper(request, *args, **kwargs):
            if getattr(request, 'identity', None) is None:
                return api_error(message, status=401)
            return func(request, *args, **kwargs)

        return wrapper

    if view_func is not None:
        return decorator(view_func)
    return decorator


def require_methods(*methods):
    """
    Equivalente ao require_http_methods do Django, mas o 405 segue o
    envelope JSON da API

    Uso:
        @require_methods('GET', 'POST')
        def colecao(request): ...
    """

    def decorator(func):
        @wraps(func)
        def wrapper(request, *args, **kwargs):
            if request.method not in methods:
                response = api_error('Method not allowed', status=405)
                response['Allow'] = ', '.join(methods)
                return response
            return func(request, *args, **kwargs)

        return wrapper

    return decorator

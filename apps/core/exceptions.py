# apps/core/exceptions.py

import logging
from contextlib import contextmanager

from django.db import DatabaseError

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """
    Falha inesperada no banco de dados

    Carrega a operação e a tabela onde aconteceu para o log. A mensagem
    exposta ao cliente é sempre genérica ("Failed to <operação>").
    """

    def __init__(self, operation: str, table: str, original: Exception = None):
        super().__init__(f"Failed to {operation}")
        self.operation = operation
        self.table = table
        self.original = original

    @property
    def public_message(self) -> str:
        return f"Failed to {self.operation}"


@contextmanager
def storage_operation(operation: str, table: str):
    """
    Envolve erros do banco em StorageError com contexto

    Uso:
        with storage_operation('create stage', 'stage'):
            Stage.objects.create(...)
    """
    try:
        yield
    except DatabaseError as exc:
        logger.exception("Database error in %s on %s", operation, table)
        raise StorageError(operation, table, exc) from exc

# apps/board/apps.py

from django.apps import AppConfig


class BoardConfig(AppConfig):
    """Configuração da app Board"""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.board'
    verbose_name = 'Board - Estágios e Miniaturas'

    def ready(self):
        """Conecta os sinais da app (estágios padrão de novos usuários)"""
        from . import signals  # noqa: F401

# apps/__init__.py

"""
MyMini Tracker - Aplicações Django

Este pacote contém todas as aplicações do sistema:
- core: Usuário, autenticação por bearer token e utilitários da API
- board: Estágios, miniaturas, kanban e cliente HTTP
"""

__version__ = '0.1.0'
__author__ = 'Equipe MyMini'

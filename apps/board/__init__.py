# apps/board/__init__.py

"""
Board - Pipeline de pintura do MyMini Tracker

Funcionalidades:
- Estágios customizáveis por usuário (ordem esparsa por sort_order)
- Miniaturas e movimentação entre estágios
- API JSON de estágios e miniaturas
- Reconciliação otimista do kanban (estado local + rollback)
- Cliente HTTP da API
"""

# apps/core/__init__.py

"""
Core - Aplicação base do MyMini Tracker

Contém:
- Model de usuário customizado (ids no formato prefix_timestamp_random)
- Serviço de autenticação (hash de senha + token assinado)
- Middleware de identidade via bearer token
- Envelope JSON padrão e tratamento de erros de armazenamento
"""

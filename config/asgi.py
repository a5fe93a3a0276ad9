# config/asgi.py

import os
from django.core.asgi import get_asgi_application

# Configurar Django settings
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.development')

# Configuração ASGI (somente HTTP; a API não usa WebSocket)
application = get_asgi_application()

# config/urls.py

from django.contrib import admin
from django.urls import path, include
from django.conf import settings

from apps.core.views import health_check

urlpatterns = [
    # Admin
    path('admin/', admin.site.urls),

    # API JSON
    path('api/auth/', include('apps.core.urls')),
    path('api/', include('apps.board.urls')),

    # Monitoramento
    path('health/', health_check, name='health'),
]

# Debug Toolbar se disponível
if settings.DEBUG:
    try:
        import debug_toolbar

        urlpatterns = [
                          path('__debug__/', include(debug_toolbar.urls)),
                      ] + urlpatterns
    except ImportError:
        pass

# Customizar títulos do admin
admin.site.site_header = 'MyMini Tracker Admin'
admin.site.site_title = 'MyMini Tracker'
admin.site.index_title = 'Administração do Sistema'

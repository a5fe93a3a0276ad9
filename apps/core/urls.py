# apps/core/urls.py

from django.urls import path
from . import views

app_name = 'core'

urlpatterns = [
    # === AUTENTICAÇÃO ===
    path('register', views.register_view, name='register'),
    path('login', views.login_view, name='login'),
    path('me', views.me_view, name='me'),
    path('logout', views.logout_view, name='logout'),

    # === PERFIL DO USUÁRIO ===
    path('profile', views.profile_view, name='profile'),
]

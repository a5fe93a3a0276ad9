# apps/board/urls.py

from django.urls import path
from . import views

app_name = 'board'

urlpatterns = [
    # === ESTÁGIOS ===
    path('stages', views.stages_collection, name='stages'),
    path('stages/<str:stage_id>', views.stage_detail, name='stage_detail'),

    # === MINIATURAS ===
    path('miniatures', views.miniatures_collection, name='miniatures'),
    # stats antes de <id> para não ser capturado como id
    path('miniatures/stats', views.miniature_stats, name='miniature_stats'),
    path('miniatures/<str:miniature_id>', views.miniature_detail, name='miniature_detail'),
    path('miniatures/<str:miniature_id>/move', views.miniature_move, name='miniature_move'),
]

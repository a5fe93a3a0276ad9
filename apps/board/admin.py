# apps/board/admin.py

from django.contrib import admin
from django.db.models import Count
from django.utils.html import format_html

from .models import Miniature, Stage

# Cores do badge (mesmas famílias de cor usadas pelo front-end)
COLOR_HEX = {
    'gray': '#6B7280',
    'yellow': '#EAB308',
    'orange': '#F97316',
    'purple': '#A855F7',
    'pink': '#EC4899',
    'indigo': '#6366F1',
    'emerald': '#10B981',
    'green': '#22C55E',
    'blue': '#3B82F6',
    'red': '#EF4444',
}


class MiniatureInline(admin.TabularInline):
    model = Miniature
    extra = 0
    fields = ['name', 'difficulty', 'updated_at']
    readonly_fields = ['updated_at']
    show_change_link = True


@admin.register(Stage)
class StageAdmin(admin.ModelAdmin):
    """Admin para os estágios do pipeline"""

    list_display = [
        'name', 'user', 'sort_order', 'color_preview',
        'is_default', 'miniatures_count'
    ]
    list_filter = ['is_default', 'color']
    search_fields = ['name', 'user__username', 'user__email']
    ordering = ['user', 'sort_order']
    readonly_fields = ['id', 'created_at', 'updated_at']

    inlines = [MiniatureInline]

    def get_queryset(self, request):
        return super().get_queryset(request).annotate(_miniatures_count=Count('miniatures'))

    def miniatures_count(self, obj):
        return obj._miniatures_count

    miniatures_count.short_description = 'Miniaturas'
    miniatures_count.admin_order_field = '_miniatures_count'

    def color_preview(self, obj):
        """Preview da cor do estágio"""
        return format_html(
            '<span style="background-color: {}; color: white; '
            'padding: 3px 8px; border-radius: 4px; font-size: 11px;">{}</span>',
            COLOR_HEX.get(obj.color, '#6B7280'), obj.color
        )

    color_preview.short_description = 'Cor'


@admin.register(Miniature)
class MiniatureAdmin(admin.ModelAdmin):
    """Admin para miniaturas"""

    list_display = ['name', 'user', 'stage', 'difficulty', 'estimated_hours', 'actual_hours', 'updated_at']
    list_filter = ['difficulty', 'stage__name']
    search_fields = ['name', 'description', 'notes', 'user__username']
    readonly_fields = ['id', 'created_at', 'updated_at']
    list_select_related = ['user', 'stage']

    fieldsets = (
        ('Informações Básicas', {
            'fields': ('id', 'user', 'name', 'description', 'stage')
        }),
        ('Acompanhamento', {
            'fields': ('difficulty', 'estimated_hours', 'actual_hours', 'image_url', 'notes')
        }),
        ('Datas', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        })
    )

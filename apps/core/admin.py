# apps/core/admin.py

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.db.models import Count

from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Admin customizado para o modelo User"""

    list_display = [
        'username', 'email', 'stages_count', 'miniatures_count',
        'is_active', 'created_at', 'last_login'
    ]
    list_filter = ['is_staff', 'is_active', 'created_at']
    search_fields = ['username', 'email']
    ordering = ['-created_at']
    readonly_fields = ['id', 'created_at', 'updated_at', 'last_login']

    fieldsets = (
        (None, {'fields': ('id', 'username', 'email', 'password')}),
        ('Permissões', {'fields': ('is_active', 'is_staff', 'is_superuser')}),
        ('Datas', {'fields': ('last_login', 'created_at', 'updated_at')}),
    )

    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('username', 'email', 'password1', 'password2'),
        }),
    )

    def get_queryset(self, request):
        return super().get_queryset(request).annotate(
            _stages_count=Count('stages', distinct=True),
            _miniatures_count=Count('miniatures', distinct=True),
        )

    def stages_count(self, obj):
        return obj._stages_count

    stages_count.short_description = 'Estágios'
    stages_count.admin_order_field = '_stages_count'

    def miniatures_count(self, obj):
        return obj._miniatures_count

    miniatures_count.short_description = 'Miniaturas'
    miniatures_count.admin_order_field = '_miniatures_count'

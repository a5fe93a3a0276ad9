# apps/board/models.py

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models

from apps.core.utils import format_timestamp, generate_miniature_id, generate_stage_id

STAGE_COLORS = (
    'gray', 'yellow', 'orange', 'purple', 'pink',
    'indigo', 'emerald', 'green', 'blue', 'red',
)

# Estágios com que todo usuário novo começa
DEFAULT_STAGE_TEMPLATES = [
    {
        'name': 'Queue',
        'description': 'Miniatures waiting to be started',
        'color': 'gray',
        'sort_order': 0,
    },
    {
        'name': 'Prime',
        'description': 'Ready for priming or currently being primed',
        'color': 'yellow',
        'sort_order': 10,
    },
    {
        'name': 'Base Coat',
        'description': 'Applying main colors to large areas',
        'color': 'orange',
        'sort_order': 20,
    },
    {
        'name': 'Wash',
        'description': 'Adding shadows and depth with washes',
        'color': 'purple',
        'sort_order': 30,
    },
    {
        'name': 'Highlight',
        'description': 'Adding highlights and edge details',
        'color': 'pink',
        'sort_order': 40,
    },
    {
        'name': 'Details',
        'description': 'Final details, decals, and finishing touches',
        'color': 'indigo',
        'sort_order': 50,
    },
    {
        'name': 'Basing',
        'description': 'Adding terrain, texture, and environmental details to the base',
        'color': 'emerald',
        'sort_order': 60,
    },
    {
        'name': 'Finished',
        'description': 'Completed miniatures ready for gaming or display',
        'color': 'green',
        'sort_order': 70,
    },
]


class Stage(models.Model):
    """
    Estágio do pipeline de pintura (coluna do kanban)

    A ordem de exibição é dada por sort_order, esparso em passos de 10 para
    permitir inserções entre vizinhos sem renumerar tudo. Estágios padrão
    (is_default) podem ser editados mas nunca removidos.
    """

    COLOR_CHOICES = [(color, color.title()) for color in STAGE_COLORS]

    id = models.CharField(
        primary_key=True,
        max_length=40,
        default=generate_stage_id,
        editable=False,
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='stages'
    )
    name = models.CharField(max_length=50)
    description = models.TextField(blank=True, default='')
    color = models.CharField(max_length=20, choices=COLOR_CHOICES, default='gray')
    sort_order = models.IntegerField(default=0)
    is_default = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'stage'
        ordering = ['sort_order', 'created_at']
        indexes = [
            models.Index(fields=['user', 'sort_order'], name='stage_user_sort_idx'),
        ]

    def __str__(self):
        return f"{self.name} ({self.sort_order})"

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'userId': self.user_id,
            'name': self.name,
            'description': self.description,
            'color': self.color,
            'sortOrder': self.sort_order,
            'isDefault': self.is_default,
            'createdAt': format_timestamp(self.created_at),
            'updatedAt': format_timestamp(self.updated_at),
        }


class Miniature(models.Model):
    """Miniatura acompanhada pelo usuário; sempre está em exatamente um estágio"""

    DIFFICULTY_CHOICES = [
        ('beginner', 'Beginner'),
        ('intermediate', 'Intermediate'),
        ('advanced', 'Advanced'),
        ('expert', 'Expert'),
    ]

    id = models.CharField(
        primary_key=True,
        max_length=40,
        default=generate_miniature_id,
        editable=False,
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='miniatures'
    )
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True, default='')
    stage = models.ForeignKey(
        Stage,
        on_delete=models.RESTRICT,  # estágio com miniaturas não pode sumir
        related_name='miniatures'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    # === CAMPOS DE EXTENSÃO ===
    image_url = models.URLField(max_length=500, blank=True, default='')
    estimated_hours = models.DecimalField(
        max_digits=6,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(0)]
    )
    actual_hours = models.DecimalField(
        max_digits=6,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(0)]
    )
    difficulty = models.CharField(max_length=20, choices=DIFFICULTY_CHOICES, blank=True, default='')
    notes = models.TextField(blank=True, default='')

    class Meta:
        db_table = 'miniature'
        ordering = ['created_at']
        indexes = [
            models.Index(fields=['user', 'stage'], name='miniature_user_stage_idx'),
        ]

    def __str__(self):
        return self.name

    def to_dict(self) -> dict:
        data = {
            'id': self.id,
            'userId': self.user_id,
            'name': self.name,
            'description': self.description,
            'stageId': self.stage_id,
            'createdAt': format_timestamp(self.created_at),
            'updatedAt': format_timestamp(self.updated_at),
        }

        # Campos opcionais só aparecem quando preenchidos
        if self.image_url:
            data['imageUrl'] = self.image_url
        if self.estimated_hours is not None:
            data['estimatedHours'] = float(self.estimated_hours)
        if self.actual_hours is not None:
            data['actualHours'] = float(self.actual_hours)
        if self.difficulty:
            data['difficulty'] = self.difficulty
        if self.notes:
            data['notes'] = self.notes
        return data

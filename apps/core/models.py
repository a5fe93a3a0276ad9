# apps/core/models.py

from django.contrib.auth.models import AbstractUser
from django.core.validators import MinLengthValidator, RegexValidator
from django.db import models

from .utils import generate_user_id, format_timestamp

username_validator = RegexValidator(
    regex=r'^[a-zA-Z0-9_-]+$',
    message='Username can only contain letters, numbers, underscores, and hyphens',
)


class User(AbstractUser):
    """
    Usuário do tracker

    Email e username são únicos e sempre gravados em minúsculas (ver
    signals.normalizar_credenciais). Cada usuário é dono dos seus estágios
    e miniaturas; nada é compartilhado entre usuários.
    """

    id = models.CharField(
        primary_key=True,
        max_length=40,
        default=generate_user_id,
        editable=False,
    )
    username = models.CharField(
        max_length=30,
        unique=True,
        validators=[MinLengthValidator(3), username_validator],
        error_messages={'unique': 'This username is already taken'},
    )
    email = models.EmailField(
        unique=True,
        error_messages={'unique': 'An account with this email already exists'},
    )

    # === METADADOS ===
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    REQUIRED_FIELDS = ['email']

    class Meta:
        db_table = 'app_user'
        ordering = ['-created_at']

    @property
    def display_name(self) -> str:
        return self.username

    def to_public_dict(self) -> dict:
        """Dados públicos do usuário (nunca inclui o hash da senha)"""
        return {
            'id': self.id,
            'email': self.email,
            'username': self.username,
            'displayName': self.display_name,
            'createdAt': format_timestamp(self.created_at),
        }

    def __str__(self):
        return f"{self.username} <{self.email}>"

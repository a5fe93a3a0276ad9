# apps/core/auth_service.py

"""
Serviço de Autenticação - Encapsula toda lógica de auth do sistema

Senhas usam o hasher salgado e adaptativo do Django (PBKDF2). O login e o
registro emitem um bearer token assinado com django.core.signing, contendo
userId/email/username e o instante de emissão; a validade é conferida na
leitura (TRACKER_TOKEN_MAX_AGE). Não existe lista de revogação: logout é
descartar o token no cliente.
"""

import logging
import re
from dataclasses import dataclass, fields
from typing import Dict, Optional, Tuple

from django.conf import settings
from django.core import signing
from django.core.exceptions import ValidationError
from django.db import DatabaseError, IntegrityError, transaction
from django.utils import timezone

from .exceptions import storage_operation
from .models import User

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')
USERNAME_RE = re.compile(r'^[a-zA-Z0-9_-]+$')


@dataclass(frozen=True)
class ProfileUpdate:
    """Alteração parcial de perfil; None = campo não enviado"""

    email: Optional[str] = None
    username: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Dict) -> 'ProfileUpdate':
        values = {}
        for field in fields(cls):
            value = payload.get(field.name)
            if value is None:
                continue
            if not isinstance(value, str):
                raise ValidationError(f"{field.name} must be a string")
            values[field.name] = value.strip()
        return cls(**values)

    def changes(self) -> Dict[str, str]:
        return {
            field.name: getattr(self, field.name)
            for field in fields(self)
            if getattr(self, field.name) is not None
        }


class AuthenticationService:
    """
    Serviço encapsulado para gerenciar autenticação

    Erros de validação sobem como ValidationError (viram 400 na view);
    erros de banco sobem como StorageError (viram 500 genérico).
    """

    def __init__(self):
        # Atributos privados - encapsulados
        self._min_password_length = 8
        self._min_username_length = 3
        self._max_username_length = 30

    # =================== REGISTRO E LOGIN ===================

    def register(self, email: str, username: str, password: str) -> Tuple[User, str]:
        """
        Cria nova conta e emite token

        Nada é gravado se qualquer validação falhar. Os estágios padrão são
        criados pelo sinal post_save do usuário, dentro da mesma transação.
        """
        email = self._validar_email(email)
        username = self._validar_username(username)
        self._validar_senha(password)

        with storage_operation('create user', User._meta.db_table):
            if User.objects.filter(email=email).exists():
                raise ValidationError('An account with this email already exists')
            if User.objects.filter(username=username).exists():
                raise ValidationError('This username is already taken')

            try:
                with transaction.atomic():
                    user = User.objects.create_user(
                        username=username,
                        email=email,
                        password=password,  # Django faz o hash automaticamente
                    )
            except IntegrityError:
                # Outra requisição registrou o mesmo email/username no meio tempo
                raise ValidationError('An account with this email or username already exists')

        logger.info("Novo usuário registrado: %s", user.username)
        return user, self.issue_token(user)

    def login(self, email: str, password: str) -> Optional[Tuple[User, str]]:
        """
        Autentica por email e senha

        Returns:
            (usuario, token) ou None se as credenciais forem inválidas
        """
        email = (email or '').strip().lower()

        with storage_operation('authenticate user', User._meta.db_table):
            user = User.objects.filter(email=email, is_active=True).first()

        if user is None or not user.check_password(password):
            logger.info("Tentativa de login falhada para: %s", email)
            return None

        self._atualizar_ultimo_acesso(user)
        return user, self.issue_token(user)

    def update_profile(self, user: User, update: ProfileUpdate) -> User:
        """Aplica alteração parcial de email/username com as mesmas regras do registro"""
        changes = update.changes()
        if not changes:
            raise ValidationError('No valid updates provided')

        if 'email' in changes:
            changes['email'] = self._validar_email(changes['email'])
        if 'username' in changes:
            changes['username'] = self._validar_username(changes['username'])

        with storage_operation('update user profile', User._meta.db_table):
            others = User.objects.exclude(pk=user.pk)
            if 'email' in changes and others.filter(email=changes['email']).exists():
                raise ValidationError('An account with this email already exists')
            if 'username' in changes and others.filter(username=changes['username']).exists():
                raise ValidationError('This username is already taken')

            for name, value in changes.items():
                setattr(user, name, value)
            user.save(update_fields=list(changes) + ['updated_at'])

        return user

    # =================== TOKENS ===================

    def issue_token(self, user: User) -> str:
        """Emite bearer token assinado com os dados de identidade do usuário"""
        payload = {
            'userId': user.id,
            'email': user.email,
            'username': user.username,
        }
        return signing.dumps(payload, salt=self._token_salt)

    def decode_token(self, token: str) -> Optional[Dict]:
        """Valida assinatura e validade do token; None se inválido ou expirado"""
        try:
            payload = signing.loads(token, salt=self._token_salt, max_age=self._token_max_age)
        except signing.SignatureExpired:
            logger.debug("Token expirado")
            return None
        except signing.BadSignature:
            logger.debug("Token com assinatura inválida")
            return None

        if not isinstance(payload, dict) or not payload.get('userId'):
            return None
        return payload

    def user_for_token(self, token: str) -> Optional[User]:
        """Valida o token e busca o usuário atual no banco"""
        payload = self.decode_token(token)
        if payload is None:
            return None

        with storage_operation('get user by ID', User._meta.db_table):
            return User.objects.filter(pk=payload['userId'], is_active=True).first()

    @property
    def _token_salt(self) -> str:
        return settings.TRACKER_TOKEN_SALT

    @property
    def _token_max_age(self) -> int:
        return settings.TRACKER_TOKEN_MAX_AGE

    # =================== MÉTODOS PRIVADOS (ENCAPSULADOS) ===================

    def _validar_email(self, email) -> str:
        if not isinstance(email, str) or not EMAIL_RE.match(email.strip()):
            raise ValidationError('Please enter a valid email address')
        return email.strip().lower()

    def _validar_username(self, username) -> str:
        if not isinstance(username, str) or len(username.strip()) < self._min_username_length:
            raise ValidationError('Username must be at least 3 characters long')
        username = username.strip()
        if len(username) > self._max_username_length:
            raise ValidationError('Username must be 30 characters or less')
        if not USERNAME_RE.match(username):
            raise ValidationError('Username can only contain letters, numbers, underscores, and hyphens')
        return username.lower()

    def _validar_senha(self, password):
        if not isinstance(password, str) or len(password) < self._min_password_length:
            raise ValidationError('Password must be at least 8 characters long')

    def _atualizar_ultimo_acesso(self, user: User):
        """Atualiza timestamp do último acesso (falha aqui não impede o login)"""
        user.last_login = timezone.now()
        try:
            user.save(update_fields=['last_login'])
        except DatabaseError:
            logger.warning("Falha ao atualizar último acesso de %s", user.pk, exc_info=True)


# Instância global do serviço (Singleton pattern)
auth_service = AuthenticationService()

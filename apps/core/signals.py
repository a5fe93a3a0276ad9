# apps/core/signals.py

from django.db.models.signals import pre_save
from django.dispatch import receiver

from .models import User


@receiver(pre_save, sender=User)
def normalizar_credenciais(sender, instance, **kwargs):
    """
    Email e username são sempre gravados em minúsculas

    Vale para qualquer caminho de criação (API, admin, createsuperuser).
    """
    if instance.email:
        instance.email = instance.email.strip().lower()
    if instance.username:
        instance.username = instance.username.strip().lower()

# apps/board/signals.py

from django.conf import settings
from django.db.models.signals import post_save
from django.dispatch import receiver


@receiver(post_save, sender=settings.AUTH_USER_MODEL)
def criar_estagios_padrao(sender, instance, created, raw=False, **kwargs):
    """
    Cria os estágios padrão quando um novo usuário é criado

    Ignorado ao carregar fixtures (raw) e quando o usuário já tem estágios.
    """
    from .services import stage_service

    if created and not raw and not instance.stages.exists():
        stage_service.initialize_default_stages(instance)

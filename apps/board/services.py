# apps/board/services.py

"""
Serviços de estágios e miniaturas

Toda regra de negócio do board fica aqui; as views só traduzem HTTP.
Mesmo padrão do serviço de autenticação:
- ValidationError para entrada inválida (400 na view)
- StorageError para falha de banco (500 genérico na view)
- objetos de outro usuário simplesmente "não existem" (None)
"""

import logging
from typing import Dict, List, Optional, Tuple

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Count
from django.db.models.deletion import RestrictedError

from apps.core.exceptions import storage_operation
from .models import DEFAULT_STAGE_TEMPLATES, Miniature, Stage
from .ordering import allocate_sort_order, sequential_sort_orders
from .schemas import MiniatureDraft, MiniatureUpdate, StageDraft, StageUpdate

logger = logging.getLogger(__name__)

STAGE_TABLE = Stage._meta.db_table
MINIATURE_TABLE = Miniature._meta.db_table


class StageService:
    """Estágios do pipeline de pintura de cada usuário"""

    # =================== CONSULTAS ===================

    def list_for_user(self, user) -> List[Stage]:
        with storage_operation('get stages for user', STAGE_TABLE):
            return list(Stage.objects.filter(user=user).order_by('sort_order', 'created_at'))

    def list_or_initialize(self, user) -> List[Stage]:
        """Lista os estágios; usuário sem nenhum recebe os padrões"""
        stages = self.list_for_user(user)
        if not stages:
            logger.info("Usuário %s sem estágios, criando padrões", user.username)
            stages = self.initialize_default_stages(user)
        return stages

    def get_for_user(self, user, stage_id: str) -> Optional[Stage]:
        with storage_operation('get stage by ID', STAGE_TABLE):
            return Stage.objects.filter(pk=stage_id, user=user).first()

    def first_stage(self, user) -> Stage:
        """Estágio onde miniaturas novas começam (o de menor sort_order)"""
        return self.list_or_initialize(user)[0]

    # =================== CRIAÇÃO ===================

    def initialize_default_stages(self, user) -> List[Stage]:
        stages = [
            Stage(user=user, is_default=True, **template)
            for template in DEFAULT_STAGE_TEMPLATES
        ]
        with storage_operation('initialize default stages', STAGE_TABLE):
            Stage.objects.bulk_create(stages)
        return sorted(stages, key=lambda stage: stage.sort_order)

    def create(self, user, draft: StageDraft) -> Tuple[Stage, Optional[List[Stage]]]:
        """
        Cria estágio customizado

        Returns:
            (estagio, todos_os_estagios). A lista completa só é devolvida
            quando insert_at_position foi usado, pois aí todos os estágios
            são renumerados.
        """
        existing = self.list_for_user(user)
        self._validar_nome_unico(existing, draft.name)

        allocation = allocate_sort_order(existing, draft.insert_after_stage_id)

        with storage_operation('create stage', STAGE_TABLE):
            with transaction.atomic():
                if allocation.requires_rebalance:
                    self._apply_sort_orders(existing, allocation.renumbered)

                stage = Stage.objects.create(
                    user=user,
                    name=draft.name,
                    description=draft.description,
                    color=draft.color,
                    sort_order=allocation.sort_order,
                    is_default=False,
                )

        logger.info("Estágio '%s' criado para %s (sort_order=%s)", stage.name, user.username, stage.sort_order)

        if draft.insert_at_position is None:
            return stage, None

        # Posição explícita: reconstrói a ordem completa com o novo estágio no lugar pedido
        ordered_ids = [s.id for s in existing]
        ordered_ids.insert(draft.insert_at_position, stage.id)
        return stage, self.reorder(user, ordered_ids)

    # =================== ALTERAÇÃO ===================

    def update(self, stage: Stage, update: StageUpdate) -> Stage:
        changes = update.changes()

        if 'name' in changes and changes['name'].lower() != stage.name.lower():
            others = [s for s in self.list_for_user(stage.user_id) if s.pk != stage.pk]
            self._validar_nome_unico(others, changes['name'])

        for name, value in changes.items():
            setattr(stage, name, value)

        with storage_operation('update stage', STAGE_TABLE):
            stage.save(update_fields=list(changes) + ['updated_at'])
        return stage

    def reorder(self, user, ordered_ids: List[str]) -> List[Stage]:
        """
        Reordena estágios pela lista recebida

        Ids listados recebem 10, 20, 30...; estágios não listados vão para
        o final mantendo a ordem relativa atual.
        """
        existing = self.list_for_user(user)
        known = {stage.id for stage in existing}

        invalid = [stage_id for stage_id in ordered_ids if stage_id not in known]
        if invalid:
            raise ValidationError(f"Invalid stage IDs: {', '.join(invalid)}")

        listed = set(ordered_ids)
        full_order = list(ordered_ids) + [s.id for s in existing if s.id not in listed]

        with storage_operation('reorder stages', STAGE_TABLE):
            with transaction.atomic():
                self._apply_sort_orders(existing, sequential_sort_orders(full_order))

        return self.list_for_user(user)

    # =================== REMOÇÃO ===================

    def delete(self, stage: Stage):
        """Remove estágio customizado e vazio"""
        with storage_operation('delete stage', STAGE_TABLE):
            miniature_count = stage.miniatures.count()

        if miniature_count:
            raise ValidationError(
                f"Cannot delete stage with {miniature_count} miniatures. "
                "Move them to other stages first."
            )
        if stage.is_default:
            raise ValidationError('Cannot delete default stages. You can edit them instead.')

        stage_id = stage.pk
        with storage_operation('delete stage', STAGE_TABLE):
            try:
                stage.delete()
            except RestrictedError:
                # Miniatura movida para o estágio entre a contagem e o delete
                raise ValidationError('Cannot delete stage with miniatures. Move them to other stages first.')

        logger.info("Estágio %s removido", stage_id)

    # =================== MÉTODOS PRIVADOS ===================

    def _validar_nome_unico(self, stages, name: str):
        lowered = name.strip().lower()
        if any(stage.name.lower() == lowered for stage in stages):
            raise ValidationError('A stage with this name already exists')

    def _apply_sort_orders(self, stages, sort_orders: Dict[str, int]):
        changed = []
        for stage in stages:
            new_value = sort_orders.get(stage.id)
            if new_value is not None and new_value != stage.sort_order:
                stage.sort_order = new_value
                changed.append(stage)
        if changed:
            Stage.objects.bulk_update(changed, ['sort_order'])


class MiniatureService:
    """Miniaturas do usuário e sua posição no pipeline"""

    def list_for_user(self, user, stage_id: Optional[str] = None) -> List[Miniature]:
        with storage_operation('get miniatures for user', MINIATURE_TABLE):
            queryset = Miniature.objects.filter(user=user)
            if stage_id:
                queryset = queryset.filter(stage_id=stage_id)
            return list(queryset.order_by('created_at'))

    def get_for_user(self, user, miniature_id: str) -> Optional[Miniature]:
        with storage_operation('get miniature by ID', MINIATURE_TABLE):
            return Miniature.objects.filter(pk=miniature_id, user=user).first()

    def create(self, user, draft: MiniatureDraft) -> Miniature:
        if draft.stage_id:
            stage = self._stage_do_usuario(user, draft.stage_id)
        else:
            stage = stage_service.first_stage(user)

        with storage_operation('create miniature', MINIATURE_TABLE):
            miniature = Miniature.objects.create(user=user, stage=stage, **draft.model_fields())

        logger.info("Miniatura '%s' criada em %s", miniature.name, stage.name)
        return miniature

    def update(self, miniature: Miniature, update: MiniatureUpdate) -> Miniature:
        changes = update.changes()

        if 'stage_id' in changes:
            # Valida posse do estágio antes de gravar
            self._stage_do_usuario(miniature.user_id, changes['stage_id'])

        for name, value in changes.items():
            setattr(miniature, name, value)

        with storage_operation('update miniature', MINIATURE_TABLE):
            miniature.save(update_fields=list(changes) + ['updated_at'])
        return miniature

    def move_to_stage(self, miniature: Miniature, stage_id: str) -> Miniature:
        stage = self._stage_do_usuario(miniature.user_id, stage_id)

        previous_stage_id = miniature.stage_id
        miniature.stage = stage
        with storage_operation('move miniature', MINIATURE_TABLE):
            miniature.save(update_fields=['stage', 'updated_at'])

        logger.debug("Miniatura %s movida de %s para %s", miniature.pk, previous_stage_id, stage.pk)
        return miniature

    def delete(self, miniature: Miniature):
        with storage_operation('delete miniature', MINIATURE_TABLE):
            miniature.delete()

    def stage_statistics(self, user) -> Dict[str, int]:
        """Quantidade de miniaturas por estágio (só estágios ocupados)"""
        with storage_operation('get stage statistics', MINIATURE_TABLE):
            rows = (
                Miniature.objects.filter(user=user)
                .values('stage_id')
                .annotate(total=Count('id'))
                .order_by()
            )
            return {row['stage_id']: row['total'] for row in rows}

    def _stage_do_usuario(self, user, stage_id: str) -> Stage:
        stage = stage_service.get_for_user(user, stage_id)
        if stage is None:
            raise ValidationError('Invalid stage ID')
        return stage


# Instâncias globais dos serviços (Singleton pattern)
stage_service = StageService()
miniature_service = MiniatureService()

# apps/board/schemas.py

"""
Estruturas tipadas de criação e alteração parcial

Os formulários (forms.py) validam o payload campo a campo e produzem
estas estruturas; os serviços só recebem valores já validados. Nas
alterações parciais, None significa "campo não enviado".
"""

from dataclasses import dataclass, fields
from decimal import Decimal
from typing import Any, Dict, Optional


class PartialUpdate:
    """Mixin para dataclasses de alteração parcial"""

    def changes(self) -> Dict[str, Any]:
        return {
            field.name: getattr(self, field.name)
            for field in fields(self)
            if getattr(self, field.name) is not None
        }

    def __bool__(self):
        return bool(self.changes())


@dataclass(frozen=True)
class StageDraft:
    name: str
    description: str = ''
    color: str = 'gray'
    insert_after_stage_id: Optional[str] = None
    insert_at_position: Optional[int] = None


@dataclass(frozen=True)
class StageUpdate(PartialUpdate):
    name: Optional[str] = None
    description: Optional[str] = None
    color: Optional[str] = None
    sort_order: Optional[int] = None


@dataclass(frozen=True)
class MiniatureDraft:
    name: str
    description: str = ''
    stage_id: Optional[str] = None  # None = primeiro estágio do usuário
    image_url: str = ''
    estimated_hours: Optional[Decimal] = None
    actual_hours: Optional[Decimal] = None
    difficulty: str = ''
    notes: str = ''

    def model_fields(self) -> Dict[str, Any]:
        """Campos gravados diretamente no modelo (sem o estágio)"""
        return {
            field.name: getattr(self, field.name)
            for field in fields(self)
            if field.name != 'stage_id'
        }


@dataclass(frozen=True)
class MiniatureUpdate(PartialUpdate):
    name: Optional[str] = None
    description: Optional[str] = None
    stage_id: Optional[str] = None
    image_url: Optional[str] = None
    estimated_hours: Optional[Decimal] = None
    actual_hours: Optional[Decimal] = None
    difficulty: Optional[str] = None
    notes: Optional[str] = None

# apps/board/forms.py

"""
Validação dos payloads JSON de estágios e miniaturas

Cada formulário recebe o corpo JSON já decodificado (chaves em camelCase)
e produz a estrutura tipada de schemas.py. Com partial=True apenas os
campos presentes no payload são validados (PATCH).
"""

from typing import Any, Dict, List

from django import forms
from django.core.exceptions import ValidationError

from .models import STAGE_COLORS, Miniature, Stage
from .schemas import MiniatureDraft, MiniatureUpdate, StageDraft, StageUpdate

COLOR_ERROR = f"Color must be one of: {', '.join(STAGE_COLORS)}"
NO_UPDATES_ERROR = 'No valid updates provided'


class StrictCharField(forms.CharField):
    """CharField que recusa números, listas etc. em vez de convertê-los"""

    default_error_messages = {
        'invalid_type': 'Value must be a string',
    }

    def to_python(self, value):
        if value not in self.empty_values and not isinstance(value, str):
            raise ValidationError(self.error_messages['invalid_type'], code='invalid_type')
        return super().to_python(value)


class JsonPayloadForm(forms.Form):
    """
    Base dos formulários alimentados por JSON

    `aliases` mapeia a chave do payload para o nome do campo. Campos com
    alias só são aceitos pela chave camelCase. Valores null são tratados
    como ausentes.
    """

    aliases: Dict[str, str] = {}

    def __init__(self, payload: Dict[str, Any], partial: bool = False):
        aliased = set(self.aliases.values())
        data = {}
        for key, value in payload.items():
            if key in self.aliases:
                name = self.aliases[key]
            elif key in aliased:
                continue
            else:
                name = key
            if name in self.base_fields and value is not None:
                data[name] = value

        super().__init__(data=data)
        self.partial = partial

        if partial:
            for name in list(self.fields):
                if name not in data:
                    del self.fields[name]

    def first_error(self) -> str:
        for errors in self.errors.as_data().values():
            return errors[0].messages[0]
        return 'Invalid request'

    def validated(self) -> Dict[str, Any]:
        """cleaned_data ou ValidationError com a primeira mensagem"""
        if not self.is_valid():
            raise ValidationError(self.first_error())
        return self.cleaned_data


# === ESTÁGIOS ===

class StageForm(JsonPayloadForm):
    aliases = {
        'sortOrder': 'sort_order',
        'insertAfterStageId': 'insert_after_stage_id',
        'insertAtPosition': 'insert_at_position',
    }

    name = StrictCharField(
        min_length=2,
        max_length=50,
        error_messages={
            'required': 'Stage name is required',
            'invalid_type': 'Stage name is required',
            'min_length': 'Stage name must be at least 2 characters',
            'max_length': 'Stage name must be 50 characters or less',
        }
    )
    description = StrictCharField(
        required=False,
        error_messages={'invalid_type': 'Description must be a string'}
    )
    color = forms.ChoiceField(
        required=False,
        choices=Stage.COLOR_CHOICES,
        error_messages={'invalid_choice': COLOR_ERROR}
    )
    sort_order = forms.IntegerField(
        required=False,
        error_messages={'invalid': 'sortOrder must be an integer'}
    )
    insert_after_stage_id = StrictCharField(
        required=False,
        error_messages={'invalid_type': 'insertAfterStageId must be a string'}
    )
    insert_at_position = forms.IntegerField(
        required=False,
        min_value=0,
        error_messages={
            'invalid': 'insertAtPosition must be a non-negative integer',
            'min_value': 'insertAtPosition must be a non-negative integer',
        }
    )

    def clean_color(self):
        color = self.cleaned_data.get('color')
        if not color:
            if self.partial:
                raise ValidationError(COLOR_ERROR)
            return 'gray'
        return color

    def to_draft(self) -> StageDraft:
        data = self.validated()
        return StageDraft(
            name=data['name'],
            description=data.get('description') or '',
            color=data['color'],
            insert_after_stage_id=data.get('insert_after_stage_id') or None,
            insert_at_position=data.get('insert_at_position'),
        )

    def to_update(self) -> StageUpdate:
        data = self.validated()
        update = StageUpdate(
            name=data.get('name'),
            description=data.get('description'),
            color=data.get('color'),
            sort_order=data.get('sort_order'),
        )
        if not update:
            raise ValidationError(NO_UPDATES_ERROR)
        return update


def ordered_stage_ids(payload: Dict[str, Any]) -> List[str]:
    """Extrai orderedStageIds do corpo do PUT de reordenação"""
    ids = payload.get('orderedStageIds')
    if not isinstance(ids, list):
        raise ValidationError('orderedStageIds must be an array')
    if not all(isinstance(stage_id, str) for stage_id in ids):
        raise ValidationError('orderedStageIds must contain only stage IDs')
    if len(set(ids)) != len(ids):
        raise ValidationError('orderedStageIds must not contain duplicates')
    return ids


# === MINIATURAS ===

class MiniatureForm(JsonPayloadForm):
    aliases = {
        'stageId': 'stage_id',
        'imageUrl': 'image_url',
        'estimatedHours': 'estimated_hours',
        'actualHours': 'actual_hours',
    }

    name = StrictCharField(
        max_length=200,
        error_messages={
            'required': 'Name is required and must be a non-empty string',
            'invalid_type': 'Name is required and must be a non-empty string',
            'max_length': 'Name must be 200 characters or less',
        }
    )
    description = StrictCharField(
        required=False,
        error_messages={'invalid_type': 'Description must be a string'}
    )
    stage_id = StrictCharField(
        required=False,
        error_messages={'invalid_type': 'stageId must be a string'}
    )
    image_url = forms.URLField(
        required=False,
        assume_scheme='https',
        max_length=500,
        error_messages={'invalid': 'imageUrl must be a valid URL'}
    )
    estimated_hours = forms.DecimalField(
        required=False,
        min_value=0,
        max_digits=6,
        decimal_places=2,
        error_messages={
            'invalid': 'estimatedHours must be a number',
            'min_value': 'estimatedHours must be zero or more',
        }
    )
    actual_hours = forms.DecimalField(
        required=False,
        min_value=0,
        max_digits=6,
        decimal_places=2,
        error_messages={
            'invalid': 'actualHours must be a number',
            'min_value': 'actualHours must be zero or more',
        }
    )
    difficulty = forms.ChoiceField(
        required=False,
        choices=[('', '')] + Miniature.DIFFICULTY_CHOICES,
        error_messages={
            'invalid_choice': 'Difficulty must be one of: beginner, intermediate, advanced, expert',
        }
    )
    notes = StrictCharField(
        required=False,
        error_messages={'invalid_type': 'Notes must be a string'}
    )

    def to_draft(self) -> MiniatureDraft:
        data = self.validated()
        return MiniatureDraft(
            name=data['name'],
            description=data.get('description') or '',
            stage_id=data.get('stage_id') or None,
            image_url=data.get('image_url') or '',
            estimated_hours=data.get('estimated_hours'),
            actual_hours=data.get('actual_hours'),
            difficulty=data.get('difficulty') or '',
            notes=data.get('notes') or '',
        )

    def to_update(self) -> MiniatureUpdate:
        data = self.validated()
        update = MiniatureUpdate(
            name=data.get('name'),
            description=data.get('description'),
            stage_id=data.get('stage_id') or None,
            image_url=data.get('image_url'),
            estimated_hours=data.get('estimated_hours'),
            actual_hours=data.get('actual_hours'),
            difficulty=data.get('difficulty'),
            notes=data.get('notes'),
        )
        if not update:
            raise ValidationError(NO_UPDATES_ERROR)
        return update


class MoveForm(JsonPayloadForm):
    aliases = {'stageId': 'stage_id'}

    stage_id = StrictCharField(
        error_messages={
            'required': 'stageId is required',
            'invalid_type': 'stageId must be a string',
        }
    )

    def target_stage_id(self) -> str:
        return self.validated()['stage_id']

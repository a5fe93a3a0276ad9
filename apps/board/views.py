# apps/board/views.py

"""
API JSON de estágios e miniaturas

As views só traduzem HTTP: o payload passa pelos formulários, a regra de
negócio fica em services.py. Itens de outro usuário respondem 404, como se
não existissem.
"""

from django.core.exceptions import ValidationError
from django.views.decorators.csrf import csrf_exempt

from apps.core.exceptions import StorageError
from apps.core.permissions import identity_required, require_methods
from apps.core.utils import api_error, api_success, error_message, parse_json_body
from .forms import MiniatureForm, MoveForm, StageForm, ordered_stage_ids
from .services import miniature_service, stage_service

STAGE_NOT_FOUND = 'Stage not found'
MINIATURE_NOT_FOUND = 'Miniature not found'


def _as_dicts(items):
    return [item.to_dict() for item in items]


# =================== ESTÁGIOS ===================

@csrf_exempt
@require_methods('GET', 'POST', 'PUT')
@identity_required
def stages_collection(request):
    """
    GET  /api/stages - lista (cria os padrões se o usuário não tiver nenhum)
    POST /api/stages - cria estágio (insertAfterStageId ou insertAtPosition)
    PUT  /api/stages - reordena com {orderedStageIds}
    """
    user = request.identity.user

    if request.method == 'GET':
        try:
            stages = stage_service.list_or_initialize(user)
        except StorageError:
            return api_error('Failed to fetch stages', status=500)
        return api_success(_as_dicts(stages))

    if request.method == 'POST':
        try:
            draft = StageForm(parse_json_body(request)).to_draft()
            stage, all_stages = stage_service.create(user, draft)
        except ValidationError as e:
            return api_error(error_message(e))
        except StorageError:
            return api_error('Failed to create stage', status=500)

        if all_stages is not None:
            return api_success(stage.to_dict(), status=201, allStages=_as_dicts(all_stages))
        return api_success(stage.to_dict(), status=201)

    # PUT
    try:
        stages = stage_service.reorder(user, ordered_stage_ids(parse_json_body(request)))
    except ValidationError as e:
        return api_error(error_message(e))
    except StorageError:
        return api_error('Failed to reorder stages', status=500)
    return api_success(_as_dicts(stages))


@csrf_exempt
@require_methods('GET', 'PATCH', 'DELETE')
@identity_required
def stage_detail(request, stage_id):
    """GET/PATCH/DELETE /api/stages/<id>"""
    try:
        stage = stage_service.get_for_user(request.identity.user, stage_id)
    except StorageError:
        return api_error('Failed to fetch stage', status=500)

    if stage is None:
        return api_error(STAGE_NOT_FOUND, status=404)

    if request.method == 'GET':
        return api_success(stage.to_dict())

    if request.method == 'PATCH':
        try:
            update = StageForm(parse_json_body(request), partial=True).to_update()
            stage = stage_service.update(stage, update)
        except ValidationError as e:
            return api_error(error_message(e))
        except StorageError:
            return api_error('Failed to update stage', status=500)
        return api_success(stage.to_dict())

    # DELETE
    try:
        stage_service.delete(stage)
    except ValidationError as e:
        return api_error(error_message(e))
    except StorageError:
        return api_error('Failed to delete stage', status=500)
    return api_success({'message': 'Stage deleted successfully'})


# =================== MINIATURAS ===================

@csrf_exempt
@require_methods('GET', 'POST')
@identity_required
def miniatures_collection(request):
    """
    GET  /api/miniatures[?stageId=...] - lista miniaturas do usuário
    POST /api/miniatures - cria miniatura (sem stageId vai para o primeiro estágio)
    """
    user = request.identity.user

    if request.method == 'GET':
        try:
            miniatures = miniature_service.list_for_user(user, request.GET.get('stageId'))
        except StorageError:
            return api_error('Failed to fetch miniatures', status=500)
        return api_success(_as_dicts(miniatures))

    try:
        draft = MiniatureForm(parse_json_body(request)).to_draft()
        miniature = miniature_service.create(user, draft)
    except ValidationError as e:
        return api_error(error_message(e))
    except StorageError:
        return api_error('Failed to create miniature', status=500)
    return api_success(miniature.to_dict(), status=201)


@require_methods('GET')
@identity_required
def miniature_stats(request):
    """GET /api/miniatures/stats - {stageId: quantidade}"""
    try:
        stats = miniature_service.stage_statistics(request.identity.user)
    except StorageError:
        return api_error('Failed to fetch miniature statistics', status=500)
    return api_success(stats)


@csrf_exempt
@require_methods('GET', 'PATCH', 'DELETE')
@identity_required
def miniature_detail(request, miniature_id):
    """GET/PATCH/DELETE /api/miniatures/<id>"""
    try:
        miniature = miniature_service.get_for_user(request.identity.user, miniature_id)
    except StorageError:
        return api_error('Failed to fetch miniature', status=500)

    if miniature is None:
        return api_error(MINIATURE_NOT_FOUND, status=404)

    if request.method == 'GET':
        return api_success(miniature.to_dict())

    if request.method == 'PATCH':
        try:
            update = MiniatureForm(parse_json_body(request), partial=True).to_update()
            miniature = miniature_service.update(miniature, update)
        except ValidationError as e:
            return api_error(error_message(e))
        except StorageError:
            return api_error('Failed to update miniature', status=500)
        return api_success(miniature.to_dict())

    # DELETE
    try:
        miniature_service.delete(miniature)
    except StorageError:
        return api_error('Failed to delete miniature', status=500)
    return api_success({'message': 'Miniature deleted successfully'})


@csrf_exempt
@require_methods('POST')
@identity_required
def miniature_move(request, miniature_id):
    """POST /api/miniatures/<id>/move - {stageId}"""
    try:
        miniature = miniature_service.get_for_user(request.identity.user, miniature_id)
        if miniature is None:
            return api_error(MINIATURE_NOT_FOUND, status=404)

        stage_id = MoveForm(parse_json_body(request)).target_stage_id()
        miniature = miniature_service.move_to_stage(miniature, stage_id)
    except ValidationError as e:
        return api_error(error_message(e))
    except StorageError:
        return api_error('Failed to move miniature', status=500)

    return api_success(miniature.to_dict())

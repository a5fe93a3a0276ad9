# apps/board/kanban.py

"""
Reconciliação otimista do quadro kanban

O estado do quadro é um valor imutável (BoardState) com três partes:
- a lista autoritativa (o que o servidor confirmou por último)
- o espelho local, que recebe os movimentos antes da confirmação
- um aviso transitório exibido quando um movimento falha

As funções de redução são puras e não fazem I/O. O KanbanController é a
fronteira de efeitos: aplica o movimento no espelho, chama a persistência
injetada e confirma ou desfaz conforme o resultado.

Fluxo de um arraste:
    drop -> plan_move -> apply_move -> persistir -> confirm_move
                                                 \\-> revert_move (falha)
"""

import logging
import time
from dataclasses import dataclass, replace
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from django.conf import settings

from .client import ApiError

logger = logging.getLogger(__name__)

MOVE_FAILED_MESSAGE = 'Failed to move miniature. Please try again.'
NOTICE_SECONDS = 5


# === TIPOS ===

@dataclass(frozen=True)
class StageView:
    id: str
    name: str
    sort_order: int = 0
    color: str = 'gray'
    description: str = ''
    is_default: bool = False

    @classmethod
    def from_dict(cls, data: Dict) -> 'StageView':
        """Constrói a partir do JSON da API (camelCase)"""
        return cls(
            id=data['id'],
            name=data['name'],
            sort_order=data.get('sortOrder', 0),
            color=data.get('color', 'gray'),
            description=data.get('description', ''),
            is_default=data.get('isDefault', False),
        )


@dataclass(frozen=True)
class MiniatureView:
    id: str
    name: str
    stage_id: str
    description: str = ''

    @classmethod
    def from_dict(cls, data: Dict) -> 'MiniatureView':
        return cls(
            id=data['id'],
            name=data['name'],
            stage_id=data['stageId'],
            description=data.get('description', ''),
        )


@dataclass(frozen=True)
class DragLocation:
    """Coluna (droppable = id do estágio) e posição dentro dela"""

    droppable_id: str
    index: int


@dataclass(frozen=True)
class DropResult:
    """Evento de fim de arraste; destination None = solto fora de qualquer coluna"""

    draggable_id: str
    source: DragLocation
    destination: Optional[DragLocation] = None


@dataclass(frozen=True)
class Move:
    miniature_id: str
    source_stage_id: str
    target_stage_id: str
    target_index: int

    @property
    def changes_stage(self) -> bool:
        return self.source_stage_id != self.target_stage_id


@dataclass(frozen=True)
class Notice:
    message: str
    expires_at: float

    def expired(self, now: float) -> bool:
        return now >= self.expires_at


@dataclass(frozen=True)
class BoardState:
    stages: Tuple[StageView, ...] = ()
    miniatures: Tuple[MiniatureView, ...] = ()  # autoritativo
    mirror: Tuple[MiniatureView, ...] = ()  # local (otimista)
    notice: Optional[Notice] = None


# === REDUTORES ===

def _sorted_stages(stages: Iterable[StageView]) -> Tuple[StageView, ...]:
    return tuple(sorted(stages, key=lambda stage: stage.sort_order))


def synchronize(state: BoardState,
                stages: Optional[Iterable[StageView]] = None,
                miniatures: Optional[Iterable[MiniatureView]] = None) -> BoardState:
    """
    Substitui a lista autoritativa e reconstrói o espelho a partir dela

    Qualquer movimento local ainda não confirmado é descartado.
    """
    new_stages = _sorted_stages(stages) if stages is not None else state.stages
    new_miniatures = tuple(miniatures) if miniatures is not None else state.miniatures
    return replace(state, stages=new_stages, miniatures=new_miniatures, mirror=new_miniatures)


def plan_move(state: BoardState, drop: DropResult) -> Optional[Move]:
    """Traduz o evento de arraste em Move; None quando não há nada a fazer"""
    destination = drop.destination
    if destination is None:
        return None

    if (destination.droppable_id == drop.source.droppable_id
            and destination.index == drop.source.index):
        return None

    miniature = _find(state.mirror, drop.draggable_id)
    if miniature is None:
        return None

    return Move(
        miniature_id=miniature.id,
        source_stage_id=miniature.stage_id,
        target_stage_id=destination.droppable_id,
        target_index=destination.index,
    )


def apply_move(state: BoardState, move: Move) -> BoardState:
    """Aplica o movimento somente no espelho local"""
    miniature = _find(state.mirror, move.miniature_id)
    if miniature is None:
        return state

    moved = replace(miniature, stage_id=move.target_stage_id)
    others = [m for m in state.mirror if m.id != move.miniature_id]
    target_group = [m for m in others if m.stage_id == move.target_stage_id]

    if move.target_index < len(target_group):
        position = others.index(target_group[max(move.target_index, 0)])
    elif target_group:
        position = others.index(target_group[-1]) + 1
    else:
        position = len(others)

    others.insert(position, moved)
    return replace(state, mirror=tuple(others), notice=None)


def confirm_move(state: BoardState, move: Move, saved: Optional[MiniatureView] = None) -> BoardState:
    """
    Servidor confirmou: o espelho passa a ser a nova lista autoritativa

    `saved` é a miniatura devolvida pela API, quando houver.
    """
    mirror = state.mirror
    if saved is not None:
        mirror = tuple(saved if m.id == saved.id else m for m in mirror)
    return replace(state, miniatures=mirror, mirror=mirror)


def revert_move(state: BoardState, notice: Optional[Notice] = None) -> BoardState:
    """Descarta mutações locais, voltando ao último estado confirmado"""
    return replace(state, mirror=state.miniatures, notice=notice)


def dismiss_notice(state: BoardState, now: Optional[float] = None) -> BoardState:
    """Remove o aviso; com `now`, só se já tiver expirado"""
    if state.notice is None:
        return state
    if now is not None and not state.notice.expired(now):
        return state
    return replace(state, notice=None)


# === REDUTORES DE LISTA ===

def upsert_miniature(state: BoardState, miniature: MiniatureView) -> BoardState:
    """Inclui ou substitui miniatura na lista autoritativa (e no espelho)"""
    miniatures = _upsert(state.miniatures, miniature)
    return replace(state, miniatures=miniatures, mirror=_upsert(state.mirror, miniature))


def remove_miniature(state: BoardState, miniature_id: str) -> BoardState:
    return replace(
        state,
        miniatures=tuple(m for m in state.miniatures if m.id != miniature_id),
        mirror=tuple(m for m in state.mirror if m.id != miniature_id),
    )


def upsert_stage(state: BoardState, stage: StageView) -> BoardState:
    return replace(state, stages=_sorted_stages(_upsert(state.stages, stage)))


def remove_stage(state: BoardState, stage_id: str) -> BoardState:
    return replace(state, stages=tuple(s for s in state.stages if s.id != stage_id))


def _upsert(items: Sequence, item) -> tuple:
    if any(existing.id == item.id for existing in items):
        return tuple(item if existing.id == item.id else existing for existing in items)
    return tuple(items) + (item,)


def _find(items: Iterable, item_id: str):
    return next((item for item in items if item.id == item_id), None)


# === CONSULTAS ===

def miniatures_by_stage(state: BoardState) -> Dict[str, List[MiniatureView]]:
    """Agrupa o espelho por estágio (todo estágio aparece, mesmo vazio)"""
    grouped = {stage.id: [] for stage in state.stages}
    for miniature in state.mirror:
        if miniature.stage_id in grouped:
            grouped[miniature.stage_id].append(miniature)
    return grouped


def stage_for(state: BoardState, miniature_id: str) -> Optional[StageView]:
    miniature = _find(state.mirror, miniature_id)
    if miniature is None:
        return None
    return _find(state.stages, miniature.stage_id)


def _neighbor_stage(state: BoardState, miniature_id: str, offset: int) -> Optional[StageView]:
    current = stage_for(state, miniature_id)
    if current is None:
        return None
    position = state.stages.index(current) + offset
    if 0 <= position < len(state.stages):
        return state.stages[position]
    return None


def next_stage(state: BoardState, miniature_id: str) -> Optional[StageView]:
    return _neighbor_stage(state, miniature_id, 1)


def previous_stage(state: BoardState, miniature_id: str) -> Optional[StageView]:
    return _neighbor_stage(state, miniature_id, -1)


# === CONTROLADOR ===

def _default_notice_seconds() -> float:
    if settings.configured:
        return getattr(settings, 'TRACKER_NOTICE_SECONDS', NOTICE_SECONDS)
    return NOTICE_SECONDS


class KanbanController:
    """
    Fronteira de efeitos do kanban

    Args:
        persist_move: persiste a troca de estágio; recebe (miniature_id,
            stage_id) e devolve o JSON da miniatura salva ou None. Falhas
            sobem como ApiError.
        fetch_board: opcional, devolve (stages, miniatures) em JSON da API
            para refresh().
        clock: relógio em segundos (injetável nos testes)
    """

    def __init__(self,
                 persist_move: Callable[[str, str], Optional[Dict]],
                 fetch_board: Optional[Callable[[], Tuple[List[Dict], List[Dict]]]] = None,
                 clock: Callable[[], float] = time.monotonic,
                 notice_seconds: Optional[float] = None,
                 state: Optional[BoardState] = None):
        self._persist_move = persist_move
        self._fetch_board = fetch_board
        self._clock = clock
        self._notice_seconds = notice_seconds if notice_seconds is not None else _default_notice_seconds()
        self._state = state or BoardState()

    @classmethod
    def for_client(cls, client, **kwargs) -> 'KanbanController':
        """Controlador ligado a um TrackerClient autenticado"""
        return cls(
            persist_move=client.move_miniature,
            fetch_board=lambda: (client.list_stages(), client.list_miniatures()),
            **kwargs
        )

    @property
    def state(self) -> BoardState:
        return self._state

    @property
    def notice(self) -> Optional[Notice]:
        """Aviso atual; expirado é descartado na leitura"""
        self._state = dismiss_notice(self._state, now=self._clock())
        return self._state.notice

    def load(self, stages: Iterable[Dict], miniatures: Iterable[Dict]):
        self._state = synchronize(
            self._state,
            stages=[StageView.from_dict(s) for s in stages],
            miniatures=[MiniatureView.from_dict(m) for m in miniatures],
        )

    def refresh(self):
        """Recarrega estágios e miniaturas do servidor; erros sobem ao chamador"""
        if self._fetch_board is None:
            raise RuntimeError('KanbanController sem fetch_board configurado')
        stages, miniatures = self._fetch_board()
        self.load(stages, miniatures)

    def handle_drag_end(self, drop: DropResult) -> Optional[bool]:
        """
        Processa o fim de um arraste

        Returns:
            None se não havia nada a fazer, True se o movimento foi
            confirmado, False se falhou e foi desfeito
        """
        move = plan_move(self._state, drop)
        if move is None:
            return None
        return self._commit(move)

    def move_to_next_stage(self, miniature_id: str) -> Optional[bool]:
        return self._move_to(miniature_id, next_stage(self._state, miniature_id))

    def move_to_previous_stage(self, miniature_id: str) -> Optional[bool]:
        return self._move_to(miniature_id, previous_stage(self._state, miniature_id))

    def _move_to(self, miniature_id: str, stage: Optional[StageView]) -> Optional[bool]:
        current = stage_for(self._state, miniature_id)
        if stage is None or current is None:
            return None

        move = Move(
            miniature_id=miniature_id,
            source_stage_id=current.id,
            target_stage_id=stage.id,
            target_index=len(miniatures_by_stage(self._state)[stage.id]),
        )
        return self._commit(move)

    def _commit(self, move: Move) -> bool:
        self._state = apply_move(self._state, move)

        # Reordenação dentro da mesma coluna não é persistida no servidor
        if not move.changes_stage:
            self._state = confirm_move(self._state, move)
            return True

        try:
            saved = self._persist_move(move.miniature_id, move.target_stage_id)
        except ApiError as exc:
            logger.warning("Falha ao mover miniatura %s: %s", move.miniature_id, exc)
            notice = Notice(MOVE_FAILED_MESSAGE, self._clock() + self._notice_seconds)
            self._state = revert_move(self._state, notice)
            return False

        self._state = confirm_move(
            self._state, move,
            MiniatureView.from_dict(saved) if saved else None
        )
        return True

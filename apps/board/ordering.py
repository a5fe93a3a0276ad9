# apps/board/ordering.py

"""
Cálculo de sort_order para estágios

Os valores são esparsos (passo de 10) para que um estágio novo caiba entre
dois vizinhos sem tocar nos demais. Quando o espaço entre os vizinhos acaba
(diferença <= 1), todos os estágios são renumerados em passos de 10 e o novo
valor fica no meio do intervalo recém-aberto. Quem chama é responsável por
gravar a renumeração junto com o estágio novo.

Funções puras: não acessam o banco, recebem qualquer objeto com os
atributos `id` e `sort_order`.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional, Sequence

SORT_ORDER_STEP = 10


@dataclass(frozen=True)
class Allocation:
    """Resultado da alocação: valor para o estágio novo + renumeração pendente"""

    sort_order: int
    renumbered: Dict[str, int] = field(default_factory=dict)

    @property
    def requires_rebalance(self) -> bool:
        return bool(self.renumbered)


def _ordered(stages: Iterable) -> list:
    return sorted(stages, key=lambda stage: stage.sort_order)


def sequential_sort_orders(stage_ids: Sequence[str]) -> Dict[str, int]:
    """Mapeia ids para 10, 20, 30... na ordem recebida"""
    return {
        stage_id: (index + 1) * SORT_ORDER_STEP
        for index, stage_id in enumerate(stage_ids)
    }


def allocate_sort_order(stages: Iterable, insert_after_id: Optional[str] = None) -> Allocation:
    """
    Calcula o sort_order de um estágio novo

    Args:
        stages: estágios existentes do usuário (qualquer ordem)
        insert_after_id: id do estágio que deve ficar imediatamente antes
            do novo. Ausente ou desconhecido = inserir no final.

    Returns:
        Allocation com o valor e, se foi preciso, a renumeração completa
    """
    ordered = _ordered(stages)

    if not ordered:
        return Allocation(SORT_ORDER_STEP)

    ids = [stage.id for stage in ordered]
    if insert_after_id is None or insert_after_id not in ids:
        return Allocation(ordered[-1].sort_order + SORT_ORDER_STEP)

    position = ids.index(insert_after_id)
    target = ordered[position]

    # Alvo é o último: nada depois dele
    if position == len(ordered) - 1:
        return Allocation(target.sort_order + SORT_ORDER_STEP)

    gap = ordered[position + 1].sort_order - target.sort_order
    if gap > 1:
        return Allocation(target.sort_order + gap // 2)

    # Sem espaço entre os vizinhos: renumerar tudo e usar o meio do novo intervalo
    renumbered = sequential_sort_orders(ids)
    sort_order = renumbered[insert_after_id] + SORT_ORDER_STEP // 2
    return Allocation(sort_order, renumbered)

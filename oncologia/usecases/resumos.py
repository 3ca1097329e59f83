# oncologia/usecases/resumos.py
"""
Resumos dos painéis (médico e enfermagem).

Visões derivadas, sem estado: recalculadas a cada exibição a partir dos
caches dos repositórios e do motor de triagem. Cada registro conta uma
única vez (deduplicação por ``id``) e a ordem de entrada não importa.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, List, Optional, TypeVar

from oncologia.domain.models import (
    EfeitoColateral,
    Exame,
    Gravidade,
    Prescricao,
    PrescricaoEnfermagem,
    StatusExame,
    StatusRelato,
    StatusTratamento,
    Tratamento,
)
from oncologia.domain.policies import is_urgent
from oncologia.usecases.triagem import MotorTriagem


R = TypeVar("R")


def _unicos(registros: Iterable[R]) -> List[R]:
    """Remove repetições pelo ``id`` (registros sem id contam pela identidade)."""
    vistos = set()
    out: List[R] = []
    for r in registros:
        chave = getattr(r, "id", None)
        chave = ("id", chave) if chave is not None else ("obj", id(r))
        if chave in vistos:
            continue
        vistos.add(chave)
        out.append(r)
    return out


def contar_status(
    registros: Iterable[Any],
    pendente: Optional[Callable[[Any], bool]] = None,
    resolvido: Optional[Callable[[Any], bool]] = None,
) -> Dict[str, int]:
    """Conta total/pendentes/resolvidos de uma coleção de registros.

    Args:
        registros: Registros de um tipo (podem vir repetidos).
        pendente: Predicado de "pendente"; sem ele a contagem é 0.
        resolvido: Predicado de "resolvido"; sem ele a contagem é 0.

    Returns:
        ``{"total": n, "pendentes": p, "resolvidos": r}``
    """
    unicos = _unicos(registros)
    return {
        "total": len(unicos),
        "pendentes": sum(1 for r in unicos if pendente and pendente(r)),
        "resolvidos": sum(1 for r in unicos if resolvido and resolvido(r)),
    }


def resumo_medico(
    tratamentos: Iterable[Tratamento],
    exames: Iterable[Exame],
    prescricoes: Iterable[Prescricao],
) -> Dict[str, Dict[str, int]]:
    """Resumo do painel do médico."""
    tratamentos = list(tratamentos)
    trat = contar_status(
        tratamentos,
        pendente=lambda t: t.status in (StatusTratamento.PLANEJADO, StatusTratamento.EM_ANDAMENTO),
        resolvido=lambda t: t.status == StatusTratamento.CONCLUIDO,
    )
    trat["em_andamento"] = sum(
        1 for t in _unicos(tratamentos) if t.status == StatusTratamento.EM_ANDAMENTO
    )
    return {
        "tratamentos": trat,
        "exames": contar_status(
            exames,
            pendente=lambda e: e.status == StatusExame.SOLICITADO,
            resolvido=lambda e: e.status == StatusExame.REALIZADO,
        ),
        "prescricoes": contar_status(prescricoes),
    }


def resumo_enfermagem(
    motor: MotorTriagem,
    prescricoes_enf: Iterable[PrescricaoEnfermagem] = (),
    efeitos: Iterable[EfeitoColateral] = (),
) -> Dict[str, Dict[str, int]]:
    """Resumo do painel de enfermagem."""
    efeitos = list(efeitos)
    relatos = motor.list_reports()
    rel = contar_status(
        relatos,
        pendente=lambda r: r.status == StatusRelato.PENDENTE,
        resolvido=lambda r: r.status == StatusRelato.RESOLVIDO,
    )
    rel["em_analise"] = sum(1 for r in relatos if r.status == StatusRelato.EM_ANALISE)
    rel["urgentes"] = sum(1 for r in relatos if is_urgent(r))

    efe = contar_status(efeitos)
    efe["graves"] = sum(1 for e in _unicos(efeitos) if e.severity == Gravidade.GRAVE)

    return {
        "relatos": rel,
        "orientacoes": contar_status(motor.list_guidances()),
        "prescricoes_enfermagem": contar_status(prescricoes_enf),
        "efeitos_colaterais": efe,
    }

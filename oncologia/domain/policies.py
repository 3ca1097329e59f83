"""
Políticas do domínio clínico.

Este módulo reúne as regras de negócio puras usadas pelos repositórios e
pelo motor de triagem: validação de candidatos antes de qualquer chamada
ao armazenamento, classificação de urgência dos relatos e a máquina de
estados do status de um relato.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Mapping, Type

from oncologia.domain.models import (
    Gravidade,
    Registro,
    RelatoPaciente,
    StatusRelato,
    TipoRelato,
)


# Ordem total dos estados; o status de um relato nunca diminui.
ORDEM_STATUS: Dict[StatusRelato, int] = {
    StatusRelato.PENDENTE: 0,
    StatusRelato.EM_ANALISE: 1,
    StatusRelato.RESOLVIDO: 2,
}

TRANSICOES: Dict[StatusRelato, frozenset] = {
    StatusRelato.PENDENTE: frozenset({StatusRelato.EM_ANALISE, StatusRelato.RESOLVIDO}),
    StatusRelato.EM_ANALISE: frozenset({StatusRelato.RESOLVIDO}),
    StatusRelato.RESOLVIDO: frozenset(),
}


def _vazio(valor: Any) -> bool:
    return valor is None or (isinstance(valor, str) and not valor.strip())


def _enum_valido(valor: Any, tipo: Type[Enum]) -> bool:
    if isinstance(valor, tipo):
        return True
    try:
        tipo(str(valor).strip())
    except ValueError:
        return False
    return True


def validar_candidato(modelo: Type[Registro], candidato: Mapping[str, Any]) -> List[str]:
    """Lista os campos inválidos de um candidato a registro.

    Regras:
        - campos de ``modelo.OBRIGATORIOS`` não podem estar ausentes nem em branco;
        - campos enumerados, quando informados, precisam pertencer ao domínio.

    Args:
        modelo: Classe do registro (``Tratamento``, ``Exame``...).
        candidato: Dados digitados pelo usuário.

    Returns:
        Nomes dos campos inválidos, na ordem de declaração; lista vazia se
        o candidato é aceitável.
    """
    invalidos: List[str] = []
    for campo in modelo.OBRIGATORIOS:
        if _vazio(candidato.get(campo)):
            invalidos.append(campo)
    for campo, tipo in modelo.ENUMS.items():
        if campo in invalidos:
            continue
        valor = candidato.get(campo)
        if _vazio(valor):
            continue
        if not _enum_valido(valor, tipo):
            invalidos.append(campo)
    return invalidos


def is_urgent(relato: RelatoPaciente) -> bool:
    """Um relato é urgente se o tipo é ``urgente`` ou a gravidade é ``grave``.

    Depende apenas de ``type`` e ``severity``; nunca é armazenado.
    """
    return relato.type == TipoRelato.URGENTE or relato.severity == Gravidade.GRAVE


def pode_transitar(de: StatusRelato, para: StatusRelato) -> bool:
    return para in TRANSICOES[de]


from dataclasses import replace

import pytest

from oncologia.domain.models import (
    EfeitoColateral,
    Exame,
    Gravidade,
    Prescricao,
    PrescricaoEnfermagem,
    RelatoPaciente,
    StatusRelato,
    TipoRelato,
    Tratamento,
)
from oncologia.domain.policies import ORDEM_STATUS, is_urgent, pode_transitar, validar_candidato


@pytest.mark.parametrize(
    "modelo,candidato,esperado",
    [
        (Tratamento, {"phase": "", "description": "x"}, ["phase"]),
        (Tratamento, {"phase": "Cirurgia", "description": "  "}, ["description"]),
        (Tratamento, {}, ["phase", "description"]),
        (Tratamento, {"phase": "Cirurgia", "description": "x", "status": "Talvez"}, ["status"]),
        (Tratamento, {"phase": "Cirurgia", "description": "x"}, []),
        (Exame, {"type": ""}, ["type"]),
        (Exame, {"type": "Hemograma", "status": "realizado"}, []),
        (Prescricao, {"medication": "Ondansetrona"}, ["dosage"]),
        (PrescricaoEnfermagem, {"dosage": "8mg"}, ["medication"]),
        (EfeitoColateral, {"medication": "X", "effect": "Y", "severity": "gravíssimo"}, ["severity"]),
        (EfeitoColateral, {"medication": "X", "effect": "Y", "severity": ""}, []),
    ],
)
def test_validar_candidato(modelo, candidato, esperado):
    assert validar_candidato(modelo, candidato) == esperado


def _relato(**kw):
    base = dict(id="r1", date="2025-11-07", type=TipoRelato.DUVIDA, description="?")
    base.update(kw)
    return RelatoPaciente(**base)


def test_urgencia_por_tipo_ou_gravidade():
    assert is_urgent(_relato(type=TipoRelato.URGENTE))
    assert is_urgent(_relato(severity=Gravidade.GRAVE))
    assert not is_urgent(_relato(severity=Gravidade.LEVE))
    assert not is_urgent(_relato())


def test_urgencia_ignora_campos_nao_relacionados():
    r = _relato(type=TipoRelato.URGENTE)
    variantes = [
        replace(r, description="outra coisa"),
        replace(r, status=StatusRelato.RESOLVIDO, response="ok"),
        replace(r, medication="Dexametasona", date="2020-01-01", id="zz"),
    ]
    assert all(is_urgent(v) == is_urgent(r) for v in variantes)


def test_transicoes_nunca_voltam():
    for de in StatusRelato:
        for para in StatusRelato:
            if pode_transitar(de, para):
                assert ORDEM_STATUS[para] > ORDEM_STATUS[de]
    assert pode_transitar(StatusRelato.PENDENTE, StatusRelato.RESOLVIDO)
    assert not any(pode_transitar(StatusRelato.RESOLVIDO, s) for s in StatusRelato)

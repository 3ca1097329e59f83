from datetime import date

import pytest

from oncologia.domain.erros import (
    EmptyInstructions,
    InvalidRecommendation,
    InvalidTransition,
    UnknownReport,
    ValidationError,
)
from oncologia.domain.models import (
    EfeitoColateral,
    Gravidade,
    LocalEfeito,
    Recomendacao,
    RelatoPaciente,
    StatusRelato,
    TipoRelato,
)
from oncologia.domain.policies import ORDEM_STATUS
from oncologia.usecases.triagem import MotorTriagem


def _relato(id, type=TipoRelato.EFEITO_COLATERAL, severity=None, status=StatusRelato.PENDENTE):
    return RelatoPaciente(id=id, date="2025-11-07", type=type, description=f"relato {id}",
                          severity=severity, status=status)


@pytest.fixture
def motor():
    return MotorTriagem([_relato("r1"), _relato("r2", type=TipoRelato.DUVIDA)])


def test_orientacao_resolve_relato(motor):
    res = motor.submit_guidance("r1", "tratamento_domiciliar", "Beber água")

    assert res.ok
    g = res.valor
    assert g.report_id == "r1"
    assert g.recommendation is Recomendacao.TRATAMENTO_DOMICILIAR
    assert g.date == date.today().isoformat()
    r1 = next(r for r in motor.list_reports() if r.id == "r1")
    assert r1.status is StatusRelato.RESOLVIDO
    assert r1.response == "Beber água"
    assert motor.find_guidance_history("r1") == [g]


def test_relato_desconhecido_nao_altera_nada(motor):
    antes_relatos = motor.list_reports()
    antes_orient = motor.list_guidances()

    res = motor.submit_guidance("bad-id", Recomendacao.ACOMPANHAMENTO, "x")

    assert isinstance(res.erro, UnknownReport)
    assert motor.list_reports() == antes_relatos
    assert motor.list_guidances() == antes_orient


@pytest.mark.parametrize("instrucoes", ["", "   ", None])
def test_instrucoes_vazias(motor, instrucoes):
    res = motor.submit_guidance("r1", "acompanhamento", instrucoes)
    assert isinstance(res.erro, EmptyInstructions)
    assert motor.get_report("r1").status is StatusRelato.PENDENTE
    assert motor.list_guidances() == []


def test_instrucoes_nao_textuais_nao_lancam_excecao(motor):
    res = motor.submit_guidance("r1", "acompanhamento", 42)
    assert res.ok
    assert res.valor.instructions == "42"
    assert motor.get_report("r1").response == "42"

    res = motor.submit_report("duvida", 7)
    assert res.ok
    assert res.valor.description == "7"


def test_instrucoes_vazias_verificadas_antes_do_relato(motor):
    res = motor.submit_guidance("bad-id", "acompanhamento", "")
    assert isinstance(res.erro, EmptyInstructions)


def test_recomendacao_invalida(motor):
    res = motor.submit_guidance("r1", "rezar", "x")
    assert isinstance(res.erro, InvalidRecommendation)
    assert motor.get_report("r1").status is StatusRelato.PENDENTE


def test_urgentes():
    motor = MotorTriagem([
        _relato("a", type=TipoRelato.URGENTE),
        _relato("b", severity=Gravidade.GRAVE),
        _relato("c", type=TipoRelato.DUVIDA, severity=Gravidade.LEVE),
    ])
    assert {r.id for r in motor.list_urgent()} == {"a", "b"}


def test_listagem_mais_recente_primeiro_e_pendentes(motor):
    assert [r.id for r in motor.list_reports()] == ["r2", "r1"]
    motor.submit_guidance("r2", "acompanhamento", "Sim, pode.")
    assert [r.id for r in motor.list_pending()] == ["r1"]


def test_em_analise_e_depois_resolvido(motor):
    res = motor.mark_in_analysis("r1")
    assert res.valor.status is StatusRelato.EM_ANALISE
    assert motor.mark_in_analysis("r1").ok
    assert motor.list_pending() == [motor.get_report("r2")]

    motor.submit_guidance("r1", "visita_hospital", "Procurar pronto atendimento")
    res = motor.mark_in_analysis("r1")
    assert isinstance(res.erro, InvalidTransition)
    assert motor.get_report("r1").status is StatusRelato.RESOLVIDO


def test_em_analise_relato_desconhecido(motor):
    assert isinstance(motor.mark_in_analysis("nada").erro, UnknownReport)


def test_status_nunca_regride(motor):
    historico = {r.id: [r.status] for r in motor.list_reports()}
    operacoes = [
        lambda: motor.mark_in_analysis("r1"),
        lambda: motor.submit_guidance("r1", "acompanhamento", "A"),
        lambda: motor.mark_in_analysis("r1"),
        lambda: motor.submit_guidance("r2", "acompanhamento", "B"),
        lambda: motor.mark_in_analysis("r2"),
        lambda: motor.submit_guidance("r1", "visita_hospital", "C"),
    ]
    for op in operacoes:
        op()
        for r in motor.list_reports():
            historico[r.id].append(r.status)
    for estados in historico.values():
        ordens = [ORDEM_STATUS[s] for s in estados]
        assert ordens == sorted(ordens)


def test_resposta_igual_a_orientacao_mais_recente(motor):
    motor.submit_guidance("r1", "acompanhamento", "Primeira")
    motor.submit_guidance("r1", "visita_hospital", "Segunda")
    historico = motor.find_guidance_history("r1")
    assert [g.instructions for g in historico] == ["Primeira", "Segunda"]
    assert motor.get_report("r1").response == historico[-1].instructions


def test_submit_report():
    motor = MotorTriagem.create()
    res = motor.submit_report("urgente", "  Febre alta  ", medication="", severity=" ")
    r = res.valor
    assert r.status is StatusRelato.PENDENTE
    assert r.description == "Febre alta"
    assert r.medication is None
    assert r.severity is None
    assert motor.list_urgent() == [r]

    res = motor.submit_report("reclamacao", "")
    assert isinstance(res.erro, ValidationError)
    assert res.erro.campos == ("description", "type")


def test_relato_a_partir_de_efeito_colateral():
    efeito = EfeitoColateral(id="5", date="2025-11-07", medication="Ondansetrona",
                             effect="Náusea intensa", severity=Gravidade.GRAVE,
                             location=LocalEfeito.HOSPITALAR)
    motor = MotorTriagem.create()
    r = motor.report_from_side_effect(efeito).valor
    assert r.type is TipoRelato.EFEITO_COLATERAL
    assert r.medication == "Ondansetrona"
    assert r.severity is Gravidade.GRAVE
    assert "Náusea intensa" in r.description
    assert motor.list_urgent() == [r]


def test_dados_de_demonstracao_consistentes():
    motor = MotorTriagem.create(seed=True)
    assert [r.id for r in motor.list_pending()] == ["1"]
    for r in motor.list_reports():
        historico = motor.find_guidance_history(r.id)
        if r.status is StatusRelato.RESOLVIDO:
            assert historico and r.response == historico[-1].instructions
        else:
            assert not historico

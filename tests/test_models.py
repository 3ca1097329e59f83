import pytest

from oncologia.domain.models import (
    EfeitoColateral,
    Exame,
    FaseTratamento,
    Gravidade,
    LocalEfeito,
    Orientacao,
    Recomendacao,
    RelatoPaciente,
    StatusExame,
    StatusRelato,
    StatusTratamento,
    TABELAS,
    Tratamento,
    novo_id,
)


def test_from_row_converte_enums_e_id():
    t = Tratamento.from_row({
        "id": 7,
        "date": "2025-11-01",
        "phase": "Quimioterapia",
        "description": "Sessão 1 - Protocolo AC",
        "status": "Em andamento",
    })
    assert t.id == "7"
    assert t.phase is FaseTratamento.QUIMIOTERAPIA
    assert t.status is StatusTratamento.EM_ANDAMENTO


def test_from_row_aplica_padroes():
    e = EfeitoColateral.from_row({"date": "2025-11-07", "medication": "Ondansetrona", "effect": "Náusea"})
    assert e.severity is Gravidade.LEVE
    assert e.location is LocalEfeito.DOMICILIAR
    assert e.id is None

    ex = Exame.from_row({"date": "2025-11-10", "type": "Tomografia"})
    assert ex.status is StatusExame.SOLICITADO
    assert ex.results is None


def test_from_row_rejeita_valor_fora_do_dominio():
    with pytest.raises(ValueError):
        Tratamento.from_row({"date": "2025-11-01", "phase": "Homeopatia", "description": "x"})


def test_to_row_sem_id_e_com_valores_simples():
    o = Orientacao(id="g1", date="2025-11-06", report_id="2",
                   recommendation=Recomendacao.TRATAMENTO_DOMICILIAR, instructions="Beber água")
    row = o.to_row()
    assert "id" not in row
    assert row["recommendation"] == "tratamento_domiciliar"
    assert row["report_id"] == "2"


def test_relato_padrao_pendente():
    r = RelatoPaciente.from_row({"date": "2025-11-07", "type": "duvida", "description": "?"})
    assert r.status is StatusRelato.PENDENTE
    assert r.severity is None
    assert r.response is None


def test_novo_id_estritamente_crescente():
    ids = [int(novo_id()) for _ in range(50)]
    assert ids == sorted(ids)
    assert len(set(ids)) == len(ids)


def test_tabelas_consumidas():
    assert set(TABELAS) == {
        "treatments", "exams", "prescriptions", "nurse_prescriptions",
        "side_effects", "patient_reports", "guidances",
    }

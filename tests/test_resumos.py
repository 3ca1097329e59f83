import random

from oncologia.domain.models import (
    EfeitoColateral,
    Exame,
    FaseTratamento,
    Gravidade,
    Prescricao,
    StatusExame,
    StatusTratamento,
    Tratamento,
)
from oncologia.usecases.resumos import contar_status, resumo_enfermagem, resumo_medico
from oncologia.usecases.triagem import MotorTriagem


def _tratamentos():
    return [
        Tratamento(id="1", date="2025-11-01", phase=FaseTratamento.QUIMIOTERAPIA,
                   description="Sessão 1 - Protocolo AC", status=StatusTratamento.EM_ANDAMENTO),
        Tratamento(id="2", date="2025-10-15", phase=FaseTratamento.RADIOTERAPIA,
                   description="Planejamento inicial", status=StatusTratamento.CONCLUIDO),
        Tratamento(id="3", date="2025-11-08", phase=FaseTratamento.HORMONIOTERAPIA,
                   description="Sessão 2 - Protocolo AD", status=StatusTratamento.EM_ANDAMENTO),
    ]


def _exames():
    return [
        Exame(id="1", date="2025-11-05", type="Hemograma completo",
              status=StatusExame.REALIZADO, results="Valores dentro da normalidade"),
        Exame(id="2", date="2025-11-10", type="Tomografia"),
    ]


def test_resumo_medico():
    prescricoes = [Prescricao(id="1", date="2025-11-01", medication="Ondansetrona", dosage="8mg")]
    res = resumo_medico(_tratamentos(), _exames(), prescricoes)

    assert res["tratamentos"] == {"total": 3, "pendentes": 2, "resolvidos": 1, "em_andamento": 2}
    assert res["exames"] == {"total": 2, "pendentes": 1, "resolvidos": 1}
    assert res["prescricoes"]["total"] == 1


def test_contagem_ignora_repeticao_e_ordem():
    exames = _exames()
    repetidos = exames + exames + [exames[0]]
    random.Random(3).shuffle(repetidos)

    pend = lambda e: e.status == StatusExame.SOLICITADO
    assert contar_status(repetidos, pendente=pend) == contar_status(exames, pendente=pend)


def test_resumo_medico_aceita_geradores():
    res = resumo_medico((t for t in _tratamentos()), iter(_exames()), iter([]))
    assert res["tratamentos"]["em_andamento"] == 2


def test_resumo_enfermagem():
    motor = MotorTriagem.create(seed=True)
    motor.submit_report("urgente", "Febre alta")
    efeitos = [
        EfeitoColateral(id="1", date="2025-11-07", medication="X", effect="Y", severity=Gravidade.GRAVE),
        EfeitoColateral(id="2", date="2025-11-07", medication="X", effect="Z"),
    ]
    res = resumo_enfermagem(motor, [], efeitos + efeitos)

    assert res["relatos"] == {"total": 4, "pendentes": 2, "resolvidos": 2, "em_analise": 0, "urgentes": 1}
    assert res["orientacoes"]["total"] == 2
    assert res["prescricoes_enfermagem"]["total"] == 0
    assert res["efeitos_colaterais"] == {"total": 2, "pendentes": 0, "resolvidos": 0, "graves": 1}

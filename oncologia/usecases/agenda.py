# oncologia/usecases/agenda.py
"""
UC: Agenda do paciente (procedimentos agendados e checklist de medicação).
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Tuple

from oncologia.config import DEFAULTS
from oncologia.domain.models import DoseMedicamento, Procedimento


def _parse_iso(s: str) -> date:
    return date.fromisoformat(str(s)[:10])


def dias_ate(procedimento: Procedimento, hoje: Optional[date] = None) -> int:
    hoje = hoje or date.today()
    return (_parse_iso(procedimento.date) - hoje).days


def procedimentos_proximos(
    procedimentos: Iterable[Procedimento],
    hoje: Optional[date] = None,
    janela_dias: Optional[int] = None,
) -> List[Tuple[Procedimento, int]]:
    """Procedimentos dentro da janela (padrão: 7 dias), com os dias restantes.

    Procedimentos já passados ficam de fora. Ordenado pela data.
    """
    hoje = hoje or date.today()
    janela = DEFAULTS.janela_procedimentos_dias if janela_dias is None else janela_dias
    out = []
    for p in procedimentos:
        dias = dias_ate(p, hoje)
        if 0 <= dias <= janela:
            out.append((p, dias))
    out.sort(key=lambda x: x[1])
    return out


def alternar_dose(doses: Iterable[DoseMedicamento], dose_id: str) -> List[DoseMedicamento]:
    """Devolve nova lista com a dose ``dose_id`` marcada/desmarcada como tomada."""
    doses = list(doses)
    if not any(d.id == dose_id for d in doses):
        raise KeyError(dose_id)
    return [replace(d, taken=not d.taken) if d.id == dose_id else d for d in doses]


def resumo_doses(doses: Iterable[DoseMedicamento]) -> Dict[str, int]:
    doses = list(doses)
    tomadas = sum(1 for d in doses if d.taken)
    return {"total": len(doses), "tomadas": tomadas, "pendentes": len(doses) - tomadas}


def agenda_demo(hoje: Optional[date] = None) -> Tuple[List[Procedimento], List[DoseMedicamento]]:
    """Procedimentos e doses de exemplo, relativos a ``hoje``."""
    hoje = hoje or date.today()

    def iso(dias: int) -> str:
        return (hoje + timedelta(days=dias)).isoformat()

    procedimentos = [
        Procedimento("1", iso(3), "Tomografia de Tórax",
                     "Jejum de 4 horas. Não suspender medicações de uso contínuo."),
        Procedimento("2", iso(8), "Consulta Oncologista",
                     "Levar exames anteriores e lista de medicamentos."),
        Procedimento("3", iso(15), "Sessão de Quimioterapia",
                     "Alimentação leve. Hidratação adequada. Chegar 30 min antes."),
    ]
    doses = [
        DoseMedicamento("1", "Ondansetrona", "8mg", "08:00", iso(0), taken=True),
        DoseMedicamento("2", "Ondansetrona", "8mg", "16:00", iso(0)),
        DoseMedicamento("3", "Dexametasona", "4mg", "08:00", iso(0), taken=True),
        DoseMedicamento("4", "Dexametasona", "4mg", "20:00", iso(0)),
    ]
    return procedimentos, doses

# oncologia/domain/models.py
"""
Modelos (dataclasses) do domínio.

Observações importantes:
- Todos os registros são imutáveis; "alterar" significa substituir por uma
  cópia (``dataclasses.replace``).
- Os nomes dos campos são os nomes das colunas das tabelas remotas.
- Campos de domínio fechado (fase, status, gravidade...) são ``Enum`` e são
  validados em ``from_row``, nunca na exibição.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, fields, replace
from datetime import date
from enum import Enum
from typing import Any, ClassVar, Dict, Mapping, Optional, Tuple, Type


# -------------------------
# Enumerações
# -------------------------

class FaseTratamento(str, Enum):
    RADIOTERAPIA = "Radioterapia"
    QUIMIOTERAPIA = "Quimioterapia"
    IMUNOTERAPIA = "Imunoterapia"
    HORMONIOTERAPIA = "Hormonioterapia"
    CIRURGIA = "Cirurgia"
    ACOMPANHAMENTO = "Acompanhamento"


class StatusTratamento(str, Enum):
    PLANEJADO = "Planejado"
    EM_ANDAMENTO = "Em andamento"
    CONCLUIDO = "Concluído"
    SUSPENSO = "Suspenso"


class StatusExame(str, Enum):
    SOLICITADO = "solicitado"
    REALIZADO = "realizado"


class Gravidade(str, Enum):
    LEVE = "leve"
    MODERADO = "moderado"
    GRAVE = "grave"


class LocalEfeito(str, Enum):
    DOMICILIAR = "domiciliar"
    HOSPITALAR = "hospitalar"


class TipoRelato(str, Enum):
    EFEITO_COLATERAL = "efeito_colateral"
    DUVIDA = "duvida"
    URGENTE = "urgente"


class StatusRelato(str, Enum):
    PENDENTE = "pendente"
    EM_ANALISE = "em_analise"
    RESOLVIDO = "resolvido"


class Recomendacao(str, Enum):
    VISITA_HOSPITAL = "visita_hospital"
    TRATAMENTO_DOMICILIAR = "tratamento_domiciliar"
    ACOMPANHAMENTO = "acompanhamento"


# -------------------------
# Identificadores e datas
# -------------------------

_id_lock = threading.Lock()
_ultimo_id = 0


def novo_id() -> str:
    """Token local derivado do relógio (ms), estritamente crescente no processo."""
    global _ultimo_id
    with _id_lock:
        candidato = time.time_ns() // 1_000_000
        if candidato <= _ultimo_id:
            candidato = _ultimo_id + 1
        _ultimo_id = candidato
        return str(candidato)


def hoje_iso() -> str:
    """Data civil local no formato YYYY-MM-DD."""
    return date.today().isoformat()


# -------------------------
# Base dos registros
# -------------------------

def _coerce(valor: Any, tipo: Type[Enum]) -> Any:
    if valor is None or isinstance(valor, tipo):
        return valor
    return tipo(str(valor).strip())


@dataclass(frozen=True)
class Registro:
    """Base dos registros persistidos; subclasses declaram a tabela e as regras."""
    TABELA: ClassVar[str] = ""
    OBRIGATORIOS: ClassVar[Tuple[str, ...]] = ()
    ENUMS: ClassVar[Dict[str, Type[Enum]]] = {}
    PADROES: ClassVar[Dict[str, Any]] = {}

    @classmethod
    def from_row(cls, row: Mapping[str, Any]):
        """Constrói o registro a partir de uma linha do armazenamento.

        Lança ``ValueError`` para valores fora das enumerações e
        ``TypeError`` quando falta coluna obrigatória.
        """
        kwargs: Dict[str, Any] = {}
        for f in fields(cls):
            if f.name in row:
                valor = row[f.name]
            elif f.name in cls.PADROES:
                valor = cls.PADROES[f.name]
            else:
                continue
            if f.name == "id" and valor is not None:
                valor = str(valor)
            elif f.name in cls.ENUMS:
                valor = _coerce(valor, cls.ENUMS[f.name])
            kwargs[f.name] = valor
        return cls(**kwargs)

    def to_row(self) -> Dict[str, Any]:
        """Linha para inserção (sem ``id``: a identidade é do armazenamento)."""
        out: Dict[str, Any] = {}
        for f in fields(self):
            if f.name == "id":
                continue
            valor = getattr(self, f.name)
            out[f.name] = valor.value if isinstance(valor, Enum) else valor
        return out

    def with_id(self, novo: str):
        return replace(self, id=novo)


# -------------------------
# Registros do médico
# -------------------------

@dataclass(frozen=True)
class Tratamento(Registro):
    """Fase do tratamento oncológico registrada pelo médico."""
    TABELA: ClassVar[str] = "treatments"
    OBRIGATORIOS: ClassVar[Tuple[str, ...]] = ("phase", "description")
    ENUMS: ClassVar[Dict[str, Type[Enum]]] = {"phase": FaseTratamento, "status": StatusTratamento}
    PADROES: ClassVar[Dict[str, Any]] = {"status": StatusTratamento.PLANEJADO}

    date: str
    phase: FaseTratamento
    description: str
    status: StatusTratamento = StatusTratamento.PLANEJADO
    id: Optional[str] = None


@dataclass(frozen=True)
class Exame(Registro):
    """Exame solicitado ou já realizado."""
    TABELA: ClassVar[str] = "exams"
    OBRIGATORIOS: ClassVar[Tuple[str, ...]] = ("type",)
    ENUMS: ClassVar[Dict[str, Type[Enum]]] = {"status": StatusExame}
    PADROES: ClassVar[Dict[str, Any]] = {"status": StatusExame.SOLICITADO}

    date: str
    type: str
    status: StatusExame = StatusExame.SOLICITADO
    results: Optional[str] = None
    id: Optional[str] = None


@dataclass(frozen=True)
class Prescricao(Registro):
    TABELA: ClassVar[str] = "prescriptions"
    OBRIGATORIOS: ClassVar[Tuple[str, ...]] = ("medication", "dosage")

    date: str
    medication: str
    dosage: str
    frequency: str = ""
    id: Optional[str] = None


# -------------------------
# Registros da enfermagem e do paciente
# -------------------------

@dataclass(frozen=True)
class PrescricaoEnfermagem(Registro):
    TABELA: ClassVar[str] = "nurse_prescriptions"
    OBRIGATORIOS: ClassVar[Tuple[str, ...]] = ("medication", "dosage")

    date: str
    medication: str
    dosage: str
    duration: str = ""
    reason: Optional[str] = None
    id: Optional[str] = None


@dataclass(frozen=True)
class EfeitoColateral(Registro):
    """Efeito colateral relatado pelo paciente (nunca alterado depois)."""
    TABELA: ClassVar[str] = "side_effects"
    OBRIGATORIOS: ClassVar[Tuple[str, ...]] = ("medication", "effect")
    ENUMS: ClassVar[Dict[str, Type[Enum]]] = {"severity": Gravidade, "location": LocalEfeito}
    PADROES: ClassVar[Dict[str, Any]] = {
        "severity": Gravidade.LEVE,
        "location": LocalEfeito.DOMICILIAR,
    }

    date: str
    medication: str
    effect: str
    severity: Gravidade = Gravidade.LEVE
    location: LocalEfeito = LocalEfeito.DOMICILIAR
    id: Optional[str] = None


@dataclass(frozen=True)
class RelatoPaciente(Registro):
    """Relato do paciente aguardando resposta da enfermagem."""
    TABELA: ClassVar[str] = "patient_reports"
    OBRIGATORIOS: ClassVar[Tuple[str, ...]] = ("type", "description")
    ENUMS: ClassVar[Dict[str, Type[Enum]]] = {
        "type": TipoRelato,
        "severity": Gravidade,
        "status": StatusRelato,
    }
    PADROES: ClassVar[Dict[str, Any]] = {"status": StatusRelato.PENDENTE}

    date: str
    type: TipoRelato
    description: str
    medication: Optional[str] = None
    severity: Optional[Gravidade] = None
    status: StatusRelato = StatusRelato.PENDENTE
    response: Optional[str] = None
    id: Optional[str] = None


@dataclass(frozen=True)
class Orientacao(Registro):
    """Orientação da enfermagem; ``report_id`` apenas referencia o relato."""
    TABELA: ClassVar[str] = "guidances"
    OBRIGATORIOS: ClassVar[Tuple[str, ...]] = ("report_id", "recommendation", "instructions")
    ENUMS: ClassVar[Dict[str, Type[Enum]]] = {"recommendation": Recomendacao}

    date: str
    report_id: str
    recommendation: Recomendacao
    instructions: str
    id: Optional[str] = None


# -------------------------
# Agenda do paciente (não persistida)
# -------------------------

@dataclass(frozen=True)
class Procedimento:
    """Procedimento agendado (exame, consulta, sessão)."""
    id: str
    date: str
    name: str
    preparation: str = ""


@dataclass(frozen=True)
class DoseMedicamento:
    """Item do checklist diário de medicação."""
    id: str
    name: str
    dosage: str
    time: str
    date: str
    taken: bool = False


# Tabelas consumidas pelo gateway, na ordem de criação
TABELAS: Dict[str, Type[Registro]] = {
    cls.TABELA: cls
    for cls in (
        Tratamento,
        Exame,
        Prescricao,
        PrescricaoEnfermagem,
        EfeitoColateral,
        RelatoPaciente,
        Orientacao,
    )
}

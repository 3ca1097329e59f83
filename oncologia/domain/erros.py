# oncologia/domain/erros.py
"""
Taxonomia de erros e o tipo ``Resultado``.

Repositórios e o motor de triagem não lançam exceções para fora de seus
limites: toda operação falível devolve um ``Resultado`` que o chamador
precisa inspecionar. Os erros continuam sendo subclasses de ``Exception``
para que ``Resultado.unwrap()`` possa relançá-los quando conveniente.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Iterable, Optional, Tuple, TypeVar


T = TypeVar("T")


class OncologiaError(Exception):
    """Base de todos os erros do domínio."""


# -------------------------
# Armazenamento / repositórios
# -------------------------

class StoreError(OncologiaError):
    """Falha reportada pelo gateway de persistência."""

    def __init__(self, causa: str):
        super().__init__(causa)
        self.causa = causa


class RepositoryError(OncologiaError):
    """Base dos erros de repositório."""


class ValidationError(RepositoryError):
    """Campos obrigatórios ausentes ou valores fora do domínio."""

    def __init__(self, campos: Iterable[str], detalhe: Optional[str] = None):
        self.campos: Tuple[str, ...] = tuple(campos)
        msg = f"campos inválidos ou ausentes: {', '.join(self.campos)}"
        if detalhe:
            msg = f"{msg} ({detalhe})"
        super().__init__(msg)


class StoreRejected(RepositoryError):
    """O armazenamento recusou a operação; o cache local não foi alterado."""

    def __init__(self, causa: str):
        super().__init__(f"armazenamento recusou a operação: {causa}")
        self.causa = causa


class RepositoryTimeout(RepositoryError):
    """Sem resposta do armazenamento dentro do limite configurado."""

    def __init__(self, tabela: str, segundos: float):
        super().__init__(f"tempo esgotado ({segundos}s) aguardando '{tabela}'")
        self.tabela = tabela
        self.segundos = segundos


class OperationInProgress(RepositoryError):
    """Já existe um add/refresh pendente para este repositório."""

    def __init__(self, tabela: str):
        super().__init__(f"operação em andamento em '{tabela}'")
        self.tabela = tabela


# -------------------------
# Triagem
# -------------------------

class TriageError(OncologiaError):
    """Uso indevido do motor de triagem; nunca é repetido automaticamente."""


class UnknownReport(TriageError):
    def __init__(self, report_id: str):
        super().__init__(f"relato desconhecido: {report_id!r}")
        self.report_id = report_id


class InvalidTransition(TriageError):
    def __init__(self, de: str, para: str):
        super().__init__(f"transição inválida: {de} -> {para}")
        self.de = de
        self.para = para


class EmptyInstructions(TriageError):
    def __init__(self):
        super().__init__("instruções da orientação não podem ser vazias")


class InvalidRecommendation(TriageError):
    def __init__(self, valor: object):
        super().__init__(f"recomendação inválida: {valor!r}")
        self.valor = valor


# -------------------------
# Resultado
# -------------------------

@dataclass(frozen=True)
class Resultado(Generic[T]):
    """Resultado explícito de uma operação falível (valor ou erro)."""
    valor: Optional[T] = None
    erro: Optional[OncologiaError] = None

    @property
    def ok(self) -> bool:
        return self.erro is None

    @classmethod
    def sucesso(cls, valor: Optional[T] = None) -> "Resultado[T]":
        return cls(valor=valor)

    @classmethod
    def falha(cls, erro: OncologiaError) -> "Resultado[T]":
        return cls(erro=erro)

    def unwrap(self) -> T:
        """Devolve o valor ou relança o erro carregado."""
        if self.erro is not None:
            raise self.erro
        return self.valor

# oncologia/infra/repositories.py
"""
Repositórios de registros: cache local + sincronização com o gateway.

Classes:
- RecordRepository (genérico)
- TratamentoRepo
- ExameRepo
- PrescricaoRepo
- PrescricaoEnfermagemRepo
- EfeitoColateralRepo

Cada repositório é dono exclusivo do seu cache. O cache só muda por
``refresh()`` (substituição completa) ou por ``add()``, que insere no
armazenamento e em seguida faz um ``refresh()`` aguardado: não há inclusão
otimista, então o cache sempre reflete a identidade e a ordem do
armazenamento.

Lacuna de visibilidade: se a inserção é aceita mas o ``refresh()`` seguinte
falha, ``add()`` devolve o erro do refresh e o novo registro fica invisível
em ``all()`` até o próximo refresh bem-sucedido.
"""

from __future__ import annotations

import asyncio
from dataclasses import fields
from enum import Enum
from typing import Any, Awaitable, Dict, Generic, List, Mapping, Optional, Type, TypeVar

from .gateway import PersistenceGateway
from .logger import log_repositorio, log_transaction
from oncologia.config import DEFAULTS
from oncologia.domain.erros import (
    OperationInProgress,
    RepositoryError,
    RepositoryTimeout,
    Resultado,
    StoreError,
    StoreRejected,
    ValidationError,
)
from oncologia.domain.models import (
    EfeitoColateral,
    Exame,
    Prescricao,
    PrescricaoEnfermagem,
    Registro,
    Tratamento,
    hoje_iso,
)
from oncologia.domain.policies import validar_candidato


T = TypeVar("T", bound=Registro)


# -------------------------
# Helpers
# -------------------------

def _normalize_str(x: Any) -> Any:
    if isinstance(x, str):
        return x.strip()
    if isinstance(x, Enum):
        return x.value
    return x


def _descartar_resultado(tarefa: "asyncio.Future") -> None:
    # chamada abandonada após o timeout: só consome a exceção, se houver
    if not tarefa.cancelled() and tarefa.exception() is not None:
        log_repositorio("gateway_exception_tardia", "-", error=repr(tarefa.exception()))


async def chamar_gateway(chamada: Awaitable[Resultado], tabela: str, timeout_s: float) -> Resultado:
    """Executa uma chamada ao gateway com limite de tempo.

    Erros do armazenamento viram ``StoreRejected``; estouro do limite vira
    ``RepositoryTimeout``. Nada é lançado para o chamador.

    A chamada roda protegida por ``asyncio.shield``: o timeout desiste de
    esperar, mas a operação já iniciada segue até terminar. Quem precisa
    saber quando ela termina passa uma ``Task`` em ``chamada``.
    """
    tarefa = asyncio.ensure_future(chamada)
    try:
        res = await asyncio.wait_for(asyncio.shield(tarefa), timeout=timeout_s)
    except asyncio.TimeoutError:
        tarefa.add_done_callback(_descartar_resultado)
        log_repositorio("timeout", tabela, segundos=timeout_s)
        return Resultado.falha(RepositoryTimeout(tabela, timeout_s))
    except Exception as e:
        log_repositorio("gateway_exception", tabela, error=repr(e))
        return Resultado.falha(StoreRejected(repr(e)))
    if res.ok:
        return res
    erro = res.erro
    if isinstance(erro, RepositoryError):
        return res
    causa = erro.causa if isinstance(erro, StoreError) else str(erro)
    return Resultado.falha(StoreRejected(causa))


class RecordRepository(Generic[T]):
    MODELO: Type[Registro] = Registro

    def __init__(self, gateway: PersistenceGateway, timeout_s: Optional[float] = None):
        self.gateway = gateway
        self.timeout_s = DEFAULTS.timeout_gateway_s if timeout_s is None else timeout_s
        self._cache: List[T] = []
        self._em_andamento = False
        # última chamada ao gateway; pode seguir viva depois de um timeout
        self._pendente: Optional[asyncio.Task] = None

    @property
    def tabela(self) -> str:
        return self.MODELO.TABELA

    @property
    def em_andamento(self) -> bool:
        """True enquanto um add/refresh aguarda o armazenamento.

        Continua True depois de um ``RepositoryTimeout`` até a chamada
        abandonada ao gateway realmente terminar.
        """
        if self._em_andamento:
            return True
        return self._pendente is not None and not self._pendente.done()

    def all(self) -> List[T]:
        """Cache atual, sem tocar no gateway."""
        return list(self._cache)

    # --------- operações públicas ---------
    async def refresh(self) -> Resultado[None]:
        if self.em_andamento:
            return Resultado.falha(OperationInProgress(self.tabela))
        self._em_andamento = True
        try:
            res = await self._refresh()
        finally:
            self._em_andamento = False
        if res.ok:
            log_transaction("refresh", {"tabela": self.tabela}, result=len(self._cache))
        else:
            log_transaction("refresh", {"tabela": self.tabela}, error=str(res.erro))
        return res

    async def add(self, candidato: Mapping[str, Any]) -> Resultado[T]:
        """Valida, insere e sincroniza. ``candidato`` nunca é alterado."""
        if self.em_andamento:
            return Resultado.falha(OperationInProgress(self.tabela))

        invalidos = validar_candidato(self.MODELO, candidato)
        if invalidos:
            log_repositorio("validation", self.tabela, campos=invalidos)
            return Resultado.falha(ValidationError(invalidos))

        registro = self._build(candidato)
        row = registro.to_row()

        self._em_andamento = True
        try:
            res = await self._chamar(self.gateway.insert(self.tabela, row))
            if not res.ok:
                log_transaction("add", {"tabela": self.tabela, **row}, error=str(res.erro))
                return res
            log_repositorio("add", self.tabela, **row)

            ref = await self._refresh()
            if not ref.ok:
                log_transaction("add_refresh", {"tabela": self.tabela}, error=str(ref.erro))
                return Resultado.falha(ref.erro)
        finally:
            self._em_andamento = False

        salvo = self._localizar(row) or registro
        log_transaction("add", {"tabela": self.tabela}, result=salvo.id)
        return Resultado.sucesso(salvo)

    # --------- util interno ---------
    def _build(self, candidato: Mapping[str, Any]) -> T:
        """Monta o registro carimbando ``date`` com a data de hoje."""
        dados: Dict[str, Any] = {}
        for f in fields(self.MODELO):
            if f.name in ("id", "date") or f.name not in candidato:
                continue
            valor = _normalize_str(candidato[f.name])
            # enumerado em branco assume o padrão do modelo
            if f.name in self.MODELO.ENUMS and (valor is None or valor == ""):
                continue
            dados[f.name] = valor
        dados["date"] = hoje_iso()
        return self.MODELO.from_row(dados)

    def _localizar(self, row: Mapping[str, Any]) -> Optional[T]:
        # cache vem do mais recente para o mais antigo
        for r in self._cache:
            if r.to_row() == dict(row):
                return r
        return None

    async def _chamar(self, chamada: Awaitable[Resultado]) -> Resultado:
        self._pendente = asyncio.ensure_future(chamada)
        return await chamar_gateway(self._pendente, self.tabela, self.timeout_s)

    async def _refresh(self) -> Resultado[None]:
        res = await self._chamar(
            self.gateway.list(self.tabela, order_column="id", ascending=False)
        )
        if not res.ok:
            return Resultado.falha(res.erro)
        try:
            novos = [self.MODELO.from_row(r) for r in (res.valor or [])]
        except (ValueError, TypeError) as e:
            return Resultado.falha(StoreRejected(f"linha inválida em {self.tabela}: {e}"))
        self._cache = novos
        log_repositorio("refresh", self.tabela, linhas=len(novos))
        return Resultado.sucesso()


# -------------------------
# Repositórios concretos
# -------------------------

class TratamentoRepo(RecordRepository[Tratamento]):
    MODELO = Tratamento


class ExameRepo(RecordRepository[Exame]):
    MODELO = Exame


class PrescricaoRepo(RecordRepository[Prescricao]):
    MODELO = Prescricao


class PrescricaoEnfermagemRepo(RecordRepository[PrescricaoEnfermagem]):
    MODELO = PrescricaoEnfermagem


class EfeitoColateralRepo(RecordRepository[EfeitoColateral]):
    MODELO = EfeitoColateral


REPOSITORIOS: Dict[str, Type[RecordRepository]] = {
    "tratamentos": TratamentoRepo,
    "exames": ExameRepo,
    "prescricoes": PrescricaoRepo,
    "prescricoes_enfermagem": PrescricaoEnfermagemRepo,
    "efeitos": EfeitoColateralRepo,
}


def criar_repositorios(
    gateway: PersistenceGateway, timeout_s: Optional[float] = None
) -> Dict[str, RecordRepository]:
    """Um repositório de cada tipo compartilhando o mesmo gateway."""
    return {nome: cls(gateway, timeout_s=timeout_s) for nome, cls in REPOSITORIOS.items()}

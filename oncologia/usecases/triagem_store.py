# oncologia/usecases/triagem_store.py
"""
UC: Persistência da triagem (tabelas ``patient_reports`` e ``guidances``).

O gateway só oferece inserção e listagem, então:
- relatos são gravados uma única vez, como pendentes;
- orientações são gravadas em log (somente inserção);
- ``load()`` reconstrói o motor reaplicando as orientações, da mais antiga
  para a mais recente. O status resolvido e a resposta são sempre derivados
  das orientações, nunca lidos da linha do relato.

Obs.: ``em_analise`` não é persistido (não há atualização de linha).
Ids: relatos recém-submetidos têm id local até o próximo ``load()``, quando
passam a usar a identidade atribuída pelo armazenamento.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Optional

from oncologia.config import DEFAULTS
from oncologia.domain.erros import Resultado, StoreRejected
from oncologia.domain.models import Orientacao, RelatoPaciente, StatusRelato
from oncologia.infra.gateway import PersistenceGateway
from oncologia.infra.logger import log_system_event, log_transaction
from oncologia.infra.repositories import chamar_gateway
from oncologia.usecases.triagem import MotorTriagem


class ArquivoTriagem:
    def __init__(self, gateway: PersistenceGateway, timeout_s: Optional[float] = None):
        self.gateway = gateway
        self.timeout_s = DEFAULTS.timeout_gateway_s if timeout_s is None else timeout_s

    async def load(self) -> Resultado[MotorTriagem]:
        """Carrega relatos e orientações e devolve um motor novo."""
        tabela_r = RelatoPaciente.TABELA
        tabela_o = Orientacao.TABELA

        res_r = await chamar_gateway(
            self.gateway.list(tabela_r, order_column="id", ascending=True), tabela_r, self.timeout_s
        )
        if not res_r.ok:
            return Resultado.falha(res_r.erro)
        res_o = await chamar_gateway(
            self.gateway.list(tabela_o, order_column="id", ascending=True), tabela_o, self.timeout_s
        )
        if not res_o.ok:
            return Resultado.falha(res_o.erro)

        try:
            relatos = [RelatoPaciente.from_row(r) for r in res_r.valor or []]
            orientacoes = [Orientacao.from_row(r) for r in res_o.valor or []]
        except (ValueError, TypeError) as e:
            return Resultado.falha(StoreRejected(f"linha inválida: {e}"))

        motor = MotorTriagem.create()
        for relato in relatos:
            motor.adopt(replace(relato, status=StatusRelato.PENDENTE, response=None))
        orfas = 0
        for orientacao in orientacoes:
            if not motor.replay(orientacao):
                orfas += 1
        if orfas:
            log_system_event("orientacoes_orfas", {"quantidade": orfas}, level="warning")

        log_transaction(
            "triagem_load",
            {"relatos": len(relatos), "orientacoes": len(orientacoes)},
            result="ok",
        )
        return Resultado.sucesso(motor)

    async def save_report(self, relato: RelatoPaciente) -> Resultado[None]:
        row = replace(relato, status=StatusRelato.PENDENTE, response=None).to_row()
        res = await chamar_gateway(
            self.gateway.insert(RelatoPaciente.TABELA, row), RelatoPaciente.TABELA, self.timeout_s
        )
        if not res.ok:
            log_transaction("save_report", row, error=str(res.erro))
        return res

    async def save_guidance(self, orientacao: Orientacao) -> Resultado[None]:
        row = orientacao.to_row()
        res = await chamar_gateway(
            self.gateway.insert(Orientacao.TABELA, row), Orientacao.TABELA, self.timeout_s
        )
        if not res.ok:
            log_transaction("save_guidance", row, error=str(res.erro))
        return res

# oncologia/usecases/triagem.py
"""
UC: Triagem de relatos dos pacientes.

O ``MotorTriagem`` é o dono exclusivo do conjunto de relatos e do log de
orientações. Ele aplica a máquina de estados do relato
(pendente -> em_analise -> resolvido, ou pendente -> resolvido) e calcula
as visões derivadas (urgentes, pendentes). Nenhuma operação lança exceção
para o chamador: tudo volta em um ``Resultado``.

Obs.: a seleção do "relato atual" é estado da tela, não do motor.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Dict, Iterable, List, Optional

from oncologia.domain.erros import (
    EmptyInstructions,
    InvalidRecommendation,
    InvalidTransition,
    Resultado,
    UnknownReport,
    ValidationError,
)
from oncologia.domain.models import (
    EfeitoColateral,
    Gravidade,
    Orientacao,
    Recomendacao,
    RelatoPaciente,
    StatusRelato,
    TipoRelato,
    hoje_iso,
    novo_id,
)
from oncologia.domain.policies import is_urgent, pode_transitar, validar_candidato
from oncologia.infra.logger import log_transaction, log_triagem


class MotorTriagem:
    def __init__(
        self,
        relatos: Iterable[RelatoPaciente] = (),
        orientacoes: Iterable[Orientacao] = (),
    ):
        # dict preserva a ordem de submissão (mais antigo primeiro)
        self._relatos: Dict[str, RelatoPaciente] = {}
        self._orientacoes: List[Orientacao] = []
        for r in relatos:
            self._relatos[r.id] = r
        for o in orientacoes:
            self._orientacoes.append(o)

    @classmethod
    def create(cls, seed: bool = False) -> "MotorTriagem":
        """Cria o motor; ``seed=True`` carrega os relatos de demonstração."""
        if not seed:
            return cls()
        relatos, orientacoes = dados_demo()
        return cls(relatos, orientacoes)

    # --------- consultas ---------
    def list_reports(self) -> List[RelatoPaciente]:
        """Relatos do mais recente para o mais antigo (ordem de submissão)."""
        return list(reversed(list(self._relatos.values())))

    def list_urgent(self) -> List[RelatoPaciente]:
        return [r for r in self.list_reports() if is_urgent(r)]

    def list_pending(self) -> List[RelatoPaciente]:
        return [r for r in self.list_reports() if r.status == StatusRelato.PENDENTE]

    def list_guidances(self) -> List[Orientacao]:
        return list(self._orientacoes)

    def find_guidance_history(self, report_id: str) -> List[Orientacao]:
        return [o for o in self._orientacoes if o.report_id == report_id]

    def get_report(self, report_id: str) -> Optional[RelatoPaciente]:
        return self._relatos.get(report_id)

    # --------- transições ---------
    def submit_guidance(
        self,
        report_id: str,
        recommendation: Any,
        instructions: Any,
    ) -> Resultado[Orientacao]:
        """Registra a orientação e resolve o relato referenciado.

        Falhas (nenhum estado é alterado):
            - ``EmptyInstructions`` se ``instructions`` está em branco;
            - ``UnknownReport`` se o relato não existe;
            - ``InvalidRecommendation`` se a recomendação não é conhecida.
        """
        texto = "" if instructions is None else str(instructions).strip()
        if not texto:
            log_triagem("submit_guidance_rejected", report_id, motivo="empty_instructions")
            return Resultado.falha(EmptyInstructions())

        relato = self._relatos.get(report_id)
        if relato is None:
            log_triagem("submit_guidance_rejected", report_id, motivo="unknown_report")
            return Resultado.falha(UnknownReport(report_id))

        try:
            rec = Recomendacao(getattr(recommendation, "value", recommendation))
        except ValueError:
            return Resultado.falha(InvalidRecommendation(recommendation))

        orientacao = Orientacao(
            id=novo_id(),
            date=hoje_iso(),
            report_id=report_id,
            recommendation=rec,
            instructions=texto,
        )
        resolvido = replace(relato, status=StatusRelato.RESOLVIDO, response=texto)

        # as duas mutações acontecem juntas, depois de todas as validações
        self._orientacoes.append(orientacao)
        self._relatos[report_id] = resolvido

        log_triagem("submit_guidance", report_id, recommendation=rec.value)
        log_transaction("submit_guidance", {"report_id": report_id}, result=orientacao.id)
        return Resultado.sucesso(orientacao)

    def mark_in_analysis(self, report_id: str) -> Resultado[RelatoPaciente]:
        """pendente -> em_analise. Relato já em análise permanece como está."""
        relato = self._relatos.get(report_id)
        if relato is None:
            return Resultado.falha(UnknownReport(report_id))
        if relato.status == StatusRelato.EM_ANALISE:
            return Resultado.sucesso(relato)
        if not pode_transitar(relato.status, StatusRelato.EM_ANALISE):
            log_triagem("mark_in_analysis_rejected", report_id, status=relato.status.value)
            return Resultado.falha(
                InvalidTransition(relato.status.value, StatusRelato.EM_ANALISE.value)
            )
        novo = replace(relato, status=StatusRelato.EM_ANALISE)
        self._relatos[report_id] = novo
        log_triagem("mark_in_analysis", report_id)
        return Resultado.sucesso(novo)

    # --------- entrada de relatos ---------
    def submit_report(
        self,
        tipo: Any,
        description: Any,
        medication: Any = None,
        severity: Any = None,
    ) -> Resultado[RelatoPaciente]:
        """Registra uma dúvida, um aviso urgente ou um efeito colateral do paciente."""
        gravidade = getattr(severity, "value", severity)
        if isinstance(gravidade, str):
            gravidade = gravidade.strip() or None
        candidato = {
            "type": getattr(tipo, "value", tipo),
            "description": description,
            "severity": gravidade,
        }
        invalidos = validar_candidato(RelatoPaciente, candidato)
        if invalidos:
            return Resultado.falha(ValidationError(invalidos))

        relato = RelatoPaciente.from_row({
            "id": novo_id(),
            "date": hoje_iso(),
            "type": candidato["type"],
            "description": str(description).strip(),
            "medication": ("" if medication is None else str(medication).strip()) or None,
            "severity": gravidade,
            "status": StatusRelato.PENDENTE,
        })
        self._relatos[relato.id] = relato
        log_triagem("submit_report", relato.id, type=relato.type.value)
        return Resultado.sucesso(relato)

    def report_from_side_effect(self, efeito: EfeitoColateral) -> Resultado[RelatoPaciente]:
        """Abre um relato pendente a partir de um efeito colateral registrado."""
        return self.submit_report(
            TipoRelato.EFEITO_COLATERAL,
            f"{efeito.effect} ({efeito.location.value})",
            medication=efeito.medication,
            severity=efeito.severity,
        )

    # --------- persistência ---------
    def adopt(self, relato: RelatoPaciente) -> None:
        """Insere um relato já existente (carga do armazenamento)."""
        self._relatos[relato.id] = relato

    def replay(self, orientacao: Orientacao) -> bool:
        """Reaplica uma orientação carregada; devolve False se o relato não existe."""
        relato = self._relatos.get(orientacao.report_id)
        if relato is None or not orientacao.instructions.strip():
            return False
        self._orientacoes.append(orientacao)
        self._relatos[relato.id] = replace(
            relato, status=StatusRelato.RESOLVIDO, response=orientacao.instructions
        )
        return True


def dados_demo():
    """Relatos e orientação de exemplo do painel de enfermagem."""
    relatos = [
        RelatoPaciente(
            id="3",
            date="2025-11-05",
            type=TipoRelato.EFEITO_COLATERAL,
            description="Dor de cabeça persistente há 2 dias",
            severity=Gravidade.LEVE,
            status=StatusRelato.RESOLVIDO,
            response="Orientado hidratação e repouso. Caso persista, contatar equipe.",
        ),
        RelatoPaciente(
            id="2",
            date="2025-11-06",
            type=TipoRelato.DUVIDA,
            description="Posso tomar o medicamento com alimentos?",
            medication="Dexametasona",
            status=StatusRelato.RESOLVIDO,
            response="Medicação pode ser tomada com alimentos. Aumentar hidratação.",
        ),
        RelatoPaciente(
            id="1",
            date="2025-11-07",
            type=TipoRelato.EFEITO_COLATERAL,
            description="Náusea intensa após medicação matinal",
            medication="Ondansetrona",
            severity=Gravidade.MODERADO,
            status=StatusRelato.PENDENTE,
        ),
    ]
    orientacoes = [
        Orientacao(
            id="g3",
            date="2025-11-05",
            report_id="3",
            recommendation=Recomendacao.TRATAMENTO_DOMICILIAR,
            instructions="Orientado hidratação e repouso. Caso persista, contatar equipe.",
        ),
        Orientacao(
            id="g2",
            date="2025-11-06",
            report_id="2",
            recommendation=Recomendacao.TRATAMENTO_DOMICILIAR,
            instructions="Medicação pode ser tomada com alimentos. Aumentar hidratação.",
        ),
    ]
    return relatos, orientacoes

# oncologia/adapters/cli.py
"""
CLI do acompanhamento oncológico (Typer).

Comandos principais:
- migrate                          -> aplica migrações
- medico tratamento-add/tratamentos, exame-add/exames,
  prescricao-add/prescricoes, resumo
- paciente efeito-add/efeitos, relato-add, agenda
- enfermagem relatos/urgentes/pendentes, orientar, historico,
  prescricao-add/prescricoes, resumo

Esta camada é a única que exibe o texto bruto dos erros.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, Dict, List, Optional

import typer
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich import box

from oncologia.config import DB_PATH
from oncologia.domain.erros import OncologiaError, Resultado, UnknownReport
from oncologia.domain.models import Registro
from oncologia.domain.policies import is_urgent
from oncologia.infra.gateway import SQLiteGateway
from oncologia.infra.migrations import apply_migrations
from oncologia.infra.repositories import RecordRepository, criar_repositorios
from oncologia.usecases.agenda import agenda_demo, alternar_dose, procedimentos_proximos, resumo_doses
from oncologia.usecases.resumos import resumo_enfermagem, resumo_medico
from oncologia.usecases.triagem import MotorTriagem
from oncologia.usecases.triagem_store import ArquivoTriagem


app = typer.Typer(help="Acompanhamento Oncológico — CLI")
console = Console()

DB_OPTION = typer.Option(DB_PATH, "--db", help="Caminho do SQLite")
JSON_OPTION = typer.Option(False, "--json", help="Saída em JSON")


# -----------------------
# util
# -----------------------

def _print_json(obj) -> None:
    typer.echo(json.dumps(obj, ensure_ascii=False, indent=2))


def _registro_dict(r: Registro) -> Dict[str, Any]:
    return {"id": r.id, **r.to_row()}


def _falhar(erro: OncologiaError) -> None:
    console.print(Panel(str(erro), title=type(erro).__name__, border_style="red"))
    raise typer.Exit(code=1)


def _exigir(res: Resultado) -> Any:
    if not res.ok:
        _falhar(res.erro)
    return res.valor


def _display_table(data: Any, title: str = "Resultado") -> None:
    """Exibe os dados em tabelas formatadas usando Rich."""
    if not data:
        console.print(Panel("Nenhum dado encontrado", title=title, border_style="yellow"))
        return

    # Lista de registros
    if isinstance(data, list) and isinstance(data[0], dict):
        table = Table(title=title, box=box.ROUNDED)
        columns = list(data[0].keys())
        for column in columns:
            if column in ("id", "date"):
                table.add_column(column, justify="center")
            else:
                table.add_column(column)
        for row in data:
            values = []
            for col in columns:
                val = row.get(col)
                if col in ("status", "severity") and val:
                    if val in ("pendente", "grave", "solicitado"):
                        values.append(f"[bold red]{val}[/]")
                    elif val in ("resolvido", "leve", "realizado", "Concluído"):
                        values.append(f"[bold green]{val}[/]")
                    else:
                        values.append(f"[bold yellow]{val}[/]")
                elif isinstance(val, bool):
                    values.append("sim" if val else "")
                else:
                    values.append("" if val is None else str(val))
            table.add_row(*values)
        console.print(table)
        return

    # Resumos: {grupo: {contador: n}}
    if isinstance(data, dict) and all(isinstance(v, dict) for v in data.values()):
        table = Table(title=title, box=box.ROUNDED)
        table.add_column("Grupo")
        table.add_column("Contadores")
        for grupo, contadores in data.items():
            table.add_row(grupo, ", ".join(f"{k}: {v}" for k, v in contadores.items()))
        console.print(table)
        return

    _print_json(data)


def _gateway(db_path: str) -> SQLiteGateway:
    apply_migrations(db_path)
    return SQLiteGateway(db_path)


async def _listar(repo: RecordRepository) -> Resultado:
    res = await repo.refresh()
    if not res.ok:
        return res
    return Resultado.sucesso(repo.all())


def _add_e_mostrar(db_path: str, nome_repo: str, candidato: Dict[str, Any], titulo: str) -> None:
    repo = criar_repositorios(_gateway(db_path))[nome_repo]
    registro = _exigir(asyncio.run(repo.add(candidato)))
    _display_table([_registro_dict(registro)], title=titulo)


def _listar_e_mostrar(db_path: str, nome_repo: str, titulo: str, como_json: bool) -> None:
    repo = criar_repositorios(_gateway(db_path))[nome_repo]
    registros = _exigir(asyncio.run(_listar(repo)))
    linhas = [_registro_dict(r) for r in registros]
    if como_json:
        _print_json(linhas)
    else:
        _display_table(linhas, title=titulo)


def _carregar_motor(db_path: str) -> MotorTriagem:
    return _exigir(asyncio.run(ArquivoTriagem(_gateway(db_path)).load()))


def _mostrar_relatos(relatos, titulo: str, como_json: bool) -> None:
    linhas = [{**_registro_dict(r), "urgente": is_urgent(r)} for r in relatos]
    if como_json:
        _print_json(linhas)
    else:
        _display_table(linhas, title=titulo)


# -----------------------
# comandos de infra
# -----------------------

@app.command("migrate")
def cmd_migrate(db_path: str = DB_OPTION):
    """Aplica migrações no banco."""
    apply_migrations(db_path)
    typer.echo(f">> Migrações aplicadas em: {db_path}")


# -----------------------
# médico
# -----------------------

medico_app = typer.Typer(help="Painel do médico: tratamentos, exames e prescrições.")
app.add_typer(medico_app, name="medico")


@medico_app.command("tratamento-add")
def cmd_tratamento_add(
    phase: str = typer.Option("", "--phase", help="Radioterapia | Quimioterapia | Imunoterapia | Hormonioterapia | Cirurgia | Acompanhamento"),
    description: str = typer.Option("", "--description", help="Descrição da fase"),
    status: str = typer.Option("Planejado", "--status", help="Planejado | Em andamento | Concluído | Suspenso"),
    db_path: str = DB_OPTION,
):
    """Registra uma fase de tratamento."""
    candidato = {"phase": phase, "description": description, "status": status}
    _add_e_mostrar(db_path, "tratamentos", candidato, "Tratamento Registrado")


@medico_app.command("tratamentos")
def cmd_tratamentos(db_path: str = DB_OPTION, como_json: bool = JSON_OPTION):
    """Lista os tratamentos (mais recentes primeiro)."""
    _listar_e_mostrar(db_path, "tratamentos", "Tratamentos", como_json)


@medico_app.command("exame-add")
def cmd_exame_add(
    tipo: str = typer.Option("", "--type", help="Ex.: Hemograma completo"),
    status: str = typer.Option("solicitado", "--status", help="solicitado | realizado"),
    results: Optional[str] = typer.Option(None, "--results", help="Resultados (opcional)"),
    db_path: str = DB_OPTION,
):
    """Solicita ou registra um exame."""
    candidato = {"type": tipo, "status": status, "results": results}
    _add_e_mostrar(db_path, "exames", candidato, "Exame Registrado")


@medico_app.command("exames")
def cmd_exames(db_path: str = DB_OPTION, como_json: bool = JSON_OPTION):
    """Lista os exames."""
    _listar_e_mostrar(db_path, "exames", "Exames", como_json)


@medico_app.command("prescricao-add")
def cmd_prescricao_add(
    medication: str = typer.Option("", "--medication"),
    dosage: str = typer.Option("", "--dosage"),
    frequency: str = typer.Option("", "--frequency", help="Ex.: 8/8h"),
    db_path: str = DB_OPTION,
):
    """Registra uma prescrição médica."""
    candidato = {"medication": medication, "dosage": dosage, "frequency": frequency}
    _add_e_mostrar(db_path, "prescricoes", candidato, "Prescrição Registrada")


@medico_app.command("prescricoes")
def cmd_prescricoes(db_path: str = DB_OPTION, como_json: bool = JSON_OPTION):
    """Lista as prescrições médicas."""
    _listar_e_mostrar(db_path, "prescricoes", "Prescrições", como_json)


@medico_app.command("resumo")
def cmd_medico_resumo(db_path: str = DB_OPTION, como_json: bool = JSON_OPTION):
    """Totais de tratamentos, exames e prescrições."""
    repos = criar_repositorios(_gateway(db_path))
    listas = {nome: _exigir(asyncio.run(_listar(repos[nome])))
              for nome in ("tratamentos", "exames", "prescricoes")}
    res = resumo_medico(listas["tratamentos"], listas["exames"], listas["prescricoes"])
    if como_json:
        _print_json(res)
    else:
        _display_table(res, title="Resumo do Médico")


# -----------------------
# paciente
# -----------------------

paciente_app = typer.Typer(help="Painel do paciente: efeitos colaterais, relatos e agenda.")
app.add_typer(paciente_app, name="paciente")


@paciente_app.command("efeito-add")
def cmd_efeito_add(
    medication: str = typer.Option("", "--medication"),
    effect: str = typer.Option("", "--effect"),
    severity: str = typer.Option("leve", "--severity", help="leve | moderado | grave"),
    location: str = typer.Option("domiciliar", "--location", help="domiciliar | hospitalar"),
    relatar: bool = typer.Option(True, "--relatar/--sem-relato", help="Abre relato para a enfermagem"),
    db_path: str = DB_OPTION,
):
    """Registra um efeito colateral (e, por padrão, abre relato para a enfermagem)."""
    gateway = _gateway(db_path)
    repo = criar_repositorios(gateway)["efeitos"]
    candidato = {"medication": medication, "effect": effect, "severity": severity, "location": location}
    efeito = _exigir(asyncio.run(repo.add(candidato)))
    _display_table([_registro_dict(efeito)], title="Efeito Colateral Registrado")

    if relatar:
        relato = _exigir(MotorTriagem.create().report_from_side_effect(efeito))
        res = asyncio.run(ArquivoTriagem(gateway).save_report(relato))
        if not res.ok:
            # o efeito já está gravado; só o relato precisa ser reenviado
            console.print(Panel(
                f"Efeito colateral {efeito.id} foi salvo, mas o relato para a enfermagem "
                f"não foi aberto: {res.erro}\n"
                "Reenvie apenas o relato com: paciente relato-add --type efeito_colateral",
                title=type(res.erro).__name__, border_style="red",
            ))
            raise typer.Exit(code=1)
        typer.echo(">> Relato enviado à enfermagem.")


@paciente_app.command("efeitos")
def cmd_efeitos(db_path: str = DB_OPTION, como_json: bool = JSON_OPTION):
    """Histórico de efeitos colaterais."""
    _listar_e_mostrar(db_path, "efeitos", "Efeitos Colaterais", como_json)


@paciente_app.command("relato-add")
def cmd_relato_add(
    tipo: str = typer.Option("duvida", "--type", help="efeito_colateral | duvida | urgente"),
    description: str = typer.Option("", "--description"),
    medication: Optional[str] = typer.Option(None, "--medication"),
    severity: Optional[str] = typer.Option(None, "--severity", help="leve | moderado | grave"),
    db_path: str = DB_OPTION,
):
    """Envia uma dúvida ou um aviso urgente para a enfermagem."""
    relato = _exigir(MotorTriagem.create().submit_report(tipo, description, medication, severity))
    _exigir(asyncio.run(ArquivoTriagem(_gateway(db_path)).save_report(relato)))
    typer.echo(">> Relato enviado à enfermagem.")


@paciente_app.command("agenda")
def cmd_agenda(
    janela_dias: Optional[int] = typer.Option(None, help="Dias à frente para o alerta"),
    alternar: Optional[List[str]] = typer.Option(
        None, "--alternar", help="Id da dose a marcar/desmarcar como tomada (pode repetir)"
    ),
):
    """Procedimentos próximos e checklist de medicação do dia (dados de exemplo).

    As marcações de ``--alternar`` valem só para esta execução.
    """
    procedimentos, doses = agenda_demo()
    for dose_id in alternar or []:
        try:
            doses = alternar_dose(doses, dose_id)
        except KeyError:
            console.print(Panel(f"Dose desconhecida: {dose_id}", title="KeyError", border_style="red"))
            raise typer.Exit(code=1)
    proximos = procedimentos_proximos(procedimentos, janela_dias=janela_dias)
    if proximos:
        console.print(Panel(
            f"Você tem {len(proximos)} procedimento(s) agendado(s) para os próximos dias.",
            border_style="yellow",
        ))
    _display_table(
        [{"date": p.date, "name": p.name, "dias": dias, "preparation": p.preparation}
         for p, dias in proximos],
        title="Procedimentos Próximos",
    )
    _display_table(
        [{"id": d.id, "name": d.name, "dosage": d.dosage, "time": d.time, "tomada": d.taken}
         for d in doses],
        title="Medicação de Hoje",
    )
    _display_table({"medicacao": resumo_doses(doses)}, title="Resumo da Medicação")


# -----------------------
# enfermagem
# -----------------------

enf_app = typer.Typer(help="Painel de enfermagem: triagem de relatos e orientações.")
app.add_typer(enf_app, name="enfermagem")


@enf_app.command("relatos")
def cmd_relatos(db_path: str = DB_OPTION, como_json: bool = JSON_OPTION):
    """Todos os relatos (mais recentes primeiro)."""
    motor = _carregar_motor(db_path)
    urgentes = motor.list_urgent()
    if urgentes and not como_json:
        console.print(Panel(
            f"Há {len(urgentes)} relato(s) que requer(em) atenção urgente.",
            title="Atenção Necessária", border_style="red",
        ))
    _mostrar_relatos(motor.list_reports(), "Relatos dos Pacientes", como_json)


@enf_app.command("urgentes")
def cmd_urgentes(db_path: str = DB_OPTION, como_json: bool = JSON_OPTION):
    """Relatos urgentes (tipo urgente ou gravidade grave)."""
    _mostrar_relatos(_carregar_motor(db_path).list_urgent(), "Relatos Urgentes", como_json)


@enf_app.command("pendentes")
def cmd_pendentes(db_path: str = DB_OPTION, como_json: bool = JSON_OPTION):
    """Relatos aguardando orientação."""
    _mostrar_relatos(_carregar_motor(db_path).list_pending(), "Relatos Pendentes", como_json)


@enf_app.command("orientar")
def cmd_orientar(
    report_id: str = typer.Argument(..., help="Id do relato"),
    recommendation: str = typer.Option(
        "tratamento_domiciliar", "--recommendation",
        help="visita_hospital | tratamento_domiciliar | acompanhamento",
    ),
    instructions: str = typer.Option("", "--instructions"),
    db_path: str = DB_OPTION,
):
    """Envia orientação e resolve o relato."""
    gateway = _gateway(db_path)
    motor = _exigir(asyncio.run(ArquivoTriagem(gateway).load()))
    orientacao = _exigir(motor.submit_guidance(report_id, recommendation, instructions))
    _exigir(asyncio.run(ArquivoTriagem(gateway).save_guidance(orientacao)))
    _display_table([_registro_dict(orientacao)], title="Orientação Enviada")


@enf_app.command("historico")
def cmd_historico(
    report_id: str = typer.Argument(..., help="Id do relato"),
    db_path: str = DB_OPTION,
    como_json: bool = JSON_OPTION,
):
    """Orientações já enviadas para um relato."""
    motor = _carregar_motor(db_path)
    if motor.get_report(report_id) is None:
        _falhar(UnknownReport(report_id))
    linhas = [_registro_dict(o) for o in motor.find_guidance_history(report_id)]
    if como_json:
        _print_json(linhas)
    else:
        _display_table(linhas, title=f"Histórico de Orientações — relato {report_id}")


@enf_app.command("prescricao-add")
def cmd_prescricao_enf_add(
    medication: str = typer.Option("", "--medication"),
    dosage: str = typer.Option("", "--dosage"),
    duration: str = typer.Option("", "--duration", help="Ex.: 5 dias"),
    reason: Optional[str] = typer.Option(None, "--reason"),
    db_path: str = DB_OPTION,
):
    """Registra uma prescrição da enfermagem."""
    candidato = {"medication": medication, "dosage": dosage, "duration": duration, "reason": reason}
    _add_e_mostrar(db_path, "prescricoes_enfermagem", candidato, "Prescrição Adicionada")


@enf_app.command("prescricoes")
def cmd_prescricoes_enf(db_path: str = DB_OPTION, como_json: bool = JSON_OPTION):
    """Lista as prescrições da enfermagem."""
    _listar_e_mostrar(db_path, "prescricoes_enfermagem", "Prescrições da Enfermagem", como_json)


@enf_app.command("resumo")
def cmd_enf_resumo(db_path: str = DB_OPTION, como_json: bool = JSON_OPTION):
    """Totais de relatos, orientações, prescrições e efeitos colaterais."""
    gateway = _gateway(db_path)
    motor = _exigir(asyncio.run(ArquivoTriagem(gateway).load()))
    repos = criar_repositorios(gateway)
    prescricoes = _exigir(asyncio.run(_listar(repos["prescricoes_enfermagem"])))
    efeitos = _exigir(asyncio.run(_listar(repos["efeitos"])))
    res = resumo_enfermagem(motor, prescricoes, efeitos)
    if como_json:
        _print_json(res)
    else:
        _display_table(res, title="Resumo da Enfermagem")


# Entry point opcional:
def main():
    app()


if __name__ == "__main__":
    main()

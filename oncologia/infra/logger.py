# oncologia/infra/logger.py
"""
Sistema de logging do acompanhamento oncológico.

Este módulo configura e fornece loggers para registrar as operações
críticas do sistema: inserções e sincronizações dos repositórios,
transições da triagem de relatos e operações no banco de dados.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, Any, Optional


# Flag global para habilitar/desabilitar logging
ENABLE_LOGGING = False
# Flag global para habilitar/desabilitar prints/output
ENABLE_OUTPUT = False

def print_system(*args, **kwargs):
    """Print controlado pelo ENABLE_OUTPUT."""
    if ENABLE_OUTPUT:
        print(*args, **kwargs)

# Configuração base dos loggers
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

def setup_logger(name: str, log_file: str, level: int = logging.INFO) -> logging.Logger:
    """
    Configura um logger específico com arquivo de saída.

    O arquivo só é aberto na primeira mensagem emitida (``delay=True``).

    Args:
        name: Nome do logger
        log_file: Caminho do arquivo de log
        level: Nível de logging (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Returns:
        Logger configurado
    """
    log_path = Path(log_file)

    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False

    # Remove handlers anteriores (reimportação em testes)
    while logger.handlers:
        logger.removeHandler(logger.handlers[0])

    file_handler = _LazyDirFileHandler(log_path, encoding='utf-8', delay=True)
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    logger.addHandler(file_handler)

    return logger


class _LazyDirFileHandler(logging.FileHandler):
    """FileHandler que cria o diretório de logs apenas ao abrir o arquivo."""

    def _open(self):
        Path(self.baseFilename).parent.mkdir(parents=True, exist_ok=True)
        return super()._open()


# Diretório base para logs (na pasta do pacote)
BASE_DIR = Path(__file__).parent.parent
LOGS_DIR = BASE_DIR / "logs"

transaction_logger = setup_logger(
    'oncologia.transactions',
    str(LOGS_DIR / 'transactions.log')
)

repositorio_logger = setup_logger(
    'oncologia.repositorios',
    str(LOGS_DIR / 'repositorios.log')
)

triagem_logger = setup_logger(
    'oncologia.triagem',
    str(LOGS_DIR / 'triagem.log')
)

database_logger = setup_logger(
    'oncologia.database',
    str(LOGS_DIR / 'database.log')
)

system_logger = setup_logger(
    'oncologia.system',
    str(LOGS_DIR / 'system.log')
)

def log_transaction(operation: str, data: Dict[str, Any], result: Optional[Any] = None, error: Optional[str] = None) -> None:
    """
    Registra uma transação completa no log.

    Args:
        operation: Tipo de operação (add, refresh, submit_guidance, ...)
        data: Dados da transação
        result: Resultado da operação (opcional)
        error: Mensagem de erro (opcional)
    """
    if not (ENABLE_LOGGING or ENABLE_OUTPUT):
        return
    if error:
        transaction_logger.error(f"TRANSACTION_FAILED: {operation} - {error} - Data: {data}")
    else:
        transaction_logger.info(f"TRANSACTION_SUCCESS: {operation} - Result: {result} - Data: {data}")

def log_repositorio(action: str, tabela: str, **kwargs) -> None:
    """
    Log específico para operações dos repositórios de registros.

    Args:
        action: Ação realizada (add, refresh, validation, ...)
        tabela: Tabela remota do repositório
        **kwargs: Dados adicionais
    """
    if not (ENABLE_LOGGING or ENABLE_OUTPUT):
        return
    log_data = {
        "action": action,
        "tabela": tabela,
        **kwargs
    }
    repositorio_logger.info(f"REPO_{action.upper()}: {log_data}")

def log_triagem(action: str, report_id: Optional[str] = None, **kwargs) -> None:
    """
    Log específico para a triagem de relatos.

    Args:
        action: Ação realizada (submit_guidance, mark_in_analysis, ...)
        report_id: Relato afetado (opcional)
        **kwargs: Dados adicionais
    """
    if not (ENABLE_LOGGING or ENABLE_OUTPUT):
        return
    log_data = {
        "action": action,
        "report_id": report_id,
        **kwargs
    }
    triagem_logger.info(f"TRIAGEM_{action.upper()}: {log_data}")

def log_database_operation(table: str, operation: str, affected_rows: int = 0, **kwargs) -> None:
    """
    Log específico para operações no banco de dados.

    Args:
        table: Nome da tabela
        operation: Operação SQL (INSERT, SELECT)
        affected_rows: Número de linhas afetadas
        **kwargs: Dados adicionais
    """
    if not (ENABLE_LOGGING or ENABLE_OUTPUT):
        return
    log_data = {
        "table": table,
        "operation": operation,
        "affected_rows": affected_rows,
        **kwargs
    }
    database_logger.info(f"DB_{operation}: {log_data}")

def log_system_event(event: str, details: Dict[str, Any] = None, level: str = "info") -> None:
    """
    Log para eventos do sistema.

    Args:
        event: Descrição do evento
        details: Detalhes adicionais (opcional)
        level: Nível do log (info, warning, error)
    """
    if not (ENABLE_LOGGING or ENABLE_OUTPUT):
        return
    log_data = {
        "event": event,
        "details": details or {},
        "timestamp": datetime.now().isoformat(),
    }
    log_method = getattr(system_logger, level.lower(), system_logger.info)
    log_method(f"SYSTEM_EVENT: {event} - {log_data}")

def get_log_summary(log_type: str = "transactions", lines: int = 100) -> Optional[str]:
    """
    Obtém um resumo dos logs recentes.

    Args:
        log_type: Tipo de log (transactions, repositorios, triagem, database, system)
        lines: Número de linhas a retornar

    Returns:
        Conteúdo do log como string
    """
    if not (ENABLE_LOGGING or ENABLE_OUTPUT):
        return None

    log_files = {
        "transactions": LOGS_DIR / "transactions.log",
        "repositorios": LOGS_DIR / "repositorios.log",
        "triagem": LOGS_DIR / "triagem.log",
        "database": LOGS_DIR / "database.log",
        "system": LOGS_DIR / "system.log"
    }

    log_file = log_files.get(log_type)
    if not log_file or not log_file.exists():
        return f"Log {log_type} não encontrado."

    try:
        with open(log_file, 'r', encoding='utf-8') as f:
            all_lines = f.readlines()
            recent_lines = all_lines[-lines:] if len(all_lines) > lines else all_lines
            return ''.join(recent_lines)
    except OSError as e:
        return f"Erro ao ler log {log_type}: {str(e)}"

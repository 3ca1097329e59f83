# oncologia/config.py
"""
Configurações globais e valores padrão do acompanhamento oncológico.
"""

import os
from dataclasses import dataclass


# Caminho padrão do banco de dados SQLite (pode ser sobrescrito por ONCOLOGIA_DB)
DB_PATH = os.environ.get("ONCOLOGIA_DB", os.path.join(os.getcwd(), "oncologia.db"))


@dataclass
class DefaultConfig:
    """Valores padrão para parâmetros do sistema."""
    timeout_gateway_s: float = 10.0  # limite de espera por chamada ao armazenamento
    janela_procedimentos_dias: int = 7  # alerta de procedimentos próximos


# Instância global dos valores padrão
DEFAULTS = DefaultConfig()

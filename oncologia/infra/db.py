# oncologia/infra/db.py
"""
Utilidades de conexão SQLite.

Cada chamada do ``SQLiteGateway`` roda em uma thread de trabalho
(``asyncio.to_thread``), por isso abre e fecha a sua própria conexão:
uma conexão ``sqlite3`` não pode ser compartilhada entre threads.
O esquema não declara chaves estrangeiras (``guidances.report_id`` é
conferido pela triagem na carga), então o pragma ``foreign_keys`` não é
necessário.
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from typing import Iterator


@contextmanager
def connect(db_path: str) -> Iterator[sqlite3.Connection]:
    """
    Context manager para abrir conexão SQLite com:
    - row_factory = sqlite3.Row
    - commit ao sair (rollback em caso de exceção): um INSERT do gateway
      nunca fica pela metade
    """
    conn = sqlite3.connect(db_path)
    try:
        conn.row_factory = sqlite3.Row
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()

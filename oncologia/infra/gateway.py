# oncologia/infra/gateway.py
"""
Gateway de persistência: fronteira com o armazenamento tabular.

Contrato (por tabela):
- ``await insert(table, row)`` -> ``Resultado[None]``
- ``await list(table, order_column="id", ascending=False)`` -> ``Resultado[list[dict]]``

Nenhuma regra de negócio vive aqui. Falhas do armazenamento voltam como
``StoreError`` dentro do ``Resultado``.
"""

from __future__ import annotations

import asyncio
import sqlite3
from typing import Any, Dict, List, Mapping

from .db import connect
from .logger import log_database_operation
from oncologia.domain.erros import Resultado, StoreError
from oncologia.domain.models import TABELAS


class PersistenceGateway:
    """Interface do armazenamento remoto (inserção e listagem de linhas)."""

    async def insert(self, table: str, row: Mapping[str, Any]) -> Resultado[None]:
        raise NotImplementedError

    async def list(
        self, table: str, order_column: str = "id", ascending: bool = False
    ) -> Resultado[List[Dict[str, Any]]]:
        raise NotImplementedError


class SQLiteGateway(PersistenceGateway):
    """Implementação sobre SQLite; o I/O bloqueante roda em ``asyncio.to_thread``."""

    def __init__(self, db_path: str):
        self.db_path = db_path

    # --------- util interno ---------
    @staticmethod
    def _columns(conn, table: str) -> List[str]:
        cur = conn.execute(f"PRAGMA table_info({table});")
        return [r[1] for r in cur.fetchall()]  # r[1] é o nome da coluna

    def _insert_sync(self, table: str, row: Dict[str, Any]) -> None:
        with connect(self.db_path) as c:
            cols = self._columns(c, table)
            if not cols:
                raise sqlite3.OperationalError(f"no such table: {table}")
            desconhecidas = [k for k in row if k not in cols]
            if desconhecidas:
                raise sqlite3.OperationalError(
                    f"table {table} has no column(s): {', '.join(desconhecidas)}"
                )
            keys = list(row.keys())
            sql = "INSERT INTO {t} ({cols}) VALUES ({vals})".format(
                t=table,
                cols=",".join(keys),
                vals=",".join(f":{k}" for k in keys),
            )
            c.execute(sql, row)

    def _list_sync(self, table: str, order_column: str, ascending: bool) -> List[Dict[str, Any]]:
        with connect(self.db_path) as c:
            cols = self._columns(c, table)
            if not cols:
                raise sqlite3.OperationalError(f"no such table: {table}")
            if order_column not in cols:
                raise sqlite3.OperationalError(f"no such column: {order_column}")
            direcao = "ASC" if ascending else "DESC"
            cur = c.execute(f"SELECT * FROM {table} ORDER BY {order_column} {direcao}")
            names = [d[0] for d in cur.description]
            return [dict(zip(names, r)) for r in cur.fetchall()]

    # --------- contrato ---------
    async def insert(self, table: str, row: Mapping[str, Any]) -> Resultado[None]:
        if table not in TABELAS:
            return Resultado.falha(StoreError(f"tabela desconhecida: {table}"))
        try:
            await asyncio.to_thread(self._insert_sync, table, dict(row))
        except sqlite3.Error as e:
            log_database_operation(table, "INSERT", 0, error=str(e))
            return Resultado.falha(StoreError(str(e)))
        log_database_operation(table, "INSERT", 1)
        return Resultado.sucesso()

    async def list(
        self, table: str, order_column: str = "id", ascending: bool = False
    ) -> Resultado[List[Dict[str, Any]]]:
        if table not in TABELAS:
            return Resultado.falha(StoreError(f"tabela desconhecida: {table}"))
        try:
            rows = await asyncio.to_thread(self._list_sync, table, order_column, ascending)
        except sqlite3.Error as e:
            log_database_operation(table, "SELECT", 0, error=str(e))
            return Resultado.falha(StoreError(str(e)))
        log_database_operation(table, "SELECT", len(rows))
        return Resultado.sucesso(rows)

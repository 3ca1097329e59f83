import asyncio
from collections import defaultdict
from pathlib import Path

import pytest

from oncologia.domain.erros import Resultado, StoreError
from oncologia.infra.gateway import PersistenceGateway
from oncologia.infra.migrations import apply_migrations


class FakeGateway(PersistenceGateway):
    """Armazenamento em memória que conta as chamadas recebidas."""

    def __init__(self):
        self.tabelas = defaultdict(list)
        self.inserts = 0
        self.lists = 0
        self.falhar_insert = None
        self.falhar_list = None
        self.atraso = 0.0
        self._seq = 0

    async def insert(self, table, row):
        self.inserts += 1
        if self.atraso:
            await asyncio.sleep(self.atraso)
        if self.falhar_insert:
            return Resultado.falha(StoreError(self.falhar_insert))
        self._seq += 1
        self.tabelas[table].append({"id": self._seq, **dict(row)})
        return Resultado.sucesso()

    async def list(self, table, order_column="id", ascending=False):
        self.lists += 1
        if self.atraso:
            await asyncio.sleep(self.atraso)
        if self.falhar_list:
            return Resultado.falha(StoreError(self.falhar_list))
        rows = sorted(self.tabelas[table], key=lambda r: r[order_column], reverse=not ascending)
        return Resultado.sucesso([dict(r) for r in rows])


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def db_path(tmp_path: Path) -> str:
    path = str(tmp_path / "oncologia_test.sqlite")
    apply_migrations(path)
    return path

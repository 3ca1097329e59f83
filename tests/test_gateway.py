import asyncio
import threading
import time

import pytest

from oncologia.domain.erros import OperationInProgress, RepositoryTimeout, StoreError
from oncologia.infra.db import connect
from oncologia.infra.gateway import SQLiteGateway
from oncologia.infra.migrations import apply_migrations
from oncologia.infra.repositories import PrescricaoRepo


def test_migrations_idempotentes(db_path):
    apply_migrations(db_path)
    with connect(db_path) as c:
        assert c.execute("PRAGMA user_version;").fetchone()[0] == 2
        tabelas = {r[0] for r in c.execute("SELECT name FROM sqlite_master WHERE type='table'")}
    assert {"treatments", "exams", "prescriptions", "nurse_prescriptions",
            "side_effects", "patient_reports", "guidances"} <= tabelas


def test_insert_e_list_descendente(db_path):
    gw = SQLiteGateway(db_path)

    async def cenario():
        await gw.insert("prescriptions", {"date": "2025-11-01", "medication": "Ondansetrona",
                                          "dosage": "8mg", "frequency": "8/8h"})
        await gw.insert("prescriptions", {"date": "2025-11-01", "medication": "Dexametasona",
                                          "dosage": "4mg", "frequency": "12/12h"})
        return await gw.list("prescriptions")

    res = asyncio.run(cenario())
    assert res.ok
    assert [r["medication"] for r in res.valor] == ["Dexametasona", "Ondansetrona"]
    assert [r["id"] for r in res.valor] == [2, 1]


def test_list_ascendente(db_path):
    gw = SQLiteGateway(db_path)
    asyncio.run(gw.insert("exams", {"date": "2025-11-05", "type": "A", "status": "solicitado"}))
    asyncio.run(gw.insert("exams", {"date": "2025-11-05", "type": "B", "status": "solicitado"}))
    res = asyncio.run(gw.list("exams", ascending=True))
    assert [r["type"] for r in res.valor] == ["A", "B"]


def test_tabela_ou_coluna_desconhecida(db_path):
    gw = SQLiteGateway(db_path)

    res = asyncio.run(gw.list("pacientes"))
    assert isinstance(res.erro, StoreError)

    res = asyncio.run(gw.list("exams", order_column="id; DROP TABLE exams"))
    assert isinstance(res.erro, StoreError)

    res = asyncio.run(gw.insert("exams", {"date": "2025-11-05", "tipo": "A"}))
    assert isinstance(res.erro, StoreError)


def test_restricao_do_banco_vira_erro(tmp_path):
    # banco sem migrações: a tabela não existe
    gw = SQLiteGateway(str(tmp_path / "vazio.sqlite"))
    res = asyncio.run(gw.insert("exams", {"date": "2025-11-05", "type": "A", "status": "solicitado"}))
    assert isinstance(res.erro, StoreError)


class SQLiteLento(SQLiteGateway):
    """Gateway cuja escrita demora mais que o timeout do repositório."""

    def __init__(self, db_path):
        super().__init__(db_path)
        self._lock = threading.Lock()
        self.ativos = 0
        self.max_ativos = 0

    def _insert_sync(self, table, row):
        with self._lock:
            self.ativos += 1
            self.max_ativos = max(self.max_ativos, self.ativos)
        try:
            time.sleep(0.3)
            super()._insert_sync(table, row)
        finally:
            with self._lock:
                self.ativos -= 1


def test_escrita_lenta_nao_permite_segunda_escrita_simultanea(db_path):
    gw = SQLiteLento(db_path)
    repo = PrescricaoRepo(gw, timeout_s=0.05)
    candidato = {"medication": "Ondansetrona", "dosage": "8mg"}

    async def cenario():
        primeira = await repo.add(candidato)
        segunda = await repo.add(candidato)
        while repo.em_andamento:
            await asyncio.sleep(0.05)
        return primeira, segunda

    primeira, segunda = asyncio.run(cenario())

    assert isinstance(primeira.erro, RepositoryTimeout)
    assert isinstance(segunda.erro, OperationInProgress)
    assert gw.max_ativos <= 1
    with connect(db_path) as c:
        assert c.execute("SELECT COUNT(*) FROM prescriptions").fetchone()[0] == 1


def test_repositorio_sobre_sqlite(db_path):
    repo = PrescricaoRepo(SQLiteGateway(db_path))
    res = asyncio.run(repo.add({"medication": "Ondansetrona", "dosage": "8mg", "frequency": "8/8h"}))
    assert res.ok
    assert res.valor.id == "1"
    assert repo.all()[0].frequency == "8/8h"


def test_connect_desfaz_transacao_com_erro(db_path):
    with pytest.raises(RuntimeError):
        with connect(db_path) as c:
            c.execute("INSERT INTO exams (date, type, status) VALUES ('2025-11-05', 'A', 'solicitado')")
            raise RuntimeError("falha no meio da transação")
    with connect(db_path) as c:
        assert c.execute("SELECT COUNT(*) FROM exams").fetchone()[0] == 0

# oncologia/infra/migrations.py
"""
Migrações de schema usando PRAGMA user_version.

V1: tabelas de registros clínicos (médico, enfermagem, paciente)
V2: relatos dos pacientes e orientações da enfermagem
"""

from __future__ import annotations

from typing import List
from .db import connect


SCHEMA_V1: List[str] = [
    # Fases do tratamento
    """
    CREATE TABLE IF NOT EXISTS treatments (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        date TEXT NOT NULL,
        phase TEXT NOT NULL,       -- Radioterapia | Quimioterapia | ... | Acompanhamento
        description TEXT NOT NULL,
        status TEXT NOT NULL       -- Planejado | Em andamento | Concluído | Suspenso
    );
    """,
    # Exames
    """
    CREATE TABLE IF NOT EXISTS exams (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        date TEXT NOT NULL,
        type TEXT NOT NULL,
        status TEXT NOT NULL,      -- solicitado | realizado
        results TEXT
    );
    """,
    # Prescrições médicas
    """
    CREATE TABLE IF NOT EXISTS prescriptions (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        date TEXT NOT NULL,
        medication TEXT NOT NULL,
        dosage TEXT NOT NULL,
        frequency TEXT
    );
    """,
    # Prescrições da enfermagem
    """
    CREATE TABLE IF NOT EXISTS nurse_prescriptions (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        date TEXT NOT NULL,
        medication TEXT NOT NULL,
        dosage TEXT NOT NULL,
        duration TEXT,
        reason TEXT
    );
    """,
    # Efeitos colaterais relatados pelo paciente
    """
    CREATE TABLE IF NOT EXISTS side_effects (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        date TEXT NOT NULL,
        medication TEXT NOT NULL,
        effect TEXT NOT NULL,
        severity TEXT NOT NULL,    -- leve | moderado | grave
        location TEXT NOT NULL     -- domiciliar | hospitalar
    );
    """,
]

SCHEMA_V2: List[str] = [
    # Relatos: gravados como pendentes; a resolução é derivada das orientações
    """
    CREATE TABLE IF NOT EXISTS patient_reports (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        date TEXT NOT NULL,
        type TEXT NOT NULL,        -- efeito_colateral | duvida | urgente
        description TEXT NOT NULL,
        medication TEXT,
        severity TEXT,
        status TEXT NOT NULL,
        response TEXT
    );
    """,
    # Orientações (somente inserção)
    """
    CREATE TABLE IF NOT EXISTS guidances (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        date TEXT NOT NULL,
        report_id TEXT NOT NULL,
        recommendation TEXT NOT NULL,
        instructions TEXT NOT NULL
    );
    """,
]


def _apply(conn, schema: List[str]) -> None:
    for sql in schema:
        conn.executescript(sql)


def apply_migrations(db_path: str) -> None:
    """Aplica migrações incrementais de acordo com PRAGMA user_version."""
    with connect(db_path) as conn:
        ver = conn.execute("PRAGMA user_version;").fetchone()[0] or 0

        if ver < 1:
            _apply(conn, SCHEMA_V1)
            conn.execute("PRAGMA user_version = 1;")
            ver = 1

        if ver < 2:
            _apply(conn, SCHEMA_V2)
            conn.execute("PRAGMA user_version = 2;")
            ver = 2

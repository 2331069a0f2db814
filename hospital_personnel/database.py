"""SQLite storage: opening connections, creating the schema and seeding lookups."""

from __future__ import annotations

import os
import sqlite3
from datetime import datetime, timezone

_SCHEMA = """
CREATE TABLE IF NOT EXISTS job_groups (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    created_at TEXT,
    updated_at TEXT,
    deleted_at TEXT,
    name TEXT NOT NULL UNIQUE
);
CREATE INDEX IF NOT EXISTS idx_job_groups_deleted_at ON job_groups (deleted_at);

CREATE TABLE IF NOT EXISTS titles (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    created_at TEXT,
    updated_at TEXT,
    deleted_at TEXT,
    name TEXT NOT NULL UNIQUE,
    job_group_id INTEGER NOT NULL REFERENCES job_groups (id)
);
CREATE INDEX IF NOT EXISTS idx_titles_deleted_at ON titles (deleted_at);

CREATE TABLE IF NOT EXISTS staffs (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    created_at TEXT,
    updated_at TEXT,
    deleted_at TEXT,
    first_name TEXT NOT NULL,
    last_name TEXT NOT NULL,
    tc TEXT NOT NULL UNIQUE,
    phone TEXT NOT NULL UNIQUE,
    working_days TEXT NOT NULL,
    hospital_id INTEGER NOT NULL,
    job_group_id INTEGER NOT NULL REFERENCES job_groups (id),
    title_id INTEGER NOT NULL REFERENCES titles (id),
    hospital_polyclinic_id INTEGER
);
CREATE INDEX IF NOT EXISTS idx_staffs_deleted_at ON staffs (deleted_at);
"""

_JOB_GROUPS = ("Doktor", "Hemşire", "Teknisyen", "İdari Personel", "Güvenlik")

_TITLES = (
    ("Başhekim", 1),
    ("Uzman Doktor", 1),
    ("Pratisyen Hekim", 1),
    ("Asistan Doktor", 1),
    ("Başhemşire", 2),
    ("Sorumlu Hemşire", 2),
    ("Hemşire", 2),
    ("Laborant", 3),
    ("Radyoloji Teknisyeni", 3),
    ("Anestezi Teknisyeni", 3),
    ("İnsan Kaynakları Uzmanı", 4),
    ("Muhasebe Uzmanı", 4),
    ("Hasta Kabul", 4),
    ("Güvenlik Amiri", 5),
    ("Güvenlik Görevlisi", 5),
)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def connect(path: str | os.PathLike[str]) -> sqlite3.Connection:
    """Open the database at *path* with foreign-key checks enabled."""
    conn = sqlite3.connect(path)
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def run_migrations(conn: sqlite3.Connection) -> None:
    """Create the tables that are missing, then seed the lookup data."""
    print("Running database migrations...")
    conn.executescript(_SCHEMA)
    conn.commit()
    seed_data(conn)


def _insert(conn: sqlite3.Connection, sql: str, params: tuple, what: str) -> None:
    try:
        with conn:
            conn.execute(sql, params)
    except sqlite3.Error as exc:
        raise sqlite3.DatabaseError(f"failed to create {what}: {exc}") from exc


def seed_data(conn: sqlite3.Connection) -> None:
    """Insert the standard job groups and titles when no job group exists yet."""
    (count,) = conn.execute(
        "SELECT COUNT(*) FROM job_groups WHERE deleted_at IS NULL"
    ).fetchone()
    if count:
        return

    for name in _JOB_GROUPS:
        now = _now()
        _insert(
            conn,
            "INSERT INTO job_groups (created_at, updated_at, name) VALUES (?, ?, ?)",
            (now, now, name),
            f"job group {name}",
        )

    for name, job_group_id in _TITLES:
        now = _now()
        _insert(
            conn,
            "INSERT INTO titles (created_at, updated_at, name, job_group_id) "
            "VALUES (?, ?, ?, ?)",
            (now, now, name, job_group_id),
            f"title {name}",
        )

    print("Personnel seed data created successfully!")
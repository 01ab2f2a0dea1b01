from __future__ import annotations

import json
import os
import sqlite3
import threading
from datetime import datetime, timezone
from typing import Union

from app.core.config import settings
from app.schemas.career_path import CareerPathResult, GuidanceResult, StoredCareerPath

_conn: sqlite3.Connection | None = None
_conn_lock = threading.Lock()


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _get_connection() -> sqlite3.Connection:
    global _conn
    with _conn_lock:
        if _conn is not None:
            return _conn

        db_path = settings.career_path_db_path
        directory = os.path.dirname(db_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        _conn = sqlite3.connect(
            db_path,
            check_same_thread=False,
            timeout=5,
            isolation_level=None,
        )
        _conn.execute("PRAGMA journal_mode=WAL;")
        _conn.execute("PRAGMA synchronous=NORMAL;")
        _conn.execute("PRAGMA busy_timeout=5000;")
        _conn.execute(
            """
            CREATE TABLE IF NOT EXISTS career_path_records (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                owner_id TEXT NOT NULL,
                kind TEXT NOT NULL,
                target_role TEXT NOT NULL,
                record_json TEXT NOT NULL,
                created_at TEXT NOT NULL
            );
            """
        )
        _conn.execute(
            """
            CREATE INDEX IF NOT EXISTS idx_career_path_records_owner
            ON career_path_records (owner_id, created_at);
            """
        )
        return _conn


def init_store() -> None:
    if settings.career_path_store_enabled:
        _get_connection()


def store_career_path(
    record: Union[CareerPathResult, GuidanceResult],
    owner_id: str,
) -> StoredCareerPath | None:
    if not settings.career_path_store_enabled:
        return None
    conn = _get_connection()
    created_at = _utc_now().isoformat()
    payload = record.model_dump(mode="json", by_alias=True)

    with _conn_lock:
        conn.execute(
            """
            INSERT INTO career_path_records (
                owner_id, kind, target_role, record_json, created_at
            ) VALUES (?, ?, ?, ?, ?)
            """,
            (
                owner_id,
                record.kind,
                record.target_role,
                json.dumps(payload, ensure_ascii=False),
                created_at,
            ),
        )
        conn.commit()
    return StoredCareerPath(
        kind=record.kind,
        owner_id=owner_id,
        target_role=record.target_role,
        created_at=created_at,
        record=payload,
    )


def list_career_paths(owner_id: str, limit: int | None = None) -> list[StoredCareerPath]:
    if not settings.career_path_store_enabled:
        return []
    conn = _get_connection()
    max_rows = max(1, int(limit if limit is not None else settings.career_path_list_limit))
    with _conn_lock:
        cur = conn.execute(
            """
            SELECT kind, owner_id, target_role, record_json, created_at
            FROM career_path_records
            WHERE owner_id = ?
            ORDER BY id DESC
            LIMIT ?
            """,
            (owner_id, max_rows),
        )
        rows = cur.fetchall()

    return [
        StoredCareerPath(
            kind=row[0],
            owner_id=row[1],
            target_role=row[2],
            record=json.loads(row[3]) if row[3] else {},
            created_at=row[4],
        )
        for row in rows
    ]


class SqliteCareerPathStore:
    def store(self, record: Union[CareerPathResult, GuidanceResult], owner_id: str) -> None:
        store_career_path(record, owner_id)

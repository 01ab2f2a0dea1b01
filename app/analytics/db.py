from __future__ import annotations

import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from app.core.config import settings
from app.schemas.career_path import TelemetryEvent


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _get_db_path() -> Path:
    return Path(settings.telemetry_db_path)


def init_db() -> None:
    if not settings.telemetry_enabled:
        return
    db_path = _get_db_path()
    db_path.parent.mkdir(parents=True, exist_ok=True)
    with sqlite3.connect(db_path) as conn:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS career_path_events (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                created_at TEXT NOT NULL,
                event_type TEXT NOT NULL,
                user_id TEXT NOT NULL,
                target_role TEXT NOT NULL,
                model TEXT NOT NULL,
                prompt_variant TEXT,
                reason TEXT,
                details TEXT,
                timestamp_ms INTEGER NOT NULL
            )
            """
        )
        conn.execute(
            """
            CREATE INDEX IF NOT EXISTS idx_career_path_events_created_at
            ON career_path_events (created_at)
            """
        )
        conn.commit()
    purge_old_records()


def log_career_path_event(event: TelemetryEvent) -> None:
    if not settings.telemetry_enabled:
        return
    db_path = _get_db_path()
    with sqlite3.connect(db_path) as conn:
        conn.execute(
            """
            INSERT INTO career_path_events (
                created_at, event_type, user_id, target_role, model, prompt_variant, reason, details, timestamp_ms
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                _utc_now(),
                event.type,
                event.user_id,
                event.target_role,
                event.model,
                event.prompt_variant,
                event.reason,
                event.details,
                event.timestamp_ms,
            ),
        )
        conn.commit()


class SqliteTelemetrySink:
    """Append-only telemetry sink backed by the analytics database."""

    def append(self, event: TelemetryEvent) -> None:
        log_career_path_event(event)


def purge_old_records() -> dict[str, int]:
    if not settings.telemetry_enabled:
        return {"career_path_events": 0}

    db_path = _get_db_path()
    retention = max(1, int(settings.telemetry_retention_days))

    deleted = {"career_path_events": 0}
    with sqlite3.connect(db_path) as conn:
        cur = conn.execute(
            "DELETE FROM career_path_events WHERE created_at < datetime('now', ?)",
            (f"-{retention} days",),
        )
        deleted["career_path_events"] = int(cur.rowcount or 0)
        conn.commit()

    return deleted


def _row_to_dict(cursor: sqlite3.Cursor, row: tuple) -> dict[str, Any]:
    return {col[0]: row[idx] for idx, col in enumerate(cursor.description)}


def get_summary() -> dict[str, Any]:
    if not settings.telemetry_enabled:
        return {"enabled": False}
    db_path = _get_db_path()
    with sqlite3.connect(db_path) as conn:
        cur = conn.execute(
            """
            SELECT event_type, COUNT(*) AS count
            FROM career_path_events
            GROUP BY event_type
            """
        )
        by_type = {row[0]: row[1] for row in cur.fetchall()}
        cur = conn.execute(
            """
            SELECT reason, COUNT(*) AS count
            FROM career_path_events
            WHERE reason IS NOT NULL AND event_type IN ('quality_failure', 'fallback')
            GROUP BY reason
            ORDER BY count DESC
            """
        )
        by_reason = {row[0]: row[1] for row in cur.fetchall()}
        cur = conn.execute(
            """
            SELECT COUNT(*) AS total_7d
            FROM career_path_events
            WHERE created_at >= datetime('now', '-7 days')
            """
        )
        total_7d = cur.fetchone()[0]
    return {
        "enabled": True,
        "total": sum(by_type.values()),
        "total_7d": total_7d,
        "by_type": by_type,
        "failure_reasons": by_reason,
    }


def get_latest(limit: int = 20) -> list[dict[str, Any]]:
    if not settings.telemetry_enabled:
        return []
    db_path = _get_db_path()
    with sqlite3.connect(db_path) as conn:
        cur = conn.execute(
            """
            SELECT created_at, event_type, target_role, model, prompt_variant, reason, details
            FROM career_path_events
            ORDER BY id DESC
            LIMIT ?
            """,
            (limit,),
        )
        rows = cur.fetchall()
        return [_row_to_dict(cur, row) for row in rows]

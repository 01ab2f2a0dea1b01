from __future__ import annotations

import logging
import threading
import time
from typing import Protocol

from app.schemas.career_path import TelemetryEvent

logger = logging.getLogger("app.career_path.telemetry")


class TelemetrySink(Protocol):
    def append(self, event: TelemetryEvent) -> None: ...


class InMemoryTelemetrySink:
    def __init__(self) -> None:
        self._events: list[TelemetryEvent] = []
        self._lock = threading.Lock()

    def append(self, event: TelemetryEvent) -> None:
        with self._lock:
            self._events.append(event)

    @property
    def events(self) -> tuple[TelemetryEvent, ...]:
        with self._lock:
            return tuple(self._events)


def now_ms() -> int:
    return int(time.time() * 1000)


class TelemetryEmitter:
    def __init__(self, sink: TelemetrySink | None = None):
        self._sink = sink

    def emit(self, event: TelemetryEvent) -> None:
        logger.info(
            "career_path_event type=%s user=%s role=%r model=%s variant=%s reason=%s details=%r",
            event.type,
            event.user_id,
            event.target_role,
            event.model,
            event.prompt_variant,
            event.reason,
            event.details,
        )
        if self._sink is None:
            return
        try:
            self._sink.append(event)
        except Exception as exc:  # noqa: BLE001 - telemetry must not break generation
            logger.warning("career_path_telemetry_write_failed type=%s: %s", event.type, exc)

"""Telemetry events and sinks.

The registry reports which actions it exposes and how executions went.
Telemetry is fire-and-forget: callers wrap capture() so a failing sink never
breaks describe, build_schema or execute.

Events never carry secret values; SensitiveDataMissingEvent lists
placeholder names only.
"""

from __future__ import annotations

import json
import logging
import threading
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from .config_schema import TelemetryConfig


logger = logging.getLogger(__name__)


@dataclass
class TelemetryEvent:
    """Base class for telemetry events."""

    name: str = field(init=False, default="event")

    def properties(self) -> dict[str, Any]:
        data = asdict(self)
        data.pop("name", None)
        return data


@dataclass
class RegisteredFunction:
    """One exposed action and its parameter JSON schema."""

    name: str
    params: dict[str, Any]


@dataclass
class RegisteredFunctionsEvent(TelemetryEvent):
    """Actions exposed to the model by describe() or build_schema()."""

    registered_functions: list[RegisteredFunction] = field(default_factory=list)
    name: str = field(init=False, default="controller_registered_functions")


@dataclass
class SensitiveDataMissingEvent(TelemetryEvent):
    """Secret placeholders that had no (non-empty) bound value."""

    placeholders: list[str] = field(default_factory=list)
    action: str | None = None
    name: str = field(init=False, default="sensitive_data_missing")


@dataclass
class ActionExecutedEvent(TelemetryEvent):
    """Outcome of one execute() call."""

    action: str = ""
    success: bool = True
    is_done: bool = False
    duration_ms: float = 0.0
    error_type: str | None = None
    name: str = field(init=False, default="action_executed")


@runtime_checkable
class TelemetrySink(Protocol):
    """Anything that accepts telemetry events."""

    def capture(self, event: TelemetryEvent) -> None:
        ...


class NullTelemetry:
    """Discards every event."""

    def capture(self, event: TelemetryEvent) -> None:
        return None


class JsonlTelemetry:
    """Appends one JSON object per event to a JSONL file.

    Every record carries a timestamp and a monotonic sequence number so
    events from one process can be ordered.
    """

    output_path: Path

    def __init__(self, path: str | Path) -> None:
        self.output_path = Path(path)
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        self._sequence = 0
        self._lock = threading.Lock()

    def capture(self, event: TelemetryEvent) -> None:
        with self._lock:
            self._sequence += 1
            record: dict[str, Any] = {
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "sequence": self._sequence,
                "event_type": event.name,
                **event.properties(),
            }
            with open(self.output_path, "a") as f:
                f.write(json.dumps(record, default=str) + "\n")

    def read_recent(self, n: int = 50) -> list[dict[str, Any]]:
        """Read the last N events from the file."""
        if not self.output_path.exists():
            return []
        lines = [line for line in self.output_path.read_text().split("\n") if line]
        recent = lines[-n:] if len(lines) > n else lines
        return [json.loads(line) for line in recent]


def telemetry_from_config(config: TelemetryConfig) -> TelemetrySink:
    """Build the sink described by the telemetry config section."""
    if not config.enabled:
        return NullTelemetry()
    return JsonlTelemetry(config.output_file)


def safe_capture(sink: TelemetrySink | None, event: TelemetryEvent) -> None:
    """Send an event, logging (never raising) if the sink fails."""
    if sink is None:
        return
    try:
        sink.capture(event)
    except Exception:
        logger.debug("Telemetry capture failed for %s", event.name, exc_info=True)

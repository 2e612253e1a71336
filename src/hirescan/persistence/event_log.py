"""Append-only event log: the audit trail of requisition scans.

Every requisition creation and every scan outcome (committed, rejected,
or failed) produces an event record appended to the log. Events are
immutable once written and can be persisted to a JSONL file, one JSON
object per line, then reloaded with integrity verification.

The log is an audit trail, not the source of truth for requisition
status: the repository's committed row is. An event that fails to
append after a scan commit does not undo the commit.
"""

from __future__ import annotations

import enum
import hashlib
import json
import threading
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional


class EventKind(str, enum.Enum):
    """Classification of audit events."""
    REQUISITION_CREATED = "requisition_created"
    REQUISITION_SCANNED = "requisition_scanned"
    SCAN_REJECTED = "scan_rejected"
    SCAN_FAILED = "scan_failed"


def _canonical_hash(
    event_id: str,
    event_kind: str,
    timestamp_utc: str,
    actor_id: str,
    payload: dict[str, Any],
) -> str:
    canonical = json.dumps(
        {
            "event_id": event_id,
            "event_kind": event_kind,
            "timestamp_utc": timestamp_utc,
            "actor_id": actor_id,
            "payload": payload,
        },
        sort_keys=True,
        ensure_ascii=False,
    ).encode("utf-8")
    return f"sha256:{hashlib.sha256(canonical).hexdigest()}"


@dataclass(frozen=True)
class EventRecord:
    """A single immutable audit event.

    event_hash is the SHA-256 of the canonical JSON of the other fields,
    computed at creation time.
    """
    event_id: str
    event_kind: EventKind
    timestamp_utc: str
    actor_id: str
    payload: dict[str, Any]
    event_hash: str

    @staticmethod
    def create(
        event_kind: EventKind,
        actor_id: str,
        payload: dict[str, Any],
        event_id: Optional[str] = None,
        timestamp_utc: Optional[datetime] = None,
    ) -> EventRecord:
        """Create a new event record with computed hash."""
        event_id = event_id or f"EVT-{uuid.uuid4().hex[:16]}"
        ts = timestamp_utc or datetime.now(timezone.utc)
        ts_str = ts.strftime("%Y-%m-%dT%H:%M:%SZ")
        return EventRecord(
            event_id=event_id,
            event_kind=event_kind,
            timestamp_utc=ts_str,
            actor_id=actor_id,
            payload=payload,
            event_hash=_canonical_hash(
                event_id, event_kind.value, ts_str, actor_id, payload,
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "event_id": self.event_id,
            "event_kind": self.event_kind.value,
            "timestamp_utc": self.timestamp_utc,
            "actor_id": self.actor_id,
            "payload": self.payload,
            "event_hash": self.event_hash,
        }


class EventLog:
    """Append-only event log with optional file persistence.

    Safe to share between threads of one process; appends are
    serialised by an internal lock.
    """

    def __init__(self, storage_path: Optional[Path] = None) -> None:
        self._events: list[EventRecord] = []
        self._event_ids: set[str] = set()
        self._storage_path = storage_path
        self._lock = threading.Lock()

        if storage_path and storage_path.exists():
            self._load_from_file(storage_path)

    def append(self, event: EventRecord) -> None:
        """Append an event to the log.

        Raises ValueError if event_id is a duplicate (replay protection).
        """
        with self._lock:
            if event.event_id in self._event_ids:
                raise ValueError(f"Duplicate event ID: {event.event_id}")
            if self._storage_path:
                self._append_to_file(event)
            self._events.append(event)
            self._event_ids.add(event.event_id)

    def events(self, kind: Optional[EventKind] = None) -> list[EventRecord]:
        """Return events, optionally filtered by kind."""
        with self._lock:
            if kind is None:
                return list(self._events)
            return [e for e in self._events if e.event_kind == kind]

    def events_for_requisition(self, requisition_id: int) -> list[EventRecord]:
        return [
            e for e in self.events()
            if e.payload.get("requisition_id") == requisition_id
        ]

    @property
    def count(self) -> int:
        return len(self._events)

    @property
    def last_event(self) -> Optional[EventRecord]:
        return self._events[-1] if self._events else None

    def _append_to_file(self, event: EventRecord) -> None:
        with self._storage_path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(event.to_dict(), sort_keys=True, ensure_ascii=False) + "\n")

    def _load_from_file(self, path: Path) -> None:
        """Load events from a JSONL file with integrity verification.

        Fail-closed: raises ValueError for malformed lines, tampered
        records (hash mismatch) and duplicate event IDs.
        """
        with path.open("r", encoding="utf-8") as f:
            for line_num, line in enumerate(f, 1):
                line = line.strip()
                if not line:
                    continue
                try:
                    data = json.loads(line)
                    event_id = data["event_id"]
                    event_kind = EventKind(data["event_kind"])
                    expected_hash = _canonical_hash(
                        event_id,
                        data["event_kind"],
                        data["timestamp_utc"],
                        data["actor_id"],
                        data["payload"],
                    )
                    stored_hash = data["event_hash"]
                except (KeyError, TypeError, ValueError) as e:
                    raise ValueError(
                        f"Corrupt event log (line {line_num}) in {path}: {e}"
                    ) from e

                if event_id in self._event_ids:
                    raise ValueError(
                        f"Duplicate event ID on recovery (line {line_num}): {event_id}"
                    )

                if stored_hash != expected_hash:
                    raise ValueError(
                        f"Integrity check failed (line {line_num}): event {event_id} "
                        f"stored hash {stored_hash} != computed {expected_hash}"
                    )

                self._events.append(EventRecord(
                    event_id=event_id,
                    event_kind=event_kind,
                    timestamp_utc=data["timestamp_utc"],
                    actor_id=data["actor_id"],
                    payload=data["payload"],
                    event_hash=stored_hash,
                ))
                self._event_ids.add(event_id)

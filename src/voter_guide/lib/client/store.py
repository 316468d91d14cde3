"""Local-first key/value stores with publish-on-write subscriptions.

The client keeps a visitor's decisions locally as the source of truth for
immediate feedback.  Each store notifies its subscribers on every write and
exposes a snapshot that stays the same object until the next write, so
consumers can cheaply detect changes by identity.
"""

import json
import secrets
import string
import time
from collections.abc import Callable, Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any

from loguru import logger

Listener = Callable[[Mapping[str, Any]], None]

STORAGE_KEYS = {
    "decisions": "wtp_decisions",
    "candidate_selections": "wtp_candidate_selections",
    "notes": "wtp_notes",
    "visitor_id": "wtp_visitor_id",
    "active_event_id": "wtp_active_event_id",
}

_VISITOR_ID_ALPHABET = string.ascii_lowercase + string.digits


def generate_visitor_id() -> str:
    """Generate an opaque visitor identifier (``v_<ms>_<9 chars>``)."""
    suffix = "".join(secrets.choice(_VISITOR_ID_ALPHABET) for _ in range(9))
    return f"v_{int(time.time() * 1000)}_{suffix}"


class ObservableStore:
    """A mutable mapping that notifies subscribers after each write."""

    def __init__(self, initial: Mapping[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = dict(initial or {})
        self._listeners: list[Listener] = []
        self._snapshot: Mapping[str, Any] | None = None

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value
        self._publish()

    def delete(self, key: str) -> None:
        if key in self._data:
            del self._data[key]
            self._publish()

    def replace(self, data: Mapping[str, Any]) -> None:
        """Overwrite the whole mapping with ``data``."""
        self._data = dict(data)
        self._publish()

    def clear(self) -> None:
        self.replace({})

    def snapshot(self) -> Mapping[str, Any]:
        """Return a read-only view that is reused until the next write."""
        if self._snapshot is None:
            self._snapshot = MappingProxyType(dict(self._data))
        return self._snapshot

    def to_dict(self) -> dict[str, Any]:
        return dict(self._data)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener called with the new snapshot after each write.

        Returns:
            A function that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _publish(self) -> None:
        self._snapshot = None
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            listener(snapshot)


class LocalDecisionStore:
    """Visitor decisions, selections, notes, and identity kept on the client.

    When ``path`` is given, state is persisted to that JSON file after every
    write and reloaded on construction.

    Args:
        path: Optional JSON file used as durable local storage.
    """

    def __init__(self, path: Path | str | None = None) -> None:
        self._path = Path(path) if path is not None else None
        raw = self._load()
        self.measure_decisions = ObservableStore(raw.get(STORAGE_KEYS["decisions"]))
        self.candidate_selections = ObservableStore(raw.get(STORAGE_KEYS["candidate_selections"]))
        self.notes = ObservableStore(raw.get(STORAGE_KEYS["notes"]))
        self._visitor_id: str | None = raw.get(STORAGE_KEYS["visitor_id"])
        self._active_event_id: str | None = raw.get(STORAGE_KEYS["active_event_id"])

        for store in (self.measure_decisions, self.candidate_selections, self.notes):
            store.subscribe(lambda _snapshot: self._flush())

    @property
    def visitor_id(self) -> str:
        """The visitor identifier, created and persisted on first access."""
        if self._visitor_id is None:
            self._visitor_id = generate_visitor_id()
            self._flush()
        return self._visitor_id

    @property
    def active_event_id(self) -> str | None:
        return self._active_event_id

    @active_event_id.setter
    def active_event_id(self, event_id: str | None) -> None:
        self._active_event_id = event_id
        self._flush()

    def save_measure_decision(self, measure_id: str, decision: str, note: str | None = None) -> None:
        entry: dict[str, Any] = {"decision": decision}
        if note:
            entry["note"] = note
        self.measure_decisions.set(measure_id, entry)

    def save_candidate_selection(self, race_id: str, candidate_id: str) -> None:
        self.candidate_selections.set(race_id, candidate_id)

    def save_note(self, item_id: str, note: str) -> None:
        self.notes.set(item_id, note)

    def replace_all(
        self,
        *,
        measure_decisions: Mapping[str, Any] | None = None,
        candidate_selections: Mapping[str, str] | None = None,
        notes: Mapping[str, str] | None = None,
    ) -> None:
        """Overwrite local state with values pulled from the server."""
        if measure_decisions is not None:
            self.measure_decisions.replace(measure_decisions)
        if candidate_selections is not None:
            self.candidate_selections.replace(candidate_selections)
        if notes is not None:
            self.notes.replace(notes)

    def _load(self) -> dict[str, Any]:
        if self._path is None or not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            logger.warning(f"Ignoring corrupt local store at {self._path}")
            return {}
        return data if isinstance(data, dict) else {}

    def _flush(self) -> None:
        if self._path is None:
            return
        payload = {
            STORAGE_KEYS["decisions"]: self.measure_decisions.to_dict(),
            STORAGE_KEYS["candidate_selections"]: self.candidate_selections.to_dict(),
            STORAGE_KEYS["notes"]: self.notes.to_dict(),
            STORAGE_KEYS["visitor_id"]: self._visitor_id,
            STORAGE_KEYS["active_event_id"]: self._active_event_id,
        }
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(payload, indent=2), encoding="utf-8")

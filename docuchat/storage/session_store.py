"""Key-based persistence for session snapshots.

Persistence is a convenience that lets a conversation survive a page reload.
Every failure is logged and swallowed; callers never see an exception.
"""

import logging
from pathlib import Path
from typing import Protocol

from docuchat.models import SessionSnapshot

logger = logging.getLogger(__name__)


class SessionStore(Protocol):
    def load(self, key: str) -> SessionSnapshot | None: ...

    def save(self, key: str, snapshot: SessionSnapshot) -> None: ...

    def remove(self, key: str) -> None: ...


class JsonSessionStore:
    """One JSON file per key inside a data directory.

    Writes go to a temporary sibling first and are moved into place, so a
    reader sees either the old snapshot or the new one.
    """

    def __init__(self, data_dir: str | Path) -> None:
        self.data_dir = Path(data_dir)

    def _path(self, key: str) -> Path:
        return self.data_dir / f"{key}.json"

    def load(self, key: str) -> SessionSnapshot | None:
        path = self._path(key)
        if not path.exists():
            return None

        try:
            return SessionSnapshot.model_validate_json(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable session snapshot {path}: {e}")
            return None

    def save(self, key: str, snapshot: SessionSnapshot) -> None:
        path = self._path(key)
        tmp_path = path.with_suffix(".json.tmp")
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(snapshot.model_dump_json(indent=2), encoding="utf-8")
            tmp_path.replace(path)
        except OSError as e:
            logger.warning(f"Failed to save session snapshot {path}: {e}")

    def remove(self, key: str) -> None:
        try:
            self._path(key).unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Failed to remove session snapshot {key}: {e}")


class InMemorySessionStore:
    """Dictionary-backed store for tests and throwaway sessions."""

    def __init__(self) -> None:
        self._snapshots: dict[str, str] = {}

    def load(self, key: str) -> SessionSnapshot | None:
        raw = self._snapshots.get(key)
        if raw is None:
            return None
        try:
            return SessionSnapshot.model_validate_json(raw)
        except ValueError as e:
            logger.warning(f"Ignoring unreadable session snapshot {key}: {e}")
            return None

    def save(self, key: str, snapshot: SessionSnapshot) -> None:
        # Serialized so later mutations of the live log never leak into the store
        self._snapshots[key] = snapshot.model_dump_json()

    def remove(self, key: str) -> None:
        self._snapshots.pop(key, None)

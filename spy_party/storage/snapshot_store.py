"""
Snapshot stores that keep the serialized session under a single key.
"""

import logging
from pathlib import Path
from threading import Lock
from typing import Dict, Optional, Protocol

from ..core.exceptions import MalformedSnapshotError
from ..core.game_engine import SessionState, default_state, dumps_state, loads_state

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "spy_game_state"


class SnapshotStore(Protocol):
    """Opaque key-value blob store."""

    def get(self, key: str) -> Optional[str]:
        ...

    def put(self, key: str, blob: str) -> None:
        ...

    def delete(self, key: str) -> None:
        ...


class MemoryStore:
    """Keeps snapshots in a dict; nothing survives the process."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.blobs: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.blobs.get(key)

    def put(self, key: str, blob: str) -> None:
        self.blobs[key] = blob

    def delete(self, key: str) -> None:
        self.blobs.pop(key, None)


class JsonFileStore:
    """Writes each key to ``<data_dir>/<key>.json``."""

    def __init__(self, data_dir: str = "data"):
        self.data_dir = Path(data_dir)
        self._lock = Lock()

    def _path(self, key: str) -> Path:
        return self.data_dir / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        with self._lock:
            with open(path, 'r', encoding='utf-8') as f:
                return f.read()

    def put(self, key: str, blob: str) -> None:
        path = self._path(key)
        with self._lock:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            # Readers only ever see a complete snapshot
            tmp_path = path.with_suffix(".json.tmp")
            with open(tmp_path, 'w', encoding='utf-8') as f:
                f.write(blob)
            tmp_path.replace(path)

    def delete(self, key: str) -> None:
        with self._lock:
            self._path(key).unlink(missing_ok=True)


def save_state(store: SnapshotStore, state: SessionState, key: str = DEFAULT_STORAGE_KEY) -> None:
    """Serialize the whole session under ``key``."""
    store.put(key, dumps_state(state))


def load_state(store: SnapshotStore, key: str = DEFAULT_STORAGE_KEY) -> SessionState:
    """
    Load the session saved under ``key``.

    A missing or malformed snapshot yields the empty default session.
    """
    try:
        blob = store.get(key)
    except (OSError, UnicodeDecodeError) as e:
        logger.error("Could not read snapshot %r: %s", key, e)
        return default_state()

    if blob is None:
        return default_state()

    try:
        return loads_state(blob)
    except MalformedSnapshotError as e:
        logger.warning("Discarding snapshot %r: %s", key, e.message)
        return default_state()

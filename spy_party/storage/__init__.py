"""
Persistence and snapshot re-emission for the session.
"""

from .event_emitter import SnapshotEmitter
from .snapshot_store import (
    DEFAULT_STORAGE_KEY,
    JsonFileStore,
    MemoryStore,
    SnapshotStore,
    load_state,
    save_state,
)

__all__ = [
    'SnapshotEmitter',
    'DEFAULT_STORAGE_KEY',
    'JsonFileStore',
    'MemoryStore',
    'SnapshotStore',
    'load_state',
    'save_state',
]

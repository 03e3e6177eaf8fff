"""
TASKBOARD - Persistence
=======================
The board is persisted as ONE serialized blob under a fixed key.

Backends only need get/set/clear of a string; ``TaskRepository`` turns
that into load()/save() of the full task collection.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Protocol

from .schema import Task, dump_tasks, parse_tasks

logger = logging.getLogger("taskboard.storage")

STORAGE_KEY = "mini_trello_tasks"


class KeyValueStorage(Protocol):
    """Minimal key-value backend"""

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def clear(self, key: str) -> None: ...


class MemoryStorage:
    """In-process backend, used for embedding and tests"""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def clear(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStorage:
    """
    File backend: each key is stored as ``<data_dir>/<key>.json``.

    Writes go to a temp file in the same directory and are renamed into
    place, so a crash mid-write never leaves a truncated blob behind.
    """

    def __init__(self, data_dir: str):
        self.data_dir = Path(data_dir).expanduser()

    def _get_file(self, key: str) -> Path:
        """Get path to the blob file for a key"""
        return self.data_dir / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        file_path = self._get_file(key)
        if not file_path.exists():
            return None
        return file_path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.data_dir, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp_name, self._get_file(key))
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def clear(self, key: str) -> None:
        self._get_file(key).unlink(missing_ok=True)


class TaskRepository:
    """Loads and saves the full task collection under one key"""

    def __init__(self, backend: KeyValueStorage, key: str = STORAGE_KEY):
        self.backend = backend
        self.key = key

    def load(self) -> List[Task]:
        """Load the collection; any failure degrades to an empty board"""
        try:
            raw = self.backend.get(self.key)
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to read stored tasks ({self.key}): {e}")
            return []

        if raw is None:
            logger.info(f"No stored tasks under '{self.key}', starting empty")
            return []
        return parse_tasks(raw)

    def save(self, tasks: Iterable[Task]) -> bool:
        """Persist the full collection. Returns False if the backend failed."""
        tasks = list(tasks)
        try:
            self.backend.set(self.key, dump_tasks(tasks))
        except OSError as e:
            logger.warning(f"Saving {len(tasks)} tasks failed, keeping in-memory state: {e}")
            return False
        logger.debug(f"💾 Saved {len(tasks)} tasks under '{self.key}'")
        return True

    def clear(self) -> None:
        self.backend.clear(self.key)

"""Persistence helpers (load/save) for the kanban board.

State lives in two independent key-value slots:
    kanban-tasks     JSON array of task records (camelCase field names)
    kanban-darkmode  "true" / "false"

FileSlots keeps one JSON file per key under the data directory. Reads never
fail: a missing or corrupt slot falls back to an empty board / light mode so
startup is never blocked by bad persisted state. Writes overwrite the whole
slot and propagate OSError to the caller.
"""
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple, Union

from models import Task, task_from_record, task_to_record

logger = logging.getLogger(__name__)

TASKS_KEY = 'kanban-tasks'
PREFERENCE_KEY = 'kanban-darkmode'


class FileSlots:
    """Durable slots: <directory>/<key>.json, replaced atomically on write."""

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        return self.directory / f'{key}.json'

    def get(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        if not path.exists():
            return None
        with open(path, 'r', encoding='utf-8') as f:
            return f.read()

    def set(self, key: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(prefix=f'.{key}.', dir=self.directory)
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                f.write(value)
            os.replace(tmp, self.path_for(key))
        except BaseException:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise


class MemorySlots:
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


class Storage:
    def __init__(self, slots):
        self.slots = slots

    def load(self) -> Tuple[List[Task], bool]:
        """Return (tasks, dark mode preference); never raises on bad data."""
        return self.load_tasks(), self.load_preference()

    def load_tasks(self) -> List[Task]:
        try:
            raw = self.slots.get(TASKS_KEY)
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("could not read %s: %s", TASKS_KEY, exc)
            return []
        if raw is None:
            return []
        try:
            data = json.loads(raw)
            if not isinstance(data, list):
                raise ValueError(f'expected a list of tasks, got {type(data).__name__}')
            tasks = [task_from_record(entry) for entry in data]
            ids = [t.id for t in tasks]
            if len(set(ids)) != len(ids):
                raise ValueError('duplicate task ids')
        except ValueError as exc:  # JSONDecodeError is a ValueError
            logger.warning("discarding malformed %s slot: %s", TASKS_KEY, exc)
            return []
        logger.info("loaded %d task(s)", len(tasks))
        return tasks

    def load_preference(self) -> bool:
        try:
            raw = self.slots.get(PREFERENCE_KEY)
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("could not read %s: %s", PREFERENCE_KEY, exc)
            return False
        if raw is None:
            return False
        return raw.strip().lower() == 'true'

    def save(self, tasks: Iterable[Task]) -> None:
        """Persist the whole collection, in order (pretty-printed)."""
        records = [task_to_record(t) for t in tasks]
        self.slots.set(TASKS_KEY, json.dumps(records, indent=4))
        logger.debug("saved %d task(s)", len(records))

    def save_preference(self, flag: bool) -> None:
        self.slots.set(PREFERENCE_KEY, 'true' if flag else 'false')
        logger.debug("saved dark mode preference %s", flag)

"""Board logic: owns the task collection and every mutation on it.

Tasks live in one list kept in insertion order; a column is just the filter
of that list by column_id. A move only reclassifies a task, so it keeps its
place in the insertion order and shows up in the target column where its
creation order puts it.

Every successful mutation notifies subscribers with a snapshot of the whole
collection (the storage layer subscribes to flush after each change).
"""
import logging
from dataclasses import replace
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from errors import InvalidColumnError, NotFoundError, ValidationError
from models import (
    COLUMN_IDS,
    DEFAULT_COLUMN,
    DEFAULT_PRIORITY,
    PRIORITIES,
    Task,
    column_title,
    new_task_id,
    utc_timestamp,
)

logger = logging.getLogger(__name__)

Listener = Callable[[Tuple[Task, ...]], None]

PATCHABLE_FIELDS: Tuple[str, ...] = ("title", "description", "priority", "column_id")


class TaskStore:
    def __init__(self,
                 tasks: Iterable[Task] = (),
                 id_factory: Callable[[], str] = new_task_id,
                 clock: Callable[[], str] = utc_timestamp):
        self._tasks: List[Task] = []
        self._listeners: List[Listener] = []
        self._id_factory = id_factory
        self._clock = clock
        seen = set()
        for task in tasks:
            if task.id in seen:
                raise ValidationError(f"Duplicate task id {task.id}.")
            _check_column(task.column_id)
            seen.add(task.id)
            self._tasks.append(task)

    # -------------------- observers --------------------
    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self) -> None:
        snapshot = tuple(self._tasks)
        for listener in list(self._listeners):
            listener(snapshot)

    # -------------------- queries --------------------
    def all_tasks(self) -> List[Task]:
        return list(self._tasks)

    def list_by_column(self, column_id: str) -> List[Task]:
        _check_column(column_id)
        return [t for t in self._tasks if t.column_id == column_id]

    def get(self, task_id: str) -> Task:
        return self._tasks[self._index_of(task_id)]

    def find_by_prefix(self, prefix: str) -> Task:
        """Resolve a full id or a unique id prefix (as typed at the prompt)."""
        raw = prefix.strip()
        if not raw:
            raise NotFoundError("Task id required.")
        for task in self._tasks:
            if task.id == raw:
                return task
        prefix = raw.lower()
        matches = [t for t in self._tasks if t.id.lower().startswith(prefix)]
        if not matches:
            raise NotFoundError(f"Task {prefix} not found.")
        if len(matches) > 1:
            raise NotFoundError(f"Task id {prefix} is ambiguous ({len(matches)} matches).")
        return matches[0]

    def counts(self) -> Dict[str, int]:
        counts = {cid: 0 for cid in COLUMN_IDS}
        for task in self._tasks:
            counts[task.column_id] += 1
        return counts

    def _index_of(self, task_id: str) -> int:
        for idx, task in enumerate(self._tasks):
            if task.id == task_id:
                return idx
        raise NotFoundError(f"Task {task_id} not found.")

    # -------------------- task operations --------------------
    def add(self,
            title: str,
            description: str = "",
            priority: str = DEFAULT_PRIORITY,
            column_id: str = DEFAULT_COLUMN) -> Task:
        _check_title(title)
        _check_description(description)
        _check_priority(priority)
        _check_column(column_id)
        task_id = self._id_factory()
        # the id factory is pluggable; never let it break uniqueness
        if any(t.id == task_id for t in self._tasks):
            raise ValidationError(f"Generated id {task_id} is already in use.")
        task = Task(
            id=task_id,
            title=title,
            description=description,
            priority=priority,
            column_id=column_id,
            created_at=self._clock(),
        )
        self._tasks.append(task)
        logger.debug("added task %s to %s", task.id, column_id)
        self._notify()
        return task

    def update(self, task_id: str, patch: Mapping[str, Any]) -> Task:
        idx = self._index_of(task_id)
        unknown = sorted(set(patch) - set(PATCHABLE_FIELDS))
        if unknown:
            raise ValidationError(f"Cannot change field(s): {', '.join(unknown)}.")
        if "title" in patch:
            _check_title(patch["title"])
        if "description" in patch:
            _check_description(patch["description"])
        if "priority" in patch:
            _check_priority(patch["priority"])
        if "column_id" in patch:
            _check_column(patch["column_id"])
        updated = replace(self._tasks[idx], **dict(patch))
        self._tasks[idx] = updated
        logger.debug("updated task %s (%s)", task_id, ", ".join(sorted(patch)) or "no fields")
        self._notify()
        return updated

    def delete(self, task_id: str) -> None:
        """Remove a task. Unknown ids are ignored; the caller already confirmed."""
        for idx, task in enumerate(self._tasks):
            if task.id == task_id:
                del self._tasks[idx]
                logger.debug("deleted task %s", task_id)
                self._notify()
                return
        logger.debug("delete of unknown task %s ignored", task_id)

    def move(self, task_id: str, target_column_id: str) -> Task:
        idx = self._index_of(task_id)
        _check_column(target_column_id)
        task = self._tasks[idx]
        if task.column_id != target_column_id:
            task = replace(task, column_id=target_column_id)
            self._tasks[idx] = task
            logger.debug("moved task %s to %s", task_id, target_column_id)
        self._notify()
        return task

    def __len__(self) -> int:
        return len(self._tasks)

    def __str__(self) -> str:
        counts = self.counts()
        return ', '.join(f'{column_title(cid)}: {counts[cid]} tasks' for cid in COLUMN_IDS)


def _check_title(title: Optional[str]) -> None:
    if not isinstance(title, str) or not title.strip():
        raise ValidationError("Title required.")


def _check_description(description: str) -> None:
    if not isinstance(description, str):
        raise ValidationError("Description must be text.")


def _check_priority(priority: str) -> None:
    if priority not in PRIORITIES:
        raise ValidationError(f"Invalid priority: {priority} (expected one of {', '.join(PRIORITIES)}).")


def _check_column(column_id: str) -> None:
    if column_id not in COLUMN_IDS:
        raise InvalidColumnError(f"Invalid column: {column_id}.")

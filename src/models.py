"""Data models for the kanban task board.

Column ids are fixed: "todo", "in-progress", "done". The stored key for the
first column stays unhyphenated while the header reads "To Do". Records on
disk use camelCase field names (createdAt, columnId) so the slot format stays
stable across releases.
"""
from __future__ import annotations
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Tuple


@dataclass(frozen=True)
class Column:
    id: str
    title: str


COLUMNS: Tuple[Column, ...] = (
    Column("todo", "To Do"),
    Column("in-progress", "In Progress"),
    Column("done", "Done"),
)
COLUMN_IDS: Tuple[str, ...] = tuple(c.id for c in COLUMNS)
PRIORITIES: Tuple[str, ...] = ("low", "medium", "high")

DEFAULT_PRIORITY = "medium"
DEFAULT_COLUMN = "todo"

# columns renamed since the first board format
LEGACY_COLUMNS: Dict[str, str] = {"doing": "in-progress"}

RECORD_FIELDS: Tuple[str, ...] = ("id", "title", "description", "priority", "createdAt", "columnId")


@dataclass(frozen=True)
class Task:
    """A single card on the board.

    Fields:
        id: Opaque unique string (uuid4), fixed at creation.
        title: Short display title; never empty once stored.
        description: Free text, may be empty.
        priority: One of "low", "medium", "high".
        column_id: One of COLUMN_IDS; decides which column shows the card.
        created_at: ISO timestamp (UTC, millisecond precision) fixed at creation.
    """
    id: str
    title: str
    description: str
    priority: str
    column_id: str
    created_at: str

    def __repr__(self) -> str:  # pragma: no cover - convenience only
        return f"Task(id={self.id[:8]}, title={self.title}, column={self.column_id})"


def new_task_id() -> str:
    return str(uuid.uuid4())


def utc_timestamp() -> str:
    """Current UTC time as e.g. 2026-10-19T08:30:00.000Z."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def column_title(column_id: str) -> str:
    for column in COLUMNS:
        if column.id == column_id:
            return column.title
    return column_id


def task_to_record(task: Task) -> Dict[str, str]:
    return {
        "id": task.id,
        "title": task.title,
        "description": task.description,
        "priority": task.priority,
        "createdAt": task.created_at,
        "columnId": task.column_id,
    }


def task_from_record(raw: Mapping[str, Any]) -> Task:
    """Build a Task from a persisted record.

    Raises ValueError for anything that would break board invariants: a
    missing or non-string field, an unknown priority or column, an empty id
    or title. The legacy column key "doing" is migrated to "in-progress".
    """
    if not isinstance(raw, Mapping):
        raise ValueError(f"task record must be an object, got {type(raw).__name__}")
    values: Dict[str, str] = {}
    for name in RECORD_FIELDS:
        value = raw.get(name)
        if not isinstance(value, str):
            raise ValueError(f"task record field {name!r} missing or not a string")
        values[name] = value
    column_id = LEGACY_COLUMNS.get(values["columnId"], values["columnId"])
    if column_id not in COLUMN_IDS:
        raise ValueError(f"unknown column {values['columnId']!r}")
    if values["priority"] not in PRIORITIES:
        raise ValueError(f"unknown priority {values['priority']!r}")
    if not values["id"]:
        raise ValueError("empty task id")
    if not values["title"].strip():
        raise ValueError("empty task title")
    return Task(
        id=values["id"],
        title=values["title"],
        description=values["description"],
        priority=values["priority"],
        column_id=column_id,
        created_at=values["createdAt"],
    )

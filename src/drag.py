"""Pick-up / drop state for moving cards between columns.

Idle -> Holding(id) on begin_drag, back to Idle on drop_on. There is no
cancel: letting go outside a column never calls drop_on, so the held id
stays until the next begin_drag replaces it.
"""
import logging
from typing import Optional

from board import TaskStore
from models import Task

logger = logging.getLogger(__name__)


class DragController:
    def __init__(self, store: TaskStore):
        self.store = store
        self.picked_up_task_id: Optional[str] = None

    @property
    def is_holding(self) -> bool:
        return self.picked_up_task_id is not None

    def begin_drag(self, task_id: str) -> None:
        if self.picked_up_task_id is not None and self.picked_up_task_id != task_id:
            logger.debug("abandoning drag of %s", self.picked_up_task_id)
        self.picked_up_task_id = task_id

    def drop_on(self, column_id: str) -> Optional[Task]:
        """Move the held task into column_id; no-op when nothing is held.

        The held id is released even when the move fails; the store's error
        still reaches the caller.
        """
        task_id = self.picked_up_task_id
        if task_id is None:
            return None
        try:
            return self.store.move(task_id, column_id)
        finally:
            self.picked_up_task_id = None

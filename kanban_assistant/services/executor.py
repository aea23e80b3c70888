"""Action executor

Applies validated board actions to the database one at a time, in order,
stopping at the first failure. Every attempted action yields exactly one
``ActionResult``; errors raised while applying an action are captured in its
result and never propagate to the caller.
"""

import logging
from typing import Callable, Dict, List, Sequence

from ..errors import ActionError
from ..models.actions import (
    ACTION_MODELS,
    ActionResult,
    AssignTaskAction,
    AssignTaskPayload,
    CleanupDoneTasksAction,
    CleanupDoneTasksPayload,
    CreateColumnAction,
    CreateColumnPayload,
    CreateTaskAction,
    CreateTaskPayload,
    DeleteColumnAction,
    DeleteColumnPayload,
    DeleteTaskAction,
    DeleteTaskPayload,
    MoveTaskAction,
    MoveTaskPayload,
    RenameColumnAction,
    RenameColumnPayload,
    UpdateTaskAction,
    UpdateTaskPayload,
)
from .database import Database, next_position

logger = logging.getLogger(__name__)

NON_EMPTY_COLUMN_ERROR = "Cannot delete column with tasks. Move or delete tasks first."

# Action model -> handler method name
_HANDLERS = {
    CreateTaskAction: "_create_task",
    UpdateTaskAction: "_update_task",
    MoveTaskAction: "_move_task",
    DeleteTaskAction: "_delete_task",
    AssignTaskAction: "_assign_task",
    CreateColumnAction: "_create_column",
    RenameColumnAction: "_rename_column",
    DeleteColumnAction: "_delete_column",
    CleanupDoneTasksAction: "_cleanup_done_tasks",
}

_unhandled = [model.__name__ for model in ACTION_MODELS if model not in _HANDLERS]
if _unhandled:
    raise RuntimeError(f"No executor handler for action(s): {', '.join(_unhandled)}")


class ActionExecutor:
    """Executes actions against the boards stored in ``db``"""

    def __init__(self, db: Database):
        self.db = db
        self._handlers: Dict[type, Callable] = {
            model: getattr(self, name) for model, name in _HANDLERS.items()
        }

    def execute_all(self, actions: Sequence, board_id: str) -> List[ActionResult]:
        """Execute ``actions`` in order, stopping after the first failure.

        Returns one result per attempted action, so the list is shorter than
        ``actions`` when execution stopped early.
        """
        results: List[ActionResult] = []

        for index, action in enumerate(actions):
            logger.info(f"Executing action {index + 1}/{len(actions)}: {action.type}")
            result = self.execute(action, board_id)
            results.append(result)

            if not result.success:
                skipped = len(actions) - index - 1
                logger.warning(
                    f"Action {action.type} failed: {result.error}"
                    + (f" ({skipped} remaining action(s) skipped)" if skipped else "")
                )
                break

        return results

    def execute(self, action, board_id: str) -> ActionResult:
        """Execute a single action scoped to ``board_id``"""
        handler = self._handlers[type(action)]

        try:
            data = handler(action.payload, board_id)
        except ActionError as e:
            return ActionResult.failed(action.type, str(e))
        except Exception as e:
            logger.error(f"Action execution error ({action.type}): {e}", exc_info=True)
            return ActionResult.failed(action.type, str(e) or e.__class__.__name__)

        return ActionResult.succeeded(action.type, data)

    # =========================================================================
    # Board scoping
    # =========================================================================

    def _scoped_column(self, column_id: str, board_id: str) -> dict:
        column = self.db.get_column(column_id)
        if not column or column["board_id"] != board_id:
            raise ActionError("Column not found or access denied")
        return column

    def _scoped_task(self, task_id: str, board_id: str) -> dict:
        task = self.db.get_task(task_id)
        column = self.db.get_column(task["column_id"]) if task else None
        if not column or column["board_id"] != board_id:
            raise ActionError("Task not found or access denied")
        return task

    # =========================================================================
    # Task actions
    # =========================================================================

    def _create_task(self, payload: CreateTaskPayload, board_id: str) -> dict:
        column = self._scoped_column(payload.column_id, board_id)
        position = next_position(self.db.list_tasks(column["id"]))

        return self.db.insert_task({
            "id": self.db.generate_id(),
            "column_id": column["id"],
            "title": payload.title,
            "description": payload.description or "",
            "position": position,
            "assigned_user_ids": [],
            "created_at": self.db.timestamp(),
            "updated_at": self.db.timestamp(),
        })

    def _update_task(self, payload: UpdateTaskPayload, board_id: str) -> dict:
        task = self._scoped_task(payload.task_id, board_id)

        updates = payload.model_dump(exclude_unset=True, exclude={"task_id"})
        updates["updated_at"] = self.db.timestamp()
        return self.db.update_task(task["id"], updates)

    def _move_task(self, payload: MoveTaskPayload, board_id: str) -> dict:
        task = self._scoped_task(payload.task_id, board_id)
        target = self._scoped_column(payload.target_column_id, board_id)
        source_column_id = task["column_id"]

        siblings = [t for t in self.db.list_tasks(target["id"]) if t["id"] != task["id"]]
        moved = self.db.update_task(task["id"], {
            "column_id": target["id"],
            "position": next_position(siblings),
            "updated_at": self.db.timestamp(),
        })

        self.db.compact_task_positions(source_column_id)
        return moved

    def _delete_task(self, payload: DeleteTaskPayload, board_id: str) -> dict:
        task = self._scoped_task(payload.task_id, board_id)

        self.db.delete_task(task["id"])
        self.db.compact_task_positions(task["column_id"])
        return {"id": task["id"], "deleted": True}

    def _assign_task(self, payload: AssignTaskPayload, board_id: str) -> dict:
        task = self._scoped_task(payload.task_id, board_id)
        user_ids = list(dict.fromkeys(payload.user_ids))

        if task.get("assigned_user_ids", []) == user_ids:
            return dict(task)

        return self.db.update_task(task["id"], {
            "assigned_user_ids": user_ids,
            "updated_at": self.db.timestamp(),
        })

    # =========================================================================
    # Column actions
    # =========================================================================

    def _create_column(self, payload: CreateColumnPayload, board_id: str) -> dict:
        position = next_position(self.db.list_columns(board_id))

        return self.db.insert_column({
            "id": self.db.generate_id(),
            "board_id": board_id,
            "title": payload.title,
            "position": position,
            "created_at": self.db.timestamp(),
        })

    def _rename_column(self, payload: RenameColumnPayload, board_id: str) -> dict:
        column = self._scoped_column(payload.column_id, board_id)
        return self.db.update_column(column["id"], {"title": payload.new_title})

    def _delete_column(self, payload: DeleteColumnPayload, board_id: str) -> dict:
        column = self._scoped_column(payload.column_id, board_id)

        if self.db.count_tasks(column["id"]) > 0:
            raise ActionError(NON_EMPTY_COLUMN_ERROR)

        self.db.delete_column(column["id"])
        self.db.compact_column_positions(board_id)
        return {"id": column["id"], "deleted": True}

    # =========================================================================
    # Board operations
    # =========================================================================

    def _cleanup_done_tasks(self, payload: CleanupDoneTasksPayload, board_id: str) -> dict:
        column = self.db.find_column_by_title(board_id, payload.column_title)
        if not column:
            raise ActionError(f'Column "{payload.column_title}" not found')

        deleted_count = self.db.delete_tasks_in_column(column["id"])
        logger.info(f"Cleaned up {deleted_count} task(s) from column '{column['title']}'")
        return {"deletedCount": deleted_count}

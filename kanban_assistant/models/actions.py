"""Board action models

The assistant may only request the action types declared here. Each action is
``{"type": ..., "payload": {...}}`` on the wire; payload keys are camelCase.
"""

from typing import Annotated, Any, List, Literal, Optional, Union, get_args

from pydantic import BaseModel, Field, StringConstraints, field_validator

DEFAULT_DONE_COLUMN = "Done"

# Opaque entity key: UUIDs and generated ids both fit
EntityId = Annotated[str, StringConstraints(pattern=r"^[A-Za-z0-9_-]{1,64}$")]
TaskTitle = Annotated[str, StringConstraints(min_length=1, max_length=500)]
ColumnTitle = Annotated[str, StringConstraints(min_length=1, max_length=100)]


class Payload(BaseModel):
    class Config:
        populate_by_name = True
        frozen = True


# =============================================================================
# Payloads
# =============================================================================

class CreateTaskPayload(Payload):
    column_id: EntityId = Field(..., alias="columnId")
    title: TaskTitle
    description: Optional[str] = None


class UpdateTaskPayload(Payload):
    task_id: EntityId = Field(..., alias="taskId")
    title: Optional[TaskTitle] = None
    description: Optional[str] = None

    @field_validator("title")
    @classmethod
    def title_not_null(cls, value):
        if value is None:
            raise ValueError("title cannot be null")
        return value


class MoveTaskPayload(Payload):
    task_id: EntityId = Field(..., alias="taskId")
    target_column_id: EntityId = Field(..., alias="targetColumnId")


class DeleteTaskPayload(Payload):
    task_id: EntityId = Field(..., alias="taskId")


class AssignTaskPayload(Payload):
    task_id: EntityId = Field(..., alias="taskId")
    user_ids: List[EntityId] = Field(..., alias="userIds")  # empty list unassigns everyone


class CreateColumnPayload(Payload):
    title: ColumnTitle


class RenameColumnPayload(Payload):
    column_id: EntityId = Field(..., alias="columnId")
    new_title: ColumnTitle = Field(..., alias="newTitle")


class DeleteColumnPayload(Payload):
    column_id: EntityId = Field(..., alias="columnId")


class CleanupDoneTasksPayload(Payload):
    column_title: ColumnTitle = Field(DEFAULT_DONE_COLUMN, alias="columnTitle")


# =============================================================================
# Actions
# =============================================================================

class CreateTaskAction(BaseModel):
    type: Literal["create_task"]
    payload: CreateTaskPayload


class UpdateTaskAction(BaseModel):
    type: Literal["update_task"]
    payload: UpdateTaskPayload


class MoveTaskAction(BaseModel):
    type: Literal["move_task"]
    payload: MoveTaskPayload


class DeleteTaskAction(BaseModel):
    type: Literal["delete_task"]
    payload: DeleteTaskPayload


class AssignTaskAction(BaseModel):
    type: Literal["assign_task"]
    payload: AssignTaskPayload


class CreateColumnAction(BaseModel):
    type: Literal["create_column"]
    payload: CreateColumnPayload


class RenameColumnAction(BaseModel):
    type: Literal["rename_column"]
    payload: RenameColumnPayload


class DeleteColumnAction(BaseModel):
    type: Literal["delete_column"]
    payload: DeleteColumnPayload


class CleanupDoneTasksAction(BaseModel):
    type: Literal["cleanup_done_tasks"]
    payload: CleanupDoneTasksPayload = Field(default_factory=CleanupDoneTasksPayload)


Action = Annotated[
    Union[
        CreateTaskAction,
        UpdateTaskAction,
        MoveTaskAction,
        DeleteTaskAction,
        AssignTaskAction,
        CreateColumnAction,
        RenameColumnAction,
        DeleteColumnAction,
        CleanupDoneTasksAction,
    ],
    Field(discriminator="type"),
]

ACTION_MODELS = get_args(get_args(Action)[0])


def action_type(model: type) -> str:
    """Return the wire ``type`` tag of an action model"""
    return get_args(model.model_fields["type"].annotation)[0]


ACTION_TYPES = tuple(action_type(model) for model in ACTION_MODELS)


class AssistantReply(BaseModel):
    """Top-level shape the completion service must return"""

    message: str
    actions: List[Action]


class ActionResult(BaseModel):
    """Outcome of executing one action"""

    action: str
    success: bool
    error: Optional[str] = None
    data: Optional[Any] = None

    class Config:
        frozen = True

    @classmethod
    def succeeded(cls, action: str, data: Any = None) -> "ActionResult":
        return cls(action=action, success=True, error=None, data=data)

    @classmethod
    def failed(cls, action: str, error: str) -> "ActionResult":
        return cls(action=action, success=False, error=error, data=None)


# Descriptions and example payloads shown to the model, one per action type
ACTION_CATALOG = {
    "create_task": {
        "description": "Create a new task at the bottom of a column.",
        "payload": {
            "columnId": "id-of-column",
            "title": "Task title",
            "description": "Optional description",
        },
    },
    "update_task": {
        "description": "Update an existing task's title and/or description. Omitted fields are left unchanged.",
        "payload": {
            "taskId": "id-of-task",
            "title": "New title (optional)",
            "description": "New description (optional)",
        },
    },
    "move_task": {
        "description": "Move a task to the bottom of a different column.",
        "payload": {"taskId": "id-of-task", "targetColumnId": "id-of-target-column"},
    },
    "delete_task": {
        "description": "Delete a task.",
        "payload": {"taskId": "id-of-task"},
    },
    "assign_task": {
        "description": (
            "Set the members assigned to a task. The list replaces the current assignees; "
            "an empty list unassigns everyone."
        ),
        "payload": {"taskId": "id-of-task", "userIds": ["id-of-member"]},
    },
    "create_column": {
        "description": "Create a new column at the right end of the board.",
        "payload": {"title": "Column name"},
    },
    "rename_column": {
        "description": "Rename an existing column.",
        "payload": {"columnId": "id-of-column", "newTitle": "New column name"},
    },
    "delete_column": {
        "description": "Delete a column. Only works if the column has no tasks.",
        "payload": {"columnId": "id-of-column"},
    },
    "cleanup_done_tasks": {
        "description": 'Delete every task in the "Done" column (or the column named by columnTitle).',
        "payload": {"columnTitle": DEFAULT_DONE_COLUMN},
    },
}


def check_catalog(catalog: dict, action_types) -> None:
    """Raise if ``catalog`` and the action union disagree on the set of types"""
    mismatched = sorted(set(action_types) ^ set(catalog))
    if mismatched:
        raise RuntimeError(f"Action catalog out of sync for action(s): {', '.join(mismatched)}")


check_catalog(ACTION_CATALOG, ACTION_TYPES)

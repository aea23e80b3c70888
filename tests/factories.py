"""Test data factories for Kanban Board Assistant tests"""

import json
from typing import List, Optional

from kanban_assistant.services.database import Database, next_position


def action(action_type: str, **payload) -> dict:
    """Wire-format action dict, e.g. ``action("delete_task", taskId=...)``"""
    return {"type": action_type, "payload": payload}


def assistant_reply(message: str = "Done.", actions: Optional[List[dict]] = None) -> str:
    """Raw completion text as the model would return it"""
    return json.dumps({"message": message, "actions": actions or []})


def completion_body(content: Optional[str]) -> dict:
    """Chat completions response body wrapping ``content``"""
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }
        ],
    }


def create_task(
    db: Database,
    column: dict,
    title: str = "Test Task",
    description: str = "",
    assigned_user_ids: Optional[List[str]] = None
) -> dict:
    """Insert a task at the bottom of ``column``"""
    return db.insert_task({
        "id": db.generate_id(),
        "column_id": column["id"],
        "title": title,
        "description": description,
        "position": next_position(db.list_tasks(column["id"])),
        "assigned_user_ids": assigned_user_ids or [],
        "created_at": db.timestamp(),
        "updated_at": db.timestamp(),
    })


def create_tasks(db: Database, column: dict, count: int) -> List[dict]:
    return [create_task(db, column, title=f"Task {i + 1}") for i in range(count)]


def positions(rows: List[dict]) -> List[int]:
    return [row["position"] for row in rows]

"""Board context handed to the model"""

import json
from dataclasses import dataclass, field
from typing import List

from .database import Database


@dataclass
class BoardContext:
    """Grounding context for one chat request"""

    board: dict
    members: List[dict] = field(default_factory=list)
    current_user_id: str = ""

    def board_json(self) -> str:
        return json.dumps(self.board, indent=2)

    def members_json(self) -> str:
        return json.dumps(self.members, indent=2)


def _task_summary(task: dict) -> dict:
    return {
        "id": task["id"],
        "title": task["title"],
        "description": task.get("description") or "",
        "position": task["position"],
        "assigned_user_ids": task.get("assigned_user_ids", []),
        "created_at": task.get("created_at"),
    }


def build_board_context(db: Database, board: dict, user_id: str) -> BoardContext:
    """Snapshot the board tree and member roster for ``user_id``.

    Always read fresh from the database; the model must never act on a stale
    picture of the board.
    """
    columns = []
    for column in db.list_columns(board["id"]):
        columns.append({
            "id": column["id"],
            "title": column["title"],
            "position": column["position"],
            "tasks": [_task_summary(task) for task in db.list_tasks(column["id"])],
        })

    # Owner first, then members in join order, then the caller
    roster_ids = list(dict.fromkeys(
        [board["user_id"], *db.get_board_member_ids(board["id"]), user_id]
    ))
    members = [
        {"id": profile["id"], "username": profile["username"]}
        for profile in db.get_profiles(roster_ids)
    ]

    return BoardContext(
        board={
            "id": board["id"],
            "title": board["title"],
            "owner_id": board["user_id"],
            "columns": columns,
        },
        members=members,
        current_user_id=user_id,
    )

"""TinyDB database service for board data"""

import logging
import secrets
import string
import uuid
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional

from tinydb import Query, TinyDB

logger = logging.getLogger(__name__)

DEFAULT_COLUMNS = ["To Do", "In Progress", "Done"]
INVITE_CODE_ALPHABET = string.ascii_uppercase + string.digits
INVITE_CODE_LENGTH = 6


def next_position(rows: Iterable[dict]) -> int:
    """Position that appends after ``rows``: max + 1, or 0 when empty"""
    return max((row["position"] for row in rows), default=-1) + 1


class Database:
    """Database service using TinyDB

    Pass ``storage`` (e.g. ``tinydb.storages.MemoryStorage``) instead of a
    path to keep everything in memory.
    """

    def __init__(self, db_path: Optional[Path] = None, storage=None):
        self.db_path = db_path
        self.storage = storage
        self.db: Optional[TinyDB] = None

    def initialize(self):
        """Initialize database connection"""
        if self.db is not None:
            return
        if self.storage is not None:
            self.db = TinyDB(storage=self.storage)
        else:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self.db = TinyDB(str(self.db_path))
        logger.info(f"Database connected: {self.db_path or self.storage.__name__}")

    def close(self):
        if self.db is not None:
            self.db.close()
            self.db = None

    @property
    def boards(self):
        return self.db.table("boards")

    @property
    def columns(self):
        return self.db.table("columns")

    @property
    def tasks(self):
        return self.db.table("tasks")

    @property
    def profiles(self):
        return self.db.table("profiles")

    @property
    def board_members(self):
        return self.db.table("board_members")

    @property
    def board_messages(self):
        return self.db.table("board_messages")

    def generate_id(self) -> str:
        return str(uuid.uuid4())

    def timestamp(self) -> str:
        return datetime.utcnow().isoformat()

    # =========================================================================
    # Profiles
    # =========================================================================

    def get_profile(self, user_id: str) -> Optional[dict]:
        return self.profiles.get(Q.id == user_id)

    def get_profiles(self, user_ids: List[str]) -> List[dict]:
        """Profiles for ``user_ids``, in the given order, skipping unknown ids"""
        by_id = {p["id"]: p for p in self.profiles.search(Q.id.one_of(user_ids))}
        return [by_id[user_id] for user_id in user_ids if user_id in by_id]

    def create_profile(self, username: str, email: str, user_id: Optional[str] = None) -> dict:
        profile = {
            "id": user_id or self.generate_id(),
            "username": username,
            "email": email.lower(),
            "created_at": self.timestamp(),
            "updated_at": self.timestamp(),
        }
        self.profiles.insert(profile)
        logger.info(f"Profile created: {profile['id']} ({username})")
        return profile

    # =========================================================================
    # Boards and membership
    # =========================================================================

    def get_board(self, board_id: str) -> Optional[dict]:
        return self.boards.get(Q.id == board_id)

    def get_board_by_invite_code(self, invite_code: str) -> Optional[dict]:
        return self.boards.get(Q.invite_code == invite_code.strip().upper())

    def create_board(self, title: str, owner_id: str, column_titles: Iterable[str] = DEFAULT_COLUMNS) -> dict:
        """Create a board owned by ``owner_id`` with its initial columns"""
        board = {
            "id": self.generate_id(),
            "title": title,
            "user_id": owner_id,
            "invite_code": None,
            "created_at": self.timestamp(),
        }
        self.boards.insert(board)

        for position, column_title in enumerate(column_titles):
            self.columns.insert({
                "id": self.generate_id(),
                "board_id": board["id"],
                "title": column_title,
                "position": position,
                "created_at": self.timestamp(),
            })

        logger.info(f"Board created: {board['id']} ({title})")
        return board

    def ensure_invite_code(self, board_id: str) -> str:
        """Return the board's invite code, generating it on first use"""
        board = self.get_board(board_id)
        if board.get("invite_code"):
            return board["invite_code"]

        while True:
            code = "".join(secrets.choice(INVITE_CODE_ALPHABET) for _ in range(INVITE_CODE_LENGTH))
            if not self.boards.contains(Q.invite_code == code):
                break

        self.boards.update({"invite_code": code}, Q.id == board_id)
        return code

    def get_board_member_ids(self, board_id: str) -> List[str]:
        rows = self.board_members.search(Q.board_id == board_id)
        return [row["user_id"] for row in sorted(rows, key=lambda x: x.get("created_at", ""))]

    def is_board_member(self, board_id: str, user_id: str) -> bool:
        return self.board_members.contains((Q.board_id == board_id) & (Q.user_id == user_id))

    def add_board_member(self, board_id: str, user_id: str) -> dict:
        membership = {
            "board_id": board_id,
            "user_id": user_id,
            "created_at": self.timestamp(),
        }
        self.board_members.insert(membership)
        return membership

    # =========================================================================
    # Columns
    # =========================================================================

    def get_column(self, column_id: str) -> Optional[dict]:
        return self.columns.get(Q.id == column_id)

    def list_columns(self, board_id: str) -> List[dict]:
        """Columns of a board ordered by position"""
        columns = self.columns.search(Q.board_id == board_id)
        return sorted(columns, key=lambda x: (x["position"], x.get("created_at", "")))

    def find_column_by_title(self, board_id: str, title: str) -> Optional[dict]:
        """Case-insensitive exact title match within a board"""
        wanted = title.casefold()
        for column in self.list_columns(board_id):
            if column["title"].casefold() == wanted:
                return column
        return None

    def insert_column(self, column: dict) -> dict:
        self.columns.insert(column)
        return dict(column)

    def update_column(self, column_id: str, updates: dict) -> dict:
        self.columns.update(updates, Q.id == column_id)
        return dict(self.get_column(column_id))

    def delete_column(self, column_id: str):
        self.columns.remove(Q.id == column_id)

    def compact_column_positions(self, board_id: str):
        """Renumber a board's columns to 0..n-1 keeping their order"""
        for index, column in enumerate(self.list_columns(board_id)):
            if column["position"] != index:
                self.columns.update({"position": index}, Q.id == column["id"])

    # =========================================================================
    # Tasks
    # =========================================================================

    def get_task(self, task_id: str) -> Optional[dict]:
        return self.tasks.get(Q.id == task_id)

    def list_tasks(self, column_id: str) -> List[dict]:
        """Tasks of a column ordered by position"""
        tasks = self.tasks.search(Q.column_id == column_id)
        return sorted(tasks, key=lambda x: (x["position"], x.get("created_at", "")))

    def count_tasks(self, column_id: str) -> int:
        return self.tasks.count(Q.column_id == column_id)

    def insert_task(self, task: dict) -> dict:
        self.tasks.insert(task)
        return dict(task)

    def update_task(self, task_id: str, updates: dict) -> dict:
        self.tasks.update(updates, Q.id == task_id)
        return dict(self.get_task(task_id))

    def delete_task(self, task_id: str):
        self.tasks.remove(Q.id == task_id)

    def delete_tasks_in_column(self, column_id: str) -> int:
        """Delete every task in a column and return how many were removed"""
        return len(self.tasks.remove(Q.column_id == column_id))

    def compact_task_positions(self, column_id: str):
        """Renumber a column's tasks to 0..m-1 keeping their order"""
        for index, task in enumerate(self.list_tasks(column_id)):
            if task["position"] != index:
                self.tasks.update({"position": index}, Q.id == task["id"])

    # =========================================================================
    # Conversation log
    # =========================================================================

    def insert_message(self, message: dict) -> dict:
        self.board_messages.insert(message)
        return dict(message)

    def list_messages(self, board_id: str) -> List[dict]:
        """Messages of a board in insertion order"""
        messages = self.board_messages.search(Q.board_id == board_id)
        return [dict(m) for m in sorted(messages, key=lambda x: x.doc_id)]


# Query helper
Q = Query()

"""Conversation record for board chats"""

import logging
from typing import List, Optional

from ..models.actions import ActionResult, AssistantReply
from .database import Database

logger = logging.getLogger(__name__)


class ConversationRecord:
    """Append-only log of chat messages per board"""

    def __init__(self, db: Database):
        self.db = db

    def append(
        self,
        board_id: str,
        role: str,
        content: str,
        user_id: Optional[str] = None,
        actions: Optional[list] = None,
        action_results: Optional[list] = None
    ) -> dict:
        return self.db.insert_message({
            "id": self.db.generate_id(),
            "board_id": board_id,
            "user_id": user_id,
            "role": role,
            "content": content,
            "actions": actions,
            "action_results": action_results,
            "created_at": self.db.timestamp(),
        })

    def record_exchange(
        self,
        board_id: str,
        user_id: str,
        user_message: str,
        reply: AssistantReply,
        results: List[ActionResult]
    ) -> Optional[dict]:
        """Log the user's message and the assistant's reply.

        Best effort: a failed write is logged and ``None`` is returned for the
        assistant message instead of raising.
        """
        try:
            self.append(board_id, "user", user_message, user_id=user_id)
        except Exception as e:
            logger.error(f"Error saving user message for board {board_id}: {e}")

        try:
            return self.append(
                board_id,
                "assistant",
                reply.message,
                actions=[action.model_dump(by_alias=True, exclude_unset=True) for action in reply.actions],
                action_results=[result.model_dump() for result in results],
            )
        except Exception as e:
            logger.error(f"Error saving AI message for board {board_id}: {e}")
            return None

    def history(self, board_id: str) -> List[dict]:
        return self.db.list_messages(board_id)

"""Chat models"""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from .actions import Action, ActionResult


class ChatRequest(BaseModel):
    # Both optional so a missing field is reported as a 400, not a 422
    message: Optional[str] = None
    board_id: Optional[str] = Field(None, alias="boardId")

    class Config:
        populate_by_name = True


class ConversationMessage(BaseModel):
    id: str
    board_id: str
    user_id: Optional[str] = None
    role: Literal["user", "assistant"]
    content: str
    actions: Optional[List[dict]] = None
    action_results: Optional[List[dict]] = None
    created_at: str


class ChatResponse(BaseModel):
    success: bool = True
    message: str
    actions: List[Action]
    action_results: List[ActionResult] = Field(..., alias="actionResults")
    saved_message: Optional[ConversationMessage] = Field(None, alias="savedMessage")

    class Config:
        populate_by_name = True

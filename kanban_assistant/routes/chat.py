"""AI chat routes"""

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends

from ..auth.jwt import get_current_user_optional
from ..dependencies import get_db, get_gateway
from ..models.chat import ChatResponse
from ..services.completion import CompletionGateway
from ..services.database import Database
from ..services.orchestrator import ChatOrchestrator

router = APIRouter()


# Body is read untyped: authentication is checked before its shape
# Payload fields the model did not send are not echoed
@router.post("/chat", response_model=ChatResponse, response_model_exclude_unset=True)
async def chat(
    body: Any = Body(None),
    user: Optional[dict] = Depends(get_current_user_optional),
    db: Database = Depends(get_db),
    gateway: CompletionGateway = Depends(get_gateway),
):
    """Turn a chat message into board actions and execute them"""
    orchestrator = ChatOrchestrator(db, gateway)
    return await orchestrator.handle_body(user, body)

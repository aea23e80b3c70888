"""Chat request orchestration

Runs one chat message through the pipeline:

    UNAUTHENTICATED -> AUTHORIZING -> CONTEXT_BUILDING -> COMPLETING
        -> VALIDATING -> EXECUTING -> PERSISTING -> RESPONDED

Auth and input failures are raised before the completion service is called.
Failed actions are reported in the results, not raised. A failed
conversation write never fails the request.
"""

import logging
from enum import Enum
from typing import Any, Optional

from pydantic import ValidationError

from ..auth.access import ensure_board_access
from ..errors import MissingField, Unauthenticated
from ..models.chat import ChatRequest, ChatResponse
from .completion import CompletionGateway
from .context import build_board_context
from .conversation import ConversationRecord
from .database import Database
from .executor import ActionExecutor
from .prompts import PromptRenderer
from .validator import parse_completion

logger = logging.getLogger(__name__)


class PipelineStage(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    AUTHORIZING = "authorizing"
    CONTEXT_BUILDING = "context_building"
    COMPLETING = "completing"
    VALIDATING = "validating"
    EXECUTING = "executing"
    PERSISTING = "persisting"
    RESPONDED = "responded"


class ChatOrchestrator:
    """Handles a single chat message for a board"""

    def __init__(
        self,
        db: Database,
        gateway: CompletionGateway,
        renderer: Optional[PromptRenderer] = None
    ):
        self.db = db
        self.gateway = gateway
        self.renderer = renderer or PromptRenderer()
        self.executor = ActionExecutor(db)
        self.conversation = ConversationRecord(db)
        self.stage = PipelineStage.UNAUTHENTICATED

    def _enter(self, stage: PipelineStage, board_id: Optional[str] = None):
        self.stage = stage
        logger.debug(f"[chat] board={board_id} stage={stage.value}")

    async def handle_body(self, user: Optional[dict], body: Any) -> ChatResponse:
        """Handle a raw request body, authenticating before reading it"""
        if not user:
            raise Unauthenticated()

        try:
            request = ChatRequest.model_validate(body)
        except ValidationError as e:
            logger.warning(f"[chat] rejected request body: {e.error_count()} error(s)")
            raise MissingField() from e

        return await self.handle(user, request.message, request.board_id)

    async def handle(
        self,
        user: Optional[dict],
        message: Optional[str],
        board_id: Optional[str]
    ) -> ChatResponse:
        if not user:
            raise Unauthenticated()

        if not message or not message.strip() or not board_id:
            raise MissingField()

        self._enter(PipelineStage.AUTHORIZING, board_id)
        board = ensure_board_access(self.db, board_id, user["id"])

        self._enter(PipelineStage.CONTEXT_BUILDING, board_id)
        context = build_board_context(self.db, board, user["id"])
        system_prompt = self.renderer.render(context)

        self._enter(PipelineStage.COMPLETING, board_id)
        logger.info(f"[chat] user={user['id']} board={board_id} message={message!r}")
        raw = await self.gateway.complete(system_prompt, message)

        self._enter(PipelineStage.VALIDATING, board_id)
        reply = parse_completion(raw)

        self._enter(PipelineStage.EXECUTING, board_id)
        results = self.executor.execute_all(reply.actions, board_id)
        logger.info(
            f"[chat] board={board_id} executed {len(results)}/{len(reply.actions)} action(s), "
            f"{sum(1 for r in results if r.success)} succeeded"
        )

        self._enter(PipelineStage.PERSISTING, board_id)
        saved_message = self.conversation.record_exchange(
            board_id, user["id"], message, reply, results
        )

        self._enter(PipelineStage.RESPONDED, board_id)
        return ChatResponse(
            success=True,
            message=reply.message,
            actions=reply.actions,
            action_results=results,
            saved_message=saved_message,
        )

"""Validation of raw completion output"""

import json
import logging

from pydantic import ValidationError

from ..errors import MalformedOutput, SchemaViolation
from ..models.actions import AssistantReply

logger = logging.getLogger(__name__)


def parse_completion(raw: str) -> AssistantReply:
    """Parse and validate the model output as ``{message, actions}``.

    All or nothing: one invalid action rejects the whole reply.
    """
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse AI response: {e}. Raw response was: {raw[:500]}")
        raise MalformedOutput(f"Invalid JSON response from AI: {e.msg}") from e

    try:
        return AssistantReply.model_validate(parsed)
    except ValidationError as e:
        violations = [
            {"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]}
            for err in e.errors()
        ]
        logger.error(f"AI response failed validation: {violations}")
        raise SchemaViolation(violations) from e

"""Error taxonomy for the chat pipeline

Every error a chat request can fail with is a ``PipelineError`` carrying the
HTTP status and the JSON body it is rendered as. Failures of a single board
action are ``ActionError`` and never leave the executor.
"""

from typing import Any, List, Optional


class PipelineError(Exception):
    """Base class for request-level failures"""

    status_code = 500
    error = "Internal server error"

    def __init__(self, details: Optional[Any] = None):
        super().__init__(details if details is not None else self.error)
        self.details = details

    def to_response(self) -> dict:
        body = {"error": self.error}
        if self.details is not None:
            body["details"] = self.details
        return body


# Auth errors

class Unauthenticated(PipelineError):
    status_code = 401
    error = "Unauthorized"


class AccessDenied(PipelineError):
    status_code = 403
    error = "Access denied to this board"


class BoardNotFound(PipelineError):
    status_code = 404
    error = "Board not found"


# Input errors

class MissingField(PipelineError):
    status_code = 400
    error = "Missing message or boardId"


# Upstream errors

class CompletionFailure(PipelineError):
    """The completion service errored or returned no content"""


# Contract errors

class ContractError(PipelineError):
    """The model output could not be accepted"""


class MalformedOutput(ContractError):
    """The model output is not valid JSON"""


class SchemaViolation(ContractError):
    """The model output does not match the response/action schema"""

    def __init__(self, violations: List[dict]):
        self.violations = violations
        summary = "; ".join(
            f"{'.'.join(str(part) for part in v.get('loc', ())) or '<root>'}: {v.get('msg', 'invalid')}"
            for v in violations
        )
        super().__init__(f"AI response failed validation: {summary}")


# Execution errors

class ActionError(Exception):
    """A board action could not be applied (recorded in its ActionResult)"""

"""Completion service gateway

Thin transport around an OpenAI-compatible chat completions endpoint. The
returned text is not interpreted here.
"""

import logging
from typing import Optional

import httpx

from ..config import Settings
from ..errors import CompletionFailure

logger = logging.getLogger(__name__)


class CompletionGateway:
    """Calls the completion service with JSON-object output enforced"""

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str],
        model: str,
        temperature: float = 0.3,
        max_tokens: int = 1000,
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Args:
            base_url: Base URL of the API, e.g. "https://api.groq.com/openai/v1"
            api_key: Bearer key for the API
            model: Model name
            temperature: Sampling temperature (kept low for consistent output)
            max_tokens: Upper bound on the generated output
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout
        self.transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> "CompletionGateway":
        return cls(
            base_url=settings.completion_base_url,
            api_key=settings.completion_api_key,
            model=settings.completion_model,
            temperature=settings.completion_temperature,
            max_tokens=settings.completion_max_tokens,
            timeout=settings.completion_timeout,
        )

    def build_request(self, system_prompt: str, user_message: str) -> dict:
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_message},
            ],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
            "response_format": {"type": "json_object"},
        }

    async def complete(self, system_prompt: str, user_message: str) -> str:
        """Return the raw completion text or raise ``CompletionFailure``"""
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        logger.info(f"Calling completion service with model: {self.model}")

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    f"{self.base_url}/chat/completions",
                    json=self.build_request(system_prompt, user_message),
                    headers=headers,
                )
        except httpx.HTTPError as e:
            logger.error(f"Completion request failed: {e}")
            raise CompletionFailure(f"Completion request failed: {e.__class__.__name__}") from e

        if response.status_code >= 400:
            logger.error(f"Completion service error {response.status_code}: {response.text[:500]}")
            raise CompletionFailure(f"Completion service returned HTTP {response.status_code}")

        try:
            content = response.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            logger.error(f"Unexpected completion response: {response.text[:500]}")
            raise CompletionFailure("Unexpected response from completion service") from e

        if not isinstance(content, str) or not content.strip():
            raise CompletionFailure("No response from AI")

        logger.debug(f"Raw completion: {content}")
        return content

"""Abstract base class for LLM provider back-ends."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, ClassVar

import httpx

from history_feed.exceptions import ConfigError, ProviderError
from history_feed.llm.config import ProviderConfig

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "You are a helpful assistant."
PAGE_CONTEXT_PROMPT = (
    "You are a helpful assistant. "
    "Here is the content of a webpage the user is asking about:\n\n{context}"
)


class BaseProvider(ABC):
    """One vendor's chat API behind a common ``complete()`` call.

    Subclasses set ``name`` (the config value selecting them), ``label``
    (used in error messages) and ``default_model``.

    Args:
        config: Provider settings.
        transport: Optional httpx transport, used by tests.
    """

    name: ClassVar[str]
    label: ClassVar[str]
    default_model: ClassVar[str] = ""
    requires_api_key: ClassVar[bool] = True

    def __init__(self, config: ProviderConfig, transport: httpx.AsyncBaseTransport | None = None):
        if self.requires_api_key and not config.api_key:
            raise ConfigError(
                "API key not configured. Please add your API key in settings."
            )
        self.config = config
        self.model = config.model or self.default_model
        self.transport = transport

    @abstractmethod
    async def complete(self, message: str, context: str | None = None) -> str:
        """Send one user message, optionally with page text, and return the reply."""
        ...

    async def close(self) -> None:
        """Release any client held by the provider."""

    async def _post_json(
        self,
        url: str,
        payload: dict[str, Any],
        headers: dict[str, str] | None = None,
        params: dict[str, str] | None = None,
    ) -> Any:
        """POST JSON and return the decoded body, mapping failures to ProviderError."""
        try:
            async with httpx.AsyncClient(timeout=60.0, transport=self.transport) as client:
                response = await client.post(
                    url,
                    json=payload,
                    headers={"Content-Type": "application/json", **(headers or {})},
                    params=params,
                )
        except httpx.HTTPError as e:
            raise ProviderError(f"{self.label} API request failed: {e}") from e

        if not response.is_success:
            reason = self._error_reason(response)
            logger.warning("%s API returned %s: %s", self.label, response.status_code, reason)
            raise ProviderError(f"{self.label} API error: {reason}")

        try:
            return response.json()
        except ValueError as e:
            raise ProviderError(f"{self.label} API returned invalid JSON") from e

    @staticmethod
    def _error_reason(response: httpx.Response) -> str:
        try:
            message = response.json()["error"]["message"]
        except (ValueError, KeyError, TypeError):
            message = None
        return message or response.reason_phrase or f"HTTP {response.status_code}"

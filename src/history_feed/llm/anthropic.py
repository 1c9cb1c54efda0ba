"""Anthropic Claude provider built on the Anthropic SDK, with retry logic."""

from __future__ import annotations

import asyncio
import logging

import httpx

from history_feed.exceptions import ProviderError
from history_feed.llm.base import PAGE_CONTEXT_PROMPT, SYSTEM_PROMPT, BaseProvider
from history_feed.llm.config import ProviderConfig

logger = logging.getLogger(__name__)

MAX_RETRIES = 3


def _api_error_reason(error: Exception) -> str:
    body = getattr(error, "body", None)
    if isinstance(body, dict):
        detail = body.get("error", body)
        if isinstance(detail, dict) and detail.get("message"):
            return detail["message"]
    return getattr(error, "message", None) or str(error)


class AnthropicProvider(BaseProvider):
    name = "anthropic"
    label = "Anthropic"
    default_model = "claude-3-5-sonnet-20241022"

    def __init__(
        self,
        config: ProviderConfig,
        transport: httpx.AsyncBaseTransport | None = None,
        max_retries: int = MAX_RETRIES,
    ):
        super().__init__(config, transport)
        try:
            from anthropic import AsyncAnthropic
        except ImportError:
            raise ImportError(
                "anthropic is required for AnthropicProvider. "
                "Install with: pip install anthropic"
            )
        http_client = httpx.AsyncClient(transport=transport) if transport else None
        # Retries are handled below so rate-limit waits are logged.
        self._client = AsyncAnthropic(api_key=config.api_key, http_client=http_client, max_retries=0)
        self.max_retries = max_retries

    async def close(self) -> None:
        await self._client.close()

    async def complete(self, message: str, context: str | None = None) -> str:
        from anthropic import APIError, APITimeoutError, RateLimitError

        system_prompt = PAGE_CONTEXT_PROMPT.format(context=context) if context else SYSTEM_PROMPT
        for attempt in range(self.max_retries):
            try:
                response = await self._client.messages.create(
                    model=self.model,
                    max_tokens=self.config.max_tokens,
                    system=system_prompt,
                    messages=[{"role": "user", "content": message}],
                )
            except RateLimitError:
                wait = 2 ** (attempt + 1)
                logger.warning(f"Rate limited, retrying in {wait}s (attempt {attempt + 1})")
                await asyncio.sleep(wait)
                continue
            except APITimeoutError:
                wait = 2 ** attempt
                logger.warning(f"API timeout, retrying in {wait}s (attempt {attempt + 1})")
                await asyncio.sleep(wait)
                continue
            except APIError as e:
                raise ProviderError(f"Anthropic API error: {_api_error_reason(e)}") from e

            for block in response.content:
                if block.type == "text":
                    return block.text
            raise ProviderError("Anthropic API returned no text content")

        raise ProviderError(f"Anthropic API failed after {self.max_retries} retries")

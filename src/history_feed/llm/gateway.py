"""Provider-agnostic entry point for sending chat messages to an LLM."""

from __future__ import annotations

import logging

import httpx

from history_feed.exceptions import ConfigError
from history_feed.llm.anthropic import AnthropicProvider
from history_feed.llm.base import BaseProvider
from history_feed.llm.config import ProviderConfig
from history_feed.llm.custom import CustomProvider
from history_feed.llm.gemini import GeminiProvider
from history_feed.llm.openai import OpenAIProvider

logger = logging.getLogger(__name__)

PROVIDER_CLASSES: dict[str, type[BaseProvider]] = {
    cls.name: cls
    for cls in (OpenAIProvider, AnthropicProvider, GeminiProvider, CustomProvider)
}


def create_provider(
    config: ProviderConfig,
    transport: httpx.AsyncBaseTransport | None = None,
) -> BaseProvider:
    """Instantiate the provider named by ``config.provider``."""
    try:
        provider_cls = PROVIDER_CLASSES[config.provider]
    except KeyError:
        raise ConfigError(f"Unknown provider: {config.provider}") from None
    return provider_cls(config, transport=transport)


class LLMGateway:
    """Send a message (plus optional page context) and get text back.

    The provider is chosen once, at construction. Missing credentials or an
    unknown provider raise ConfigError here; failed calls raise ProviderError
    from ``send()``.
    """

    def __init__(
        self,
        config: ProviderConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config = config
        self.provider = create_provider(config, transport=transport)

    async def send(self, message: str, context: str | None = None) -> str:
        logger.debug(
            "Sending %d chars to %s (context: %d chars)",
            len(message),
            self.provider.name,
            len(context or ""),
        )
        return await self.provider.complete(message, context)

    async def close(self) -> None:
        await self.provider.close()

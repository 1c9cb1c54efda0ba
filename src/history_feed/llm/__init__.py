"""LLM providers (OpenAI, Anthropic, Gemini, custom) behind one gateway."""

from history_feed.llm.anthropic import AnthropicProvider
from history_feed.llm.base import BaseProvider
from history_feed.llm.config import PROVIDERS, ProviderConfig, load_config, save_config
from history_feed.llm.custom import CustomProvider
from history_feed.llm.gateway import PROVIDER_CLASSES, LLMGateway, create_provider
from history_feed.llm.gemini import GeminiProvider
from history_feed.llm.openai import OpenAIProvider

__all__ = [
    "AnthropicProvider",
    "BaseProvider",
    "CustomProvider",
    "GeminiProvider",
    "LLMGateway",
    "OpenAIProvider",
    "PROVIDERS",
    "PROVIDER_CLASSES",
    "ProviderConfig",
    "create_provider",
    "load_config",
    "save_config",
]

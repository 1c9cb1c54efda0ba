"""LLM provider settings and their persistence."""

from __future__ import annotations

import os
from dataclasses import dataclass

from history_feed.storage import KeyValueStore

STORAGE_KEYS = {
    "api_key": "llm_api_key",
    "provider": "llm_provider",
    "endpoint": "llm_endpoint",
    "model": "llm_model",
}

OPENAI = "openai"
ANTHROPIC = "anthropic"
GEMINI = "gemini"
CUSTOM = "custom"
PROVIDERS = (OPENAI, ANTHROPIC, GEMINI, CUSTOM)

DEFAULT_PROVIDER = OPENAI
DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 2000

API_KEY_ENV_VARS = {
    OPENAI: "OPENAI_API_KEY",
    ANTHROPIC: "ANTHROPIC_API_KEY",
    GEMINI: "GEMINI_API_KEY",
}


@dataclass
class ProviderConfig:
    """Which LLM to talk to and how."""

    provider: str = DEFAULT_PROVIDER
    api_key: str = ""
    endpoint: str = ""
    model: str = ""
    temperature: float = DEFAULT_TEMPERATURE
    max_tokens: int = DEFAULT_MAX_TOKENS

    @property
    def requires_api_key(self) -> bool:
        """Custom endpoints may run without a key; hosted vendors may not."""
        return self.provider != CUSTOM

    @property
    def has_credential(self) -> bool:
        return bool(self.api_key) or not self.requires_api_key


def load_config(store: KeyValueStore) -> ProviderConfig:
    """Read settings from ``store``, falling back to the vendor's env var for the key."""
    provider = store.get(STORAGE_KEYS["provider"]) or DEFAULT_PROVIDER
    api_key = store.get(STORAGE_KEYS["api_key"]) or ""
    if not api_key and provider in API_KEY_ENV_VARS:
        api_key = os.environ.get(API_KEY_ENV_VARS[provider], "")
    return ProviderConfig(
        provider=provider,
        api_key=api_key,
        endpoint=store.get(STORAGE_KEYS["endpoint"]) or "",
        model=store.get(STORAGE_KEYS["model"]) or "",
    )


def save_config(
    store: KeyValueStore,
    *,
    provider: str | None = None,
    api_key: str | None = None,
    endpoint: str | None = None,
    model: str | None = None,
) -> None:
    """Persist the given settings; arguments left as None are not touched."""
    values = {"provider": provider, "api_key": api_key, "endpoint": endpoint, "model": model}
    for field_name, value in values.items():
        if value is not None:
            store.set(STORAGE_KEYS[field_name], value)

"""Provider for a user-supplied HTTP endpoint."""

from __future__ import annotations

import json

import httpx

from history_feed.exceptions import ConfigError
from history_feed.llm.base import BaseProvider
from history_feed.llm.config import ProviderConfig


class CustomProvider(BaseProvider):
    """POSTs ``{message, context, model, temperature, max_tokens}`` to an endpoint.

    The reply is read from ``response``, ``message`` or ``content`` in that
    order; any other JSON body is returned serialized.
    """

    name = "custom"
    label = "Custom"
    requires_api_key = False

    def __init__(self, config: ProviderConfig, transport: httpx.AsyncBaseTransport | None = None):
        if not config.endpoint:
            raise ConfigError("Custom endpoint not configured.")
        super().__init__(config, transport)

    async def complete(self, message: str, context: str | None = None) -> str:
        headers = {}
        if self.config.api_key:
            headers["Authorization"] = f"Bearer {self.config.api_key}"

        data = await self._post_json(
            self.config.endpoint,
            {
                "message": message,
                "context": context,
                "model": self.model,
                "temperature": self.config.temperature,
                "max_tokens": self.config.max_tokens,
            },
            headers=headers,
        )
        if isinstance(data, dict):
            for key in ("response", "message", "content"):
                value = data.get(key)
                if isinstance(value, str) and value:
                    return value
        return json.dumps(data)

    @staticmethod
    def _error_reason(response: httpx.Response) -> str:
        return response.reason_phrase or f"HTTP {response.status_code}"

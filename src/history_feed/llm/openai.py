"""OpenAI chat-completions provider."""

from __future__ import annotations

from history_feed.exceptions import ProviderError
from history_feed.llm.base import PAGE_CONTEXT_PROMPT, BaseProvider

OPENAI_CHAT_URL = "https://api.openai.com/v1/chat/completions"


class OpenAIProvider(BaseProvider):
    name = "openai"
    label = "OpenAI"
    default_model = "gpt-3.5-turbo"

    async def complete(self, message: str, context: str | None = None) -> str:
        messages = []
        if context:
            messages.append({"role": "system", "content": PAGE_CONTEXT_PROMPT.format(context=context)})
        messages.append({"role": "user", "content": message})

        data = await self._post_json(
            OPENAI_CHAT_URL,
            {
                "model": self.model,
                "messages": messages,
                "temperature": self.config.temperature,
                "max_tokens": self.config.max_tokens,
            },
            headers={"Authorization": f"Bearer {self.config.api_key}"},
        )
        try:
            return data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise ProviderError("OpenAI API returned no completion choices") from e

"""Google Gemini generateContent provider."""

from __future__ import annotations

from history_feed.exceptions import ProviderError
from history_feed.llm.base import PAGE_CONTEXT_PROMPT, BaseProvider

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"


class GeminiProvider(BaseProvider):
    name = "gemini"
    label = "Gemini"
    default_model = "gemini-1.5-flash"

    async def complete(self, message: str, context: str | None = None) -> str:
        prompt = message
        if context:
            prompt = f"{PAGE_CONTEXT_PROMPT.format(context=context)}\n\nUser question: {message}"

        data = await self._post_json(
            f"{GEMINI_BASE_URL}/{self.model}:generateContent",
            {
                "contents": [{"parts": [{"text": prompt}]}],
                "generationConfig": {
                    "temperature": self.config.temperature,
                    "maxOutputTokens": self.config.max_tokens,
                },
            },
            params={"key": self.config.api_key},
        )
        candidates = data.get("candidates") if isinstance(data, dict) else None
        if not candidates:
            raise ProviderError("Gemini API returned no response candidates")
        try:
            return candidates[0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError) as e:
            raise ProviderError("Gemini API returned a candidate without text") from e

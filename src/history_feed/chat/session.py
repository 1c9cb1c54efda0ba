"""Chat flow for a single history item: fetch page text, ask the LLM."""

from __future__ import annotations

import logging
from typing import Callable

from history_feed.chat.models import ASSISTANT, USER, ChatMessage, ChatNotice, ChatTranscript
from history_feed.chat.store import ChatSessionStore
from history_feed.exceptions import ConfigError, FetchError, ProviderError
from history_feed.history.models import VisitRecord
from history_feed.llm.config import PROVIDERS, ProviderConfig
from history_feed.llm.gateway import LLMGateway
from history_feed.web.fetcher import PageFetcher

logger = logging.getLogger(__name__)

SETTINGS_HINT = (
    "API configuration required. To use the chat feature, save your LLM settings, "
    "for example: save_config(store, api_key='your-api-key', provider='gemini'). "
    f"Supported providers: {', '.join(PROVIDERS)}."
)
CONTENT_FETCHED = "Page content fetched successfully! You can now ask questions about it."
CHAT_CLEARED = "Chat cleared successfully."


class ChatSession:
    """The chat opened on one visited page.

    Errors never escape: a failed fetch or LLM call comes back as a
    ``ChatNotice`` and the session stays usable for a retry.

    Args:
        record: The history item being discussed.
        store: Where transcripts live for the rest of the session.
        config_loader: Returns the current provider settings; called on every send.
        gateway_factory: Builds a gateway from settings. The gateway is reused
            until the settings change.
        fetcher: Page fetcher; a default PageFetcher when omitted.
    """

    def __init__(
        self,
        record: VisitRecord,
        store: ChatSessionStore,
        config_loader: Callable[[], ProviderConfig],
        gateway_factory: Callable[[ProviderConfig], LLMGateway] = LLMGateway,
        fetcher: PageFetcher | None = None,
    ):
        self.record = record
        self.store = store
        self.config_loader = config_loader
        self.gateway_factory = gateway_factory
        self.fetcher = fetcher or PageFetcher()
        self._gateway: LLMGateway | None = None
        self._gateway_config: ProviderConfig | None = None
        self.is_typing = False
        existing = store.get(record.url)
        self.transcript = existing.copy() if existing else ChatTranscript()

    @property
    def url(self) -> str:
        return self.record.url

    @property
    def messages(self) -> list[ChatMessage]:
        return list(self.transcript.messages)

    @property
    def page_content(self) -> str | None:
        return self.transcript.page_content

    def _save(self) -> None:
        self.store.upsert(self.url, self.transcript)

    def _add_message(self, role: str, text: str) -> None:
        self.transcript.messages.append(ChatMessage(role=role, text=text))
        self._save()

    async def fetch_content(self) -> ChatNotice:
        try:
            content = await self.fetcher.fetch_text(self.url)
        except FetchError as e:
            logger.warning("Error fetching content for %s: %s", self.url, e)
            return ChatNotice(
                "error",
                f"Failed to fetch page content: {e}. This might be due to "
                "cross-origin restrictions or the page being unavailable.",
            )
        self.transcript.page_content = content
        self._save()
        return ChatNotice("info", CONTENT_FETCHED)

    async def _gateway_for(self, config: ProviderConfig) -> LLMGateway:
        if self._gateway is not None and self._gateway_config == config:
            return self._gateway
        gateway = self.gateway_factory(config)
        await self.close()
        self._gateway = gateway
        self._gateway_config = config
        return gateway

    async def close(self) -> None:
        """Close the cached gateway, if any."""
        if self._gateway is not None:
            gateway, self._gateway, self._gateway_config = self._gateway, None, None
            await gateway.close()

    async def send(self, message: str) -> ChatNotice | None:
        """Send ``message``; returns None when the input was ignored."""
        message = message.strip()
        if not message or self.is_typing:
            return None

        self._add_message(USER, message)
        self.is_typing = True
        try:
            config = self.config_loader()
            if not config.has_credential:
                return ChatNotice("config_required", SETTINGS_HINT)
            gateway = await self._gateway_for(config)
            reply = await gateway.send(message, self.transcript.page_content)
        except ConfigError as e:
            logger.info("Chat not configured: %s", e)
            return ChatNotice("config_required", f"{e} {SETTINGS_HINT}")
        except ProviderError as e:
            logger.warning("Error sending message: %s", e)
            return ChatNotice("error", f"Error: {e}")
        finally:
            self.is_typing = False

        self._add_message(ASSISTANT, reply)
        return ChatNotice(ASSISTANT, reply)

    def clear(self) -> ChatNotice:
        """Drop this page's transcript and fetched content."""
        self.store.clear(self.url)
        self.transcript = ChatTranscript()
        return ChatNotice("info", CHAT_CLEARED)

    def clear_all(self) -> int:
        """Drop every page's transcript, this one included."""
        self.transcript = ChatTranscript()
        return self.store.clear_all()

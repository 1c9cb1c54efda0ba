"""Data models for per-page chat."""

from __future__ import annotations

from dataclasses import dataclass, field

USER = "user"
ASSISTANT = "assistant"
ROLES = (USER, ASSISTANT)


@dataclass(frozen=True)
class ChatMessage:
    role: str  # "user" | "assistant"
    text: str

    def __post_init__(self) -> None:
        if self.role not in ROLES:
            raise ValueError(f"Unknown chat role: {self.role!r}")


@dataclass
class ChatTranscript:
    """Messages and fetched page text for one visited page."""

    messages: list[ChatMessage] = field(default_factory=list)
    page_content: str | None = None

    def copy(self) -> ChatTranscript:
        return ChatTranscript(messages=list(self.messages), page_content=self.page_content)


@dataclass(frozen=True)
class ChatNotice:
    """Something to show in the chat view; never stored in a transcript.

    kind is one of "assistant", "info", "error" or "config_required".
    """

    kind: str
    text: str

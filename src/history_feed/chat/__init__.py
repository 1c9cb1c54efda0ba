"""Per-page chat transcripts and the chat flow."""

from history_feed.chat.models import ChatMessage, ChatNotice, ChatTranscript
from history_feed.chat.session import ChatSession
from history_feed.chat.store import ChatSessionStore

__all__ = [
    "ChatMessage",
    "ChatNotice",
    "ChatSession",
    "ChatSessionStore",
    "ChatTranscript",
]

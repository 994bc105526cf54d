"""Pass-through relays to third-party speech and chat APIs."""

from .clients import (
    CHAT_FALLBACK_MESSAGE,
    ChatRelay,
    ChatRequest,
    ChatResponse,
    ChatUsage,
    RelayConfigError,
    RelayError,
    SpeechRelay,
    SpeechRequest,
)

__all__ = [
    "CHAT_FALLBACK_MESSAGE",
    "ChatRelay",
    "ChatRequest",
    "ChatResponse",
    "ChatUsage",
    "RelayConfigError",
    "RelayError",
    "SpeechRelay",
    "SpeechRequest",
]

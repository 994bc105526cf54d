from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests
from pydantic import BaseModel, Field

from src.config import DEFAULT_CHAT_API_URL, DEFAULT_CHAT_MODEL, DEFAULT_SPEECH_API_URL, Settings

logger = logging.getLogger(__name__)

DEFAULT_VOICE = "alloy"
DEFAULT_SPEECH_MODEL = "tts-1"
CHAT_FALLBACK_MESSAGE = "Sorry, I couldn't reach the research assistant right now. Please try again later."
USER_AGENT = "bioscience-explorer/0.1"


class RelayError(RuntimeError):
    """Upstream call failed or returned an unusable response."""


class RelayConfigError(RelayError):
    """The relay is missing configuration (e.g. the upstream API key)."""


class ChatUsage(BaseModel):
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class ChatRequest(BaseModel):
    message: str
    context: str = Field(default="", description="Paper title/summary the question refers to.")


class ChatResponse(BaseModel):
    response: str
    usage: Optional[ChatUsage] = None


class SpeechRequest(BaseModel):
    text: str = ""
    voice: str = DEFAULT_VOICE
    model: str = DEFAULT_SPEECH_MODEL


def _upstream_error_message(r: Any) -> str:
    try:
        payload = r.json()
    except ValueError:
        return f"HTTP {r.status_code}"
    if isinstance(payload, dict):
        error = payload.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str):
            return error
    return "Unknown error"


class _BaseRelay:
    def __init__(
        self,
        *,
        api_key: Optional[str],
        url: str,
        timeout_s: float = 30.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.api_key = api_key
        self.url = url
        self.timeout_s = timeout_s
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": USER_AGENT})

    def _post(self, payload: Dict[str, Any]) -> Any:
        if not self.api_key:
            raise RelayConfigError("OpenAI API key not configured")

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        try:
            r = self.session.post(self.url, json=payload, headers=headers, timeout=self.timeout_s)
        except requests.RequestException as exc:
            logger.error("Relay request to %s failed: %s", self.url, exc)
            raise RelayError(f"Upstream request failed: {exc}") from exc

        if r.status_code != 200:
            message = _upstream_error_message(r)
            logger.error("Relay upstream %s returned HTTP %s: %s", self.url, r.status_code, message)
            raise RelayError(f"OpenAI API error: {message}")
        return r


class SpeechRelay(_BaseRelay):
    """Text-to-speech pass-through returning MP3 bytes."""

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> "SpeechRelay":
        return cls(
            api_key=settings.openai_api_key,
            url=settings.speech_api_url or DEFAULT_SPEECH_API_URL,
            timeout_s=settings.http_timeout_s,
            **kwargs,
        )

    def synthesize(self, text: str, voice: str = DEFAULT_VOICE, model: str = DEFAULT_SPEECH_MODEL) -> bytes:
        if not text:
            raise ValueError("Text is required")

        r = self._post(
            {
                "model": model,
                "input": text,
                "voice": voice,
                "response_format": "mp3",
                "speed": 1.0,
            }
        )
        return r.content


class ChatRelay(_BaseRelay):
    """Single-turn question answering about one paper via a chat-completions API."""

    def __init__(self, *, model: str = DEFAULT_CHAT_MODEL, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.model = model

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> "ChatRelay":
        return cls(
            api_key=settings.openai_api_key,
            url=settings.chat_api_url or DEFAULT_CHAT_API_URL,
            model=settings.chat_model,
            timeout_s=settings.http_timeout_s,
            **kwargs,
        )

    @staticmethod
    def build_messages(message: str, context: str) -> list[Dict[str, str]]:
        system = (
            "You are a research assistant helping readers understand space bioscience "
            "publications. Answer concisely using the paper context when it is relevant."
        )
        if context:
            system += f"\n\nPaper context:\n{context}"
        return [
            {"role": "system", "content": system},
            {"role": "user", "content": message},
        ]

    def ask(self, message: str, context: str = "") -> ChatResponse:
        r = self._post({"model": self.model, "messages": self.build_messages(message, context)})
        try:
            payload = r.json()
            content = payload["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise RelayError(f"Unexpected chat response: {exc}") from exc

        usage = payload.get("usage")
        return ChatResponse(
            response=content,
            usage=ChatUsage.model_validate(usage) if isinstance(usage, dict) else None,
        )

    def ask_or_apologize(self, message: str, context: str = "") -> ChatResponse:
        """Like ``ask`` but turns relay failures into a user-facing message."""
        try:
            return self.ask(message, context)
        except RelayError as exc:
            logger.warning("Chat relay failed, returning fallback message: %s", exc)
            return ChatResponse(response=CHAT_FALLBACK_MESSAGE)

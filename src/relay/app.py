"""HTTP relay in front of the third-party speech and chat APIs."""

from __future__ import annotations

import logging

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse, Response

from src import __version__
from src.config import get_settings

from .clients import (
    ChatRelay,
    ChatRequest,
    ChatResponse,
    RelayConfigError,
    RelayError,
    SpeechRelay,
    SpeechRequest,
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Bioscience Explorer Relay",
    description="Pass-through relay for text-to-speech and paper chat",
    version=__version__,
)


def get_speech_relay() -> SpeechRelay:
    return SpeechRelay.from_settings(get_settings())


def get_chat_relay() -> ChatRelay:
    return ChatRelay.from_settings(get_settings())


@app.get("/health")
async def health_check() -> dict[str, str]:
    return {"status": "healthy", "version": __version__}


@app.post("/api/tts")
def text_to_speech(body: SpeechRequest, relay: SpeechRelay = Depends(get_speech_relay)) -> Response:
    if not body.text:
        return JSONResponse(status_code=400, content={"error": "Text is required"})

    try:
        audio = relay.synthesize(body.text, voice=body.voice, model=body.model)
    except RelayConfigError as exc:
        return JSONResponse(status_code=500, content={"error": str(exc)})
    except RelayError as exc:
        logger.error("TTS relay error: %s", exc)
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to generate speech", "details": str(exc)},
        )

    return Response(content=audio, media_type="audio/mpeg")


@app.post("/api/chat", response_model=ChatResponse)
def chat(body: ChatRequest, relay: ChatRelay = Depends(get_chat_relay)):
    try:
        return relay.ask(body.message, body.context)
    except RelayConfigError as exc:
        return JSONResponse(status_code=500, content={"error": str(exc)})
    except RelayError as exc:
        logger.error("Chat relay error: %s", exc)
        return JSONResponse(
            status_code=502,
            content={"error": "Failed to get a response", "details": str(exc)},
        )

"""
음성 합성 협력자 (OpenAI TTS)
"""

from typing import Optional
import logging

from qisati.core.config import settings

logger = logging.getLogger(__name__)


class SpeechClient:
    async def synthesize(self, text: str, voice_id: str, instructions: Optional[str] = None) -> bytes:
        raise NotImplementedError


class OpenAISpeechClient(SpeechClient):
    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None):
        from openai import AsyncOpenAI
        self.client = AsyncOpenAI(api_key=api_key or settings.OPENAI_API_KEY)
        self.model = model or settings.TTS_MODEL

    async def synthesize(self, text: str, voice_id: str, instructions: Optional[str] = None) -> bytes:
        params = {
            "model": self.model,
            "voice": voice_id,
            "input": text,
            "response_format": "mp3",
        }
        # tts-1 계열은 instructions를 받지 않는다
        if instructions and self.model.startswith("gpt-4o"):
            params["instructions"] = instructions
        response = await self.client.audio.speech.create(**params)
        return response.content


def get_speech_client() -> SpeechClient:
    return OpenAISpeechClient()

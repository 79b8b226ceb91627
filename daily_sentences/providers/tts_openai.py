from __future__ import annotations

from pathlib import Path

from daily_sentences.providers.base import TTSProvider


class OpenAITTSProvider(TTSProvider):
    def __init__(self, api_key: str | None, voice: str = "alloy", model: str = "tts-1"):
        import openai
        self.client = openai.AsyncOpenAI(api_key=api_key or "")
        self.voice = voice
        self.model = model

    async def synthesize(self, text: str, output_path: Path) -> Path:
        resp = await self.client.audio.speech.create(
            model=self.model,
            voice=self.voice,
            input=text,
            response_format="mp3",
            speed=1.0,
        )
        output_path.write_bytes(resp.content)
        return output_path

    def name(self) -> str:
        return f"openai-tts/{self.voice}"

from __future__ import annotations

from pathlib import Path

from daily_sentences.providers.base import TTSProvider


class NoopTTSProvider(TTSProvider):
    """Speech disabled. Every request fails, so callers fall back to text only."""

    async def synthesize(self, text: str, output_path: Path) -> Path:
        raise RuntimeError("text-to-speech is disabled")

    def name(self) -> str:
        return "none"

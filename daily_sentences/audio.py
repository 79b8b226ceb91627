"""Speech for sentences that carry no recorded audio_reference."""
from __future__ import annotations

import hashlib
import logging
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from daily_sentences.config import Settings
    from daily_sentences.db import Database
    from daily_sentences.providers.base import TTSProvider

log = logging.getLogger("daily_sentences.tts")


def sentence_hash(text: str) -> str:
    return hashlib.sha256(text.encode()).hexdigest()[:16]


def build_tts(settings: Settings) -> TTSProvider:
    if settings.tts_provider == "edge-tts":
        from daily_sentences.providers.tts_edge import EdgeTTSProvider
        return EdgeTTSProvider(voice=settings.tts_voice)
    elif settings.tts_provider == "openai":
        from daily_sentences.providers.tts_openai import OpenAITTSProvider
        return OpenAITTSProvider(api_key=settings.resolved_api_key())
    elif settings.tts_provider == "none":
        from daily_sentences.providers.tts_noop import NoopTTSProvider
        return NoopTTSProvider()
    raise ValueError(f"Unknown TTS provider: {settings.tts_provider}")


async def get_or_create_audio(
    text: str,
    tts: TTSProvider,
    db: Database,
    cache_dir: Path,
) -> Path | None:
    """Path of an mp3 for *text*, synthesizing it on a cache miss.

    Returns None when the provider fails; the failure is logged, not raised,
    and nothing is recorded in the cache.
    """
    key = sentence_hash(text)
    known = db.get_audio_cache(key)
    if known and Path(known).exists():
        return Path(known)

    cache_dir.mkdir(parents=True, exist_ok=True)
    target = cache_dir / f"{key}.mp3"
    try:
        await tts.synthesize(text, target)
    except Exception as e:
        log.warning("TTS failed (%s): %s", tts.name(), e)
        return None
    db.set_audio_cache(key, str(target), tts.name())
    return target

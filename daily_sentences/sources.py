"""Ordered content tiers: the first tier that delivers wins."""
from __future__ import annotations

import logging
import random
from datetime import date
from typing import TYPE_CHECKING

from daily_sentences.errors import ChainExhaustedError, SourceError
from daily_sentences.providers.curated import CuratedSentenceProvider

if TYPE_CHECKING:
    from daily_sentences.config import Settings
    from daily_sentences.models import SentenceRecord
    from daily_sentences.providers.base import SentenceProvider

log = logging.getLogger("daily_sentences.sources")


class ContentSourceChain:
    def __init__(self, providers: list[SentenceProvider]):
        self.providers = list(providers)

    async def generate(self, count: int, day: date) -> list[SentenceRecord]:
        """Return the batch of the first provider that succeeds.

        Each provider gets exactly one attempt.  ``SourceError`` moves on to
        the next tier; any other exception is a bug and propagates.  Raises
        ``ChainExhaustedError`` when every tier failed.
        """
        failures: list[tuple[str, SourceError]] = []
        for provider in self.providers:
            try:
                records = await provider.generate(count, day)
            except SourceError as e:
                log.warning("%s failed (%s: %s), trying next source",
                            provider.name(), type(e).__name__, e)
                failures.append((provider.name(), e))
                continue
            log.info("%s delivered %d sentences for %s", provider.name(), len(records), day)
            return records
        raise ChainExhaustedError(failures)

    def names(self) -> list[str]:
        return [p.name() for p in self.providers]


def build_chain(settings: Settings, rng: random.Random | None = None) -> ContentSourceChain:
    providers: list[SentenceProvider] = []
    if settings.llm_provider == "openai":
        from daily_sentences.providers.llm_openai import OpenAISentenceProvider
        providers.append(OpenAISentenceProvider(
            api_key=settings.resolved_api_key(),
            model=settings.llm_model,
            base_url=settings.llm_base_url,
            max_tokens=settings.llm_max_tokens,
            temperature=settings.llm_temperature,
        ))
    elif settings.llm_provider != "none":
        raise ValueError(f"Unknown LLM provider: {settings.llm_provider}")
    providers.append(CuratedSentenceProvider(rng=rng))
    return ContentSourceChain(providers)

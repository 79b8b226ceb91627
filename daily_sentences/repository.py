"""Compose the content chain and the store: seeding, refresh and reads."""
from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import date, timedelta
from typing import TYPE_CHECKING

from daily_sentences.curated import SEED_SENTENCES
from daily_sentences.errors import ChainExhaustedError
from daily_sentences.models import DailyPack, SentenceRecord
from daily_sentences.providers.curated import build_records

if TYPE_CHECKING:
    from daily_sentences.config import Settings
    from daily_sentences.sources import ContentSourceChain
    from daily_sentences.store import SentenceStore

log = logging.getLogger("daily_sentences.repository")

SEED_TAG = "seed"


class SentenceRepository:
    def __init__(
        self,
        store: SentenceStore,
        chain: ContentSourceChain,
        settings: Settings,
        today: Callable[[], date] = date.today,
    ):
        self.store = store
        self.chain = chain
        self.settings = settings
        self._today = today
        self._seed_lock = asyncio.Lock()

    def today(self) -> date:
        return self._today()

    # ── Writes ────────────────────────────────────────────────────────────

    async def seed_if_empty(self) -> list[SentenceRecord]:
        """Fill today's pack if it has nothing yet.

        Falls back to the bundled seed batch when no content source at all
        is reachable.  Returns the records written (empty when already seeded).
        Concurrent calls are serialized, so only the first one writes.
        """
        async with self._seed_lock:
            day = self.today()
            if self.store.fetch_pack(day):
                log.debug("Seed: %s already has sentences", day)
                return []
            try:
                records = await self.chain.generate(self.settings.daily_sentence_count, day)
            except ChainExhaustedError as e:
                log.warning("Seed: %s, using bundled seed batch", e)
                records = build_records(SEED_SENTENCES, SEED_TAG, day)
            self.store.upsert_many(records)
        log.info("Seed: stored %d sentences for %s", len(records), day)
        return records

    async def refresh(self) -> list[SentenceRecord]:
        """Generate a new batch for today and add it next to the existing ones.

        Nothing is deleted for the day: the newest batch shows up first in
        ``fetch_pack`` and every batch remains visible in ``fetch_all``.  If
        generation fails the error propagates and the store is untouched.
        """
        day = self.today()
        existing = len(self.store.fetch_all(day))
        log.info("Refresh: %d sentences already stored for %s", existing, day)
        records = await self.chain.generate(self.settings.daily_sentence_count, day)
        self.store.upsert_many(records)
        log.info("Refresh: added %d sentences", len(records))
        self.apply_retention()
        return records

    def apply_retention(self) -> int:
        """Drop days older than ``retention_days``. Unbounded when it is None."""
        keep = self.settings.retention_days
        if keep is None:
            return 0
        cutoff = self.today() - timedelta(days=keep)
        return self.store.prune_before(cutoff)

    def toggle_learned(self, sentence_id: str) -> bool:
        return self.store.toggle_learned(sentence_id)

    def toggle_favorite(self, sentence_id: str) -> bool:
        return self.store.toggle_favorite(sentence_id)

    def delete(self, sentence_id: str) -> bool:
        record = self.store.get(sentence_id)
        if record is None:
            return False
        self.store.delete(record)
        return True

    # ── Reads ─────────────────────────────────────────────────────────────

    def fetch_pack(self, day: date | None = None) -> list[SentenceRecord]:
        return self.store.fetch_pack(day or self.today())

    def fetch_all(self, day: date | None = None) -> list[SentenceRecord]:
        return self.store.fetch_all(day or self.today())

    def todays_pack(self) -> DailyPack:
        day = self.today()
        return DailyPack(date=day, sentences=self.store.fetch_pack(day))

    def get(self, sentence_id: str) -> SentenceRecord | None:
        return self.store.get(sentence_id)

    def history(self, days: int | None = None) -> list[SentenceRecord]:
        """Everything stored over the last *days* days, newest first."""
        days = self.settings.history_days if days is None else days
        today = self.today()
        records: list[SentenceRecord] = []
        for offset in range(days):
            records.extend(self.store.fetch_all(today - timedelta(days=offset)))
        return sorted(records, key=lambda r: r.created_at, reverse=True)

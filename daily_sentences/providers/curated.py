from __future__ import annotations

import random
import uuid
from datetime import date

from daily_sentences.curated import CURATED_SENTENCES
from daily_sentences.models import SentenceRecord, utc_now
from daily_sentences.providers.base import SentenceProvider, record_id


def build_records(
    entries: list[tuple[str, str, str]], tag: str, day: date
) -> list[SentenceRecord]:
    """Turn ``(hanzi, pinyin, english)`` tuples into one batch of records."""
    created = utc_now()
    ts = created.timestamp()
    batch = uuid.uuid4().hex
    return [
        SentenceRecord(
            id=record_id(tag, ts, i),
            hanzi=hanzi,
            pinyin=pinyin,
            english=english,
            pack_date=day,
            index_in_pack=i + 1,
            created_at=created,
            batch_id=batch,
        )
        for i, (hanzi, pinyin, english) in enumerate(entries)
    ]


class CuratedSentenceProvider(SentenceProvider):
    """Random subset of the bundled sentence pool. Never fails."""

    tag = "curated"

    def __init__(
        self,
        sentences: list[tuple[str, str, str]] | None = None,
        rng: random.Random | None = None,
    ):
        self.sentences = list(sentences if sentences is not None else CURATED_SENTENCES)
        self.rng = rng or random.Random()

    async def generate(self, count: int, day: date) -> list[SentenceRecord]:
        picked = self.rng.sample(self.sentences, min(max(count, 0), len(self.sentences)))
        return build_records(picked, self.tag, day)

    def name(self) -> str:
        return f"curated/{len(self.sentences)}"

"""Shared test fixtures."""
from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from daily_sentences.db import Database
from daily_sentences.models import SentenceRecord

TODAY = date(2026, 10, 18)
T0 = datetime(2026, 10, 18, 8, 0, 0, 123456, tzinfo=timezone.utc)


@pytest.fixture
def tmp_db(tmp_path):
    """Create a fresh temporary database."""
    db = Database(tmp_path / "test.db")
    yield db
    db.close()


@pytest.fixture
def make_record():
    """Factory for SentenceRecord with sensible defaults."""

    def _make(
        id: str,
        day: date = TODAY,
        index: int = 1,
        created_at: datetime = T0,
        **kwargs,
    ) -> SentenceRecord:
        return SentenceRecord(
            id=id,
            hanzi=kwargs.pop("hanzi", f"句子{id}"),
            pinyin=kwargs.pop("pinyin", f"jùzi {id}"),
            english=kwargs.pop("english", f"Sentence {id}"),
            pack_date=day,
            index_in_pack=index,
            created_at=created_at,
            **kwargs,
        )

    return _make


@pytest.fixture
def make_batch(make_record):
    """Factory for one batch: same day, same created_at, indices 1..n."""

    def _make(
        prefix: str,
        n: int = 5,
        day: date = TODAY,
        created_at: datetime = T0,
    ) -> list[SentenceRecord]:
        return [
            make_record(
                f"{prefix}-{i}",
                day=day,
                index=i,
                created_at=created_at,
                batch_id=prefix,
            )
            for i in range(1, n + 1)
        ]

    return _make


@pytest.fixture
def sample_records(make_batch):
    """Five records forming today's single batch."""
    return make_batch("sample")


@pytest.fixture
def two_batches(make_batch):
    """An older and a newer batch for today, five records each."""
    older = make_batch("older", created_at=T0)
    newer = make_batch("newer", created_at=T0 + timedelta(hours=2))
    return older, newer

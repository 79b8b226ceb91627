"""Tests for seeding, refresh and reads through SentenceRepository."""
from __future__ import annotations

import asyncio
import random
from datetime import date, datetime, timedelta, timezone

import pytest

from daily_sentences.config import Settings
from daily_sentences.curated import SEED_SENTENCES
from daily_sentences.errors import ChainExhaustedError, PersistenceError, TransportError
from daily_sentences.models import SentenceRecord
from daily_sentences.providers.base import SentenceProvider
from daily_sentences.providers.curated import CuratedSentenceProvider
from daily_sentences.repository import SentenceRepository
from daily_sentences.sources import ContentSourceChain
from daily_sentences.store import InMemoryStore

TODAY = date(2026, 10, 18)
T0 = datetime(2026, 10, 18, 8, 0, tzinfo=timezone.utc)


class ClockedProvider(SentenceProvider):
    """Each call yields a new batch stamped one minute after the previous one."""

    tag = "fake"

    def __init__(self, n: int = 5):
        self.n = n
        self.calls = 0

    async def generate(self, count, day):
        self.calls += 1
        created = T0 + timedelta(minutes=self.calls)
        return [
            SentenceRecord(
                id=f"fake-{self.calls}-{i}",
                hanzi=f"句{self.calls}.{i}",
                pinyin="jù",
                english=f"Sentence {self.calls}.{i}",
                pack_date=day,
                index_in_pack=i,
                created_at=created,
                batch_id=f"batch-{self.calls}",
            )
            for i in range(1, min(count, self.n) + 1)
        ]

    def name(self) -> str:
        return "fake"


class SlowProvider(ClockedProvider):
    async def generate(self, count, day):
        await asyncio.sleep(0.05)
        return await super().generate(count, day)


class DownProvider(SentenceProvider):
    async def generate(self, count, day):
        raise TransportError("offline")

    def name(self) -> str:
        return "down"


class BrokenStore(InMemoryStore):
    def upsert_many(self, records):
        raise PersistenceError("disk full")


def _repo(store=None, providers=None, today=TODAY, **settings):
    settings.setdefault("llm_provider", "none")
    chain = ContentSourceChain(providers if providers is not None else [ClockedProvider()])
    return SentenceRepository(
        store if store is not None else InMemoryStore(),
        chain,
        Settings(**settings),
        today=lambda: today,
    )


class TestSeedIfEmpty:
    @pytest.mark.asyncio
    async def test_seeds_empty_day(self):
        repo = _repo()
        records = await repo.seed_if_empty()
        assert len(records) == 5
        assert len(repo.fetch_pack()) == 5

    @pytest.mark.asyncio
    async def test_seed_twice(self):
        provider = ClockedProvider()
        repo = _repo(providers=[provider])
        await repo.seed_if_empty()
        assert await repo.seed_if_empty() == []
        assert len(repo.fetch_all()) == 5
        assert provider.calls == 1

    @pytest.mark.asyncio
    async def test_concurrent_seeds_write_once(self):
        provider = SlowProvider()
        repo = _repo(providers=[provider])
        results = await asyncio.gather(repo.seed_if_empty(), repo.seed_if_empty())
        assert sorted(len(r) for r in results) == [0, 5]
        assert repo.store.count() == 5
        assert provider.calls == 1

    @pytest.mark.asyncio
    async def test_concurrent_seeds_curated(self):
        class SlowCurated(CuratedSentenceProvider):
            async def generate(self, count, day):
                await asyncio.sleep(0.05)
                return await super().generate(count, day)

        repo = _repo(providers=[SlowCurated(rng=random.Random(0))])
        await asyncio.gather(repo.seed_if_empty(), repo.seed_if_empty())
        assert repo.store.count() == 5

    @pytest.mark.asyncio
    async def test_existing_day_untouched(self, sample_records):
        provider = ClockedProvider()
        store = InMemoryStore(sample_records)
        repo = _repo(store=store, providers=[provider])
        assert await repo.seed_if_empty() == []
        assert provider.calls == 0
        assert store.count() == 5

    @pytest.mark.asyncio
    async def test_only_today_counts(self, make_batch):
        store = InMemoryStore(make_batch("old", day=TODAY - timedelta(days=1)))
        repo = _repo(store=store)
        assert len(await repo.seed_if_empty()) == 5
        assert store.count() == 10

    @pytest.mark.asyncio
    async def test_uses_curated_when_remote_down(self):
        repo = _repo(providers=[DownProvider(), CuratedSentenceProvider(rng=random.Random(3))])
        records = await repo.seed_if_empty()
        assert len(records) == 5
        assert all(r.id.startswith("curated-") for r in records)

    @pytest.mark.asyncio
    async def test_bundled_seed_when_chain_exhausted(self):
        repo = _repo(providers=[DownProvider()])
        records = await repo.seed_if_empty()
        assert [r.hanzi for r in records] == [s[0] for s in SEED_SENTENCES]
        assert all(r.id.startswith("seed-") for r in records)
        assert len(repo.fetch_pack()) == 5

    @pytest.mark.asyncio
    async def test_count_from_settings(self):
        repo = _repo(daily_sentence_count=3)
        assert len(await repo.seed_if_empty()) == 3

    @pytest.mark.asyncio
    async def test_persistence_error_propagates(self):
        repo = _repo(store=BrokenStore())
        with pytest.raises(PersistenceError):
            await repo.seed_if_empty()

    @pytest.mark.asyncio
    async def test_with_sqlite(self, tmp_db):
        repo = _repo(store=tmp_db)
        await repo.seed_if_empty()
        await repo.seed_if_empty()
        assert tmp_db.count() == 5


class TestRefresh:
    @pytest.mark.asyncio
    async def test_additive(self, tmp_db):
        repo = _repo(store=tmp_db)
        await repo.seed_if_empty()
        added = await repo.refresh()
        assert len(added) == 5
        assert len(repo.fetch_all()) == 10
        assert [r.id for r in repo.fetch_pack()] == [r.id for r in added]

    @pytest.mark.asyncio
    async def test_k_plus_m(self, make_batch):
        store = InMemoryStore(make_batch("k", n=3, created_at=T0 - timedelta(hours=1)))
        repo = _repo(store=store, providers=[ClockedProvider(n=4)])
        await repo.refresh()
        assert len(repo.fetch_all()) == 7
        pack = repo.fetch_pack()
        assert len(pack) == 5
        assert [r.batch_id for r in pack] == ["batch-1"] * 4 + ["k"]

    @pytest.mark.asyncio
    async def test_refresh_on_empty_day(self):
        repo = _repo()
        assert len(await repo.refresh()) == 5

    @pytest.mark.asyncio
    async def test_failure_leaves_store_untouched(self, sample_records):
        store = InMemoryStore(sample_records)
        repo = _repo(store=store, providers=[DownProvider()])
        with pytest.raises(ChainExhaustedError):
            await repo.refresh()
        assert store.count() == 5

    @pytest.mark.asyncio
    async def test_retention_prunes_old_days(self, make_batch):
        store = InMemoryStore(
            make_batch("ancient", day=TODAY - timedelta(days=10))
            + make_batch("recent", day=TODAY - timedelta(days=3))
        )
        repo = _repo(store=store, retention_days=7)
        await repo.refresh()
        assert store.fetch_all(TODAY - timedelta(days=10)) == []
        assert len(store.fetch_all(TODAY - timedelta(days=3))) == 5
        assert store.count() == 10

    @pytest.mark.asyncio
    async def test_unbounded_by_default(self, make_batch):
        store = InMemoryStore(make_batch("ancient", day=TODAY - timedelta(days=400)))
        repo = _repo(store=store)
        await repo.refresh()
        assert store.count() == 10


class TestMutations:
    def test_toggle(self, sample_records):
        repo = _repo(store=InMemoryStore(sample_records))
        assert repo.toggle_learned("sample-1") is True
        assert repo.get("sample-1").learned is True
        assert repo.toggle_favorite("sample-2") is True
        assert repo.get("sample-2").favorite is True

    def test_toggle_unknown(self):
        repo = _repo()
        assert repo.toggle_learned("ghost") is False

    def test_delete(self, sample_records):
        repo = _repo(store=InMemoryStore(sample_records))
        assert repo.delete("sample-1") is True
        assert repo.get("sample-1") is None
        assert repo.delete("sample-1") is False


class TestReads:
    def test_todays_pack(self, sample_records):
        repo = _repo(store=InMemoryStore(sample_records))
        pack = repo.todays_pack()
        assert pack.date == TODAY
        assert [s.index_in_pack for s in pack.sentences] == [1, 2, 3, 4, 5]

    def test_fetch_for_other_day(self, make_batch):
        yesterday = TODAY - timedelta(days=1)
        repo = _repo(store=InMemoryStore(make_batch("y", day=yesterday)))
        assert repo.fetch_pack() == []
        assert len(repo.fetch_pack(yesterday)) == 5

    def test_history_newest_first(self, make_batch):
        store = InMemoryStore(
            make_batch("d0", n=2, created_at=T0)
            + make_batch("d2", n=2, day=TODAY - timedelta(days=2),
                         created_at=T0 - timedelta(days=2))
            + make_batch("d40", n=2, day=TODAY - timedelta(days=40),
                         created_at=T0 - timedelta(days=40))
        )
        repo = _repo(store=store)
        history = repo.history()
        assert [r.batch_id for r in history] == ["d0", "d0", "d2", "d2"]

    def test_history_window(self, make_batch):
        store = InMemoryStore(
            make_batch("d0", n=1) + make_batch("d2", n=1, day=TODAY - timedelta(days=2))
        )
        repo = _repo(store=store)
        assert len(repo.history(2)) == 1
        assert len(repo.history(3)) == 2

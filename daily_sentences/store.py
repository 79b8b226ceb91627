"""Sentence store interface and an in-memory implementation."""
from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from dataclasses import replace
from datetime import date

from daily_sentences.models import SentenceRecord

# Newest records win when a day holds more than one batch.
PACK_SIZE = 5


def pack_order(records: list[SentenceRecord]) -> list[SentenceRecord]:
    """Sort by created_at descending, then index_in_pack ascending."""
    return sorted(records, key=lambda r: (-r.created_at.timestamp(), r.index_in_pack))


class SentenceStore(ABC):
    @abstractmethod
    def fetch_pack(self, day: date) -> list[SentenceRecord]:
        """At most PACK_SIZE records of *day*, newest batch first."""

    @abstractmethod
    def fetch_all(self, day: date) -> list[SentenceRecord]:
        """Every record of *day*, newest first."""

    @abstractmethod
    def get(self, sentence_id: str) -> SentenceRecord | None:
        ...

    @abstractmethod
    def upsert(self, record: SentenceRecord) -> None:
        ...

    @abstractmethod
    def upsert_many(self, records: list[SentenceRecord]) -> None:
        """Write all of *records* in one transaction, or none of them."""

    @abstractmethod
    def toggle_learned(self, sentence_id: str) -> bool:
        """Flip the learned flag. Returns False (and does nothing) for unknown ids."""

    @abstractmethod
    def toggle_favorite(self, sentence_id: str) -> bool:
        ...

    @abstractmethod
    def delete(self, record: SentenceRecord) -> None:
        ...

    @abstractmethod
    def count(self) -> int:
        ...

    @abstractmethod
    def prune_before(self, day: date) -> int:
        """Delete records packed before *day*. Returns the number removed."""

    def close(self) -> None:
        pass


class InMemoryStore(SentenceStore):
    def __init__(self, records: list[SentenceRecord] | None = None):
        self._records: dict[str, SentenceRecord] = {}
        self._lock = threading.Lock()
        for r in records or []:
            self._records[r.id] = replace(r)

    def _for_day(self, day: date) -> list[SentenceRecord]:
        snapshot = list(self._records.values())
        return pack_order([replace(r) for r in snapshot if r.pack_date == day])

    def fetch_pack(self, day: date) -> list[SentenceRecord]:
        return self._for_day(day)[:PACK_SIZE]

    def fetch_all(self, day: date) -> list[SentenceRecord]:
        return self._for_day(day)

    def get(self, sentence_id: str) -> SentenceRecord | None:
        r = self._records.get(sentence_id)
        return replace(r) if r else None

    def upsert(self, record: SentenceRecord) -> None:
        with self._lock:
            self._records[record.id] = replace(record)

    def upsert_many(self, records: list[SentenceRecord]) -> None:
        with self._lock:
            self._records.update({r.id: replace(r) for r in records})

    def toggle_learned(self, sentence_id: str) -> bool:
        with self._lock:
            r = self._records.get(sentence_id)
            if r is None:
                return False
            self._records[sentence_id] = replace(r, learned=not r.learned)
            return True

    def toggle_favorite(self, sentence_id: str) -> bool:
        with self._lock:
            r = self._records.get(sentence_id)
            if r is None:
                return False
            self._records[sentence_id] = replace(r, favorite=not r.favorite)
            return True

    def delete(self, record: SentenceRecord) -> None:
        with self._lock:
            self._records.pop(record.id, None)

    def count(self) -> int:
        return len(self._records)

    def prune_before(self, day: date) -> int:
        with self._lock:
            stale = [i for i, r in self._records.items() if r.pack_date < day]
            for i in stale:
                del self._records[i]
            return len(stale)

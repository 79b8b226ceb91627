"""Random-walk browser over recently stored sentences.

Moving back and then forward replays the sentences already shown instead of
drawing new ones.  A fresh random sentence is only drawn when the cursor is
at the end of what has been visited.
"""
from __future__ import annotations

import random
from collections.abc import Callable
from datetime import date, timedelta
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from daily_sentences.config import Preferences
    from daily_sentences.models import SentenceRecord
    from daily_sentences.store import SentenceStore


class HistoryNavigator:
    def __init__(
        self,
        store: SentenceStore,
        rng: random.Random | None = None,
        window_days: int = 30,
        today: Callable[[], date] = date.today,
        preferences: Preferences | None = None,
    ):
        self.store = store
        self.rng = rng or random.Random()
        self.window_days = window_days
        self._today = today
        self.preferences = preferences

        self._pool: list[SentenceRecord] = []
        self._visited: list[SentenceRecord] = []
        self._cursor = -1
        self._previous_preview: SentenceRecord | None = None
        self._next_preview: SentenceRecord | None = None

    # ── State ─────────────────────────────────────────────────────────────

    @property
    def pool(self) -> list[SentenceRecord]:
        return list(self._pool)

    @property
    def visited(self) -> tuple[SentenceRecord, ...]:
        return tuple(self._visited)

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def current(self) -> SentenceRecord | None:
        if 0 <= self._cursor < len(self._visited):
            return self._visited[self._cursor]
        return None

    @property
    def can_go_back(self) -> bool:
        return self._cursor > 0

    @property
    def can_go_forward(self) -> bool:
        return self._cursor < len(self._visited) - 1

    @property
    def previous_preview(self) -> SentenceRecord | None:
        return self._previous_preview

    @property
    def next_preview(self) -> SentenceRecord | None:
        """What ``next()`` will show.

        Either the replayed entry after the cursor or, at the tail, a random
        draw that is only committed once the user advances.
        """
        return self._next_preview

    # ── Transitions ───────────────────────────────────────────────────────

    def load_pool(self) -> list[SentenceRecord]:
        """Collect the last ``window_days`` days of records, one per id."""
        today = self._today()
        seen: set[str] = set()
        pool: list[SentenceRecord] = []
        for offset in range(self.window_days):
            for record in self.store.fetch_all(today - timedelta(days=offset)):
                if record.id in seen:
                    continue
                seen.add(record.id)
                pool.append(record)
        self._pool = pool
        self._update_previews()
        return self.pool

    def pick_random(self) -> SentenceRecord | None:
        if not self._pool:
            self.load_pool()
        if not self._pool:
            return None
        return self._append(self.rng.choice(self._pool))

    def next(self) -> SentenceRecord | None:
        if self.can_go_forward:
            self._cursor += 1
            self._moved()
            return self.current
        if self._next_preview is not None:
            return self._append(self._next_preview)
        return self.pick_random()

    def previous(self) -> SentenceRecord | None:
        if self._cursor > 0:
            self._cursor -= 1
            self._moved()
        return self.current

    def sync(self, sentence_id: str) -> None:
        """Re-read one record after it was toggled or deleted in the store.

        A deleted record leaves the pool and the visited trail; the cursor
        stays on the nearest earlier entry that is still there.
        """
        fresh = self.store.get(sentence_id)

        def swap(records: list[SentenceRecord]) -> list[SentenceRecord]:
            if fresh is None:
                return [r for r in records if r.id != sentence_id]
            return [fresh if r.id == sentence_id else r for r in records]

        kept_before = len(swap(self._visited[: self._cursor + 1]))
        self._pool = swap(self._pool)
        self._visited = swap(self._visited)
        if fresh is None:
            self._cursor = max(kept_before - 1, 0) if self._visited else -1

        self._previous_preview = self._visited[self._cursor - 1] if self._cursor > 0 else None
        if self.can_go_forward:
            self._next_preview = self._visited[self._cursor + 1]
        elif self._next_preview is not None and self._next_preview.id == sentence_id:
            if fresh is not None:
                self._next_preview = fresh
            else:
                self._next_preview = self.rng.choice(self._pool) if self._pool else None

    def _append(self, record: SentenceRecord) -> SentenceRecord:
        self._visited.append(record)
        self._cursor = len(self._visited) - 1
        self._moved()
        return record

    def _moved(self) -> None:
        self._update_previews()
        if self.preferences is not None and self.current is not None:
            self.preferences.mark_viewed(self.current.id)

    def _update_previews(self) -> None:
        self._previous_preview = self._visited[self._cursor - 1] if self._cursor > 0 else None
        if self.can_go_forward:
            self._next_preview = self._visited[self._cursor + 1]
        elif self._pool:
            self._next_preview = self.rng.choice(self._pool)
        else:
            self._next_preview = None

    def to_dict(self) -> dict:
        def _d(r: SentenceRecord | None) -> dict | None:
            return r.to_dict() if r else None

        return {
            "current": _d(self.current),
            "previous_preview": _d(self._previous_preview),
            "next_preview": _d(self._next_preview),
            "can_go_back": self.can_go_back,
            "can_go_forward": self.can_go_forward,
            "cursor": self._cursor,
            "visited": len(self._visited),
            "pool_size": len(self._pool),
        }

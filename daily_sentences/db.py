from __future__ import annotations

import logging
import sqlite3
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date, datetime, timedelta, timezone
from pathlib import Path

from daily_sentences.errors import PersistenceError
from daily_sentences.models import SentenceRecord
from daily_sentences.store import PACK_SIZE, SentenceStore

log = logging.getLogger("daily_sentences.db")

SCHEMA = """
CREATE TABLE IF NOT EXISTS sentences (
    id TEXT PRIMARY KEY,
    hanzi TEXT NOT NULL,
    pinyin TEXT NOT NULL,
    english TEXT NOT NULL,
    pack_date TEXT NOT NULL,
    index_in_pack INTEGER NOT NULL,
    audio_reference TEXT,
    learned INTEGER NOT NULL DEFAULT 0,
    favorite INTEGER NOT NULL DEFAULT 0,
    created_at TEXT NOT NULL,
    batch_id TEXT,
    context TEXT,
    difficulty TEXT
);

CREATE INDEX IF NOT EXISTS idx_sentences_day
    ON sentences (pack_date, created_at);

CREATE TABLE IF NOT EXISTS audio_cache (
    sentence_hash TEXT PRIMARY KEY,
    file_path TEXT NOT NULL,
    tts_provider TEXT,
    created_at TEXT NOT NULL
);
"""

_COLUMNS = (
    "id, hanzi, pinyin, english, pack_date, index_in_pack, audio_reference, "
    "learned, favorite, created_at, batch_id, context, difficulty"
)

_ORDER = "ORDER BY created_at DESC, index_in_pack ASC"


def _timestamp(dt: datetime) -> str:
    # Fixed-width UTC text so lexical order equals chronological order.
    return dt.astimezone(timezone.utc).isoformat(timespec="microseconds")


def _to_row(r: SentenceRecord) -> tuple:
    return (
        r.id,
        r.hanzi,
        r.pinyin,
        r.english,
        r.pack_date.isoformat(),
        r.index_in_pack,
        r.audio_reference,
        1 if r.learned else 0,
        1 if r.favorite else 0,
        _timestamp(r.created_at),
        r.batch_id,
        r.context,
        r.difficulty,
    )


def _from_row(row: sqlite3.Row) -> SentenceRecord:
    return SentenceRecord(
        id=row["id"],
        hanzi=row["hanzi"],
        pinyin=row["pinyin"],
        english=row["english"],
        pack_date=date.fromisoformat(row["pack_date"]),
        index_in_pack=row["index_in_pack"],
        audio_reference=row["audio_reference"],
        learned=bool(row["learned"]),
        favorite=bool(row["favorite"]),
        created_at=datetime.fromisoformat(row["created_at"]),
        batch_id=row["batch_id"],
        context=row["context"],
        difficulty=row["difficulty"],
    )


class Database(SentenceStore):
    """SQLite-backed sentence store.

    Writes go through one connection and are serialized by a lock, each in
    its own transaction.  Reads on a file database open a short-lived
    connection so that, under WAL, they only ever see committed batches and
    never wait on the writer.
    """

    def __init__(self, db_path: Path | str):
        self.db_path = db_path
        self._memory = str(db_path) == ":memory:"
        self._write_lock = threading.Lock()
        try:
            self.conn = sqlite3.connect(str(db_path), check_same_thread=False)
            self.conn.row_factory = sqlite3.Row
            if not self._memory:
                self.conn.execute("PRAGMA journal_mode=WAL")
            self._init_schema()
        except sqlite3.Error as e:
            raise PersistenceError(f"cannot open database {db_path}: {e}") from e

    def _init_schema(self) -> None:
        self.conn.executescript(SCHEMA)
        self.conn.commit()

    def close(self) -> None:
        self.conn.close()

    @contextmanager
    def _write(self) -> Iterator[sqlite3.Connection]:
        with self._write_lock:
            try:
                with self.conn:
                    yield self.conn
            except sqlite3.Error as e:
                log.error("Write failed: %s", e)
                raise PersistenceError(str(e)) from e

    @contextmanager
    def _read(self) -> Iterator[sqlite3.Connection]:
        if self._memory:
            # A private in-memory database cannot be opened twice.
            with self._write_lock:
                try:
                    yield self.conn
                except sqlite3.Error as e:
                    raise PersistenceError(str(e)) from e
            return
        try:
            conn = sqlite3.connect(str(self.db_path))
        except sqlite3.Error as e:
            raise PersistenceError(str(e)) from e
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        except sqlite3.Error as e:
            raise PersistenceError(str(e)) from e
        finally:
            conn.close()

    # ── Sentences ─────────────────────────────────────────────────────────

    def _day_query(self, day: date, limit: int | None) -> list[SentenceRecord]:
        start = day.isoformat()
        end = (day + timedelta(days=1)).isoformat()
        sql = (
            f"SELECT {_COLUMNS} FROM sentences "
            f"WHERE pack_date >= ? AND pack_date < ? {_ORDER}"
        )
        params: tuple = (start, end)
        if limit is not None:
            sql += " LIMIT ?"
            params += (limit,)
        with self._read() as conn:
            rows = conn.execute(sql, params).fetchall()
        return [_from_row(r) for r in rows]

    def fetch_pack(self, day: date) -> list[SentenceRecord]:
        return self._day_query(day, PACK_SIZE)

    def fetch_all(self, day: date) -> list[SentenceRecord]:
        return self._day_query(day, None)

    def get(self, sentence_id: str) -> SentenceRecord | None:
        with self._read() as conn:
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM sentences WHERE id = ?", (sentence_id,)
            ).fetchone()
        return _from_row(row) if row else None

    def upsert(self, record: SentenceRecord) -> None:
        self.upsert_many([record])

    def upsert_many(self, records: list[SentenceRecord]) -> None:
        if not records:
            return
        with self._write() as conn:
            conn.executemany(
                f"INSERT OR REPLACE INTO sentences ({_COLUMNS}) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                [_to_row(r) for r in records],
            )

    def toggle_learned(self, sentence_id: str) -> bool:
        with self._write() as conn:
            cur = conn.execute(
                "UPDATE sentences SET learned = 1 - learned WHERE id = ?", (sentence_id,)
            )
        return cur.rowcount > 0

    def toggle_favorite(self, sentence_id: str) -> bool:
        with self._write() as conn:
            cur = conn.execute(
                "UPDATE sentences SET favorite = 1 - favorite WHERE id = ?", (sentence_id,)
            )
        return cur.rowcount > 0

    def delete(self, record: SentenceRecord) -> None:
        with self._write() as conn:
            conn.execute("DELETE FROM sentences WHERE id = ?", (record.id,))

    def count(self) -> int:
        with self._read() as conn:
            row = conn.execute("SELECT COUNT(*) FROM sentences").fetchone()
        return row[0]

    def prune_before(self, day: date) -> int:
        with self._write() as conn:
            cur = conn.execute(
                "DELETE FROM sentences WHERE pack_date < ?", (day.isoformat(),)
            )
        if cur.rowcount:
            log.info("Pruned %d sentences packed before %s", cur.rowcount, day)
        return cur.rowcount

    def get_stats(self) -> dict:
        with self._read() as conn:
            row = conn.execute(
                "SELECT COUNT(*) AS total, "
                "COALESCE(SUM(learned), 0) AS learned, "
                "COALESCE(SUM(favorite), 0) AS favorite, "
                "COUNT(DISTINCT pack_date) AS days, "
                "COUNT(DISTINCT batch_id) AS batches "
                "FROM sentences"
            ).fetchone()
        return {
            "total_sentences": row["total"],
            "learned": row["learned"],
            "favorites": row["favorite"],
            "days": row["days"],
            "batches": row["batches"],
        }

    # ── Audio cache ───────────────────────────────────────────────────────

    def get_audio_cache(self, sentence_hash: str) -> str | None:
        with self._read() as conn:
            row = conn.execute(
                "SELECT file_path FROM audio_cache WHERE sentence_hash = ?",
                (sentence_hash,),
            ).fetchone()
        return row["file_path"] if row else None

    def set_audio_cache(
        self, sentence_hash: str, file_path: str, tts_provider: str
    ) -> None:
        now = datetime.now(timezone.utc).isoformat()
        with self._write() as conn:
            conn.execute(
                "INSERT OR REPLACE INTO audio_cache "
                "(sentence_hash, file_path, tts_provider, created_at) VALUES (?, ?, ?, ?)",
                (sentence_hash, file_path, tts_provider, now),
            )

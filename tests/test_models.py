"""Tests for data models."""
from __future__ import annotations

from datetime import date, timedelta

from daily_sentences.models import DailyPack, GeneratedSentence, SentenceRecord, utc_now


class TestSentenceRecord:
    def test_defaults(self):
        r = SentenceRecord("x-1", "你好", "nǐ hǎo", "Hello", date(2026, 10, 18), 1)
        assert r.audio_reference is None
        assert r.learned is False
        assert r.favorite is False
        assert r.batch_id is None
        assert r.created_at.tzinfo is not None

    def test_to_dict(self, make_record):
        r = make_record("a", context="daily_life", difficulty="HSK3")
        d = r.to_dict()
        assert d["id"] == "a"
        assert d["pack_date"] == "2026-10-18"
        assert d["created_at"] == "2026-10-18T08:00:00.123456+00:00"
        assert d["index_in_pack"] == 1
        assert d["context"] == "daily_life"
        assert d["difficulty"] == "HSK3"
        assert d["learned"] is False

    def test_equality_by_fields(self, make_record):
        assert make_record("a") == make_record("a")
        assert make_record("a") != make_record("a", learned=True)


class TestDailyPack:
    def test_sorted_by_index(self, make_record):
        pack = DailyPack(
            date=date(2026, 10, 18),
            sentences=[make_record("c", index=3), make_record("a", index=1), make_record("b", index=2)],
        )
        assert [s.id for s in pack.sentences] == ["a", "b", "c"]

    def test_formatted_date(self):
        pack = DailyPack(date=date(2026, 10, 18), sentences=[])
        assert pack.formatted_date == "Oct 18, 2026"

    def test_formatted_date_single_digit_day(self):
        pack = DailyPack(date=date(2026, 3, 5), sentences=[])
        assert pack.formatted_date == "Mar 5, 2026"

    def test_to_dict(self, sample_records):
        d = DailyPack(date=date(2026, 10, 18), sentences=sample_records).to_dict()
        assert d["date"] == "2026-10-18"
        assert len(d["sentences"]) == 5
        assert d["sentences"][0]["index_in_pack"] == 1


class TestGeneratedSentence:
    def test_fields(self):
        s = GeneratedSentence("你好", "nǐ hǎo", "Hello", "social", "HSK3")
        assert s.text == "你好"
        assert s.difficulty == "HSK3"


def test_utc_now_is_aware():
    now = utc_now()
    assert now.tzinfo is not None
    assert now.utcoffset() == timedelta(0)

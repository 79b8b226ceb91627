from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class SentenceRecord:
    id: str
    hanzi: str
    pinyin: str
    english: str
    pack_date: date
    index_in_pack: int
    audio_reference: str | None = None  # absent -> synthesize with TTS
    learned: bool = False
    favorite: bool = False
    created_at: datetime = field(default_factory=utc_now)
    batch_id: str | None = None
    context: str | None = None
    difficulty: str | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "hanzi": self.hanzi,
            "pinyin": self.pinyin,
            "english": self.english,
            "pack_date": self.pack_date.isoformat(),
            "index_in_pack": self.index_in_pack,
            "audio_reference": self.audio_reference,
            "learned": self.learned,
            "favorite": self.favorite,
            "created_at": self.created_at.isoformat(),
            "batch_id": self.batch_id,
            "context": self.context,
            "difficulty": self.difficulty,
        }


@dataclass
class DailyPack:
    """All sentences of one day, in batch order. Presentation only."""

    date: date
    sentences: list[SentenceRecord]

    def __post_init__(self):
        self.sentences = sorted(self.sentences, key=lambda s: s.index_in_pack)

    @property
    def formatted_date(self) -> str:
        return f"{self.date:%b} {self.date.day}, {self.date.year}"

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "formatted_date": self.formatted_date,
            "sentences": [s.to_dict() for s in self.sentences],
        }


@dataclass
class GeneratedSentence:
    text: str
    pronunciation: str
    translation: str
    context: str
    difficulty: str

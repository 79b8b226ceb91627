from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from pathlib import Path

from daily_sentences.models import SentenceRecord


def record_id(tag: str, timestamp: float, index: int) -> str:
    """``<tag>-<timestamp>-<index>``; unique across repeated calls on one day."""
    return f"{tag}-{timestamp:.6f}-{index}"


class SentenceProvider(ABC):
    tag: str = "source"

    @abstractmethod
    async def generate(self, count: int, day: date) -> list[SentenceRecord]:
        """Produce up to *count* sentences for *day*.

        Raise a ``SourceError`` subclass when this tier cannot deliver.
        """
        ...

    @abstractmethod
    def name(self) -> str:
        ...


class TTSProvider(ABC):
    @abstractmethod
    async def synthesize(self, text: str, output_path: Path) -> Path:
        ...

    @abstractmethod
    def name(self) -> str:
        ...

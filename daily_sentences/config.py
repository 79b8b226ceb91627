from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path

CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.json"
PREFERENCES_PATH = Path(__file__).resolve().parent.parent / "preferences.json"

VIEWED_LIMIT = 100

DEFAULTS = {
    "llm_provider": "openai",
    "llm_model": "gpt-4",
    "llm_base_url": "https://api.openai.com/v1",
    "llm_max_tokens": 1500,
    "llm_temperature": 0.7,
    "openai_api_key": None,
    "tts_provider": "edge-tts",
    "tts_voice": "zh-CN-XiaoxiaoNeural",
    "language": "zh-CN",
    "daily_sentence_count": 5,
    "history_days": 30,
    "retention_days": None,
    "refresh_timeout": 60.0,
    "db_path": "sentences.db",
    "audio_cache_dir": "audio_cache",
}


@dataclass
class Settings:
    llm_provider: str = DEFAULTS["llm_provider"]
    llm_model: str = DEFAULTS["llm_model"]
    llm_base_url: str = DEFAULTS["llm_base_url"]
    llm_max_tokens: int = DEFAULTS["llm_max_tokens"]
    llm_temperature: float = DEFAULTS["llm_temperature"]
    openai_api_key: str | None = DEFAULTS["openai_api_key"]
    tts_provider: str = DEFAULTS["tts_provider"]
    tts_voice: str = DEFAULTS["tts_voice"]
    language: str = DEFAULTS["language"]
    daily_sentence_count: int = DEFAULTS["daily_sentence_count"]
    history_days: int = DEFAULTS["history_days"]
    retention_days: int | None = DEFAULTS["retention_days"]
    refresh_timeout: float = DEFAULTS["refresh_timeout"]
    db_path: str = DEFAULTS["db_path"]
    audio_cache_dir: str = DEFAULTS["audio_cache_dir"]

    @property
    def project_root(self) -> Path:
        return Path(__file__).resolve().parent.parent

    @property
    def db_full_path(self) -> Path:
        return self.project_root / self.db_path

    @property
    def audio_cache_full_path(self) -> Path:
        return self.project_root / self.audio_cache_dir

    def resolved_api_key(self) -> str | None:
        """Configured key first, then the OPENAI_API_KEY environment variable."""
        return self.openai_api_key or os.environ.get("OPENAI_API_KEY") or None

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, raw: dict) -> Settings:
        """Build from a config mapping, skipping keys this version does not know."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in raw.items() if k in known})


def load_settings(path: Path | None = None) -> Settings:
    path = path or CONFIG_PATH
    if not path.exists():
        return Settings()
    return Settings.from_dict(json.loads(path.read_text()))


def save_settings(settings: Settings, path: Path | None = None) -> None:
    path = path or CONFIG_PATH
    path.write_text(json.dumps(settings.to_dict(), indent=4, ensure_ascii=False) + "\n")


class Preferences:
    """Small user preferences kept outside the sentence store.

    Currently only the list of recently viewed sentence ids, most recent
    first and capped at ``VIEWED_LIMIT``.  With ``path=None`` nothing is
    written to disk.
    """

    def __init__(self, path: Path | None = None, limit: int = VIEWED_LIMIT):
        self.path = path
        self.limit = limit
        self._viewed: list[str] = []
        if path is not None and path.exists():
            raw = json.loads(path.read_text())
            self._viewed = [str(i) for i in raw.get("viewed_sentences", [])][:limit]

    def viewed_ids(self) -> list[str]:
        return list(self._viewed)

    def mark_viewed(self, sentence_id: str) -> None:
        if self._viewed and self._viewed[0] == sentence_id:
            return
        self._viewed = [i for i in self._viewed if i != sentence_id]
        self._viewed.insert(0, sentence_id)
        del self._viewed[self.limit:]
        self._save()

    def clear_viewed(self) -> None:
        self._viewed = []
        self._save()

    def _save(self) -> None:
        if self.path is None:
            return
        self.path.write_text(
            json.dumps({"viewed_sentences": self._viewed}, ensure_ascii=False, indent=4) + "\n"
        )

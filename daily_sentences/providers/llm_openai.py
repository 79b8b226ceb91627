from __future__ import annotations

import json
import logging
import time
import uuid
from datetime import date

import httpx

from daily_sentences.errors import ConfigurationError, FormatError, TransportError
from daily_sentences.models import GeneratedSentence, SentenceRecord, utc_now
from daily_sentences.prompts import build_messages
from daily_sentences.providers.base import SentenceProvider, record_id

log = logging.getLogger("daily_sentences.llm")

SENTENCE_FIELDS = ("text", "pronunciation", "translation", "context", "difficulty")


def parse_sentences(content: str) -> list[GeneratedSentence]:
    """Parse the model's message content.

    The content must be a JSON object with exactly one key, ``sentences``,
    holding a non-empty list of objects with exactly the keys in
    ``SENTENCE_FIELDS``, all non-empty strings.  Anything else rejects the
    whole batch with ``FormatError``.
    """
    try:
        data = json.loads(content)
    except (json.JSONDecodeError, TypeError) as e:
        raise FormatError(f"content is not JSON: {e}") from e

    if not isinstance(data, dict) or set(data) != {"sentences"}:
        keys = sorted(data) if isinstance(data, dict) else type(data).__name__
        raise FormatError(f"expected an object with only 'sentences' (got {keys})")
    items = data["sentences"]
    if not isinstance(items, list) or not items:
        raise FormatError("'sentences' must be a non-empty list")

    parsed = []
    for i, item in enumerate(items):
        if not isinstance(item, dict):
            raise FormatError(f"sentence[{i}]: expected object, got {type(item).__name__}")
        if set(item) != set(SENTENCE_FIELDS):
            missing = set(SENTENCE_FIELDS) - set(item)
            extra = set(item) - set(SENTENCE_FIELDS)
            raise FormatError(
                f"sentence[{i}]: missing {sorted(missing)}, unexpected {sorted(extra)}"
            )
        bad = [k for k in SENTENCE_FIELDS if not isinstance(item[k], str) or not item[k].strip()]
        if bad:
            raise FormatError(f"sentence[{i}]: empty or non-string {', '.join(bad)}")
        parsed.append(GeneratedSentence(**{k: item[k].strip() for k in SENTENCE_FIELDS}))
    return parsed


class OpenAISentenceProvider(SentenceProvider):
    """Chat-completions generator. Works against any OpenAI-compatible server."""

    tag = "openai"

    def __init__(
        self,
        api_key: str | None,
        model: str = "gpt-4",
        base_url: str = "https://api.openai.com/v1",
        max_tokens: int = 1500,
        temperature: float = 0.7,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.max_tokens = max_tokens
        self.temperature = temperature
        self._transport = transport

    async def generate(self, count: int, day: date) -> list[SentenceRecord]:
        if not self.api_key:
            raise ConfigurationError("OpenAI API key not configured")

        body = {
            "model": self.model,
            "messages": build_messages(count, day),
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
        }
        log.info("── PROMPT (%s, %d sentences for %s) ──", self.model, count, day)
        t0 = time.monotonic()
        # No client timeout: callers bound the whole refresh themselves.
        try:
            async with httpx.AsyncClient(timeout=None, transport=self._transport) as client:
                resp = await client.post(
                    f"{self.base_url}/chat/completions",
                    json=body,
                    headers={"Authorization": f"Bearer {self.api_key}"},
                )
        except httpx.HTTPError as e:
            raise TransportError(f"request failed: {e}") from e

        if not resp.is_success:
            log.warning("OpenAI API error %d: %.300s", resp.status_code, resp.text)
            raise TransportError(f"HTTP {resp.status_code}", status_code=resp.status_code)

        try:
            content = resp.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise FormatError(f"unexpected response envelope: {e}") from e

        elapsed = time.monotonic() - t0
        log.info("── RESPONSE (%.1fs) ──\n%s", elapsed, content)
        sentences = parse_sentences(content)[:count]

        created = utc_now()
        ts = created.timestamp()
        batch = uuid.uuid4().hex
        return [
            SentenceRecord(
                id=record_id(self.tag, ts, i),
                hanzi=s.text,
                pinyin=s.pronunciation,
                english=s.translation,
                pack_date=day,
                index_in_pack=i + 1,
                created_at=created,
                batch_id=batch,
                context=s.context,
                difficulty=s.difficulty,
            )
            for i, s in enumerate(sentences)
        ]

    def name(self) -> str:
        return f"openai/{self.model}"

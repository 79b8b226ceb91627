"""FastAPI application with all routes."""
from __future__ import annotations

import asyncio
import logging
from dataclasses import fields
from datetime import date

logging.basicConfig(level=logging.INFO, format="%(name)s | %(message)s")

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.responses import FileResponse, RedirectResponse

from daily_sentences.audio import build_tts, get_or_create_audio
from daily_sentences.config import PREFERENCES_PATH, Preferences, Settings, load_settings, save_settings
from daily_sentences.db import Database
from daily_sentences.errors import ChainExhaustedError, PersistenceError
from daily_sentences.navigator import HistoryNavigator
from daily_sentences.repository import SentenceRepository
from daily_sentences.sources import build_chain

app = FastAPI(title="Daily Sentences")

# Global state (initialized in startup)
_db: Database | None = None
_settings: Settings | None = None
_repo: SentenceRepository | None = None
_navigator: HistoryNavigator | None = None
_preferences: Preferences | None = None

_log = logging.getLogger("daily_sentences.app")

# Refreshes that outlived their request timeout keep running here.
_bg_tasks: set[asyncio.Task] = set()

KEY_MASK = "***"


def get_db() -> Database:
    assert _db is not None
    return _db


def get_settings() -> Settings:
    assert _settings is not None
    return _settings


def get_repo() -> SentenceRepository:
    assert _repo is not None
    return _repo


def get_navigator() -> HistoryNavigator:
    assert _navigator is not None
    return _navigator


def get_preferences() -> Preferences:
    assert _preferences is not None
    return _preferences


def init_state(
    db: Database,
    settings: Settings,
    preferences: Preferences,
    repo: SentenceRepository | None = None,
) -> None:
    """Wire the components once; tests call this with their own parts."""
    global _db, _settings, _repo, _navigator, _preferences
    _db = db
    _settings = settings
    _preferences = preferences
    _repo = repo or SentenceRepository(db, build_chain(settings), settings)
    _navigator = HistoryNavigator(
        db,
        window_days=settings.history_days,
        today=_repo.today,
        preferences=preferences,
    )


@app.on_event("startup")
async def startup():
    if _db is not None:
        return  # Already initialized (e.g. by tests)
    settings = load_settings()
    init_state(Database(settings.db_full_path), settings, Preferences(PREFERENCES_PATH))
    try:
        await asyncio.wait_for(get_repo().seed_if_empty(), timeout=settings.refresh_timeout)
    except (asyncio.TimeoutError, PersistenceError) as e:
        _log.warning("Startup seed failed: %s", e)
    get_navigator().load_pool()


@app.on_event("shutdown")
async def shutdown():
    if _db:
        _db.close()


def _parse_day(value: str | None) -> date | None:
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise HTTPException(400, f"Invalid date: {value!r}")


def _background_done(task: asyncio.Task, what: str) -> None:
    _bg_tasks.discard(task)
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        _log.warning("%s failed in the background: %s", what, exc)
    elif _navigator is not None:
        _navigator.load_pool()


async def _bounded(coro, what: str):
    """Await *coro* for at most ``refresh_timeout`` seconds.

    On timeout the work keeps running in the background and finishes its
    upsert; the caller just stops waiting.
    """
    task = asyncio.ensure_future(coro)
    try:
        return await asyncio.wait_for(asyncio.shield(task), timeout=get_settings().refresh_timeout)
    except asyncio.TimeoutError:
        _bg_tasks.add(task)
        task.add_done_callback(lambda t: _background_done(t, what))
        raise HTTPException(503, f"{what} is taking too long; it will finish in the background")
    except (ChainExhaustedError, PersistenceError) as e:
        _log.warning("%s failed: %s", what, e)
        raise HTTPException(503, f"{what} failed: {e}")


# ── API: Packs ────────────────────────────────────────────────────────────

@app.get("/api/pack")
async def api_pack(day_param: str | None = Query(None, alias="date")):
    day = _parse_day(day_param) or get_repo().today()
    records = get_repo().fetch_pack(day)
    return {"date": day.isoformat(), "sentences": [r.to_dict() for r in records]}


@app.get("/api/pack/all")
async def api_pack_all(day_param: str | None = Query(None, alias="date")):
    day = _parse_day(day_param) or get_repo().today()
    records = get_repo().fetch_all(day)
    return {"date": day.isoformat(), "sentences": [r.to_dict() for r in records]}


@app.get("/api/today")
async def api_today():
    return get_repo().todays_pack().to_dict()


@app.get("/api/history")
async def api_history(days: int | None = None):
    if days is not None and days < 1:
        raise HTTPException(400, "days must be positive")
    return [r.to_dict() for r in get_repo().history(days)]


@app.post("/api/seed")
async def api_seed():
    records = await _bounded(get_repo().seed_if_empty(), "Seeding")
    if records:
        get_navigator().load_pool()
    return {"seeded": len(records), "sentences": [r.to_dict() for r in records]}


@app.post("/api/refresh")
async def api_refresh():
    records = await _bounded(get_repo().refresh(), "Refresh")
    get_navigator().load_pool()
    return {"added": len(records), "sentences": [r.to_dict() for r in records]}


# ── API: Sentences ────────────────────────────────────────────────────────

@app.get("/api/sentences/{sentence_id}")
async def api_sentence(sentence_id: str):
    record = get_repo().get(sentence_id)
    if record is None:
        raise HTTPException(404, "Sentence not found")
    return record.to_dict()


@app.post("/api/sentences/{sentence_id}/learned")
async def api_toggle_learned(sentence_id: str):
    try:
        found = get_repo().toggle_learned(sentence_id)
    except PersistenceError as e:
        raise HTTPException(503, f"Could not save: {e}")
    record = get_repo().get(sentence_id) if found else None
    if found:
        get_navigator().sync(sentence_id)
    return {"found": found, "learned": record.learned if record else None}


@app.post("/api/sentences/{sentence_id}/favorite")
async def api_toggle_favorite(sentence_id: str):
    try:
        found = get_repo().toggle_favorite(sentence_id)
    except PersistenceError as e:
        raise HTTPException(503, f"Could not save: {e}")
    record = get_repo().get(sentence_id) if found else None
    if found:
        get_navigator().sync(sentence_id)
    return {"found": found, "favorite": record.favorite if record else None}


@app.delete("/api/sentences/{sentence_id}")
async def api_delete(sentence_id: str):
    try:
        deleted = get_repo().delete(sentence_id)
    except PersistenceError as e:
        raise HTTPException(503, f"Could not delete: {e}")
    if deleted:
        get_navigator().sync(sentence_id)
    return {"deleted": deleted}


@app.get("/api/sentences/{sentence_id}/audio")
async def api_sentence_audio(sentence_id: str):
    record = get_repo().get(sentence_id)
    if record is None:
        raise HTTPException(404, "Sentence not found")
    if record.audio_reference:
        return RedirectResponse(record.audio_reference)
    s = get_settings()
    audio_path = await get_or_create_audio(
        record.hanzi, build_tts(s), get_db(), s.audio_cache_full_path
    )
    if audio_path is None:
        raise HTTPException(503, "TTS generation failed")
    return FileResponse(audio_path, media_type="audio/mpeg")


# ── API: Navigator ────────────────────────────────────────────────────────

@app.get("/api/navigator")
async def api_navigator():
    return get_navigator().to_dict()


@app.post("/api/navigator/reload")
async def api_navigator_reload():
    get_navigator().load_pool()
    return get_navigator().to_dict()


@app.post("/api/navigator/random")
async def api_navigator_random():
    get_navigator().pick_random()
    return get_navigator().to_dict()


@app.post("/api/navigator/next")
async def api_navigator_next():
    get_navigator().next()
    return get_navigator().to_dict()


@app.post("/api/navigator/previous")
async def api_navigator_previous():
    get_navigator().previous()
    return get_navigator().to_dict()


@app.get("/api/viewed")
async def api_viewed():
    return {"viewed": get_preferences().viewed_ids()}


# ── API: Stats & settings ─────────────────────────────────────────────────

@app.get("/api/stats")
async def api_stats():
    stats = get_db().get_stats()
    stats["sources"] = get_repo().chain.names()
    return stats


@app.get("/api/settings")
async def api_get_settings():
    d = get_settings().to_dict()
    d["openai_api_key"] = KEY_MASK if d["openai_api_key"] else None
    return d


@app.put("/api/settings")
async def api_update_settings(request: Request):
    body = await request.json()
    if not isinstance(body, dict):
        raise HTTPException(400, "Expected a JSON object")
    # A GET/PUT round trip sends the mask back; keep the stored key.
    if body.get("openai_api_key") == KEY_MASK:
        del body["openai_api_key"]
    s = get_settings()
    updated = Settings.from_dict({**s.to_dict(), **body})
    try:
        chain = build_chain(updated)
    except ValueError as e:
        raise HTTPException(400, str(e))
    # The repository holds the same Settings object, so update it in place.
    for f in fields(Settings):
        setattr(s, f.name, getattr(updated, f.name))
    get_repo().chain = chain
    get_navigator().window_days = s.history_days
    save_settings(s)
    return await api_get_settings()

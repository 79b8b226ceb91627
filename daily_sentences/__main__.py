"""CLI entry point for daily-sentences.

Usage:
  python -m daily_sentences serve [--port PORT] [--host HOST]
  python -m daily_sentences stop
  python -m daily_sentences status
  python -m daily_sentences seed
  python -m daily_sentences refresh
  python -m daily_sentences pack [--date YYYY-MM-DD] [--all]
  python -m daily_sentences history [--days N]
  python -m daily_sentences stats
"""
from __future__ import annotations

import asyncio
import logging
import os
import signal
import sys
from datetime import date
from pathlib import Path
from typing import NoReturn

PID_FILE = Path(__file__).resolve().parent.parent / ".server.pid"


def main():
    args = sys.argv[1:]
    command, rest = (args[0], args[1:]) if args else ("serve", [])
    handler = COMMANDS.get(command)
    if handler is None:
        print(f"Unknown command: {command}")
        print(f"Commands: {', '.join(COMMANDS)}")
        sys.exit(1)
    handler(rest)


def _parse_flag(args: list[str], name: str, default: str) -> str:
    for i, a in enumerate(args):
        if a == name and i + 1 < len(args):
            return args[i + 1]
    return default


def _usage_error(message: str) -> NoReturn:
    print(message)
    print(__doc__.strip())
    sys.exit(1)


def _positive_int(raw: str, name: str) -> int:
    if not raw.isdigit() or int(raw) < 1:
        _usage_error(f"Invalid {name} {raw!r}: expected a positive whole number")
    return int(raw)


def _running_pid() -> int | None:
    """PID of a live server, or None. Clears a PID file left by a dead one."""
    try:
        pid = int(PID_FILE.read_text().strip())
        os.kill(pid, 0)
    except FileNotFoundError:
        return None
    except (ValueError, ProcessLookupError, PermissionError):
        PID_FILE.unlink(missing_ok=True)
        return None
    return pid


def _stop():
    pid = _running_pid()
    if pid is None:
        print("No server running.")
        return
    try:
        os.kill(pid, signal.SIGTERM)
    except ProcessLookupError:
        pass
    PID_FILE.unlink(missing_ok=True)
    print(f"Sent SIGTERM to server (PID {pid}).")


def _status():
    pid = _running_pid()
    print("No server running." if pid is None else f"Server up (PID {pid}).")


def _serve(args: list[str]):
    import uvicorn

    pid = _running_pid()
    if pid is not None:
        print(f"A server is already up (PID {pid}); run 'stop' first.")
        sys.exit(1)

    host = _parse_flag(args, "--host", "127.0.0.1")
    port = _positive_int(_parse_flag(args, "--port", "8766"), "--port")
    print(f"Daily Sentences at http://{host}:{port} (Ctrl+C quits)")
    PID_FILE.write_text(f"{os.getpid()}\n")
    try:
        uvicorn.run("daily_sentences.app:app", host=host, port=port, timeout_graceful_shutdown=5)
    finally:
        PID_FILE.unlink(missing_ok=True)


def _open_repository():
    from daily_sentences.config import load_settings
    from daily_sentences.db import Database
    from daily_sentences.repository import SentenceRepository
    from daily_sentences.sources import build_chain

    logging.basicConfig(level=logging.INFO, format="%(name)s | %(message)s")
    settings = load_settings()
    db = Database(settings.db_full_path)
    return db, SentenceRepository(db, build_chain(settings), settings)


def _print_records(records) -> None:
    for r in records:
        flags = ("✓" if r.learned else " ") + ("★" if r.favorite else " ")
        print(f"  {flags} [{r.index_in_pack}] {r.hanzi}")
        print(f"          {r.pinyin}")
        print(f"          {r.english}")
        print(f"          ({r.id})")


def _run_bounded(coro, timeout: float):
    from daily_sentences.errors import ChainExhaustedError, PersistenceError

    try:
        return asyncio.run(asyncio.wait_for(coro, timeout=timeout))
    except asyncio.TimeoutError:
        print(f"Gave up after {timeout:.0f}s.")
        sys.exit(1)
    except (ChainExhaustedError, PersistenceError) as e:
        print(f"Failed: {e}")
        sys.exit(1)


def _seed():
    db, repo = _open_repository()
    records = _run_bounded(repo.seed_if_empty(), repo.settings.refresh_timeout)
    if records:
        print(f"Seeded {len(records)} sentences for {repo.today()}:")
        _print_records(records)
    else:
        print(f"Today's pack ({repo.today()}) already has sentences.")
    db.close()


def _refresh():
    db, repo = _open_repository()
    records = _run_bounded(repo.refresh(), repo.settings.refresh_timeout)
    print(f"Added {len(records)} sentences; {len(repo.fetch_all())} stored for today.")
    _print_records(records)
    db.close()


def _pack(args: list[str]):
    raw = _parse_flag(args, "--date", "")
    try:
        day = date.fromisoformat(raw) if raw else None
    except ValueError:
        _usage_error(f"Invalid --date {raw!r}: expected YYYY-MM-DD")
    db, repo = _open_repository()
    day = day or repo.today()
    records = repo.fetch_all(day) if "--all" in args else repo.fetch_pack(day)
    print(f"{day.isoformat()}: {len(records)} sentences")
    _print_records(records)
    db.close()


def _history(args: list[str]):
    raw = _parse_flag(args, "--days", "")
    days = _positive_int(raw, "--days") if raw else None
    db, repo = _open_repository()
    days = days or repo.settings.history_days
    records = repo.history(days)
    print(f"Last {days} days: {len(records)} sentences")
    current_day = None
    for r in records:
        if r.pack_date != current_day:
            current_day = r.pack_date
            print(f"\n{current_day.isoformat()}")
        _print_records([r])
    db.close()


def _stats():
    from daily_sentences.config import load_settings
    from daily_sentences.db import Database

    settings = load_settings()
    db = Database(settings.db_full_path)
    stats = db.get_stats()

    print("Daily Sentences Stats")
    print("=" * 40)
    print(f"Total sentences:    {stats['total_sentences']}")
    print(f"Learned:            {stats['learned']}")
    print(f"Favorites:          {stats['favorites']}")
    print(f"Days with packs:    {stats['days']}")
    print(f"Generated batches:  {stats['batches']}")
    db.close()


COMMANDS = {
    "serve": _serve,
    "stop": lambda args: _stop(),
    "status": lambda args: _status(),
    "seed": lambda args: _seed(),
    "refresh": lambda args: _refresh(),
    "pack": _pack,
    "history": _history,
    "stats": lambda args: _stats(),
}


if __name__ == "__main__":
    main()

"""Application entry point for the areablock command line."""

from __future__ import annotations

import argparse
import logging
import os
import re
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from art import tprint

import settings
from adapters.entry_file import EntryFileContext
from adapters.sqlite_store import SQLiteBlobStore
from core.cache import BlockedAreaCodeCache, text_blocked_codes_loader
from core.call_directory import CallDirectoryHandler
from core.classifier import MessageClassifier
from core.config import CacheConfig, EnumeratorConfig
from core.enumerator import plan_call_blocking
from core.errors import StoreUnavailable
from core.phone import format_national
from core.repository import PolicyRepository

NAME = "AREABLOCK"
FONT = "tarty-1"

LOGGER = logging.getLogger(__name__)

# 10 or 11 digit runs; everything but the last four digits is masked.
_NUMBER_PATTERN = re.compile(r"(?<!\d)1?\d{6}(\d{4})(?!\d)")


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


class _RedactingFormatter(logging.Formatter):
    def __init__(self, redact_numbers: bool, fmt: str, datefmt: Optional[str] = None) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self._redact_numbers = redact_numbers

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        if self._redact_numbers:
            message = _NUMBER_PATTERN.sub(lambda match: f"***{match.group(1)}", message)
        return message


def _configure_logging() -> None:
    config = settings.LOGGING or {}
    if not config.get("enabled", False):
        return

    level_name = str(config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    formatter = _RedactingFormatter(bool(config.get("redact_numbers", True)), fmt=fmt, datefmt=datefmt)

    handlers: list[logging.Handler] = []

    if config.get("console", True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    file_cfg = config.get("file", {})
    if file_cfg.get("enabled", False):
        path = file_cfg.get("path", "logs/areablock.log")
        if not os.path.isabs(path):
            path = os.path.join(settings.PROJECT_ROOT, path)
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        max_bytes = int(file_cfg.get("max_bytes", 5 * 1024 * 1024))
        backup_count = int(file_cfg.get("backup_count", 5))
        file_handler = RotatingFileHandler(
            path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if not handlers:
        return

    logging.basicConfig(level=level, handlers=handlers)


def build_repository(db_path: Optional[str] = None) -> PolicyRepository:
    """Open the SQLite store; an unusable store still yields a repository."""

    store = SQLiteBlobStore(db_path or settings.DB_PATH)
    try:
        store.init_db()
    except StoreUnavailable as exc:
        # Reads will fail too and every caller degrades to blocking nothing.
        LOGGER.warning("Policy store unavailable: %s", exc)
    return PolicyRepository(store)


def enumerator_config() -> EnumeratorConfig:
    return EnumeratorConfig(
        batch_size=settings.BATCH_SIZE,
        max_entries=settings.MAX_ENTRIES,
        country_code=settings.COUNTRY_CODE,
    )


def _export(output: Optional[str], incremental: bool) -> int:
    _configure_logging()
    path = Path(output or settings.EXPORT_PATH)
    handler = CallDirectoryHandler(build_repository(), enumerator_config())
    context = EntryFileContext(path, is_incremental=incremental, max_entries=settings.MAX_ENTRIES)
    summary = handler.begin_request(context)
    if not summary.completed:
        print(f"Export failed: {summary.error}")
        return 1
    print(
        f"Exported {summary.entries_added} entries "
        f"({summary.area_codes} area codes, {summary.individual_numbers} numbers) to {path}"
    )
    return 0


def _classify(senders: list[str]) -> int:
    _configure_logging()
    repository = build_repository()
    cache_config = CacheConfig(ttl_seconds=settings.CACHE_TTL_SECONDS)
    cache = BlockedAreaCodeCache(text_blocked_codes_loader(repository), ttl_seconds=cache_config.ttl_seconds)
    classifier = MessageClassifier(cache, repository)
    for sender in senders:
        result = classifier.classify(sender)
        label = result.action.value.upper()
        if result.national_number:
            print(f"{label:5} {sender} -> {format_national(result.national_number)}")
        else:
            print(f"{label:5} {sender}")
    return 0


def _summary() -> int:
    _configure_logging()
    repository = build_repository()
    try:
        model = repository.load_model()
    except StoreUnavailable as exc:
        print(f"Policy store unavailable: {exc}")
        return 1
    plan = plan_call_blocking(model.snapshot, settings.COUNTRY_CODE)
    print(f"Area codes: {len(model.rules)}")
    for rule in model.rules:
        calls = "blocked" if rule.block_calls else "allowed"
        texts = "blocked" if rule.block_texts else "allowed"
        print(f"  {rule.code}  calls: {calls}  texts: {texts}")
    print(f"Blocked numbers: {len(model.numbers)}")
    for number in model.numbers_by_recency():
        print(f"  {format_national(number.national_number)}  {number.source.value}  {number.blocked_at:%Y-%m-%d}")
    print(f"Planned call-blocking entries: {plan.entry_count}")
    return 0


def _setup() -> None:
    _print_banner()
    from frontend.app import PolicyPanelApp

    PolicyPanelApp(build_repository()).run()


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="areablock")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("config", help="Launch the policy editor TUI")

    export_parser = subparsers.add_parser("export", help="Write the call-blocking entry list to a file")
    export_parser.add_argument("--output", help="Destination file (default from config.json)")
    export_parser.add_argument(
        "--incremental",
        action="store_true",
        help="Serve as an incremental request (cleared and fully reloaded)",
    )

    classify_parser = subparsers.add_parser("classify", help="Classify message senders")
    classify_parser.add_argument("senders", nargs="+", help="Sender numbers in any format")

    subparsers.add_parser("summary", help="Show rules, blocked numbers and entry count")

    args = parser.parse_args(argv)
    if args.command == "export":
        return _export(args.output, args.incremental)
    if args.command == "classify":
        return _classify(args.senders)
    if args.command == "summary":
        return _summary()
    _setup()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

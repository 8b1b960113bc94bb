#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
===============================================================================
GPT‑Codemod ▸ Logging Facility
===============================================================================

One idempotent logging configuration shared by every module. Obtain loggers
through the package accessor:

    from gpt_codemod import get_logger
    log = get_logger(__name__)

Handlers
--------
* Console – INFO by default, optionally JSON lines (CI log scraping).
* Daily rotating file `gpt_codemod.log` – DEBUG, 7 backups.

Only the root project logger "gpt_codemod" owns handlers; children propagate.

Overrides
---------
Logging is process infrastructure, so it keeps its own switches separate
from the run configuration (`gpt_codemod.config.AgentConfig`):

    GPT_CODEMOD_LOG_DIR   – log directory (default ./logs)
    GPT_CODEMOD_LOG_LVL   – console level, name or number (default INFO)
    GPT_CODEMOD_LOG_ROT   – rotation schedule (default "midnight")
    GPT_CODEMOD_LOG_BACK  – rotated files to keep (default 7)
    GPT_CODEMOD_LOG_UTC   – truthy → UTC timestamps and rotation
    GPT_CODEMOD_LOG_JSON  – truthy → JSON console lines
"""
from __future__ import annotations

import json
import logging
import os
import tempfile
import time
from dataclasses import dataclass
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Mapping, Optional

ROOT_LOGGER_NAME = "gpt_codemod"

FORMAT = "%(asctime)s | %(name)s | %(process)d | %(levelname)-8s | %(message)s"
DTFMT = "%Y-%m-%d %H:%M:%S"

_TRUTHY = {"1", "true", "yes", "on", "y", "t"}


def _is_truthy(val: Optional[str]) -> bool:
    return (val or "").strip().lower() in _TRUTHY


def _parse_level(val: Optional[str], default: int = logging.INFO) -> int:
    """Accept a level name ("DEBUG") or number ("10"); fall back to *default*."""
    s = (val or "").strip()
    if not s:
        return default
    if s.isdigit():
        return int(s)
    level = logging.getLevelName(s.upper())
    return level if isinstance(level, int) else default


@dataclass(frozen=True)
class LogSettings:
    log_dir: Path = Path("logs")
    console_level: int = logging.INFO
    rotate_when: str = "midnight"
    backup_count: int = 7
    use_utc: bool = False
    json_console: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "LogSettings":
        env = os.environ if environ is None else environ
        try:
            backups = int(env.get("GPT_CODEMOD_LOG_BACK", "7"))
        except ValueError:
            backups = 7
        return cls(
            log_dir=Path(env.get("GPT_CODEMOD_LOG_DIR", "logs")),
            console_level=_parse_level(env.get("GPT_CODEMOD_LOG_LVL")),
            rotate_when=env.get("GPT_CODEMOD_LOG_ROT", "midnight"),
            backup_count=backups,
            use_utc=_is_truthy(env.get("GPT_CODEMOD_LOG_UTC")),
            json_console=_is_truthy(env.get("GPT_CODEMOD_LOG_JSON")),
        )


# ════════════════════════════════════════════════════════════════════════════
# Formatters
# ════════════════════════════════════════════════════════════════════════════
class _JsonFormatter(logging.Formatter):
    """One JSON object per record."""

    def __init__(self, use_utc: bool) -> None:
        super().__init__()
        self._use_utc = use_utc

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        if self._use_utc:
            ts = time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime(record.created))
        else:
            ts = time.strftime("%Y-%m-%dT%H:%M:%S%z", time.localtime(record.created))
        data = {
            "ts": ts,
            "name": record.name,
            "pid": record.process,
            "level": record.levelname,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(data, ensure_ascii=False)


def _human_formatter(use_utc: bool) -> logging.Formatter:
    fmt = logging.Formatter(fmt=FORMAT, datefmt=DTFMT)
    if use_utc:
        fmt.converter = time.gmtime  # type: ignore[assignment]
    return fmt


# ════════════════════════════════════════════════════════════════════════════
# Handlers
# ════════════════════════════════════════════════════════════════════════════
def _writable_dir(preferred: Path) -> Optional[Path]:
    """
    Return *preferred* if it can be created and written, else a temp-dir
    fallback, else None (console-only logging).
    """
    for candidate in (preferred, Path(tempfile.gettempdir()) / "gpt-codemod-logs"):
        try:
            candidate = candidate.expanduser().resolve()
            candidate.mkdir(parents=True, exist_ok=True)
            probe = candidate / ".writable"
            probe.write_text("ok", encoding="utf-8")
            probe.unlink()
            return candidate
        except OSError:
            continue
    return None


def _file_handler(settings: LogSettings) -> Optional[logging.Handler]:
    log_dir = _writable_dir(settings.log_dir)
    if log_dir is None:
        return None
    try:
        fh = TimedRotatingFileHandler(
            filename=log_dir / "gpt_codemod.log",
            when=settings.rotate_when,
            interval=1,
            backupCount=settings.backup_count,
            encoding="utf-8",
            utc=settings.use_utc,
        )
    except (OSError, ValueError):
        return None
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(_human_formatter(settings.use_utc))
    return fh


def _console_handler(settings: LogSettings) -> logging.Handler:
    ch = logging.StreamHandler()
    ch.setLevel(settings.console_level)
    if settings.json_console:
        ch.setFormatter(_JsonFormatter(settings.use_utc))
    else:
        ch.setFormatter(_human_formatter(settings.use_utc))
    return ch


# ════════════════════════════════════════════════════════════════════════════
# Public helpers
# ════════════════════════════════════════════════════════════════════════════
def configure(settings: Optional[LogSettings] = None) -> logging.Logger:
    """
    Attach handlers to the root project logger once. Later calls are no-ops,
    so importing modules in any order never duplicates output.
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if root.handlers:
        return root

    settings = settings or LogSettings.from_env()
    root.setLevel(logging.DEBUG)
    fh = _file_handler(settings)
    if fh is not None:
        root.addHandler(fh)
    root.addHandler(_console_handler(settings))
    root.propagate = False

    root.debug(
        "Logger initialised | dir=%s | console=%s | rotate=%s | backups=%s | utc=%s | json=%s",
        settings.log_dir,
        logging.getLevelName(settings.console_level),
        settings.rotate_when,
        settings.backup_count,
        settings.use_utc,
        settings.json_console,
    )
    return root


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Return the root project logger (*name* is None) or a propagating child.
    """
    root = configure()
    if name is None or name == ROOT_LOGGER_NAME:
        return root
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)
    logger.propagate = True
    return logger


__all__ = ["LogSettings", "configure", "get_logger", "ROOT_LOGGER_NAME"]

"""Light-weight JSONL log of solve outcomes with rotation support."""

from __future__ import annotations

import json
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict

from project_config import get_config

__all__ = ["append_event", "configure", "configure_from_config", "current_log_path", "is_enabled"]

_DEFAULT_MAX_BYTES = 10 * 1024 * 1024
_LOCK = threading.Lock()
_LOG_DIR = Path("logs/solves")
_MAX_BYTES = _DEFAULT_MAX_BYTES
_ENABLED = False
_CURRENT_PATH: Path | None = None


def configure(base_dir: str | Path, *, max_bytes: int | None = None, enabled: bool = True) -> None:
    """Write all further events below ``base_dir``."""

    global _LOG_DIR, _MAX_BYTES, _ENABLED, _CURRENT_PATH
    _LOG_DIR = Path(base_dir)
    _MAX_BYTES = max_bytes or _DEFAULT_MAX_BYTES
    _ENABLED = enabled
    _CURRENT_PATH = None


def is_enabled() -> bool:
    return _ENABLED


def _date_prefix() -> str:
    return datetime.now(timezone.utc).strftime("%Y%m%d")


def _resolve_log_path() -> Path:
    global _CURRENT_PATH
    date_dir = _LOG_DIR / _date_prefix()
    date_dir.mkdir(parents=True, exist_ok=True)

    if _CURRENT_PATH is not None and _CURRENT_PATH.exists():
        if _CURRENT_PATH.parent == date_dir and _CURRENT_PATH.stat().st_size < _MAX_BYTES:
            return _CURRENT_PATH

    counter = 0
    while True:
        candidate = date_dir / f"solves_{counter:02d}.jsonl"
        if not candidate.exists() or candidate.stat().st_size < _MAX_BYTES:
            _CURRENT_PATH = candidate
            return candidate
        counter += 1


def append_event(event: Dict[str, Any]) -> Path | None:
    """Append ``event`` to the active JSONL file and return the file path.

    Returns ``None`` without touching the filesystem while logging is
    disabled.
    """

    if not _ENABLED:
        return None

    payload = dict(event)
    payload.setdefault("ts", datetime.now(timezone.utc).isoformat(timespec="milliseconds"))

    line = json.dumps(payload, sort_keys=True, ensure_ascii=False)
    with _LOCK:
        path = _resolve_log_path()
        with path.open("a", encoding="utf-8") as handle:
            handle.write(line + "\n")
    return path


def current_log_path() -> Path | None:
    return _CURRENT_PATH


def configure_from_config() -> None:
    """Apply the ``[eventlog]`` section of ``config.toml``."""

    section = get_config().get("eventlog", {})
    if not isinstance(section, dict):
        section = {}
    max_bytes = section.get("max_bytes")
    configure(
        section.get("dir", "logs/solves"),
        max_bytes=int(max_bytes) if isinstance(max_bytes, int) else None,
        enabled=bool(section.get("enabled", False)),
    )

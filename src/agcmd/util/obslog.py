from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional, TextIO


_CONFIGURED: Dict[str, bool] = {}

# Correlation keys copied from `extra={...}` when present.
_EXTRA_KEYS = ("verb", "agent", "pane", "topic", "from_agent")


def _utc_ts_iso(ts: float) -> str:
    try:
        return datetime.fromtimestamp(ts, tz=timezone.utc).isoformat().replace("+00:00", "Z")
    except (OverflowError, OSError, ValueError):
        return ""


class JsonlFormatter(logging.Formatter):
    """One JSON object per line, small and stable fields."""

    def __init__(self, *, component: str):
        super().__init__()
        self._component = str(component or "").strip() or "agcmd"

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": _utc_ts_iso(getattr(record, "created", 0.0) or 0.0),
            "level": str(record.levelname or ""),
            "logger": str(record.name or ""),
            "component": self._component,
            "msg": record.getMessage(),
        }

        for k in _EXTRA_KEYS:
            v = getattr(record, k, None)
            if v is None:
                continue
            sv = str(v).strip()
            if sv:
                payload[k] = sv

        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


def _parse_level(level: str, default: int = logging.WARNING) -> int:
    s = str(level or "").strip().upper()
    if not s:
        return default
    value = getattr(logging, s, default)
    return value if isinstance(value, int) else default


def setup_root_json_logging(
    *,
    component: str,
    level: Optional[str] = None,
    stream: Optional[TextIO] = None,
    force: bool = False,
) -> None:
    """Configure root logging once per process.

    - Level defaults to `$AGCMD_LOG_LEVEL`, then WARNING.
    - `force=True` replaces handlers installed by an earlier call.
    """
    key = f"root:{component}"
    if _CONFIGURED.get(key) and not force:
        return
    _CONFIGURED[key] = True

    lvl = _parse_level(level if level is not None else os.environ.get("AGCMD_LOG_LEVEL", ""))
    root = logging.getLogger()
    root.setLevel(lvl)

    for h in list(root.handlers):
        if isinstance(getattr(h, "formatter", None), JsonlFormatter):
            if not force:
                h.setLevel(lvl)
                return
            root.removeHandler(h)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(lvl)
    handler.setFormatter(JsonlFormatter(component=component))
    root.addHandler(handler)

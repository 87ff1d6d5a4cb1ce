"""Address registry: which pane each agent (and the human) lives in.

The mapping is read from `panes.json` on every call and only ever written
whole, by `start`. Entries can point at panes the host has since destroyed;
that is noticed when a delivery fails, not here.
"""
from __future__ import annotations

import json
import logging
from typing import Dict, Optional

from ..util.fs import dump_json
from .store import Store

logger = logging.getLogger(__name__)

PANES_FILE = "panes.json"

PaneMapping = Dict[str, str]


class PaneRegistry:
    def __init__(self, store: Store):
        self.store = store

    def save(self, mapping: PaneMapping) -> None:
        self.store.write_text(PANES_FILE, dump_json(dict(mapping)))

    def load(self) -> PaneMapping:
        try:
            text = self.store.read_text(PANES_FILE)
            if not text:
                return {}
            doc = json.loads(text)
        except (UnicodeDecodeError, json.JSONDecodeError):
            logger.warning("ignoring unreadable %s", PANES_FILE)
            return {}
        if not isinstance(doc, dict):
            logger.warning("ignoring malformed %s", PANES_FILE)
            return {}
        return {str(k): str(v) for k, v in doc.items() if isinstance(v, str) and v}

    def resolve(self, name: str) -> Optional[str]:
        return self.load().get(name) or None

    def reverse_resolve(self, pane_id: str) -> Optional[str]:
        # First match wins if two names share a pane.
        for name, pid in self.load().items():
            if pid == pane_id:
                return name
        return None

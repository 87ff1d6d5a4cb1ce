from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from ..contracts.v1 import Config
from ..runners.base import Host
from .config import load_config
from .panes import PaneRegistry
from .store import FileStore, Store


@dataclass
class Session:
    """Host and store for one invocation. Nothing is cached between calls."""

    host: Host
    store: Store

    @property
    def registry(self) -> PaneRegistry:
        return PaneRegistry(self.store)

    def config(self) -> Config:
        return load_config(self.store)


def default_session() -> Session:
    from ..runners.tmux import TmuxHost

    return Session(host=TmuxHost(), store=FileStore())


@dataclass
class DeliveryReport:
    verb: str
    delivered: List[str] = field(default_factory=list)
    skipped: List[Tuple[str, str]] = field(default_factory=list)
    notices: List[str] = field(default_factory=list)
    saved_to: Optional[str] = None
    sender: Optional[str] = None

    @property
    def count(self) -> int:
        return len(self.delivered)

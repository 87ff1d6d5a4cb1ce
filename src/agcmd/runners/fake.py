from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Set, Tuple

from ..kernel.errors import HostDeliveryFailure
from .base import Host, SplitDirection


@dataclass
class FakeHost(Host):
    """In-memory multiplexer with one window, for tests.

    Panes are named `%0`, `%1`, ... in creation order. Every call is appended
    to `calls`; text and submit signals also land in `keys` as
    ``(pane, "text", payload)`` / ``(pane, "submit", "")``.
    """

    panes: List[str] = field(default_factory=lambda: ["%0"])
    current: str = "%0"
    session: bool = True
    dead: Set[str] = field(default_factory=set)
    calls: List[Tuple[str, ...]] = field(default_factory=list)
    keys: List[Tuple[str, str, str]] = field(default_factory=list)
    selected: Optional[str] = None
    _next_id: int = 0

    def __post_init__(self) -> None:
        self._next_id = len(self.panes)

    def _require(self, pane: str, what: str) -> None:
        if pane not in self.panes or pane in self.dead:
            raise HostDeliveryFailure(f"tmux {what} failed for pane {pane}: can't find pane: {pane}")

    def in_session(self) -> bool:
        return self.session

    def list_panes(self) -> List[str]:
        return [p for p in self.panes if p not in self.dead]

    def current_pane(self) -> str:
        return self.current

    def split_pane(self, target: str, direction: SplitDirection, percent: Optional[int] = None) -> str:
        self.calls.append(("split", target, direction, "" if percent is None else str(percent)))
        self._require(target, "split-window")
        pane = f"%{self._next_id}"
        self._next_id += 1
        self.panes.append(pane)
        return pane

    def select_pane(self, pane: str) -> None:
        self.calls.append(("select", pane))
        self._require(pane, "select-pane")
        self.selected = pane

    def send_text(self, pane: str, payload: str) -> None:
        self.calls.append(("send_text", pane, payload))
        self._require(pane, "send-keys")
        self.keys.append((pane, "text", payload))

    def send_submit(self, pane: str) -> None:
        self.calls.append(("send_submit", pane))
        self._require(pane, "send-keys")
        self.keys.append((pane, "submit", ""))

    def texts_for(self, pane: str) -> List[str]:
        return [payload for p, kind, payload in self.keys if p == pane and kind == "text"]

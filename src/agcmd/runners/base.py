from __future__ import annotations

from typing import List, Literal, Optional

SplitDirection = Literal["h", "v"]


class Host:
    """What agcmd needs from the terminal multiplexer.

    `send_text` receives the payload exactly as it goes between single quotes
    on the host's command line; escaping it is the delivery pipeline's job.
    Methods that act on a pane raise `HostDeliveryFailure` when the host
    rejects it.
    """

    def in_session(self) -> bool:
        raise NotImplementedError

    def list_panes(self) -> List[str]:
        raise NotImplementedError

    def current_pane(self) -> str:
        raise NotImplementedError

    def split_pane(self, target: str, direction: SplitDirection, percent: Optional[int] = None) -> str:
        raise NotImplementedError

    def select_pane(self, pane: str) -> None:
        raise NotImplementedError

    def send_text(self, pane: str, payload: str) -> None:
        raise NotImplementedError

    def send_submit(self, pane: str) -> None:
        raise NotImplementedError

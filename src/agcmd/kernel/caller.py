from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..contracts.v1 import Config
from ..runners.base import Host
from .errors import PreconditionError
from .panes import PaneRegistry

HUMAN = "human"
ALL = "all"


@dataclass(frozen=True)
class CallerIdentity:
    """The pane a command runs in and the registered name behind it, if any."""

    pane_id: str
    name: Optional[str] = None

    @property
    def is_human(self) -> bool:
        return self.name == HUMAN

    @property
    def label(self) -> str:
        # Unmapped panes are treated as the operator.
        return self.name or HUMAN


def require_session(host: Host) -> None:
    if not host.in_session():
        raise PreconditionError("Not in a tmux session.", hint="Start a tmux session first: tmux")


def resolve_caller(host: Host, registry: PaneRegistry) -> CallerIdentity:
    pane_id = host.current_pane()
    return CallerIdentity(pane_id=pane_id, name=registry.reverse_resolve(pane_id))


def require_agent_caller(caller: CallerIdentity, config: Config) -> str:
    """Name of the calling agent; fails for the human pane and unknown panes."""
    name = caller.name
    if not name or name == HUMAN or name not in config.agents:
        raise PreconditionError(
            "Must run from an agent pane.",
            hint='This command is for agent-to-agent communication. Use "agcmd <agent> send" from the human pane.',
        )
    return name

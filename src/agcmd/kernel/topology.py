"""Pane layout for `agcmd start`.

    ┌──────────┬──────────┐
    │          │ agent-1  │
    │          ├──────────┤
    │  human   │ agent-2  │
    │          ├──────────┤
    │          │ agent-N  │
    └──────────┴──────────┘

The starting pane stays the human's. One horizontal split hands 60% to the
agents; every further agent is split off the previous agent's pane.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Callable, Dict, List

from .caller import HUMAN, require_session
from .delivery import run_command
from .errors import StartAborted
from .session import Session

logger = logging.getLogger(__name__)

AGENTS_AREA_PERCENT = 60

Confirm = Callable[[str], bool]


def stack_percent(remaining: int) -> int:
    """Share of the previous agent pane given to the next one.

    `remaining` counts the agent being placed and every one after it.
    """
    return int(math.floor(100 - 100 / (remaining + 1)))


@dataclass
class Layout:
    panes: Dict[str, str] = field(default_factory=dict)
    launched: List[str] = field(default_factory=list)


def _confirm_overwrite(session: Session, confirm: Confirm) -> None:
    if session.registry.load():
        if not confirm("Found existing pane mapping. Overwrite? [y/N] "):
            raise StartAborted("Aborted.")
    existing = session.host.list_panes()
    if len(existing) > 1:
        if not confirm(f"Found {len(existing)} existing panes. Continue and create layout? [y/N] "):
            raise StartAborted("Aborted.")


def build_layout(session: Session, agent_names: List[str], commands: Dict[str, str]) -> Layout:
    """Split panes for `agent_names` from the current pane and launch each agent.

    Host failures propagate; whatever was created before stays.
    """
    host = session.host
    layout = Layout()
    start_pane = host.current_pane()
    layout.panes[HUMAN] = start_pane

    previous = start_pane
    total = len(agent_names)
    for i, name in enumerate(agent_names):
        host.select_pane(previous)
        if i == 0:
            pane = host.split_pane(start_pane, "h", AGENTS_AREA_PERCENT)
        else:
            pane = host.split_pane(previous, "v", stack_percent(total - i))
        layout.panes[name] = pane
        previous = pane
        logger.info("created pane", extra={"agent": name, "pane": pane})

        command = (commands.get(name) or "").strip()
        if command:
            run_command(host, pane, command)
            layout.launched.append(name)

    return layout


def start(session: Session, confirm: Confirm) -> Layout:
    require_session(session.host)
    config = session.config()
    _confirm_overwrite(session, confirm)

    names = config.agent_names
    layout = build_layout(session, names, {n: a.command for n, a in config.agents.items()})
    session.registry.save(layout.panes)
    session.host.select_pane(layout.panes[HUMAN])
    return layout

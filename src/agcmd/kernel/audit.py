from __future__ import annotations

import logging
from typing import List

from ..contracts.v1 import Config, LogEntry
from .store import Store

logger = logging.getLogger(__name__)

COMMANDS_LOG = "logs/commands.jsonl"


def record(store: Store, config: Config, *, agent: str, verb: str, args: List[str], from_agent: str) -> None:
    """Append one line to the command log when `config.log` is on."""
    if not config.log:
        return
    entry = LogEntry(agent=agent, verb=verb, args=list(args), from_agent=from_agent)
    store.append_line(COMMANDS_LOG, entry.to_line())
    logger.debug("logged %s", verb, extra={"verb": verb, "agent": agent, "from_agent": from_agent})

"""Getting text into an agent's input line.

Two layers read the text before the agent does. The host's command line
wraps it in single quotes, so a `'` is written as `'\\''` (close, escaped
quote, reopen). The agents' own input line treats `!` as a trigger, so it is
sent as `\\!`. Raw mode skips both and sends the text untouched.

Text and submit are two separate host calls with a short pause in between;
sent back to back, some agents take the submit as part of a paste.
"""
from __future__ import annotations

import logging
import os
import time
from typing import Optional

from ..runners.base import Host

logger = logging.getLogger(__name__)

DEFAULT_SUBMIT_DELAY_SECONDS = 0.1


def escape_for_shell(text: str) -> str:
    return text.replace("'", "'\\''")


def escape_for_agents(text: str) -> str:
    return text.replace("!", "\\!")


def escape_message(text: str, raw: bool = False) -> str:
    if raw:
        return text
    return escape_for_agents(escape_for_shell(text))


def submit_delay() -> float:
    env = os.environ.get("AGCMD_SUBMIT_DELAY", "").strip()
    if not env:
        return DEFAULT_SUBMIT_DELAY_SECONDS
    try:
        value = float(env)
    except ValueError:
        return DEFAULT_SUBMIT_DELAY_SECONDS
    return value if value >= 0 else DEFAULT_SUBMIT_DELAY_SECONDS


def transmit(host: Host, pane: str, payload: str, *, delay: Optional[float] = None) -> None:
    """Send an already-escaped payload, wait, then submit."""
    host.send_text(pane, payload)
    time.sleep(submit_delay() if delay is None else delay)
    host.send_submit(pane)


def deliver(host: Host, pane: str, text: str, *, raw: bool = False, delay: Optional[float] = None) -> None:
    """Deliver free text to `pane`. Host rejections propagate unchanged."""
    logger.debug("deliver %d chars raw=%s", len(text), raw, extra={"pane": pane})
    transmit(host, pane, escape_message(text, raw), delay=delay)


def run_command(host: Host, pane: str, command: str, *, delay: Optional[float] = None) -> None:
    """Type a shell command into `pane` and submit it."""
    logger.debug("run %r", command, extra={"pane": pane})
    transmit(host, pane, escape_for_shell(command), delay=delay)

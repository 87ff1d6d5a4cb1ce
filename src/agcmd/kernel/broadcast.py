from __future__ import annotations

import logging
from typing import Callable, List

from ..contracts.v1 import Config
from .audit import record
from .caller import HUMAN, CallerIdentity
from .delivery import deliver
from .errors import HostDeliveryFailure
from .session import DeliveryReport, Session

logger = logging.getLogger(__name__)

MessageBuilder = Callable[[str], str]


def broadcast_order(config: Config, mapping: dict) -> List[str]:
    """Registered agents in registry order, then configured agents with no pane."""
    names = [n for n in mapping if n in config.agents]
    names += [n for n in config.agents if n not in mapping]
    return [n for n in names if n != HUMAN]


def broadcast(
    session: Session,
    config: Config,
    caller: CallerIdentity,
    *,
    verb: str,
    build: MessageBuilder,
    args: List[str],
    raw: bool = False,
) -> DeliveryReport:
    """Deliver to every agent except the human and the caller's own pane.

    A target without a pane, or whose pane the host rejects, is skipped with a
    warning and the rest still receive the message.
    """
    report = DeliveryReport(verb=verb)
    mapping = session.registry.load()

    for name in broadcast_order(config, mapping):
        pane = mapping.get(name)
        if not pane:
            logger.warning("pane for '%s' not found, skipping", name, extra={"verb": verb, "agent": name})
            report.skipped.append((name, "pane not found"))
            continue
        if pane == caller.pane_id:
            report.skipped.append((name, "self"))
            continue
        try:
            deliver(session.host, pane, build(name), raw=raw)
        except HostDeliveryFailure as e:
            logger.warning("delivery to '%s' failed, skipping: %s", name, e.message, extra={"verb": verb, "agent": name, "pane": pane})
            report.skipped.append((name, e.message))
            continue
        record(session.store, config, agent=name, verb=verb, args=args, from_agent=caller.label)
        report.delivered.append(name)

    logger.info("%s broadcast to %d agent(s)", verb, report.count, extra={"verb": verb})
    return report

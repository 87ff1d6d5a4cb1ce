"""ask / answer between agents through `questions/<topic>/<agent>.md`.

Each agent owns one file per topic and every write replaces it. Nothing
tracks whether a question was answered: asking twice, or answering without
a question, are both allowed.
"""
from __future__ import annotations

import logging
from typing import Optional

from ..contracts.v1 import Config, MailboxKind, MailboxMessage
from ..paths import display_path
from ..util.slug import normalize
from .audit import record
from .caller import ALL, HUMAN, CallerIdentity, require_agent_caller, require_session, resolve_caller
from .delivery import deliver
from .errors import LookupFailure, PreconditionError, SlugEmptyError
from .session import DeliveryReport, Session

logger = logging.getLogger(__name__)

QUESTIONS_DIR = "questions"


def topic_dir(slug: str) -> str:
    return f"{QUESTIONS_DIR}/{slug}"


def message_file(slug: str, agent: str) -> str:
    return f"{topic_dir(slug)}/{agent}.md"


def _validate_exchange(
    session: Session,
    config: Config,
    caller: CallerIdentity,
    to_agent: str,
    message: str,
    kind: MailboxKind,
) -> tuple[str, str]:
    """Checks shared by ask and answer; returns (from_agent, target pane)."""
    from_agent = require_agent_caller(caller, config)
    noun = "Message" if kind == "question" else "Answer"
    verb = "ask" if kind == "question" else "answer to"

    if not (message or "").strip():
        raise PreconditionError(f"{noun} cannot be empty.")
    if to_agent == ALL:
        raise PreconditionError(f'Cannot {verb} "all".', hint="Specify a single agent.")
    if to_agent == HUMAN:
        raise PreconditionError(f"Cannot {verb} the human pane.", hint='Use "agcmd send" to communicate with humans.')
    if to_agent not in config.agents:
        raise PreconditionError(
            f"Unknown agent '{to_agent}'.",
            hint=f"Available agents: {', '.join(config.agent_names)}",
        )
    if to_agent == from_agent:
        raise PreconditionError(f"Cannot {verb} yourself.", hint="Specify a different agent.")

    pane = session.registry.resolve(to_agent)
    if not pane:
        raise LookupFailure(
            f"Pane for agent '{to_agent}' not found.",
            hint='Run "agcmd start" first to create agent panes.',
        )
    return from_agent, pane


def _topic_slug(topic: str, report: DeliveryReport) -> str:
    slug, modified = normalize(topic)
    if not slug:
        raise SlugEmptyError(
            "Topic name resulted in empty slug.",
            hint="Please provide a valid topic name with alphanumeric characters.",
        )
    if modified:
        report.notices.append(f"Topic name modified: '{topic}' → '{slug}'")
    return slug


def question_routing(from_agent: str, to_agent: str, slug: str, message: str) -> str:
    answer_path = display_path(QUESTIONS_DIR, slug, f"{to_agent}.md")
    return (
        f"[from: {from_agent}] {message}\n"
        f"Save your answer to: {answer_path}\n"
        f'Reply using: agcmd answer {from_agent} {slug} "your response"'
    )


def answer_routing(from_agent: str, message: str) -> str:
    return f"[from: {from_agent}] {message}"


def _exchange(
    session: Session,
    kind: MailboxKind,
    to_agent: str,
    topic: str,
    message: str,
    raw: bool,
    caller: Optional[CallerIdentity],
) -> DeliveryReport:
    require_session(session.host)
    config = session.config()
    if caller is None:
        caller = resolve_caller(session.host, session.registry)
    verb = "ask" if kind == "question" else "answer"
    report = DeliveryReport(verb=verb)

    from_agent, pane = _validate_exchange(session, config, caller, to_agent, message, kind)
    report.sender = from_agent
    slug = _topic_slug(topic, report)

    store = session.store
    if kind == "answer" and not store.is_dir(topic_dir(slug)):
        logger.warning("no prior questions for topic '%s'", slug, extra={"topic": slug, "verb": verb})
        report.notices.append(f"Warning: No prior questions found for topic '{slug}'. Creating new topic directory.")
    store.make_dir(topic_dir(slug))

    doc = MailboxMessage(kind=kind, topic=slug, from_agent=from_agent, to_agent=to_agent, body=message)
    rel = message_file(slug, from_agent)
    store.write_text(rel, doc.render())
    report.saved_to = store.location(rel)

    if kind == "question":
        routed = question_routing(from_agent, to_agent, slug, message)
    else:
        routed = answer_routing(from_agent, message)
    deliver(session.host, pane, routed, raw=raw)

    record(store, config, agent=to_agent, verb=verb, args=[slug, message], from_agent=from_agent)
    logger.info("%s delivered", verb, extra={"verb": verb, "agent": to_agent, "from_agent": from_agent, "topic": slug})
    report.delivered.append(to_agent)
    return report


def ask(
    session: Session,
    to_agent: str,
    topic: str,
    message: str,
    *,
    raw: bool = False,
    caller: Optional[CallerIdentity] = None,
) -> DeliveryReport:
    """Ask `to_agent` a question from the agent whose pane runs this."""
    return _exchange(session, "question", to_agent, topic, message, raw, caller)


def answer(
    session: Session,
    to_agent: str,
    topic: str,
    message: str,
    *,
    raw: bool = False,
    caller: Optional[CallerIdentity] = None,
) -> DeliveryReport:
    """Answer `to_agent`; the reply carries no return address."""
    return _exchange(session, "answer", to_agent, topic, message, raw, caller)

"""Operator verbs: send, plan, review-plan and review-diff.

Each takes an agent name or `all`; `all` goes through `broadcast`.
"""
from __future__ import annotations

import logging
from typing import List, Optional

from ..contracts.v1 import Config
from ..paths import display_path
from ..util.slug import normalize
from .audit import record
from .broadcast import MessageBuilder, broadcast
from .caller import ALL, CallerIdentity, require_session, resolve_caller
from .delivery import deliver
from .errors import LookupFailure, PreconditionError, SlugEmptyError
from .session import DeliveryReport, Session

logger = logging.getLogger(__name__)


def require_known_agent(config: Config, name: str) -> None:
    if name not in config.agents:
        raise PreconditionError(
            f"Unknown agent '{name}'.",
            hint=f"Available agents: {', '.join(config.agent_names)}",
        )


def require_pane(session: Session, name: str) -> str:
    pane = session.registry.resolve(name)
    if not pane:
        raise LookupFailure(
            f"Pane for agent '{name}' not found.",
            hint='Run "agcmd start" first to create agent panes.',
        )
    return pane


def feature_slug(feature: str, report: DeliveryReport, *, what: str = "Feature") -> str:
    slug, modified = normalize(feature)
    if not slug:
        raise SlugEmptyError(
            f"{what} name resulted in empty slug.",
            hint=f"Please provide a valid {what.lower()} name with alphanumeric characters.",
        )
    if modified:
        report.notices.append(f"{what} name modified: '{feature}' → '{slug}'")
    return slug


def dispatch(
    session: Session,
    config: Config,
    caller: CallerIdentity,
    target: str,
    *,
    verb: str,
    build: MessageBuilder,
    args: List[str],
    raw: bool = False,
    report: Optional[DeliveryReport] = None,
) -> DeliveryReport:
    if target == ALL:
        out = broadcast(session, config, caller, verb=verb, build=build, args=args, raw=raw)
        if report is not None:
            out.notices = report.notices + out.notices
            out.saved_to = report.saved_to
        return out

    report = report or DeliveryReport(verb=verb)
    require_known_agent(config, target)
    pane = require_pane(session, target)
    deliver(session.host, pane, build(target), raw=raw)
    record(session.store, config, agent=target, verb=verb, args=args, from_agent=caller.label)
    logger.info("%s sent", verb, extra={"verb": verb, "agent": target, "pane": pane})
    report.delivered.append(target)
    return report


def _begin(session: Session) -> tuple[Config, CallerIdentity]:
    require_session(session.host)
    config = session.config()
    return config, resolve_caller(session.host, session.registry)


def send(session: Session, target: str, message: str, *, raw: bool = False) -> DeliveryReport:
    config, caller = _begin(session)
    return dispatch(session, config, caller, target, verb="send", build=lambda _: message, args=[message], raw=raw)


def plan_message(slug: str, agent: str, prompt: str) -> str:
    save_path = display_path("plans", slug, f"{agent}.md")
    return f"Plan the feature:\n\n{prompt}\n\nSave your plan to: {save_path}"


def plan(session: Session, target: str, feature: str, prompt: str, *, raw: bool = False) -> DeliveryReport:
    config, caller = _begin(session)
    report = DeliveryReport(verb="plan")
    slug = feature_slug(feature, report)
    session.store.make_dir(f"plans/{slug}")
    report.saved_to = display_path("plans", slug) + "/"
    return dispatch(
        session,
        config,
        caller,
        target,
        verb="plan",
        build=lambda agent: plan_message(slug, agent, prompt),
        args=[slug, prompt],
        raw=raw,
        report=report,
    )


def review_plan_message(slug: str, instructions: Optional[str], review_format: str) -> str:
    plans_path = display_path("plans", slug) + "/"
    middle = f"{instructions}\n\n" if instructions else ""
    return f"Review the plans in {plans_path}\n\n{middle}Respond in format: {review_format}"


def review_plan(
    session: Session,
    target: str,
    feature: str,
    instructions: Optional[str] = None,
    *,
    raw: bool = False,
) -> DeliveryReport:
    config, caller = _begin(session)
    report = DeliveryReport(verb="review-plan")
    slug = feature_slug(feature, report)
    if not session.store.is_dir(f"plans/{slug}"):
        raise PreconditionError(
            f"Plans directory not found: {display_path('plans', slug)}/",
            hint='Create plans first with: agcmd <agent> plan <feature> "<prompt>"',
        )
    message = review_plan_message(slug, instructions, config.default_review_format)
    args = [slug] + ([instructions] if instructions else [])
    return dispatch(
        session, config, caller, target, verb="review-plan", build=lambda _: message, args=args, raw=raw, report=report
    )


def review_diff_message(diff_args: List[str], review_format: str) -> str:
    return f"Review the git diff: git diff {' '.join(diff_args)}\n\nRespond in format: {review_format}"


def review_diff(session: Session, target: str, diff_args: List[str], *, raw: bool = False) -> DeliveryReport:
    if not diff_args:
        raise PreconditionError("Missing git diff arguments.", hint="Usage: agcmd <agent> review-diff <git-diff-args...>")
    config, caller = _begin(session)
    message = review_diff_message(diff_args, config.default_review_format)
    return dispatch(
        session, config, caller, target, verb="review-diff", build=lambda _: message, args=list(diff_args), raw=raw
    )

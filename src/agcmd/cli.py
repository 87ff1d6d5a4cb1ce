from __future__ import annotations

import argparse
import sys
from typing import Callable, List, Optional

from . import __version__
from .kernel import commands, mailbox, topology
from .kernel.errors import AgcmdError, StartAborted
from .kernel.session import DeliveryReport, Session, default_session
from .util.obslog import setup_root_json_logging

TOP_LEVEL = ("start", "ask", "answer")

EPILOG = """\
targets:
  <agent>        any agent from ~/.agcmd/config.json
  all            every agent except the human and the calling pane

examples:
  agcmd start
  agcmd claude send "review the auth module"
  agcmd all send "sync up"
  agcmd claude plan feature-1 "Auth flow for mobile"
  agcmd claude review-plan feature-1 "focus on security"
  agcmd claude review-diff main..HEAD
  agcmd ask codex auth-design "How should we handle token refresh?"
  agcmd answer claude auth-design "Use refresh tokens with 7-day expiry"
"""


class _Parser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        self.print_usage(sys.stderr)
        print(f"Error: {message}", file=sys.stderr)
        raise SystemExit(1)


def _confirm_stdin(prompt: str) -> bool:
    try:
        ans = input(prompt)
    except EOFError:
        return False
    return ans.strip().lower() == "y"


def _print_report(report: DeliveryReport, sent_line: str, broadcast_what: str) -> None:
    for line in report.notices:
        print(line)
    for name, reason in report.skipped:
        if reason == "self":
            continue
        if reason == "pane not found":
            print(f"Warning: Pane for '{name}' not found, skipping.")
        else:
            print(f"Warning: {reason}; skipping '{name}'.")
    if sent_line:
        print(sent_line)
    else:
        print(f"{broadcast_what} broadcast to {report.count} agent(s)")


def _sent_line(args: argparse.Namespace, single: str) -> str:
    return "" if args.target == "all" else single


def cmd_start(args: argparse.Namespace, session: Session) -> int:
    layout = topology.start(session, confirm=_confirm_stdin)
    print("Agent layout created successfully.")
    print("")
    print("Panes:")
    for name, pane in layout.panes.items():
        print(f"  {name}: {pane}")
    print("")
    print(f"Mapping saved to {session.store.location('panes.json')}")
    return 0


def cmd_send(args: argparse.Namespace, session: Session) -> int:
    report = commands.send(session, args.target, args.message, raw=args.raw)
    _print_report(report, _sent_line(args, f"Sent to {args.target}"), "Message")
    return 0


def cmd_plan(args: argparse.Namespace, session: Session) -> int:
    report = commands.plan(session, args.target, args.feature, args.prompt, raw=args.raw)
    _print_report(report, _sent_line(args, f"Plan request sent to {args.target}"), "Plan request")
    if report.saved_to:
        print(f"Save path: {report.saved_to}")
    return 0


def cmd_review_plan(args: argparse.Namespace, session: Session) -> int:
    report = commands.review_plan(session, args.target, args.feature, args.instructions, raw=args.raw)
    _print_report(report, _sent_line(args, f"Review request sent to {args.target}"), "Review request")
    return 0


def cmd_review_diff(args: argparse.Namespace, session: Session) -> int:
    report = commands.review_diff(session, args.target, list(args.diff_args), raw=args.raw)
    _print_report(report, _sent_line(args, f"Diff review request sent to {args.target}"), "Diff review request")
    return 0


def _exchange_cmd(fn: Callable[..., DeliveryReport], noun: str) -> Callable[[argparse.Namespace, Session], int]:
    def run(args: argparse.Namespace, session: Session) -> int:
        report = fn(session, args.to_agent, args.topic, args.message, raw=args.raw)
        for line in report.notices:
            print(line)
        print(f"{noun} sent from {report.sender} to {args.to_agent}")
        print(f"{noun} saved to: {report.saved_to}")
        return 0

    return run


cmd_ask = _exchange_cmd(mailbox.ask, "Question")
cmd_answer = _exchange_cmd(mailbox.answer, "Answer")


def _add_raw(p: argparse.ArgumentParser) -> None:
    # main() strips --raw before parsing; this only documents it in --help.
    p.add_argument("--raw", action="store_true", help="Skip message escaping")


def build_parser() -> argparse.ArgumentParser:
    p = _Parser(
        prog="agcmd",
        description="Agent Command Center: drive several agent CLIs in one tmux window.",
        usage="agcmd <command> ... | agcmd <agent|all> <verb> ...",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument("-v", "--version", action="version", version=f"agcmd {__version__}")
    sub = p.add_subparsers(dest="command", metavar="command")

    p_start = sub.add_parser("start", help="Create the tmux layout and start agents")
    p_start.set_defaults(func=cmd_start)

    p_ask = sub.add_parser("ask", help="Ask another agent a question (run from an agent pane)")
    p_ask.add_argument("to_agent", help="Agent to ask")
    p_ask.add_argument("topic", help="Topic name (normalized to a slug)")
    p_ask.add_argument("message", help="Question text")
    _add_raw(p_ask)
    p_ask.set_defaults(func=cmd_ask)

    p_answer = sub.add_parser("answer", help="Answer a question from another agent (run from an agent pane)")
    p_answer.add_argument("to_agent", help="Agent who asked")
    p_answer.add_argument("topic", help="Topic name (normalized to a slug)")
    p_answer.add_argument("message", help="Answer text")
    _add_raw(p_answer)
    p_answer.set_defaults(func=cmd_answer)

    return p


def build_agent_parser() -> argparse.ArgumentParser:
    p = _Parser(prog="agcmd", usage="agcmd <agent|all> <verb> [args...]")
    p.add_argument("target", help="Agent name or 'all'")
    verbs = p.add_subparsers(dest="verb", metavar="verb")
    verbs.required = True

    p_send = verbs.add_parser("send", help="Send a message to the agent")
    p_send.add_argument("message", help="Message text")
    _add_raw(p_send)
    p_send.set_defaults(func=cmd_send)

    p_plan = verbs.add_parser("plan", help="Ask for a plan for a feature")
    p_plan.add_argument("feature", help="Feature name (normalized to a slug)")
    p_plan.add_argument("prompt", help="What to plan")
    _add_raw(p_plan)
    p_plan.set_defaults(func=cmd_plan)

    p_review_plan = verbs.add_parser("review-plan", help="Ask for a review of a feature's plans")
    p_review_plan.add_argument("feature", help="Feature name (normalized to a slug)")
    p_review_plan.add_argument("instructions", nargs="?", default=None, help="Extra review instructions")
    _add_raw(p_review_plan)
    p_review_plan.set_defaults(func=cmd_review_plan)

    p_review_diff = verbs.add_parser("review-diff", help="Ask for a review of a git diff")
    _add_raw(p_review_diff)
    p_review_diff.add_argument("diff_args", nargs=argparse.REMAINDER, help="Arguments for git diff")
    p_review_diff.set_defaults(func=cmd_review_diff)

    return p


def _first_positional(argv: List[str]) -> Optional[str]:
    for a in argv:
        if not a.startswith("-"):
            return a
    return None


def main(argv: Optional[List[str]] = None, *, session: Optional[Session] = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    setup_root_json_logging(component="agcmd")

    # --raw is global: accepted anywhere, even among review-diff git arguments.
    raw = "--raw" in argv
    argv = [a for a in argv if a != "--raw"]

    first = _first_positional(argv)
    if first is None or first in TOP_LEVEL:
        parser = build_parser()
    else:
        parser = build_agent_parser()
    args, extras = parser.parse_known_args(argv)
    if extras:
        # A leading dashed git flag (`review-diff --staged`) never reaches REMAINDER.
        if getattr(args, "verb", None) != "review-diff":
            parser.error(f"unrecognized arguments: {' '.join(extras)}")
        args.diff_args = extras + list(args.diff_args)
    args.raw = raw

    func = getattr(args, "func", None)
    if func is None:
        parser.print_help()
        return 0

    try:
        return int(func(args, session or default_session()))
    except StartAborted:
        print("Aborted.")
        return 0
    except AgcmdError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        if e.hint:
            print(e.hint, file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())

from __future__ import annotations

import logging
import os
import shlex
import subprocess
from typing import List, Optional, Tuple

from ..kernel.errors import HostDeliveryFailure
from .base import Host, SplitDirection

logger = logging.getLogger(__name__)


def _run_tmux(args: List[str], *, timeout_s: float = 3.0) -> Tuple[int, str, str]:
    try:
        p = subprocess.run(
            ["tmux", *args],
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            timeout=timeout_s,
            check=False,
        )
        return int(p.returncode), (p.stdout or ""), (p.stderr or "")
    except subprocess.TimeoutExpired:
        return 124, "", "tmux timeout"
    except OSError as e:
        return 1, "", str(e)


def _run_shell(line: str, *, timeout_s: float = 3.0) -> Tuple[int, str, str]:
    try:
        p = subprocess.run(
            line,
            shell=True,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            timeout=timeout_s,
            check=False,
        )
        return int(p.returncode), (p.stdout or ""), (p.stderr or "")
    except subprocess.TimeoutExpired:
        return 124, "", "tmux timeout"
    except OSError as e:
        return 1, "", str(e)


def _check(code: int, err: str, what: str, pane: str = "") -> None:
    if code == 0:
        return
    detail = err.strip() or f"exit {code}"
    logger.error("tmux %s failed: %s", what, detail, extra={"pane": pane})
    target = f" for pane {pane}" if pane else ""
    raise HostDeliveryFailure(
        f"tmux {what} failed{target}: {detail}",
        hint='The pane may have been closed. Run "agcmd start" to recreate agent panes.',
    )


class TmuxHost(Host):
    def in_session(self) -> bool:
        return bool(os.environ.get("TMUX"))

    def list_panes(self) -> List[str]:
        code, out, _ = _run_tmux(["list-panes", "-F", "#{pane_id}"])
        if code != 0:
            return []
        return [ln.strip() for ln in out.splitlines() if ln.strip()]

    def current_pane(self) -> str:
        # $TMUX_PANE is the pane this process was started in, even if another has focus.
        env = os.environ.get("TMUX_PANE", "").strip()
        if env:
            return env
        code, out, err = _run_tmux(["display-message", "-p", "#{pane_id}"])
        _check(code, err, "display-message")
        return out.strip()

    def split_pane(self, target: str, direction: SplitDirection, percent: Optional[int] = None) -> str:
        args = ["split-window", f"-{direction}", "-t", target]
        if percent is not None:
            args += ["-p", str(int(percent))]
        args += ["-P", "-F", "#{pane_id}"]
        code, out, err = _run_tmux(args)
        _check(code, err, "split-window", target)
        return out.strip()

    def select_pane(self, pane: str) -> None:
        code, _, err = _run_tmux(["select-pane", "-t", pane])
        _check(code, err, "select-pane", pane)

    def send_text(self, pane: str, payload: str) -> None:
        # Goes through the shell on purpose: `payload` is already escaped for it.
        line = f"tmux send-keys -t {shlex.quote(pane)} -l -- '{payload}'"
        code, _, err = _run_shell(line)
        _check(code, err, "send-keys", pane)

    def send_submit(self, pane: str) -> None:
        code, _, err = _run_tmux(["send-keys", "-t", pane, "C-m"])
        _check(code, err, "send-keys", pane)

from __future__ import annotations

import os
from pathlib import Path

SUBDIRS = ("plans", "questions", "logs")


def agcmd_home() -> Path:
    env = os.environ.get("AGCMD_HOME", "").strip()
    if env:
        return Path(env).expanduser().resolve()
    return (Path.home() / ".agcmd").resolve()


def ensure_home() -> Path:
    home = agcmd_home()
    home.mkdir(parents=True, exist_ok=True)
    for name in SUBDIRS:
        (home / name).mkdir(parents=True, exist_ok=True)
    return home


def display_path(*parts: str) -> str:
    """Path agents are told to use; `~/.agcmd/...` unless $AGCMD_HOME moves the home."""
    home = agcmd_home()
    if home == (Path.home() / ".agcmd").resolve():
        return "/".join(["~/.agcmd", *parts])
    return str(home.joinpath(*parts))

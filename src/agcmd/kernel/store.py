"""Persistence seam for everything under the agcmd home directory.

Kernel code reads and writes through a `Store` addressed by home-relative
paths (``"panes.json"``, ``"questions/<slug>/<agent>.md"``). `FileStore` is the
real one; `MemoryStore` keeps the same contract in a dict for tests.
"""
from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional, Set

from ..paths import ensure_home
from ..util.fs import append_line, atomic_write_text


class Store:
    def read_text(self, rel: str) -> Optional[str]:
        raise NotImplementedError

    def write_text(self, rel: str, text: str) -> None:
        """Replace the whole file in one step, creating parents."""
        raise NotImplementedError

    def append_line(self, rel: str, line: str) -> None:
        raise NotImplementedError

    def is_dir(self, rel: str) -> bool:
        raise NotImplementedError

    def make_dir(self, rel: str) -> None:
        raise NotImplementedError

    def location(self, rel: str) -> str:
        """Where `rel` lives, for messages shown to the operator."""
        raise NotImplementedError


class FileStore(Store):
    def __init__(self, root: Optional[Path] = None):
        self._root = root

    @property
    def root(self) -> Path:
        # Resolved lazily so $AGCMD_HOME set after construction still applies.
        if self._root is None:
            self._root = ensure_home()
        return self._root

    def _path(self, rel: str) -> Path:
        return self.root / rel

    def read_text(self, rel: str) -> Optional[str]:
        p = self._path(rel)
        if not p.is_file():
            return None
        return p.read_text(encoding="utf-8")

    def write_text(self, rel: str, text: str) -> None:
        atomic_write_text(self._path(rel), text)

    def append_line(self, rel: str, line: str) -> None:
        append_line(self._path(rel), line)

    def is_dir(self, rel: str) -> bool:
        return self._path(rel).is_dir()

    def make_dir(self, rel: str) -> None:
        self._path(rel).mkdir(parents=True, exist_ok=True)

    def location(self, rel: str) -> str:
        return str(self._path(rel))


class MemoryStore(Store):
    def __init__(self) -> None:
        self.files: Dict[str, str] = {}
        self.dirs: Set[str] = set()

    @staticmethod
    def _norm(rel: str) -> str:
        return rel.strip("/")

    def _add_parents(self, rel: str) -> None:
        parts = self._norm(rel).split("/")[:-1]
        for i in range(1, len(parts) + 1):
            self.dirs.add("/".join(parts[:i]))

    def read_text(self, rel: str) -> Optional[str]:
        return self.files.get(self._norm(rel))

    def write_text(self, rel: str, text: str) -> None:
        self._add_parents(rel)
        self.files[self._norm(rel)] = text

    def append_line(self, rel: str, line: str) -> None:
        self._add_parents(rel)
        key = self._norm(rel)
        self.files[key] = self.files.get(key, "") + line.rstrip("\n") + "\n"

    def is_dir(self, rel: str) -> bool:
        return self._norm(rel) in self.dirs

    def make_dir(self, rel: str) -> None:
        self._add_parents(self._norm(rel) + "/")

    def location(self, rel: str) -> str:
        return "memory:" + self._norm(rel)

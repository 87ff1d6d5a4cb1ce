from __future__ import annotations

import re
from typing import NamedTuple

_INVALID_RE = re.compile(r"[^a-z0-9-]")
_DASHES_RE = re.compile(r"-+")


class Slug(NamedTuple):
    slug: str
    was_modified: bool


def normalize(text: str) -> Slug:
    """Turn free-form text into a filesystem-safe slug.

    Lowercases, maps anything outside ``[a-z0-9-]`` to ``-``, collapses dash
    runs and trims dashes at both ends. An empty slug is a valid result.
    """
    raw = str(text or "")
    s = _INVALID_RE.sub("-", raw.lower())
    s = _DASHES_RE.sub("-", s).strip("-")
    return Slug(slug=s, was_modified=(s != raw))

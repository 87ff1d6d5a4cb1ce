from __future__ import annotations

from .base import Host, SplitDirection
from .fake import FakeHost
from .tmux import TmuxHost

__all__ = ["FakeHost", "Host", "SplitDirection", "TmuxHost"]

from __future__ import annotations

from .config import DEFAULT_REVIEW_FORMAT, RESERVED_NAMES, AgentConfig, Config
from .log import LogEntry
from .message import MailboxKind, MailboxMessage

__all__ = [
    "AgentConfig",
    "Config",
    "DEFAULT_REVIEW_FORMAT",
    "LogEntry",
    "MailboxKind",
    "MailboxMessage",
    "RESERVED_NAMES",
]

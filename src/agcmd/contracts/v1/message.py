from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from ...util.time import utc_now_iso

MailboxKind = Literal["question", "answer"]


class MailboxMessage(BaseModel):
    """One file under `questions/<topic>/<from_agent>.md`."""

    kind: MailboxKind
    topic: str
    from_agent: str
    to_agent: str
    timestamp: str = Field(default_factory=utc_now_iso)
    body: str

    model_config = ConfigDict(extra="forbid")

    def render(self) -> str:
        title = "Question" if self.kind == "question" else "Answer"
        return (
            f"# {title} from {self.from_agent}\n\n"
            f"Timestamp: {self.timestamp}\n"
            f"To: {self.to_agent}\n"
            f"Topic: {self.topic}\n\n"
            "---\n\n"
            f"{self.body}\n"
        )

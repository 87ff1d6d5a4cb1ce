from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field

from ...util.time import utc_now_iso


class LogEntry(BaseModel):
    ts: str = Field(default_factory=utc_now_iso)
    agent: str
    verb: str
    args: List[str] = Field(default_factory=list)
    from_agent: str = Field(alias="from")

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    def to_line(self) -> str:
        return self.model_dump_json(by_alias=True)

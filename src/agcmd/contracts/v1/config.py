from __future__ import annotations

from typing import Dict

from pydantic import BaseModel, ConfigDict, Field, field_validator

RESERVED_NAMES = ("human", "all")

DEFAULT_REVIEW_FORMAT = "JSON with agrees, confidence, blocking, review-comments"


class AgentConfig(BaseModel):
    command: str = ""

    model_config = ConfigDict(extra="ignore")


def _default_agents() -> Dict[str, AgentConfig]:
    return {name: AgentConfig(command=name) for name in ("claude", "codex", "gemini")}


class Config(BaseModel):
    # Insertion order of `agents` is the layout and broadcast order.
    agents: Dict[str, AgentConfig] = Field(default_factory=_default_agents)
    default_review_format: str = Field(default=DEFAULT_REVIEW_FORMAT, alias="defaultReviewFormat")
    log: bool = False

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @field_validator("agents")
    @classmethod
    def _no_reserved_names(cls, v: Dict[str, AgentConfig]) -> Dict[str, AgentConfig]:
        for name in v:
            if name in RESERVED_NAMES:
                raise ValueError(f"agent name '{name}' is reserved")
            if not name.strip():
                raise ValueError("agent name must not be empty")
        return v

    @property
    def agent_names(self) -> list[str]:
        return list(self.agents.keys())

    def to_doc(self) -> dict:
        return self.model_dump(by_alias=True)

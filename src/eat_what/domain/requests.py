"""Inbound request and prompt models."""

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field

REVISE_MODE = "revise"


class AnalyzeRequest(BaseModel):
    """Body of a call to the analyze endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    text: str | None = None
    image: str | None = None
    mode: str | None = None
    prev_json: dict[str, object] | None = Field(default=None, alias="prevJSON")

    @property
    def is_revision(self) -> bool:
        """Return true when the request corrects a previous result."""
        return self.mode == REVISE_MODE and self.prev_json is not None


@dataclass(frozen=True)
class PromptPlan:
    """Model name and chat messages for a single completion call."""

    model: str
    messages: list[dict[str, object]]

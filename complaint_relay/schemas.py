from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class RelayRequest(BaseModel):
    # Unknown or missing actions are rejected by prompts.parse_action, not here.
    action: Any = None
    payload: Any = Field(default_factory=dict)


class TextResponse(BaseModel):
    text: str


class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None


class ExperienceReport(BaseModel):
    """A user's report about a company, as sent to the advice action."""

    model_config = ConfigDict(populate_by_name=True)

    company_name: str = Field(alias="companyName")
    sector: str
    title: str
    description: str


class AnalysisResult(BaseModel):
    tags: list[str]
    summary: str

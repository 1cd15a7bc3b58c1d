from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Literal, get_args

from pydantic import BaseModel, ConfigDict, Field, field_validator


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


ProjectStatus = Literal["draft", "in_progress", "completed"]
VALID_STATUSES: tuple[str, ...] = get_args(ProjectStatus)


class Project(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    user_id: str | None = None
    title: str
    description: str = ""
    category: str = ""
    hypothesis: str | None = None
    materials: list[str] = Field(default_factory=list)
    status: ProjectStatus = "draft"
    observation_notes: list[str] = Field(default_factory=list)
    experiment_results: dict[str, float] = Field(default_factory=dict)
    presentation_template: str | None = None
    created_at: datetime = Field(default_factory=utc_now)

    @field_validator("status", mode="before")
    @classmethod
    def _coerce_status(cls, value: Any) -> str:
        return value if value in VALID_STATUSES else "draft"

    @field_validator("materials", "observation_notes", mode="before")
    @classmethod
    def _none_to_list(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("experiment_results", mode="before")
    @classmethod
    def _none_to_dict(cls, value: Any) -> Any:
        return {} if value is None else value


class ProjectFile(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    project_id: str
    file_name: str
    file_type: str = "application/octet-stream"
    file_url: str
    created_at: datetime = Field(default_factory=utc_now)

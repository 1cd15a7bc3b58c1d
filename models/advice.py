from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ProjectIdea(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: str
    description: str = ""
    category: str = ""
    hypothesis: str | None = None
    materials: list[str] = Field(default_factory=list)


class DataAnalysis(BaseModel):
    model_config = ConfigDict(extra="ignore")

    insights: str
    recommendations: str

from __future__ import annotations

from typing import Any

from agents.llm_client import LLMClient
from agents.prompt_loader import load_prompt, render_prompt
from logging_config import get_logger
from models.advice import DataAnalysis
from services.errors import AdvisorError, InputValidationError


logger = get_logger(__name__)


def format_data_points(experiment_results: dict[str, float]) -> str:
    return "\n".join(f"{name}: {value:g}" for name, value in experiment_results.items())


class AnalystAgent:
    """Analyses of recorded results, lab notes and the project plan itself."""

    def __init__(self, llm: LLMClient):
        self.llm = llm
        self.data_prompt = load_prompt("data_analyst_system.txt")
        self.notes_prompt = load_prompt("notes_system.txt")
        self.review_prompt = load_prompt("project_review_system.txt")

    async def analyze_data(
        self, project_title: str, experiment_results: dict[str, float]
    ) -> DataAnalysis:
        if not experiment_results:
            raise InputValidationError("Please add experiment results before analyzing.")

        payload = await self.llm.chat_json(
            messages=[
                {"role": "system", "content": self.data_prompt},
                {
                    "role": "user",
                    "content": render_prompt(
                        "data_analyst_user.txt",
                        project_title=project_title,
                        data_points=format_data_points(experiment_results),
                    ),
                },
            ],
        )
        analysis = self._coerce_analysis(payload)
        logger.info("data_analysis_ready", metrics=len(experiment_results))
        return analysis

    async def analyze_notes(self, title: str, notes: list[str]) -> str:
        if not notes:
            raise InputValidationError("Please record some lab notes before analyzing.")
        numbered = "\n".join(f"{idx}. {note}" for idx, note in enumerate(notes, start=1))
        return await self._ask(
            self.notes_prompt,
            render_prompt("notes_user.txt", title=title, notes=numbered),
        )

    async def analyze_project(
        self,
        title: str,
        description: str,
        hypothesis: str | None,
        materials: list[str],
    ) -> str:
        return await self._ask(
            self.review_prompt,
            render_prompt(
                "project_review_user.txt",
                title=title,
                description=description,
                hypothesis=hypothesis or "Not specified",
                materials=", ".join(materials) or "None listed",
            ),
        )

    async def _ask(self, system_prompt: str, user_prompt: str) -> str:
        text = await self.llm.chat(
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
        )
        if not text.strip():
            raise AdvisorError("AI service returned an empty answer")
        return text.strip()

    def _coerce_analysis(self, payload: dict[str, Any]) -> DataAnalysis:
        insights = payload.get("insights")
        recommendations = payload.get("recommendations")
        if isinstance(insights, list):
            insights = "\n".join(str(item) for item in insights)
        if isinstance(recommendations, list):
            recommendations = "\n".join(str(item) for item in recommendations)

        insights = str(insights or "").strip()
        recommendations = str(recommendations or "").strip()
        if not insights:
            raise AdvisorError("AI analysis is missing the insights section")
        if not recommendations:
            raise AdvisorError("AI analysis is missing the recommendations section")
        return DataAnalysis(insights=insights, recommendations=recommendations)

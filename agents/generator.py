from __future__ import annotations

from typing import Any

from agents.llm_client import LLMClient
from agents.prompt_loader import load_prompt, render_prompt
from config import DEFAULT_AGE_GROUP, SUPPORTED_AGE_GROUPS
from logging_config import get_logger
from models.advice import ProjectIdea
from services.errors import AdvisorError, InputValidationError


logger = get_logger(__name__)

_AGE_GROUP_DESCRIPTIONS = {
    "elementary": "elementary school student (ages 6-10)",
    "middle": "middle school student (ages 11-13)",
    "high": "high school student (ages 14-18)",
}


def normalize_age_group(age_group: str | None) -> str:
    value = str(age_group or "").strip().lower()
    return value if value in SUPPORTED_AGE_GROUPS else DEFAULT_AGE_GROUP


class ProjectGeneratorAgent:
    def __init__(self, llm: LLMClient):
        self.llm = llm
        self.system_prompt = load_prompt("generator_system.txt")

    async def generate_project(self, interests: str, age_group: str = DEFAULT_AGE_GROUP) -> ProjectIdea:
        topic = str(interests or "").strip()
        if not topic:
            raise InputValidationError(
                "We need to know your interests to generate project ideas"
            )
        group = normalize_age_group(age_group)

        payload = await self.llm.chat_json(
            messages=[
                {"role": "system", "content": self.system_prompt},
                {
                    "role": "user",
                    "content": render_prompt(
                        "generator_user.txt",
                        interests=topic,
                        age_group_description=_AGE_GROUP_DESCRIPTIONS[group],
                    ),
                },
            ],
            temperature=0.8,
        )
        idea = self._coerce_idea(payload)
        logger.info("project_idea_generated", age_group=group, category=idea.category)
        return idea

    def _coerce_idea(self, payload: dict[str, Any]) -> ProjectIdea:
        title = str(payload.get("title") or "").strip()
        if not title:
            raise AdvisorError("AI response did not include a project title")

        materials = payload.get("materials")
        if isinstance(materials, str):
            materials = [m for m in (part.strip() for part in materials.split(",")) if m]
        elif not isinstance(materials, list):
            materials = []

        hypothesis = str(payload.get("hypothesis") or "").strip()
        return ProjectIdea(
            title=title,
            description=str(payload.get("description") or "").strip(),
            category=str(payload.get("category") or "").strip(),
            hypothesis=hypothesis or None,
            materials=[str(m).strip() for m in materials if str(m).strip()],
        )

from __future__ import annotations

from agents.llm_client import LLMClient
from agents.prompt_loader import load_prompt, render_prompt
from services.errors import AdvisorError, InputValidationError


class PlannerAgent:
    def __init__(self, llm: LLMClient):
        self.llm = llm
        self.planner_prompt = load_prompt("planner_system.txt")
        self.research_prompt = load_prompt("research_system.txt")

    async def plan_experiment(
        self,
        title: str,
        description: str,
        hypothesis: str | None,
        materials: list[str],
    ) -> str:
        user_prompt = render_prompt(
            "planner_user.txt",
            title=title,
            description=description,
            hypothesis=hypothesis or "Not specified",
            materials=", ".join(materials),
        )
        return await self._ask(self.planner_prompt, user_prompt)

    async def research_question(self, question: str, title: str, description: str) -> str:
        text = str(question or "").strip()
        if not text:
            raise InputValidationError("Please enter a question.")
        user_prompt = render_prompt(
            "research_user.txt",
            question=text,
            title=title,
            description=description,
        )
        return await self._ask(self.research_prompt, user_prompt)

    async def _ask(self, system_prompt: str, user_prompt: str) -> str:
        answer = await self.llm.chat(
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
        )
        if not answer.strip():
            raise AdvisorError("AI service returned an empty answer")
        return answer.strip()

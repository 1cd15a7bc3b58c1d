from __future__ import annotations

import pytest

from agents.prompt_loader import PROMPTS_DIR, load_prompt, render_prompt


def test_load_prompt_returns_stripped_text() -> None:
    text = load_prompt("generator_system.txt")
    assert len(text) > 50
    assert text == text.strip()
    assert "science fair" in text.lower()


def test_load_prompt_missing_raises() -> None:
    with pytest.raises(FileNotFoundError):
        load_prompt("nonexistent_file_xyz.txt")


def test_render_prompt_fills_placeholders() -> None:
    text = render_prompt(
        "research_user.txt",
        title="Plant Growth",
        description="Music and plants",
        question="Do plants hear?",
    )
    assert "Plant Growth" in text
    assert "Do plants hear?" in text
    assert "{" not in text


def test_render_prompt_requires_every_placeholder() -> None:
    with pytest.raises(KeyError):
        render_prompt("generator_user.txt", interests="volcanoes")


@pytest.mark.parametrize(
    "name",
    [
        "generator_system.txt",
        "data_analyst_system.txt",
        "planner_system.txt",
        "notes_system.txt",
        "research_system.txt",
        "project_review_system.txt",
    ],
)
def test_system_prompts_exist(name: str) -> None:
    assert (PROMPTS_DIR / name).exists()

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class Category(str, Enum):
    BIOLOGY = "biology"
    CHEMISTRY = "chemistry"
    PHYSICS = "physics"
    UNKNOWN = "unknown"


class TutorialStep(BaseModel):
    title: str
    description: str
    detailed_steps: list[str] = Field(default_factory=list)


def parse_category(text: str | None) -> Category:
    """Map a free-text category onto the closed set, ``UNKNOWN`` otherwise.

    Matching is by substring, so "Microbiology" counts as biology. Categories
    are checked in declaration order.
    """
    lowered = str(text or "").lower()
    for category in (Category.BIOLOGY, Category.CHEMISTRY, Category.PHYSICS):
        if category.value in lowered:
            return category
    return Category.UNKNOWN


SAFETY_TIPS: dict[Category, list[str]] = {
    Category.CHEMISTRY: [
        "Always wear safety goggles",
        "Use gloves when handling chemicals",
        "Work in a well-ventilated area",
        "Ask an adult for supervision",
    ],
    Category.BIOLOGY: [
        "Wash hands before and after",
        "Keep your workspace clean",
        "Use proper disposal methods",
        "Be gentle with living things",
    ],
    Category.PHYSICS: [
        "Protect your eyes during light experiments",
        "Be careful with moving parts",
        "Keep water away from electronics",
        "Use tools properly",
    ],
    Category.UNKNOWN: [
        "Always work with adult supervision",
        "Keep your workspace tidy",
        "Follow all safety instructions carefully",
        "Ask questions if you're unsure",
    ],
}

FUN_FACTS: dict[Category, list[str]] = {
    Category.CHEMISTRY: [
        "Did you know? Diamonds and pencil lead are made of the same element - Carbon!",
        "The only letter not in the periodic table is the letter 'J'!",
    ],
    Category.BIOLOGY: [
        "Your body has enough DNA to stretch from the Earth to the Sun and back 600 times!",
        "A honeybee has to visit about 1,500 flowers to make one teaspoon of honey!",
    ],
    Category.PHYSICS: [
        "Lightning strikes the Earth about 100 times every second!",
        "Sound travels about 4.3 times faster in water than in air!",
    ],
    Category.UNKNOWN: [
        "Scientists estimate there are over 100 billion galaxies in the universe!",
        "The average human brain has about 100 billion neurons!",
    ],
}

# Inserted before "Conduct Your Experiment" for the matching category.
SPECIALIZED_STEPS: dict[Category, TutorialStep] = {
    Category.BIOLOGY: TutorialStep(
        title="Observe Biological Changes",
        description="Monitor living organisms or biological processes",
        detailed_steps=[
            "Observe and document changes at regular intervals",
            "Take careful measurements of growth or other biological processes",
            "Note environmental conditions that might affect your specimens",
            "Keep living specimens in appropriate conditions",
            "Be patient - biological processes often take time",
        ],
    ),
    Category.CHEMISTRY: TutorialStep(
        title="Perform Chemical Reactions",
        description="Safely conduct chemical procedures",
        detailed_steps=[
            "Double-check safety precautions before mixing any chemicals",
            "Add chemicals in the correct order and amounts",
            "Note color changes, temperature changes, or gas formation",
            "Allow sufficient time for reactions to complete",
            "Dispose of all chemicals properly according to safety guidelines",
        ],
    ),
}

SPECIALIZED_STEP_POSITION = 3


def safety_tips(category: Category) -> list[str]:
    return list(SAFETY_TIPS[category])


def fun_facts(category: Category) -> list[str]:
    return list(FUN_FACTS[category])


def _default_steps(category_label: str) -> list[TutorialStep]:
    label = category_label.strip() or "Science"
    return [
        TutorialStep(
            title="Set Up Your Workspace",
            description="Prepare a clean area to work on your project",
            detailed_steps=[
                "Find a flat, stable surface with plenty of room to work",
                "Gather all your materials and tools in one place",
                "Put down protective covering if needed (newspaper, plastic sheet)",
                "Make sure you have good lighting",
                "Have a notebook ready to write down observations",
            ],
        ),
        TutorialStep(
            title="Prepare Your Materials",
            description="Get your materials ready for the experiment",
            detailed_steps=[
                "Carefully read through all instructions before starting",
                "Measure and prepare any substances you'll be using",
                "Label containers clearly if needed",
                "Put on any required safety equipment (gloves, goggles)",
                "Take 'before' photos if you want to document your process",
            ],
        ),
        TutorialStep(
            title=f"Set Up Your {label} Experiment",
            description="Arrange your materials according to your plan",
            detailed_steps=[
                "Set up your experiment exactly as described in your plan",
                "Create your control group if applicable",
                "Make sure all variables except the one you're testing remain constant",
                "Double-check your setup against your hypothesis",
                "Take photos of your initial setup for documentation",
            ],
        ),
        TutorialStep(
            title="Conduct Your Experiment",
            description="Follow your procedure carefully",
            detailed_steps=[
                "Follow each step in your planned procedure",
                "Record observations as you go - what do you see happening?",
                "Take measurements at consistent intervals",
                "Note any unexpected results or surprises",
                "Repeat trials multiple times if possible for more reliable results",
            ],
        ),
        TutorialStep(
            title="Record Your Data",
            description="Document all your results",
            detailed_steps=[
                "Create tables for your numerical data",
                "Write detailed descriptions of what you observed",
                "Take 'after' photos to document results",
                "Be honest about all results, even if they weren't what you expected",
                "Look for patterns or trends in your data",
            ],
        ),
        TutorialStep(
            title="Analyze Your Results",
            description="Make sense of what happened",
            detailed_steps=[
                "Compare your results to your original hypothesis",
                "Calculate averages or other statistics if relevant",
                "Create graphs or charts to visualize your data",
                "Think about possible sources of error",
                "Draw conclusions based on your evidence",
            ],
        ),
        TutorialStep(
            title="Present Your Findings",
            description="Share what you learned",
            detailed_steps=[
                "Create a display board with clear sections",
                "Include your question, hypothesis, procedure, and results",
                "Add photos, graphs, and other visuals",
                "Prepare a short verbal explanation of your project",
                "Practice answering questions about your methods and conclusions",
            ],
        ),
    ]


def tutorial_steps(category: Category, category_label: str = "") -> list[TutorialStep]:
    steps = _default_steps(category_label)
    extra = SPECIALIZED_STEPS.get(category)
    if extra is not None:
        steps.insert(SPECIALIZED_STEP_POSITION, extra.model_copy(deep=True))
    return steps


def project_guidance(category_label: str) -> dict:
    category = parse_category(category_label)
    return {
        "category": category.value,
        "safety_tips": safety_tips(category),
        "fun_facts": fun_facts(category),
        "tutorial": [step.model_dump() for step in tutorial_steps(category, category_label)],
    }

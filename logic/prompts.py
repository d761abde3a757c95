"""Prompts and response schemas for the three AI gateway calls."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List

from models.style_profile import StyleProfile
from models.taxonomy import CATEGORIES, Difficulty, SuggestedAction
from models.wardrobe_item import WardrobeItem

GUARDRAIL_BULLETS: List[str] = [
    "Stay within the scope of sustainable wardrobe care (categorizing, reuse, donation, upcycling).",
    "Answer only with JSON that matches the declared response schema.",
    "Never invent item ids; refer only to ids present in the request.",
    "Prefer repairing and reusing garments over discarding them.",
]


def system_instruction(role_hint: str) -> str:
    """Compose a consistent system prompt with boundary reminders."""

    boundary_text = "\n".join(f"- {bullet}" for bullet in GUARDRAIL_BULLETS)
    return (
        f"You are the EcoWardrobe {role_hint}.\n"
        "Follow these guardrails before responding:\n"
        f"{boundary_text}"
    )


def _string_enum(values: Iterable[str]) -> Dict[str, Any]:
    return {"type": "STRING", "format": "enum", "enum": list(values)}


CATEGORIZATION_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "name": {"type": "STRING"},
        "category": {"type": "STRING"},
        "color": {"type": "STRING"},
        "material": {"type": "STRING"},
    },
    "required": ["name", "category", "color", "material"],
}

ANALYSIS_SCHEMA: Dict[str, Any] = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "itemId": {"type": "STRING"},
            "reasoning": {"type": "STRING"},
            "suggestedAction": _string_enum(action.value for action in SuggestedAction),
            "wearProbability": {"type": "NUMBER"},
        },
        "required": ["itemId", "reasoning", "suggestedAction", "wearProbability"],
    },
}

GUIDE_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "title": {"type": "STRING"},
        "difficulty": _string_enum(level.value for level in Difficulty),
        "toolsNeeded": {"type": "ARRAY", "items": {"type": "STRING"}},
        "steps": {"type": "ARRAY", "items": {"type": "STRING"}},
    },
    "required": ["title", "difficulty", "toolsNeeded", "steps"],
}


def categorization_prompt() -> str:
    return (
        "Analyze this clothing item and return details in JSON format.\n"
        f"Categories MUST be one of: {', '.join(CATEGORIES)}.\n"
        "Identify the primary color and material."
    )


def analysis_prompt(items: List[WardrobeItem], profile: StyleProfile) -> str:
    item_lines = "\n".join(
        f"- ID: {item.id}, Name: {item.name}, Category: {item.category}, "
        f"Color: {item.color}, Wear Count: {item.wear_count}, "
        f"Last Worn: {item.last_worn_date or 'never'}"
        for item in items
    )
    return (
        "As a sustainable fashion expert, analyze this wardrobe against the user's style profile.\n"
        "Identify items that are likely neglected or underused.\n\n"
        "User Style Profile:\n"
        f"- Preferred Styles: {', '.join(profile.preferred_styles)}\n"
        f"- Preferred Colors: {', '.join(profile.preferred_colors)}\n"
        f"- Disliked: {', '.join(profile.disliked_elements)}\n\n"
        "Wardrobe Items:\n"
        f"{item_lines}\n\n"
        "Provide an analysis for each item with ID, reasoning for usage patterns, "
        "and a suggested path (DONATE, TRANSFORM, or RESERVE)."
    )


def guide_prompt(item: WardrobeItem, profile: StyleProfile) -> str:
    return (
        f'Create a DIY transformation guide to turn this "{item.name}" into something that fits '
        f'the user\'s "{", ".join(profile.preferred_styles)}" style.\n'
        "The goal is to reduce waste and ensure the user actually wears the item.\n\n"
        f"Item Details: {item.color} {item.material} {item.category}."
    )


__all__ = [
    "GUARDRAIL_BULLETS",
    "system_instruction",
    "CATEGORIZATION_SCHEMA",
    "ANALYSIS_SCHEMA",
    "GUIDE_SCHEMA",
    "categorization_prompt",
    "analysis_prompt",
    "guide_prompt",
]

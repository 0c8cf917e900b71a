"""Prompt text and response schema for the Gemini analysis and search calls."""
from __future__ import annotations

import re
from typing import Iterable, List, Sequence

from google.genai import types

from .styles import CreativeStyle
from .urls import BLOCKED_DOMAINS

SYSTEM_INSTRUCTION = (
    "You are a highly perceptive and creative visual analyst. Your goal is to analyze images "
    "deeply and generate creative text based on them.\n"
    "You must be precise in identifying visual elements and versatile in writing styles ranging "
    "from simple descriptions to abstract poetry."
)

HEX_FORMATTING_RULE = (
    "[CRITICAL FORMATTING RULE - HEX CODES]\n"
    "You MUST identify the specific colors in the image.\n"
    "Whenever you mention a color in the 'visualDetails' or 'creativeOutputs' text "
    "(e.g., 'blue sky', 'rustic red brick'), you MUST immediately append the approximate "
    "Hex Code for that color in parentheses.\n"
    "\n"
    "Example format:\n"
    "\"The bright azure (#007FFF) sky contrasts with the golden (#FFD700) wheat fields.\"\n"
    "\n"
    "This rule is mandatory for ALL text generated."
)

COLOR_WORDS: tuple[str, ...] = (
    "red", "crimson", "scarlet", "maroon", "burgundy", "pink", "rose", "magenta",
    "orange", "amber", "coral", "peach", "yellow", "gold", "golden", "lemon",
    "green", "emerald", "olive", "lime", "jade", "teal", "turquoise", "cyan",
    "blue", "azure", "navy", "cobalt", "sapphire", "indigo", "violet", "purple",
    "lavender", "lilac", "brown", "beige", "tan", "ochre", "bronze", "copper",
    "black", "white", "gray", "grey", "silver", "ivory", "cream", "charcoal",
)

_COLOR_WORD = r"(?:%s)" % "|".join(COLOR_WORDS)
_COLOR_RUN_RE = re.compile(
    r"\b%s(?:[\s-]+%s)*\b" % (_COLOR_WORD, _COLOR_WORD),
    re.IGNORECASE,
)
_HEX_SUFFIX_RE = re.compile(r"\s*\(\s*#[0-9A-Fa-f]{6}\s*\)")


def build_analysis_prompt(style: CreativeStyle, count: int, custom_instruction: str = "") -> str:
    lines = [
        "Analyze the attached image.",
        "",
        "1. Extract a list of 5-10 relevant tags.",
        "2. Extract the main color palette as 5 hex codes.",
        "3. Write a detailed objective visual description.",
        f"4. Generate exactly {int(count)} distinct creative text outputs in the style of: \"{style.value}\".",
        f"   - For this style, {style.guidance}.",
        "   - Give every output a short, catchy title.",
    ]
    instruction = (custom_instruction or "").strip()
    if instruction:
        lines.extend(
            [
                "",
                "[USER CUSTOM INSTRUCTION]",
                f"The user has provided specific guidance for this analysis: \"{instruction}\"",
                "Please integrate this instruction intelligently into the creative outputs and description style.",
            ]
        )
    lines.extend(["", HEX_FORMATTING_RULE])
    return "\n".join(lines)


def analysis_response_schema() -> types.Schema:
    return types.Schema(
        type=types.Type.OBJECT,
        properties={
            "tags": types.Schema(
                type=types.Type.ARRAY,
                items=types.Schema(type=types.Type.STRING),
                description="5-10 descriptive tags related to the image content, mood, and lighting.",
            ),
            "colors": types.Schema(
                type=types.Type.ARRAY,
                items=types.Schema(type=types.Type.STRING),
                description="5 dominant hex color codes from the image.",
            ),
            "visualDetails": types.Schema(
                type=types.Type.STRING,
                description=(
                    "A concise but detailed paragraph (approx 50-80 words) objectively describing the "
                    "visual components, composition, and lighting. MUST include hex codes for colors mentioned."
                ),
            ),
            "creativeOutputs": types.Schema(
                type=types.Type.ARRAY,
                description="A list of creative text variations based on the requested style.",
                items=types.Schema(
                    type=types.Type.OBJECT,
                    properties={
                        "title": types.Schema(
                            type=types.Type.STRING,
                            description="A short, catchy title for this specific variation.",
                        ),
                        "content": types.Schema(
                            type=types.Type.STRING,
                            description="The generated creative text content. MUST include hex codes for colors mentioned.",
                        ),
                    },
                    required=["title", "content"],
                ),
            ),
        },
        required=["tags", "colors", "visualDetails", "creativeOutputs"],
    )


def build_search_prompt(query: str, blocked_domains: Sequence[str] = BLOCKED_DOMAINS) -> str:
    return "\n".join(
        [
            f"Perform a Google Search to find 5-8 high-quality, publicly accessible image URLs matching the query: \"{query.strip()}\".",
            "",
            "[CRITICAL FILTERING RULES]",
            f"1. EXCLUDE all results from these blocked domains: {', '.join(blocked_domains)}.",
            "2. Prefer images from Wikipedia, Wikimedia Commons, Public Domain sites, or open educational resources.",
            "3. Ensure the URLs are direct image links (ending in .jpg, .png, .webp) if possible, or high-quality source pages.",
            "",
            "Return the result as a strictly formatted JSON object with this schema:",
            "{",
            '  "images": [',
            '    { "url": "string (the image url)", "title": "string (a short title)", "source": "string (the root domain source)" }',
            "  ]",
            "}",
        ]
    )


def missing_hex_mentions(text: str) -> List[str]:
    """Return color phrases in ``text`` that are not followed by a ``(#RRGGBB)`` code."""

    missing: List[str] = []
    for match in _COLOR_RUN_RE.finditer(text or ""):
        if _HEX_SUFFIX_RE.match(text, match.end()):
            continue
        missing.append(match.group(0))
    return missing


def hex_format_warnings(sections: Iterable[tuple[str, str]]) -> List[str]:
    warnings: List[str] = []
    for label, text in sections:
        phrases = missing_hex_mentions(text)
        if phrases:
            unique = list(dict.fromkeys(phrase.lower() for phrase in phrases))
            warnings.append(f"{label}: color mention without hex code: {', '.join(unique)}")
    return warnings


__all__ = [
    "HEX_FORMATTING_RULE",
    "SYSTEM_INSTRUCTION",
    "analysis_response_schema",
    "build_analysis_prompt",
    "build_search_prompt",
    "hex_format_warnings",
    "missing_hex_mentions",
]

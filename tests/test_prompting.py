from __future__ import annotations

from google.genai import types

from visionary_scribe.prompting import (
    HEX_FORMATTING_RULE,
    SYSTEM_INSTRUCTION,
    analysis_response_schema,
    build_analysis_prompt,
    build_search_prompt,
    hex_format_warnings,
    missing_hex_mentions,
)
from visionary_scribe.styles import CreativeStyle
from visionary_scribe.urls import BLOCKED_DOMAINS


def test_analysis_prompt_includes_count_style_and_hex_rule() -> None:
    prompt = build_analysis_prompt(CreativeStyle.POETIC, 5)

    assert "exactly 5 distinct creative text outputs" in prompt
    assert '"Poetic & Abstract"' in prompt
    assert "evocative verses" in prompt
    assert HEX_FORMATTING_RULE in prompt
    assert "[USER CUSTOM INSTRUCTION]" not in prompt


def test_hex_rule_is_present_for_every_style() -> None:
    for style in CreativeStyle:
        assert HEX_FORMATTING_RULE in build_analysis_prompt(style, 3, "be brief")


def test_custom_instruction_block_is_conditional() -> None:
    prompt = build_analysis_prompt(CreativeStyle.CAPTION, 3, "  Mention the dog  ")

    assert "[USER CUSTOM INSTRUCTION]" in prompt
    assert '"Mention the dog"' in prompt
    assert prompt.index("[USER CUSTOM INSTRUCTION]") < prompt.index("[CRITICAL FORMATTING RULE - HEX CODES]")
    assert "[USER CUSTOM INSTRUCTION]" not in build_analysis_prompt(CreativeStyle.CAPTION, 3, "   ")


def test_system_instruction_describes_visual_analyst() -> None:
    assert "visual analyst" in SYSTEM_INSTRUCTION


def test_response_schema_declares_required_fields() -> None:
    schema = analysis_response_schema()

    assert schema.type == types.Type.OBJECT
    assert set(schema.required) == {"tags", "colors", "visualDetails", "creativeOutputs"}
    outputs = schema.properties["creativeOutputs"]
    assert outputs.type == types.Type.ARRAY
    assert set(outputs.items.required) == {"title", "content"}


def test_search_prompt_lists_blocklist_and_json_shape() -> None:
    prompt = build_search_prompt("  alpine lakes ")

    assert '"alpine lakes"' in prompt
    assert ", ".join(BLOCKED_DOMAINS) in prompt
    assert "Wikimedia Commons" in prompt
    assert '"images"' in prompt


def test_missing_hex_mentions_accepts_coded_colors() -> None:
    text = "The bright azure (#007FFF) sky contrasts with the golden (#FFD700) wheat fields."
    assert missing_hex_mentions(text) == []


def test_missing_hex_mentions_treats_compound_colors_as_one_phrase() -> None:
    assert missing_hex_mentions("A blue-green (#0D98BA) lagoon.") == []
    assert missing_hex_mentions("A deep blue green lagoon.") == ["blue green"]


def test_hex_format_warnings_labels_sections() -> None:
    warnings = hex_format_warnings(
        [
            ("visualDetails", "Red barn (#8B0000) beside a white fence."),
            ("creativeOutputs[1]", "All good (#FFFFFF)."),
        ]
    )

    assert warnings == ["visualDetails: color mention without hex code: white"]

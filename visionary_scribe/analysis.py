"""Structured image analysis through Gemini."""
from __future__ import annotations

import base64
import binascii
import json
import logging
import re
from dataclasses import dataclass
from typing import Any, List, Mapping

from google.genai import types

from .errors import AnalysisFailedError, EmptyResponseError
from .gemini.adapter import GeminiClient, GeminiResponseError
from .models import AnalysisResult, CreativeOutput, EncodedImage
from .prompting import (
    SYSTEM_INSTRUCTION,
    analysis_response_schema,
    build_analysis_prompt,
    hex_format_warnings,
)
from .styles import CreativeStyle, coerce_variation_count

LOGGER = logging.getLogger("scribe.analysis")

FAILED_MESSAGE = "Failed to analyze image. Please try again."
EMPTY_MESSAGE = "No response from Gemini."

_BARE_HEX_RE = re.compile(r"^#?([0-9A-Fa-f]{6})$")


def _string_list(payload: Mapping[str, Any], key: str) -> List[str]:
    value = payload.get(key)
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ValueError(f"'{key}' must be a list of strings")
    return [item.strip() for item in value]


def _normalise_color(value: str) -> str:
    match = _BARE_HEX_RE.match(value.strip())
    if not match:
        raise ValueError(f"color {value!r} is not a 6-digit hex code")
    return f"#{match.group(1)}"


def _creative_outputs(payload: Mapping[str, Any]) -> List[CreativeOutput]:
    raw = payload.get("creativeOutputs")
    if not isinstance(raw, list):
        raise ValueError("'creativeOutputs' must be a list")
    outputs: List[CreativeOutput] = []
    for idx, entry in enumerate(raw, start=1):
        if not isinstance(entry, Mapping):
            raise ValueError(f"creative output {idx} is not an object")
        title = entry.get("title")
        content = entry.get("content")
        if not isinstance(title, str) or not isinstance(content, str):
            raise ValueError(f"creative output {idx} needs string 'title' and 'content'")
        outputs.append(CreativeOutput(title=title.strip(), content=content.strip()))
    return outputs


def parse_analysis_payload(
    text: str,
    count: int,
    *,
    count_policy: str = "reject",
    check_hex_mentions: bool = True,
) -> AnalysisResult:
    """Validate the model's JSON reply against the declared response shape."""

    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise AnalysisFailedError(FAILED_MESSAGE) from exc
    if not isinstance(payload, dict):
        raise AnalysisFailedError(FAILED_MESSAGE)

    try:
        tags = _string_list(payload, "tags")
        colors = [_normalise_color(color) for color in _string_list(payload, "colors")]
        details = payload.get("visualDetails", payload.get("visual_details"))
        if not isinstance(details, str):
            raise ValueError("'visualDetails' must be a string")
        outputs = _creative_outputs(payload)
    except ValueError as exc:
        LOGGER.error("analysis reply rejected: %s", exc)
        raise AnalysisFailedError(FAILED_MESSAGE) from exc

    if len(outputs) != count:
        if count_policy == "truncate" and len(outputs) > count:
            LOGGER.warning("model returned %d creative outputs, keeping the first %d", len(outputs), count)
            outputs = outputs[:count]
        else:
            LOGGER.error("model returned %d creative outputs, expected %d", len(outputs), count)
            raise AnalysisFailedError(FAILED_MESSAGE)

    warnings: List[str] = []
    if check_hex_mentions:
        sections = [("visualDetails", details)]
        sections.extend((f"creativeOutputs[{idx}]", output.content) for idx, output in enumerate(outputs, start=1))
        warnings = hex_format_warnings(sections)
        for warning in warnings:
            LOGGER.warning("hex formatting rule not followed: %s", warning)

    return AnalysisResult(
        tags=tuple(tags),
        colors=tuple(colors),
        visual_details=details.strip(),
        creative_outputs=tuple(outputs),
        format_warnings=tuple(warnings),
    )


@dataclass
class GenerationClient:
    gemini: GeminiClient
    model: str = "gemini-2.5-flash"
    temperature: float = 0.7
    count_policy: str = "reject"
    check_hex_mentions: bool = True

    def build_config(self) -> types.GenerateContentConfig:
        return types.GenerateContentConfig(
            system_instruction=SYSTEM_INSTRUCTION,
            response_mime_type="application/json",
            response_schema=analysis_response_schema(),
            temperature=self.temperature,
        )

    def build_contents(
        self,
        encoded_image: EncodedImage,
        style: CreativeStyle,
        count: int,
        custom_instruction: str,
    ) -> list[types.Part]:
        try:
            image_bytes = base64.b64decode(encoded_image.data, validate=True)
        except (ValueError, binascii.Error) as exc:
            raise AnalysisFailedError(FAILED_MESSAGE) from exc
        return [
            types.Part.from_bytes(data=image_bytes, mime_type=encoded_image.mime_type or "image/jpeg"),
            types.Part.from_text(text=build_analysis_prompt(style, count, custom_instruction)),
        ]

    def analyze(
        self,
        encoded_image: EncodedImage,
        style: CreativeStyle,
        count: int,
        custom_instruction: str = "",
    ) -> AnalysisResult:
        style = CreativeStyle.coerce(style)
        count = coerce_variation_count(count)
        contents = self.build_contents(encoded_image, style, count, custom_instruction)
        LOGGER.info("requesting analysis: style=%s count=%d model=%s", style.value, count, self.model)
        try:
            text = self.gemini.generate(self.model, contents, self.build_config())
        except GeminiResponseError as exc:
            raise AnalysisFailedError(FAILED_MESSAGE) from exc

        if not text or not text.strip():
            raise EmptyResponseError(EMPTY_MESSAGE)

        return parse_analysis_payload(
            text,
            count,
            count_policy=self.count_policy,
            check_hex_mentions=self.check_hex_mentions,
        )


__all__ = ["GenerationClient", "parse_analysis_payload"]

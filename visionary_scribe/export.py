"""Plain-text export of an analysis, and the reader that loads it back.

Free-text lines that could be mistaken for structure (a section heading, an
``[N]`` output marker, or anything already starting with a backslash) are
written with a leading ``\\``. List items escape ``\\``, ``,`` and newlines so
``", "`` stays an unambiguous separator.
"""
from __future__ import annotations

import re
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from .models import AnalysisResult, CreativeOutput

EXPORT_FILENAME = "visionary-scribe-results.txt"

BANNER = "VISIONARY SCRIBE ANALYSIS"
SECTIONS = ("VISUAL DETAILS", "TAGS", "COLORS", "CREATIVE OUTPUTS")
LIST_SEPARATOR = ", "

_OUTPUT_MARKER_RE = re.compile(r"^\[(\d+)\] ?(.*)$")


def _heading(title: str, underline: str = "-") -> List[str]:
    return [title, underline * len(title)]


def _escape_inline(text: str, specials: str = "") -> str:
    out: List[str] = []
    for ch in text:
        if ch == "\\" or ch in specials:
            out.append("\\" + ch)
        elif ch == "\n":
            out.append("\\n")
        else:
            out.append(ch)
    return "".join(out)


def _unescape_inline(text: str) -> str:
    out: List[str] = []
    chars = iter(text)
    for ch in chars:
        if ch != "\\":
            out.append(ch)
            continue
        nxt = next(chars, "")
        out.append("\n" if nxt == "n" else nxt)
    return "".join(out)


def _escape_block(text: str) -> List[str]:
    lines = []
    for line in text.split("\n"):
        if line.startswith(("\\", "[")) or line in SECTIONS:
            line = "\\" + line
        lines.append(line)
    return lines


def _unescape_block(lines: Iterable[str]) -> str:
    return "\n".join(line[1:] if line.startswith("\\") else line for line in lines)


def _render_list(items: Iterable[str]) -> str:
    return LIST_SEPARATOR.join(_escape_inline(item, ",") for item in items)


def render_export(
    result: AnalysisResult,
    *,
    image_url: str = "",
    image_source: Optional[str] = None,
) -> str:
    lines: List[str] = []
    lines.extend(_heading(BANNER, "="))
    lines.append(f"Source: {image_source or 'Uploaded Image'}")
    lines.append(f"URL: {image_url}")
    lines.append("")
    lines.extend(_heading("VISUAL DETAILS"))
    lines.extend(_escape_block(result.visual_details))
    lines.append("")
    lines.extend(_heading("TAGS"))
    lines.append(_render_list(result.tags))
    lines.append("")
    lines.extend(_heading("COLORS"))
    lines.append(_render_list(result.colors))
    lines.append("")
    lines.extend(_heading("CREATIVE OUTPUTS"))
    for idx, output in enumerate(result.creative_outputs, start=1):
        lines.append("")
        lines.append(f"[{idx}] {_escape_inline(output.title)}")
        lines.extend(_escape_block(output.content))
    return "\n".join(lines) + "\n"


def write_export(
    path: Path,
    result: AnalysisResult,
    *,
    image_url: str = "",
    image_source: Optional[str] = None,
) -> Path:
    if path.is_dir():
        path = path / EXPORT_FILENAME
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_export(result, image_url=image_url, image_source=image_source), encoding="utf-8")
    return path


def _trim_blank(lines: List[str]) -> List[str]:
    start, end = 0, len(lines)
    while start < end and not lines[start].strip():
        start += 1
    while end > start and not lines[end - 1].strip():
        end -= 1
    return lines[start:end]


def _split_sections(lines: List[str]) -> Dict[str, List[str]]:
    positions: Dict[str, int] = {}
    wanted = list(SECTIONS)
    for idx in range(len(lines) - 1):
        if not wanted:
            break
        title = wanted[0]
        if lines[idx] == title and lines[idx + 1] == "-" * len(title):
            positions[title] = idx
            wanted.pop(0)
    if wanted:
        raise ValueError(f"export is missing section {wanted[0]!r}")

    sections: Dict[str, List[str]] = {}
    for order, title in enumerate(SECTIONS):
        begin = positions[title] + 2
        finish = positions[SECTIONS[order + 1]] if order + 1 < len(SECTIONS) else len(lines)
        sections[title] = lines[begin:finish]
    return sections


def _split_list(lines: List[str]) -> tuple[str, ...]:
    text = "\n".join(_trim_blank(lines))
    if not text:
        return ()
    items: List[str] = []
    current: List[str] = []
    idx = 0
    while idx < len(text):
        if text[idx] == "\\":
            current.append(text[idx : idx + 2])
            idx += 2
        elif text.startswith(LIST_SEPARATOR, idx):
            items.append(_unescape_inline("".join(current)))
            current = []
            idx += len(LIST_SEPARATOR)
        else:
            current.append(text[idx])
            idx += 1
    items.append(_unescape_inline("".join(current)))
    return tuple(items)


def _parse_outputs(lines: List[str]) -> tuple[CreativeOutput, ...]:
    outputs: List[CreativeOutput] = []
    title: Optional[str] = None
    body: List[str] = []
    previous = ""
    for line in lines:
        match = _OUTPUT_MARKER_RE.match(line)
        # Markers always follow the blank separator line; body lines that look like one are escaped.
        if match and not previous.strip():
            if title is not None:
                outputs.append(CreativeOutput(title=title, content=_unescape_block(_trim_blank(body))))
            title = _unescape_inline(match.group(2))
            body = []
        elif title is not None:
            body.append(line)
        previous = line
    if title is not None:
        outputs.append(CreativeOutput(title=title, content=_unescape_block(_trim_blank(body))))
    return tuple(outputs)


def parse_export(text: str) -> AnalysisResult:
    """Rebuild the analysis fields from a rendered export."""

    sections = _split_sections(text.split("\n"))
    return AnalysisResult(
        tags=_split_list(sections["TAGS"]),
        colors=_split_list(sections["COLORS"]),
        visual_details=_unescape_block(_trim_blank(sections["VISUAL DETAILS"])),
        creative_outputs=_parse_outputs(sections["CREATIVE OUTPUTS"]),
    )


__all__ = ["EXPORT_FILENAME", "parse_export", "render_export", "write_export"]

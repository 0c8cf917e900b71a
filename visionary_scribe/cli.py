"""Terminal front end for Visionary Scribe.

Commands:
- analyze URL: fetch an image by URL, then generate tags, palette and creative text
- sample N: same flow for one of the built-in sample gallery images
- search QUERY: AI-assisted image search; --pick N analyzes one of the hits
- samples: list the sample gallery
"""
from __future__ import annotations

import argparse
import json
from dataclasses import asdict
from pathlib import Path
from typing import Optional, Sequence

from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .config import ScribeConfig, load_config
from .factory import create_session_machine
from .logging_utils import RunLogger, configure_logging, create_logger
from .models import AnalysisResult, Phase, SearchResult
from .session import SessionMachine
from .styles import SAMPLE_IMAGES, VARIATION_COUNTS, CreativeStyle


def _add_generation_options(parser: argparse.ArgumentParser) -> None:
    style_choices = [style.value for style in CreativeStyle] + [style.name.lower() for style in CreativeStyle]
    parser.add_argument("--style", default=None, choices=style_choices)
    parser.add_argument("--count", type=int, default=None, choices=list(VARIATION_COUNTS))
    parser.add_argument("--instruction", default=None, help="Extra guidance passed to the model")
    parser.add_argument("--export", type=Path, default=None, help="Write the text report to this file or directory")
    parser.add_argument("--json", action="store_true", help="Print the result as JSON instead of tables")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="visionary-scribe", description="Turn images into tags, palettes and creative text.")
    ap.add_argument("--config", type=Path, default=None, help="YAML or JSON(C) configuration file")
    ap.add_argument("--log-level", default=None)
    ap.add_argument("--logfile", type=Path, default=None)
    sub = ap.add_subparsers(dest="command", required=True)

    analyze = sub.add_parser("analyze", help="Analyze an image URL")
    analyze.add_argument("url")
    analyze.add_argument("--source", default="Direct Link", help="Provenance label shown in the report")
    _add_generation_options(analyze)

    sample = sub.add_parser("sample", help="Analyze a sample gallery image")
    sample.add_argument("index", type=int, help=f"1..{len(SAMPLE_IMAGES)}")
    _add_generation_options(sample)

    search = sub.add_parser("search", help="Search the web for open images")
    search.add_argument("query")
    search.add_argument("--pick", type=int, default=None, help="Analyze the Nth search result")
    _add_generation_options(search)

    sub.add_parser("samples", help="List the sample gallery")
    return ap


def render_result(console: Console, machine: SessionMachine, result: AnalysisResult) -> None:
    session = machine.session
    console.print(Panel(Text(result.visual_details), title="Visual details", subtitle=Text(session.image_source or "")))

    meta = Table(show_header=False, box=None)
    meta.add_row("Tags", Text(", ".join(result.tags)))
    meta.add_row("Colors", Text.from_markup(" ".join(f"[on {color}]  [/] {color}" for color in result.colors)))
    meta.add_row("Style", f"{session.style.value} x {session.variation_count}")
    console.print(meta)

    for idx, output in enumerate(result.creative_outputs, start=1):
        console.print(Panel(Text(output.content), title=Text(f"[{idx}] {output.title}")))

    for warning in result.format_warnings:
        console.print(f"warning: {warning}", style="yellow", markup=False)


def render_search(console: Console, results: Sequence[SearchResult]) -> None:
    table = Table(title="Search results")
    table.add_column("#", justify="right")
    table.add_column("Title")
    table.add_column("Source")
    table.add_column("URL", overflow="fold")
    for idx, item in enumerate(results, start=1):
        table.add_row(str(idx), Text(item.title), Text(item.source), Text(item.url))
    console.print(table)


def _generate(
    args: argparse.Namespace,
    machine: SessionMachine,
    run_log: RunLogger,
    console: Console,
) -> int:
    session = machine.session
    if session.phase is not Phase.PROCESSING:
        console.print(session.last_error or "Failed to load image.", style="red", markup=False)
        return 1

    machine.update_config(style=args.style, count=args.count, instruction=args.instruction)
    if session.last_error:
        console.print(session.last_error, style="red", markup=False)
        return 1

    ok = run_log.timed(
        "analyze",
        lambda accepted: "analysis ready" if accepted else f"analysis failed: {session.last_error}",
        machine.generate,
    )
    if not ok or machine.result is None:
        console.print(session.last_error or "Analysis failed.", style="red", markup=False)
        return 1

    if args.json:
        console.print_json(json.dumps(asdict(machine.result)))
    else:
        render_result(console, machine, machine.result)

    if args.export is not None:
        written = machine.export_to(args.export)
        run_log.log("export", f"wrote {written}")
    return 0


def _submit(machine: SessionMachine, run_log: RunLogger, url: str, source: str) -> bool:
    return bool(
        run_log.timed(
            "fetch",
            lambda accepted: f"loaded {url}" if accepted else f"rejected {url}: {machine.session.last_error}",
            machine.submit_image,
            url,
            source,
        )
    )


def run(args: argparse.Namespace, config: ScribeConfig, console: Console) -> int:
    if args.command == "samples":
        for idx, url in enumerate(SAMPLE_IMAGES, start=1):
            console.print(f"{idx}. {url}", markup=False, soft_wrap=True)
        return 0

    run_log = create_logger(args.log_level or config.logging.level, args.logfile or config.logging.logfile)
    machine = create_session_machine(config)
    try:
        if args.command == "analyze":
            _submit(machine, run_log, args.url, args.source)
            return _generate(args, machine, run_log, console)

        if args.command == "sample":
            if not 1 <= args.index <= len(SAMPLE_IMAGES):
                console.print(f"Sample image must be between 1 and {len(SAMPLE_IMAGES)}.", style="red", markup=False)
                return 2
            run_log.timed("fetch", f"sample {args.index}", machine.submit_sample, args.index - 1)
            return _generate(args, machine, run_log, console)

        results = run_log.timed(
            "search",
            lambda found: f"{len(found)} usable images",
            machine.search_images,
            args.query,
        )
        if results:
            render_search(console, results)
        if machine.session.last_error:
            console.print(machine.session.last_error, style="yellow", markup=False)
        if not results:
            return 1
        if args.pick is None:
            return 0
        if not 1 <= args.pick <= len(results):
            console.print(f"--pick must be between 1 and {len(results)}", style="red", markup=False)
            return 2
        chosen = results[args.pick - 1]
        _submit(machine, run_log, chosen.url, chosen.source)
        return _generate(args, machine, run_log, console)
    finally:
        run_log.close()


def main(argv: Optional[Sequence[str]] = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)
    config = load_config(args.config)
    configure_logging(args.log_level or config.logging.level)
    return run(args, config, Console())


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())

from __future__ import annotations

import io
import json

import pytest
from rich.console import Console

from conftest import FakeAnalyzer, FakeFetcher, FakeSearcher
from visionary_scribe import cli
from visionary_scribe.config import ScribeConfig
from visionary_scribe.errors import NetworkError
from visionary_scribe.export import EXPORT_FILENAME
from visionary_scribe.models import SearchResult
from visionary_scribe.session import SessionMachine
from visionary_scribe.styles import SAMPLE_IMAGES

URL = "https://upload.wikimedia.org/wikipedia/commons/a/a9/Example.jpg"


def _console() -> Console:
    return Console(file=io.StringIO(), width=120, color_system=None)


def _install(monkeypatch, machine: SessionMachine) -> None:
    monkeypatch.setattr(cli, "create_session_machine", lambda config: machine)


def test_samples_command_lists_gallery(capsys) -> None:
    assert cli.main(["samples"]) == 0

    out = capsys.readouterr().out
    for idx, url in enumerate(SAMPLE_IMAGES, start=1):
        assert f"{idx}. {url}" in out


def test_analyze_renders_and_exports(monkeypatch, tmp_path) -> None:
    analyzer = FakeAnalyzer()
    machine = SessionMachine(FakeFetcher(), analyzer)
    _install(monkeypatch, machine)
    console = _console()
    args = cli.build_parser().parse_args(
        ["analyze", URL, "--style", "poetic", "--count", "5", "--export", str(tmp_path)]
    )

    assert cli.run(args, ScribeConfig(), console) == 0

    out = console.file.getvalue()
    assert "Variation 5" in out
    assert "landscape" in out
    assert analyzer.calls[0][2] == 5
    assert (tmp_path / EXPORT_FILENAME).exists()


def test_analyze_json_output(monkeypatch) -> None:
    machine = SessionMachine(FakeFetcher(), FakeAnalyzer())
    _install(monkeypatch, machine)
    console = _console()
    args = cli.build_parser().parse_args(["analyze", URL, "--json"])

    assert cli.run(args, ScribeConfig(), console) == 0

    payload = json.loads(console.file.getvalue())
    assert payload["colors"][0] == "#1E3A5F"
    assert len(payload["creative_outputs"]) == 3


def test_analyze_reports_fetch_failure(monkeypatch) -> None:
    machine = SessionMachine(FakeFetcher(error=NetworkError("host refused")), FakeAnalyzer())
    _install(monkeypatch, machine)
    console = _console()
    args = cli.build_parser().parse_args(["analyze", URL])

    assert cli.run(args, ScribeConfig(), console) == 1
    assert "host refused" in console.file.getvalue()


def test_search_then_pick(monkeypatch) -> None:
    hits = [
        SearchResult(url=URL, title="Example", source="wikimedia.org"),
        SearchResult(url="https://example.org/b.jpg", title="Other", source="example.org"),
    ]
    fetcher = FakeFetcher()
    machine = SessionMachine(fetcher, FakeAnalyzer(), FakeSearcher(results=hits))
    _install(monkeypatch, machine)
    console = _console()
    args = cli.build_parser().parse_args(["search", "example", "--pick", "2"])

    assert cli.run(args, ScribeConfig(), console) == 0

    assert fetcher.calls == ["https://example.org/b.jpg"]
    assert machine.session.image_source == "example.org"
    assert "Search results" in console.file.getvalue()


def test_search_pick_out_of_range(monkeypatch) -> None:
    hits = [SearchResult(url=URL, title="Example", source="wikimedia.org")]
    machine = SessionMachine(FakeFetcher(), FakeAnalyzer(), FakeSearcher(results=hits))
    _install(monkeypatch, machine)
    args = cli.build_parser().parse_args(["search", "example", "--pick", "3"])

    assert cli.run(args, ScribeConfig(), _console()) == 2


def test_invalid_count_is_rejected_by_parser() -> None:
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args(["sample", "1", "--count", "4"])


def test_sample_uses_one_based_index(monkeypatch) -> None:
    fetcher = FakeFetcher()
    machine = SessionMachine(fetcher, FakeAnalyzer())
    _install(monkeypatch, machine)
    args = cli.build_parser().parse_args(["sample", "1"])

    assert cli.run(args, ScribeConfig(), _console()) == 0
    assert fetcher.calls == [SAMPLE_IMAGES[0]]


@pytest.mark.parametrize("index", ["0", str(len(SAMPLE_IMAGES) + 1)])
def test_sample_out_of_range_reports_one_based_bounds(monkeypatch, index) -> None:
    fetcher = FakeFetcher()
    machine = SessionMachine(fetcher, FakeAnalyzer())
    _install(monkeypatch, machine)
    console = _console()
    args = cli.build_parser().parse_args(["sample", index])

    assert cli.run(args, ScribeConfig(), console) == 2
    assert f"between 1 and {len(SAMPLE_IMAGES)}" in console.file.getvalue()
    assert fetcher.calls == []

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from .styles import DEFAULT_VARIATION_COUNT, CreativeStyle, coerce_variation_count

DEFAULT_API_KEY_ENV = "GEMINI_API_KEY"
FALLBACK_API_KEY_ENV = "API_KEY"
COUNT_POLICIES = ("reject", "truncate")


@dataclass
class GeminiConfig:
    model: str = "gemini-2.5-flash"
    search_model: str = "gemini-2.5-flash"
    temperature: float = 0.7
    timeout_s: float = 60.0
    api_key_env: str = DEFAULT_API_KEY_ENV


@dataclass
class FetchConfig:
    timeout_s: float = 20.0
    max_bytes: int = 10 * 1024 * 1024
    user_agent: str = "visionary-scribe/0.1"


@dataclass
class AnalysisConfig:
    count_policy: str = "reject"
    check_hex_mentions: bool = True

    def __post_init__(self) -> None:
        policy = str(self.count_policy).strip().lower()
        if policy not in COUNT_POLICIES:
            raise ValueError(f"count_policy must be one of {COUNT_POLICIES}, got {self.count_policy!r}")
        self.count_policy = policy


@dataclass
class SearchConfig:
    max_results: int = 8


@dataclass
class SessionDefaults:
    style: CreativeStyle = CreativeStyle.SIMPLE
    variation_count: int = DEFAULT_VARIATION_COUNT
    custom_instruction: str = ""


@dataclass
class LoggingConfig:
    level: str = "INFO"
    logfile: Optional[Path] = None


@dataclass
class ScribeConfig:
    gemini: GeminiConfig = field(default_factory=GeminiConfig)
    fetch: FetchConfig = field(default_factory=FetchConfig)
    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    search: SearchConfig = field(default_factory=SearchConfig)
    defaults: SessionDefaults = field(default_factory=SessionDefaults)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "ScribeConfig":
        gemini_data = _nested_mapping(raw, "gemini")
        fetch_data = _nested_mapping(raw, "fetch")
        analysis_data = _nested_mapping(raw, "analysis")
        search_data = _nested_mapping(raw, "search")
        defaults_data = _nested_mapping(raw, "defaults")
        logging_data = _nested_mapping(raw, "logging")

        model = str(gemini_data.get("model", GeminiConfig.model))
        gemini = GeminiConfig(
            model=model,
            search_model=str(gemini_data.get("search_model", model)),
            temperature=float(gemini_data.get("temperature", GeminiConfig.temperature)),
            timeout_s=float(gemini_data.get("timeout_s", GeminiConfig.timeout_s)),
            api_key_env=str(gemini_data.get("api_key_env", DEFAULT_API_KEY_ENV)),
        )

        fetch = FetchConfig(
            timeout_s=float(fetch_data.get("timeout_s", FetchConfig.timeout_s)),
            max_bytes=int(fetch_data.get("max_bytes", FetchConfig.max_bytes)),
            user_agent=str(fetch_data.get("user_agent", FetchConfig.user_agent)),
        )

        analysis = AnalysisConfig(
            count_policy=str(analysis_data.get("count_policy", "reject")),
            check_hex_mentions=bool(analysis_data.get("check_hex_mentions", True)),
        )

        search = SearchConfig(max_results=int(search_data.get("max_results", SearchConfig.max_results)))

        defaults = SessionDefaults(
            style=CreativeStyle.coerce(defaults_data.get("style", CreativeStyle.SIMPLE)),
            variation_count=coerce_variation_count(
                defaults_data.get("variation_count", DEFAULT_VARIATION_COUNT)
            ),
            custom_instruction=str(defaults_data.get("custom_instruction", "") or ""),
        )

        logging_cfg = LoggingConfig(
            level=str(logging_data.get("level", "INFO")).upper(),
            logfile=_optional_path(logging_data.get("logfile")),
        )

        return cls(
            gemini=gemini,
            fetch=fetch,
            analysis=analysis,
            search=search,
            defaults=defaults,
            logging=logging_cfg,
        )

    def resolve_api_key(self, environ: Optional[Mapping[str, str]] = None) -> Optional[str]:
        """Look up the Gemini credential; ``None`` when neither variable is set."""

        env = os.environ if environ is None else environ
        for name in (self.gemini.api_key_env, FALLBACK_API_KEY_ENV):
            value = (env.get(name) or "").strip()
            if value:
                return value
        return None


def load_config(path: Optional[Path] = None) -> ScribeConfig:
    if path is None:
        return ScribeConfig()
    text = path.read_text(encoding="utf-8")
    suffix = path.suffix.lower()
    if suffix in {".json", ".jsonc"}:
        data = json.loads(_strip_jsonc(text))
    else:
        data = yaml.safe_load(text)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError("Configuration file must contain a mapping at the top level")
    return ScribeConfig.from_dict(data)


def _strip_jsonc(payload: str) -> str:
    result: list[str] = []
    length = len(payload)
    i = 0
    in_string = False
    escape = False
    while i < length:
        ch = payload[i]
        if in_string:
            result.append(ch)
            if escape:
                escape = False
            elif ch == "\\":
                escape = True
            elif ch == '"':
                in_string = False
            i += 1
            continue

        if ch == '"':
            in_string = True
            result.append(ch)
            i += 1
            continue

        if ch == "/" and i + 1 < length:
            nxt = payload[i + 1]
            if nxt == "/":
                i += 2
                while i < length and payload[i] not in "\r\n":
                    i += 1
                continue
            if nxt == "*":
                i += 2
                while i < length - 1:
                    if payload[i] == "*" and payload[i + 1] == "/":
                        i += 2
                        break
                    i += 1
                continue

        result.append(ch)
        i += 1
    return "".join(result)


def _optional_path(value: Any) -> Path | None:
    if value in (None, "", False):
        return None
    return Path(str(value))


def _nested_mapping(source: Any, key: str) -> Dict[str, Any]:
    if not isinstance(source, Mapping):
        return {}
    value = source.get(key, {})
    return dict(value) if isinstance(value, Mapping) else {}


__all__ = [
    "AnalysisConfig",
    "FetchConfig",
    "GeminiConfig",
    "LoggingConfig",
    "ScribeConfig",
    "SearchConfig",
    "SessionDefaults",
    "load_config",
]

from __future__ import annotations

"""Image analysis and creative-writing helpers built on Gemini."""

from importlib import import_module
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:  # pragma: no cover - type checking helper
    from .config import ScribeConfig, load_config
    from .factory import create_session_machine
    from .session import SessionMachine

__all__ = ["ScribeConfig", "load_config", "create_session_machine", "SessionMachine"]


def __getattr__(name: str) -> Any:  # pragma: no cover - dispatch helper
    if name in {"ScribeConfig", "load_config"}:
        module = import_module(".config", __name__)
    elif name == "create_session_machine":
        module = import_module(".factory", __name__)
    elif name == "SessionMachine":
        module = import_module(".session", __name__)
    else:
        raise AttributeError(name)

    value = getattr(module, name)
    globals()[name] = value
    return value

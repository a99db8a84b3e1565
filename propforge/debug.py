"""Debug output for property and template operations.

Every path operation and template step reports a ``DebugEvent`` to a
module logger. When debugging is enabled the event is rendered as a single
line on a Rich console:

    [12:30:01.250] [props] get: user.name → Flavio

Debugging is off by default. It is switched on by ``PROPFORGE_DEBUG=true``
or ``DEBUG=true`` in the environment, or by ``configure_debug(enabled=True)``.
"""

from __future__ import annotations

import json
import os
import time
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Callable, Literal, Optional

from rich.console import Console
from rich.text import Text

from .types import UNDEFINED

LogModule = Literal["props", "template"]
LogOperation = Literal[
    "get", "set", "has", "remove", "transform", "error", "warn", "fallback"
]

# Shared console instance, stderr so rendered output stays clean
console = Console(stderr=True)

OPERATION_STYLES = {
    "get": "green",
    "set": "magenta",
    "transform": "blue",
    "error": "red",
    "has": "cyan",
    "remove": "yellow",
    "warn": "yellow",
    "fallback": "yellow",
}


@dataclass(frozen=True)
class DebugEvent:
    """A single structured log event."""

    operation: str
    path: str
    module: str
    value: Any = UNDEFINED
    error: Optional[str] = None
    timestamp: float = field(default_factory=time.time)


@dataclass
class DebugConfig:
    """Active debug settings."""

    enabled: bool = False
    colors: bool = True
    format: Optional[Callable[[DebugEvent], str]] = None
    console: Optional[Console] = None


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").lower() == "true"


def _default_config() -> DebugConfig:
    return DebugConfig(
        enabled=_env_flag("PROPFORGE_DEBUG") or _env_flag("DEBUG"),
        colors="NO_COLOR" not in os.environ,
    )


_config = _default_config()


def configure_debug(**overrides: Any) -> None:
    """Merge keyword overrides into the active debug configuration.

    Accepted keys are the ``DebugConfig`` fields: ``enabled``, ``colors``,
    ``format`` and ``console``.

    Raises:
        TypeError: If an unknown key is given
    """
    global _config
    _config = replace(_config, **overrides)


def reset_debug() -> None:
    """Restore the environment-derived defaults."""
    global _config
    _config = _default_config()


def get_debug_config() -> DebugConfig:
    """Get the active debug configuration."""
    return _config


def format_value(value: Any) -> str:
    """Format a value for a log line."""
    if value is UNDEFINED:
        return "undefined"
    if value is None:
        return "null"
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list, tuple)):
        try:
            return json.dumps(value, indent=2, default=str, ensure_ascii=False)
        except (TypeError, ValueError):
            return str(value)
    return str(value)


def format_debug_message(event: DebugEvent, colors: bool = False) -> Text:
    """Build the Rich text line for an event."""

    def style(name: str) -> str:
        return name if colors else ""

    stamp = datetime.fromtimestamp(event.timestamp).strftime("%H:%M:%S.%f")[:-3]

    line = Text()
    line.append(f"[{stamp}]", style=style("bright_black"))
    line.append(" ")
    line.append(f"[{event.module}]", style=style("bold"))
    line.append(" ")
    line.append(event.operation, style=style(OPERATION_STYLES.get(event.operation, "bright_black")))
    line.append(f": {event.path}")

    if event.error:
        line.append(f" → {event.error}", style=style("red"))
    elif event.value is not UNDEFINED:
        line.append(f" → {format_value(event.value)}", style=style("bright_black"))

    return line


def debug_log(event: DebugEvent) -> None:
    """Render an event if debugging is enabled."""
    if not _config.enabled:
        return

    out = _config.console or console
    if _config.format is not None:
        out.print(Text(_config.format(event)), highlight=False, soft_wrap=True)
        return

    colors = _config.colors and out.is_terminal
    out.print(format_debug_message(event, colors=colors), highlight=False, soft_wrap=True)


class ModuleLogger:
    """Logger bound to one module name."""

    def __init__(self, module: LogModule) -> None:
        self.module = module

    def log(self, operation: LogOperation, path: str, value: Any = UNDEFINED) -> None:
        debug_log(DebugEvent(operation=operation, path=path, value=value, module=self.module))

    def error(self, path: str, error: Any) -> None:
        debug_log(DebugEvent(operation="error", path=path, error=str(error), module=self.module))

    def warn(self, path: str, message: str) -> None:
        debug_log(DebugEvent(operation="warn", path=path, value=message, module=self.module))


def create_module_logger(module: LogModule) -> ModuleLogger:
    """Create a logger for the props or template module."""
    return ModuleLogger(module)

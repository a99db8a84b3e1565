"""Shared test fixtures and configuration."""

import io

import pytest
from rich.console import Console

from propforge import debug
from propforge.props import props
from propforge.template import engine
from propforge.transforms import identity


@pytest.fixture(autouse=True)
def reset_defaults():
    """Reset the default resolver, default engine and debug config.

    The default instances are process-wide, so each test starts from a
    clean configuration with debug output disabled.
    """
    props.reset()
    engine.registry.configure({}, identity, "")
    debug.configure_debug(enabled=False, colors=False, format=None, console=None)
    yield
    props.reset()
    engine.registry.configure({}, identity, "")
    debug.reset_debug()


@pytest.fixture
def debug_console() -> Console:
    """Enable debug output into an in-memory console."""
    console = Console(file=io.StringIO(), force_terminal=False, width=200)
    debug.configure_debug(enabled=True, colors=False, console=console)
    return console

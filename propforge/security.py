"""Denylist of path segments that must never be resolved."""

from typing import FrozenSet

from .errors import SecurityViolationError

RESERVED_SEGMENTS: FrozenSet[str] = frozenset(
    {
        "__proto__",
        "constructor",
        "prototype",
        "get",
        "set",
        "defineProperty",
    }
)


def check_path_safety(path: str) -> None:
    """Reject a path whose dot-separated segments include a reserved name.

    Only exact segment matches are rejected.

    Raises:
        SecurityViolationError: On the first reserved segment found
    """
    for segment in path.split("."):
        if segment in RESERVED_SEGMENTS:
            raise SecurityViolationError(segment)

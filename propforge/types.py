"""Value kinds, the UNDEFINED sentinel and shared type aliases."""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Optional, Union


class _Undefined:
    """Marker for "no value", distinct from ``None``.

    A mapping key bound to UNDEFINED is present (``has`` is true) but
    resolves to the fallback on ``get``.
    """

    _instance: Optional["_Undefined"] = None

    def __new__(cls) -> "_Undefined":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __copy__(self) -> "_Undefined":
        return self

    def __deepcopy__(self, memo: Dict[int, Any]) -> "_Undefined":
        return self

    def __reduce__(self) -> str:
        return "UNDEFINED"


UNDEFINED = _Undefined()


class ValueKind(Enum):
    """Closed classification used by path traversal."""

    MAPPING = "mapping"
    SEQUENCE = "sequence"
    SCALAR = "scalar"
    NULL = "null"


def kind_of(value: Any) -> ValueKind:
    """Classify a value for traversal.

    Strings and bytes are scalars even though they are sequences.
    """
    if value is None or value is UNDEFINED:
        return ValueKind.NULL
    if isinstance(value, Mapping):
        return ValueKind.MAPPING
    if isinstance(value, (list, tuple)):
        return ValueKind.SEQUENCE
    return ValueKind.SCALAR


def is_missing(value: Any) -> bool:
    """True for ``None`` and UNDEFINED."""
    return value is None or value is UNDEFINED


def segment_index(segment: str) -> Optional[int]:
    """Return the sequence index a segment addresses, or None.

    Only plain ASCII digit strings are indices.
    """
    if segment.isascii() and segment.isdigit():
        return int(segment)
    return None


# (value, *args) -> value | awaitable value
TransformFn = Callable[..., Union[Any, Awaitable[Any]]]

# Single-value hook used by the path resolver
PathTransformer = Callable[[Any], Any]

# Callable template slot: data -> value | awaitable value
SlotFn = Callable[[Any], Union[Any, Awaitable[Any]]]

"""Parsing and evaluation of template expressions.

An expression is a path followed by an optional chain of piped transform
calls::

    price | multiply: rate | format: "currency", 2

Transform arguments are quoted strings, numbers, ``true``/``false``,
``null``, ``undefined``, or a path into the data context. Anything that
does not resolve is kept as a literal string.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, List, Optional, Tuple

from .debug import create_module_logger
from .errors import (
    EmptyPathError,
    PathValidationError,
    SecurityViolationError,
    TransformError,
    TransformNameError,
)
from .security import check_path_safety
from .types import UNDEFINED, is_missing

if TYPE_CHECKING:
    from .props import Props
    from .transforms import TransformRegistry

logger = create_module_logger("template")

_NUMBER_PATTERN = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$")
_INTEGER_PATTERN = re.compile(r"^[+-]?\d+$")

# Default-argument marker; None is a valid fallback
_OMITTED: Any = object()

_KEYWORDS = {
    "true": True,
    "false": False,
    "null": None,
    "undefined": UNDEFINED,
}


@dataclass(frozen=True)
class TransformCall:
    """One ``name: arg, arg`` stage of a pipe chain."""

    name: str
    raw_args: Tuple[str, ...] = ()


@dataclass(frozen=True)
class TemplateExpression:
    """A parsed expression body."""

    path: str
    calls: Tuple[TransformCall, ...] = ()


def parse_transform_call(text: str) -> TransformCall:
    """Split ``name: a, b`` on its first colon into name and raw args."""
    name, colon, args = text.partition(":")
    name = name.strip()
    if not name:
        raise TransformNameError(text)

    raw_args: Tuple[str, ...] = ()
    if colon and args.strip():
        raw_args = tuple(arg.strip() for arg in args.split(","))
    return TransformCall(name=name, raw_args=raw_args)


def parse_expression(body: str) -> TemplateExpression:
    """Parse an expression body (the text between ``{{`` and ``}}``).

    Raises:
        EmptyPathError: If nothing precedes the first pipe
        TransformNameError: If a pipe is followed by no transform name
        SecurityViolationError: If the path or a transform name is reserved
    """
    parts = [part.strip() for part in body.split("|")]
    path = parts[0]
    if not path:
        raise EmptyPathError()

    check_path_safety(path)
    calls = tuple(parse_transform_call(part) for part in parts[1:])
    for call in calls:
        check_path_safety(call.name)

    return TemplateExpression(path=path, calls=calls)


def parse_number(text: str) -> Optional[float]:
    """Parse a decimal numeric literal, returning int or float, or None."""
    if not _NUMBER_PATTERN.match(text):
        return None
    if _INTEGER_PATTERN.match(text):
        return int(text)
    return float(text)


def to_display_string(value: Any) -> str:
    """Convert a rendered value to text.

    ``None`` and UNDEFINED become ``""``, booleans are lowercase, floats
    with no fractional part drop the ``.0``, containers become JSON.
    """
    if is_missing(value):
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return str(value)
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value, default=str, ensure_ascii=False)
    return str(value)


class ExpressionEvaluator:
    """Evaluates parsed expressions against a data context.

    Resolution order for each transform argument:
    1. Quoted string ('...' or "...") -> the string without quotes
    2. Numeric literal -> int or float
    3. true / false / null / undefined -> True / False / None / UNDEFINED
    4. A path that resolves in the data context -> that value
    5. Anything else -> the raw text
    """

    def __init__(self, registry: "TransformRegistry", props: "Props") -> None:
        self.registry = registry
        self.props = props

    def resolve_argument(self, raw: str, data: Any) -> Any:
        """Resolve one raw transform argument."""
        arg = raw.strip()

        if len(arg) >= 2 and arg[0] == arg[-1] and arg[0] in ("'", '"'):
            return arg[1:-1]

        number = parse_number(arg)
        if number is not None:
            return number

        if arg in _KEYWORDS:
            return _KEYWORDS[arg]

        try:
            value = self.props.get(data, arg, UNDEFINED)
        except (PathValidationError, SecurityViolationError):
            return arg
        if value is UNDEFINED:
            return arg
        return value

    def resolve_arguments(self, raw_args: Tuple[str, ...], data: Any) -> List[Any]:
        return [self.resolve_argument(raw, data) for raw in raw_args]

    def resolve_path(self, path: str, data: Any, fallback: Any = _OMITTED) -> Any:
        """Look up the expression path.

        Missing and None values become ``fallback``, or the registry
        fallback when it is omitted.
        """
        value = self.props.get(data, path, UNDEFINED)
        if is_missing(value):
            if fallback is _OMITTED:
                fallback = self.registry.fallback
            logger.log("fallback", path, fallback)
            return fallback
        logger.log("get", path, value)
        return value

    async def run_pipeline(self, expression: TemplateExpression, value: Any, data: Any) -> Any:
        """Apply each transform call in order, one after another.

        Raises:
            TransformError: If a transform raises
        """
        for call in expression.calls:
            args = self.resolve_arguments(call.raw_args, data)
            try:
                value = await self.registry.apply(value, call.name, args)
            except Exception as e:
                logger.error(call.name, e)
                raise TransformError(call.name, expression.path, e) from e
        return value

    async def evaluate(self, body: str, data: Any, fallback: Any = _OMITTED) -> Any:
        """Parse and evaluate one expression body, returning the raw value."""
        expression = parse_expression(body)
        value = self.resolve_path(expression.path, data, fallback)
        return await self.run_pipeline(expression, value, data)

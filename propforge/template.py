"""Template rendering with piped, asynchronous transforms.

Two template styles share one evaluator.

Brace style, a plain string with ``{{ expression }}`` sites::

    configure(transforms={"upper": lambda v: v.upper()})
    await template("Hello, {{user.name | upper}}!")({"user": {"name": "ada"}})
    # "Hello, ADA!"

Fragments and slots, static text interleaved with dynamic slots. A string
slot is an expression body, a callable slot receives the data::

    parts = TemplateParts(("Total: ", " (", ")"), ("total | currency", lambda d: d["code"]))
    await template(parts)(data)

Sites are evaluated strictly in source order. Each finishes its whole
transform chain before the next starts. Any failure aborts the render.
"""

from __future__ import annotations

import inspect
import re
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, Sequence, Tuple, Union

from .debug import create_module_logger
from .errors import FunctionSlotError, InvalidTemplateDataError, PropforgeError
from .expressions import ExpressionEvaluator, to_display_string
from .props import Props
from .props import props as default_props
from .transforms import TransformRegistry
from .types import TransformFn, ValueKind, is_missing, kind_of

logger = create_module_logger("template")

# Default-argument marker; None is a valid fallback
_OMITTED: Any = object()

TEMPLATE_PATTERN = re.compile(r"\{\{([^}]+)\}\}")

RenderFn = Callable[[Any], Awaitable[str]]


@dataclass(frozen=True)
class TemplateParts:
    """Static fragments interleaved with dynamic slots.

    ``fragments[i]`` is emitted before ``slots[i]``; the last fragment
    closes the template, so there is exactly one more fragment than slots.
    """

    fragments: Tuple[str, ...]
    slots: Tuple[Any, ...] = ()

    def __post_init__(self) -> None:
        if len(self.fragments) != len(self.slots) + 1:
            raise ValueError(
                f"TemplateParts needs {len(self.slots) + 1} fragments for "
                f"{len(self.slots)} slots, got {len(self.fragments)}"
            )


def _validate_data(data: Any) -> None:
    if kind_of(data) not in (ValueKind.MAPPING, ValueKind.SEQUENCE):
        raise InvalidTemplateDataError(type(data).__name__)


class TemplateEngine:
    """Renders templates against a transform registry and path resolver.

    The registry is held by reference, so several engines can share one.
    """

    def __init__(
        self,
        registry: Optional[TransformRegistry] = None,
        props: Optional[Props] = None,
    ) -> None:
        self.registry = registry if registry is not None else TransformRegistry()
        self.props = props if props is not None else default_props
        self.evaluator = ExpressionEvaluator(self.registry, self.props)

    def configure(
        self,
        transforms: Dict[str, TransformFn],
        default_transform: Optional[TransformFn] = None,
        fallback: Any = _OMITTED,
    ) -> None:
        """Replace the registry's transforms; see TransformRegistry.configure."""
        if fallback is _OMITTED:
            self.registry.configure(transforms, default_transform)
        else:
            self.registry.configure(transforms, default_transform, fallback)

    def template(
        self,
        source: Union[str, TemplateParts, Sequence[str]],
        *slots: Any,
    ) -> RenderFn:
        """Create a render function for a template.

        Args:
            source: A brace-style string, a TemplateParts, or a sequence of
                static fragments (then ``slots`` supplies the slots)
            *slots: Slots for a fragments sequence

        Returns:
            Async function taking the data context and returning the text
        """
        if isinstance(source, str):
            text = source

            async def render_braces(data: Any) -> str:
                return await self.render_string(text, data)

            return render_braces

        parts = source if isinstance(source, TemplateParts) else TemplateParts(tuple(source), tuple(slots))

        async def render_fragments(data: Any) -> str:
            return await self.render_parts(parts, data)

        return render_fragments

    async def render(
        self,
        source: Union[str, TemplateParts, Sequence[str]],
        data: Any,
        *slots: Any,
    ) -> str:
        """Render a template once."""
        return await self.template(source, *slots)(data)

    async def render_string(self, text: str, data: Any) -> str:
        """Render a brace-style template.

        Each ``{{...}}`` occurrence is evaluated and spliced in at its own
        position; substituted text is never scanned again.
        """
        logger.log("transform", "start", text)
        try:
            _validate_data(data)
            pieces = []
            position = 0
            for match in TEMPLATE_PATTERN.finditer(text):
                value = await self.evaluator.evaluate(match.group(1), data)
                if is_missing(value):
                    value = self.registry.fallback
                pieces.append(text[position : match.start()])
                pieces.append(to_display_string(value))
                position = match.end()
            pieces.append(text[position:])
        except PropforgeError as e:
            logger.error("render", e)
            raise

        result = "".join(pieces)
        logger.log("transform", "complete", result)
        return result

    async def render_parts(self, parts: TemplateParts, data: Any) -> str:
        """Render static fragments interleaved with slot values."""
        logger.log("transform", "start", "parts")
        try:
            _validate_data(data)
            pieces = []
            for index, fragment in enumerate(parts.fragments):
                pieces.append(fragment)
                if index < len(parts.slots):
                    value = await self._render_slot(parts.slots[index], data)
                    pieces.append(to_display_string(value))
        except PropforgeError as e:
            logger.error("render", e)
            raise

        result = "".join(pieces)
        logger.log("transform", "complete", result)
        return result

    async def _render_slot(self, slot: Any, data: Any) -> Any:
        if isinstance(slot, str):
            return await self.evaluator.evaluate(slot, data, fallback="")

        if callable(slot):
            try:
                value = slot(data)
                if inspect.isawaitable(value):
                    value = await value
            except Exception as e:
                logger.error("function", e)
                raise FunctionSlotError(e) from e
            logger.log("transform", "function", value)
            return value

        logger.log("transform", "literal", slot)
        return slot


# Default engine backing the module-level functions
engine = TemplateEngine()


def template(source: Union[str, TemplateParts, Sequence[str]], *slots: Any) -> RenderFn:
    """Create a render function bound to the default engine."""
    return engine.template(source, *slots)


async def render(source: Union[str, TemplateParts, Sequence[str]], data: Any, *slots: Any) -> str:
    """Render a template once with the default engine."""
    return await engine.render(source, data, *slots)


def configure(
    transforms: Dict[str, TransformFn],
    default_transform: Optional[TransformFn] = None,
    fallback: Any = _OMITTED,
) -> None:
    """Configure the default engine's transform registry."""
    engine.configure(transforms, default_transform, fallback)

"""Registry of named value transforms used by template pipes."""

from __future__ import annotations

import inspect
from typing import Any, Dict, List, Optional, Sequence

from .config import TemplateConfig
from .debug import create_module_logger
from .types import TransformFn

logger = create_module_logger("template")

# Default-argument marker; None is a valid fallback
_OMITTED: Any = object()


def identity(value: Any, *args: Any) -> Any:
    """Default transform: return the value unchanged."""
    return value


class TransformRegistry:
    """Named transforms plus the default transform and fallback value.

    A registry is shared by reference between engines. Transforms are
    looked up when each pipeline stage runs, so ``configure`` affects any
    stage that has not started yet, including stages of renders already in
    progress.
    """

    def __init__(
        self,
        transforms: Optional[Dict[str, TransformFn]] = None,
        default_transform: Optional[TransformFn] = None,
        fallback: Any = "",
    ) -> None:
        self._transforms: Dict[str, TransformFn] = dict(transforms or {})
        self._default_transform: TransformFn = default_transform or identity
        self._fallback = fallback

    def configure(
        self,
        transforms: Dict[str, TransformFn],
        default_transform: Optional[TransformFn] = None,
        fallback: Any = _OMITTED,
    ) -> None:
        """Replace the transform mapping.

        Args:
            transforms: New name -> transform mapping; replaces the old one
            default_transform: Used for unknown names, kept if None
            fallback: Value for missing data, kept if omitted
        """
        self._transforms = dict(transforms)
        if default_transform is not None:
            self._default_transform = default_transform
        if fallback is not _OMITTED:
            self._fallback = fallback

    def get_config(self) -> TemplateConfig:
        """Get a snapshot of the transforms, default transform and fallback."""
        return TemplateConfig(
            transforms=dict(self._transforms),
            default_transform=self._default_transform,
            fallback=self._fallback,
        )

    def register(self, name: str, transform: TransformFn) -> None:
        """Add or replace a single transform."""
        self._transforms[name] = transform

    def unregister(self, name: str) -> None:
        """Remove a transform if it is registered."""
        self._transforms.pop(name, None)

    def names(self) -> List[str]:
        """List registered transform names."""
        return list(self._transforms.keys())

    @property
    def fallback(self) -> Any:
        return self._fallback

    @fallback.setter
    def fallback(self, value: Any) -> None:
        self._fallback = value

    @property
    def default_transform(self) -> TransformFn:
        return self._default_transform

    def lookup(self, name: str) -> TransformFn:
        """Get a transform by name, or the default transform if unknown."""
        transform = self._transforms.get(name)
        if transform is None:
            logger.warn(
                "apply_transform",
                f"Unknown transform: {name}, using default transform",
            )
            return self._default_transform
        return transform

    async def apply(self, value: Any, name: str, args: Sequence[Any] = ()) -> Any:
        """Run a transform on a value.

        Sync and async transforms are both accepted. Exceptions raised by
        the transform propagate unchanged.
        """
        transform = self.lookup(name)
        result = transform(value, *args)
        if inspect.isawaitable(result):
            result = await result
        logger.log("transform", name, result)
        return result

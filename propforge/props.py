"""Path-based access to values inside nested mappings and sequences.

Paths are dot-separated segments. A segment made only of digits indexes
into a sequence; any other segment is a mapping key::

    data = {"user": {"tags": ["dev", "ops"]}}
    get_prop(data, "user.tags.1")          # "ops"
    set_prop(data, "user.profile.age", 30) # creates "profile"
    has_prop(data, "user.email")           # False
    remove_prop(data, "user.tags.0")       # tags == ["ops"]

Containers are mutated in place and never copied.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Dict, List, Optional, Tuple

from .config import PathTransformers, PropsConfig
from .debug import create_module_logger
from .errors import InvalidPathError, NullContainerError, PropforgeError
from .security import check_path_safety
from .types import UNDEFINED, PathTransformer, ValueKind, is_missing, kind_of, segment_index

# Default-argument marker for get(); UNDEFINED and None are valid defaults
_OMITTED: Any = object()

_NOT_FOUND: Any = object()

logger = create_module_logger("props")


def validate_input(obj: Any, path: Any) -> None:
    """Validate container and path, then run the security check.

    Raises:
        NullContainerError: If obj is None or UNDEFINED
        InvalidPathError: If path is not a non-blank string
        SecurityViolationError: If path contains a reserved segment
    """
    if is_missing(obj):
        raise NullContainerError()
    if not isinstance(path, str) or not path.strip():
        raise InvalidPathError(path=path)
    check_path_safety(path)


def _child(current: Any, segment: str) -> Any:
    """Look one segment down, returning _NOT_FOUND when absent."""
    kind = kind_of(current)
    if kind is ValueKind.MAPPING:
        return current.get(segment, _NOT_FOUND)
    if kind is ValueKind.SEQUENCE:
        index = segment_index(segment)
        if index is not None and index < len(current):
            return current[index]
    return _NOT_FOUND


def _contains(current: Any, segment: str) -> bool:
    kind = kind_of(current)
    if kind is ValueKind.MAPPING:
        return segment in current
    if kind is ValueKind.SEQUENCE:
        index = segment_index(segment)
        return index is not None and index < len(current)
    return False


class Props:
    """Path resolver with its own fallback and path-suffix transformers."""

    def __init__(self, config: Optional[PropsConfig] = None) -> None:
        self._config = config or PropsConfig()

    # =========================================================================
    # Configuration
    # =========================================================================

    def configure(
        self,
        fallback: Any = _OMITTED,
        transformers: Any = _OMITTED,
    ) -> None:
        """Shallow-merge new values into the active configuration.

        Args:
            fallback: Value returned by get() for missing paths
            transformers: A PathTransformers, or a dict with any of the
                keys get/set/has/remove mapping path suffixes to callables.
                Replaces all previously configured transformers.
        """
        changes: Dict[str, Any] = {}
        if fallback is not _OMITTED:
            changes["fallback"] = fallback
        if transformers is not _OMITTED:
            if transformers is None:
                transformers = PathTransformers()
            elif isinstance(transformers, dict):
                transformers = PathTransformers.from_dict(transformers)
            changes["transformers"] = transformers

        self._config = replace(self._config, **changes)
        logger.log("transform", "configuration updated", self._config)

    def get_config(self) -> PropsConfig:
        """Get the active configuration."""
        return self._config

    def reset(self) -> None:
        """Restore the default configuration."""
        self._config = PropsConfig()

    def _apply_transformers(self, value: Any, path: str, operation: str) -> Any:
        registered: Dict[str, PathTransformer] = getattr(self._config.transformers, operation)
        result = value
        for suffix, transformer in registered.items():
            if path.endswith(suffix) and transformer is not None:
                result = transformer(result)
        return result

    def _validated(self, obj: Any, path: Any) -> List[str]:
        try:
            validate_input(obj, path)
        except PropforgeError as e:
            logger.error(str(path), e)
            raise
        return path.split(".")

    # =========================================================================
    # Operations
    # =========================================================================

    def get(self, obj: Any, path: str, default: Any = _OMITTED) -> Any:
        """Get the value at a dot-notation path.

        Args:
            obj: Root container
            path: Dot-notation path, e.g. "user.address.0.city"
            default: Returned when the path does not resolve to a value.
                When omitted, the configured fallback is returned.

        Returns:
            The value, ``default``, or the configured fallback. A stored
            ``None`` is returned as ``None``.

        Raises:
            PathValidationError: If obj or path is invalid
            SecurityViolationError: If path contains a reserved segment
        """
        segments = self._validated(obj, path)

        current = obj
        for segment in segments:
            if is_missing(current):
                return self._fallback(path, default)
            current = _child(current, segment)
            if current is _NOT_FOUND:
                return self._fallback(path, default)

        if current is UNDEFINED:
            return self._fallback(path, default)

        current = self._apply_transformers(current, path, "get")
        logger.log("get", path, current)
        return current

    def _fallback(self, path: str, default: Any) -> Any:
        value = self._config.fallback if default is _OMITTED else default
        logger.log("fallback", path, value)
        return value

    def set(self, obj: Any, path: str, value: Any) -> Any:
        """Set a value at a dot-notation path.

        Missing intermediate segments are created as dicts. An index equal to
        a sequence's length appends to it.

        Returns:
            The same ``obj``, mutated in place

        Raises:
            PathValidationError: If obj or path is invalid, or the path
                cannot be written (scalar/None intermediate, index past the
                end of a sequence, key on a sequence)
            SecurityViolationError: If path contains a reserved segment
        """
        segments = self._validated(obj, path)
        transformed = self._apply_transformers(value, path, "set")
        logger.log("set", path, transformed)

        try:
            current = obj
            for segment in segments[:-1]:
                child = _child(current, segment)
                if child is _NOT_FOUND or child is UNDEFINED:
                    child = {}
                    self._assign(current, segment, child, path)
                current = child
            self._assign(current, segments[-1], transformed, path)
        except InvalidPathError as e:
            logger.error(path, e)
            raise
        return obj

    @staticmethod
    def _assign(container: Any, segment: str, value: Any, path: str) -> None:
        kind = kind_of(container)
        if kind is ValueKind.MAPPING:
            container[segment] = value
            return

        if kind is ValueKind.SEQUENCE and isinstance(container, list):
            index = segment_index(segment)
            if index is None:
                raise InvalidPathError(f"Cannot set key '{segment}' on a list", path=path)
            if index < len(container):
                container[index] = value
            elif index == len(container):
                container.append(value)
            else:
                raise InvalidPathError(
                    f"Index {index} is out of range for a list of length {len(container)}",
                    path=path,
                )
            return

        raise InvalidPathError(
            f"Cannot set '{segment}' on a {type(container).__name__} value", path=path
        )

    def has(self, obj: Any, path: str) -> bool:
        """Check that every segment of a path exists.

        A key bound to ``None`` or UNDEFINED exists.

        Raises:
            PathValidationError: If obj or path is invalid
            SecurityViolationError: If path contains a reserved segment
        """
        segments = self._validated(obj, path)
        logger.log("has", path)

        found = True
        current = obj
        for segment in segments:
            if not _contains(current, segment):
                found = False
                break
            current = _child(current, segment)

        return self._apply_transformers(found, path, "has")

    def remove(self, obj: Any, path: str) -> Any:
        """Remove the value at a dot-notation path.

        A sequence element is spliced out, shifting later elements down.
        Removing something that does not exist is a no-op.

        Returns:
            The same ``obj``. A None/UNDEFINED ``obj`` is returned unchanged.

        Raises:
            InvalidPathError: If path is invalid
            SecurityViolationError: If path contains a reserved segment
        """
        if is_missing(obj):
            return obj

        segments = self._validated(obj, path)
        target = self._apply_transformers(obj, path, "remove")
        logger.log("remove", path)

        parent, last = self._parent_of(target, segments)
        if parent is _NOT_FOUND:
            return obj

        kind = kind_of(parent)
        if kind is ValueKind.MAPPING:
            parent.pop(last, None)
        elif kind is ValueKind.SEQUENCE and isinstance(parent, list):
            index = segment_index(last)
            if index is not None and index < len(parent):
                del parent[index]

        return obj

    @staticmethod
    def _parent_of(root: Any, segments: List[str]) -> Tuple[Any, str]:
        current = root
        for segment in segments[:-1]:
            current = _child(current, segment)
            if current is _NOT_FOUND or is_missing(current):
                return _NOT_FOUND, segments[-1]
        return current, segments[-1]


# Default instance backing the module-level functions
props = Props()


def get_prop(obj: Any, path: str, default: Any = _OMITTED) -> Any:
    """Get a value using the default resolver."""
    return props.get(obj, path, default)


def set_prop(obj: Any, path: str, value: Any) -> Any:
    """Set a value using the default resolver."""
    return props.set(obj, path, value)


def has_prop(obj: Any, path: str) -> bool:
    """Check a path using the default resolver."""
    return props.has(obj, path)


def remove_prop(obj: Any, path: str) -> Any:
    """Remove a value using the default resolver."""
    return props.remove(obj, path)

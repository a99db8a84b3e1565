"""Configuration dataclasses and YAML settings loading."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Optional, Union

import yaml

from .errors import SettingsError
from .types import UNDEFINED, PathTransformer, TransformFn

if TYPE_CHECKING:
    from .props import Props
    from .template import TemplateEngine


@dataclass
class PathTransformers:
    """Path-suffix transformers for each path operation.

    Keys are path suffixes; a transformer runs for every call whose path
    ends with its key. Several matches run in insertion order.
    """

    get: Dict[str, PathTransformer] = field(default_factory=dict)
    set: Dict[str, PathTransformer] = field(default_factory=dict)
    has: Dict[str, PathTransformer] = field(default_factory=dict)
    remove: Dict[str, PathTransformer] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Dict[str, PathTransformer]]) -> "PathTransformers":
        """Build from a plain ``{"get": {...}, "set": {...}}`` dictionary."""
        unknown = set(data) - {"get", "set", "has", "remove"}
        if unknown:
            raise ValueError(f"Unknown transformer operation(s): {', '.join(sorted(unknown))}")
        return cls(
            get=dict(data.get("get") or {}),
            set=dict(data.get("set") or {}),
            has=dict(data.get("has") or {}),
            remove=dict(data.get("remove") or {}),
        )


@dataclass
class PropsConfig:
    """Path resolver configuration."""

    fallback: Any = ""
    transformers: PathTransformers = field(default_factory=PathTransformers)


@dataclass
class TemplateConfig:
    """Snapshot of a transform registry's state."""

    transforms: Dict[str, TransformFn] = field(default_factory=dict)
    default_transform: Optional[TransformFn] = None
    fallback: Any = ""


@dataclass
class DebugSettings:
    """Debug output settings read from a settings file."""

    enabled: Optional[bool] = None
    colors: Optional[bool] = None


@dataclass
class Settings:
    """Values loadable from a YAML settings file.

    UNDEFINED means the file did not set the value.
    """

    props_fallback: Any = UNDEFINED
    template_fallback: Any = UNDEFINED
    debug: DebugSettings = field(default_factory=DebugSettings)


def _section(data: Dict[str, Any], name: str, file_path: str) -> Dict[str, Any]:
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise SettingsError(file_path, f"'{name}' must be a mapping")
    return section


def _optional_bool(section: Dict[str, Any], key: str, file_path: str) -> Optional[bool]:
    value = section.get(key)
    if value is not None and not isinstance(value, bool):
        raise SettingsError(file_path, f"'debug.{key}' must be a boolean")
    return value


def load_settings(settings_file: Union[str, Path]) -> Settings:
    """Load settings from a YAML file.

    Recognised keys::

        props:
          fallback: "N/A"
        template:
          fallback: "-"
        debug:
          enabled: true
          colors: false

    Args:
        settings_file: Path to the YAML file

    Raises:
        SettingsError: If the file is missing, unparsable or has wrong types
    """
    settings_path = Path(settings_file)
    file_path = str(settings_path)

    if not settings_path.is_file():
        raise SettingsError(file_path, "file not found")

    try:
        with open(settings_path, "r") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise SettingsError(file_path, f"invalid YAML: {e}") from e

    if data is None:
        return Settings()
    if not isinstance(data, dict):
        raise SettingsError(file_path, "settings file must contain a YAML dictionary")

    props_data = _section(data, "props", file_path)
    template_data = _section(data, "template", file_path)
    debug_data = _section(data, "debug", file_path)

    return Settings(
        props_fallback=props_data.get("fallback", UNDEFINED),
        template_fallback=template_data.get("fallback", UNDEFINED),
        debug=DebugSettings(
            enabled=_optional_bool(debug_data, "enabled", file_path),
            colors=_optional_bool(debug_data, "colors", file_path),
        ),
    )


def apply_settings(
    settings: Settings,
    props: Optional["Props"] = None,
    engine: Optional["TemplateEngine"] = None,
) -> None:
    """Push loaded settings into resolver, engine and debug configuration.

    The module-level default instances are used when ``props`` or
    ``engine`` is not given.
    """
    from . import debug
    from .props import props as default_props
    from .template import engine as default_engine

    target_props = props if props is not None else default_props
    target_engine = engine if engine is not None else default_engine

    if settings.props_fallback is not UNDEFINED:
        target_props.configure(fallback=settings.props_fallback)
    if settings.template_fallback is not UNDEFINED:
        target_engine.registry.fallback = settings.template_fallback

    overrides: Dict[str, Any] = {}
    if settings.debug.enabled is not None:
        overrides["enabled"] = settings.debug.enabled
    if settings.debug.colors is not None:
        overrides["colors"] = settings.debug.colors
    if overrides:
        debug.configure_debug(**overrides)

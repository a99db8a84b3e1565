"""Path-based property access and templating with piped transforms."""

from .config import (
    DebugSettings,
    PathTransformers,
    PropsConfig,
    Settings,
    TemplateConfig,
    apply_settings,
    load_settings,
)
from .debug import (
    DebugConfig,
    DebugEvent,
    configure_debug,
    create_module_logger,
    format_debug_message,
    get_debug_config,
    reset_debug,
)
from .errors import (
    EmptyPathError,
    FunctionSlotError,
    InvalidPathError,
    InvalidTemplateDataError,
    InvalidTemplateError,
    NullContainerError,
    PathValidationError,
    PropforgeError,
    SecurityViolationError,
    SettingsError,
    TransformError,
    TransformNameError,
)
from .expressions import (
    ExpressionEvaluator,
    TemplateExpression,
    TransformCall,
    parse_expression,
    to_display_string,
)
from .props import Props, get_prop, has_prop, props, remove_prop, set_prop
from .security import RESERVED_SEGMENTS, check_path_safety
from .template import TemplateEngine, TemplateParts, engine, render, template
from .template import configure as configure_template
from .transforms import TransformRegistry
from .types import UNDEFINED, ValueKind, kind_of

__all__ = [
    # Paths
    "Props",
    "props",
    "get_prop",
    "set_prop",
    "has_prop",
    "remove_prop",
    # Templates
    "TemplateEngine",
    "TemplateParts",
    "engine",
    "template",
    "render",
    "configure_template",
    "TransformRegistry",
    "ExpressionEvaluator",
    "TemplateExpression",
    "TransformCall",
    "parse_expression",
    "to_display_string",
    # Security
    "RESERVED_SEGMENTS",
    "check_path_safety",
    # Values
    "UNDEFINED",
    "ValueKind",
    "kind_of",
    # Config
    "DebugSettings",
    "PathTransformers",
    "PropsConfig",
    "Settings",
    "TemplateConfig",
    "apply_settings",
    "load_settings",
    # Debug
    "DebugConfig",
    "DebugEvent",
    "configure_debug",
    "create_module_logger",
    "format_debug_message",
    "get_debug_config",
    "reset_debug",
    # Errors
    "EmptyPathError",
    "FunctionSlotError",
    "InvalidPathError",
    "InvalidTemplateDataError",
    "InvalidTemplateError",
    "NullContainerError",
    "PathValidationError",
    "PropforgeError",
    "SecurityViolationError",
    "SettingsError",
    "TransformError",
    "TransformNameError",
]

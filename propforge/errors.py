"""Custom exceptions for property access and templating."""

from typing import Optional


class PropforgeError(Exception):
    """Base exception for all propforge errors."""

    pass


class PathValidationError(PropforgeError):
    """Base class for invalid arguments to a path operation."""

    pass


class NullContainerError(PathValidationError):
    """Raised when the container passed to a path operation is None."""

    def __init__(self, message: str = "Object cannot be None or undefined"):
        super().__init__(message)


class InvalidPathError(PathValidationError):
    """Raised when a path is empty, blank, not a string, or cannot be written.

    Attributes:
        path: The offending path, when it is available
    """

    def __init__(
        self,
        message: str = "Path must be a non-empty string",
        path: Optional[object] = None,
    ):
        self.path = path
        super().__init__(message)


class SecurityViolationError(PropforgeError):
    """Raised when a path or transform name contains a reserved segment.

    Attributes:
        segment: The reserved segment that was found
    """

    def __init__(self, segment: str):
        self.segment = segment
        super().__init__(
            f"Security violation detected: Access to {segment} is not allowed"
        )


class InvalidTemplateError(PropforgeError):
    """Base class for malformed template expressions and data."""

    pass


class EmptyPathError(InvalidTemplateError):
    """Raised when a template expression has no path before the first pipe."""

    def __init__(self, message: str = "Empty path in template"):
        super().__init__(message)


class TransformNameError(InvalidTemplateError):
    """Raised when a pipe is followed by an empty transform name."""

    def __init__(self, expression: str):
        self.expression = expression
        super().__init__(f"Transform name is required: {expression!r}")


class InvalidTemplateDataError(InvalidTemplateError):
    """Raised when a template is rendered with a non-container data context."""

    def __init__(self, data_type: str):
        self.data_type = data_type
        super().__init__(f"Template data must be an object, got {data_type}")


class TransformError(PropforgeError):
    """Raised when a registered transform fails.

    The original exception is chained as ``__cause__`` and kept on
    ``original``; its message is part of this error's message.

    Attributes:
        transform: Name of the failing transform
        path: Path of the expression being evaluated
        original: The exception raised by the transform
    """

    def __init__(self, transform: str, path: str, original: BaseException):
        self.transform = transform
        self.path = path
        self.original = original
        super().__init__(
            f"Transform '{transform}' failed for '{path}': {original}"
        )


class FunctionSlotError(PropforgeError):
    """Raised when a callable template slot fails.

    Attributes:
        original: The exception raised by the slot function
    """

    def __init__(self, original: BaseException):
        self.original = original
        super().__init__(f"Error evaluating function: {original}")


class SettingsError(PropforgeError):
    """Raised when a settings file cannot be loaded.

    Attributes:
        file_path: Path to the settings file
    """

    def __init__(self, file_path: str, message: str):
        self.file_path = file_path
        super().__init__(f"Invalid settings at {file_path}: {message}")

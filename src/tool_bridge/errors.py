from __future__ import annotations

__all__ = [
    "ToolBridgeError",
    "ArgumentParseError",
    "ArgumentValidationError",
    "FunctionNotFoundError",
    "MissingParameterError",
    "SchemaValidationError",
    "RouteCollisionError",
    "ToolExecutionError",
]


class ToolBridgeError(Exception):
    """Base class for structural tool-calling failures."""
    pass


class ArgumentParseError(ToolBridgeError, ValueError):
    """Raised when function-call arguments are not a JSON object."""
    pass


class ArgumentValidationError(ToolBridgeError, ValueError):
    """Raised when arguments do not match the function's parameter schema."""

    def __init__(self, function_name: str, message: str) -> None:
        super().__init__(f"Invalid arguments for function {function_name}: {message}")
        self.function_name = function_name


class FunctionNotFoundError(ToolBridgeError, LookupError):
    """Raised when no compiled schema or platform tool owns a function."""

    def __init__(self, function_name: str, message: str | None = None) -> None:
        super().__init__(message or f"Function {function_name} not found in any schema")
        self.function_name = function_name


class MissingParameterError(ToolBridgeError, KeyError):
    """Raised when a path template references a parameter the call lacks."""

    def __init__(self, parameter: str, function_name: str) -> None:
        super().__init__(parameter)
        self.parameter = parameter
        self.function_name = function_name

    def __str__(self) -> str:
        return f"Parameter {self.parameter} not found for function {self.function_name}"


class SchemaValidationError(ToolBridgeError, ValueError):
    """Raised for OpenAPI documents that cannot be compiled."""
    pass


class RouteCollisionError(ToolBridgeError):
    """Raised by a strict route merge when two tools claim the same path."""

    def __init__(self, path: str, previous: str, replacement: str) -> None:
        super().__init__(
            f"Route {path} already maps to {previous}; refusing to remap it to {replacement}"
        )
        self.path = path
        self.previous = previous
        self.replacement = replacement


class ToolExecutionError(ToolBridgeError, RuntimeError):
    """Raised when a platform function fails."""
    pass

"""Compiled tool schema types."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Union

__all__ = [
    "LOCAL_EXECUTOR_URL",
    "ToolSpec",
    "FunctionDef",
    "Route",
    "RouteMap",
    "CompiledSchema",
    "RemoteRoute",
    "LocalRoute",
    "RouteTarget",
    "SchemaDetail",
]

# Server URL that marks a stored schema as implemented in-process
LOCAL_EXECUTOR_URL = "local://executor"

# Path template (colon style) -> operationId
RouteMap = dict[str, str]


@dataclass(slots=True, frozen=True)
class ToolSpec:
    """A user configured tool as stored by the application."""

    id: str
    name: str
    schema: str
    custom_headers: Optional[str] = None
    description: str = ""


@dataclass(slots=True, frozen=True)
class FunctionDef:
    """A function signature the model may call."""

    name: str
    description: str
    parameters: dict[str, Any]

    def as_openai_tool(self) -> dict[str, Any]:
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters,
            },
        }


@dataclass(slots=True, frozen=True)
class Route:
    path: str
    operation_id: str
    method: str = "get"
    request_in_body: bool = False


@dataclass(slots=True)
class CompiledSchema:
    """Result of converting one OpenAPI document."""

    title: str
    description: str
    server: str
    functions: list[FunctionDef] = field(default_factory=list)
    routes: list[Route] = field(default_factory=list)


@dataclass(slots=True, frozen=True)
class RemoteRoute:
    """Calls are proxied over HTTP to ``base_url``."""

    base_url: str


@dataclass(slots=True, frozen=True)
class LocalRoute:
    """Calls are served by the platform tool registry."""

    registry_key: str = "platform"


RouteTarget = Union[RemoteRoute, LocalRoute]


@dataclass(slots=True)
class SchemaDetail:
    """Everything the dispatcher needs to resolve a call back to its tool."""

    title: str
    description: str
    target: RouteTarget
    headers: Optional[str] = None
    route_map: RouteMap = field(default_factory=dict)
    request_in_body_map: dict[str, bool] = field(default_factory=dict)
    functions: list[FunctionDef] = field(default_factory=list)

    @property
    def url(self) -> str:
        if isinstance(self.target, LocalRoute):
            return LOCAL_EXECUTOR_URL
        return self.target.base_url

    @property
    def is_local(self) -> bool:
        return isinstance(self.target, LocalRoute)

    def function_names(self) -> list[str]:
        return list(self.route_map.values())

    def path_for(self, function_name: str) -> Optional[str]:
        """Return the first path template mapped to *function_name*."""
        for path, operation_id in self.route_map.items():
            if operation_id == function_name:
                return path
        return None

    def function(self, function_name: str) -> Optional[FunctionDef]:
        for fn in self.functions:
            if fn.name == function_name:
                return fn
        return None

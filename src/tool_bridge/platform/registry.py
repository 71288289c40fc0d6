"""
Registration table for platform-native tools.

A platform tool is a capability served in-process (image generation, ...)
rather than proxied to a remote OpenAPI target.  Each PlatformTool bundles
one or more PlatformFunctions: the coroutine to call, plus the declared
parameters the schema compiler uses to synthesize a FunctionDef.

Adding a new platform tool only requires:
  1. Create tool_bridge/platform/my_tool.py exposing a PlatformTool
  2. Register it in ``default_registry()``
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Iterator, Optional

from tool_bridge.errors import FunctionNotFoundError
from tool_bridge.types import FunctionDef

__all__ = [
    "PlatformParameter",
    "PlatformFunction",
    "PlatformTool",
    "PlatformToolRegistry",
    "default_registry",
]

PlatformCallable = Callable[[dict[str, Any]], Awaitable[Any]]

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class PlatformParameter:
    name: str
    description: str = ""
    required: bool = False
    schema: dict[str, Any] = field(default_factory=lambda: {"type": "string"})


@dataclass(slots=True, frozen=True)
class PlatformFunction:
    name: str                          # function name the model calls
    description: str
    invoke: PlatformCallable           # awaited with the parsed arguments
    parameters: tuple[PlatformParameter, ...] = ()

    def to_function_def(self) -> FunctionDef:
        """Describe this function in the shape compiled OpenAPI tools use."""
        properties: dict[str, Any] = {}
        required: list[str] = []
        for param in self.parameters:
            prop = dict(param.schema)
            if param.description:
                prop.setdefault("description", param.description)
            properties[param.name] = prop
            if param.required:
                required.append(param.name)

        group: dict[str, Any] = {"type": "object", "properties": properties}
        schema: dict[str, Any] = {"type": "object", "properties": {"parameters": group}}
        if required:
            group["required"] = required
            schema["required"] = ["parameters"]

        return FunctionDef(name=self.name, description=self.description, parameters=schema)


@dataclass(slots=True, frozen=True)
class PlatformTool:
    id: str
    name: str
    tool_name: str
    description: str
    functions: tuple[PlatformFunction, ...]
    version: str = "v1.0.0"


class PlatformToolRegistry:
    """Exact-name lookup table of platform tools and their functions."""

    def __init__(self, tools: Optional[list[PlatformTool]] = None) -> None:
        self._tools: dict[str, PlatformTool] = {}
        self._functions: dict[str, PlatformFunction] = {}
        for tool in tools or []:
            self.register(tool)

    def register(self, tool: PlatformTool) -> None:
        if tool.id in self._tools:
            raise ValueError(f"Platform tool {tool.id} is already registered")
        for fn in tool.functions:
            if fn.name in self._functions:
                raise ValueError(f"Platform function {fn.name} is already registered")

        self._tools[tool.id] = tool
        for fn in tool.functions:
            self._functions[fn.name] = fn
        logger.debug("Registered platform tool %s (%s)", tool.tool_name, tool.id)

    def get_tool(self, tool_id: str) -> Optional[PlatformTool]:
        return self._tools.get(tool_id)

    def get_function(self, name: str) -> Optional[PlatformFunction]:
        return self._functions.get(name)

    def tools(self) -> list[PlatformTool]:
        return list(self._tools.values())

    def __contains__(self, name: object) -> bool:
        return name in self._functions

    def __iter__(self) -> Iterator[PlatformTool]:
        return iter(self._tools.values())

    def __len__(self) -> int:
        return len(self._tools)

    async def invoke(self, name: str, arguments: dict[str, Any]) -> Any:
        fn = self._functions.get(name)
        if fn is None:
            raise FunctionNotFoundError(name, f"Function {name} not found")
        logger.info("Invoking platform function %s", name)
        return await fn.invoke(arguments)


def default_registry(**kwargs: Any) -> PlatformToolRegistry:
    """
    Return a registry populated with the built-in platform tools.

    Keyword arguments are forwarded to the tool builders (``openai_client``).
    """
    from tool_bridge.platform.image_generator import build_image_generator_tool

    return PlatformToolRegistry([build_image_generator_tool(**kwargs)])

"""
Schema compiler: turns the tools selected for a chat turn into function
definitions for the model plus the route metadata the dispatcher needs.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence

from tool_bridge.errors import RouteCollisionError, ToolBridgeError
from tool_bridge.openapi import openapi_to_functions
from tool_bridge.platform.registry import PlatformTool, PlatformToolRegistry
from tool_bridge.types import (
    LOCAL_EXECUTOR_URL,
    CompiledSchema,
    FunctionDef,
    LocalRoute,
    RemoteRoute,
    RouteMap,
    SchemaDetail,
    ToolSpec,
)

__all__ = [
    "ShadowedRoute",
    "RouteMerge",
    "SkippedTool",
    "CompilationResult",
    "merge_route_maps",
    "build_schema_detail",
    "compile_platform_tool",
    "compile_platform_tools",
    "compile_tools",
]

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class ShadowedRoute:
    path: str
    previous: str
    replacement: str


@dataclass(slots=True)
class RouteMerge:
    routes: RouteMap = field(default_factory=dict)
    shadowed: list[ShadowedRoute] = field(default_factory=list)


@dataclass(slots=True, frozen=True)
class SkippedTool:
    name: str
    reason: str


@dataclass(slots=True)
class CompilationResult:
    schema_details: list[SchemaDetail] = field(default_factory=list)
    all_tools: list[FunctionDef] = field(default_factory=list)
    all_route_maps: RouteMap = field(default_factory=dict)
    shadowed: list[ShadowedRoute] = field(default_factory=list)
    skipped: list[SkippedTool] = field(default_factory=list)

    def openai_tools(self) -> list[dict]:
        return [fn.as_openai_tool() for fn in self.all_tools]


def merge_route_maps(route_maps: Iterable[RouteMap], *, strict: bool = False) -> RouteMerge:
    """
    Union route maps in order.

    Later maps win on path collisions; every replaced entry is recorded in
    ``shadowed``.  With ``strict=True`` any collision raises
    RouteCollisionError instead.
    """
    merged = RouteMerge()
    for route_map in route_maps:
        for path, operation_id in route_map.items():
            previous = merged.routes.get(path)
            if previous is not None:
                if strict:
                    raise RouteCollisionError(path, previous, operation_id)
                merged.shadowed.append(ShadowedRoute(path, previous, operation_id))
            merged.routes[path] = operation_id
    return merged


def build_schema_detail(
    compiled: CompiledSchema, custom_headers: Optional[str] = None
) -> SchemaDetail:
    target = LocalRoute() if compiled.server == LOCAL_EXECUTOR_URL else RemoteRoute(compiled.server)
    route_map: RouteMap = {}
    request_in_body_map: dict[str, bool] = {}
    for route in compiled.routes:
        if route.path in route_map:
            logger.warning(
                "%s: %s %s shadows %s on the same path",
                compiled.title,
                route.method.upper(),
                route.path,
                route_map[route.path],
            )
        route_map[route.path] = route.operation_id
        request_in_body_map[route.path] = route.request_in_body

    return SchemaDetail(
        title=compiled.title,
        description=compiled.description,
        target=target,
        headers=custom_headers,
        route_map=route_map,
        request_in_body_map=request_in_body_map,
        functions=list(compiled.functions),
    )


def compile_platform_tool(tool: PlatformTool) -> SchemaDetail:
    """Describe a platform tool as a local SchemaDetail."""
    functions = [fn.to_function_def() for fn in tool.functions]
    return SchemaDetail(
        title=tool.name,
        description=tool.description,
        target=LocalRoute(),
        # platform functions have no HTTP path; key them by function name
        route_map={f"/{fn.name}": fn.name for fn in functions},
        request_in_body_map={f"/{fn.name}": True for fn in functions},
        functions=functions,
    )


def compile_platform_tools(tools: Iterable[PlatformTool]) -> CompilationResult:
    """Compile platform tools, usually a whole PlatformToolRegistry."""
    result = CompilationResult()
    for tool in tools:
        detail = compile_platform_tool(tool)
        result.schema_details.append(detail)
        result.all_tools.extend(detail.functions)
    _merge_into(result, strict=False)
    return result


def _merge_into(result: CompilationResult, *, strict: bool) -> None:
    merge = merge_route_maps((d.route_map for d in result.schema_details), strict=strict)
    for entry in merge.shadowed:
        logger.warning(
            "Route %s remapped from %s to %s", entry.path, entry.previous, entry.replacement
        )
    result.all_route_maps = merge.routes
    result.shadowed = merge.shadowed


def _compile_spec(spec: ToolSpec, registry: Optional[PlatformToolRegistry]) -> SchemaDetail:
    if registry is not None:
        platform_tool = registry.get_tool(spec.id)
        if platform_tool is not None:
            return compile_platform_tool(platform_tool)

    try:
        document = json.loads(spec.schema)
    except (TypeError, json.JSONDecodeError) as exc:
        raise ToolBridgeError(f"schema is not valid JSON: {exc}") from exc

    return build_schema_detail(openapi_to_functions(document), spec.custom_headers)


def compile_tools(
    tool_specs: Sequence[ToolSpec],
    *,
    registry: Optional[PlatformToolRegistry] = None,
    strict: bool = False,
) -> CompilationResult:
    """
    Compile the selected tools for one chat turn.

    A tool whose schema cannot be parsed or converted is logged and skipped;
    the remaining tools still compile.  A tool whose id names a platform tool
    in *registry* compiles to a local SchemaDetail.

    Raises:
        RouteCollisionError: only with ``strict=True``.
    """
    result = CompilationResult()

    for spec in tool_specs:
        try:
            detail = _compile_spec(spec, registry)
        except (ToolBridgeError, ValueError, TypeError, KeyError, AttributeError) as exc:
            logger.warning("Skipping tool %s: %s", spec.name, exc)
            result.skipped.append(SkippedTool(spec.name, str(exc)))
            continue

        result.schema_details.append(detail)
        result.all_tools.extend(detail.functions)

    _merge_into(result, strict=strict)

    logger.debug(
        "Compiled %d tool(s) into %d function(s); %d skipped",
        len(result.schema_details),
        len(result.all_tools),
        len(result.skipped),
    )
    return result

from .schema import (
    LOCAL_EXECUTOR_URL,
    CompiledSchema,
    FunctionDef,
    LocalRoute,
    RemoteRoute,
    Route,
    RouteMap,
    RouteTarget,
    SchemaDetail,
    ToolSpec,
)
from .tool import (
    ExecutionResult,
    FunctionCallIntent,
    ParsedArguments,
    PreparedRequest,
    ToolCallRequest,
    ToolCallResult,
)

__all__ = [
    "LOCAL_EXECUTOR_URL",
    "CompiledSchema",
    "ExecutionResult",
    "FunctionCallIntent",
    "FunctionDef",
    "LocalRoute",
    "ParsedArguments",
    "PreparedRequest",
    "RemoteRoute",
    "Route",
    "RouteMap",
    "RouteTarget",
    "SchemaDetail",
    "ToolCallRequest",
    "ToolCallResult",
    "ToolSpec",
]

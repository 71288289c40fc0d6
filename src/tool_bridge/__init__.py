"""
Tool Bridge - OpenAPI and platform tool calling for multi-provider chat.
"""

import logging

from .compiler import CompilationResult, compile_platform_tools, compile_tools, merge_route_maps
from .dispatcher import ToolDispatcher, build_request, parse_arguments
from .errors import (
    ArgumentParseError,
    ArgumentValidationError,
    FunctionNotFoundError,
    MissingParameterError,
    RouteCollisionError,
    SchemaValidationError,
    ToolBridgeError,
    ToolExecutionError,
)
from .openapi import openapi_to_functions, to_colon_path
from .platform import PlatformToolRegistry, default_registry
from .prompts import prepend_system_prompt
from .providers import Provider, check_api_key, get_api_key
from .types import (
    LOCAL_EXECUTOR_URL,
    FunctionCallIntent,
    FunctionDef,
    SchemaDetail,
    ToolCallRequest,
    ToolCallResult,
    ToolSpec,
)
from .adapters import AnthropicToolAdapter, OpenAIToolAdapter, intent_from_call

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    "CompilationResult",
    "compile_platform_tools",
    "compile_tools",
    "merge_route_maps",
    "ToolDispatcher",
    "build_request",
    "parse_arguments",
    "ArgumentParseError",
    "ArgumentValidationError",
    "FunctionNotFoundError",
    "MissingParameterError",
    "RouteCollisionError",
    "SchemaValidationError",
    "ToolBridgeError",
    "ToolExecutionError",
    "openapi_to_functions",
    "to_colon_path",
    "PlatformToolRegistry",
    "default_registry",
    "prepend_system_prompt",
    "Provider",
    "check_api_key",
    "get_api_key",
    "LOCAL_EXECUTOR_URL",
    "FunctionCallIntent",
    "FunctionDef",
    "SchemaDetail",
    "ToolCallRequest",
    "ToolCallResult",
    "ToolSpec",
    "AnthropicToolAdapter",
    "OpenAIToolAdapter",
    "intent_from_call",
]

"""Pure transformation adapters for different LLM providers."""

from tool_bridge.types import FunctionCallIntent, ToolCallRequest

from .openai import OpenAIToolAdapter
from .anthropic import AnthropicToolAdapter


def intent_from_call(call: ToolCallRequest) -> FunctionCallIntent:
    """Turn a provider-neutral tool call into the dispatcher's input."""
    return FunctionCallIntent(name=call.name, arguments=call.arguments)


__all__ = [
    "OpenAIToolAdapter",
    "AnthropicToolAdapter",
    "intent_from_call",
]

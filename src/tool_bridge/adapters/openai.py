"""OpenAI adapter for tool definitions, tool calls and tool results."""

from __future__ import annotations

import json
from typing import Any, Sequence

from openai.types.chat import ChatCompletion

from tool_bridge.types import FunctionDef, ToolCallRequest, ToolCallResult

ChatMessage = dict[str, Any]


class OpenAIToolAdapter:
    """Adapter for converting between tool-bridge types and OpenAI format."""

    def tools(self, functions: Sequence[FunctionDef]) -> list[dict[str, Any]]:
        """Render function definitions for ``chat.completions.create(tools=...)``."""
        return [fn.as_openai_tool() for fn in functions]

    def tool_calls_from(self, raw: ChatCompletion) -> list[ToolCallRequest]:
        """Extract the tool calls of an OpenAI response.

        Arguments are kept as the provider sent them; decoding (and reporting
        malformed JSON) is the dispatcher's job.
        """
        if not raw.choices or not raw.choices[0].message:
            return []

        message = raw.choices[0].message
        calls: list[ToolCallRequest] = []
        for tc in message.tool_calls or []:
            raw_args = tc.function.arguments
            arguments = raw_args if isinstance(raw_args, (str, dict)) else {}
            calls.append(ToolCallRequest(id=tc.id, name=tc.function.name, arguments=arguments))
        return calls

    def assistant_message_from(self, raw: ChatCompletion) -> ChatMessage:
        """Convert OpenAI response to assistant ChatMessage."""
        if not raw.choices or not raw.choices[0].message:
            return {"role": "assistant", "content": ""}

        message = raw.choices[0].message
        chat_message: ChatMessage = {"role": "assistant"}

        if message.content:
            chat_message["content"] = message.content

        if message.tool_calls:
            chat_message["tool_calls"] = [
                {
                    "id": tc.id,
                    "type": tc.type,
                    "function": {
                        "name": tc.function.name,
                        "arguments": tc.function.arguments
                    }
                }
                for tc in message.tool_calls
            ]
            # OpenAI spec: content should be null when tool_calls is present
            if "content" not in chat_message:
                chat_message["content"] = None

        return chat_message

    def tool_result_message(self, result: ToolCallResult) -> ChatMessage:
        """Convert ToolCallResult to OpenAI ChatMessage."""
        return {
            "role": "tool",
            "tool_call_id": result.id,
            "content": result.content
            if isinstance(result.content, str)
            else json.dumps(result.content),
        }

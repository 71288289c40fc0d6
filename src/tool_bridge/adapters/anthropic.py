"""Anthropic adapter for tool definitions, tool calls and tool results."""

from __future__ import annotations

import json
from typing import Any, Sequence

from anthropic.types import Message

from tool_bridge.types import FunctionDef, ToolCallRequest, ToolCallResult

ChatMessage = dict[str, Any]


class AnthropicToolAdapter:
    """Adapter for converting between tool-bridge types and Anthropic format."""

    def tools(self, functions: Sequence[FunctionDef]) -> list[dict[str, Any]]:
        """Render function definitions for ``messages.create(tools=...)``."""
        return [
            {
                "name": fn.name,
                "description": fn.description,
                "input_schema": fn.parameters or {"type": "object", "properties": {}},
            }
            for fn in functions
        ]

    def tool_calls_from(self, raw: Message) -> list[ToolCallRequest]:
        """Extract the ``tool_use`` blocks of an Anthropic response."""
        calls: list[ToolCallRequest] = []
        for block in raw.content or []:
            if block.type == "tool_use":
                calls.append(
                    ToolCallRequest(
                        id=block.id,
                        name=block.name,
                        arguments=dict(block.input) if hasattr(block.input, "items") else {},
                    )
                )
        return calls

    def assistant_message_from(self, raw: Message) -> ChatMessage:
        """Convert Anthropic response to assistant ChatMessage."""
        chat_message: ChatMessage = {"role": "assistant"}

        if not raw.content:
            chat_message["content"] = ""
            return chat_message

        text_parts = []
        tool_use_blocks = []

        for block in raw.content:
            if block.type == "text":
                text_parts.append(block.text)
            elif block.type == "tool_use":
                tool_use_blocks.append({
                    "type": "tool_use",
                    "id": block.id,
                    "name": block.name,
                    "input": dict(block.input) if hasattr(block.input, "items") else {}
                })

        if tool_use_blocks:
            content_list = []
            if text_parts:
                content_list.append({"type": "text", "text": "".join(text_parts)})
            content_list.extend(tool_use_blocks)
            chat_message["content"] = content_list
        else:
            chat_message["content"] = "".join(text_parts)

        return chat_message

    def tool_result_message(self, result: ToolCallResult) -> ChatMessage:
        """Convert ToolCallResult to Anthropic ChatMessage."""
        return {
            "role": "user",
            "content": [
                {
                    "type": "tool_result",
                    "tool_use_id": result.id,
                    "content": result.content
                    if isinstance(result.content, str)
                    else json.dumps(result.content),
                }
            ],
        }

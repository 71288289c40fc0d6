"""
Provider‑neutral dataclasses for client‑side tool use.

They are intentionally minimal: everything provider‑specific lives in adapters.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

__all__ = [
    "ToolCallRequest",
    "ToolCallResult",
    "FunctionCallIntent",
    "ParsedArguments",
    "PreparedRequest",
    "ExecutionResult",
]


# Parsed JSON of a successful call, or {"error": <reason>}
ExecutionResult = Any


@dataclass(slots=True)
class ToolCallRequest:
    """A model‑agnostic request emitted by the LLM to call a tool."""
    id: str
    name: str
    # raw JSON string when the provider's arguments could not be decoded
    arguments: Union[dict[str, Any], str]


@dataclass(slots=True)
class ToolCallResult:
    """Payload to send back to the LLM after the tool finished running."""
    id: str                     # must match the request id
    content: str | dict[str, Any]


@dataclass(slots=True, frozen=True)
class FunctionCallIntent:
    """The model's request to invoke a named function.

    ``arguments`` is either the JSON string the provider emitted or an
    already decoded mapping.
    """
    name: str
    arguments: Union[str, dict[str, Any]] = field(default_factory=dict)


@dataclass(slots=True, frozen=True)
class ParsedArguments:
    """Canonical form of a function call's arguments."""
    raw: dict[str, Any]

    @property
    def parameters(self) -> dict[str, Any]:
        params = self.raw.get("parameters")
        return params if isinstance(params, dict) else {}

    @property
    def request_body(self) -> Any:
        return self.raw.get("requestBody")


@dataclass(slots=True, frozen=True)
class PreparedRequest:
    """A fully resolved outbound HTTP call."""
    method: str
    url: str
    headers: dict[str, str]
    body: bytes | None = None

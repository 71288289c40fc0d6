"""
Call dispatcher: resolves a model-issued function call to its owning tool and
executes it, either in-process through the platform registry or as an HTTP
request against the tool's OpenAPI server.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Optional, Self, Sequence, Union
from urllib.parse import quote, urlencode

import httpx
import jsonschema
from jsonschema.exceptions import SchemaError, ValidationError

from tool_bridge.errors import (
    ArgumentParseError,
    ArgumentValidationError,
    FunctionNotFoundError,
    MissingParameterError,
)
from tool_bridge.platform.registry import PlatformToolRegistry
from tool_bridge.types import (
    ExecutionResult,
    FunctionCallIntent,
    ParsedArguments,
    PreparedRequest,
    SchemaDetail,
    ToolCallRequest,
    ToolCallResult,
)

__all__ = [
    "parse_arguments",
    "parse_custom_headers",
    "find_schema_detail",
    "build_request",
    "ToolDispatcher",
]

logger = logging.getLogger(__name__)

_COLON_PARAM = re.compile(r":(\w+)")


def parse_arguments(arguments: Union[str, dict[str, Any], None]) -> ParsedArguments:
    """
    Resolve string-or-object call arguments into ParsedArguments.

    ``None`` means the call carried no arguments and yields an empty object.
    A string must decode to a JSON object; a blank string does not.
    """
    if arguments is None:
        return ParsedArguments({})
    if isinstance(arguments, str):
        try:
            decoded = json.loads(arguments.strip())
        except json.JSONDecodeError as exc:
            raise ArgumentParseError(f"Function arguments are not valid JSON: {exc}") from exc
        arguments = decoded
    if not isinstance(arguments, dict):
        raise ArgumentParseError(
            f"Function arguments must be a JSON object, got {type(arguments).__name__}"
        )
    return ParsedArguments(arguments)


def parse_custom_headers(raw: Optional[str], log: Optional[logging.Logger] = None) -> dict[str, str]:
    """
    Decode a tool's stored custom headers.

    Anything other than a JSON object of string values is logged and treated
    as no custom headers.
    """
    if not raw or not isinstance(raw, str):
        return {}
    try:
        headers = json.loads(raw)
    except json.JSONDecodeError:
        (log or logger).warning("Ignoring custom headers: not valid JSON")
        return {}
    if not isinstance(headers, dict) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in headers.items()
    ):
        (log or logger).warning("Ignoring custom headers: expected an object of strings")
        return {}
    return headers


def find_schema_detail(schema_details: Sequence[SchemaDetail], function_name: str) -> SchemaDetail:
    for detail in schema_details:
        if function_name in detail.route_map.values():
            return detail
    raise FunctionNotFoundError(function_name)


def _query_value(value: Any) -> Any:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, dict):
        return json.dumps(value, separators=(",", ":"))
    if value is None:
        return ""
    return value


def _overlay_headers(defaults: dict[str, str], custom: dict[str, str]) -> dict[str, str]:
    # header names are case-insensitive; a custom key replaces any default spelling
    overridden = {key.lower() for key in custom}
    headers = {key: value for key, value in defaults.items() if key.lower() not in overridden}
    headers.update(custom)
    return headers


def build_request(
    detail: SchemaDetail,
    function_name: str,
    arguments: ParsedArguments,
    log: Optional[logging.Logger] = None,
) -> PreparedRequest:
    """
    Build the HTTP request for a remote function call.

    Pure: identical inputs always produce an identical PreparedRequest.

    Raises:
        FunctionNotFoundError: if *detail* has no route for *function_name*.
        MissingParameterError: if a ``:param`` in the path has no value.
    """
    template = detail.path_for(function_name)
    if template is None:
        raise FunctionNotFoundError(function_name, f"Path for function {function_name} not found")

    parameters = arguments.parameters
    path_params: set[str] = set()

    def _substitute(match: re.Match[str]) -> str:
        name = match.group(1)
        value = parameters.get(name)
        if value is None or value == "":
            raise MissingParameterError(name, function_name)
        path_params.add(name)
        return quote(str(value), safe="")

    path = _COLON_PARAM.sub(_substitute, template)
    base_url = detail.url.rstrip("/")
    custom_headers = parse_custom_headers(detail.headers, log)

    if detail.request_in_body_map.get(template, False):
        headers = _overlay_headers({"Content-Type": "application/json"}, custom_headers)
        body_content = arguments.request_body
        if body_content is None:
            body_content = arguments.raw
        body = json.dumps(body_content, separators=(",", ":")).encode("utf-8")
        return PreparedRequest("POST", base_url + path, headers, body)

    # parameters already placed in the path are not repeated in the query
    query = urlencode(
        [
            (key, _query_value(value))
            for key, value in parameters.items()
            if key not in path_params
        ],
        doseq=True,
    )
    url = base_url + path + ("?" + query if query else "")
    return PreparedRequest("GET", url, dict(custom_headers))


class ToolDispatcher:
    """
    Executes function calls against compiled schema details.

    Use as an async context manager when no ``http_client`` is supplied, so the
    client the dispatcher creates gets closed::

        async with ToolDispatcher(registry=default_registry()) as dispatcher:
            result = await dispatcher.execute(compiled.schema_details, intent)
    """

    def __init__(
        self,
        http_client: Optional[httpx.AsyncClient] = None,
        registry: Optional[PlatformToolRegistry] = None,
        *,
        timeout: Optional[float] = None,
        validate_arguments: bool = False,
        logger: Optional[logging.Logger] = None,
        name: Optional[str] = None,
    ) -> None:
        """
        Args:
            http_client: Client used for remote calls. When omitted one is
                created lazily and owned by this dispatcher.
            registry: Platform tool registry serving local routes.
            timeout: Timeout for an owned client; None leaves calls unbounded.
            validate_arguments: Validate arguments against the function's
                declared parameter schema before dispatch.
            logger: Optional logger instance.
            name: Optional name used in log lines.
        """
        self._client = http_client
        self._owns_client = http_client is None
        self.registry = registry if registry is not None else PlatformToolRegistry()
        self.timeout = timeout
        self.validate_arguments = validate_arguments
        self.logger = logger or logging.getLogger(__name__)
        self.name = name if name is not None else self.__class__.__name__

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def execute(
        self, schema_details: Sequence[SchemaDetail], intent: FunctionCallIntent
    ) -> ExecutionResult:
        """
        Execute one function call.

        Returns the platform function's result, the decoded JSON body of a
        successful HTTP response, or ``{"error": <reason>}`` for an HTTP
        failure status.

        Raises:
            ArgumentParseError, FunctionNotFoundError, MissingParameterError,
            ArgumentValidationError: structural failures.
        """
        arguments = parse_arguments(intent.arguments)
        detail = find_schema_detail(schema_details, intent.name)

        if self.validate_arguments:
            self._validate(detail, intent.name, arguments)

        if detail.is_local:
            if intent.name not in self.registry:
                raise FunctionNotFoundError(intent.name, f"Function {intent.name} not found")
            return await self.registry.invoke(intent.name, arguments.raw)

        request = build_request(detail, intent.name, arguments, self.logger)
        return await self._send(request)

    async def execute_tool_calls(
        self, schema_details: Sequence[SchemaDetail], calls: Sequence[ToolCallRequest]
    ) -> list[ToolCallResult]:
        """Run *calls* one after another and wrap each result for the chat loop."""
        results: list[ToolCallResult] = []
        for call in calls:
            data = await self.execute(schema_details, FunctionCallIntent(call.name, call.arguments))
            content = data if isinstance(data, str) else json.dumps(data)
            results.append(ToolCallResult(id=call.id, content=content))
        return results

    def _validate(self, detail: SchemaDetail, function_name: str, arguments: ParsedArguments) -> None:
        fn = detail.function(function_name)
        if fn is None:
            return
        try:
            jsonschema.validate(instance=arguments.raw, schema=fn.parameters)
        except ValidationError as exc:
            raise ArgumentValidationError(function_name, exc.message) from exc
        except SchemaError as exc:
            self._log(f"Skipping validation for {function_name}: {exc.message}", logging.WARNING)

    async def _send(self, request: PreparedRequest) -> ExecutionResult:
        self._log(f"{request.method} {request.url}", logging.DEBUG)
        response = await self.client.request(
            request.method,
            request.url,
            headers=request.headers,
            content=request.body,
        )

        if not response.is_success:
            reason = response.reason_phrase or str(response.status_code)
            self._log(
                f"{request.method} {request.url} failed: {response.status_code} {reason}",
                logging.WARNING,
            )
            return {"error": reason}

        if not response.content.strip():
            return {}
        try:
            return response.json()
        except ValueError:
            # JSONDecodeError and UnicodeDecodeError (binary bodies) both land here
            self._log(f"{request.url} returned a non-JSON body", logging.WARNING)
            return {"error": "Invalid JSON response"}

    def _log(self, message: str, level: int = logging.INFO) -> None:
        self.logger.log(level, f"[{self.name}] {message}")

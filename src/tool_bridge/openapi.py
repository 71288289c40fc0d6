"""
OpenAPI to function-calling conversion.

Each operation of an OpenAPI 3 document becomes one function named by its
``operationId``.  The function's parameter schema groups arguments the same
way the dispatcher consumes them::

    {
      "type": "object",
      "properties": {
        "parameters":  {"type": "object", "properties": {...}},  # path + query
        "requestBody": {...}                                     # JSON body
      }
    }
"""

from __future__ import annotations

import copy
import re
from typing import Any, Mapping

from tool_bridge.errors import SchemaValidationError
from tool_bridge.types import CompiledSchema, FunctionDef, Route

__all__ = ["HTTP_METHODS", "to_colon_path", "validate_openapi", "resolve_refs", "openapi_to_functions"]

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")

_BRACE_PARAM = re.compile(r"\{(\w+)\}")


def to_colon_path(template: str) -> str:
    """Rewrite ``/items/{id}`` as ``/items/:id``."""
    return _BRACE_PARAM.sub(r":\1", template)


def validate_openapi(document: Any) -> None:
    """Raise SchemaValidationError unless *document* can be compiled."""
    if not isinstance(document, Mapping):
        raise SchemaValidationError("OpenAPI document must be a JSON object")
    if not document.get("openapi"):
        raise SchemaValidationError("'openapi' version string is missing")

    info = document.get("info")
    if not isinstance(info, Mapping) or not info.get("title"):
        raise SchemaValidationError("'info.title' is required")

    servers = document.get("servers")
    if not isinstance(servers, list) or not servers:
        raise SchemaValidationError("'servers' must be a non-empty list")
    if not isinstance(servers[0], Mapping) or not servers[0].get("url"):
        raise SchemaValidationError("'servers[0].url' is required")

    paths = document.get("paths")
    if not isinstance(paths, Mapping) or not paths:
        raise SchemaValidationError("'paths' must be a non-empty object")

    for path, item in paths.items():
        if not isinstance(item, Mapping):
            raise SchemaValidationError(f"Path item {path} must be an object")
        for method in HTTP_METHODS:
            operation = item.get(method)
            if operation is None:
                continue
            if not isinstance(operation, Mapping) or not operation.get("operationId"):
                raise SchemaValidationError(
                    f"Operation {method.upper()} {path} is missing an operationId"
                )


def _lookup_pointer(document: Mapping[str, Any], ref: str) -> Any:
    if not ref.startswith("#/"):
        raise SchemaValidationError(f"Only local $ref values are supported: {ref}")
    node: Any = document
    for part in ref[2:].split("/"):
        part = part.replace("~1", "/").replace("~0", "~")
        if isinstance(node, Mapping) and part in node:
            node = node[part]
        elif isinstance(node, list) and part.isdigit() and int(part) < len(node):
            node = node[int(part)]
        else:
            raise SchemaValidationError(f"Unresolvable $ref: {ref}")
    return node


def resolve_refs(node: Any, document: Mapping[str, Any], _seen: tuple[str, ...] = ()) -> Any:
    """Return a copy of *node* with every local ``$ref`` inlined."""
    if isinstance(node, Mapping):
        ref = node.get("$ref")
        if isinstance(ref, str):
            if ref in _seen:
                raise SchemaValidationError(f"Circular $ref: {ref}")
            target = _lookup_pointer(document, ref)
            return resolve_refs(target, document, _seen + (ref,))
        return {key: resolve_refs(value, document, _seen) for key, value in node.items()}
    if isinstance(node, list):
        return [resolve_refs(item, document, _seen) for item in node]
    return copy.deepcopy(node)


def _body_schema(request_body: Mapping[str, Any]) -> dict[str, Any] | None:
    content = request_body.get("content")
    if not isinstance(content, Mapping) or not content:
        return None
    media = content.get("application/json")
    if media is None:
        media = next(iter(content.values()))
    if isinstance(media, Mapping) and isinstance(media.get("schema"), Mapping):
        return dict(media["schema"])
    return None


def _merge_parameters(path_level: list[Any], op_level: list[Any]) -> list[dict[str, Any]]:
    # operation-level parameters override path-level ones with the same name/location
    merged: dict[tuple[str, str], dict[str, Any]] = {}
    for param in [*path_level, *op_level]:
        if isinstance(param, Mapping) and param.get("name"):
            merged[(param["name"], param.get("in", "query"))] = dict(param)
    return list(merged.values())


def _function_parameters(
    parameters: list[dict[str, Any]], request_body: Mapping[str, Any] | None
) -> dict[str, Any]:
    schema: dict[str, Any] = {"type": "object", "properties": {}}
    required: list[str] = []

    if parameters:
        properties: dict[str, Any] = {}
        required_params: list[str] = []
        for param in parameters:
            prop = dict(param.get("schema") or {"type": "string"})
            if param.get("description") and "description" not in prop:
                prop["description"] = param["description"]
            properties[param["name"]] = prop
            if param.get("required") or param.get("in") == "path":
                required_params.append(param["name"])

        group: dict[str, Any] = {"type": "object", "properties": properties}
        if required_params:
            group["required"] = required_params
            required.append("parameters")
        schema["properties"]["parameters"] = group

    if request_body is not None:
        body = _body_schema(request_body)
        if body is not None:
            schema["properties"]["requestBody"] = body
            if request_body.get("required"):
                required.append("requestBody")

    if required:
        schema["required"] = required
    return schema


def openapi_to_functions(document: Mapping[str, Any]) -> CompiledSchema:
    """Convert an OpenAPI document to function definitions and routes."""
    validate_openapi(document)

    info = document["info"]
    compiled = CompiledSchema(
        title=info["title"],
        description=info.get("description", "") or "",
        server=document["servers"][0]["url"],
    )

    for path, raw_item in document["paths"].items():
        # resolve per path item so unused recursive components never matter
        item = resolve_refs(raw_item, document)
        path_params = item.get("parameters") or []
        for method in HTTP_METHODS:
            operation = item.get(method)
            if operation is None:
                continue

            name = operation["operationId"]
            request_body = operation.get("requestBody")
            params = _merge_parameters(path_params, operation.get("parameters") or [])

            compiled.functions.append(
                FunctionDef(
                    name=name,
                    description=operation.get("description") or operation.get("summary") or "",
                    parameters=_function_parameters(params, request_body),
                )
            )
            compiled.routes.append(
                Route(
                    path=to_colon_path(path),
                    operation_id=name,
                    method=method,
                    request_in_body=request_body is not None,
                )
            )

    return compiled

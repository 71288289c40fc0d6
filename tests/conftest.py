import json

import pytest

from tool_bridge.types import ToolSpec


def weather_document(server: str = "https://weather.test", title: str = "Weather") -> dict:
    return {
        "openapi": "3.1.0",
        "info": {"title": title, "description": "Current weather", "version": "1.0.0"},
        "servers": [{"url": server}],
        "paths": {
            "/weather/{city}": {
                "get": {
                    "operationId": "getWeather",
                    "summary": "Weather for a city",
                    "parameters": [
                        {
                            "name": "city",
                            "in": "path",
                            "required": True,
                            "description": "City name",
                            "schema": {"type": "string"},
                        },
                        {
                            "name": "units",
                            "in": "query",
                            "schema": {"type": "string", "enum": ["metric", "imperial"]},
                        },
                    ],
                }
            }
        },
    }


def items_document(server: str = "https://items.test") -> dict:
    return {
        "openapi": "3.0.0",
        "info": {"title": "Items", "version": "1.0.0"},
        "servers": [{"url": server}],
        "components": {
            "schemas": {
                "Item": {
                    "type": "object",
                    "properties": {"id": {"type": "integer"}, "name": {"type": "string"}},
                    "required": ["id"],
                }
            }
        },
        "paths": {
            "/items": {
                "post": {
                    "operationId": "createItem",
                    "description": "Create an item",
                    "requestBody": {
                        "required": True,
                        "content": {
                            "application/json": {"schema": {"$ref": "#/components/schemas/Item"}}
                        },
                    },
                },
            },
            "/items/search": {
                "get": {"operationId": "listItems", "description": "List items"},
            },
            "/items/{itemId}/tags/{tag}": {
                "delete": {
                    "operationId": "removeTag",
                    "parameters": [
                        {"name": "itemId", "in": "path", "required": True, "schema": {"type": "integer"}},
                        {"name": "tag", "in": "path", "required": True, "schema": {"type": "string"}},
                    ],
                }
            },
        },
    }


def tool_spec(document: dict, *, id: str = "tool-1", name: str = "Tool", custom_headers=None) -> ToolSpec:
    return ToolSpec(id=id, name=name, schema=json.dumps(document), custom_headers=custom_headers)


@pytest.fixture
def weather_spec() -> ToolSpec:
    return tool_spec(weather_document(), id="weather", name="Weather")


@pytest.fixture
def items_spec() -> ToolSpec:
    return tool_spec(items_document(), id="items", name="Items")

"""Tests for the schema compiler."""

import json
import logging
from dataclasses import replace

import pytest

from conftest import items_document, tool_spec, weather_document
from tool_bridge.compiler import compile_platform_tools, compile_tools, merge_route_maps
from tool_bridge.errors import RouteCollisionError
from tool_bridge.platform import PlatformToolRegistry, build_image_generator_tool
from tool_bridge.types import LOCAL_EXECUTOR_URL, LocalRoute, RemoteRoute, ToolSpec


def test_compile_single_tool(weather_spec):
    result = compile_tools([weather_spec])

    assert [fn.name for fn in result.all_tools] == ["getWeather"]
    assert result.all_route_maps == {"/weather/:city": "getWeather"}
    assert len(result.schema_details) == 1

    detail = result.schema_details[0]
    assert detail.title == "Weather"
    assert detail.target == RemoteRoute("https://weather.test")
    assert detail.url == "https://weather.test"
    assert detail.request_in_body_map == {"/weather/:city": False}


def test_compile_counts_match_operations(weather_spec, items_spec):
    result = compile_tools([weather_spec, items_spec])

    assert len(result.all_tools) == 4
    assert len({fn.name for fn in result.all_tools}) == 4
    assert len(result.all_route_maps) == 4
    assert result.shadowed == []
    assert result.openai_tools()[0]["type"] == "function"


def test_body_flag_recorded_per_path(items_spec):
    detail = compile_tools([items_spec]).schema_details[0]

    assert detail.request_in_body_map["/items"] is True
    assert detail.request_in_body_map["/items/search"] is False


def test_custom_headers_are_kept_raw():
    spec = tool_spec(weather_document(), custom_headers='{"X-Api-Key": "secret"}')
    detail = compile_tools([spec]).schema_details[0]

    assert detail.headers == '{"X-Api-Key": "secret"}'


def test_malformed_tool_is_skipped(weather_spec, caplog):
    broken = ToolSpec(id="broken", name="Broken", schema="{not json")
    invalid = tool_spec({"openapi": "3.0.0"}, id="invalid", name="Invalid")

    with caplog.at_level(logging.WARNING, logger="tool_bridge.compiler"):
        result = compile_tools([broken, weather_spec, invalid])

    assert [d.title for d in result.schema_details] == ["Weather"]
    assert [s.name for s in result.skipped] == ["Broken", "Invalid"]
    assert "Skipping tool Broken" in caplog.text


def test_later_tool_wins_route_collision():
    first = tool_spec(weather_document(server="https://one.test"), id="a", name="A")
    second = tool_spec(weather_document(server="https://two.test"), id="b", name="B")

    result = compile_tools([first, second])

    assert result.all_route_maps == {"/weather/:city": "getWeather"}
    assert len(result.schema_details) == 2
    assert len(result.shadowed) == 1
    assert result.shadowed[0].path == "/weather/:city"


def test_strict_compile_rejects_collision():
    first = tool_spec(weather_document(), id="a")
    second = tool_spec(weather_document(), id="b")

    with pytest.raises(RouteCollisionError):
        compile_tools([first, second], strict=True)


def test_merge_route_maps_records_shadowed_entries():
    merge = merge_route_maps([{"/a": "opA", "/b": "opB"}, {"/a": "opC"}])

    assert merge.routes == {"/a": "opC", "/b": "opB"}
    assert [(s.path, s.previous, s.replacement) for s in merge.shadowed] == [("/a", "opA", "opC")]


def test_merge_route_maps_strict():
    with pytest.raises(RouteCollisionError) as excinfo:
        merge_route_maps([{"/a": "opA"}, {"/a": "opB"}], strict=True)
    assert excinfo.value.previous == "opA"
    assert excinfo.value.replacement == "opB"


def test_sentinel_server_compiles_to_local_route():
    document = weather_document(server=LOCAL_EXECUTOR_URL)
    detail = compile_tools([tool_spec(document)]).schema_details[0]

    assert isinstance(detail.target, LocalRoute)
    assert detail.is_local
    assert detail.url == LOCAL_EXECUTOR_URL


def test_platform_tool_compiles_from_registry():
    registry = PlatformToolRegistry([build_image_generator_tool()])
    tool = registry.tools()[0]
    spec = ToolSpec(id=tool.id, name=tool.name, schema=json.dumps({}))

    result = compile_tools([spec], registry=registry)

    detail = result.schema_details[0]
    assert detail.is_local
    assert detail.function_names() == ["generateImage"]
    fn = result.all_tools[0]
    assert fn.parameters["properties"]["parameters"]["required"] == ["prompt", "format"]


def test_compile_platform_tools():
    registry = PlatformToolRegistry([build_image_generator_tool()])
    result = compile_platform_tools(registry)

    assert [fn.name for fn in result.all_tools] == ["generateImage"]
    assert list(result.all_route_maps.values()) == ["generateImage"]
    assert result.shadowed == []


def test_platform_tool_collisions_are_recorded(caplog):
    first = build_image_generator_tool()
    second = replace(first, id="image-generator-v2")

    with caplog.at_level(logging.WARNING):
        result = compile_platform_tools([first, second])

    assert result.all_route_maps == {"/generateImage": "generateImage"}
    assert [(s.path, s.previous, s.replacement) for s in result.shadowed] == [
        ("/generateImage", "generateImage", "generateImage")
    ]
    assert "Route /generateImage remapped" in caplog.text


def test_multi_document_route_counts():
    result = compile_tools([tool_spec(items_document())])
    assert len(result.all_route_maps) == len(result.all_tools) == 3

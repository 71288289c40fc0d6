from __future__ import annotations

import argparse
import asyncio
import json
import logging

from openai import AsyncOpenAI

from tool_bridge import (
    OpenAIToolAdapter,
    Provider,
    ToolDispatcher,
    ToolSpec,
    compile_tools,
    default_registry,
    get_api_key,
    intent_from_call,
    prepend_system_prompt,
)
from tool_bridge.platform import IMAGE_GENERATOR_TOOL_ID
from tool_bridge.types import ToolCallResult

logger = logging.getLogger(__name__)
logging.basicConfig(level=logging.INFO)

# Open-Meteo needs no API key, which keeps the example self-contained
WEATHER_SCHEMA: dict[str, object] = {
    "openapi": "3.1.0",
    "info": {"title": "Open-Meteo", "description": "Weather forecasts", "version": "1.0.0"},
    "servers": [{"url": "https://api.open-meteo.com"}],
    "paths": {
        "/v1/forecast": {
            "get": {
                "operationId": "getForecast",
                "description": "Current weather for a latitude/longitude",
                "parameters": [
                    {"name": "latitude", "in": "query", "required": True, "schema": {"type": "number"}},
                    {"name": "longitude", "in": "query", "required": True, "schema": {"type": "number"}},
                    {"name": "current_weather", "in": "query", "schema": {"type": "boolean"}},
                ],
            }
        }
    },
}


async def tool_roundtrip(model: str, prompt: str) -> None:
    """
    Run a single tool-calling roundtrip.

    1) Compile the selected tools
    2) Let the model emit tool calls
    3) Dispatch them and re-inject the results
    4) Ask the model to finish using the tool results
    """
    registry = default_registry()
    selected = [
        ToolSpec(id="open-meteo", name="Open-Meteo", schema=json.dumps(WEATHER_SCHEMA)),
        ToolSpec(id=IMAGE_GENERATOR_TOOL_ID, name="Image Generation", schema="{}"),
    ]
    compiled = compile_tools(selected, registry=registry)

    adapter = OpenAIToolAdapter()
    tools = adapter.tools(compiled.all_tools)
    client = AsyncOpenAI(api_key=get_api_key(Provider.OPENAI))

    messages: list[dict] = prepend_system_prompt([{"role": "user", "content": prompt}])

    # Step 1 → get first response
    rsp1 = await client.chat.completions.create(model=model, messages=messages, tools=tools)
    calls = adapter.tool_calls_from(rsp1)

    if not calls:
        logger.warning("Model answered directly: %s", rsp1.choices[0].message.content)
        return

    # Step 2 → inject the assistant's tool calls and their results
    messages.append(adapter.assistant_message_from(rsp1))
    async with ToolDispatcher(registry=registry, timeout=30.0) as dispatcher:
        for call in calls:
            data = await dispatcher.execute(compiled.schema_details, intent_from_call(call))
            messages.append(adapter.tool_result_message(ToolCallResult(call.id, json.dumps(data))))

    # Step 3 → final completion
    rsp2 = await client.chat.completions.create(model=model, messages=messages, tools=tools)
    logger.info("Model says: %s", rsp2.choices[0].message.content)


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument("--model", default="gpt-4o-mini")
    parser.add_argument("--prompt", default="What's the weather in Paris right now?")
    args = parser.parse_args()

    asyncio.run(tool_roundtrip(args.model, args.prompt))

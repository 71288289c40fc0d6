"""Image generation platform tool backed by the OpenAI images API."""

from __future__ import annotations

import logging
from typing import Any, Final, Optional

from openai import AsyncOpenAI

from tool_bridge._exceptions import wrap_upstream_error
from tool_bridge.errors import ToolExecutionError
from tool_bridge.platform.registry import PlatformFunction, PlatformParameter, PlatformTool
from tool_bridge.providers import Provider, get_api_key, get_openai_organization

__all__ = [
    "IMAGE_GENERATOR_TOOL_ID",
    "IMAGE_MODEL",
    "image_size_for",
    "generate_image",
    "build_image_generator_tool",
]

logger = logging.getLogger(__name__)

IMAGE_GENERATOR_TOOL_ID: Final = "b3f07a6e-5e01-423e-1f05-ee51830608be"
IMAGE_MODEL: Final = "dall-e-3"

_SIZES: Final[dict[str, str]] = {
    "landscape": "1792x1024",
    "wide": "1792x1024",
    "portrait": "1024x1792",
    "tall": "1024x1792",
    "square": "1024x1024",
}
_DEFAULT_SIZE: Final = "1024x1024"


def image_size_for(image_format: Any) -> str:
    """Map a requested format to a DALL·E 3 size; unknown formats are square."""
    if isinstance(image_format, str):
        return _SIZES.get(image_format.lower(), _DEFAULT_SIZE)
    return _DEFAULT_SIZE


async def generate_image(
    arguments: dict[str, Any],
    *,
    client: Optional[AsyncOpenAI] = None,
) -> dict[str, Any]:
    """
    Generate one image and return ``{"prompt", "url", "size"}``.

    Accepts either ``{"parameters": {"prompt", "format"}}`` or the flat form.

    Raises:
        ToolExecutionError: on a missing or non-string prompt, and on any
            upstream generation failure (the upstream error is chained, not
            passed through).
    """
    params = arguments.get("parameters", arguments)
    if not isinstance(params, dict):
        raise ToolExecutionError("parameters must be an object")

    prompt = params.get("prompt")
    if prompt is None:
        raise ToolExecutionError("prompt is required")
    if not isinstance(prompt, str):
        raise ToolExecutionError("prompt must be a string")

    size = image_size_for(params.get("format"))
    logger.info("Generating image (%s): %s", size, prompt)

    try:
        if client is None:
            client = AsyncOpenAI(
                api_key=get_api_key(Provider.OPENAI),
                organization=get_openai_organization(),
            )
        response = await client.images.generate(
            model=IMAGE_MODEL,
            prompt=prompt,
            n=1,
            size=size,
        )
        url = response.data[0].url
    except Exception as exc:
        raise wrap_upstream_error(exc, "Failed to generate image", logger) from exc

    return {"prompt": prompt, "url": url, "size": size}


def build_image_generator_tool(openai_client: Optional[AsyncOpenAI] = None) -> PlatformTool:
    """Return the image generation PlatformTool bound to *openai_client*."""

    async def _invoke(arguments: dict[str, Any]) -> dict[str, Any]:
        return await generate_image(arguments, client=openai_client)

    return PlatformTool(
        id=IMAGE_GENERATOR_TOOL_ID,
        name="Image Generation",
        tool_name="imageGenerator",
        description="This tool allows you to generate images from a prompt.",
        functions=(
            PlatformFunction(
                name="generateImage",
                description=(
                    "Generate an image from a prompt. Returns the URL of the image. "
                    "Never display the image in the response, nor include the link "
                    "or url, it is handled in the frontend."
                ),
                invoke=_invoke,
                parameters=(
                    PlatformParameter(
                        name="prompt",
                        description="The prompt, a detailed description, to generate an image from.",
                        required=True,
                    ),
                    PlatformParameter(
                        name="format",
                        description=(
                            "The format of the image to generate. Allowed values: square, "
                            "portrait or tall, or landscape or wide. Defaults to square."
                        ),
                        required=True,
                    ),
                ),
            ),
        ),
    )

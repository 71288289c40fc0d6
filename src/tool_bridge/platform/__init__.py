"""Platform-native tools served in-process."""

from .registry import (
    PlatformFunction,
    PlatformParameter,
    PlatformTool,
    PlatformToolRegistry,
    default_registry,
)
from .image_generator import IMAGE_GENERATOR_TOOL_ID, build_image_generator_tool, generate_image

__all__ = [
    "PlatformFunction",
    "PlatformParameter",
    "PlatformTool",
    "PlatformToolRegistry",
    "default_registry",
    "IMAGE_GENERATOR_TOOL_ID",
    "build_image_generator_tool",
    "generate_image",
]

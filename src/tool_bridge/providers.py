from __future__ import annotations

import os
from enum import StrEnum
from typing import Final, Optional

from dotenv import load_dotenv

load_dotenv()

class Provider(StrEnum):
    OPENAI = "openai"
    ANTHROPIC = "anthropic"

_ENV_VARS: Final[dict[Provider, str]] = {
    Provider.OPENAI: "OPENAI_API_KEY",
    Provider.ANTHROPIC: "ANTHROPIC_API_KEY",
}

_DISPLAY_NAMES: Final[dict[Provider, str]] = {
    Provider.OPENAI: "OpenAI",
    Provider.ANTHROPIC: "Anthropic",
}

def check_api_key(api_key: Optional[str], key_name: str) -> str:
    """Return *api_key* or raise RuntimeError when it is missing or empty."""
    if not api_key:
        raise RuntimeError(f"{key_name} API Key not found")
    return api_key

def get_api_key(provider: Provider) -> str:
    """Return the API key for *provider* or raise RuntimeError."""
    try:
        env_var = _ENV_VARS[provider]
    except KeyError:
        raise RuntimeError(f"No config for {provider!s}") from None

    return check_api_key(os.environ.get(env_var), _DISPLAY_NAMES[provider])

def get_openai_organization() -> Optional[str]:
    return os.environ.get("OPENAI_ORGANIZATION_ID") or None

__all__ = ["Provider", "check_api_key", "get_api_key", "get_openai_organization"]

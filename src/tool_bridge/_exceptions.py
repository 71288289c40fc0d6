"""
Translate noisy SDK tracebacks from platform tools into a unified
`ToolExecutionError`, while preserving the original exception for full
tracebacks.
"""

from __future__ import annotations

import importlib
import logging
from typing import Final, Type, Optional

from tool_bridge.errors import ToolExecutionError

__all__: tuple[str, ...] = ("wrap_upstream_error",)


def _import_exception(path: str) -> Type[Exception]:
    """Dynamically import an exception type, falling back to Exception."""
    module_name, _, attr = path.rpartition(".")
    try:
        module = importlib.import_module(module_name)
        return getattr(module, attr)
    except (ImportError, AttributeError):
        return Exception


OpenAI_APIError: Final = _import_exception("openai.APIError")
OpenAI_APIConnectionError: Final = _import_exception("openai.APIConnectionError")
OpenAI_RateLimitError: Final = _import_exception("openai.RateLimitError")
OpenAI_BadRequestError: Final = _import_exception("openai.BadRequestError")

CONN_ERRORS: Final[tuple[Type[Exception], ...]] = (
    OpenAI_APIConnectionError,
    TimeoutError,
    ConnectionError,
)


def wrap_upstream_error(
    exc: Exception,
    message: str,
    logger: Optional[logging.Logger] = None,
) -> ToolExecutionError:
    """Wrap an SDK exception in ToolExecutionError.

    The returned error's message is always *message*; the classification only
    goes to the log, so callers never leak upstream error payloads to the model.
    """
    log = logger or logging.getLogger("tool_bridge.exceptions")

    # order matters: RateLimitError and BadRequestError subclass APIError
    if isinstance(exc, OpenAI_RateLimitError):
        kind = "Rate‑limit exceeded"
    elif isinstance(exc, CONN_ERRORS):
        kind = "Connection problem"
    elif isinstance(exc, OpenAI_BadRequestError):
        kind = "Request rejected"
    elif isinstance(exc, OpenAI_APIError):
        kind = "Provider reported an internal error"
    else:
        kind = exc.__class__.__name__

    log.warning("%s: %s (%s)", message, kind, exc)
    err = ToolExecutionError(message)
    err.__cause__ = exc
    return err

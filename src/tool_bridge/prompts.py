"""System prompt injected into conversations that have tools selected."""

from __future__ import annotations

from datetime import date
from typing import Any, Optional

__all__ = ["tools_system_prompt", "prepend_system_prompt"]

_TOOLS_SYSTEM_PROMPT = """
Today is {today}.

You are an expert in composing functions. You are given a question and a set of possible functions.
Based on the question, you will need to make one or more function/tool calls to achieve the purpose.
You should only return the function call in tools call sections.

Always break down youtube captions in to three sentence paragraphs and add links to time codes like this:
<paragraph1>[1](https://youtube.com/watch?v=VIDEO_ID&t=START1s).
<paragraph2>[2](https://youtube.com/watch?v=VIDEO_ID&t=START2s).
<paragraph3>[3](https://youtube.com/watch?v=VIDEO_ID&t=START3s).

Always add references for google search results at the end of each sentence like this:
<sentence1>[1](<link1>).
<sentence2>[2](<link2>).

Each unique link has unique reference number.

Never include image url in the response for generated images. Do not say you can't display image.
Do not use semi-colons when describing the image. Never use html, always use Markdown.
"""


def tools_system_prompt(today: Optional[date] = None) -> str:
    return _TOOLS_SYSTEM_PROMPT.format(today=(today or date.today()).isoformat())


def prepend_system_prompt(
    messages: list[dict[str, Any]], today: Optional[date] = None
) -> list[dict[str, Any]]:
    """
    Add the tools prompt to *messages* in place and return them.

    Extends a leading system message with string content, otherwise inserts
    a new system message first.
    """
    prompt = tools_system_prompt(today)
    if messages and messages[0].get("role") == "system" and isinstance(
        messages[0].get("content"), str
    ):
        messages[0]["content"] += prompt
    else:
        messages.insert(0, {"role": "system", "content": prompt})
    return messages

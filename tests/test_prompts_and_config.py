"""Tests for the tools system prompt and provider configuration."""

from datetime import date

import pytest

from tool_bridge.prompts import prepend_system_prompt, tools_system_prompt
from tool_bridge.providers import Provider, check_api_key, get_api_key, get_openai_organization


def test_prompt_contains_date():
    assert "Today is 2024-05-01." in tools_system_prompt(date(2024, 5, 1))


def test_prepend_extends_existing_system_message():
    messages = [{"role": "system", "content": "Be brief."}, {"role": "user", "content": "Hi"}]
    result = prepend_system_prompt(messages, date(2024, 5, 1))

    assert result is messages
    assert len(messages) == 2
    assert messages[0]["content"].startswith("Be brief.")
    assert "expert in composing functions" in messages[0]["content"]


def test_prepend_inserts_system_message():
    messages = [{"role": "user", "content": "Hi"}]
    prepend_system_prompt(messages)

    assert [m["role"] for m in messages] == ["system", "user"]


def test_check_api_key():
    assert check_api_key("sk-123", "OpenAI") == "sk-123"
    with pytest.raises(RuntimeError, match="OpenAI API Key not found"):
        check_api_key("", "OpenAI")
    with pytest.raises(RuntimeError):
        check_api_key(None, "OpenAI")


def test_get_api_key_from_environment(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
    assert get_api_key(Provider.OPENAI) == "sk-env"

    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    with pytest.raises(RuntimeError, match="Anthropic API Key not found"):
        get_api_key(Provider.ANTHROPIC)


def test_openai_organization(monkeypatch):
    monkeypatch.setenv("OPENAI_ORGANIZATION_ID", "org-1")
    assert get_openai_organization() == "org-1"
    monkeypatch.delenv("OPENAI_ORGANIZATION_ID")
    assert get_openai_organization() is None

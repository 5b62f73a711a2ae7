"""Tests for the business assistant (OpenAI-backed help chat)."""

from __future__ import annotations

from unittest.mock import MagicMock

import httpx
import openai
import pytest
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from bizlaunch.config import ConfigurationError
from bizlaunch.prompts import ASSISTANT_SYSTEM_PROMPT
from bizlaunch.services.assistant import BusinessAssistant
from bizlaunch.services.gateway_client import (
    GatewayError,
    GatewayQuotaExceededError,
    GatewayRateLimitedError,
)

_OPENAI_URL = "https://api.openai.com/v1/chat/completions"


def _status_error(cls, status_code: int):
    response = httpx.Response(status_code, request=httpx.Request("POST", _OPENAI_URL))
    return cls(f"error {status_code}", response=response, body=None)


@pytest.fixture
def llm():
    mock = MagicMock()
    mock.invoke.return_value = AIMessage(content="Head to Finance to create an invoice.")
    return mock


@pytest.fixture
def assistant(llm):
    return BusinessAssistant(llm_factory=lambda api_key: llm)


class TestReply:
    def test_returns_reply_and_extended_conversation(self, assistant):
        reply, conversation = assistant.reply("How do I invoice?")
        assert reply == "Head to Finance to create an invoice."
        assert conversation == [
            {"role": "user", "content": "How do I invoice?"},
            {"role": "assistant", "content": "Head to Finance to create an invoice."},
        ]

    def test_sends_system_prompt_then_history(self, assistant, llm):
        history = [
            {"role": "user", "content": "Hi"},
            {"role": "assistant", "content": "Hello!"},
        ]
        assistant.reply("And appointments?", history)

        messages = llm.invoke.call_args[0][0]
        assert isinstance(messages[0], SystemMessage)
        assert messages[0].content == ASSISTANT_SYSTEM_PROMPT
        assert [type(m) for m in messages[1:]] == [HumanMessage, AIMessage, HumanMessage]
        assert messages[-1].content == "And appointments?"

    def test_system_prompt_not_returned(self, assistant):
        _, conversation = assistant.reply("Hi", [])
        assert all(turn["role"] != "system" for turn in conversation)

    def test_does_not_mutate_caller_history(self, assistant):
        history = [{"role": "user", "content": "Hi"}]
        assistant.reply("Again", history)
        assert history == [{"role": "user", "content": "Hi"}]

    def test_factory_receives_api_key(self, llm):
        keys: list[str] = []

        def factory(api_key):
            keys.append(api_key)
            return llm

        BusinessAssistant(llm_factory=factory).reply("Hi")
        assert keys == ["test-openai-key-456"]


class TestErrors:
    def test_missing_key_fails_before_building_client(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY")
        factory = MagicMock()
        with pytest.raises(ConfigurationError, match="OPENAI_API_KEY"):
            BusinessAssistant(llm_factory=factory).reply("Hi")
        factory.assert_not_called()

    def test_rate_limit_maps_to_rate_limited(self, assistant, llm):
        llm.invoke.side_effect = _status_error(openai.RateLimitError, 429)
        with pytest.raises(GatewayRateLimitedError):
            assistant.reply("Hi")

    def test_402_maps_to_quota_exceeded(self, assistant, llm):
        llm.invoke.side_effect = _status_error(openai.APIStatusError, 402)
        with pytest.raises(GatewayQuotaExceededError):
            assistant.reply("Hi")

    def test_other_status_maps_to_gateway_error(self, assistant, llm):
        llm.invoke.side_effect = _status_error(openai.InternalServerError, 500)
        with pytest.raises(GatewayError) as exc_info:
            assistant.reply("Hi")
        assert exc_info.value.status_code == 500
        assert not isinstance(exc_info.value, GatewayRateLimitedError)

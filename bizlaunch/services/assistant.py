"""Business assistant: platform help chat backed by an OpenAI chat model.

Unlike the other handlers, the assistant talks to the OpenAI API directly
(through ``langchain-openai``) and carries the conversation on the client
side: every request brings the prior turns and gets them back extended by
one user and one assistant message.
"""

from __future__ import annotations

import logging

import openai
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI

from bizlaunch.config import ASSISTANT_MODEL_NAME, get_openai_api_key
from bizlaunch.prompts import ASSISTANT_SYSTEM_PROMPT
from bizlaunch.services.gateway_client import (
    GatewayError,
    GatewayQuotaExceededError,
    GatewayRateLimitedError,
)
from bizlaunch.services.metrics import metrics

logger = logging.getLogger(__name__)

_METRICS_SERVICE = "openai"


def _build_llm(api_key: str) -> ChatOpenAI:
    return ChatOpenAI(
        model=ASSISTANT_MODEL_NAME,
        api_key=api_key,
        temperature=0.7,
        max_tokens=500,
        max_retries=0,
    )


def _to_message(turn: dict[str, str]) -> BaseMessage:
    role = turn.get("role")
    content = turn.get("content", "")
    if role == "assistant":
        return AIMessage(content=content)
    if role == "system":
        return SystemMessage(content=content)
    return HumanMessage(content=content)


class BusinessAssistant:
    """Answers one user message given the conversation so far."""

    def __init__(self, llm_factory=_build_llm):
        self._llm_factory = llm_factory

    def reply(
        self,
        message: str,
        conversation: list[dict[str, str]] | None = None,
    ) -> tuple[str, list[dict[str, str]]]:
        """Return ``(reply, updated_conversation)``.

        The system prompt is never part of the returned conversation.
        """
        # Key lookup first: a missing key must fail before any network call
        llm = self._llm_factory(get_openai_api_key())

        history = list(conversation or [])
        turns = history + [{"role": "user", "content": message}]
        messages = [SystemMessage(content=ASSISTANT_SYSTEM_PROMPT)] + [_to_message(t) for t in turns]

        try:
            with metrics.track(_METRICS_SERVICE, "ai-assistant"):
                response = llm.invoke(messages)
        except openai.RateLimitError as exc:
            raise GatewayRateLimitedError(f"OpenAI rate limit: {exc}", status_code=429) from exc
        except openai.APIStatusError as exc:
            if exc.status_code == 402:
                raise GatewayQuotaExceededError(f"OpenAI quota: {exc}", status_code=402) from exc
            raise GatewayError(f"OpenAI API error: {exc.status_code}", status_code=exc.status_code) from exc
        except openai.APIError as exc:
            raise GatewayError(f"OpenAI API error: {type(exc).__name__}") from exc

        reply = response.content if isinstance(response.content, str) else str(response.content)
        logger.debug("Assistant replied with %d chars", len(reply))
        return reply, turns + [{"role": "assistant", "content": reply}]

"""HTTP client for the hosted LLM gateway (OpenAI-compatible chat completions).

Every prompt handler except the business assistant goes through here.  One
call per request, no retries: a duplicate request is a duplicate billed
completion.  Upstream status codes are mapped onto a small exception
taxonomy that the API layer turns into HTTP responses.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from bizlaunch.config import GATEWAY_MODEL_NAME, LLM_GATEWAY_URL, get_gateway_api_key
from bizlaunch.services.metrics import metrics

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT_SECONDS = 120.0
_METRICS_SERVICE = "llm-gateway"


class GatewayError(Exception):
    """Raised when a gateway call fails for any reason not covered below."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class GatewayRateLimitedError(GatewayError):
    """Upstream answered 429."""


class GatewayQuotaExceededError(GatewayError):
    """Upstream answered 402 (credits exhausted)."""


def _error_for(response: httpx.Response, body: str) -> GatewayError:
    status = response.status_code
    if status == 429:
        return GatewayRateLimitedError(f"Rate limited by AI gateway: {body}", status_code=status)
    if status == 402:
        return GatewayQuotaExceededError(f"AI gateway quota exhausted: {body}", status_code=status)
    return GatewayError(f"AI gateway error: {status}", status_code=status)


class GatewayClient:
    """Thin wrapper around ``POST /chat/completions`` on the gateway.

    The API key is resolved on every call, so a missing key surfaces as a
    ``ConfigurationError`` for that call only.
    """

    def __init__(
        self,
        base_url: str | None = None,
        model: str | None = None,
        *,
        http_client: httpx.Client | None = None,
    ):
        self._model = model or GATEWAY_MODEL_NAME
        self._client = http_client or httpx.Client(
            base_url=base_url or LLM_GATEWAY_URL,
            headers={"Content-Type": "application/json"},
            timeout=REQUEST_TIMEOUT_SECONDS,
        )

    @property
    def model(self) -> str:
        return self._model

    def _build_request(self, messages: list[dict[str, str]], *, stream: bool) -> httpx.Request:
        payload: dict[str, Any] = {"model": self._model, "messages": messages}
        if stream:
            payload["stream"] = True
        return self._client.build_request(
            "POST",
            "/chat/completions",
            json=payload,
            headers={"Authorization": f"Bearer {get_gateway_api_key()}"},
        )

    def _send(self, request: httpx.Request, *, stream: bool) -> httpx.Response:
        try:
            response = self._client.send(request, stream=stream)
        except httpx.HTTPError as exc:
            raise GatewayError(f"AI gateway unreachable: {type(exc).__name__}") from exc

        if response.status_code >= 400:
            body = response.read().decode("utf-8", errors="replace")
            response.close()
            logger.error("AI gateway error: %d %s", response.status_code, body[:500])
            raise _error_for(response, body)
        return response

    # ── Public API ───────────────────────────────────────────────────

    def complete(self, messages: list[dict[str, str]], *, operation: str) -> str:
        """Run a buffered completion and return the first choice's text.

        Returns ``""`` when the gateway answers without any content.
        """
        request = self._build_request(messages, stream=False)
        with metrics.track(_METRICS_SERVICE, operation):
            response = self._send(request, stream=False)

        try:
            data = response.json()
        except ValueError as exc:
            raise GatewayError("AI gateway returned a non-JSON body") from exc

        choices = data.get("choices") or [{}]
        content = (choices[0].get("message") or {}).get("content") or ""
        return content.strip()

    def open_stream(self, messages: list[dict[str, str]], *, operation: str) -> httpx.Response:
        """Start a streamed completion and return the unread upstream response.

        The caller owns the response: relay ``iter_raw()`` and ``close()`` it.
        """
        request = self._build_request(messages, stream=True)
        with metrics.track(_METRICS_SERVICE, operation):
            return self._send(request, stream=True)

    def close(self) -> None:
        self._client.close()

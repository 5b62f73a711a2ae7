"""Centralized configuration for the BizLaunch360 backend.

Secret resolution order (per variable, on every call):
  1. Environment variable / ``.env`` file  (local dev)
  2. AWS SSM Parameter Store SecureString  (when ``AWS_EXECUTION_ENV`` is set)

The SSM paths follow the convention ``/bizlaunch360/<VARIABLE_NAME>``.

Secrets are looked up lazily by the ``get_*`` helpers so that a missing key
only fails the request that needs it, never the whole process.
"""

from __future__ import annotations

import logging
import os

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)


class ConfigurationError(OSError):
    """Raised when a required secret cannot be resolved."""


# ── Secret resolution ────────────────────────────────────────────────

def _on_aws() -> bool:
    return bool(os.getenv("AWS_EXECUTION_ENV"))


def _get_ssm_parameter(name: str) -> str | None:
    """Fetch a SecureString from SSM Parameter Store.

    Returns ``None`` if the parameter does not exist or boto3 is
    unavailable.  Errors are logged but never raised so that local-dev
    fallback still works.
    """
    try:
        import boto3  # noqa: PLC0415 (lazy import to keep boto3 off the test path)

        ssm = boto3.client("ssm")
        resp = ssm.get_parameter(Name=f"/bizlaunch360/{name}", WithDecryption=True)
        return resp["Parameter"]["Value"]
    except Exception:
        logger.debug("SSM lookup for %s failed (expected locally)", name)
        return None


def _require_env(name: str) -> str:
    """Return a config value from env-var or SSM, or raise ConfigurationError."""
    value = os.getenv(name)
    if value and not value.startswith("your_"):
        return value

    if _on_aws():
        ssm_value = _get_ssm_parameter(name)
        if ssm_value:
            return ssm_value

    raise ConfigurationError(
        f"Missing required configuration: {name}. "
        f"Set it in .env (local) or SSM Parameter Store /bizlaunch360/{name} (AWS)."
    )


def get_gateway_api_key() -> str:
    return _require_env("LLM_GATEWAY_API_KEY")


def get_openai_api_key() -> str:
    return _require_env("OPENAI_API_KEY")


def get_resend_api_key() -> str:
    return _require_env("RESEND_API_KEY")


def get_supabase_url() -> str:
    return _require_env("SUPABASE_URL")


def get_supabase_anon_key() -> str:
    return _require_env("SUPABASE_ANON_KEY")


# ── LLM gateway ─────────────────────────────────────────────────────
LLM_GATEWAY_URL: str = os.getenv("LLM_GATEWAY_URL", "https://ai.gateway.lovable.dev/v1")
GATEWAY_MODEL_NAME: str = os.getenv("GATEWAY_MODEL_NAME", "google/gemini-2.5-flash")

# Business assistant talks to the OpenAI-compatible endpoint directly
ASSISTANT_MODEL_NAME: str = os.getenv("ASSISTANT_MODEL_NAME", "gpt-4o-mini")

# ── E-mail ──────────────────────────────────────────────────────────
EMAIL_DEFAULT_FROM: str = os.getenv("EMAIL_DEFAULT_FROM", "onboarding@resend.dev")
EMAIL_DEFAULT_SENDER_NAME: str = os.getenv("EMAIL_DEFAULT_SENDER_NAME", "BizLaunch360")

# ── Server ──────────────────────────────────────────────────────────
SERVER_HOST: str = os.getenv("SERVER_HOST", "0.0.0.0")
SERVER_PORT: int = int(os.getenv("SERVER_PORT", "8000"))
CORS_ALLOW_ORIGIN: str = os.getenv("CORS_ALLOW_ORIGIN", "*")

# =============================================================================
# core/settings.py  —  Process Configuration
# =============================================================================
#
# Everything configurable lives in the environment (optionally loaded from
# a .env file by the entry points via python-dotenv).  Settings are read
# ONCE at startup into a frozen dataclass and never change afterwards.
#
#   STRIPE_SECRET_KEY      required: the server refuses to start without it
#   BILLING_MCP_LOG_LEVEL  optional, default INFO
#   BILLING_AGENT_MODEL    optional, LiteLlm model string for the console
# =============================================================================

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

SERVER_NAME = "stripe-billing-mcp"
SERVER_VERSION = "1.0.0"
DEFAULT_AGENT_MODEL = "openrouter/openai/gpt-4o"


class ConfigurationError(RuntimeError):
    """Raised at startup when required configuration is missing."""


@dataclass(frozen=True)
class Settings:
    stripe_secret_key: str = field(repr=False)
    log_level: str = "INFO"
    agent_model: str = DEFAULT_AGENT_MODEL
    server_name: str = SERVER_NAME
    server_version: str = SERVER_VERSION


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Read settings from the environment, failing fast on a missing key."""
    env = os.environ if environ is None else environ

    secret_key = (env.get("STRIPE_SECRET_KEY") or "").strip()
    if not secret_key:
        raise ConfigurationError(
            "STRIPE_SECRET_KEY is not set. Export it or add it to a .env file before starting the server."
        )

    return Settings(
        stripe_secret_key=secret_key,
        log_level=(env.get("BILLING_MCP_LOG_LEVEL") or "INFO").upper(),
        agent_model=env.get("BILLING_AGENT_MODEL") or DEFAULT_AGENT_MODEL,
    )

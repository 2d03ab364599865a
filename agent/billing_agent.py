# =============================================================================
# agent/billing_agent.py  —  Google ADK Agent Configuration
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Builds the billing assistant: a Google ADK agent whose only
#   capabilities are the tools served by tools/mcp_server.py.
#
#   ADK   = orchestration (tool calling, sessions)
#   LLM   = any LiteLlm model string (BILLING_AGENT_MODEL)
#   MCP   = the Stripe billing server, spawned as a subprocess over stdio
#
# MCP CONNECTION:
#   ADK starts the server with `uv run python -m tools.mcp_server` from
#   the project root, so the subprocess uses the project's .venv and
#   inherits STRIPE_SECRET_KEY from this process's environment.
# =============================================================================

import os
from typing import Optional

from google.adk.agents import Agent
from google.adk.models.lite_llm import LiteLlm
from google.adk.tools.mcp_tool import MCPToolset
from mcp import StdioServerParameters

from agent.prompt import BILLING_ASSISTANT_PROMPT
from core.settings import DEFAULT_AGENT_MODEL

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def server_parameters() -> StdioServerParameters:
    """How ADK launches the billing MCP server."""
    return StdioServerParameters(
        command="uv",
        args=["run", "python", "-m", "tools.mcp_server"],
        cwd=PROJECT_ROOT,
        env=dict(os.environ),
    )


def create_agent(model: Optional[str] = None) -> Agent:
    """Create the billing assistant agent.

    Args:
        model: LiteLlm model string.  Defaults to BILLING_AGENT_MODEL, then
            to openrouter/openai/gpt-4o.

    Returns:
        A configured Google ADK Agent instance.
    """
    model = model or os.environ.get("BILLING_AGENT_MODEL") or DEFAULT_AGENT_MODEL
    billing_tools = MCPToolset(connection_params=server_parameters())

    return Agent(
        name="billing_assistant",
        model=LiteLlm(model=model),
        instruction=BILLING_ASSISTANT_PROMPT,
        tools=[billing_tools],
    )

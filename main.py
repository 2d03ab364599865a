# =============================================================================
# main.py  —  Entry Point for the Billing Assistant Console
# =============================================================================
#
# HOW TO RUN:
#   uv run python main.py
#
# WHAT HAPPENS:
#   1. Loads .env (STRIPE_SECRET_KEY, OPENROUTER_API_KEY, ...)
#   2. Checks configuration; exits immediately if STRIPE_SECRET_KEY is missing
#   3. Creates the Google ADK agent (agent/billing_agent.py), which spawns
#      the Stripe MCP server (tools/mcp_server.py) over stdio
#   4. Runs an interactive loop: each line you type goes to the agent, the
#      agent calls tools as needed, and its final answer is printed
#
# The MCP server itself does not need this file; it can be used by any MCP
# host directly (python -m tools.mcp_server).
# =============================================================================

import asyncio
import sys
from typing import Optional

from dotenv import load_dotenv

# Load environment variables BEFORE creating the agent: LiteLlm reads its
# provider key from the environment, and the spawned server inherits it.
load_dotenv()

from google.adk.runners import Runner
from google.adk.sessions import InMemorySessionService
from google.genai import types

from agent.billing_agent import create_agent
from core.settings import ConfigurationError, load_settings

APP_NAME = "billing_assistant"
USER_ID = "operator"
QUIT_WORDS = frozenset({"quit", "exit", "q"})

EXAMPLE_REQUESTS = (
    "Find the invoices for order_id:1234",
    "Show the next page of those results",
    "Credit invoice in_1A2b3C in full, reason duplicate",
)


def stripe_mode(secret_key: str) -> str:
    """Return "test" or "live" from the key prefix (sk_test_, rk_live_, ...)."""
    return "live" if "_live_" in secret_key else "test"


def describe_call(function_call) -> str:
    args = ", ".join(f"{k}={v}" for k, v in (function_call.args or {}).items())
    return f"{function_call.name}({args})"


async def ask(runner: Runner, session_id: str, text: str) -> str:
    """Send one request to the agent and return its final text reply."""
    message = types.Content(role="user", parts=[types.Part(text=text)])
    reply = ""

    async for event in runner.run_async(user_id=USER_ID, session_id=session_id, new_message=message):
        if not (event.content and event.content.parts):
            continue
        for part in event.content.parts:
            if getattr(part, "function_call", None):
                print(f"    · stripe tool {describe_call(part.function_call)}")
            elif getattr(part, "text", None):
                reply = part.text

    return reply


def read_request() -> Optional[str]:
    """Next non-empty request from the operator; None once they quit."""
    while True:
        try:
            text = input("\nbilling> ").strip()
        except (EOFError, KeyboardInterrupt):
            print()
            return None
        if text.lower() in QUIT_WORDS:
            return None
        if text:
            return text


async def run_agent() -> None:
    """Run the billing assistant interactively until the operator quits."""
    settings = load_settings()
    mode = stripe_mode(settings.stripe_secret_key)

    print(f"Stripe billing assistant ({mode} mode, model {settings.agent_model})")
    if mode == "live":
        print("Credit notes created here are issued to real customers.")
    print("Try, for example:")
    for example in EXAMPLE_REQUESTS:
        print(f"  - {example}")
    print(f"Type {' / '.join(sorted(QUIT_WORDS))} to leave.")

    agent = create_agent(settings.agent_model)
    session_service = InMemorySessionService()
    runner = Runner(agent=agent, app_name=APP_NAME, session_service=session_service)
    session = await session_service.create_session(app_name=APP_NAME, user_id=USER_ID)

    while True:
        request = read_request()
        if request is None:
            break
        reply = await ask(runner, session.id, request)
        print(f"\n{reply}" if reply else "\n(no reply; check the server log on stderr)")

    print("Session closed.")


if __name__ == "__main__":
    try:
        asyncio.run(run_agent())
    except ConfigurationError as exc:
        print(f"Fatal error: {exc}", file=sys.stderr)
        sys.exit(1)

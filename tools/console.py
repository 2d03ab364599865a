# =============================================================================
# tools/console.py  —  Diagnostic Logging (stderr only)
# =============================================================================
# We log to STDERR because the MCP server talks to its client over STDOUT
# (stdin/stdout is the MCP transport).  Anything written to stdout would
# corrupt the JSON-RPC stream.
#
# ANSI COLOR CODES:
#     - CYAN for incoming requests (tool name + parameters)
#     - YELLOW for milestones (query built, invoice fetched, ...)
#     - GREEN for responses
#     - RED for classified errors
# =============================================================================

import logging
import sys
from typing import Any, Mapping

from core.errors import ClassifiedError, format_params

_CYAN = "\033[36m"     # Requests (tool calls with params)
_GREEN = "\033[32m"    # Responses
_YELLOW = "\033[33m"   # Status/progress messages
_RED = "\033[31m"      # Errors
_RESET = "\033[0m"     # Reset to default terminal color

logger = logging.getLogger("billing_mcp")


def configure_logging(level: str = "INFO") -> None:
    """Send all log output to stderr.  Call once at startup."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [MCP] %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


def log_request(tool_name: str, params: Mapping[str, Any]) -> None:
    """Log an incoming tool call with its parameters in CYAN."""
    logger.info(f"{_CYAN}{tool_name} called with: {format_params(params)}{_RESET}")


def log_status(message: str) -> None:
    """Log an intermediate status message in YELLOW."""
    logger.info(f"{_YELLOW}  → {message}{_RESET}")


def log_response(tool_name: str, text: str) -> str:
    """Log the first line of a text response in GREEN, then return it."""
    first_line = text.splitlines()[0] if text else ""
    logger.info(f"{_GREEN}  ← {tool_name} response ({len(text)} chars): {first_line}{_RESET}")
    return text


def log_error(tool_name: str, error: BaseException, classified: ClassifiedError) -> None:
    """Log a classified failure in RED, with the original error object."""
    logger.error(
        f"{_RED}  ✗ {tool_name} failed [{classified.kind.name}]: {classified.message}{_RESET}",
        exc_info=error,
    )

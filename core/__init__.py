# =============================================================================
# core/__init__.py
# =============================================================================
# This package contains ALL billing logic for the Stripe MCP server.
#
# CRITICAL ARCHITECTURAL RULE:
#   Nothing in this package imports FastMCP, the MCP SDK, or Google ADK.
#   The only third-party library here is the Stripe SDK, and only
#   core/billing.py makes network calls with it.  Query building,
#   formatting and error classification are plain functions you can test
#   without a network or an API key.
# =============================================================================

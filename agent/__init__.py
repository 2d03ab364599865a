# =============================================================================
# agent/__init__.py
# =============================================================================
# This package contains the Google ADK billing assistant.
#
# ARCHITECTURAL ROLE:
#   The agent/ layer is a CLIENT of the MCP server.  It:
#     1. Receives the operator's request ("credit the invoice for order 1234")
#     2. Calls search_invoices / create_credit_note over MCP
#     3. Explains the results
#
#   It contains no billing logic (core/) and no tool code (tools/).
# =============================================================================

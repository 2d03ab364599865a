# =============================================================================
# tools/__init__.py
# =============================================================================
# This package is the MCP translation layer.
#
# ARCHITECTURAL ROLE:
#   tools/ sits between the MCP transport and core/.  It:
#     1. Validates raw tool arguments (schemas.py)
#     2. Dispatches to one handler per tool (operations.py)
#     3. Turns classified failures into McpError
#     4. Registers tools and resources with FastMCP (mcp_server.py)
#
# WHAT TOOLS DO NOT DO:
#   - They do NOT build queries, format text or classify errors
#     themselves (that's in core/)
#   - They do NOT talk to Stripe directly (core/billing.py does)
# =============================================================================

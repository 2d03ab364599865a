# =============================================================================
# tools/mcp_server.py  —  FastMCP Tool Server (ALL tools in one place)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Exposes the billing operations over MCP.  Each tool here is a thin
#   wrapper: it collects its arguments and hands them to
#   OperationRegistry.dispatch() (tools/operations.py), which validates,
#   calls Stripe, formats and classifies errors.
#
# HOW IT WORKS (the flow):
#   1. The assistant decides it needs billing data
#   2. It calls a tool by name via MCP (e.g., "search_invoices")
#   3. FastMCP routes the call to the wrapper function below
#   4. The function dispatches to the registry and returns its text
#   5. The assistant receives one text block, or an error text of the form
#        [InvalidParams] Invalid parameter 'limit': ... | context: {...}
#
# ARGUMENT TYPES:
#   The wrapper parameters are untyped.  Raw values are validated only by
#   the pydantic models in tools/schemas.py, and the schema advertised to
#   clients is generated from those same models.
#
# TOOL NAMING CONVENTIONS:
#   - search_* → Query with filters (read-only, safe to retry)
#   - create_* → Writes to Stripe (NOT safe to blindly retry; Stripe
#                rejects a second full credit note on the same invoice)
#
# RUNNING THIS SERVER:
#     a) Standalone:      python -m tools.mcp_server
#     b) Console script:  stripe-billing-mcp
#     c) Spawned over stdio by the assistant console (agent/billing_agent.py)
#   STRIPE_SECRET_KEY must be set, or the process exits before serving.
# =============================================================================

import logging
import sys
from typing import Any, Callable

from dotenv import load_dotenv
from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from fastmcp.server.middleware import Middleware, MiddlewareContext
from fastmcp.tools import Tool
from mcp.shared.exceptions import McpError
from pydantic import BaseModel

from core.billing import BillingGateway
from core.settings import SERVER_NAME, ConfigurationError, Settings, load_settings
from tools.console import configure_logging
from tools.operations import OperationRegistry, ResourceDescriptor, describe_protocol_error

INSTRUCTIONS = (
    "Stripe billing tools. Use search_invoices to find invoices by a metadata "
    "key:value pair, then create_credit_note with an invoice ID to fully credit it."
)


def _arguments(**params: Any) -> dict[str, Any]:
    """Drop parameters the client did not send."""
    return {k: v for k, v in params.items() if v is not None}


def input_schema(model: type[BaseModel]) -> dict[str, Any]:
    """JSON schema of a tool's input model, without the model's own title."""
    schema = model.model_json_schema()
    schema.pop("title", None)
    schema.pop("description", None)
    return schema


async def call_operation(registry: OperationRegistry, name: str, arguments: Any) -> str:
    """Dispatch one call; classified failures leave as ToolError text."""
    try:
        return await registry.dispatch(name, arguments)
    except McpError as exc:
        raise ToolError(describe_protocol_error(exc.error)) from exc


class UnknownToolMiddleware(Middleware):
    """Answers calls to unregistered tools with a MethodNotFound error."""

    def __init__(self, registry: OperationRegistry):
        self._registry = registry

    async def on_call_tool(self, context: MiddlewareContext, call_next):
        name = context.message.name
        if name not in self._registry.names():
            await call_operation(self._registry, name, context.message.arguments)
        return await call_next(context)


def _add_tool(mcp: FastMCP, registry: OperationRegistry, fn: Callable[..., Any]) -> None:
    operation = registry.get(fn.__name__)
    if operation is None:
        raise ValueError(f"No operation registered for tool: {fn.__name__}")
    tool = Tool.from_function(fn)
    mcp.add_tool(tool.model_copy(update={"parameters": input_schema(operation.input_model)}))


def _register_resource(mcp: FastMCP, registry: OperationRegistry, resource: ResourceDescriptor) -> None:
    def read_resource() -> str:
        return registry.read_resource(resource.uri)

    mcp.resource(
        resource.uri,
        name=resource.name,
        description=resource.description,
        mime_type=resource.mime_type,
    )(read_resource)


def build_server(registry: OperationRegistry, name: str = SERVER_NAME) -> FastMCP:
    """Create the FastMCP server and register every tool and resource."""
    mcp = FastMCP(name, instructions=INSTRUCTIONS)
    mcp.add_middleware(UnknownToolMiddleware(registry))

    # =========================================================================
    # TOOL 1: search_invoices
    # =========================================================================
    # The docstring is what the LLM reads to decide WHEN to call the tool,
    # so it spells out the metadata shorthand and the pagination contract.
    # =========================================================================
    async def search_invoices(metadata: Any = None, limit: Any = None, page: Any = None) -> str:
        """Search Stripe invoices by a metadata key/value pair.

        WHEN TO CALL THIS: To find the invoice(s) tied to an order, a user
        or any other identifier your system stores in invoice metadata.

        Only the first ':' separates key from value, so values may contain
        colons (URLs, timestamps).

        Returns:
            A text listing with, per invoice: ID, status, customer, total,
            amount due, created date, metadata and a hosted view link.
            When more results exist, the text ends with the page cursor to
            pass back as `page`.
        """
        return await call_operation(
            registry, "search_invoices", _arguments(metadata=metadata, limit=limit, page=page)
        )

    # =========================================================================
    # TOOL 2: create_credit_note
    # =========================================================================
    # A WRITE.  There is no amount parameter: the credit note always covers
    # the invoice's full total.
    # =========================================================================
    async def create_credit_note(invoice_id: Any = None, memo: Any = None, reason: Any = None) -> str:
        """Issue a credit note for the FULL total of a Stripe invoice.

        WHEN TO CALL THIS: After identifying the invoice (usually with
        search_invoices) and confirming with the user that it should be
        credited in full.  Partial credits are not supported.

        Returns:
            A text summary of the created credit note: amounts, related
            invoice/customer, reason and memo, timeline, line items and
            the PDF link.
        """
        return await call_operation(
            registry, "create_credit_note", _arguments(invoice_id=invoice_id, memo=memo, reason=reason)
        )

    for fn in (search_invoices, create_credit_note):
        _add_tool(mcp, registry, fn)

    for resource in registry.resources():
        _register_resource(mcp, registry, resource)

    return mcp


def create_server(settings: Settings) -> FastMCP:
    """Build the Stripe gateway and the server from loaded settings."""
    registry = OperationRegistry(BillingGateway(settings.stripe_secret_key))
    return build_server(registry, settings.server_name)


# =============================================================================
# Server entry point
# =============================================================================
# Configuration is checked BEFORE the transport starts: a missing key is a
# startup failure, never a per-call error.
# =============================================================================
def main() -> None:
    load_dotenv()
    try:
        settings = load_settings()
    except ConfigurationError as exc:
        print(f"Fatal error: {exc}", file=sys.stderr)
        sys.exit(1)

    configure_logging(settings.log_level)
    mcp = create_server(settings)
    logging.getLogger("billing_mcp").info(f"{settings.server_name} v{settings.server_version} started")
    mcp.run()


if __name__ == "__main__":
    main()

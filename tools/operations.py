# =============================================================================
# tools/operations.py  —  Operation Handlers & Dispatch
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Holds one handler object per tool and the registry that dispatches to
#   them by name.  mcp_server.py only wires FastMCP to registry.dispatch();
#   every decision about a call is made here.
#
# HOW A CALL FLOWS:
#   1. registry.dispatch(name, arguments)
#   2. unknown name?              → METHOD_NOT_FOUND, nothing else runs
#   3. operation.validate(args)   → pydantic; bad input fails HERE, before
#                                   any Stripe request is made
#   4. operation.execute(...)     → awaits the Stripe gateway
#   5. operation.format(result)   → one text block (core/formatters.py)
#   Any failure in 3–5 is classified ONCE (core/errors.py) and raised as
#   an McpError.  An McpError raised inside a handler passes through as-is.
#
# ADDING A TOOL:
#   Subclass Operation, set name/description/input_model, implement
#   execute() and format(), and list it in default_operations().  The
#   dispatch code never changes.
# =============================================================================

import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from mcp.shared.exceptions import McpError
from mcp.types import ErrorData
from pydantic import BaseModel, ValidationError

from core.billing import BillingGateway
from core.errors import ClassifiedError, ErrorKind, OperationError, classify_error, safe_params
from core.formatters import format_credit_note, format_invoice_list
from core.models import CreditNoteResult, InvoiceSearchPage
from core.query import build_metadata_query
from tools.console import log_error, log_request, log_response, log_status
from tools.schemas import CreateCreditNoteInput, SearchInvoicesInput, describe_validation_error


def to_mcp_error(classified: ClassifiedError) -> McpError:
    """Wrap a classified failure in the protocol error the client receives."""
    return McpError(
        ErrorData(
            code=classified.kind.code,
            message=classified.message,
            data=classified.context or None,
        )
    )


def describe_protocol_error(error: ErrorData) -> str:
    """Render a protocol error as "[Kind] message | context: {...}" text."""
    try:
        label = ErrorKind(error.code).label
    except ValueError:
        label = f"Error {error.code}"
    text = f"[{label}] {error.message}"
    if error.data:
        text += f" | context: {json.dumps(error.data, sort_keys=True, default=str)}"
    return text


class Operation:
    """Base class for a tool handler: validate → execute → format."""

    name: str = ""
    description: str = ""
    input_model: type[BaseModel] = BaseModel

    def validate(self, arguments: Any) -> BaseModel:
        if arguments is None:
            arguments = {}
        if not isinstance(arguments, Mapping):
            raise OperationError(ErrorKind.INVALID_PARAMS, "Tool arguments must be an object")
        try:
            return self.input_model.model_validate(dict(arguments))
        except ValidationError as exc:
            raise OperationError(ErrorKind.INVALID_PARAMS, describe_validation_error(exc)) from exc

    async def execute(self, gateway: BillingGateway, request: BaseModel) -> Any:
        raise NotImplementedError

    def format(self, result: Any) -> str:
        raise NotImplementedError

    def context(self, request: BaseModel) -> dict[str, Any]:
        """Parameters attached to error details for traceability."""
        return request.model_dump(exclude_none=True)


# -----------------------------------------------------------------------------
# search_invoices
# -----------------------------------------------------------------------------
class SearchInvoices(Operation):
    name = "search_invoices"
    description = "Search Stripe invoices by one metadata key:value pair."
    input_model = SearchInvoicesInput

    async def execute(self, gateway: BillingGateway, request: SearchInvoicesInput) -> InvoiceSearchPage:
        query = build_metadata_query(request.metadata)
        log_status(f"Searching invoices: query={query} limit={request.limit} page={request.page}")
        page = await gateway.search_invoices(query, request.limit, request.page)
        log_status(f"Found {len(page.invoices)} invoices (has_more={page.has_more})")
        return page

    def format(self, result: InvoiceSearchPage) -> str:
        return format_invoice_list(result)


# -----------------------------------------------------------------------------
# create_credit_note
# -----------------------------------------------------------------------------
# FULL CREDIT ONLY: the credit amount is always the fetched invoice's
# total.  The input contract has no amount field, and even if one were
# added it would not reach Stripe from here.
# -----------------------------------------------------------------------------
class CreateCreditNote(Operation):
    name = "create_credit_note"
    description = "Issue a credit note for the full total of a Stripe invoice."
    input_model = CreateCreditNoteInput

    async def execute(self, gateway: BillingGateway, request: CreateCreditNoteInput) -> CreditNoteResult:
        log_status(f"Fetching invoice {request.invoice_id}")
        invoice = await gateway.retrieve_invoice(request.invoice_id)
        if invoice.total is None:
            raise OperationError(
                ErrorKind.INTERNAL_ERROR,
                f"Invoice {request.invoice_id} has no total; cannot issue a credit note.",
                {"invoice_id": request.invoice_id},
            )
        log_status(f"Invoice {invoice.id} fetched: status={invoice.status} total={invoice.total} {invoice.currency}")

        note = await gateway.create_credit_note(
            request.invoice_id,
            amount=invoice.total,
            memo=request.memo,
            reason=request.reason,
        )
        log_status(f"Credit note {note.id} created for invoice {request.invoice_id}")
        return note

    def format(self, result: CreditNoteResult) -> str:
        return format_credit_note(result)

    def context(self, request: CreateCreditNoteInput) -> dict[str, Any]:
        return request.model_dump(include={"invoice_id", "memo", "reason"}, exclude_none=True)


# -----------------------------------------------------------------------------
# Resources
# -----------------------------------------------------------------------------
# Static and immutable: built once at import, never modified.
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class ResourceDescriptor:
    uri: str
    name: str
    description: str
    mime_type: str
    text: str


TOOL_GUIDE = """\
Stripe billing tools

search_invoices
  metadata  (required)  one "key:value" pair, e.g. order_id:1234
                        only the first ':' separates key from value,
                        so values such as URLs may contain ':'
  limit     (optional)  1-100, default 10; larger values are clamped to 100
  page      (optional)  continuation cursor returned by a previous search

create_credit_note
  invoice_id (required) a Stripe invoice ID, e.g. in_1A2b3C
  memo       (optional) note printed on the credit note
  reason     (optional) duplicate | fraudulent | order_change | product_unsatisfactory
  The credit note always covers the invoice's full total.
"""

RESOURCES: tuple[ResourceDescriptor, ...] = (
    ResourceDescriptor(
        uri="billing://tools/guide",
        name="Billing tools guide",
        description="How to call search_invoices and create_credit_note.",
        mime_type="text/plain",
        text=TOOL_GUIDE,
    ),
)


def default_operations() -> list[Operation]:
    return [SearchInvoices(), CreateCreditNote()]


class OperationRegistry:
    """Maps tool names to handlers and resource URIs to static content."""

    def __init__(
        self,
        gateway: BillingGateway,
        operations: Optional[Iterable[Operation]] = None,
        resources: Iterable[ResourceDescriptor] = RESOURCES,
    ):
        self._gateway = gateway
        self._operations: dict[str, Operation] = {}
        for operation in default_operations() if operations is None else operations:
            self.register(operation)
        self._resources = {resource.uri: resource for resource in resources}

    def register(self, operation: Operation) -> None:
        if operation.name in self._operations:
            raise ValueError(f"Tool already registered: {operation.name}")
        self._operations[operation.name] = operation

    def names(self) -> list[str]:
        return list(self._operations)

    def get(self, name: str) -> Optional[Operation]:
        return self._operations.get(name)

    def resources(self) -> list[ResourceDescriptor]:
        return list(self._resources.values())

    async def dispatch(self, name: str, arguments: Any = None) -> str:
        operation = self._operations.get(name)
        if operation is None:
            raise McpError(ErrorData(code=ErrorKind.METHOD_NOT_FOUND.code, message=f"Unknown tool: {name}"))

        raw = {str(k): v for k, v in arguments.items()} if isinstance(arguments, Mapping) else {}
        log_request(name, raw)

        context = safe_params(raw)
        try:
            request = operation.validate(arguments)
            context = operation.context(request)
            result = await operation.execute(self._gateway, request)
            return log_response(name, operation.format(result))
        except McpError:
            raise
        except Exception as exc:
            classified = classify_error(exc, context)
            log_error(name, exc, classified)
            raise to_mcp_error(classified) from exc

    def read_resource(self, uri: str) -> str:
        resource = self._resources.get(uri)
        if resource is None:
            raise McpError(ErrorData(code=ErrorKind.INVALID_REQUEST.code, message=f"Unknown resource: {uri}"))
        return resource.text

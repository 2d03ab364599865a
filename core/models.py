# =============================================================================
# core/models.py  —  Data Models (read-only views over Stripe records)
# =============================================================================
#
# These dataclasses are the *shape* of every Stripe record that flows
# through the system.  Stripe objects are large and deeply nested; the
# tools only ever need a handful of fields, so each view copies exactly
# those fields and nothing else.
#
# "FROM_STRIPE" CONSTRUCTORS:
#   Every view has a from_stripe() classmethod.  It accepts either a real
#   stripe.StripeObject or a plain dict (which is what the tests use), so
#   the rest of core/ never touches the Stripe SDK types directly.
#
# All views are frozen: nothing in this system mutates a Stripe record.
# =============================================================================

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Optional


def _get(record: Any, key: str, default: Any = None) -> Any:
    """Read one field from a Stripe object or a mapping."""
    if record is None:
        return default
    if isinstance(record, Mapping):
        value = record.get(key, default)
    else:
        value = getattr(record, key, default)
    return default if value is None else value


def _items(record: Any) -> list:
    """Unwrap a Stripe list object (``{"data": [...]}``) or a plain list."""
    if record is None:
        return []
    if isinstance(record, (list, tuple)):
        return list(record)
    return list(_get(record, "data", []) or [])


# -----------------------------------------------------------------------------
# InvoiceSummary — one row in a search result
# -----------------------------------------------------------------------------
# The customer is requested with expand=["data.customer"], so `customer`
# is usually a full Customer object.  When it isn't expanded it is just
# an id string, and we fall back to the invoice's own customer_name /
# customer_email snapshot fields.
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class InvoiceSummary:
    """The invoice fields the search tool renders."""

    id: str
    status: Optional[str] = None
    customer_id: Optional[str] = None
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    total: Optional[int] = None            # Minor currency units (cents)
    amount_due: Optional[int] = None
    currency: str = ""
    created: Optional[int] = None          # Unix seconds
    metadata: dict[str, str] = field(default_factory=dict)
    hosted_invoice_url: Optional[str] = None

    @classmethod
    def from_stripe(cls, invoice: Any) -> "InvoiceSummary":
        customer = _get(invoice, "customer")
        if isinstance(customer, str) or customer is None:
            customer_id = customer
            customer_name = _get(invoice, "customer_name")
            customer_email = _get(invoice, "customer_email")
        else:
            customer_id = _get(customer, "id")
            customer_name = _get(customer, "name") or _get(invoice, "customer_name")
            customer_email = _get(customer, "email") or _get(invoice, "customer_email")

        metadata = _get(invoice, "metadata") or {}
        return cls(
            id=_get(invoice, "id", ""),
            status=_get(invoice, "status"),
            customer_id=customer_id,
            customer_name=customer_name,
            customer_email=customer_email,
            total=_get(invoice, "total"),
            amount_due=_get(invoice, "amount_due"),
            currency=_get(invoice, "currency", ""),
            created=_get(invoice, "created"),
            metadata={str(k): str(v) for k, v in dict(metadata).items()},
            hosted_invoice_url=_get(invoice, "hosted_invoice_url"),
        )


@dataclass(frozen=True)
class InvoiceSearchPage:
    """One page of invoice search results plus its continuation cursor."""

    query: str
    invoices: list[InvoiceSummary] = field(default_factory=list)
    has_more: bool = False
    next_page: Optional[str] = None

    @classmethod
    def from_stripe(cls, query: str, result: Any) -> "InvoiceSearchPage":
        return cls(
            query=query,
            invoices=[InvoiceSummary.from_stripe(inv) for inv in _items(result)],
            has_more=bool(_get(result, "has_more", False)),
            next_page=_get(result, "next_page"),
        )


@dataclass(frozen=True)
class CreditNoteLineItem:
    description: Optional[str] = None
    amount: Optional[int] = None
    quantity: Optional[int] = None
    unit_amount: Optional[int] = None

    @classmethod
    def from_stripe(cls, line: Any) -> "CreditNoteLineItem":
        return cls(
            description=_get(line, "description"),
            amount=_get(line, "amount"),
            quantity=_get(line, "quantity"),
            unit_amount=_get(line, "unit_amount"),
        )


# -----------------------------------------------------------------------------
# CreditNoteResult — what create_credit_note renders back to the caller
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class CreditNoteResult:
    """A freshly created credit note."""

    id: str
    number: Optional[str] = None
    status: Optional[str] = None
    amount: Optional[int] = None
    subtotal: Optional[int] = None
    discount_amount: Optional[int] = None
    total: Optional[int] = None
    currency: str = ""
    invoice_id: Optional[str] = None
    customer_id: Optional[str] = None
    reason: Optional[str] = None
    memo: Optional[str] = None
    lines: list[CreditNoteLineItem] = field(default_factory=list)
    pdf: Optional[str] = None
    created: Optional[int] = None
    effective_at: Optional[int] = None

    @classmethod
    def from_stripe(cls, note: Any) -> "CreditNoteResult":
        invoice = _get(note, "invoice")
        customer = _get(note, "customer")
        return cls(
            id=_get(note, "id", ""),
            number=_get(note, "number"),
            status=_get(note, "status"),
            amount=_get(note, "amount"),
            subtotal=_get(note, "subtotal"),
            discount_amount=_get(note, "discount_amount"),
            total=_get(note, "total"),
            currency=_get(note, "currency", ""),
            invoice_id=invoice if isinstance(invoice, str) or invoice is None else _get(invoice, "id"),
            customer_id=customer if isinstance(customer, str) or customer is None else _get(customer, "id"),
            reason=_get(note, "reason"),
            memo=_get(note, "memo"),
            lines=[CreditNoteLineItem.from_stripe(line) for line in _items(_get(note, "lines"))],
            pdf=_get(note, "pdf"),
            created=_get(note, "created"),
            effective_at=_get(note, "effective_at"),
        )

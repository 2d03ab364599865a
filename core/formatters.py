# =============================================================================
# core/formatters.py  —  Text Rendering for Tool Responses
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Turns the views from core/models.py into the plain text the assistant
#   reads.  Every tool response is ONE text block built here.
#
# RULES EVERY FORMATTER FOLLOWS:
#   - Pure and total: no I/O, never raises, missing values render "N/A".
#   - Deterministic: same record in, same bytes out.  Timestamps come only
#     from record fields and are always rendered in UTC, so the output
#     does not depend on the host's clock or time zone.
#   - Money is stored by Stripe in minor units (cents) and rendered with
#     integer arithmetic, never floats.
# =============================================================================

from datetime import datetime, timezone
from typing import Optional

from core.models import CreditNoteResult, InvoiceSearchPage, InvoiceSummary

PLACEHOLDER = "N/A"


def format_amount(amount: Optional[int], currency: Optional[str]) -> str:
    """Render minor currency units as ``"123.45 USD"``."""
    if amount is None or isinstance(amount, bool):
        return PLACEHOLDER
    try:
        amount = int(amount)
    except (TypeError, ValueError):
        return PLACEHOLDER
    sign = "-" if amount < 0 else ""
    major, minor = divmod(abs(amount), 100)
    code = (currency or "").upper()
    return f"{sign}{major}.{minor:02d} {code}".rstrip()


def format_timestamp(timestamp: Optional[int]) -> str:
    """Render Unix seconds as ``"Jan 02, 2024, 03:04:05 PM UTC"``."""
    if not timestamp or isinstance(timestamp, bool):
        return PLACEHOLDER
    try:
        moment = datetime.fromtimestamp(int(timestamp), tz=timezone.utc)
    except (TypeError, ValueError, OverflowError, OSError):
        return PLACEHOLDER
    return moment.strftime("%b %d, %Y, %I:%M:%S %p UTC")


def _customer_line(invoice: InvoiceSummary) -> str:
    if invoice.customer_name and invoice.customer_email:
        return f"{invoice.customer_name} ({invoice.customer_email})"
    return invoice.customer_name or invoice.customer_email or invoice.customer_id or PLACEHOLDER


def format_invoice(invoice: InvoiceSummary, position: int) -> list[str]:
    """Render one invoice as an indented block of lines."""
    lines = [
        f"{position}. Invoice {invoice.id}",
        f"   Status: {invoice.status or PLACEHOLDER}",
        f"   Customer: {_customer_line(invoice)}",
        f"   Total: {format_amount(invoice.total, invoice.currency)}",
        f"   Amount due: {format_amount(invoice.amount_due, invoice.currency)}",
        f"   Created: {format_timestamp(invoice.created)}",
    ]
    if invoice.metadata:
        pairs = ", ".join(f"{k}={v}" for k, v in sorted(invoice.metadata.items()))
        lines.append(f"   Metadata: {pairs}")
    if invoice.hosted_invoice_url:
        lines.append(f"   View: {invoice.hosted_invoice_url}")
    return lines


def format_invoice_list(page: InvoiceSearchPage) -> str:
    """Render a page of search results.

    Layout:
        header (count + query)
        one numbered block per invoice, or a not-found line
        hint line
        pagination line (only when Stripe reports more results)
    """
    count = len(page.invoices)
    noun = "invoice" if count == 1 else "invoices"
    lines = [f"Found {count} {noun} matching {page.query}"]

    if not page.invoices:
        lines.append("")
        lines.append("No invoices found with that metadata. Check the key and value and try again.")
        return "\n".join(lines)

    for position, invoice in enumerate(page.invoices, start=1):
        lines.append("")
        lines.extend(format_invoice(invoice, position))

    lines.append("")
    lines.append("Use create_credit_note with one of the invoice IDs above to issue a full credit note.")
    if page.has_more and page.next_page:
        lines.append(
            f'More results are available. Call search_invoices again with page="{page.next_page}" '
            "to fetch the next page."
        )
    return "\n".join(lines)


# -----------------------------------------------------------------------------
# Credit note detail
# -----------------------------------------------------------------------------
# Fixed sections, always in this order.  Optional sections are dropped
# entirely rather than rendered empty.
# -----------------------------------------------------------------------------
def format_credit_note(note: CreditNoteResult) -> str:
    """Render a created credit note as labeled sections."""
    cur = note.currency
    header = f"Credit note created: {note.id}"
    if note.number:
        header += f" ({note.number})"
    lines = [header, f"Status: {note.status or PLACEHOLDER}"]

    lines += ["", "Financial summary:"]
    lines.append(f"  Amount: {format_amount(note.amount, cur)}")
    lines.append(f"  Subtotal: {format_amount(note.subtotal, cur)}")
    if note.discount_amount:
        lines.append(f"  Discounts: {format_amount(note.discount_amount, cur)}")
    lines.append(f"  Total: {format_amount(note.total, cur)}")

    lines += ["", "Related:"]
    lines.append(f"  Invoice: {note.invoice_id or PLACEHOLDER}")
    lines.append(f"  Customer: {note.customer_id or PLACEHOLDER}")

    if note.reason or note.memo:
        lines += ["", "Details:"]
        if note.reason:
            lines.append(f"  Reason: {note.reason}")
        if note.memo:
            lines.append(f"  Memo: {note.memo}")

    lines += ["", "Timeline:"]
    lines.append(f"  Created: {format_timestamp(note.created)}")
    if note.effective_at:
        lines.append(f"  Effective at: {format_timestamp(note.effective_at)}")

    if note.lines:
        lines += ["", "Line items:"]
        for position, item in enumerate(note.lines, start=1):
            lines.append(f"  {position}. {item.description or 'No description'}")
            lines.append(f"     Amount: {format_amount(item.amount, cur)}")
            if item.quantity is not None:
                lines.append(f"     Quantity: {item.quantity}")
            if item.unit_amount is not None:
                lines.append(f"     Unit amount: {format_amount(item.unit_amount, cur)}")

    if note.pdf:
        lines += ["", f"Download PDF: {note.pdf}"]

    return "\n".join(lines)

# =============================================================================
# core/billing.py  —  Stripe Gateway
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   The ONLY module that talks to Stripe.  It wraps one long-lived
#   stripe.StripeClient and exposes the three calls the tools need, each
#   returning a view from core/models.py instead of a raw Stripe object.
#
# ASYNC:
#   Every method awaits Stripe's *_async API over the HTTPX client, so a
#   tool call suspends only while the network request is in flight.
#
# NO RETRIES:
#   max_network_retries=0.  Rate limits and transient failures are
#   surfaced to the caller (see core/errors.py), never absorbed here.
#
# Errors are NOT caught in this module.  stripe.StripeError propagates to
# the operation boundary, where it is classified exactly once.
# =============================================================================

from typing import Any, Optional

import stripe

from core.models import CreditNoteResult, InvoiceSearchPage, InvoiceSummary

# Expanding the customer lets the search results show name/email without
# a second round-trip per invoice.
INVOICE_SEARCH_EXPAND = ("data.customer",)


class BillingGateway:
    """Async access to the Stripe invoice and credit-note APIs."""

    def __init__(self, api_key: str, client: Optional[Any] = None):
        self._client = client or stripe.StripeClient(
            api_key,
            http_client=stripe.HTTPXClient(),
            max_network_retries=0,
        )

    async def search_invoices(self, query: str, limit: int, page: Optional[str] = None) -> InvoiceSearchPage:
        params: dict[str, Any] = {"query": query, "limit": limit, "expand": list(INVOICE_SEARCH_EXPAND)}
        if page:
            params["page"] = page
        result = await self._client.v1.invoices.search_async(params=params)
        return InvoiceSearchPage.from_stripe(query, result)

    async def retrieve_invoice(self, invoice_id: str) -> InvoiceSummary:
        invoice = await self._client.v1.invoices.retrieve_async(invoice_id)
        return InvoiceSummary.from_stripe(invoice)

    async def create_credit_note(
        self,
        invoice_id: str,
        amount: int,
        memo: Optional[str] = None,
        reason: Optional[str] = None,
    ) -> CreditNoteResult:
        params: dict[str, Any] = {"invoice": invoice_id, "amount": amount}
        if memo:
            params["memo"] = memo
        if reason:
            params["reason"] = reason
        note = await self._client.v1.credit_notes.create_async(params=params)
        return CreditNoteResult.from_stripe(note)

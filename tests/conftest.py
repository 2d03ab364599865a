from typing import Optional

import pytest

from core.models import CreditNoteLineItem, CreditNoteResult, InvoiceSearchPage, InvoiceSummary
from tools.operations import OperationRegistry

CREATED_AT = 1704207845  # Jan 02, 2024, 03:04:05 PM UTC


class FakeGateway:
    """Records calls and returns canned views instead of hitting Stripe."""

    def __init__(
        self,
        page: Optional[InvoiceSearchPage] = None,
        invoice: Optional[InvoiceSummary] = None,
        note: Optional[CreditNoteResult] = None,
        search_error: Optional[Exception] = None,
        retrieve_error: Optional[Exception] = None,
        create_error: Optional[Exception] = None,
    ) -> None:
        self.page = page
        self.invoice = invoice
        self.note = note
        self.search_error = search_error
        self.retrieve_error = retrieve_error
        self.create_error = create_error
        self.calls: list[tuple] = []

    async def search_invoices(self, query, limit, page=None):
        self.calls.append(("search_invoices", query, limit, page))
        if self.search_error is not None:
            raise self.search_error
        return InvoiceSearchPage(
            query=query,
            invoices=list(self.page.invoices) if self.page else [],
            has_more=self.page.has_more if self.page else False,
            next_page=self.page.next_page if self.page else None,
        )

    async def retrieve_invoice(self, invoice_id):
        self.calls.append(("retrieve_invoice", invoice_id))
        if self.retrieve_error is not None:
            raise self.retrieve_error
        return self.invoice

    async def create_credit_note(self, invoice_id, amount, memo=None, reason=None):
        self.calls.append(("create_credit_note", invoice_id, amount, memo, reason))
        if self.create_error is not None:
            raise self.create_error
        return self.note


@pytest.fixture
def paid_invoice() -> InvoiceSummary:
    return InvoiceSummary(
        id="in_123",
        status="paid",
        customer_id="cus_9",
        customer_name="Ada Lovelace",
        customer_email="ada@example.com",
        total=5000,
        amount_due=0,
        currency="usd",
        created=CREATED_AT,
        metadata={"order_id": "1234"},
        hosted_invoice_url="https://invoice.stripe.com/i/in_123",
    )


@pytest.fixture
def credit_note() -> CreditNoteResult:
    return CreditNoteResult(
        id="cn_1",
        number="ABC-0001-CN-01",
        status="issued",
        amount=5000,
        subtotal=5000,
        discount_amount=0,
        total=5000,
        currency="usd",
        invoice_id="in_123",
        customer_id="cus_9",
        reason="duplicate",
        memo="Charged twice",
        lines=[
            CreditNoteLineItem(description="Pro plan", amount=5000, quantity=1, unit_amount=5000),
            CreditNoteLineItem(amount=0),
        ],
        pdf="https://pay.stripe.com/cn.pdf",
        created=CREATED_AT,
    )


@pytest.fixture
def gateway(paid_invoice, credit_note) -> FakeGateway:
    return FakeGateway(
        page=InvoiceSearchPage(query="", invoices=[paid_invoice]),
        invoice=paid_invoice,
        note=credit_note,
    )


@pytest.fixture
def registry(gateway) -> OperationRegistry:
    return OperationRegistry(gateway)

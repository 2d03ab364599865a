import asyncio
from types import SimpleNamespace

from core.billing import BillingGateway


class _Endpoint:
    def __init__(self, result) -> None:
        self.result = result
        self.calls: list = []

    async def search_async(self, params):
        self.calls.append(("search", params))
        return self.result

    async def retrieve_async(self, invoice_id):
        self.calls.append(("retrieve", invoice_id))
        return self.result

    async def create_async(self, params):
        self.calls.append(("create", params))
        return self.result


def _client(invoices=None, credit_notes=None):
    return SimpleNamespace(v1=SimpleNamespace(invoices=invoices, credit_notes=credit_notes))


def test_search_expands_customer_and_forwards_cursor() -> None:
    invoices = _Endpoint({"data": [{"id": "in_1", "total": 100}], "has_more": False})
    gateway = BillingGateway("sk_test_123", client=_client(invoices=invoices))

    page = asyncio.run(gateway.search_invoices("metadata['a']:'b'", 25, "cur_9"))

    assert invoices.calls == [
        (
            "search",
            {"query": "metadata['a']:'b'", "limit": 25, "expand": ["data.customer"], "page": "cur_9"},
        )
    ]
    assert page.query == "metadata['a']:'b'"
    assert page.invoices[0].total == 100


def test_search_without_cursor_omits_page() -> None:
    invoices = _Endpoint({"data": []})
    gateway = BillingGateway("sk_test_123", client=_client(invoices=invoices))

    asyncio.run(gateway.search_invoices("q", 10))

    assert "page" not in invoices.calls[0][1]


def test_retrieve_and_create_credit_note() -> None:
    invoices = _Endpoint({"id": "in_1", "total": 4200, "currency": "usd"})
    credit_notes = _Endpoint({"id": "cn_1", "invoice": "in_1", "total": 4200})
    gateway = BillingGateway("sk_test_123", client=_client(invoices=invoices, credit_notes=credit_notes))

    invoice = asyncio.run(gateway.retrieve_invoice("in_1"))
    note = asyncio.run(gateway.create_credit_note("in_1", amount=invoice.total, reason="duplicate"))

    assert invoices.calls == [("retrieve", "in_1")]
    assert credit_notes.calls == [("create", {"invoice": "in_1", "amount": 4200, "reason": "duplicate"})]
    assert note.id == "cn_1"

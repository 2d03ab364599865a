from types import SimpleNamespace

import pytest

import main


@pytest.mark.parametrize(
    ("key", "mode"),
    [("sk_test_123", "test"), ("rk_test_123", "test"), ("sk_live_123", "live"), ("rk_live_123", "live")],
)
def test_stripe_mode_from_key_prefix(key, mode) -> None:
    assert main.stripe_mode(key) == mode


def test_describe_call_lists_arguments() -> None:
    call = SimpleNamespace(name="create_credit_note", args={"invoice_id": "in_123"})

    assert main.describe_call(call) == "create_credit_note(invoice_id=in_123)"
    assert main.describe_call(SimpleNamespace(name="search_invoices", args=None)) == "search_invoices()"


def test_read_request_skips_blank_lines_and_stops_on_quit(monkeypatch) -> None:
    lines = iter(["", "   ", " find order_id:1 ", "QUIT"])
    monkeypatch.setattr("builtins.input", lambda prompt="": next(lines))

    assert main.read_request() == "find order_id:1"
    assert main.read_request() is None


def test_read_request_stops_at_end_of_input(monkeypatch) -> None:
    def closed(prompt=""):
        raise EOFError

    monkeypatch.setattr("builtins.input", closed)

    assert main.read_request() is None

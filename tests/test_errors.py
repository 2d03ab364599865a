import stripe

from core.errors import ErrorKind, OperationError, RemoteFailure, classify_error
from core.query import InvalidQueryError


def _invalid_request(message: str, code: str = "resource_missing", status: int = 400) -> stripe.StripeError:
    return stripe.InvalidRequestError(
        message,
        "invoice",
        code=code,
        http_status=status,
        json_body={"error": {"type": "invalid_request_error", "message": message, "code": code}},
        headers={"request-id": "req_abc"},
    )


def test_already_classified_error_passes_through() -> None:
    error = OperationError(ErrorKind.METHOD_NOT_FOUND, "Unknown tool: nope")

    assert classify_error(error) is error.classified


def test_not_paid_gets_specific_message() -> None:
    classified = classify_error(
        _invalid_request("Invoice in_123 is not paid.", code="invoice_not_paid"),
        {"invoice_id": "in_123"},
    )

    assert classified.kind is ErrorKind.INVALID_PARAMS
    assert classified.message.startswith("This invoice is not paid.")
    assert "Invalid request to Stripe" not in classified.message
    assert "invoice_id=in_123" in classified.message
    assert classified.context["request_id"] == "req_abc"
    assert classified.context["http_status"] == 400


def test_missing_invoice_and_duplicate_credit_messages() -> None:
    missing = classify_error(_invalid_request("No such invoice: 'in_404'", status=404))
    duplicate = classify_error(_invalid_request("Invoice in_1 already has a credit note for its full amount."))

    assert missing.kind is ErrorKind.INVALID_PARAMS
    assert missing.message.startswith("Invoice not found.")
    assert duplicate.message.startswith("This invoice has already been credited.")


def test_generic_invalid_request_carries_detail_line() -> None:
    classified = classify_error(_invalid_request("Invalid integer: abc", code="parameter_invalid_integer"))

    assert classified.kind is ErrorKind.INVALID_PARAMS
    assert classified.message == (
        "Invalid request to Stripe: Invalid integer: abc | type: invalid_request_error"
        " | code: parameter_invalid_integer | status: 400 | request_id: req_abc"
    )


def test_authentication_permission_and_rate_limit_are_internal() -> None:
    auth = classify_error(stripe.AuthenticationError("Invalid API Key provided", http_status=401))
    perm = classify_error(stripe.PermissionError("Not allowed", http_status=403))
    rate = classify_error(stripe.RateLimitError("Too many requests", http_status=429))

    assert {auth.kind, perm.kind, rate.kind} == {ErrorKind.INTERNAL_ERROR}
    assert "STRIPE_SECRET_KEY" in auth.message
    assert "permissions" in perm.message
    assert "retry" in rate.message


def test_unknown_stripe_error_uses_detail_line() -> None:
    error = stripe.APIError(
        "Something broke",
        http_status=500,
        json_body={"error": {"type": "api_error", "message": "Something broke"}},
    )
    classified = classify_error(error, {"metadata": "order_id:1"})

    assert classified.kind is ErrorKind.INTERNAL_ERROR
    assert classified.message == (
        "Stripe error: Something broke | type: api_error | code: N/A | status: 500"
        " | params: metadata=order_id:1"
    )


def test_credentials_never_echoed() -> None:
    classified = classify_error(
        stripe.APIError("boom", http_status=500),
        {"invoice_id": "in_1", "api_key": "sk_live_secret", "stripe_secret_key": "sk_live_secret"},
    )

    assert "sk_live_secret" not in classified.message
    assert "invoice_id=in_1" in classified.message


def test_subtype_is_derived_from_fields() -> None:
    assert RemoteFailure.from_stripe_error(stripe.StripeError("x", http_status=401)).subtype == "authentication_error"
    assert RemoteFailure.from_stripe_error(stripe.StripeError("x", http_status=429)).subtype == "rate_limit_error"
    assert RemoteFailure.from_stripe_error(stripe.StripeError("x", http_status=404)).subtype == "invalid_request_error"
    assert RemoteFailure.from_stripe_error(stripe.StripeError("x")).subtype == "api_error"


def test_metadata_validation_error_is_invalid_params() -> None:
    classified = classify_error(InvalidQueryError("Invalid metadata format: 'x'"))

    assert classified.kind is ErrorKind.INVALID_PARAMS
    assert classified.message == "Invalid metadata format: 'x'"


def test_unexpected_exception_and_non_exception() -> None:
    unexpected = classify_error(RuntimeError("boom"))
    weird = classify_error("not an exception")

    assert unexpected.kind is ErrorKind.INTERNAL_ERROR
    assert unexpected.message == "Unexpected error: RuntimeError: boom"
    assert weird.message == "An unexpected error occurred"

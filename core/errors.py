# =============================================================================
# core/errors.py  —  Error Taxonomy & Classifier
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Every failure a tool can hit ends up here exactly once and comes out
#   as a ClassifiedError: one of four kinds plus a message the assistant
#   can act on.
#
# THE TAXONOMY (JSON-RPC error codes, as used by MCP):
#   INVALID_PARAMS   -32602  caller can fix it (bad input, Stripe rejected
#                            the request for a reason tied to the input)
#   METHOD_NOT_FOUND -32601  unknown tool name
#   INVALID_REQUEST  -32600  unknown resource URI
#   INTERNAL_ERROR   -32603  everything else (auth, permissions, rate
#                            limits, unknown Stripe errors, bugs)
#
# PRECEDENCE (first rule wins):
#   1. Already classified          → returned unchanged
#   2. Stripe error                → by RemoteFailure.subtype
#   3. Metadata query error        → INVALID_PARAMS, message verbatim
#   4. Anything else               → INTERNAL_ERROR
#
# Stripe failures are classified by a discriminant FIELD (subtype), not by
# catching concrete stripe exception classes.  The subtype is derived from
# the HTTP status and the error body, which is what Stripe actually sends.
# =============================================================================

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional

import stripe

from core.query import InvalidQueryError

PLACEHOLDER = "N/A"

# Parameter names that must never be echoed back to the caller or logged.
_SECRET_MARKERS = ("key", "secret", "token", "password")


class ErrorKind(Enum):
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603

    @property
    def code(self) -> int:
        return self.value

    @property
    def label(self) -> str:
        """CamelCase name shown to callers, e.g. "InvalidParams"."""
        return "".join(part.capitalize() for part in self.name.split("_"))


@dataclass(frozen=True)
class ClassifiedError:
    """A failure ready to be shown to the caller."""

    kind: ErrorKind
    message: str
    context: dict[str, Any] = field(default_factory=dict)


class OperationError(Exception):
    """An error that has already been classified.

    Raised by handlers for input problems they detect themselves; the
    classifier passes it through untouched.
    """

    def __init__(self, kind: ErrorKind, message: str, context: Optional[dict] = None):
        super().__init__(message)
        self.classified = ClassifiedError(kind=kind, message=message, context=dict(context or {}))

    @property
    def kind(self) -> ErrorKind:
        return self.classified.kind


# -----------------------------------------------------------------------------
# RemoteFailure — the discriminated view of a Stripe error
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class RemoteFailure:
    subtype: str
    message: str
    code: Optional[str] = None
    http_status: Optional[int] = None
    request_id: Optional[str] = None
    param: Optional[str] = None

    @classmethod
    def from_stripe_error(cls, error: stripe.StripeError) -> "RemoteFailure":
        body = getattr(error, "error", None)
        body_type = getattr(body, "type", None) if body is not None else None
        code = getattr(error, "code", None) or getattr(body, "code", None)
        status = getattr(error, "http_status", None)

        if status == 401:
            subtype = "authentication_error"
        elif status == 403:
            subtype = "permission_error"
        elif status == 429 or code == "rate_limit":
            subtype = "rate_limit_error"
        else:
            subtype = body_type or ("invalid_request_error" if status in (400, 404) else "api_error")

        message = getattr(error, "user_message", None) or str(error) or "Stripe request failed"
        return cls(
            subtype=subtype,
            message=message,
            code=code,
            http_status=status,
            request_id=getattr(error, "request_id", None),
            param=getattr(error, "param", None) or getattr(body, "param", None),
        )

    def detail_line(self, params: Optional[Mapping[str, Any]] = None) -> str:
        parts = [self.message, f"type: {self.subtype}", f"code: {self.code or PLACEHOLDER}"]
        if self.http_status is not None:
            parts.append(f"status: {self.http_status}")
        if self.request_id:
            parts.append(f"request_id: {self.request_id}")
        line = " | ".join(parts)
        rendered = format_params(params)
        if rendered:
            line += f" | params: {rendered}"
        return line

    def context(self) -> dict[str, Any]:
        ctx: dict[str, Any] = {"type": self.subtype}
        if self.request_id:
            ctx["request_id"] = self.request_id
        if self.http_status is not None:
            ctx["http_status"] = self.http_status
        if self.param:
            ctx["param"] = self.param
        return ctx


def safe_params(params: Optional[Mapping[str, Any]]) -> dict[str, Any]:
    """Drop empty values and anything that looks like a credential."""
    if not params:
        return {}
    return {
        k: v
        for k, v in params.items()
        if v is not None and not any(marker in str(k).lower() for marker in _SECRET_MARKERS)
    }


def format_params(params: Optional[Mapping[str, Any]]) -> str:
    return ", ".join(f"{k}={v}" for k, v in safe_params(params).items())


# -----------------------------------------------------------------------------
# Invalid-request specialisations
# -----------------------------------------------------------------------------
# Checked in order against the Stripe message; the first match wins.  The
# generic fallback is only used when none of these match.
# -----------------------------------------------------------------------------
_INVALID_REQUEST_PATTERNS: tuple[tuple[str, str], ...] = (
    (
        "No such invoice",
        "Invoice not found. Check that the invoice ID is correct and belongs to this Stripe account.",
    ),
    (
        "already has a credit note",
        "This invoice has already been credited. A credit note covering its total already exists.",
    ),
    (
        "not paid",
        "This invoice is not paid. Credit notes for the full amount can only be issued on paid invoices.",
    ),
)


def _classify_remote(failure: RemoteFailure, params: Optional[Mapping[str, Any]]) -> ClassifiedError:
    detail = failure.detail_line(params)
    context = failure.context()

    if failure.subtype == "invalid_request_error":
        for pattern, message in _INVALID_REQUEST_PATTERNS:
            if pattern.lower() in failure.message.lower():
                return ClassifiedError(ErrorKind.INVALID_PARAMS, f"{message} ({detail})", context)
        return ClassifiedError(ErrorKind.INVALID_PARAMS, f"Invalid request to Stripe: {detail}", context)

    if failure.subtype == "authentication_error":
        message = "Stripe authentication failed. Check that STRIPE_SECRET_KEY is set to a valid secret key."
    elif failure.subtype == "permission_error":
        message = "The configured Stripe key does not have the permissions required for this operation."
    elif failure.subtype == "rate_limit_error":
        message = "Stripe rate limit reached. Wait a few seconds and retry the request."
    else:
        return ClassifiedError(ErrorKind.INTERNAL_ERROR, f"Stripe error: {detail}", context)
    return ClassifiedError(ErrorKind.INTERNAL_ERROR, f"{message} ({detail})", context)


def classify_error(error: Any, params: Optional[Mapping[str, Any]] = None) -> ClassifiedError:
    """Map any failure onto the error taxonomy.

    Args:
        error: Whatever was raised (normally an exception).
        params: The operation's input parameters, appended to Stripe
            error details for traceability.  Credential-like keys are
            never included.

    Returns:
        A ClassifiedError.  This function itself never raises.
    """
    if isinstance(error, OperationError):
        return error.classified

    if isinstance(error, stripe.StripeError):
        return _classify_remote(RemoteFailure.from_stripe_error(error), params)

    if isinstance(error, InvalidQueryError) or (
        isinstance(error, ValueError) and "metadata" in str(error).lower()
    ):
        return ClassifiedError(ErrorKind.INVALID_PARAMS, str(error))

    if isinstance(error, BaseException):
        return ClassifiedError(
            ErrorKind.INTERNAL_ERROR,
            f"Unexpected error: {type(error).__name__}: {error}",
        )
    return ClassifiedError(ErrorKind.INTERNAL_ERROR, "An unexpected error occurred")

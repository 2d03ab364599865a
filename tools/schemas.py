# =============================================================================
# tools/schemas.py  —  Input Contracts for Each Tool
# =============================================================================
#
# The JSON schema a client sees is ADVISORY: nothing in the transport
# enforces it.  So every tool re-validates its raw arguments here with
# pydantic before anything touches Stripe.
#
# STRICTNESS:
#   String parameters are StrictStr, so a number or a list is rejected
#   instead of being silently turned into "123" or "['a']".  `limit` must
#   be a real number (booleans are rejected even though bool is an int).
# =============================================================================

import re
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr, ValidationError, field_validator

DEFAULT_SEARCH_LIMIT = 10
MAX_SEARCH_LIMIT = 100

INVOICE_ID_PATTERN = re.compile(r"^in_[A-Za-z0-9]+$")

CreditNoteReason = Literal["duplicate", "fraudulent", "order_change", "product_unsatisfactory"]


class SearchInvoicesInput(BaseModel):
    """Arguments for search_invoices."""

    model_config = ConfigDict(frozen=True)

    metadata: StrictStr = Field(description="One metadata filter as 'key:value', e.g. 'order_id:1234'.")
    limit: int = Field(
        default=DEFAULT_SEARCH_LIMIT,
        ge=1,
        le=MAX_SEARCH_LIMIT,
        description="Results per page, 1-100 (default 10). Larger values are clamped to 100.",
    )
    page: Optional[StrictStr] = Field(
        default=None, description="Continuation cursor from a previous search_invoices call."
    )

    @field_validator("metadata")
    @classmethod
    def _metadata_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("metadata must not be empty; expected 'key:value'")
        return value

    @field_validator("limit", mode="before")
    @classmethod
    def _clamp_limit(cls, value):
        # Anything above the maximum is clamped rather than rejected.
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError("limit must be a number between 1 and 100")
        if value > MAX_SEARCH_LIMIT:
            return MAX_SEARCH_LIMIT
        return value

    @field_validator("page")
    @classmethod
    def _blank_page_is_absent(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.strip() or None


class CreateCreditNoteInput(BaseModel):
    """Arguments for create_credit_note.  There is deliberately no amount."""

    model_config = ConfigDict(frozen=True)

    invoice_id: StrictStr = Field(
        description="Stripe invoice ID, e.g. in_1A2b3C.",
        json_schema_extra={"pattern": INVOICE_ID_PATTERN.pattern},
    )
    memo: Optional[StrictStr] = Field(default=None, description="Optional memo printed on the credit note.")
    reason: Optional[CreditNoteReason] = Field(default=None, description="Optional reason for the credit note.")

    @field_validator("invoice_id")
    @classmethod
    def _invoice_id_format(cls, value: str) -> str:
        value = value.strip()
        if not INVOICE_ID_PATTERN.match(value):
            raise ValueError("invoice_id must be a Stripe invoice ID like 'in_1A2b3C'")
        return value

    @field_validator("memo")
    @classmethod
    def _blank_memo_is_absent(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.strip() or None


def describe_validation_error(error: ValidationError) -> str:
    """Turn the first pydantic error into a one-line caller-facing message."""
    problems = error.errors()
    if not problems:
        return "Invalid parameters"
    first = problems[0]
    name = ".".join(str(part) for part in first.get("loc", ())) or "arguments"
    if first.get("type") == "missing":
        return f"Missing required parameter: {name}"
    message = str(first.get("msg", "invalid value"))
    if message.startswith("Value error, "):
        message = message[len("Value error, "):]
    return f"Invalid parameter '{name}': {message}"

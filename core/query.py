# =============================================================================
# core/query.py  —  Stripe Search Query Builder
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Turns the caller's "key:value" shorthand into Stripe's search grammar:
#
#       order_id:1234          →  metadata['order_id']:'1234'
#       url:https://x.com/a:b  →  metadata['url']:'https://x.com/a:b'
#
# This is the only place a caller-supplied string is embedded inside a
# quoted Stripe query.  A stray quote here either breaks the query (400
# from Stripe) or silently matches nothing, so the value is escaped.
# =============================================================================

SEPARATOR = ":"


class InvalidQueryError(ValueError):
    """The metadata shorthand could not be turned into a search query."""


def escape_query_value(value: str) -> str:
    """Escape backslashes and single quotes for a quoted Stripe query value."""
    return value.replace("\\", "\\\\").replace("'", "\\'")


def build_metadata_query(raw: str) -> str:
    """Build a Stripe invoice search query from a ``key:value`` string.

    Only the FIRST separator splits key from value; anything after it is
    part of the value (timestamps, URLs and the like keep their colons).

    Args:
        raw: The caller's metadata filter, e.g. ``"order_id:1234"``.

    Returns:
        The query fragment ``metadata['<key>']:'<value>'``.

    Raises:
        InvalidQueryError: No separator, or an empty key or value.
    """
    if not isinstance(raw, str) or SEPARATOR not in raw:
        raise InvalidQueryError(
            f"Invalid metadata format: {raw!r}. Expected 'key:value' (e.g. 'order_id:1234')."
        )

    key, value = raw.split(SEPARATOR, 1)
    key, value = key.strip(), value.strip()
    if not key:
        raise InvalidQueryError(f"Invalid metadata format: {raw!r}. The metadata key is empty.")
    if not value:
        raise InvalidQueryError(f"Invalid metadata format: {raw!r}. The metadata value is empty.")

    return f"metadata['{escape_query_value(key)}']:'{escape_query_value(value)}'"

import pytest

from core.query import InvalidQueryError, build_metadata_query


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("order_id:1234", "metadata['order_id']:'1234'"),
        ("  customer_ref : ABC-9  ", "metadata['customer_ref']:'ABC-9'"),
        ("url:https://x.com/a:b", "metadata['url']:'https://x.com/a:b'"),
        ("ts:2024-01-02T15:04:05Z", "metadata['ts']:'2024-01-02T15:04:05Z'"),
    ],
)
def test_builds_metadata_query(raw: str, expected: str) -> None:
    assert build_metadata_query(raw) == expected


def test_quotes_in_value_are_escaped() -> None:
    assert build_metadata_query("note:it's") == "metadata['note']:'it\\'s'"
    assert build_metadata_query("path:a\\b") == "metadata['path']:'a\\\\b'"


@pytest.mark.parametrize("raw", ["order_id", "", ":value", "key:", "  :  ", "key:   "])
def test_rejects_malformed_input(raw: str) -> None:
    with pytest.raises(InvalidQueryError) as exc_info:
        build_metadata_query(raw)
    assert "metadata" in str(exc_info.value).lower()


def test_invalid_query_error_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        build_metadata_query("nocolon")

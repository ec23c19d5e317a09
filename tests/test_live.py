"""
Live smoke tests against a real ap-games-api gateway.

Run with: python -m pytest tests/test_live.py -v -s
Requires: SQUIDEX_API_BASE_URL and SQUIDEX_TEST_SCHEMA environment variables
(a .env file in the project root is loaded by conftest.py).
"""

import os

import pytest

from squidex_cli import ErrorKind, SquidexClient, SquidexError

BASE_URL = os.environ.get("SQUIDEX_API_BASE_URL")
SCHEMA = os.environ.get("SQUIDEX_TEST_SCHEMA")


@pytest.fixture(scope="module")
def live_client():
    """Skip test if the gateway is not configured."""
    if not BASE_URL or not SCHEMA:
        pytest.skip("SQUIDEX_API_BASE_URL and SQUIDEX_TEST_SCHEMA required")
    return SquidexClient(api_base_url=BASE_URL)


def test_list_first_page(live_client):
    page = live_client.content.list(SCHEMA, live_client.create_query().order_by("created", "desc").top(5))
    assert page.total >= len(page.items)
    assert len(page.items) <= 5


def test_get_listed_item(live_client):
    page = live_client.content.list(SCHEMA, {"$top": 1})
    if not page.items:
        pytest.skip(f"Schema {SCHEMA} has no content")
    item = live_client.content.get(SCHEMA, page.items[0].id)
    assert item.id == page.items[0].id


def test_missing_item_is_not_found(live_client):
    with pytest.raises(SquidexError) as exc_info:
        live_client.content.get(SCHEMA, "00000000-0000-0000-0000-000000000000")
    assert exc_info.value.kind is ErrorKind.NOT_FOUND
    assert exc_info.value.retryable is False

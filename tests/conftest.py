"""Shared fixtures for ToolCart tests."""

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from toolcart.application import CallerContext, StaticConfirmation
from toolcart.catalog import CatalogStore
from toolcart.domain import CheckoutProtocol, SequentialIds
from toolcart.main import create_app
from toolcart.shop import Shop

FIXED_NOW = datetime(2026, 1, 15, 10, 0, tzinfo=timezone.utc)


def fixed_clock() -> datetime:
    return FIXED_NOW


@pytest.fixture
def catalog() -> CatalogStore:
    """Seeded catalog p1..p6."""
    return CatalogStore()


@pytest.fixture
def ids() -> SequentialIds:
    """Deterministic ids: tokens 1, 2, 3..."""
    return SequentialIds()


@pytest.fixture
def shop(catalog: CatalogStore, ids: SequentialIds) -> Shop:
    """Standard-protocol shop whose default confirmation declines.

    Tests approve explicitly through a caller context, so nothing ever
    falls through to a terminal prompt.
    """
    return Shop(
        catalog=catalog,
        ids=ids,
        clock=fixed_clock,
        default_confirmation=StaticConfirmation(False),
    )


@pytest.fixture
def ucp_shop(catalog: CatalogStore, ids: SequentialIds) -> Shop:
    """UCP-protocol shop whose default confirmation declines."""
    return Shop(
        catalog=catalog,
        ids=ids,
        clock=fixed_clock,
        protocol=CheckoutProtocol.UCP,
        default_confirmation=StaticConfirmation(False),
    )


@pytest.fixture
def approve() -> CallerContext:
    """Caller that approves checkout."""
    return CallerContext(confirmation=StaticConfirmation(True))


@pytest.fixture
def decline() -> CallerContext:
    """Caller that declines checkout."""
    return CallerContext(confirmation=StaticConfirmation(False))


@pytest.fixture
def client(shop: Shop) -> TestClient:
    """HTTP client bound to the test shop."""
    with TestClient(create_app(shop=shop)) as client:
        yield client

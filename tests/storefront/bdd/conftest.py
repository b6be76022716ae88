"""Shared BDD fixtures for the storefront."""

import pytest


@pytest.fixture()
def shop():
    """Scenario state: product ids by title, the last order id and any captured error."""
    return {"products": {}, "order_id": None, "error": None}


@pytest.fixture()
def buyer_id():
    return "buyer-bdd"

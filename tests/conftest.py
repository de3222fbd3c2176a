"""
Shared fixtures for Shopfront tests.

Catalogues are built from seed-document dicts (the same format as
data/catalog.example.json) through factory fixtures.

Default enterprises:
    1  - Supplier (producer)
    10 - Distributor under test
    11 - Another distributor
    50 - Coordinator (distributor)
"""

from datetime import datetime, timezone

import pytest

from app import create_app
from services.catalog_service import CatalogService, build_snapshot


NOW = datetime(2026, 10, 17, 12, 0, tzinfo=timezone.utc)

OPEN_WINDOW = {
    "orders_open_at": "2026-10-10T00:00:00+00:00",
    "orders_close_at": "2026-10-24T00:00:00+00:00",
}

CLOSED_WINDOW = {
    "orders_open_at": "2026-09-01T00:00:00+00:00",
    "orders_close_at": "2026-09-15T00:00:00+00:00",
}

DISTRIBUTOR_ID = 10
OTHER_DISTRIBUTOR_ID = 11
COORDINATOR_ID = 50
SUPPLIER_ID = 1


def _default_enterprises(taxon_order=""):
    return [
        {"id": SUPPLIER_ID, "name": "Supplier", "is_primary_producer": True},
        {
            "id": DISTRIBUTOR_ID,
            "name": "Distributor",
            "is_distributor": True,
            "preferred_shopfront_taxon_order": taxon_order,
        },
        {"id": OTHER_DISTRIBUTOR_ID, "name": "Other Distributor", "is_distributor": True},
        {"id": COORDINATOR_ID, "name": "Coordinator", "is_distributor": True},
    ]


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def make_product():
    """Factory for product records with a single master variant."""

    def _make(
        product_id,
        name,
        taxon_id=None,
        price=10.0,
        count_on_hand=5,
        on_demand=False,
        description="",
        deleted_at=None,
        supplier_id=SUPPLIER_ID,
        extra_variants=(),
    ):
        variants = [{
            "id": product_id * 10,
            "price": price,
            "count_on_hand": count_on_hand,
            "on_demand": on_demand,
            "is_master": True,
        }]
        variants.extend(extra_variants)
        return {
            "id": product_id,
            "name": name,
            "supplier_id": supplier_id,
            "primary_taxon_id": taxon_id,
            "description": description,
            "deleted_at": deleted_at,
            "variants": variants,
        }

    return _make


@pytest.fixture
def make_order_cycle():
    """Factory for order cycle records with outgoing exchanges per distributor."""

    def _make(
        order_cycle_id,
        distributor_ids=(DISTRIBUTOR_ID,),
        variant_ids=(),
        is_open=True,
        coordinator_fee_ids=(),
        outgoing_fee_ids=(),
        incoming=(),
    ):
        exchanges = list(incoming)
        for i, distributor_id in enumerate(distributor_ids):
            exchanges.append({
                "id": order_cycle_id * 100 + i,
                "sender_id": COORDINATOR_ID,
                "receiver_id": distributor_id,
                "incoming": False,
                "variant_ids": list(variant_ids),
                "enterprise_fee_ids": list(outgoing_fee_ids),
            })
        window = OPEN_WINDOW if is_open else CLOSED_WINDOW
        return {
            "id": order_cycle_id,
            "name": f"Order Cycle {order_cycle_id}",
            "coordinator_id": COORDINATOR_ID,
            **window,
            "coordinator_fee_ids": list(coordinator_fee_ids),
            "exchanges": exchanges,
        }

    return _make


@pytest.fixture
def make_catalog():
    """Factory building a CatalogSnapshot from record lists."""

    def _make(
        products=(),
        order_cycles=(),
        taxons=(),
        enterprise_fees=(),
        taxon_order="",
        enterprises=None,
    ):
        return build_snapshot({
            "taxons": list(taxons),
            "enterprises": enterprises if enterprises is not None else _default_enterprises(taxon_order),
            "enterprise_fees": list(enterprise_fees),
            "products": list(products),
            "order_cycles": list(order_cycles),
        })

    return _make


@pytest.fixture
def make_app():
    """Factory creating a test app around a snapshot, clock fixed at NOW."""

    def _make(snapshot, product_resolver=None):
        app = create_app(
            "config.TestingConfig",
            catalog_service=CatalogService(snapshot),
            product_resolver=product_resolver,
        )
        app.config["CLOCK"] = lambda: NOW
        return app

    return _make


@pytest.fixture
def shop_client(make_app):
    """Factory returning a test client whose session has the distributor set."""

    def _make(snapshot, distributor_id=DISTRIBUTOR_ID, product_resolver=None):
        client = make_app(snapshot, product_resolver=product_resolver).test_client()
        if distributor_id is not None:
            with client.session_transaction() as sess:
                sess["distributor_id"] = distributor_id
        return client

    return _make

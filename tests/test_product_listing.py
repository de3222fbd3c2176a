"""
Unit tests for the ProductListingResolver.

Covers scoping to the order cycle and distributor, stock filtering,
ordering by taxon preference and name, pricing and the injected
strategies.
"""

import pytest

from core.exceptions import NoOrderCycleSelected
from models.shop import ShopContext
from services.product_service import ProductListingResolver, sort_products
from services.strategies import (
    CategoryPreferenceProvider,
    FeePricingStrategy,
    ProductEligibilityPredicate,
)


DISTRIBUTOR_ID = 10

TAXONS = [{"id": 1, "name": "Fruit"}, {"id": 2, "name": "Vegetables"}]


# Fakes

class FixedPrice(FeePricingStrategy):
    def __init__(self, price):
        self.price = price
        self.calls = []

    def price_with_fees(self, variant, distributor, order_cycle):
        self.calls.append((variant.id, distributor.id, order_cycle.id))
        return self.price


class FixedTaxonOrder(CategoryPreferenceProvider):
    def __init__(self, taxon_ids):
        self.taxon_ids = list(taxon_ids)

    def taxon_order_for(self, distributor):
        return self.taxon_ids


class AllowOnly(ProductEligibilityPredicate):
    def __init__(self, product_ids):
        self.product_ids = set(product_ids)

    def is_eligible(self, product, order_cycle, distributor, snapshot):
        return product.id in self.product_ids


# Helpers

def _context(snapshot, order_cycle_id=1):
    return ShopContext(
        distributor=snapshot.get_enterprise(DISTRIBUTOR_ID),
        order_cycle=snapshot.get_order_cycle(order_cycle_id),
    )


def _names(listings):
    return [listing.product.name for listing in listings]


@pytest.fixture
def resolver():
    return ProductListingResolver()


class TestScoping:
    """Which products belong to the listing at all."""

    def test_requires_an_order_cycle(self, resolver, make_catalog):
        snapshot = make_catalog()
        context = ShopContext(distributor=snapshot.get_enterprise(DISTRIBUTOR_ID), order_cycle=None)

        with pytest.raises(NoOrderCycleSelected):
            resolver.list_products(snapshot, context)

    def test_only_products_in_the_outgoing_exchange(self, resolver, make_catalog, make_product, make_order_cycle):
        in_cycle = make_product(1, "In cycle")
        elsewhere = make_product(2, "Elsewhere")
        snapshot = make_catalog(
            products=[in_cycle, elsewhere],
            order_cycles=[
                make_order_cycle(1, variant_ids=[10]),
                make_order_cycle(2, variant_ids=[20]),
            ],
        )

        assert _names(resolver.list_products(snapshot, _context(snapshot))) == ["In cycle"]

    def test_exchange_to_another_distributor_is_ignored(self, resolver, make_catalog, make_product, make_order_cycle):
        product = make_product(1, "Carrots")
        snapshot = make_catalog(
            products=[product],
            order_cycles=[
                make_order_cycle(1, distributor_ids=(10, 11), variant_ids=[]),
                make_order_cycle(2, distributor_ids=(11,), variant_ids=[10]),
            ],
        )

        assert resolver.list_products(snapshot, _context(snapshot)) == []

    def test_deleted_products_are_excluded(self, resolver, make_catalog, make_product, make_order_cycle):
        snapshot = make_catalog(
            products=[
                make_product(1, "Kept"),
                make_product(2, "Deleted", deleted_at="2026-10-01T00:00:00Z"),
            ],
            order_cycles=[make_order_cycle(1, variant_ids=[10, 20])],
        )

        assert _names(resolver.list_products(snapshot, _context(snapshot))) == ["Kept"]

    def test_eligibility_predicate_filters(self, make_catalog, make_product, make_order_cycle):
        snapshot = make_catalog(
            products=[make_product(1, "A"), make_product(2, "B")],
            order_cycles=[make_order_cycle(1, variant_ids=[10, 20])],
        )
        resolver = ProductListingResolver(eligibility=AllowOnly([2]))

        assert _names(resolver.list_products(snapshot, _context(snapshot))) == ["B"]


class TestStockFiltering:
    """Products need an in-stock variant in this shop and cycle."""

    def test_out_of_stock_product_is_excluded(self, resolver, make_catalog, make_product, make_order_cycle):
        snapshot = make_catalog(
            products=[make_product(1, "Sold out", count_on_hand=0, on_demand=False)],
            order_cycles=[make_order_cycle(1, variant_ids=[10])],
        )

        assert resolver.list_products(snapshot, _context(snapshot)) == []

    def test_on_demand_bypasses_stock(self, resolver, make_catalog, make_product, make_order_cycle):
        snapshot = make_catalog(
            products=[make_product(1, "Bread", count_on_hand=0, on_demand=True)],
            order_cycles=[make_order_cycle(1, variant_ids=[10])],
        )

        assert _names(resolver.list_products(snapshot, _context(snapshot))) == ["Bread"]

    def test_stock_only_counts_for_distributed_variants(self, resolver, make_catalog, make_product, make_order_cycle):
        """An in-stock variant outside the exchange does not make the product available."""
        product = make_product(
            1, "Apples", count_on_hand=0,
            extra_variants=[
                {"id": 11, "price": 4.0, "count_on_hand": 0},
                {"id": 12, "price": 7.0, "count_on_hand": 9},
            ],
        )
        snapshot = make_catalog(
            products=[product],
            order_cycles=[make_order_cycle(1, variant_ids=[10, 11])],
        )

        assert resolver.list_products(snapshot, _context(snapshot)) == []

    def test_listing_carries_only_in_stock_variants(self, resolver, make_catalog, make_product, make_order_cycle):
        product = make_product(
            1, "Apples", count_on_hand=0,
            extra_variants=[
                {"id": 11, "price": 4.0, "count_on_hand": 0},
                {"id": 12, "price": 7.0, "count_on_hand": 9},
            ],
        )
        snapshot = make_catalog(
            products=[product],
            order_cycles=[make_order_cycle(1, variant_ids=[10, 11, 12])],
        )

        listings = resolver.list_products(snapshot, _context(snapshot))

        assert [pv.variant.id for pv in listings[0].variants] == [12]


class TestOrdering:
    """Display order of the listing."""

    def test_groups_by_preferred_taxon_then_name(self, resolver, make_catalog, make_product, make_order_cycle):
        snapshot = make_catalog(
            taxons=TAXONS,
            taxon_order="1,2",
            products=[
                make_product(1, "abc", taxon_id=2),
                make_product(2, "def", taxon_id=1),
                make_product(3, "abcd", taxon_id=2),
                make_product(4, "defg", taxon_id=1),
            ],
            order_cycles=[make_order_cycle(1, variant_ids=[10, 20, 30, 40])],
        )

        listings = resolver.list_products(snapshot, _context(snapshot))

        assert _names(listings) == ["def", "defg", "abc", "abcd"]

    def test_alphabetical_without_preference(self, resolver, make_catalog, make_product, make_order_cycle):
        snapshot = make_catalog(
            taxons=TAXONS,
            taxon_order="",
            products=[
                make_product(1, "def", taxon_id=1),
                make_product(2, "abc", taxon_id=2),
            ],
            order_cycles=[make_order_cycle(1, variant_ids=[10, 20])],
        )

        assert _names(resolver.list_products(snapshot, _context(snapshot))) == ["abc", "def"]

    def test_unlisted_taxons_follow_in_original_order(self, resolver, make_catalog, make_product, make_order_cycle):
        snapshot = make_catalog(
            taxons=TAXONS + [{"id": 3, "name": "Dairy"}],
            taxon_order="1",
            products=[
                make_product(1, "zz", taxon_id=3),
                make_product(2, "aa", taxon_id=None),
                make_product(3, "mm", taxon_id=1),
            ],
            order_cycles=[make_order_cycle(1, variant_ids=[10, 20, 30])],
        )

        assert _names(resolver.list_products(snapshot, _context(snapshot))) == ["mm", "zz", "aa"]

    def test_injected_preference_provider_is_used(self, make_catalog, make_product, make_order_cycle):
        snapshot = make_catalog(
            taxons=TAXONS,
            taxon_order="1,2",
            products=[make_product(1, "a", taxon_id=1), make_product(2, "b", taxon_id=2)],
            order_cycles=[make_order_cycle(1, variant_ids=[10, 20])],
        )
        resolver = ProductListingResolver(preferences=FixedTaxonOrder([2, 1]))

        assert _names(resolver.list_products(snapshot, _context(snapshot))) == ["b", "a"]


class TestSortProducts:
    """sort_products on its own."""

    def test_name_sort_is_case_sensitive(self, make_catalog, make_product):
        snapshot = make_catalog(products=[
            make_product(1, "banana"),
            make_product(2, "Cherry"),
            make_product(3, "apple"),
        ])

        ordered = sort_products(list(snapshot.products), [])

        assert [p.name for p in ordered] == ["Cherry", "apple", "banana"]

    def test_equal_names_keep_original_order(self, make_catalog, make_product):
        snapshot = make_catalog(products=[
            make_product(1, "same", taxon_id=1),
            make_product(2, "same", taxon_id=1),
        ])

        ordered = sort_products(list(snapshot.products), [1])

        assert [p.id for p in ordered] == [1, 2]


class TestPricing:
    """Prices come from the fee pricing strategy."""

    def test_price_includes_fees(self, make_catalog, make_product, make_order_cycle):
        snapshot = make_catalog(
            products=[make_product(1, "Carrots", price=3.0)],
            order_cycles=[make_order_cycle(1, variant_ids=[10])],
        )
        pricing = FixedPrice(998.0)
        resolver = ProductListingResolver(pricing=pricing)

        listing = resolver.list_products(snapshot, _context(snapshot))[0]

        assert listing.price == 998.0
        assert listing.variants[0].price == 998.0
        assert (10, DISTRIBUTOR_ID, 1) in pricing.calls

    def test_default_pricing_adds_order_cycle_fees(self, resolver, make_catalog, make_product, make_order_cycle):
        snapshot = make_catalog(
            enterprise_fees=[
                {"id": 1, "enterprise_id": 50, "calculator": "percent", "amount": 10},
                {"id": 2, "enterprise_id": 1, "calculator": "flat", "amount": 0.5},
                {"id": 3, "enterprise_id": 10, "calculator": "flat", "amount": 1.0},
            ],
            products=[make_product(1, "Carrots", price=10.0)],
            order_cycles=[make_order_cycle(
                1,
                variant_ids=[10],
                coordinator_fee_ids=[1],
                outgoing_fee_ids=[3],
                incoming=[{
                    "id": 900, "sender_id": 1, "receiver_id": 50, "incoming": True,
                    "variant_ids": [10], "enterprise_fee_ids": [2],
                }],
            )],
        )

        listing = resolver.list_products(snapshot, _context(snapshot))[0]

        assert listing.price == 12.5

    def test_listing_carries_taxon_and_supplier(self, resolver, make_catalog, make_product, make_order_cycle):
        snapshot = make_catalog(
            taxons=TAXONS,
            products=[make_product(1, "Pears", taxon_id=1)],
            order_cycles=[make_order_cycle(1, variant_ids=[10])],
        )

        listing = resolver.list_products(snapshot, _context(snapshot))[0]

        assert listing.taxon.name == "Fruit"
        assert listing.supplier.name == "Supplier"


class TestProducers:
    """Producers behind the listing."""

    def test_distinct_suppliers_in_listing_order(self, resolver, make_catalog, make_product, make_order_cycle):
        enterprises = [
            {"id": 1, "name": "Farm A", "is_primary_producer": True},
            {"id": 2, "name": "Farm B", "is_primary_producer": True},
            {"id": 10, "name": "Hub", "is_distributor": True},
        ]
        snapshot = make_catalog(
            enterprises=enterprises,
            products=[
                make_product(1, "b-item", supplier_id=2),
                make_product(2, "a-item", supplier_id=1),
                make_product(3, "c-item", supplier_id=2),
                make_product(4, "d-item", supplier_id=1, count_on_hand=0),
            ],
            order_cycles=[make_order_cycle(1, variant_ids=[10, 20, 30, 40])],
        )

        producers = resolver.producers(snapshot, _context(snapshot))

        assert [p.name for p in producers] == ["Farm A", "Farm B"]

    def test_requires_an_order_cycle(self, resolver, make_catalog):
        snapshot = make_catalog()
        context = ShopContext(distributor=snapshot.get_enterprise(DISTRIBUTOR_ID))

        with pytest.raises(NoOrderCycleSelected):
            resolver.producers(snapshot, context)

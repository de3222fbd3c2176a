"""
Product listing for the storefront.

Resolves the products a shopper can buy from a distributor in an order
cycle, in display order and with prices including fees.

Flow (list_products):
    1. Products distributed by the shop in the cycle, not deleted
    2. Filtered by the eligibility predicate
    3. Filtered to products with at least one in-stock variant
    4. Ordered by the distributor's taxon preference, then by name
    5. Priced via the fee pricing strategy

The three collaborators are injected; see services/strategies.py.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from core.exceptions import NoOrderCycleSelected
from models.catalog import CatalogSnapshot, Enterprise, Product
from models.shop import PricedVariant, ProductListing, ShopContext
from services.strategies import (
    CategoryPreferenceProvider,
    DistributedVariantEligibility,
    DistributorTaxonPreference,
    FeePricingStrategy,
    OrderCycleFeePricing,
    ProductEligibilityPredicate,
)
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)


def sort_products(products: List[Product], taxon_order: List[int]) -> List[Product]:
    """
    Order products for display.

    With a taxon order, products are grouped by primary taxon in that
    order and sorted by name within each group; products whose taxon is
    not listed follow in their original relative order. Without one,
    products are sorted by name alone. Name comparison is case-sensitive
    and ties keep their original order (sorted() is stable).
    """
    if not taxon_order:
        return sorted(products, key=lambda p: p.name)

    rank: Dict[int, int] = {taxon_id: i for i, taxon_id in enumerate(taxon_order)}
    unlisted = len(taxon_order)

    def sort_key(product: Product):
        position = rank.get(product.primary_taxon_id)
        if position is None:
            return (unlisted, "")
        return (position, product.name)

    return sorted(products, key=sort_key)


class ProductListingResolver:
    """
    Resolves the storefront product listing for a ShopContext.

    Attributes:
        preferences: Source of the distributor's taxon ordering
        pricing: Computes prices with fees
        eligibility: Extra per-product filter
    """

    def __init__(
        self,
        preferences: Optional[CategoryPreferenceProvider] = None,
        pricing: Optional[FeePricingStrategy] = None,
        eligibility: Optional[ProductEligibilityPredicate] = None
    ):
        self.preferences = preferences or DistributorTaxonPreference()
        self.pricing = pricing or OrderCycleFeePricing()
        self.eligibility = eligibility or DistributedVariantEligibility()

    def valid_products(self, snapshot: CatalogSnapshot, context: ShopContext) -> List[Product]:
        """
        Distributed, non-deleted, eligible products in original order.

        Raises:
            NoOrderCycleSelected: If the context has no order cycle
        """
        order_cycle = self._require_order_cycle(context)
        distributor = context.distributor

        return [
            product
            for product in snapshot.products_distributed_by(order_cycle, distributor)
            if self.eligibility.is_eligible(product, order_cycle, distributor, snapshot)
        ]

    def in_stock_products(self, snapshot: CatalogSnapshot, context: ShopContext) -> List[Product]:
        """Valid products with at least one in-stock variant in this shop and cycle."""
        order_cycle = self._require_order_cycle(context)
        return [
            product
            for product in self.valid_products(snapshot, context)
            if any(
                v.in_stock
                for v in snapshot.variants_for(product, order_cycle, context.distributor)
            )
        ]

    def ordered_products(self, snapshot: CatalogSnapshot, context: ShopContext) -> List[Product]:
        """In-stock products in display order."""
        products = self.in_stock_products(snapshot, context)
        taxon_order = self.preferences.taxon_order_for(context.distributor)
        return sort_products(products, taxon_order)

    def list_products(self, snapshot: CatalogSnapshot, context: ShopContext) -> List[ProductListing]:
        """
        Resolve the full storefront listing.

        Args:
            snapshot: Catalogue snapshot for this request
            context: Distributor and order cycle

        Returns:
            ProductListing per product, in display order

        Raises:
            NoOrderCycleSelected: If the context has no order cycle
        """
        products = self.ordered_products(snapshot, context)
        listings = [self._build_listing(snapshot, context, p) for p in products]

        logger.debug(
            f"Listed {len(listings)} products for distributor {context.distributor.id} "
            f"in order cycle {context.order_cycle.id}"
        )
        return listings

    def producers(self, snapshot: CatalogSnapshot, context: ShopContext) -> List[Enterprise]:
        """
        Suppliers of the listed products, in order of first appearance.

        Raises:
            NoOrderCycleSelected: If the context has no order cycle
        """
        producers: List[Enterprise] = []
        seen = set()
        for product in self.ordered_products(snapshot, context):
            if product.supplier_id in seen:
                continue
            seen.add(product.supplier_id)
            supplier = snapshot.get_enterprise(product.supplier_id)
            if supplier is not None:
                producers.append(supplier)
        return producers

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _require_order_cycle(self, context: ShopContext):
        if context.order_cycle is None:
            raise NoOrderCycleSelected(context.distributor.id)
        return context.order_cycle

    def _build_listing(
        self,
        snapshot: CatalogSnapshot,
        context: ShopContext,
        product: Product
    ) -> ProductListing:
        order_cycle = context.order_cycle
        distributor = context.distributor

        variants = tuple(
            PricedVariant(v, self.pricing.price_with_fees(v, distributor, order_cycle))
            for v in snapshot.variants_for(product, order_cycle, distributor)
            if v.in_stock
        )

        # Master price when the master is on offer, else the first variant's
        master = product.master
        price = variants[0].price
        for priced in variants:
            if priced.variant is master:
                price = priced.price
                break

        return ProductListing(
            product=product,
            supplier=snapshot.get_enterprise(product.supplier_id),
            taxon=snapshot.get_taxon(product.primary_taxon_id),
            variants=variants,
            price=price,
        )

"""
Pluggable collaborators of the product listing resolver.

Each collaborator is an abstract base class with one default implementation:

    CategoryPreferenceProvider  -> DistributorTaxonPreference
    FeePricingStrategy          -> OrderCycleFeePricing
    ProductEligibilityPredicate -> DistributedVariantEligibility

Tests and alternative deployments substitute any of them independently.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional

from models.catalog import (
    CatalogSnapshot,
    Enterprise,
    EnterpriseFee,
    OrderCycle,
    Product,
    Variant,
)
from logging_config import get_logger


logger = get_logger(__name__)


# =============================================================================
# CATEGORY PREFERENCE
# =============================================================================

class CategoryPreferenceProvider(ABC):
    """Supplies a distributor's preferred taxon ordering."""

    @abstractmethod
    def taxon_order_for(self, distributor: Enterprise) -> List[int]:
        """Taxon ids in display order; empty when no preference is set."""


class DistributorTaxonPreference(CategoryPreferenceProvider):
    """
    Reads the distributor's preferred_shopfront_taxon_order setting.

    The setting is a comma-separated list of taxon ids, e.g. "4,1,7".
    Blank entries are skipped; entries that are not integers are skipped
    with a warning.
    """

    def taxon_order_for(self, distributor: Enterprise) -> List[int]:
        return parse_taxon_order(distributor.preferred_shopfront_taxon_order, distributor.id)


def parse_taxon_order(value: str, distributor_id: Optional[int] = None) -> List[int]:
    taxon_ids = []
    for token in (value or "").split(","):
        token = token.strip()
        if not token:
            continue
        try:
            taxon_id = int(token)
        except ValueError:
            logger.warning(
                f"Ignoring invalid taxon id {token!r} in shopfront order "
                f"of distributor {distributor_id}"
            )
            continue
        if taxon_id not in taxon_ids:
            taxon_ids.append(taxon_id)
    return taxon_ids


# =============================================================================
# FEE PRICING
# =============================================================================

class FeePricingStrategy(ABC):
    """Computes the price a shopper sees for a variant."""

    @abstractmethod
    def price_with_fees(
        self,
        variant: Variant,
        distributor: Enterprise,
        order_cycle: OrderCycle
    ) -> float:
        """Base price plus all fees applicable in this cycle and shop."""


class OrderCycleFeePricing(FeePricingStrategy):
    """
    Layers order cycle enterprise fees on the variant's base price.

    Fees applied, each computed against the base price:
    1. Coordinator fees of the order cycle
    2. Fees of incoming exchanges that carry the variant
    3. Fees of the outgoing exchange to the distributor
    """

    def __init__(self, decimals: int = 2):
        self._decimals = decimals

    def applicable_fees(
        self,
        variant: Variant,
        distributor: Enterprise,
        order_cycle: OrderCycle
    ) -> List[EnterpriseFee]:
        fees = list(order_cycle.coordinator_fees)

        for exchange in order_cycle.incoming_exchanges:
            if exchange.carries(variant):
                fees.extend(exchange.enterprise_fees)

        outgoing = order_cycle.exchange_to(distributor.id)
        if outgoing is not None:
            fees.extend(outgoing.enterprise_fees)

        return fees

    def price_with_fees(
        self,
        variant: Variant,
        distributor: Enterprise,
        order_cycle: OrderCycle
    ) -> float:
        fees = self.applicable_fees(variant, distributor, order_cycle)
        total = variant.price + sum(fee.compute(variant.price) for fee in fees)
        return round(total, self._decimals)


# =============================================================================
# PRODUCT ELIGIBILITY
# =============================================================================

class ProductEligibilityPredicate(ABC):
    """Decides whether a distributed product may be shown in a shopfront."""

    @abstractmethod
    def is_eligible(
        self,
        product: Product,
        order_cycle: OrderCycle,
        distributor: Enterprise,
        snapshot: CatalogSnapshot
    ) -> bool:
        """True when the product is a valid product distributed by the shop."""


class DistributedVariantEligibility(ProductEligibilityPredicate):
    """
    Products with option variants must distribute at least one of them.

    A product whose only distributed variant is its master, while it has
    option variants, is a stale exchange entry and is not shown.
    """

    def is_eligible(
        self,
        product: Product,
        order_cycle: OrderCycle,
        distributor: Enterprise,
        snapshot: CatalogSnapshot
    ) -> bool:
        variants = snapshot.variants_for(product, order_cycle, distributor)
        if not product.has_option_variants:
            return bool(variants)
        master = product.master
        return any(v is not master for v in variants)

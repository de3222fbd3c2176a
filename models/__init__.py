"""
Data models for Shopfront.

This module contains immutable dataclasses for:
- Catalogue: Taxon, Enterprise, Product, Variant, EnterpriseFee,
  Exchange, OrderCycle and the CatalogSnapshot that holds them
- Shopping session: OrderCycleSelection, ShopContext, ProductListing

All catalogue dataclasses are frozen, so a snapshot can be read from any
request thread without locks.
"""

from .catalog import (
    CatalogSnapshot,
    Enterprise,
    EnterpriseFee,
    Exchange,
    OrderCycle,
    Product,
    Taxon,
    Variant,
)
from .shop import (
    OrderCycleSelection,
    PricedVariant,
    ProductListing,
    SelectionState,
    ShopContext,
)

__all__ = [
    # Catalogue models
    "CatalogSnapshot",
    "Enterprise",
    "EnterpriseFee",
    "Exchange",
    "OrderCycle",
    "Product",
    "Taxon",
    "Variant",
    # Session models
    "OrderCycleSelection",
    "PricedVariant",
    "ProductListing",
    "SelectionState",
    "ShopContext",
]

"""
Services layer for Shopfront.

This module contains the business logic services:
- CatalogService: Holds the current immutable catalogue snapshot
- DistributorContextResolver: Current distributor from the session
- OrderCycleSelector: Current order cycle resolution and selection
- ProductListingResolver: Storefront product listing

Services never touch flask.session directly (except through the mapping
handed to DistributorContextResolver); routes pass explicit values in.
"""

from .catalog_service import CatalogService, build_snapshot, load_catalog_file
from .distributor_context import DistributorContextResolver
from .order_cycle_service import OrderCycleSelector
from .product_service import ProductListingResolver, sort_products

__all__ = [
    "CatalogService",
    "build_snapshot",
    "load_catalog_file",
    "DistributorContextResolver",
    "OrderCycleSelector",
    "ProductListingResolver",
    "sort_products",
]

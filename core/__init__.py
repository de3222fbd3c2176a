"""
Core module for Shopfront.

Contains fundamental infrastructure components:
- exceptions: Custom exception hierarchy
"""

from .exceptions import (
    ShopfrontError,
    CatalogLoadError,
    NoDistributorSelected,
    OrderCycleNotFound,
    NoOrderCycleSelected,
)

__all__ = [
    "ShopfrontError",
    "CatalogLoadError",
    "NoDistributorSelected",
    "OrderCycleNotFound",
    "NoOrderCycleSelected",
]

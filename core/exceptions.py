"""
Custom exceptions for Shopfront.

Exception Hierarchy:
    ShopfrontError (base)
    ├── CatalogLoadError        - Seed catalogue missing or malformed (startup failure)
    ├── NoDistributorSelected   - No distributor in session (runtime, redirect)
    ├── OrderCycleNotFound      - Posted order cycle unknown/ineligible (runtime, 404)
    └── NoOrderCycleSelected    - Listing requested without an order cycle (runtime, 404)

Usage:
    Startup errors (CatalogLoadError) cause the app to fail fast.
    Runtime errors are expected, user-recoverable states. The app error
    handlers turn them into a redirect or an empty 404 response.
"""

from typing import Optional, Dict, Any


class ShopfrontError(Exception):
    """
    Base exception for all Shopfront errors.

    All custom exceptions inherit from this class, allowing callers to catch
    all application-specific errors with a single except clause if needed.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize the exception.

        Args:
            message: Human-readable error message
            details: Optional dictionary with additional context for debugging
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# =============================================================================
# STARTUP ERRORS - Application will not start if these occur
# =============================================================================

class CatalogLoadError(ShopfrontError):
    """
    The catalogue seed document could not be loaded.

    Typical causes:
    - SHOPFRONT_CATALOG_PATH points at a missing file
    - File is not valid JSON
    - A record is missing a required field
    """

    def __init__(self, source: str, reason: str):
        message = f"Cannot load catalogue from {source}: {reason}"
        details = {
            "source": source,
            "resolution": "Check SHOPFRONT_CATALOG_PATH in .env and the file contents"
        }
        super().__init__(message, details)
        self.source = source
        self.reason = reason


# =============================================================================
# RUNTIME ERRORS - Expected states, surfaced as HTTP status
# =============================================================================

class NoDistributorSelected(ShopfrontError):
    """
    No distributor has been chosen for this session.

    The shopper is redirected to the landing page to pick a shop.
    """

    def __init__(self, distributor_id: Optional[Any] = None):
        if distributor_id is None:
            message = "No distributor selected"
        else:
            message = f"Distributor {distributor_id} is not available"
        super().__init__(message, {"distributor_id": distributor_id})
        self.distributor_id = distributor_id


class OrderCycleNotFound(ShopfrontError):
    """
    The requested order cycle does not exist or is not distributed by the
    current distributor.

    The current selection is left untouched.
    """

    def __init__(self, order_cycle_id: Any, distributor_id: Optional[int] = None):
        message = f"Order cycle {order_cycle_id!r} not found"
        details = {"order_cycle_id": order_cycle_id}
        if distributor_id is not None:
            message += f" for distributor {distributor_id}"
            details["distributor_id"] = distributor_id
        super().__init__(message, details)
        self.order_cycle_id = order_cycle_id
        self.distributor_id = distributor_id


class NoOrderCycleSelected(ShopfrontError):
    """
    Products were requested before an order cycle was chosen.

    Nothing to show: the response is an empty 404.
    """

    def __init__(self, distributor_id: Optional[int] = None):
        super().__init__(
            "No order cycle selected",
            {"distributor_id": distributor_id}
        )
        self.distributor_id = distributor_id

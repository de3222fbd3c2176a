"""
Shopping session models.

These models carry request/session-scoped state through the services:
- OrderCycleSelection: what the session has chosen (stored in Flask session)
- ShopContext: explicit (distributor, order cycle) pair for one request
- ProductListing: a resolved, priced product ready for serialization

Lifecycle of OrderCycleSelection:
    1. UNRESOLVED when a distributor is chosen
    2. AUTO_SELECTED or AMBIGUOUS after the storefront resolves open cycles
    3. EXPLICITLY_SELECTED after the shopper posts a valid order cycle id
    4. Back to UNRESOLVED only when the shopper changes distributor
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Any, Optional

from .catalog import Enterprise, OrderCycle, Product, Taxon, Variant


class SelectionState(str, Enum):
    """How the session's current order cycle was chosen."""

    UNRESOLVED = "unresolved"
    AUTO_SELECTED = "auto_selected"
    AMBIGUOUS = "ambiguous"
    EXPLICITLY_SELECTED = "explicitly_selected"


@dataclass(frozen=True)
class OrderCycleSelection:
    """
    Session-scoped order cycle choice.

    Frozen: the selector returns a new selection for every transition,
    so a failed transition can never leave a half-updated value behind.
    """

    order_cycle_id: Optional[int] = None
    """Selected order cycle, None when nothing is selected."""

    state: SelectionState = SelectionState.UNRESOLVED

    @property
    def is_explicit(self) -> bool:
        return self.state == SelectionState.EXPLICITLY_SELECTED

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for session storage."""
        return {
            "order_cycle_id": self.order_cycle_id,
            "state": self.state.value,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "OrderCycleSelection":
        """Create from session dictionary; tolerates missing or stale data."""
        if not data:
            return cls()
        try:
            state = SelectionState(data.get("state", SelectionState.UNRESOLVED.value))
        except ValueError:
            return cls()
        order_cycle_id = data.get("order_cycle_id")
        return cls(
            order_cycle_id=int(order_cycle_id) if order_cycle_id is not None else None,
            state=state,
        )


@dataclass(frozen=True)
class ShopContext:
    """
    The distributor and order cycle a request operates on.

    Built by the routes from session state and passed explicitly to the
    services, which never read the session themselves.
    """

    distributor: Enterprise
    order_cycle: Optional[OrderCycle] = None


@dataclass(frozen=True)
class PricedVariant:
    """A variant together with its display price (fees included)."""

    variant: Variant
    price: float


@dataclass(frozen=True)
class ProductListing:
    """
    A product as it appears in the storefront.

    Only in-stock variants scoped to the current order cycle and
    distributor are carried.
    """

    product: Product
    supplier: Optional[Enterprise]
    taxon: Optional[Taxon]

    variants: tuple[PricedVariant, ...]
    """In-stock variants with prices."""

    price: float
    """Display price of the product (master variant, fees included)."""

"""
Order cycle selection for a shopping session.

The selector is pure: it takes the catalogue snapshot, the distributor and
the session's current OrderCycleSelection, and returns a new selection.
Storing the result in the Flask session is the caller's job.

State machine (per session):

    UNRESOLVED ──resolve──> AUTO_SELECTED   (exactly one open cycle)
         │                  AMBIGUOUS       (zero or several open cycles)
         │
    any state ──select(valid id)──> EXPLICITLY_SELECTED
    any state ──select(invalid id)──> unchanged, OrderCycleNotFound raised

An explicit choice is never overridden by resolve().
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from core.exceptions import OrderCycleNotFound
from models.catalog import CatalogSnapshot, Enterprise, OrderCycle
from models.shop import OrderCycleSelection, SelectionState
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)


class OrderCycleSelector:
    """
    Decides which order cycle a shopping session is shopping in.
    """

    def resolve_current(
        self,
        snapshot: CatalogSnapshot,
        distributor: Enterprise,
        selection: OrderCycleSelection,
        now: Optional[datetime] = None
    ) -> OrderCycleSelection:
        """
        Resolve the current order cycle for the distributor.

        Args:
            snapshot: Catalogue to read order cycles from
            distributor: Current distributor
            selection: The session's selection so far
            now: Reference time for "open" (defaults to current UTC time)

        Returns:
            The selection unchanged when explicitly selected; otherwise
            AUTO_SELECTED with the single open cycle, or AMBIGUOUS with
            no cycle when zero or several are open.
        """
        if selection.is_explicit:
            return selection

        now = now or datetime.now(timezone.utc)
        open_cycles = snapshot.open_order_cycles_for(distributor, now)

        if len(open_cycles) == 1:
            order_cycle = open_cycles[0]
            logger.debug(
                f"Auto-selected order cycle {order_cycle.id} for distributor {distributor.id}"
            )
            return OrderCycleSelection(order_cycle.id, SelectionState.AUTO_SELECTED)

        logger.debug(
            f"{len(open_cycles)} open order cycles for distributor {distributor.id}, "
            "waiting for shopper to choose"
        )
        return OrderCycleSelection(None, SelectionState.AMBIGUOUS)

    def select(
        self,
        snapshot: CatalogSnapshot,
        distributor: Enterprise,
        selection: OrderCycleSelection,
        order_cycle_id: Any
    ) -> OrderCycleSelection:
        """
        Explicitly select an order cycle.

        Args:
            snapshot: Catalogue to read order cycles from
            distributor: Current distributor
            selection: The session's selection so far (returned untouched
                on failure, so callers simply keep it)
            order_cycle_id: Candidate id as posted (string or int)

        Returns:
            New EXPLICITLY_SELECTED selection

        Raises:
            OrderCycleNotFound: If the id is malformed, unknown, or names an
                order cycle with no outgoing exchange to the distributor
        """
        candidate_id = _parse_order_cycle_id(order_cycle_id)
        if candidate_id is None:
            raise OrderCycleNotFound(order_cycle_id, distributor.id)

        order_cycle = snapshot.get_order_cycle(candidate_id)
        if order_cycle is None or not order_cycle.has_distributor(distributor.id):
            logger.info(
                f"Rejected order cycle {candidate_id} for distributor {distributor.id}, "
                f"keeping {selection.order_cycle_id}"
            )
            raise OrderCycleNotFound(candidate_id, distributor.id)

        logger.info(f"Order cycle {order_cycle.id} selected for distributor {distributor.id}")
        return OrderCycleSelection(order_cycle.id, SelectionState.EXPLICITLY_SELECTED)

    def current(
        self,
        snapshot: CatalogSnapshot,
        selection: OrderCycleSelection,
        distributor: Enterprise
    ) -> Optional[OrderCycle]:
        """
        The order cycle named by the selection, or None.

        A cycle that has since disappeared from the catalogue, or no longer
        has an outgoing exchange to the distributor, degrades to None.
        """
        if selection.order_cycle_id is None:
            return None

        order_cycle = snapshot.get_order_cycle(selection.order_cycle_id)
        if order_cycle is None or not order_cycle.has_distributor(distributor.id):
            return None
        return order_cycle


def _parse_order_cycle_id(value: Any) -> Optional[int]:
    """
    Posted order cycle id as an int, or None when it is not one.

    Accepts ints and strings of ASCII digits. Floats and booleans are
    rejected rather than truncated.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        value = value.strip()
        if value.isascii() and value.isdigit():
            return int(value)
    return None

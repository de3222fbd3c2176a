"""
Distributor context resolution.

Works on plain mappings (the Flask session in production, a dict in tests)
so the rules are testable without a request.
"""

from __future__ import annotations

from typing import Any, MutableMapping

from core.exceptions import NoDistributorSelected
from models.catalog import CatalogSnapshot, Enterprise
from logging_config import get_logger


logger = get_logger(__name__)

DISTRIBUTOR_KEY = "distributor_id"
ORDER_CYCLE_KEY = "order_cycle"


class DistributorContextResolver:
    """Reads and writes the session's current distributor."""

    def resolve(self, session: MutableMapping[str, Any], snapshot: CatalogSnapshot) -> Enterprise:
        """
        Return the session's distributor.

        Raises:
            NoDistributorSelected: If none is stored, or the stored id no
                longer names a distributor in the catalogue
        """
        distributor_id = session.get(DISTRIBUTOR_KEY)
        if distributor_id is None:
            raise NoDistributorSelected()

        distributor = snapshot.get_enterprise(distributor_id)
        if distributor is None or not distributor.is_distributor:
            logger.info(f"Session distributor {distributor_id} no longer available")
            raise NoDistributorSelected(distributor_id)
        return distributor

    def select(
        self,
        session: MutableMapping[str, Any],
        snapshot: CatalogSnapshot,
        distributor_id: int
    ) -> Enterprise:
        """
        Make a distributor current for the session.

        Switching to a different distributor clears the order cycle
        selection, since order cycles are distributor-specific.

        Raises:
            NoDistributorSelected: If the id does not name a distributor
        """
        distributor = snapshot.get_enterprise(distributor_id)
        if distributor is None or not distributor.is_distributor:
            raise NoDistributorSelected(distributor_id)

        if session.get(DISTRIBUTOR_KEY) != distributor.id:
            session.pop(ORDER_CYCLE_KEY, None)
            logger.debug(f"Distributor changed to {distributor.id}, order cycle selection cleared")
        session[DISTRIBUTOR_KEY] = distributor.id
        return distributor

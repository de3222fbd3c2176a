"""
JSON representations of storefront and admin entities.

Free text that may carry stored markup (product descriptions) is stripped
of HTML before it leaves the server.
"""

from typing import Any, Dict, List, Optional

import bleach

from models.catalog import CatalogSnapshot, Enterprise, OrderCycle, Product, Taxon
from models.shop import PricedVariant, ProductListing


def strip_html(text: str) -> str:
    """Remove all markup, keeping the text content."""
    if not text:
        return ""
    return bleach.clean(text, tags=[], strip=True).strip()


def _timestamp(value) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _enterprise_ref(enterprise: Optional[Enterprise]) -> Optional[Dict[str, Any]]:
    if enterprise is None:
        return None
    return {"id": enterprise.id, "name": enterprise.name}


def _taxon_ref(taxon: Optional[Taxon]) -> Optional[Dict[str, Any]]:
    if taxon is None:
        return None
    return {"id": taxon.id, "name": taxon.name}


def order_cycle_to_dict(order_cycle: OrderCycle, snapshot: CatalogSnapshot) -> Dict[str, Any]:
    """Order cycle detail for the shopfront."""
    return {
        "id": order_cycle.id,
        "name": order_cycle.name,
        "orders_open_at": _timestamp(order_cycle.orders_open_at),
        "orders_close_at": _timestamp(order_cycle.orders_close_at),
        "coordinator": _enterprise_ref(snapshot.get_enterprise(order_cycle.coordinator_id)),
    }


def _variant_to_dict(priced: PricedVariant) -> Dict[str, Any]:
    variant = priced.variant
    return {
        "id": variant.id,
        "options_text": variant.options_text,
        "price": priced.price,
        "on_demand": variant.on_demand,
        "count_on_hand": variant.count_on_hand,
    }


def product_listing_to_dict(listing: ProductListing) -> Dict[str, Any]:
    """Storefront product, price including fees, description without markup."""
    product = listing.product
    master = product.master
    return {
        "id": product.id,
        "name": product.name,
        "description": strip_html(product.description),
        "price": listing.price,
        "master_id": master.id if master else None,
        "supplier": _enterprise_ref(listing.supplier),
        "primary_taxon": _taxon_ref(listing.taxon),
        "variants": [_variant_to_dict(v) for v in listing.variants],
    }


def producer_to_dict(enterprise: Enterprise) -> Dict[str, Any]:
    return {
        "id": enterprise.id,
        "name": enterprise.name,
        "is_primary_producer": enterprise.is_primary_producer,
    }


# =============================================================================
# ADMIN
# =============================================================================

def _supplied_product_to_dict(product: Product, supplier: Enterprise) -> Dict[str, Any]:
    master = product.master
    return {
        "name": product.name,
        "supplier_name": supplier.name,
        "master_id": master.id if master else None,
        "variants": [
            {"id": v.id, "label": v.options_text}
            for v in product.variants
            if v is not master
        ],
    }


def enterprise_for_order_cycle(enterprise: Enterprise, snapshot: CatalogSnapshot) -> Dict[str, Any]:
    """
    Enterprise with the products it can contribute to an order cycle.

    Soft-deleted products are excluded.
    """
    return {
        "id": enterprise.id,
        "name": enterprise.name,
        "is_primary_producer": enterprise.is_primary_producer,
        "is_distributor": enterprise.is_distributor,
        "sells": enterprise.sells,
        "supplied_products": [
            _supplied_product_to_dict(p, enterprise)
            for p in snapshot.supplied_products(enterprise)
        ],
    }


def enterprises_for_order_cycle(
    enterprises: List[Enterprise],
    snapshot: CatalogSnapshot
) -> List[Dict[str, Any]]:
    return [enterprise_for_order_cycle(e, snapshot) for e in enterprises]

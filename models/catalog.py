"""
Catalogue data models.

These models represent a point-in-time snapshot of the shop catalogue:
taxons, enterprises, products and their variants, enterprise fees, and the
order cycles whose exchanges move variants from suppliers to distributors.

Thread Safety:
    - Every model is a frozen dataclass (immutable)
    - CatalogSnapshot is safe to read from any request thread without locks
    - New snapshots replace old ones atomically (see CatalogService)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Any, List, Optional, FrozenSet


def _parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO 8601 timestamp, assuming UTC when no offset is given."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True)
class Taxon:
    """A product category."""

    id: int
    name: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Taxon":
        return cls(id=int(data["id"]), name=data.get("name", ""))


@dataclass(frozen=True)
class Enterprise:
    """
    A business on the platform: producer, distributor, or both.
    """

    id: int
    name: str

    is_primary_producer: bool = False
    """Grows or makes its own products."""

    is_distributor: bool = False
    """Runs a shopfront and sells to customers."""

    preferred_shopfront_taxon_order: str = ""
    """Comma-separated taxon ids controlling shopfront grouping (may be empty)."""

    @property
    def sells(self) -> str:
        """Selling mode: 'any' for shops, 'own' for producer-only, else 'none'."""
        if self.is_distributor:
            return "any"
        if self.is_primary_producer:
            return "own"
        return "none"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Enterprise":
        return cls(
            id=int(data["id"]),
            name=data.get("name", ""),
            is_primary_producer=bool(data.get("is_primary_producer", False)),
            is_distributor=bool(data.get("is_distributor", False)),
            preferred_shopfront_taxon_order=data.get("preferred_shopfront_taxon_order") or "",
        )


@dataclass(frozen=True)
class Variant:
    """
    A sellable unit of a product.

    Every product has one master variant; products with options carry
    further variants alongside it.
    """

    id: int

    price: float
    """Base price before fees."""

    count_on_hand: int = 0
    """Units in stock."""

    on_demand: bool = False
    """Produced to order; bypasses stock checks."""

    is_master: bool = False
    """Default unit of the product."""

    options_text: str = ""
    """Display label, e.g. '500g' or 'Large'."""

    @property
    def in_stock(self) -> bool:
        """Whether this variant can be bought right now."""
        return self.on_demand or self.count_on_hand > 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Variant":
        return cls(
            id=int(data["id"]),
            price=float(data.get("price", 0.0)),
            count_on_hand=int(data.get("count_on_hand", 0)),
            on_demand=bool(data.get("on_demand", False)),
            is_master=bool(data.get("is_master", False)),
            options_text=data.get("options_text", ""),
        )


@dataclass(frozen=True)
class Product:
    """
    A product offered by a supplier.

    Soft-deleted products (deleted_at set) stay in the catalogue for
    history but never appear in any listing.
    """

    id: int
    name: str
    supplier_id: int

    variants: tuple[Variant, ...] = ()
    """All variants, master included."""

    primary_taxon_id: Optional[int] = None
    """Category used for shopfront grouping."""

    description: str = ""
    """Free text; may contain stored markup."""

    deleted_at: Optional[datetime] = None

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    @property
    def master(self) -> Optional[Variant]:
        """The master variant (first variant when none is flagged)."""
        for variant in self.variants:
            if variant.is_master:
                return variant
        return self.variants[0] if self.variants else None

    @property
    def has_option_variants(self) -> bool:
        """Whether the product has variants besides the master."""
        master = self.master
        return any(v is not master for v in self.variants)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Product":
        taxon_id = data.get("primary_taxon_id")
        return cls(
            id=int(data["id"]),
            name=data["name"],
            supplier_id=int(data["supplier_id"]),
            variants=tuple(Variant.from_dict(v) for v in data.get("variants", [])),
            primary_taxon_id=int(taxon_id) if taxon_id is not None else None,
            description=data.get("description") or "",
            deleted_at=_parse_timestamp(data.get("deleted_at")),
        )


@dataclass(frozen=True)
class EnterpriseFee:
    """
    A fee an enterprise charges on each item passing through an order cycle.
    """

    id: int
    enterprise_id: int
    name: str = ""

    calculator: str = "flat"
    """'flat' (amount per item) or 'percent' (amount % of base price)."""

    amount: float = 0.0

    def compute(self, base_price: float) -> float:
        """Fee charged on one item with the given base price."""
        if self.calculator == "percent":
            return base_price * self.amount / 100.0
        return self.amount

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EnterpriseFee":
        calculator = data.get("calculator", "flat")
        if calculator not in ("flat", "percent"):
            raise ValueError(f"Unknown fee calculator: {calculator}")
        return cls(
            id=int(data["id"]),
            enterprise_id=int(data["enterprise_id"]),
            name=data.get("name", ""),
            calculator=calculator,
            amount=float(data.get("amount", 0.0)),
        )


@dataclass(frozen=True)
class Exchange:
    """
    A directional link inside an order cycle.

    Incoming exchanges bring variants from a supplier to the coordinator;
    outgoing exchanges send them from the coordinator to a distributor.
    """

    id: int
    sender_id: int
    receiver_id: int
    incoming: bool
    variant_ids: FrozenSet[int] = frozenset()
    enterprise_fees: tuple[EnterpriseFee, ...] = ()

    @property
    def outgoing(self) -> bool:
        return not self.incoming

    def carries(self, variant: Variant) -> bool:
        return variant.id in self.variant_ids

    @classmethod
    def from_dict(cls, data: Dict[str, Any], fees: Dict[int, EnterpriseFee]) -> "Exchange":
        return cls(
            id=int(data["id"]),
            sender_id=int(data["sender_id"]),
            receiver_id=int(data["receiver_id"]),
            incoming=bool(data.get("incoming", False)),
            variant_ids=frozenset(int(v) for v in data.get("variant_ids", [])),
            enterprise_fees=tuple(fees[int(f)] for f in data.get("enterprise_fee_ids", [])),
        )


@dataclass(frozen=True)
class OrderCycle:
    """
    A time-boxed distribution round run by a coordinator.
    """

    id: int
    name: str
    coordinator_id: int
    orders_open_at: Optional[datetime] = None
    orders_close_at: Optional[datetime] = None
    exchanges: tuple[Exchange, ...] = ()

    coordinator_fees: tuple[EnterpriseFee, ...] = ()
    """Fees the coordinator charges on every item in the cycle."""

    def is_open(self, now: datetime) -> bool:
        """Whether orders are being taken at the given moment."""
        if self.orders_open_at is None or self.orders_close_at is None:
            return False
        return self.orders_open_at <= now < self.orders_close_at

    @property
    def incoming_exchanges(self) -> List[Exchange]:
        return [e for e in self.exchanges if e.incoming]

    @property
    def outgoing_exchanges(self) -> List[Exchange]:
        return [e for e in self.exchanges if e.outgoing]

    def exchange_to(self, distributor_id: int) -> Optional[Exchange]:
        """The outgoing exchange to a distributor, if any."""
        for exchange in self.outgoing_exchanges:
            if exchange.receiver_id == distributor_id:
                return exchange
        return None

    @property
    def distributor_ids(self) -> List[int]:
        return [e.receiver_id for e in self.outgoing_exchanges]

    def has_distributor(self, distributor_id: int) -> bool:
        return distributor_id in self.distributor_ids

    @classmethod
    def from_dict(cls, data: Dict[str, Any], fees: Dict[int, EnterpriseFee]) -> "OrderCycle":
        return cls(
            id=int(data["id"]),
            name=data.get("name", ""),
            coordinator_id=int(data["coordinator_id"]),
            orders_open_at=_parse_timestamp(data.get("orders_open_at")),
            orders_close_at=_parse_timestamp(data.get("orders_close_at")),
            exchanges=tuple(Exchange.from_dict(e, fees) for e in data.get("exchanges", [])),
            coordinator_fees=tuple(fees[int(f)] for f in data.get("coordinator_fee_ids", [])),
        )


@dataclass(frozen=True)
class CatalogSnapshot:
    """
    Immutable point-in-time catalogue.

    Products keep the order of the seed document; that order is the
    "original order" listings fall back to.

    Example:
        snapshot = catalog_service.get_snapshot()
        for oc in snapshot.open_order_cycles_for(distributor, now):
            print(oc.name)
    """

    loaded_at: datetime
    """When this snapshot was built."""

    taxons: Dict[int, Taxon] = field(default_factory=dict)
    enterprises: Dict[int, Enterprise] = field(default_factory=dict)
    products: tuple[Product, ...] = ()
    order_cycles: tuple[OrderCycle, ...] = ()

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    def get_taxon(self, taxon_id: Optional[int]) -> Optional[Taxon]:
        if taxon_id is None:
            return None
        return self.taxons.get(taxon_id)

    def get_enterprise(self, enterprise_id: Optional[int]) -> Optional[Enterprise]:
        if enterprise_id is None:
            return None
        return self.enterprises.get(enterprise_id)

    def get_order_cycle(self, order_cycle_id: Optional[int]) -> Optional[OrderCycle]:
        for order_cycle in self.order_cycles:
            if order_cycle.id == order_cycle_id:
                return order_cycle
        return None

    @property
    def distributors(self) -> List[Enterprise]:
        return [e for e in self.enterprises.values() if e.is_distributor]

    # -------------------------------------------------------------------------
    # Order cycle scopes
    # -------------------------------------------------------------------------

    def order_cycles_distributed_by(self, distributor: Enterprise) -> List[OrderCycle]:
        """Order cycles with an outgoing exchange to the distributor."""
        return [oc for oc in self.order_cycles if oc.has_distributor(distributor.id)]

    def open_order_cycles_for(self, distributor: Enterprise, now: datetime) -> List[OrderCycle]:
        return [oc for oc in self.order_cycles_distributed_by(distributor) if oc.is_open(now)]

    # -------------------------------------------------------------------------
    # Product scopes
    # -------------------------------------------------------------------------

    def variants_for(
        self,
        product: Product,
        order_cycle: OrderCycle,
        distributor: Enterprise
    ) -> List[Variant]:
        """Variants of a product sent to the distributor in the order cycle."""
        exchange = order_cycle.exchange_to(distributor.id)
        if exchange is None:
            return []
        return [v for v in product.variants if exchange.carries(v)]

    def products_distributed_by(
        self,
        order_cycle: OrderCycle,
        distributor: Enterprise
    ) -> List[Product]:
        """Non-deleted products with at least one variant in the outgoing exchange."""
        return [
            p for p in self.products
            if not p.is_deleted and self.variants_for(p, order_cycle, distributor)
        ]

    def supplied_products(self, enterprise: Enterprise) -> List[Product]:
        """Non-deleted products supplied by the enterprise."""
        return [
            p for p in self.products
            if p.supplier_id == enterprise.id and not p.is_deleted
        ]

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CatalogSnapshot":
        """
        Build a snapshot from a seed document.

        Args:
            data: Dict with 'taxons', 'enterprises', 'enterprise_fees',
                'products' and 'order_cycles' lists

        Returns:
            CatalogSnapshot with parsed data

        Raises:
            KeyError, ValueError, TypeError: If a record is malformed
        """
        fees = {}
        for raw_fee in data.get("enterprise_fees", []):
            fee = EnterpriseFee.from_dict(raw_fee)
            fees[fee.id] = fee

        taxons = {}
        for raw_taxon in data.get("taxons", []):
            taxon = Taxon.from_dict(raw_taxon)
            taxons[taxon.id] = taxon

        enterprises = {}
        for raw_enterprise in data.get("enterprises", []):
            enterprise = Enterprise.from_dict(raw_enterprise)
            enterprises[enterprise.id] = enterprise

        return cls(
            loaded_at=datetime.now(timezone.utc),
            taxons=taxons,
            enterprises=enterprises,
            products=tuple(Product.from_dict(p) for p in data.get("products", [])),
            order_cycles=tuple(OrderCycle.from_dict(oc, fees) for oc in data.get("order_cycles", [])),
        )

    @classmethod
    def create_empty(cls) -> "CatalogSnapshot":
        """Create an empty snapshot (no seed file configured)."""
        return cls(loaded_at=datetime.now(timezone.utc))

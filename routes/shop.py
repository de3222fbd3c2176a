"""
Storefront routes.

Handles:
- /shop               - Storefront page (resolves the current order cycle)
- /shop/order_cycle   - GET current order cycle, POST to select one
- /shop/products      - Product listing (XHR)
- /shop/producers     - Producers in the listing (XHR)

Every handler fetches ONE catalogue snapshot and passes it down.
Expected failures are raised as ShopfrontError subclasses and turned into
responses by the app error handlers:
- NoDistributorSelected -> redirect to the landing page
- OrderCycleNotFound    -> 404, empty body
- NoOrderCycleSelected  -> 404, empty body
"""

from datetime import datetime, timezone

from flask import (
    Blueprint,
    current_app,
    jsonify,
    redirect,
    render_template,
    request,
    session,
    url_for,
)

from models.shop import OrderCycleSelection, ShopContext
from modules.serializers import (
    order_cycle_to_dict,
    producer_to_dict,
    product_listing_to_dict,
)
from services.distributor_context import ORDER_CYCLE_KEY
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)

shop_bp = Blueprint("shop", __name__)


@shop_bp.route("/shop", methods=["GET"])
def show():
    """
    Display the storefront of the session's distributor.

    Resolves the current order cycle unless the shopper picked one
    explicitly: exactly one open cycle is selected automatically, otherwise
    the page asks the shopper to choose.
    """
    snapshot = _catalog().get_snapshot()
    distributor = _distributors().resolve(session, snapshot)

    selector = _selector()
    selection = selector.resolve_current(
        snapshot, distributor, _load_selection(), now=_now()
    )
    _store_selection(selection)

    order_cycle = selector.current(snapshot, selection, distributor)
    open_cycles = snapshot.open_order_cycles_for(distributor, _now())

    return render_template(
        "shop.html",
        distributor=distributor,
        order_cycle=order_cycle,
        order_cycles=open_cycles,
    )


@shop_bp.route("/shop/order_cycle", methods=["POST"])
def select_order_cycle():
    """
    Select the order cycle to shop in.

    Accepts order_cycle_id as a form field or in a JSON body.
    XHR and JSON callers get the serialized order cycle; a plain form
    post is redirected back to the storefront. 404 when the id is unknown
    or not distributed by the current distributor.
    """
    snapshot = _catalog().get_snapshot()
    distributor = _distributors().resolve(session, snapshot)

    order_cycle_id = request.form.get("order_cycle_id")
    if order_cycle_id is None and request.is_json:
        order_cycle_id = (request.get_json(silent=True) or {}).get("order_cycle_id")

    selector = _selector()
    selection = selector.select(snapshot, distributor, _load_selection(), order_cycle_id)
    _store_selection(selection)

    if not _wants_json():
        return redirect(url_for("shop.show"))

    order_cycle = selector.current(snapshot, selection, distributor)
    return jsonify(order_cycle_to_dict(order_cycle, snapshot))


@shop_bp.route("/shop/order_cycle", methods=["GET"])
def current_order_cycle():
    """Return the currently selected order cycle, or null."""
    snapshot = _catalog().get_snapshot()
    distributor = _distributors().resolve(session, snapshot)

    order_cycle = _selector().current(snapshot, _load_selection(), distributor)
    if order_cycle is None:
        return jsonify(None)
    return jsonify(order_cycle_to_dict(order_cycle, snapshot))


@shop_bp.route("/shop/products", methods=["GET"])
def products():
    """
    Products for the current distributor and order cycle, in display order.

    404 with an empty body when no order cycle is selected.
    """
    snapshot = _catalog().get_snapshot()
    context = _shop_context(snapshot)

    listings = _products().list_products(snapshot, context)
    return jsonify([product_listing_to_dict(listing) for listing in listings])


@shop_bp.route("/shop/producers", methods=["GET"])
def producers():
    """Producers supplying the current listing."""
    snapshot = _catalog().get_snapshot()
    context = _shop_context(snapshot)

    return jsonify([producer_to_dict(e) for e in _products().producers(snapshot, context)])


# =============================================================================
# HELPERS
# =============================================================================

def _catalog():
    return current_app.config["CATALOG_SERVICE"]


def _distributors():
    return current_app.config["DISTRIBUTOR_RESOLVER"]


def _selector():
    return current_app.config["ORDER_CYCLE_SELECTOR"]


def _products():
    return current_app.config["PRODUCT_RESOLVER"]


def _now() -> datetime:
    clock = current_app.config.get("CLOCK")
    return clock() if clock else datetime.now(timezone.utc)


def _wants_json() -> bool:
    return request.is_json or request.headers.get("X-Requested-With") == "XMLHttpRequest"


def _load_selection() -> OrderCycleSelection:
    return OrderCycleSelection.from_dict(session.get(ORDER_CYCLE_KEY))


def _store_selection(selection: OrderCycleSelection) -> None:
    session[ORDER_CYCLE_KEY] = selection.to_dict()
    session.modified = True


def _shop_context(snapshot) -> ShopContext:
    """Explicit (distributor, order cycle) pair for this request."""
    distributor = _distributors().resolve(session, snapshot)
    order_cycle = _selector().current(snapshot, _load_selection(), distributor)
    return ShopContext(distributor=distributor, order_cycle=order_cycle)

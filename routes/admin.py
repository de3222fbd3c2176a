"""
Admin read routes.

Handles:
- /admin/enterprises/for_order_cycle - Enterprises and the products each
  can contribute to an order cycle (soft-deleted products excluded)
"""

from flask import Blueprint, current_app, jsonify, request

from modules.serializers import enterprises_for_order_cycle


admin_bp = Blueprint("admin", __name__, url_prefix="/admin")


@admin_bp.route("/enterprises/for_order_cycle", methods=["GET"])
def for_order_cycle():
    """
    Enterprises with their supplied products, for order cycle editing.

    Optional ?enterprise_id=1&enterprise_id=2 restricts the result.
    """
    snapshot = current_app.config["CATALOG_SERVICE"].get_snapshot()

    requested = request.args.getlist("enterprise_id", type=int)
    enterprises = [
        e for e in snapshot.enterprises.values()
        if not requested or e.id in requested
    ]
    enterprises.sort(key=lambda e: e.name)

    return jsonify(enterprises_for_order_cycle(enterprises, snapshot))

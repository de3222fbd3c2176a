"""
Main routes (landing page, shop selection).

The landing page lists the shops; picking one stores it as the session's
distributor and sends the shopper to the storefront.
"""

from flask import Blueprint, abort, current_app, redirect, render_template, session, url_for

from core.exceptions import NoDistributorSelected
from logging_config import get_logger


logger = get_logger(__name__)

main_bp = Blueprint("main", __name__)


@main_bp.route("/")
def index():
    """Landing page listing all distributors."""
    snapshot = current_app.config["CATALOG_SERVICE"].get_snapshot()
    distributors = sorted(snapshot.distributors, key=lambda d: d.name)
    return render_template("index.html", distributors=distributors)


@main_bp.route("/shops/<int:distributor_id>", methods=["GET"])
def enter_shop(distributor_id: int):
    """Make a distributor current and open its storefront."""
    snapshot = current_app.config["CATALOG_SERVICE"].get_snapshot()
    try:
        current_app.config["DISTRIBUTOR_RESOLVER"].select(session, snapshot, distributor_id)
    except NoDistributorSelected:
        abort(404)

    logger.debug(f"Session entered shop {distributor_id}")
    return redirect(url_for("shop.show"))

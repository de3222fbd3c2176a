"""
Shopfront - Flask Application Entry Point.

This is a slim app factory that:
1. Loads configuration (.env + config classes)
2. Loads the catalogue snapshot (fail-fast on a bad seed file)
3. Wires the storefront services
4. Registers route blueprints
5. Sets up error handlers

ARCHITECTURE:
    Request thread
    ├── One CatalogSnapshot per request (immutable, shared)
    ├── DistributorContextResolver   (session -> distributor)
    ├── OrderCycleSelector           (session -> order cycle)
    └── ProductListingResolver       (distributor + order cycle -> products)

Session state (distributor id, order cycle selection) lives in the signed
Flask session cookie; nothing is shared between shoppers.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from flask import Flask, redirect, url_for

from logging_config import setup_logging, get_logger
from core.exceptions import (
    CatalogLoadError,
    NoDistributorSelected,
    NoOrderCycleSelected,
    OrderCycleNotFound,
)
from services.catalog_service import CatalogService
from services.distributor_context import DistributorContextResolver
from services.order_cycle_service import OrderCycleSelector
from services.product_service import ProductListingResolver
from services.strategies import OrderCycleFeePricing
from routes import register_blueprints


# Module logger (configured after setup_logging)
logger = get_logger(__name__)


def create_app(
    config_object: Any = "config.Config",
    catalog_service: Optional[CatalogService] = None,
    product_resolver: Optional[ProductListingResolver] = None,
) -> Flask:
    """
    Application factory - creates and configures Flask app.

    Args:
        config_object: Config class, or its dotted path
        catalog_service: Pre-built catalogue (tests); loaded from
            CATALOG_PATH when None
        product_resolver: Pre-built listing resolver with custom strategies

    Returns:
        Configured Flask application

    Raises:
        CatalogLoadError: If CATALOG_PATH is set but cannot be loaded
    """
    load_dotenv(Path(__file__).parent / ".env", override=True)

    app = Flask(__name__)
    app.config.from_object(config_object)

    # Configure logging
    log_level = logging.DEBUG if app.config.get("DEBUG") else logging.INFO
    enable_file_logging = app.config.get("ENVIRONMENT") == "production"

    root_logger = setup_logging(
        log_level=log_level,
        enable_file_logging=enable_file_logging
    )

    # Set Flask's logger to use our configured logger
    app.logger.handlers = root_logger.handlers
    app.logger.setLevel(log_level)

    logger.info(f"Starting Shopfront in {app.config.get('ENVIRONMENT')} mode")

    # =========================================================================
    # CATALOGUE (FAIL-FAST)
    # =========================================================================

    if catalog_service is None:
        catalog_path = app.config.get("CATALOG_PATH")
        if catalog_path:
            try:
                catalog_service = CatalogService.from_file(catalog_path)
            except CatalogLoadError as e:
                logger.error(f"FATAL: Cannot start application - {e}")
                raise
        else:
            logger.warning("SHOPFRONT_CATALOG_PATH not set, starting with an empty catalogue")
            catalog_service = CatalogService()

    app.config["CATALOG_SERVICE"] = catalog_service

    # =========================================================================
    # SERVICES
    # =========================================================================

    app.config["DISTRIBUTOR_RESOLVER"] = DistributorContextResolver()
    app.config["ORDER_CYCLE_SELECTOR"] = OrderCycleSelector()
    app.config["PRODUCT_RESOLVER"] = product_resolver or ProductListingResolver(
        pricing=OrderCycleFeePricing(decimals=app.config.get("PRICE_DECIMALS", 2))
    )
    app.config.setdefault("CLOCK", None)

    # =========================================================================
    # REGISTER BLUEPRINTS
    # =========================================================================

    register_blueprints(app)

    # =========================================================================
    # ERROR HANDLERS
    # =========================================================================

    @app.errorhandler(NoDistributorSelected)
    def handle_no_distributor(e):
        logger.debug(f"{e.message}, redirecting to landing page")
        return redirect(url_for("main.index"))

    @app.errorhandler(OrderCycleNotFound)
    def handle_order_cycle_not_found(e):
        logger.debug(e.message)
        return "", 404

    @app.errorhandler(NoOrderCycleSelected)
    def handle_no_order_cycle(e):
        logger.debug(e.message)
        return "", 404

    @app.errorhandler(500)
    def handle_server_error(e):
        logger.error(f"500 error: {e}", exc_info=True)
        return {"error": "An unexpected error occurred"}, 500

    logger.info("Application initialized successfully")
    return app


if __name__ == "__main__":
    app = create_app()
    debug_mode = os.environ.get("FLASK_DEBUG", "1") == "1"
    app.run(debug=debug_mode)

"""
Flask route blueprints for Shopfront.

This module contains all route handlers organized by functionality:
- main: Landing page and shop (distributor) selection
- shop: Storefront, order cycle selection, product listing
- admin: Enterprises for order cycle editing
- api: Health check

Each blueprint is registered with the Flask app in create_app().
"""

from .main import main_bp
from .shop import shop_bp
from .admin import admin_bp
from .api import api_bp

__all__ = [
    "main_bp",
    "shop_bp",
    "admin_bp",
    "api_bp",
]


def register_blueprints(app):
    """
    Register all blueprints with the Flask app.

    Args:
        app: Flask application instance
    """
    app.register_blueprint(main_bp)
    app.register_blueprint(shop_bp)
    app.register_blueprint(admin_bp)
    app.register_blueprint(api_bp)

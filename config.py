"""
Configuration for Shopfront.

The catalogue is loaded from a JSON seed document at startup. When
SHOPFRONT_CATALOG_PATH is unset the shop starts with an empty catalogue;
when it is set but unreadable the app fails fast.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env file early so environment variables are available for Config class
load_dotenv(override=True)

# Base directory (where this file lives)
BASE_DIR = Path(__file__).resolve().parent


class Config:
    """Default configuration for the Flask application."""

    # Flask settings
    SECRET_KEY = os.environ.get("FLASK_SECRET_KEY", "dev-secret-key")
    SESSION_COOKIE_NAME = "shopfront_session"
    ENVIRONMENT = os.environ.get("FLASK_ENV", "development")

    # Debug mode
    DEBUG = os.environ.get("FLASK_DEBUG", "1") == "1"
    TESTING = False

    # ==========================================================================
    # Catalogue
    # ==========================================================================
    # SHOPFRONT_CATALOG_PATH: JSON seed document with taxons, enterprises,
    #   enterprise_fees, products and order_cycles.
    #   Example: data/catalog.example.json
    # ==========================================================================
    CATALOG_PATH = os.environ.get("SHOPFRONT_CATALOG_PATH", "")

    # Price rounding (decimal places) for prices with fees
    PRICE_DECIMALS = int(os.environ.get("SHOPFRONT_PRICE_DECIMALS", "2"))


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False
    TESTING = False
    SESSION_COOKIE_SECURE = True
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'
    PERMANENT_SESSION_LIFETIME = 3600  # 1 hour


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True
    TESTING = False


class TestingConfig(Config):
    """Testing configuration."""
    DEBUG = False
    TESTING = True
    SECRET_KEY = "test-secret-key"
    CATALOG_PATH = ""

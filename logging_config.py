"""
Logging setup for Shopfront.

Every record is tagged with the storefront request it belongs to: the
HTTP method and path, and the shop (distributor id) held in the shopper's
session. Selection and listing messages from concurrent shoppers can then
be told apart without threading ids through the services.

Records emitted outside a request (startup, catalogue reloads) carry "-"
for both fields.

Log Format:
    2026-10-17 10:15:30 [INFO    ] [-] [shop -] shopfront.app - Starting Shopfront in production mode
    2026-10-17 10:15:31 [DEBUG   ] [GET /shop] [shop 10] shopfront.services.order_cycle_service - Auto-selected order cycle 4 for distributor 10

Usage:
    from logging_config import setup_logging, get_logger

    setup_logging(log_level=logging.INFO, enable_file_logging=True)  # in create_app
    logger = get_logger(__name__)                                    # in modules
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from flask import has_request_context, request, session


APP_LOGGER_NAME = "shopfront"

# Session key of the current shop; mirrors services.distributor_context
SESSION_DISTRIBUTOR_KEY = "distributor_id"

LOG_FORMAT = "%(asctime)s [%(levelname)-8s] [%(request_line)s] [shop %(shop_id)s] %(name)s - %(message)s"


class RequestContextFilter(logging.Filter):
    """
    Adds request_line ("GET /shop/products") and shop_id to each record.

    Never drops a record.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if has_request_context():
            record.request_line = f"{request.method} {request.path}"
            record.shop_id = session.get(SESSION_DISTRIBUTOR_KEY) or "-"
        else:
            record.request_line = "-"
            record.shop_id = "-"
        return True


def _rotating_handler(path: Path, level: int, formatter, context_filter) -> RotatingFileHandler:
    handler = RotatingFileHandler(
        filename=path,
        maxBytes=10 * 1024 * 1024,  # 10 MB per file
        backupCount=5,
        encoding="utf-8"
    )
    handler.setLevel(level)
    handler.setFormatter(formatter)
    handler.addFilter(context_filter)
    return handler


def setup_logging(
    app_name: str = APP_LOGGER_NAME,
    log_level: int = logging.INFO,
    log_dir: Optional[Path] = None,
    enable_file_logging: bool = True,
) -> logging.Logger:
    """
    Configure the "shopfront" logger namespace.

    Console output always; in production (enable_file_logging) also a
    rotating application log and a separate ERROR-only log, so failed
    catalogue loads and 500s are easy to find.

    Args:
        app_name: Name of the root logger (default: "shopfront")
        log_level: Minimum log level (default: INFO)
        log_dir: Directory for log files (default: ./logs next to this file)
        enable_file_logging: Whether to write log files

    Returns:
        Configured root logger instance
    """
    logger = logging.getLogger(app_name)
    logger.setLevel(log_level)
    logger.propagate = False

    # create_app may run several times in one process (tests)
    logger.handlers.clear()

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    context_filter = RequestContextFilter()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    console_handler.addFilter(context_filter)
    logger.addHandler(console_handler)

    if enable_file_logging:
        if log_dir is None:
            log_dir = Path(__file__).parent / "logs"
        log_dir.mkdir(parents=True, exist_ok=True)

        app_log_file = log_dir / f"{app_name}.log"
        logger.addHandler(_rotating_handler(app_log_file, log_level, formatter, context_filter))
        logger.addHandler(_rotating_handler(
            log_dir / f"{app_name}_error.log", logging.ERROR, formatter, context_filter
        ))
        logger.info(f"File logging enabled: {app_log_file}")

    logger.info(f"Logging configured at level {logging.getLevelName(log_level)}")
    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Child logger under the "shopfront" namespace.

    "services.product_service" -> "shopfront.services.product_service"
    """
    if not name.startswith(APP_LOGGER_NAME):
        name = f"{APP_LOGGER_NAME}.{name}"
    return logging.getLogger(name)

"""Helper modules for the Shopfront application."""

__all__ = [
    "serializers",
]

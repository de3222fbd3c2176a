"""
Catalogue service holding the current catalogue snapshot.

The catalogue is read-only from the storefront's perspective. It is loaded
from a JSON seed document into an immutable CatalogSnapshot; routes read it
via get_snapshot() once per request and pass that snapshot down, so a
single listing never sees two catalogue states.

Thread Safety:
    - reload() builds a new CatalogSnapshot and swaps the reference
    - Request threads read the current snapshot via atomic reference
    - No locks needed - Python's GIL + immutable data = thread-safe

Usage:
    # At app startup
    catalog_service = CatalogService.from_file("data/catalog.json")

    # In routes
    snapshot = catalog_service.get_snapshot()

    # After the seed document changes
    catalog_service.reload()
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional, Union

from core.exceptions import CatalogLoadError
from models.catalog import CatalogSnapshot
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)


def load_catalog_file(path: Union[str, Path]) -> CatalogSnapshot:
    """
    Read a seed document and build a snapshot from it.

    Args:
        path: Path to the JSON seed document

    Returns:
        CatalogSnapshot with parsed data

    Raises:
        CatalogLoadError: If the file is missing, not JSON, or malformed
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        raise CatalogLoadError(str(path), "file not found")
    except json.JSONDecodeError as e:
        raise CatalogLoadError(str(path), f"invalid JSON ({e})")

    return build_snapshot(data, source=str(path))


def build_snapshot(data: Dict[str, Any], source: str = "<memory>") -> CatalogSnapshot:
    """
    Build a snapshot from an already-parsed seed document.

    Raises:
        CatalogLoadError: If a record is malformed
    """
    if not isinstance(data, dict):
        raise CatalogLoadError(source, "seed document must be a JSON object")
    try:
        return CatalogSnapshot.from_dict(data)
    except KeyError as e:
        raise CatalogLoadError(source, f"missing field {e}")
    except (ValueError, TypeError) as e:
        raise CatalogLoadError(source, str(e))


class CatalogService:
    """
    Holder of the current catalogue snapshot.

    Attributes:
        source_path: Seed document reloaded by reload(), or None
    """

    def __init__(
        self,
        snapshot: Optional[CatalogSnapshot] = None,
        source_path: Optional[Union[str, Path]] = None
    ):
        """
        Initialize catalogue service.

        Args:
            snapshot: Initial snapshot (empty catalogue when None)
            source_path: Seed document to reload from
        """
        self._source_path = Path(source_path) if source_path else None

        # Current snapshot (atomic reference)
        # Start with empty snapshot so get_snapshot() never returns None
        self._current_snapshot: CatalogSnapshot = snapshot or CatalogSnapshot.create_empty()

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "CatalogService":
        """Create a service loaded from a seed document (fails fast)."""
        snapshot = load_catalog_file(path)
        logger.info(
            f"Catalogue loaded from {path}: {len(snapshot.products)} products, "
            f"{len(snapshot.order_cycles)} order cycles, "
            f"{len(snapshot.distributors)} distributors"
        )
        return cls(snapshot, source_path=path)

    @property
    def source_path(self) -> Optional[Path]:
        return self._source_path

    def get_snapshot(self) -> CatalogSnapshot:
        """
        Get the current catalogue snapshot.

        Returns:
            Current CatalogSnapshot (never None)
        """
        return self._current_snapshot

    def replace(self, snapshot: CatalogSnapshot) -> None:
        """Swap in a new snapshot."""
        self._current_snapshot = snapshot

    def reload(self) -> bool:
        """
        Re-read the seed document and swap in the new snapshot.

        The current snapshot is kept when loading fails.

        Returns:
            True if reload succeeded, False otherwise
        """
        if self._source_path is None:
            logger.warning("Catalogue reload requested but no source path configured")
            return False

        try:
            new_snapshot = load_catalog_file(self._source_path)
        except CatalogLoadError as e:
            logger.error(f"Catalogue reload failed, keeping previous snapshot: {e}")
            return False

        self._current_snapshot = new_snapshot
        logger.info(f"Catalogue reloaded: {len(new_snapshot.products)} products")
        return True

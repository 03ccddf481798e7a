"""Data loading utilities."""

from .catalog_loader import DEFAULT_CATALOG, load_catalog

__all__ = ["DEFAULT_CATALOG", "load_catalog"]

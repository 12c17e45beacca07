"""CatalogDesk: client-side product catalog management."""

__version__ = "0.3.0"

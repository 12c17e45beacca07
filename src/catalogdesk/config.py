"""Default configuration values for CatalogDesk."""

from __future__ import annotations

from typing import Final

from catalogdesk import __version__

DEFAULT_BASE_URL: Final[str] = "http://localhost:5000/api"
DEFAULT_TIMEOUT_SEC: Final[float] = 15.0
USER_AGENT: Final[str] = f"CatalogDesk/{__version__}"

PRODUCTS_PATH: Final[str] = "/products"
PRODUCT_UPLOAD_PATH: Final[str] = "/upload/product"
CATEGORIES_PATH: Final[str] = "/categories"

# Quiet period after the last query change before a listing request is sent.
# Typing into the search box restarts the window on every keystroke.
SEARCH_DEBOUNCE_MS: Final[int] = 300

DEFAULT_LANGUAGE: Final[str] = "en"
VIEW_MODES: Final[tuple[str, ...]] = ("grid", "list")

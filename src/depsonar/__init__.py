"""depsonar: Multi-ecosystem dependency health for local projects."""

from __future__ import annotations

__version__ = "4.0.0"
__license__ = "MIT"

# Name embedded in the cache file and CLI output.
_PRODUCT_ID = "depsonar"

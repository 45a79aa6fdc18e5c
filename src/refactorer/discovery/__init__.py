"""File discovery package."""

from .filters import PathFilter, is_hidden
from .walk import discover_candidates

__all__ = ["PathFilter", "discover_candidates", "is_hidden"]

"""Completion cache package."""

from .models import DoneSet, PersistResult
from .store import CacheStore, parse_cache_text, render_cache_text

__all__ = ["CacheStore", "DoneSet", "PersistResult", "parse_cache_text", "render_cache_text"]

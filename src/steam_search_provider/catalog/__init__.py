"""
Game catalog.

Reads the installed Steam library, drops non-game apps and holds
the resulting snapshot as a read-only search index.
"""

from steam_search_provider.catalog.filter import NON_GAME_APP_IDS, should_filter
from steam_search_provider.catalog.index import CatalogEntry, SearchIndex, build_index
from steam_search_provider.catalog.loader import SteamLibraryLoader

__all__ = [
    "CatalogEntry",
    "NON_GAME_APP_IDS",
    "SearchIndex",
    "SteamLibraryLoader",
    "build_index",
    "should_filter",
]

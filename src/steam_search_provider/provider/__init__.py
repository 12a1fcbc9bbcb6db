"""
Search provider.

The provider logic answering match, describe and activate calls,
and the D-Bus interface that exposes it to GNOME Shell.
"""

from steam_search_provider.provider.dbus_service import (
    SEARCH_PROVIDER_INTERFACE,
    SearchProviderInterface,
    register,
    serve,
)
from steam_search_provider.provider.launcher import Launcher, UriLauncher
from steam_search_provider.provider.search import GameSearchProvider

__all__ = [
    "SEARCH_PROVIDER_INTERFACE",
    "GameSearchProvider",
    "Launcher",
    "SearchProviderInterface",
    "UriLauncher",
    "register",
    "serve",
]

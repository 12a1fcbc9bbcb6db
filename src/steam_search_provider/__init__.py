"""
Steam Search Provider.

GNOME Shell search provider for games installed
through Steam.
"""

__version__ = "0.1.0"

__all__ = [
    "__version__",
]

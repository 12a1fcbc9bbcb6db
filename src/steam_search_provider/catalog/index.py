"""
In-memory search index over the installed games.

The index is built once at startup and never changes afterwards,
so every D-Bus callback can read it without locking.
"""

from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType

from steam_search_provider.catalog.filter import should_filter
from steam_search_provider.errors import UnknownResultError
from steam_search_provider.logger import get_logger

logger = get_logger(__name__, component="index")


@dataclass(frozen=True)
class CatalogEntry:
    """An installed app as enumerated from a Steam library."""

    identifier: str
    name: str | None


class SearchIndex(Mapping[str, str]):
    """
    Read-only mapping of app identifier to display name.

    Example:
        >>> index = SearchIndex({"100": "Portal 2"})
        >>> index.match(["portal"])
        ['100']
    """

    def __init__(self, games: Mapping[str, str] | None = None) -> None:
        self._games: Mapping[str, str] = MappingProxyType(dict(games or {}))

    def __getitem__(self, identifier: str) -> str:
        return self._games[identifier]

    def __iter__(self) -> Iterator[str]:
        return iter(self._games)

    def __len__(self) -> int:
        return len(self._games)

    def __repr__(self) -> str:
        return f"SearchIndex(games={len(self._games)})"

    def name_of(self, identifier: str) -> str:
        """
        Look up the display name of an indexed app.

        Raises:
            UnknownResultError: If the identifier was never indexed
        """
        try:
            return self._games[identifier]
        except KeyError:
            raise UnknownResultError(
                f"No game indexed under identifier {identifier!r}",
                identifier=identifier,
            ) from None

    def match(self, terms: Sequence[str]) -> list[str]:
        """
        Find games whose name contains any of the search terms.

        Matching is a case-insensitive substring test. A game is
        reported once per term it matches, so a name matching two
        terms appears twice in the result.

        Args:
            terms: Search terms as typed into the shell

        Returns:
            List of matching identifiers in index order
        """
        lowered_terms = [term.lower() for term in terms]
        results: list[str] = []

        for identifier, name in self._games.items():
            name_lower = name.lower()
            for term, term_lower in zip(terms, lowered_terms):
                if term_lower in name_lower:
                    logger.debug("Found game", identifier=identifier, name=name, term=term)
                    results.append(identifier)

        return results


def build_index(entries: Iterable[CatalogEntry]) -> SearchIndex:
    """
    Build the search index from enumerated catalog entries.

    Non-game apps are dropped, entries without a name are skipped
    and a repeated identifier overwrites the earlier entry.

    Args:
        entries: Catalog entries in loader enumeration order

    Returns:
        SearchIndex snapshot
    """
    games: dict[str, str] = {}
    seen = 0
    filtered = 0
    nameless = 0

    for entry in entries:
        seen += 1

        if should_filter(entry.identifier):
            filtered += 1
            continue

        if entry.name is None:
            nameless += 1
            logger.warning("Skipping app without a name", identifier=entry.identifier)
            continue

        games[entry.identifier] = entry.name

    logger.info(
        "Search index built",
        entries_seen=seen,
        filtered=filtered,
        skipped_nameless=nameless,
        games=len(games),
    )

    return SearchIndex(games)

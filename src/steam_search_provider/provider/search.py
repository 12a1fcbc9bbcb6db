"""
Search provider logic.

Answers the shell's search calls from the search index. Kept free
of D-Bus types so it can be driven directly from the CLI and tests.
"""

from collections.abc import Sequence

from steam_search_provider.catalog.index import SearchIndex
from steam_search_provider.config import SteamConfig, get_settings
from steam_search_provider.contracts import ResultMeta
from steam_search_provider.logger import get_logger
from steam_search_provider.provider.launcher import Launcher, UriLauncher


class GameSearchProvider:
    """
    Matches, describes and launches games from a search index.

    Example:
        >>> provider = GameSearchProvider(SearchIndex({"100": "Portal 2"}))
        >>> provider.initial_result_set(["portal"])
        ['100']
    """

    def __init__(
        self,
        index: SearchIndex,
        *,
        launcher: Launcher | None = None,
        steam_config: SteamConfig | None = None,
    ) -> None:
        """
        Initialize the provider.

        Args:
            index: Search index snapshot, shared read-only
            launcher: URI launcher (spawns the configured opener if None)
            steam_config: Steam configuration (uses settings if None)
        """
        config = steam_config or get_settings().steam
        self._index = index
        self._launcher = launcher or UriLauncher()
        self._icon_prefix = config.icon_prefix
        self._launch_uri_template = config.launch_uri_template
        self._logger = get_logger(self.__class__.__name__, component="provider")

    @property
    def index(self) -> SearchIndex:
        return self._index

    def initial_result_set(self, terms: Sequence[str]) -> list[str]:
        """Match a fresh query against the whole index."""
        return self._index.match(terms)

    def subsearch_result_set(
        self,
        previous_results: Sequence[str],
        terms: Sequence[str],
    ) -> list[str]:
        """
        Refine an earlier result set as the user keeps typing.

        A game matches when any term does, so a longer query can match
        games the previous one missed. The whole index is searched
        again and previous_results is ignored.
        """
        return self._index.match(terms)

    def result_metas(self, identifiers: Sequence[str]) -> list[ResultMeta]:
        """
        Describe search results for display.

        Args:
            identifiers: Identifiers previously returned by a search

        Returns:
            One ResultMeta per identifier, in the same order

        Raises:
            UnknownResultError: If an identifier is not in the index
        """
        return [
            ResultMeta(
                id=identifier,
                name=self._index.name_of(identifier),
                description=identifier,
                icon_ref=f"{self._icon_prefix}{identifier}",
            )
            for identifier in identifiers
        ]

    def launch_uri(self, identifier: str) -> str:
        """Build the URI that starts a game."""
        return self._launch_uri_template.format(identifier=identifier)

    async def activate_result(
        self,
        identifier: str,
        terms: Sequence[str],
        timestamp: int,
    ) -> None:
        """
        Launch the game the user selected.

        terms and timestamp are part of the shell's call but unused.
        Launch failures are logged by the launcher and not raised.
        """
        uri = self.launch_uri(identifier)
        self._logger.info("Activating result", identifier=identifier, uri=uri)

        if not await self._launcher.launch(uri):
            self._logger.warning("Launch request failed", identifier=identifier)

    async def launch_search(self, terms: Sequence[str], timestamp: int) -> None:
        """Open the search in the application. Steam has no such view, so nothing happens."""
        self._logger.debug("Ignoring launch search request", terms=list(terms))

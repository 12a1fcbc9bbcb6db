"""
Steam library loader.

Locates the Steam installation, reads its library folders and
enumerates the app manifests of every installed title. Problems
with a single library or manifest are logged and skipped so one
broken file never hides the rest of the library.
"""

from collections.abc import Iterator
from pathlib import Path
from typing import Any, ClassVar

import vdf
from pydantic import ValidationError

from steam_search_provider.catalog.index import CatalogEntry
from steam_search_provider.config import get_settings
from steam_search_provider.contracts import AppManifest
from steam_search_provider.errors import CatalogError, SteamNotFoundError
from steam_search_provider.logger import get_logger


def _get_case_insensitive(data: dict[str, Any], key: str) -> Any:
    """Fetch a VDF key regardless of the casing Steam wrote it with."""
    if key in data:
        return data[key]
    lowered = key.lower()
    for candidate, value in data.items():
        if candidate.lower() == lowered:
            return value
    return None


class SteamLibraryLoader:
    """
    Enumerates installed apps from local Steam libraries.

    Example:
        >>> loader = SteamLibraryLoader()
        >>> for entry in loader.iter_entries():
        ...     print(entry.identifier, entry.name)
    """

    DEFAULT_ROOTS: ClassVar[tuple[str, ...]] = (
        "~/.steam/steam",
        "~/.local/share/Steam",
        "~/.var/app/com.valvesoftware.Steam/.local/share/Steam",
    )

    def __init__(self, root_path: Path | None = None) -> None:
        """
        Initialize the loader.

        Args:
            root_path: Steam installation root (configured or auto-detected if None)
        """
        self._root_path = root_path or get_settings().steam.root_path
        self._logger = get_logger(self.__class__.__name__, component="loader")

    def locate(self) -> Path:
        """
        Find the Steam installation root.

        Returns:
            Path: Directory containing the steamapps folder

        Raises:
            SteamNotFoundError: If no installation can be found
        """
        if self._root_path is not None:
            candidates = [Path(self._root_path).expanduser()]
        else:
            candidates = [Path(p).expanduser() for p in self.DEFAULT_ROOTS]

        for candidate in candidates:
            if (candidate / "steamapps").is_dir():
                self._logger.debug("Located Steam", root=str(candidate))
                return candidate

        raise SteamNotFoundError(
            "Could not locate a Steam installation",
            path=", ".join(str(c) for c in candidates),
        )

    def libraries(self, root: Path | None = None) -> list[Path]:
        """
        List the Steam library folders.

        The installation root is always the first library. Additional
        folders come from steamapps/libraryfolders.vdf. Paths are resolved
        so a symlinked root (~/.steam/steam) and its target count once.

        Args:
            root: Steam root (located if None)

        Returns:
            List of resolved library directories, without duplicates
        """
        root = (root or self.locate()).resolve()
        libraries = [root]
        folders_file = root / "steamapps" / "libraryfolders.vdf"

        if not folders_file.is_file():
            return libraries

        try:
            with folders_file.open(encoding="utf-8", errors="replace") as f:
                data = vdf.load(f)
        except (OSError, SyntaxError) as e:
            self._logger.error(
                "Failed reading library folders",
                path=str(folders_file),
                error=str(e),
            )
            return libraries

        folders = _get_case_insensitive(data, "libraryfolders") or {}
        for key, value in folders.items():
            # Legacy layout mixes numbered paths with metadata keys
            if not key.isdigit():
                continue

            raw_path = _get_case_insensitive(value, "path") if isinstance(value, dict) else value
            if not raw_path:
                continue

            library = Path(raw_path).expanduser().resolve()
            if library not in libraries:
                libraries.append(library)

        self._logger.debug("Found libraries", count=len(libraries))
        return libraries

    def read_manifest(self, manifest_path: Path) -> AppManifest:
        """
        Parse and validate a single app manifest.

        Args:
            manifest_path: Path to an appmanifest_<appid>.acf file

        Returns:
            AppManifest: Validated manifest

        Raises:
            CatalogError: If the file cannot be read or is malformed
        """
        try:
            with manifest_path.open(encoding="utf-8", errors="replace") as f:
                data = vdf.load(f)
        except (OSError, SyntaxError) as e:
            raise CatalogError(
                f"Failed reading manifest: {e}",
                path=str(manifest_path),
                original_error=e,
            ) from e

        app_state = _get_case_insensitive(data, "AppState")
        if not isinstance(app_state, dict):
            raise CatalogError("Manifest has no AppState block", path=str(manifest_path))

        try:
            return AppManifest.model_validate(
                {
                    "appid": _get_case_insensitive(app_state, "appid"),
                    "name": _get_case_insensitive(app_state, "name"),
                }
            )
        except ValidationError as e:
            raise CatalogError(
                "Invalid manifest contents",
                path=str(manifest_path),
                original_error=e,
            ) from e

    def iter_entries(self) -> Iterator[CatalogEntry]:
        """
        Enumerate the installed apps of every library.

        Yields:
            CatalogEntry for each readable manifest

        Raises:
            SteamNotFoundError: If no installation can be found
        """
        root = self.locate()

        for library in self.libraries(root):
            steamapps = library / "steamapps"
            if not steamapps.is_dir():
                self._logger.error("Library has no steamapps folder", library=str(library))
                continue

            try:
                manifests = sorted(steamapps.glob("appmanifest_*.acf"))
            except OSError as e:
                self._logger.error("Failed reading library", library=str(library), error=str(e))
                continue

            for manifest_path in manifests:
                try:
                    manifest = self.read_manifest(manifest_path)
                except CatalogError as e:
                    self._logger.error("Failed reading app", path=e.path, error=str(e))
                    continue

                yield CatalogEntry(identifier=manifest.identifier, name=manifest.name)

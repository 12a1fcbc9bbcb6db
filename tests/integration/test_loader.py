"""Integration tests for the Steam library loader against fake Steam trees."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest
import vdf

from steam_search_provider.catalog import CatalogEntry, SteamLibraryLoader, build_index
from steam_search_provider.config import get_settings
from steam_search_provider.errors import CatalogError, SteamNotFoundError


def write_manifest(library: Path, appid: str, name: str | None) -> Path:
    """Write an appmanifest_<appid>.acf file into a library."""
    app_state = {"appid": appid, "StateFlags": "4", "installdir": name or appid}
    if name is not None:
        app_state["name"] = name

    path = library / "steamapps" / f"appmanifest_{appid}.acf"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(vdf.dumps({"AppState": app_state}, pretty=True), encoding="utf-8")
    return path


def write_library_folders(root: Path, data: dict) -> None:
    """Write steamapps/libraryfolders.vdf."""
    path = root / "steamapps" / "libraryfolders.vdf"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(vdf.dumps(data, pretty=True), encoding="utf-8")


@pytest.fixture
def steam_root(tmp_path: Path) -> Path:
    """A Steam installation with one extra library."""
    root = tmp_path / "Steam"
    extra = tmp_path / "Games"

    write_manifest(root, "620", "Portal 2")
    write_manifest(root, "1493710", "Proton Experimental")
    write_manifest(extra, "220", "Half-Life 2")
    write_library_folders(
        root,
        {
            "libraryfolders": {
                "0": {"path": str(root), "apps": {"620": "0", "1493710": "0"}},
                "1": {"path": str(extra), "apps": {"220": "0"}},
            }
        },
    )
    return root


@pytest.fixture
def clear_settings():
    """Reset cached settings around a test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestLocate:
    """Tests for finding the Steam installation."""

    def test_configured_root(self, steam_root: Path) -> None:
        """Test that an explicit root is used."""
        assert SteamLibraryLoader(steam_root).locate() == steam_root

    def test_missing_root(self, tmp_path: Path) -> None:
        """Test that a missing installation is fatal."""
        with pytest.raises(SteamNotFoundError, match="Could not locate"):
            SteamLibraryLoader(tmp_path / "nowhere").locate()

    def test_default_roots(self, tmp_path: Path, clear_settings: None) -> None:
        """Test auto-detection under the home directory."""
        root = tmp_path / ".local" / "share" / "Steam"
        (root / "steamapps").mkdir(parents=True)

        with patch.dict(os.environ, {"HOME": str(tmp_path)}, clear=True):
            assert SteamLibraryLoader().locate() == root

    def test_root_from_settings(self, steam_root: Path, clear_settings: None) -> None:
        """Test that STEAM_ROOT_PATH is honoured."""
        with patch.dict(os.environ, {"STEAM_ROOT_PATH": str(steam_root)}):
            assert SteamLibraryLoader().locate() == steam_root


class TestLibraries:
    """Tests for library folder discovery."""

    def test_current_layout(self, steam_root: Path, tmp_path: Path) -> None:
        """Test the nested libraryfolders.vdf layout."""
        libraries = SteamLibraryLoader(steam_root).libraries()

        assert libraries == [steam_root.resolve(), (tmp_path / "Games").resolve()]

    def test_legacy_layout(self, tmp_path: Path) -> None:
        """Test the flat LibraryFolders layout of older clients."""
        root = tmp_path / "Steam"
        (root / "steamapps").mkdir(parents=True)
        write_library_folders(
            root,
            {
                "LibraryFolders": {
                    "TimeNextStatsReport": "1700000000",
                    "ContentStatsID": "-123",
                    "1": str(tmp_path / "Games"),
                }
            },
        )

        libraries = SteamLibraryLoader(root).libraries()

        assert libraries == [root.resolve(), (tmp_path / "Games").resolve()]

    def test_no_library_file(self, tmp_path: Path) -> None:
        """Test that the root alone is used without libraryfolders.vdf."""
        root = tmp_path / "Steam"
        (root / "steamapps").mkdir(parents=True)

        assert SteamLibraryLoader(root).libraries() == [root.resolve()]

    def test_corrupt_library_file(self, tmp_path: Path) -> None:
        """Test that an unparseable libraryfolders.vdf falls back to the root."""
        root = tmp_path / "Steam"
        (root / "steamapps").mkdir(parents=True)
        (root / "steamapps" / "libraryfolders.vdf").write_text(
            '"libraryfolders"\n{\n\t"0"\n\t{\n', encoding="utf-8"
        )

        assert SteamLibraryLoader(root).libraries() == [root.resolve()]

    def test_symlinked_root_counted_once(self, tmp_path: Path) -> None:
        """Test that a symlinked root listing its real path is one library."""
        real_root = tmp_path / ".local" / "share" / "Steam"
        write_manifest(real_root, "620", "Portal 2")
        write_library_folders(
            real_root,
            {"libraryfolders": {"0": {"path": str(real_root)}}},
        )
        link = tmp_path / ".steam" / "steam"
        link.parent.mkdir()
        link.symlink_to(real_root, target_is_directory=True)

        assert SteamLibraryLoader(link).libraries() == [real_root.resolve()]


class TestReadManifest:
    """Tests for manifest parsing."""

    def test_valid_manifest(self, steam_root: Path) -> None:
        """Test reading a well-formed manifest."""
        manifest = SteamLibraryLoader(steam_root).read_manifest(
            steam_root / "steamapps" / "appmanifest_620.acf"
        )

        assert manifest.identifier == "620"
        assert manifest.name == "Portal 2"

    def test_lowercase_keys(self, tmp_path: Path) -> None:
        """Test manifests written with lowercase section names."""
        path = tmp_path / "appmanifest_620.acf"
        path.write_text(
            vdf.dumps({"appstate": {"AppID": "620", "Name": "Portal 2"}}), encoding="utf-8"
        )

        manifest = SteamLibraryLoader(tmp_path).read_manifest(path)

        assert manifest.identifier == "620"
        assert manifest.name == "Portal 2"

    def test_truncated_manifest(self, tmp_path: Path) -> None:
        """Test that a truncated file raises CatalogError."""
        path = tmp_path / "appmanifest_620.acf"
        path.write_text('"AppState"\n{\n\t"appid"\t\t"620"\n', encoding="utf-8")

        with pytest.raises(CatalogError) as exc_info:
            SteamLibraryLoader(tmp_path).read_manifest(path)

        assert exc_info.value.path == str(path)

    def test_missing_app_state(self, tmp_path: Path) -> None:
        """Test that a manifest without AppState raises CatalogError."""
        path = tmp_path / "appmanifest_620.acf"
        path.write_text(vdf.dumps({"Other": {"appid": "620"}}), encoding="utf-8")

        with pytest.raises(CatalogError, match="AppState"):
            SteamLibraryLoader(tmp_path).read_manifest(path)

    def test_invalid_appid(self, tmp_path: Path) -> None:
        """Test that a non-numeric app id raises CatalogError."""
        path = tmp_path / "appmanifest_x.acf"
        path.write_text(vdf.dumps({"AppState": {"appid": "x", "name": "X"}}), encoding="utf-8")

        with pytest.raises(CatalogError, match="Invalid manifest"):
            SteamLibraryLoader(tmp_path).read_manifest(path)


class TestIterEntries:
    """Tests for full library enumeration."""

    def test_enumerates_all_libraries(self, steam_root: Path) -> None:
        """Test that apps from every library are yielded."""
        entries = list(SteamLibraryLoader(steam_root).iter_entries())

        assert sorted(entries, key=lambda e: e.identifier) == [
            CatalogEntry(identifier="1493710", name="Proton Experimental"),
            CatalogEntry(identifier="220", name="Half-Life 2"),
            CatalogEntry(identifier="620", name="Portal 2"),
        ]

    def test_broken_manifest_skipped(self, steam_root: Path) -> None:
        """Test that one corrupt manifest does not stop the load."""
        (steam_root / "steamapps" / "appmanifest_999.acf").write_text(
            '"AppState"\n{\n', encoding="utf-8"
        )

        identifiers = {e.identifier for e in SteamLibraryLoader(steam_root).iter_entries()}

        assert identifiers == {"620", "1493710", "220"}

    def test_missing_library_skipped(self, tmp_path: Path) -> None:
        """Test that a library folder that no longer exists is skipped."""
        root = tmp_path / "Steam"
        write_manifest(root, "620", "Portal 2")
        write_library_folders(
            root,
            {"libraryfolders": {"1": {"path": str(tmp_path / "Unplugged")}}},
        )

        entries = list(SteamLibraryLoader(root).iter_entries())

        assert entries == [CatalogEntry(identifier="620", name="Portal 2")]

    def test_nameless_manifest_yielded(self, tmp_path: Path) -> None:
        """Test that a manifest without a name is yielded with name None."""
        root = tmp_path / "Steam"
        write_manifest(root, "620", None)

        entries = list(SteamLibraryLoader(root).iter_entries())

        assert entries == [CatalogEntry(identifier="620", name=None)]

    def test_missing_steam_raises(self, tmp_path: Path) -> None:
        """Test that enumeration fails when Steam is not installed."""
        with pytest.raises(SteamNotFoundError):
            list(SteamLibraryLoader(tmp_path / "nowhere").iter_entries())

    def test_build_index_from_library(self, steam_root: Path) -> None:
        """Test the full load path into a search index."""
        index = build_index(SteamLibraryLoader(steam_root).iter_entries())

        assert dict(index) == {"220": "Half-Life 2", "620": "Portal 2"}
        assert index.match(["half"]) == ["220"]

    def test_symlinked_root_yields_each_app_once(self, tmp_path: Path) -> None:
        """Test that apps are not read twice through a symlinked root."""
        real_root = tmp_path / ".local" / "share" / "Steam"
        write_manifest(real_root, "620", "Portal 2")
        write_library_folders(
            real_root,
            {"libraryfolders": {"0": {"path": str(real_root)}}},
        )
        link = tmp_path / ".steam" / "steam"
        link.parent.mkdir()
        link.symlink_to(real_root, target_is_directory=True)

        entries = list(SteamLibraryLoader(link).iter_entries())

        assert entries == [CatalogEntry(identifier="620", name="Portal 2")]

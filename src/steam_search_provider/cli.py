"""
Command-line interface for the Steam search provider.

Runs the D-Bus service and provides commands to inspect the
search index without going through GNOME Shell.
"""

import asyncio
import json
import sys
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field

from steam_search_provider.catalog import SearchIndex, SteamLibraryLoader, build_index
from steam_search_provider.config import get_settings
from steam_search_provider.logger import get_logger, setup_logging
from steam_search_provider.provider import GameSearchProvider, serve

logger = get_logger(__name__, component="cli")


class CLIOutput(BaseModel):
    """Structured output for CLI commands."""

    success: bool
    command: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    data: dict[str, Any] | list[Any] | None = None
    error: str | None = None


def print_json(output: CLIOutput) -> None:
    """Print output as formatted JSON."""
    print(json.dumps(output.model_dump(), indent=2, default=str))


def load_index() -> SearchIndex:
    """Read the installed library into a search index."""
    return build_index(SteamLibraryLoader().iter_entries())


async def cmd_serve() -> None:
    """Load the library and serve search requests on the session bus."""
    index = load_index()
    await serve(GameSearchProvider(index))


def cmd_list() -> None:
    """Print every indexed game."""
    index = load_index()

    output = CLIOutput(
        success=True,
        command="list",
        data=dict(index),
    )
    print_json(output)


def cmd_search(terms: list[str]) -> None:
    """Run a search the way the shell would and print the results."""
    provider = GameSearchProvider(load_index())
    identifiers = provider.initial_result_set(terms)

    output = CLIOutput(
        success=True,
        command="search",
        data={
            "terms": terms,
            "results": identifiers,
            "metas": [meta.model_dump() for meta in provider.result_metas(identifiers)],
        },
    )
    print_json(output)


def cmd_test_config() -> None:
    """Test configuration loading."""
    settings = get_settings()

    output = CLIOutput(
        success=True,
        command="test-config",
        data={
            "steam_root_path": str(settings.steam.root_path) if settings.steam.root_path else None,
            "launch_uri_template": settings.steam.launch_uri_template,
            "icon_prefix": settings.steam.icon_prefix,
            "bus_name": settings.provider.bus_name,
            "object_path": settings.provider.object_path,
            "opener_command": settings.provider.opener_command,
            "log_level": settings.logging.level,
            "log_format": settings.logging.format,
        },
    )
    print_json(output)


def print_usage() -> None:
    """Print CLI usage information."""
    usage = """
Steam Search Provider
=====================

Usage: steam-search-provider [command] [arguments]

Commands:
  serve                       Serve search requests on the session bus (default)
  list                        List indexed games
  search <term> [<term>...]   Search the index like GNOME Shell does
  test-config                 Test configuration loading

Examples:
  steam-search-provider search portal
  STEAM_ROOT_PATH=~/.steam/steam steam-search-provider list
"""
    print(usage)


def main() -> None:
    """Main CLI entry point."""
    setup_logging()

    command = sys.argv[1] if len(sys.argv) > 1 else "serve"

    try:
        if command == "serve":
            asyncio.run(cmd_serve())

        elif command == "list":
            cmd_list()

        elif command == "search":
            if len(sys.argv) < 3:
                print("Error: at least one search term required")
                sys.exit(1)
            cmd_search(sys.argv[2:])

        elif command == "test-config":
            cmd_test_config()

        elif command in ("help", "--help", "-h"):
            print_usage()

        else:
            print(f"Unknown command: {command}")
            print_usage()
            sys.exit(1)

    except KeyboardInterrupt:
        print("\nInterrupted by user")
        sys.exit(130)
    except Exception as e:
        logger.exception("CLI error", error=str(e))
        output = CLIOutput(
            success=False,
            command=command,
            error=str(e),
        )
        print_json(output)
        sys.exit(1)


if __name__ == "__main__":
    main()

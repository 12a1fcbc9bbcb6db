"""
Opens launch URIs with the desktop's default handler.
"""

import asyncio
from typing import Protocol

from steam_search_provider.config import get_settings
from steam_search_provider.logger import get_logger


class Launcher(Protocol):
    """Anything that can hand a URI to the OS."""

    async def launch(self, uri: str) -> bool: ...


class UriLauncher:
    """
    Spawns the opener command (xdg-open by default) for a URI.

    The child is not waited on. Failing to spawn is logged and
    reported through the return value only.
    """

    def __init__(self, command: list[str] | None = None) -> None:
        self._command = list(command or get_settings().provider.opener_command)
        self._logger = get_logger(self.__class__.__name__, component="launcher")

    async def launch(self, uri: str) -> bool:
        """
        Open a URI with the default handler for its scheme.

        Args:
            uri: URI to open

        Returns:
            bool: True if the opener process was started
        """
        try:
            process = await asyncio.create_subprocess_exec(
                *self._command,
                uri,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
            )
        except OSError as e:
            self._logger.error("Failed to launch", uri=uri, command=self._command, error=str(e))
            return False

        self._logger.info("Launched", uri=uri, pid=process.pid)
        return True

"""
D-Bus transport for the search provider.

Exports org.gnome.Shell.SearchProvider2 on the session bus using
dbus-fast and forwards every call to a GameSearchProvider.
"""

import asyncio
from typing import Any

from dbus_fast import BusType, RequestNameReply
from dbus_fast.aio import MessageBus
from dbus_fast.errors import AuthError, DBusError, InvalidAddressError
from dbus_fast.service import ServiceInterface, method

from steam_search_provider.config import ProviderConfig, get_settings
from steam_search_provider.errors import ProviderRegistrationError
from steam_search_provider.logger import get_logger
from steam_search_provider.provider.search import GameSearchProvider

SEARCH_PROVIDER_INTERFACE = "org.gnome.Shell.SearchProvider2"

logger = get_logger(__name__, component="dbus")


class SearchProviderInterface(ServiceInterface):
    """
    The org.gnome.Shell.SearchProvider2 interface.

    Activation and launch-search run as background tasks so the
    shell gets its reply without waiting for the opener.
    """

    def __init__(self, provider: GameSearchProvider) -> None:
        super().__init__(SEARCH_PROVIDER_INTERFACE)
        self._provider = provider
        self._tasks: set[asyncio.Task[None]] = set()

    def _spawn(self, coro: Any) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)

    def _on_task_done(self, task: asyncio.Task[None]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return

        exc = task.exception()
        if exc is not None:
            logger.error("Background request failed", error=str(exc), exc_info=exc)

    @method(name="GetInitialResultSet")
    def get_initial_result_set(self, terms: "as") -> "as":
        return self._provider.initial_result_set(terms)

    @method(name="GetSubsearchResultSet")
    def get_subsearch_result_set(self, previous_results: "as", terms: "as") -> "as":
        return self._provider.subsearch_result_set(previous_results, terms)

    @method(name="GetResultMetas")
    def get_result_metas(self, identifiers: "as") -> "aa{sv}":
        return [meta.to_dbus() for meta in self._provider.result_metas(identifiers)]

    @method(name="ActivateResult")
    def activate_result(self, identifier: "s", terms: "as", timestamp: "u"):
        self._spawn(self._provider.activate_result(identifier, terms, timestamp))

    @method(name="LaunchSearch")
    def launch_search(self, terms: "as", timestamp: "u"):
        self._spawn(self._provider.launch_search(terms, timestamp))


async def register(
    provider: GameSearchProvider,
    config: ProviderConfig | None = None,
) -> MessageBus:
    """
    Connect to the session bus and publish the provider.

    Args:
        provider: Search provider to expose
        config: Provider configuration (uses settings if None)

    Returns:
        MessageBus: Connected bus owning the provider's name

    Raises:
        ProviderRegistrationError: If the bus is unreachable or the name is taken
    """
    config = config or get_settings().provider

    try:
        bus = await MessageBus(bus_type=BusType.SESSION).connect()
    except (OSError, AuthError, InvalidAddressError) as e:
        raise ProviderRegistrationError(
            f"Failed to connect to the session bus: {e}",
            original_error=e,
        ) from e

    bus.export(config.object_path, SearchProviderInterface(provider))

    try:
        reply = await bus.request_name(config.bus_name)
    except DBusError as e:
        bus.disconnect()
        raise ProviderRegistrationError(
            f"Failed to request bus name {config.bus_name}: {e}",
            original_error=e,
        ) from e

    if reply != RequestNameReply.PRIMARY_OWNER:
        bus.disconnect()
        raise ProviderRegistrationError(
            f"Bus name {config.bus_name} is owned by another process ({reply.name})"
        )

    logger.info(
        "Search provider registered",
        bus_name=config.bus_name,
        object_path=config.object_path,
        games=len(provider.index),
    )
    return bus


async def serve(provider: GameSearchProvider, config: ProviderConfig | None = None) -> None:
    """Register the provider and answer requests until the bus goes away."""
    bus = await register(provider, config)
    await bus.wait_for_disconnect()
    logger.info("Session bus disconnected")

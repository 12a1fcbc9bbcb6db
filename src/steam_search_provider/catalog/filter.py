"""
Steam apps that are not games.

Compatibility tools and runtimes are installed like any other app
and have manifests in the library, but they should never show up
as search results.
"""

NON_GAME_APP_IDS: frozenset[str] = frozenset(
    {
        "1113280",  # Proton 4.11
        "1420170",  # Proton 5.13
        "1580130",  # Proton 6.3
        "1887720",  # Proton 7.0
        "2348590",  # Proton 8.0
        "2805730",  # Proton 9.0
        "3658110",  # Proton 10.0
        "1826330",  # Proton EasyAntiCheat Runtime
        "1493710",  # Proton Experimental
        "2180100",  # Proton Hotfix
        "1070560",  # Steam Linux Runtime 1.0 (scout)
        "1391110",  # Steam Linux Runtime 2.0 (soldier)
        "1628350",  # Steam Linux Runtime 3.0 (sniper)
        "228980",  # Steamworks Common Redistributables
    }
)


def should_filter(identifier: str) -> bool:
    """
    Check if an app should be left out of the search index.

    Args:
        identifier: Steam app ID as string

    Returns:
        bool: True for known non-game apps, False for anything else
    """
    return identifier in NON_GAME_APP_IDS

"""tagblacklist Core - Shared utilities and infrastructure.

Import specific names from submodules:
    from tagblacklist.core.cache import LRUCache
    from tagblacklist.core.config import ConfigManager
    from tagblacklist.core import constants
    from tagblacklist.core.logging import Logger
"""

from tagblacklist.core import cache, config, constants, logging

__all__ = [
    "cache",
    "config",
    "constants",
    "logging",
]

"""
tagblacklist Core: Constants and Error Types

This module provides package-wide constants, error codes and the base
exception shared by every layer.
"""
from enum import IntEnum
from typing import Dict, Tuple, TypeAlias, Union

# Version information
TAGBLACKLIST_VERSION = "1.0.0"


class ErrorCode(IntEnum):
    """Standardized error codes for tagblacklist operations."""

    SUCCESS = 0  # Operation completed successfully
    INVALID_INPUT = 1  # Bad argument, invalid configuration
    NOT_FOUND = 2  # Blacklist, item or file doesn't exist
    CONFLICT = 4  # Resource conflict
    DEPENDENCY_ERROR = 5  # External collaborator failed (item provider)
    INTERNAL_ERROR = 6  # Bug in tagblacklist


class TagBlacklistError(Exception):
    """Base error for tagblacklist."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.INTERNAL_ERROR):
        self.message = message
        self.error_code = error_code
        super().__init__(message)


# Type aliases for clarity
ItemId: TypeAlias = Union[int, str]
Tag: TypeAlias = str

# Rule text syntax
COMMENT_MARKERS: Tuple[str, ...] = ("#", "//")
CONJUNCTION_SEPARATORS: Tuple[str, ...] = (" AND ", " && ")
RATING_PREFIX = "rating:"

# Tag categories in the order they are flattened into the tag pool
TAG_CATEGORIES: Tuple[str, ...] = ("artist", "character", "copyright", "general", "metadata")

# Blacklists written to an empty store
DEFAULT_BLACKLISTS: Dict[str, str] = {
    "Safe mode": "rating:q*\nrating:e*",
    "No blacklist": "",
}

# Defaults for the item cache
DEFAULT_CACHE_MAX_ENTRIES = 1024
DEFAULT_CACHE_TTL_SECONDS = 300.0

DEFAULT_STORE_PATH = "~/.config/tagblacklist/blacklists.yaml"

"""Utility modules for shared functionality."""

from .constants import (
    DEFAULT_GITHUB_API_URL,
    DEFAULT_REPOSITORY,
    GITHUB_TOKEN_PREFIX,
    RULE_FILE_EXTENSION,
    RULES_DIRECTORY_PARTS,
    TEMP_FILE_PREFIX,
    WELL_KNOWN_TOKEN_ENV_VARS,
)
from .files import write_bytes_atomically, write_text_atomically
from .retry import retry_on_rate_limit

__all__ = [
    "DEFAULT_GITHUB_API_URL",
    "DEFAULT_REPOSITORY",
    "GITHUB_TOKEN_PREFIX",
    "RULE_FILE_EXTENSION",
    "RULES_DIRECTORY_PARTS",
    "TEMP_FILE_PREFIX",
    "WELL_KNOWN_TOKEN_ENV_VARS",
    "retry_on_rate_limit",
    "write_bytes_atomically",
    "write_text_atomically",
]

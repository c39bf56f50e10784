"""Shared constants used across the application."""

# Repository Constants
# --------------------

DEFAULT_REPOSITORY = "YOUR-ORG/global-cursor-rules"
"""Default rules repository used when none is configured."""

DEFAULT_GITHUB_API_URL = "https://api.github.com"
"""Default GitHub API URL (override for GitHub Enterprise Server)."""

RULE_FILE_EXTENSION = ".mdc"
"""Only repository files with this extension are offered for sync."""

# Local Layout Constants
# ----------------------

RULES_DIRECTORY_PARTS = (".cursor", "rules")
"""Path segments of the rules directory, relative to the project root."""

TEMP_FILE_PREFIX = ".cursor-temp-"
"""Prefix of the temporary file holding incoming content during a conflict."""

# Token Discovery Constants
# -------------------------

GITHUB_TOKEN_PREFIX = "ghp_"
"""Prefix of GitHub personal access tokens, used to spot tokens in arbitrary environment variables."""

WELL_KNOWN_TOKEN_ENV_VARS = ("GITHUB_TOKEN", "GITHUB_PERSONAL_ACCESS_TOKEN", "GH_TOKEN", "GITHUB_PAT_TOKEN")
"""Environment variables checked for a token regardless of their value's prefix.

GITHUB_PAT_TOKEN extends the usual GITHUB_TOKEN, GITHUB_PERSONAL_ACCESS_TOKEN and GH_TOKEN names.
"""

# Sync Constants
# --------------

DEFAULT_FETCH_CONCURRENCY = 8
"""Maximum number of rule files downloaded at once while building the selection list."""

NO_DESCRIPTION_PLACEHOLDER = "No description available"
"""Shown in the selection list for rule files without a description."""

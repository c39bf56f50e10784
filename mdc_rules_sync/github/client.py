"""Sets up the githubkit client, authenticated or anonymous."""

from typing import TypeAlias

from githubkit import GitHub
from githubkit.auth import TokenAuthStrategy, UnauthAuthStrategy

from mdc_rules_sync.utils.constants import DEFAULT_GITHUB_API_URL

GitHubClient: TypeAlias = GitHub[TokenAuthStrategy] | GitHub[UnauthAuthStrategy]


def get_github_pat_client(github_pat_token: str, github_api_url: str = DEFAULT_GITHUB_API_URL) -> GitHub[TokenAuthStrategy]:
    """Returns a GitHub client authenticated with a personal access token."""
    if not github_pat_token:
        raise RuntimeError("GitHub PAT authentication requires a non-empty token.")
    # Disable HTTP caching to always get fresh data
    return GitHub(auth=TokenAuthStrategy(github_pat_token), base_url=github_api_url, http_cache=False)


def get_github_client(github_pat_token: str | None, github_api_url: str = DEFAULT_GITHUB_API_URL) -> GitHubClient:
    """Returns a GitHub client, sending the token only when one is given.

    Without a token the client is unauthenticated and can only read public
    repositories.
    """
    if github_pat_token:
        return get_github_pat_client(github_pat_token, github_api_url)
    return GitHub(auth=UnauthAuthStrategy(), base_url=github_api_url, http_cache=False)

"""Contains utility functions for GitHub interactions."""

from mdc_rules_sync.configuration.exceptions import InvalidRepositoryConfigurationError


async def split_repository_in_configuration(repo: str | None) -> tuple[str, str]:
    """Splits the repository in the configuration into owner and repository."""
    if repo is None:
        raise InvalidRepositoryConfigurationError(repo)
    parts = repo.strip().strip("/").split("/")
    if len(parts) != 2 or not all(parts):
        raise InvalidRepositoryConfigurationError(repo)
    owner, repository = parts
    return owner, repository

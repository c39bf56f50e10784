"""Contains exceptions raised when reconciling application configuration."""


class InvalidRepositoryConfigurationError(ValueError):
    """Raised when the configured repository is not in the 'owner/repo' format."""

    def __init__(self, repo: str | None) -> None:
        """Initializes the exception with the offending repository value."""
        super().__init__(f"Invalid repository path: {repo}. Format should be 'owner/repo'")
        self.repo = repo

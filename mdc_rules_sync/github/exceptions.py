"""Exceptions raised by rule repository clients."""


class RuleRepositoryError(Exception):
    """Base class for errors talking to the rules repository."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RepositoryAuthenticationError(RuleRepositoryError):
    """Raised when GitHub rejects the request with 401 or 403."""

    pass


class RepositoryNotFoundError(RuleRepositoryError):
    """Raised when the repository does not exist or is not visible with the current credential."""

    pass


class RepositoryTransportError(RuleRepositoryError):
    """Raised on network failures, exhausted rate limits, and unexpected responses."""

    pass

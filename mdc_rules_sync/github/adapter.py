"""GitHub rule repository client adapter for the githubkit library."""

import base64
from functools import wraps
from typing import Any, Awaitable, Callable, Self, TypeVar

import structlog
from githubkit import Response
from githubkit.exception import PrimaryRateLimitExceeded, RequestError, RequestFailed, SecondaryRateLimitExceeded
from githubkit.versions.latest.models import FullRepository

from mdc_rules_sync.github.exceptions import (
    RepositoryAuthenticationError,
    RepositoryNotFoundError,
    RepositoryTransportError,
    RuleRepositoryError,
)
from mdc_rules_sync.synchronize.models import RemoteRuleFile
from mdc_rules_sync.utils.constants import DEFAULT_GITHUB_API_URL, RULE_FILE_EXTENSION
from mdc_rules_sync.utils.github import split_repository_in_configuration
from mdc_rules_sync.utils.retry import is_rate_limit_response, retry_on_rate_limit

from .abc import RuleRepositoryClientBase
from .client import GitHubClient, get_github_client

logger = structlog.get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Awaitable[Any]])


def handle_repository_errors(func: F) -> F:
    """Decorator translating githubkit failures into rule repository errors."""

    @wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)
        except RuleRepositoryError:
            raise
        except (PrimaryRateLimitExceeded, SecondaryRateLimitExceeded) as exc:
            raise RepositoryTransportError(f"GitHub rate limit exceeded: {exc}", status_code=exc.response.status_code) from exc
        except RequestFailed as exc:
            status_code = exc.response.status_code
            logger.error(
                "GitHub request failed",
                function=func.__name__,
                status_code=status_code,
                url=str(getattr(exc.response, "url", None)),
            )
            if status_code in (401, 403) and not is_rate_limit_response(exc):
                raise RepositoryAuthenticationError(
                    f"Authentication failed ({status_code}). Your GitHub token may be invalid or expired.", status_code=status_code
                ) from exc
            if status_code == 404:
                raise RepositoryNotFoundError(
                    "Repository not found. It may not exist, may be private and require authentication, or you may not have access to it.",
                    status_code=status_code,
                ) from exc
            raise RepositoryTransportError(f"GitHub request failed with status {status_code}: {exc}", status_code=status_code) from exc
        except RequestError as exc:
            logger.error("GitHub request error", function=func.__name__, error=str(exc))
            raise RepositoryTransportError(f"Could not reach GitHub: {exc}") from exc
        except ValueError as exc:
            # pydantic.ValidationError is a ValueError; raised when the payload does not parse.
            logger.error("Unexpected GitHub response", function=func.__name__, error=str(exc))
            raise RepositoryTransportError(f"Unexpected response from GitHub: {exc}") from exc

    return wrapper  # type: ignore


class GitHubKitAdapter(RuleRepositoryClientBase):
    """Rule repository client adapter for the githubkit library."""

    def __init__(self, client: GitHubClient, owner: str, repo_name: str) -> None:
        """Initialize the adapter with an already-initialized client."""
        self.client = client
        self.owner = owner
        self.repo_name = repo_name

    @classmethod
    async def create(
        cls,
        repo: str,
        github_pat_token: str | None = None,
        github_api_url: str = DEFAULT_GITHUB_API_URL,
    ) -> Self:
        """Create a new adapter for a repository.

        Args:
            repo: Repository in 'owner/repo' format
            github_pat_token: Personal access token; None for anonymous access
            github_api_url: GitHub API URL (defaults to https://api.github.com)

        Returns:
            Configured GitHubKitAdapter instance

        Raises:
            InvalidRepositoryConfigurationError: If repo is not in 'owner/repo' format
        """
        owner, repo_name = await split_repository_in_configuration(repo=repo)
        logger.debug(
            "Creating client for GitHub instance and repository",
            github_api_url=github_api_url,
            owner=owner,
            repo_name=repo_name,
            authenticated=bool(github_pat_token),
        )
        client = get_github_client(github_pat_token=github_pat_token, github_api_url=github_api_url)
        return cls(client, owner, repo_name)

    @handle_repository_errors
    @retry_on_rate_limit()
    async def get_repository(self) -> FullRepository:
        """Get the repository for the current client."""
        response: Response[FullRepository] = await self.client.rest.repos.async_get(owner=self.owner, repo=self.repo_name)
        return response.parsed_data

    async def verify_access(self) -> bool:
        """Validate the client's credential by fetching the repository metadata.

        Any failure, whether rejected credentials or an unreachable host,
        counts as invalid. This never raises.
        """
        logger.debug("Validating GitHub token", owner=self.owner, repo=self.repo_name)
        try:
            await self.get_repository()
        except Exception as exc:
            logger.info("Token validation failed", owner=self.owner, repo=self.repo_name, error=str(exc))
            return False
        logger.debug("Token validation successful", owner=self.owner, repo=self.repo_name)
        return True

    @handle_repository_errors
    @retry_on_rate_limit()
    async def list_rule_files(self) -> list[RemoteRuleFile]:
        """List the rule files at the root of the repository.

        This is a single unpaged request to the contents API.
        """
        logger.debug("Fetching repository contents", owner=self.owner, repo=self.repo_name)
        response = await self.client.rest.repos.async_get_content(owner=self.owner, repo=self.repo_name, path="")
        entries = response.parsed_data
        if not isinstance(entries, list):
            logger.error("Repository contents response is not a directory listing", data_type=type(entries).__name__)
            raise RepositoryTransportError("Failed to fetch repository contents: response data is not a directory listing")

        rule_files = [
            RemoteRuleFile(name=entry.name, path=entry.path, download_url=entry.download_url)
            for entry in entries
            if entry.type == "file" and entry.name.endswith(RULE_FILE_EXTENSION)
        ]
        logger.info(
            "Found rule files in the repository",
            owner=self.owner,
            repo=self.repo_name,
            count=len(rule_files),
            names=[rule_file.name for rule_file in rule_files],
        )
        return rule_files

    @handle_repository_errors
    @retry_on_rate_limit()
    async def _get_file_content(self, path: str) -> str:
        response = await self.client.rest.repos.async_get_content(owner=self.owner, repo=self.repo_name, path=path)
        data = response.parsed_data
        content = getattr(data, "content", None)
        if getattr(data, "type", None) != "file" or content is None:
            raise RepositoryTransportError(f"'{path}' is not a file")
        return base64.b64decode(content).decode("utf-8")

    async def fetch_file_content(self, path: str) -> str | None:
        """Get the text of a file in the repository, or None if it could not be fetched."""
        logger.debug("Downloading rule file", path=path)
        try:
            return await self._get_file_content(path)
        except Exception as exc:
            logger.error("Error downloading file", path=path, error=str(exc))
            return None

"""Base ABC for rule repository clients."""

from abc import ABC, abstractmethod
from typing import Any

from mdc_rules_sync.synchronize.models import RemoteRuleFile


class RuleRepositoryClientBase(ABC):
    """Base ABC for clients of a repository holding rule files."""

    @abstractmethod
    async def get_repository(self) -> Any:
        """Get the repository metadata."""
        pass

    @abstractmethod
    async def verify_access(self) -> bool:
        """Check that the repository can be read with the client's credential."""
        pass

    @abstractmethod
    async def list_rule_files(self) -> list[RemoteRuleFile]:
        """List the rule files at the root of the repository."""
        pass

    @abstractmethod
    async def fetch_file_content(self, path: str) -> str | None:
        """Get the text of a file, or None if it could not be fetched."""
        pass

"""Models for credentials and the persisted credential preference."""

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel


class TokenSource(str, Enum):
    """Enum for where a GitHub token came from."""

    NONE = "none"
    SAVED = "saved"
    ENVIRONMENT = "environment"
    MANUAL = "manual"


class TokenSelectionOption(str, Enum):
    """Enum for the ways a user can pick a GitHub token interactively."""

    FROM_ENVIRONMENT = "From GitHub Environment Variables"
    ENTER_MANUALLY = "Enter Manually"
    NO_TOKEN = "Continue without a token"


@dataclass(frozen=True)
class Credential:
    """A resolved GitHub credential.

    A credential without a token means the repository is accessed
    unauthenticated, which only works for public repositories.
    """

    token: str | None
    source: TokenSource

    @classmethod
    def anonymous(cls) -> "Credential":
        """Credential for unauthenticated access."""
        return cls(token=None, source=TokenSource.NONE)

    @property
    def is_authenticated(self) -> bool:
        """Whether requests made with this credential carry a token."""
        return bool(self.token)

    def __repr__(self) -> str:
        return f"Credential(token={'***' if self.token else None}, source={self.source.value})"


class CredentialPreference(BaseModel):
    """The persisted choice of how to obtain a GitHub token.

    ``source`` is ``None`` until the user completes a token selection. A
    source of ``TokenSource.NONE`` records that the user chose to continue
    without a token.
    """

    source: TokenSource | None = None
    token: str | None = None
    environment_variable: str | None = None

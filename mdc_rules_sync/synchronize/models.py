"""Internal data models for rule file synchronization."""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class SyncDecision(Enum):
    """Enum for the outcome of synchronizing a single rule file."""

    CREATE = "create"
    ALREADY_UP_TO_DATE = "already_up_to_date"
    OVERWRITE = "overwrite"
    KEEP_CURRENT = "keep_current"
    MANUAL_MERGE = "manual_merge"


class ConflictAction(str, Enum):
    """Enum for the choices offered when a local rule file differs from the remote one."""

    OVERWRITE = "Overwrite"
    KEEP_CURRENT = "Keep Current"
    MERGE_MANUALLY = "Merge Manually"


class RemoteRuleFile(BaseModel):
    """Snapshot of a rule file listed in the remote repository."""

    model_config = ConfigDict(frozen=True)

    name: str
    path: str
    download_url: str | None = None
    description: str | None = None
    content: str | None = None

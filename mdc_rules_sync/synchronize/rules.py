"""Contains reconciliation logic for local rule files."""

from pathlib import Path

import structlog

from mdc_rules_sync.interaction.abc import InteractionBase
from mdc_rules_sync.synchronize.exceptions import UserCancelledError
from mdc_rules_sync.synchronize.models import ConflictAction, RemoteRuleFile, SyncDecision
from mdc_rules_sync.utils.constants import RULES_DIRECTORY_PARTS, TEMP_FILE_PREFIX
from mdc_rules_sync.utils.files import write_text_atomically

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


def get_rules_directory(project_root: Path) -> Path:
    """Return the directory rule files are synced into."""
    return project_root.joinpath(*RULES_DIRECTORY_PARTS)


def ensure_rules_directory(project_root: Path) -> Path:
    """Create the rules directory if needed and return it."""
    rules_dir = get_rules_directory(project_root)
    if not rules_dir.exists():
        logger.info("Creating directory", path=str(rules_dir))
    rules_dir.mkdir(parents=True, exist_ok=True)
    return rules_dir


async def resolve_rule_file_conflict(
    rule_file: RemoteRuleFile,
    content: str,
    local_path: Path,
    project_root: Path,
    interaction: InteractionBase,
) -> SyncDecision:
    """Show the user both versions of a rule file and apply their decision.

    The incoming content is written to a temporary file next to the project so
    it can be compared with the local file. That file is removed once the
    decision has been handled, whatever it was.
    """
    temp_path = project_root / f"{TEMP_FILE_PREFIX}{rule_file.name}"
    try:
        write_text_atomically(temp_path, content)
        logger.debug("Content differs, showing diff", file=rule_file.name, temp_path=str(temp_path))
        await interaction.show_diff(local_path, temp_path, f"{rule_file.name} (Current vs New)")

        options = [action.value for action in ConflictAction]
        answer = await interaction.choose(f"What would you like to do with {rule_file.name}?", options)
        logger.info("User selected conflict action", file=rule_file.name, action=answer or "cancelled")
        if answer is None:
            raise UserCancelledError(f"No action chosen for {rule_file.name}")

        match ConflictAction(answer):
            case ConflictAction.OVERWRITE:
                write_text_atomically(local_path, content)
                interaction.show_message(f"Overwritten {rule_file.name}")
                return SyncDecision.OVERWRITE
            case ConflictAction.KEEP_CURRENT:
                interaction.show_message(f"Kept current {rule_file.name}")
                return SyncDecision.KEEP_CURRENT
            case ConflictAction.MERGE_MANUALLY:
                await interaction.open_for_edit(local_path)
                logger.info("Opened file for manual merging", path=str(local_path))
                return SyncDecision.MANUAL_MERGE
    finally:
        temp_path.unlink(missing_ok=True)
        logger.debug("Removed temp file", temp_path=str(temp_path))


async def reconcile_rule_file(
    rule_file: RemoteRuleFile,
    content: str,
    project_root: Path,
    interaction: InteractionBase,
) -> SyncDecision:
    """Bring the local copy of a rule file in line with the remote content.

    Missing files are created, identical files are left alone, and differing
    files are handed to the user to overwrite, keep, or merge by hand.

    Raises:
        UserCancelledError: If the user cancels the conflict prompt.
        OSError: If the rules directory or the file cannot be written.
    """
    rules_dir = ensure_rules_directory(project_root)
    local_path = rules_dir / rule_file.name

    if not local_path.exists():
        logger.info("Creating new file", path=str(local_path))
        write_text_atomically(local_path, content)
        interaction.show_message(f"Added {rule_file.name}")
        return SyncDecision.CREATE

    logger.debug("File already exists", path=str(local_path))
    if local_path.read_bytes() == content.encode("utf-8"):
        interaction.show_message(f"{rule_file.name} is already up to date")
        return SyncDecision.ALREADY_UP_TO_DATE

    return await resolve_rule_file_conflict(rule_file, content, local_path, project_root, interaction)

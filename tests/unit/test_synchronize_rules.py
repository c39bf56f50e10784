"""Unit tests for reconciling local rule files with remote content."""

from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from pytest import MonkeyPatch

from mdc_rules_sync.synchronize.exceptions import UserCancelledError
from mdc_rules_sync.synchronize.models import RemoteRuleFile, SyncDecision
from mdc_rules_sync.synchronize.rules import ensure_rules_directory, get_rules_directory, reconcile_rule_file

REMOTE_CONTENT = "---\ndescription: Python style\n---\nUse type hints.\n"
LOCAL_CONTENT = "---\ndescription: Python style\n---\nUse tabs.\n"


@pytest.fixture
def rule_file() -> RemoteRuleFile:
    """Remote rule file under test."""
    return RemoteRuleFile(name="python.mdc", path="python.mdc")


def write_local(project_root: Path, name: str, content: str) -> Path:
    """Write a local rule file into the project's rules directory."""
    path = ensure_rules_directory(project_root) / name
    path.write_bytes(content.encode("utf-8"))
    return path


def temp_files(project_root: Path) -> list[Path]:
    """Temporary comparison files left in the project root."""
    return list(project_root.glob(".cursor-temp-*"))


def test_get_rules_directory(tmp_path: Path) -> None:
    """Test that rules live in .cursor/rules below the project root."""
    assert get_rules_directory(tmp_path) == tmp_path / ".cursor" / "rules"


def test_ensure_rules_directory_is_idempotent(tmp_path: Path) -> None:
    """Test that the rules directory is created once and reused."""
    first = ensure_rules_directory(tmp_path)
    second = ensure_rules_directory(tmp_path)
    assert first == second
    assert first.is_dir()


@pytest.mark.asyncio
async def test_reconcile_creates_missing_file(tmp_path: Path, rule_file: RemoteRuleFile, interaction: Any) -> None:
    """Test that a missing local file is created with the exact remote bytes."""
    content = "---\ndescription: CRLF\r\n---\r\nbody without trailing newline"

    decision = await reconcile_rule_file(rule_file, content, tmp_path, interaction)

    assert decision == SyncDecision.CREATE
    assert (tmp_path / ".cursor" / "rules" / "python.mdc").read_bytes() == content.encode("utf-8")
    assert interaction.message_texts() == ["Added python.mdc"]
    assert interaction.prompts == []


@pytest.mark.asyncio
async def test_reconcile_identical_file_is_not_written(
    tmp_path: Path, rule_file: RemoteRuleFile, interaction: Any, monkeypatch: MonkeyPatch
) -> None:
    """Test that an identical local file is reported up to date without a write."""
    local_path = write_local(tmp_path, "python.mdc", REMOTE_CONTENT)
    write = MagicMock()
    monkeypatch.setattr("mdc_rules_sync.synchronize.rules.write_text_atomically", write)

    decision = await reconcile_rule_file(rule_file, REMOTE_CONTENT, tmp_path, interaction)

    assert decision == SyncDecision.ALREADY_UP_TO_DATE
    write.assert_not_called()
    assert local_path.read_text(encoding="utf-8") == REMOTE_CONTENT
    assert interaction.message_texts() == ["python.mdc is already up to date"]
    assert interaction.prompts == []


@pytest.mark.asyncio
async def test_reconcile_conflict_overwrite(tmp_path: Path, rule_file: RemoteRuleFile, interaction: Any) -> None:
    """Test that choosing Overwrite replaces the local content with the remote content."""
    local_path = write_local(tmp_path, "python.mdc", LOCAL_CONTENT)
    interaction.choices.append("Overwrite")

    decision = await reconcile_rule_file(rule_file, REMOTE_CONTENT, tmp_path, interaction)

    assert decision == SyncDecision.OVERWRITE
    assert local_path.read_bytes() == REMOTE_CONTENT.encode("utf-8")
    assert "Overwritten python.mdc" in interaction.message_texts()
    assert temp_files(tmp_path) == []


@pytest.mark.asyncio
async def test_reconcile_conflict_keep_current(tmp_path: Path, rule_file: RemoteRuleFile, interaction: Any) -> None:
    """Test that choosing Keep Current leaves the local file unchanged."""
    local_path = write_local(tmp_path, "python.mdc", LOCAL_CONTENT)
    interaction.choices.append("Keep Current")

    decision = await reconcile_rule_file(rule_file, REMOTE_CONTENT, tmp_path, interaction)

    assert decision == SyncDecision.KEEP_CURRENT
    assert local_path.read_text(encoding="utf-8") == LOCAL_CONTENT
    assert temp_files(tmp_path) == []


@pytest.mark.asyncio
async def test_reconcile_conflict_manual_merge(tmp_path: Path, rule_file: RemoteRuleFile, interaction: Any) -> None:
    """Test that choosing Merge Manually opens the local file without modifying it."""
    local_path = write_local(tmp_path, "python.mdc", LOCAL_CONTENT)
    interaction.choices.append("Merge Manually")

    decision = await reconcile_rule_file(rule_file, REMOTE_CONTENT, tmp_path, interaction)

    assert decision == SyncDecision.MANUAL_MERGE
    assert interaction.edited == [local_path]
    assert local_path.read_text(encoding="utf-8") == LOCAL_CONTENT
    assert temp_files(tmp_path) == []


@pytest.mark.asyncio
async def test_reconcile_conflict_shows_remote_content_before_deciding(
    tmp_path: Path, rule_file: RemoteRuleFile, interaction: Any
) -> None:
    """Test that the diff compares the local file with a temporary copy of the remote content."""
    local_path = write_local(tmp_path, "python.mdc", LOCAL_CONTENT)
    interaction.choices.append("Keep Current")

    await reconcile_rule_file(rule_file, REMOTE_CONTENT, tmp_path, interaction)

    assert len(interaction.diffs) == 1
    diff = interaction.diffs[0]
    assert diff["current"] == local_path
    assert diff["incoming"] == tmp_path / ".cursor-temp-python.mdc"
    assert diff["incoming_exists"] is True
    assert diff["incoming_content"] == REMOTE_CONTENT
    assert diff["title"] == "python.mdc (Current vs New)"
    assert interaction.prompts == ["What would you like to do with python.mdc?"]


@pytest.mark.asyncio
async def test_reconcile_conflict_cancelled_removes_temp_file(tmp_path: Path, rule_file: RemoteRuleFile, interaction: Any) -> None:
    """Test that cancelling the decision raises UserCancelledError and still removes the temporary file."""
    local_path = write_local(tmp_path, "python.mdc", LOCAL_CONTENT)
    interaction.choices.append(None)

    with pytest.raises(UserCancelledError):
        await reconcile_rule_file(rule_file, REMOTE_CONTENT, tmp_path, interaction)

    assert local_path.read_text(encoding="utf-8") == LOCAL_CONTENT
    assert temp_files(tmp_path) == []


@pytest.mark.asyncio
async def test_reconcile_conflict_failure_removes_temp_file(tmp_path: Path, rule_file: RemoteRuleFile, interaction: Any) -> None:
    """Test that an error while showing the diff still removes the temporary file."""
    write_local(tmp_path, "python.mdc", LOCAL_CONTENT)
    interaction.show_diff = AsyncMock(side_effect=OSError("diff viewer crashed"))

    with pytest.raises(OSError, match="diff viewer crashed"):
        await reconcile_rule_file(rule_file, REMOTE_CONTENT, tmp_path, interaction)

    assert temp_files(tmp_path) == []

"""Unit tests for the command line interface."""

from pathlib import Path
from unittest.mock import AsyncMock

from pytest import MonkeyPatch
from typer.testing import CliRunner

from mdc_rules_sync.configuration.cli import typer_app
from mdc_rules_sync.configuration.models import CredentialPreference, TokenSource
from mdc_rules_sync.configuration.preferences import YAMLPreferenceStore
from mdc_rules_sync.synchronize.results import SyncRulesResult

runner = CliRunner()


def test_clear_token(tmp_path: Path) -> None:
    """Test that clear-token forgets the saved token."""
    preferences_path = tmp_path / "preferences.yaml"
    store = YAMLPreferenceStore(preferences_path)
    store.save(CredentialPreference(source=TokenSource.SAVED, token="ghp_saved"))

    result = runner.invoke(typer_app, ["clear-token", "--preferences-path", str(preferences_path)])

    assert result.exit_code == 0
    assert "GitHub token has been cleared" in result.output
    assert store.load() == CredentialPreference()


def test_sync_invalid_repository_exits_with_error(tmp_path: Path) -> None:
    """Test that a malformed repository fails the command before any prompt."""
    result = runner.invoke(
        typer_app,
        ["sync", "--repository", "not-a-repo", "--project-root", str(tmp_path), "--preferences-path", str(tmp_path / "p.yaml")],
    )

    assert result.exit_code == 1
    assert not (tmp_path / "p.yaml").exists()


def test_sync_missing_project_root_is_rejected(tmp_path: Path) -> None:
    """Test that the project root must be an existing directory."""
    result = runner.invoke(typer_app, ["sync", "--repository", "owner/rules", "--project-root", str(tmp_path / "missing")])
    assert result.exit_code != 0


def test_sync_cancelled_exits_cleanly(tmp_path: Path, monkeypatch: MonkeyPatch) -> None:
    """Test that backing out of a prompt is not reported as a failure."""
    workflow = AsyncMock(return_value=SyncRulesResult(errors=[{"error": "Bad credentials"}], cancelled=True))
    monkeypatch.setattr("mdc_rules_sync.configuration.cli.run_sync_rules_workflow", workflow)

    result = runner.invoke(
        typer_app,
        ["sync", "--repository", "owner/rules", "--project-root", str(tmp_path), "--preferences-path", str(tmp_path / "p.yaml")],
    )

    assert result.exit_code == 0
    workflow.assert_awaited_once()

"""Unit tests for the YAML credential preference store."""

import stat
from pathlib import Path

import pytest

from mdc_rules_sync.configuration.models import CredentialPreference, TokenSource
from mdc_rules_sync.configuration.preferences import YAMLPreferenceStore


@pytest.fixture
def store(tmp_path: Path) -> YAMLPreferenceStore:
    """Preference store writing into a nested, not yet existing directory."""
    return YAMLPreferenceStore(tmp_path / "config" / "preferences.yaml")


def test_load_missing_file_returns_empty_preference(store: YAMLPreferenceStore) -> None:
    """Test that a missing file means nothing has been chosen yet."""
    assert store.load() == CredentialPreference()


@pytest.mark.parametrize(
    "preference",
    [
        pytest.param(CredentialPreference(source=TokenSource.SAVED, token="ghp_saved"), id="saved token"),
        pytest.param(CredentialPreference(source=TokenSource.ENVIRONMENT, environment_variable="GH_TOKEN"), id="environment variable"),
        pytest.param(CredentialPreference(source=TokenSource.NONE), id="no token"),
    ],
)
def test_save_then_load(store: YAMLPreferenceStore, preference: CredentialPreference) -> None:
    """Test that a saved preference is loaded back unchanged."""
    store.save(preference)
    assert store.load() == preference


def test_save_writes_readable_yaml_without_unset_fields(store: YAMLPreferenceStore) -> None:
    """Test the on-disk format of a saved environment preference."""
    store.save(CredentialPreference(source=TokenSource.ENVIRONMENT, environment_variable="GH_TOKEN"))
    text = store.path.read_text(encoding="utf-8")
    assert "source: environment" in text
    assert "environment_variable: GH_TOKEN" in text
    assert "token:" not in text


def test_save_restricts_file_to_owner(store: YAMLPreferenceStore) -> None:
    """Test that the preference file, which may hold a token, is readable only by its owner."""
    store.save(CredentialPreference(source=TokenSource.SAVED, token="ghp_saved"))
    assert stat.S_IMODE(store.path.stat().st_mode) == 0o600


def test_clear_forgets_saved_token(store: YAMLPreferenceStore) -> None:
    """Test that clearing removes the token and leaves no source chosen."""
    store.save(CredentialPreference(source=TokenSource.SAVED, token="ghp_saved"))
    store.clear()
    assert store.load() == CredentialPreference()
    assert "ghp_saved" not in store.path.read_text(encoding="utf-8")


@pytest.mark.parametrize(
    "content",
    [
        pytest.param("source: [unclosed\n", id="invalid yaml"),
        pytest.param("source: somewhere-else\n", id="unknown source"),
        pytest.param("", id="empty file"),
    ],
)
def test_load_unreadable_file_returns_empty_preference(store: YAMLPreferenceStore, content: str) -> None:
    """Test that a corrupt preference file is ignored instead of failing the sync."""
    store.path.parent.mkdir(parents=True)
    store.path.write_text(content, encoding="utf-8")
    assert store.load() == CredentialPreference()

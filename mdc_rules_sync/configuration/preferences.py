"""Persistence of the credential preference between runs."""

import os
from abc import ABC, abstractmethod
from io import StringIO
from pathlib import Path

import structlog
from pydantic import ValidationError
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from mdc_rules_sync.configuration.models import CredentialPreference
from mdc_rules_sync.utils.files import write_text_atomically

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


class PreferenceStoreBase(ABC):
    """Base ABC for credential preference stores.

    There is a single global preference slot; it is not keyed by repository.
    """

    @abstractmethod
    def load(self) -> CredentialPreference:
        """Return the stored preference, or an empty one if nothing is stored."""
        pass

    @abstractmethod
    def save(self, preference: CredentialPreference) -> None:
        """Replace the stored preference."""
        pass

    def clear(self) -> None:
        """Forget the stored preference, including any saved token."""
        self.save(CredentialPreference())


class YAMLPreferenceStore(PreferenceStoreBase):
    """Stores the credential preference in a YAML file readable only by the current user."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self._yaml = YAML(typ="safe")
        self._yaml.default_flow_style = False

    def load(self) -> CredentialPreference:
        if not self.path.exists():
            return CredentialPreference()
        try:
            with open(self.path, encoding="utf-8") as f:
                data = self._yaml.load(f) or {}
            return CredentialPreference.model_validate(data)
        except (OSError, YAMLError, ValidationError) as exc:
            logger.warning("Ignoring unreadable credential preference file", path=str(self.path), error=str(exc))
            return CredentialPreference()

    def save(self, preference: CredentialPreference) -> None:
        stream = StringIO()
        self._yaml.dump(preference.model_dump(mode="json", exclude_none=True), stream)
        write_text_atomically(self.path, stream.getvalue())
        os.chmod(self.path, 0o600)
        logger.debug("Saved credential preference", path=str(self.path), source=preference.source)

"""Fixtures for unit tests."""

from pathlib import Path
from typing import Generator, Sequence

import pytest
import structlog

from mdc_rules_sync.configuration.models import CredentialPreference
from mdc_rules_sync.configuration.preferences import PreferenceStoreBase
from mdc_rules_sync.interaction.abc import InteractionBase, MessageLevel


class ScriptedInteraction(InteractionBase):
    """Interaction answering prompts from pre-recorded answers and recording everything shown."""

    def __init__(self) -> None:
        self.choices: list[str | None] = []
        self.selections: list[list[int] | None] = []
        self.texts: list[str | None] = []
        self.prompts: list[str] = []
        self.messages: list[tuple[MessageLevel, str]] = []
        self.progress: list[tuple[int, int]] = []
        self.diffs: list[dict[str, object]] = []
        self.edited: list[Path] = []

    async def choose(self, placeholder: str, options: Sequence[str]) -> str | None:
        self.prompts.append(placeholder)
        assert self.choices, f"Unexpected prompt: {placeholder}"
        answer = self.choices.pop(0)
        if answer is None:
            return None
        # Allow tests to answer with a prefix of the option label.
        matches = [option for option in options if option.startswith(answer)]
        assert matches, f"Answer {answer!r} is not one of {list(options)}"
        return matches[0]

    async def choose_many(self, placeholder: str, options: Sequence[tuple[str, str]], leading_actions: int = 0) -> list[int] | None:
        self.prompts.append(placeholder)
        self.last_many_options = list(options)
        self.last_leading_actions = leading_actions
        assert self.selections, f"Unexpected prompt: {placeholder}"
        return self.selections.pop(0)

    async def ask_text(self, prompt: str, secret: bool = False) -> str | None:
        self.prompts.append(prompt)
        assert self.texts, f"Unexpected prompt: {prompt}"
        return self.texts.pop(0)

    def show_message(self, message: str, level: MessageLevel = MessageLevel.INFO) -> None:
        self.messages.append((level, message))

    def report_progress(self, completed: int, total: int, message: str) -> None:
        self.progress.append((completed, total))

    async def show_diff(self, current: Path, incoming: Path, title: str) -> None:
        self.diffs.append(
            {
                "current": current,
                "incoming": incoming,
                "incoming_exists": incoming.exists(),
                "incoming_content": incoming.read_text(encoding="utf-8"),
                "title": title,
            }
        )

    async def open_for_edit(self, path: Path) -> None:
        self.edited.append(path)

    def message_texts(self, level: MessageLevel | None = None) -> list[str]:
        return [text for message_level, text in self.messages if level is None or message_level == level]


class InMemoryPreferenceStore(PreferenceStoreBase):
    """Preference store keeping the preference in memory."""

    def __init__(self, preference: CredentialPreference | None = None) -> None:
        self.preference = preference or CredentialPreference()
        self.save_count = 0

    def load(self) -> CredentialPreference:
        return self.preference.model_copy()

    def save(self, preference: CredentialPreference) -> None:
        self.preference = preference.model_copy()
        self.save_count += 1


@pytest.fixture(autouse=True)
def configure_structlog_for_caplog() -> Generator[None, None, None]:
    """Configure structlog for use with caplog."""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    yield
    structlog.reset_defaults()


@pytest.fixture
def interaction() -> ScriptedInteraction:
    """Interaction with no recorded answers; tests append the answers they need."""
    return ScriptedInteraction()


@pytest.fixture
def preference_store() -> InMemoryPreferenceStore:
    """Empty in-memory preference store."""
    return InMemoryPreferenceStore()

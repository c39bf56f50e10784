"""Base ABC for interacting with the user.

Every method that waits on the user returns None when the user cancels.
"""

from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from typing import Sequence

YES = "Yes"
NO = "No"


class MessageLevel(str, Enum):
    """Enum for the severity of a message shown to the user."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class InteractionBase(ABC):
    """Base ABC for the presentation layer driving a sync."""

    @abstractmethod
    async def choose(self, placeholder: str, options: Sequence[str]) -> str | None:
        """Ask the user to pick one of options."""
        pass

    @abstractmethod
    async def choose_many(self, placeholder: str, options: Sequence[tuple[str, str]], leading_actions: int = 0) -> list[int] | None:
        """Ask the user to pick any number of (label, description) options; returns the picked indexes in order.

        The first leading_actions options are actions rather than items, so
        selecting every option leaves them out.
        """
        pass

    @abstractmethod
    async def ask_text(self, prompt: str, secret: bool = False) -> str | None:
        """Ask the user for free text, masking the input when secret is set."""
        pass

    @abstractmethod
    def show_message(self, message: str, level: MessageLevel = MessageLevel.INFO) -> None:
        """Show a message to the user."""
        pass

    @abstractmethod
    def report_progress(self, completed: int, total: int, message: str) -> None:
        """Report progress of a long-running step."""
        pass

    @abstractmethod
    async def show_diff(self, current: Path, incoming: Path, title: str) -> None:
        """Show the current file side by side with the incoming one."""
        pass

    @abstractmethod
    async def open_for_edit(self, path: Path) -> None:
        """Open a file for the user to edit."""
        pass

    async def confirm(self, placeholder: str) -> bool | None:
        """Ask a yes/no question; None if the user cancelled."""
        answer = await self.choose(placeholder, [YES, NO])
        if answer is None:
            return None
        return answer == YES

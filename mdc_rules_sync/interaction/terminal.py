"""Terminal implementation of the interaction layer using Typer."""

import difflib
from pathlib import Path
from typing import Sequence

import typer

from .abc import InteractionBase, MessageLevel

CANCEL_ANSWERS = {"", "q", "quit"}

MESSAGE_COLORS = {
    MessageLevel.INFO: None,
    MessageLevel.WARNING: typer.colors.YELLOW,
    MessageLevel.ERROR: typer.colors.RED,
}


def _prompt(text: str, hide_input: bool = False) -> str | None:
    """Prompt for a line of input; None on Ctrl-C or end of input."""
    try:
        return str(typer.prompt(text, default="", show_default=False, hide_input=hide_input)).strip()
    except typer.Abort:
        return None


def parse_selection(answer: str, option_count: int, first_selectable: int = 0) -> list[int] | None:
    """Parse answers like '1,3', '2-4' or 'all' into zero-based indexes; None if invalid.

    'all' covers the options from first_selectable onwards.
    """
    if answer.lower() == "all":
        return list(range(first_selectable, option_count)) or None
    indexes: list[int] = []
    for part in answer.replace(" ", "").split(","):
        if not part:
            continue
        start_text, _, end_text = part.partition("-")
        if not start_text.isdigit() or (end_text and not end_text.isdigit()):
            return None
        start = int(start_text)
        end = int(end_text) if end_text else start
        if start < 1 or end > option_count or start > end:
            return None
        for number in range(start, end + 1):
            if number - 1 not in indexes:
                indexes.append(number - 1)
    return indexes or None


class TerminalInteraction(InteractionBase):
    """Interacts with the user through numbered menus on the terminal."""

    async def choose(self, placeholder: str, options: Sequence[str]) -> str | None:
        typer.echo(placeholder)
        for number, option in enumerate(options, start=1):
            typer.echo(f"  {number}. {option}")
        while True:
            answer = _prompt("Select an option (q to cancel)")
            if answer is None or answer.lower() in CANCEL_ANSWERS:
                return None
            if answer.isdigit() and 1 <= int(answer) <= len(options):
                return options[int(answer) - 1]
            typer.secho(f"Please enter a number between 1 and {len(options)}.", fg=typer.colors.YELLOW)

    async def choose_many(self, placeholder: str, options: Sequence[tuple[str, str]], leading_actions: int = 0) -> list[int] | None:
        typer.echo(placeholder)
        for number, (label, description) in enumerate(options, start=1):
            typer.echo(f"  {number}. {typer.style(label, bold=True)}  {description}")
        while True:
            answer = _prompt("Select options, e.g. 1,3-4 or all (q to cancel)")
            if answer is None or answer.lower() in CANCEL_ANSWERS:
                return None
            selection = parse_selection(answer, len(options), first_selectable=leading_actions)
            if selection is not None:
                return selection
            typer.secho("Could not understand that selection.", fg=typer.colors.YELLOW)

    async def ask_text(self, prompt: str, secret: bool = False) -> str | None:
        return _prompt(prompt, hide_input=secret)

    def show_message(self, message: str, level: MessageLevel = MessageLevel.INFO) -> None:
        typer.secho(message, fg=MESSAGE_COLORS[level], err=level == MessageLevel.ERROR)

    def report_progress(self, completed: int, total: int, message: str) -> None:
        typer.echo(f"{message} [{completed}/{total}]")

    async def show_diff(self, current: Path, incoming: Path, title: str) -> None:
        typer.secho(title, bold=True)
        diff = difflib.unified_diff(
            current.read_text(encoding="utf-8", errors="replace").splitlines(keepends=True),
            incoming.read_text(encoding="utf-8", errors="replace").splitlines(keepends=True),
            fromfile=f"{current.name} (current)",
            tofile=f"{current.name} (new)",
        )
        for line in diff:
            if line.startswith("+") and not line.startswith("+++"):
                color = typer.colors.GREEN
            elif line.startswith("-") and not line.startswith("---"):
                color = typer.colors.RED
            elif line.startswith("@@"):
                color = typer.colors.CYAN
            else:
                color = None
            typer.secho(line.rstrip("\n"), fg=color)

    async def open_for_edit(self, path: Path) -> None:
        typer.edit(filename=str(path))

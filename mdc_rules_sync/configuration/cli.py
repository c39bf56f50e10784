"""Defines the Command Line Interface (CLI) using Typer."""

import asyncio
from pathlib import Path

import typer
from dotenv import load_dotenv
from typer import Option
from typing_extensions import Annotated

from mdc_rules_sync.config import settings
from mdc_rules_sync.configuration.preferences import YAMLPreferenceStore
from mdc_rules_sync.interaction.terminal import TerminalInteraction
from mdc_rules_sync.synchronize.driver import run_sync_rules_workflow
from mdc_rules_sync.utils.log import configure_logging

load_dotenv()

APP_NAME = "mdc-rules-sync"

typer_app = typer.Typer(pretty_exceptions_show_locals=False, help="Sync Cursor MDC rule files from a GitHub repository.")


def default_preferences_path() -> Path:
    """Where the credential preference is stored unless configured otherwise."""
    if settings.MDC_RULES_PREFERENCES_PATH is not None:
        return settings.MDC_RULES_PREFERENCES_PATH
    return Path(typer.get_app_dir(APP_NAME)) / "preferences.yaml"


@typer_app.callback()
def main_callback(
    debug: Annotated[bool, Option(envvar="DEBUG", help="Enable debug logging.")] = settings.DEBUG,
) -> None:
    """Sync Cursor MDC rule files from a GitHub repository."""
    configure_logging(debug=debug)


@typer_app.command(name="sync")
def sync_rules_cli(
    repository: Annotated[
        str, Option("--repository", "-r", envvar="MDC_RULES_REPOSITORY", help="Repository holding the rule files (owner/repo).")
    ] = settings.MDC_RULES_REPOSITORY,
    project_root: Annotated[
        Path,
        Option(
            "--project-root",
            "-p",
            exists=True,
            file_okay=False,
            dir_okay=True,
            resolve_path=True,
            help="Project to sync rules into; files go to .cursor/rules below it.",
        ),
    ] = Path("."),
    github_api_url: Annotated[str, Option(envvar="GITHUB_API_URL", help="GitHub API URL.")] = settings.GITHUB_API_URL,
    preferences_path: Annotated[
        Path | None, Option(envvar="MDC_RULES_PREFERENCES_PATH", help="File storing the GitHub token preference.")
    ] = None,
    fetch_concurrency: Annotated[
        int, Option(envvar="MDC_RULES_FETCH_CONCURRENCY", min=1, help="Maximum number of rule files downloaded at once.")
    ] = settings.MDC_RULES_FETCH_CONCURRENCY,
    max_token_attempts: Annotated[
        int | None,
        Option(envvar="MDC_RULES_MAX_TOKEN_ATTEMPTS", min=1, help="Maximum manually entered tokens before giving up (default: unlimited)."),
    ] = settings.MDC_RULES_MAX_TOKEN_ATTEMPTS,
) -> None:
    """Pick rule files from the repository and sync them into the project."""
    typer.echo(f"Using repository: {repository}")
    result = asyncio.run(
        run_sync_rules_workflow(
            repo=repository,
            project_root=project_root,
            interaction=TerminalInteraction(),
            preference_store=YAMLPreferenceStore(preferences_path or default_preferences_path()),
            github_api_url=github_api_url,
            fetch_concurrency=fetch_concurrency,
            max_manual_attempts=max_token_attempts,
        )
    )
    if result.aborted:
        raise typer.Exit(1)
    if result.results:
        typer.echo("")
        typer.echo("Summary:")
        for name, decision in result.decisions().items():
            typer.echo(f"  {name}: {decision.value}")
    if result.errors:
        typer.echo(f"  Errors: {len(result.errors)}")


@typer_app.command(name="clear-token")
def clear_token_cli(
    preferences_path: Annotated[
        Path | None, Option(envvar="MDC_RULES_PREFERENCES_PATH", help="File storing the GitHub token preference.")
    ] = None,
) -> None:
    """Forget the stored GitHub token and token preference."""
    YAMLPreferenceStore(preferences_path or default_preferences_path()).clear()
    typer.echo("GitHub token has been cleared")


if __name__ == "__main__":
    typer_app()

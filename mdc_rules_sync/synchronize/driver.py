"""Orchestrates the synchronization of rule files from GitHub."""

import asyncio
import time
from pathlib import Path
from typing import Awaitable, Callable, Mapping

import structlog

from mdc_rules_sync.configuration.exceptions import InvalidRepositoryConfigurationError
from mdc_rules_sync.configuration.models import Credential
from mdc_rules_sync.configuration.preferences import PreferenceStoreBase
from mdc_rules_sync.github.abc import RuleRepositoryClientBase
from mdc_rules_sync.github.adapter import GitHubKitAdapter
from mdc_rules_sync.github.exceptions import RepositoryAuthenticationError, RepositoryNotFoundError, RuleRepositoryError
from mdc_rules_sync.interaction.abc import InteractionBase, MessageLevel
from mdc_rules_sync.rules.frontmatter import extract_description
from mdc_rules_sync.synchronize.credentials import CredentialResolver
from mdc_rules_sync.synchronize.exceptions import UserCancelledError
from mdc_rules_sync.synchronize.models import RemoteRuleFile
from mdc_rules_sync.synchronize.results import RuleFileSynchronizationResult, SyncRulesResult
from mdc_rules_sync.synchronize.rules import reconcile_rule_file
from mdc_rules_sync.utils.constants import DEFAULT_FETCH_CONCURRENCY, DEFAULT_GITHUB_API_URL, NO_DESCRIPTION_PLACEHOLDER
from mdc_rules_sync.utils.github import split_repository_in_configuration

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

ClientFactory = Callable[[str | None], Awaitable[RuleRepositoryClientBase]]
"""Async callable building a repository client for a token (None for anonymous access)."""

CHANGE_TOKEN_LABEL = "Change GitHub Token"

RUN_AGAIN_MESSAGE = "GitHub token has been updated. Please run the command again to sync MDC rules."


def make_github_client_factory(repo: str, github_api_url: str = DEFAULT_GITHUB_API_URL) -> ClientFactory:
    """Return a factory creating githubkit adapters for repo."""

    async def create_client(token: str | None) -> RuleRepositoryClientBase:
        return await GitHubKitAdapter.create(repo=repo, github_pat_token=token, github_api_url=github_api_url)

    return create_client


async def fetch_rule_file_previews(
    client: RuleRepositoryClientBase,
    rule_files: list[RemoteRuleFile],
    interaction: InteractionBase,
    concurrency: int = DEFAULT_FETCH_CONCURRENCY,
) -> list[RemoteRuleFile]:
    """Download every rule file concurrently and attach its content and description.

    A file that fails to download keeps an empty description; the others are
    unaffected. The returned list keeps the order of rule_files.
    """
    semaphore = asyncio.Semaphore(max(1, concurrency))
    completed = 0

    async def fetch(rule_file: RemoteRuleFile) -> RemoteRuleFile:
        nonlocal completed
        async with semaphore:
            content = await client.fetch_file_content(rule_file.path)
        completed += 1
        interaction.report_progress(completed, len(rule_files), "Loading MDC files...")
        if content is None:
            logger.warning("Could not load rule file for preview", file=rule_file.name)
            return rule_file
        description = extract_description(content)
        logger.debug("Extracted description", file=rule_file.name, description=description or "No description found")
        return rule_file.model_copy(update={"content": content, "description": description})

    return list(await asyncio.gather(*(fetch(rule_file) for rule_file in rule_files)))


async def offer_token_change(resolver: CredentialResolver, interaction: InteractionBase, placeholder: str, reset: bool) -> None:
    """Ask whether to pick a different token and, if so, run the token selection."""
    answer = await interaction.confirm(placeholder)
    if answer is None:
        raise UserCancelledError("Token change prompt cancelled")
    if not answer:
        return
    if reset:
        resolver.reset()
    await resolver.select_and_validate()
    interaction.show_message(RUN_AGAIN_MESSAGE)


async def handle_listing_error(
    error: RuleRepositoryError,
    credential: Credential,
    resolver: CredentialResolver,
    interaction: InteractionBase,
) -> None:
    """Report a failure to list the repository and offer a way to fix the credential."""
    logger.error("Error fetching repository contents", error=str(error), status_code=error.status_code)
    interaction.show_message(f"Error fetching repository contents: {error}", MessageLevel.ERROR)

    if isinstance(error, RepositoryAuthenticationError):
        # The credential was rejected; never reuse it.
        resolver.reset()
        await offer_token_change(
            resolver, interaction, "Authentication failed. Would you like to try with a different token?", reset=False
        )
    elif isinstance(error, RepositoryNotFoundError):
        if credential.is_authenticated:
            await offer_token_change(resolver, interaction, "Do you want to reset your GitHub token?", reset=True)
        else:
            await offer_token_change(resolver, interaction, "Do you want to add a GitHub token for authentication?", reset=False)


async def select_rule_files(
    rule_files: list[RemoteRuleFile],
    credential: Credential,
    resolver: CredentialResolver,
    interaction: InteractionBase,
) -> list[RemoteRuleFile] | None:
    """Let the user pick the rule files to sync, in the order they picked them.

    Returns None when nothing should be synced, including when the user chose
    to change their token instead.
    """
    token_status = "Currently using a GitHub token" if credential.is_authenticated else "Not using a GitHub token"
    options = [(CHANGE_TOKEN_LABEL, f"{token_status}. Clear current token and choose a different one")]
    options.extend((rule_file.name, rule_file.description or NO_DESCRIPTION_PLACEHOLDER) for rule_file in rule_files)

    indexes = await interaction.choose_many("Select MDC files to sync", options, leading_actions=1)
    if not indexes:
        logger.info("No files selected, operation cancelled")
        return None

    if 0 in indexes:
        logger.info("User chose to change GitHub token")
        resolver.reset()
        await resolver.select_and_validate()
        interaction.show_message(RUN_AGAIN_MESSAGE)
        return None

    return [rule_files[index - 1] for index in indexes]


async def sync_rule_files(
    rule_files: list[RemoteRuleFile],
    client: RuleRepositoryClientBase,
    project_root: Path,
    interaction: InteractionBase,
    result: SyncRulesResult,
) -> None:
    """Reconcile each selected rule file in turn, recording outcomes and per-file failures in result."""
    for rule_file in rule_files:
        logger.info("Processing rule file", file=rule_file.name)
        content = rule_file.content
        if content is None:
            content = await client.fetch_file_content(rule_file.path)
        if content is None:
            error_message = f"Failed to download {rule_file.name}"
            logger.error(error_message, file=rule_file.name)
            interaction.show_message(error_message, MessageLevel.ERROR)
            result.errors.append({"file": rule_file.name, "error": error_message})
            continue

        try:
            decision = await reconcile_rule_file(rule_file, content, project_root, interaction)
        except OSError as exc:
            error_message = f"Failed to write {rule_file.name}: {exc}"
            logger.error("Failed to write rule file", file=rule_file.name, error=str(exc))
            interaction.show_message(error_message, MessageLevel.ERROR)
            result.errors.append({"file": rule_file.name, "error": error_message})
            continue

        logger.info("Synchronized rule file", file=rule_file.name, decision=decision.value)
        result.results.append(RuleFileSynchronizationResult(rule_file, decision))


async def run_sync_rules_workflow(
    repo: str,
    project_root: Path,
    interaction: InteractionBase,
    preference_store: PreferenceStoreBase,
    client_factory: ClientFactory | None = None,
    github_api_url: str = DEFAULT_GITHUB_API_URL,
    environ: Mapping[str, str] | None = None,
    fetch_concurrency: int = DEFAULT_FETCH_CONCURRENCY,
    max_manual_attempts: int | None = None,
) -> SyncRulesResult:
    """Run the sync workflow: resolve a token, list rule files, let the user pick, and reconcile each pick.

    Cancelling at any prompt stops the workflow quietly; files already written
    stay written.
    """
    result = SyncRulesResult()
    logger.info("Starting MDC rules sync", repo=repo, project_root=str(project_root))

    try:
        owner, repo_name = await split_repository_in_configuration(repo)
    except InvalidRepositoryConfigurationError as exc:
        logger.error("Invalid repository configuration", repo=repo)
        interaction.show_message(str(exc), MessageLevel.ERROR)
        result.aborted = True
        result.errors.append({"error": str(exc)})
        return result

    if not project_root.is_dir():
        error_message = f"Project directory not found: {project_root}"
        interaction.show_message(error_message, MessageLevel.ERROR)
        result.aborted = True
        result.errors.append({"error": error_message})
        return result

    if client_factory is None:
        client_factory = make_github_client_factory(repo, github_api_url)

    async def validate_token(token: str) -> bool:
        candidate_client = await client_factory(token)
        return await candidate_client.verify_access()

    resolver = CredentialResolver(
        owner=owner,
        repo=repo_name,
        interaction=interaction,
        preference_store=preference_store,
        token_validator=validate_token,
        environ=environ,
        max_manual_attempts=max_manual_attempts,
    )

    try:
        credential = await resolver.resolve()
        logger.info("Resolved GitHub credential", source=credential.source.value, authenticated=credential.is_authenticated)
        client = await client_factory(credential.token)

        try:
            rule_files = await client.list_rule_files()
        except RuleRepositoryError as exc:
            result.aborted = True
            result.errors.append({"error": str(exc)})
            await handle_listing_error(exc, credential, resolver, interaction)
            return result

        if not rule_files:
            interaction.show_message("No MDC files found in the repository")
            return result

        start_time = time.time()
        previews = await fetch_rule_file_previews(client, rule_files, interaction, concurrency=fetch_concurrency)
        logger.info("Loaded rule file previews", count=len(previews), duration=round(time.time() - start_time, 2))

        selected = await select_rule_files(previews, credential, resolver, interaction)
        if selected is None:
            return result

        logger.info("Selected files to sync", count=len(selected))
        await sync_rule_files(selected, client, project_root, interaction, result)
    except UserCancelledError as exc:
        logger.info("Sync cancelled by user", reason=str(exc))
        result.cancelled = True
        # A cancel during error recovery is still a cancel, not a failure.
        result.aborted = False
        return result

    interaction.show_message("MDC rules sync completed")
    return result

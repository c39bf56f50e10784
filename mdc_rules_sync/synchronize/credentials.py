"""Resolves the GitHub token used to read the rules repository.

Sources are tried in order: the saved preference (a stored token or a named
environment variable), then interactive selection. Every token is validated
against the repository before it is used or remembered.
"""

import os
from typing import Awaitable, Callable, Mapping

import structlog

from mdc_rules_sync.configuration.models import Credential, CredentialPreference, TokenSelectionOption, TokenSource
from mdc_rules_sync.configuration.preferences import PreferenceStoreBase
from mdc_rules_sync.interaction.abc import InteractionBase, MessageLevel
from mdc_rules_sync.synchronize.exceptions import UserCancelledError
from mdc_rules_sync.utils.constants import GITHUB_TOKEN_PREFIX, WELL_KNOWN_TOKEN_ENV_VARS

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

TokenValidator = Callable[[str], Awaitable[bool]]
"""Async callable returning whether a token can read the target repository."""

TOKEN_SELECTION_DESCRIPTIONS = {
    TokenSelectionOption.FROM_ENVIRONMENT: "Automatically detect tokens in environment variables",
    TokenSelectionOption.ENTER_MANUALLY: "Enter a GitHub personal access token",
    TokenSelectionOption.NO_TOKEN: "Only works with public repositories",
}


def discover_environment_tokens(environ: Mapping[str, str]) -> dict[str, str]:
    """Find candidate GitHub tokens in environment variables.

    Any variable whose value carries the personal access token prefix is a
    candidate, in enumeration order, followed by the well-known token
    variables not already found. Values are not deduplicated.
    """
    candidates = {key: value for key, value in environ.items() if value and value.startswith(GITHUB_TOKEN_PREFIX)}
    for key in WELL_KNOWN_TOKEN_ENV_VARS:
        value = environ.get(key)
        if value and key not in candidates:
            candidates[key] = value
    return candidates


class CredentialResolver:
    """Obtains a validated credential for one repository, prompting the user when needed."""

    def __init__(
        self,
        owner: str,
        repo: str,
        interaction: InteractionBase,
        preference_store: PreferenceStoreBase,
        token_validator: TokenValidator,
        environ: Mapping[str, str] | None = None,
        max_manual_attempts: int | None = None,
    ) -> None:
        """Initialize the resolver.

        Args:
            owner: Owner of the repository tokens are validated against.
            repo: Name of the repository tokens are validated against.
            interaction: Presentation layer used for prompts.
            preference_store: Where the credential preference is persisted.
            token_validator: Checks a token against the repository.
            environ: Environment to discover tokens in (defaults to os.environ).
            max_manual_attempts: Limit on manually entered tokens per selection; None for no limit.
        """
        self.owner = owner
        self.repo = repo
        self.interaction = interaction
        self.preference_store = preference_store
        self.token_validator = token_validator
        self.environ = os.environ if environ is None else environ
        self.max_manual_attempts = max_manual_attempts

    async def resolve(self) -> Credential:
        """Return a usable credential, anonymous if the user chose to go without a token.

        Raises:
            UserCancelledError: If the user cancelled at any prompt.
        """
        preference = self.preference_store.load()

        match preference.source:
            case TokenSource.SAVED if preference.token:
                logger.info("Using saved GitHub token (user preference)")
                if await self.token_validator(preference.token):
                    return Credential(token=preference.token, source=TokenSource.SAVED)
                logger.warning("Saved token is invalid, prompting for a new one")
                self.preference_store.clear()
            case TokenSource.ENVIRONMENT if preference.environment_variable and self.environ.get(preference.environment_variable):
                variable = preference.environment_variable
                token = self.environ[variable]
                logger.info("Using GitHub token from environment variable (user preference)", variable=variable)
                if await self.token_validator(token):
                    return Credential(token=token, source=TokenSource.ENVIRONMENT)
                logger.warning("Token from environment variable is invalid, prompting for a new one", variable=variable)
                self.preference_store.clear()
            case TokenSource.NONE:
                logger.info("User previously chose not to use a token")
                return Credential.anonymous()
            case _:
                logger.debug("No usable token preference", source=preference.source)

        return await self.select_and_validate()

    def reset(self) -> None:
        """Forget the stored token preference."""
        self.preference_store.clear()
        logger.info("GitHub token preference has been cleared")

    async def select_and_validate(self) -> Credential:
        """Ask the user how to authenticate and return the validated credential."""
        options = [f"{option.value} - {TOKEN_SELECTION_DESCRIPTIONS[option]}" for option in TokenSelectionOption]
        answer = await self.interaction.choose("How would you like to authenticate with GitHub?", options)
        if answer is None:
            logger.info("Token selection cancelled")
            raise UserCancelledError("Token selection cancelled")

        selection = list(TokenSelectionOption)[options.index(answer)]
        match selection:
            case TokenSelectionOption.FROM_ENVIRONMENT:
                return await self.select_from_environment()
            case TokenSelectionOption.ENTER_MANUALLY:
                return await self.enter_token_manually()
            case TokenSelectionOption.NO_TOKEN:
                logger.info("User chose not to use a token")
                return self._continue_without_token()

    async def select_from_environment(self) -> Credential:
        """Adopt the first valid token found in the environment."""
        logger.info("Searching for GitHub tokens in environment variables")
        candidates = discover_environment_tokens(self.environ)

        if not candidates:
            logger.info("No GitHub tokens found in environment variables")
            return await self._offer_manual_entry("No GitHub tokens found in environment variables. Would you like to enter one manually?")

        logger.info("Found potential GitHub tokens in environment variables", count=len(candidates), variables=list(candidates))
        for variable, token in candidates.items():
            logger.debug("Testing token from environment variable", variable=variable)
            if await self.token_validator(token):
                logger.info("Token from environment variable is valid", variable=variable)
                self.preference_store.save(CredentialPreference(source=TokenSource.ENVIRONMENT, environment_variable=variable))
                return Credential(token=token, source=TokenSource.ENVIRONMENT)
            logger.info("Token from environment variable is invalid", variable=variable)

        logger.info("No valid GitHub tokens found in environment variables")
        return await self._offer_manual_entry("No valid GitHub tokens found in environment variables. Would you like to enter one manually?")

    async def enter_token_manually(self) -> Credential:
        """Prompt for a token until a valid one is entered or the user gives up."""
        attempts = 0
        while True:
            token = await self.interaction.ask_text("Enter your GitHub personal access token", secret=True)
            if not token:
                logger.info("Token entry cancelled")
                raise UserCancelledError("Token entry cancelled")

            attempts += 1
            logger.debug("Testing manually entered token", attempt=attempts)
            if await self.token_validator(token):
                logger.info("Manually entered token is valid")
                return await self._offer_to_save(token)

            logger.info("Manually entered token is invalid", attempt=attempts)
            if self.max_manual_attempts is not None and attempts >= self.max_manual_attempts:
                self.interaction.show_message(f"Token is invalid. Giving up after {attempts} attempts.", MessageLevel.ERROR)
                raise UserCancelledError("Too many invalid tokens entered")
            try_again = await self.interaction.confirm("Token is invalid. Would you like to try again?")
            if not try_again:
                logger.info("User chose not to try again")
                raise UserCancelledError("Token entry abandoned")

    async def _offer_to_save(self, token: str) -> Credential:
        save_token = await self.interaction.confirm("Save token for future use?")
        if save_token is None:
            raise UserCancelledError("Token save prompt cancelled")
        if save_token:
            self.preference_store.save(CredentialPreference(source=TokenSource.SAVED, token=token))
            logger.info("GitHub token saved for future use")
            return Credential(token=token, source=TokenSource.SAVED)
        return Credential(token=token, source=TokenSource.MANUAL)

    async def _offer_manual_entry(self, placeholder: str) -> Credential:
        try_manually = await self.interaction.confirm(placeholder)
        if try_manually is None:
            raise UserCancelledError("Manual token entry prompt cancelled")
        if try_manually:
            return await self.enter_token_manually()
        logger.info("User chose not to enter a token manually")
        return self._continue_without_token()

    def _continue_without_token(self) -> Credential:
        self.preference_store.save(CredentialPreference(source=TokenSource.NONE))
        return Credential.anonymous()
